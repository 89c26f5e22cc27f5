"""Parsing of flattened plan form submissions."""
import re
from typing import Any, Iterable, Mapping

GOAL_FIELDS = frozenset(
    {"id", "name", "description", "targetAmount", "currentAmount", "targetDate"}
)

# goal-<id>-<field>; the id may itself contain hyphens
GOAL_KEY_PATTERN = re.compile(r"^goal-(?P<goal_id>.+)-(?P<field>[A-Za-z]+)$")


def _items(fields):
    return fields.items() if hasattr(fields, "items") else fields


def parse_plan_form(fields: Mapping[str, Any] | Iterable[tuple[str, Any]]) -> dict:
    """
    Turn flat form fields into a structured plan request dict.

    Keys shaped like `goal-<id>-<field>` are grouped by `<id>` into the
    `goals` list (in first-seen order); every other key is kept as a
    scalar field. Unknown goal fields are dropped.

    Args:
        fields: Form fields as a mapping or (key, value) pairs

    Returns:
        Dict with scalar fields plus a `goals` list

    Example:
        >>> parse_plan_form({"netWorth": "10", "goal-1-name": "Car"})
        {'netWorth': '10', 'goals': [{'id': '1', 'name': 'Car'}]}
    """
    raw: dict[str, Any] = {}
    goals: dict[str, dict[str, Any]] = {}

    for key, value in _items(fields):
        if key.startswith("goal-"):
            match = GOAL_KEY_PATTERN.match(key)
            if not match or match.group("field") not in GOAL_FIELDS:
                continue
            goal_id = match.group("goal_id")
            goal = goals.setdefault(goal_id, {"id": goal_id})
            goal[match.group("field")] = value
        else:
            raw[key] = value

    raw["goals"] = list(goals.values())
    return raw
