"""Plan request validation - raw input to PlanRequest or a per-field error map."""
import math
from typing import Any, Optional

from pydantic import ValidationError

from finroute.models.plan import PlanRequest, ValidationResult

FIELD_MESSAGES = {
    "name": "Goal name is required.",
    "targetAmount": "Target amount must be greater than 0.",
    "currentAmount": "Current amount must be a positive number.",
    "targetDate": "Target date is required.",
    "netWorth": "Net worth must be a positive number.",
    "savingsRate": "Savings rate must be between 0 and 100.",
    "totalDebt": "Total debt must be a positive number.",
    "monthlyNetSalary": "Monthly salary must be a positive number.",
    "goals": "Please add at least one financial goal.",
}

CURRENT_ABOVE_TARGET = "Current amount cannot be greater than target amount."


def _to_number(value: Any) -> Optional[float]:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _raw_goals(raw: Any) -> list:
    if not isinstance(raw, dict):
        return []
    goals = raw.get("goals")
    return goals if isinstance(goals, list) else []


def validate_plan_input(raw: Any, default_currency: Optional[str] = "USD") -> ValidationResult:
    """
    Validate a structured plan request.

    Errors are collected as `{"fieldErrors": {path: [messages]},
    "formErrors": [messages]}` where `path` is the dotted camelCase field
    path (for example `goals.0.currentAmount`). Never raises.

    Args:
        raw: Decoded request body (see `parse_plan_form` for form input)
        default_currency: Currency used when the request names none; pass
            None to leave the currency unset

    Returns:
        ValidationResult with `success` set and either `data` or `errors`
    """
    field_errors: dict[str, list[str]] = {}
    form_errors: list[str] = []
    data = None

    try:
        data = PlanRequest.model_validate(raw)
    except ValidationError as e:
        for err in e.errors():
            loc = err["loc"]
            if not loc:
                form_errors.append(err["msg"])
                continue
            field = loc[-1]
            message = FIELD_MESSAGES.get(field, err["msg"]) if isinstance(field, str) else err["msg"]
            path = ".".join(str(part) for part in loc)
            messages = field_errors.setdefault(path, [])
            if message not in messages:
                messages.append(message)

    # Cross-field rule, reported on currentAmount
    for index, goal in enumerate(_raw_goals(raw)):
        if not isinstance(goal, dict):
            continue
        current = _to_number(goal.get("currentAmount", goal.get("current_amount")))
        target = _to_number(goal.get("targetAmount", goal.get("target_amount")))
        if current is not None and target is not None and current > target:
            field_errors.setdefault(f"goals.{index}.currentAmount", []).append(
                CURRENT_ABOVE_TARGET
            )

    if field_errors or form_errors:
        return ValidationResult(
            success=False,
            errors={"fieldErrors": field_errors, "formErrors": form_errors},
        )

    currency = (data.currency or "").strip().upper() or default_currency
    return ValidationResult(success=True, data=data.model_copy(update={"currency": currency}))
