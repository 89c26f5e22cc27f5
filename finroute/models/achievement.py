"""Achievement model definitions."""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from finroute.models.base import CamelModel


class AchievementCode(str, Enum):
    """Kinds of achievement the app awards."""

    FIRST_PLANNER = "first_planner"
    PLANNER = "planner"
    GOAL_ACHIEVED = "goal_achieved"


class Achievement(CamelModel):
    """Append-only milestone record."""

    id: str = Field(alias="_id", serialization_alias="id")
    code: AchievementCode
    title: str
    icon: str
    plan_id: Optional[str] = None
    goal_id: Optional[str] = None
    created_at: datetime
