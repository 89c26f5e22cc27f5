"""Reminder model definitions."""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from finroute.models.base import CamelModel


class ReminderCadence(str, Enum):
    """How often a reminder is meant to recur."""

    MONTHLY = "monthly"
    ONCE = "once"


class ReminderCreate(CamelModel):
    """Reminder creation model."""

    title: str = Field(min_length=1)
    goal_name: Optional[str] = None
    cadence: ReminderCadence = ReminderCadence.MONTHLY
    next_run_at: datetime


class Reminder(CamelModel):
    """Stored reminder. Nothing in the app fires these."""

    id: str = Field(alias="_id", serialization_alias="id")
    title: str
    goal_name: Optional[str] = None
    cadence: ReminderCadence
    next_run_at: datetime
    created_at: datetime
    deleted: bool = False
    deleted_at: Optional[datetime] = None
