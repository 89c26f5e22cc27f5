"""Dashboard read-model."""
from datetime import datetime
from typing import Optional

from finroute.models.achievement import Achievement
from finroute.models.base import CamelModel
from finroute.models.plan import Goal, GoalWithPlan, KeyMetrics
from finroute.models.reminder import Reminder


class DashboardState(CamelModel):
    """Snapshot of everything the dashboard shows for one user."""

    plan: Optional[str] = None
    plan_id: Optional[str] = None
    plan_title: Optional[str] = None
    plan_created_at: Optional[datetime] = None
    goals: list[Goal] = []
    key_metrics: Optional[KeyMetrics] = None
    currency: str
    all_goals: list[GoalWithPlan] = []
    total_goals: int = 0
    plans_count: int = 0
    reminders: list[Reminder] = []
    achievements: list[Achievement] = []
