"""Dashboard service - folds a user's stored state into one snapshot."""
import asyncio
from typing import Awaitable, TypeVar

import structlog

from finroute.config import settings
from finroute.models.dashboard import DashboardState
from finroute.models.plan import GoalWithPlan
from finroute.services.achievement_service import AchievementService
from finroute.services.plan_service import PlanService
from finroute.services.reminder_service import ReminderService

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class DashboardService:
    """Builds the dashboard read-model."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.plan_service = PlanService(db)
        self.reminder_service = ReminderService(db)
        self.achievement_service = AchievementService(db)

    async def _or_empty(self, read: Awaitable[list[T]], source: str, user_id: str) -> list[T]:
        """Supplementary reads degrade to an empty list instead of failing."""
        try:
            return await read
        except Exception:
            logger.exception("dashboard_read_degraded", source=source, user_id=user_id)
            return []

    async def snapshot(self, user_id: str) -> DashboardState:
        """
        Read plans, reminders and achievements concurrently and fold them.

        With no plans the state is empty (zero counts, no headline plan,
        default currency). Otherwise the latest plan provides the headline
        view and every plan's goals are flattened into `all_goals`, each
        tagged with its plan id and creation time.

        Args:
            user_id: User ID

        Returns:
            DashboardState
        """
        latest, plans, reminders, achievements = await asyncio.gather(
            self.plan_service.get_latest_plan(user_id),
            self.plan_service.list_plans(user_id),
            self._or_empty(self.reminder_service.list_reminders(user_id), "reminders", user_id),
            self._or_empty(
                self.achievement_service.list_achievements(user_id), "achievements", user_id
            ),
        )

        if latest is None:
            return DashboardState(
                currency=settings.default_currency,
                reminders=reminders,
                achievements=achievements,
            )

        all_goals = [
            GoalWithPlan(
                **goal.model_dump(),
                plan_id=plan.id,
                plan_created_at=plan.created_at,
            )
            for plan in plans
            for goal in plan.goals
        ]

        return DashboardState(
            plan=latest.plan,
            plan_id=latest.id,
            plan_title=latest.title,
            plan_created_at=latest.created_at,
            goals=latest.goals,
            key_metrics=latest.key_metrics,
            currency=latest.currency,
            all_goals=all_goals,
            total_goals=len(all_goals),
            plans_count=len(plans),
            reminders=reminders,
            achievements=achievements,
        )
