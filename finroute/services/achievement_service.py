"""Achievement service - awards and lists achievements."""
from datetime import datetime

import structlog
from pymongo import ReturnDocument

from finroute.models.achievement import Achievement, AchievementCode
from finroute.models.plan import Goal

logger = structlog.get_logger(__name__)

FIRST_PLANNER = {"code": AchievementCode.FIRST_PLANNER.value, "title": "First Planner", "icon": "Award"}
PLANNER = {"code": AchievementCode.PLANNER.value, "title": "Planner", "icon": "CalendarCheck"}
PLAN_CODES = [FIRST_PLANNER["code"], PLANNER["code"]]


class AchievementService:
    """Service for handling achievement operations."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.achievements = db["achievements"]
        self.plans = db["plans"]

    def _doc_to_achievement(self, doc: dict) -> Achievement:
        """Convert database document to Achievement model."""
        return Achievement(
            _id=str(doc["_id"]),
            code=doc["code"],
            title=doc["title"],
            icon=doc.get("icon", "Award"),
            plan_id=doc.get("plan_id"),
            goal_id=doc.get("goal_id"),
            created_at=doc["created_at"],
        )

    async def _award_once(self, key: dict, fields: dict) -> Achievement:
        # Upsert on the natural key so retries never duplicate an award
        doc = await self.achievements.find_one_and_update(
            key,
            {"$setOnInsert": {**fields, "created_at": datetime.utcnow()}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return self._doc_to_achievement(doc)

    async def award_for_plan(self, user_id: str, plan_id: str, first: bool) -> Achievement:
        """
        Award the plan-generation achievement for a plan.

        Args:
            user_id: User ID
            plan_id: Plan the achievement belongs to
            first: Whether this was the user's first plan

        Returns:
            The stored achievement (existing one if already awarded)
        """
        tier = FIRST_PLANNER if first else PLANNER
        return await self._award_once(
            {"user_id": user_id, "plan_id": plan_id, "goal_id": None},
            tier,
        )

    async def award_goal_achieved(self, user_id: str, plan_id: str, goal: Goal) -> Achievement:
        """Award the one-per-goal achievement for reaching a goal's target."""
        return await self._award_once(
            {
                "user_id": user_id,
                "plan_id": plan_id,
                "goal_id": goal.id,
                "code": AchievementCode.GOAL_ACHIEVED.value,
            },
            {"title": f"Goal Achieved: {goal.name}", "icon": "Trophy"},
        )

    async def list_achievements(self, user_id: str) -> list[Achievement]:
        """List a user's achievements, newest first."""
        cursor = self.achievements.find(
            {"user_id": user_id},
            sort=[("created_at", -1)],
        )
        docs = await cursor.to_list(length=None)
        return [self._doc_to_achievement(doc) for doc in docs]

    async def reconcile(self, user_id: str) -> int:
        """
        Re-derive missing plan achievements from the plan history.

        The oldest plan earns First Planner and every later plan earns
        Planner. Plans that already have one are left alone.

        Returns:
            Number of achievements created
        """
        plan_cursor = self.plans.find(
            {"user_id": user_id},
            projection={"_id": 1},
            sort=[("created_at", 1)],
        )
        plan_docs = await plan_cursor.to_list(length=None)

        awarded_cursor = self.achievements.find(
            {"user_id": user_id, "code": {"$in": PLAN_CODES}},
            projection={"plan_id": 1},
        )
        awarded = {doc.get("plan_id") for doc in await awarded_cursor.to_list(length=None)}

        created = 0
        for index, plan_doc in enumerate(plan_docs):
            plan_id = str(plan_doc["_id"])
            if plan_id in awarded:
                continue
            await self.award_for_plan(user_id, plan_id, first=index == 0)
            created += 1

        if created:
            logger.info("achievements_reconciled", user_id=user_id, created=created)
        return created
