"""Plan service - plan generation, plan history and goal mutation."""
import math
from datetime import datetime
from typing import Any, Optional

import structlog
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument

from finroute.config import settings
from finroute.models.plan import (
    GenerationStatus,
    Goal,
    KeyMetrics,
    Plan,
    PlanGenerationResult,
)
from finroute.services.achievement_service import AchievementService
from finroute.services.plan_generator import PlanGenerator, PlanPrompt, PromptMetrics
from finroute.services.profile_service import ProfileService
from finroute.services.validation import validate_plan_input
from finroute.utils.currency import currency_symbol

logger = structlog.get_logger(__name__)

NOT_CONFIGURED_MESSAGE = "The AI planner is not configured. Please try again later."
INVALID_MESSAGE = "Invalid form data."
PROFILE_NOT_FOUND_MESSAGE = "Profile not found. Please sign up again."
AI_FAILED_MESSAGE = (
    "The AI could not generate a plan based on the data provided. "
    "Please try again with more details."
)
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred on the server. Please try again later."
DEFAULT_PLAN_TITLE = "Financial Plan"


class GoalAmountError(ValueError):
    """A goal amount update breaks 0 <= current <= target."""


def compute_debt_to_income(total_debt: float, monthly_net_salary: float) -> int:
    """
    Debt-to-income as a whole percentage; 0 when there is no salary.

    Halves round up, matching how the figure has always been shown.

    Examples:
        >>> compute_debt_to_income(1000, 2000)
        50
        >>> compute_debt_to_income(1000, 0)
        0
    """
    if monthly_net_salary <= 0:
        return 0
    return int(total_debt / monthly_net_salary * 100 + 0.5)


class PlanService:
    """Service for handling plan operations."""

    def __init__(self, db, generator: Optional[PlanGenerator] = None):
        """
        Initialize service with database connection.

        Args:
            db: Database connection
            generator: AI plan generator, None when not configured
        """
        self.db = db
        self.plans = db["plans"]
        self.generator = generator

    def _doc_to_plan(self, doc: dict) -> Plan:
        """Convert database document to Plan model."""
        goals = doc.get("goals") or []
        title = doc.get("title") or (goals[0].get("name") if goals else None) or "Plan"
        return Plan(
            _id=str(doc["_id"]),
            title=title,
            plan=doc.get("plan", ""),
            goals=[Goal(**goal) for goal in goals],
            key_metrics=KeyMetrics(**doc["key_metrics"]),
            currency=doc.get("currency", settings.default_currency),
            saved=doc.get("saved", False),
            created_at=doc["created_at"],
        )

    async def generate_plan(self, user_id: str, raw_input: Any) -> PlanGenerationResult:
        """
        Validate input, ask the AI for a plan, store it and award an achievement.

        Never raises: every outcome, including unexpected errors, comes back
        as a PlanGenerationResult with a status. Nothing is written unless
        the AI returned plan text.

        Args:
            user_id: Authenticated user ID
            raw_input: Structured request dict (see `parse_plan_form`)

        Returns:
            PlanGenerationResult
        """
        try:
            return await self._generate_plan(user_id, raw_input)
        except Exception:
            logger.exception("plan_generation_error", user_id=user_id)
            return PlanGenerationResult(
                status=GenerationStatus.ERROR,
                message=UNEXPECTED_ERROR_MESSAGE,
            )

    async def _generate_plan(self, user_id: str, raw_input: Any) -> PlanGenerationResult:
        if self.generator is None:
            logger.warning("plan_generator_not_configured", user_id=user_id)
            return PlanGenerationResult(
                status=GenerationStatus.NOT_CONFIGURED,
                message=NOT_CONFIGURED_MESSAGE,
            )

        validation = validate_plan_input(raw_input, default_currency=None)
        if not validation.success:
            logger.info("plan_input_invalid", user_id=user_id, errors=validation.errors)
            return PlanGenerationResult(
                status=GenerationStatus.INVALID,
                message=INVALID_MESSAGE,
                errors=validation.errors,
            )
        request = validation.data

        profile = await ProfileService(self.db).get_profile(user_id)
        if profile is None:
            return PlanGenerationResult(
                status=GenerationStatus.PROFILE_NOT_FOUND,
                message=PROFILE_NOT_FOUND_MESSAGE,
            )
        currency = request.currency or profile.currency or settings.default_currency

        debt_to_income = compute_debt_to_income(request.total_debt, request.monthly_net_salary)
        key_metrics = KeyMetrics(
            net_worth=request.net_worth,
            savings_rate=request.savings_rate,
            debt_to_income=debt_to_income,
            total_debt=request.total_debt,
            monthly_net_salary=request.monthly_net_salary,
        )
        goals = [
            Goal(
                name=goal.name,
                description=goal.description,
                target_amount=goal.target_amount,
                current_amount=goal.current_amount,
                target_date=goal.target_date,
            )
            for goal in request.goals
        ]

        prompt = PlanPrompt(
            age=profile.age,
            currency=currency_symbol(currency),
            goals=goals,
            key_metrics=PromptMetrics(
                net_worth=request.net_worth,
                savings_rate=request.savings_rate,
                debt_to_income=debt_to_income,
            ),
        )

        try:
            output = await self.generator.generate(prompt)
        except Exception:
            logger.exception("plan_generator_failed", user_id=user_id)
            output = None

        if output is None or not output.plan.strip():
            return PlanGenerationResult(
                status=GenerationStatus.AI_FAILED,
                message=AI_FAILED_MESSAGE,
            )

        prior_plan = await self.plans.find_one({"user_id": user_id}, projection={"_id": 1})
        is_first_plan = prior_plan is None
        if request.is_first_plan != is_first_plan:
            logger.warning(
                "first_plan_flag_mismatch",
                user_id=user_id,
                client_flag=request.is_first_plan,
                server_flag=is_first_plan,
            )

        plan_doc = {
            "user_id": user_id,
            "title": request.title or goals[0].name or DEFAULT_PLAN_TITLE,
            "plan": output.plan,
            "goals": [goal.model_dump() for goal in goals],
            "key_metrics": key_metrics.model_dump(),
            "currency": currency,
            "saved": False,
            "created_at": datetime.utcnow(),
        }
        result = await self.plans.insert_one(plan_doc)
        plan_id = str(result.inserted_id)

        # Not atomic with the insert; AchievementService.reconcile repairs gaps
        achievement = await AchievementService(self.db).award_for_plan(
            user_id, plan_id, first=is_first_plan
        )

        logger.info(
            "plan_generated",
            user_id=user_id,
            plan_id=plan_id,
            goals=len(goals),
            achievement=achievement.code.value,
        )

        return PlanGenerationResult(
            status=GenerationStatus.SUCCESS,
            message="success",
            plan=output.plan,
            plan_id=plan_id,
            goals=goals,
            key_metrics=key_metrics,
            currency=currency,
            new_achievement=achievement,
        )

    async def list_plans(self, user_id: str) -> list[Plan]:
        """List a user's plans, newest first."""
        cursor = self.plans.find({"user_id": user_id}, sort=[("created_at", -1)])
        docs = await cursor.to_list(length=None)
        return [self._doc_to_plan(doc) for doc in docs]

    async def get_latest_plan(self, user_id: str) -> Optional[Plan]:
        """Most recent plan, or None when the user has none."""
        doc = await self.plans.find_one({"user_id": user_id}, sort=[("created_at", -1)])
        return self._doc_to_plan(doc) if doc else None

    async def get_plan(self, user_id: str, plan_id: str) -> Plan:
        """
        Get a single plan.

        Raises:
            ValueError: If plan not found
        """
        return self._doc_to_plan(await self._find_plan_doc(user_id, plan_id))

    async def set_saved(self, user_id: str, plan_id: str, saved: bool) -> Plan:
        """
        Set a plan's saved flag.

        Raises:
            ValueError: If plan not found
        """
        doc = await self._find_plan_doc(user_id, plan_id)
        updated = await self.plans.find_one_and_update(
            {"_id": doc["_id"], "user_id": user_id},
            {"$set": {"saved": saved}},
            return_document=ReturnDocument.AFTER,
        )
        return self._doc_to_plan(updated)

    async def _find_plan_doc(self, user_id: str, plan_id: str) -> dict:
        try:
            object_id = ObjectId(plan_id)
        except (InvalidId, TypeError):
            raise ValueError("Plan not found")

        doc = await self.plans.find_one({"_id": object_id, "user_id": user_id})
        if not doc:
            raise ValueError("Plan not found")
        return doc

    async def _resolve_plan_doc(self, user_id: str, plan_id: Optional[str]) -> dict:
        """Explicit plan when given, otherwise the most recent one."""
        if plan_id:
            return await self._find_plan_doc(user_id, plan_id)

        doc = await self.plans.find_one({"user_id": user_id}, sort=[("created_at", -1)])
        if not doc:
            raise ValueError("Plan not found")
        return doc

    @staticmethod
    def _matches(goal: dict, goal_id: Optional[str], goal_name: Optional[str]) -> bool:
        if goal_id:
            return goal.get("id") == goal_id
        return goal.get("name") == goal_name

    async def update_goal_amount(
        self,
        user_id: str,
        current_amount: float,
        goal_id: Optional[str] = None,
        goal_name: Optional[str] = None,
        plan_id: Optional[str] = None,
    ) -> Plan:
        """
        Set the saved amount of a goal.

        Rewrites the plan's whole goals array (last write wins). Reaching
        the target awards a Goal Achieved achievement once per goal.

        Args:
            user_id: User ID
            current_amount: New saved amount
            goal_id: Goal to update (preferred)
            goal_name: Fallback address; updates every goal with this name
            plan_id: Plan holding the goal, defaults to the most recent plan

        Returns:
            Updated plan

        Raises:
            ValueError: If plan or goal not found
            GoalAmountError: If the amount is negative or above the target
        """
        doc = await self._resolve_plan_doc(user_id, plan_id)
        goals = doc.get("goals") or []

        matched = [goal for goal in goals if self._matches(goal, goal_id, goal_name)]
        if not matched:
            raise ValueError("Goal not found")

        for goal in matched:
            if not math.isfinite(current_amount) or current_amount < 0:
                raise GoalAmountError("Current amount must be a positive number.")
            if current_amount > goal["target_amount"]:
                raise GoalAmountError("Current amount cannot be greater than target amount.")

        updated_goals = []
        reached = []
        for goal in goals:
            if self._matches(goal, goal_id, goal_name):
                if goal["current_amount"] < goal["target_amount"] <= current_amount:
                    reached.append(goal)
                goal = {**goal, "current_amount": current_amount}
            updated_goals.append(goal)

        await self.plans.update_one(
            {"_id": doc["_id"], "user_id": user_id},
            {"$set": {"goals": updated_goals}},
        )

        achievements = AchievementService(self.db)
        for goal in reached:
            await achievements.award_goal_achieved(user_id, str(doc["_id"]), Goal(**goal))

        return self._doc_to_plan({**doc, "goals": updated_goals})

    async def delete_goal(
        self,
        user_id: str,
        goal_id: Optional[str] = None,
        goal_name: Optional[str] = None,
        plan_id: Optional[str] = None,
    ) -> Plan:
        """
        Remove goals from a plan.

        Addressing by name removes every goal with that name.

        Raises:
            ValueError: If plan or goal not found
        """
        doc = await self._resolve_plan_doc(user_id, plan_id)
        goals = doc.get("goals") or []

        remaining = [goal for goal in goals if not self._matches(goal, goal_id, goal_name)]
        if len(remaining) == len(goals):
            raise ValueError("Goal not found")

        await self.plans.update_one(
            {"_id": doc["_id"], "user_id": user_id},
            {"$set": {"goals": remaining}},
        )

        return self._doc_to_plan({**doc, "goals": remaining})
