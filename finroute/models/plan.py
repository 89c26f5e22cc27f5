"""Plan, goal and plan-generation model definitions."""
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from pydantic import Field, field_validator, model_validator

from finroute.models.achievement import Achievement
from finroute.models.base import CamelModel


class GoalInput(CamelModel):
    """
    A goal as submitted with a plan request.

    `id` is the client's grouping token from the form; stored goals get a
    fresh server id.
    """

    id: Optional[str] = None
    name: str = Field(min_length=1)
    description: Optional[str] = None
    target_amount: float = Field(ge=1)
    current_amount: float = Field(ge=0)
    target_date: str = Field(min_length=1)

    @field_validator("id", mode="before")
    @classmethod
    def id_as_string(cls, v: Any) -> Optional[str]:
        return None if v is None else str(v)

    @field_validator("description")
    @classmethod
    def empty_description_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


class PlanRequest(CamelModel):
    """Structured plan-generation input."""

    net_worth: float = Field(ge=0)
    savings_rate: float = Field(ge=0, le=100)
    total_debt: float = Field(ge=0)
    monthly_net_salary: float = Field(ge=1)
    goals: list[GoalInput] = Field(min_length=1)
    currency: Optional[str] = None
    is_first_plan: bool = False
    title: Optional[str] = None


class Goal(CamelModel):
    """Goal embedded in a stored plan."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    name: str
    description: Optional[str] = None
    target_amount: float
    current_amount: float
    target_date: str


class GoalWithPlan(Goal):
    """Goal tagged with the plan it came from (dashboard rollup)."""

    plan_id: str
    plan_created_at: datetime


class KeyMetrics(CamelModel):
    """Derived financial summary attached to each plan."""

    net_worth: float
    savings_rate: float
    debt_to_income: int
    total_debt: float
    monthly_net_salary: float


class Plan(CamelModel):
    """Full plan model with database fields."""

    id: str = Field(alias="_id", serialization_alias="id")
    title: str
    plan: str
    goals: list[Goal] = []
    key_metrics: KeyMetrics
    currency: str
    saved: bool = False
    created_at: datetime


class SavedUpdate(CamelModel):
    """Toggle for a plan's saved flag."""

    saved: bool


class GoalSelector(CamelModel):
    """
    Addresses goals inside a plan.

    `goal_id` is preferred. `goal_name` matches every goal with that name.
    Without `plan_id` the most recent plan is used.
    """

    goal_id: Optional[str] = None
    goal_name: Optional[str] = None
    plan_id: Optional[str] = None

    @model_validator(mode="after")
    def require_goal_reference(self):
        if not self.goal_id and not self.goal_name:
            raise ValueError("Either goalId or goalName is required")
        return self


class GoalAmountUpdate(GoalSelector):
    """New saved amount for a goal."""

    current_amount: float


class ValidationResult(CamelModel):
    """Outcome of validating a plan request. Never raised as an exception."""

    success: bool
    data: Optional[PlanRequest] = None
    errors: Optional[dict[str, Any]] = None


class GenerationStatus(str, Enum):
    """Terminal states of a plan generation request."""

    SUCCESS = "success"
    INVALID = "invalid"
    NOT_CONFIGURED = "not_configured"
    PROFILE_NOT_FOUND = "profile_not_found"
    AI_FAILED = "ai_failed"
    ERROR = "error"


class PlanGenerationResult(CamelModel):
    """What the generate endpoint returns for every outcome."""

    status: GenerationStatus
    message: str
    errors: Optional[dict[str, Any]] = None
    plan: Optional[str] = None
    plan_id: Optional[str] = None
    goals: Optional[list[Goal]] = None
    key_metrics: Optional[KeyMetrics] = None
    currency: Optional[str] = None
    new_achievement: Optional[Achievement] = None
