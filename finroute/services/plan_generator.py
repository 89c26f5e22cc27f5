"""AI plan generation backed by Google Gemini."""
import threading
from typing import Optional, Protocol

import google.generativeai as genai
import structlog

from finroute.config import settings
from finroute.models.base import CamelModel
from finroute.models.plan import Goal

logger = structlog.get_logger(__name__)


class PromptMetrics(CamelModel):
    """Metrics the advisor prompt mentions."""

    net_worth: float
    savings_rate: float
    debt_to_income: int


class PlanPrompt(CamelModel):
    """Everything sent to the AI provider for one plan."""

    age: Optional[int] = None
    currency: str
    goals: list[Goal]
    key_metrics: PromptMetrics


class PlanOutput(CamelModel):
    """AI provider response."""

    plan: str = ""


class PlanGenerator(Protocol):
    """Anything that turns a PlanPrompt into plan text."""

    async def generate(self, prompt: PlanPrompt) -> PlanOutput:
        ...


def _format_amount(symbol: str, amount: float) -> str:
    return f"{symbol}{amount:,.0f}"


def describe_goals(goals: list[Goal], symbol: str) -> str:
    """
    Render goals as a bullet list for the prompt.

    Example:
        >>> goal = Goal(id="g1", name="Car", target_amount=20000,
        ...             current_amount=5000, target_date="2025-01-01")
        >>> describe_goals([goal], "$")
        '- Car: $5,000 saved of $20,000 by 2025-01-01'
    """
    lines = []
    for goal in goals:
        line = (
            f"- {goal.name}: {_format_amount(symbol, goal.current_amount)} saved of "
            f"{_format_amount(symbol, goal.target_amount)} by {goal.target_date}"
        )
        if goal.description:
            line += f" ({goal.description})"
        lines.append(line)
    return "\n".join(lines)


def build_prompt(prompt: PlanPrompt) -> str:
    """Build the advisor prompt text sent to the model."""
    age = prompt.age if prompt.age is not None else "unknown"
    metrics = prompt.key_metrics

    return f"""You are an expert financial advisor.

Based on the user's financial goals and key metrics, generate a personalized financial plan with recommendations for budgeting, saving, and investing.

User's Current Age: {age}
Currency: {prompt.currency}
User's Goals:
{describe_goals(prompt.goals, prompt.currency)}

Key Metrics:
- Net Worth: {_format_amount(prompt.currency, metrics.net_worth)}
- Savings Rate: {metrics.savings_rate:g}%
- Debt-to-Income Ratio: {metrics.debt_to_income}%

Provide a comprehensive, actionable financial plan based on this information. Be mindful of the user's age when providing recommendations, especially for long-term goals like retirement. Express all amounts in {prompt.currency}."""


class GeminiPlanGenerator:
    """Plan generator calling the Gemini API."""

    def __init__(self, api_key: str, model_name: str):
        genai.configure(api_key=api_key)
        self._model = genai.GenerativeModel(
            model_name=model_name,
            generation_config={
                "temperature": 0.7,
                "max_output_tokens": 2048,
            },
        )

    async def generate(self, prompt: PlanPrompt) -> PlanOutput:
        """
        Generate plan text. Provider errors propagate to the caller.

        Blocked or empty candidates yield an empty plan.
        """
        response = await self._model.generate_content_async(build_prompt(prompt))
        try:
            text = response.text
        except ValueError:
            # .text raises when the response has no usable parts
            logger.warning("gemini_empty_response", model=self._model.model_name)
            text = ""
        return PlanOutput(plan=(text or "").strip())


_generator: Optional[GeminiPlanGenerator] = None
_generator_lock = threading.Lock()


def get_plan_generator() -> Optional[PlanGenerator]:
    """
    Dependency returning the process-wide generator.

    Built lazily on first use; None when no Gemini API key is configured.
    """
    global _generator

    if not settings.gemini_api_key:
        return None

    if _generator is None:
        with _generator_lock:
            if _generator is None:
                _generator = GeminiPlanGenerator(
                    api_key=settings.gemini_api_key,
                    model_name=settings.gemini_model_name,
                )
                logger.info("gemini_generator_initialized", model=settings.gemini_model_name)

    return _generator
