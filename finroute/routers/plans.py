"""Plan router - plan generation, history and goal updates."""
from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse

from finroute.database import get_database
from finroute.models.plan import (
    GenerationStatus,
    GoalAmountUpdate,
    GoalSelector,
    Plan,
    PlanGenerationResult,
    SavedUpdate,
)
from finroute.routers.auth import get_current_user_id
from finroute.services.plan_generator import get_plan_generator
from finroute.services.plan_service import GoalAmountError, PlanService
from finroute.utils.forms import parse_plan_form


router = APIRouter(prefix="/plans", tags=["plans"])

GENERATION_STATUS_CODES = {
    GenerationStatus.SUCCESS: status.HTTP_201_CREATED,
    GenerationStatus.INVALID: status.HTTP_422_UNPROCESSABLE_ENTITY,
    GenerationStatus.NOT_CONFIGURED: status.HTTP_503_SERVICE_UNAVAILABLE,
    GenerationStatus.PROFILE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    GenerationStatus.AI_FAILED: status.HTTP_502_BAD_GATEWAY,
    GenerationStatus.ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


async def read_plan_input(request: Request):
    """
    Decode a plan request body.

    JSON bodies are used as-is, and undecodable ones become None so they
    fail validation; form bodies have their flattened
    `goal-<id>-<field>` keys grouped into a goals list.
    """
    if request.headers.get("content-type", "").startswith("application/json"):
        try:
            return await request.json()
        except ValueError:
            return None
    form = await request.form()
    return parse_plan_form(form)


@router.post("/generate", response_model=PlanGenerationResult)
async def generate_plan(
    user_id: str = Depends(get_current_user_id),
    raw_input=Depends(read_plan_input),
    db=Depends(get_database),
    generator=Depends(get_plan_generator),
):
    """
    Generate, store and return a new AI financial plan.

    - Requires authentication
    - Accepts form fields or JSON
    - The body is always a PlanGenerationResult; the status code reflects
      its `status`
    """
    service = PlanService(db, generator=generator)
    result = await service.generate_plan(user_id, raw_input)
    return JSONResponse(
        status_code=GENERATION_STATUS_CODES[result.status],
        content=result.model_dump(mode="json", by_alias=True),
    )


@router.get("", response_model=list[Plan])
async def list_plans(
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """List the current user's plans, newest first."""
    return await PlanService(db).list_plans(user_id)


@router.patch("/goals", response_model=Plan)
async def update_goal(
    update: GoalAmountUpdate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Update a goal's saved amount.

    - Defaults to the most recent plan when planId is omitted
    - 400 if the amount is negative or above the target
    - 404 if plan or goal not found
    """
    service = PlanService(db)
    try:
        return await service.update_goal_amount(
            user_id=user_id,
            current_amount=update.current_amount,
            goal_id=update.goal_id,
            goal_name=update.goal_name,
            plan_id=update.plan_id,
        )
    except GoalAmountError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.delete("/goals", response_model=Plan)
async def delete_goal(
    selector: GoalSelector,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Delete a goal from a plan.

    - Addressing by goalName removes every goal with that name
    - Returns 404 if plan or goal not found
    """
    service = PlanService(db)
    try:
        return await service.delete_goal(
            user_id=user_id,
            goal_id=selector.goal_id,
            goal_name=selector.goal_name,
            plan_id=selector.plan_id,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/{plan_id}", response_model=Plan)
async def get_plan(
    plan_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """Get a single plan. Returns 404 if not found."""
    try:
        return await PlanService(db).get_plan(user_id, plan_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.patch("/{plan_id}/saved", response_model=Plan)
async def set_plan_saved(
    plan_id: str,
    update: SavedUpdate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """Mark a plan as saved or unsaved."""
    try:
        return await PlanService(db).set_saved(user_id, plan_id, update.saved)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
