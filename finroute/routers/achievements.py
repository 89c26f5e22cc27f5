"""Achievement router."""
from fastapi import APIRouter, Depends

from finroute.database import get_database
from finroute.models.achievement import Achievement
from finroute.routers.auth import get_current_user_id
from finroute.services.achievement_service import AchievementService


router = APIRouter(prefix="/achievements", tags=["achievements"])


@router.get("", response_model=list[Achievement])
async def list_achievements(
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """List achievements, newest first."""
    return await AchievementService(db).list_achievements(user_id)


@router.post("/reconcile")
async def reconcile_achievements(
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """Award plan achievements missing from the plan history."""
    created = await AchievementService(db).reconcile(user_id)
    return {"created_count": created}
