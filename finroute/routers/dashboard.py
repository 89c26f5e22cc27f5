"""Dashboard router."""
from fastapi import APIRouter, Depends

from finroute.database import get_database
from finroute.models.dashboard import DashboardState
from finroute.routers.auth import get_current_user_id
from finroute.services.dashboard_service import DashboardService


router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardState)
async def get_dashboard(
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Dashboard snapshot: latest plan, goals across all plans, counts,
    reminders and achievements.
    """
    return await DashboardService(db).snapshot(user_id)
