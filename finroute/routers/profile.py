"""Profile router - read and save the financial profile."""
from fastapi import APIRouter, Depends, HTTPException, status

from finroute.database import get_database
from finroute.models.user import ProfileUpdate, UserProfile
from finroute.routers.auth import get_current_user_id
from finroute.services.profile_service import ProfileService


router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=UserProfile)
async def get_profile(
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """Get the current user's profile. 404 if it does not exist."""
    profile = await ProfileService(db).get_profile(user_id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return profile


@router.put("", response_model=UserProfile)
async def save_profile(
    update: ProfileUpdate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """Save net worth, savings rate, debt, salary and currency."""
    service = ProfileService(db)
    try:
        return await service.save_profile(user_id, update)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
