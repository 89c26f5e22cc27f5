"""Reminder router - API endpoints for reminders."""
from fastapi import APIRouter, Depends, HTTPException, status

from finroute.database import get_database
from finroute.models.reminder import Reminder, ReminderCreate
from finroute.routers.auth import get_current_user_id
from finroute.services.reminder_service import ReminderService


router = APIRouter(prefix="/reminders", tags=["reminders"])


@router.post("", response_model=Reminder, status_code=status.HTTP_201_CREATED)
async def create_reminder(
    reminder: ReminderCreate,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Create a reminder.

    - Requires authentication
    - Stored only; nothing sends it at nextRunAt
    """
    service = ReminderService(db)
    return await service.create_reminder(user_id=user_id, reminder_create=reminder)


@router.get("", response_model=list[Reminder])
async def list_reminders(
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """List non-deleted reminders ordered by next run time."""
    service = ReminderService(db)
    return await service.list_reminders(user_id=user_id)


@router.delete("/{reminder_id}")
async def delete_reminder(
    reminder_id: str,
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Soft delete a reminder.

    - Marks reminder as deleted, doesn't remove from database
    - Returns 404 if reminder not found
    """
    service = ReminderService(db)
    try:
        return await service.delete_reminder(user_id=user_id, reminder_id=reminder_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
