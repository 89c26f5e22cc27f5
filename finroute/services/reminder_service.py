"""Reminder service - persists reminders; nothing here fires them."""
from datetime import datetime

from bson import ObjectId
from bson.errors import InvalidId

from finroute.models.reminder import Reminder, ReminderCreate


class ReminderService:
    """Service for handling reminder operations."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.reminders = db["reminders"]

    def _doc_to_reminder(self, doc: dict) -> Reminder:
        """Convert database document to Reminder model."""
        return Reminder(
            _id=str(doc["_id"]),
            title=doc["title"],
            goal_name=doc.get("goal_name"),
            cadence=doc["cadence"],
            next_run_at=doc["next_run_at"],
            created_at=doc["created_at"],
            deleted=doc.get("deleted", False),
            deleted_at=doc.get("deleted_at"),
        )

    async def create_reminder(self, user_id: str, reminder_create: ReminderCreate) -> Reminder:
        """
        Create a reminder.

        Args:
            user_id: User ID who owns the reminder
            reminder_create: Reminder data

        Returns:
            Created reminder
        """
        reminder_doc = {
            "user_id": user_id,
            "title": reminder_create.title,
            "goal_name": reminder_create.goal_name,
            "cadence": reminder_create.cadence.value,
            "next_run_at": reminder_create.next_run_at,
            "created_at": datetime.utcnow(),
            "deleted": False,
        }

        result = await self.reminders.insert_one(reminder_doc)
        reminder_doc["_id"] = result.inserted_id

        return self._doc_to_reminder(reminder_doc)

    async def list_reminders(self, user_id: str) -> list[Reminder]:
        """List a user's non-deleted reminders, soonest first."""
        cursor = self.reminders.find(
            {"user_id": user_id, "deleted": {"$ne": True}},
            sort=[("next_run_at", 1)],
        )
        docs = await cursor.to_list(length=None)
        return [self._doc_to_reminder(doc) for doc in docs]

    async def delete_reminder(self, user_id: str, reminder_id: str) -> dict:
        """
        Soft delete a reminder. The document stays in the collection.

        Returns:
            Dictionary with deleted_count

        Raises:
            ValueError: If reminder not found
        """
        try:
            object_id = ObjectId(reminder_id)
        except (InvalidId, TypeError):
            raise ValueError("Reminder not found")

        result = await self.reminders.update_one(
            {"_id": object_id, "user_id": user_id, "deleted": {"$ne": True}},
            {
                "$set": {
                    "deleted": True,
                    "deleted_at": datetime.utcnow(),
                }
            },
        )

        if result.matched_count == 0:
            raise ValueError("Reminder not found")

        return {"deleted_count": result.modified_count}
