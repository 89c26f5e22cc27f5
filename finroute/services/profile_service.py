"""Profile service - reads and writes the per-user profile singleton."""
from datetime import datetime
from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument

from finroute.models.user import ProfileUpdate, UserProfile


def _object_id(user_id: str) -> Optional[ObjectId]:
    try:
        return ObjectId(user_id)
    except (InvalidId, TypeError):
        return None


class ProfileService:
    """Service for the user profile document."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.users = db["users"]

    def _doc_to_profile(self, doc: dict) -> UserProfile:
        """Convert database document to UserProfile model."""
        return UserProfile(
            _id=str(doc["_id"]),
            email=doc["email"],
            age=doc.get("age"),
            user_type=doc.get("user_type", "user"),
            net_worth=doc.get("net_worth"),
            savings_rate=doc.get("savings_rate"),
            total_debt=doc.get("total_debt"),
            monthly_net_salary=doc.get("monthly_net_salary"),
            currency=doc.get("currency"),
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )

    async def get_profile(self, user_id: str) -> Optional[UserProfile]:
        """
        Load a user's profile.

        Returns:
            The profile, or None when the user has none
        """
        object_id = _object_id(user_id)
        if object_id is None:
            return None

        doc = await self.users.find_one({"_id": object_id})
        if not doc:
            return None

        return self._doc_to_profile(doc)

    async def save_profile(self, user_id: str, update: ProfileUpdate) -> UserProfile:
        """
        Save the financial fields of a user's profile.

        Raises:
            ValueError: If the profile does not exist
        """
        object_id = _object_id(user_id)
        if object_id is None:
            raise ValueError("Profile not found")

        update_doc = {
            "net_worth": update.net_worth,
            "savings_rate": update.savings_rate,
            "total_debt": update.total_debt,
            "monthly_net_salary": update.monthly_net_salary,
            "updated_at": datetime.utcnow(),
        }
        if update.currency:
            update_doc["currency"] = update.currency.upper()

        doc = await self.users.find_one_and_update(
            {"_id": object_id},
            {"$set": update_doc},
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            raise ValueError("Profile not found")

        return self._doc_to_profile(doc)
