"""Authentication service - business logic for signup and login."""
from datetime import datetime

from finroute.models.user import UserProfile
from finroute.services.profile_service import ProfileService
from finroute.utils.auth import hash_password, verify_password


class AuthService:
    """Service for handling user authentication."""

    def __init__(self, db):
        """Initialize service with database connection."""
        self.db = db
        self.users = db["users"]

    async def register_user(self, email: str, password: str, age: int) -> UserProfile:
        """
        Register a new user and create their profile document.

        Args:
            email: User email address
            password: Plain text password
            age: User's age

        Returns:
            The new profile (without password)

        Raises:
            ValueError: If email is already registered
        """
        existing = await self.users.find_one({"email": email})
        if existing:
            raise ValueError("Email already registered")

        now = datetime.utcnow()
        user_doc = {
            "email": email,
            "hashed_password": hash_password(password),
            "age": age,
            "user_type": "user",
            "created_at": now,
            "updated_at": now,
        }

        result = await self.users.insert_one(user_doc)

        return UserProfile(
            _id=str(result.inserted_id),
            email=email,
            age=age,
            user_type="user",
            created_at=now,
            updated_at=now,
        )

    async def login(self, email: str, password: str) -> str:
        """
        Check credentials and return the user ID.

        Raises:
            ValueError: If credentials are invalid
        """
        user_doc = await self.users.find_one({"email": email})
        if not user_doc:
            raise ValueError("Invalid email or password")

        if not verify_password(password, user_doc["hashed_password"]):
            raise ValueError("Invalid email or password")

        return str(user_doc["_id"])

    async def get_user_by_id(self, user_id: str) -> UserProfile:
        """
        Get user profile by ID.

        Raises:
            ValueError: If user not found
        """
        profile = await ProfileService(self.db).get_profile(user_id)
        if profile is None:
            raise ValueError("User not found")
        return profile
