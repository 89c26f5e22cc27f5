"""User profile and session model definitions."""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from finroute.models.base import CamelModel


class UserCreate(BaseModel):
    """Signup payload."""

    email: EmailStr
    password: str = Field(min_length=6)
    age: int = Field(ge=18, le=100)


class LoginRequest(BaseModel):
    """Login request model."""

    email: str
    password: str


class SessionData(BaseModel):
    """Decoded session token payload."""

    uid: str


class SessionResponse(BaseModel):
    """Who the current session belongs to (None when signed out)."""

    uid: Optional[str] = None


class ProfileUpdate(CamelModel):
    """Financial profile fields saved from the profile form."""

    net_worth: float = Field(ge=0)
    savings_rate: float = Field(ge=0, le=100)
    total_debt: float = Field(ge=0)
    monthly_net_salary: float = Field(ge=1)
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)


class UserProfile(CamelModel):
    """User profile singleton (never exposes the password hash)."""

    id: str = Field(alias="_id", serialization_alias="id")
    email: str
    age: Optional[int] = None
    user_type: str = "user"
    net_worth: Optional[float] = None
    savings_rate: Optional[float] = None
    total_debt: Optional[float] = None
    monthly_net_salary: Optional[float] = None
    currency: Optional[str] = None
    created_at: datetime
    updated_at: datetime
