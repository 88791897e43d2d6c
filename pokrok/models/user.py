"""User model definitions."""
from datetime import datetime

from pydantic import EmailStr, Field

from pokrok.models.base import CamelModel


class UserBase(CamelModel):
    """Base user fields."""

    email: EmailStr
    name: str


class UserCreate(UserBase):
    """User creation model with password."""

    password: str = Field(min_length=8)


class User(UserBase):
    """User model without password (for API responses)."""

    id: str = Field(alias="_id", serialization_alias="id")
    created_at: datetime
    updated_at: datetime


class UserInDB(User):
    """User model with hashed password (for database storage)."""

    hashed_password: str
