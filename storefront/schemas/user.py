"""Pydantic schemas for user API payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserCreate(BaseModel):
    """Payload to register a user."""

    name: str = Field(min_length=3, max_length=50)
    email: str = Field(pattern=EMAIL_PATTERN, max_length=255)
    followers: int = Field(default=0, ge=0)
    following: int = Field(default=0, ge=0)
    is_active: bool = True


class UserUpdate(BaseModel):
    """Payload to update mutable user fields."""

    name: str | None = Field(default=None, min_length=3, max_length=50)
    email: str | None = Field(default=None, pattern=EMAIL_PATTERN, max_length=255)
    followers: int | None = Field(default=None, ge=0)
    following: int | None = Field(default=None, ge=0)
    is_active: bool | None = None


class User(BaseModel):
    """User response payload."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    followers: int
    following: int
    is_active: bool
    created_at: datetime
    updated_at: datetime
