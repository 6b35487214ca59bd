"""Pydantic schemas for category API payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


class CategoryCreate(BaseModel):
    """Payload to create a category."""

    name: str = Field(min_length=1, max_length=255)


class CategoryUpdate(BaseModel):
    """Payload to rename a category."""

    name: str = Field(min_length=1, max_length=255)


class Category(BaseModel):
    """Category response payload."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    created_at: datetime
