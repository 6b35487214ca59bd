"""Pydantic schemas for review API payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from storefront.schemas.ids import MAX_RECORD_ID


class ReviewCreate(BaseModel):
    """Payload to review a product."""

    user_id: int = Field(ge=1, le=MAX_RECORD_ID)
    rating: int = Field(ge=1, le=5)
    comment: str | None = None


class Review(BaseModel):
    """Review response payload."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int
    user_id: int
    rating: int
    comment: str | None = None
    created_at: datetime
