"""Pydantic schemas for product API payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field

from storefront.schemas.ids import MAX_RECORD_ID


class ProductCreate(BaseModel):
    """Payload to create a product."""

    name: str = Field(min_length=1, max_length=255)
    price: float = Field(ge=0)
    stock: int = Field(default=0, ge=0)
    description: str | None = None
    image_url: str | None = Field(default=None, max_length=1024)
    category_id: int | None = Field(default=None, ge=1, le=MAX_RECORD_ID)


class ProductUpdate(BaseModel):
    """Payload to update mutable product fields."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    price: float | None = Field(default=None, ge=0)
    stock: int | None = Field(default=None, ge=0)
    description: str | None = None
    image_url: str | None = Field(default=None, max_length=1024)
    category_id: int | None = Field(default=None, ge=1, le=MAX_RECORD_ID)


class Product(BaseModel):
    """Product response payload."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None = None
    price: float
    stock: int
    image_url: str | None = None
    category_id: int | None = None
    created_at: datetime
