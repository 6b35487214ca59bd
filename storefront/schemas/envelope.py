"""Uniform success/error response envelope shared by every API route."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from datetime import timezone
from typing import Any
from typing import Generic
from typing import TypeVar

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import model_validator

from storefront.core.config import get_settings
from storefront.core.errors import ErrorKind

T = TypeVar("T")


def utc_timestamp() -> str:
    """Return the current UTC time as ISO-8601 with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class Pagination(BaseModel):
    """Page window for list responses."""

    model_config = ConfigDict(populate_by_name=True)

    page: int
    limit: int
    total: int
    total_pages: int = Field(alias="totalPages")


class Meta(BaseModel):
    """Response metadata stamped on every envelope."""

    timestamp: str
    locale: str | None = None
    count: int | None = None
    pagination: Pagination | None = None


class ErrorBody(BaseModel):
    """Error section of a failed envelope."""

    code: str
    errors: dict[str, Any] | None = None
    details: str | None = None


class Envelope(BaseModel, Generic[T]):
    """Top-level API response envelope."""

    success: bool
    data: T | None = None
    message: str | None = None
    meta: Meta
    error: ErrorBody | None = None

    @model_validator(mode="after")
    def _check_outcome(self) -> "Envelope[T]":
        if self.success and self.error is not None:
            raise ValueError("successful envelopes must not carry an error")
        if not self.success:
            if self.error is None:
                raise ValueError("failed envelopes must carry an error")
            if self.data is not None:
                raise ValueError("failed envelopes must not carry data")
        return self

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the wire shape, omitting absent optional fields."""
        payload = self.model_dump(mode="json", by_alias=True)
        if payload["message"] is None:
            del payload["message"]
        if payload["error"] is None:
            del payload["error"]
        else:
            payload["error"] = _without_none(payload["error"])
        payload["meta"] = _without_none(payload["meta"])
        return payload


def _without_none(values: Mapping[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


def build_meta(overrides: Mapping[str, Any] | None = None) -> Meta:
    fields: dict[str, Any] = {
        "timestamp": utc_timestamp(),
        "locale": get_settings().default_locale,
    }
    if overrides:
        fields.update(overrides)
    return Meta.model_validate(fields)


def build_success(
    data: Any,
    message: str | None = None,
    meta: Mapping[str, Any] | None = None,
) -> Envelope[Any]:
    """Build a successful envelope around ``data``."""
    return Envelope[Any](success=True, data=data, message=message, meta=build_meta(meta))


def build_error(
    kind: ErrorKind,
    message: str,
    errors: Mapping[str, Any] | None = None,
    details: str | None = None,
    *,
    include_details: bool | None = None,
) -> Envelope[Any]:
    """Build a failed envelope for an error kind.

    Field-level ``errors`` are only attached to validation errors, and
    ``details`` only when running in development mode (or when
    ``include_details`` forces it).
    """
    kind = ErrorKind(kind)
    if include_details is None:
        include_details = get_settings().is_development

    error = ErrorBody(
        code=kind.value,
        errors=dict(errors) if errors and kind is ErrorKind.VALIDATION else None,
        details=details if include_details and details else None,
    )
    return Envelope[Any](success=False, data=None, message=message, meta=build_meta(), error=error)
