"""Error taxonomy, status mapping, and retry eligibility."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from fastapi import status


class ErrorKind(str, Enum):
    VALIDATION = "validation_error"
    DATABASE = "database_error"
    NOT_FOUND = "not_found"
    CONFLICT = "resource_conflict"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    INTERNAL = "internal_server_error"


ERROR_STATUS_CODES: Mapping[ErrorKind, int] = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.DATABASE: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(kind: ErrorKind) -> int:
    """Return the fixed HTTP status code for an error kind."""
    return ERROR_STATUS_CODES[ErrorKind(kind)]


def kind_for_status(status_code: int) -> ErrorKind:
    """Fold an arbitrary HTTP status into the closed error taxonomy."""
    if status_code == status.HTTP_404_NOT_FOUND:
        return ErrorKind.NOT_FOUND
    if status_code == status.HTTP_401_UNAUTHORIZED:
        return ErrorKind.UNAUTHORIZED
    if status_code == status.HTTP_403_FORBIDDEN:
        return ErrorKind.FORBIDDEN
    if status_code == status.HTTP_409_CONFLICT:
        return ErrorKind.CONFLICT
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        return ErrorKind.INTERNAL
    return ErrorKind.VALIDATION


def parse_kind(code: str | None) -> ErrorKind | None:
    """Return the error kind named by ``code``, or None for unknown codes."""
    if code is None:
        return None
    try:
        return ErrorKind(code)
    except ValueError:
        return None


def is_retryable_status(status_code: int, *, default: bool = False) -> bool:
    """Decide whether a failure with this status is worth retrying.

    Status 0 (no response reached the client) and server errors are
    retryable; not-found and forbidden never are. Everything else falls
    back to ``default``.
    """
    if status_code == 0 or status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        return True
    if status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_403_FORBIDDEN):
        return False
    return default


NON_RETRYABLE_KINDS = frozenset({ErrorKind.CONFLICT})


def is_retryable_kind(kind: ErrorKind, *, default: bool = False) -> bool:
    """Like :func:`is_retryable_status`, but a conflict never clears by retrying."""
    if ErrorKind(kind) in NON_RETRYABLE_KINDS:
        return False
    return is_retryable_status(status_for(kind), default=default)


class APIError(Exception):
    """Explicit application error carrying its own kind."""

    def __init__(
        self,
        *,
        kind: ErrorKind,
        message: str,
        errors: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = ErrorKind(kind)
        self.message = message
        self.errors = dict(errors) if errors else None

    @property
    def status_code(self) -> int:
        return status_for(self.kind)
