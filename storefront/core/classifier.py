"""Map arbitrary raised faults onto the closed error taxonomy."""

from __future__ import annotations

from collections.abc import Iterable
from collections.abc import Mapping
from dataclasses import dataclass
import logging
import traceback
from typing import Any

from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.core.config import get_settings
from storefront.core.errors import APIError
from storefront.core.errors import ErrorKind
from storefront.core.errors import kind_for_status
from storefront.db.faults import PersistenceFault
from storefront.db.faults import RecordNotFound
from storefront.db.faults import UniqueViolation

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE = "An unexpected error occurred"
VALIDATION_MESSAGE = "Invalid data provided"
DATABASE_MESSAGE = "Database operation failed"

_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}
MALFORMED_BODY_TYPE = "json_invalid"


@dataclass(frozen=True)
class ClassifiedError:
    """Outcome of classifying one failed request."""

    kind: ErrorKind
    message: str
    errors: Mapping[str, list[str]] | None = None
    details: str | None = None

    @property
    def code(self) -> str:
        return self.kind.value


def _format_location(location: Iterable[Any] | Any) -> str:
    if not isinstance(location, (tuple, list)):
        return str(location)

    filtered = [str(part) for part in location if part not in _LOCATION_PREFIXES]
    if filtered:
        return ".".join(filtered)

    if not location:
        return "request"

    return str(location[0])


def validation_issues(fault: BaseException) -> dict[str, list[str]] | None:
    """Return field-level issues for validation faults, None for anything else."""
    if not isinstance(fault, (RequestValidationError, ValidationError)):
        return None

    issues: dict[str, list[str]] = {}
    for issue in fault.errors():
        if issue.get("type") == MALFORMED_BODY_TYPE:
            # loc carries the byte offset of the decode failure, not a field
            field = "body"
        else:
            field = _format_location(issue.get("loc", ()))
        issues.setdefault(field, []).append(str(issue.get("msg", "Invalid value")))
    return issues


def _debug_details(fault: BaseException) -> str:
    formatted = "".join(traceback.format_exception(type(fault), fault, fault.__traceback__))
    return formatted or str(fault)


def _classify(
    fault: BaseException,
    kind: ErrorKind | None,
    message: str | None,
) -> tuple[ErrorKind, str, dict[str, list[str]] | None]:
    issues = validation_issues(fault)
    if issues is not None:
        return ErrorKind.VALIDATION, message or VALIDATION_MESSAGE, issues

    if isinstance(fault, RecordNotFound):
        return ErrorKind.NOT_FOUND, f"{fault.resource or 'Resource'} not found", None

    if isinstance(fault, UniqueViolation):
        field = fault.field or "field"
        return ErrorKind.CONFLICT, f"Resource with this {field} already exists", None

    if isinstance(fault, PersistenceFault):
        return ErrorKind.DATABASE, message or DATABASE_MESSAGE, None

    if isinstance(fault, APIError):
        return fault.kind, fault.message, fault.errors

    if isinstance(fault, StarletteHTTPException):
        detail = fault.detail if isinstance(fault.detail, str) and fault.detail else None
        return kind_for_status(fault.status_code), message or detail or "Request failed", None

    return ErrorKind(kind or ErrorKind.INTERNAL), message or DEFAULT_MESSAGE, None


def classify_error(
    fault: BaseException,
    kind: ErrorKind | None = None,
    message: str | None = None,
    *,
    include_details: bool | None = None,
) -> ClassifiedError:
    """Pick the error kind, message, and detail for a raised fault.

    Validation faults always win, then persistence faults, then explicit
    application errors; anything else takes the ``kind`` hint (default
    ``internal_server_error``). Never raises: a failure while classifying
    degrades to a generic internal error.
    """
    try:
        resolved_kind, resolved_message, errors = _classify(fault, kind, message)
        if include_details is None:
            include_details = get_settings().is_development
        details = _debug_details(fault) if include_details else None
        return ClassifiedError(
            kind=resolved_kind,
            message=resolved_message,
            errors=errors,
            details=details,
        )
    except Exception:
        logger.exception("Error classification failed")
        return ClassifiedError(kind=ErrorKind.INTERNAL, message=DEFAULT_MESSAGE)
