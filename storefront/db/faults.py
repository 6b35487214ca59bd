"""Typed persistence faults raised by the repository layer.

Repositories never leak raw SQLAlchemy exceptions. Every database failure is
one of three variants:

* ``RecordNotFound`` - the addressed row does not exist;
* ``UniqueViolation`` - a uniqueness constraint rejected the write;
* ``PersistenceFault`` - anything else the database refused.
"""

from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager
import re

from sqlalchemy.exc import IntegrityError
from sqlalchemy.exc import NoResultFound
from sqlalchemy.exc import SQLAlchemyError

UNIQUE_VIOLATION_SQLSTATE = "23505"

# constraint name -> offending column, for drivers that only report the name
UNIQUE_CONSTRAINT_FIELDS = {
    "uq_categories_name": "name",
    "uq_users_email": "email",
}

_POSTGRES_KEY_PATTERN = re.compile(r"Key \((?P<columns>[^)]+)\)=")
_SQLITE_UNIQUE_PATTERN = re.compile(r"UNIQUE constraint failed: (?P<columns>[\w.]+(?:, [\w.]+)*)")
_CONSTRAINT_NAME_PATTERN = re.compile(r'unique constraint "(?P<name>[^"]+)"')


class PersistenceFault(Exception):
    """Database operation failed for a reason with no dedicated variant."""

    def __init__(self, message: str = "Database operation failed") -> None:
        super().__init__(message)
        self.message = message


class RecordNotFound(PersistenceFault):
    """The addressed record does not exist."""

    def __init__(self, resource: str = "Resource") -> None:
        super().__init__(f"{resource} not found")
        self.resource = resource


class UniqueViolation(PersistenceFault):
    """A write collided with an existing row on a unique field."""

    def __init__(self, field: str | None = None) -> None:
        super().__init__(f"Unique constraint violated on {field or 'field'}")
        self.field = field


def _is_unique_violation(exc: IntegrityError) -> bool:
    if getattr(exc.orig, "sqlstate", None) == UNIQUE_VIOLATION_SQLSTATE:
        return True
    text = str(exc.orig)
    return "UNIQUE constraint failed" in text or "duplicate key value" in text


def unique_violation_field(exc: IntegrityError) -> str | None:
    """Recover the offending column name from a uniqueness IntegrityError."""
    diag = getattr(exc.orig, "diag", None)
    constraint_name = getattr(diag, "constraint_name", None)
    if constraint_name in UNIQUE_CONSTRAINT_FIELDS:
        return UNIQUE_CONSTRAINT_FIELDS[constraint_name]

    text = str(exc.orig)
    match = _POSTGRES_KEY_PATTERN.search(text)
    if match:
        return match.group("columns").split(",")[0].strip()

    match = _SQLITE_UNIQUE_PATTERN.search(text)
    if match:
        column = match.group("columns").split(",")[0].strip()
        return column.rsplit(".", 1)[-1]

    match = _CONSTRAINT_NAME_PATTERN.search(text)
    if match:
        return UNIQUE_CONSTRAINT_FIELDS.get(match.group("name"))
    return None


def translate_integrity_error(exc: IntegrityError) -> PersistenceFault:
    if _is_unique_violation(exc):
        return UniqueViolation(unique_violation_field(exc))
    return PersistenceFault("Database constraint violated")


@contextmanager
def persistence_faults(resource: str = "Resource") -> Generator[None, None, None]:
    """Translate SQLAlchemy errors raised in the block into typed faults."""
    try:
        yield
    except PersistenceFault:
        raise
    except IntegrityError as exc:
        raise translate_integrity_error(exc) from exc
    except NoResultFound as exc:
        raise RecordNotFound(resource) from exc
    except SQLAlchemyError as exc:
        raise PersistenceFault() from exc
