"""Commit/rollback helper shared by service functions."""

from __future__ import annotations

from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy.orm import Session

from storefront.db.faults import persistence_faults


@contextmanager
def committing(session: Session) -> Generator[Session, None, None]:
    """Commit on success, roll back and re-raise on any failure."""
    try:
        yield session
        with persistence_faults():
            session.commit()
    except Exception:
        session.rollback()
        raise
