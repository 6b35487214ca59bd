"""Database engine and session helpers for the storefront."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session
from sqlalchemy.orm import sessionmaker

from storefront.core.config import get_settings

DATABASE_URL = get_settings().database_url


def _connect_args(url: str) -> dict[str, Any]:
    # FastAPI runs sync endpoints in a threadpool
    if make_url(url).get_backend_name() == "sqlite":
        return {"check_same_thread": False}
    return {}


engine = create_engine(
    DATABASE_URL,
    pool_pre_ping=True,
    connect_args=_connect_args(DATABASE_URL),
)

SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    expire_on_commit=False,
    class_=Session,
)


def get_db_session() -> Generator[Session, None, None]:
    """Yield a request-scoped session; services own commit and rollback."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
