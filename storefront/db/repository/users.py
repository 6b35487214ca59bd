"""Repository primitives for user entities."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.db.faults import RecordNotFound
from storefront.db.faults import persistence_faults
from storefront.db.models.user import User

RESOURCE = "User"


def create_user(
    session: Session,
    *,
    name: str,
    email: str,
    followers: int = 0,
    following: int = 0,
    is_active: bool = True,
) -> User:
    """Create and return a user row."""
    user = User(
        name=name,
        email=email,
        followers=followers,
        following=following,
        is_active=is_active,
    )
    with persistence_faults(RESOURCE):
        session.add(user)
        session.flush()
        session.refresh(user)
    return user


def get_user(session: Session, user_id: int) -> User:
    """Fetch a user by id or raise RecordNotFound."""
    with persistence_faults(RESOURCE):
        user = session.get(User, user_id)
    if user is None:
        raise RecordNotFound(RESOURCE)
    return user


def list_users(
    session: Session,
    *,
    is_active: bool | None = None,
    limit: int = 100,
    offset: int = 0,
) -> list[User]:
    """List users with optional active-state filtering."""
    stmt = select(User)
    if is_active is not None:
        stmt = stmt.where(User.is_active == is_active)
    stmt = stmt.order_by(User.id.asc()).limit(limit).offset(offset)
    with persistence_faults(RESOURCE):
        return list(session.scalars(stmt))


def update_user(session: Session, user_id: int, changes: dict[str, Any]) -> User:
    """Apply a partial update to an existing user."""
    user = get_user(session, user_id)
    with persistence_faults(RESOURCE):
        for field, value in changes.items():
            setattr(user, field, value)
        session.flush()
        session.refresh(user)
    return user


def delete_user(session: Session, user_id: int) -> User:
    """Delete a user (and their reviews) and return the removed row."""
    user = get_user(session, user_id)
    with persistence_faults(RESOURCE):
        session.delete(user)
        session.flush()
    return user
