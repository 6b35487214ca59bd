"""Service helpers for user API operations."""

from __future__ import annotations

from sqlalchemy.orm import Session

from storefront.db.repository.users import create_user
from storefront.db.repository.users import delete_user
from storefront.db.repository.users import get_user
from storefront.db.repository.users import list_users
from storefront.db.repository.users import update_user
from storefront.schemas.user import UserCreate
from storefront.schemas.user import UserUpdate
from storefront.services._transaction import committing


def create_user_service(session: Session, payload: UserCreate):
    """Register a user; a taken email surfaces as a uniqueness violation."""
    with committing(session):
        return create_user(session, **payload.model_dump())


def list_users_service(session: Session, *, is_active: bool | None = None):
    return list_users(session, is_active=is_active)


def get_user_service(session: Session, user_id: int):
    return get_user(session, user_id)


def update_user_service(session: Session, user_id: int, payload: UserUpdate):
    """Apply the non-null fields present in ``payload`` to a user."""
    changes = {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if value is not None
    }
    with committing(session):
        return update_user(session, user_id, changes)


def delete_user_service(session: Session, user_id: int):
    with committing(session):
        return delete_user(session, user_id)
