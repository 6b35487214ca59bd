"""Service helpers for category API operations."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from storefront.db.repository.categories import create_category
from storefront.db.repository.categories import delete_category
from storefront.db.repository.categories import get_category
from storefront.db.repository.categories import list_categories
from storefront.db.repository.categories import update_category
from storefront.schemas.category import CategoryCreate
from storefront.schemas.category import CategoryUpdate
from storefront.services._transaction import committing


def create_category_service(session: Session, payload: CategoryCreate):
    """Create and persist a new category."""
    with committing(session):
        return create_category(session, name=payload.name)


def list_categories_service(session: Session, *, ids: Sequence[int] | None = None):
    return list_categories(session, ids=ids)


def get_category_service(session: Session, category_id: int):
    return get_category(session, category_id)


def update_category_service(session: Session, category_id: int, payload: CategoryUpdate):
    """Rename a category and persist the change."""
    with committing(session):
        return update_category(session, category_id, name=payload.name)


def delete_category_service(session: Session, category_id: int):
    """Delete a category; its products are kept but uncategorized."""
    with committing(session):
        return delete_category(session, category_id)
