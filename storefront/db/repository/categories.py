"""Repository primitives for category entities."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.db.faults import RecordNotFound
from storefront.db.faults import persistence_faults
from storefront.db.models.category import Category

RESOURCE = "Category"


def create_category(session: Session, *, name: str) -> Category:
    """Create and return a category row."""
    category = Category(name=name)
    with persistence_faults(RESOURCE):
        session.add(category)
        session.flush()
        session.refresh(category)
    return category


def get_category(session: Session, category_id: int) -> Category:
    """Fetch a category by id or raise RecordNotFound."""
    with persistence_faults(RESOURCE):
        category = session.get(Category, category_id)
    if category is None:
        raise RecordNotFound(RESOURCE)
    return category


def list_categories(session: Session, *, ids: Sequence[int] | None = None) -> list[Category]:
    """List categories, optionally restricted to a set of ids."""
    stmt = select(Category)
    if ids:
        stmt = stmt.where(Category.id.in_(list(ids)))
    stmt = stmt.order_by(Category.name.asc())
    with persistence_faults(RESOURCE):
        return list(session.scalars(stmt))


def update_category(session: Session, category_id: int, *, name: str) -> Category:
    """Rename an existing category."""
    category = get_category(session, category_id)
    with persistence_faults(RESOURCE):
        category.name = name
        session.flush()
        session.refresh(category)
    return category


def delete_category(session: Session, category_id: int) -> Category:
    """Delete a category and return the removed row."""
    category = get_category(session, category_id)
    with persistence_faults(RESOURCE):
        session.delete(category)
        session.flush()
    return category
