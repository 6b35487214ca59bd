"""Service helpers for product API operations."""

from __future__ import annotations

import math

from sqlalchemy.orm import Session

from storefront.db.repository.categories import get_category
from storefront.db.repository.products import create_product
from storefront.db.repository.products import delete_product
from storefront.db.repository.products import get_product
from storefront.db.repository.products import list_products
from storefront.db.repository.products import list_related_products
from storefront.db.repository.products import update_product
from storefront.schemas.envelope import Pagination
from storefront.schemas.product import ProductCreate
from storefront.schemas.product import ProductUpdate
from storefront.services._transaction import committing

NULLABLE_FIELDS = {"description", "image_url", "category_id"}


def _ensure_category_exists(session: Session, category_id: int | None) -> None:
    if category_id is not None:
        get_category(session, category_id)


def create_product_service(session: Session, payload: ProductCreate):
    """Create and persist a product."""
    _ensure_category_exists(session, payload.category_id)
    with committing(session):
        return create_product(session, **payload.model_dump())


def list_products_service(
    session: Session,
    *,
    page: int = 1,
    limit: int = 20,
    category_id: int | None = None,
):
    """Return one page of products together with its pagination window."""
    products, total = list_products(
        session,
        category_id=category_id,
        limit=limit,
        offset=(page - 1) * limit,
    )
    pagination = Pagination(
        page=page,
        limit=limit,
        total=total,
        total_pages=math.ceil(total / limit) if total else 0,
    )
    return products, pagination


def get_product_service(session: Session, product_id: int):
    return get_product(session, product_id)


def list_related_products_service(session: Session, product_id: int, *, limit: int = 4):
    product = get_product(session, product_id)
    return list_related_products(session, product, limit=limit)


def update_product_service(session: Session, product_id: int, payload: ProductUpdate):
    """Apply the fields present in ``payload`` to an existing product."""
    changes = {
        field: value
        for field, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or field in NULLABLE_FIELDS
    }
    _ensure_category_exists(session, changes.get("category_id"))
    with committing(session):
        return update_product(session, product_id, changes)


def delete_product_service(session: Session, product_id: int):
    with committing(session):
        return delete_product(session, product_id)
