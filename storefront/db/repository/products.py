"""Repository primitives for product entities."""

from __future__ import annotations

from typing import Any

from sqlalchemy import func
from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.db.faults import RecordNotFound
from storefront.db.faults import persistence_faults
from storefront.db.models.product import Product

RESOURCE = "Product"


def create_product(
    session: Session,
    *,
    name: str,
    price: float,
    stock: int = 0,
    description: str | None = None,
    image_url: str | None = None,
    category_id: int | None = None,
) -> Product:
    """Create and return a product row."""
    product = Product(
        name=name,
        price=price,
        stock=stock,
        description=description,
        image_url=image_url,
        category_id=category_id,
    )
    with persistence_faults(RESOURCE):
        session.add(product)
        session.flush()
        session.refresh(product)
    return product


def get_product(session: Session, product_id: int) -> Product:
    """Fetch a product by id or raise RecordNotFound."""
    with persistence_faults(RESOURCE):
        product = session.get(Product, product_id)
    if product is None:
        raise RecordNotFound(RESOURCE)
    return product


def list_products(
    session: Session,
    *,
    category_id: int | None = None,
    limit: int = 20,
    offset: int = 0,
) -> tuple[list[Product], int]:
    """Return one page of products and the total matching count."""
    stmt = select(Product)
    count_stmt = select(func.count()).select_from(Product)
    if category_id is not None:
        stmt = stmt.where(Product.category_id == category_id)
        count_stmt = count_stmt.where(Product.category_id == category_id)
    stmt = stmt.order_by(Product.created_at.desc(), Product.id.desc()).limit(limit).offset(offset)

    with persistence_faults(RESOURCE):
        total = session.scalar(count_stmt) or 0
        return list(session.scalars(stmt)), total


def list_related_products(session: Session, product: Product, *, limit: int = 4) -> list[Product]:
    """List other products sharing the given product's category."""
    if product.category_id is None:
        return []
    stmt = (
        select(Product)
        .where(Product.category_id == product.category_id)
        .where(Product.id != product.id)
        .order_by(Product.created_at.desc(), Product.id.desc())
        .limit(limit)
    )
    with persistence_faults(RESOURCE):
        return list(session.scalars(stmt))


def update_product(session: Session, product_id: int, changes: dict[str, Any]) -> Product:
    """Apply a partial update to an existing product."""
    product = get_product(session, product_id)
    with persistence_faults(RESOURCE):
        for field, value in changes.items():
            setattr(product, field, value)
        session.flush()
        session.refresh(product)
    return product


def delete_product(session: Session, product_id: int) -> Product:
    """Delete a product (and its reviews) and return the removed row."""
    product = get_product(session, product_id)
    with persistence_faults(RESOURCE):
        session.delete(product)
        session.flush()
    return product
