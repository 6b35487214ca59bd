"""Service helpers for review API operations."""

from __future__ import annotations

from sqlalchemy.orm import Session

from storefront.db.repository.products import get_product
from storefront.db.repository.reviews import create_review
from storefront.db.repository.reviews import delete_review
from storefront.db.repository.reviews import list_product_reviews
from storefront.db.repository.users import get_user
from storefront.schemas.review import ReviewCreate
from storefront.services._transaction import committing


def create_review_service(session: Session, product_id: int, payload: ReviewCreate):
    """Create a review after checking both the product and the author exist."""
    get_product(session, product_id)
    get_user(session, payload.user_id)
    with committing(session):
        return create_review(
            session,
            product_id=product_id,
            user_id=payload.user_id,
            rating=payload.rating,
            comment=payload.comment,
        )


def list_product_reviews_service(session: Session, product_id: int):
    get_product(session, product_id)
    return list_product_reviews(session, product_id)


def delete_review_service(session: Session, review_id: int):
    with committing(session):
        return delete_review(session, review_id)
