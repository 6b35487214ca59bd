"""Repository primitives for review entities."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.db.faults import RecordNotFound
from storefront.db.faults import persistence_faults
from storefront.db.models.review import Review

RESOURCE = "Review"


def create_review(
    session: Session,
    *,
    product_id: int,
    user_id: int,
    rating: int,
    comment: str | None = None,
) -> Review:
    """Create and return a review row."""
    review = Review(product_id=product_id, user_id=user_id, rating=rating, comment=comment)
    with persistence_faults(RESOURCE):
        session.add(review)
        session.flush()
        session.refresh(review)
    return review


def get_review(session: Session, review_id: int) -> Review:
    """Fetch a review by id or raise RecordNotFound."""
    with persistence_faults(RESOURCE):
        review = session.get(Review, review_id)
    if review is None:
        raise RecordNotFound(RESOURCE)
    return review


def list_product_reviews(session: Session, product_id: int) -> list[Review]:
    """List reviews for one product, newest first."""
    stmt = (
        select(Review)
        .where(Review.product_id == product_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
    )
    with persistence_faults(RESOURCE):
        return list(session.scalars(stmt))


def delete_review(session: Session, review_id: int) -> Review:
    """Delete a review and return the removed row."""
    review = get_review(session, review_id)
    with persistence_faults(RESOURCE):
        session.delete(review)
        session.flush()
    return review
