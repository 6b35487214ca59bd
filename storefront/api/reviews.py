"""Review API routes."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi import Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from storefront.api._params import RecordId
from storefront.core.guard import GuardedRoute
from storefront.core.guard import success_response
from storefront.db.base import get_db_session
from storefront.schemas.envelope import Envelope
from storefront.schemas.review import Review
from storefront.schemas.review import ReviewCreate
from storefront.services.reviews import create_review_service
from storefront.services.reviews import delete_review_service
from storefront.services.reviews import list_product_reviews_service

router = APIRouter(prefix="/api/v1", tags=["reviews"], route_class=GuardedRoute)


@router.get("/products/{product_id}/reviews", response_model=Envelope[list[Review]])
def list_product_reviews_endpoint(
    product_id: RecordId,
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """List reviews for a product."""
    reviews = [Review.model_validate(row) for row in list_product_reviews_service(session, product_id)]
    return success_response(reviews, message="reviews.fetchSuccess", meta={"count": len(reviews)})


@router.post("/products/{product_id}/reviews", response_model=Envelope[Review], status_code=201)
def create_review_endpoint(
    product_id: RecordId,
    payload: ReviewCreate,
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """Review a product."""
    review = create_review_service(session, product_id, payload)
    return success_response(Review.model_validate(review), 201, "reviews.createSuccess")


@router.delete("/reviews/{review_id}", response_model=Envelope[Review])
def delete_review_endpoint(
    review_id: RecordId,
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    review = delete_review_service(session, review_id)
    return success_response(Review.model_validate(review), message="reviews.deleteSuccess")
