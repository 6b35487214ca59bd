"""Category API routes."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi import Depends
from fastapi import Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from storefront.api._params import RecordId
from storefront.api._params import RecordIdItem
from storefront.core.guard import GuardedRoute
from storefront.core.guard import success_response
from storefront.db.base import get_db_session
from storefront.schemas.category import Category
from storefront.schemas.category import CategoryCreate
from storefront.schemas.category import CategoryUpdate
from storefront.schemas.envelope import Envelope
from storefront.services.categories import create_category_service
from storefront.services.categories import delete_category_service
from storefront.services.categories import get_category_service
from storefront.services.categories import list_categories_service
from storefront.services.categories import update_category_service

router = APIRouter(prefix="/api/v1", tags=["categories"], route_class=GuardedRoute)


@router.get("/categories", response_model=Envelope[list[Category]])
def list_categories_endpoint(
    ids: list[RecordIdItem] | None = Query(default=None, alias="id"),
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """List categories, optionally only the requested ids."""
    categories = [Category.model_validate(row) for row in list_categories_service(session, ids=ids)]
    return success_response(categories, message="categories.fetchSuccess", meta={"count": len(categories)})


@router.get("/categories/{category_id}", response_model=Envelope[Category])
def get_category_endpoint(
    category_id: RecordId,
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    category = get_category_service(session, category_id)
    return success_response(Category.model_validate(category), message="categories.fetchSuccess")


@router.post("/categories", response_model=Envelope[Category], status_code=201)
def create_category_endpoint(
    payload: CategoryCreate,
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """Create a category."""
    category = create_category_service(session, payload)
    return success_response(Category.model_validate(category), 201, "categories.createSuccess")


@router.put("/categories/{category_id}", response_model=Envelope[Category])
def update_category_endpoint(
    category_id: RecordId,
    payload: CategoryUpdate,
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    category = update_category_service(session, category_id, payload)
    return success_response(Category.model_validate(category), message="categories.updateSuccess")


@router.delete("/categories/{category_id}", response_model=Envelope[Category])
def delete_category_endpoint(
    category_id: RecordId,
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    category = delete_category_service(session, category_id)
    return success_response(Category.model_validate(category), message="categories.deleteSuccess")
