"""Product API routes."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi import Depends
from fastapi import Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from storefront.api._params import OptionalRecordIdQuery
from storefront.api._params import RecordId
from storefront.core.guard import GuardedRoute
from storefront.core.guard import success_response
from storefront.db.base import get_db_session
from storefront.schemas.envelope import Envelope
from storefront.schemas.product import Product
from storefront.schemas.product import ProductCreate
from storefront.schemas.product import ProductUpdate
from storefront.services.products import create_product_service
from storefront.services.products import delete_product_service
from storefront.services.products import get_product_service
from storefront.services.products import list_products_service
from storefront.services.products import list_related_products_service
from storefront.services.products import update_product_service

router = APIRouter(prefix="/api/v1", tags=["products"], route_class=GuardedRoute)


@router.get("/products", response_model=Envelope[list[Product]])
def list_products_endpoint(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    category_id: OptionalRecordIdQuery = None,
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """List products one page at a time."""
    rows, pagination = list_products_service(session, page=page, limit=limit, category_id=category_id)
    products = [Product.model_validate(row) for row in rows]
    return success_response(
        products,
        message="products.fetchSuccess",
        meta={"count": len(products), "pagination": pagination},
    )


@router.get("/products/{product_id}", response_model=Envelope[Product])
def get_product_endpoint(
    product_id: RecordId,
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    product = get_product_service(session, product_id)
    return success_response(Product.model_validate(product), message="products.fetchSuccess")


@router.get("/products/{product_id}/related", response_model=Envelope[list[Product]])
def list_related_products_endpoint(
    product_id: RecordId,
    limit: int = Query(default=4, ge=1, le=20),
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """List products from the same category."""
    rows = list_related_products_service(session, product_id, limit=limit)
    products = [Product.model_validate(row) for row in rows]
    return success_response(products, message="products.fetchSuccess", meta={"count": len(products)})


@router.post("/products", response_model=Envelope[Product], status_code=201)
def create_product_endpoint(
    payload: ProductCreate,
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    product = create_product_service(session, payload)
    return success_response(Product.model_validate(product), 201, "products.createSuccess")


@router.put("/products/{product_id}", response_model=Envelope[Product])
def update_product_endpoint(
    product_id: RecordId,
    payload: ProductUpdate,
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    product = update_product_service(session, product_id, payload)
    return success_response(Product.model_validate(product), message="products.updateSuccess")


@router.delete("/products/{product_id}", response_model=Envelope[Product])
def delete_product_endpoint(
    product_id: RecordId,
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    product = delete_product_service(session, product_id)
    return success_response(Product.model_validate(product), message="products.deleteSuccess")
