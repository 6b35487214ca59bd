"""User API routes."""

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
from storefront.schemas.user import User
from storefront.schemas.user import UserCreate
from storefront.schemas.user import UserUpdate
from storefront.services.users import create_user_service
from storefront.services.users import delete_user_service
from storefront.services.users import get_user_service
from storefront.services.users import list_users_service
from storefront.services.users import update_user_service

router = APIRouter(prefix="/api/v1", tags=["users"], route_class=GuardedRoute)


@router.get("/users", response_model=Envelope[list[User]])
def list_users_endpoint(
    is_active: bool | None = None,
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """List users with optional active-state filter."""
    users = [User.model_validate(row) for row in list_users_service(session, is_active=is_active)]
    return success_response(users, message="users.fetchSuccess", meta={"count": len(users)})


@router.get("/users/{user_id}", response_model=Envelope[User])
def get_user_endpoint(
    user_id: RecordId,
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    user = get_user_service(session, user_id)
    return success_response(User.model_validate(user), message="users.fetchSuccess")


@router.post("/users", response_model=Envelope[User], status_code=201)
def create_user_endpoint(
    payload: UserCreate,
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """Register a user."""
    user = create_user_service(session, payload)
    return success_response(User.model_validate(user), 201, "users.createSuccess")


@router.patch("/users/{user_id}", response_model=Envelope[User])
def update_user_endpoint(
    user_id: RecordId,
    payload: UserUpdate,
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    user = update_user_service(session, user_id, payload)
    return success_response(User.model_validate(user), message="users.updateSuccess")


@router.delete("/users/{user_id}", response_model=Envelope[User])
def delete_user_endpoint(
    user_id: RecordId,
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    user = delete_user_service(session, user_id)
    return success_response(User.model_validate(user), message="users.deleteSuccess")
