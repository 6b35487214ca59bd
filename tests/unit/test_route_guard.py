"""Unit tests for the route guard and app-level error handlers."""

from __future__ import annotations

import asyncio

import pytest
from fastapi import APIRouter
from fastapi import FastAPI
from fastapi import Request
from fastapi import Response
from fastapi.testclient import TestClient
from pydantic import BaseModel
from pydantic import Field

from storefront.core.errors import APIError
from storefront.core.errors import ErrorKind
from storefront.core.guard import GuardedRoute
from storefront.core.guard import guard
from storefront.core.guard import register_error_handlers
from storefront.core.guard import success_response
from storefront.db.faults import PersistenceFault
from storefront.db.faults import RecordNotFound
from storefront.db.faults import UniqueViolation


class _Widget(BaseModel):
    name: str = Field(min_length=3)
    price: float = Field(ge=0)


def _build_client() -> TestClient:
    app = FastAPI()
    register_error_handlers(app)
    router = APIRouter(route_class=GuardedRoute)

    @router.post("/widgets")
    def create_widget(payload: _Widget) -> Response:
        return success_response(payload, 201, "widgets.createSuccess")

    @router.get("/widgets/{widget_id}")
    def get_widget(widget_id: int) -> Response:
        raise RecordNotFound("Widget")

    @router.get("/conflict")
    def conflict() -> Response:
        raise UniqueViolation("name")

    @router.get("/database")
    def database() -> Response:
        raise PersistenceFault()

    @router.get("/forbidden")
    async def forbidden() -> Response:
        raise APIError(kind=ErrorKind.FORBIDDEN, message="Admins only")

    @router.get("/crash")
    def crash() -> Response:
        raise RuntimeError("connection string leaked here")

    @router.get("/plain")
    def plain() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(router)
    return TestClient(app)


def _assert_error_envelope(payload: dict, code: str) -> None:
    assert payload["success"] is False
    assert payload["data"] is None
    assert payload["error"]["code"] == code
    assert isinstance(payload["message"], str) and payload["message"]
    assert isinstance(payload["meta"]["timestamp"], str)


def test_success_passes_through_with_caller_status() -> None:
    response = _build_client().post("/widgets", json={"name": "bolt", "price": 1.5})

    assert response.status_code == 201
    payload = response.json()
    assert payload["success"] is True
    assert payload["data"] == {"name": "bolt", "price": 1.5}
    assert payload["message"] == "widgets.createSuccess"
    assert "error" not in payload


def test_plain_return_values_are_untouched() -> None:
    response = _build_client().get("/plain")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_body_validation_is_guarded() -> None:
    response = _build_client().post("/widgets", json={"name": "x", "price": -1})

    assert response.status_code == 400
    payload = response.json()
    _assert_error_envelope(payload, "validation_error")
    assert payload["message"] == "Invalid data provided"
    assert set(payload["error"]["errors"]) == {"name", "price"}


def test_path_validation_is_guarded() -> None:
    response = _build_client().get("/widgets/not-a-number")

    assert response.status_code == 400
    _assert_error_envelope(response.json(), "validation_error")


@pytest.mark.parametrize(
    ("path", "status_code", "code", "message"),
    [
        ("/widgets/7", 404, "not_found", "Widget not found"),
        ("/conflict", 409, "resource_conflict", "Resource with this name already exists"),
        ("/database", 500, "database_error", "Database operation failed"),
        ("/forbidden", 403, "forbidden", "Admins only"),
        ("/crash", 500, "internal_server_error", "An unexpected error occurred"),
    ],
)
def test_faults_become_envelopes_with_mapped_status(
    path: str,
    status_code: int,
    code: str,
    message: str,
) -> None:
    response = _build_client().get(path)

    assert response.status_code == status_code
    payload = response.json()
    _assert_error_envelope(payload, code)
    assert payload["message"] == message
    assert "details" not in payload["error"]


def test_development_mode_adds_details(monkeypatch: pytest.MonkeyPatch) -> None:
    from storefront.core.config import get_settings

    monkeypatch.setenv("STOREFRONT_ENV", "development")
    get_settings.cache_clear()

    response = _build_client().get("/crash")

    assert response.status_code == 500
    assert "connection string leaked here" in response.json()["error"]["details"]


def test_unknown_paths_use_envelope() -> None:
    response = _build_client().get("/missing")

    assert response.status_code == 404
    _assert_error_envelope(response.json(), "not_found")


def test_wrong_method_folds_into_validation_error() -> None:
    response = _build_client().delete("/conflict")

    assert response.status_code == 400
    _assert_error_envelope(response.json(), "validation_error")


def _request() -> Request:
    return Request({"type": "http", "method": "GET", "path": "/", "headers": [], "query_string": b""})


def test_guard_wraps_raw_handlers() -> None:
    async def failing(_: Request) -> Response:
        raise UniqueViolation(None)

    async def succeeding(_: Request) -> Response:
        return Response(status_code=204)

    failed = asyncio.run(guard(failing)(_request()))
    passed = asyncio.run(guard(succeeding)(_request()))

    assert failed.status_code == 409
    assert b"Resource with this field already exists" in failed.body
    assert passed.status_code == 204
