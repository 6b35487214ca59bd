"""Contract tests for responses produced outside resource routes."""

from __future__ import annotations

from fastapi.testclient import TestClient


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_unknown_path_uses_error_envelope(client: TestClient) -> None:
    response = client.get("/api/v1/warehouses")

    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "not_found"
    assert body["meta"]["timestamp"].endswith("Z")


def test_unsupported_method_folds_to_validation_error(client: TestClient) -> None:
    response = client.patch("/api/v1/categories")

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "validation_error"


def test_openapi_lists_storefront_routes(client: TestClient) -> None:
    paths = client.get("/openapi.json").json()["paths"]

    for path in (
        "/api/v1/categories",
        "/api/v1/categories/{category_id}",
        "/api/v1/products",
        "/api/v1/products/{product_id}/related",
        "/api/v1/products/{product_id}/reviews",
        "/api/v1/reviews/{review_id}",
        "/api/v1/users/{user_id}",
    ):
        assert path in paths
