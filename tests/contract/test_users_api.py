"""Contract tests for user API endpoints."""

from __future__ import annotations

from fastapi.testclient import TestClient

API_PREFIX = "/api/v1"


def _register(client: TestClient, name: str, email: str) -> dict:
    response = client.post(f"{API_PREFIX}/users", json={"name": name, "email": email})
    assert response.status_code == 201, response.json()
    return response.json()["data"]


def test_register_and_fetch_user(client: TestClient) -> None:
    user = _register(client, "Ada Lovelace", "ada@example.com")

    for field in ("id", "name", "email", "followers", "following", "is_active", "created_at", "updated_at"):
        assert field in user
    assert user["followers"] == 0
    assert user["is_active"] is True

    fetched = client.get(f"{API_PREFIX}/users/{user['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["message"] == "users.fetchSuccess"
    assert fetched.json()["data"]["email"] == "ada@example.com"


def test_duplicate_email_is_conflict(client: TestClient) -> None:
    _register(client, "Ada Lovelace", "ada@example.com")

    response = client.post(f"{API_PREFIX}/users", json={"name": "Another Ada", "email": "ada@example.com"})

    assert response.status_code == 409
    body = response.json()
    assert body["error"]["code"] == "resource_conflict"
    assert body["message"] == "Resource with this email already exists"


def test_short_name_reports_field_issue(client: TestClient) -> None:
    response = client.post(f"{API_PREFIX}/users", json={"name": "Al", "email": "al@example.com"})

    assert response.status_code == 400
    errors = response.json()["error"]["errors"]
    assert list(errors) == ["name"]
    assert errors["name"]


def test_malformed_email_reports_field_issue(client: TestClient) -> None:
    response = client.post(f"{API_PREFIX}/users", json={"name": "Grace", "email": "not-an-email"})

    assert response.status_code == 400
    assert "email" in response.json()["error"]["errors"]


def test_missing_user_is_not_found(client: TestClient) -> None:
    response = client.get(f"{API_PREFIX}/users/31337")

    assert response.status_code == 404
    body = response.json()
    assert body["error"]["code"] == "not_found"
    assert body["message"] == "User not found"


def test_patch_and_filter_by_active_state(client: TestClient) -> None:
    ada = _register(client, "Ada Lovelace", "ada@example.com")
    _register(client, "Grace Hopper", "grace@example.com")

    patched = client.patch(f"{API_PREFIX}/users/{ada['id']}", json={"is_active": False, "followers": 7})
    assert patched.status_code == 200
    assert patched.json()["data"]["is_active"] is False
    assert patched.json()["data"]["followers"] == 7
    assert patched.json()["data"]["name"] == "Ada Lovelace"

    active = client.get(f"{API_PREFIX}/users", params={"is_active": "true"}).json()
    assert [user["name"] for user in active["data"]] == ["Grace Hopper"]


def test_patch_to_taken_email_is_conflict(client: TestClient) -> None:
    _register(client, "Ada Lovelace", "ada@example.com")
    grace = _register(client, "Grace Hopper", "grace@example.com")

    response = client.patch(f"{API_PREFIX}/users/{grace['id']}", json={"email": "ada@example.com"})

    assert response.status_code == 409
    assert "email" in response.json()["message"]


def test_delete_user(client: TestClient) -> None:
    user = _register(client, "Ada Lovelace", "ada@example.com")

    assert client.delete(f"{API_PREFIX}/users/{user['id']}").status_code == 200
    assert client.get(f"{API_PREFIX}/users/{user['id']}").status_code == 404
