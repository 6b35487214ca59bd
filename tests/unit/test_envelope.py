"""Unit tests for the response envelope builders."""

from __future__ import annotations

from datetime import datetime
import json
from typing import Any

import pytest
from pydantic import ValidationError

from storefront.core.errors import ErrorKind
from storefront.schemas.envelope import Envelope
from storefront.schemas.envelope import ErrorBody
from storefront.schemas.envelope import Meta
from storefront.schemas.envelope import build_error
from storefront.schemas.envelope import build_success


def test_build_success_sets_outcome_and_meta() -> None:
    envelope = build_success({"id": 1}, message="products.fetchSuccess")

    assert envelope.success is True
    assert envelope.data == {"id": 1}
    assert envelope.error is None
    assert envelope.message == "products.fetchSuccess"
    assert envelope.meta.locale == "en"
    assert envelope.meta.timestamp.endswith("Z")
    datetime.fromisoformat(envelope.meta.timestamp.replace("Z", "+00:00"))


def test_build_success_merges_meta_without_mutating_input() -> None:
    overrides = {"count": 2, "pagination": {"page": 1, "limit": 2, "total": 5, "totalPages": 3}}
    snapshot = json.dumps(overrides, sort_keys=True)

    envelope = build_success([1, 2], meta=overrides)

    assert envelope.meta.count == 2
    assert envelope.meta.pagination is not None
    assert envelope.meta.pagination.total_pages == 3
    assert json.dumps(overrides, sort_keys=True) == snapshot


def test_default_locale_comes_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    from storefront.core.config import get_settings

    monkeypatch.setenv("STOREFRONT_DEFAULT_LOCALE", "fr")
    get_settings.cache_clear()

    assert build_success(None).meta.locale == "fr"


@pytest.mark.parametrize("kind", list(ErrorKind))
def test_build_error_invariants(kind: ErrorKind) -> None:
    envelope = build_error(kind, "Something failed")

    assert envelope.success is False
    assert envelope.data is None
    assert envelope.error is not None
    assert envelope.error.code == kind.value
    assert envelope.message == "Something failed"


def test_build_error_attaches_field_errors_only_for_validation() -> None:
    issues = {"name": ["Field required"]}

    validation = build_error(ErrorKind.VALIDATION, "Invalid data provided", errors=issues)
    conflict = build_error(ErrorKind.CONFLICT, "Taken", errors=issues)

    assert validation.error is not None and validation.error.errors == issues
    assert conflict.error is not None and conflict.error.errors is None


def test_build_error_details_follow_development_flag(monkeypatch: pytest.MonkeyPatch) -> None:
    from storefront.core.config import get_settings

    production = build_error(ErrorKind.INTERNAL, "Boom", details="Traceback ...")
    assert production.error is not None and production.error.details is None

    monkeypatch.setenv("STOREFRONT_ENV", "development")
    get_settings.cache_clear()
    development = build_error(ErrorKind.INTERNAL, "Boom", details="Traceback ...")
    assert development.error is not None and development.error.details == "Traceback ..."

    forced = build_error(ErrorKind.INTERNAL, "Boom", details="x", include_details=False)
    assert forced.error is not None and forced.error.details is None


def test_success_payload_omits_error_and_keeps_nested_nulls() -> None:
    payload = build_success({"id": 1, "description": None}).to_payload()

    assert payload["success"] is True
    assert "error" not in payload
    assert "message" not in payload
    assert payload["data"] == {"id": 1, "description": None}
    assert set(payload["meta"]) == {"timestamp", "locale"}


def test_error_payload_always_carries_null_data() -> None:
    payload = build_error(ErrorKind.NOT_FOUND, "Product not found").to_payload()

    assert payload["success"] is False
    assert payload["data"] is None
    assert payload["error"] == {"code": "not_found"}
    assert payload["message"] == "Product not found"


def test_pagination_serializes_with_wire_key() -> None:
    payload = build_success(
        [],
        meta={"count": 0, "pagination": {"page": 2, "limit": 10, "total": 11, "total_pages": 2}},
    ).to_payload()

    assert payload["meta"]["pagination"] == {"page": 2, "limit": 10, "total": 11, "totalPages": 2}


@pytest.mark.parametrize(
    "envelope",
    [
        build_success({"id": 7, "tags": ["a"], "note": None}, "ok", {"count": 1}),
        build_error(ErrorKind.VALIDATION, "Invalid data provided", {"price": ["too low"]}),
    ],
)
def test_payload_round_trip_is_lossless(envelope: Envelope[Any]) -> None:
    wire = json.loads(json.dumps(envelope.to_payload()))

    restored = Envelope[Any].model_validate(wire)

    assert restored.model_dump() == envelope.model_dump()
    assert restored.to_payload() == envelope.to_payload()


def test_envelope_rejects_failed_outcome_without_error() -> None:
    with pytest.raises(ValidationError):
        Envelope[Any](success=False, data=None, meta=Meta(timestamp="t"))


def test_envelope_rejects_success_with_error() -> None:
    with pytest.raises(ValidationError):
        Envelope[Any](success=True, data=1, meta=Meta(timestamp="t"), error=ErrorBody(code="not_found"))


def test_envelope_rejects_failed_outcome_with_data() -> None:
    with pytest.raises(ValidationError):
        Envelope[Any](success=False, data=1, meta=Meta(timestamp="t"), error=ErrorBody(code="not_found"))
