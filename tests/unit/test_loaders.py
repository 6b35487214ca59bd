"""Unit tests for data-loading helpers."""

from __future__ import annotations

from typing import Any

import pytest

from storefront.client.errors import ApiError
from storefront.client.loaders import CategoryLoader
from storefront.client.loaders import safe_data_loader
from storefront.client.loaders import safe_server_action
from storefront.client.runner import RequestState
from storefront.core.errors import ErrorKind
from storefront.schemas.envelope import Envelope
from storefront.schemas.envelope import build_error
from storefront.schemas.envelope import build_success


def _fail() -> Any:
    raise RuntimeError("upstream unavailable")


def test_safe_data_loader_returns_loaded_value() -> None:
    assert safe_data_loader(lambda: [1, 2]) == [1, 2]


def test_safe_data_loader_uses_fallback_on_failure() -> None:
    assert safe_data_loader(_fail, fallback=[]) == []


def test_safe_data_loader_reraises_without_fallback() -> None:
    with pytest.raises(RuntimeError):
        safe_data_loader(_fail)


def test_safe_server_action_captures_outcome() -> None:
    ok = safe_server_action(lambda: {"id": 3})
    failed = safe_server_action(_fail)

    assert ok.status is RequestState.SUCCESS
    assert ok.data == {"id": 3}
    assert ok.error is None
    assert failed.status is RequestState.ERROR
    assert failed.data is None
    assert isinstance(failed.error, RuntimeError)


class _CategoryClientStub:
    def __init__(self, rows: list[dict[str, Any]], *, fail: bool = False) -> None:
        self._rows = rows
        self._fail = fail
        self.calls: list[list[int] | None] = []

    def list_categories(self, ids: list[int] | None = None) -> Envelope[Any]:
        self.calls.append(ids)
        if self._fail:
            return build_error(ErrorKind.DATABASE, "Database operation failed")
        wanted = set(ids or [])
        return build_success([row for row in self._rows if row["id"] in wanted])


def test_category_loader_batches_and_preserves_order() -> None:
    client = _CategoryClientStub([{"id": 1, "name": "Books"}, {"id": 2, "name": "Games"}])
    loader = CategoryLoader(client)  # type: ignore[arg-type]

    result = loader.load_many([2, 99, 1, 2])

    assert result == [{"id": 2, "name": "Games"}, None, {"id": 1, "name": "Books"}, {"id": 2, "name": "Games"}]
    assert client.calls == [[2, 99, 1]]


def test_category_loader_caches_previous_answers() -> None:
    client = _CategoryClientStub([{"id": 1, "name": "Books"}])
    loader = CategoryLoader(client)  # type: ignore[arg-type]

    loader.load(1)
    loader.load(1)
    assert loader.load(5) is None

    assert client.calls == [[1], [5]]
    loader.clear()
    loader.load(1)
    assert client.calls[-1] == [1]


def test_category_loader_raises_api_error_on_failed_envelope() -> None:
    loader = CategoryLoader(_CategoryClientStub([], fail=True))  # type: ignore[arg-type]

    with pytest.raises(ApiError) as captured:
        loader.load(1)

    assert captured.value.code == "database_error"
