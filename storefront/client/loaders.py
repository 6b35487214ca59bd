"""Data-loading helpers with consistent error handling."""

from __future__ import annotations

from collections.abc import Callable
from collections.abc import Iterable
from dataclasses import dataclass
import logging
from typing import Any
from typing import Generic
from typing import TypeVar

from storefront.client.http import StorefrontClient
from storefront.client.runner import RequestState
from storefront.client.runner import error_from_envelope

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING = object()


def safe_data_loader(loader_fn: Callable[[], T], fallback: T | None = None) -> T:
    """Run ``loader_fn``; on failure log it and return ``fallback`` or re-raise."""
    try:
        return loader_fn()
    except Exception:
        logger.exception("Data loading error")
        if fallback is not None:
            return fallback
        raise


@dataclass
class DataResult(Generic[T]):
    """Outcome of a server-side action."""

    data: T | None = None
    error: BaseException | None = None
    status: RequestState = RequestState.LOADING


def safe_server_action(action_fn: Callable[[], T]) -> DataResult[T]:
    """Run a mutation and capture its outcome instead of raising."""
    result: DataResult[T] = DataResult()
    try:
        result.data = action_fn()
        result.status = RequestState.SUCCESS
    except Exception as exc:
        logger.exception("Server action error")
        result.error = exc
        result.status = RequestState.ERROR
    return result


class CategoryLoader:
    """Batch category lookups into one request and cache the answers.

    Results come back in request order, with None for unknown ids.
    """

    def __init__(self, client: StorefrontClient) -> None:
        self._client = client
        self._cache: dict[int, Any] = {}

    def load(self, category_id: int) -> dict[str, Any] | None:
        return self.load_many([category_id])[0]

    def load_many(self, category_ids: Iterable[int]) -> list[dict[str, Any] | None]:
        requested = list(category_ids)
        missing = list(dict.fromkeys(cid for cid in requested if cid not in self._cache))
        if missing:
            logger.debug("Batch loading categories: %s", missing)
            envelope = self._client.list_categories(ids=missing)
            if not envelope.success:
                raise error_from_envelope(envelope)
            found = {item["id"]: item for item in envelope.data or []}
            for cid in missing:
                self._cache[cid] = found.get(cid, _MISSING)

        return [None if self._cache[cid] is _MISSING else self._cache[cid] for cid in requested]

    def clear(self) -> None:
        self._cache.clear()
