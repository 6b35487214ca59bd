"""HTTP client for the storefront API with bounded resilience controls."""

from __future__ import annotations

from collections.abc import Callable
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from datetime import timezone
from email.utils import parsedate_to_datetime
import random
import time
from typing import Any

from pydantic import ValidationError
import requests

from storefront.core.config import Settings
from storefront.core.config import get_settings
from storefront.core.errors import is_retryable_status
from storefront.schemas.envelope import Envelope

RETRYABLE_STATUS_CODES = frozenset({429})
IDEMPOTENT_METHODS = frozenset({"GET", "PUT", "DELETE"})


class StorefrontTransportError(RuntimeError):
    """Raised when no usable response could be obtained from the API."""


def _should_retry(status_code: int) -> bool:
    return status_code in RETRYABLE_STATUS_CODES or is_retryable_status(status_code)


def retry_after_seconds(value: str | None, *, now: datetime | None = None) -> float | None:
    """Read a ``Retry-After`` header given as delta-seconds or an HTTP date."""
    if value is None:
        return None
    value = value.strip()
    if value.isdigit():
        return float(value)
    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    wait = (when - (now or datetime.now(timezone.utc))).total_seconds()
    return max(wait, 0.0)


@dataclass(frozen=True)
class RetryPolicy:
    """How many times an idempotent call is replayed, and how long to wait."""

    max_retries: int = 3
    backoff_seconds: float = 1.0

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.backoff_seconds <= 0:
            raise ValueError("backoff_seconds must be positive")

    def budget_for(self, method: str) -> int:
        return self.max_retries if method in IDEMPOTENT_METHODS else 0

    def wait_seconds(self, attempt: int, jitter: float, server_hint: float | None = None) -> float:
        """Exponential backoff plus jitter, never shorter than the server asked for."""
        wait = self.backoff_seconds * (2**attempt + jitter)
        if server_hint is not None:
            wait = max(wait, server_hint)
        return wait


class StorefrontClient:
    """Call storefront API routes and return parsed envelopes.

    Error envelopes (4xx) are returned, not raised; only transport failures
    and malformed payloads raise :class:`StorefrontTransportError`.
    """

    def __init__(
        self,
        *,
        base_url: str,
        timeout_seconds: float = 10.0,
        max_retries: int = 3,
        backoff_seconds: float = 1.0,
        search_url: str | None = None,
        session: requests.Session | None = None,
        sleep_fn: Callable[[float], None] = time.sleep,
        jitter_fn: Callable[[], float] = random.random,
    ) -> None:
        api_root = base_url.rstrip("/")
        if not api_root:
            raise ValueError("base_url is required")
        if timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")

        self._api_root = api_root
        self._search_root = (search_url or api_root).rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._retry = RetryPolicy(max_retries=max_retries, backoff_seconds=backoff_seconds)
        self._session = session or requests.Session()
        self._sleep_fn = sleep_fn
        self._jitter_fn = jitter_fn

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **kwargs: Any) -> "StorefrontClient":
        settings = settings or get_settings()
        return cls(
            base_url=settings.api_base_url,
            search_url=settings.search_api_url,
            timeout_seconds=settings.http_timeout_seconds,
            max_retries=settings.http_max_retries,
            backoff_seconds=settings.http_backoff_seconds,
            **kwargs,
        )

    # categories

    def list_categories(self, ids: list[int] | None = None) -> Envelope[Any]:
        params = {"id": list(ids)} if ids else None
        return self._envelope("GET", "/categories", params=params)

    def get_category(self, category_id: int) -> Envelope[Any]:
        return self._envelope("GET", f"/categories/{category_id}")

    def create_category(self, payload: Mapping[str, Any]) -> Envelope[Any]:
        return self._envelope("POST", "/categories", json=dict(payload))

    def update_category(self, category_id: int, payload: Mapping[str, Any]) -> Envelope[Any]:
        return self._envelope("PUT", f"/categories/{category_id}", json=dict(payload))

    def delete_category(self, category_id: int) -> Envelope[Any]:
        return self._envelope("DELETE", f"/categories/{category_id}")

    # products

    def list_products(
        self,
        *,
        page: int = 1,
        limit: int = 20,
        category_id: int | None = None,
    ) -> Envelope[Any]:
        params: dict[str, Any] = {"page": page, "limit": limit}
        if category_id is not None:
            params["category_id"] = category_id
        return self._envelope("GET", "/products", params=params)

    def get_product(self, product_id: int) -> Envelope[Any]:
        return self._envelope("GET", f"/products/{product_id}")

    def list_related_products(self, product_id: int) -> Envelope[Any]:
        return self._envelope("GET", f"/products/{product_id}/related")

    def create_product(self, payload: Mapping[str, Any]) -> Envelope[Any]:
        return self._envelope("POST", "/products", json=dict(payload))

    def update_product(self, product_id: int, payload: Mapping[str, Any]) -> Envelope[Any]:
        return self._envelope("PUT", f"/products/{product_id}", json=dict(payload))

    def delete_product(self, product_id: int) -> Envelope[Any]:
        return self._envelope("DELETE", f"/products/{product_id}")

    # reviews

    def list_product_reviews(self, product_id: int) -> Envelope[Any]:
        return self._envelope("GET", f"/products/{product_id}/reviews")

    def create_review(self, product_id: int, payload: Mapping[str, Any]) -> Envelope[Any]:
        return self._envelope("POST", f"/products/{product_id}/reviews", json=dict(payload))

    def delete_review(self, review_id: int) -> Envelope[Any]:
        return self._envelope("DELETE", f"/reviews/{review_id}")

    # users

    def list_users(self, *, is_active: bool | None = None) -> Envelope[Any]:
        params = {"is_active": str(is_active).lower()} if is_active is not None else None
        return self._envelope("GET", "/users", params=params)

    def get_user(self, user_id: int) -> Envelope[Any]:
        return self._envelope("GET", f"/users/{user_id}")

    def create_user(self, payload: Mapping[str, Any]) -> Envelope[Any]:
        return self._envelope("POST", "/users", json=dict(payload))

    def update_user(self, user_id: int, payload: Mapping[str, Any]) -> Envelope[Any]:
        """Partially update a user; PATCH is sent once, never replayed."""
        return self._envelope("PATCH", f"/users/{user_id}", json=dict(payload))

    def delete_user(self, user_id: int) -> Envelope[Any]:
        return self._envelope("DELETE", f"/users/{user_id}")

    # search

    def search_products_raw(self, query: str) -> requests.Response:
        """Hit the external search endpoint, which answers with a bare JSON array."""
        return self._send("GET", f"{self._search_root}/products/search", params={"q": query})


    def _envelope(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
    ) -> Envelope[Any]:
        response = self._send(method, f"{self._api_root}{path}", params=params, json=json)
        try:
            raw = response.json()
        except ValueError as exc:
            raise StorefrontTransportError(
                f"Response from {method} {path} is not JSON (status {response.status_code})",
            ) from exc
        try:
            return Envelope[Any].model_validate(raw)
        except ValidationError as exc:
            raise StorefrontTransportError(f"Response from {method} {path} is not an envelope") from exc

    def _send(
        self,
        method: str,
        url: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
    ) -> requests.Response:
        budget = self._retry.budget_for(method)
        attempt = 0
        while True:
            try:
                response = self._session.request(
                    method,
                    url,
                    headers=self._headers(),
                    params=params,
                    json=json,
                    timeout=self._timeout_seconds,
                )
            except (requests.Timeout, requests.ConnectionError) as exc:
                if attempt >= budget:
                    raise StorefrontTransportError(
                        f"{method} {url} failed after {attempt + 1} attempt(s)",
                    ) from exc
                self._sleep_fn(self._retry.wait_seconds(attempt, self._jitter_fn()))
                attempt += 1
                continue
            except requests.RequestException as exc:
                raise StorefrontTransportError(f"{method} {url} failed") from exc

            if attempt >= budget or not _should_retry(response.status_code):
                return response
            hint = retry_after_seconds((response.headers or {}).get("Retry-After"))
            self._sleep_fn(self._retry.wait_seconds(attempt, self._jitter_fn(), hint))
            attempt += 1

    @staticmethod
    def _headers() -> dict[str, str]:
        return {
            "Accept": "application/json",
            "User-Agent": "storefront-client/0.1",
        }
