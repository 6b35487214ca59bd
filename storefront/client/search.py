"""Product search action adapting the external search endpoint to envelopes."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel
from pydantic import Field

from storefront.client.http import StorefrontClient
from storefront.core.errors import ErrorKind
from storefront.core.errors import kind_for_status
from storefront.schemas.envelope import Envelope
from storefront.schemas.envelope import build_error
from storefront.schemas.envelope import build_success

logger = logging.getLogger(__name__)

SEARCH_FAILED_MESSAGE = "Failed to search products"


class SearchResult(BaseModel):
    """Products matching one query."""

    products: list[dict[str, Any]] = Field(default_factory=list)
    query: str = ""


def search_products(query: str | None, *, client: StorefrontClient) -> Envelope[SearchResult]:
    """Search products; blank queries short-circuit without a remote call."""
    normalized = (query or "").strip()
    if not normalized:
        return build_success(SearchResult(products=[], query=""))

    response = client.search_products_raw(normalized)
    if not response.ok:
        logger.warning("Product search failed with status %s", response.status_code)
        return build_error(kind_for_status(response.status_code), SEARCH_FAILED_MESSAGE)

    try:
        products = response.json()
    except ValueError:
        products = None
    if not isinstance(products, list):
        logger.warning("Product search returned a non-list payload")
        return build_error(ErrorKind.INTERNAL, SEARCH_FAILED_MESSAGE)

    return build_success(
        SearchResult(products=products, query=normalized),
        meta={"count": len(products)},
    )
