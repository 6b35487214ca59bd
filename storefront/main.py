"""FastAPI application entrypoint for the storefront API."""

import logging

from fastapi import FastAPI

from storefront.api.categories import router as categories_router
from storefront.api.products import router as products_router
from storefront.api.reviews import router as reviews_router
from storefront.api.users import router as users_router
from storefront.core.config import get_settings
from storefront.core.guard import register_error_handlers
from storefront.core.logging import configure_logging
from storefront.db import models as _models  # noqa: F401

settings = get_settings()
configure_logging(settings.log_level)
logging.getLogger(__name__).info("Starting storefront with settings=%s", settings.safe_for_logging())

app = FastAPI(title="Storefront")
register_error_handlers(app)
app.include_router(categories_router)
app.include_router(products_router)
app.include_router(reviews_router)
app.include_router(users_router)


@app.get("/health")
def health() -> dict[str, str]:
    """Health check stub endpoint for service readiness."""
    return {"status": "ok"}
