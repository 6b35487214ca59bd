"""Route guard: every handler outcome leaves as a well-formed envelope."""

from __future__ import annotations

from collections.abc import Awaitable
from collections.abc import Callable
from collections.abc import Mapping
import functools
import logging
from typing import Any

from fastapi import FastAPI
from fastapi import Request
from fastapi import Response
from fastapi import status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.core.classifier import classify_error
from storefront.core.errors import ErrorKind
from storefront.core.errors import status_for
from storefront.schemas.envelope import build_error
from storefront.schemas.envelope import build_success

logger = logging.getLogger(__name__)

RouteHandler = Callable[[Request], Awaitable[Response]]

_SERVER_SIDE_KINDS = {ErrorKind.DATABASE, ErrorKind.INTERNAL}


def success_response(
    data: Any,
    status_code: int = status.HTTP_200_OK,
    message: str | None = None,
    meta: Mapping[str, Any] | None = None,
) -> JSONResponse:
    """Wrap ``data`` in a success envelope with the given status code."""
    envelope = build_success(data, message=message, meta=meta)
    return JSONResponse(status_code=status_code, content=envelope.to_payload())


def error_response(
    fault: BaseException,
    kind: ErrorKind | None = None,
    message: str | None = None,
) -> JSONResponse:
    """Classify ``fault`` and render it as an error envelope."""
    classified = classify_error(fault, kind, message)
    if classified.kind in _SERVER_SIDE_KINDS:
        logger.error(
            "Request failed with %s",
            classified.code,
            exc_info=(type(fault), fault, fault.__traceback__),
        )
    else:
        logger.warning("Request rejected with %s: %s", classified.code, classified.message)

    envelope = build_error(
        classified.kind,
        classified.message,
        errors=classified.errors,
        details=classified.details,
        include_details=classified.details is not None,
    )
    return JSONResponse(status_code=status_for(classified.kind), content=envelope.to_payload())


def guard(handler: RouteHandler) -> RouteHandler:
    """Wrap a request handler so no fault escapes unstructured."""

    @functools.wraps(handler)
    async def guarded_handler(request: Request) -> Response:
        try:
            return await handler(request)
        except Exception as exc:
            return error_response(exc)

    return guarded_handler


class GuardedRoute(APIRoute):
    """APIRoute whose request handler runs behind :func:`guard`.

    Body and query validation happen inside the route handler, so request
    validation faults are funneled through the same envelope.
    """

    def get_route_handler(self) -> RouteHandler:
        return guard(super().get_route_handler())


async def _handle_unrouted_error(_: Request, exc: Exception) -> JSONResponse:
    return error_response(exc)


def register_error_handlers(app: FastAPI) -> None:
    """Cover faults raised outside guarded routes (unknown paths, bad methods)."""
    app.add_exception_handler(RequestValidationError, _handle_unrouted_error)
    app.add_exception_handler(StarletteHTTPException, _handle_unrouted_error)
    app.add_exception_handler(Exception, _handle_unrouted_error)
