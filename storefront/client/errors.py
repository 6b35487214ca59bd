"""Client-side error type, shared error channel, and retry summaries."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import threading
from typing import Any

import requests

from storefront.core.errors import is_retryable_kind
from storefront.core.errors import is_retryable_status
from storefront.core.errors import parse_kind

DEFAULT_CLIENT_ERROR_CODE = "client_error"
DEFAULT_CLIENT_STATUS_CODE = 400


class ApiError(Exception):
    """Normalized failure surfaced to client code."""

    def __init__(
        self,
        message: str,
        status_code: int,
        code: str,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details

    def __repr__(self) -> str:
        return f"ApiError(message={self.message!r}, status_code={self.status_code}, code={self.code!r})"


ErrorListener = Callable[[BaseException | None], None]


class ErrorChannel:
    """Single-slot holder for the error currently shown to the user.

    A new error overwrites the previous one; nothing is queued. One
    presentation listener may subscribe to be told about every change.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._current: BaseException | None = None
        self._listener: ErrorListener | None = None

    @property
    def current_error(self) -> BaseException | None:
        return self._current

    def set_error(self, error: BaseException | None) -> None:
        with self._lock:
            self._current = error
            listener = self._listener
        if listener is not None:
            listener(error)

    def show_error(
        self,
        message: str,
        code: str = DEFAULT_CLIENT_ERROR_CODE,
        status_code: int = DEFAULT_CLIENT_STATUS_CODE,
    ) -> ApiError:
        error = ApiError(message, status_code, code)
        self.set_error(error)
        return error

    def clear_error(self) -> None:
        self.set_error(None)

    def subscribe(self, listener: ErrorListener) -> Callable[[], None]:
        """Register the presentation listener, replacing any previous one."""
        with self._lock:
            self._listener = listener

        def unsubscribe() -> None:
            with self._lock:
                if self._listener is listener:
                    self._listener = None

        return unsubscribe


@dataclass(frozen=True)
class ErrorSummary:
    """What to tell the user about a failure, and whether retrying helps."""

    message: str
    retryable: bool
    code: str


def describe_error(error: BaseException, retry: Callable[[], Any] | None = None) -> ErrorSummary:
    """Summarize a client-side failure for display and retry decisions."""
    has_retry = retry is not None

    if isinstance(error, ApiError):
        kind = parse_kind(error.code)
        if error.status_code == 0:
            retryable = True
        elif kind is not None:
            retryable = is_retryable_kind(kind, default=has_retry)
        else:
            retryable = is_retryable_status(error.status_code, default=has_retry)
        return ErrorSummary(message=error.message, retryable=retryable, code=error.code)

    retryable = has_retry or isinstance(error, (requests.ConnectionError, requests.Timeout, TimeoutError))
    return ErrorSummary(
        message=str(error) or "An unexpected error occurred",
        retryable=retryable,
        code="unknown_error",
    )
