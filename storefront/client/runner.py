"""Request-state tracking around one remote action."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
import logging
import threading
from typing import Any
from typing import Generic
from typing import TypeVar

import requests

from storefront.client.errors import ApiError
from storefront.client.errors import ErrorChannel
from storefront.client.http import StorefrontTransportError
from storefront.schemas.envelope import Envelope

logger = logging.getLogger(__name__)

T = TypeVar("T")
P = TypeVar("P")

FALLBACK_STATUS_CODE = 400
NETWORK_STATUS_CODE = 0
UNKNOWN_STATUS_CODE = 500


class RequestState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


def error_from_envelope(envelope: Envelope[Any]) -> ApiError:
    """Build the client error for a failed envelope.

    Envelopes carry no transport status, so the status code is always the
    fixed fallback; the error code keeps the server's error kind.
    """
    error = envelope.error
    return ApiError(
        envelope.message or "Operation failed",
        FALLBACK_STATUS_CODE,
        error.code if error is not None and error.code else "unknown_error",
        error.details if error is not None else None,
    )


def normalize_error(exc: BaseException) -> ApiError:
    if isinstance(exc, ApiError):
        return exc
    if isinstance(exc, (requests.RequestException, StorefrontTransportError)):
        return ApiError(str(exc) or "Network request failed", NETWORK_STATUS_CODE, "network_error")
    return ApiError(str(exc) or "Unknown error occurred", UNKNOWN_STATUS_CODE, "unknown_error")


class ActionRunner(Generic[T, P]):
    """Run a remote action and track its request lifecycle.

    Every ``execute`` call starts a new generation. When calls overlap, only
    the most recent one may update state, fire callbacks, or publish to the
    error channel; older resolutions are still returned (or raised) to their
    own caller.
    """

    def __init__(
        self,
        action: Callable[[P], Envelope[T]],
        *,
        on_success: Callable[[T], None] | None = None,
        on_error: Callable[[ApiError], None] | None = None,
        show_global_error: bool = True,
        channel: ErrorChannel | None = None,
    ) -> None:
        self._action = action
        self._on_success = on_success
        self._on_error = on_error
        self._show_global_error = show_global_error
        self._channel = channel

        self._lock = threading.Lock()
        self._generation = 0
        self._state = RequestState.IDLE
        self._data: T | None = None
        self._error: ApiError | None = None

    @property
    def state(self) -> RequestState:
        return self._state

    @property
    def data(self) -> T | None:
        return self._data

    @property
    def error(self) -> ApiError | None:
        return self._error

    @property
    def is_loading(self) -> bool:
        return self._state is RequestState.LOADING

    @property
    def is_success(self) -> bool:
        return self._state is RequestState.SUCCESS

    @property
    def is_error(self) -> bool:
        return self._state is RequestState.ERROR

    def execute(self, params: P) -> T:
        """Invoke the action; return its data or raise a normalized ApiError."""
        with self._lock:
            self._generation += 1
            generation = self._generation
            self._state = RequestState.LOADING
            self._error = None

        try:
            envelope = self._action(params)
            if not envelope.success:
                raise error_from_envelope(envelope)
            data = envelope.data
            # a raising on_success fails the call like the action itself
            self._succeed(generation, data)
        except Exception as exc:
            error = normalize_error(exc)
            self._fail(generation, error)
            if error is exc:
                raise
            raise error from exc
        return data

    def reset(self) -> None:
        """Return to idle from any state; pending resolutions become stale."""
        with self._lock:
            self._generation += 1
            self._state = RequestState.IDLE
            self._data = None
            self._error = None

    def _succeed(self, generation: int, data: T | None) -> None:
        with self._lock:
            if generation != self._generation:
                logger.debug("Discarding stale success for generation %s", generation)
                return
            self._state = RequestState.SUCCESS
            self._data = data

        if self._on_success is not None:
            self._on_success(data)

    def _fail(self, generation: int, error: ApiError) -> None:
        with self._lock:
            if generation != self._generation:
                logger.debug("Discarding stale failure for generation %s", generation)
                return
            self._state = RequestState.ERROR
            self._error = error

        if self._show_global_error and self._channel is not None:
            self._channel.set_error(error)
        if self._on_error is not None:
            try:
                self._on_error(error)
            except Exception:
                logger.exception("on_error callback failed for %s", error.code)
