"""The Request entity: transfer configuration, completion and notification."""

from __future__ import annotations

import logging
import math
import numbers
import threading
import time
from collections.abc import Mapping
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Optional

from . import config
from .exceptions import AlreadyCompletedError, ConfigurationError
from .handle import (
    DEFAULT_OPTIONS,
    OPT_BODY,
    OPT_HEADERS,
    OPT_METHOD,
    OPT_TIMEOUT,
    TransferHandle,
    build_handle,
)
from .normalize import (
    HeaderInput,
    encode_payload,
    is_valid_header_line,
    is_valid_url,
    normalize_headers,
)

LOGGER = logging.getLogger(__name__)

TimeFunc = Callable[[], float]
Listener = Callable[["Request"], Any]

__all__ = ["Listener", "Outcome", "Request"]


class Outcome(str, Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class Request:
    """One configured HTTP transfer, executed and completed by a dispatcher.

    Configuration calls are expected before the request is handed over. The
    dispatcher calls :meth:`start_timer`, obtains the transfer via
    :meth:`get_handle`, and reports back exactly once through
    :meth:`complete`, which classifies the outcome and notifies listeners in
    registration order.

    Rejected configuration (malformed URL, unsafe header line, non-positive
    timeout, non-callable listener) is ignored unless ``strict`` is enabled,
    in which case it raises :class:`~requestx.exceptions.ConfigurationError`.
    ``strict=None`` reads the ``REQUESTX_STRICT`` environment setting.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        *,
        strict: Optional[bool] = None,
        time_func: TimeFunc = time.monotonic,
    ) -> None:
        self._strict = config.strict_mode() if strict is None else strict
        self._time_func = time_func
        self._url: Optional[str] = None
        self._post: dict[str, Any] = {}
        self._headers: list[str] = []
        self._options: dict[str, Any] = dict(DEFAULT_OPTIONS)
        self._timeout: Optional[float] = None
        self._start_time: Optional[float] = None
        self._end_time: Optional[float] = None
        self._outcome = Outcome.PENDING
        self._result: Any = None
        self._response: Any = None
        self._listeners: list[Listener] = []
        self._handle: Optional[TransferHandle] = None
        self._lock = threading.Lock()

        if url is not None:
            self.set_url(url)
        default_timeout = config.default_timeout_ms()
        if default_timeout is not None:
            self.set_timeout(default_timeout)

    def __repr__(self) -> str:
        return f"<Request {self._url or '(no url)'} [{self._outcome.value}]>"

    def _reject(self, message: str) -> None:
        if self._strict:
            raise ConfigurationError(message)
        LOGGER.debug("Ignoring rejected configuration: %s", message)

    # Configuration

    def set_url(self, url: str) -> None:
        if not is_valid_url(url):
            self._reject(f"malformed URL {url!r}")
            return
        self._url = url

    def set_post_data(self, values: Mapping[str, Any]) -> None:
        """Merge form fields; later values win and the whole body is re-encoded."""

        self._post.update(values)
        if self._post:
            self._options[OPT_METHOD] = "POST"
            self._options[OPT_BODY] = encode_payload(self._post)

    def set_headers(self, headers: HeaderInput) -> None:
        """Append header lines; malformed or unsafe lines are rejected."""

        accepted: list[str] = []
        for line in normalize_headers(headers):
            if is_valid_header_line(line):
                accepted.append(line)
            else:
                self._reject(f"invalid header line {line!r}")
        self._headers.extend(accepted)
        self._options[OPT_HEADERS] = list(self._headers)

    def set_options(self, options: Mapping[str, Any]) -> None:
        """Add engine options; keys that are already present keep their value."""

        for key, value in options.items():
            self._options.setdefault(key, value)

    def set_timeout(self, timeout: float) -> None:
        if isinstance(timeout, bool) or not isinstance(timeout, (numbers.Real, Decimal)):
            self._reject(f"timeout must be a number of milliseconds, got {timeout!r}")
            return
        seconds = float(timeout) / 1000.0
        if not math.isfinite(seconds) or seconds <= 0:
            self._reject(f"timeout must be a positive number of milliseconds, got {timeout!r}")
            return
        self._timeout = timeout
        self._options[OPT_TIMEOUT] = seconds

    def add_listener(self, listener: Listener) -> None:
        if not callable(listener):
            self._reject(f"listener {listener!r} is not callable")
            return
        self._listeners.append(listener)

    def get_handle(self) -> TransferHandle:
        """Return the transfer handle, building it from the options on first use."""

        with self._lock:
            if self._handle is None:
                if self._url is None:
                    raise ConfigurationError("cannot create a transfer handle without a URL")
                self._handle = build_handle(self._url, self._options)
            return self._handle

    # Execution lifecycle

    def start_timer(self) -> None:
        self._start_time = self._time_func()

    def stop_timer(self) -> None:
        self._end_time = self._time_func()

    def complete(self, result: Any, error_code: int, http_status: int, body: Any) -> None:
        """Record the outcome reported by the dispatcher and notify listeners.

        Anything other than a zero engine error code together with status 200
        is a failure; redirects and other 2xx statuses included.
        """

        with self._lock:
            if self._outcome is not Outcome.PENDING:
                raise AlreadyCompletedError(f"{self!r} has already completed")
            self.stop_timer()
            self._result = result
            if error_code != 0 or http_status != 200:
                self._outcome = Outcome.FAILED
            else:
                self._outcome = Outcome.SUCCEEDED
                self._response = body

        LOGGER.debug(
            "Request %s %s (engine error %s, HTTP %s) in %.3fs",
            self._url,
            self._outcome.value,
            error_code,
            http_status,
            self.elapsed,
        )
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                LOGGER.exception("Listener %r failed for %r", listener, self)

    # Read accessors

    @property
    def url(self) -> Optional[str]:
        return self._url

    @property
    def post_data(self) -> dict[str, Any]:
        return dict(self._post)

    @property
    def headers(self) -> list[str]:
        return list(self._headers)

    @property
    def options(self) -> dict[str, Any]:
        return dict(self._options)

    @property
    def timeout(self) -> Optional[float]:
        return self._timeout

    @property
    def listeners(self) -> tuple[Listener, ...]:
        return tuple(self._listeners)

    @property
    def start_time(self) -> Optional[float]:
        return self._start_time

    @property
    def end_time(self) -> Optional[float]:
        return self._end_time

    @property
    def elapsed(self) -> float:
        """Seconds between the timers, ``nan`` until both have fired."""

        if self._start_time is None or self._end_time is None:
            return math.nan
        return self._end_time - self._start_time

    @property
    def outcome(self) -> Outcome:
        return self._outcome

    @property
    def succeeded(self) -> bool:
        return self._outcome is Outcome.SUCCEEDED

    @property
    def completed(self) -> bool:
        return self._outcome is not Outcome.PENDING

    @property
    def result(self) -> Any:
        return self._result

    @property
    def response(self) -> Any:
        return self._response
