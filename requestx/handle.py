"""Native transfer handle built on a ``requests`` session."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

import requests

from . import __version__
from .normalize import fold_header_lines, redact_header_lines

LOGGER = logging.getLogger(__name__)

USER_AGENT = f"requestx/{__version__}"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

OPT_METHOD = "method"
OPT_BODY = "data"
OPT_HEADERS = "headers"
OPT_TIMEOUT = "timeout"
OPT_ALLOW_REDIRECTS = "allow_redirects"
OPT_STREAM = "stream"

# Options handed to ``Session.send`` untouched.
SEND_OPTIONS: tuple[str, ...] = (
    OPT_TIMEOUT,
    OPT_ALLOW_REDIRECTS,
    "verify",
    "cert",
    "proxies",
    OPT_STREAM,
)

DEFAULT_OPTIONS: Mapping[str, Any] = {
    OPT_ALLOW_REDIRECTS: False,
    OPT_STREAM: False,
}


@dataclass
class TransferHandle:
    """A prepared transfer: the session, the request and its send arguments."""

    session: requests.Session
    prepared: requests.PreparedRequest
    send_kwargs: dict[str, Any] = field(default_factory=dict)

    def send(self) -> requests.Response:
        return self.session.send(self.prepared, **self.send_kwargs)

    def close(self) -> None:
        self.session.close()


def create_session() -> requests.Session:
    session = requests.Session()
    session.headers.update({"User-Agent": USER_AGENT})
    return session


def build_handle(
    url: str,
    options: Mapping[str, Any],
    session: Optional[requests.Session] = None,
) -> TransferHandle:
    """Apply accumulated options to a fresh prepared request."""

    session = session or create_session()
    header_lines = list(options.get(OPT_HEADERS) or ())
    headers = fold_header_lines(header_lines)
    body = options.get(OPT_BODY)
    if body and "Content-Type" not in headers:
        headers["Content-Type"] = FORM_CONTENT_TYPE

    method = str(options.get(OPT_METHOD) or "GET").upper()
    prepared = session.prepare_request(
        requests.Request(method, url, headers=headers, data=body or None)
    )
    send_kwargs = {key: options[key] for key in SEND_OPTIONS if key in options}
    LOGGER.debug(
        "Created transfer handle %s %s headers=%s",
        method,
        url,
        redact_header_lines(header_lines),
    )
    return TransferHandle(session=session, prepared=prepared, send_kwargs=send_kwargs)


__all__ = [
    "DEFAULT_OPTIONS",
    "SEND_OPTIONS",
    "TransferHandle",
    "build_handle",
    "create_session",
]
