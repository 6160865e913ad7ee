"""Header, payload and URL normalization helpers."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from typing import Any, Union
from urllib.parse import urlencode, urlsplit

from requests.exceptions import InvalidHeader
from requests.structures import CaseInsensitiveDict
from requests.utils import check_header_validity

LOGGER = logging.getLogger(__name__)

SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*$")
WHITESPACE_PATTERN = re.compile(r"\s")
SENSITIVE_HEADERS = {"authorization", "proxy-authorization", "cookie", "set-cookie"}
REDACTED = "[redacted]"

HeaderInput = Union[Mapping[Any, Any], Iterable[str]]

__all__ = [
    "encode_payload",
    "fold_header_lines",
    "is_sensitive_header",
    "is_valid_header_line",
    "is_valid_url",
    "normalize_headers",
    "redact_header_lines",
]


def is_valid_url(value: object) -> bool:
    """Return True for an absolute URL with a scheme and a network location."""

    if not isinstance(value, str) or not value or WHITESPACE_PATTERN.search(value):
        return False
    try:
        parts = urlsplit(value)
        parts.port  # out-of-range ports raise ValueError
    except ValueError:
        return False
    if not SCHEME_PATTERN.fullmatch(parts.scheme):
        return False
    return bool(parts.netloc) and bool(parts.hostname)


def normalize_headers(headers: HeaderInput) -> list[str]:
    """Turn ``{"Name": "value"}`` entries into ``"Name: value"`` lines.

    Entries with a non-string key, and bare strings when an iterable of lines
    is supplied, are taken to be literal header lines already.
    """

    if isinstance(headers, Mapping):
        normalized: list[str] = []
        for key, value in headers.items():
            if isinstance(key, str):
                normalized.append(f"{key}: {value}")
            else:
                normalized.append(str(value))
        return normalized
    if isinstance(headers, str):
        return [headers]
    return [str(line) for line in headers]


def _flatten_payload(key: str, value: Any, pairs: list[tuple[str, Any]]) -> None:
    if value is None:
        return
    if isinstance(value, Mapping):
        for inner_key, item in value.items():
            _flatten_payload(f"{key}[{inner_key}]", item, pairs)
    elif isinstance(value, (list, tuple)):
        for index, item in enumerate(value):
            _flatten_payload(f"{key}[{index}]", item, pairs)
    elif isinstance(value, bool):
        pairs.append((key, "1" if value else "0"))
    else:
        pairs.append((key, value))


def encode_payload(values: Mapping[str, Any]) -> str:
    """Form-encode a payload, nesting mappings and sequences as ``key[sub]``.

    ``None`` entries are left out and booleans are sent as ``1``/``0``.
    """

    pairs: list[tuple[str, Any]] = []
    for key, value in values.items():
        _flatten_payload(str(key), value, pairs)
    return urlencode(pairs)


def _split_line(line: str) -> tuple[str, str] | None:
    name, sep, value = line.partition(":")
    name = name.strip()
    if not sep or not name:
        return None
    return name, value.strip()


def is_valid_header_line(line: str) -> bool:
    """Return True for a single ``Name: value`` line that is safe to send."""

    parsed = _split_line(line)
    if parsed is None:
        return False
    try:
        check_header_validity(parsed)
    except InvalidHeader:
        return False
    return True


def fold_header_lines(lines: Iterable[str]) -> CaseInsensitiveDict:
    """Collapse literal header lines into a header mapping.

    Repeated names keep every value, joined with ``", "`` in line order.
    """

    folded: CaseInsensitiveDict = CaseInsensitiveDict()
    for line in lines:
        parsed = _split_line(line)
        if parsed is None:
            LOGGER.warning("Skipping malformed header line %r", line)
            continue
        name, value = parsed
        if name in folded:
            folded[name] = f"{folded[name]}, {value}"
        else:
            folded[name] = value
    return folded


def is_sensitive_header(name: str) -> bool:
    lower = name.lower()
    if lower in SENSITIVE_HEADERS:
        return True
    return lower.startswith("x-") and any(
        token in lower for token in ("auth", "token", "key")
    )


def redact_header_lines(lines: Iterable[str]) -> list[str]:
    redacted: list[str] = []
    for line in lines:
        parsed = _split_line(line)
        if parsed is not None and is_sensitive_header(parsed[0]):
            redacted.append(f"{parsed[0]}: {REDACTED}")
        else:
            redacted.append(line)
    return redacted
