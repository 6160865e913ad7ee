"""Console output for the ``requestx`` logger hierarchy."""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Optional

from rich.logging import RichHandler

from .normalize import REDACTED, is_sensitive_header, redact_header_lines

LOGGER_NAME = "requestx"
HEADER_LINE_PATTERN = re.compile(r"^[!#$%&'*+.^_`|~0-9A-Za-z-]+:[^\r\n]*$")

_console_handler: Optional[logging.Handler] = None

__all__ = ["HeaderRedactionFilter", "LOGGER_NAME", "log_to_console"]


def _is_header_lines(value: object) -> bool:
    return (
        isinstance(value, (list, tuple))
        and bool(value)
        and all(isinstance(item, str) and HEADER_LINE_PATTERN.match(item) for item in value)
    )


class HeaderRedactionFilter(logging.Filter):
    """Redact credentials in header-line lists and header mappings passed as log arguments.

    Free-text string arguments are never rewritten.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.args, Mapping):
            record.args = {
                key: REDACTED if isinstance(key, str) and is_sensitive_header(key) else value
                for key, value in record.args.items()
            }
        elif isinstance(record.args, tuple):
            record.args = tuple(
                redact_header_lines(arg) if _is_header_lines(arg) else arg
                for arg in record.args
            )
        return True


def log_to_console(level: int = logging.DEBUG) -> logging.Handler:
    """Send ``requestx`` log records to a rich console, replacing an earlier console handler."""

    global _console_handler
    logger = logging.getLogger(LOGGER_NAME)
    if _console_handler is not None:
        logger.removeHandler(_console_handler)

    handler = RichHandler(rich_tracebacks=True, markup=False, show_path=False, level=level)
    handler.addFilter(HeaderRedactionFilter())
    logger.addHandler(handler)
    logger.setLevel(level)
    _console_handler = handler
    return handler
