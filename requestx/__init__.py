"""requestx: a single asynchronous HTTP transfer, ready for a concurrent dispatcher."""

from __future__ import annotations

# Semantic version for package consumers.
__version__ = "0.1.0"

from . import config
from .exceptions import AlreadyCompletedError, ConfigurationError, RequestxError
from .handle import TransferHandle
from .logging import log_to_console
from .request import Listener, Outcome, Request

_log_level = config.log_level()
if _log_level is not None:
    log_to_console(_log_level)

__all__ = [
    "__version__",
    "AlreadyCompletedError",
    "ConfigurationError",
    "Listener",
    "Outcome",
    "Request",
    "RequestxError",
    "TransferHandle",
    "log_to_console",
]
