"""Exception hierarchy for requestx."""

from __future__ import annotations

__all__ = ["RequestxError", "ConfigurationError", "AlreadyCompletedError"]


class RequestxError(Exception):
    """Base class for errors raised by requestx."""


class ConfigurationError(RequestxError, ValueError):
    """Raised when a request is configured with a value it cannot use."""


class AlreadyCompletedError(RequestxError, RuntimeError):
    """Raised when a dispatcher reports completion for the same request twice."""
