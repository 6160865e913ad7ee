"""Environment-driven settings for requestx, with optional .env loading."""

from __future__ import annotations

import logging
import math
import os
from functools import lru_cache
from typing import Optional

from dotenv import find_dotenv, load_dotenv

from .exceptions import ConfigurationError

ENV_FILE_ENV = "REQUESTX_ENV_FILE"
STRICT_ENV = "REQUESTX_STRICT"
DEFAULT_TIMEOUT_ENV = "REQUESTX_DEFAULT_TIMEOUT_MS"
LOG_LEVEL_ENV = "REQUESTX_LOG_LEVEL"


@lru_cache(maxsize=None)
def load_environment(env_file: Optional[str] = None) -> bool:
    """Load requestx settings from a dotenv file, once per file per process.

    ``REQUESTX_ENV_FILE`` names the file; otherwise the nearest ``.env`` found
    from the working directory upwards is used. Variables that are already set
    are left alone.
    """

    path = env_file or os.environ.get(ENV_FILE_ENV) or find_dotenv(usecwd=True)
    if not path:
        return False
    return load_dotenv(path, override=False)


def _setting(name: str) -> str:
    load_environment()
    return os.environ.get(name, "").strip()


def strict_mode() -> bool:
    """Whether rejected configuration raises instead of being ignored."""

    return _setting(STRICT_ENV).lower() == "true"


def default_timeout_ms() -> Optional[float]:
    raw = _setting(DEFAULT_TIMEOUT_ENV)
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{DEFAULT_TIMEOUT_ENV} must be a number, got {raw!r}") from exc
    if not math.isfinite(value) or value <= 0:
        raise ConfigurationError(f"{DEFAULT_TIMEOUT_ENV} must be positive, got {raw!r}")
    return value


def log_level() -> Optional[int]:
    """Console log level for the ``requestx`` loggers, or None to stay silent."""

    raw = _setting(LOG_LEVEL_ENV)
    if not raw:
        return None
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    if not isinstance(level, int):
        raise ConfigurationError(f"{LOG_LEVEL_ENV} is not a logging level: {raw!r}")
    return level


__all__ = [
    "DEFAULT_TIMEOUT_ENV",
    "ENV_FILE_ENV",
    "LOG_LEVEL_ENV",
    "STRICT_ENV",
    "default_timeout_ms",
    "load_environment",
    "log_level",
    "strict_mode",
]
