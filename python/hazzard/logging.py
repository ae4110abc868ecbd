"""Structured logging for hazzard.

Thin facade over the standard library ``logging`` logger named
``"hazzard"``. Every function takes a message and optional structured fields
(a dict or a LogContext), rendered as ``key=value`` pairs after the message.

Example:
    >>> from hazzard import configure_logging, log_debug
    >>>
    >>> configure_logging("debug")
    >>> log_debug("Bound contract method", {"method": "notify", "message_key": "notice"})
"""

from __future__ import annotations

import logging
import os
from typing import Any

from .types import LogContext

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LOG_LEVEL_ENV = "HAZZARD_LOG_LEVEL"

logger = logging.getLogger("hazzard")


def configure_logging(level: str | None = None) -> None:
    """Attach a stream handler to the hazzard logger.

    Args:
        level: Level name (trace, debug, info, warn, error). Defaults to the
            HAZZARD_LOG_LEVEL environment variable, then ``info``.
    """
    level_name = (level or os.environ.get(LOG_LEVEL_ENV, "info")).upper()
    if level_name == "WARN":
        level_name = "WARNING"
    resolved = TRACE if level_name == "TRACE" else getattr(logging, level_name, logging.INFO)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S%z",
            )
        )
        logger.addHandler(handler)
    logger.setLevel(resolved)


def log_error(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log an ERROR level message with structured fields."""
    _log(logging.ERROR, message, fields)


def log_warn(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log a WARN level message with structured fields.

    Used for per-call failures (viewer not found, unresolved variables).
    """
    _log(logging.WARNING, message, fields)


def log_info(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log an INFO level message with structured fields."""
    _log(logging.INFO, message, fields)


def log_debug(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log a DEBUG level message with structured fields.

    Used for configuration-time events such as method binding.
    """
    _log(logging.DEBUG, message, fields)


def log_trace(message: str, fields: dict[str, Any] | LogContext | None = None) -> None:
    """Log a TRACE level message with structured fields.

    Used for per-resolver decisions inside the resolution engine.
    """
    _log(TRACE, message, fields)


def _log(level: int, message: str, fields: dict[str, Any] | LogContext | None) -> None:
    if not logger.isEnabledFor(level):
        return
    fields_dict = _normalize_fields(fields)
    if fields_dict:
        rendered = " ".join(f"{k}={v}" for k, v in fields_dict.items())
        message = f"{message} {rendered}"
    logger.log(level, message)


def _normalize_fields(
    fields: dict[str, Any] | LogContext | None,
) -> dict[str, str] | None:
    """Normalize fields to a dict of strings.

    Args:
        fields: Input fields as dict, LogContext, or None.

    Returns:
        Dict with string values, or None if no fields.
    """
    if fields is None:
        return None

    if isinstance(fields, LogContext):
        return {k: str(v) for k, v in fields.model_dump().items() if v is not None}

    return {k: str(v) for k, v in fields.items()}


__all__ = [
    "TRACE",
    "configure_logging",
    "log_error",
    "log_warn",
    "log_info",
    "log_debug",
    "log_trace",
]
