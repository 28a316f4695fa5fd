"""Logging utilities for krylovtr.

Solvers obtain their loggers here so that verbosity can be controlled for the
whole package from a single place.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

# Default logging level
_DEFAULT_LEVEL = logging.WARNING

_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

# Module-level logger cache
_loggers: dict[str, logging.Logger] = {}


def _as_level(level: int | str) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.WARNING)
    return level


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get or create a logger for the given module name.

    Loggers are cached to avoid duplicate handlers. The logger name should
    typically be `__name__` from the calling module.

    Args:
        name: Logger name (typically `__name__`). If None, returns the
            package logger.

    Returns:
        Configured logger instance.

    Example:
        >>> from krylovtr.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.debug("switching to the boundary phase")
    """
    if name is None:
        name = "krylovtr"

    logger_name = (
        name if name == "krylovtr" or name.startswith("krylovtr.") else f"krylovtr.{name}"
    )

    if logger_name in _loggers:
        return _loggers[logger_name]

    logger = logging.getLogger(logger_name)

    # Only configure if not already configured (avoid duplicate handlers)
    if not logger.handlers:
        logger.setLevel(_DEFAULT_LEVEL)

        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(_DEFAULT_LEVEL)
        handler.setFormatter(logging.Formatter(_FORMAT))

        logger.addHandler(handler)
        logger.propagate = False

    _loggers[logger_name] = logger
    return logger


def set_log_level(level: int | str) -> None:
    """Set the logging level for all krylovtr loggers.

    Args:
        level: Logging level (logging.DEBUG, logging.INFO, etc.) or string
            ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL').
    """
    level = _as_level(level)

    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)

    global _DEFAULT_LEVEL
    _DEFAULT_LEVEL = level


def configure_logging(
    level: int | str = logging.WARNING,
    format_string: Optional[str] = None,
    stream: Optional[object] = None,
) -> None:
    """Configure logging for krylovtr.

    Replaces the handlers of every logger created so far. It should typically
    be called once at application startup.

    Args:
        level: Logging level (default: WARNING).
        format_string: Custom format string. If None, uses default.
        stream: Output stream (default: sys.stderr).

    Example:
        >>> from krylovtr.logging import configure_logging
        >>> import logging
        >>> configure_logging(level=logging.DEBUG)
    """
    level = _as_level(level)

    if stream is None:
        stream = sys.stderr

    formatter = logging.Formatter(format_string or _FORMAT)

    for logger in _loggers.values():
        logger.setLevel(level)
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        handler = logging.StreamHandler(stream)
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    global _DEFAULT_LEVEL
    _DEFAULT_LEVEL = level


__all__ = ["get_logger", "set_log_level", "configure_logging"]
