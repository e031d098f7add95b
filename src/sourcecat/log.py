"""Logging setup for the sourcecat CLI.

Library modules only call ``logging.getLogger(__name__)``; handlers are
attached here, once per CLI invocation, to the ``sourcecat`` logger so that
stdout stays pure NDJSON.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_HANDLER: Optional[logging.Handler] = None


def configure_logging(
    level: str | int = "WARNING", stream: Optional[TextIO] = None
) -> None:
    """Send sourcecat logs at ``level`` and above to ``stream`` (stderr by default).

    Calling it again replaces the previous handler instead of stacking a new one.
    """
    global _HANDLER

    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown log level: {level!r}")
        level = resolved

    logger = logging.getLogger("sourcecat")
    logger.setLevel(level)
    if _HANDLER is not None:
        logger.removeHandler(_HANDLER)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    _HANDLER = handler


def reset_logging() -> None:
    """Detach the handler installed by configure_logging (primarily for tests)."""
    global _HANDLER

    logger = logging.getLogger("sourcecat")
    if _HANDLER is not None:
        logger.removeHandler(_HANDLER)
        _HANDLER = None
    logger.setLevel(logging.NOTSET)


__all__ = ["LEVELS", "configure_logging", "reset_logging"]
