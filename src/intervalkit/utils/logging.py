"""Logging helpers for intervalkit.

Modules log through ``get_logger(__name__)`` and never attach handlers.
Scripts that want to see the algorithms' DEBUG counts call
``configure_logging()``, which touches only the ``intervalkit`` logger.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional, Union

LOGGER_NAME = "intervalkit"
LOG_LEVEL_ENV = "INTERVALKIT_LOG_LEVEL"

DEFAULT_FMT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _resolve_level(level: Optional[Union[str, int]]) -> int:
    if level is None:
        level = os.environ.get(LOG_LEVEL_ENV, "INFO")
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return level


def configure_logging(
    level: Optional[Union[str, int]] = None,
    *,
    fmt: Optional[str] = None,
    datefmt: Optional[str] = None,
    force: bool = False,
) -> None:
    """Send intervalkit logs to stderr.

    Args:
        level: Level name or number; defaults to $INTERVALKIT_LOG_LEVEL, else INFO.
        fmt: Record format; defaults to DEFAULT_FMT.
        datefmt: Timestamp format; defaults to DEFAULT_DATEFMT.
        force: Replace existing handlers. Without it a second call is a no-op
            once a stderr handler is attached.
    """
    level = _resolve_level(level)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    if force:
        for h in logger.handlers[:]:
            h.close()
            logger.removeHandler(h)
    elif any(
        isinstance(h, logging.StreamHandler) and h.stream is sys.stderr
        for h in logger.handlers
    ):
        return

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(logging.Formatter(fmt=fmt or DEFAULT_FMT, datefmt=datefmt or DEFAULT_DATEFMT))
    logger.addHandler(console)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Named logger; the package logger when `name` is None."""
    return logging.getLogger(name or LOGGER_NAME)
