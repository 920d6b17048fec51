"""Unit tests for intervalkit logging helpers."""

from __future__ import annotations

import logging
import sys

import pytest

import intervalkit
from intervalkit.utils.logging import LOGGER_NAME, configure_logging, get_logger


@pytest.fixture
def clean_logger():
    logger = logging.getLogger(LOGGER_NAME)
    saved_handlers = logger.handlers[:]
    saved_level = logger.level
    for h in saved_handlers:
        logger.removeHandler(h)
    yield logger
    for h in logger.handlers[:]:
        logger.removeHandler(h)
    for h in saved_handlers:
        logger.addHandler(h)
    logger.setLevel(saved_level)


def _stderr_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [
        h for h in logger.handlers
        if isinstance(h, logging.StreamHandler) and h.stream is sys.stderr
    ]


def test_package_installs_null_handler() -> None:
    logger = logging.getLogger(LOGGER_NAME)
    assert any(isinstance(h, logging.NullHandler) for h in logger.handlers)
    assert intervalkit.__version__


def test_get_logger() -> None:
    assert get_logger().name == "intervalkit"
    assert get_logger("intervalkit.algorithms.islands").name == "intervalkit.algorithms.islands"


def test_configure_logging_adds_single_stderr_handler(clean_logger) -> None:
    configure_logging(level="DEBUG")
    configure_logging(level="DEBUG")
    assert len(_stderr_handlers(clean_logger)) == 1
    assert clean_logger.level == logging.DEBUG


def test_configure_logging_force_replaces_handler(clean_logger) -> None:
    configure_logging(level="INFO")
    configure_logging(level="WARNING", force=True)
    handlers = _stderr_handlers(clean_logger)
    assert len(handlers) == 1
    assert handlers[0].level == logging.WARNING


def test_configure_logging_reads_env(clean_logger, monkeypatch) -> None:
    monkeypatch.setenv("INTERVALKIT_LOG_LEVEL", "error")
    configure_logging()
    assert clean_logger.level == logging.ERROR


def test_tie_advisory_logged_not_raised(clean_logger, caplog) -> None:
    from intervalkit.algorithms.islands import coalesce
    from intervalkit.records import Interval

    with caplog.at_level(logging.DEBUG, logger="intervalkit"):
        islands = coalesce([Interval("a", 1, 3), Interval("a", 1, 5)])
    assert len(islands) == 1
    assert "share a start" in caplog.text


def test_configure_logging_accepts_numeric_and_unknown_levels(clean_logger) -> None:
    configure_logging(level=logging.WARNING)
    assert clean_logger.level == logging.WARNING
    configure_logging(level="not-a-level", force=True)
    assert clean_logger.level == logging.INFO
