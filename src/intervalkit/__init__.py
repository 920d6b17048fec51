"""
intervalkit: gaps-and-islands coalescing and at-risk population counts.

This package provides:
- coalesce / coalesce_frame: merge each entity's overlapping intervals into islands
- at_risk_rolling / at_risk_grid: count entities under observation over time
- cross_check: compare the two counting methods at chosen instants
- Logging utilities for library and script use

For logging output in standalone scripts:
    ```python
    from intervalkit.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```

When used as a library, logging is handled by the application's configuration.
"""

import logging

from intervalkit.utils.logging import configure_logging, get_logger

from intervalkit.algorithms import (
    at_risk_grid,
    at_risk_grid_frame,
    at_risk_rolling,
    at_risk_rolling_frame,
    coalesce,
    coalesce_frame,
    cross_check,
    regular_grid,
    tag_enrollment,
    tag_islands,
)
from intervalkit.config import IntervalColumns, SpanColumns
from intervalkit.errors import DuplicateEntity, IntervalError, InvalidInterval
from intervalkit.records import Interval, Island, ObservationPoint, Span

# NullHandler so logs don't reach the root logger unless an application
# (or configure_logging()) installs a real handler.
_logger = logging.getLogger("intervalkit")
if not _logger.handlers:
    _logger.addHandler(logging.NullHandler())

__all__ = [
    "DuplicateEntity",
    "Interval",
    "IntervalColumns",
    "IntervalError",
    "InvalidInterval",
    "Island",
    "ObservationPoint",
    "Span",
    "SpanColumns",
    "at_risk_grid",
    "at_risk_grid_frame",
    "at_risk_rolling",
    "at_risk_rolling_frame",
    "coalesce",
    "coalesce_frame",
    "configure_logging",
    "cross_check",
    "get_logger",
    "regular_grid",
    "tag_enrollment",
    "tag_islands",
]

__version__ = "0.1.0"
