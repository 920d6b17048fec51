"""Interval algorithms.

Pure pandas/numpy implementations:

- islands: gaps-and-islands coalescing of per-entity intervals.
- at_risk: at-risk population counts (rolling event merge and grid cross-check).
"""

from intervalkit.algorithms.at_risk import (
    at_risk_grid,
    at_risk_grid_frame,
    at_risk_rolling,
    at_risk_rolling_frame,
    cross_check,
    regular_grid,
    tag_enrollment,
)
from intervalkit.algorithms.islands import coalesce, coalesce_frame, tag_islands

__all__ = [
    "at_risk_grid",
    "at_risk_grid_frame",
    "at_risk_rolling",
    "at_risk_rolling_frame",
    "coalesce",
    "coalesce_frame",
    "cross_check",
    "regular_grid",
    "tag_enrollment",
    "tag_islands",
]
