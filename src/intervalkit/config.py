"""Column configuration for interval and span frames.

Frames passed to the algorithms are addressed by column name. The defaults
match the field names of the record types in intervalkit.records, so
list-of-records input needs no configuration.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Optional

# Output columns added by the algorithms.
ISLAND_ID_COL = "island_id"
N_INTERVALS_COL = "n_intervals"
MAX_PRIOR_END_COL = "max_prior_end"
IS_NEW_ISLAND_COL = "is_new_island"
TIME_COL = "time"
COUNT_COL = "count"
N_ENROLL_COL = "n_enroll"
N_LOST_COL = "n_lost"


def _from_known_keys(cls, data: dict[str, Any]):
    known = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in data.items() if k in known})


@dataclass
class IntervalColumns:
    """Column names for an interval frame.

    Attributes:
        entity_col: Grouping key; islands never span two entities.
        start_col: Interval start.
        end_col: Interval end (must be >= start).
        event_col: Per-entity ordinal used to break ties on equal start.
            None, or a name absent from the frame, means ties keep input order.
    """

    entity_col: str = "entity_id"
    start_col: str = "start"
    end_col: str = "end"
    event_col: Optional[str] = "event_id"

    def required(self) -> list[str]:
        """Columns that must be present in the input frame."""
        return [self.entity_col, self.start_col, self.end_col]

    def to_dict(self) -> dict[str, Any]:
        return {
            "entity_col": self.entity_col,
            "start_col": self.start_col,
            "end_col": self.end_col,
            "event_col": self.event_col,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "IntervalColumns":
        """Build from a dict; unknown keys are ignored, missing keys default."""
        return _from_known_keys(cls, data)


@dataclass
class SpanColumns:
    """Column names for a span (enrollment) frame.

    Attributes:
        entity_col: Entity key, unique per row.
        entry_col: Time the entity becomes at risk.
        exit_col: Time the entity leaves (must be > entry).
    """

    entity_col: str = "entity_id"
    entry_col: str = "entry"
    exit_col: str = "exit"

    def required(self) -> list[str]:
        return [self.entity_col, self.entry_col, self.exit_col]

    def to_dict(self) -> dict[str, Any]:
        return {
            "entity_col": self.entity_col,
            "entry_col": self.entry_col,
            "exit_col": self.exit_col,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SpanColumns":
        """Build from a dict; unknown keys are ignored, missing keys default."""
        return _from_known_keys(cls, data)
