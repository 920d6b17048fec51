"""Record types consumed and produced by the record-level API.

All records are frozen; the algorithms build new ones and never mutate input.
Time fields accept any totally ordered value (int, float, date, datetime,
pandas.Timestamp).
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Hashable, Optional


@dataclass(frozen=True)
class Interval:
    """One (entity, start, end) interval; end >= start."""
    entity_id: Hashable
    start: Any
    end: Any
    event_id: Optional[int] = None  # tie-break ordinal within the entity

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Interval":
        return cls(
            entity_id=data["entity_id"],
            start=data["start"],
            end=data["end"],
            event_id=data.get("event_id"),
        )


@dataclass(frozen=True)
class Island:
    """A maximal chain of overlapping intervals of one entity.

    start is the earliest member start; end is the latest member end, which
    need not belong to the last member.
    """
    entity_id: Hashable
    island_id: int
    start: Any
    end: Any
    n_intervals: int = 1

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def as_interval(self) -> Interval:
        """View this island as an input interval (for re-coalescing)."""
        return Interval(
            entity_id=self.entity_id,
            start=self.start,
            end=self.end,
            event_id=self.island_id,
        )


@dataclass(frozen=True)
class Span:
    """Observation span of one entity; exit > entry."""
    entity_id: Hashable
    entry: Any
    exit: Any

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Span":
        return cls(
            entity_id=data["entity_id"],
            entry=data["entry"],
            exit=data["exit"],
        )


@dataclass(frozen=True)
class ObservationPoint:
    """At-risk count at one distinct entry time.

    count == n_enroll - n_lost, taken at the last span enrolled at `time`.
    """
    time: Any
    count: int
    n_enroll: int
    n_lost: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
