"""Unit tests for column configuration and record types."""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from intervalkit.config import IntervalColumns, SpanColumns
from intervalkit.records import Interval, Island, ObservationPoint, Span


def test_interval_columns_defaults() -> None:
    cols = IntervalColumns()
    assert cols.required() == ["entity_id", "start", "end"]
    assert cols.event_col == "event_id"


def test_interval_columns_from_dict_ignores_unknown_keys() -> None:
    cols = IntervalColumns.from_dict({"entity_col": "patient", "color": "red"})
    assert cols.entity_col == "patient"
    assert cols.start_col == "start"
    assert IntervalColumns.from_dict(cols.to_dict()) == cols


def test_span_columns_round_trip() -> None:
    cols = SpanColumns(entity_col="pid", entry_col="enrolled", exit_col="died")
    assert cols.required() == ["pid", "enrolled", "died"]
    assert SpanColumns.from_dict(cols.to_dict()) == cols
    assert SpanColumns.from_dict({}) == SpanColumns()


def test_records_are_frozen() -> None:
    iv = Interval("a", 1, 2)
    with pytest.raises(FrozenInstanceError):
        iv.start = 0  # type: ignore[misc]


def test_record_dicts() -> None:
    assert Interval.from_dict({"entity_id": "a", "start": 1, "end": 2}) == Interval("a", 1, 2)
    assert Span.from_dict(Span("a", 1, 2).to_dict()) == Span("a", 1, 2)
    assert ObservationPoint(time=1, count=2, n_enroll=2, n_lost=0).to_dict() == {
        "time": 1,
        "count": 2,
        "n_enroll": 2,
        "n_lost": 0,
    }


def test_island_as_interval() -> None:
    island = Island(entity_id="a", island_id=3, start=1, end=9, n_intervals=2)
    assert island.as_interval() == Interval("a", 1, 9, event_id=3)
