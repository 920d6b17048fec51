"""Unit tests for input normalization (records, pandas, polars, CSV)."""

from __future__ import annotations

import datetime as dt
from pathlib import Path

import pandas as pd
import pytest

from intervalkit.algorithms.islands import coalesce, coalesce_frame
from intervalkit.errors import InvalidInterval
from intervalkit.frames import (
    HAS_POLARS,
    coerce_time_column,
    load_csv,
    time_restorer,
    to_frame,
    to_polars,
)
from intervalkit.records import Interval

REQUIRED = ["entity_id", "start", "end"]


def test_to_frame_from_list_of_dicts() -> None:
    rows = [
        {"entity_id": "a", "start": 1, "end": 2},
        {"entity_id": "b", "start": 3, "end": 4},
    ]
    df = to_frame(rows, REQUIRED)
    assert df.to_dict(orient="records") == rows


def test_to_frame_from_records() -> None:
    df = to_frame([Interval("a", 1, 2, event_id=7)], REQUIRED)
    assert df.loc[0, "event_id"] == 7
    assert list(df.columns) == ["entity_id", "start", "end", "event_id"]


def test_to_frame_copies_pandas_input() -> None:
    src = pd.DataFrame({"entity_id": ["a"], "start": [1], "end": [2]})
    df = to_frame(src, REQUIRED)
    df.loc[0, "start"] = 99
    assert src.loc[0, "start"] == 1


def test_to_frame_empty_list_has_required_columns() -> None:
    df = to_frame([], REQUIRED)
    assert df.empty
    assert list(df.columns) == REQUIRED


def test_to_frame_missing_column_raises() -> None:
    with pytest.raises(ValueError, match="required column 'end'"):
        to_frame([{"entity_id": "a", "start": 1}], REQUIRED)


def test_to_frame_rejects_unsupported_types() -> None:
    with pytest.raises(TypeError, match="Unsupported data type"):
        to_frame({"entity_id": ["a"]}, REQUIRED)
    with pytest.raises(TypeError, match="mapping"):
        to_frame([("a", 1, 2)], REQUIRED)


def test_coerce_time_column() -> None:
    ints = pd.Series([1, 2], name="start")
    assert coerce_time_column(ints) is ints

    dates = pd.Series([dt.date(2020, 1, 1), dt.date(2020, 1, 2)], name="start")
    out = coerce_time_column(dates)
    assert pd.api.types.is_datetime64_any_dtype(out)

    junk = pd.Series([object(), object()], name="start")
    with pytest.raises(InvalidInterval, match="'start'"):
        coerce_time_column(junk)


def test_time_restorer() -> None:
    to_date = time_restorer([dt.date(2020, 1, 1)])
    assert to_date(pd.Timestamp("2020-01-05")) == dt.date(2020, 1, 5)

    same = time_restorer([dt.datetime(2020, 1, 1, 12)])
    ts = pd.Timestamp("2020-01-05 12:00")
    assert same(ts) is ts
    assert time_restorer([])(3) == 3


def test_load_csv(tmp_path: Path) -> None:
    path = tmp_path / "stays.csv"
    path.write_text(
        "entity_id,start,end\n"
        "p1,2021-01-01,2021-01-07\n"
        "p1,2021-01-05,2021-01-09\n"
    )
    df = load_csv(path, time_cols=["start", "end"])
    assert pd.api.types.is_datetime64_any_dtype(df["start"])
    out = coalesce_frame(df)
    assert len(out) == 1
    assert out.loc[0, "end"] == pd.Timestamp("2021-01-09")


def test_load_csv_missing_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="not found"):
        load_csv(tmp_path / "nope.csv")


@pytest.mark.skipif(not HAS_POLARS, reason="polars not installed")
def test_polars_input_and_output() -> None:
    import polars as pl

    src = pl.DataFrame({"entity_id": ["a", "a"], "start": [1, 5], "end": [10, 8]})
    islands = coalesce(src)
    assert [(i.start, i.end) for i in islands] == [(1, 10)]

    out = to_polars(coalesce_frame(src))
    assert isinstance(out, pl.DataFrame)
    assert out.shape == (1, 5)
    assert out["end"].to_list() == [10]
