"""
At-risk population counts — pure pandas/numpy.

Two methods over a set of (entity, entry, exit) spans:

Rolling (event merge), one row per distinct entry time:
  1. Stable sort by entry; ties keep input (enrollment) order.
  2. n_enroll[i] = i + 1.
  3. n_lost[i] = number of spans, over the whole set, with exit <= entry[i]
     (binary search on the sorted exit times).
  4. count = n_enroll - n_lost.
  5. Keep the last row per distinct entry time.
  Exit is treated as exclusive: an entity leaving at t is not counted at t.
  Exits strictly between two entry times only show up at the next entry row.

Grid (cross-check), one row per requested instant t:
  count(t) = |{s : s.entry <= t <= s.exit}|, inclusive at both ends.
  The two conventions differ at exit instants and are deliberately kept apart;
  cross_check() reports where they are comparable.
"""

from __future__ import annotations

from typing import Any, Iterable, Literal, Optional

import numpy as np
import pandas as pd

from intervalkit.config import COUNT_COL, N_ENROLL_COL, N_LOST_COL, TIME_COL, SpanColumns
from intervalkit.errors import DuplicateEntity, InvalidInterval
from intervalkit.frames import DataLike, coerce_time_column, time_restorer, to_frame
from intervalkit.records import ObservationPoint
from intervalkit.utils.logging import get_logger

logger = get_logger(__name__)

GridMethod = Literal["searchsorted", "cross"]

ROLLING_COLUMNS = [TIME_COL, N_ENROLL_COL, N_LOST_COL, COUNT_COL]
CROSS_CHECK_COLUMNS = [
    TIME_COL, "rolling", "grid", "exits_at_time", "is_entry_time", "comparable", "agrees",
]


# -----------------------------------------------------------------------------
# Validation and preparation
# -----------------------------------------------------------------------------


def validate_spans(df: pd.DataFrame, columns: SpanColumns) -> None:
    """
    Reject the batch if any span is malformed.

    Raises:
        InvalidInterval: On a null entity/entry/exit, or any exit <= entry.
        DuplicateEntity: If an entity has more than one span.
    """
    required = columns.required()
    null_rows = df[required].isna().any(axis=1)
    if null_rows.any():
        first = df[null_rows].iloc[0].to_dict()
        raise InvalidInterval(
            f"{int(null_rows.sum())} span(s) with a missing "
            f"{'/'.join(required)} value; first: {first}"
        )
    bad = df[columns.exit_col] <= df[columns.entry_col]
    if bad.any():
        first = df[bad].iloc[0].to_dict()
        raise InvalidInterval(
            f"{int(bad.sum())} span(s) with {columns.exit_col} <= {columns.entry_col}; first: {first}"
        )
    dup = df[columns.entity_col].duplicated()
    if dup.any():
        ids = df.loc[dup, columns.entity_col].unique().tolist()
        raise DuplicateEntity(f"entities with more than one span: {ids[:10]}")


def _prepare_spans(data: DataLike, cols: SpanColumns) -> pd.DataFrame:
    df = to_frame(data, cols.required())
    if df.empty:
        return df
    df[cols.entry_col] = coerce_time_column(df[cols.entry_col])
    df[cols.exit_col] = coerce_time_column(df[cols.exit_col])
    validate_spans(df, cols)
    return df


def _searchsorted(sorted_values: np.ndarray, values: np.ndarray, side: str) -> np.ndarray:
    """np.searchsorted with datetime64 queries cast to the array's unit."""
    if np.issubdtype(sorted_values.dtype, np.datetime64):
        values = np.asarray(values).astype(sorted_values.dtype)
    return np.searchsorted(sorted_values, values, side=side)


def _grid_values(grid: Iterable[Any], like: pd.Series) -> np.ndarray:
    """Deduplicate grid instants (first-seen order) in the dtype of `like`."""
    values = list(dict.fromkeys(grid))
    if pd.api.types.is_datetime64_any_dtype(like):
        return pd.to_datetime(values).to_numpy()
    return np.asarray(values)


# -----------------------------------------------------------------------------
# Rolling variant
# -----------------------------------------------------------------------------


def tag_enrollment(
    data: DataLike,
    columns: Optional[SpanColumns] = None,
) -> pd.DataFrame:
    """
    Per-span enrollment table, before collapsing to distinct entry times.

    Returns:
        Spans sorted by entry (stable) with 'n_enroll' (1-based rank),
        'n_lost' (spans with exit <= this entry) and 'count' (difference).

    Raises:
        InvalidInterval, DuplicateEntity: See validate_spans().
    """
    cols = columns or SpanColumns()
    df = _prepare_spans(data, cols)
    if df.empty:
        for c in (N_ENROLL_COL, N_LOST_COL, COUNT_COL):
            df[c] = pd.Series(dtype="int64")
        return df

    df_s = df.sort_values(cols.entry_col, kind="mergesort").reset_index(drop=True)
    exits = np.sort(df_s[cols.exit_col].to_numpy())
    n_enroll = np.arange(1, len(df_s) + 1, dtype="int64")
    n_lost = _searchsorted(exits, df_s[cols.entry_col].to_numpy(), side="right").astype("int64")

    df_s[N_ENROLL_COL] = n_enroll
    df_s[N_LOST_COL] = n_lost
    df_s[COUNT_COL] = n_enroll - n_lost
    return df_s


def at_risk_rolling_frame(
    data: DataLike,
    columns: Optional[SpanColumns] = None,
) -> pd.DataFrame:
    """
    At-risk count at each distinct entry time.

    Returns:
        DataFrame with columns ['time', 'n_enroll', 'n_lost', 'count'], strictly
        ascending in time. Empty input gives an empty frame.
    """
    cols = columns or SpanColumns()
    tagged = tag_enrollment(data, cols)
    if tagged.empty:
        return pd.DataFrame(columns=ROLLING_COLUMNS)

    out = tagged.rename(columns={cols.entry_col: TIME_COL})[ROLLING_COLUMNS]
    out = out.drop_duplicates(subset=[TIME_COL], keep="last").reset_index(drop=True)
    logger.debug("rolling at-risk: %d spans, %d distinct entry times", len(tagged), len(out))
    return out


def at_risk_rolling(spans: DataLike) -> list[ObservationPoint]:
    """
    Record-level rolling count: Span records (or dicts) in, ObservationPoints out.

    Example: spans (1, 50), (1, 40), (60, 90) give (time=1, count=2) and
    (time=60, count=1).
    """
    cols = SpanColumns()
    df = to_frame(spans, cols.required())
    restore = time_restorer(df[cols.entry_col])
    out = at_risk_rolling_frame(df, cols)
    return [
        ObservationPoint(
            time=restore(row[TIME_COL]),
            count=int(row[COUNT_COL]),
            n_enroll=int(row[N_ENROLL_COL]),
            n_lost=int(row[N_LOST_COL]),
        )
        for row in out.to_dict(orient="records")
    ]


# -----------------------------------------------------------------------------
# Grid variant
# -----------------------------------------------------------------------------


def at_risk_grid_frame(
    data: DataLike,
    grid: Iterable[Any],
    columns: Optional[SpanColumns] = None,
    *,
    method: GridMethod = "searchsorted",
) -> pd.DataFrame:
    """
    Count spans with entry <= t <= exit at each grid instant t.

    Args:
        data: Span rows.
        grid: Instants to evaluate; duplicates collapse (first-seen order kept).
        columns: Column names; defaults to SpanColumns().
        method: "searchsorted" counts #(entry <= t) - #(exit < t) with two
            binary searches. "cross" builds the full grid x spans product,
            filters by the containment predicate and groups by t.

    Returns:
        DataFrame with columns ['time', 'count'], one row per distinct instant.
    """
    cols = columns or SpanColumns()
    df = _prepare_spans(data, cols)
    if df.empty:
        values = list(dict.fromkeys(grid))
        return pd.DataFrame({TIME_COL: values, COUNT_COL: np.zeros(len(values), dtype="int64")})

    times = _grid_values(grid, df[cols.entry_col])

    if method == "searchsorted":
        entries = np.sort(df[cols.entry_col].to_numpy())
        exits = np.sort(df[cols.exit_col].to_numpy())
        counts = _searchsorted(entries, times, side="right") - _searchsorted(exits, times, side="left")
    elif method == "cross":
        g = pd.DataFrame({TIME_COL: times})
        pairs = g.merge(df[[cols.entry_col, cols.exit_col]], how="cross")
        hit = pairs[
            (pairs[cols.entry_col] <= pairs[TIME_COL]) & (pairs[TIME_COL] <= pairs[cols.exit_col])
        ]
        counts = hit.groupby(TIME_COL).size().reindex(g[TIME_COL], fill_value=0).to_numpy()
        logger.debug("grid cross join: %d pairs, %d inside", len(pairs), len(hit))
    else:
        raise ValueError(f"Unknown grid method {method!r}; expected 'searchsorted' or 'cross'")

    return pd.DataFrame({TIME_COL: times, COUNT_COL: np.asarray(counts, dtype="int64")})


def at_risk_grid(
    spans: DataLike,
    grid: Iterable[Any],
    *,
    method: GridMethod = "searchsorted",
) -> dict[Any, int]:
    """
    Record-level grid count: mapping from each grid instant (as given) to its count.
    """
    grid_values = list(dict.fromkeys(grid))
    out = at_risk_grid_frame(spans, grid_values, method=method)
    return {t: int(c) for t, c in zip(grid_values, out[COUNT_COL])}


def regular_grid(start: Any, stop: Any, step: Any) -> list[Any]:
    """
    Evenly spaced checkpoints start, start + step, ... up to and including stop.

    Works for ints/floats, and for dates or Timestamps with a timedelta step.

    Raises:
        ValueError: If step does not move forward.
    """
    if not start + step > start:
        raise ValueError(f"step must be positive, got {step!r}")
    out = []
    k = 0
    # point k is start + k * step
    t = start
    while t <= stop:
        out.append(t)
        k += 1
        t = start + k * step
    return out


# -----------------------------------------------------------------------------
# Cross-check report
# -----------------------------------------------------------------------------


def cross_check(
    data: DataLike,
    grid: Optional[Iterable[Any]] = None,
    columns: Optional[SpanColumns] = None,
) -> pd.DataFrame:
    """
    Compare the rolling and grid methods at a set of instants.

    Args:
        data: Span rows.
        grid: Instants to compare at; defaults to the distinct entry times.
        columns: Column names; defaults to SpanColumns().

    Returns:
        DataFrame with one row per instant and columns:
          - 'time'
          - 'rolling': rolling count as of the last entry time <= t (0 before
            the first entry)
          - 'grid': inclusive grid count at t
          - 'exits_at_time': spans exiting exactly at t
          - 'is_entry_time': t is one of the entry times
          - 'comparable': is_entry_time and no exit exactly at t; the two
            methods must agree on these rows
          - 'agrees': rolling == grid
    """
    cols = columns or SpanColumns()
    df = _prepare_spans(data, cols)
    rolling = at_risk_rolling_frame(df, cols)
    if grid is None:
        grid = rolling[TIME_COL].tolist()
    grid_df = at_risk_grid_frame(df, grid, cols)
    if grid_df.empty:
        return pd.DataFrame(columns=CROSS_CHECK_COLUMNS)

    times = grid_df[TIME_COL].to_numpy()
    if rolling.empty:
        roll_vals = np.zeros(len(times), dtype="int64")
        is_entry = np.zeros(len(times), dtype=bool)
        exits_at = np.zeros(len(times), dtype="int64")
    else:
        rt = rolling[TIME_COL].to_numpy()
        idx = _searchsorted(rt, times, side="right") - 1
        safe = np.clip(idx, 0, None)
        roll_vals = np.where(idx >= 0, rolling[COUNT_COL].to_numpy(dtype="int64")[safe], 0)
        is_entry = (idx >= 0) & (rt[safe] == times)
        exits = np.sort(df[cols.exit_col].to_numpy())
        exits_at = _searchsorted(exits, times, side="right") - _searchsorted(exits, times, side="left")

    grid_vals = grid_df[COUNT_COL].to_numpy()
    report = pd.DataFrame({
        TIME_COL: times,
        "rolling": roll_vals,
        "grid": grid_vals,
        "exits_at_time": exits_at,
        "is_entry_time": is_entry,
        "comparable": is_entry & (exits_at == 0),
        "agrees": roll_vals == grid_vals,
    })
    n_bad = int((report["comparable"] & ~report["agrees"]).sum())
    if n_bad:
        logger.warning("rolling and grid counts disagree at %d comparable instant(s)", n_bad)
    return report


# -----------------------------------------------------------------------------
# Example
# -----------------------------------------------------------------------------


def _example_frame() -> pd.DataFrame:
    return pd.DataFrame({
        "entity_id": ["a", "b", "c", "d", "e"],
        "entry": [1, 1, 10, 35, 60],
        "exit": [50, 40, 35, 70, 90],
    })


if __name__ == "__main__":
    df = _example_frame()
    print("Enrollment table:")
    print(tag_enrollment(df).to_string())
    print()
    print("Rolling at-risk counts:")
    print(at_risk_rolling_frame(df).to_string())
    print()
    print("Cross-check on a regular grid:")
    print(cross_check(df, regular_grid(0, 100, 10)).to_string())
