"""
Gaps-and-islands interval coalescing — pure pandas/numpy.

Partitions each entity's (start, end) intervals into maximal chains of
overlapping intervals ("islands") and emits one (start, end) row per chain.

Steps:
  1. Validate: no null key/time, end >= start everywhere. One bad row rejects
     the whole batch, since it would corrupt the running maximum of its entity.
  2. Sort by (entity, start, event_id); without event_id, ties keep input order.
  3. Running fold per entity: max_prior_end = cummax(end) shifted by one row,
     seeded for the first row with that row's own end.
  4. is_new_island = start > max_prior_end (strict: touching intervals chain).
  5. island_id = cumsum(is_new_island) per entity, 0-based.
  6. Reduce per (entity, island_id): start = min, end = max.
"""

from __future__ import annotations

from typing import Optional

import numpy as np
import pandas as pd

from intervalkit.config import (
    IS_NEW_ISLAND_COL,
    ISLAND_ID_COL,
    MAX_PRIOR_END_COL,
    N_INTERVALS_COL,
    IntervalColumns,
)
from intervalkit.errors import InvalidInterval
from intervalkit.frames import DataLike, coerce_time_column, time_restorer, to_frame
from intervalkit.records import Island
from intervalkit.utils.logging import get_logger

logger = get_logger(__name__)


# -----------------------------------------------------------------------------
# Step 1: Validate
# -----------------------------------------------------------------------------


def validate_intervals(df: pd.DataFrame, columns: IntervalColumns) -> None:
    """
    Reject the batch if any interval is malformed.

    Raises:
        InvalidInterval: On a null entity/start/end, or any end < start.
    """
    required = columns.required()
    null_rows = df[required].isna().any(axis=1)
    if null_rows.any():
        first = df[null_rows].iloc[0].to_dict()
        raise InvalidInterval(
            f"{int(null_rows.sum())} interval(s) with a missing "
            f"{'/'.join(required)} value; first: {first}"
        )
    bad = df[columns.end_col] < df[columns.start_col]
    if bad.any():
        first = df[bad].iloc[0].to_dict()
        raise InvalidInterval(
            f"{int(bad.sum())} interval(s) with {columns.end_col} < {columns.start_col}; first: {first}"
        )


# -----------------------------------------------------------------------------
# Step 2: Sort
# -----------------------------------------------------------------------------


def sort_intervals(df: pd.DataFrame, columns: IntervalColumns) -> pd.DataFrame:
    """
    Sort by (entity, start[, event_id]) and reset the index.

    event_id is only used when the column exists and has no missing values;
    otherwise equal starts keep their input order (the multi-key sort is stable).
    """
    keys = [columns.entity_col, columns.start_col]
    ev = columns.event_col
    if ev is not None and ev in df.columns and df[ev].notna().all():
        keys.append(ev)
    df_s = df.sort_values(keys, kind="mergesort").reset_index(drop=True)

    ties = df_s.duplicated(subset=[columns.entity_col, columns.start_col])
    if ties.any():
        # advisory only: equal starts merge into the same island either way
        logger.debug("%d interval(s) share a start with an earlier interval of the same entity", int(ties.sum()))
    return df_s


# -----------------------------------------------------------------------------
# Steps 3-5: Running fold (max_prior_end, is_new_island, island_id)
# -----------------------------------------------------------------------------


def tag_islands(
    data: DataLike,
    columns: Optional[IntervalColumns] = None,
) -> pd.DataFrame:
    """
    Tag every interval with its island.

    Args:
        data: Interval rows (see intervalkit.frames.to_frame).
        columns: Column names; defaults to IntervalColumns().

    Returns:
        Sorted copy of the input with three extra columns:
          - 'max_prior_end': max end over earlier intervals of the entity
            (first row: its own end).
          - 'is_new_island': start > max_prior_end.
          - 'island_id': 0-based island number within the entity.

    Raises:
        InvalidInterval: See validate_intervals().
    """
    cols = columns or IntervalColumns()
    df = to_frame(data, cols.required())
    if df.empty:
        for c in (MAX_PRIOR_END_COL, IS_NEW_ISLAND_COL, ISLAND_ID_COL):
            df[c] = pd.Series(dtype=object)
        return df

    df[cols.start_col] = coerce_time_column(df[cols.start_col])
    df[cols.end_col] = coerce_time_column(df[cols.end_col])
    validate_intervals(df, cols)

    df_s = sort_intervals(df, cols)
    entity = df_s[cols.entity_col]
    end = df_s[cols.end_col]

    running_end = end.groupby(entity, sort=False).cummax().to_numpy()
    end_vals = end.to_numpy()
    # max_prior_end keeps the dtype of end (no float64 round trip)
    prior = np.empty_like(running_end)
    prior[1:] = running_end[:-1]
    # seed: first interval of each entity compares against its own end
    first = entity.ne(entity.shift()).to_numpy()
    prior[first] = end_vals[first]
    max_prior_end = pd.Series(prior, index=df_s.index, name=MAX_PRIOR_END_COL)

    is_new = df_s[cols.start_col] > max_prior_end
    df_s[MAX_PRIOR_END_COL] = max_prior_end
    df_s[IS_NEW_ISLAND_COL] = is_new
    df_s[ISLAND_ID_COL] = is_new.astype(int).groupby(entity, sort=False).cumsum()
    return df_s


# -----------------------------------------------------------------------------
# Step 6: Reduce per island
# -----------------------------------------------------------------------------


def coalesce_frame(
    data: DataLike,
    columns: Optional[IntervalColumns] = None,
) -> pd.DataFrame:
    """
    Coalesce intervals into islands.

    Returns:
        DataFrame with columns [entity, 'island_id', start, end, 'n_intervals'],
        ordered by entity then island_id. Empty input gives an empty frame.
    """
    cols = columns or IntervalColumns()
    out_cols = [cols.entity_col, ISLAND_ID_COL, cols.start_col, cols.end_col, N_INTERVALS_COL]

    tagged = tag_islands(data, cols)
    if tagged.empty:
        return pd.DataFrame(columns=out_cols)

    islands = (
        tagged.groupby([cols.entity_col, ISLAND_ID_COL], sort=True)
        .agg(**{
            cols.start_col: (cols.start_col, "min"),
            cols.end_col: (cols.end_col, "max"),
            N_INTERVALS_COL: (cols.start_col, "size"),
        })
        .reset_index()
    )
    logger.debug(
        "coalesced %d intervals into %d islands across %d entities",
        len(tagged),
        len(islands),
        islands[cols.entity_col].nunique(),
    )
    return islands[out_cols]


def coalesce(intervals: DataLike) -> list[Island]:
    """
    Record-level coalescing: intervals in, Island records out.

    Accepts Interval records, dicts with the same keys, or a frame using the
    default IntervalColumns names. Calendar-date input yields date output.

    Example: intervals (1, 10), (5, 8), (20, 25) of one entity give islands
    (1, 10, island_id=0) and (20, 25, island_id=1); (5, 8) is nested in the first.
    """
    cols = IntervalColumns()
    df = to_frame(intervals, cols.required())
    restore = time_restorer(df[cols.start_col])
    islands = coalesce_frame(df, cols)
    return [
        Island(
            entity_id=row[cols.entity_col],
            island_id=int(row[ISLAND_ID_COL]),
            start=restore(row[cols.start_col]),
            end=restore(row[cols.end_col]),
            n_intervals=int(row[N_INTERVALS_COL]),
        )
        for row in islands.to_dict(orient="records")
    ]


# -----------------------------------------------------------------------------
# Example
# -----------------------------------------------------------------------------


def _example_frame() -> pd.DataFrame:
    """Two patients; p2's second stay is nested inside its first."""
    return pd.DataFrame({
        "entity_id": ["p1", "p1", "p1", "p1", "p2", "p2", "p2"],
        "event_id": [1, 2, 3, 4, 1, 2, 3],
        "start": pd.to_datetime([
            "2021-01-01", "2021-01-05", "2021-01-10", "2021-02-01",
            "2021-03-01", "2021-03-02", "2021-03-20",
        ]),
        "end": pd.to_datetime([
            "2021-01-07", "2021-01-09", "2021-01-15", "2021-02-03",
            "2021-03-15", "2021-03-05", "2021-03-21",
        ]),
    })


if __name__ == "__main__":
    df = _example_frame()
    print("Tagged intervals:")
    print(tag_islands(df).to_string())
    print()
    print("Islands:")
    print(coalesce_frame(df).to_string())
