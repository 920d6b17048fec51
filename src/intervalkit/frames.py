"""Input normalization: records, pandas and polars frames to one pandas frame.

The algorithms operate on pandas DataFrames only. This module is the single
seam where list-of-dicts, list-of-records, pandas and polars input are
converted, and where calendar-date columns are turned into datetime64 so the
vectorized scans can compare them.
"""

from __future__ import annotations

import datetime as _dt
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any, Callable, Iterable, Mapping, Sequence, Union, TYPE_CHECKING

import pandas as pd

from intervalkit.errors import InvalidInterval
from intervalkit.utils.logging import get_logger

logger = get_logger(__name__)

# Optional polars
try:  # pragma: no cover - import guard
    import polars as _pl  # type: ignore[import]
    HAS_POLARS = True
except Exception:  # pragma: no cover - polars optional
    _pl = None  # type: ignore[assignment]
    HAS_POLARS = False

if TYPE_CHECKING:  # for type checkers only
    import polars as pl
else:  # runtime alias (may be None)
    pl = _pl  # type: ignore[assignment]


RowDict = dict[str, Any]
DataLike = Union[Sequence[Any], pd.DataFrame, "pl.DataFrame"]  # type: ignore[name-defined]


def to_frame(data: DataLike, required: Sequence[str]) -> pd.DataFrame:
    """Convert input data into a new pandas DataFrame.

    Args:
        data: List of mappings, list of dataclass records (Interval, Span, ...),
            a pandas DataFrame, or a polars DataFrame.
        required: Column names that must be present.

    Returns:
        A pandas DataFrame the caller may modify freely.

    Raises:
        TypeError: If the container or its rows are of an unsupported type.
        ValueError: If a required column is missing.
    """
    if isinstance(data, pd.DataFrame):
        df = data.copy()
    elif HAS_POLARS and pl is not None and isinstance(data, pl.DataFrame):
        if data.height == 0:
            df = pd.DataFrame(columns=list(data.columns))
        else:
            df = pd.DataFrame(data.to_dicts())
    elif isinstance(data, (list, tuple)):
        df = pd.DataFrame(_rows_from_sequence(data), columns=None if data else list(required))
    else:
        raise TypeError(
            "Unsupported data type. "
            "Expected list[dict], list of records, pandas.DataFrame, or polars.DataFrame."
        )

    for col in required:
        if col not in df.columns:
            raise ValueError(f"data must contain required column {col!r}")
    return df


def _rows_from_sequence(data: Sequence[Any]) -> list[RowDict]:
    rows: list[RowDict] = []
    for row in data:
        if isinstance(row, Mapping):
            rows.append(dict(row))
        elif is_dataclass(row) and not isinstance(row, type):
            rows.append(asdict(row))
        else:
            raise TypeError("List input must contain mapping/dict-like rows or dataclass records.")
    return rows


def coerce_time_column(s: pd.Series) -> pd.Series:
    """Return `s` with object-dtype date/datetime values converted to datetime64.

    Numeric and datetime64 columns are returned unchanged.

    Raises:
        InvalidInterval: If an object column cannot be read as timestamps.
    """
    if s.dtype != object:
        return s
    try:
        return pd.to_datetime(s)
    except (TypeError, ValueError) as e:
        raise InvalidInterval(f"column {s.name!r} does not hold comparable timestamps: {e}") from e


def _is_plain_date(v: Any) -> bool:
    return isinstance(v, _dt.date) and not isinstance(v, _dt.datetime)


def time_restorer(values: Iterable[Any]) -> Callable[[Any], Any]:
    """Build a function mapping output timestamps back to the input's type.

    When every input value is a plain ``datetime.date``, results computed on
    datetime64 columns are converted back with ``Timestamp.date()``.
    Otherwise the identity function is returned.
    """
    values = list(values)
    if values and all(_is_plain_date(v) for v in values):
        return lambda v: v.date() if isinstance(v, pd.Timestamp) else v
    return lambda v: v


def to_polars(df: pd.DataFrame) -> "pl.DataFrame":
    """Return a polars copy of a result frame.

    Raises:
        ImportError: If polars is not installed.
    """
    if not HAS_POLARS:
        raise ImportError("Polars is not available. Install 'polars' to use to_polars().")
    assert pl is not None  # for type checkers
    if df.empty:
        return pl.DataFrame({c: [] for c in df.columns})
    return pl.DataFrame(df.to_dict(orient="records"))


def load_csv(path: Union[str, Path], time_cols: Sequence[str] = ()) -> pd.DataFrame:
    """Load an interval or span table from CSV.

    Args:
        path: CSV file path.
        time_cols: Columns to parse as dates. Integer time columns need none.

    Raises:
        FileNotFoundError: If `path` does not exist.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"CSV not found: {path}")
    df = pd.read_csv(path, parse_dates=list(time_cols) or False)
    logger.debug("loaded %d rows from %s", len(df), path)
    return df
