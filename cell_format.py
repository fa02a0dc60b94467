import datetime as dt
from enum import Enum

import numpy as np
import pandas as pd


class ColumnKind(Enum):
    TEXT = "text"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    TEMPORAL = "temporal"
    OTHER = "other"


NULL_TEXT = "null"

_TRUE_WORDS = {"1", "true", "t", "yes", "y", "on"}
_FALSE_WORDS = {"0", "false", "f", "no", "n", "off"}

# pandas.api.types.infer_dtype results for object columns
_INFERRED_KINDS = {
    "string": ColumnKind.TEXT,
    "empty": ColumnKind.TEXT,
    "boolean": ColumnKind.BOOLEAN,
    "integer": ColumnKind.INTEGER,
    "floating": ColumnKind.FLOAT,
    "mixed-integer-float": ColumnKind.FLOAT,
    "date": ColumnKind.TEMPORAL,
    "datetime": ColumnKind.TEMPORAL,
    "datetime64": ColumnKind.TEMPORAL,
}


def column_kind(series: pd.Series) -> ColumnKind:
    dtype = series.dtype
    if pd.api.types.is_bool_dtype(dtype):
        return ColumnKind.BOOLEAN
    if pd.api.types.is_integer_dtype(dtype):
        return ColumnKind.INTEGER
    if pd.api.types.is_float_dtype(dtype):
        return ColumnKind.FLOAT
    if pd.api.types.is_datetime64_any_dtype(dtype):
        return ColumnKind.TEMPORAL
    if isinstance(dtype, pd.StringDtype):
        return ColumnKind.TEXT
    if isinstance(dtype, pd.CategoricalDtype):
        # dictionary-encoded columns take the kind of their categories
        return column_kind(pd.Series(dtype.categories))
    if dtype == object:
        inferred = pd.api.types.infer_dtype(series, skipna=True)
        return _INFERRED_KINDS.get(inferred, ColumnKind.OTHER)
    return ColumnKind.OTHER


def is_null(value) -> bool:
    if value is None:
        return True
    if not pd.api.types.is_scalar(value):
        return False
    return bool(pd.isna(value))


def format_cell(value, kind: ColumnKind) -> str:
    """Render one cell value as display text.

    Nulls of every kind render as ``null``; the remaining rules are keyed
    on the column kind so the same value always renders the same way in a
    given column.
    """
    if is_null(value):
        return NULL_TEXT

    if kind is ColumnKind.BOOLEAN:
        return "true" if bool(value) else "false"

    if kind is ColumnKind.INTEGER:
        return str(int(value))

    if kind is ColumnKind.FLOAT:
        # numpy scalars print the shortest round-trip form for their width
        if isinstance(value, np.floating):
            return str(value)
        return repr(float(value))

    if kind is ColumnKind.TEMPORAL:
        if isinstance(value, dt.datetime):
            return value.isoformat(sep=" ")
        if isinstance(value, dt.date):
            return value.isoformat()
        return str(value)

    if kind is ColumnKind.TEXT and isinstance(value, str):
        return value

    return str(value)


def coerce_pattern(series: pd.Series, kind: ColumnKind, text: str):
    """Convert filter text to a value comparable with ``series``.

    Raises ValueError when the text cannot be read as the column's type.
    """
    text = "" if text is None else str(text)
    stripped = text.strip()

    if kind is ColumnKind.TEXT:
        return text

    if kind is ColumnKind.INTEGER:
        return int(stripped)

    if kind is ColumnKind.FLOAT:
        return float(stripped)

    if kind is ColumnKind.BOOLEAN:
        lowered = stripped.lower()
        if lowered in _TRUE_WORDS:
            return True
        if lowered in _FALSE_WORDS:
            return False
        raise ValueError(f"Cannot coerce '{text}' to boolean")

    if kind is ColumnKind.TEMPORAL:
        ts = pd.Timestamp(pd.to_datetime(stripped, errors="raise"))
        tz = getattr(series.dtype, "tz", None)
        if tz is not None and ts.tzinfo is None:
            ts = ts.tz_localize(tz)
        return ts

    raise ValueError(f"Equals is not supported for {kind.value} columns")
