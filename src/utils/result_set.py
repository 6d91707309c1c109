"""
Result Set Helpers

Rows arrive from the query layer as loosely-typed key/value bags. These
helpers pin every cell to the closed scalar variant {number, string, null}
and read columns out of a result set without mutating it.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any

Scalar = int | float | str | None
Row = dict[str, Scalar]


def to_number(value: Any) -> float | None:
    """
    Parse a cell as a finite number.

    Args:
        value: Raw cell value

    Returns:
        Float value, or None if the cell is not a finite number
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float, Decimal)):
        try:
            number = float(value)
        except (OverflowError, InvalidOperation, ValueError):
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None

    if math.isnan(number) or math.isinf(number):
        return None
    return number


def is_integral(number: float | None) -> bool:
    """Check whether a parsed number has no fractional part."""
    return number is not None and float(number).is_integer()


def normalize_value(value: Any) -> Scalar:
    """
    Coerce a raw cell into the closed scalar variant.

    NaN and infinity become None, Decimal becomes float, dates become ISO
    strings, and any other shape (booleans, containers, bytes, arbitrary
    objects) becomes None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, (int, str)):
        return value
    if isinstance(value, Decimal):
        return to_number(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    return None


def normalize_rows(rows: Any) -> list[Row]:
    """
    Build a normalized copy of a result set.

    The first row's key order is canonical: later rows are read through it,
    missing keys become None and extra keys are ignored. Rows that are not
    mappings are dropped.

    Args:
        rows: Sequence of row mappings (anything else yields an empty list)

    Returns:
        New list of rows with scalar-only values
    """
    if not isinstance(rows, Iterable) or isinstance(rows, (str, bytes, Mapping)):
        return []

    mappings = [row for row in rows if isinstance(row, Mapping)]
    if not mappings:
        return []

    columns = [str(key) for key in mappings[0].keys()]
    normalized: list[Row] = []
    for row in mappings:
        keyed = {str(key): value for key, value in row.items()}
        normalized.append({col: normalize_value(keyed.get(col)) for col in columns})
    return normalized


def column_names(rows: list[Row]) -> list[str]:
    """Column names of a result set, in first-row order."""
    if not rows:
        return []
    return list(rows[0].keys())


def column_values(rows: list[Row], name: str) -> list[Scalar]:
    """All cells of one column, row-aligned."""
    return [row.get(name) for row in rows]


def first_sample(rows: list[Row], name: str) -> Scalar:
    """
    First non-null cell of a column.

    Returns:
        The sample value, or None when the whole column is null
    """
    for row in rows:
        value = row.get(name)
        if value is not None:
            return value
    return None


def numeric_values(rows: list[Row], name: str) -> list[float]:
    """Finite numeric cells of a column; everything else is skipped."""
    values = []
    for row in rows:
        number = to_number(row.get(name))
        if number is not None:
            values.append(number)
    return values
