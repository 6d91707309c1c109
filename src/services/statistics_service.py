"""
QueryLens Statistics Service

Descriptive statistics for the numeric columns of a query result.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

import numpy as np

from src.core.logging import get_logger
from src.utils.column_classifier import ColumnClassification
from src.utils.result_set import Row, numeric_values

logger = get_logger(__name__)


@dataclass(frozen=True)
class StatSummary:
    """Descriptive statistics for one numeric column."""

    count: int
    mean: float
    median: float
    mode: float
    stddev: float
    min: float
    max: float
    range: float
    q1: float
    q3: float
    iqr: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _mode(sorted_values: np.ndarray) -> float:
    """
    Most frequent value after rounding to 2 decimals.

    Ties go to the first value in frequency-table order, which for sorted
    input is the smallest tied value. Mode is advisory only.
    """
    rounded = np.round(sorted_values, 2)
    uniques, counts = np.unique(rounded, return_counts=True)
    return float(uniques[int(np.argmax(counts))])


def summarize(values: list[float]) -> StatSummary | None:
    """
    Summarize the finite values of one column.

    Quartiles use the lower-quartile index convention (floor(n * 0.25),
    floor(n * 0.75)) rather than interpolation; stddev is the population
    standard deviation.

    Args:
        values: Already-filtered finite values of one column

    Returns:
        StatSummary, or None when there are no values
    """
    if not values:
        return None

    data = np.sort(np.asarray(values, dtype=float))
    n = len(data)

    q1 = float(data[int(np.floor(n * 0.25))])
    q3 = float(data[int(np.floor(n * 0.75))])
    low = float(data[0])
    high = float(data[-1])

    return StatSummary(
        count=n,
        mean=float(np.mean(data)),
        median=float(np.median(data)),
        mode=_mode(data),
        stddev=float(np.std(data)),
        min=low,
        max=high,
        range=high - low,
        q1=q1,
        q3=q3,
        iqr=q3 - q1,
    )


def summarize_columns(rows: list[Row], classification: ColumnClassification) -> dict[str, StatSummary]:
    """
    Summarize every numeric (non-date) column of a result set.

    Args:
        rows: Normalized result rows
        classification: Column classification of the same result set

    Returns:
        Mapping of column name to StatSummary, in column order; columns
        without any finite value are skipped
    """
    summaries: dict[str, StatSummary] = {}
    for column in classification.numeric_columns:
        summary = summarize(numeric_values(rows, column))
        if summary is None:
            logger.debug(f"Skipping statistics for column without numeric values: {column}")
            continue
        summaries[column] = summary
    return summaries
