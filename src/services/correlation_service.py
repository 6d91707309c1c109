"""
Correlation Service

Pairwise Pearson correlation across the numeric columns of a query result.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import numpy as np

from src.core.logging import get_logger
from src.utils.column_classifier import ColumnClassification
from src.utils.result_set import Row, column_values, to_number

logger = get_logger(__name__)

STRONG_THRESHOLD = 0.7
MODERATE_THRESHOLD = 0.3


def correlation_strength(r: float) -> str:
    """Band |r|: > 0.7 strong, (0.3, 0.7] moderate, else weak."""
    magnitude = abs(r)
    if magnitude > STRONG_THRESHOLD:
        return "strong"
    if magnitude > MODERATE_THRESHOLD:
        return "moderate"
    return "weak"


def correlation_direction(r: float) -> str:
    return "positive" if r >= 0 else "negative"


@dataclass(frozen=True)
class CorrelationEntry:
    column_a: str
    column_b: str
    r: float
    n: int

    @property
    def strength(self) -> str:
        return correlation_strength(self.r)

    @property
    def direction(self) -> str:
        return correlation_direction(self.r)

    def to_dict(self) -> dict[str, Any]:
        return {
            "column_a": self.column_a,
            "column_b": self.column_b,
            "r": self.r,
            "n": self.n,
            "strength": self.strength,
            "direction": self.direction,
        }


@dataclass
class CorrelationMatrix:
    """
    Upper triangle (diagonal included) of a correlation matrix.

    Lookups through get() are symmetric: get(a, b) == get(b, a).
    """

    columns: list[str]
    entries: list[CorrelationEntry] = field(default_factory=list)

    def get(self, column_a: str, column_b: str) -> float | None:
        for entry in self.entries:
            if (entry.column_a, entry.column_b) in ((column_a, column_b), (column_b, column_a)):
                return entry.r
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "columns": self.columns,
            "entries": [entry.to_dict() for entry in self.entries],
        }


def pearson(a: np.ndarray, b: np.ndarray) -> float:
    """
    Pearson r of two equal-length arrays.

    Zero variance in either array has no defined r; it is reported as 0.
    """
    da = a - a.mean()
    db = b - b.mean()
    denominator = float(np.sqrt(np.sum(da * da) * np.sum(db * db)))
    if denominator == 0 or not np.isfinite(denominator):
        return 0.0
    r = float(np.sum(da * db)) / denominator
    return float(np.clip(r, -1.0, 1.0))


def correlate(columns: Mapping[str, Sequence[float | None]]) -> CorrelationMatrix | None:
    """
    Correlate row-aligned numeric columns.

    A row contributes to a pair only when both of its cells are finite
    numbers; pairs with fewer than 2 contributing rows are omitted. The
    diagonal is 1 by convention, even for a constant column.

    Args:
        columns: Column name -> row-aligned values (None for missing cells)

    Returns:
        CorrelationMatrix, or None when fewer than 2 columns are given
    """
    names = list(columns)
    if len(names) < 2:
        return None

    vectors = {
        name: np.array([np.nan if v is None else float(v) for v in columns[name]], dtype=float)
        for name in names
    }

    matrix = CorrelationMatrix(columns=names)
    for i, col_a in enumerate(names):
        matrix.entries.append(
            CorrelationEntry(col_a, col_a, 1.0, int(np.isfinite(vectors[col_a]).sum()))
        )
        for col_b in names[i + 1:]:
            a, b = vectors[col_a], vectors[col_b]
            length = min(len(a), len(b))
            a, b = a[:length], b[:length]
            mask = np.isfinite(a) & np.isfinite(b)
            n = int(mask.sum())
            if n < 2:
                logger.debug(f"Skipping correlation {col_a}/{col_b}: only {n} paired rows")
                continue
            matrix.entries.append(CorrelationEntry(col_a, col_b, pearson(a[mask], b[mask]), n))

    return matrix


def correlate_columns(rows: list[Row], classification: ColumnClassification) -> CorrelationMatrix | None:
    """
    Build the correlation matrix for a result set's numeric columns.

    Returns:
        CorrelationMatrix, or None for fewer than 2 rows or 2 numeric columns
    """
    numeric = classification.numeric_columns
    if len(rows) < 2 or len(numeric) < 2:
        return None

    return correlate({name: [to_number(v) for v in column_values(rows, name)] for name in numeric})
