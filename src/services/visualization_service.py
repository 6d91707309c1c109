"""
Visualization Service

Chooses one visualization for a query result: a chart, a choropleth map,
or the plain table. The output is an inert descriptor; drawing it is the
renderer's job.

Selection order:
1. Empty result -> table with an empty-state message
2. Chart, when a label column and a numeric data column exist
3. Map, when the chart is not possible and the result is keyed by
   two or more distinct places with a numeric value
4. Table
"""
from __future__ import annotations

import re
from bisect import bisect_right
from dataclasses import asdict, dataclass, field
from typing import Any

import numpy as np

from src.core.logging import get_logger
from src.utils.column_classifier import ColumnClassification, classify_columns
from src.utils.geo import normalize_region, region_name
from src.utils.result_set import Row, column_names, first_sample, normalize_rows, to_number

logger = get_logger(__name__)

EMPTY_RESULT_MESSAGE = "No data returned for this query."

CHART_MAX_ROWS = 20
CHART_MAX_ROWS_CHRONOLOGICAL = 50
BAR_CHART_MAX_ROWS = 10
CHART_MAX_SERIES = 3

# Exact (case-insensitive) names only; stricter than the column classifier
PLACE_COLUMN_NAMES = ("state", "region", "province")

# Dark base tone to bright accent tone
MAP_COLORS = (
    "#1e293b",  # Dark Slate
    "#155e75",  # Deep Blue
    "#0891b2",  # Medium Blue
    "#06b6d4",  # Cyan
    "#22d3ee",  # Bright Cyan
    "#67e8f9",  # Neon Cyan
)
MIDPOINT_BUCKET = len(MAP_COLORS) // 2

CHRONOLOGICAL_NAME_HINTS = ("month", "year", "date", "time", "quarter", "week")
CHRONOLOGICAL_VALUE_PATTERNS = (
    re.compile(r"^\d{4}-\d{2}$"),
    re.compile(r"^\d{4}$"),
    re.compile(r"^(jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)", re.IGNORECASE),
)


@dataclass
class NoVisualization:
    kind: str = "none"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class TableDescriptor:
    empty: bool = False
    message: str | None = None
    kind: str = "table"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ChartDataset:
    label: str
    data: list[float]


@dataclass
class ChartDescriptor:
    chart_type: str
    label_column: str | None
    data_columns: list[str]
    labels: list[str] = field(default_factory=list)
    datasets: list[ChartDataset] = field(default_factory=list)
    row_limit: int = CHART_MAX_ROWS
    chronological: bool = False
    kind: str = "chart"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class MapBucket:
    code: str
    name: str
    value: float
    bucket: int
    color: str


@dataclass
class MapDescriptor:
    state_column: str
    value_column: str
    values: dict[str, float] = field(default_factory=dict)
    buckets: list[MapBucket] = field(default_factory=list)
    kind: str = "map"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


VisualizationDescriptor = NoVisualization | TableDescriptor | ChartDescriptor | MapDescriptor


def is_chronological_column(column_name: str, sample) -> bool:
    """Time signal used by the chart picker, independent of the classifier tag."""
    name = column_name.lower()
    if any(hint in name for hint in CHRONOLOGICAL_NAME_HINTS):
        return True
    text = "" if sample is None else str(sample)
    return any(pattern.match(text) for pattern in CHRONOLOGICAL_VALUE_PATTERNS)


def _series(rows: list[Row], column: str, limit: int) -> list[float]:
    return [to_number(row.get(column)) or 0.0 for row in rows[:limit]]


def _label_column(classification: ColumnClassification, fallback: str) -> str:
    if classification.date_columns:
        return classification.date_columns[0]
    return fallback


def _label(value) -> str:
    return "" if value is None else str(value)


def build_chart(rows: list[Row], classification: ColumnClassification) -> ChartDescriptor | None:
    """
    Build a chart descriptor, or None if the result cannot be charted.

    Label column preference: date column, then the first categorical column,
    then the first column (only when every column is numeric). Data columns
    are the numeric, non-date columns: one series next to a label column, up
    to 3 when every column is numeric.

    A time-named column, or a categorical column with a time-shaped sample,
    forces a line chart and the larger row cap but never picks the label.
    Numeric samples are not matched against the time patterns.
    """
    columns = classification.names
    if len(columns) < 2 or not rows:
        return None

    numeric = classification.numeric_columns
    categorical = classification.categorical_columns
    chronological = bool(classification.date_columns) or any(
        is_chronological_column(col, classification.sample(col) if col in categorical else None) for col in columns
    )

    if categorical and numeric:
        label_column = _label_column(classification, categorical[0])
        data_columns = numeric[:1]
    elif len(numeric) >= 2:
        label_column = _label_column(classification, columns[0])
        data_columns = numeric[:CHART_MAX_SERIES]
    else:
        return None

    if chronological:
        chart_type = "line"
    elif len(rows) <= BAR_CHART_MAX_ROWS:
        chart_type = "bar"
    elif len(data_columns) == 1:
        chart_type = "line"
    else:
        chart_type = "bar"

    limit = CHART_MAX_ROWS_CHRONOLOGICAL if chronological else CHART_MAX_ROWS
    return ChartDescriptor(
        chart_type=chart_type,
        label_column=label_column,
        data_columns=data_columns,
        labels=[_label(row.get(label_column)) for row in rows[:limit]],
        datasets=[ChartDataset(label=col, data=_series(rows, col, limit)) for col in data_columns],
        row_limit=limit,
        chronological=chronological,
    )


def color_buckets(values: list[float], bucket_count: int = len(MAP_COLORS)) -> list[int]:
    """
    Assign each value a bucket index with a quantile scale.

    Thresholds are the linearly interpolated quantiles at 1/k .. (k-1)/k of
    the observed values; a value's bucket is the number of thresholds it
    reaches (bisect-right). Ties collapse to the midpoint bucket: when every
    value is the same, or when a value sits on two or more coinciding
    thresholds (a run of repeated values spanning several quantiles).

    Args:
        values: Observed map values
        bucket_count: Number of color buckets

    Returns:
        Bucket index per value, in input order
    """
    if not values:
        return []

    data = np.asarray(values, dtype=float)
    if float(data.max()) == float(data.min()):
        return [bucket_count // 2] * len(values)

    probs = [i / bucket_count for i in range(1, bucket_count)]
    thresholds = [float(t) for t in np.quantile(data, probs)]

    buckets = []
    for v in data.tolist():
        if thresholds.count(v) >= 2:
            buckets.append(bucket_count // 2)
        else:
            buckets.append(min(bisect_right(thresholds, v), bucket_count - 1))
    return buckets


def find_place_column(columns: list[str]) -> str | None:
    for col in columns:
        if col.lower() in PLACE_COLUMN_NAMES:
            return col
    return None


def build_map(rows: list[Row]) -> MapDescriptor | None:
    """
    Build a choropleth descriptor, or None if the result is not map-shaped.

    Needs a column named exactly state/region/province, at least 2 distinct
    places that normalize to a code, and another column whose sample is
    numeric. Values are summed per code; unplaceable rows and non-finite
    values are left out.
    """
    columns = column_names(rows)
    place_column = find_place_column(columns)
    if place_column is None:
        return None

    value_column = next(
        (col for col in columns if col != place_column and to_number(first_sample(rows, col)) is not None),
        None,
    )
    if value_column is None:
        return None

    totals: dict[str, float] = {}
    skipped = 0
    for row in rows:
        code = normalize_region(row.get(place_column))
        value = to_number(row.get(value_column))
        if code is None or value is None:
            skipped += 1
            continue
        totals[code] = totals.get(code, 0.0) + value

    if len(totals) < 2:
        logger.debug(f"Map rejected: {len(totals)} distinct places in {place_column!r}")
        return None

    if skipped:
        logger.debug(f"Map skipped {skipped} of {len(rows)} rows that could not be placed")

    codes = list(totals)
    indexes = color_buckets([totals[code] for code in codes])
    return MapDescriptor(
        state_column=place_column,
        value_column=value_column,
        values=totals,
        buckets=[
            MapBucket(code=code, name=region_name(code), value=totals[code], bucket=i, color=MAP_COLORS[i])
            for code, i in zip(codes, indexes)
        ],
    )


def select_visualization(
    rows, classification: ColumnClassification | None = None
) -> VisualizationDescriptor:
    """
    Choose the visualization for a result set.

    Args:
        rows: Result rows (raw or normalized)
        classification: Column classification, computed if not given

    Returns:
        Exactly one descriptor: chart, map or table; NoVisualization when
        the input is not a result set at all
    """
    if not isinstance(rows, list):
        return NoVisualization()

    rows = normalize_rows(rows)
    if not rows:
        return TableDescriptor(empty=True, message=EMPTY_RESULT_MESSAGE)

    classification = classification or classify_columns(rows)

    chart = build_chart(rows, classification)
    if chart is not None:
        return chart

    place_map = build_map(rows)
    if place_map is not None:
        return place_map

    return TableDescriptor()
