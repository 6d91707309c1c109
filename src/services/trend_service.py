"""
Trend Service

Period-over-period growth, total growth, average growth and CAGR for the
numeric columns of a result set that has a time column.

Periods are ordered by the time label's string value, not by a parsed
calendar date: "2024-01" < "2024-02" sorts correctly, bare month names
("April" < "January") do not. Display order depends on this, so it is kept
as-is.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from src.core.logging import get_logger
from src.utils.column_classifier import ColumnClassification
from src.utils.result_set import Row, to_number

logger = get_logger(__name__)


@dataclass(frozen=True)
class PeriodChange:
    """Change between two adjacent periods; rate is None when the earlier value is 0."""

    period: str
    from_label: str
    to_label: str
    change: float
    rate: float | None


@dataclass
class TrendReport:
    column: str
    time_column: str
    first_value: float
    last_value: float
    total_change: float
    total_growth_pct: float
    average_growth_pct: float | None
    cagr_pct: float | None
    direction: str
    periods: list[PeriodChange] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _direction(rates: list[float]) -> str:
    positive = sum(1 for rate in rates if rate > 0)
    negative = sum(1 for rate in rates if rate < 0)
    if positive > negative:
        return "upward"
    if negative > positive:
        return "downward"
    return "mixed"


def analyze_trend(time_column: str, value_column: str, rows: list[Row]) -> TrendReport | None:
    """
    Analyze how one numeric column moves over a time column.

    Args:
        time_column: Column holding period labels
        value_column: Numeric column to track
        rows: Normalized result rows

    Returns:
        TrendReport, or None when fewer than 2 (time, value) pairs remain
        after dropping null labels and non-finite values
    """
    ordered = sorted(
        (row for row in rows if row.get(time_column) is not None),
        key=lambda row: str(row[time_column]),
    )

    series: list[tuple[str, float]] = []
    for row in ordered:
        value = to_number(row.get(value_column))
        if value is not None:
            series.append((str(row[time_column]), value))

    if len(series) < 2:
        return None

    periods: list[PeriodChange] = []
    for (prev_label, prev), (curr_label, curr) in zip(series, series[1:]):
        periods.append(
            PeriodChange(
                period=f"{prev_label} → {curr_label}",
                from_label=prev_label,
                to_label=curr_label,
                change=curr - prev,
                rate=(curr - prev) / prev * 100 if prev != 0 else None,
            )
        )

    rates = [p.rate for p in periods if p.rate is not None]
    first = series[0][1]
    last = series[-1][1]

    cagr = None
    if first > 0 and last > 0:
        cagr = ((last / first) ** (1 / (len(series) - 1)) - 1) * 100

    return TrendReport(
        column=value_column,
        time_column=time_column,
        first_value=first,
        last_value=last,
        total_change=last - first,
        total_growth_pct=(last - first) / first * 100 if first != 0 else 0.0,
        average_growth_pct=sum(rates) / len(rates) if rates else None,
        cagr_pct=cagr,
        direction=_direction(rates),
        periods=periods,
    )


def analyze_trends(rows: list[Row], classification: ColumnClassification) -> list[TrendReport]:
    """
    Run the trend analysis for every numeric column against the time column.

    The first detected date column is the time axis. Nothing is reported
    without a time column or a numeric column.
    """
    date_columns = classification.date_columns
    numeric = classification.numeric_columns
    if not date_columns or not numeric or len(rows) < 2:
        return []

    time_column = date_columns[0]
    reports = []
    for column in numeric:
        report = analyze_trend(time_column, column, rows)
        if report is None:
            logger.debug(f"Not enough periods to analyze trend for {column}")
            continue
        reports.append(report)
    return reports
