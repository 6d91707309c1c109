"""
QueryLens Analytics Service

Runs the full analytics pass over one query result: classify the columns
once, then derive statistics, correlations, trends and the visualization
from that single classification.

A failure inside one component is logged and that component comes back
empty; the other components still run.
"""
from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

from src.core.exceptions import ValidationError
from src.core.logging import get_analytics_logger, get_logger
from src.services.correlation_service import CorrelationMatrix, correlate_columns
from src.services.statistics_service import StatSummary, summarize_columns
from src.services.trend_service import TrendReport, analyze_trends
from src.services.visualization_service import (
    TableDescriptor,
    VisualizationDescriptor,
    select_visualization,
)
from src.utils.column_classifier import ColumnClassification, classify_columns
from src.utils.result_set import normalize_rows

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass
class AnalyticsReport:
    """Everything the UI needs to render the analytics panel for one result."""

    row_count: int
    classification: ColumnClassification
    visualization: VisualizationDescriptor
    statistics: dict[str, StatSummary] = field(default_factory=dict)
    correlation: CorrelationMatrix | None = None
    trends: list[TrendReport] = field(default_factory=list)
    degraded: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "row_count": self.row_count,
            "columns": self.classification.to_dict(),
            "visualization": self.visualization.to_dict(),
            "statistics": {name: summary.to_dict() for name, summary in self.statistics.items()},
            "correlation": self.correlation.to_dict() if self.correlation else None,
            "trends": [report.to_dict() for report in self.trends],
            "degraded": self.degraded,
        }


def check_row_limit(rows, max_rows: int) -> None:
    """
    Reject result sets larger than the configured limit.

    Raises:
        ValidationError: If rows has more than max_rows entries
    """
    if len(rows) > max_rows:
        raise ValidationError(f"Result set has {len(rows)} rows; the limit is {max_rows}")


def _run_component(name: str, compute: Callable[[], T], fallback: T, degraded: list[str]) -> T:
    try:
        return compute()
    except Exception:
        logger.exception(f"Analytics component '{name}' failed; continuing without it")
        degraded.append(name)
        return fallback


def analyze_result_set(rows) -> AnalyticsReport:
    """
    Analyze one query result.

    Args:
        rows: Result rows as returned by the query layer (never mutated)

    Returns:
        AnalyticsReport; an empty result yields no statistics, no
        correlation, no trends and the empty-table visualization
    """
    started = time.perf_counter()
    normalized = normalize_rows(rows)
    classification = classify_columns(normalized)
    degraded: list[str] = []

    statistics = _run_component(
        "statistics", lambda: summarize_columns(normalized, classification), {}, degraded
    )
    correlation = _run_component(
        "correlation", lambda: correlate_columns(normalized, classification), None, degraded
    )
    trends = _run_component("trends", lambda: analyze_trends(normalized, classification), [], degraded)
    visualization = _run_component(
        "visualization",
        lambda: select_visualization(normalized, classification),
        TableDescriptor(empty=not normalized),
        degraded,
    )

    elapsed_ms = (time.perf_counter() - started) * 1000
    get_analytics_logger().info(
        f"Analyzed {len(normalized)} rows x {len(classification.names)} columns "
        f"-> {visualization.kind} in {elapsed_ms:.1f}ms"
        + (f" (degraded: {', '.join(degraded)})" if degraded else "")
    )

    return AnalyticsReport(
        row_count=len(normalized),
        classification=classification,
        visualization=visualization,
        statistics=statistics,
        correlation=correlation,
        trends=trends,
        degraded=degraded,
    )
