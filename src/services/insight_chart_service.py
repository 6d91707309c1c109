"""
Insight Chart Service

Pulls chartable figures out of the AI's natural-language insight text
("Q1: $2.4M, Q2: $3.1M", "California shows 23% growth") and turns them
into a chart descriptor for the insight panel.
"""

from __future__ import annotations

import re

from src.core.logging import get_logger
from src.services.visualization_service import BAR_CHART_MAX_ROWS, ChartDataset, ChartDescriptor

logger = get_logger(__name__)

PERIOD_VALUE_PATTERN = re.compile(
    r"(Q[1-4]|January|February|March|April|May|June|July|August|September|October|November|December"
    r"|Jan|Feb|Mar|Apr|Jun|Jul|Aug|Sep|Oct|Nov|Dec)\s*:?\s*\$?([\d,]+(?:\.\d+)?[KMB]?)",
    re.IGNORECASE,
)
PERCENT_PATTERN = re.compile(r"([A-Za-z\s]+?)\s+(\d+(?:\.\d+)?)%")
CURRENCY_PATTERN = re.compile(r"\$([\d,]+(?:\.\d+)?[KMB]?)", re.IGNORECASE)

SUFFIX_MULTIPLIERS = {"K": 1_000, "M": 1_000_000, "B": 1_000_000_000}

MAX_PERIOD_POINTS = 20
MAX_OTHER_POINTS = 10
MAX_LABEL_LENGTH = 50


def parse_scaled_number(text: str) -> float | None:
    """
    Parse "2.4M" / "1,234" / "3K" style figures.

    Returns:
        The scaled value, or None if the text is not a number
    """
    cleaned = text.replace(",", "").strip()
    multiplier = 1
    if cleaned and cleaned[-1].upper() in SUFFIX_MULTIPLIERS:
        multiplier = SUFFIX_MULTIPLIERS[cleaned[-1].upper()]
        cleaned = cleaned[:-1]
    try:
        return float(cleaned) * multiplier
    except ValueError:
        return None


def _period_points(text: str) -> list[tuple[str, float]]:
    points = []
    for match in PERIOD_VALUE_PATTERN.finditer(text):
        value = parse_scaled_number(match.group(2))
        if value is not None:
            points.append((match.group(1), value))
        if len(points) >= MAX_PERIOD_POINTS:
            break
    return points


def _percent_points(text: str) -> list[tuple[str, float]]:
    points = []
    for match in PERCENT_PATTERN.finditer(text):
        label = match.group(1).strip()
        if label and len(label) < MAX_LABEL_LENGTH:
            points.append((label, float(match.group(2))))
        if len(points) >= MAX_OTHER_POINTS:
            break
    return points


def _currency_points(text: str) -> list[tuple[str, float]]:
    points = []
    for match in CURRENCY_PATTERN.finditer(text):
        value = parse_scaled_number(match.group(1))
        if value is not None:
            points.append((f"Value {len(points) + 1}", value))
        if len(points) >= MAX_OTHER_POINTS:
            break
    return points


def chart_from_insights(text) -> ChartDescriptor | None:
    """
    Derive a chart from insight text.

    Tries period/value pairs first (most structured), then "label NN%"
    pairs, then bare currency figures.

    Args:
        text: Insight text returned alongside the query result

    Returns:
        ChartDescriptor, or None when fewer than 2 figures are found
    """
    if not text or not isinstance(text, str):
        return None

    points: list[tuple[str, float]] = []
    for extract in (_period_points, _percent_points, _currency_points):
        points = extract(text)
        if len(points) >= 2:
            break

    if len(points) < 2:
        return None

    logger.debug(f"Extracted {len(points)} chart points from insight text")
    return ChartDescriptor(
        chart_type="bar" if len(points) <= BAR_CHART_MAX_ROWS else "line",
        label_column=None,
        data_columns=["Insights Data"],
        labels=[label for label, _ in points],
        datasets=[ChartDataset(label="Insights Data", data=[value for _, value in points])],
        row_limit=MAX_PERIOD_POINTS,
    )
