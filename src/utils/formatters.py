"""
Formatters

Display formatting for result tables and analytics cards.
Cell formats are driven by the column's classifier tag, so the table, the
chart and the statistics views always agree on what a column is.
"""

from __future__ import annotations

import math

from src.utils.column_classifier import ColumnClassification, ColumnTag
from src.utils.result_set import Row, column_names, to_number


def format_currency(number: float) -> str:
    """Dollar sign, grouping and exactly 2 decimals: -$100.50 not $-100.50."""
    if round(number, 2) < 0:
        return f"-${abs(number):,.2f}"
    return f"${abs(number):,.2f}"


def format_number(number: float) -> str:
    """Grouped number with 0-2 decimals depending on whether it is integral."""
    if float(number).is_integer():
        return f"{int(number):,}"
    text = f"{number:,.2f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def format_cell(tag: ColumnTag, value) -> str:
    """
    Format a cell value based on its column tag.

    Args:
        tag: ColumnTag of the cell's column
        value: The raw cell value

    Returns:
        Formatted string for display
    """
    if value is None or (isinstance(value, float) and not math.isfinite(value)):
        return ""

    number = to_number(value)
    if number is None or tag is ColumnTag.DATE:
        # Dates and non-numeric cells are displayed as-is
        return str(value)

    if tag is ColumnTag.COUNT:
        # Whole number with comma separators, no currency, no decimals
        return f"{round(number):,}"

    if tag is ColumnTag.CURRENCY:
        return format_currency(number)

    return format_number(number)


def format_rows(rows: list[Row], classification: ColumnClassification) -> list[dict[str, str]]:
    """
    Pre-format a whole result table for display.

    Args:
        rows: Normalized result rows
        classification: Column classification of the same result set

    Returns:
        List of rows with every cell rendered as a string
    """
    columns = column_names(rows)
    return [
        {col: format_cell(classification.tag(col), row.get(col)) for col in columns}
        for row in rows
    ]


def _displayable(value) -> float | None:
    """Finite float, or None for null/NaN/infinity."""
    if value is None or isinstance(value, bool):
        return None
    number = float(value)
    return number if math.isfinite(number) else None


def format_compact(value: float | None) -> str:
    """
    Format a statistic for a summary card.

    Examples:
        2_400_000 -> "2.40M", 1234.5 -> "1.23K", 7.891 -> "7.89"
    """
    value = _displayable(value)
    if value is None:
        return ""
    if abs(value) >= 1_000_000:
        return f"{value / 1_000_000:.2f}M"
    if abs(value) >= 1_000:
        return f"{value / 1_000:.2f}K"
    # -0.001 and -0.0 render as 0.00
    return f"{round(value, 2) + 0.0:.2f}"


def format_percent(value: float | None) -> str:
    """Signed percentage with 2 decimals, e.g. "+50.00%" or "-3.10%"."""
    value = _displayable(value)
    if value is None:
        return ""
    value = round(value, 2) + 0.0
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.2f}%"
