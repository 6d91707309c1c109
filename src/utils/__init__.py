"""
Utilities Package

Result-set helpers: value coercion, column classification, region codes
and display formatting.
"""

from .column_classifier import ColumnTag, classify, classify_columns
from .formatters import format_cell, format_currency, format_number
from .geo import normalize_region

__all__ = [
    "ColumnTag",
    "classify",
    "classify_columns",
    "format_cell",
    "format_currency",
    "format_number",
    "normalize_region",
]
