"""
QueryLens Column Classifier

Labels every column of a schema-less result set as date, count, currency,
categorical or generic numeric, using only the column name and its first
non-null sample value.

Rules live in CLASSIFICATION_RULES and are evaluated top to bottom; the
first matching rule wins. Column names are business language and
inconsistent ("total" and "sales" can be either a count or money), so the
order of the table is what resolves those collisions.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from src.core.logging import get_logger
from src.utils.result_set import Row, Scalar, column_names, first_sample, is_integral, to_number

logger = get_logger(__name__)


class ColumnTag(str, Enum):
    """Display/analysis class of a result column."""

    DATE = "date"
    COUNT = "count"
    CURRENCY = "currency"
    CATEGORICAL = "categorical"
    NUMERIC = "numeric"


DATE_NAME_HINTS = ("year", "month", "day", "date", "quarter", "qtr", "week", "time", "period")
COUNT_NAME_HINTS = ("count", "number", "num", "quantity", "qty")

MONTH_PREFIX_PATTERN = re.compile(r"^(jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)", re.IGNORECASE)
DATE_VALUE_PATTERNS = (
    re.compile(r"^\d{4}-\d{1,2}$"),  # YYYY-MM
    re.compile(r"^\d{4}-\d{2}-\d{2}$"),  # YYYY-MM-DD
    re.compile(r"^\d{1,2}/\d{1,2}/\d{4}$"),  # MM/DD/YYYY
    re.compile(r"^\d{4}/\d{2}/\d{2}$"),  # YYYY/MM/DD
)
QUARTER_PREFIX_PATTERN = re.compile(r"^Q[1-4]", re.IGNORECASE)
QUARTER_WORD_PATTERN = re.compile(r"quarter\s*[1-4]", re.IGNORECASE)

# Below this an integer "total"/"total_sales" reads as a count of things, not money
COUNT_CEILING = 1_000_000


def _looks_like_year(number: float | None) -> bool:
    if not is_integral(number):
        return False
    return 1900 <= number <= 2100 and len(str(int(number))) == 4


def is_date_column(column_name: str, sample: Scalar) -> bool:
    """
    Check whether a column holds dates or time periods.

    Args:
        column_name: Column name as returned by the query
        sample: First non-null value of the column

    Returns:
        True for date/time columns
    """
    name = column_name.lower()
    if any(hint in name for hint in DATE_NAME_HINTS):
        return True

    if _looks_like_year(to_number(sample)):
        return True

    text = "" if sample is None else str(sample).strip()
    if not text:
        return False

    if any(pattern.match(text) for pattern in DATE_VALUE_PATTERNS):
        return True
    if MONTH_PREFIX_PATTERN.match(text):
        return True
    return bool(QUARTER_PREFIX_PATTERN.match(text) or QUARTER_WORD_PATTERN.search(text))


def is_count_column(column_name: str, sample: Scalar) -> bool:
    """Check whether a (non-date) column holds counts."""
    name = column_name.lower()
    if any(hint in name for hint in COUNT_NAME_HINTS):
        return True

    if name in ("total", "total_count"):
        number = to_number(sample)
        return is_integral(number) and number < COUNT_CEILING

    return False


def is_currency_column(column_name: str, sample: Scalar) -> bool:
    """Check whether a (non-date, non-count) column holds money."""
    name = column_name.lower()
    number = to_number(sample)

    if is_integral(number) and name in ("sales", "total_sales") and number < COUNT_CEILING:
        return False

    if "revenue" in name:
        return True
    if "sales" in name and any(word in name for word in ("revenue", "amount", "value", "dollar")):
        return True
    if "total_sales" in name and "count" not in name and "number" not in name:
        if not is_integral(number) or number >= COUNT_CEILING:
            return True
    if any(word in name for word in ("total_amount", "total_revenue", "total_price", "total_cost")):
        return True
    if "amount" in name and "count" not in name:
        return True
    if any(word in name for word in ("price", "cost", "subtotal", "dollar")):
        return True
    return "value" in name and "count" not in name


def is_numeric_sample(column_name: str, sample: Scalar) -> bool:
    """Check whether the sample parses as a finite number."""
    return to_number(sample) is not None


@dataclass(frozen=True)
class ClassificationRule:
    """One row of the ordered classification table."""

    tag: ColumnTag
    name: str
    matches: Callable[[str, Scalar], bool]


# Evaluated in order, first match wins. Anything unmatched is categorical.
CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(ColumnTag.DATE, "date-or-period", is_date_column),
    ClassificationRule(ColumnTag.COUNT, "count", is_count_column),
    ClassificationRule(ColumnTag.CURRENCY, "currency", is_currency_column),
    ClassificationRule(ColumnTag.NUMERIC, "generic-numeric", is_numeric_sample),
)


def classify(column_name: str, sample: Scalar) -> ColumnTag:
    """
    Classify a single column.

    Pure function of (column name, sample value): the same pair always
    yields the same tag.

    Args:
        column_name: Column name
        sample: First non-null value of the column

    Returns:
        ColumnTag of the first matching rule, CATEGORICAL if none match
    """
    for rule in CLASSIFICATION_RULES:
        if rule.matches(column_name, sample):
            return rule.tag
    return ColumnTag.CATEGORICAL


@dataclass(frozen=True)
class ColumnInfo:
    name: str
    tag: ColumnTag
    sample: Scalar
    numeric_sample: bool


@dataclass
class ColumnClassification:
    """
    Classification of every column of one result set.

    Computed once per result set and shared by the table, chart, statistics
    and trend views so they all format and group columns the same way.
    """

    columns: dict[str, ColumnInfo] = field(default_factory=dict)

    @property
    def names(self) -> list[str]:
        return list(self.columns)

    def tag(self, name: str) -> ColumnTag:
        info = self.columns.get(name)
        return info.tag if info else ColumnTag.CATEGORICAL

    def sample(self, name: str) -> Scalar:
        info = self.columns.get(name)
        return info.sample if info else None

    def is_numeric(self, name: str) -> bool:
        """Numeric for analysis: not a date and the sample is a finite number."""
        info = self.columns.get(name)
        return bool(info and info.tag is not ColumnTag.DATE and info.numeric_sample)

    @property
    def date_columns(self) -> list[str]:
        return [name for name, info in self.columns.items() if info.tag is ColumnTag.DATE]

    @property
    def numeric_columns(self) -> list[str]:
        return [name for name in self.columns if self.is_numeric(name)]

    @property
    def categorical_columns(self) -> list[str]:
        """Label candidates: every column that is not numeric, dates included."""
        return [name for name in self.columns if not self.is_numeric(name)]

    def to_dict(self) -> dict[str, Any]:
        return {
            name: {"tag": info.tag.value, "sample": info.sample, "numeric": self.is_numeric(name)}
            for name, info in self.columns.items()
        }


def classify_columns(rows: list[Row]) -> ColumnClassification:
    """
    Classify all columns of a normalized result set.

    Args:
        rows: Normalized rows (see src.utils.result_set.normalize_rows)

    Returns:
        ColumnClassification in column order (empty for an empty result set)
    """
    classification = ColumnClassification()
    for name in column_names(rows):
        sample = first_sample(rows, name)
        classification.columns[name] = ColumnInfo(
            name=name,
            tag=classify(name, sample),
            sample=sample,
            numeric_sample=to_number(sample) is not None,
        )

    tags = {name: info.tag.value for name, info in classification.columns.items()}
    logger.debug(f"Classified columns: {tags}")
    return classification
