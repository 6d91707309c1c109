"""
Unit tests for Statistics Service

Tests descriptive statistics per numeric column.
"""
import math

import pytest

from src.services.statistics_service import summarize, summarize_columns
from src.utils.column_classifier import classify_columns
from src.utils.result_set import normalize_rows


class TestSummarize:
    """Test summarize function"""

    def test_even_length(self):
        """Test median midpoint and lower-index quartiles"""
        summary = summarize([4, 1, 3, 2])

        assert summary.count == 4
        assert summary.mean == 2.5
        assert summary.median == 2.5
        assert summary.min == 1
        assert summary.max == 4
        assert summary.range == 3
        assert summary.q1 == 2
        assert summary.q3 == 4
        assert summary.iqr == 2

    def test_odd_length(self):
        summary = summarize([10, 30, 20])

        assert summary.median == 20
        assert summary.q1 == 10
        assert summary.q3 == 30

    def test_population_stddev(self):
        """Test stddev divides by n, not n - 1"""
        summary = summarize([2, 4, 4, 4, 5, 5, 7, 9])

        assert summary.stddev == pytest.approx(2.0)

    def test_mode(self):
        """Test mode rounds to 2 decimals before counting"""
        assert summarize([1.001, 1.004, 2.0]).mode == 1.0
        assert summarize([5, 3, 5, 1]).mode == 5

    def test_mode_tie_takes_smallest(self):
        assert summarize([3, 1, 2]).mode == 1

    def test_single_value(self):
        summary = summarize([7.5])

        assert summary.count == 1
        assert summary.stddev == 0
        assert summary.q1 == summary.q3 == 7.5

    def test_empty(self):
        """Test no values gives no summary"""
        assert summarize([]) is None

    def test_invariants(self):
        """Test min <= q1 <= median <= q3 <= max and stddev >= 0"""
        summary = summarize([12, 7, 3, 14, 21, 8, 8, 19, 2])

        assert summary.min <= summary.q1 <= summary.median <= summary.q3 <= summary.max
        assert summary.stddev >= 0
        assert all(math.isfinite(v) for v in summary.to_dict().values())


class TestSummarizeColumns:
    """Test summarize_columns function"""

    def test_numeric_columns_only(self, category_sales_rows):
        """Test categorical columns are skipped"""
        rows = normalize_rows(category_sales_rows)

        summaries = summarize_columns(rows, classify_columns(rows))

        assert list(summaries) == ["order_count", "total_amount"]
        assert summaries["order_count"].max == 12

    def test_date_columns_skipped(self):
        """Test numeric-looking date columns get no statistics"""
        rows = normalize_rows([{"year": 2022, "score": 1.5}, {"year": 2023, "score": 2.5}])

        summaries = summarize_columns(rows, classify_columns(rows))

        assert list(summaries) == ["score"]

    def test_non_finite_cells_filtered(self):
        rows = normalize_rows([{"score": 1}, {"score": None}, {"score": "bad"}, {"score": 3}])

        summaries = summarize_columns(rows, classify_columns(rows))

        assert summaries["score"].count == 2
        assert summaries["score"].mean == 2

    def test_empty_result(self):
        assert summarize_columns([], classify_columns([])) == {}
