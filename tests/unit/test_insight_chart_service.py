"""
Unit tests for Insight Chart Service

Tests chart extraction from natural-language insight text.
"""
import pytest

from src.services.insight_chart_service import chart_from_insights, parse_scaled_number


class TestParseScaledNumber:
    """Test parse_scaled_number function"""

    @pytest.mark.parametrize("text,expected", [
        ("2.4M", 2_400_000),
        ("3K", 3_000),
        ("1B", 1_000_000_000),
        ("1,234", 1_234),
        ("12.5", 12.5),
    ])
    def test_scaled(self, text, expected):
        assert parse_scaled_number(text) == pytest.approx(expected)

    def test_not_a_number(self):
        assert parse_scaled_number("abc") is None
        assert parse_scaled_number("") is None


class TestChartFromInsights:
    """Test chart_from_insights function"""

    def test_quarter_values(self):
        """Test period/value pairs become a bar chart"""
        chart = chart_from_insights("Q1: $2.4M, Q2: $3.1M, Q3: $2.8M")

        assert chart.chart_type == "bar"
        assert chart.labels == ["Q1", "Q2", "Q3"]
        assert chart.datasets[0].data == pytest.approx([2_400_000, 3_100_000, 2_800_000])
        assert chart.data_columns == ["Insights Data"]
        assert chart.label_column is None

    def test_percentages(self):
        chart = chart_from_insights("Ohio grew 23% while Utah gained 15.5% overall")

        assert chart.datasets[0].data == [23.0, 15.5]
        assert chart.labels[0] == "Ohio grew"

    def test_bare_currency_figures(self):
        chart = chart_from_insights("Spend went from $1,200 to $3.5K")

        assert chart.labels == ["Value 1", "Value 2"]
        assert chart.datasets[0].data == pytest.approx([1_200, 3_500])

    def test_many_points_is_line(self):
        text = ", ".join(f"Q{q}: {i * 10}" for i in range(1, 4) for q in range(1, 5))

        chart = chart_from_insights(text)

        assert len(chart.labels) == 12
        assert chart.chart_type == "line"

    @pytest.mark.parametrize("text", [None, "", "No figures here", "Only $5 was spent", 42])
    def test_nothing_to_chart(self, text):
        assert chart_from_insights(text) is None
