"""
pytest configuration - pure in-memory result sets, no database or files
"""
import os

# Must be set before src.core.config is imported anywhere
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest  # noqa: E402


@pytest.fixture
def monthly_revenue_rows() -> list[dict]:
    """Two months of revenue"""
    return [
        {"month": "2024-01", "revenue": 1000},
        {"month": "2024-02", "revenue": 1500},
    ]


@pytest.fixture
def state_rows() -> list[dict]:
    """Household counts per state, keyed by a single place column"""
    return [
        {"state": "California", "households": 1200},
        {"state": "TX", "households": 900},
        {"state": "new york", "households": 700},
        {"state": "Ohio", "households": 300},
    ]


@pytest.fixture
def category_sales_rows() -> list[dict]:
    """Order counts and amounts per category"""
    return [
        {"category": "Books", "order_count": 12, "total_amount": 250.5},
        {"category": "Games", "order_count": 7, "total_amount": 410.0},
        {"category": "Music", "order_count": 3, "total_amount": 89.99},
    ]
