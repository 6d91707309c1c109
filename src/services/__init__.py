"""
Services Package

Analytics services computed over query results.
"""

from .analytics_service import AnalyticsReport, analyze_result_set
from .insight_chart_service import chart_from_insights
from .session_store import SessionStore
from .visualization_service import select_visualization

__all__ = [
    "AnalyticsReport",
    "analyze_result_set",
    "chart_from_insights",
    "SessionStore",
    "select_visualization",
]
