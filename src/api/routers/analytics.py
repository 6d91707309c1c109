"""
QueryLens Analytics API Router

Endpoints that run the result-set analytics engine over rows produced by
the query layer, plus the per-tab analysis history.
"""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from src.api.dependencies import get_session_store
from src.core.config import settings
from src.core.exceptions import SessionNotFoundError, ValidationError
from src.core.logging import get_logger
from src.services.analytics_service import analyze_result_set, check_row_limit
from src.services.insight_chart_service import chart_from_insights
from src.services.session_store import SessionStore
from src.services.visualization_service import NoVisualization
from src.utils.column_classifier import classify_columns
from src.utils.formatters import format_rows
from src.utils.result_set import column_names, normalize_rows

logger = get_logger(__name__)

router = APIRouter(tags=["analytics"])


class ResultSetRequest(BaseModel):
    """Rows of one executed query"""
    rows: list[dict[str, Any]] = Field(default_factory=list, description="Result rows, uniform columns")


class AnalyzeRequest(ResultSetRequest):
    """Request to analyze a query result"""
    tab_id: str | None = Field(None, description="Conversation tab to store the analysis under")
    question: str | None = Field(None, description="Question that produced the result")


class InsightChartRequest(BaseModel):
    """Insight text returned with a query result"""
    text: str = Field(..., description="Natural-language insight text")


class CleanupRequest(BaseModel):
    """Tabs still open in the client"""
    active_tab_ids: list[str] = Field(default_factory=list)


def _check_size(rows: list[dict[str, Any]]) -> None:
    try:
        check_row_limit(rows, settings.analytics_max_rows)
    except ValidationError as e:
        raise HTTPException(status_code=413, detail=str(e))


@router.post("/analyze")
async def analyze(request: AnalyzeRequest, store: SessionStore = Depends(get_session_store)):
    """
    Run the full analytics pass: classification, statistics, correlation,
    trends and the recommended visualization.
    """
    _check_size(request.rows)
    report = analyze_result_set(request.rows)

    if request.tab_id:
        store.append(request.tab_id, request.question or "", report)

    return report.to_dict()


@router.post("/classify")
async def classify(request: ResultSetRequest):
    """Classify every column of a result set"""
    _check_size(request.rows)
    return classify_columns(normalize_rows(request.rows)).to_dict()


@router.post("/format")
async def format_table(request: ResultSetRequest):
    """Format result cells for table display"""
    _check_size(request.rows)
    rows = normalize_rows(request.rows)
    return {"columns": column_names(rows), "rows": format_rows(rows, classify_columns(rows))}


@router.post("/insight-chart")
async def insight_chart(request: InsightChartRequest):
    """Extract a chart from insight text"""
    chart = chart_from_insights(request.text)
    return chart.to_dict() if chart else NoVisualization().to_dict()


@router.get("/sessions/{tab_id}")
async def get_session(tab_id: str, store: SessionStore = Depends(get_session_store)):
    """Analysis history of one tab"""
    try:
        history = store.require(tab_id)
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return {
        "tab_id": tab_id,
        "total_analyses": len(history),
        "analyses": [entry.get_summary() for entry in history],
        "latest": history[-1].report.to_dict() if history else None,
    }


@router.delete("/sessions/{tab_id}")
async def clear_session(tab_id: str, store: SessionStore = Depends(get_session_store)):
    """Clear a tab's analysis history"""
    store.clear(tab_id)
    return {"tab_id": tab_id, "status": "cleared"}


@router.post("/sessions/cleanup")
async def cleanup_sessions(request: CleanupRequest, store: SessionStore = Depends(get_session_store)):
    """Drop sessions for tabs the client no longer has open"""
    removed = store.cleanup_stale(request.active_tab_ids)
    return {"removed": removed, "active": store.active_tab_ids()}
