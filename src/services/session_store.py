"""
Session Store

Per-tab history of analyzed query results. Each conversation tab keeps
its own bounded list of analyses; the store is created once by the API
layer and injected where it is needed rather than living in module state.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from src.core.exceptions import ConfigurationError, SessionNotFoundError
from src.core.logging import get_logger
from src.services.analytics_service import AnalyticsReport

logger = get_logger(__name__)

DEFAULT_TAB_ID = "default"


@dataclass
class StoredAnalysis:
    """One analyzed query result in a tab's history."""

    question: str
    report: AnalyticsReport
    timestamp: str

    def get_summary(self) -> dict[str, Any]:
        """Summary without the full report."""
        return {
            "question": self.question,
            "row_count": self.report.row_count,
            "visualization": self.report.visualization.kind,
            "timestamp": self.timestamp,
        }


class SessionStore:
    """
    Thread-safe map of tab id -> analysis history.

    A missing or blank tab id is stored under "default".
    """

    def __init__(self, max_history: int = 10):
        if max_history < 1:
            raise ConfigurationError(f"max_history must be at least 1, got {max_history}")
        self.max_history = max_history
        self._sessions: dict[str, list[StoredAnalysis]] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _key(tab_id: str | None) -> str:
        if not tab_id or not str(tab_id).strip():
            return DEFAULT_TAB_ID
        return str(tab_id).strip()

    def append(self, tab_id: str | None, question: str, report: AnalyticsReport) -> StoredAnalysis:
        """
        Add an analysis to a tab's history, keeping only the newest entries.

        Args:
            tab_id: Conversation tab identifier
            question: Natural-language question that produced the result
            report: Analytics report for the result

        Returns:
            The stored entry
        """
        key = self._key(tab_id)
        entry = StoredAnalysis(question=question or "", report=report, timestamp=datetime.now(UTC).isoformat())

        with self._lock:
            history = self._sessions.setdefault(key, [])
            if not history:
                logger.info(f"Creating new session for tab: {key}")
            history.append(entry)
            if len(history) > self.max_history:
                del history[: len(history) - self.max_history]
            count = len(history)

        logger.debug(f"Stored analysis for tab {key} (total: {count})")
        return entry

    def history(self, tab_id: str | None) -> list[StoredAnalysis]:
        """History of a tab, oldest first (empty if the tab is unknown)."""
        with self._lock:
            return list(self._sessions.get(self._key(tab_id), []))

    def latest(self, tab_id: str | None) -> StoredAnalysis | None:
        history = self.history(tab_id)
        return history[-1] if history else None

    def require(self, tab_id: str | None) -> list[StoredAnalysis]:
        """
        History of a tab that must exist.

        Raises:
            SessionNotFoundError: If the tab has no session
        """
        key = self._key(tab_id)
        with self._lock:
            if key not in self._sessions:
                raise SessionNotFoundError(key)
            return list(self._sessions[key])

    def clear(self, tab_id: str | None) -> None:
        """Empty a tab's history but keep the tab."""
        key = self._key(tab_id)
        with self._lock:
            if key in self._sessions:
                logger.info(f"Clearing session for tab: {key}")
                self._sessions[key] = []
            else:
                logger.info(f"No session found for tab: {key}, nothing to clear")

    def delete(self, tab_id: str | None) -> bool:
        """Remove a tab entirely (tab closed). Returns True if it existed."""
        key = self._key(tab_id)
        with self._lock:
            existed = self._sessions.pop(key, None) is not None
        if existed:
            logger.info(f"Deleted session for tab: {key}")
        return existed

    def active_tab_ids(self) -> list[str]:
        with self._lock:
            return list(self._sessions)

    def cleanup_stale(self, active_tab_ids: list[str]) -> list[str]:
        """
        Drop sessions for tabs that no longer exist.

        The default tab is never dropped.

        Returns:
            Tab ids that were removed
        """
        keep = {self._key(tab_id) for tab_id in active_tab_ids} | {DEFAULT_TAB_ID}
        with self._lock:
            stale = [key for key in self._sessions if key not in keep]
            for key in stale:
                del self._sessions[key]

        for key in stale:
            logger.info(f"Cleaned up stale session for tab: {key}")
        return stale
