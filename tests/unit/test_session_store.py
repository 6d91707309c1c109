"""
Unit tests for Session Store

Tests per-tab analysis history and concurrent access.
"""
from concurrent.futures import ThreadPoolExecutor

import pytest

from src.core.exceptions import ConfigurationError, QueryLensError, SessionNotFoundError
from src.services.analytics_service import analyze_result_set
from src.services.session_store import DEFAULT_TAB_ID, SessionStore


@pytest.fixture
def report(monthly_revenue_rows):
    return analyze_result_set(monthly_revenue_rows)


class TestSessionStore:
    """Test SessionStore operations"""

    def test_append_and_history(self, report):
        store = SessionStore()

        store.append("tab-1", "Revenue by month?", report)

        history = store.history("tab-1")
        assert len(history) == 1
        assert history[0].question == "Revenue by month?"
        assert history[0].get_summary()["visualization"] == "chart"

    def test_tabs_are_isolated(self, report):
        store = SessionStore()

        store.append("tab-1", "q1", report)
        store.append("tab-2", "q2", report)

        assert [e.question for e in store.history("tab-1")] == ["q1"]
        assert [e.question for e in store.history("tab-2")] == ["q2"]

    def test_history_is_bounded(self, report):
        """Test only the newest entries are kept"""
        store = SessionStore(max_history=3)

        for i in range(5):
            store.append("tab-1", f"q{i}", report)

        assert [e.question for e in store.history("tab-1")] == ["q2", "q3", "q4"]
        assert store.latest("tab-1").question == "q4"

    def test_blank_tab_uses_default(self, report):
        store = SessionStore()

        store.append(None, "q", report)
        store.append("  ", "q", report)

        assert len(store.history(DEFAULT_TAB_ID)) == 2

    def test_unknown_tab(self):
        store = SessionStore()

        assert store.history("nope") == []
        assert store.latest("nope") is None
        with pytest.raises(SessionNotFoundError, match="nope"):
            store.require("nope")

    def test_clear_keeps_tab(self, report):
        store = SessionStore()
        store.append("tab-1", "q", report)

        store.clear("tab-1")

        assert store.require("tab-1") == []
        assert "tab-1" in store.active_tab_ids()

    def test_delete(self, report):
        store = SessionStore()
        store.append("tab-1", "q", report)

        assert store.delete("tab-1") is True
        assert store.delete("tab-1") is False
        assert store.active_tab_ids() == []

    def test_cleanup_stale_keeps_default(self, report):
        store = SessionStore()
        for tab in ("tab-1", "tab-2", DEFAULT_TAB_ID):
            store.append(tab, "q", report)

        removed = store.cleanup_stale(["tab-2"])

        assert removed == ["tab-1"]
        assert sorted(store.active_tab_ids()) == [DEFAULT_TAB_ID, "tab-2"]

    def test_invalid_max_history(self):
        with pytest.raises(ConfigurationError):
            SessionStore(max_history=0)

    def test_not_found_is_querylens_error(self):
        error = SessionNotFoundError("tab-9")

        assert isinstance(error, QueryLensError)
        assert error.tab_id == "tab-9"
        assert str(error) == "No session found for tab: tab-9"

    def test_history_returns_copy(self, report):
        store = SessionStore()
        store.append("tab-1", "q", report)

        store.history("tab-1").clear()

        assert len(store.history("tab-1")) == 1


class TestSessionStoreThreadSafety:
    """Test concurrent appends from many requests"""

    def test_concurrent_appends(self, report):
        store = SessionStore(max_history=1000)

        def worker(i):
            store.append(f"tab-{i % 4}", f"q{i}", report)

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(worker, range(200)))

        assert sum(len(store.history(f"tab-{i}")) for i in range(4)) == 200
        assert all(len(store.history(f"tab-{i}")) == 50 for i in range(4))
