"""
QueryLens FastAPI Dependencies

Shared dependencies for API endpoints.
"""

from functools import lru_cache

from src.core.config import settings
from src.services.session_store import SessionStore


@lru_cache(maxsize=1)
def get_session_store() -> SessionStore:
    """
    FastAPI dependency returning the per-tab session store.

    One store per process; tests swap it out through app.dependency_overrides.

    Example:
        @router.get("/sessions/{tab_id}")
        async def history(tab_id: str, store: SessionStore = Depends(get_session_store)):
            return store.history(tab_id)
    """
    return SessionStore(max_history=settings.session_max_history)
