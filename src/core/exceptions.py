"""
QueryLens Custom Exceptions
"""


class QueryLensError(Exception):
    """Base exception for all QueryLens errors"""

    pass


class ValidationError(QueryLensError):
    """Request payload validation errors"""

    pass


class ConfigurationError(QueryLensError):
    """Configuration errors"""

    pass


class SessionNotFoundError(QueryLensError):
    """No stored analyses exist for the requested tab"""

    def __init__(self, tab_id: str):
        super().__init__(f"No session found for tab: {tab_id}")
        self.tab_id = tab_id
