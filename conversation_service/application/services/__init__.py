"""Service orchestrators."""

from .session_service import SessionDetail, SessionService

__all__ = [
    "SessionDetail",
    "SessionService",
]
