"""
Core domain module.

Contains the exception hierarchy shared by the service and API layers.
"""

from conversation_service.core.exceptions import (
    ConversationServiceException,
    EventLedgerInconsistencyError,
    InvalidSessionStatusError,
    SessionClosedError,
    SessionNotFoundError,
    ValidationError,
)

__all__ = [
    "ConversationServiceException",
    "ValidationError",
    "InvalidSessionStatusError",
    "SessionNotFoundError",
    "SessionClosedError",
    "EventLedgerInconsistencyError",
]
