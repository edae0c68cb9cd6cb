"""
API schemas.

Pydantic request/response contracts exchanged as camelCase JSON.
"""

from conversation_service.models.common import CamelModel, ErrorResponse
from conversation_service.models.event import AddEventRequest, EventResponse
from conversation_service.models.session import (
    CreateSessionRequest,
    SessionDetailResponse,
    SessionResponse,
)

__all__ = [
    "CamelModel",
    "ErrorResponse",
    "AddEventRequest",
    "EventResponse",
    "CreateSessionRequest",
    "SessionResponse",
    "SessionDetailResponse",
]
