"""
Event domain models and schemas.

Request/response schemas for conversation events.

Dependencies: pydantic
System role: Event API contracts
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import Field

from conversation_service.boundary.db.models.event_model import EventType
from conversation_service.models.common import CamelModel


class AddEventRequest(CamelModel):
    """Request schema for appending an event to a session."""

    event_id: str = Field(min_length=1, description="Event identifier, unique within the session")
    type: Literal["user_speech", "bot_speech", "system"]
    payload: dict[str, Any] = Field(description="Opaque event payload")
    timestamp: datetime | None = Field(
        default=None,
        description="Event time; ingestion time when omitted",
    )


class EventResponse(CamelModel):
    """Response schema for a stored event."""

    session_id: str
    event_id: str
    type: EventType
    payload: dict[str, Any]
    timestamp: datetime
