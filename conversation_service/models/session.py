"""
Session domain models and schemas.

Request/response schemas for session operations.

Dependencies: pydantic
System role: Session API contracts
"""

from datetime import datetime
from typing import Literal

from pydantic import Field

from conversation_service.boundary.db.models.session_model import SessionStatus
from conversation_service.models.common import CamelModel
from conversation_service.models.event import EventResponse


class CreateSessionRequest(CamelModel):
    """Request schema for creating (or fetching) a session."""

    session_id: str = Field(min_length=1, description="Caller-supplied session identifier")
    language: str = Field(min_length=1, description="Conversation language, e.g. 'en'")
    metadata: dict | None = Field(default=None, description="Optional opaque session metadata")
    status: Literal["initiated", "active"] | None = Field(
        default=None,
        description="Initial status; defaults to 'initiated'",
    )


class SessionResponse(CamelModel):
    """Response schema for session operations."""

    session_id: str
    status: SessionStatus
    language: str
    started_at: datetime
    ended_at: datetime | None = None
    metadata: dict = Field(default_factory=dict, validation_alias="session_metadata")


class SessionDetailResponse(SessionResponse):
    """Session with one page of its events."""

    events: list[EventResponse]
    page: int
    limit: int
    total: int
