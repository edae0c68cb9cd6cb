"""
Conversation session ORM model.

Represents one conversational session and its lifecycle status.
Events recorded during the conversation reference the session by its
business identifier (session_id).

Dependencies: sqlalchemy, conversation_service.boundary.db.base
System role: Session persistence and status state machine
"""

import enum
from datetime import datetime

from sqlalchemy import JSON, DateTime, Enum, String
from sqlalchemy.orm import Mapped, mapped_column

from conversation_service.boundary.db.base import Base, TimestampMixin, UUIDMixin, utcnow


class SessionStatus(str, enum.Enum):
    """
    Session lifecycle states.

    INITIATED: Session registered, no conversation activity yet
    ACTIVE: Conversation in progress (first event appended or explicit activation)
    COMPLETED: Conversation finished; terminal for event ingestion
    FAILED: Conversation aborted; set by an external collaborator only
    """

    INITIATED = "initiated"
    ACTIVE = "active"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def accepts_events(self) -> bool:
        """Whether events may still be appended in this state."""
        return self is not SessionStatus.COMPLETED

    def can_transition_to(self, target: "SessionStatus") -> bool:
        """Whether the engine may move a session from this state to ``target``."""
        return target in _TRANSITIONS[self]


_TRANSITIONS: dict[SessionStatus, frozenset[SessionStatus]] = {
    SessionStatus.INITIATED: frozenset({SessionStatus.ACTIVE, SessionStatus.COMPLETED}),
    SessionStatus.ACTIVE: frozenset({SessionStatus.COMPLETED}),
    SessionStatus.COMPLETED: frozenset(),
    SessionStatus.FAILED: frozenset({SessionStatus.COMPLETED}),
}

# Statuses a caller may request when creating a session.
INITIAL_STATUSES = frozenset({SessionStatus.INITIATED, SessionStatus.ACTIVE})


class SessionModel(Base, UUIDMixin, TimestampMixin):
    """
    Conversation session ORM model.

    Attributes:
        id: UUID surrogate primary key (auto-generated)
        session_id: Caller-supplied session identifier (unique, immutable)
        status: Lifecycle status enum (INITIATED/ACTIVE/COMPLETED/FAILED)
        language: Conversation language, fixed at creation
        started_at: Session start timestamp (UTC), fixed at creation
        ended_at: Completion timestamp; set once when status becomes COMPLETED
        session_metadata: Opaque JSON map supplied at creation

    Constraints:
        session_id: UNIQUE; one row per conversation
    """

    __tablename__ = "sessions"

    session_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        doc="Caller-supplied session identifier",
    )

    status: Mapped[SessionStatus] = mapped_column(
        Enum(SessionStatus, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=SessionStatus.INITIATED,
    )

    language: Mapped[str] = mapped_column(String(32), nullable=False)

    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    ended_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
    )

    session_metadata: Mapped[dict] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        doc="Opaque session metadata supplied by the caller",
    )
