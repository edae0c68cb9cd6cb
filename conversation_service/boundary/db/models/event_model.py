"""
Conversation event ORM model.

Append-only record of something that happened inside a session: a user
utterance, a bot utterance or a system event. Events are never updated or
deleted once written.

Dependencies: sqlalchemy, conversation_service.boundary.db.base
System role: Event ledger persistence
"""

import enum
from datetime import datetime

from sqlalchemy import JSON, DateTime, Enum, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from conversation_service.boundary.db.base import Base, TimestampMixin, UUIDMixin, utcnow

# Name of the composite (session_id, event_id) unique constraint. Appends use
# its columns as their ON CONFLICT target, so only this key is treated as a
# duplicate.
EVENT_KEY_CONSTRAINT = "uq_conversation_events_session_event"


class EventType(str, enum.Enum):
    """
    Conversation event categories.

    USER_SPEECH: Something the user said
    BOT_SPEECH: Something the bot said
    SYSTEM: Pipeline or platform event (hold, transfer, error, ...)
    """

    USER_SPEECH = "user_speech"
    BOT_SPEECH = "bot_speech"
    SYSTEM = "system"


class ConversationEventModel(Base, UUIDMixin, TimestampMixin):
    """
    Conversation event ORM model.

    Attributes:
        id: UUID surrogate primary key (auto-generated)
        session_id: Owning session's business identifier
        event_id: Caller-supplied event identifier, unique within the session
        type: Event category enum (USER_SPEECH/BOT_SPEECH/SYSTEM)
        payload: Opaque JSON blob
        timestamp: Event time (defaults to ingestion time)

    Constraints:
        (session_id, event_id): UNIQUE; replays of an event_id are idempotent
        (session_id, timestamp): ordering index for paginated reads
    """

    __tablename__ = "conversation_events"
    __table_args__ = (
        UniqueConstraint("session_id", "event_id", name=EVENT_KEY_CONSTRAINT),
        Index("ix_conversation_events_session_timestamp", "session_id", "timestamp"),
    )

    session_id: Mapped[str] = mapped_column(
        String(255),
        ForeignKey("sessions.session_id", ondelete="CASCADE"),
        nullable=False,
    )

    event_id: Mapped[str] = mapped_column(String(255), nullable=False)

    type: Mapped[EventType] = mapped_column(
        Enum(EventType, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )

    payload: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
