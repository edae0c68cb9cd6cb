"""
Database models package.

Exports:
  - SessionModel, SessionStatus: Session ORM model and lifecycle enum
  - ConversationEventModel, EventType: Event ORM model and category enum

Dependencies: sqlalchemy, conversation_service.boundary.db.base
System role: Database model definitions for domain entities
"""

from conversation_service.boundary.db.models.session_model import (
    INITIAL_STATUSES,
    SessionModel,
    SessionStatus,
)
from conversation_service.boundary.db.models.event_model import (
    EVENT_KEY_CONSTRAINT,
    ConversationEventModel,
    EventType,
)

__all__ = [
    "INITIAL_STATUSES",
    "SessionModel",
    "SessionStatus",
    "EVENT_KEY_CONSTRAINT",
    "ConversationEventModel",
    "EventType",
]
