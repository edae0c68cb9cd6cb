"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Async connection management
  - init_models(), dispose_engine(): Schema creation and shutdown
  - SessionModel, ConversationEventModel: Core domain entities
  - SessionStatus, EventType: Enum types for state tracking
  - session_crud, event_crud: CRUD operation singletons

Dependencies: sqlalchemy, conversation_service.configs
System role: Database adapter providing persistent storage for sessions
and their append-only event ledger.
"""

from conversation_service.boundary.db.base import Base, TimestampMixin, UUIDMixin
from conversation_service.boundary.db.connection import (
    dispose_engine,
    get_async_db,
    get_async_engine,
    get_async_session_factory,
    init_models,
)
from conversation_service.boundary.db.models import (
    ConversationEventModel,
    EventType,
    SessionModel,
    SessionStatus,
)
from conversation_service.boundary.db.CRUD import (
    AlreadyExists,
    BaseCRUD,
    EventCRUD,
    Inserted,
    SessionCRUD,
    event_crud,
    session_crud,
)

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    # Connection
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    "init_models",
    "dispose_engine",
    # Models
    "SessionModel",
    "SessionStatus",
    "ConversationEventModel",
    "EventType",
    # CRUD classes
    "BaseCRUD",
    "SessionCRUD",
    "EventCRUD",
    "Inserted",
    "AlreadyExists",
    # CRUD singletons
    "session_crud",
    "event_crud",
]
