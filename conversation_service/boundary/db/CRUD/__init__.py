"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from conversation_service.boundary.db.CRUD import session_crud, event_crud

    session = await session_crud.find(db, "s1")
    result = await event_crud.append(db, "s1", "e1", EventType.SYSTEM, {}, now)
"""

from conversation_service.boundary.db.CRUD.base_crud import BaseCRUD
from conversation_service.boundary.db.CRUD.session_crud import SessionCRUD, session_crud
from conversation_service.boundary.db.CRUD.event_crud import (
    AlreadyExists,
    AppendResult,
    EventCRUD,
    Inserted,
    event_crud,
)

__all__ = [
    "BaseCRUD",
    "SessionCRUD",
    "session_crud",
    "EventCRUD",
    "event_crud",
    "AppendResult",
    "Inserted",
    "AlreadyExists",
]
