"""
Conversation event CRUD operations.

Event Ledger: append-only inserts guarded by the (session_id, event_id)
unique constraint, keyed lookup and timestamp-ordered pagination.

A duplicate append is reported as an AlreadyExists result rather than an
exception. Only the event key constraint is absorbed; any other integrity
failure propagates as sqlalchemy.exc.IntegrityError.

Dependencies: sqlalchemy, conversation_service.boundary.db.models
System role: Event persistence operations
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from conversation_service.boundary.db.models.event_model import (
    EVENT_KEY_CONSTRAINT,
    ConversationEventModel,
    EventType,
)
from conversation_service.boundary.db.CRUD.base_crud import BaseCRUD

# Largest OFFSET/LIMIT the stores accept (signed 64-bit).
_MAX_ROW_OFFSET = 2**63 - 1


def _event_key_columns() -> list:
    """Columns of the named event key constraint, in declaration order."""
    table = ConversationEventModel.__table__
    constraint = next(c for c in table.constraints if c.name == EVENT_KEY_CONSTRAINT)
    return list(constraint.columns)


EVENT_KEY_COLUMNS = _event_key_columns()


@dataclass(frozen=True)
class Inserted:
    """Append wrote a new row."""

    event: ConversationEventModel


@dataclass(frozen=True)
class AlreadyExists:
    """Append hit the (session_id, event_id) constraint; nothing was written."""

    session_id: str
    event_id: str


AppendResult = Inserted | AlreadyExists


class EventCRUD(BaseCRUD[ConversationEventModel]):
    """CRUD operations for ConversationEventModel."""

    def __init__(self) -> None:
        """Initialize EventCRUD with ConversationEventModel."""
        super().__init__(ConversationEventModel)

    async def append(
        self,
        session: AsyncSession,
        session_id: str,
        event_id: str,
        event_type: EventType,
        payload: dict,
        timestamp: datetime,
    ) -> AppendResult:
        """
        Insert an event unless (session_id, event_id) is already stored.

        Args:
            session: Async database session
            session_id: Owning session identifier
            event_id: Event identifier, unique within the session
            event_type: Event category
            payload: Opaque event payload
            timestamp: Event time

        Returns:
            Inserted with the new row, or AlreadyExists on a key conflict

        Raises:
            IntegrityError: On any constraint violation other than the event key
        """
        stmt = self.dialect_insert(session).values(
            session_id=session_id,
            event_id=event_id,
            type=event_type,
            payload=payload,
            timestamp=timestamp,
        )
        stmt = stmt.on_conflict_do_nothing(
            index_elements=EVENT_KEY_COLUMNS,
        )
        result = await session.scalars(stmt.returning(ConversationEventModel))
        event = result.one_or_none()
        if event is None:
            return AlreadyExists(session_id=session_id, event_id=event_id)
        return Inserted(event=event)

    async def find_by_key(
        self,
        session: AsyncSession,
        session_id: str,
        event_id: str,
    ) -> ConversationEventModel | None:
        """
        Retrieve event by its composite key.

        Args:
            session: Async database session
            session_id: Owning session identifier
            event_id: Event identifier

        Returns:
            ConversationEventModel if found, None otherwise
        """
        return await self.get_one_by(session, session_id=session_id, event_id=event_id)

    async def list_page(
        self,
        session: AsyncSession,
        session_id: str,
        page: int,
        limit: int,
    ) -> Sequence[ConversationEventModel]:
        """
        Retrieve one page of a session's events in chronological order.

        Events sharing a timestamp are ordered by event_id so page boundaries
        are deterministic. A page past the end yields an empty sequence.

        Args:
            session: Async database session
            session_id: Owning session identifier
            page: 1-based page number
            limit: Maximum number of events per page

        Returns:
            Sequence of ConversationEventModels ordered by timestamp ascending
        """
        offset = (page - 1) * limit
        if offset > _MAX_ROW_OFFSET:
            return []

        stmt = (
            select(ConversationEventModel)
            .where(ConversationEventModel.session_id == session_id)
            .order_by(
                ConversationEventModel.timestamp.asc(),
                ConversationEventModel.event_id.asc(),
            )
            .offset(offset)
            .limit(min(limit, _MAX_ROW_OFFSET))
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def count_for_session(self, session: AsyncSession, session_id: str) -> int:
        """
        Count all events recorded for a session.

        Args:
            session: Async database session
            session_id: Owning session identifier

        Returns:
            Total number of events
        """
        return await self.count_by(session, session_id=session_id)


event_crud = EventCRUD()
