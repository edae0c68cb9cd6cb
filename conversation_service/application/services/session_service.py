"""
Session service orchestrator.

Session lifecycle engine: composes the Session Store and Event Ledger to
create-or-get sessions, append events idempotently, read session detail
pages and complete sessions.

The service keeps no state between calls. Concurrency safety comes from
the atomic statements in the CRUD layer; nothing here reads a row and
then writes based on what it saw.

Dependencies: conversation_service.boundary.db.CRUD, conversation_service.boundary.db.models
System role: Session use case orchestration
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from conversation_service.boundary.db.base import as_utc, utcnow
from conversation_service.boundary.db.CRUD.event_crud import AlreadyExists, Inserted, event_crud
from conversation_service.boundary.db.CRUD.session_crud import session_crud
from conversation_service.boundary.db.models.event_model import ConversationEventModel, EventType
from conversation_service.boundary.db.models.session_model import (
    INITIAL_STATUSES,
    SessionModel,
    SessionStatus,
)
from conversation_service.core.exceptions import (
    EventLedgerInconsistencyError,
    InvalidSessionStatusError,
    SessionClosedError,
    SessionNotFoundError,
)
from conversation_service.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionDetail:
    """A session together with one page of its events."""

    session: SessionModel
    events: Sequence[ConversationEventModel]
    page: int
    limit: int
    total: int


class SessionService:
    """Session lifecycle orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize session service with async database session.

        Args:
            db: Async SQLAlchemy session
        """
        self.db = db

    async def create_or_get_session(
        self,
        session_id: str,
        language: str,
        metadata: dict | None = None,
        status: SessionStatus | str | None = None,
    ) -> SessionModel:
        """
        Ensure a session exists and return it.

        The first writer's fields win: calling again with a different
        language, metadata or status returns the stored session unchanged.

        Args:
            session_id: Caller-supplied session identifier
            language: Conversation language
            metadata: Optional opaque metadata
            status: Initial status (INITIATED when omitted; INITIATED or ACTIVE only)

        Returns:
            SessionModel: New or pre-existing session

        Raises:
            InvalidSessionStatusError: If status is not a valid initial status
        """
        initial_status = self._initial_status(status)

        session = await session_crud.upsert_if_absent(
            self.db,
            session_id=session_id,
            language=language,
            metadata=metadata,
            initial_status=initial_status,
        )
        await self.db.commit()

        log_with_context(
            logger,
            logging.INFO,
            "Session ensured",
            session_id=session_id,
            status=session.status,
        )
        return session

    async def add_event(
        self,
        session_id: str,
        event_id: str,
        event_type: EventType | str,
        payload: dict,
        timestamp: datetime | None = None,
    ) -> ConversationEventModel:
        """
        Append an event to a session, idempotently per event_id.

        Re-submitting an event_id already stored for the session returns the
        stored event (original payload and timestamp) instead of failing. The
        first event appended to an INITIATED session moves it to ACTIVE.

        Args:
            session_id: Target session identifier
            event_id: Event identifier, unique within the session
            event_type: Event category
            payload: Opaque event payload
            timestamp: Event time, stored in UTC (ingestion time when omitted)

        Returns:
            ConversationEventModel: Newly stored or previously stored event

        Raises:
            SessionNotFoundError: If the session does not exist
            SessionClosedError: If the session is COMPLETED
            EventLedgerInconsistencyError: If a duplicate signal has no stored row
        """
        session = await session_crud.find(self.db, session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        if not session.status.accepts_events:
            raise SessionClosedError(session_id, details={"status": session.status.value})

        result = await event_crud.append(
            self.db,
            session_id=session_id,
            event_id=event_id,
            event_type=EventType(event_type),
            payload=payload,
            timestamp=utcnow() if timestamp is None else as_utc(timestamp),
        )

        if isinstance(result, Inserted):
            if session.status.can_transition_to(SessionStatus.ACTIVE):
                await session_crud.transition_status(
                    self.db,
                    session_id,
                    from_status=session.status,
                    to_status=SessionStatus.ACTIVE,
                )
            await self.db.commit()
            log_with_context(
                logger,
                logging.INFO,
                "Event appended",
                session_id=session_id,
                event_id=event_id,
                event_type=result.event.type,
            )
            return result.event

        return await self._replayed_event(result)

    async def _replayed_event(self, duplicate: AlreadyExists) -> ConversationEventModel:
        """Resolve a duplicate append to the event already stored under its key."""
        existing = await event_crud.find_by_key(self.db, duplicate.session_id, duplicate.event_id)
        if existing is None:
            logger.error(
                "Duplicate event has no stored row",
                extra={"session_id": duplicate.session_id, "event_id": duplicate.event_id},
            )
            raise EventLedgerInconsistencyError(duplicate.session_id, duplicate.event_id)

        log_with_context(
            logger,
            logging.INFO,
            "Duplicate event replayed",
            session_id=duplicate.session_id,
            event_id=duplicate.event_id,
        )
        return existing

    async def get_session_by_id(
        self,
        session_id: str,
        page: int = 1,
        limit: int = 20,
    ) -> SessionDetail:
        """
        Get a session with one page of its events.

        Args:
            session_id: Session identifier
            page: 1-based page number
            limit: Events per page

        Returns:
            SessionDetail: Session, ordered events for the page and total count

        Raises:
            SessionNotFoundError: If the session does not exist
        """
        session = await session_crud.find(self.db, session_id)
        if session is None:
            raise SessionNotFoundError(session_id)

        events = await event_crud.list_page(self.db, session_id, page=page, limit=limit)
        total = await event_crud.count_for_session(self.db, session_id)

        return SessionDetail(
            session=session,
            events=events,
            page=page,
            limit=limit,
            total=total,
        )

    async def complete_session(self, session_id: str) -> SessionModel | None:
        """
        Mark session completed; repeated calls keep the first ended_at.

        Args:
            session_id: Session identifier

        Returns:
            SessionModel: Completed session, or None if it does not exist
        """
        session = await session_crud.transition_to_completed(self.db, session_id)
        await self.db.commit()

        if session is not None:
            log_with_context(
                logger,
                logging.INFO,
                "Session completed",
                session_id=session_id,
                ended_at=session.ended_at,
            )
        return session

    async def activate_session(self, session_id: str) -> SessionModel | None:
        """
        Promote an INITIATED session to ACTIVE.

        Sessions in any other status are returned unchanged.

        Args:
            session_id: Session identifier

        Returns:
            SessionModel: Current session, or None if it does not exist
        """
        session = await session_crud.transition_status(
            self.db,
            session_id,
            from_status=SessionStatus.INITIATED,
            to_status=SessionStatus.ACTIVE,
        )
        await self.db.commit()

        if session is not None:
            log_with_context(logger, logging.INFO, "Session activated", session_id=session_id)
            return session
        return await session_crud.find(self.db, session_id)

    @staticmethod
    def _initial_status(status: SessionStatus | str | None) -> SessionStatus:
        """Resolve and validate the status a new session starts in."""
        if status is None:
            return SessionStatus.INITIATED
        try:
            resolved = SessionStatus(status)
        except ValueError:
            raise InvalidSessionStatusError(str(status)) from None
        if resolved not in INITIAL_STATUSES:
            raise InvalidSessionStatusError(resolved.value)
        return resolved
