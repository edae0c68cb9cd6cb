"""
Session CRUD operations.

Session Store: atomic create-if-absent, lookup by business identifier and
the conditional status updates behind the session state machine. Every
write is a single guarded statement so concurrent callers never race
between a read and a write.

Dependencies: sqlalchemy, conversation_service.boundary.db.models
System role: Session persistence operations
"""

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from conversation_service.boundary.db.base import utcnow
from conversation_service.boundary.db.models.session_model import SessionModel, SessionStatus
from conversation_service.boundary.db.CRUD.base_crud import BaseCRUD

# Rows returned by guarded UPDATEs overwrite any loaded instance as-is.
_RETURNING_OPTIONS = {"synchronize_session": False, "populate_existing": True}


class SessionCRUD(BaseCRUD[SessionModel]):
    """
    CRUD operations for SessionModel.

    Extends BaseCRUD with the upsert and compare-and-set primitives the
    lifecycle engine relies on.
    """

    def __init__(self) -> None:
        """Initialize SessionCRUD with SessionModel."""
        super().__init__(SessionModel)

    async def upsert_if_absent(
        self,
        session: AsyncSession,
        session_id: str,
        language: str,
        metadata: dict | None,
        initial_status: SessionStatus = SessionStatus.INITIATED,
    ) -> SessionModel:
        """
        Create the session unless it exists; return the stored row either way.

        Issues one INSERT ... ON CONFLICT (session_id) DO UPDATE statement whose
        update is a no-op, so RETURNING yields the first writer's row. All
        creation fields are ignored when the session already exists.

        Args:
            session: Async database session
            session_id: Caller-supplied session identifier
            language: Conversation language
            metadata: Opaque metadata map (None stored as {})
            initial_status: Status for a newly created row

        Returns:
            SessionModel: Newly created or pre-existing session
        """
        stmt = self.dialect_insert(session).values(
            session_id=session_id,
            language=language,
            session_metadata=metadata or {},
            status=initial_status,
            started_at=utcnow(),
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[SessionModel.session_id],
            set_={"session_id": stmt.excluded.session_id},
        )
        result = await session.scalars(
            stmt.returning(SessionModel),
            execution_options={"populate_existing": True},
        )
        return result.one()

    async def find(self, session: AsyncSession, session_id: str) -> SessionModel | None:
        """
        Retrieve session by business identifier.

        Args:
            session: Async database session
            session_id: Caller-supplied session identifier

        Returns:
            SessionModel if found, None otherwise
        """
        return await self.get_one_by(session, session_id=session_id)

    async def transition_to_completed(
        self,
        session: AsyncSession,
        session_id: str,
    ) -> SessionModel | None:
        """
        Mark session completed unless it already is.

        The UPDATE is guarded by status != COMPLETED, so ended_at is written
        exactly once. When the guard does not match, the stored row is
        returned unmodified.

        Args:
            session: Async database session
            session_id: Caller-supplied session identifier

        Returns:
            Completed SessionModel, or None if the session does not exist
        """
        stmt = (
            update(SessionModel)
            .where(
                SessionModel.session_id == session_id,
                SessionModel.status != SessionStatus.COMPLETED,
            )
            .values(status=SessionStatus.COMPLETED, ended_at=utcnow())
            .returning(SessionModel)
        )
        result = await session.execute(stmt, execution_options=_RETURNING_OPTIONS)
        completed = result.scalar_one_or_none()
        if completed is not None:
            return completed
        return await self.find(session, session_id)

    async def transition_status(
        self,
        session: AsyncSession,
        session_id: str,
        from_status: SessionStatus,
        to_status: SessionStatus,
    ) -> SessionModel | None:
        """
        Compare-and-set the session status.

        Args:
            session: Async database session
            session_id: Caller-supplied session identifier
            from_status: Status the row must currently have
            to_status: Status to write

        Returns:
            Updated SessionModel, or None if the row is absent or not in from_status
        """
        stmt = (
            update(SessionModel)
            .where(
                SessionModel.session_id == session_id,
                SessionModel.status == from_status,
            )
            .values(status=to_status)
            .returning(SessionModel)
        )
        result = await session.execute(stmt, execution_options=_RETURNING_OPTIONS)
        return result.scalar_one_or_none()


session_crud = SessionCRUD()
