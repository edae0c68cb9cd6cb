"""
Test suite for SessionService.

Exercises the session lifecycle end to end against an in-memory SQLite
database: create-or-get, idempotent event appends, paginated detail reads,
completion and activation.

System role: Verification of session lifecycle orchestration layer
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from conversation_service.application.services.session_service import SessionDetail, SessionService
from conversation_service.boundary.db.base import Base
from conversation_service.boundary.db.CRUD.event_crud import event_crud
from conversation_service.boundary.db.CRUD.session_crud import session_crud
from conversation_service.boundary.db.models.event_model import EventType
from conversation_service.boundary.db.models.session_model import SessionStatus
from conversation_service.core.exceptions import (
    InvalidSessionStatusError,
    SessionClosedError,
    SessionNotFoundError,
)


@pytest.fixture
def session_service(test_async_db: AsyncSession) -> SessionService:
    """Provide SessionService bound to the test database."""
    return SessionService(db=test_async_db)


class TestSessionServiceInit:
    """Test suite for SessionService initialization."""

    def test_init_should_store_db(self, test_async_db: AsyncSession) -> None:
        """Test SessionService stores db from constructor."""
        service = SessionService(db=test_async_db)

        assert service.db is test_async_db


class TestCreateOrGetSession:
    """Test suite for SessionService.create_or_get_session() method."""

    @pytest.mark.asyncio
    async def test_create_should_start_initiated_without_end_time(
        self, session_service: SessionService
    ) -> None:
        """Test a new session starts INITIATED with started_at set."""
        session = await session_service.create_or_get_session("s1", "en")

        assert session.session_id == "s1"
        assert session.language == "en"
        assert session.status == SessionStatus.INITIATED
        assert session.started_at is not None
        assert session.ended_at is None
        assert session.session_metadata == {}

    @pytest.mark.asyncio
    async def test_create_should_accept_active_initial_status(
        self, session_service: SessionService
    ) -> None:
        """Test callers may open a session directly as ACTIVE."""
        session = await session_service.create_or_get_session("s1", "en", status="active")

        assert session.status == SessionStatus.ACTIVE

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", ["completed", "failed", "paused"])
    async def test_create_should_reject_invalid_initial_status(
        self, session_service: SessionService, status: str
    ) -> None:
        """Test only initiated or active may be requested at creation."""
        with pytest.raises(InvalidSessionStatusError):
            await session_service.create_or_get_session("s1", "en", status=status)

        with pytest.raises(SessionNotFoundError):
            await session_service.get_session_by_id("s1")

    @pytest.mark.asyncio
    async def test_create_twice_should_return_original_session(
        self, session_service: SessionService
    ) -> None:
        """Test the second call returns the first writer's fields unchanged."""
        # Arrange
        first = await session_service.create_or_get_session("s1", "en", {"agent": "a"})

        # Act
        second = await session_service.create_or_get_session("s1", "fr", {"agent": "b"})

        # Assert
        assert second.id == first.id
        assert second.language == "en"
        assert second.session_metadata == {"agent": "a"}
        assert second.started_at == first.started_at


class TestAddEvent:
    """Test suite for SessionService.add_event() method."""

    @pytest.mark.asyncio
    async def test_add_event_should_raise_for_unknown_session(
        self, session_service: SessionService
    ) -> None:
        """Test appending to a missing session raises SessionNotFoundError."""
        with pytest.raises(SessionNotFoundError) as exc_info:
            await session_service.add_event("missing", "e1", EventType.USER_SPEECH, {})

        assert exc_info.value.session_id == "missing"
        with pytest.raises(SessionNotFoundError):
            await session_service.get_session_by_id("missing")

    @pytest.mark.asyncio
    async def test_add_event_should_store_event(
        self, session_service: SessionService, base_time: datetime
    ) -> None:
        """Test a new event is stored with its type, payload and timestamp."""
        # Arrange
        await session_service.create_or_get_session("s1", "en")

        # Act
        event = await session_service.add_event(
            "s1", "e1", "user_speech", {"text": "hello"}, timestamp=base_time
        )

        # Assert
        assert event.session_id == "s1"
        assert event.event_id == "e1"
        assert event.type == EventType.USER_SPEECH
        assert event.payload == {"text": "hello"}
        assert event.timestamp.replace(tzinfo=None) == base_time.replace(tzinfo=None)

    @pytest.mark.asyncio
    async def test_add_event_should_default_timestamp(self, session_service: SessionService) -> None:
        """Test omitted timestamps are filled with the ingestion time."""
        await session_service.create_or_get_session("s1", "en")

        event = await session_service.add_event("s1", "e1", EventType.SYSTEM, {})

        assert event.timestamp is not None

    @pytest.mark.asyncio
    async def test_add_event_should_promote_initiated_session_to_active(
        self, session_service: SessionService
    ) -> None:
        """Test the first event moves an INITIATED session to ACTIVE."""
        # Arrange
        await session_service.create_or_get_session("s1", "en")

        # Act
        await session_service.add_event("s1", "e1", EventType.USER_SPEECH, {})

        # Assert
        detail = await session_service.get_session_by_id("s1")
        assert detail.session.status == SessionStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_duplicate_event_should_return_original(
        self, session_service: SessionService, base_time: datetime
    ) -> None:
        """Test replaying an event_id returns the stored event and writes nothing."""
        # Arrange
        await session_service.create_or_get_session("s1", "en")
        original = await session_service.add_event(
            "s1", "e1", EventType.USER_SPEECH, {"text": "first"}, timestamp=base_time
        )

        # Act
        replayed = await session_service.add_event(
            "s1",
            "e1",
            EventType.BOT_SPEECH,
            {"text": "second"},
            timestamp=base_time + timedelta(minutes=5),
        )

        # Assert
        assert replayed.id == original.id
        assert replayed.type == EventType.USER_SPEECH
        assert replayed.payload == {"text": "first"}
        detail = await session_service.get_session_by_id("s1")
        assert detail.total == 1

    @pytest.mark.asyncio
    async def test_add_event_should_be_rejected_after_completion(
        self, session_service: SessionService
    ) -> None:
        """Test a COMPLETED session accepts no further events."""
        # Arrange
        await session_service.create_or_get_session("s1", "en")
        await session_service.complete_session("s1")

        # Act & Assert
        with pytest.raises(SessionClosedError):
            await session_service.add_event("s1", "e1", EventType.USER_SPEECH, {})

        detail = await session_service.get_session_by_id("s1")
        assert detail.total == 0

    @pytest.mark.asyncio
    async def test_add_event_should_accept_events_on_failed_session(
        self, session_service: SessionService, test_async_db: AsyncSession
    ) -> None:
        """Test a FAILED session still records events and keeps its status."""
        # Arrange
        await session_service.create_or_get_session("s1", "en")
        await session_crud.transition_status(
            test_async_db, "s1", SessionStatus.INITIATED, SessionStatus.FAILED
        )
        await test_async_db.commit()

        # Act
        await session_service.add_event("s1", "e1", EventType.SYSTEM, {"reason": "retry"})

        # Assert
        detail = await session_service.get_session_by_id("s1")
        assert detail.session.status == SessionStatus.FAILED
        assert detail.total == 1


    @pytest.mark.asyncio
    async def test_add_event_should_order_mixed_offsets_by_instant(
        self, session_service: SessionService
    ) -> None:
        """Test timestamps with different UTC offsets are stored and ordered as UTC instants."""
        # Arrange
        await session_service.create_or_get_session("s1", "en")
        plus_five = timezone(timedelta(hours=5))
        late_utc = datetime(2025, 1, 1, 6, 0, tzinfo=timezone.utc)
        early_plus_five = datetime(2025, 1, 1, 10, 0, tzinfo=plus_five)

        # Act
        await session_service.add_event("s1", "late", EventType.USER_SPEECH, {}, timestamp=late_utc)
        await session_service.add_event(
            "s1", "early", EventType.BOT_SPEECH, {}, timestamp=early_plus_five
        )

        # Assert
        detail = await session_service.get_session_by_id("s1", page=1, limit=10)
        assert [e.event_id for e in detail.events] == ["early", "late"]
        assert [e.timestamp.replace(tzinfo=None) for e in detail.events] == [
            datetime(2025, 1, 1, 5, 0),
            datetime(2025, 1, 1, 6, 0),
        ]

    @pytest.mark.asyncio
    async def test_add_event_should_treat_naive_timestamp_as_utc(
        self, session_service: SessionService
    ) -> None:
        """Test a timestamp without offset is returned as the same UTC instant."""
        await session_service.create_or_get_session("s1", "en")

        event = await session_service.add_event(
            "s1", "e1", EventType.SYSTEM, {}, timestamp=datetime(2025, 1, 1, 12, 0)
        )

        assert event.timestamp.replace(tzinfo=None) == datetime(2025, 1, 1, 12, 0)
        if event.timestamp.tzinfo is not None:
            assert event.timestamp.utcoffset() == timedelta(0)


class TestGetSessionById:
    """Test suite for SessionService.get_session_by_id() method."""

    @pytest.mark.asyncio
    async def test_get_should_raise_for_unknown_session(
        self, session_service: SessionService
    ) -> None:
        """Test reading a missing session raises SessionNotFoundError."""
        with pytest.raises(SessionNotFoundError):
            await session_service.get_session_by_id("missing")

    @pytest.mark.asyncio
    async def test_get_should_return_empty_page_for_new_session(
        self, session_service: SessionService
    ) -> None:
        """Test a session without events has an empty event list."""
        await session_service.create_or_get_session("s1", "en")

        detail = await session_service.get_session_by_id("s1")

        assert isinstance(detail, SessionDetail)
        assert list(detail.events) == []
        assert detail.total == 0
        assert detail.page == 1
        assert detail.limit == 20

    @pytest.mark.asyncio
    async def test_get_should_page_events_in_time_order(
        self, session_service: SessionService, base_time: datetime
    ) -> None:
        """Test pages hold events ordered by timestamp regardless of arrival order."""
        # Arrange
        await session_service.create_or_get_session("s1", "en")
        for i in (3, 0, 4, 1, 2):
            await session_service.add_event(
                "s1", f"e{i}", EventType.USER_SPEECH, {"i": i}, timestamp=base_time + timedelta(seconds=i)
            )

        # Act
        first_page = await session_service.get_session_by_id("s1", page=1, limit=2)
        last_page = await session_service.get_session_by_id("s1", page=3, limit=2)
        beyond = await session_service.get_session_by_id("s1", page=4, limit=2)

        # Assert
        assert [e.event_id for e in first_page.events] == ["e0", "e1"]
        assert [e.event_id for e in last_page.events] == ["e4"]
        assert list(beyond.events) == []
        assert first_page.total == last_page.total == beyond.total == 5


    @pytest.mark.asyncio
    async def test_get_should_return_empty_page_for_huge_page_number(
        self, session_service: SessionService, base_time: datetime
    ) -> None:
        """Test a page number whose skip overflows the store still yields an empty page."""
        await session_service.create_or_get_session("s1", "en")
        await session_service.add_event("s1", "e1", EventType.SYSTEM, {}, timestamp=base_time)

        detail = await session_service.get_session_by_id("s1", page=10**18, limit=100)

        assert list(detail.events) == []
        assert detail.total == 1


class TestCompleteSession:
    """Test suite for SessionService.complete_session() method."""

    @pytest.mark.asyncio
    async def test_complete_should_return_none_for_unknown_session(
        self, session_service: SessionService
    ) -> None:
        """Test completing a missing session returns None."""
        result = await session_service.complete_session("missing")

        assert result is None

    @pytest.mark.asyncio
    async def test_complete_should_set_status_and_end_time(
        self, session_service: SessionService
    ) -> None:
        """Test completion sets COMPLETED and ended_at."""
        await session_service.create_or_get_session("s1", "en")

        session = await session_service.complete_session("s1")

        assert session is not None
        assert session.status == SessionStatus.COMPLETED
        assert session.ended_at is not None

    @pytest.mark.asyncio
    async def test_complete_twice_should_keep_first_end_time(
        self, session_service: SessionService
    ) -> None:
        """Test repeated completion is a no-op that preserves ended_at."""
        # Arrange
        await session_service.create_or_get_session("s1", "en")
        first = await session_service.complete_session("s1")
        first_ended_at = first.ended_at

        # Act
        second = await session_service.complete_session("s1")

        # Assert
        assert second.status == SessionStatus.COMPLETED
        assert second.ended_at == first_ended_at


class TestActivateSession:
    """Test suite for SessionService.activate_session() method."""

    @pytest.mark.asyncio
    async def test_activate_should_promote_initiated_session(
        self, session_service: SessionService
    ) -> None:
        """Test activation moves INITIATED to ACTIVE."""
        await session_service.create_or_get_session("s1", "en")

        session = await session_service.activate_session("s1")

        assert session.status == SessionStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_activate_should_leave_completed_session_unchanged(
        self, session_service: SessionService
    ) -> None:
        """Test activation never reopens a completed session."""
        await session_service.create_or_get_session("s1", "en")
        await session_service.complete_session("s1")

        session = await session_service.activate_session("s1")

        assert session.status == SessionStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_activate_should_return_none_for_unknown_session(
        self, session_service: SessionService
    ) -> None:
        """Test activating a missing session returns None."""
        assert await session_service.activate_session("missing") is None


class TestSessionLifecycle:
    """End-to-end lifecycle through the service."""

    @pytest.mark.asyncio
    async def test_full_lifecycle_with_replayed_event(
        self, session_service: SessionService, base_time: datetime
    ) -> None:
        """Test create, append, replay, read, complete, then rejected append."""
        # Arrange
        await session_service.create_or_get_session("s1", "en")
        await session_service.add_event(
            "s1", "e1", EventType.USER_SPEECH, {"text": "hi"}, timestamp=base_time
        )
        await session_service.add_event(
            "s1", "e1", EventType.USER_SPEECH, {"text": "changed"}, timestamp=base_time
        )

        # Act
        detail = await session_service.get_session_by_id("s1")
        completed = await session_service.complete_session("s1")

        # Assert
        assert [e.event_id for e in detail.events] == ["e1"]
        assert detail.events[0].payload == {"text": "hi"}
        assert completed.status == SessionStatus.COMPLETED
        with pytest.raises(SessionClosedError):
            await session_service.add_event("s1", "e2", EventType.BOT_SPEECH, {})


@pytest.fixture
async def shared_engine(tmp_path):
    """
    File-backed SQLite engine so separate sessions use separate connections.

    Yields:
        AsyncEngine: Engine with all tables created (disposed after the test)
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'sessions.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


class TestConcurrentAppends:
    """Duplicate appends racing on independent database sessions."""

    @pytest.mark.asyncio
    async def test_concurrent_duplicate_appends_should_converge(
        self, shared_engine, base_time: datetime
    ) -> None:
        """Test racing appends of one event_id return the same stored event and write one row."""
        # Arrange
        session_factory = async_sessionmaker(shared_engine, expire_on_commit=False)
        async with session_factory() as setup_db:
            await SessionService(db=setup_db).create_or_get_session("s1", "en")

        # Act
        async with session_factory() as first_db, session_factory() as second_db:
            first, second = await asyncio.gather(
                SessionService(db=first_db).add_event(
                    "s1", "e1", EventType.USER_SPEECH, {"text": "first"}, timestamp=base_time
                ),
                SessionService(db=second_db).add_event(
                    "s1", "e1", EventType.USER_SPEECH, {"text": "second"}, timestamp=base_time
                ),
            )

        # Assert
        assert first.id == second.id
        assert first.payload == second.payload
        async with session_factory() as check_db:
            assert await event_crud.count_for_session(check_db, "s1") == 1
            session = await session_crud.find(check_db, "s1")
            assert session.status == SessionStatus.ACTIVE
