"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory SQLite async database, service mocks, sample identifiers
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock
import uuid

import pytest


@pytest.fixture
async def test_async_db():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        AsyncSession: Test database session with cleanup (lazy imported to avoid settings issues)
    """
    from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
    from sqlalchemy.pool import StaticPool
    from conversation_service.boundary.db.base import Base
    from conversation_service.boundary.db import models  # noqa: F401

    # Use SQLite in-memory database for tests
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # Create session factory
    async_session = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    # Create session for test
    async with async_session() as session:
        yield session
        await session.rollback()

    # Cleanup
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def mock_session_service():
    """
    Create mock SessionService for testing.

    Returns:
        AsyncMock: Mocked SessionService with async methods
    """
    service = AsyncMock()
    service.db = AsyncMock()
    return service


@pytest.fixture
def session_id() -> str:
    """Generate a test session ID."""
    return f"session-{uuid.uuid4().hex[:8]}"


@pytest.fixture
def base_time() -> datetime:
    """Fixed reference time for ordering assertions."""
    return datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
