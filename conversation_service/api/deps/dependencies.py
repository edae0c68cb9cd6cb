"""
Dependency injection container.

Factory functions for FastAPI dependencies.

Dependencies: conversation_service.configs, conversation_service.application, conversation_service.boundary
System role: DI container for service injection
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from conversation_service.application.services import SessionService
from conversation_service.boundary.db import get_async_db
from conversation_service.configs import Settings, get_settings


def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_session_service(db: AsyncSession = Depends(get_async_db)) -> SessionService:
    """
    Get session service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        SessionService: Session lifecycle service bound to the request's session
    """
    return SessionService(db=db)
