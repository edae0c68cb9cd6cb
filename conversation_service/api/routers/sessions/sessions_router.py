"""
Session API endpoints.

Routes:
- POST /sessions - Create session, or return the existing one
- POST /sessions/{session_id}/events - Append event (idempotent per eventId)
- GET /sessions/{session_id} - Get session with a page of events
- POST /sessions/{session_id}/complete - Complete session
- POST /sessions/{session_id}/activate - Promote session to active

Dependencies: conversation_service.application.services, conversation_service.models
System role: Conversation session HTTP API
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status

from conversation_service.api.deps.dependencies import (
    get_session_service,
    get_settings_dependency,
)
from conversation_service.application.services.session_service import SessionService
from conversation_service.configs import Settings
from conversation_service.models.common import ErrorResponse
from conversation_service.models.event import AddEventRequest, EventResponse
from conversation_service.models.session import (
    CreateSessionRequest,
    SessionDetailResponse,
    SessionResponse,
)

from .session_error_handling import handle_session_errors
from .session_responses import (
    map_detail_to_response,
    map_event_to_response,
    map_session_to_response,
)

router = APIRouter(
    prefix="/sessions",
    tags=["sessions"],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


@router.post("", response_model=SessionResponse)
@handle_session_errors
async def create_session(
    request: CreateSessionRequest,
    session_service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    """
    Create a session, or return it unchanged if the sessionId exists.

    Args:
        request: CreateSessionRequest with sessionId, language, metadata, status
        session_service: Injected SessionService

    Returns:
        SessionResponse: New or existing session

    Raises:
        HTTPException(400): Invalid initial status
    """
    session = await session_service.create_or_get_session(
        session_id=request.session_id,
        language=request.language,
        metadata=request.metadata,
        status=request.status,
    )
    return map_session_to_response(session)


@router.post("/{session_id}/events", response_model=EventResponse)
@handle_session_errors
async def add_event(
    session_id: str,
    request: AddEventRequest,
    session_service: SessionService = Depends(get_session_service),
) -> EventResponse:
    """
    Append an event to a session.

    Re-sending an eventId already stored for the session returns the
    stored event.

    Args:
        session_id: Target session identifier
        request: AddEventRequest with eventId, type, payload, timestamp
        session_service: Injected SessionService

    Returns:
        EventResponse: Stored event

    Raises:
        HTTPException(404): Session not found
        HTTPException(400): Session already completed
    """
    event = await session_service.add_event(
        session_id=session_id,
        event_id=request.event_id,
        event_type=request.type,
        payload=request.payload,
        timestamp=request.timestamp,
    )
    return map_event_to_response(event)


@router.get("/{session_id}", response_model=SessionDetailResponse)
@handle_session_errors
async def get_session(
    session_id: str,
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
    session_service: SessionService = Depends(get_session_service),
    settings: Settings = Depends(get_settings_dependency),
) -> SessionDetailResponse:
    """
    Get a session with one page of its events, oldest first.

    Args:
        session_id: Session identifier
        page: 1-based page number (default 1)
        limit: Events per page (configured default, capped at the configured maximum)
        session_service: Injected SessionService
        settings: Injected application settings

    Returns:
        SessionDetailResponse: Session fields with events and paging info

    Raises:
        HTTPException(404): Session not found
    """
    pagination = settings.pagination
    page_size = min(limit or pagination.default_limit, pagination.max_limit)

    detail = await session_service.get_session_by_id(session_id, page=page, limit=page_size)
    return map_detail_to_response(detail)


@router.post("/{session_id}/complete", response_model=SessionResponse)
@handle_session_errors
async def complete_session(
    session_id: str,
    session_service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    """
    Complete a session. Completing an already completed session is a no-op.

    Args:
        session_id: Session identifier
        session_service: Injected SessionService

    Returns:
        SessionResponse: Completed session

    Raises:
        HTTPException(404): Session not found
    """
    session = await session_service.complete_session(session_id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session with ID {session_id} not found",
        )
    return map_session_to_response(session)


@router.post("/{session_id}/activate", response_model=SessionResponse)
@handle_session_errors
async def activate_session(
    session_id: str,
    session_service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    """
    Promote an initiated session to active; other statuses are left as is.

    Args:
        session_id: Session identifier
        session_service: Injected SessionService

    Returns:
        SessionResponse: Current session

    Raises:
        HTTPException(404): Session not found
    """
    session = await session_service.activate_session(session_id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session with ID {session_id} not found",
        )
    return map_session_to_response(session)
