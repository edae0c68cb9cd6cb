"""
Session response mapping utilities.

Transforms ORM rows and engine results into Pydantic response models.

Dependencies: conversation_service.models, conversation_service.application.services
System role: Session response transformation
"""

from conversation_service.application.services.session_service import SessionDetail
from conversation_service.boundary.db.models import ConversationEventModel, SessionModel
from conversation_service.models.event import EventResponse
from conversation_service.models.session import SessionDetailResponse, SessionResponse


def map_session_to_response(session: SessionModel) -> SessionResponse:
    """
    Transform a session row into SessionResponse.

    Args:
        session: SessionModel row

    Returns:
        SessionResponse: Pydantic model for API response
    """
    return SessionResponse.model_validate(session)


def map_event_to_response(event: ConversationEventModel) -> EventResponse:
    """
    Transform an event row into EventResponse.

    Args:
        event: ConversationEventModel row

    Returns:
        EventResponse: Pydantic model for API response
    """
    return EventResponse.model_validate(event)


def map_detail_to_response(detail: SessionDetail) -> SessionDetailResponse:
    """
    Transform a session and its event page into SessionDetailResponse.

    Args:
        detail: SessionDetail from SessionService.get_session_by_id

    Returns:
        SessionDetailResponse: Session fields plus events and paging info
    """
    session = map_session_to_response(detail.session)
    return SessionDetailResponse(
        **session.model_dump(),
        events=[map_event_to_response(event) for event in detail.events],
        page=detail.page,
        limit=detail.limit,
        total=detail.total,
    )
