"""
Session error handling utilities.

Decorator translating lifecycle engine and database errors into
HTTPExceptions for the session endpoints.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from conversation_service.core.exceptions import (
    EventLedgerInconsistencyError,
    InvalidSessionStatusError,
    SessionClosedError,
    SessionNotFoundError,
)
from conversation_service.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])


def handle_session_errors(func: F) -> F:
    """
    Decorator mapping session errors to HTTP responses.

    - SessionNotFoundError -> 404
    - SessionClosedError, InvalidSessionStatusError -> 400
    - IntegrityError (a conflict other than an idempotent event replay) -> 409
    - EventLedgerInconsistencyError, other SQLAlchemyError -> 500
    """
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except SessionNotFoundError as e:
            logger.warning(
                "Session not found",
                extra={"session_id": e.session_id},
            )
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

        except SessionClosedError as e:
            logger.warning(
                "Event rejected for completed session",
                extra={"session_id": e.session_id},
            )
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

        except InvalidSessionStatusError as e:
            logger.warning("Invalid session status", extra={"error": str(e)})
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

        except IntegrityError as e:
            log_exception_with_context(logger, "Database constraint violation", e)
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Duplicate resource")

        except (EventLedgerInconsistencyError, SQLAlchemyError) as e:
            log_exception_with_context(logger, "Database failure in session operation", e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Database error",
            )

    return wrapper  # type: ignore
