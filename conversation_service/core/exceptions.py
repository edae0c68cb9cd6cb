"""
Exception hierarchy for the Conversation Session Service.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class ConversationServiceException(Exception):
    """Base exception for all Conversation Session Service errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging

        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(ConversationServiceException):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class InvalidSessionStatusError(ValidationError):
    """Raised when a session is created with a status it may not start in."""

    def __init__(self, status: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize invalid status error.

        Args:
            status: Rejected status value
            details: Additional context
        """
        details = details or {}
        details["status"] = status
        super().__init__(
            f"Sessions cannot be created with status '{status}'",
            field="status",
            details=details,
        )


class SessionNotFoundError(ConversationServiceException):
    """Raised when a session cannot be found."""

    def __init__(self, session_id: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize session not found error.

        Args:
            session_id: ID of the missing session
            details: Additional context
        """
        self.session_id = session_id
        details = details or {}
        details["session_id"] = session_id
        super().__init__(f"Session with ID {session_id} not found", details)


class SessionClosedError(ConversationServiceException):
    """Raised when an event is appended to a completed session."""

    def __init__(self, session_id: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize session closed error.

        Args:
            session_id: ID of the completed session
            details: Additional context
        """
        self.session_id = session_id
        details = details or {}
        details["session_id"] = session_id
        super().__init__("Cannot add events to a completed session", details)


class EventLedgerInconsistencyError(ConversationServiceException):
    """Raised when a duplicate event signal has no matching stored row."""

    def __init__(
        self,
        session_id: str,
        event_id: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize ledger inconsistency error.

        Args:
            session_id: Session the event was appended to
            event_id: Event ID reported as duplicate
            details: Additional context
        """
        details = details or {}
        details["session_id"] = session_id
        details["event_id"] = event_id
        super().__init__(
            f"Event {event_id} reported as duplicate but not found in session {session_id}",
            details,
        )
