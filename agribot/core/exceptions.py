"""
Exception hierarchy for the AgriBot backend.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class AgriBotException(Exception):
    """Base exception for all AgriBot application errors."""

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


class ValidationError(AgriBotException):
    """Raised when input validation fails, before any side effect."""

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


class NotFoundError(AgriBotException):
    """Raised when a resource is missing or not owned by the caller."""

    pass


class SessionNotFoundError(NotFoundError):
    """Raised when a chat session cannot be found for the requesting user."""

    def __init__(
        self,
        session_id: str,
        user_id: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize session not found error.

        Args:
            session_id: ID of the missing session
            user_id: User that requested it
            details: Additional context
        """
        details = details or {}
        details["session_id"] = session_id
        if user_id is not None:
            details["user_id"] = user_id
        super().__init__(f"Session not found or unauthorized: {session_id}", details)


class MessageNotFoundError(NotFoundError):
    """Raised when a message cannot be found in the caller's session."""

    def __init__(self, message_id: int, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["message_id"] = message_id
        super().__init__(f"Message not found or unauthorized: {message_id}", details)


class InvalidSessionStateError(AgriBotException):
    """Raised when mutating a session that is no longer active."""

    def __init__(self, session_id: str, status: str) -> None:
        super().__init__(
            f"Session {session_id} is {status} and cannot be modified",
            {"session_id": session_id, "status": status},
        )


class ExternalServiceError(AgriBotException):
    """Base exception for failures of third-party collaborators."""

    def __init__(
        self,
        message: str,
        service: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize external service error.

        Args:
            message: Error message
            service: Name of the failing service (tavily, gemini, ...)
            details: Additional context
        """
        details = details or {}
        if service:
            details["service"] = service
        super().__init__(message, details)


class SearchProviderError(ExternalServiceError):
    """Raised when the web search provider fails."""

    pass


class LLMProviderError(ExternalServiceError):
    """Raised when the language model call fails."""

    pass


class SummarizationError(ExternalServiceError):
    """Raised when conversation summarization fails (non-critical)."""

    pass
