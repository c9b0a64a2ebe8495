"""
Chatbot API endpoints.

Routes:
- POST /chatbot/message - Send a message to the assistant
- GET /chatbot/sessions/{user_id} - List a user's sessions
- GET /chatbot/history/{session_id} - Replay a session oldest first
- GET /chatbot/sessions/{session_id}/messages - Page messages newest first
- PUT /chatbot/sessions/{session_id}/close - Close a session
- DELETE /chatbot/sessions/{session_id} - Delete a session
- DELETE /chatbot/sessions/{session_id}/messages/{message_id} - Delete a message
- GET /chatbot/health - Chatbot health

Dependencies: agribot.application.services, agribot.models
System role: Chatbot HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query

from agribot.api.deps import get_chat_service, get_session_service
from agribot.application.services.chat_service import ChatService
from agribot.application.services.session_service import SessionService
from agribot.core.exceptions import (
    AgriBotException,
    InvalidSessionStateError,
    NotFoundError,
    ValidationError,
)
from agribot.models.chat import ChatbotReply, ChatbotRequest
from agribot.models.common import DeleteResponse, ErrorResponse
from agribot.models.session import (
    CloseSessionRequest,
    MessagePage,
    SessionHistory,
    SessionListResponse,
    SessionSummary,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chatbot", tags=["chatbot"])


ERROR_STATUS_CODES: tuple[tuple[type[AgriBotException], int], ...] = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (InvalidSessionStateError, 409),
)


def to_http_exception(exc: Exception) -> HTTPException:
    """
    Map domain exceptions to HTTP errors.

    Unmapped exceptions become a 500 with a generic message; the original
    error is logged, never returned.
    """
    for exc_type, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, exc_type):
            return HTTPException(
                status_code=status_code,
                detail=ErrorResponse(error=exc.message, details=exc.details or None).model_dump(),
            )

    logger.error(
        f"{__name__}:to_http_exception - Unhandled {type(exc).__name__}: {exc}",
        exc_info=exc,
    )
    return HTTPException(
        status_code=500,
        detail=ErrorResponse(error="Internal server error").model_dump(),
    )


@router.post("/message", response_model=ChatbotReply)
async def send_message(
    request: ChatbotRequest,
    chat_service: ChatService = Depends(get_chat_service),
) -> ChatbotReply:
    """
    Send a message to the assistant.

    Pipeline failures, including a store outage before the user turn is
    saved, come back as success=false with a localized apology, not as
    HTTP errors.

    Raises:
        HTTPException(400): Missing user_id or blank message
    """
    try:
        return await chat_service.handle_message(
            request.user_id,
            request.message,
            request.to_options(),
        )
    except Exception as e:
        raise to_http_exception(e) from e


@router.get("/sessions/{user_id}", response_model=SessionListResponse)
async def list_sessions(
    user_id: int,
    limit: int = Query(default=20),
    before: UUID | None = Query(default=None, description="Session id cursor"),
    session_service: SessionService = Depends(get_session_service),
) -> SessionListResponse:
    """List a user's sessions, newest first."""
    try:
        return await session_service.list_sessions(user_id, limit=limit, before=before)
    except Exception as e:
        raise to_http_exception(e) from e


@router.get("/history/{session_id}", response_model=SessionHistory)
async def get_session_history(
    session_id: UUID,
    user_id: int = Query(...),
    limit: int = Query(default=50),
    after: int | None = Query(default=None, description="Message id cursor"),
    session_service: SessionService = Depends(get_session_service),
) -> SessionHistory:
    """
    Replay a session, oldest first.

    Raises:
        HTTPException(404): Session missing or owned by another user
    """
    try:
        return await session_service.get_session_history(
            session_id, user_id, limit=limit, after=after
        )
    except Exception as e:
        raise to_http_exception(e) from e


@router.get("/sessions/{session_id}/messages", response_model=MessagePage)
async def list_messages(
    session_id: UUID,
    user_id: int = Query(...),
    limit: int = Query(default=20),
    before: int | None = Query(default=None, description="Message id cursor"),
    session_service: SessionService = Depends(get_session_service),
) -> MessagePage:
    """
    Page through a session's messages, newest first.

    Raises:
        HTTPException(404): Session missing or owned by another user
    """
    try:
        return await session_service.list_messages(
            session_id, user_id, limit=limit, before=before
        )
    except Exception as e:
        raise to_http_exception(e) from e


@router.put("/sessions/{session_id}/close", response_model=SessionSummary)
async def close_session(
    session_id: UUID,
    request: CloseSessionRequest,
    session_service: SessionService = Depends(get_session_service),
) -> SessionSummary:
    """
    Close an active session.

    Raises:
        HTTPException(404): Session missing or owned by another user
        HTTPException(409): Session already closed
    """
    try:
        return await session_service.close_session(
            session_id, request.user_id, summary=request.summary
        )
    except Exception as e:
        raise to_http_exception(e) from e


@router.delete("/sessions/{session_id}", response_model=DeleteResponse)
async def delete_session(
    session_id: UUID,
    user_id: int = Query(...),
    session_service: SessionService = Depends(get_session_service),
) -> DeleteResponse:
    """
    Delete a session and its messages.

    Raises:
        HTTPException(404): Session missing or owned by another user
    """
    try:
        await session_service.delete_session(session_id, user_id)
    except Exception as e:
        raise to_http_exception(e) from e
    return DeleteResponse(message="Session deleted successfully")


@router.delete(
    "/sessions/{session_id}/messages/{message_id}",
    response_model=DeleteResponse,
)
async def delete_message(
    session_id: UUID,
    message_id: int,
    user_id: int = Query(...),
    session_service: SessionService = Depends(get_session_service),
) -> DeleteResponse:
    """
    Delete one message from a session.

    Raises:
        HTTPException(404): Session or message not found
    """
    try:
        await session_service.delete_message(session_id, message_id, user_id)
    except Exception as e:
        raise to_http_exception(e) from e
    return DeleteResponse(message="Message deleted successfully")


@router.get("/health")
async def chatbot_health() -> dict:
    """Chatbot health check."""
    return {
        "success": True,
        "service": "AgriBot Chatbot",
        "status": "operational",
    }
