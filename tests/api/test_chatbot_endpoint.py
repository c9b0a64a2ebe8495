"""
Test suite for chatbot API endpoints.

Services are replaced with AsyncMocks through dependency_overrides, so
only routing, validation and error mapping are exercised.

System role: Verification of the chatbot HTTP API
"""

import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from agribot.api.deps import get_chat_service, get_session_service
from agribot.api.routers.chatbot import router
from agribot.application.services.chat_service import ChatService
from agribot.application.services.session_service import SessionService
from agribot.core.exceptions import (
    InvalidSessionStateError,
    MessageNotFoundError,
    SessionNotFoundError,
    ValidationError,
)
from agribot.models.chat import ChatbotReply, MessageOptions
from agribot.models.search import SearchResult
from agribot.models.session import SessionListResponse, SessionSummary

SESSION_ID = uuid.uuid4()


@pytest.fixture
def chat_service() -> AsyncMock:
    return AsyncMock(spec=ChatService)


@pytest.fixture
def session_service() -> AsyncMock:
    return AsyncMock(spec=SessionService)


@pytest.fixture
def app(chat_service: AsyncMock, session_service: AsyncMock) -> FastAPI:
    """Create FastAPI test application with chatbot router and mocked services."""
    app = FastAPI()
    app.include_router(router)
    app.dependency_overrides[get_chat_service] = lambda: chat_service
    app.dependency_overrides[get_session_service] = lambda: session_service
    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Provide TestClient for the FastAPI app."""
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def sample_reply() -> ChatbotReply:
    return ChatbotReply(
        success=True,
        session_id=SESSION_ID,
        response_text="Il va pleuvoir demain.",
        intent="weather_query",
        confidence=1.0,
        sources=[SearchResult(title="Météo", url="https://weather.com/dz")],
        search_performed=True,
        language="fr",
        user_message_id=1,
        bot_message_id=2,
    )


def session_summary(status: str = "active") -> SessionSummary:
    return SessionSummary(
        id=SESSION_ID,
        user_id=5,
        status=status,
        started_at=datetime(2025, 3, 1, tzinfo=timezone.utc),
    )


class TestSendMessage:
    """Test suite for POST /chatbot/message."""

    def test_send_should_return_reply_envelope(
        self,
        client: TestClient,
        chat_service: AsyncMock,
        sample_reply: ChatbotReply,
    ) -> None:
        """Test a valid request is forwarded and the reply serialized."""
        # Arrange
        chat_service.handle_message.return_value = sample_reply

        # Act
        response = client.post(
            "/chatbot/message",
            json={"user_id": 5, "message": "quel temps fera-t-il?", "device_type": "mobile"},
        )

        # Assert
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["session_id"] == str(SESSION_ID)
        assert body["search_performed"] is True
        assert body["user_context_used"] is False
        assert body["sources"][0]["url"] == "https://weather.com/dz"
        user_id, text, options = chat_service.handle_message.await_args.args
        assert (user_id, text) == (5, "quel temps fera-t-il?")
        assert isinstance(options, MessageOptions)
        assert options.device_type == "mobile"

    def test_send_should_return_failure_envelope_with_200(
        self,
        client: TestClient,
        chat_service: AsyncMock,
    ) -> None:
        """Test pipeline failures stay in-band."""
        chat_service.handle_message.return_value = ChatbotReply(
            success=False,
            response_text="Désolé, une erreur s'est produite. Veuillez réessayer.",
            error="LLMProviderError",
        )

        response = client.post("/chatbot/message", json={"user_id": 5, "message": "prix?"})

        assert response.status_code == 200
        assert response.json()["success"] is False
        assert response.json()["error"] == "LLMProviderError"

    def test_send_should_map_validation_error_to_400(
        self,
        client: TestClient,
        chat_service: AsyncMock,
    ) -> None:
        chat_service.handle_message.side_effect = ValidationError(
            "message must not be empty", field="message"
        )

        response = client.post("/chatbot/message", json={"user_id": 5, "message": "  "})

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["success"] is False
        assert detail["error"] == "message must not be empty"
        assert detail["details"] == {"field": "message"}

    def test_send_should_hide_unexpected_errors(
        self,
        client: TestClient,
        chat_service: AsyncMock,
    ) -> None:
        """Test unmapped exceptions become a generic 500."""
        chat_service.handle_message.side_effect = RuntimeError("connection pool exhausted")

        response = client.post("/chatbot/message", json={"user_id": 5, "message": "salam"})

        assert response.status_code == 500
        assert response.json()["detail"]["error"] == "Internal server error"
        assert "pool" not in response.text


class TestSessionEndpoints:
    """Test suite for session listing, replay, close and deletion."""

    def test_list_sessions_should_forward_cursor(
        self,
        client: TestClient,
        session_service: AsyncMock,
    ) -> None:
        session_service.list_sessions.return_value = SessionListResponse(
            sessions=[session_summary()], count=1
        )
        cursor = uuid.uuid4()

        response = client.get(f"/chatbot/sessions/5?limit=10&before={cursor}")

        assert response.status_code == 200
        assert response.json()["count"] == 1
        session_service.list_sessions.assert_awaited_once_with(5, limit=10, before=cursor)

    def test_history_should_map_not_found_to_404(
        self,
        client: TestClient,
        session_service: AsyncMock,
    ) -> None:
        session_service.get_session_history.side_effect = SessionNotFoundError(str(SESSION_ID), 6)

        response = client.get(f"/chatbot/history/{SESSION_ID}?user_id=6")

        assert response.status_code == 404
        assert response.json()["detail"]["details"]["session_id"] == str(SESSION_ID)

    def test_history_should_require_user_id(self, client: TestClient) -> None:
        response = client.get(f"/chatbot/history/{SESSION_ID}")

        assert response.status_code == 422

    def test_close_should_map_state_conflict_to_409(
        self,
        client: TestClient,
        session_service: AsyncMock,
    ) -> None:
        session_service.close_session.side_effect = InvalidSessionStateError(str(SESSION_ID), "closed")

        response = client.put(f"/chatbot/sessions/{SESSION_ID}/close", json={"user_id": 5})

        assert response.status_code == 409

    def test_close_should_return_closed_session(
        self,
        client: TestClient,
        session_service: AsyncMock,
    ) -> None:
        session_service.close_session.return_value = session_summary(status="closed")

        response = client.put(
            f"/chatbot/sessions/{SESSION_ID}/close",
            json={"user_id": 5, "summary": "wheat prices"},
        )

        assert response.status_code == 200
        assert response.json()["status"] == "closed"
        session_service.close_session.assert_awaited_once_with(SESSION_ID, 5, summary="wheat prices")

    def test_delete_session_should_confirm(
        self,
        client: TestClient,
        session_service: AsyncMock,
    ) -> None:
        session_service.delete_session.return_value = True

        response = client.delete(f"/chatbot/sessions/{SESSION_ID}?user_id=5")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Session deleted successfully"}

    def test_delete_message_should_map_missing_message_to_404(
        self,
        client: TestClient,
        session_service: AsyncMock,
    ) -> None:
        session_service.delete_message.side_effect = MessageNotFoundError(99)

        response = client.delete(f"/chatbot/sessions/{SESSION_ID}/messages/99?user_id=5")

        assert response.status_code == 404
        assert response.json()["detail"]["details"] == {"message_id": 99}


class TestChatbotHealth:
    """Test suite for GET /chatbot/health."""

    def test_health_should_report_operational(self, client: TestClient) -> None:
        response = client.get("/chatbot/health")

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "service": "AgriBot Chatbot",
            "status": "operational",
        }
