"""
Test suite for dependency injection container.

Tests factory functions for service creation and the client cache.

System role: Verification of DI container
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from sqlalchemy.ext.asyncio import AsyncSession

from agribot.api.deps import (
    ServiceCache,
    get_chat_service,
    get_search_service,
    get_session_service,
)
from agribot.application.services import ChatService, SearchService, SessionService
from agribot.boundary.llm import LanguageModelClient, Summarizer
from agribot.boundary.search import MockSearchProvider
from agribot.configs import Settings
from agribot.configs.search import SearchSettings


@pytest.fixture
def mock_db_session() -> AsyncSession:
    """Provide mock async database session."""
    return AsyncMock(spec=AsyncSession)


@pytest.fixture
def settings() -> Settings:
    return Settings(search=SearchSettings(api_key=None))


class TestServiceCache:
    """Test suite for ServiceCache."""

    def test_cache_should_build_clients_once(self, settings: Settings) -> None:
        """Test clients are created lazily and reused."""
        # Arrange
        cache = ServiceCache()
        with patch("agribot.api.deps.dependencies.get_settings", return_value=settings), patch(
            "agribot.api.deps.dependencies.build_chat_model",
            return_value=FakeListChatModel(responses=["ok"]),
        ) as build:
            # Act
            first = cache.llm_client
            second = cache.llm_client
            summarizer = cache.summarizer
            provider = cache.search_provider

        # Assert
        assert first is second
        assert isinstance(first, LanguageModelClient)
        assert isinstance(summarizer, Summarizer)
        assert isinstance(provider, MockSearchProvider)
        summary_settings = build.call_args_list[1].args[0]
        assert summary_settings.model_id == settings.llm.summary_model_id
        assert summary_settings.temperature == 0.0

    def test_clear_should_drop_cached_clients(self, settings: Settings) -> None:
        cache = ServiceCache()
        with patch("agribot.api.deps.dependencies.get_settings", return_value=settings):
            provider = cache.search_provider
            cache.clear()

            assert cache.search_provider is not provider


class TestServiceFactories:
    """Test suite for per-request service factories."""

    def test_get_search_service_should_use_cached_provider(self, settings: Settings) -> None:
        cache = MagicMock(spec=ServiceCache)
        cache.search_provider = MockSearchProvider()

        with patch("agribot.api.deps.dependencies.get_async_session_factory"):
            service = get_search_service(cache=cache, settings=settings)

        assert isinstance(service, SearchService)
        assert service.provider is cache.search_provider

    def test_get_chat_service_should_wire_pipeline(
        self,
        mock_db_session: AsyncSession,
        settings: Settings,
    ) -> None:
        """Test the chat service shares the request session with its context service."""
        cache = MagicMock(spec=ServiceCache)
        search_service = MagicMock(spec=SearchService)

        with patch("agribot.api.deps.dependencies.get_async_session_factory"):
            service = get_chat_service(
                db=mock_db_session,
                search_service=search_service,
                cache=cache,
                settings=settings,
            )

        assert isinstance(service, ChatService)
        assert service.db is mock_db_session
        assert service.context_service.db is mock_db_session
        assert service.search_service is search_service
        assert service.llm_client is cache.llm_client

    def test_get_session_service_should_return_instance(self, mock_db_session: AsyncSession) -> None:
        service = get_session_service(db=mock_db_session)

        assert isinstance(service, SessionService)
        assert service.db is mock_db_session
