"""
Dependency injection container.

Factory functions for FastAPI dependencies. Model and provider clients
are built once and cached; services are built per request around the
request database session.

Dependencies: agribot.configs, agribot.application, agribot.boundary
System role: DI container for service injection
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from agribot.application.services import (
    ChatService,
    ContextService,
    SearchService,
    SessionService,
)
from agribot.boundary.db import get_async_db, get_async_session_factory
from agribot.boundary.llm import LanguageModelClient, Summarizer, build_chat_model
from agribot.boundary.search import SearchProvider, get_search_provider
from agribot.configs import Settings, get_settings
from agribot.core.history_window import HistoryWindow


class ServiceCache:
    """Container for cached client instances."""

    def __init__(self):
        self._llm_client = None
        self._summarizer = None
        self._search_provider = None

    @property
    def llm_client(self) -> LanguageModelClient:
        """Get cached language model client."""
        if self._llm_client is None:
            self._llm_client = LanguageModelClient(build_chat_model(get_settings().llm))
        return self._llm_client

    @property
    def summarizer(self) -> Summarizer:
        """Get cached conversation summarizer."""
        if self._summarizer is None:
            llm_settings = get_settings().llm
            summary_settings = llm_settings.model_copy(
                update={"model_id": llm_settings.summary_model_id, "temperature": 0.0}
            )
            self._summarizer = Summarizer(
                build_chat_model(summary_settings),
                max_words=llm_settings.summary_max_words,
            )
        return self._summarizer

    @property
    def search_provider(self) -> SearchProvider:
        """Get cached search provider (Tavily or mock)."""
        if self._search_provider is None:
            self._search_provider = get_search_provider(get_settings().search)
        return self._search_provider

    def clear(self) -> None:
        """Clear all cached instances."""
        self._llm_client = None
        self._summarizer = None
        self._search_provider = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_search_service(
    cache: ServiceCache = Depends(get_service_cache),
    settings: Settings = Depends(get_settings_dependency),
) -> SearchService:
    """
    Get search service instance.

    Returns:
        SearchService: Cached search over the configured provider
    """
    return SearchService(
        session_factory=get_async_session_factory(),
        provider=cache.search_provider,
        settings=settings.search,
    )


def get_chat_service(
    db: AsyncSession = Depends(get_async_db),
    search_service: SearchService = Depends(get_search_service),
    cache: ServiceCache = Depends(get_service_cache),
    settings: Settings = Depends(get_settings_dependency),
) -> ChatService:
    """
    Get chat service instance.

    Args:
        db: Async database session (injected via Depends)
        search_service: Search service (injected via Depends)
        cache: Cached model clients
        settings: Application settings

    Returns:
        ChatService: Chat orchestrator for one request
    """
    return ChatService(
        db=db,
        context_service=ContextService(
            db=db,
            session_factory=get_async_session_factory(),
            settings=settings.chatbot,
        ),
        search_service=search_service,
        llm_client=cache.llm_client,
        history_window=HistoryWindow(
            cache.summarizer,
            token_budget=settings.chatbot.history_token_budget,
            keep_recent=settings.chatbot.history_keep_recent,
        ),
        settings=settings.chatbot,
    )


def get_session_service(db: AsyncSession = Depends(get_async_db)) -> SessionService:
    """
    Get session service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        SessionService: Session service instance
    """
    return SessionService(db=db)
