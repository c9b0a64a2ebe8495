"""
Shared test fixtures and configuration for entire test suite.

Provides: file-backed SQLite async database, session factory, frozen clock,
stub search provider and fake chat models
Dependencies: pytest, pytest-asyncio, sqlalchemy, aiosqlite, langchain_core
System role: Test infrastructure and fixture management
"""

from datetime import datetime, timedelta, timezone

import pytest
from langchain_core.language_models import BaseChatModel
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from agribot.boundary.db.base import Base
import agribot.boundary.db.models  # noqa: F401  registers models
from agribot.models.search import SearchResponse, SearchResult


class FrozenClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta) -> None:
        self.now += timedelta(**delta)


class FailingChatModel(BaseChatModel):
    """Chat model whose every call fails like an exhausted provider quota."""

    @property
    def _llm_type(self) -> str:
        return "failing"

    def _generate(self, messages, stop=None, run_manager=None, **kwargs):
        raise RuntimeError("quota exceeded")


class StubSearchProvider:
    """Search provider returning canned results and recording queries."""

    def __init__(self, results: list[SearchResult] | None = None, error: Exception | None = None):
        self.results = results if results is not None else [
            SearchResult(
                title=f"Result {i}",
                url=f"https://example.dz/{i}",
                content=f"Content {i}",
                snippet=f"Snippet {i}",
                score=1.0 - i / 10,
            )
            for i in range(1, 5)
        ]
        self.error = error
        self.queries: list[str] = []

    async def search(self, query: str, max_results: int) -> SearchResponse:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return SearchResponse(query=query, results=self.results[:max_results], answer="Stub answer")


@pytest.fixture
async def engine(tmp_path):
    """
    Create file-backed SQLite async engine with all tables.

    A file (rather than :memory:) lets detached tasks and cache sessions
    open their own connections to the same database.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'agribot.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    """
    Provide a request-scoped async session.

    Yields:
        AsyncSession: Test database session
    """
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def clock() -> FrozenClock:
    """Frozen clock at 2025-03-01 12:00 UTC."""
    return FrozenClock(datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def search_provider() -> StubSearchProvider:
    """Stub search provider with four results."""
    return StubSearchProvider()


@pytest.fixture
def fake_chat_model() -> FakeListChatModel:
    """Fake chat model cycling through canned replies."""
    return FakeListChatModel(responses=["Voici la météo prévue pour votre région."])


@pytest.fixture
def failing_chat_model() -> FailingChatModel:
    """Chat model that raises on every call."""
    return FailingChatModel()
