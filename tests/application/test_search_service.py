"""
Test suite for SearchService.

System role: Verification of cached web search and degradation
"""

from datetime import timedelta

import httpx
import pytest

from agribot.application.services.search_service import SearchService, cache_ttl
from agribot.boundary.db.CRUD.search_cache_crud import search_cache_crud
from agribot.boundary.search.tavily_client import TavilySearchProvider
from agribot.configs.search import SearchSettings
from agribot.core.exceptions import SearchProviderError
from agribot.utils.text import hash_query
from conftest import StubSearchProvider


@pytest.fixture
def settings() -> SearchSettings:
    return SearchSettings(api_key=None, max_results=3)


@pytest.fixture
def search_service(session_factory, search_provider, settings, clock) -> SearchService:
    """Provide SearchService with stub provider and frozen clock."""
    return SearchService(session_factory, search_provider, settings=settings, clock=clock)


async def stored_entry(session_factory, query: str):
    async with session_factory() as session:
        return await search_cache_crud.get_by_hash(session, hash_query(query))


class TestSearchCaching:
    """Test suite for cache hits and misses."""

    @pytest.mark.asyncio
    async def test_search_should_cache_and_count_hits(
        self,
        search_service: SearchService,
        search_provider: StubSearchProvider,
        session_factory,
    ) -> None:
        """Test the second identical query is served from cache."""
        # Act
        first = await search_service.search("prix du blé Algeria")
        second = await search_service.search("  PRIX du blé algeria ")

        # Assert
        assert search_provider.queries == ["prix du blé Algeria"]
        assert first.cached is False
        assert second.cached is True
        assert [r.url for r in second.results] == [r.url for r in first.results]
        assert len(first.results) == 3
        assert second.answer == "Stub answer"
        entry = await stored_entry(session_factory, "prix du blé Algeria")
        assert entry.hit_count == 1
        assert entry.original_query == "prix du blé Algeria"

    @pytest.mark.asyncio
    async def test_search_should_honor_weather_ttl(
        self,
        search_service: SearchService,
        search_provider: StubSearchProvider,
        clock,
    ) -> None:
        """Test weather entries are served for 6 hours then refreshed."""
        await search_service.search("météo Blida")

        clock.advance(hours=5, minutes=59)
        assert (await search_service.search("météo Blida")).cached is True

        clock.advance(minutes=1)
        refreshed = await search_service.search("météo Blida")

        assert refreshed.cached is False
        assert len(search_provider.queries) == 2

    @pytest.mark.asyncio
    async def test_search_should_reset_hits_on_refresh(
        self,
        search_service: SearchService,
        session_factory,
        clock,
    ) -> None:
        """Test an expired entry is overwritten in place."""
        await search_service.search("irrigation goutte à goutte")
        await search_service.search("irrigation goutte à goutte")
        clock.advance(days=8)

        await search_service.search("irrigation goutte à goutte")

        entry = await stored_entry(session_factory, "irrigation goutte à goutte")
        assert entry.hit_count == 0
        assert entry.expires_at.replace(tzinfo=None) == (clock() + timedelta(days=7)).replace(tzinfo=None)

    @pytest.mark.asyncio
    async def test_search_should_not_cache_empty_results(
        self,
        session_factory,
        settings: SearchSettings,
        clock,
    ) -> None:
        provider = StubSearchProvider(results=[])
        service = SearchService(session_factory, provider, settings=settings, clock=clock)

        response = await service.search("unknown crop")

        assert response.results == []
        assert await stored_entry(session_factory, "unknown crop") is None


class TestSearchDegradation:
    """Test suite for provider failures."""

    @pytest.mark.asyncio
    async def test_search_should_absorb_provider_error(
        self,
        session_factory,
        settings: SearchSettings,
        clock,
    ) -> None:
        """Test provider errors return an empty response with the error message."""
        # Arrange
        provider = StubSearchProvider(error=SearchProviderError("Tavily API error: 500", service="tavily"))
        service = SearchService(session_factory, provider, settings=settings, clock=clock)

        # Act
        response = await service.search("prix tomate")

        # Assert
        assert response.results == []
        assert response.error == "Tavily API error: 500"
        assert await stored_entry(session_factory, "prix tomate") is None


    @pytest.mark.asyncio
    async def test_search_should_absorb_malformed_tavily_body(
        self,
        session_factory,
        clock,
    ) -> None:
        """A Tavily body that is a JSON array degrades to no results."""
        # Arrange
        tavily_settings = SearchSettings(api_key="tvly-test", max_attempts=1)
        client = httpx.AsyncClient(
            transport=httpx.MockTransport(lambda request: httpx.Response(200, json=["unexpected"]))
        )
        provider = TavilySearchProvider(tavily_settings, client=client)
        service = SearchService(session_factory, provider, settings=tavily_settings, clock=clock)

        # Act
        response = await service.search("prix tomate")

        # Assert
        assert response.results == []
        assert response.error.startswith("Unexpected Tavily response shape")
        assert await stored_entry(session_factory, "prix tomate") is None


class TestCleanExpiredCache:
    """Test suite for clean_expired_cache()."""

    @pytest.mark.asyncio
    async def test_clean_should_delete_only_expired(
        self,
        search_service: SearchService,
        session_factory,
        clock,
    ) -> None:
        """Test weather entries expire before general ones."""
        await search_service.search("météo Oran")
        await search_service.search("maladies de la tomate")
        clock.advance(hours=7)

        deleted = await search_service.clean_expired_cache()

        assert deleted == 1
        assert await stored_entry(session_factory, "météo Oran") is None
        assert await stored_entry(session_factory, "maladies de la tomate") is not None


class TestCacheTtl:
    """Test suite for cache_ttl()."""

    @pytest.mark.parametrize(
        "query,expected",
        [
            ("weather forecast Blida", timedelta(hours=6)),
            ("prix pomme de terre", timedelta(hours=12)),
            ("marché de gros Alger", timedelta(hours=12)),
            ("how to plant olives", timedelta(days=7)),
            ("que planter au printemps Algeria winter season", timedelta(days=7)),
            ("السعر في السوق", timedelta(hours=12)),
            ("الطقس غدا", timedelta(hours=6)),
        ],
    )
    def test_ttl_should_follow_query_category(self, query: str, expected: timedelta) -> None:
        assert cache_ttl(query, SearchSettings()) == expected
