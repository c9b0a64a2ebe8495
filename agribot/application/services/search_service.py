"""
Cached web search.

Looks up a content-addressed cache before calling the search provider
and stores non-empty responses with a category TTL. Cache and provider
failures are absorbed: the caller always gets a SearchResponse.

Dependencies: sqlalchemy, agribot.boundary.search, agribot.boundary.db.CRUD
System role: External knowledge retrieval with caching
"""

import logging
from datetime import datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from agribot.boundary.db.CRUD.search_cache_crud import search_cache_crud
from agribot.boundary.search.tavily_client import SearchProvider
from agribot.configs.search import SearchSettings
from agribot.core.exceptions import SearchProviderError
from agribot.core.intent_classifier import MARKET_FAMILY, WEATHER_FAMILY
from agribot.models.search import SearchResponse
from agribot.observability.log_utils import log_degradation
from agribot.utils.text import hash_query
from agribot.utils.time import Clock, as_utc, utc_now

logger = logging.getLogger(__name__)


def cache_ttl(query: str, settings: SearchSettings) -> timedelta:
    """
    Pick the cache lifetime for a query.

    Weather queries expire fastest, then price/market queries; everything
    else is kept for days.
    """
    if WEATHER_FAMILY.search(query):
        return timedelta(hours=settings.weather_ttl_hours)
    if MARKET_FAMILY.search(query):
        return timedelta(hours=settings.price_ttl_hours)
    return timedelta(days=settings.default_ttl_days)


class SearchService:
    """
    Search orchestrator with a database-backed cache.

    Uses short-lived sessions from its own factory so cache traffic never
    touches the request transaction.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        provider: SearchProvider,
        settings: SearchSettings | None = None,
        clock: Clock = utc_now,
    ) -> None:
        """
        Initialize search service.

        Args:
            session_factory: Factory for cache sessions
            provider: Web search provider
            settings: Search settings (result count, TTLs)
            clock: Time source
        """
        self.session_factory = session_factory
        self.provider = provider
        self.settings = settings or SearchSettings()
        self.clock = clock

    async def search(self, query: str, max_results: int | None = None) -> SearchResponse:
        """
        Search the web, serving from cache when possible.

        Args:
            query: Search query
            max_results: Result cap (defaults to settings)

        Returns:
            SearchResponse: cached=True on a cache hit; results=[] and
            error set when the provider failed
        """
        query_hash = hash_query(query)
        now = self.clock()

        cached = await self._read_cache(query_hash, now)
        if cached is not None:
            return cached

        try:
            response = await self.provider.search(
                query, max_results=max_results or self.settings.max_results
            )
        except SearchProviderError as e:
            log_degradation(logger, "search", e, query=query)
            return SearchResponse(query=query, results=[], error=e.message)

        if response.results:
            await self._write_cache(query_hash, query, response, now)
        return response

    async def _read_cache(self, query_hash: str, now: datetime) -> SearchResponse | None:
        try:
            async with self.session_factory() as session:
                entry = await search_cache_crud.get_by_hash(session, query_hash)
                if entry is None or now >= as_utc(entry.expires_at):
                    return None
                await search_cache_crud.increment_hits(session, entry.id)
                await session.commit()
                payload = entry.search_results
        except SQLAlchemyError as e:
            log_degradation(logger, "search cache read", e)
            return None

        logger.info(f"{__name__}:search - Cache hit {query_hash[:12]}")
        response = SearchResponse.model_validate(payload)
        return response.model_copy(update={"cached": True})

    async def _write_cache(
        self,
        query_hash: str,
        query: str,
        response: SearchResponse,
        now: datetime,
    ) -> None:
        try:
            async with self.session_factory() as session:
                await search_cache_crud.upsert(
                    session,
                    query_hash=query_hash,
                    original_query=query,
                    search_results=response.model_dump(mode="json", exclude={"cached"}),
                    expires_at=now + cache_ttl(query, self.settings),
                    created_at=now,
                )
                await session.commit()
        except SQLAlchemyError as e:
            # Includes unique violations from a concurrent writer of the same query
            log_degradation(logger, "search cache write", e, query_hash=query_hash)

    async def clean_expired_cache(self) -> int:
        """
        Delete expired cache entries.

        Returns:
            int: Number of deleted entries
        """
        async with self.session_factory() as session:
            deleted = await search_cache_crud.delete_expired(session, self.clock())
            await session.commit()
        logger.info(f"{__name__}:clean_expired_cache - Cleaned {deleted} expired cache entries")
        return deleted
