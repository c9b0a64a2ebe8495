"""
Search cache CRUD operations.

Dependencies: sqlalchemy, agribot.boundary.db.models
System role: Search result cache persistence
"""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agribot.boundary.db.CRUD.base_crud import BaseCRUD
from agribot.boundary.db.models.search_cache_model import SearchCacheModel


class SearchCacheCRUD(BaseCRUD[SearchCacheModel]):
    """CRUD operations for SearchCacheModel keyed by query hash."""

    def __init__(self) -> None:
        """Initialize SearchCacheCRUD with SearchCacheModel."""
        super().__init__(SearchCacheModel)

    async def get_by_hash(
        self,
        session: AsyncSession,
        query_hash: str,
    ) -> SearchCacheModel | None:
        """
        Retrieve a cache entry regardless of expiry.

        Args:
            session: Async database session
            query_hash: sha256 of the normalized query

        Returns:
            SearchCacheModel or None
        """
        stmt = select(SearchCacheModel).where(SearchCacheModel.query_hash == query_hash)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def increment_hits(self, session: AsyncSession, id: int) -> None:
        """Atomically add one to an entry's hit counter."""
        await self.increment(session, id, "hit_count")

    async def upsert(
        self,
        session: AsyncSession,
        query_hash: str,
        original_query: str,
        search_results: dict,
        expires_at: datetime,
        created_at: datetime,
    ) -> SearchCacheModel:
        """
        Insert or fully replace the entry for a query hash.

        A replaced entry gets fresh timestamps and its hit count reset.

        Args:
            session: Async database session
            query_hash: sha256 of the normalized query
            original_query: Query as issued
            search_results: Serialized search response
            expires_at: Expiry timestamp
            created_at: Write timestamp

        Returns:
            The stored SearchCacheModel
        """
        existing = await self.get_by_hash(session, query_hash)
        if existing is None:
            return await self.create(
                session,
                query_hash=query_hash,
                original_query=original_query,
                search_results=search_results,
                expires_at=expires_at,
                created_at=created_at,
                hit_count=0,
            )

        existing.original_query = original_query
        existing.search_results = search_results
        existing.expires_at = expires_at
        existing.created_at = created_at
        existing.hit_count = 0
        await session.flush()
        return existing

    async def delete_expired(self, session: AsyncSession, now: datetime) -> int:
        """
        Delete every entry whose expiry has passed.

        Args:
            session: Async database session
            now: Reference time

        Returns:
            Number of deleted entries
        """
        return await self.delete_where(session, SearchCacheModel.expires_at < now)


search_cache_crud = SearchCacheCRUD()
