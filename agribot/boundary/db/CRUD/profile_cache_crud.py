"""
Farmer profile cache CRUD operations.

Dependencies: sqlalchemy, agribot.boundary.db.models
System role: Derived profile cache persistence
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agribot.boundary.db.CRUD.base_crud import BaseCRUD
from agribot.boundary.db.models.profile_cache_model import UserContextCacheModel


class UserContextCacheCRUD(BaseCRUD[UserContextCacheModel]):
    """
    CRUD operations for UserContextCacheModel.

    Rows are keyed by user_id rather than a surrogate id.
    """

    def __init__(self) -> None:
        """Initialize UserContextCacheCRUD with UserContextCacheModel."""
        super().__init__(UserContextCacheModel)

    async def get_by_user(
        self,
        session: AsyncSession,
        user_id: int,
    ) -> UserContextCacheModel | None:
        """Retrieve the cached profile row for a user."""
        stmt = select(UserContextCacheModel).where(UserContextCacheModel.user_id == user_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def upsert(
        self,
        session: AsyncSession,
        user_id: int,
        **fields,
    ) -> UserContextCacheModel:
        """
        Insert or overwrite the cached profile row for a user.

        Args:
            session: Async database session
            user_id: Owning user
            **fields: Column values to store

        Returns:
            The stored UserContextCacheModel
        """
        existing = await self.get_by_user(session, user_id)
        if existing is None:
            return await self.create(session, user_id=user_id, **fields)

        for key, value in fields.items():
            setattr(existing, key, value)
        await session.flush()
        return existing


profile_cache_crud = UserContextCacheCRUD()
