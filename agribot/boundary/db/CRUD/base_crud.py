"""
Base CRUD operations for SQLAlchemy models.

Generic create/read/delete plus the set-based helpers the conversation
and cache tables need: atomic counter updates, conditional counts and
bulk deletes. Model-specific CRUD classes build on these.

Dependencies: sqlalchemy
System role: Foundation for all database CRUD operations
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnElement, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from agribot.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """
    Generic base class for CRUD operations.

    Methods flush but never commit; transaction boundaries belong to the
    calling service.

    Type Parameters:
        ModelT: SQLAlchemy model class inheriting from Base

    Attributes:
        model: The SQLAlchemy model class to operate on
    """

    def __init__(self, model: type[ModelT]) -> None:
        """
        Initialize CRUD with target model.

        Args:
            model: SQLAlchemy model class for database operations
        """
        self.model = model

    async def create(self, session: AsyncSession, **kwargs) -> ModelT:
        """
        Insert a row and load server-side defaults.

        Args:
            session: Async database session
            **kwargs: Model field values

        Returns:
            Created model instance with generated ID and defaults
        """
        instance = self.model(**kwargs)
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def get_by_id(self, session: AsyncSession, id: Any) -> ModelT | None:
        """Retrieve a single record by primary key."""
        stmt = select(self.model).where(self.model.id == id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def delete_by_id(self, session: AsyncSession, id: Any) -> bool:
        """
        Delete a record by primary key.

        Returns:
            True if record was deleted, False if not found
        """
        return await self.delete_where(session, self.model.id == id) > 0

    async def delete_where(self, session: AsyncSession, *criteria: ColumnElement[bool]) -> int:
        """
        Bulk delete matching rows.

        Args:
            session: Async database session
            *criteria: WHERE clauses, AND-ed

        Returns:
            int: Number of deleted rows
        """
        result = await session.execute(delete(self.model).where(*criteria))
        return result.rowcount or 0

    async def count_where(self, session: AsyncSession, *criteria: ColumnElement[bool]) -> int:
        """Number of rows matching all criteria."""
        stmt = select(func.count()).select_from(self.model).where(*criteria)
        result = await session.execute(stmt)
        return int(result.scalar_one())

    async def increment(
        self,
        session: AsyncSession,
        id: Any,
        counter: str,
        **values: Any,
    ) -> None:
        """
        Add one to a counter column in a single UPDATE.

        Concurrent increments never lose updates. Instances already loaded
        in the session are not refreshed.

        Args:
            session: Async database session
            id: Primary key
            counter: Integer column name
            **values: Other columns to set in the same statement
        """
        column = getattr(self.model, counter)
        stmt = (
            update(self.model)
            .where(self.model.id == id)
            .values({counter: column + 1, **values})
            .execution_options(synchronize_session=False)
        )
        await session.execute(stmt)
