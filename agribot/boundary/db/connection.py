"""
Database connection management.

One async engine per process, a session factory bound to it and the
FastAPI dependency that scopes a session to a request. Works against
PostgreSQL (asyncpg, pooled) and SQLite (aiosqlite, used by tests and
local runs).

Dependencies: sqlalchemy, agribot.configs
System role: Database connection lifecycle management
"""

import logging
import time
from functools import lru_cache
from typing import Any, AsyncGenerator

from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from agribot.configs import get_settings
from agribot.configs.database import DatabaseSettings

logger = logging.getLogger(__name__)


def engine_options(db_config: DatabaseSettings) -> dict[str, Any]:
    """
    Keyword arguments for create_async_engine.

    SQLite gets no pool sizing since aiosqlite does not use a QueuePool.
    """
    options: dict[str, Any] = {"echo": db_config.echo_sql}
    if db_config.is_sqlite:
        return options
    options.update(
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,
    )
    return options


@lru_cache
def get_async_engine() -> AsyncEngine:
    """
    Process-wide async engine.

    Returns:
        AsyncEngine: Engine built from DatabaseSettings

    Raises:
        ArgumentError: If the configured URL is malformed
    """
    db_config = get_settings().database
    engine = create_async_engine(db_config.async_database_url, **engine_options(db_config))
    logger.info(f"{__name__}:get_async_engine - Engine created for {engine.dialect.name}")
    return engine


@lru_cache
def get_async_session_factory() -> async_sessionmaker[AsyncSession]:
    """
    Session factory bound to the shared engine.

    autoflush=False keeps writes explicit; expire_on_commit=False keeps
    committed rows readable after the services commit.
    """
    return async_sessionmaker(
        bind=get_async_engine(),
        autoflush=False,
        expire_on_commit=False,
    )


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding a request-scoped session.

    Uncommitted work is rolled back if the route raises.

    Yields:
        AsyncSession: Session closed when the request finishes
    """
    async with get_async_session_factory()() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def ping(session: AsyncSession) -> float:
    """
    Round-trip a trivial query.

    Args:
        session: Session to check

    Returns:
        float: Latency in milliseconds

    Raises:
        SQLAlchemyError: If the database is unreachable
    """
    start = time.perf_counter()
    await session.execute(text("SELECT 1"))
    return round((time.perf_counter() - start) * 1000, 2)


async def create_all_tables() -> None:
    """Create every registered table that does not exist yet."""
    from agribot.boundary.db.base import Base
    import agribot.boundary.db.models  # noqa: F401  registers models

    async with get_async_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """Close pooled connections and forget the cached engine and factory."""
    if get_async_engine.cache_info().currsize == 0:
        return
    await get_async_engine().dispose()
    get_async_session_factory.cache_clear()
    get_async_engine.cache_clear()
