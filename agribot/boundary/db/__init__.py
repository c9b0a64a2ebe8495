"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, CreatedAtMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Async connection management
  - create_all_tables(), dispose_engine(): Schema creation and shutdown
  - ping(): Connectivity check for health endpoints

Models and CRUD singletons live in the models and CRUD subpackages.

Dependencies: sqlalchemy, agribot.configs
System role: Database adapter providing persistent storage for chat
sessions, turns, caches and read-only prediction history.
"""

from agribot.boundary.db.base import Base, CreatedAtMixin, UUIDMixin
from agribot.boundary.db.connection import (
    create_all_tables,
    dispose_engine,
    get_async_db,
    get_async_engine,
    get_async_session_factory,
    ping,
)

__all__ = [
    "Base",
    "UUIDMixin",
    "CreatedAtMixin",
    "get_async_engine",
    "get_async_session_factory",
    "get_async_db",
    "create_all_tables",
    "dispose_engine",
    "ping",
]
