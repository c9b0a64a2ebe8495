"""
Database configuration settings.

Connection parameters for the shared PostgreSQL database. POSTGRES_URL
overrides the component fields, which is how tests and local runs point
the service at SQLite.

Dependencies: pydantic, pydantic_settings
System role: Database connection configuration for ORM
"""

from typing import Literal

from pydantic import Field

from agribot.configs.base import BaseSettings, env_config


class DatabaseSettings(BaseSettings):
    """Database connection and pool configuration (POSTGRES_ prefix)."""

    model_config = env_config("POSTGRES_")

    host: str = Field(default="localhost", description="PostgreSQL host")
    port: int = Field(default=5432, description="PostgreSQL port")
    user: str = Field(default="postgres", description="PostgreSQL user")
    password: str = Field(default="postgres", description="PostgreSQL password")
    db: str = Field(default="agribot", description="PostgreSQL database name")
    sslmode: Literal["disable", "prefer", "require"] = Field(
        default="prefer",
        description="SSL mode; only 'require' is forwarded to asyncpg",
    )

    url: str | None = Field(
        default=None,
        description="Full async SQLAlchemy URL; overrides the fields above when set",
    )

    pool_size: int = Field(default=10, ge=1, description="Connection pool size")
    max_overflow: int = Field(default=20, ge=0, description="Maximum overflow connections")
    pool_timeout: int = Field(default=30, ge=1, description="Pool checkout timeout in seconds")
    echo_sql: bool = Field(default=False, description="Echo SQL statements to logs")

    create_tables: bool = Field(
        default=False,
        description="Create missing tables at startup (development only)",
    )

    @property
    def async_database_url(self) -> str:
        """SQLAlchemy URL for the async driver (asyncpg takes 'ssl', not 'sslmode')."""
        if self.url:
            return self.url
        url = (
            f"postgresql+asyncpg://{self.user}:{self.password}"
            f"@{self.host}:{self.port}/{self.db}"
        )
        if self.sslmode == "require":
            url += "?ssl=require"
        return url

    @property
    def is_sqlite(self) -> bool:
        return self.async_database_url.startswith("sqlite")
