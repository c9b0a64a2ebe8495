"""
Search cache ORM model.

Content-addressed cache of web search responses. Entries are advisory:
dropping any of them only costs latency.

Dependencies: sqlalchemy, agribot.boundary.db.base
System role: Search result persistence with TTL
"""

from datetime import datetime

from sqlalchemy import JSON, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from agribot.boundary.db.base import Base, CreatedAtMixin


class SearchCacheModel(Base, CreatedAtMixin):
    """
    Search cache ORM model.

    Attributes:
        id: Autoincrement primary key
        query_hash: sha256 of the normalized query (unique)
        original_query: Query as issued
        search_results: Serialized SearchResponse
        expires_at: Expiry; entries past it are treated as misses
        hit_count: Reuse counter, reset when the entry is replaced
    """

    __tablename__ = "search_cache"
    __table_args__ = (
        Index("idx_expiration", "expires_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    query_hash: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    original_query: Mapped[str] = mapped_column(Text, nullable=False)
    search_results: Mapped[dict] = mapped_column(JSON, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    hit_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
