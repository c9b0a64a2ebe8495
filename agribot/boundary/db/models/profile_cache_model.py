"""
Farmer profile cache ORM model.

One row per user holding the last computed FarmerProfile projection.

Dependencies: sqlalchemy, agribot.boundary.db.base
System role: Derived farmer context cache
"""

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from agribot.boundary.db.base import Base
from agribot.utils.time import utc_now


class UserContextCacheModel(Base):
    """
    Farmer profile cache ORM model.

    Overwritten wholesale on every rebuild; no versioning.

    Attributes:
        user_id: Owning user (primary key)
        recent_crops: Serialized crop history, newest first
        avg_soil_metrics: Serialized SoilProfile
        preferred_region: Mode of state/region
        preferred_season: Mode of season
        preferred_language: Conversation language preference
        uses_voice: Whether the farmer talks to the bot by voice
        total_predictions: Records the profile was built from
        history_digest: Prompt-ready summary
        last_updated: Freshness timestamp
    """

    __tablename__ = "user_context_cache"
    __table_args__ = (
        Index("idx_cache_freshness", "last_updated"),
    )

    user_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    recent_crops: Mapped[list | None] = mapped_column(JSON, nullable=True)
    avg_soil_metrics: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    preferred_region: Mapped[str | None] = mapped_column(String(100), nullable=True)
    preferred_season: Mapped[str | None] = mapped_column(String(20), nullable=True)
    preferred_language: Mapped[str] = mapped_column(String(10), nullable=False, default="darja")
    uses_voice: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    total_predictions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    history_digest: Mapped[str] = mapped_column(Text, nullable=False, default="")
    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
