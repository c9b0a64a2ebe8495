"""
Chat session ORM model.

Represents one continuous conversation owned by a user. Messages are
scoped to sessions and removed with them.

Dependencies: sqlalchemy, agribot.boundary.db.base
System role: Session persistence for conversation lifecycle
"""

from datetime import datetime
from enum import Enum

from sqlalchemy import JSON, DateTime, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from agribot.boundary.db.base import Base, UUIDMixin
from agribot.utils.time import utc_now


class SessionStatus(str, Enum):
    """Lifecycle status of a chat session."""

    ACTIVE = "active"
    CLOSED = "closed"
    ABANDONED = "abandoned"


class SessionModel(Base, UUIDMixin):
    """
    Chat session ORM model.

    Only active sessions accept new turns. Closed and abandoned sessions
    are immutable except for deletion; deletion cascades to messages.

    Attributes:
        id: UUID primary key (auto-generated)
        user_id: Owning user
        started_at: Creation timestamp (UTC)
        ended_at: Close timestamp, None while active
        last_message_at: Timestamp of the latest persisted turn
        status: One of SessionStatus values
        session_summary: Optional human/AI summary set on close
        total_messages: Running message count
        device_type: Client device (web, android, ...)
        user_location: Client-reported location JSON
    """

    __tablename__ = "chat_sessions"
    __table_args__ = (
        Index("idx_user_sessions", "user_id", "started_at"),
        Index("idx_active_sessions", "status", "started_at"),
    )

    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    last_message_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=SessionStatus.ACTIVE.value,
    )
    session_summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    total_messages: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    device_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    user_location: Mapped[dict | None] = mapped_column(JSON, nullable=True)

    # Relationships
    messages = relationship(
        "ChatMessageModel",
        back_populates="session",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def is_active(self) -> bool:
        """True when the session still accepts turns."""
        return self.status == SessionStatus.ACTIVE.value
