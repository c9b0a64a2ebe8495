"""
Chat message ORM model.

One turn of a session, authored by the user or the bot. Bot turns carry
provenance (intent, search usage, sources) and performance metrics.

Dependencies: sqlalchemy, agribot.boundary.db.base
System role: Conversation turn persistence
"""

import uuid
from enum import Enum

from sqlalchemy import (
    JSON,
    Boolean,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from agribot.boundary.db.base import Base, CreatedAtMixin


class SenderType(str, Enum):
    """Author of a turn."""

    USER = "user"
    BOT = "bot"


class ChatMessageModel(Base, CreatedAtMixin):
    """
    Chat message ORM model.

    The integer id follows insertion order and breaks created_at ties,
    so (created_at, id) is a total order within a session.

    Attributes:
        id: Autoincrement primary key, also the pagination cursor
        session_id: Parent session (cascade delete)
        sender_type: "user" or "bot"
        message_text: Turn body
        message_audio_url: Optional audio reference
        language: Detected or declared language code
        intent: Classified intent (bot turns)
        confidence_score: Classifier confidence (bot turns)
        used_web_search: Whether search results reached the prompt
        used_user_history: Whether the farmer profile reached the prompt
        web_sources: Snapshot of search results used
        response_time_ms: End-to-end latency of the exchange
        tokens_used: Model token usage
    """

    __tablename__ = "chat_messages"
    __table_args__ = (
        Index("idx_session_messages", "session_id", "created_at"),
        Index("idx_intent_analysis", "intent", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    session_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("chat_sessions.id", ondelete="CASCADE"),
        nullable=False,
    )
    sender_type: Mapped[str] = mapped_column(String(10), nullable=False)
    message_text: Mapped[str] = mapped_column(Text, nullable=False)
    message_audio_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    language: Mapped[str] = mapped_column(String(10), nullable=False, default="darja")

    intent: Mapped[str | None] = mapped_column(String(100), nullable=True)
    confidence_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    used_web_search: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    used_user_history: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    web_sources: Mapped[list | None] = mapped_column(JSON, nullable=True)

    response_time_ms: Mapped[int | None] = mapped_column(Integer, nullable=True)
    tokens_used: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Relationships
    session = relationship("SessionModel", back_populates="messages")
