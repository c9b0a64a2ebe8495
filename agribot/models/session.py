"""
Session domain models and schemas.

Request/response schemas for session listing and history replay.

Dependencies: pydantic
System role: Session API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field


class CloseSessionRequest(BaseModel):
    """Request schema for closing a session."""

    user_id: int = Field(gt=0)
    summary: str | None = Field(default=None, description="Optional human/AI summary")


class SessionSummary(BaseModel):
    """One session in a listing."""

    id: uuid.UUID
    user_id: int
    status: str
    started_at: datetime
    ended_at: datetime | None = None
    last_message_at: datetime | None = None
    total_messages: int = 0
    session_summary: str | None = None
    device_type: str | None = None


class SessionListResponse(BaseModel):
    """Newest-first session page."""

    sessions: list[SessionSummary]
    count: int
    next_cursor: uuid.UUID | None = None


class HistoryMessage(BaseModel):
    """Single persisted turn."""

    id: int
    role: str = Field(description="Message role: 'user' or 'bot'")
    text: str
    audio_url: str | None = None
    language: str | None = None
    timestamp: datetime
    intent: str | None = None
    web_sources: list[dict] | None = None


class PaginationInfo(BaseModel):
    """Cursor pagination block."""

    has_more: bool = False
    next_cursor: int | None = None
    page_size: int
    total: int = 0


class SessionHistory(BaseModel):
    """Full session replay, oldest first."""

    session: SessionSummary
    messages: list[HistoryMessage]
    pagination: PaginationInfo


class MessagePage(BaseModel):
    """Newest-first message page."""

    session_id: uuid.UUID
    messages: list[HistoryMessage]
    pagination: PaginationInfo
