"""
Session service orchestrator.

Coordinates session listing, history replay, closing and deletion for
the owning user. Foreign or missing sessions and messages raise
not-found errors.

Dependencies: agribot.boundary.db.CRUD, agribot.models.session
System role: Session use case orchestration
"""

import logging
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from agribot.boundary.db.CRUD.message_crud import message_crud
from agribot.boundary.db.CRUD.session_crud import session_crud
from agribot.boundary.db.models.message_model import ChatMessageModel
from agribot.boundary.db.models.session_model import SessionModel
from agribot.core.exceptions import (
    InvalidSessionStateError,
    MessageNotFoundError,
    SessionNotFoundError,
)
from agribot.models.session import (
    HistoryMessage,
    MessagePage,
    PaginationInfo,
    SessionHistory,
    SessionListResponse,
    SessionSummary,
)
from agribot.utils.time import Clock, utc_now

logger = logging.getLogger(__name__)

MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 100


def clamp_page_size(limit: int | None, default: int = 20) -> int:
    """Clamp a requested page size into [1, 100]."""
    if limit is None:
        return default
    return max(MIN_PAGE_SIZE, min(MAX_PAGE_SIZE, limit))


def to_session_summary(session: SessionModel) -> SessionSummary:
    return SessionSummary(
        id=session.id,
        user_id=session.user_id,
        status=session.status,
        started_at=session.started_at,
        ended_at=session.ended_at,
        last_message_at=session.last_message_at,
        total_messages=session.total_messages,
        session_summary=session.session_summary,
        device_type=session.device_type,
    )


def to_history_message(message: ChatMessageModel) -> HistoryMessage:
    return HistoryMessage(
        id=message.id,
        role=message.sender_type,
        text=message.message_text,
        audio_url=message.message_audio_url,
        language=message.language,
        timestamp=message.created_at,
        intent=message.intent,
        web_sources=message.web_sources,
    )


class SessionService:
    """Session service orchestrator."""

    def __init__(self, db: AsyncSession, clock: Clock = utc_now) -> None:
        """
        Initialize session service with async database session.

        Args:
            db: Async SQLAlchemy session
            clock: Time source for close timestamps
        """
        self.db = db
        self.clock = clock

    async def _owned_session(self, session_id: UUID, user_id: int) -> SessionModel:
        session = await session_crud.get_owned(self.db, session_id, user_id)
        if session is None:
            raise SessionNotFoundError(str(session_id), user_id)
        return session

    async def list_sessions(
        self,
        user_id: int,
        limit: int | None = 20,
        before: UUID | None = None,
    ) -> SessionListResponse:
        """
        List a user's sessions, newest first.

        Args:
            user_id: Owning user
            limit: Page size (clamped to 1-100)
            before: Session id cursor from a previous page

        Returns:
            SessionListResponse with next_cursor set when more pages exist
        """
        page_size = clamp_page_size(limit)
        rows = list(await session_crud.list_for_user(
            self.db, user_id, limit=page_size + 1, before=before
        ))
        has_more = len(rows) > page_size
        rows = rows[:page_size]
        return SessionListResponse(
            sessions=[to_session_summary(s) for s in rows],
            count=len(rows),
            next_cursor=rows[-1].id if has_more and rows else None,
        )

    async def get_session_history(
        self,
        session_id: UUID,
        user_id: int,
        limit: int | None = 50,
        after: int | None = None,
    ) -> SessionHistory:
        """
        Replay a session oldest first.

        Args:
            session_id: Session UUID
            user_id: Requesting user
            limit: Page size (clamped to 1-100)
            after: Message id cursor; only later messages are returned

        Returns:
            SessionHistory

        Raises:
            SessionNotFoundError: Missing or foreign session
        """
        session = await self._owned_session(session_id, user_id)
        page_size = clamp_page_size(limit, default=50)
        rows = list(await message_crud.list_after(
            self.db, session_id, limit=page_size + 1, after_id=after
        ))
        has_more = len(rows) > page_size
        rows = rows[:page_size]
        total = await message_crud.count_for_session(self.db, session_id)
        return SessionHistory(
            session=to_session_summary(session),
            messages=[to_history_message(m) for m in rows],
            pagination=PaginationInfo(
                has_more=has_more,
                next_cursor=rows[-1].id if has_more and rows else None,
                page_size=page_size,
                total=total,
            ),
        )

    async def list_messages(
        self,
        session_id: UUID,
        user_id: int,
        limit: int | None = 20,
        before: int | None = None,
    ) -> MessagePage:
        """
        Page through a session's messages, newest first.

        Args:
            session_id: Session UUID
            user_id: Requesting user
            limit: Page size (clamped to 1-100)
            before: Message id cursor; only earlier messages are returned

        Returns:
            MessagePage

        Raises:
            SessionNotFoundError: Missing or foreign session
        """
        await self._owned_session(session_id, user_id)
        page_size = clamp_page_size(limit)
        rows = list(await message_crud.list_page(
            self.db, session_id, limit=page_size + 1, before_id=before
        ))
        has_more = len(rows) > page_size
        rows = rows[:page_size]
        total = await message_crud.count_for_session(self.db, session_id)
        return MessagePage(
            session_id=session_id,
            messages=[to_history_message(m) for m in rows],
            pagination=PaginationInfo(
                has_more=has_more,
                next_cursor=rows[-1].id if has_more and rows else None,
                page_size=page_size,
                total=total,
            ),
        )

    async def close_session(
        self,
        session_id: UUID,
        user_id: int,
        summary: str | None = None,
    ) -> SessionSummary:
        """
        Close an active session.

        Raises:
            SessionNotFoundError: Missing or foreign session
            InvalidSessionStateError: Session already closed or abandoned
        """
        session = await self._owned_session(session_id, user_id)
        if not session.is_active:
            raise InvalidSessionStateError(str(session_id), session.status)

        await session_crud.close(self.db, session, ended_at=self.clock(), summary=summary)
        await self.db.commit()
        logger.info(f"{__name__}:close_session - Closed session {session_id}")
        return to_session_summary(session)

    async def delete_session(self, session_id: UUID, user_id: int) -> bool:
        """
        Delete a session and its messages.

        Raises:
            SessionNotFoundError: Missing or foreign session
        """
        await self._owned_session(session_id, user_id)
        deleted = await session_crud.delete_with_messages(self.db, session_id)
        await self.db.commit()
        logger.info(f"{__name__}:delete_session - Deleted session {session_id}")
        return deleted

    async def delete_message(
        self,
        session_id: UUID,
        message_id: int,
        user_id: int,
    ) -> bool:
        """
        Delete one message and recompute the session counters.

        Raises:
            SessionNotFoundError: Missing or foreign session
            MessageNotFoundError: Message not in this session
        """
        session = await self._owned_session(session_id, user_id)
        message = await message_crud.get_in_session(self.db, session_id, message_id)
        if message is None:
            raise MessageNotFoundError(message_id)

        await message_crud.delete_by_id(self.db, message_id)
        session.total_messages = await message_crud.count_for_session(self.db, session_id)
        session.last_message_at = await message_crud.latest_created_at(self.db, session_id)
        await self.db.commit()
        return True
