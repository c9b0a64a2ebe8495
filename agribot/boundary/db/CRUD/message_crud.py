"""
Chat message CRUD operations.

All reads are scoped to one session and ordered by (created_at, id),
the total order of turns within a session. Cursors are message ids.

Dependencies: sqlalchemy, agribot.boundary.db.models
System role: Conversation turn persistence operations
"""

from collections.abc import Sequence
from datetime import datetime
from uuid import UUID

from sqlalchemy import and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from agribot.boundary.db.CRUD.base_crud import BaseCRUD
from agribot.boundary.db.models.message_model import ChatMessageModel


class MessageCRUD(BaseCRUD[ChatMessageModel]):
    """CRUD operations for ChatMessageModel."""

    def __init__(self) -> None:
        """Initialize MessageCRUD with ChatMessageModel."""
        super().__init__(ChatMessageModel)

    async def get_in_session(
        self,
        session: AsyncSession,
        session_id: UUID,
        message_id: int,
    ) -> ChatMessageModel | None:
        """Retrieve a message only if it belongs to the given session."""
        stmt = select(ChatMessageModel).where(
            ChatMessageModel.id == message_id,
            ChatMessageModel.session_id == session_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def _cursor_bounds(
        self,
        session: AsyncSession,
        session_id: UUID,
        cursor_id: int | None,
    ) -> tuple[datetime, int] | None:
        if cursor_id is None:
            return None
        cursor = await self.get_in_session(session, session_id, cursor_id)
        if cursor is None:
            return None
        return cursor.created_at, cursor.id

    async def list_recent(
        self,
        session: AsyncSession,
        session_id: UUID,
        limit: int,
        before_id: int | None = None,
    ) -> Sequence[ChatMessageModel]:
        """
        Retrieve the most recent turns of a session, oldest first.

        Args:
            session: Async database session
            session_id: Session UUID
            limit: Number of turns to return
            before_id: Only turns ordered before this message are considered

        Returns:
            Up to `limit` most recent turns in chronological order
        """
        page = await self.list_page(session, session_id, limit, before_id)
        return list(reversed(page))

    async def list_page(
        self,
        session: AsyncSession,
        session_id: UUID,
        limit: int,
        before_id: int | None = None,
    ) -> Sequence[ChatMessageModel]:
        """
        Retrieve turns newest first, strictly before an optional cursor.

        Args:
            session: Async database session
            session_id: Session UUID
            limit: Maximum number of turns
            before_id: Message id cursor

        Returns:
            Turns ordered by (created_at, id) descending
        """
        stmt = select(ChatMessageModel).where(ChatMessageModel.session_id == session_id)

        bounds = await self._cursor_bounds(session, session_id, before_id)
        if bounds is not None:
            created_at, cursor_id = bounds
            stmt = stmt.where(
                or_(
                    ChatMessageModel.created_at < created_at,
                    and_(
                        ChatMessageModel.created_at == created_at,
                        ChatMessageModel.id < cursor_id,
                    ),
                )
            )

        stmt = stmt.order_by(
            ChatMessageModel.created_at.desc(),
            ChatMessageModel.id.desc(),
        ).limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def list_after(
        self,
        session: AsyncSession,
        session_id: UUID,
        limit: int,
        after_id: int | None = None,
    ) -> Sequence[ChatMessageModel]:
        """
        Retrieve turns oldest first, strictly after an optional cursor.

        Args:
            session: Async database session
            session_id: Session UUID
            limit: Maximum number of turns
            after_id: Message id cursor

        Returns:
            Turns ordered by (created_at, id) ascending
        """
        stmt = select(ChatMessageModel).where(ChatMessageModel.session_id == session_id)

        bounds = await self._cursor_bounds(session, session_id, after_id)
        if bounds is not None:
            created_at, cursor_id = bounds
            stmt = stmt.where(
                or_(
                    ChatMessageModel.created_at > created_at,
                    and_(
                        ChatMessageModel.created_at == created_at,
                        ChatMessageModel.id > cursor_id,
                    ),
                )
            )

        stmt = stmt.order_by(
            ChatMessageModel.created_at.asc(),
            ChatMessageModel.id.asc(),
        ).limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def count_for_session(self, session: AsyncSession, session_id: UUID) -> int:
        """Number of turns stored for a session."""
        return await self.count_where(session, ChatMessageModel.session_id == session_id)

    async def latest_created_at(
        self,
        session: AsyncSession,
        session_id: UUID,
    ) -> datetime | None:
        """Timestamp of the newest turn, None for an empty session."""
        stmt = select(func.max(ChatMessageModel.created_at)).where(
            ChatMessageModel.session_id == session_id
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()


message_crud = MessageCRUD()
