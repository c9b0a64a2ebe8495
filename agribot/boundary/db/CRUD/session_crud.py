"""
Chat session CRUD operations.

Provides ownership-scoped reads, cursor pagination and lifecycle
mutations for SessionModel.

Dependencies: sqlalchemy, agribot.boundary.db.models
System role: Session persistence operations
"""

from collections.abc import Sequence
from datetime import datetime
from uuid import UUID

from sqlalchemy import and_, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from agribot.boundary.db.CRUD.base_crud import BaseCRUD
from agribot.boundary.db.CRUD.message_crud import message_crud
from agribot.boundary.db.models.message_model import ChatMessageModel
from agribot.boundary.db.models.session_model import SessionModel, SessionStatus


class SessionCRUD(BaseCRUD[SessionModel]):
    """
    CRUD operations for SessionModel.

    Extends BaseCRUD with user-scoped lookups. A session owned by another
    user is reported as missing.
    """

    def __init__(self) -> None:
        """Initialize SessionCRUD with SessionModel."""
        super().__init__(SessionModel)

    async def get_owned(
        self,
        session: AsyncSession,
        id: UUID,
        user_id: int,
    ) -> SessionModel | None:
        """
        Retrieve a session only if it belongs to the user.

        Args:
            session: Async database session
            id: Session UUID
            user_id: Requesting user

        Returns:
            SessionModel if found and owned, None otherwise
        """
        stmt = select(SessionModel).where(
            SessionModel.id == id,
            SessionModel.user_id == user_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_latest_active(
        self,
        session: AsyncSession,
        user_id: int,
    ) -> SessionModel | None:
        """
        Retrieve the user's most recently started active session.

        Args:
            session: Async database session
            user_id: Owning user

        Returns:
            SessionModel or None when the user has no active session
        """
        stmt = (
            select(SessionModel)
            .where(
                SessionModel.user_id == user_id,
                SessionModel.status == SessionStatus.ACTIVE.value,
            )
            .order_by(SessionModel.started_at.desc(), SessionModel.id.desc())
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_user(
        self,
        session: AsyncSession,
        user_id: int,
        limit: int,
        before: UUID | None = None,
    ) -> Sequence[SessionModel]:
        """
        List a user's sessions newest first.

        Args:
            session: Async database session
            user_id: Owning user
            limit: Maximum number of sessions to return
            before: Session id cursor; only sessions ordered after it are returned

        Returns:
            Sequence of SessionModels ordered by (started_at, id) descending
        """
        stmt = select(SessionModel).where(SessionModel.user_id == user_id)

        if before is not None:
            cursor = await self.get_owned(session, before, user_id)
            if cursor is not None:
                stmt = stmt.where(
                    or_(
                        SessionModel.started_at < cursor.started_at,
                        and_(
                            SessionModel.started_at == cursor.started_at,
                            SessionModel.id < cursor.id,
                        ),
                    )
                )

        stmt = stmt.order_by(
            SessionModel.started_at.desc(),
            SessionModel.id.desc(),
        ).limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def record_activity(
        self,
        session: AsyncSession,
        id: UUID,
        at: datetime,
    ) -> None:
        """
        Count one new turn and move the last-activity marker.

        Issued as a single UPDATE; loaded instances are not refreshed.

        Args:
            session: Async database session
            id: Session UUID
            at: Timestamp of the new turn
        """
        await self.increment(session, id, "total_messages", last_message_at=at)

    async def close(
        self,
        session: AsyncSession,
        instance: SessionModel,
        ended_at: datetime,
        summary: str | None = None,
    ) -> SessionModel:
        """
        Mark a session closed.

        Args:
            session: Async database session
            instance: Loaded, active SessionModel
            ended_at: Close timestamp
            summary: Optional session summary

        Returns:
            The updated SessionModel
        """
        instance.status = SessionStatus.CLOSED.value
        instance.ended_at = ended_at
        if summary is not None:
            instance.session_summary = summary
        await session.flush()
        return instance

    async def delete_with_messages(self, session: AsyncSession, id: UUID) -> bool:
        """
        Delete a session and all of its messages.

        Messages are deleted explicitly so the cascade holds on backends
        that do not enforce foreign keys.

        Args:
            session: Async database session
            id: Session UUID

        Returns:
            True if the session was deleted
        """
        await message_crud.delete_where(session, ChatMessageModel.session_id == id)
        return await self.delete_by_id(session, id)


session_crud = SessionCRUD()
