"""
Prediction history read operations.

The chatbot never writes prediction rows; this module only reads the
primary predictions table and the legacy input/output pair.

Dependencies: sqlalchemy, agribot.boundary.db.models
System role: Farmer agronomic history source
"""

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from agribot.boundary.db.CRUD.base_crud import BaseCRUD
from agribot.boundary.db.models.prediction_model import (
    PredictHistoryInputModel,
    PredictHistoryOutputModel,
    PredictionModel,
)


class PredictionCRUD(BaseCRUD[PredictionModel]):
    """Read-only queries over the farmer's prediction history."""

    def __init__(self) -> None:
        """Initialize PredictionCRUD with PredictionModel."""
        super().__init__(PredictionModel)

    async def list_recent(
        self,
        session: AsyncSession,
        user_id: int,
        limit: int,
    ) -> Sequence[PredictionModel]:
        """
        Retrieve a user's most recent predictions, newest first.

        Args:
            session: Async database session
            user_id: Owning user
            limit: Maximum number of rows

        Returns:
            Sequence of PredictionModels
        """
        stmt = (
            select(PredictionModel)
            .where(PredictionModel.user_id == user_id)
            .order_by(PredictionModel.prediction_date.desc(), PredictionModel.id.desc())
            .limit(limit)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def list_legacy(
        self,
        session: AsyncSession,
        user_id: int,
        since: datetime,
        limit: int,
    ) -> Sequence[tuple[PredictHistoryInputModel, PredictHistoryOutputModel]]:
        """
        Retrieve legacy input/output pairs created after a cut-off.

        Args:
            session: Async database session
            user_id: Owning user
            since: Oldest input timestamp to include
            limit: Maximum number of pairs

        Returns:
            (input, output) pairs, newest first
        """
        stmt = (
            select(PredictHistoryInputModel, PredictHistoryOutputModel)
            .join(
                PredictHistoryOutputModel,
                PredictHistoryOutputModel.input_id == PredictHistoryInputModel.id,
            )
            .where(
                PredictHistoryInputModel.user_id == user_id,
                PredictHistoryInputModel.created_at >= since,
            )
            .order_by(
                PredictHistoryInputModel.created_at.desc(),
                PredictHistoryInputModel.id.desc(),
            )
            .limit(limit)
        )
        result = await session.execute(stmt)
        return [tuple(row) for row in result.all()]


prediction_crud = PredictionCRUD()
