"""
Prediction history ORM models (read-only for the chatbot).

Two schemas coexist: the current predictions table, which stores a soil
snapshot and ranked crop list as JSON, and the legacy input/output pair.
Rows are written by the prediction API, outside this package.

Dependencies: sqlalchemy, agribot.boundary.db.base
System role: Farmer agronomic history source
"""

from datetime import datetime

from sqlalchemy import JSON, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from agribot.boundary.db.base import Base, CreatedAtMixin
from agribot.utils.time import utc_now


class PredictionModel(Base):
    """
    Current prediction record.

    Attributes:
        id: Primary key
        user_id: Owning user
        field_id: Field the prediction was made for
        prediction_date: When the prediction was (re)computed
        soil: Soil snapshot (nitrogen, phosphorus, ..., state, season)
        best_crops: Ranked crop outcomes, first entry is the recommendation
        ai_explain: Free-text explanation
    """

    __tablename__ = "predictions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    field_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    prediction_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )
    soil: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    best_crops: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    ai_explain: Mapped[str | None] = mapped_column(Text, nullable=True)


class PredictHistoryInputModel(Base, CreatedAtMixin):
    """Legacy prediction input (soil and climate parameters)."""

    __tablename__ = "predict_history_inputs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    nitrogen: Mapped[float | None] = mapped_column(Float, nullable=True)
    phosphorus: Mapped[float | None] = mapped_column(Float, nullable=True)
    potassium: Mapped[float | None] = mapped_column(Float, nullable=True)
    temperature: Mapped[float | None] = mapped_column(Float, nullable=True)
    humidity: Mapped[float | None] = mapped_column(Float, nullable=True)
    ph: Mapped[float | None] = mapped_column(Float, nullable=True)
    rainfall: Mapped[float | None] = mapped_column(Float, nullable=True)
    state: Mapped[str | None] = mapped_column(String(100), nullable=True)
    season: Mapped[str | None] = mapped_column(String(50), nullable=True)

    output = relationship("PredictHistoryOutputModel", back_populates="input", uselist=False)


class PredictHistoryOutputModel(Base, CreatedAtMixin):
    """Legacy prediction output (recommended crop and revenue)."""

    __tablename__ = "predict_history_outputs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    input_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("predict_history_inputs.id", ondelete="CASCADE"),
        nullable=False,
    )
    best_crop: Mapped[str] = mapped_column(String(100), nullable=False)
    predicted_yield: Mapped[float | None] = mapped_column(Float, nullable=True)
    unit: Mapped[str | None] = mapped_column(String(50), nullable=True)
    region: Mapped[str | None] = mapped_column(String(100), nullable=True)
    total_revenue: Mapped[float | None] = mapped_column(Float, nullable=True)
    currency: Mapped[str | None] = mapped_column(String(3), nullable=True, default="DZD")

    input = relationship("PredictHistoryInputModel", back_populates="output")
