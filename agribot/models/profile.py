"""
Farmer profile models.

Derived aggregate of a user's prediction history. Rebuildable at any
time, cached with a freshness window, never a source of truth.

Dependencies: pydantic
System role: Farmer context contracts
"""

from datetime import datetime

from pydantic import BaseModel, Field

DEFAULT_REGION = "Algeria"


class SoilProfile(BaseModel):
    """Average soil and climate metrics; None when no record supplies a metric."""

    avg_nitrogen: float | None = None
    avg_phosphorus: float | None = None
    avg_potassium: float | None = None
    avg_ph: float | None = None
    avg_rainfall: float | None = None
    avg_temperature: float | None = None
    avg_humidity: float | None = None

    def is_empty(self) -> bool:
        """True when no metric has data."""
        return all(value is None for value in self.model_dump().values())


class CropOutcome(BaseModel):
    """One recorded crop outcome."""

    crop: str
    yield_value: float | None = Field(default=None, alias="yield")
    unit: str | None = None
    revenue: float | None = None
    currency: str = "DZD"
    region: str | None = None
    date: datetime | None = None

    model_config = {"populate_by_name": True}


class FarmerProfile(BaseModel):
    """Farmer context injected into the assistant prompt."""

    user_id: int
    soil_profile: SoilProfile = Field(default_factory=SoilProfile)
    crop_history: list[CropOutcome] = Field(default_factory=list)
    region: str = Field(default=DEFAULT_REGION, description="Most frequent state/region")
    preferred_season: str | None = Field(default=None, description="Most frequent season")
    preferred_language: str = Field(default="darja")
    uses_voice: bool = False
    total_predictions: int = 0
    history_digest: str = ""
    cached: bool = False
    last_updated: datetime | None = None

    @property
    def has_history(self) -> bool:
        """True when the farmer has at least one recorded prediction."""
        return self.total_predictions > 0

    @classmethod
    def empty(cls, user_id: int) -> "FarmerProfile":
        """Profile for a user with no prediction history."""
        return cls(user_id=user_id)
