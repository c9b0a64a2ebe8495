"""
Farmer context aggregation.

Builds the FarmerProfile injected into prompts from the user's prediction
history, behind a freshness-gated cache. The history lookup is a two-step
chain (current predictions, then the legacy input/output tables) that
normalizes both sources into OutcomeRecord.

Dependencies: sqlalchemy, agribot.boundary.db.CRUD, agribot.models.profile
System role: Farmer memory for the conversational pipeline
"""

import asyncio
import logging
import math
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Final

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from agribot.boundary.db.CRUD.prediction_crud import prediction_crud
from agribot.boundary.db.CRUD.profile_cache_crud import profile_cache_crud
from agribot.boundary.db.models.prediction_model import (
    PredictHistoryInputModel,
    PredictHistoryOutputModel,
    PredictionModel,
)
from agribot.boundary.db.models.profile_cache_model import UserContextCacheModel
from agribot.configs.chatbot import ChatbotSettings
from agribot.models.profile import DEFAULT_REGION, CropOutcome, FarmerProfile, SoilProfile
from agribot.observability.log_utils import log_exception_with_context
from agribot.utils.time import Clock, as_utc, utc_now

logger = logging.getLogger(__name__)

SOIL_METRICS = ("nitrogen", "phosphorus", "potassium", "ph", "rainfall", "temperature", "humidity")
SOIL_KEY_ALIASES = {
    "nitrogen": ("nitrogen", "n"),
    "phosphorus": ("phosphorus", "p"),
    "potassium": ("potassium", "k"),
    "ph": ("ph",),
    "rainfall": ("rainfall", "rain"),
    "temperature": ("temperature", "temp"),
    "humidity": ("humidity",),
}
DIGEST_RECENT = 3
DIGEST_TOP_CROPS = 3


@dataclass(frozen=True)
class OutcomeRecord:
    """One historical prediction, independent of the table it came from."""

    date: datetime | None
    crop: str | None
    yield_value: float | None = None
    unit: str | None = None
    revenue: float | None = None
    currency: str = "DZD"
    region: str | None = None
    state: str | None = None
    season: str | None = None
    nitrogen: float | None = None
    phosphorus: float | None = None
    potassium: float | None = None
    ph: float | None = None
    rainfall: float | None = None
    temperature: float | None = None
    humidity: float | None = None


class _NoHistory:
    """Marker for a lookup step that found no records."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NO_HISTORY"

    def __bool__(self) -> bool:
        return False


NO_HISTORY: Final = _NoHistory()

HistoryLookup = list[OutcomeRecord] | _NoHistory


def _numeric(value: Any) -> float | None:
    """Extract a finite float from numbers, numeric strings or {value: ...} dicts."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if math.isfinite(value) else None
    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return None
        return parsed if math.isfinite(parsed) else None
    if isinstance(value, dict):
        for key in ("value", "amount", "mean", "avg"):
            if key in value:
                return _numeric(value[key])
    return None


def _soil_value(soil: dict, metric: str) -> float | None:
    lowered = {str(k).lower(): v for k, v in soil.items()}
    for alias in SOIL_KEY_ALIASES[metric]:
        if alias in lowered:
            return _numeric(lowered[alias])
    return None


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def record_from_prediction(row: PredictionModel) -> OutcomeRecord:
    """Normalize a current prediction row (soil JSON + ranked crops JSON)."""
    soil = row.soil if isinstance(row.soil, dict) else {}
    crops = row.best_crops if isinstance(row.best_crops, list) else []
    best = crops[0] if crops and isinstance(crops[0], dict) else {}

    state = _text(soil.get("state")) or _text(best.get("state")) or _text(best.get("region"))
    return OutcomeRecord(
        date=as_utc(row.prediction_date),
        crop=_text(best.get("crop") or best.get("name")),
        yield_value=_numeric(best.get("yield", best.get("predicted_yield"))),
        unit=_text(best.get("unit")),
        revenue=_numeric(best.get("revenue", best.get("total_revenue"))),
        currency=_text(best.get("currency")) or "DZD",
        region=_text(best.get("region")) or state,
        state=state,
        season=_text(soil.get("season")),
        **{metric: _soil_value(soil, metric) for metric in SOIL_METRICS},
    )


def record_from_legacy(
    inputs: PredictHistoryInputModel,
    output: PredictHistoryOutputModel,
) -> OutcomeRecord:
    """Normalize a legacy input/output pair."""
    return OutcomeRecord(
        date=as_utc(inputs.created_at),
        crop=_text(output.best_crop),
        yield_value=_numeric(output.predicted_yield),
        unit=_text(output.unit),
        revenue=_numeric(output.total_revenue),
        currency=_text(output.currency) or "DZD",
        region=_text(output.region) or _text(inputs.state),
        state=_text(inputs.state),
        season=_text(inputs.season),
        **{metric: _numeric(getattr(inputs, metric)) for metric in SOIL_METRICS},
    )


def mean_of(values: Iterable[float | None]) -> float | None:
    """Mean of the finite, non-null values; None when there are none."""
    valid = [v for v in values if v is not None and math.isfinite(v)]
    if not valid:
        return None
    return sum(valid) / len(valid)


def mode_of(values: Iterable[str | None]) -> str | None:
    """Most frequent non-null value; the first-seen value wins ties."""
    counts = Counter(v for v in values if v)
    if not counts:
        return None
    return max(counts, key=counts.get)


def _fmt(value: float) -> str:
    return f"{value:g}"


def _soil_parts(
    nitrogen: float | None,
    phosphorus: float | None,
    potassium: float | None,
    ph: float | None,
    rainfall: float | None = None,
    temperature: float | None = None,
    humidity: float | None = None,
) -> list[str]:
    labelled = (
        ("N", nitrogen, "{:.0f}"),
        ("P", phosphorus, "{:.0f}"),
        ("K", potassium, "{:.0f}"),
        ("pH", ph, "{:.1f}"),
        ("rainfall", rainfall, "{:.0f}mm"),
        ("temperature", temperature, "{:.0f}°C"),
        ("humidity", humidity, "{:.0f}%"),
    )
    return [f"{label}={fmt.format(value)}" for label, value, fmt in labelled if value is not None]


def _record_line(record: OutcomeRecord) -> str:
    parts = [
        record.date.date().isoformat() if record.date else "unknown date",
        record.region or record.state or DEFAULT_REGION,
    ]
    crop = record.crop or "no crop"
    if record.yield_value is not None:
        crop += f": {_fmt(record.yield_value)}"
        if record.unit:
            crop += f" {record.unit}"
    parts.append(crop)

    inputs = _soil_parts(record.nitrogen, record.phosphorus, record.potassium, record.ph)
    if inputs:
        parts.append(", ".join(inputs))
    return "- " + " | ".join(parts)


def _aggregate_line(records: Sequence[OutcomeRecord]) -> str | None:
    crops = Counter(r.crop for r in records if r.crop)
    if not crops:
        return None
    entries = []
    for crop, count in crops.most_common(DIGEST_TOP_CROPS):
        avg_yield = mean_of(r.yield_value for r in records if r.crop == crop)
        entry = f"{crop} x{count}"
        if avg_yield is not None:
            entry += f" (avg yield {avg_yield:.1f})"
        entries.append(entry)
    return "Earlier: " + ", ".join(entries)


def build_history_digest(records: Sequence[OutcomeRecord], soil: SoilProfile) -> str:
    """
    Render the prompt-ready digest of a farmer's history.

    Args:
        records: Outcome records, newest first
        soil: Averaged soil metrics

    Returns:
        str: Multi-line digest, empty when there are no records
    """
    if not records:
        return ""

    lines = ["Recent predictions:"]
    lines.extend(_record_line(r) for r in records[:DIGEST_RECENT])

    aggregate = _aggregate_line(records[DIGEST_RECENT:])
    if aggregate:
        lines.append(aggregate)

    soil_parts = _soil_parts(
        soil.avg_nitrogen,
        soil.avg_phosphorus,
        soil.avg_potassium,
        soil.avg_ph,
        soil.avg_rainfall,
        soil.avg_temperature,
        soil.avg_humidity,
    )
    if soil_parts:
        lines.append("Soil averages: " + ", ".join(soil_parts))
    return "\n".join(lines)


def format_profile_sentence(profile: FarmerProfile) -> str:
    """
    One-sentence farmer summary for prompt injection.

    Args:
        profile: Farmer profile

    Returns:
        str: Sentence describing region, history size, season and recent crops
    """
    if not profile.has_history:
        return (
            f"This farmer is new in {profile.region} and has no prediction history yet; "
            "give general agricultural advice."
        )

    sentence = (
        f"Farmer located in {profile.region} with {profile.total_predictions} "
        f"past prediction{'s' if profile.total_predictions != 1 else ''}"
    )
    if profile.preferred_season:
        sentence += f", usually planting in {profile.preferred_season}"
    crops = []
    for outcome in profile.crop_history:
        if outcome.crop not in crops:
            crops.append(outcome.crop)
    if crops:
        sentence += f", recent crops: {', '.join(crops[:DIGEST_RECENT])}"
    return sentence + "."


class ContextService:
    """
    Farmer profile aggregator.

    Cache rows fresher than the configured window are served as is.
    Rebuilt profiles are written back through a detached task that opens
    its own database session; drain() awaits outstanding writes.
    """

    _pending: set[asyncio.Task] = set()

    def __init__(
        self,
        db: AsyncSession,
        session_factory: async_sessionmaker[AsyncSession],
        settings: ChatbotSettings | None = None,
        clock: Clock = utc_now,
    ) -> None:
        """
        Initialize context service.

        Args:
            db: Request-scoped session used for reads
            session_factory: Factory for the detached cache write
            settings: Pipeline settings (freshness window, record limits)
            clock: Time source
        """
        self.db = db
        self.session_factory = session_factory
        self.settings = settings or ChatbotSettings()
        self.clock = clock

    async def build_profile(self, user_id: int) -> FarmerProfile:
        """
        Return the farmer profile for a user.

        Never raises for history-store failures; those degrade to the
        empty profile.

        Args:
            user_id: Farmer user id

        Returns:
            FarmerProfile: Cached (cached=True) or rebuilt profile
        """
        now = self.clock()
        try:
            cached = await profile_cache_crud.get_by_user(self.db, user_id)
            if cached is not None and self._is_fresh(cached, now):
                logger.debug(f"{__name__}:build_profile - Cache hit for user {user_id}")
                return self._from_cache(cached)

            records = await self._lookup_history(user_id, now)
        except SQLAlchemyError as e:
            log_exception_with_context(
                logger,
                f"{__name__}:build_profile - History store failed, using empty profile",
                e,
                user_id=user_id,
            )
            await self.db.rollback()
            return FarmerProfile.empty(user_id)

        if records is NO_HISTORY:
            logger.info(f"{__name__}:build_profile - No history for user {user_id}")
            return FarmerProfile.empty(user_id)

        profile = self.aggregate(user_id, records, now)
        self._schedule_cache_write(profile, cached)
        return profile

    def format_profile_sentence(self, profile: FarmerProfile) -> str:
        """See module-level format_profile_sentence."""
        return format_profile_sentence(profile)

    def _is_fresh(self, row: UserContextCacheModel, now: datetime) -> bool:
        window = timedelta(hours=self.settings.context_cache_ttl_hours)
        return now - as_utc(row.last_updated) < window

    def _from_cache(self, row: UserContextCacheModel) -> FarmerProfile:
        return FarmerProfile(
            user_id=row.user_id,
            soil_profile=SoilProfile.model_validate(row.avg_soil_metrics or {}),
            crop_history=[CropOutcome.model_validate(c) for c in row.recent_crops or []],
            region=row.preferred_region or self.settings.default_region,
            preferred_season=row.preferred_season,
            preferred_language=row.preferred_language,
            uses_voice=row.uses_voice,
            total_predictions=row.total_predictions,
            history_digest=row.history_digest or "",
            cached=True,
            last_updated=as_utc(row.last_updated),
        )

    async def _lookup_history(self, user_id: int, now: datetime) -> HistoryLookup:
        records = await self._primary_records(user_id)
        if records is NO_HISTORY:
            records = await self._legacy_records(user_id, now)
        return records

    async def _primary_records(self, user_id: int) -> HistoryLookup:
        rows = await prediction_crud.list_recent(
            self.db, user_id, limit=self.settings.profile_record_limit
        )
        return [record_from_prediction(row) for row in rows] or NO_HISTORY

    async def _legacy_records(self, user_id: int, now: datetime) -> HistoryLookup:
        since = now - timedelta(days=30 * self.settings.legacy_lookback_months)
        pairs = await prediction_crud.list_legacy(
            self.db, user_id, since=since, limit=self.settings.profile_record_limit
        )
        return [record_from_legacy(inputs, output) for inputs, output in pairs] or NO_HISTORY

    def aggregate(
        self,
        user_id: int,
        records: Sequence[OutcomeRecord],
        now: datetime,
    ) -> FarmerProfile:
        """
        Fold outcome records (newest first) into a profile.

        Args:
            user_id: Farmer user id
            records: Non-empty records, newest first
            now: Build timestamp

        Returns:
            FarmerProfile with cached=False
        """
        soil = SoilProfile(
            **{f"avg_{metric}": mean_of(getattr(r, metric) for r in records) for metric in SOIL_METRICS}
        )
        crop_history = [
            CropOutcome(
                crop=r.crop,
                yield_value=r.yield_value,
                unit=r.unit,
                revenue=r.revenue,
                currency=r.currency,
                region=r.region,
                date=r.date,
            )
            for r in records
            if r.crop
        ]
        return FarmerProfile(
            user_id=user_id,
            soil_profile=soil,
            crop_history=crop_history,
            region=mode_of(r.state for r in records) or self.settings.default_region,
            preferred_season=mode_of(r.season for r in records),
            total_predictions=len(records),
            history_digest=build_history_digest(records, soil),
            cached=False,
            last_updated=now,
        )

    def _schedule_cache_write(
        self,
        profile: FarmerProfile,
        previous: UserContextCacheModel | None,
    ) -> None:
        # Language and voice preferences are not derived from history; carry them over
        if previous is not None:
            profile = profile.model_copy(update={
                "preferred_language": previous.preferred_language,
                "uses_voice": previous.uses_voice,
            })
        task = asyncio.create_task(self._write_cache(profile))
        ContextService._pending.add(task)
        task.add_done_callback(ContextService._pending.discard)

    async def _write_cache(self, profile: FarmerProfile) -> None:
        try:
            async with self.session_factory() as session:
                await profile_cache_crud.upsert(
                    session,
                    profile.user_id,
                    recent_crops=[
                        c.model_dump(mode="json", by_alias=True) for c in profile.crop_history
                    ],
                    avg_soil_metrics=profile.soil_profile.model_dump(mode="json"),
                    preferred_region=profile.region,
                    preferred_season=profile.preferred_season,
                    preferred_language=profile.preferred_language,
                    uses_voice=profile.uses_voice,
                    total_predictions=profile.total_predictions,
                    history_digest=profile.history_digest,
                    last_updated=profile.last_updated or self.clock(),
                )
                await session.commit()
            logger.debug(f"{__name__}:_write_cache - Cached profile for user {profile.user_id}")
        except Exception as e:
            log_exception_with_context(
                logger,
                f"{__name__}:_write_cache - Profile cache write failed",
                e,
                user_id=profile.user_id,
            )

    @classmethod
    async def drain(cls) -> None:
        """Wait for every outstanding profile cache write."""
        pending = list(cls._pending)
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
