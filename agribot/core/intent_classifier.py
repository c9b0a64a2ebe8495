"""
Rule-based intent classification and search decision.

Each intent owns an ordered keyword list covering French, Arabic, English
and Darja transliterations. Classification evaluates every matcher and
picks by occurrence count, falling back to declaration order.

Dependencies: re (stdlib), agribot.models.profile
System role: Decides what the user is asking and whether to search the web
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from agribot.models.profile import FarmerProfile


class Intent(str, Enum):
    """Coarse category of a farmer's message."""

    PRICE_INQUIRY = "price_inquiry"
    WEATHER_QUERY = "weather_query"
    CROP_ADVICE = "crop_advice"
    DISEASE_HELP = "disease_help"
    YIELD_PREDICTION = "yield_prediction"
    FERTILIZER_ADVICE = "fertilizer_advice"
    IRRIGATION = "irrigation"
    GENERAL_INQUIRY = "general_inquiry"


ARABIC_CHARS = re.compile(r"[\u0600-\u06FF]")

# Conjunction then preposition or article, e.g. "و" + "ال" in "والمطر"
ARABIC_PROCLITICS = r"(?:[وف])?(?:ال|بال|لل|ب|ل)?"


def _word_pattern(keywords: tuple[str, ...]) -> re.Pattern[str]:
    """
    Compile keywords into one whole-word alternation.

    Arabic keywords also match with attached proclitics ("السعر",
    "بالمطر"), which a plain word boundary would reject.
    """
    latin = [k for k in keywords if not ARABIC_CHARS.search(k)]
    arabic = [k for k in keywords if ARABIC_CHARS.search(k)]
    alternatives = []
    if latin:
        latin_alternation = "|".join(latin)
        alternatives.append(rf"\b(?:{latin_alternation})\b")
    if arabic:
        arabic_alternation = "|".join(arabic)
        alternatives.append(rf"(?<!\w){ARABIC_PROCLITICS}(?:{arabic_alternation})(?!\w)")
    return re.compile("|".join(alternatives), re.IGNORECASE)


@dataclass(frozen=True)
class IntentMatcher:
    """Keyword matcher for a single intent."""

    intent: Intent
    keywords: tuple[str, ...]
    pattern: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "pattern", _word_pattern(self.keywords))

    def count(self, text: str) -> int:
        """Number of keyword occurrences in already-lowercased text."""
        return len(self.pattern.findall(text))


# Declaration order is the tie-break order.
INTENT_MATCHERS: tuple[IntentMatcher, ...] = (
    IntentMatcher(
        Intent.PRICE_INQUIRY,
        (r"prix", r"prices?", r"combien", r"tarifs?", r"costs?",
         r"سعر", r"تمن", r"ثمن", r"شحال", r"chhal", r"ch7al", r"souma"),
    ),
    IntentMatcher(
        Intent.WEATHER_QUERY,
        (r"météo", r"meteo", r"weather", r"temps", r"pluie", r"rain", r"forecast",
         r"prévisions?", r"مطر", r"طقس", r"الجو", r"chta", r"ljaw"),
    ),
    IntentMatcher(
        Intent.CROP_ADVICE,
        (r"planter", r"plant(?:s|ing)?", r"cultiver", r"semer", r"grow(?:ing)?",
         r"زراعة", r"محصول", r"ندير", r"نزرع", r"nzra3", r"nezra3"),
    ),
    IntentMatcher(
        Intent.DISEASE_HELP,
        (r"maladies?", r"diseases?", r"parasites?", r"pests?", r"ravageurs?",
         r"مرض", r"آفة", r"حشرة", r"mard"),
    ),
    IntentMatcher(
        Intent.YIELD_PREDICTION,
        (r"rendement", r"yields?", r"production", r"récolte", r"harvest",
         r"إنتاج", r"محصول", r"ghalla"),
    ),
    IntentMatcher(
        Intent.FERTILIZER_ADVICE,
        (r"engrais", r"fertili[sz]ers?", r"azote", r"nitrogen", r"npk",
         r"سماد", r"smad"),
    ),
    IntentMatcher(
        Intent.IRRIGATION,
        (r"irrigation", r"water(?:ing)?", r"arrosage", r"arroser",
         r"ري", r"ماء", r"sgui"),
    ),
)

SEARCH_REQUIRED_INTENTS = frozenset({
    Intent.PRICE_INQUIRY,
    Intent.WEATHER_QUERY,
    Intent.DISEASE_HELP,
})

SEARCH_OPTIONAL_INTENTS = frozenset({
    Intent.CROP_ADVICE,
    Intent.YIELD_PREDICTION,
    Intent.FERTILIZER_ADVICE,
})

MIN_PREDICTIONS_FOR_LOCAL_ADVICE = 3

_MATCHERS_BY_INTENT = {matcher.intent: matcher for matcher in INTENT_MATCHERS}

# Query augmentation families, shared with search cache TTL selection
PRICE_FAMILY = _MATCHERS_BY_INTENT[Intent.PRICE_INQUIRY].pattern
WEATHER_FAMILY = _MATCHERS_BY_INTENT[Intent.WEATHER_QUERY].pattern
PLANTING_FAMILY = _MATCHERS_BY_INTENT[Intent.CROP_ADVICE].pattern
MARKET_FAMILY = _word_pattern(
    _MATCHERS_BY_INTENT[Intent.PRICE_INQUIRY].keywords + (r"markets?", r"marchés?", r"سوق"),
)

ALGERIA_MARKERS = ("algeria", "algérie", "algerie", "الجزائر")
DEFAULT_REGION = "Algeria"


@dataclass(frozen=True)
class IntentResult:
    """Outcome of classify_intent."""

    intent: Intent
    confidence: float


def classify_intent(message_text: Any) -> IntentResult:
    """
    Classify a message into one of the known intents.

    Args:
        message_text: Raw user message

    Returns:
        IntentResult: 1.0 for a single matching intent, 0.7 when several
        intents match (most occurrences wins), 0.5 when nothing matches,
        0.0 for non-text input
    """
    if not isinstance(message_text, str) or not message_text.strip():
        return IntentResult(Intent.GENERAL_INQUIRY, 0.0)

    normalized = message_text.lower()
    scored = [
        (matcher.intent, hits)
        for matcher in INTENT_MATCHERS
        if (hits := matcher.count(normalized)) > 0
    ]

    if not scored:
        return IntentResult(Intent.GENERAL_INQUIRY, 0.5)

    # max() keeps the first maximum, i.e. the first-declared intent on ties
    intent, _ = max(scored, key=lambda item: item[1])
    confidence = 1.0 if len(scored) == 1 else 0.7
    return IntentResult(intent, confidence)


def _total_predictions(profile: FarmerProfile | Mapping[str, Any] | None) -> int:
    if profile is None:
        return 0
    if isinstance(profile, FarmerProfile):
        return profile.total_predictions
    return int(profile.get("total_predictions", profile.get("totalPredictions", 0)) or 0)


def should_search_web(
    intent: Intent | str,
    profile: FarmerProfile | Mapping[str, Any] | None = None,
) -> bool:
    """
    Decide whether the intent warrants an external web search.

    Price, weather and disease always search. Advice-style intents search
    only when the farmer has fewer than three recorded predictions.
    """
    try:
        intent = Intent(intent)
    except ValueError:
        return False

    if intent in SEARCH_REQUIRED_INTENTS:
        return True
    if intent in SEARCH_OPTIONAL_INTENTS:
        return _total_predictions(profile) < MIN_PREDICTIONS_FOR_LOCAL_ADVICE
    return False


def generate_search_query(
    message_text: str,
    profile: FarmerProfile | Mapping[str, Any] | None = None,
) -> str:
    """
    Build a web search query from the farmer's message and profile.

    Adds a regional qualifier, a temporal qualifier for prices/weather
    and the preferred season for planting questions.

    Args:
        message_text: Original user message
        profile: Farmer profile (or mapping with region/preferred_season)

    Returns:
        str: Augmented query
    """
    if isinstance(profile, FarmerProfile):
        region = profile.region or DEFAULT_REGION
        season = profile.preferred_season or ""
    else:
        profile = profile or {}
        region = profile.get("region") or profile.get("userRegion") or DEFAULT_REGION
        season = profile.get("preferred_season") or ""

    query = message_text.strip()
    lowered = query.lower()

    if not any(marker in lowered for marker in ALGERIA_MARKERS):
        if region.lower() == DEFAULT_REGION.lower():
            query += f" {DEFAULT_REGION}"
        else:
            query += f" {region} {DEFAULT_REGION}"

    if PRICE_FAMILY.search(message_text):
        query += " current market price today"
    elif WEATHER_FAMILY.search(message_text):
        query += " forecast"

    if season and PLANTING_FAMILY.search(message_text):
        query += f" {season} season"

    return query.strip()
