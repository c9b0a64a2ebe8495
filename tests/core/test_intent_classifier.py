"""
Test suite for rule-based intent classification and search decisions.

System role: Verification of intent routing rules
"""

import pytest

from agribot.core.intent_classifier import (
    Intent,
    classify_intent,
    generate_search_query,
    should_search_web,
)
from agribot.models.profile import FarmerProfile


class TestClassifyIntent:
    """Test suite for classify_intent()."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("Quel est le prix du blé?", Intent.PRICE_INQUIRY),
            ("quel temps fera-t-il demain?", Intent.WEATHER_QUERY),
            ("what is the weather forecast", Intent.WEATHER_QUERY),
            ("شحال سعر البطاطا", Intent.PRICE_INQUIRY),
            ("my tomatoes have a disease", Intent.DISEASE_HELP),
            ("what should I plant this year", Intent.CROP_ADVICE),
            ("which engrais for tomatoes", Intent.FERTILIZER_ADVICE),
            ("irrigation schedule", Intent.IRRIGATION),
        ],
    )
    def test_classify_should_detect_intent(self, text: str, expected: Intent) -> None:
        """Test keywords map to the expected intent."""
        # Act
        result = classify_intent(text)

        # Assert
        assert result.intent == expected

    def test_classify_should_return_full_confidence_for_single_match(self) -> None:
        """Test a single matching intent yields confidence 1.0."""
        result = classify_intent("quel temps fera-t-il?")

        assert result.intent == Intent.WEATHER_QUERY
        assert result.confidence == 1.0

    def test_classify_should_return_general_for_no_match(self) -> None:
        """Test unmatched text yields general_inquiry with confidence 0.5."""
        result = classify_intent("bonjour")

        assert result.intent == Intent.GENERAL_INQUIRY
        assert result.confidence == 0.5

    @pytest.mark.parametrize("text", ["", "   ", None, 42])
    def test_classify_should_return_zero_confidence_for_invalid_input(self, text) -> None:
        """Test blank or non-string input yields confidence 0.0."""
        result = classify_intent(text)

        assert result.intent == Intent.GENERAL_INQUIRY
        assert result.confidence == 0.0

    def test_classify_should_pick_most_occurrences_when_ambiguous(self) -> None:
        """Test multi-intent text picks the intent with most hits at 0.7."""
        # Arrange: one price keyword, two weather keywords
        text = "prix et météo, la pluie arrive"

        # Act
        result = classify_intent(text)

        # Assert
        assert result.intent == Intent.WEATHER_QUERY
        assert result.confidence == 0.7

    def test_classify_should_break_ties_by_declaration_order(self) -> None:
        """Test equal hit counts resolve to the first declared intent."""
        result = classify_intent("price and weather")

        assert result.intent == Intent.PRICE_INQUIRY
        assert result.confidence == 0.7


    @pytest.mark.parametrize(
        "text,expected",
        [
            ("كيف الطقس اليوم", Intent.WEATHER_QUERY),
            ("متى ينزل المطر", Intent.WEATHER_QUERY),
            ("ما هو السعر", Intent.PRICE_INQUIRY),
            ("وبالسعر هذا نبيع؟", Intent.PRICE_INQUIRY),
            ("وقت الري", Intent.IRRIGATION),
        ],
    )
    def test_classify_should_match_arabic_keywords_with_article(
        self, text: str, expected: Intent
    ) -> None:
        """Arabic keywords match with attached article and prepositions."""
        # Act
        result = classify_intent(text)

        # Assert
        assert result.intent == expected

    def test_classify_should_not_match_keyword_inside_longer_word(self) -> None:
        """Test a keyword embedded in a longer word does not match."""
        result = classify_intent("que planter au printemps")

        assert result.intent == Intent.CROP_ADVICE
        assert result.confidence == 1.0


class TestShouldSearchWeb:
    """Test suite for should_search_web()."""

    @pytest.mark.parametrize(
        "intent",
        [Intent.PRICE_INQUIRY, Intent.WEATHER_QUERY, Intent.DISEASE_HELP],
    )
    def test_should_always_search_for_time_sensitive_intents(self, intent: Intent) -> None:
        """Test price/weather/disease search even with rich history."""
        profile = FarmerProfile(user_id=1, total_predictions=50)

        assert should_search_web(intent, profile) is True

    @pytest.mark.parametrize(
        "intent",
        [Intent.CROP_ADVICE, Intent.YIELD_PREDICTION, Intent.FERTILIZER_ADVICE],
    )
    def test_should_search_advice_only_with_thin_history(self, intent: Intent) -> None:
        """Test advice intents search below three predictions only."""
        assert should_search_web(intent, FarmerProfile(user_id=1, total_predictions=2)) is True
        assert should_search_web(intent, FarmerProfile(user_id=1, total_predictions=3)) is False

    @pytest.mark.parametrize("intent", [Intent.GENERAL_INQUIRY, Intent.IRRIGATION])
    def test_should_never_search_for_other_intents(self, intent: Intent) -> None:
        """Test general and irrigation intents never search."""
        assert should_search_web(intent, FarmerProfile(user_id=1)) is False

    def test_should_accept_mapping_profile(self) -> None:
        """Test legacy mapping profiles with camelCase counters are accepted."""
        assert should_search_web("crop_advice", {"totalPredictions": 5}) is False
        assert should_search_web("crop_advice", {"total_predictions": 0}) is True

    def test_should_return_false_for_unknown_intent(self) -> None:
        """Test unknown intent strings never search."""
        assert should_search_web("astrology", None) is False


class TestGenerateSearchQuery:
    """Test suite for generate_search_query()."""

    def test_should_append_region_and_country(self) -> None:
        """Test non-default region is added with the country."""
        profile = FarmerProfile(user_id=1, region="Blida")

        query = generate_search_query("prix tomate", profile)

        assert query == "prix tomate Blida Algeria current market price today"

    def test_should_append_country_once_for_default_region(self) -> None:
        """Test default region adds Algeria a single time."""
        query = generate_search_query("météo demain", FarmerProfile(user_id=1))

        assert query == "météo demain Algeria forecast"

    def test_should_not_repeat_country_when_mentioned(self) -> None:
        """Test messages mentioning Algeria keep no regional suffix."""
        query = generate_search_query("weather in Algérie", FarmerProfile(user_id=1, region="Oran"))

        assert query == "weather in Algérie forecast"

    def test_should_append_season_for_planting_questions(self) -> None:
        """Test planting questions get the preferred season."""
        profile = FarmerProfile(user_id=1, preferred_season="rabi")

        query = generate_search_query("when to plant wheat", profile)

        assert query == "when to plant wheat Algeria rabi season"

    def test_should_skip_season_when_unknown(self) -> None:
        """Test planting questions without a season get no season suffix."""
        query = generate_search_query("when to plant wheat", FarmerProfile(user_id=1))

        assert query.endswith("Algeria")


    def test_should_not_treat_spring_as_weather(self) -> None:
        """A planting question about spring gets the season, not a forecast."""
        # Arrange
        profile = FarmerProfile(user_id=1, preferred_season="winter")

        # Act
        query = generate_search_query("que planter au printemps", profile)

        # Assert
        assert query == "que planter au printemps Algeria winter season"
