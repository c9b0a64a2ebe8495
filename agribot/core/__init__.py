"""
Core business logic module.

Contains the exception hierarchy and the pure conversational rules:
intent classification, language detection, history windowing and
prompt composition.
"""

from agribot.core.exceptions import (
    AgriBotException,
    ExternalServiceError,
    InvalidSessionStateError,
    LLMProviderError,
    MessageNotFoundError,
    NotFoundError,
    SearchProviderError,
    SessionNotFoundError,
    SummarizationError,
    ValidationError,
)
from agribot.core.intent_classifier import (
    Intent,
    IntentResult,
    classify_intent,
    generate_search_query,
    should_search_web,
)

__all__ = [
    # Exceptions
    "AgriBotException",
    "ValidationError",
    "NotFoundError",
    "SessionNotFoundError",
    "MessageNotFoundError",
    "InvalidSessionStateError",
    "ExternalServiceError",
    "SearchProviderError",
    "LLMProviderError",
    "SummarizationError",
    # Intent rules
    "Intent",
    "IntentResult",
    "classify_intent",
    "should_search_web",
    "generate_search_query",
]
