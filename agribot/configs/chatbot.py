"""
Chatbot pipeline configuration settings.

Freshness window, history budget and search decision thresholds.

Dependencies: pydantic, pydantic_settings
System role: Conversational pipeline tuning
"""

from pydantic import Field

from agribot.configs.base import BaseSettings, env_config


class ChatbotSettings(BaseSettings):
    """Conversation pipeline configuration."""

    model_config = env_config("CHATBOT_")

    context_cache_ttl_hours: int = Field(default=24, description="Farmer profile freshness window")
    profile_record_limit: int = Field(default=10, description="Prediction records per rebuild")
    legacy_lookback_months: int = Field(default=12, description="Legacy history look-back")

    history_fetch_limit: int = Field(default=10, description="Prior turns read per message")
    history_token_budget: int = Field(default=6000, description="Estimated token budget for history")
    history_keep_recent: int = Field(default=5, description="Turns kept verbatim when summarizing")

    search_results_in_prompt: int = Field(default=3, description="Search hits injected in the prompt")
    default_region: str = Field(default="Algeria", description="Region for farmers without history")
