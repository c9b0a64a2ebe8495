"""
Unified application settings.

Aggregates the database, LLM, search and chatbot sections into one
Settings object. Sections are built when Settings is instantiated, so
environment changes made before get_settings() is first called apply.

Dependencies: pydantic, all config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from agribot.configs.base import BaseSettings
from agribot.configs.chatbot import ChatbotSettings
from agribot.configs.database import DatabaseSettings
from agribot.configs.llm import LLMSettings
from agribot.configs.search import SearchSettings


class Settings(BaseSettings):
    """AgriBot settings: deployment-wide values plus one object per section."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    chatbot: ChatbotSettings = Field(default_factory=ChatbotSettings)


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns:
        Settings: Application settings, read once per process

    Usage:
        from agribot.configs import get_settings
        settings = get_settings()
    """
    return Settings()
