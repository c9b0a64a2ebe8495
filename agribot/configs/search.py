"""
Web search configuration settings.

Tavily credentials, domain allow-list and cache TTLs per query category.

Dependencies: pydantic, pydantic_settings
System role: Search provider and search cache configuration
"""

from pydantic import Field

from agribot.configs.base import BaseSettings, env_config


class SearchSettings(BaseSettings):
    """Tavily search and cache configuration."""

    model_config = env_config("TAVILY_")

    api_key: str | None = Field(default=None, description="Tavily API key; mock results when unset")
    base_url: str = Field(default="https://api.tavily.com/search", description="Search endpoint")
    search_depth: str = Field(default="basic", description="Tavily search depth")
    topic: str = Field(default="general", description="Tavily topic")
    max_results: int = Field(default=5, description="Results per query")
    include_domains: list[str] = Field(
        default_factory=lambda: [
            "agriculture.dz",
            "madr.gov.dz",
            "fao.org",
            "weather.com",
            "accuweather.com",
        ],
        description="Domain allow-list",
    )
    timeout_seconds: float = Field(default=10.0, description="HTTP timeout")
    max_attempts: int = Field(default=3, ge=1, description="Attempts per query on transport errors")

    weather_ttl_hours: int = Field(default=6, description="TTL for weather queries")
    price_ttl_hours: int = Field(default=12, description="TTL for price queries")
    default_ttl_days: int = Field(default=7, description="TTL for everything else")
    cache_sweep_interval_seconds: int = Field(
        default=3600,
        description="Period of the expired-entry sweep (0 disables it)",
    )
