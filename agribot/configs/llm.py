"""
Language model configuration settings.

Model identifiers and generation parameters for the assistant and the
conversation summarizer.

Dependencies: pydantic, pydantic_settings
System role: LLM provider configuration
"""

from pydantic import Field

from agribot.configs.base import BaseSettings, env_config


class LLMSettings(BaseSettings):
    """Gemini chat model configuration."""

    model_config = env_config("LLM_")

    model_id: str = Field(default="gemini-2.0-flash", description="Chat model identifier")
    temperature: float = Field(default=0.7, description="Sampling temperature")
    top_p: float = Field(default=0.95, description="Nucleus sampling")
    max_output_tokens: int = Field(default=500, description="Response length cap")
    google_api_key: str | None = Field(
        default=None,
        description="Google API key; falls back to GOOGLE_API_KEY when unset",
    )

    summary_model_id: str = Field(default="gemini-2.0-flash", description="Summarizer model")
    summary_max_words: int = Field(default=130, description="Target summary length")
