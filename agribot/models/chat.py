"""
Chatbot domain models and schemas.

Request/response schemas for the message pipeline.

Dependencies: pydantic
System role: Chatbot API contracts
"""

from uuid import UUID

from pydantic import BaseModel, Field, computed_field

from agribot.models.search import SearchResult


class MessageOptions(BaseModel):
    """Per-message options accompanying the text."""

    session_id: UUID | None = Field(default=None, description="Session to continue")
    is_voice: bool = False
    audio_url: str | None = Field(default=None, description="Reference to the recorded audio")
    device_type: str = "web"
    user_location: dict | None = None
    language: str | None = Field(default=None, description="Declared language; detected when absent")


class ChatbotRequest(MessageOptions):
    """Request schema for POST /chatbot/message."""

    # Presence and blankness are checked by the chat service (HTTP 400)
    user_id: int | None = Field(default=None, description="Owning user")
    message: str | None = Field(default=None, description="Farmer question")

    def to_options(self) -> MessageOptions:
        """Strip user_id/message, keeping only the options bag."""
        return MessageOptions(**self.model_dump(exclude={"user_id", "message"}))


class ReplyMetadata(BaseModel):
    """Timing and usage for one exchange."""

    latency_ms: int = 0
    ai_latency_ms: int = 0
    tokens_used: int = 0


class ChatbotReply(BaseModel):
    """Result envelope of handle_message."""

    success: bool
    session_id: UUID | None = None
    response_text: str
    intent: str | None = None
    confidence: float | None = None
    sources: list[SearchResult] = Field(default_factory=list)
    search_performed: bool = False
    history_used: bool = False
    language: str | None = None
    user_message_id: int | None = None
    bot_message_id: int | None = None
    error: str | None = None
    metadata: ReplyMetadata = Field(default_factory=ReplyMetadata)

    @computed_field
    @property
    def user_context_used(self) -> bool:
        """Alias of history_used."""
        return self.history_used
