"""
Pydantic domain models and API schemas.

Exports:
  - FarmerProfile, SoilProfile, CropOutcome: Derived farmer context
  - SearchResult, SearchResponse: Web search payloads
  - ChatbotRequest, ChatbotReply, MessageOptions: Chatbot contracts
  - SessionSummary, SessionHistory, MessagePage: Listing contracts

Dependencies: pydantic
System role: Typed contracts shared by services and routers
"""

from agribot.models.common import DeleteResponse, ErrorResponse
from agribot.models.profile import CropOutcome, FarmerProfile, SoilProfile
from agribot.models.search import SearchResponse, SearchResult
from agribot.models.chat import (
    ChatbotReply,
    ChatbotRequest,
    MessageOptions,
    ReplyMetadata,
)
from agribot.models.session import (
    CloseSessionRequest,
    HistoryMessage,
    MessagePage,
    PaginationInfo,
    SessionHistory,
    SessionListResponse,
    SessionSummary,
)

__all__ = [
    "DeleteResponse",
    "ErrorResponse",
    "CropOutcome",
    "FarmerProfile",
    "SoilProfile",
    "SearchResponse",
    "SearchResult",
    "ChatbotReply",
    "ChatbotRequest",
    "MessageOptions",
    "ReplyMetadata",
    "CloseSessionRequest",
    "HistoryMessage",
    "MessagePage",
    "PaginationInfo",
    "SessionHistory",
    "SessionListResponse",
    "SessionSummary",
]
