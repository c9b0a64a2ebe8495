"""
Application services.

Use case orchestrators that coordinate core rules and boundary adapters.
"""

from agribot.application.services.chat_service import ChatService
from agribot.application.services.context_service import ContextService
from agribot.application.services.search_service import SearchService
from agribot.application.services.session_service import SessionService

__all__ = [
    "ChatService",
    "ContextService",
    "SearchService",
    "SessionService",
]
