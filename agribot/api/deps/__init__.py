"""API-specific dependencies."""

from .dependencies import (
    ServiceCache,
    get_chat_service,
    get_search_service,
    get_service_cache,
    get_session_service,
    get_settings_dependency,
)

__all__ = [
    "ServiceCache",
    "get_chat_service",
    "get_search_service",
    "get_service_cache",
    "get_session_service",
    "get_settings_dependency",
]
