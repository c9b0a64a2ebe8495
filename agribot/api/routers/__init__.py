"""API routers."""

from .chatbot import router as chatbot_router
from .health import router as health_router

__all__ = [
    "chatbot_router",
    "health_router",
]
