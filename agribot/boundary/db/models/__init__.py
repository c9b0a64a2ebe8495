"""
Database models package.

Exports:
  - SessionModel, SessionStatus: Chat session ORM model and status enum
  - ChatMessageModel, SenderType: Chat turn ORM model and author enum
  - SearchCacheModel: Web search cache entries
  - UserContextCacheModel: Farmer profile cache
  - PredictionModel, PredictHistoryInputModel, PredictHistoryOutputModel:
    Prediction history (read-only)

Dependencies: sqlalchemy, agribot.boundary.db.base
System role: Database model definitions for domain entities
"""

from agribot.boundary.db.models.session_model import SessionModel, SessionStatus
from agribot.boundary.db.models.message_model import ChatMessageModel, SenderType
from agribot.boundary.db.models.search_cache_model import SearchCacheModel
from agribot.boundary.db.models.profile_cache_model import UserContextCacheModel
from agribot.boundary.db.models.prediction_model import (
    PredictHistoryInputModel,
    PredictHistoryOutputModel,
    PredictionModel,
)

__all__ = [
    "SessionModel",
    "SessionStatus",
    "ChatMessageModel",
    "SenderType",
    "SearchCacheModel",
    "UserContextCacheModel",
    "PredictionModel",
    "PredictHistoryInputModel",
    "PredictHistoryOutputModel",
]
