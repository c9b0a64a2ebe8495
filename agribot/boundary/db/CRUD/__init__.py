"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from agribot.boundary.db.CRUD import session_crud, message_crud

    # Use singleton instances
    session = await session_crud.get_owned(db, session_id, user_id)

    # Or instantiate classes directly for custom behavior
    from agribot.boundary.db.CRUD import SessionCRUD
    custom_crud = SessionCRUD()
"""

from agribot.boundary.db.CRUD.base_crud import BaseCRUD
from agribot.boundary.db.CRUD.session_crud import SessionCRUD, session_crud
from agribot.boundary.db.CRUD.message_crud import MessageCRUD, message_crud
from agribot.boundary.db.CRUD.search_cache_crud import SearchCacheCRUD, search_cache_crud
from agribot.boundary.db.CRUD.profile_cache_crud import (
    UserContextCacheCRUD,
    profile_cache_crud,
)
from agribot.boundary.db.CRUD.prediction_crud import PredictionCRUD, prediction_crud

__all__ = [
    "BaseCRUD",
    "SessionCRUD",
    "session_crud",
    "MessageCRUD",
    "message_crud",
    "SearchCacheCRUD",
    "search_cache_crud",
    "UserContextCacheCRUD",
    "profile_cache_crud",
    "PredictionCRUD",
    "prediction_crud",
]
