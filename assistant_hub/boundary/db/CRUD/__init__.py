"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from assistant_hub.boundary.db.CRUD import session_crud, message_crud

    session = await session_crud.get_by_id(db, session_id)
    history = await message_crud.list_by_session(db, session_id)
"""

from assistant_hub.boundary.db.CRUD.base_crud import BaseCRUD
from assistant_hub.boundary.db.CRUD.user_crud import UserCRUD, user_crud
from assistant_hub.boundary.db.CRUD.assistant_crud import AssistantCRUD, assistant_crud
from assistant_hub.boundary.db.CRUD.document_crud import DocumentCRUD, document_crud
from assistant_hub.boundary.db.CRUD.access_grant_crud import (
    AccessGrantCRUD,
    access_grant_crud,
)
from assistant_hub.boundary.db.CRUD.session_crud import SessionCRUD, session_crud
from assistant_hub.boundary.db.CRUD.message_crud import MessageCRUD, message_crud

__all__ = [
    "BaseCRUD",
    "UserCRUD",
    "user_crud",
    "AssistantCRUD",
    "assistant_crud",
    "DocumentCRUD",
    "document_crud",
    "AccessGrantCRUD",
    "access_grant_crud",
    "SessionCRUD",
    "session_crud",
    "MessageCRUD",
    "message_crud",
]
