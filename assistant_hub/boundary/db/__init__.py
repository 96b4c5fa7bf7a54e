"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - build_async_engine(), get_async_engine(), get_async_session_factory(),
    Async connection management
  - UserModel, AssistantModel, DocumentModel, AccessGrantModel, SessionModel, MessageModel:
    Domain entities
  - UserRole, DocumentStatus, MessageRole: Enum types
  - user_crud, assistant_crud, document_crud, access_grant_crud, session_crud, message_crud:
    CRUD operation singletons

Dependencies: sqlalchemy, assistant_hub.configs
System role: Repository for assistants, their documents, access grants,
sessions and message history.
"""

from assistant_hub.boundary.db.base import Base, TimestampMixin, UUIDMixin, utcnow
from assistant_hub.boundary.db.connection import (
    build_async_engine,
    get_async_engine,
    get_async_session_factory,
    make_session_factory,
)
from assistant_hub.boundary.db.models import (
    AccessGrantModel,
    AssistantModel,
    DocumentModel,
    DocumentStatus,
    MessageModel,
    MessageRole,
    SessionModel,
    UserModel,
    UserRole,
)
from assistant_hub.boundary.db.CRUD import (
    BaseCRUD,
    access_grant_crud,
    assistant_crud,
    document_crud,
    message_crud,
    session_crud,
    user_crud,
)

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "utcnow",
    # Connection
    "build_async_engine",
    "get_async_engine",
    "get_async_session_factory",
    "make_session_factory",
    # Models
    "UserModel",
    "UserRole",
    "AssistantModel",
    "DocumentModel",
    "DocumentStatus",
    "AccessGrantModel",
    "SessionModel",
    "MessageModel",
    "MessageRole",
    # CRUD
    "BaseCRUD",
    "user_crud",
    "assistant_crud",
    "document_crud",
    "access_grant_crud",
    "session_crud",
    "message_crud",
]
