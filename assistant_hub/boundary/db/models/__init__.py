"""
Database models package.

Exports:
  - UserModel, UserRole: Principal ORM model and role enum
  - AssistantModel: Assistant ORM model owning a knowledge base handle
  - DocumentModel, DocumentStatus: Knowledge base document and indexing status
  - AccessGrantModel: (user, assistant) conversation grant
  - SessionModel: Conversation session with continuation token
  - MessageModel, MessageRole: Session message and role enum

Dependencies: sqlalchemy, assistant_hub.boundary.db.base
System role: Database model definitions for domain entities
"""

from assistant_hub.boundary.db.models.user_model import UserModel, UserRole
from assistant_hub.boundary.db.models.assistant_model import AssistantModel
from assistant_hub.boundary.db.models.document_model import DocumentModel, DocumentStatus
from assistant_hub.boundary.db.models.access_grant_model import AccessGrantModel
from assistant_hub.boundary.db.models.session_model import SessionModel
from assistant_hub.boundary.db.models.message_model import MessageModel, MessageRole

__all__ = [
    "UserModel",
    "UserRole",
    "AssistantModel",
    "DocumentModel",
    "DocumentStatus",
    "AccessGrantModel",
    "SessionModel",
    "MessageModel",
    "MessageRole",
]
