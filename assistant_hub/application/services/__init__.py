"""Service orchestrators."""

from .assistant_service import AssistantService
from .chat_service import ChatService
from .document_service import DocumentService
from .session_service import SessionService
from .user_service import AccessService, UserService

__all__ = [
    "AccessService",
    "AssistantService",
    "ChatService",
    "DocumentService",
    "SessionService",
    "UserService",
]
