"""API-specific dependencies."""

from .dependencies import (
    ServiceContainer,
    get_access_service,
    get_assistant_service,
    get_chat_service,
    get_container,
    get_current_user,
    get_db,
    get_document_service,
    get_session_service,
    get_user_service,
    require_admin,
)

__all__ = [
    "ServiceContainer",
    "get_access_service",
    "get_assistant_service",
    "get_chat_service",
    "get_container",
    "get_current_user",
    "get_db",
    "get_document_service",
    "get_session_service",
    "get_user_service",
    "require_admin",
]
