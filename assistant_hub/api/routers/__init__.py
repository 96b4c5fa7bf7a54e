"""API routers."""

from .assistant_files import router as assistant_files_router
from .assistants import router as assistants_router
from .chat import router as chat_router
from .health import router as health_router
from .sessions import router as sessions_router
from .users import router as users_router

__all__ = [
    "assistant_files_router",
    "assistants_router",
    "chat_router",
    "health_router",
    "sessions_router",
    "users_router",
]
