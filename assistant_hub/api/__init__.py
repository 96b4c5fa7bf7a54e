"""
API routes module.

FastAPI routers for all HTTP endpoints.
"""

from fastapi import APIRouter

from .routers import (
    assistant_files_router,
    assistants_router,
    chat_router,
    health_router,
    sessions_router,
    users_router,
)

api_router = APIRouter()

# Include all routers
api_router.include_router(health_router)
api_router.include_router(assistants_router)
api_router.include_router(assistant_files_router)
api_router.include_router(users_router)
api_router.include_router(sessions_router)
api_router.include_router(chat_router)

__all__ = ["api_router"]
