"""
Session API endpoints.

Routes:
- GET /sessions - List the caller's sessions (filters: assistant_id, is_test)
- POST /sessions - Create session
- GET /sessions/{id} - Get session
- PATCH /sessions/{id} - Rename session
- DELETE /sessions/{id} - Delete session and its messages
- GET /sessions/{id}/messages - Message history
- DELETE /sessions/{id}/messages - Clear message history
- GET /sessions/{id}/export?format= - Export as json, markdown or text

Dependencies: assistant_hub.application.services.session_service, assistant_hub.models
System role: Session management HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response

from assistant_hub.api.deps import get_current_user, get_session_service
from assistant_hub.application.services.session_service import SessionService
from assistant_hub.boundary.db.models.user_model import UserModel
from assistant_hub.core.exporter import FILE_EXTENSIONS, MEDIA_TYPES
from assistant_hub.models.chat import (
    ChatHistoryResponse,
    ChatMessageResponse,
    ClearHistoryResponse,
)
from assistant_hub.models.session import (
    CreateSessionRequest,
    SessionListResponse,
    SessionResponse,
    UpdateSessionRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])


@router.post("", response_model=SessionResponse, status_code=201)
async def create_session(
    request: CreateSessionRequest,
    user: UserModel = Depends(get_current_user),
    session_service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    """
    Create a new session bound to an assistant.

    Args:
        request: Assistant, optional title and test flag
        user: Authenticated user
        session_service: Injected SessionService

    Returns:
        SessionResponse: Created session
    """
    session = await session_service.create_session(
        user,
        request.assistant_id,
        title=request.title,
        is_test=request.is_test,
    )
    return SessionResponse.from_model(session)


@router.get("", response_model=SessionListResponse)
async def list_sessions(
    assistant_id: UUID | None = Query(default=None),
    is_test: bool | None = Query(default=None),
    user: UserModel = Depends(get_current_user),
    session_service: SessionService = Depends(get_session_service),
) -> SessionListResponse:
    """List the caller's sessions, most recently updated first."""
    sessions = await session_service.list_sessions(user, assistant_id=assistant_id, is_test=is_test)
    items = [SessionResponse.from_model(s) for s in sessions]
    return SessionListResponse(sessions=items, total=len(items))


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: UUID,
    user: UserModel = Depends(get_current_user),
    session_service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    """Get a session by ID."""
    session = await session_service.get_session(user, session_id)
    return SessionResponse.from_model(session)


@router.patch("/{session_id}", response_model=SessionResponse)
async def rename_session(
    session_id: UUID,
    request: UpdateSessionRequest,
    user: UserModel = Depends(get_current_user),
    session_service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    """Rename a session."""
    session = await session_service.rename_session(user, session_id, request.title)
    return SessionResponse.from_model(session)


@router.delete("/{session_id}", status_code=204)
async def delete_session(
    session_id: UUID,
    user: UserModel = Depends(get_current_user),
    session_service: SessionService = Depends(get_session_service),
) -> None:
    """Delete a session and its messages."""
    await session_service.delete_session(user, session_id)


@router.get("/{session_id}/messages", response_model=ChatHistoryResponse)
async def get_messages(
    session_id: UUID,
    user: UserModel = Depends(get_current_user),
    session_service: SessionService = Depends(get_session_service),
) -> ChatHistoryResponse:
    """Get a session's messages in creation order."""
    messages = await session_service.get_messages(user, session_id)
    items = [ChatMessageResponse.model_validate(m) for m in messages]
    return ChatHistoryResponse(messages=items, total=len(items))


@router.delete("/{session_id}/messages", response_model=ClearHistoryResponse)
async def clear_messages(
    session_id: UUID,
    user: UserModel = Depends(get_current_user),
    session_service: SessionService = Depends(get_session_service),
) -> ClearHistoryResponse:
    """Delete a session's messages; the conversation context is kept."""
    deleted = await session_service.clear_messages(user, session_id)
    return ClearHistoryResponse(session_id=session_id, deleted=deleted)


@router.get("/{session_id}/export")
async def export_session(
    session_id: UUID,
    format: str = Query(default="json", description="json, markdown or text"),
    user: UserModel = Depends(get_current_user),
    session_service: SessionService = Depends(get_session_service),
) -> Response:
    """
    Export a session's conversation as a downloadable document.

    Args:
        session_id: Session UUID
        format: json, markdown (md) or text (txt)
        user: Authenticated user
        session_service: Injected SessionService

    Returns:
        Response: Rendered document with an attachment disposition
    """
    fmt, body = await session_service.export_session(user, session_id, format)
    filename = f"conversation-{session_id}.{FILE_EXTENSIONS[fmt]}"
    return Response(
        content=body,
        media_type=MEDIA_TYPES[fmt],
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
