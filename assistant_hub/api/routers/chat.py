"""
Chat API endpoints.

Routes:
- POST /sessions/{session_id}/chat - Run a turn; JSON, or SSE when the
  client accepts text/event-stream
- POST /sessions/{session_id}/chat/stream - Run a turn as SSE

SSE frames:
    event: delta      data: {"content": "..."}
    event: citations  data: {"citations": [...]}
    event: done       data: {"content": "...", "citations": [...]}
    event: error      data: {"code": "...", "message": "..."}

Dependencies: assistant_hub.application.services.chat_service
System role: Conversation HTTP API
"""

import logging
from collections.abc import AsyncGenerator
from uuid import UUID

from fastapi import APIRouter, Depends, Header
from fastapi.responses import StreamingResponse

from assistant_hub.api.deps import get_chat_service, get_current_user
from assistant_hub.application.services.chat_service import ChatService
from assistant_hub.boundary.db.models.user_model import UserModel
from assistant_hub.core.stream_adapter import format_sse
from assistant_hub.models.chat import ChatRequest, ChatResponse
from assistant_hub.models.streaming import StreamEvent

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["chat"])

SSE_MEDIA_TYPE = "text/event-stream"
SSE_HEADERS = {"Cache-Control": "no-cache", "X-Accel-Buffering": "no"}


async def _sse(events: AsyncGenerator[StreamEvent, None]) -> AsyncGenerator[str, None]:
    try:
        async for event in events:
            yield format_sse(event)
    finally:
        await events.aclose()


async def _stream_response(
    chat_service: ChatService,
    session_id: UUID,
    user: UserModel,
    message: str,
) -> StreamingResponse:
    # Reject bad requests before the stream opens
    text = await chat_service.check_turn(session_id, user.id, message)
    events = chat_service.stream_converse(session_id, user.id, text)
    return StreamingResponse(_sse(events), media_type=SSE_MEDIA_TYPE, headers=SSE_HEADERS)


@router.post("/{session_id}/chat", response_model=ChatResponse)
async def chat(
    session_id: UUID,
    request: ChatRequest,
    accept: str | None = Header(default=None),
    user: UserModel = Depends(get_current_user),
    chat_service: ChatService = Depends(get_chat_service),
):
    """
    Send a message and get the assistant's answer.

    Args:
        session_id: Session UUID
        request: Chat request with message
        accept: Accept header; text/event-stream selects streaming delivery
        user: Authenticated user
        chat_service: Injected ChatService

    Returns:
        ChatResponse | StreamingResponse: Answer with citations
    """
    logger.info(
        "Chat request received",
        extra={"session_id": str(session_id), "message_length": len(request.message)},
    )
    if accept and SSE_MEDIA_TYPE in accept:
        return await _stream_response(chat_service, session_id, user, request.message)

    result = await chat_service.converse(session_id, user.id, request.message)
    return ChatResponse(content=result.content, citations=result.citations, session_id=session_id)


@router.post("/{session_id}/chat/stream")
async def chat_stream(
    session_id: UUID,
    request: ChatRequest,
    user: UserModel = Depends(get_current_user),
    chat_service: ChatService = Depends(get_chat_service),
) -> StreamingResponse:
    """Send a message and stream the answer as server-sent events."""
    logger.info(
        "Streaming chat request received",
        extra={"session_id": str(session_id), "message_length": len(request.message)},
    )
    return await _stream_response(chat_service, session_id, user, request.message)
