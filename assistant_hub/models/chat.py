"""
Chat domain models and schemas.

Request/response schemas for conversation turns and message history.

Dependencies: pydantic
System role: Chat API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from assistant_hub.models.citation import Citation


class ChatRequest(BaseModel):
    """Request schema for a conversation turn."""

    message: str = Field(min_length=1, description="User message text")


class TurnResult(BaseModel):
    """Outcome of one completed turn."""

    content: str
    citations: list[Citation] = Field(default_factory=list)


class ChatResponse(BaseModel):
    """Response schema for a non-streaming turn."""

    content: str
    citations: list[Citation]
    session_id: uuid.UUID


class ChatMessageResponse(BaseModel):
    """Single message in history. Stored NULL citations render as []."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    role: str = Field(description="Message role: 'user', 'assistant' or 'system'")
    content: str = Field(description="Message content")
    citations: list[Citation] = Field(default_factory=list)
    created_at: datetime

    @field_validator("citations", mode="before")
    @classmethod
    def _null_citations(cls, value):
        return value or []

    @field_validator("role", mode="before")
    @classmethod
    def _role_value(cls, value):
        return getattr(value, "value", value)


class ChatHistoryResponse(BaseModel):
    """Response schema for chat history."""

    messages: list[ChatMessageResponse]
    total: int = Field(description="Total number of messages")


class ClearHistoryResponse(BaseModel):
    """Response schema for clearing a session's messages."""

    session_id: uuid.UUID
    deleted: int
