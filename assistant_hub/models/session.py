"""
Session domain models and schemas.

Request/response schemas for session operations.

Dependencies: pydantic
System role: Session API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CreateSessionRequest(BaseModel):
    """Request schema for creating a new session."""

    assistant_id: uuid.UUID = Field(description="Assistant to converse with")
    title: str | None = Field(default=None, max_length=255, description="Optional title")
    is_test: bool = Field(default=False, description="Operator dry-run session")


class UpdateSessionRequest(BaseModel):
    """Request schema for renaming a session."""

    title: str = Field(min_length=1, max_length=255)


class SessionResponse(BaseModel):
    """Response schema for session operations."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    assistant_id: uuid.UUID | None
    title: str
    is_test: bool
    has_context: bool = Field(description="Whether a continuation token is held")
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, session) -> "SessionResponse":
        """Build from a SessionModel."""
        return cls(
            id=session.id,
            assistant_id=session.assistant_id,
            title=session.title,
            is_test=session.is_test,
            has_context=session.response_id is not None,
            created_at=session.created_at,
            updated_at=session.updated_at,
        )


class SessionListResponse(BaseModel):
    """Session list response."""

    sessions: list[SessionResponse]
    total: int
