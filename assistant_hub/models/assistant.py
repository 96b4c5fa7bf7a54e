"""
Assistant domain models and schemas.

Request/response schemas for assistant administration.

Dependencies: pydantic
System role: Assistant API contracts
"""

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class CreateAssistantRequest(BaseModel):
    """Request schema for creating an assistant."""

    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    instructions: str = Field(min_length=1, description="System guidance sent with every turn")
    model: str | None = Field(default=None, description="Model identifier; defaults to configured model")
    is_active: bool = True


class UpdateAssistantRequest(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    instructions: str | None = Field(default=None, min_length=1)
    model: str | None = Field(default=None, min_length=1)
    is_active: bool | None = None


class AssistantResponse(BaseModel):
    """Response schema for assistant operations."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    description: str | None
    instructions: str
    model: str
    vector_store_id: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime
    knowledge_base_state: Literal["absent", "provisioning", "ready"] = "absent"


class AssistantListResponse(BaseModel):
    """Assistant list response."""

    assistants: list[AssistantResponse]
    total: int
