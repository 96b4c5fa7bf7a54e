"""
User and access grant schemas.

Dependencies: pydantic
System role: User administration API contracts
"""

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CreateUserRequest(BaseModel):
    """Request schema for registering a user."""

    username: str = Field(min_length=1, max_length=255)
    role: Literal["admin", "user"] = "user"


class UpdateRoleRequest(BaseModel):
    """Request schema for changing a user's role."""

    role: Literal["admin", "user"]


class UserResponse(BaseModel):
    """Response schema for user operations."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    username: str
    role: str
    created_at: datetime

    @field_validator("role", mode="before")
    @classmethod
    def _role_value(cls, value):
        return getattr(value, "value", value)


class GrantAccessRequest(BaseModel):
    """Request schema for granting a user access to an assistant."""

    assistant_id: uuid.UUID


class AccessGrantResponse(BaseModel):
    """Response schema for access grants."""

    model_config = ConfigDict(from_attributes=True)

    user_id: uuid.UUID
    assistant_id: uuid.UUID
    created_at: datetime
