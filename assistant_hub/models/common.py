"""
Common response models and utilities.

Generic response wrappers and error schemas.

Dependencies: pydantic
System role: Common API response structures
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class SuccessResponse(BaseModel, Generic[T]):
    """Generic success response wrapper."""

    success: bool = True
    data: T


class ErrorBody(BaseModel):
    """Stable machine-checkable error description."""

    kind: str = Field(description="Error kind, e.g. not_found or upstream_failure")
    message: str = Field(description="Human-readable message")
    details: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Error response schema."""

    success: bool = False
    error: ErrorBody


class DeletedResponse(BaseModel):
    """Acknowledgement for delete operations."""

    success: bool = True
    id: str
