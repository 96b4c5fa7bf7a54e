"""
Citation domain model.

Represents a reference from an assistant answer to a span of one of the
assistant's knowledge base files.

Dependencies: pydantic
System role: Citation data structure
"""

from pydantic import BaseModel, Field


class Citation(BaseModel):
    """Citation model for source attribution."""

    file_id: str = Field(description="Remote file handle of the cited document")
    filename: str | None = Field(default=None, description="Original filename, when resolvable")
    quote: str = Field(description="Quoted span supporting the answer")
