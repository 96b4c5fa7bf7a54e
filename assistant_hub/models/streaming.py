"""
Streaming event schemas for chat delivery.

Defines the transport-agnostic event sequence produced for a turn and its
Server-Sent Events framing.

Dependencies: pydantic
System role: Streaming protocol schemas
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel


class StreamEventType(str, Enum):
    """Server-to-client event types for streaming chat."""

    DELTA = "delta"
    CITATIONS = "citations"
    DONE = "done"
    ERROR = "error"


class StreamEvent(BaseModel):
    """
    Streaming event model.

    Attributes:
        event: Event type identifier
        data: Event-specific payload
    """

    event: StreamEventType
    data: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {"event": self.event.value, "data": self.data}
