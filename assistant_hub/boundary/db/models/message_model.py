"""
Message ORM model.

Represents one message in a session with optional structured citations.

Dependencies: sqlalchemy, assistant_hub.boundary.db.base
System role: Conversation history persistence
"""

import enum
from datetime import datetime
from uuid import UUID

from sqlalchemy import JSON, DateTime, Enum, ForeignKey, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from assistant_hub.boundary.db.base import Base, UUIDMixin, utcnow


class MessageRole(str, enum.Enum):
    """Author of a message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class MessageModel(Base, UUIDMixin):
    """
    Message ORM model.

    Append-only within a session except for bulk clear. Read order is by
    created_at, which the CRUD layer keeps strictly increasing per session.

    Attributes:
        id: UUID primary key (auto-generated)
        session_id: Owning session (cascade delete)
        role: user, assistant or system
        content: Message text
        citations: List of citation dicts, or None when no citation was produced
        created_at: Creation timestamp (UTC)
    """

    __tablename__ = "chat_messages"

    session_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("chat_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[MessageRole] = mapped_column(
        Enum(MessageRole, native_enum=False),
        nullable=False,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    citations: Mapped[list[dict] | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        index=True,
    )

    session = relationship("SessionModel", back_populates="messages")
