"""
Session ORM model.

Represents one conversation between a user and an assistant, including
the continuation token that chains turns on the remote answering service.

Dependencies: sqlalchemy, assistant_hub.boundary.db.base
System role: Session persistence for conversation continuity
"""

from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from assistant_hub.boundary.db.base import Base, TimestampMixin, UUIDMixin

DEFAULT_SESSION_TITLE = "New Conversation"


class SessionModel(Base, UUIDMixin, TimestampMixin):
    """
    Session ORM model.

    A session is Uninitialized until it holds a continuation token; after
    every successful assistant turn the token is overwritten with the one
    from that turn. Deleting the assistant nulls assistant_id so history
    survives; deleting the session cascades to its messages.

    Attributes:
        id: UUID primary key (auto-generated)
        user_id: Owning user (nullable only for legacy rows; cascade delete)
        assistant_id: Assistant conversed with (SET NULL on assistant delete)
        response_id: Continuation token of the most recent turn
        title: Human title
        is_test: Operator dry-run session, listed apart from user sessions
        created_at: Session creation timestamp (UTC)
        updated_at: Last modification timestamp (UTC)

    Relationships:
        messages: Ordered messages (cascade delete)
    """

    __tablename__ = "chat_sessions"

    user_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    assistant_id: Mapped[UUID | None] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("assistants.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    response_id: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        doc="Continuation token returned by the answering service",
    )
    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default=DEFAULT_SESSION_TITLE,
    )
    is_test: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    user = relationship("UserModel", back_populates="sessions")
    assistant = relationship("AssistantModel", back_populates="sessions")
    messages = relationship(
        "MessageModel",
        back_populates="session",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="MessageModel.created_at",
    )

    @property
    def is_initialized(self) -> bool:
        """Whether a turn has completed and a continuation token is held."""
        return self.response_id is not None
