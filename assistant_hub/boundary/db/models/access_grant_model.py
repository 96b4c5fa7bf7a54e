"""
Access grant ORM model.

A (user, assistant) pair granting the user the right to converse with the
assistant. Existence is the only signal.

Dependencies: sqlalchemy, assistant_hub.boundary.db.base
System role: Authorization data for conversations
"""

from uuid import UUID

from sqlalchemy import ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from assistant_hub.boundary.db.base import Base, TimestampMixin, UUIDMixin


class AccessGrantModel(Base, UUIDMixin, TimestampMixin):
    """Access grant ORM model, unique per (user_id, assistant_id)."""

    __tablename__ = "user_assistant_access"
    __table_args__ = (
        UniqueConstraint("user_id", "assistant_id", name="uq_user_assistant_access"),
    )

    user_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    assistant_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("assistants.id", ondelete="CASCADE"),
        nullable=False,
    )

    user = relationship("UserModel", back_populates="access_grants")
    assistant = relationship("AssistantModel", back_populates="access_grants")
