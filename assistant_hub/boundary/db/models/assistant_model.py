"""
Assistant ORM model.

Represents an operator-defined assistant: behavioral instructions, model
selection and the handle of its remote knowledge base index.

Dependencies: sqlalchemy, assistant_hub.boundary.db.base
System role: Assistant persistence and knowledge base ownership
"""

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from assistant_hub.boundary.db.base import Base, TimestampMixin, UUIDMixin


class AssistantModel(Base, UUIDMixin, TimestampMixin):
    """
    Assistant ORM model.

    An assistant exclusively owns its documents. The knowledge base handle
    starts empty and is linked once, when the first document is registered;
    at most one handle is ever linked.

    Attributes:
        id: UUID primary key (auto-generated)
        name: Display name
        description: Optional free-text description
        instructions: System guidance sent verbatim with every turn
        model: Model identifier used for answering
        vector_store_id: Remote index handle (None until first document)
        is_active: Whether the assistant is offered to users

    Relationships:
        documents: Owned documents (cascade delete)
        access_grants: Grants referencing the assistant (cascade delete)
        sessions: Sessions referencing the assistant (link nulled on delete)
    """

    __tablename__ = "assistants"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    instructions: Mapped[str] = mapped_column(Text, nullable=False)
    model: Mapped[str] = mapped_column(String(100), nullable=False, default="gpt-4o")
    vector_store_id: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        doc="Remote knowledge base handle",
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    documents = relationship(
        "DocumentModel",
        back_populates="assistant",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    access_grants = relationship(
        "AccessGrantModel",
        back_populates="assistant",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    sessions = relationship(
        "SessionModel",
        back_populates="assistant",
        passive_deletes=True,
    )
