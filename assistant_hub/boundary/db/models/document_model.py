"""
Document ORM model.

Represents a file in an assistant's knowledge base, its local staging
location and its remote handles.

Dependencies: sqlalchemy, assistant_hub.boundary.db.base
System role: Document persistence for knowledge base tracking
"""

import enum
from uuid import UUID

from sqlalchemy import Enum, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from assistant_hub.boundary.db.base import Base, TimestampMixin, UUIDMixin


class DocumentStatus(str, enum.Enum):
    """
    Document indexing lifecycle states.

    PENDING: Uploaded to the remote file store, not yet indexed
    COMPLETED: File batch ingested; searchable through the assistant's index
    FAILED: Ingestion failed; error_message holds details. Delete and re-upload to retry
    """

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


class DocumentModel(Base, UUIDMixin, TimestampMixin):
    """
    Document ORM model.

    The owning assistant never changes. Deleting the assistant deletes the
    document rows (ON DELETE CASCADE); deleting a document removes it from
    the remote index and deletes the staged bytes.

    Attributes:
        id: UUID primary key (auto-generated)
        assistant_id: Owning assistant (cascade delete)
        filename: Unique staged filename
        original_name: Filename as uploaded
        size: Byte size
        mime_type: Declared MIME type
        storage_path: Local staging path
        openai_file_id: Remote file handle
        vector_store_file_id: Remote index membership handle (None until indexed)
        status: Indexing status
        error_message: Ingestion error if FAILED
        description: Optional free-text description
        created_at: Upload timestamp (UTC)
    """

    __tablename__ = "documents"

    assistant_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("assistants.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    original_name: Mapped[str] = mapped_column(String(255), nullable=False)
    size: Mapped[int] = mapped_column(Integer, nullable=False)
    mime_type: Mapped[str] = mapped_column(String(255), nullable=False)
    storage_path: Mapped[str] = mapped_column(String(1024), nullable=False)
    openai_file_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    vector_store_file_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[DocumentStatus] = mapped_column(
        Enum(DocumentStatus, native_enum=False),
        nullable=False,
        default=DocumentStatus.PENDING,
    )
    error_message: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    assistant = relationship("AssistantModel", back_populates="documents")
