"""
Document CRUD operations.

Provides Create, Read, Update, Delete operations for DocumentModel
with assistant-scoped queries.

Dependencies: sqlalchemy, assistant_hub.boundary.db.models.document_model
System role: Knowledge base document persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from assistant_hub.boundary.db.CRUD.base_crud import BaseCRUD
from assistant_hub.boundary.db.models.document_model import DocumentModel, DocumentStatus


class DocumentCRUD(BaseCRUD[DocumentModel]):
    """
    CRUD operations for DocumentModel.

    Extends BaseCRUD with queries scoped to the owning assistant.
    """

    def __init__(self) -> None:
        """Initialize DocumentCRUD with DocumentModel."""
        super().__init__(DocumentModel)

    async def list_by_assistant(
        self,
        session: AsyncSession,
        assistant_id: UUID,
        status: DocumentStatus | None = None,
    ) -> Sequence[DocumentModel]:
        """
        List an assistant's documents, newest first.

        Args:
            session: Async database session
            assistant_id: Owning assistant UUID
            status: Optional indexing status filter

        Returns:
            Sequence of DocumentModels
        """
        stmt = (
            select(DocumentModel)
            .where(DocumentModel.assistant_id == assistant_id)
            .order_by(DocumentModel.created_at.desc())
        )
        if status is not None:
            stmt = stmt.where(DocumentModel.status == status)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def filenames_by_file_id(
        self,
        session: AsyncSession,
        assistant_id: UUID,
    ) -> dict[str, str]:
        """
        Map remote file handles to original filenames for one assistant.

        Args:
            session: Async database session
            assistant_id: Owning assistant UUID

        Returns:
            Dict of remote file id to original filename
        """
        stmt = select(DocumentModel.openai_file_id, DocumentModel.original_name).where(
            DocumentModel.assistant_id == assistant_id,
            DocumentModel.openai_file_id.is_not(None),
        )
        result = await session.execute(stmt)
        return {file_id: name for file_id, name in result.all()}

    async def assistants_with_completed(
        self,
        session: AsyncSession,
        assistant_ids: Sequence[UUID],
    ) -> set[UUID]:
        """Subset of the given assistants with at least one COMPLETED document."""
        if not assistant_ids:
            return set()
        stmt = (
            select(DocumentModel.assistant_id)
            .where(
                DocumentModel.assistant_id.in_(list(assistant_ids)),
                DocumentModel.status == DocumentStatus.COMPLETED,
            )
            .distinct()
        )
        result = await session.execute(stmt)
        return set(result.scalars().all())


document_crud = DocumentCRUD()
