"""
Document service orchestrator.

Coordinates knowledge base uploads: staging, then registration with the
assistant's remote index.

Dependencies: assistant_hub.core
System role: Document upload use case orchestration
"""

import logging
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from assistant_hub.boundary.db.models.document_model import DocumentModel
from assistant_hub.boundary.db.models.user_model import UserModel
from assistant_hub.core.access_guard import ensure_operator
from assistant_hub.core.document_stager import DocumentStager
from assistant_hub.core.knowledge_base import KnowledgeBaseSynchronizer

logger = logging.getLogger(__name__)


class DocumentService:
    """Document service orchestrator."""

    def __init__(
        self,
        db: AsyncSession,
        stager: DocumentStager,
        synchronizer: KnowledgeBaseSynchronizer,
    ) -> None:
        """
        Initialize document service.

        Args:
            db: Async SQLAlchemy session
            stager: Local upload staging
            synchronizer: Knowledge base synchronizer
        """
        self.db = db
        self.stager = stager
        self.synchronizer = synchronizer

    async def upload_document(
        self,
        user: UserModel,
        assistant_id: UUID,
        file_bytes: bytes,
        filename: str,
        mime_type: str,
        description: str | None = None,
    ) -> DocumentModel:
        """
        Stage an upload and register it with the assistant's knowledge base.

        Validation happens before any remote call.

        Args:
            user: Requesting operator
            assistant_id: Owning assistant UUID
            file_bytes: File contents
            filename: Original filename
            mime_type: Declared MIME type
            description: Optional description

        Returns:
            DocumentModel: Registered document

        Raises:
            AccessDenied: If the user is not an operator
            InvalidInput: If the file fails validation
            StorageFailure: If staging fails
            NotFound: If the assistant does not exist
            UpstreamFailure: If the remote upload fails
            IndexingFailed: If ingestion fails (document persisted as failed)
        """
        ensure_operator(user)
        staged = self.stager.stage(assistant_id, file_bytes, filename, mime_type)
        return await self.synchronizer.register_document(
            self.db,
            assistant_id,
            staged,
            description=description,
        )

    async def list_documents(self, user: UserModel, assistant_id: UUID) -> Sequence[DocumentModel]:
        """List an assistant's documents, newest first."""
        ensure_operator(user)
        return await self.synchronizer.list_documents(self.db, assistant_id)

    async def delete_document(
        self,
        user: UserModel,
        assistant_id: UUID,
        document_id: UUID,
    ) -> None:
        """
        Remove a document from an assistant's knowledge base.

        Raises:
            AccessDenied: If the user is not an operator
            NotFound: If the assistant or document does not exist
            OwnershipMismatch: If the document belongs to another assistant
        """
        ensure_operator(user)
        await self.synchronizer.deregister_document(self.db, assistant_id, document_id)
