"""
Knowledge base synchronizer.

Keeps each assistant's documents in step with its remote index: lazily
provisions one index per assistant on the first upload, ingests and
detaches files, and tears the remote side down when an assistant goes.

Per-assistant lifecycle (derived, not stored):

    ABSENT --first registration--> PROVISIONING --batch completed--> READY
    PROVISIONING --batch failed--> PROVISIONING (handle linked, nothing indexed yet)
    READY  --later registration--> PROVISIONING --> READY

READY requires at least one successfully ingested document.

Registration is serialized per assistant, so concurrent first uploads
provision a single index.

Dependencies: sqlalchemy, assistant_hub.boundary.answering, assistant_hub.boundary.db
System role: Per-assistant remote index lifecycle
"""

import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from assistant_hub.boundary.answering.gateway import AnsweringGateway
from assistant_hub.boundary.db.CRUD.assistant_crud import assistant_crud
from assistant_hub.boundary.db.CRUD.document_crud import document_crud
from assistant_hub.boundary.db.models.assistant_model import AssistantModel
from assistant_hub.boundary.db.models.document_model import DocumentModel, DocumentStatus
from assistant_hub.core.access_guard import ensure_document_owner
from assistant_hub.core.document_stager import DocumentStager, StagedDocument
from assistant_hub.core.exceptions import (
    IndexingFailed,
    NotFound,
    StorageFailure,
    UpstreamFailure,
)
from assistant_hub.core.keyed_lock import KeyedLock
from assistant_hub.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)


class KnowledgeBaseState(str, Enum):
    """Lifecycle state of an assistant's remote index."""

    ABSENT = "absent"
    PROVISIONING = "provisioning"
    READY = "ready"


def index_name_for(assistant: AssistantModel) -> str:
    """Remote index name for an assistant."""
    return f"{assistant.name} Knowledge Base"


class KnowledgeBaseSynchronizer:
    """
    Synchronizes assistant documents with their remote index.

    One instance serves the whole process; the database session is passed
    per call. Remote cleanup on deletion is best-effort: failures are
    logged and local deletion always proceeds.
    """

    def __init__(
        self,
        gateway: AnsweringGateway,
        stager: DocumentStager,
        provisioning_locks: KeyedLock,
    ) -> None:
        """
        Initialize synchronizer.

        Args:
            gateway: Remote answering/indexing capability
            stager: Local staging storage (for discarding staged bytes)
            provisioning_locks: Per-assistant registration locks
        """
        self.gateway = gateway
        self.stager = stager
        self.provisioning_locks = provisioning_locks

    def state_for(self, assistant: AssistantModel, has_completed_documents: bool) -> KnowledgeBaseState:
        """
        Derive the lifecycle state from the linked handle and ingestion results.

        Args:
            assistant: AssistantModel
            has_completed_documents: Whether any of its documents ingested successfully

        Returns:
            KnowledgeBaseState: PROVISIONING while a registration runs or until
            the first ingestion succeeds, READY once it has, ABSENT without a handle
        """
        if self.provisioning_locks.is_held(assistant.id):
            return KnowledgeBaseState.PROVISIONING
        if not assistant.vector_store_id:
            return KnowledgeBaseState.ABSENT
        if has_completed_documents:
            return KnowledgeBaseState.READY
        return KnowledgeBaseState.PROVISIONING

    async def state_of(self, db: AsyncSession, assistant: AssistantModel) -> KnowledgeBaseState:
        """Report the lifecycle state of an assistant's index."""
        completed = await document_crud.assistants_with_completed(db, [assistant.id])
        return self.state_for(assistant, assistant.id in completed)

    async def register_document(
        self,
        db: AsyncSession,
        assistant_id: UUID,
        staged: StagedDocument,
        description: str | None = None,
    ) -> DocumentModel:
        """
        Upload a staged document and add it to the assistant's index.

        Flow:
        1. Load the assistant
        2. Upload bytes to the remote file store
        3. Under the assistant's lock, ensure an index exists (create and
           link it on first use) and ingest the file, waiting for completion
        4. Persist the document row; a failed ingestion is persisted with
           status FAILED before IndexingFailed is raised

        Args:
            db: Async database session
            assistant_id: Owning assistant UUID
            staged: Document written by the stager
            description: Optional free-text description

        Returns:
            DocumentModel: Persisted document with status COMPLETED

        Raises:
            NotFound: If the assistant does not exist
            UpstreamFailure: If the upload or index creation fails (no row written)
            IndexingFailed: If ingestion fails (row written with status FAILED)
        """
        assistant = await assistant_crud.get_by_id(db, assistant_id)
        if assistant is None:
            self.stager.discard(staged.path)
            raise NotFound("assistant", str(assistant_id))

        log_context = {
            "assistant_id": str(assistant_id),
            "original_name": staged.original_name,
            "size": staged.size,
        }

        try:
            data = staged.read_bytes()
        except OSError as e:
            raise StorageFailure("Staged file is unreadable", {"staged_path": str(staged.path)}) from e

        try:
            file_id = await self.gateway.upload_file(data, staged.original_name)
        except UpstreamFailure:
            logger.warning("Remote upload failed, discarding staged file", extra=log_context)
            self.stager.discard(staged.path)
            raise

        log_context["file_id"] = file_id
        logger.info("File uploaded to remote store", extra=log_context)

        indexing_error: IndexingFailed | None = None
        async with self.provisioning_locks.hold(assistant_id):
            try:
                vector_store_id = await self._ensure_index(db, assistant_id)
            except (UpstreamFailure, NotFound):
                await self._best_effort("delete_file", self.gateway.delete_file, file_id)
                self.stager.discard(staged.path)
                raise

            try:
                await self.gateway.add_files_to_index(vector_store_id, [file_id])
            except IndexingFailed as exc:
                indexing_error = exc
            except UpstreamFailure as exc:
                indexing_error = IndexingFailed(exc.message, operation="add_files_to_index", details=exc.details)

        document = await document_crud.create(
            db,
            assistant_id=assistant_id,
            filename=staged.stored_filename,
            original_name=staged.original_name,
            size=staged.size,
            mime_type=staged.mime_type,
            storage_path=str(staged.path),
            openai_file_id=file_id,
            vector_store_file_id=None if indexing_error else file_id,
            status=DocumentStatus.FAILED if indexing_error else DocumentStatus.COMPLETED,
            error_message=indexing_error.message[:2048] if indexing_error else None,
            description=description,
        )
        await db.commit()

        if indexing_error is not None:
            logger.error(
                "Document indexing failed",
                extra={**log_context, "document_id": str(document.id), "error": indexing_error.message},
            )
            indexing_error.details["document_id"] = str(document.id)
            raise indexing_error

        logger.info(
            "Document registered",
            extra={**log_context, "document_id": str(document.id), "vector_store_id": vector_store_id},
        )
        return document

    async def _ensure_index(self, db: AsyncSession, assistant_id: UUID) -> str:
        """
        Return the assistant's index handle, creating and linking one if absent.

        Must run under the assistant's provisioning lock. The assistant row is
        re-read so a handle linked by the previous lock holder is observed.
        """
        assistant = await assistant_crud.get_by_id(db, assistant_id, fresh=True)
        if assistant is None:
            raise NotFound("assistant", str(assistant_id))
        if assistant.vector_store_id:
            return assistant.vector_store_id

        vector_store_id = await self.gateway.create_index(index_name_for(assistant))
        assistant.vector_store_id = vector_store_id
        await db.commit()
        logger.info(
            "Knowledge base provisioned",
            extra={"assistant_id": str(assistant_id), "vector_store_id": vector_store_id},
        )
        return vector_store_id

    async def deregister_document(
        self,
        db: AsyncSession,
        assistant_id: UUID,
        document_id: UUID,
    ) -> None:
        """
        Remove a document from its assistant's knowledge base.

        Remote detachment and file deletion are best-effort; a file the
        index no longer knows about is already unsearchable.

        Args:
            db: Async database session
            assistant_id: Assistant the document is addressed through
            document_id: Document UUID

        Raises:
            NotFound: If the assistant or document does not exist
            OwnershipMismatch: If another assistant owns the document
        """
        assistant = await assistant_crud.get_by_id(db, assistant_id)
        if assistant is None:
            raise NotFound("assistant", str(assistant_id))
        document = await document_crud.get_by_id(db, document_id)
        if document is None:
            raise NotFound("document", str(document_id))
        ensure_document_owner(assistant, document)

        if document.openai_file_id:
            if assistant.vector_store_id:
                await self._best_effort(
                    "remove_file_from_index",
                    self.gateway.remove_file_from_index,
                    assistant.vector_store_id,
                    document.openai_file_id,
                )
            await self._best_effort("delete_file", self.gateway.delete_file, document.openai_file_id)

        self.stager.discard(document.storage_path)
        await document_crud.delete_by_id(db, document.id)
        await db.commit()

        logger.info(
            "Document deregistered",
            extra={"assistant_id": str(assistant_id), "document_id": str(document_id)},
        )

    async def list_documents(
        self,
        db: AsyncSession,
        assistant_id: UUID,
    ) -> Sequence[DocumentModel]:
        """
        List an assistant's documents, newest first.

        Raises:
            NotFound: If the assistant does not exist
        """
        if not await assistant_crud.exists(db, assistant_id):
            raise NotFound("assistant", str(assistant_id))
        return await document_crud.list_by_assistant(db, assistant_id)

    async def teardown_assistant(
        self,
        assistant: AssistantModel,
        documents: Sequence[DocumentModel],
    ) -> None:
        """
        Best-effort removal of an assistant's remote files, index and staged bytes.

        Never raises for remote failures.

        Args:
            assistant: Assistant being deleted
            documents: Its documents, loaded before the rows are deleted
        """
        for document in documents:
            if document.openai_file_id:
                await self._best_effort("delete_file", self.gateway.delete_file, document.openai_file_id)
            self.stager.discard(document.storage_path)

        if assistant.vector_store_id:
            await self._best_effort("delete_index", self.gateway.delete_index, assistant.vector_store_id)

        logger.info(
            "Assistant knowledge base torn down",
            extra={"assistant_id": str(assistant.id), "documents": len(documents)},
        )

    async def _best_effort(
        self,
        operation: str,
        call: Callable[..., Awaitable[Any]],
        *args: Any,
    ) -> None:
        try:
            await call(*args)
        except UpstreamFailure as exc:
            log_with_context(
                logger,
                logging.WARNING,
                "Remote cleanup failed, continuing",
                operation=operation,
                error=exc.message,
                target=", ".join(str(a) for a in args),
            )
