"""
Assistant knowledge base file endpoints.

Routes:
- GET /assistants/{id}/files - List the assistant's documents
- POST /assistants/{id}/files - Upload a document (multipart, optional description)
- DELETE /assistants/{id}/files/{document_id} - Remove a document

Dependencies: assistant_hub.application.services.document_service, assistant_hub.models
System role: Knowledge base document HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, UploadFile

from assistant_hub.api.deps import get_document_service, require_admin
from assistant_hub.application.services.document_service import DocumentService
from assistant_hub.boundary.db.models.user_model import UserModel
from assistant_hub.models.document import DocumentListResponse, DocumentResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/assistants/{assistant_id}/files", tags=["documents"])


@router.get("", response_model=DocumentListResponse)
async def list_files(
    assistant_id: UUID,
    admin: UserModel = Depends(require_admin),
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentListResponse:
    """List an assistant's documents, newest first."""
    documents = await document_service.list_documents(admin, assistant_id)
    items = [DocumentResponse.model_validate(d) for d in documents]
    return DocumentListResponse(documents=items, total=len(items))


@router.post("", response_model=DocumentResponse, status_code=201)
async def upload_file(
    assistant_id: UUID,
    file: UploadFile = File(...),
    description: str | None = Form(default=None),
    admin: UserModel = Depends(require_admin),
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentResponse:
    """
    Upload a document into the assistant's knowledge base.

    Blocks until the remote index reports ingestion complete.

    Args:
        assistant_id: Owning assistant UUID
        file: Uploaded file
        description: Optional description
        admin: Authenticated operator
        document_service: Injected DocumentService

    Returns:
        DocumentResponse: Registered document
    """
    content = await file.read()
    logger.info(
        "Document upload request received",
        extra={"assistant_id": str(assistant_id), "document_name": file.filename, "size": len(content)},
    )
    document = await document_service.upload_document(
        admin,
        assistant_id,
        file_bytes=content,
        filename=file.filename or "",
        mime_type=file.content_type or "application/octet-stream",
        description=description,
    )
    return DocumentResponse.model_validate(document)


@router.delete("/{document_id}", status_code=204)
async def delete_file(
    assistant_id: UUID,
    document_id: UUID,
    admin: UserModel = Depends(require_admin),
    document_service: DocumentService = Depends(get_document_service),
) -> None:
    """Remove a document from the assistant's knowledge base."""
    await document_service.delete_document(admin, assistant_id, document_id)
