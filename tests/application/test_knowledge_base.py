"""
Test suite for KnowledgeBaseSynchronizer and DocumentService.

Tests lazy index provisioning, single-flight provisioning under
concurrent first uploads, failure persistence and best-effort cleanup.

System role: Verification of per-assistant remote index lifecycle
"""

import asyncio
import os
from pathlib import Path

import pytest

from assistant_hub.application.services.assistant_service import AssistantService
from assistant_hub.application.services.document_service import DocumentService
from assistant_hub.boundary.db.CRUD.assistant_crud import assistant_crud
from assistant_hub.boundary.db.CRUD.document_crud import document_crud
from assistant_hub.boundary.db.CRUD.message_crud import message_crud
from assistant_hub.boundary.db.CRUD.session_crud import session_crud
from assistant_hub.boundary.db.models import DocumentStatus, MessageRole
from assistant_hub.core.exceptions import (
    AccessDenied,
    IndexingFailed,
    NotFound,
    OwnershipMismatch,
    UpstreamFailure,
)
from assistant_hub.core.knowledge_base import (
    KnowledgeBaseState,
    KnowledgeBaseSynchronizer,
    index_name_for,
)


@pytest.fixture
def document_service(test_async_db, stager, synchronizer) -> DocumentService:
    return DocumentService(db=test_async_db, stager=stager, synchronizer=synchronizer)


def staged_files(upload_dir: Path) -> list[str]:
    if not upload_dir.exists():
        return []
    return [name for _, _, files in os.walk(upload_dir) for name in files]


class TestRegisterDocument:
    """Test suite for document registration."""

    @pytest.mark.asyncio
    async def test_first_upload_provisions_index(
        self,
        document_service: DocumentService,
        synchronizer: KnowledgeBaseSynchronizer,
        test_async_db,
        fake_gateway,
        admin,
        assistant,
    ) -> None:
        assert await synchronizer.state_of(test_async_db, assistant) == KnowledgeBaseState.ABSENT

        document = await document_service.upload_document(
            admin, assistant.id, b"cells", "cells.pdf", "application/pdf", description="Week 1"
        )

        refreshed = await assistant_crud.get_by_id(test_async_db, assistant.id, fresh=True)
        assert refreshed.vector_store_id == "vs_1"
        assert await synchronizer.state_of(test_async_db, refreshed) == KnowledgeBaseState.READY
        assert document.status == DocumentStatus.COMPLETED
        assert document.openai_file_id == "file_1"
        assert document.original_name == "cells.pdf"
        assert document.description == "Week 1"
        assert fake_gateway.indexes["vs_1"] == ["file_1"]

    @pytest.mark.asyncio
    async def test_second_upload_reuses_index(
        self,
        document_service: DocumentService,
        test_async_db,
        fake_gateway,
        admin,
        assistant,
    ) -> None:
        await document_service.upload_document(admin, assistant.id, b"one", "one.txt", "text/plain")
        await document_service.upload_document(admin, assistant.id, b"two", "two.txt", "text/plain")

        refreshed = await assistant_crud.get_by_id(test_async_db, assistant.id, fresh=True)
        assert refreshed.vector_store_id == "vs_1"
        assert fake_gateway.create_index_calls == 1
        assert fake_gateway.indexes["vs_1"] == ["file_1", "file_2"]

    @pytest.mark.asyncio
    async def test_concurrent_first_uploads_provision_once(
        self,
        session_factory,
        stager,
        synchronizer,
        test_async_db,
        fake_gateway,
        admin,
        assistant,
    ) -> None:
        async def upload(name: str):
            async with session_factory() as db:
                service = DocumentService(db=db, stager=stager, synchronizer=synchronizer)
                return await service.upload_document(admin, assistant.id, b"data", name, "text/plain")

        await asyncio.gather(upload("a.txt"), upload("b.txt"))

        refreshed = await assistant_crud.get_by_id(test_async_db, assistant.id, fresh=True)
        assert fake_gateway.create_index_calls == 1
        assert sorted(fake_gateway.indexes[refreshed.vector_store_id]) == ["file_1", "file_2"]

    @pytest.mark.asyncio
    async def test_indexing_failure_is_persisted(
        self,
        document_service: DocumentService,
        test_async_db,
        fake_gateway,
        admin,
        assistant,
    ) -> None:
        fake_gateway.fail_indexing = True

        with pytest.raises(IndexingFailed) as exc_info:
            await document_service.upload_document(admin, assistant.id, b"x", "x.pdf", "application/pdf")

        documents = await document_crud.list_by_assistant(test_async_db, assistant.id)
        assert len(documents) == 1
        assert documents[0].status == DocumentStatus.FAILED
        assert documents[0].error_message
        assert exc_info.value.details["document_id"] == str(documents[0].id)

    @pytest.mark.asyncio
    async def test_failed_first_ingestion_is_not_ready(
        self,
        document_service: DocumentService,
        synchronizer: KnowledgeBaseSynchronizer,
        test_async_db,
        fake_gateway,
        admin,
        assistant,
    ) -> None:
        fake_gateway.fail_indexing = True
        with pytest.raises(IndexingFailed):
            await document_service.upload_document(admin, assistant.id, b"x", "x.pdf", "application/pdf")

        refreshed = await assistant_crud.get_by_id(test_async_db, assistant.id, fresh=True)
        assert refreshed.vector_store_id == "vs_1"
        assert await synchronizer.state_of(test_async_db, refreshed) == KnowledgeBaseState.PROVISIONING

        fake_gateway.fail_indexing = False
        await document_service.upload_document(admin, assistant.id, b"y", "y.pdf", "application/pdf")

        assert await synchronizer.state_of(test_async_db, refreshed) == KnowledgeBaseState.READY
        assert fake_gateway.create_index_calls == 1

    @pytest.mark.asyncio
    async def test_state_is_provisioning_while_lock_held(
        self,
        synchronizer: KnowledgeBaseSynchronizer,
        provisioning_locks,
        test_async_db,
        assistant,
    ) -> None:
        async with provisioning_locks.hold(assistant.id):
            assert await synchronizer.state_of(test_async_db, assistant) == KnowledgeBaseState.PROVISIONING
        assert await synchronizer.state_of(test_async_db, assistant) == KnowledgeBaseState.ABSENT

    @pytest.mark.asyncio
    async def test_upload_failure_writes_nothing(
        self,
        document_service: DocumentService,
        test_async_db,
        fake_gateway,
        upload_dir,
        admin,
        assistant,
    ) -> None:
        fake_gateway.fail_upload = True

        with pytest.raises(UpstreamFailure):
            await document_service.upload_document(admin, assistant.id, b"x", "x.pdf", "application/pdf")

        assert await document_crud.list_by_assistant(test_async_db, assistant.id) == []
        assert staged_files(upload_dir) == []
        assert fake_gateway.create_index_calls == 0

    @pytest.mark.asyncio
    async def test_non_operator_cannot_upload(
        self,
        document_service: DocumentService,
        fake_gateway,
        upload_dir,
        alice,
        assistant,
    ) -> None:
        with pytest.raises(AccessDenied):
            await document_service.upload_document(alice, assistant.id, b"x", "x.pdf", "application/pdf")

        assert fake_gateway.files == {}
        assert staged_files(upload_dir) == []

    def test_index_name(self, assistant) -> None:
        assert index_name_for(assistant) == "Biology Tutor Knowledge Base"


class TestDeregisterDocument:
    """Test suite for document removal."""

    @pytest.mark.asyncio
    async def test_remove_detaches_and_deletes(
        self,
        document_service: DocumentService,
        test_async_db,
        fake_gateway,
        upload_dir,
        admin,
        assistant,
    ) -> None:
        document = await document_service.upload_document(admin, assistant.id, b"x", "x.txt", "text/plain")

        await document_service.delete_document(admin, assistant.id, document.id)

        assert fake_gateway.indexes["vs_1"] == []
        assert fake_gateway.deleted_files == ["file_1"]
        assert await document_crud.get_by_id(test_async_db, document.id, fresh=True) is None
        assert staged_files(upload_dir) == []

    @pytest.mark.asyncio
    async def test_remove_through_other_assistant_is_rejected(
        self,
        document_service: DocumentService,
        test_async_db,
        admin,
        assistant,
    ) -> None:
        other = await assistant_crud.create(test_async_db, name="Chemistry", instructions="Help.")
        await test_async_db.commit()
        document = await document_service.upload_document(admin, assistant.id, b"x", "x.txt", "text/plain")

        with pytest.raises(OwnershipMismatch):
            await document_service.delete_document(admin, other.id, document.id)

        assert await document_crud.exists(test_async_db, document.id)

    @pytest.mark.asyncio
    async def test_remote_cleanup_failure_still_removes_locally(
        self,
        document_service: DocumentService,
        test_async_db,
        fake_gateway,
        admin,
        assistant,
    ) -> None:
        document = await document_service.upload_document(admin, assistant.id, b"x", "x.txt", "text/plain")
        fake_gateway.fail_cleanup = True

        await document_service.delete_document(admin, assistant.id, document.id)

        assert not await document_crud.exists(test_async_db, document.id)

    @pytest.mark.asyncio
    async def test_missing_document(self, document_service: DocumentService, admin, assistant) -> None:
        with pytest.raises(NotFound):
            await document_service.delete_document(admin, assistant.id, assistant.id)


class TestDeleteAssistant:
    """Test suite for assistant deletion and remote teardown."""

    @pytest.mark.asyncio
    async def test_delete_tears_down_and_keeps_history(
        self,
        document_service: DocumentService,
        synchronizer,
        test_async_db,
        fake_gateway,
        admin,
        alice,
        assistant,
        alice_session,
    ) -> None:
        await document_service.upload_document(admin, assistant.id, b"x", "x.txt", "text/plain")
        await message_crud.append(test_async_db, alice_session.id, MessageRole.USER, "Hello")
        await test_async_db.commit()
        service = AssistantService(db=test_async_db, synchronizer=synchronizer)

        await service.delete_assistant(admin, assistant.id)

        assert fake_gateway.deleted_indexes == ["vs_1"]
        assert fake_gateway.deleted_files == ["file_1"]
        assert await document_crud.list_by_assistant(test_async_db, assistant.id) == []

        session = await session_crud.get_by_id(test_async_db, alice_session.id, fresh=True)
        assert session.assistant_id is None
        assert len(await message_crud.list_by_session(test_async_db, alice_session.id)) == 1

    @pytest.mark.asyncio
    async def test_remote_teardown_failure_does_not_block_delete(
        self,
        synchronizer,
        test_async_db,
        fake_gateway,
        admin,
        assistant,
    ) -> None:
        await assistant_crud.update_by_id(test_async_db, assistant.id, vector_store_id="vs_gone")
        await test_async_db.commit()
        fake_gateway.fail_cleanup = True
        service = AssistantService(db=test_async_db, synchronizer=synchronizer)

        await service.delete_assistant(admin, assistant.id)

        assert not await assistant_crud.exists(test_async_db, assistant.id)


class TestRegistrationRoundTrip:
    @pytest.mark.asyncio
    async def test_register_remove_register(
        self,
        document_service: DocumentService,
        test_async_db,
        fake_gateway,
        admin,
        assistant,
    ) -> None:
        first = await document_service.upload_document(admin, assistant.id, b"v1", "notes.txt", "text/plain")
        assert fake_gateway.indexes["vs_1"] == [first.openai_file_id]

        await document_service.delete_document(admin, assistant.id, first.id)
        assert fake_gateway.indexes["vs_1"] == []
        assert await document_service.list_documents(admin, assistant.id) == []

        second = await document_service.upload_document(admin, assistant.id, b"v2", "notes.txt", "text/plain")
        listed = await document_service.list_documents(admin, assistant.id)

        assert [d.id for d in listed] == [second.id]
        assert fake_gateway.indexes["vs_1"] == [second.openai_file_id]
        assert fake_gateway.create_index_calls == 1
