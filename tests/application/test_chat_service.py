"""
Test suite for ChatService.

Tests turn orchestration against a real SQLite schema and an in-memory
gateway: continuation token chaining, write-ahead of the user message,
per-session serialization, citation normalization and streamed turns.

System role: Verification of the conversation engine
"""

import asyncio

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from assistant_hub.application.services import chat_service as chat_module
from assistant_hub.application.services.chat_service import ChatService
from assistant_hub.boundary.answering.answering_schemas import RawCitation
from assistant_hub.boundary.db.CRUD.document_crud import document_crud
from assistant_hub.boundary.db.CRUD.message_crud import message_crud
from assistant_hub.boundary.db.CRUD.session_crud import session_crud
from assistant_hub.boundary.db.models import DocumentStatus, MessageRole
from assistant_hub.core.exceptions import (
    InvalidInput,
    NoAssistantSelected,
    SessionNotFound,
    UpstreamFailure,
)
from assistant_hub.models.streaming import StreamEventType


@pytest.fixture
def chat_service(test_async_db, fake_gateway, turn_locks, session_factory) -> ChatService:
    """Provide ChatService wired to the test database and fake gateway."""
    return ChatService(
        db=test_async_db,
        gateway=fake_gateway,
        turn_locks=turn_locks,
        session_factory=session_factory,
    )


async def token_of(db: AsyncSession, session_id) -> str | None:
    session = await session_crud.get_by_id(db, session_id, fresh=True)
    return session.response_id


async def drain_streaming_turns() -> None:
    await asyncio.gather(*list(chat_module._running_turns))


class TestChatServiceConverse:
    """Test suite for ChatService.converse()."""

    @pytest.mark.asyncio
    async def test_first_turn_without_documents(
        self,
        chat_service: ChatService,
        test_async_db,
        fake_gateway,
        alice,
        alice_session,
    ) -> None:
        result = await chat_service.converse(alice_session.id, alice.id, "What is photosynthesis?")

        assert result.content == fake_gateway.answer_text
        assert result.citations == []
        assert await token_of(test_async_db, alice_session.id) == "resp_1"

        request = fake_gateway.requests[0]
        assert request.previous_response_id is None
        assert request.vector_store_id is None
        assert request.instructions == "Answer from the course notes."

        messages = await message_crud.list_by_session(test_async_db, alice_session.id)
        assert [m.role for m in messages] == [MessageRole.USER, MessageRole.ASSISTANT]
        assert messages[0].content == "What is photosynthesis?"
        assert messages[1].citations is None

    @pytest.mark.asyncio
    async def test_token_after_n_turns_is_nth_token(
        self,
        chat_service: ChatService,
        test_async_db,
        fake_gateway,
        alice,
        alice_session,
    ) -> None:
        for turn in range(3):
            await chat_service.converse(alice_session.id, alice.id, f"question {turn}")

        assert await token_of(test_async_db, alice_session.id) == "resp_3"
        assert [r.previous_response_id for r in fake_gateway.requests] == [None, "resp_1", "resp_2"]

    @pytest.mark.asyncio
    async def test_user_message_survives_upstream_failure(
        self,
        chat_service: ChatService,
        test_async_db,
        fake_gateway,
        alice,
        alice_session,
    ) -> None:
        fake_gateway.fail_answer = UpstreamFailure("service unavailable", operation="answer")

        with pytest.raises(UpstreamFailure):
            await chat_service.converse(alice_session.id, alice.id, "Will this be kept?")

        messages = await message_crud.list_by_session(test_async_db, alice_session.id)
        assert [(m.role, m.content) for m in messages] == [(MessageRole.USER, "Will this be kept?")]
        assert await token_of(test_async_db, alice_session.id) is None

    @pytest.mark.asyncio
    async def test_other_users_session_is_not_found(
        self,
        chat_service: ChatService,
        test_async_db,
        fake_gateway,
        bob,
        alice_session,
    ) -> None:
        with pytest.raises(SessionNotFound):
            await chat_service.converse(alice_session.id, bob.id, "Let me in")

        assert fake_gateway.requests == []
        assert await message_crud.list_by_session(test_async_db, alice_session.id) == []

    @pytest.mark.asyncio
    async def test_empty_message_is_rejected(self, chat_service: ChatService, alice, alice_session) -> None:
        with pytest.raises(InvalidInput):
            await chat_service.converse(alice_session.id, alice.id, "   ")

    @pytest.mark.asyncio
    async def test_session_without_assistant(
        self,
        chat_service: ChatService,
        test_async_db,
        alice,
    ) -> None:
        orphan = await session_crud.create(test_async_db, user_id=alice.id, assistant_id=None, title="Orphan")
        await test_async_db.commit()

        with pytest.raises(NoAssistantSelected) as exc_info:
            await chat_service.converse(orphan.id, alice.id, "Hello?")

        assert exc_info.value.kind == "invalid_input"

    @pytest.mark.asyncio
    async def test_citations_resolve_filenames(
        self,
        chat_service: ChatService,
        test_async_db,
        fake_gateway,
        alice,
        assistant,
        alice_session,
    ) -> None:
        await document_crud.create(
            test_async_db,
            assistant_id=assistant.id,
            filename="abc.pdf",
            original_name="biology.pdf",
            size=10,
            mime_type="application/pdf",
            storage_path="/tmp/abc.pdf",
            openai_file_id="file_1",
            vector_store_file_id="file_1",
            status=DocumentStatus.COMPLETED,
        )
        await test_async_db.commit()
        fake_gateway.citations = [
            RawCitation(file_id="file_1", quote="Light is converted."),
            RawCitation(file_id="file_1", quote="Light is converted."),
            RawCitation(file_id="file_2", index=0, source_text="x"),
        ]

        result = await chat_service.converse(alice_session.id, alice.id, "Cite it")

        assert len(result.citations) == 1
        assert result.citations[0].filename == "biology.pdf"
        messages = await message_crud.list_by_session(test_async_db, alice_session.id)
        assert messages[-1].citations == [
            {"file_id": "file_1", "filename": "biology.pdf", "quote": "Light is converted."}
        ]

    @pytest.mark.asyncio
    async def test_concurrent_turns_are_serialized(
        self,
        session_factory,
        test_async_db,
        fake_gateway,
        turn_locks,
        alice,
        alice_session,
    ) -> None:
        fake_gateway.answer_delay = 0.01

        async def turn(text: str):
            async with session_factory() as db:
                service = ChatService(db, fake_gateway, turn_locks, session_factory)
                return await service.converse(alice_session.id, alice.id, text)

        await asyncio.gather(turn("first"), turn("second"))

        assert await token_of(test_async_db, alice_session.id) == "resp_2"
        assert [r.previous_response_id for r in fake_gateway.requests] == [None, "resp_1"]

        messages = await message_crud.list_by_session(test_async_db, alice_session.id)
        assert [m.role for m in messages] == [
            MessageRole.USER,
            MessageRole.ASSISTANT,
            MessageRole.USER,
            MessageRole.ASSISTANT,
        ]
        assert {m.content for m in messages if m.role == MessageRole.USER} == {"first", "second"}


class TestChatServiceStreaming:
    """Test suite for ChatService.stream_converse()."""

    @pytest.mark.asyncio
    async def test_stream_emits_deltas_then_citations_then_done(
        self,
        chat_service: ChatService,
        test_async_db,
        fake_gateway,
        alice,
        alice_session,
    ) -> None:
        events = [e async for e in chat_service.stream_converse(alice_session.id, alice.id, "Explain")]

        kinds = [e.event for e in events]
        assert kinds == [
            StreamEventType.DELTA,
            StreamEventType.DELTA,
            StreamEventType.CITATIONS,
            StreamEventType.DONE,
        ]
        assert "".join(e.data["content"] for e in events[:2]) == "Photosynthesis converts light."
        assert events[-1].data["content"] == "Photosynthesis converts light."

        assert await token_of(test_async_db, alice_session.id) == "resp_1"
        messages = await message_crud.list_by_session(test_async_db, alice_session.id)
        assert [m.content for m in messages] == ["Explain", "Photosynthesis converts light."]

    @pytest.mark.asyncio
    async def test_turn_completes_after_consumer_leaves(
        self,
        chat_service: ChatService,
        test_async_db,
        alice,
        alice_session,
    ) -> None:
        stream = chat_service.stream_converse(alice_session.id, alice.id, "Explain")
        first = await stream.__anext__()
        await stream.aclose()
        await drain_streaming_turns()

        assert first.event == StreamEventType.DELTA
        assert await token_of(test_async_db, alice_session.id) == "resp_1"
        messages = await message_crud.list_by_session(test_async_db, alice_session.id)
        assert len(messages) == 2

    @pytest.mark.asyncio
    async def test_truncated_stream_ends_with_error(
        self,
        chat_service: ChatService,
        test_async_db,
        fake_gateway,
        alice,
        alice_session,
    ) -> None:
        fake_gateway.truncate_stream = True

        events = [e async for e in chat_service.stream_converse(alice_session.id, alice.id, "Explain")]

        assert events[-1].event == StreamEventType.ERROR
        assert events[-1].data["code"] == "incomplete_stream"
        assert await token_of(test_async_db, alice_session.id) is None
        messages = await message_crud.list_by_session(test_async_db, alice_session.id)
        assert [m.role for m in messages] == [MessageRole.USER]

    @pytest.mark.asyncio
    async def test_foreign_session_streams_single_error(
        self,
        chat_service: ChatService,
        bob,
        alice_session,
    ) -> None:
        events = [e async for e in chat_service.stream_converse(alice_session.id, bob.id, "Hi")]

        assert len(events) == 1
        assert events[0].data["code"] == "not_found"

    @pytest.mark.asyncio
    async def test_check_turn_rejects_before_streaming(
        self,
        chat_service: ChatService,
        bob,
        alice_session,
    ) -> None:
        with pytest.raises(SessionNotFound):
            await chat_service.check_turn(alice_session.id, bob.id, "Hi")
