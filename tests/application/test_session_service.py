"""
Test suite for SessionService.

Tests conversation access rules, per-user isolation, history clearing and
export.

System role: Verification of session management use cases
"""

import json

import pytest

from assistant_hub.application.services.session_service import SessionService
from assistant_hub.boundary.db.CRUD.access_grant_crud import access_grant_crud
from assistant_hub.boundary.db.CRUD.message_crud import message_crud
from assistant_hub.boundary.db.CRUD.session_crud import session_crud
from assistant_hub.boundary.db.models import MessageRole
from assistant_hub.boundary.db.models.session_model import DEFAULT_SESSION_TITLE
from assistant_hub.core.exceptions import AccessDenied, InvalidInput, NotFound, SessionNotFound


@pytest.fixture
def session_service(test_async_db) -> SessionService:
    return SessionService(db=test_async_db)


class TestCreateSession:
    @pytest.mark.asyncio
    async def test_user_without_grant_is_denied(self, session_service, alice, assistant) -> None:
        with pytest.raises(AccessDenied):
            await session_service.create_session(alice, assistant.id)

    @pytest.mark.asyncio
    async def test_user_with_grant_gets_uninitialized_session(
        self,
        session_service,
        test_async_db,
        alice,
        assistant,
    ) -> None:
        await access_grant_crud.grant(test_async_db, alice.id, assistant.id)
        await test_async_db.commit()

        session = await session_service.create_session(alice, assistant.id)

        assert session.user_id == alice.id
        assert session.title == DEFAULT_SESSION_TITLE
        assert session.response_id is None
        assert not session.is_initialized

    @pytest.mark.asyncio
    async def test_operator_needs_no_grant(self, session_service, admin, assistant) -> None:
        session = await session_service.create_session(admin, assistant.id, title="Dry run", is_test=True)

        assert session.is_test
        assert session.title == "Dry run"

    @pytest.mark.asyncio
    async def test_unknown_assistant(self, session_service, admin) -> None:
        with pytest.raises(NotFound):
            await session_service.create_session(admin, admin.id)


class TestSessionIsolation:
    @pytest.mark.asyncio
    async def test_sessions_are_listed_per_user(
        self,
        session_service,
        test_async_db,
        admin,
        alice,
        assistant,
        alice_session,
    ) -> None:
        await session_service.create_session(admin, assistant.id, is_test=True)

        alice_sessions = await session_service.list_sessions(alice)
        admin_sessions = await session_service.list_sessions(admin, is_test=True)

        assert [s.id for s in alice_sessions] == [alice_session.id]
        assert len(admin_sessions) == 1
        assert await session_service.list_sessions(admin, is_test=False) == []

    @pytest.mark.asyncio
    async def test_foreign_session_operations_look_missing(self, session_service, bob, alice_session) -> None:
        with pytest.raises(SessionNotFound):
            await session_service.get_session(bob, alice_session.id)
        with pytest.raises(SessionNotFound):
            await session_service.get_messages(bob, alice_session.id)
        with pytest.raises(SessionNotFound):
            await session_service.export_session(bob, alice_session.id, "json")
        with pytest.raises(SessionNotFound):
            await session_service.delete_session(bob, alice_session.id)

    @pytest.mark.asyncio
    async def test_rename(self, session_service, alice, alice_session) -> None:
        renamed = await session_service.rename_session(alice, alice_session.id, "Cells")

        assert renamed.title == "Cells"


class TestHistory:
    @pytest.mark.asyncio
    async def test_clear_keeps_continuation_token(
        self,
        session_service,
        test_async_db,
        alice,
        alice_session,
    ) -> None:
        await message_crud.append(test_async_db, alice_session.id, MessageRole.USER, "Hi")
        await message_crud.append(test_async_db, alice_session.id, MessageRole.ASSISTANT, "Hello")
        await session_crud.set_continuation_token(test_async_db, alice_session.id, "resp_9")
        await test_async_db.commit()

        deleted = await session_service.clear_messages(alice, alice_session.id)

        assert deleted == 2
        assert await session_service.get_messages(alice, alice_session.id) == []
        session = await session_crud.get_by_id(test_async_db, alice_session.id, fresh=True)
        assert session.response_id == "resp_9"

    @pytest.mark.asyncio
    async def test_delete_removes_messages(self, session_service, test_async_db, alice, alice_session) -> None:
        await message_crud.append(test_async_db, alice_session.id, MessageRole.USER, "Hi")
        await test_async_db.commit()

        await session_service.delete_session(alice, alice_session.id)

        assert await message_crud.list_by_session(test_async_db, alice_session.id) == []

    @pytest.mark.asyncio
    async def test_export_is_repeatable(self, session_service, test_async_db, alice, alice_session) -> None:
        await message_crud.append(test_async_db, alice_session.id, MessageRole.USER, "Hi")
        await message_crud.append(
            test_async_db,
            alice_session.id,
            MessageRole.ASSISTANT,
            "Hello",
            [{"file_id": "file_1", "filename": "a.pdf", "quote": "Hello there."}],
        )
        await test_async_db.commit()

        fmt, first = await session_service.export_session(alice, alice_session.id, "json")
        _, second = await session_service.export_session(alice, alice_session.id, "json")

        assert fmt == "json"
        assert first == second
        data = json.loads(first)
        assert [m["content"] for m in data["messages"]] == ["Hi", "Hello"]
        assert data["messages"][1]["citations"][0]["filename"] == "a.pdf"

    @pytest.mark.asyncio
    async def test_export_format_alias_and_unknown(self, session_service, alice, alice_session) -> None:
        fmt, body = await session_service.export_session(alice, alice_session.id, "md")

        assert fmt == "markdown"
        assert body.startswith("# New Conversation")
        with pytest.raises(InvalidInput):
            await session_service.export_session(alice, alice_session.id, "docx")
