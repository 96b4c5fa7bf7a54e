"""
Shared test fixtures and configuration for entire test suite.

Provides: SQLite async database, in-memory answering gateway, seeded users
and assistants, service collaborators
Dependencies: pytest, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import asyncio
from collections.abc import AsyncIterator, Sequence
from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from assistant_hub.boundary.answering.answering_schemas import (
    AnswerRequest,
    AnswerResult,
    GatewayCompletion,
    GatewayDelta,
    RawCitation,
)
from assistant_hub.boundary.db.base import Base
from assistant_hub.boundary.db.connection import build_async_engine, make_session_factory
from assistant_hub.boundary.db.CRUD.assistant_crud import assistant_crud
from assistant_hub.boundary.db.CRUD.session_crud import session_crud
from assistant_hub.boundary.db.CRUD.user_crud import user_crud
from assistant_hub.boundary.db.models import AssistantModel, SessionModel, UserModel, UserRole
from assistant_hub.core.document_stager import DocumentStager
from assistant_hub.core.exceptions import IncompleteStream, IndexingFailed, UpstreamFailure
from assistant_hub.core.keyed_lock import KeyedLock
from assistant_hub.core.knowledge_base import KnowledgeBaseSynchronizer

ALLOWED_TYPES = ["application/pdf", "text/plain", "text/markdown"]
MAX_FILE_SIZE = 1024


class FakeGateway:
    """
    In-memory answering gateway.

    Hands out continuation tokens resp_1, resp_2, ... in call order and
    records every request. Failure switches make individual operations
    raise the errors the real gateway raises.
    """

    def __init__(self) -> None:
        self.indexes: dict[str, list[str]] = {}
        self.files: dict[str, bytes] = {}
        self.requests: list[AnswerRequest] = []
        self.create_index_calls = 0
        self.deleted_indexes: list[str] = []
        self.deleted_files: list[str] = []
        self.answer_text = "Photosynthesis converts light into chemical energy."
        self.citations: list[RawCitation] = []
        self.stream_chunks = ["Photosynthesis ", "converts light."]
        self.answer_delay = 0.0
        self.fail_answer: Exception | None = None
        self.fail_upload = False
        self.fail_indexing = False
        self.fail_cleanup = False
        self.truncate_stream = False
        self.closed = False
        self._tokens = 0
        self._file_ids = 0

    def _next_token(self) -> str:
        self._tokens += 1
        return f"resp_{self._tokens}"

    async def create_index(self, name: str) -> str:
        self.create_index_calls += 1
        await asyncio.sleep(0)
        vector_store_id = f"vs_{self.create_index_calls}"
        self.indexes[vector_store_id] = []
        return vector_store_id

    async def delete_index(self, vector_store_id: str) -> None:
        if self.fail_cleanup:
            raise UpstreamFailure("index delete failed", operation="delete_index")
        self.indexes.pop(vector_store_id, None)
        self.deleted_indexes.append(vector_store_id)

    async def upload_file(self, data: bytes, filename: str) -> str:
        if self.fail_upload:
            raise UpstreamFailure("upload failed", operation="upload_file")
        self._file_ids += 1
        file_id = f"file_{self._file_ids}"
        self.files[file_id] = data
        return file_id

    async def delete_file(self, file_id: str) -> None:
        if self.fail_cleanup:
            raise UpstreamFailure("file delete failed", operation="delete_file")
        self.files.pop(file_id, None)
        self.deleted_files.append(file_id)

    async def add_files_to_index(self, vector_store_id: str, file_ids: Sequence[str]) -> None:
        await asyncio.sleep(0)
        if self.fail_indexing:
            raise IndexingFailed("File batch ended with status 'failed'", operation="add_files_to_index")
        self.indexes[vector_store_id].extend(file_ids)

    async def remove_file_from_index(self, vector_store_id: str, file_id: str) -> None:
        if self.fail_cleanup:
            raise UpstreamFailure("detach failed", operation="remove_file_from_index")
        if file_id in self.indexes.get(vector_store_id, []):
            self.indexes[vector_store_id].remove(file_id)

    async def answer(self, request: AnswerRequest) -> AnswerResult:
        self.requests.append(request)
        if self.answer_delay:
            await asyncio.sleep(self.answer_delay)
        if self.fail_answer is not None:
            raise self.fail_answer
        return AnswerResult(
            text=self.answer_text,
            citations=list(self.citations),
            turn_token=self._next_token(),
        )

    async def stream_answer(self, request: AnswerRequest) -> AsyncIterator[GatewayDelta | GatewayCompletion]:
        self.requests.append(request)
        if self.fail_answer is not None:
            raise self.fail_answer
        for chunk in self.stream_chunks:
            await asyncio.sleep(0)
            yield GatewayDelta(text=chunk)
        if self.truncate_stream:
            raise IncompleteStream()
        yield GatewayCompletion(
            result=AnswerResult(
                text="".join(self.stream_chunks),
                citations=list(self.citations),
                turn_token=self._next_token(),
            )
        )

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_gateway() -> FakeGateway:
    """Provide in-memory answering gateway."""
    return FakeGateway()


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    """Provide staging directory."""
    return tmp_path / "uploads"


@pytest.fixture
def stager(upload_dir: Path) -> DocumentStager:
    """Provide stager with a small size limit."""
    return DocumentStager(upload_dir, MAX_FILE_SIZE, ALLOWED_TYPES)


@pytest.fixture
def turn_locks() -> KeyedLock:
    return KeyedLock("session-turn")


@pytest.fixture
def provisioning_locks() -> KeyedLock:
    return KeyedLock("assistant-provisioning")


@pytest.fixture
def synchronizer(
    fake_gateway: FakeGateway,
    stager: DocumentStager,
    provisioning_locks: KeyedLock,
) -> KnowledgeBaseSynchronizer:
    """Provide synchronizer wired to the fake gateway."""
    return KnowledgeBaseSynchronizer(fake_gateway, stager, provisioning_locks)


@pytest.fixture
async def session_factory(tmp_path: Path) -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    """
    File-backed SQLite database so concurrent sessions see each other's commits.

    Yields:
        async_sessionmaker: Factory bound to a fresh schema
    """
    engine = build_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield make_session_factory(engine)

    await engine.dispose()


@pytest.fixture
async def test_async_db(session_factory) -> AsyncIterator[AsyncSession]:
    """Provide a database session for one test."""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def admin(test_async_db: AsyncSession) -> UserModel:
    user = await user_crud.create(test_async_db, username="operator", role=UserRole.ADMIN)
    await test_async_db.commit()
    return user


@pytest.fixture
async def alice(test_async_db: AsyncSession) -> UserModel:
    user = await user_crud.create(test_async_db, username="alice", role=UserRole.USER)
    await test_async_db.commit()
    return user


@pytest.fixture
async def bob(test_async_db: AsyncSession) -> UserModel:
    user = await user_crud.create(test_async_db, username="bob", role=UserRole.USER)
    await test_async_db.commit()
    return user


@pytest.fixture
async def assistant(test_async_db: AsyncSession) -> AssistantModel:
    """Provide an assistant with no knowledge base yet."""
    created = await assistant_crud.create(
        test_async_db,
        name="Biology Tutor",
        instructions="Answer from the course notes.",
        model="gpt-4o",
    )
    await test_async_db.commit()
    return created


@pytest.fixture
async def alice_session(test_async_db: AsyncSession, alice: UserModel, assistant: AssistantModel) -> SessionModel:
    """Provide an uninitialized session owned by alice."""
    created = await session_crud.create(
        test_async_db,
        user_id=alice.id,
        assistant_id=assistant.id,
        title="New Conversation",
    )
    await test_async_db.commit()
    return created
