"""
Chat service for multi-turn conversations with an assistant.

Runs one turn: ownership check, write-ahead of the user message, the
answering call chained to the previous turn through the session's
continuation token, citation normalization and persistence of the
answer. Turns on one session are serialized.

Supports streaming via stream_converse(); a streamed turn runs in a
detached task with its own database session so it completes and persists
even if the client goes away.

Dependencies: assistant_hub.boundary.answering, assistant_hub.boundary.db, assistant_hub.core
System role: Conversation engine
"""

import asyncio
import logging
from collections.abc import AsyncGenerator
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from assistant_hub.boundary.answering.answering_schemas import (
    AnswerRequest,
    AnswerResult,
    GatewayDelta,
)
from assistant_hub.boundary.answering.gateway import AnsweringGateway
from assistant_hub.boundary.db.CRUD.assistant_crud import assistant_crud
from assistant_hub.boundary.db.CRUD.document_crud import document_crud
from assistant_hub.boundary.db.CRUD.message_crud import message_crud
from assistant_hub.boundary.db.CRUD.session_crud import session_crud
from assistant_hub.boundary.db.models.assistant_model import AssistantModel
from assistant_hub.boundary.db.models.message_model import MessageRole
from assistant_hub.boundary.db.models.session_model import SessionModel
from assistant_hub.core.citation_builder import CitationBuilder
from assistant_hub.core.exceptions import (
    AssistantHubError,
    IncompleteStream,
    InvalidInput,
    NoAssistantSelected,
    SessionNotFound,
    UpstreamFailure,
)
from assistant_hub.core.keyed_lock import KeyedLock
from assistant_hub.core.stream_adapter import (
    citations_event,
    delta_event,
    error_event,
    single_event,
)
from assistant_hub.models.chat import TurnResult
from assistant_hub.models.streaming import StreamEvent
from assistant_hub.observability.log_utils import preview

logger = logging.getLogger(__name__)

# Strong references to detached streaming turns
_running_turns: set[asyncio.Task] = set()


class ChatService:
    """
    Chat service for conversational turns.

    Coordinates session validation, request construction, the answering
    call, continuation token chaining and message persistence.
    """

    def __init__(
        self,
        db: AsyncSession,
        gateway: AnsweringGateway,
        turn_locks: KeyedLock,
        session_factory: async_sessionmaker[AsyncSession],
        citation_builder: CitationBuilder | None = None,
        default_model: str = "gpt-4o",
    ) -> None:
        """
        Initialize chat service.

        Args:
            db: AsyncSession for database operations
            gateway: Remote answering capability
            turn_locks: Per-session turn locks shared across requests
            session_factory: Factory for the database sessions of streamed turns
            citation_builder: Citation normalizer
            default_model: Model used when the assistant has none
        """
        self.db = db
        self.gateway = gateway
        self.turn_locks = turn_locks
        self.session_factory = session_factory
        self.citation_builder = citation_builder or CitationBuilder()
        self.default_model = default_model

    async def converse(self, session_id: UUID, user_id: UUID, text: str) -> TurnResult:
        """
        Run one non-streaming turn.

        Flow:
        1. Verify the session exists and belongs to the user
        2. Load the session's assistant
        3. Persist the user message and commit
        4. Call the answering service with the previous continuation token
        5. Overwrite the continuation token with the new one
        6. Normalize citations
        7. Persist the assistant message
        8. Return content and citations

        Args:
            session_id: Session UUID
            user_id: Requesting user UUID
            text: User message

        Returns:
            TurnResult: Answer content and citations

        Raises:
            InvalidInput: If the message is empty
            SessionNotFound: If the session is missing or not the user's
            NoAssistantSelected: If the session has no assistant
            UpstreamFailure: If the answering call fails (user message is kept)
        """
        text = self._validate_text(text)
        async with self.turn_locks.hold(session_id):
            session, assistant = await self._begin_turn(self.db, session_id, user_id, text)
            result = await self.gateway.answer(self._build_request(session, assistant, text))
            return await self._finish_turn(self.db, session, assistant, result)

    async def check_turn(self, session_id: UUID, user_id: UUID, text: str) -> str:
        """
        Validate a turn without side effects.

        Lets the transport reject bad requests with a regular error response
        before a stream is opened. The turn itself repeats the checks.

        Returns:
            str: Normalized message text
        """
        text = self._validate_text(text)
        session = await session_crud.get_by_id(self.db, session_id)
        await self._resolve_assistant(self.db, session, session_id, user_id)
        return text

    async def stream_converse(
        self,
        session_id: UUID,
        user_id: UUID,
        text: str,
    ) -> AsyncGenerator[StreamEvent, None]:
        """
        Run one streaming turn.

        Yields delta events in arrival order, then a citations event and a
        done event. Failures arrive as a single error event. Closing the
        generator early stops delivery only; the turn still completes.

        Does not touch the request database session; transports call
        check_turn() first to reject bad requests with a regular error.

        Args:
            session_id: Session UUID
            user_id: Requesting user UUID
            text: User message

        Yields:
            StreamEvent: delta*, citations, done | error
        """
        text = self._validate_text(text)
        queue: asyncio.Queue[StreamEvent | None] = asyncio.Queue()

        task = asyncio.create_task(self._run_streaming_turn(session_id, user_id, text, queue))
        _running_turns.add(task)
        task.add_done_callback(_running_turns.discard)

        while True:
            event = await queue.get()
            if event is None:
                break
            yield event

    async def _run_streaming_turn(
        self,
        session_id: UUID,
        user_id: UUID,
        text: str,
        queue: asyncio.Queue,
    ) -> None:
        log_context = {"session_id": str(session_id)}
        try:
            async with self.session_factory() as db:
                async with self.turn_locks.hold(session_id):
                    session, assistant = await self._begin_turn(db, session_id, user_id, text)
                    completion: AnswerResult | None = None
                    async for item in self.gateway.stream_answer(
                        self._build_request(session, assistant, text)
                    ):
                        if isinstance(item, GatewayDelta):
                            queue.put_nowait(delta_event(item.text))
                        else:
                            completion = item.result
                    if completion is None:
                        raise IncompleteStream()
                    result = await self._finish_turn(db, session, assistant, completion)

            queue.put_nowait(citations_event(result))
            queue.put_nowait(single_event(result))
        except AssistantHubError as exc:
            logger.warning(
                "Streaming turn failed",
                extra={**log_context, "kind": exc.kind, "error": exc.message},
            )
            queue.put_nowait(error_event(exc))
        except Exception:
            logger.exception("Streaming turn crashed", extra=log_context)
            queue.put_nowait(error_event(UpstreamFailure("Unexpected error while answering")))
        finally:
            queue.put_nowait(None)

    def _validate_text(self, text: str) -> str:
        if text is None or not text.strip():
            raise InvalidInput("Message is required", field="message")
        return text

    async def _resolve_assistant(
        self,
        db: AsyncSession,
        session: SessionModel | None,
        session_id: UUID,
        user_id: UUID,
    ) -> AssistantModel:
        if session is None or session.user_id is None or session.user_id != user_id:
            raise SessionNotFound(str(session_id))
        if session.assistant_id is None:
            raise NoAssistantSelected(str(session_id))
        assistant = await assistant_crud.get_by_id(db, session.assistant_id)
        if assistant is None:
            raise NoAssistantSelected(str(session_id))
        return assistant

    async def _begin_turn(
        self,
        db: AsyncSession,
        session_id: UUID,
        user_id: UUID,
        text: str,
    ) -> tuple[SessionModel, AssistantModel]:
        """Steps 1-3. Must run under the session's turn lock."""
        # Fresh read: the previous lock holder may have moved the token
        session = await session_crud.get_by_id(db, session_id, fresh=True)
        assistant = await self._resolve_assistant(db, session, session_id, user_id)

        await message_crud.append(db, session.id, MessageRole.USER, text)
        await db.commit()
        logger.info(
            "User message persisted",
            extra={
                "session_id": str(session_id),
                "assistant_id": str(assistant.id),
                "has_context": session.response_id is not None,
                "message_preview": preview(text),
            },
        )
        return session, assistant

    def _build_request(
        self,
        session: SessionModel,
        assistant: AssistantModel,
        text: str,
    ) -> AnswerRequest:
        return AnswerRequest(
            model=assistant.model or self.default_model,
            input=text,
            instructions=assistant.instructions,
            vector_store_id=assistant.vector_store_id,
            previous_response_id=session.response_id,
        )

    async def _finish_turn(
        self,
        db: AsyncSession,
        session: SessionModel,
        assistant: AssistantModel,
        result: AnswerResult,
    ) -> TurnResult:
        """Steps 5-8."""
        filenames = {}
        if result.citations:
            filenames = await document_crud.filenames_by_file_id(db, assistant.id)
        citations = self.citation_builder.build_citations(result.citations, filenames)

        await session_crud.set_continuation_token(db, session.id, result.turn_token)
        await message_crud.append(
            db,
            session.id,
            MessageRole.ASSISTANT,
            result.text,
            [c.model_dump() for c in citations],
        )
        await db.commit()

        logger.info(
            "Turn completed",
            extra={
                "session_id": str(session.id),
                "response_id": result.turn_token,
                "citations": len(citations),
                "dropped_citations": len(result.citations) - len(citations),
            },
        )
        return TurnResult(content=result.text, citations=citations)
