"""
Session service orchestrator.

Coordinates session lifecycle, history and export. Every lookup reports
a foreign session exactly like a missing one.

Dependencies: assistant_hub.boundary.db.CRUD, assistant_hub.core
System role: Session use case orchestration
"""

import logging
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from assistant_hub.boundary.db.CRUD.access_grant_crud import access_grant_crud
from assistant_hub.boundary.db.CRUD.assistant_crud import assistant_crud
from assistant_hub.boundary.db.CRUD.message_crud import message_crud
from assistant_hub.boundary.db.CRUD.session_crud import session_crud
from assistant_hub.boundary.db.models.message_model import MessageModel
from assistant_hub.boundary.db.models.session_model import DEFAULT_SESSION_TITLE, SessionModel
from assistant_hub.boundary.db.models.user_model import UserModel
from assistant_hub.core.access_guard import ensure_can_converse, ensure_session_owner, is_operator
from assistant_hub.core.exceptions import NotFound
from assistant_hub.core.exporter import normalize_format, render_export

logger = logging.getLogger(__name__)


class SessionService:
    """Session service orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        """
        Initialize session service with async database session.

        Args:
            db: Async SQLAlchemy session
        """
        self.db = db

    async def create_session(
        self,
        user: UserModel,
        assistant_id: UUID,
        title: str | None = None,
        is_test: bool = False,
    ) -> SessionModel:
        """
        Create a session with no continuation token.

        Args:
            user: Owning user
            assistant_id: Assistant to converse with
            title: Optional title, defaults to "New Conversation"
            is_test: Operator dry-run flag

        Returns:
            SessionModel: Created session

        Raises:
            NotFound: If the assistant does not exist
            AccessDenied: If the user is neither operator nor grant holder
        """
        assistant = await assistant_crud.get_by_id(self.db, assistant_id)
        if assistant is None:
            raise NotFound("assistant", str(assistant_id))
        has_grant = is_operator(user) or await access_grant_crud.has_grant(
            self.db, user.id, assistant_id
        )
        ensure_can_converse(user, assistant, has_grant)

        session = await session_crud.create(
            self.db,
            user_id=user.id,
            assistant_id=assistant_id,
            title=title or DEFAULT_SESSION_TITLE,
            is_test=is_test,
        )
        await self.db.commit()
        logger.info(
            "Session created",
            extra={"session_id": str(session.id), "assistant_id": str(assistant_id), "is_test": is_test},
        )
        return session

    async def list_sessions(
        self,
        user: UserModel,
        assistant_id: UUID | None = None,
        is_test: bool | None = None,
    ) -> Sequence[SessionModel]:
        """List the user's own sessions, most recently updated first."""
        return await session_crud.list_for_user(
            self.db,
            user.id,
            assistant_id=assistant_id,
            is_test=is_test,
        )

    async def get_session(self, user: UserModel, session_id: UUID) -> SessionModel:
        """
        Get one of the user's sessions.

        Raises:
            SessionNotFound: If missing or owned by someone else
        """
        session = await session_crud.get_by_id(self.db, session_id)
        ensure_session_owner(user, session, session_id)
        return session

    async def rename_session(self, user: UserModel, session_id: UUID, title: str) -> SessionModel:
        """Set a session's title."""
        await self.get_session(user, session_id)
        session = await session_crud.update_by_id(self.db, session_id, title=title)
        await self.db.commit()
        return session

    async def delete_session(self, user: UserModel, session_id: UUID) -> None:
        """Delete a session and its messages."""
        await self.get_session(user, session_id)
        await session_crud.delete_by_id(self.db, session_id)
        await self.db.commit()
        logger.info("Session deleted", extra={"session_id": str(session_id)})

    async def get_messages(self, user: UserModel, session_id: UUID) -> Sequence[MessageModel]:
        """Get a session's messages in creation order."""
        await self.get_session(user, session_id)
        return await message_crud.list_by_session(self.db, session_id)

    async def clear_messages(self, user: UserModel, session_id: UUID) -> int:
        """
        Delete a session's messages.

        The continuation token is kept, so the remote conversation context
        survives a cleared history.

        Returns:
            int: Number of messages deleted
        """
        await self.get_session(user, session_id)
        deleted = await message_crud.clear_session(self.db, session_id)
        await self.db.commit()
        return deleted

    async def export_session(self, user: UserModel, session_id: UUID, fmt: str) -> tuple[str, str]:
        """
        Render a session export.

        The session's updated_at is used as the export timestamp, so an
        unchanged session exports identically.

        Args:
            user: Requesting user
            session_id: Session UUID
            fmt: json, markdown, md, text or txt

        Returns:
            tuple[str, str]: (normalized format, rendered document)

        Raises:
            SessionNotFound: If missing or owned by someone else
            InvalidInput: For unknown formats
        """
        resolved = normalize_format(fmt)
        session = await self.get_session(user, session_id)
        messages = await message_crud.list_by_session(self.db, session_id)
        return resolved, render_export(session, messages, resolved, session.updated_at)
