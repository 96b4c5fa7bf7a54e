"""
Message CRUD operations.

Session-scoped, append-only message persistence. Replaces an external
chat-history store with a plain table so history, citations and session
rows share one transaction.

Dependencies: sqlalchemy, assistant_hub.boundary.db.models.message_model
System role: Conversation history persistence operations
"""

from datetime import timedelta
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from assistant_hub.boundary.db.base import utcnow
from assistant_hub.boundary.db.CRUD.base_crud import BaseCRUD
from assistant_hub.boundary.db.models.message_model import MessageModel, MessageRole


class MessageCRUD(BaseCRUD[MessageModel]):
    """
    CRUD operations for MessageModel.

    created_at is kept strictly increasing within a session so that
    ordering by timestamp matches insertion order even when the clock
    resolution is coarse.
    """

    def __init__(self) -> None:
        """Initialize MessageCRUD with MessageModel."""
        super().__init__(MessageModel)

    async def _latest_timestamp(self, session: AsyncSession, session_id: UUID):
        stmt = select(func.max(MessageModel.created_at)).where(
            MessageModel.session_id == session_id
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def append(
        self,
        session: AsyncSession,
        session_id: UUID,
        role: MessageRole,
        content: str,
        citations: list[dict[str, Any]] | None = None,
    ) -> MessageModel:
        """
        Append a message to a session.

        Args:
            session: Async database session
            session_id: Owning session UUID
            role: Message author
            content: Message text
            citations: Citation dicts; an empty list is stored as NULL

        Returns:
            Created MessageModel
        """
        created_at = utcnow()
        latest = await self._latest_timestamp(session, session_id)
        if latest is not None:
            # SQLite hands back naive datetimes
            if latest.tzinfo is None:
                latest = latest.replace(tzinfo=created_at.tzinfo)
            if created_at <= latest:
                created_at = latest + timedelta(microseconds=1)

        return await self.create(
            session,
            session_id=session_id,
            role=role,
            content=content,
            citations=citations or None,
            created_at=created_at,
        )

    async def list_by_session(
        self,
        session: AsyncSession,
        session_id: UUID,
    ) -> Sequence[MessageModel]:
        """
        List a session's messages in creation order.

        Args:
            session: Async database session
            session_id: Session UUID

        Returns:
            Sequence of MessageModels, oldest first
        """
        stmt = (
            select(MessageModel)
            .where(MessageModel.session_id == session_id)
            .order_by(MessageModel.created_at)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def clear_session(self, session: AsyncSession, session_id: UUID) -> int:
        """
        Delete every message in a session.

        Returns:
            Number of messages deleted
        """
        stmt = delete(MessageModel).where(MessageModel.session_id == session_id)
        result = await session.execute(stmt)
        return result.rowcount


message_crud = MessageCRUD()
