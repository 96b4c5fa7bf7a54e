"""
Session CRUD operations.

Provides Create, Read, Update, Delete operations for SessionModel
with owner-scoped listing.

Dependencies: sqlalchemy, assistant_hub.boundary.db.models.session_model
System role: Session persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from assistant_hub.boundary.db.CRUD.base_crud import BaseCRUD
from assistant_hub.boundary.db.models.session_model import SessionModel


class SessionCRUD(BaseCRUD[SessionModel]):
    """
    CRUD operations for SessionModel.

    Extends BaseCRUD with owner-scoped queries and continuation token
    updates.
    """

    def __init__(self) -> None:
        """Initialize SessionCRUD with SessionModel."""
        super().__init__(SessionModel)

    async def list_for_user(
        self,
        session: AsyncSession,
        user_id: UUID,
        assistant_id: UUID | None = None,
        is_test: bool | None = None,
    ) -> Sequence[SessionModel]:
        """
        List a user's sessions, most recently updated first.

        Args:
            session: Async database session
            user_id: Owning user UUID
            assistant_id: Restrict to sessions with this assistant
            is_test: Restrict to test (True) or real (False) sessions

        Returns:
            Sequence of SessionModels
        """
        stmt = (
            select(SessionModel)
            .where(SessionModel.user_id == user_id)
            .order_by(SessionModel.updated_at.desc())
        )
        if assistant_id is not None:
            stmt = stmt.where(SessionModel.assistant_id == assistant_id)
        if is_test is not None:
            stmt = stmt.where(SessionModel.is_test.is_(is_test))
        result = await session.execute(stmt)
        return result.scalars().all()

    async def set_continuation_token(
        self,
        session: AsyncSession,
        id: UUID,
        response_id: str,
    ) -> SessionModel | None:
        """
        Overwrite the session's continuation token.

        Args:
            session: Async database session
            id: Session UUID
            response_id: Token returned by the most recent turn

        Returns:
            Updated SessionModel if found, None otherwise
        """
        return await self.update_by_id(session, id, response_id=response_id)


session_crud = SessionCRUD()
