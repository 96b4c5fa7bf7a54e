"""
Access grant CRUD operations.

Dependencies: sqlalchemy, assistant_hub.boundary.db.models.access_grant_model
System role: Authorization data persistence
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from assistant_hub.boundary.db.CRUD.base_crud import BaseCRUD
from assistant_hub.boundary.db.models.access_grant_model import AccessGrantModel


class AccessGrantCRUD(BaseCRUD[AccessGrantModel]):
    """
    CRUD operations for AccessGrantModel.

    Grants are addressed by their (user_id, assistant_id) pair rather than
    by surrogate id.
    """

    def __init__(self) -> None:
        super().__init__(AccessGrantModel)

    async def get_pair(
        self,
        session: AsyncSession,
        user_id: UUID,
        assistant_id: UUID,
    ) -> AccessGrantModel | None:
        """Retrieve the grant for a (user, assistant) pair, if any."""
        stmt = select(AccessGrantModel).where(
            AccessGrantModel.user_id == user_id,
            AccessGrantModel.assistant_id == assistant_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def has_grant(
        self,
        session: AsyncSession,
        user_id: UUID,
        assistant_id: UUID,
    ) -> bool:
        """Whether the user holds a grant for the assistant."""
        return await self.get_pair(session, user_id, assistant_id) is not None

    async def grant(
        self,
        session: AsyncSession,
        user_id: UUID,
        assistant_id: UUID,
    ) -> AccessGrantModel:
        """
        Create a grant, returning the existing one when already present.

        Args:
            session: Async database session
            user_id: User UUID
            assistant_id: Assistant UUID

        Returns:
            The AccessGrantModel for the pair
        """
        existing = await self.get_pair(session, user_id, assistant_id)
        if existing is not None:
            return existing
        return await self.create(session, user_id=user_id, assistant_id=assistant_id)

    async def revoke(
        self,
        session: AsyncSession,
        user_id: UUID,
        assistant_id: UUID,
    ) -> bool:
        """
        Delete the grant for a pair.

        Returns:
            True if a grant was removed, False if none existed
        """
        stmt = delete(AccessGrantModel).where(
            AccessGrantModel.user_id == user_id,
            AccessGrantModel.assistant_id == assistant_id,
        )
        result = await session.execute(stmt)
        return result.rowcount > 0

    async def list_for_user(
        self,
        session: AsyncSession,
        user_id: UUID,
    ) -> Sequence[AccessGrantModel]:
        """List a user's grants, oldest first."""
        stmt = (
            select(AccessGrantModel)
            .where(AccessGrantModel.user_id == user_id)
            .order_by(AccessGrantModel.created_at)
        )
        result = await session.execute(stmt)
        return result.scalars().all()


access_grant_crud = AccessGrantCRUD()
