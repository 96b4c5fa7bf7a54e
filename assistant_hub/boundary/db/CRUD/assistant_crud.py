"""
Assistant CRUD operations.

Dependencies: sqlalchemy, assistant_hub.boundary.db.models.assistant_model
System role: Assistant persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from assistant_hub.boundary.db.CRUD.base_crud import BaseCRUD
from assistant_hub.boundary.db.models.access_grant_model import AccessGrantModel
from assistant_hub.boundary.db.models.assistant_model import AssistantModel


class AssistantCRUD(BaseCRUD[AssistantModel]):
    """
    CRUD operations for AssistantModel.

    Extends BaseCRUD with active filtering and grant-aware listing.
    """

    def __init__(self) -> None:
        """Initialize AssistantCRUD with AssistantModel."""
        super().__init__(AssistantModel)

    async def list_assistants(
        self,
        session: AsyncSession,
        include_inactive: bool = False,
    ) -> Sequence[AssistantModel]:
        """
        List assistants, newest first.

        Args:
            session: Async database session
            include_inactive: Include assistants whose active flag is off

        Returns:
            Sequence of AssistantModels
        """
        stmt = select(AssistantModel).order_by(AssistantModel.created_at.desc())
        if not include_inactive:
            stmt = stmt.where(AssistantModel.is_active.is_(True))
        result = await session.execute(stmt)
        return result.scalars().all()

    async def list_granted(
        self,
        session: AsyncSession,
        user_id: UUID,
    ) -> Sequence[AssistantModel]:
        """
        List active assistants the user holds an access grant for.

        Args:
            session: Async database session
            user_id: User UUID

        Returns:
            Sequence of AssistantModels ordered by name
        """
        stmt = (
            select(AssistantModel)
            .join(AccessGrantModel, AccessGrantModel.assistant_id == AssistantModel.id)
            .where(AccessGrantModel.user_id == user_id)
            .where(AssistantModel.is_active.is_(True))
            .order_by(AssistantModel.name)
        )
        result = await session.execute(stmt)
        return result.scalars().all()


assistant_crud = AssistantCRUD()
