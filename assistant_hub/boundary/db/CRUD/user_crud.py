"""
User CRUD operations.

Dependencies: sqlalchemy, assistant_hub.boundary.db.models.user_model
System role: Principal persistence operations
"""

from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from assistant_hub.boundary.db.CRUD.base_crud import BaseCRUD
from assistant_hub.boundary.db.models.user_model import UserModel


class UserCRUD(BaseCRUD[UserModel]):
    """CRUD operations for UserModel."""

    def __init__(self) -> None:
        super().__init__(UserModel)

    async def get_by_username(
        self,
        session: AsyncSession,
        username: str,
    ) -> UserModel | None:
        """
        Retrieve a user by unique username.

        Args:
            session: Async database session
            username: Login name

        Returns:
            UserModel if found, None otherwise
        """
        stmt = select(UserModel).where(UserModel.username == username)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_users(self, session: AsyncSession) -> Sequence[UserModel]:
        """List all users ordered by username."""
        stmt = select(UserModel).order_by(UserModel.username)
        result = await session.execute(stmt)
        return result.scalars().all()


user_crud = UserCRUD()
