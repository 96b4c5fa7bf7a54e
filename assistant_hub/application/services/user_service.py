"""
User and access administration.

Dependencies: assistant_hub.boundary.db.CRUD, assistant_hub.core
System role: Principal and access grant use case orchestration
"""

import logging
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from assistant_hub.boundary.db.CRUD.access_grant_crud import access_grant_crud
from assistant_hub.boundary.db.CRUD.assistant_crud import assistant_crud
from assistant_hub.boundary.db.CRUD.user_crud import user_crud
from assistant_hub.boundary.db.models.access_grant_model import AccessGrantModel
from assistant_hub.boundary.db.models.user_model import UserModel, UserRole
from assistant_hub.core.access_guard import ensure_operator
from assistant_hub.core.exceptions import InvalidInput, NotFound

logger = logging.getLogger(__name__)


class UserService:
    """User administration orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def create_user(self, actor: UserModel, username: str, role: str = "user") -> UserModel:
        """
        Register a principal known to the identity provider.

        Raises:
            AccessDenied: If the actor is not an operator
            InvalidInput: If the username is taken
        """
        ensure_operator(actor)
        if await user_crud.get_by_username(self.db, username) is not None:
            raise InvalidInput(f"Username '{username}' is already registered", field="username")
        user = await user_crud.create(self.db, username=username, role=UserRole(role))
        await self.db.commit()
        logger.info("User created", extra={"user_id": str(user.id), "role": role})
        return user

    async def list_users(self, actor: UserModel) -> Sequence[UserModel]:
        """List all users. Raises AccessDenied for non-operators."""
        ensure_operator(actor)
        return await user_crud.list_users(self.db)

    async def set_role(self, actor: UserModel, user_id: UUID, role: str) -> UserModel:
        """
        Change a user's role.

        Raises:
            AccessDenied: If the actor is not an operator
            NotFound: If the user does not exist
        """
        ensure_operator(actor)
        user = await user_crud.update_by_id(self.db, user_id, role=UserRole(role))
        if user is None:
            raise NotFound("user", str(user_id))
        await self.db.commit()
        return user


class AccessService:
    """Access grant administration orchestrator."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def grant_access(
        self,
        actor: UserModel,
        user_id: UUID,
        assistant_id: UUID,
    ) -> AccessGrantModel:
        """
        Allow a user to converse with an assistant. Idempotent.

        Raises:
            AccessDenied: If the actor is not an operator
            NotFound: If the user or assistant does not exist
        """
        ensure_operator(actor)
        if not await user_crud.exists(self.db, user_id):
            raise NotFound("user", str(user_id))
        if not await assistant_crud.exists(self.db, assistant_id):
            raise NotFound("assistant", str(assistant_id))
        grant = await access_grant_crud.grant(self.db, user_id, assistant_id)
        await self.db.commit()
        return grant

    async def revoke_access(self, actor: UserModel, user_id: UUID, assistant_id: UUID) -> None:
        """
        Withdraw a grant.

        Raises:
            AccessDenied: If the actor is not an operator
            NotFound: If no such grant exists
        """
        ensure_operator(actor)
        removed = await access_grant_crud.revoke(self.db, user_id, assistant_id)
        if not removed:
            raise NotFound("access grant", f"{user_id}/{assistant_id}")
        await self.db.commit()

    async def list_access(self, actor: UserModel, user_id: UUID) -> Sequence[AccessGrantModel]:
        """List a user's grants. Raises AccessDenied for non-operators."""
        ensure_operator(actor)
        if not await user_crud.exists(self.db, user_id):
            raise NotFound("user", str(user_id))
        return await access_grant_crud.list_for_user(self.db, user_id)
