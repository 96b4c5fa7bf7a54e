"""
Assistant service orchestrator.

Coordinates assistant administration and the assistant listings offered
to end users.

Dependencies: assistant_hub.boundary.db.CRUD, assistant_hub.core
System role: Assistant use case orchestration
"""

import logging
from typing import Any, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from assistant_hub.boundary.db.CRUD.access_grant_crud import access_grant_crud
from assistant_hub.boundary.db.CRUD.assistant_crud import assistant_crud
from assistant_hub.boundary.db.CRUD.document_crud import document_crud
from assistant_hub.boundary.db.models.assistant_model import AssistantModel
from assistant_hub.boundary.db.models.user_model import UserModel
from assistant_hub.core.access_guard import ensure_can_converse, ensure_operator, is_operator
from assistant_hub.core.exceptions import InvalidInput, NotFound
from assistant_hub.core.knowledge_base import KnowledgeBaseState, KnowledgeBaseSynchronizer

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {"name", "description", "instructions", "model", "is_active"}
NULLABLE_FIELDS = {"description"}


class AssistantService:
    """Assistant service orchestrator."""

    def __init__(
        self,
        db: AsyncSession,
        synchronizer: KnowledgeBaseSynchronizer,
        default_model: str = "gpt-4o",
    ) -> None:
        """
        Initialize assistant service.

        Args:
            db: Async SQLAlchemy session
            synchronizer: Knowledge base synchronizer for remote teardown
            default_model: Model used when none is given at creation
        """
        self.db = db
        self.synchronizer = synchronizer
        self.default_model = default_model

    async def create_assistant(
        self,
        user: UserModel,
        name: str,
        instructions: str,
        description: str | None = None,
        model: str | None = None,
        is_active: bool = True,
    ) -> AssistantModel:
        """
        Create an assistant with no knowledge base.

        Raises:
            AccessDenied: If the user is not an operator
        """
        ensure_operator(user)
        assistant = await assistant_crud.create(
            self.db,
            name=name,
            description=description,
            instructions=instructions,
            model=model or self.default_model,
            is_active=is_active,
        )
        await self.db.commit()
        logger.info("Assistant created", extra={"assistant_id": str(assistant.id)})
        return assistant

    async def list_assistants(
        self,
        user: UserModel,
        include_inactive: bool = False,
    ) -> Sequence[AssistantModel]:
        """List assistants for operators. Raises AccessDenied otherwise."""
        ensure_operator(user)
        return await assistant_crud.list_assistants(self.db, include_inactive=include_inactive)

    async def get_assistant(self, user: UserModel, assistant_id: UUID) -> AssistantModel:
        """
        Get an assistant the user may converse with.

        Raises:
            NotFound: If the assistant does not exist
            AccessDenied: If the user is neither operator nor grant holder
        """
        assistant = await self._require(assistant_id)
        has_grant = is_operator(user) or await access_grant_crud.has_grant(
            self.db, user.id, assistant_id
        )
        ensure_can_converse(user, assistant, has_grant)
        return assistant

    async def update_assistant(
        self,
        user: UserModel,
        assistant_id: UUID,
        changes: dict[str, Any],
    ) -> AssistantModel:
        """
        Apply a partial update. The knowledge base handle is not editable.

        Args:
            user: Requesting operator
            assistant_id: Assistant UUID
            changes: Field values to set (name, description, instructions, model, is_active)

        Raises:
            AccessDenied: If the user is not an operator
            InvalidInput: If a required field is set to null
            NotFound: If the assistant does not exist
        """
        ensure_operator(user)
        values = {key: value for key, value in changes.items() if key in UPDATABLE_FIELDS}
        for key, value in values.items():
            if value is None and key not in NULLABLE_FIELDS:
                raise InvalidInput(f"{key} cannot be null", field=key)
        await self._require(assistant_id)
        assistant = await assistant_crud.update_by_id(self.db, assistant_id, **values)
        await self.db.commit()
        return assistant

    async def delete_assistant(self, user: UserModel, assistant_id: UUID) -> None:
        """
        Delete an assistant.

        Documents and access grants are deleted with it; sessions keep their
        history with the assistant link cleared. The remote index and files
        are removed best-effort after the local delete commits.

        Raises:
            AccessDenied: If the user is not an operator
            NotFound: If the assistant does not exist
        """
        ensure_operator(user)
        assistant = await self._require(assistant_id)
        documents = list(await document_crud.list_by_assistant(self.db, assistant_id))

        await assistant_crud.delete_by_id(self.db, assistant_id)
        await self.db.commit()
        logger.info(
            "Assistant deleted",
            extra={"assistant_id": str(assistant_id), "documents": len(documents)},
        )

        await self.synchronizer.teardown_assistant(assistant, documents)

    async def my_assistants(self, user: UserModel) -> Sequence[AssistantModel]:
        """
        Assistants offered to a user.

        Operators see every active assistant; other users see the active
        assistants they hold a grant for.
        """
        if is_operator(user):
            return await assistant_crud.list_assistants(self.db)
        return await assistant_crud.list_granted(self.db, user.id)

    async def knowledge_base_states(
        self,
        assistants: Sequence[AssistantModel],
    ) -> dict[UUID, KnowledgeBaseState]:
        """
        Lifecycle state of each assistant's knowledge base.

        Args:
            assistants: Assistants to report on

        Returns:
            dict: Assistant UUID to KnowledgeBaseState
        """
        completed = await document_crud.assistants_with_completed(
            self.db, [assistant.id for assistant in assistants]
        )
        return {
            assistant.id: self.synchronizer.state_for(assistant, assistant.id in completed)
            for assistant in assistants
        }

    async def _require(self, assistant_id: UUID) -> AssistantModel:
        assistant = await assistant_crud.get_by_id(self.db, assistant_id)
        if assistant is None:
            raise NotFound("assistant", str(assistant_id))
        return assistant
