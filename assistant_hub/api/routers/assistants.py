"""
Assistant API endpoints.

Routes:
- GET /assistants - List assistants (operator)
- POST /assistants - Create assistant (operator)
- GET /assistants/{id} - Get assistant (operator or grant holder)
- PATCH /assistants/{id} - Update assistant (operator)
- DELETE /assistants/{id} - Delete assistant and its knowledge base (operator)
- GET /me/assistants - Assistants offered to the caller

Dependencies: assistant_hub.application.services.assistant_service, assistant_hub.models
System role: Assistant management HTTP API
"""

import logging
from typing import Sequence
from uuid import UUID

from fastapi import APIRouter, Depends

from assistant_hub.api.deps import get_assistant_service, get_current_user, require_admin
from assistant_hub.application.services.assistant_service import AssistantService
from assistant_hub.boundary.db.models.assistant_model import AssistantModel
from assistant_hub.boundary.db.models.user_model import UserModel
from assistant_hub.models.assistant import (
    AssistantListResponse,
    AssistantResponse,
    CreateAssistantRequest,
    UpdateAssistantRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["assistants"])


async def _to_responses(
    assistant_service: AssistantService,
    assistants: Sequence[AssistantModel],
) -> list[AssistantResponse]:
    """Serialize assistants with their knowledge base state."""
    states = await assistant_service.knowledge_base_states(assistants)
    return [
        AssistantResponse.model_validate(assistant).model_copy(
            update={"knowledge_base_state": states[assistant.id].value}
        )
        for assistant in assistants
    ]


@router.get("/assistants", response_model=AssistantListResponse)
async def list_assistants(
    include_inactive: bool = False,
    admin: UserModel = Depends(require_admin),
    assistant_service: AssistantService = Depends(get_assistant_service),
) -> AssistantListResponse:
    """List assistants, active only unless include_inactive is set."""
    assistants = await assistant_service.list_assistants(admin, include_inactive=include_inactive)
    items = await _to_responses(assistant_service, assistants)
    return AssistantListResponse(assistants=items, total=len(items))


@router.post("/assistants", response_model=AssistantResponse, status_code=201)
async def create_assistant(
    request: CreateAssistantRequest,
    admin: UserModel = Depends(require_admin),
    assistant_service: AssistantService = Depends(get_assistant_service),
) -> AssistantResponse:
    """
    Create an assistant with an empty knowledge base.

    Args:
        request: Name, instructions and optional description/model
        admin: Authenticated operator
        assistant_service: Injected AssistantService

    Returns:
        AssistantResponse: Created assistant
    """
    assistant = await assistant_service.create_assistant(
        admin,
        name=request.name,
        instructions=request.instructions,
        description=request.description,
        model=request.model,
        is_active=request.is_active,
    )
    [response] = await _to_responses(assistant_service, [assistant])
    return response


@router.get("/assistants/{assistant_id}", response_model=AssistantResponse)
async def get_assistant(
    assistant_id: UUID,
    user: UserModel = Depends(get_current_user),
    assistant_service: AssistantService = Depends(get_assistant_service),
) -> AssistantResponse:
    """Get one assistant the caller may converse with."""
    assistant = await assistant_service.get_assistant(user, assistant_id)
    [response] = await _to_responses(assistant_service, [assistant])
    return response


@router.patch("/assistants/{assistant_id}", response_model=AssistantResponse)
async def update_assistant(
    assistant_id: UUID,
    request: UpdateAssistantRequest,
    admin: UserModel = Depends(require_admin),
    assistant_service: AssistantService = Depends(get_assistant_service),
) -> AssistantResponse:
    """Apply a partial update; omitted fields stay unchanged."""
    assistant = await assistant_service.update_assistant(
        admin,
        assistant_id,
        request.model_dump(exclude_unset=True),
    )
    [response] = await _to_responses(assistant_service, [assistant])
    return response


@router.delete("/assistants/{assistant_id}", status_code=204)
async def delete_assistant(
    assistant_id: UUID,
    admin: UserModel = Depends(require_admin),
    assistant_service: AssistantService = Depends(get_assistant_service),
) -> None:
    """
    Delete an assistant.

    Documents and grants go with it; sessions keep their history.
    """
    await assistant_service.delete_assistant(admin, assistant_id)


@router.get("/me/assistants", response_model=AssistantListResponse)
async def my_assistants(
    user: UserModel = Depends(get_current_user),
    assistant_service: AssistantService = Depends(get_assistant_service),
) -> AssistantListResponse:
    """Assistants the caller may start conversations with."""
    assistants = await assistant_service.my_assistants(user)
    items = await _to_responses(assistant_service, assistants)
    return AssistantListResponse(assistants=items, total=len(items))
