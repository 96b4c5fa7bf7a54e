"""
User and access grant endpoints (operator only).

Routes:
- GET /users, POST /users
- PATCH /users/{id}/role
- GET /users/{id}/assistant-access, POST /users/{id}/assistant-access
- DELETE /users/{id}/assistant-access/{assistant_id}

Dependencies: assistant_hub.application.services.user_service, assistant_hub.models
System role: User administration HTTP API
"""

from uuid import UUID

from fastapi import APIRouter, Depends

from assistant_hub.api.deps import get_access_service, get_user_service, require_admin
from assistant_hub.application.services.user_service import AccessService, UserService
from assistant_hub.boundary.db.models.user_model import UserModel
from assistant_hub.models.user import (
    AccessGrantResponse,
    CreateUserRequest,
    GrantAccessRequest,
    UpdateRoleRequest,
    UserResponse,
)

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=list[UserResponse])
async def list_users(
    admin: UserModel = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
) -> list[UserResponse]:
    """List all users."""
    users = await user_service.list_users(admin)
    return [UserResponse.model_validate(u) for u in users]


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(
    request: CreateUserRequest,
    admin: UserModel = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Register a principal known to the identity provider."""
    user = await user_service.create_user(admin, request.username, request.role)
    return UserResponse.model_validate(user)


@router.patch("/{user_id}/role", response_model=UserResponse)
async def update_role(
    user_id: UUID,
    request: UpdateRoleRequest,
    admin: UserModel = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
) -> UserResponse:
    """Change a user's role."""
    user = await user_service.set_role(admin, user_id, request.role)
    return UserResponse.model_validate(user)


@router.get("/{user_id}/assistant-access", response_model=list[AccessGrantResponse])
async def list_access(
    user_id: UUID,
    admin: UserModel = Depends(require_admin),
    access_service: AccessService = Depends(get_access_service),
) -> list[AccessGrantResponse]:
    """List the assistants a user may converse with."""
    grants = await access_service.list_access(admin, user_id)
    return [AccessGrantResponse.model_validate(g) for g in grants]


@router.post("/{user_id}/assistant-access", response_model=AccessGrantResponse, status_code=201)
async def grant_access(
    user_id: UUID,
    request: GrantAccessRequest,
    admin: UserModel = Depends(require_admin),
    access_service: AccessService = Depends(get_access_service),
) -> AccessGrantResponse:
    """Grant a user access to an assistant."""
    grant = await access_service.grant_access(admin, user_id, request.assistant_id)
    return AccessGrantResponse.model_validate(grant)


@router.delete("/{user_id}/assistant-access/{assistant_id}", status_code=204)
async def revoke_access(
    user_id: UUID,
    assistant_id: UUID,
    admin: UserModel = Depends(require_admin),
    access_service: AccessService = Depends(get_access_service),
) -> None:
    """Revoke a user's access to an assistant."""
    await access_service.revoke_access(admin, user_id, assistant_id)
