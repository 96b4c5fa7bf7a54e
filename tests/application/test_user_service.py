"""
Test suite for UserService, AccessService and assistant visibility.

System role: Verification of principal and grant administration
"""

import pytest

from assistant_hub.application.services.assistant_service import AssistantService
from assistant_hub.application.services.user_service import AccessService, UserService
from assistant_hub.boundary.db.CRUD.assistant_crud import assistant_crud
from assistant_hub.boundary.db.models import UserRole
from assistant_hub.core.exceptions import AccessDenied, InvalidInput, NotFound


@pytest.fixture
def user_service(test_async_db) -> UserService:
    return UserService(db=test_async_db)


@pytest.fixture
def access_service(test_async_db) -> AccessService:
    return AccessService(db=test_async_db)


@pytest.fixture
def assistant_service(test_async_db, synchronizer) -> AssistantService:
    return AssistantService(db=test_async_db, synchronizer=synchronizer, default_model="gpt-4o-mini")


class TestUserService:
    @pytest.mark.asyncio
    async def test_create_and_promote(self, user_service, admin) -> None:
        user = await user_service.create_user(admin, "carol")
        assert user.role == UserRole.USER

        promoted = await user_service.set_role(admin, user.id, "admin")
        assert promoted.is_admin

    @pytest.mark.asyncio
    async def test_duplicate_username(self, user_service, admin, alice) -> None:
        with pytest.raises(InvalidInput):
            await user_service.create_user(admin, "alice")

    @pytest.mark.asyncio
    async def test_non_operator_cannot_administer(self, user_service, alice) -> None:
        with pytest.raises(AccessDenied):
            await user_service.create_user(alice, "mallory")


class TestAccessService:
    @pytest.mark.asyncio
    async def test_grant_is_idempotent(self, access_service, admin, alice, assistant) -> None:
        first = await access_service.grant_access(admin, alice.id, assistant.id)
        second = await access_service.grant_access(admin, alice.id, assistant.id)

        assert first.id == second.id
        assert len(await access_service.list_access(admin, alice.id)) == 1

    @pytest.mark.asyncio
    async def test_revoke(self, access_service, admin, alice, assistant) -> None:
        await access_service.grant_access(admin, alice.id, assistant.id)

        await access_service.revoke_access(admin, alice.id, assistant.id)

        assert await access_service.list_access(admin, alice.id) == []
        with pytest.raises(NotFound):
            await access_service.revoke_access(admin, alice.id, assistant.id)

    @pytest.mark.asyncio
    async def test_grant_for_unknown_user(self, access_service, admin, assistant) -> None:
        with pytest.raises(NotFound):
            await access_service.grant_access(admin, assistant.id, assistant.id)


class TestAssistantVisibility:
    @pytest.mark.asyncio
    async def test_create_uses_default_model(self, assistant_service, admin) -> None:
        created = await assistant_service.create_assistant(admin, "Physics", "Explain simply.")

        assert created.model == "gpt-4o-mini"
        assert created.vector_store_id is None

    @pytest.mark.asyncio
    async def test_users_see_granted_active_assistants(
        self,
        assistant_service,
        access_service,
        test_async_db,
        admin,
        alice,
        assistant,
    ) -> None:
        retired = await assistant_crud.create(test_async_db, name="Old", instructions="x", is_active=False)
        await test_async_db.commit()
        await access_service.grant_access(admin, alice.id, assistant.id)
        await access_service.grant_access(admin, alice.id, retired.id)

        visible = await assistant_service.my_assistants(alice)

        assert [a.id for a in visible] == [assistant.id]

    @pytest.mark.asyncio
    async def test_get_assistant_requires_grant(self, assistant_service, bob, assistant) -> None:
        with pytest.raises(AccessDenied):
            await assistant_service.get_assistant(bob, assistant.id)

    @pytest.mark.asyncio
    async def test_update_ignores_knowledge_base_handle(self, assistant_service, admin, assistant) -> None:
        updated = await assistant_service.update_assistant(
            admin,
            assistant.id,
            {"name": "Biology 101", "vector_store_id": "vs_forged"},
        )

        assert updated.name == "Biology 101"
        assert updated.vector_store_id is None
