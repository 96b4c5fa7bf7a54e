"""
Test suite for access and isolation checks.

System role: Verification of authorization rules
"""

import uuid
from types import SimpleNamespace

import pytest

from assistant_hub.boundary.db.models.user_model import UserRole
from assistant_hub.core.access_guard import (
    can_converse,
    ensure_can_converse,
    ensure_document_owner,
    ensure_operator,
    ensure_session_owner,
    is_operator,
    owns_session,
)
from assistant_hub.core.exceptions import (
    AccessDenied,
    OwnershipMismatch,
    SessionNotFound,
)


def make_user(role: UserRole = UserRole.USER) -> SimpleNamespace:
    return SimpleNamespace(id=uuid.uuid4(), role=role)


@pytest.fixture
def assistant() -> SimpleNamespace:
    return SimpleNamespace(id=uuid.uuid4())


class TestConversationRights:
    def test_operator_may_converse_without_grant(self, assistant) -> None:
        assert can_converse(make_user(UserRole.ADMIN), assistant, has_grant=False)

    def test_user_needs_grant(self, assistant) -> None:
        user = make_user()

        assert not can_converse(user, assistant, has_grant=False)
        assert can_converse(user, assistant, has_grant=True)

    def test_ensure_can_converse_raises_access_denied(self, assistant) -> None:
        with pytest.raises(AccessDenied) as exc_info:
            ensure_can_converse(make_user(), assistant, has_grant=False)

        assert exc_info.value.kind == "access_denied"

    def test_ensure_operator(self) -> None:
        ensure_operator(make_user(UserRole.ADMIN))
        with pytest.raises(AccessDenied):
            ensure_operator(make_user())

    def test_is_operator_accepts_plain_role_string(self) -> None:
        assert is_operator(SimpleNamespace(id=uuid.uuid4(), role="admin"))


class TestSessionOwnership:
    def test_owner_passes(self) -> None:
        user = make_user()
        session = SimpleNamespace(id=uuid.uuid4(), user_id=user.id)

        assert owns_session(user, session)
        ensure_session_owner(user, session, session.id)

    def test_foreign_and_missing_sessions_look_the_same(self) -> None:
        user = make_user()
        session_id = uuid.uuid4()
        foreign = SimpleNamespace(id=session_id, user_id=uuid.uuid4())

        with pytest.raises(SessionNotFound) as foreign_exc:
            ensure_session_owner(user, foreign, session_id)
        with pytest.raises(SessionNotFound) as missing_exc:
            ensure_session_owner(user, None, session_id)

        assert foreign_exc.value.to_dict() == missing_exc.value.to_dict()

    def test_unowned_session_is_nobodys(self) -> None:
        assert not owns_session(make_user(UserRole.ADMIN), SimpleNamespace(user_id=None))


class TestDocumentOwnership:
    def test_document_of_other_assistant_is_rejected(self, assistant) -> None:
        document = SimpleNamespace(id=uuid.uuid4(), assistant_id=uuid.uuid4())

        with pytest.raises(OwnershipMismatch) as exc_info:
            ensure_document_owner(assistant, document)

        assert isinstance(exc_info.value, AccessDenied)

    def test_own_document_passes(self, assistant) -> None:
        ensure_document_owner(assistant, SimpleNamespace(id=uuid.uuid4(), assistant_id=assistant.id))
