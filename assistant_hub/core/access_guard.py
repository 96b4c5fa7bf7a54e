"""
Access and isolation checks.

Pure predicates deciding whether a principal may act on an assistant,
session or document, plus raising helpers used by the services. Session
checks never distinguish "missing" from "not yours".

Dependencies: assistant_hub.core.exceptions
System role: Authorization rules for conversations and knowledge bases
"""

from assistant_hub.core.exceptions import (
    AccessDenied,
    OwnershipMismatch,
    SessionNotFound,
)


def is_operator(user) -> bool:
    """True if the user holds the elevated operator role."""
    return user is not None and getattr(user.role, "value", user.role) == "admin"


def can_converse(user, assistant, has_grant: bool) -> bool:
    """
    Whether a user may hold conversations with an assistant.

    Args:
        user: Requesting UserModel
        assistant: Target AssistantModel
        has_grant: Whether an AccessGrant(user, assistant) exists

    Returns:
        bool: True for operators or grant holders
    """
    if user is None or assistant is None:
        return False
    return is_operator(user) or has_grant


def owns_session(user, session) -> bool:
    """True iff the session belongs to the user."""
    if user is None or session is None:
        return False
    return session.user_id is not None and session.user_id == user.id


def owns_document(assistant, document) -> bool:
    """True iff the document belongs to the assistant."""
    if assistant is None or document is None:
        return False
    return document.assistant_id == assistant.id


def ensure_session_owner(user, session, session_id) -> None:
    """
    Require that a session exists and belongs to the user.

    Raises:
        SessionNotFound: For both a missing and a foreign session
    """
    if not owns_session(user, session):
        raise SessionNotFound(str(session_id))


def ensure_can_converse(user, assistant, has_grant: bool) -> None:
    """
    Require conversation rights on an assistant.

    Raises:
        AccessDenied: If the user is neither operator nor grant holder
    """
    if not can_converse(user, assistant, has_grant):
        raise AccessDenied(
            "You do not have access to this assistant",
            {"assistant_id": str(getattr(assistant, "id", ""))},
        )


def ensure_operator(user) -> None:
    """
    Require the operator role.

    Raises:
        AccessDenied: If the user is not an operator
    """
    if not is_operator(user):
        raise AccessDenied("Operator privileges required")


def ensure_document_owner(assistant, document) -> None:
    """
    Require that a document belongs to the assistant it is addressed through.

    Raises:
        OwnershipMismatch: If another assistant owns the document
    """
    if not owns_document(assistant, document):
        raise OwnershipMismatch(str(document.id), str(assistant.id))
