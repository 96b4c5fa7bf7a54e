"""
Core business logic module.

Contains the exception hierarchy and the orchestration components:
document staging, knowledge base synchronization, access checks,
citation normalization, stream adaptation and keyed locking.
"""

from assistant_hub.core.exceptions import (
    AccessDenied,
    AssistantHubError,
    AuthenticationRequired,
    FileTooLarge,
    IncompleteStream,
    IndexingFailed,
    InvalidFileType,
    InvalidInput,
    NoAssistantSelected,
    NotFound,
    OwnershipMismatch,
    SessionNotFound,
    StorageFailure,
    UpstreamFailure,
)

__all__ = [
    "AssistantHubError",
    "InvalidInput",
    "InvalidFileType",
    "FileTooLarge",
    "NoAssistantSelected",
    "AuthenticationRequired",
    "AccessDenied",
    "OwnershipMismatch",
    "NotFound",
    "SessionNotFound",
    "StorageFailure",
    "UpstreamFailure",
    "IndexingFailed",
    "IncompleteStream",
]
