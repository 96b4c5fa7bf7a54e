"""
Exception hierarchy for Assistant Hub.

Provides layered exception structure for domain-specific errors.
Every exception carries a stable machine-checkable ``kind`` plus a
human-readable message and optional context for observability.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class AssistantHubError(Exception):
    """Base exception for all Assistant Hub errors."""

    kind: str = "internal_error"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the public error payload."""
        return {"kind": self.kind, "message": self.message, "details": self.details}


class InvalidInput(AssistantHubError):
    """Raised when input validation fails before any side effect."""

    kind = "invalid_input"

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class InvalidFileType(InvalidInput):
    """Raised when an upload has a MIME type outside the allow-list."""

    def __init__(self, mime_type: str, allowed: list[str]) -> None:
        super().__init__(
            f"File type '{mime_type}' is not allowed",
            field="file",
            details={"mime_type": mime_type, "allowed": sorted(allowed)},
        )


class FileTooLarge(InvalidInput):
    """Raised when an upload exceeds the configured maximum size."""

    def __init__(self, size: int, max_size: int) -> None:
        super().__init__(
            f"File is {size} bytes; maximum is {max_size} bytes",
            field="file",
            details={"size": size, "max_size": max_size},
        )


class NoAssistantSelected(InvalidInput):
    """Raised when a session has no assistant to converse with."""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            "No assistant selected for this session",
            details={"session_id": session_id},
        )


class AuthenticationRequired(AssistantHubError):
    """Raised when no known principal accompanies a request."""

    kind = "unauthenticated"


class AccessDenied(AssistantHubError):
    """Raised when the principal lacks the right to perform an operation."""

    kind = "access_denied"


class OwnershipMismatch(AccessDenied):
    """Raised when a document is addressed through an assistant that does not own it."""

    def __init__(self, document_id: str, assistant_id: str) -> None:
        super().__init__(
            "Document does not belong to this assistant",
            {"document_id": document_id, "assistant_id": assistant_id},
        )


class NotFound(AssistantHubError):
    """Raised when an entity cannot be found."""

    kind = "not_found"

    def __init__(
        self,
        entity: str,
        entity_id: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize not found error.

        Args:
            entity: Entity name (assistant, document, user)
            entity_id: ID of the missing entity
            details: Additional context
        """
        details = details or {}
        details[f"{entity}_id"] = entity_id
        super().__init__(f"{entity.capitalize()} not found: {entity_id}", details)


class SessionNotFound(NotFound):
    """
    Raised when a session does not exist or is not owned by the caller.

    Both cases produce the same error so callers cannot learn whether a foreign session exists.
    """

    def __init__(self, session_id: str) -> None:
        super().__init__("session", session_id)


class StorageFailure(AssistantHubError):
    """Raised when staging bytes on local storage fails."""

    kind = "storage_failure"


class UpstreamFailure(AssistantHubError):
    """Raised when the external answering or indexing service fails."""

    kind = "upstream_failure"

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize upstream failure.

        Args:
            message: Error message
            operation: Remote operation that failed (answer, upload_file, ...)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class IndexingFailed(UpstreamFailure):
    """Raised when a file batch does not complete ingestion into an index."""

    kind = "indexing_failed"


class IncompleteStream(AssistantHubError):
    """Raised when a streamed answer ends without its terminal event."""

    kind = "incomplete_stream"

    def __init__(self, message: str = "stream ended unexpectedly, please check history") -> None:
        super().__init__(message)
