"""
Document staging.

Validates an uploaded document against the type and size policy and
writes it to local staging storage before it is handed to the knowledge
base synchronizer. No remote side effects.

Dependencies: assistant_hub.configs, assistant_hub.core.exceptions
System role: Local upload staging
"""

import logging
import os
import tempfile
import uuid
from dataclasses import dataclass
from pathlib import Path

from assistant_hub.core.exceptions import (
    FileTooLarge,
    InvalidFileType,
    InvalidInput,
    StorageFailure,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StagedDocument:
    """
    A validated document written to local staging storage.

    Attributes:
        assistant_id: Owning assistant
        path: Staged file path
        stored_filename: Unique name of the staged file
        original_name: Filename as uploaded
        size: Byte size
        mime_type: Declared MIME type
    """

    assistant_id: uuid.UUID
    path: Path
    stored_filename: str
    original_name: str
    size: int
    mime_type: str

    def read_bytes(self) -> bytes:
        """Read the staged contents."""
        return self.path.read_bytes()


class DocumentStager:
    """
    Validates and stages uploads under <upload_dir>/<assistant_id>/.

    Writes go to a temporary sibling which is renamed into place, so a
    failed write never leaves a partial file at the final path.
    """

    def __init__(
        self,
        upload_dir: str | Path,
        max_file_size: int,
        allowed_mime_types: list[str],
    ) -> None:
        """
        Initialize stager.

        Args:
            upload_dir: Root staging directory
            max_file_size: Maximum accepted size in bytes (inclusive)
            allowed_mime_types: Accepted MIME types
        """
        self.upload_dir = Path(upload_dir)
        self.max_file_size = max_file_size
        self.allowed_mime_types = set(allowed_mime_types)

    @classmethod
    def from_settings(cls, settings) -> "DocumentStager":
        """Build a stager from application settings."""
        uploads = settings.uploads
        return cls(
            upload_dir=uploads.directory,
            max_file_size=uploads.max_file_size,
            allowed_mime_types=uploads.allowed_mime_types,
        )

    def validate(self, file_bytes: bytes, filename: str, mime_type: str) -> None:
        """
        Check an upload against the staging policy.

        Args:
            file_bytes: File contents
            filename: Original filename
            mime_type: Declared MIME type

        Raises:
            InvalidInput: Empty filename or empty payload
            InvalidFileType: MIME type not allowed
            FileTooLarge: Payload over the maximum size
        """
        if not filename or not filename.strip():
            raise InvalidInput("Filename is required", field="file")
        if mime_type not in self.allowed_mime_types:
            raise InvalidFileType(mime_type, list(self.allowed_mime_types))
        size = len(file_bytes)
        if size == 0:
            raise InvalidInput("File is empty", field="file")
        if size > self.max_file_size:
            raise FileTooLarge(size, self.max_file_size)

    def stage(
        self,
        assistant_id: uuid.UUID,
        file_bytes: bytes,
        filename: str,
        mime_type: str,
    ) -> StagedDocument:
        """
        Validate and write an upload to staging storage.

        Args:
            assistant_id: Owning assistant
            file_bytes: File contents
            filename: Original filename
            mime_type: Declared MIME type

        Returns:
            StagedDocument: Location and metadata of the staged file

        Raises:
            InvalidInput: If validation fails (nothing is written)
            StorageFailure: If writing fails (no partial file remains)
        """
        self.validate(file_bytes, filename, mime_type)

        original_name = Path(filename).name
        stored_filename = f"{uuid.uuid4().hex}{Path(original_name).suffix.lower()}"
        target_dir = self.upload_dir / str(assistant_id)
        target = target_dir / stored_filename
        temp_path: str | None = None

        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(dir=target_dir, prefix=".staging-")
            with os.fdopen(fd, "wb") as handle:
                handle.write(file_bytes)
            os.replace(temp_path, target)
        except OSError as e:
            if temp_path is not None:
                Path(temp_path).unlink(missing_ok=True)
            logger.exception(
                "Failed to stage upload",
                extra={"assistant_id": str(assistant_id), "original_name": original_name},
            )
            raise StorageFailure(
                "Failed to store uploaded file",
                {"original_name": original_name, "error": str(e)},
            ) from e

        logger.info(
            "Upload staged",
            extra={
                "assistant_id": str(assistant_id),
                "staged_path": str(target),
                "size": len(file_bytes),
            },
        )
        return StagedDocument(
            assistant_id=assistant_id,
            path=target,
            stored_filename=stored_filename,
            original_name=original_name,
            size=len(file_bytes),
            mime_type=mime_type,
        )

    def discard(self, path: str | Path | None) -> None:
        """
        Remove a staged file if present. Failures are logged, not raised.

        Args:
            path: Staged file path
        """
        if not path:
            return
        try:
            Path(path).unlink(missing_ok=True)
        except OSError:
            logger.warning("Failed to remove staged file", extra={"staged_path": str(path)}, exc_info=True)
