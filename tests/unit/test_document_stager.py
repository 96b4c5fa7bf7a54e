"""
Test suite for DocumentStager.

Tests type/size policy ordering, the size boundary, and that staging
leaves either a complete file or nothing.

System role: Verification of local upload staging
"""

import os
import uuid
from pathlib import Path
from unittest.mock import patch

import pytest

from assistant_hub.core.document_stager import DocumentStager
from assistant_hub.core.exceptions import (
    FileTooLarge,
    InvalidFileType,
    InvalidInput,
    StorageFailure,
)


@pytest.fixture
def assistant_id() -> uuid.UUID:
    return uuid.uuid4()


class TestDocumentStagerValidate:
    """Test suite for DocumentStager.validate() method."""

    def test_exactly_max_size_is_accepted(self, stager: DocumentStager) -> None:
        stager.validate(b"x" * stager.max_file_size, "notes.pdf", "application/pdf")

    def test_one_byte_over_max_is_rejected(self, stager: DocumentStager) -> None:
        with pytest.raises(FileTooLarge) as exc_info:
            stager.validate(b"x" * (stager.max_file_size + 1), "notes.pdf", "application/pdf")

        assert exc_info.value.kind == "invalid_input"
        assert exc_info.value.details["max_size"] == stager.max_file_size

    def test_disallowed_mime_type_is_rejected(self, stager: DocumentStager) -> None:
        with pytest.raises(InvalidFileType):
            stager.validate(b"data", "tool.exe", "application/x-msdownload")

    def test_type_is_checked_before_size(self, stager: DocumentStager) -> None:
        oversized = b"x" * (stager.max_file_size + 1)

        with pytest.raises(InvalidFileType):
            stager.validate(oversized, "tool.exe", "application/x-msdownload")

    def test_empty_payload_is_rejected(self, stager: DocumentStager) -> None:
        with pytest.raises(InvalidInput, match="empty"):
            stager.validate(b"", "notes.txt", "text/plain")

    def test_missing_filename_is_rejected(self, stager: DocumentStager) -> None:
        with pytest.raises(InvalidInput, match="Filename"):
            stager.validate(b"data", "  ", "text/plain")


class TestDocumentStagerStage:
    """Test suite for DocumentStager.stage() method."""

    def test_stage_writes_under_assistant_directory(
        self,
        stager: DocumentStager,
        upload_dir: Path,
        assistant_id: uuid.UUID,
    ) -> None:
        staged = stager.stage(assistant_id, b"hello", "Lecture 1.PDF", "application/pdf")

        assert staged.path.parent == upload_dir / str(assistant_id)
        assert staged.path.read_bytes() == b"hello"
        assert staged.stored_filename.endswith(".pdf")
        assert staged.original_name == "Lecture 1.PDF"
        assert staged.size == 5

    def test_stage_strips_directories_from_filename(
        self,
        stager: DocumentStager,
        assistant_id: uuid.UUID,
    ) -> None:
        staged = stager.stage(assistant_id, b"hello", "../../etc/notes.txt", "text/plain")

        assert staged.original_name == "notes.txt"
        assert ".." not in staged.stored_filename

    def test_stage_generates_unique_names(self, stager: DocumentStager, assistant_id: uuid.UUID) -> None:
        first = stager.stage(assistant_id, b"a", "notes.txt", "text/plain")
        second = stager.stage(assistant_id, b"b", "notes.txt", "text/plain")

        assert first.path != second.path
        assert first.read_bytes() == b"a"
        assert second.read_bytes() == b"b"

    def test_invalid_upload_writes_nothing(
        self,
        stager: DocumentStager,
        upload_dir: Path,
        assistant_id: uuid.UUID,
    ) -> None:
        with pytest.raises(FileTooLarge):
            stager.stage(assistant_id, b"x" * (stager.max_file_size + 1), "big.pdf", "application/pdf")

        assert not (upload_dir / str(assistant_id)).exists()

    def test_write_failure_leaves_no_partial_file(
        self,
        stager: DocumentStager,
        upload_dir: Path,
        assistant_id: uuid.UUID,
    ) -> None:
        with patch(
            "assistant_hub.core.document_stager.os.replace",
            side_effect=OSError("disk full"),
        ):
            with pytest.raises(StorageFailure):
                stager.stage(assistant_id, b"hello", "notes.txt", "text/plain")

        assert os.listdir(upload_dir / str(assistant_id)) == []


class TestDocumentStagerDiscard:
    """Test suite for DocumentStager.discard() method."""

    def test_discard_removes_file(self, stager: DocumentStager, assistant_id: uuid.UUID) -> None:
        staged = stager.stage(assistant_id, b"hello", "notes.txt", "text/plain")

        stager.discard(staged.path)

        assert not staged.path.exists()

    def test_discard_missing_path_is_noop(self, stager: DocumentStager, tmp_path: Path) -> None:
        stager.discard(tmp_path / "missing.txt")
        stager.discard(None)
