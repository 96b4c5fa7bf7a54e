"""
Upload staging configuration.

Size and type policy for documents, and the local staging directory.

Dependencies: pydantic_settings
System role: Document staging configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024


class UploadSettings(BaseSettings):
    """Settings for staging uploaded documents before handoff."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="UPLOAD_",
        case_sensitive=False,
        extra="ignore",
    )

    directory: str = Field(default="uploads", description="Local staging directory")
    max_file_size: int = Field(
        default=DEFAULT_MAX_FILE_SIZE,
        description="Maximum accepted upload size in bytes (inclusive)",
    )
    allowed_mime_types: list[str] = Field(
        default_factory=lambda: ["application/pdf"],
        description="MIME types accepted for knowledge base documents",
    )
