"""
Knowledge base configuration.

Fixed chunking policy applied to every remote index and file batch.

Dependencies: pydantic_settings
System role: Remote index configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class KnowledgeBaseSettings(BaseSettings):
    """Chunking policy for assistant knowledge bases."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="KB_",
        case_sensitive=False,
        extra="ignore",
    )

    max_chunk_size_tokens: int = Field(default=2000, description="Static chunk size in tokens")
    chunk_overlap_tokens: int = Field(default=400, description="Overlap between chunks in tokens")

    def chunking_strategy(self) -> dict:
        """Return the static chunking strategy payload for the remote API."""
        return {
            "type": "static",
            "static": {
                "max_chunk_size_tokens": self.max_chunk_size_tokens,
                "chunk_overlap_tokens": self.chunk_overlap_tokens,
            },
        }
