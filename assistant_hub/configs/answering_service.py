"""
OpenAI configuration settings.

Credentials and call policy for the remote answering and indexing service.

Dependencies: pydantic_settings
System role: External answering service configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class OpenAISettings(BaseSettings):
    """Settings for the OpenAI Responses and Vector Stores APIs."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="OPENAI_",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str | None = Field(default=None, description="OpenAI API key")
    base_url: str | None = Field(default=None, description="Optional API base URL override")
    default_model: str = Field(default="gpt-4o", description="Model used when an assistant has none")
    timeout: float = Field(default=120.0, description="Per-request timeout in seconds")
    max_retries: int = Field(default=2, description="SDK-level retries for transient errors")
    poll_interval_ms: int = Field(
        default=1000,
        description="Polling interval while waiting for file batch ingestion",
    )
