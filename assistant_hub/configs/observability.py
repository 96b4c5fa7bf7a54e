"""
Observability configuration settings.

Settings for request logging and correlation ID propagation.

Dependencies: pydantic_settings
System role: Observability configuration for logging
"""

from pydantic_settings import BaseSettings
from pydantic import Field


class ObservabilitySettings(BaseSettings):
    """Observability configuration for logging middleware."""

    correlation_header: str = Field(
        default="X-Correlation-ID",
        description="Header carrying the request correlation ID",
    )
    log_requests: bool = Field(
        default=True,
        description="Log every HTTP request and response",
    )

    class Config:
        """Pydantic config for environment variable loading."""

        env_prefix = "OBSERVABILITY_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"
