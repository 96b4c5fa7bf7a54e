"""
Service process settings.

Top-level options of the HTTP service itself: debug mode, log level,
bind address and allowed CORS origins. Concern-specific settings live in
their own modules and are aggregated on top of this class.

Dependencies: pydantic_settings
System role: Foundation of the aggregated Settings class
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class ServiceSettings(BaseSettings):
    """Process-level settings read at startup."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    debug: bool = Field(
        default=False,
        description="Enable auto-reload when run as a script",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    host: str = Field(default="localhost", description="Bind address when run as a script")
    port: int = Field(default=8082, description="Bind port when run as a script")
    cors_origins: list[str] = Field(
        default=["*"],
        description="Origins allowed to call the API from a browser",
    )
