"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from assistant_hub.configs.base import ServiceSettings
from assistant_hub.configs.database import DatabaseSettings
from assistant_hub.configs.knowledge_base import KnowledgeBaseSettings
from assistant_hub.configs.observability import ObservabilitySettings
from assistant_hub.configs.answering_service import OpenAISettings
from assistant_hub.configs.uploads import UploadSettings


class Settings(ServiceSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    database: DatabaseSettings = DatabaseSettings()
    openai: OpenAISettings = OpenAISettings()
    uploads: UploadSettings = UploadSettings()
    knowledge_base: KnowledgeBaseSettings = KnowledgeBaseSettings()
    observability: ObservabilitySettings = ObservabilitySettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from assistant_hub.configs import get_settings
        settings = get_settings()
    """
    return Settings()
