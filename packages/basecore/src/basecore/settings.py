"""
Runtime settings for basecore consumers.

Values come from the environment (or a local .env file).
"""

import functools
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Infrastructure
    REDIS_URL: str = "redis://localhost:6379/0"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # In-app messaging storage
    # "memory" - process-local dict (default, lost on exit)
    # "redis" - shared Redis keys
    INAPP_STORAGE: Literal["memory", "redis"] = "memory"
    INAPP_STORAGE_PREFIX: str = "inapp:"

    # Analytics stream relay
    INAPP_ANALYTICS_STREAM: str = "inapp:analytics"
    INAPP_CONSUMER_GROUP: str = "inapp-engine"
    INAPP_CONSUMER_NAME: str | None = None
    INAPP_BATCH_SIZE: int = 10
    INAPP_BLOCK_MS: int = 5000

    # Default provider
    INAPP_CAMPAIGNS_ENDPOINT: str | None = None


@functools.lru_cache()
def get_settings() -> Settings:
    """Get settings (cached)."""
    return Settings()
