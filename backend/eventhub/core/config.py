"""
Application configuration using pydantic-settings.
All config is loaded from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "EventHub"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Storage handle
    STORAGE_BACKEND: str = "memory"  # memory, file, redis
    STORAGE_ROOT: str = ".eventhub"
    STORAGE_QUOTA_BYTES: int = 5 * 1024 * 1024  # browser local storage default
    EVENTS_STORAGE_KEY: str = "eventhub_events"
    USERS_STORAGE_KEY: str = "eventhub_users"

    # Redis
    REDIS_URL: str = "redis://localhost:6379/0"

    # Registration
    MAX_RETRY_ATTEMPTS: int = 3

    # Event lifecycle
    EVENTS_REQUIRE_APPROVAL: bool = False
    SEED_SAMPLE_EVENTS: bool = False

    # User moderation
    SEED_DEFAULT_USERS: bool = False

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
    }


@lru_cache()
def get_settings() -> Settings:
    return Settings()
