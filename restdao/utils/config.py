"""
Configuration settings for the application.
"""

from functools import lru_cache

from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings, read from the environment and the .env file."""

    # Database
    DATABASE_URL: str = "sqlite:///restdao.db"
    ECHO_SQL: bool = False

    # Logging
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # HTTP
    ALLOWED_ORIGIN: str = ""

    # Collections; 0 means unlimited
    DEFAULT_LIMIT: int = 0

    model_config = ConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="allow"
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
