"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Logging
    log_level: str = "INFO"
    log_json: bool = False  # Render log events as JSON instead of key=value

    # Database
    database_path: str = "./data/keyring.db"
    database_timeout_seconds: float = Field(default=3.0, gt=0)

    # Password hashing
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)  # bcrypt cost factor


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
