"""Application settings and configuration management."""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables or defaults."""

    DB_PATH: str = Field(default="data/mockmatch.db")
    STORAGE_KEY_PREFIX: str = "mockmatch"
    STORAGE_QUOTA_BYTES: int | None = 5 * 1024 * 1024

    AUTO_SAVE_SECONDS: float = Field(default=30.0, gt=0)

    QUESTION_COUNT: int = Field(default=5, ge=5)
    JD_MIN_CHARS: int = 50

    LLM_CONFIG_PATH: str = "app_config.json"

    model_config = SettingsConfigDict(env_file=".env", validate_assignment=True, extra="ignore")


settings = Settings()
