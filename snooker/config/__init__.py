"""Configuration utilities and settings helpers for Snooker."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Host settings loaded from environment/.env.

    Only the command-line helpers read these; the scoring engine itself
    takes its configuration explicitly.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    config_path: Optional[Path] = Field(default=None, alias="SNOOKER_CONFIG")
    config_mode: Literal["warn", "strict"] = Field(default="warn", alias="SNOOKER_CONFIG_MODE")
    log_level: str = Field(default="WARNING", alias="SNOOKER_LOG_LEVEL")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()


__all__ = ["Settings", "get_settings"]
