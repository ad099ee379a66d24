"""
Runtime configuration helpers for the Snapgram application.

Loads defaults from the ``.env`` file located in the project root without
overriding variables provided by the platform.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve the project root
BASE_DIR = Path(__file__).resolve().parents[1]

# Absolute path to .env
ENV_PATH = BASE_DIR / ".env"

load_dotenv(dotenv_path=ENV_PATH, override=False)


class Settings(BaseSettings):
    database_url: str = Field(default="sqlite+pysqlite:///./snapgram.db", alias="DATABASE_URL")
    backend: Literal["sql", "memory"] = Field(default="sql", alias="SNAPGRAM_BACKEND")

    app_name: str = Field(default="Snapgram", alias="APP_NAME")
    api_version: str = Field(default="0.1.0", alias="API_VERSION")

    # Session tokens
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    jwt_expires_minutes: int = Field(default=60, alias="JWT_EXPIRES_MINUTES")
    session_refresh_margin_minutes: int = Field(default=10, alias="SESSION_REFRESH_MARGIN_MINUTES")
    session_cookie_name: str = Field(default="snapgram_session", alias="SESSION_COOKIE_NAME")
    session_cookie_secure: bool = Field(default=False, alias="SESSION_COOKIE_SECURE")

    cors_origins: str | None = Field(default=None, alias="CORS_ORIGINS")
    log_level: str = Field(default="info", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
