# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Application settings read from the environment."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    APP_NAME: str = "Staff Permissions"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./staff_permissions.db"

    # CORS origins for the admin console during development
    CORS_ORIGINS: list[str] = ["http://localhost:5173"]

    # Remote building directory; the local buildings table is used when unset
    BUILDING_DIRECTORY_URL: str | None = None
    BUILDING_DIRECTORY_TOKEN: str | None = None
    BUILDING_DIRECTORY_TIMEOUT: float = 10.0
    BUILDING_DIRECTORY_PAGE_SIZE: int = 1000


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()


settings = get_settings()
