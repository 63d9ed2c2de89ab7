# pkgdash/core/config.py
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # General
    ENV: str = "dev"
    APP_NAME: str = "Package Build Dashboard"

    # Storage / DB
    DB_URL: str = "sqlite:///./data/pkgdash.db"
    SNAPSHOT_PATH: str = "summary.json"

    # Comments
    DEFAULT_COMMENT_AUTHOR: str = "Current User"
    COMMENTS_PER_PAGE: int = 3

    # Listing
    DEFAULT_PAGE_SIZE: int = 50
    MAX_PAGE_SIZE: int = 100

    # Logging (empty LOG_FILE disables the file sink)
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""
    LOG_ROTATION: str = "10 MB"
    LOG_RETENTION: str = "10 days"

    # HTTP
    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

_settings: Settings | None = None

def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings

def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
