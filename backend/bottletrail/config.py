"""
Configuration settings using Pydantic Settings.
"""

from pathlib import Path
from pydantic import model_validator
from pydantic_settings import BaseSettings
from functools import lru_cache

BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    DATABASE_PATH: str = "database/bottles.db"

    REPLY_PREFIX: str = "REPLY:"
    FOUND_SENTINEL_MESSAGE: str = "Bottle found"
    ORIGINAL_CREATOR_LABEL: str = "Original Creator"
    ANONYMOUS_NAME: str = "Anonymous"
    NO_MESSAGE_PLACEHOLDER: str = "No message"

    DECONFLICT_PRECISION: int = 4
    DECONFLICT_RADIUS_STEP: float = 0.0008
    DECONFLICT_ANGLE_STEP_DEGREES: float = 60.0

    SNAPSHOT_REFRESH_SECONDS: int = 300

    CORS_ORIGINS: list[str] = [
        "http://localhost:8081",
        "http://localhost:19006",
        "http://127.0.0.1:8081",
    ]

    DEBUG: bool = False

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "BOTTLETRAIL_",
        "extra": "ignore"
    }

    @model_validator(mode="after")
    def resolve_relative_paths(self):
        db_path = Path(self.DATABASE_PATH)
        if not db_path.is_absolute():
            self.DATABASE_PATH = str((BASE_DIR / db_path).resolve())
        return self


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    :return: Cached Settings instance
    :rtype: Settings
    """
    return Settings()


settings = get_settings()
