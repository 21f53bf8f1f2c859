from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from .recent_searches import MAX_RECENT_SEARCHES, STORAGE_KEY
from .storage import DB_FILE

load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    db_path: str = Field(DB_FILE, alias="TRIP_SCANNER_DB")
    storage_key: str = Field(STORAGE_KEY, alias="RECENT_SEARCHES_KEY")
    max_recent_searches: int = Field(
        MAX_RECENT_SEARCHES, alias="MAX_RECENT_SEARCHES"
    )
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_file: Optional[str] = Field(None, alias="LOG_FILE")

    @field_validator("storage_key")
    @classmethod
    def _key_non_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("RECENT_SEARCHES_KEY must be a non-empty string")
        return v.strip()

    @field_validator("max_recent_searches")
    @classmethod
    def _capacity_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("MAX_RECENT_SEARCHES must be greater than 0")
        return v

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"LOG_LEVEL {v!r} is not a logging level")
        return level


@lru_cache()
def get_settings() -> Settings:
    """Return application settings loaded from the environment."""
    return Settings()  # type: ignore[call-arg]


__all__ = ["Settings", "get_settings"]
