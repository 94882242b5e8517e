from __future__ import annotations

"""
Centralized application settings using Pydantic Settings.

This module exposes a single `settings` instance that other modules can import.
Values come from environment variables or a local .env file.
"""

from typing import Optional

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # Gemini / Model
    GEMINI_API_KEY: Optional[str] = Field(default=None)
    GEMINI_MODEL: str = "flash"
    GENAI_REQUEST_TIMEOUT_SECS: int = 300
    DISABLE_SAFETY_FILTERS: bool = True

    # Remote call retry (server faults)
    MAX_RETRIES: int = 3
    RETRY_BASE_DELAY_SECS: float = 1.0

    # Regeneration retry (unparseable model output)
    PARSE_RETRIES: int = 3
    PARSE_RETRY_DELAY_SECS: float = 0.5

    # Logging / Debug
    LOG_LEVEL: str = "INFO"
    DEBUG_RESPONSES: bool = False
    DEBUG_DIR: str = "output/debug"

    class Config:
        env_file = ".env"
        env_nested_delimiter = "__"
        extra = "ignore"


settings = Settings()
