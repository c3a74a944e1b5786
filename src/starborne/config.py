"""Configuration via pydantic-settings — 12-factor app style."""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Starborne columnizer configuration — loaded from env vars / .env file.

    The timestamp format is a contract with the log producer and is
    intentionally absent here.
    """

    log_level: str = Field(default="WARNING", description="Root log level for the CLI")
    sample_lines: int = Field(default=20, description="Lines handed to match_confidence()")
    time_offset_ms: int = Field(default=0, description="Initial time offset for CLI sessions")
    max_width: int = Field(default=60, description="Max width of a table column")

    class Config:
        env_prefix = "STARBORNE_"
        env_file = ".env"


settings = Settings()
