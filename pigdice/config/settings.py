"""
Pig Dice - Application Settings

Loads configuration from environment variables (prefix ``PIG_``) and an
optional ``.env`` file using Pydantic Settings.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings

from pigdice.engine.base import (
    DEFAULT_HOLD_THRESHOLD,
    DEFAULT_PACING_DELAY,
    WINNING_SCORE,
    GameConfig,
)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Rules
    winning_score: int = WINNING_SCORE
    hold_threshold: int = DEFAULT_HOLD_THRESHOLD
    pacing_delay: float = DEFAULT_PACING_DELAY

    # Storage
    storage_backend: Literal["memory", "file", "supabase"] = "file"
    storage_path: Path = Path(".pigdice.json")

    # Supabase (only for the supabase backend)
    supabase_url: str | None = None
    supabase_anon_key: str | None = None
    supabase_table: str = "preferences"

    # Application
    debug: bool = False
    log_level: str = "INFO"

    model_config = {
        "env_prefix": "PIG_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @model_validator(mode="after")
    def _require_supabase_credentials(self) -> "Settings":
        if self.storage_backend == "supabase" and not (
            self.supabase_url and self.supabase_anon_key
        ):
            raise ValueError(
                "PIG_SUPABASE_URL and PIG_SUPABASE_ANON_KEY are required "
                "for the supabase storage backend."
            )
        return self

    def game_config(self) -> GameConfig:
        """Rule parameters for the engine."""
        return GameConfig(
            winning_score=self.winning_score,
            hold_threshold=self.hold_threshold,
            pacing_delay=self.pacing_delay,
        )


def configure_logging(settings: Settings) -> None:
    """Set the root log level and format from settings."""
    level = logging.DEBUG if settings.debug else settings.log_level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached singleton settings instance."""
    return Settings()
