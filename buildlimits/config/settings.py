"""Generator settings via Pydantic BaseSettings."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings

from buildlimits.exceptions import ConfigError
from buildlimits.types import WordSize


class Settings(BaseSettings):
    model_config = {
        "env_prefix": "BUILDLIMITS_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False

    # Generator
    default_license: str = "Elastic"

    # Platform (None = detect from the running interpreter)
    target_word_size: int | None = None


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    settings = Settings()
    if settings.target_word_size is not None and settings.target_word_size not in tuple(WordSize):
        msg = f"BUILDLIMITS_TARGET_WORD_SIZE must be 32 or 64, got {settings.target_word_size}"
        raise ConfigError(msg)
    return settings
