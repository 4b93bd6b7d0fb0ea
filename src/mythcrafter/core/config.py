"""Configuration management for MythCrafter.

Settings are loaded with pydantic-settings from environment variables and an
optional ``.env`` file.

Example:
    >>> from mythcrafter.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.storage.database_path)
    data/mythcrafter.db

Environment Variables:
    MYTHCRAFTER_DATABASE_PATH: Path to the SQLite database file
    MYTHCRAFTER_DICE_MAX_DICE_COUNT: Largest N accepted in ``NdS`` notation
    MYTHCRAFTER_DICE_MAX_DIE_SIZE: Largest S accepted in ``NdS`` notation
    MYTHCRAFTER_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    MYTHCRAFTER_LOG_JSON: Emit JSON log lines
    MYTHCRAFTER_LOG_FILE: Also write logs to this file
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mythcrafter.core.constants import (
    MAX_DICE_COUNT,
    MAX_DIE_SIZE,
    MIN_DICE_COUNT,
    MIN_DIE_SIZE,
)
from mythcrafter.core.exceptions import ConfigurationError


class StorageSettings(BaseSettings):
    """Configuration for the relational store.

    Attributes:
        database_path: Path to the SQLite database file.
        busy_timeout_seconds: How long a connection waits on a locked database.
    """

    model_config = SettingsConfigDict(
        env_prefix="MYTHCRAFTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_path: Path = Field(
        default=Path("data/mythcrafter.db"),
        description="Path to SQLite database",
    )
    busy_timeout_seconds: float = Field(
        default=5.0,
        gt=0,
        le=60,
        description="SQLite busy timeout",
    )

    @field_validator("database_path", mode="after")
    @classmethod
    def expand_user(cls, value: Path) -> Path:
        """Expand a leading ``~`` so home-relative paths work from env vars."""
        return value.expanduser()


class DiceSettings(BaseSettings):
    """Bounds applied to ``NdS`` dice notation.

    The bounds may be tightened from the environment but never widened past
    100 dice of 1000 faces.

    Attributes:
        max_dice_count: Maximum number of dice in one roll.
        max_die_size: Maximum number of faces on a die.
    """

    model_config = SettingsConfigDict(
        env_prefix="MYTHCRAFTER_DICE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_dice_count: int = Field(
        default=MAX_DICE_COUNT,
        ge=MIN_DICE_COUNT,
        le=MAX_DICE_COUNT,
        description="Maximum dice per roll",
    )
    max_die_size: int = Field(
        default=MAX_DIE_SIZE,
        ge=MIN_DIE_SIZE,
        le=MAX_DIE_SIZE,
        description="Maximum faces per die",
    )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration domains.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Enable debug mode.
        log_level: Application logging level.
        log_json: Emit JSON log lines instead of console output.
        log_file: Optional log file path.
        storage: Store settings.
        dice: Dice notation bounds.
    """

    model_config = SettingsConfigDict(
        env_prefix="MYTHCRAFTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="MythCrafter",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_json: bool = Field(
        default=False,
        description="Emit JSON logs",
    )
    log_file: Path | None = Field(
        default=None,
        description="Optional file that receives a copy of every log line",
    )

    storage: StorageSettings = Field(default_factory=StorageSettings)
    dice: DiceSettings = Field(default_factory=DiceSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "StorageSettings",
    "DiceSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
