"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        MythCrafterError: Base exception for all application errors.
        ValidationError / NotFoundError / OwnershipError / StorageError and
        their subclasses.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the settings singleton.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
"""

from __future__ import annotations

from mythcrafter.core.config import (
    DiceSettings,
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
from mythcrafter.core.exceptions import (
    CampaignNotFoundError,
    CharacterNotFoundError,
    ConfigurationError,
    InvalidNotationError,
    MythCrafterError,
    NotFoundError,
    OutOfRangeError,
    OwnerNotFoundError,
    OwnershipError,
    OwnershipMismatchError,
    ReferentialError,
    StorageError,
    UserNotFoundError,
    ValidationError,
)
from mythcrafter.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)


__all__ = [
    # Exceptions
    "MythCrafterError",
    "ConfigurationError",
    "ValidationError",
    "InvalidNotationError",
    "OutOfRangeError",
    "NotFoundError",
    "OwnerNotFoundError",
    "UserNotFoundError",
    "CharacterNotFoundError",
    "OwnershipError",
    "OwnershipMismatchError",
    "StorageError",
    "ReferentialError",
    "CampaignNotFoundError",
    # Configuration
    "Settings",
    "StorageSettings",
    "DiceSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
