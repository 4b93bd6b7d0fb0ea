"""MythCrafter - tabletop RPG play-state core.

Characters, campaigns, append-only session logs and dice, backed by SQLite.

Example:
    >>> from mythcrafter import GameService, configure_logging
    >>>
    >>> configure_logging("INFO")
    >>> service = GameService()
    >>> hero = service.create_character({"user_id": 1, "name": "Vex", "level": 3})
    >>> campaign = service.create_campaign(
    ...     {"user_id": 1, "character_id": hero.id, "title": "Ashfall", "genre": "fantasy"}
    ... )
    >>> roll = service.roll_dice("1d20", 2, "Perception")
    >>> service.create_game_session({
    ...     "campaign_id": campaign.id,
    ...     "session_number": service.next_session_number(campaign.id),
    ...     "narrative": "The caravan reaches the ash plains.",
    ...     "dice_rolls": [roll.to_event()],
    ... })

Modules:
    core: Configuration, logging, and base exceptions.
    models: Pydantic V2 schemas, documents and partial updates.
    engine: Dice, ownership, character/campaign/session services.
    storage: SQLite persistence.
"""

from __future__ import annotations

# Core
from mythcrafter.core.config import Settings, get_settings
from mythcrafter.core.exceptions import MythCrafterError
from mythcrafter.core.logging import configure_logging, get_logger

# Engine
from mythcrafter.engine.dice import DiceRoller, RollResult, roll
from mythcrafter.engine.service import GameService

# Storage
from mythcrafter.storage.database import Database, get_database


__version__ = "0.1.0"
__all__ = [
    # Version info
    "__version__",
    # Core
    "MythCrafterError",
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    # Engine
    "DiceRoller",
    "RollResult",
    "roll",
    "GameService",
    # Storage
    "Database",
    "get_database",
]
