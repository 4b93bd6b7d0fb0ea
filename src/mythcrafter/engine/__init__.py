"""Play-state engine for MythCrafter.

Submodules:
    dice: ``NdS`` notation parsing and rolling (d20 library)
    ownership: Owner checks for reads and character linkage
    characters: Character creation with derived hit points, partial updates
    campaigns: Campaign creation, lookup and status changes
    sessions: Append-only game session log
    service: GameService facade over all of the above

Example:
    >>> from mythcrafter.engine import GameService
    >>> service = GameService()
    >>> service.roll_dice("2d6", 1).total
"""

from __future__ import annotations

from mythcrafter.engine.campaigns import CampaignStateMachine
from mythcrafter.engine.characters import CharacterModel
from mythcrafter.engine.dice import DiceRoller, RollResult, parse_notation, roll
from mythcrafter.engine.ownership import OwnershipGuard
from mythcrafter.engine.service import GameService
from mythcrafter.engine.sessions import SessionLog


__all__ = [
    # Dice
    "DiceRoller",
    "RollResult",
    "parse_notation",
    "roll",
    # Services
    "OwnershipGuard",
    "CharacterModel",
    "CampaignStateMachine",
    "SessionLog",
    "GameService",
]
