"""Enumeration types for MythCrafter.

Fixed value domains shared by the models and mirrored as CHECK constraints
in the relational store.
"""

from __future__ import annotations

from enum import StrEnum


class Ability(StrEnum):
    """The six character ability scores."""

    STR = "strength"
    DEX = "dexterity"
    CON = "constitution"
    INT = "intelligence"
    WIS = "wisdom"
    CHA = "charisma"


class CampaignGenre(StrEnum):
    """Setting genre chosen when a campaign is created."""

    FANTASY = "fantasy"
    CYBERPUNK = "cyberpunk"
    SCI_FI = "sci_fi"
    HORROR = "horror"
    WESTERN = "western"
    MODERN = "modern"
    STEAMPUNK = "steampunk"
    POST_APOCALYPTIC = "post_apocalyptic"


class CampaignStatus(StrEnum):
    """Lifecycle status of a campaign.

    Every campaign starts ACTIVE. Updates may move between any two statuses;
    there is no transition table.
    """

    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"


__all__ = [
    "Ability",
    "CampaignGenre",
    "CampaignStatus",
]
