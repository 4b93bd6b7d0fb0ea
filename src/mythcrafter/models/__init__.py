"""Pydantic V2 data models for MythCrafter.

Stored records (User, Character, Campaign, GameSession), caller inputs
(*Create, *Update) and the document / partial-update primitives they share.
"""

from __future__ import annotations

from mythcrafter.models.campaign import (
    CAMPAIGN_NULLABLE_FIELDS,
    Campaign,
    CampaignCreate,
    CampaignUpdate,
)
from mythcrafter.models.character import (
    CHARACTER_NULLABLE_FIELDS,
    CREATION_DEFAULTS,
    Character,
    CharacterCreate,
    CharacterDraft,
    CharacterUpdate,
    apply_creation_defaults,
    calculate_modifier,
    derive_max_hit_points,
)
from mythcrafter.models.documents import (
    Document,
    FieldUpdate,
    UpdateKind,
    changed_fields,
    updates_from_model,
)
from mythcrafter.models.enums import Ability, CampaignGenre, CampaignStatus
from mythcrafter.models.session import DiceRollEvent, GameSession, GameSessionCreate
from mythcrafter.models.user import User, UserCreate


__all__ = [
    # Enums
    "Ability",
    "CampaignGenre",
    "CampaignStatus",
    # Documents and updates
    "Document",
    "FieldUpdate",
    "UpdateKind",
    "changed_fields",
    "updates_from_model",
    # Users
    "User",
    "UserCreate",
    # Characters
    "Character",
    "CharacterCreate",
    "CharacterDraft",
    "CharacterUpdate",
    "CHARACTER_NULLABLE_FIELDS",
    "CREATION_DEFAULTS",
    "apply_creation_defaults",
    "calculate_modifier",
    "derive_max_hit_points",
    # Campaigns
    "Campaign",
    "CampaignCreate",
    "CampaignUpdate",
    "CAMPAIGN_NULLABLE_FIELDS",
    # Sessions
    "DiceRollEvent",
    "GameSession",
    "GameSessionCreate",
]
