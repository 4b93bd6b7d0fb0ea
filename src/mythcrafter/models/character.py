"""Pydantic V2 schemas for characters.

Defines the stored Character record, the creation input with its single
defaulting pass, and the partial-update input.

Hit-point derivation happens once, at creation, and only for HP fields the
caller left out:

    max_hit_points = max(1, level * 6 + modifier(constitution))
    hit_points     = max_hit_points

Updates never recompute hit points, even when level or constitution change.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

from mythcrafter.core.constants import (
    DEFAULT_ABILITY_SCORE,
    DEFAULT_ARMOR_CLASS,
    HIT_POINTS_PER_LEVEL,
    MAX_ABILITY_SCORE,
    MAX_CHARACTER_LEVEL,
    MAX_CHARACTER_NAME_LENGTH,
    MIN_ABILITY_SCORE,
    MIN_CHARACTER_LEVEL,
    MIN_HIT_POINTS,
)
from mythcrafter.models.documents import Document, FieldUpdate, updates_from_model
from mythcrafter.models.enums import Ability


# =============================================================================
# Validators and Type Definitions
# =============================================================================

AbilityScore = Annotated[
    int,
    Field(ge=MIN_ABILITY_SCORE, le=MAX_ABILITY_SCORE, description="Ability score (1-20)"),
]
Level = Annotated[
    int,
    Field(ge=MIN_CHARACTER_LEVEL, le=MAX_CHARACTER_LEVEL, description="Character level (1-20)"),
]
CharacterName = Annotated[str, Field(min_length=1, max_length=MAX_CHARACTER_NAME_LENGTH)]


def calculate_modifier(score: int) -> int:
    """Calculate the ability modifier from an ability score.

    The modifier is floor((score - 10) / 2).

    Args:
        score: The ability score.

    Returns:
        The ability modifier.

    Example:
        >>> calculate_modifier(14)
        2
        >>> calculate_modifier(7)
        -2
    """
    return (score - 10) // 2


def derive_max_hit_points(level: int, constitution: int) -> int:
    """Derive default maximum hit points for a new character.

    Args:
        level: Character level.
        constitution: Constitution score.

    Returns:
        ``level * 6 + modifier(constitution)``, never less than 1.

    Example:
        >>> derive_max_hit_points(3, 14)
        20
        >>> derive_max_hit_points(1, 1)
        1
    """
    return max(MIN_HIT_POINTS, level * HIT_POINTS_PER_LEVEL + calculate_modifier(constitution))


# =============================================================================
# Stored Record
# =============================================================================


class Character(BaseModel):
    """A stored character owned by one user.

    Attributes:
        id: Store-assigned identifier.
        user_id: Owning user's id.
        name: Character name.
        race: Optional race.
        character_class: Optional class.
        level: Character level (1-20).
        experience_points: Accumulated experience.
        strength..charisma: The six ability scores (1-20).
        hit_points: Current hit points. Not capped at max_hit_points by
            this model; the play screen clamps.
        max_hit_points: Maximum hit points.
        armor_class: Armor class.
        inventory: Opaque inventory document.
        equipment: Opaque equipment document.
        backstory: Free-text backstory.
        notes: Free-text notes.
        created_at: Creation time, never changes.
        updated_at: Time of the last successful update.
    """

    model_config = ConfigDict(extra="ignore")

    id: int
    user_id: int
    name: str
    race: str | None = None
    character_class: str | None = None
    level: int
    experience_points: int
    strength: int
    dexterity: int
    constitution: int
    intelligence: int
    wisdom: int
    charisma: int
    hit_points: int
    max_hit_points: int
    armor_class: int
    inventory: Document | None = None
    equipment: Document | None = None
    backstory: str | None = None
    notes: str | None = None
    created_at: datetime
    updated_at: datetime

    def get_score(self, ability: Ability) -> int:
        """Get the score for one ability."""
        return getattr(self, ability.value)

    def get_modifier(self, ability: Ability) -> int:
        """Get the modifier for one ability."""
        return calculate_modifier(self.get_score(ability))

    @computed_field  # type: ignore[prop-decorator]
    @property
    def ability_modifiers(self) -> dict[str, int]:
        """Modifiers for all six abilities, keyed by ability name."""
        return {ability.value: self.get_modifier(ability) for ability in Ability}


# =============================================================================
# Creation
# =============================================================================


class CharacterCreate(BaseModel):
    """Caller input for creating a character.

    Any field left as None is filled by ``apply_creation_defaults``.
    """

    model_config = ConfigDict(extra="forbid")

    user_id: int
    name: CharacterName
    race: str | None = None
    character_class: str | None = None
    level: Level | None = None
    experience_points: Annotated[int, Field(ge=0)] | None = None
    strength: AbilityScore | None = None
    dexterity: AbilityScore | None = None
    constitution: AbilityScore | None = None
    intelligence: AbilityScore | None = None
    wisdom: AbilityScore | None = None
    charisma: AbilityScore | None = None
    hit_points: Annotated[int, Field(gt=0)] | None = None
    max_hit_points: Annotated[int, Field(gt=0)] | None = None
    armor_class: Annotated[int, Field(ge=1)] | None = None
    inventory: Document | None = None
    equipment: Document | None = None
    backstory: str | None = None
    notes: str | None = None


class CharacterDraft(BaseModel):
    """A fully resolved character ready to be inserted."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    user_id: int
    name: CharacterName
    race: str | None
    character_class: str | None
    level: Level
    experience_points: Annotated[int, Field(ge=0)]
    strength: AbilityScore
    dexterity: AbilityScore
    constitution: AbilityScore
    intelligence: AbilityScore
    wisdom: AbilityScore
    charisma: AbilityScore
    hit_points: int
    max_hit_points: Annotated[int, Field(ge=MIN_HIT_POINTS)]
    armor_class: Annotated[int, Field(ge=1)]
    inventory: Document | None
    equipment: Document | None
    backstory: str | None
    notes: str | None


CREATION_DEFAULTS: dict[str, Any] = {
    "race": None,
    "character_class": None,
    "level": MIN_CHARACTER_LEVEL,
    "experience_points": 0,
    **{ability.value: DEFAULT_ABILITY_SCORE for ability in Ability},
    "armor_class": DEFAULT_ARMOR_CLASS,
    "inventory": None,
    "equipment": None,
    "backstory": None,
    "notes": None,
}
"""Values used for every creation field the caller omits (HP excluded)."""


def apply_creation_defaults(data: CharacterCreate) -> CharacterDraft:
    """Fill omitted creation fields and derive hit points.

    Explicitly supplied values always win over defaults and derivation.

    Args:
        data: Validated creation input.

    Returns:
        The resolved draft.
    """
    supplied = {
        name: getattr(data, name)
        for name in type(data).model_fields
        if getattr(data, name) is not None
    }
    values = {**CREATION_DEFAULTS, **supplied}

    max_hit_points = values.get("max_hit_points")
    if max_hit_points is None:
        max_hit_points = derive_max_hit_points(values["level"], values["constitution"])
    hit_points = values.get("hit_points")
    if hit_points is None:
        hit_points = max_hit_points

    values["max_hit_points"] = max_hit_points
    values["hit_points"] = hit_points
    return CharacterDraft(**values)


# =============================================================================
# Partial Update
# =============================================================================

CHARACTER_NULLABLE_FIELDS = frozenset(
    {"race", "character_class", "inventory", "equipment", "backstory", "notes"}
)


class CharacterUpdate(BaseModel):
    """Caller input for a partial character update.

    Omitted fields are preserved, fields set to None are cleared (optional
    fields only), other values replace the stored ones verbatim.
    """

    model_config = ConfigDict(extra="forbid")

    id: int
    name: CharacterName | None = None
    race: str | None = None
    character_class: str | None = None
    level: Level | None = None
    experience_points: Annotated[int, Field(ge=0)] | None = None
    strength: AbilityScore | None = None
    dexterity: AbilityScore | None = None
    constitution: AbilityScore | None = None
    intelligence: AbilityScore | None = None
    wisdom: AbilityScore | None = None
    charisma: AbilityScore | None = None
    hit_points: Annotated[int, Field(ge=0)] | None = None
    max_hit_points: Annotated[int, Field(gt=0)] | None = None
    armor_class: Annotated[int, Field(ge=1)] | None = None
    inventory: Document | None = None
    equipment: Document | None = None
    backstory: str | None = None
    notes: str | None = None

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> "CharacterUpdate":
        """Only optional fields may be cleared."""
        for name in self.model_fields_set - CHARACTER_NULLABLE_FIELDS - {"id"}:
            if getattr(self, name) is None:
                msg = f"Field '{name}' cannot be cleared"
                raise ValueError(msg)
        return self

    def field_updates(self) -> dict[str, FieldUpdate[Any]]:
        """Explicit per-field updates for this patch."""
        return updates_from_model(self)


__all__ = [
    "AbilityScore",
    "Level",
    "calculate_modifier",
    "derive_max_hit_points",
    "Character",
    "CharacterCreate",
    "CharacterDraft",
    "CREATION_DEFAULTS",
    "apply_creation_defaults",
    "CHARACTER_NULLABLE_FIELDS",
    "CharacterUpdate",
]
