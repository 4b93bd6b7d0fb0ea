"""Character creation, lookup and partial update.

Creation runs the defaulting pass (``apply_creation_defaults``) and checks
the owner exists before anything is written. Updates are three-state
partial merges; hit points are never recomputed on update.
"""

from __future__ import annotations

from typing import Any

from mythcrafter.core.exceptions import NotFoundError, OwnerNotFoundError
from mythcrafter.core.logging import get_logger
from mythcrafter.engine.ownership import OwnershipGuard
from mythcrafter.models.character import (
    Character,
    CharacterCreate,
    CharacterUpdate,
    apply_creation_defaults,
)
from mythcrafter.models.documents import FieldUpdate, changed_fields
from mythcrafter.storage.database import Database


logger = get_logger(__name__)


class CharacterModel:
    """Service for user-owned characters.

    Attributes:
        database: The backing store.
        guard: Ownership filter applied to reads.
    """

    def __init__(self, database: Database, guard: OwnershipGuard | None = None) -> None:
        self.database = database
        self.guard = guard or OwnershipGuard()

    def create(self, data: CharacterCreate) -> Character:
        """Create a character, deriving omitted hit points.

        Args:
            data: Validated creation input.

        Returns:
            The stored character.

        Raises:
            OwnerNotFoundError: If ``data.user_id`` is not a known user.
        """
        draft = apply_creation_defaults(data)

        if self.database.get_user(draft.user_id) is None:
            raise OwnerNotFoundError(
                "Owner not found",
                entity="user",
                entity_id=draft.user_id,
            )

        character = self.database.insert_character(draft)
        logger.info(
            "Created character",
            character_id=character.id,
            user_id=character.user_id,
            level=character.level,
            max_hit_points=character.max_hit_points,
        )
        return character

    def get(self, character_id: int, owner_id: int) -> Character | None:
        """Get a character if it exists and belongs to ``owner_id``."""
        return self.guard.visible(self.database.get_character(character_id), owner_id)

    def list(self, owner_id: int) -> list[Character]:
        return self.database.list_characters(owner_id)

    def update(self, patch: CharacterUpdate) -> Character:
        """Apply a partial update.

        Args:
            patch: Validated patch; unset fields are preserved.

        Returns:
            The character after the update.

        Raises:
            NotFoundError: If no character has ``patch.id``.
        """
        return self._apply(patch.id, patch.field_updates())

    def adjust_hit_points(self, character_id: int, owner_id: int, delta: int) -> Character:
        """Apply damage (negative delta) or healing (positive delta).

        The result is clamped to [0, max_hit_points].

        Raises:
            NotFoundError: If the character is missing or owned by someone else.
        """
        character = self.get(character_id, owner_id)
        if character is None:
            raise NotFoundError(
                "Character not found",
                entity="character",
                entity_id=character_id,
            )

        new_hit_points = max(0, min(character.max_hit_points, character.hit_points + delta))
        logger.info(
            "Adjusting hit points",
            character_id=character_id,
            delta=delta,
            hit_points=new_hit_points,
        )
        return self._apply(
            character_id,
            {"hit_points": FieldUpdate.set_value(new_hit_points)},
        )

    def _apply(self, character_id: int, updates: dict[str, FieldUpdate[Any]]) -> Character:
        character = self.database.update_character(character_id, updates)
        if character is None:
            raise NotFoundError(
                "Character not found",
                entity="character",
                entity_id=character_id,
            )

        logger.info(
            "Updated character",
            character_id=character_id,
            fields=sorted(changed_fields(updates)),
        )
        return character


__all__ = ["CharacterModel"]
