"""Ownership checks shared by the character and campaign services.

Two behaviors, deliberately different:

- Reads filter through ``visible``: a record owned by someone else comes
  back as None, exactly like a missing id, so callers cannot discover
  other users' records.
- Campaign creation calls ``require_link``: linking another user's
  character raises OwnershipMismatchError.
"""

from __future__ import annotations

from typing import Protocol, TypeVar

from mythcrafter.core.exceptions import OwnershipMismatchError
from mythcrafter.core.logging import get_logger
from mythcrafter.models.character import Character


logger = get_logger(__name__)


class Owned(Protocol):
    """Anything stored under an owning user."""

    id: int
    user_id: int


OwnedT = TypeVar("OwnedT", bound=Owned)


class OwnershipGuard:
    """Decides whether an acting user may see or link a resource."""

    def owns(self, resource: Owned, user_id: int) -> bool:
        return resource.user_id == user_id

    def visible(self, resource: OwnedT | None, user_id: int) -> OwnedT | None:
        """Return the resource if ``user_id`` owns it, else None.

        Args:
            resource: The looked-up record, or None if the lookup missed.
            user_id: The acting user's id.

        Returns:
            The resource, or None for a miss or a foreign record alike.
        """
        if resource is None or not self.owns(resource, user_id):
            return None
        return resource

    def require_link(self, character: Character, user_id: int) -> None:
        """Ensure a character may be attached to a campaign owned by ``user_id``.

        Raises:
            OwnershipMismatchError: If the character belongs to another user.
        """
        if not self.owns(character, user_id):
            logger.warning(
                "Rejected cross-owner character link",
                user_id=user_id,
                character_id=character.id,
            )
            raise OwnershipMismatchError(
                "Character does not belong to this user",
                user_id=user_id,
                resource_id=character.id,
            )


__all__ = [
    "Owned",
    "OwnershipGuard",
]
