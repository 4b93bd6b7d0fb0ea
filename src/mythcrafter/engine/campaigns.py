"""Campaign lifecycle: creation, lookup and partial update.

A campaign is ``active`` when created and may then be set to any status
from any status; there is no transition table.

Creation checks run in a fixed order and each failure has its own error:

    1. the user exists                  -> UserNotFoundError
    2. the character exists             -> CharacterNotFoundError
    3. the character belongs to user    -> OwnershipMismatchError
"""

from __future__ import annotations

from mythcrafter.core.exceptions import (
    CharacterNotFoundError,
    NotFoundError,
    UserNotFoundError,
)
from mythcrafter.core.logging import get_logger
from mythcrafter.engine.ownership import OwnershipGuard
from mythcrafter.models.campaign import Campaign, CampaignCreate, CampaignUpdate
from mythcrafter.models.documents import changed_fields
from mythcrafter.storage.database import Database


logger = get_logger(__name__)


class CampaignStateMachine:
    """Service for user-owned campaigns.

    Attributes:
        database: The backing store.
        guard: Ownership checks for reads and character linkage.
    """

    def __init__(self, database: Database, guard: OwnershipGuard | None = None) -> None:
        self.database = database
        self.guard = guard or OwnershipGuard()

    def create(self, data: CampaignCreate) -> Campaign:
        """Create a campaign for a user and one of that user's characters.

        Args:
            data: Validated creation input.

        Returns:
            The stored campaign, with status 'active'.

        Raises:
            UserNotFoundError: If the user does not exist.
            CharacterNotFoundError: If the character does not exist.
            OwnershipMismatchError: If the character belongs to another user.
        """
        if self.database.get_user(data.user_id) is None:
            raise UserNotFoundError("User not found", entity="user", entity_id=data.user_id)

        character = self.database.get_character(data.character_id)
        if character is None:
            raise CharacterNotFoundError(
                "Character not found",
                entity="character",
                entity_id=data.character_id,
            )

        self.guard.require_link(character, data.user_id)

        campaign = self.database.insert_campaign(data)
        logger.info(
            "Created campaign",
            campaign_id=campaign.id,
            user_id=campaign.user_id,
            character_id=campaign.character_id,
            genre=campaign.genre.value,
        )
        return campaign

    def get(self, campaign_id: int, owner_id: int) -> Campaign | None:
        """Get a campaign, or None if it is missing or owned by someone else."""
        return self.guard.visible(self.database.get_campaign(campaign_id), owner_id)

    def list(self, owner_id: int) -> list[Campaign]:
        return self.database.list_campaigns(owner_id)

    def update(self, patch: CampaignUpdate) -> Campaign:
        """Apply a partial update, including any status change.

        Raises:
            NotFoundError: If no campaign has ``patch.id``.
        """
        updates = patch.field_updates()
        campaign = self.database.update_campaign(patch.id, updates)
        if campaign is None:
            raise NotFoundError("Campaign not found", entity="campaign", entity_id=patch.id)

        logger.info(
            "Updated campaign",
            campaign_id=campaign.id,
            status=campaign.status.value,
            fields=sorted(changed_fields(updates)),
        )
        return campaign


__all__ = ["CampaignStateMachine"]
