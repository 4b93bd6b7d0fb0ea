"""Integration tests for the campaign lifecycle."""

from __future__ import annotations

from typing import Any

import pytest

from mythcrafter.core.exceptions import (
    CharacterNotFoundError,
    NotFoundError,
    OwnershipMismatchError,
    UserNotFoundError,
)
from mythcrafter.engine.service import GameService
from mythcrafter.models.campaign import Campaign
from mythcrafter.models.character import Character
from mythcrafter.models.enums import CampaignGenre, CampaignStatus
from mythcrafter.models.user import User


NESTED_DATA: dict[str, Any] = {
    "world": {
        "regions": [
            {"name": "Ash Plains", "danger": 3, "discovered": True},
            {"name": "Glass Coast", "danger": 5.5, "discovered": False, "notes": None},
        ],
        "calendar": {"day": 12, "season": "late frost"},
    },
    "quests": [["find the well", False], ["bury the dead", True]],
    "relationships": {"Ilsa": {"trust": -2, "tags": []}, "Ömer": {}},
    "empty": [],
    "flag": None,
}


class TestCreateCampaign:
    """Test campaign creation checks."""

    def test_create(self, campaign: Campaign, user: User, character: Character) -> None:
        """A new campaign is active and linked."""
        assert campaign.user_id == user.id
        assert campaign.character_id == character.id
        assert campaign.genre is CampaignGenre.FANTASY
        assert campaign.status is CampaignStatus.ACTIVE
        assert campaign.campaign_data is None

    def test_unknown_user(self, service: GameService, character: Character) -> None:
        """A missing user fails first."""
        with pytest.raises(UserNotFoundError):
            service.create_campaign(
                {"user_id": 999, "character_id": character.id, "title": "T", "genre": "horror"}
            )

    def test_unknown_character(self, service: GameService, user: User) -> None:
        """A missing character fails next."""
        with pytest.raises(CharacterNotFoundError):
            service.create_campaign(
                {"user_id": user.id, "character_id": 999, "title": "T", "genre": "horror"}
            )

    def test_unknown_user_checked_before_character(self, service: GameService) -> None:
        """With both missing the user error wins."""
        with pytest.raises(UserNotFoundError):
            service.create_campaign(
                {"user_id": 998, "character_id": 999, "title": "T", "genre": "horror"}
            )

    def test_foreign_character(
        self, service: GameService, user: User, foreign_character: Character
    ) -> None:
        """Linking another user's character is an ownership error."""
        with pytest.raises(OwnershipMismatchError):
            service.create_campaign(
                {
                    "user_id": user.id,
                    "character_id": foreign_character.id,
                    "title": "Stolen Hero",
                    "genre": "western",
                }
            )

        assert service.list_campaigns(user.id) == []

    def test_nested_data_round_trips(
        self, service: GameService, user: User, character: Character
    ) -> None:
        """Arbitrarily nested campaign data reads back equal."""
        created = service.create_campaign(
            {
                "user_id": user.id,
                "character_id": character.id,
                "title": "Glass Coast",
                "genre": "post_apocalyptic",
                "campaign_data": NESTED_DATA,
            }
        )

        fetched = service.get_campaign(created.id, user.id)

        assert fetched is not None
        assert fetched.campaign_data == NESTED_DATA
        assert list(fetched.campaign_data) == list(NESTED_DATA)

    def test_supplied_status_ignored_on_create(
        self, service: GameService, user: User, character: Character
    ) -> None:
        """A status in the input is dropped and the campaign starts active."""
        created = service.create_campaign(
            {
                "user_id": user.id,
                "character_id": character.id,
                "title": "T",
                "genre": "modern",
                "status": "completed",
            }
        )

        assert created.status is CampaignStatus.ACTIVE
        fetched = service.get_campaign(created.id, user.id)
        assert fetched is not None
        assert fetched.status is CampaignStatus.ACTIVE

    def test_unknown_genre(self, service: GameService, user: User, character: Character) -> None:
        """Genres come from a fixed set."""
        from pydantic import ValidationError

        with pytest.raises(ValidationError):
            service.create_campaign(
                {"user_id": user.id, "character_id": character.id, "title": "T", "genre": "noir"}
            )


class TestReadCampaign:
    """Test owner-scoped campaign reads."""

    def test_missing_and_foreign_both_none(
        self, service: GameService, campaign: Campaign, other_user: User
    ) -> None:
        """A foreign campaign is indistinguishable from a missing one."""
        assert service.get_campaign(campaign.id, other_user.id) is None
        assert service.get_campaign(campaign.id + 1000, other_user.id) is None

    def test_list_by_owner(
        self, service: GameService, campaign: Campaign, user: User, other_user: User
    ) -> None:
        """Only the owner's campaigns are listed."""
        assert [c.id for c in service.list_campaigns(user.id)] == [campaign.id]
        assert service.list_campaigns(other_user.id) == []


class TestUpdateCampaign:
    """Test partial updates and status changes."""

    @pytest.mark.parametrize(
        "path",
        [
            ["completed", "active"],
            ["paused", "completed", "paused"],
            ["completed", "completed"],
        ],
    )
    def test_any_status_from_any_status(
        self, service: GameService, campaign: Campaign, path: list[str]
    ) -> None:
        """No transition is refused."""
        for status in path:
            updated = service.update_campaign({"id": campaign.id, "status": status})
            assert updated.status == status

    def test_partial_merge(self, service: GameService, campaign: Campaign) -> None:
        """Absent keeps, null clears, value replaces."""
        updated = service.update_campaign(
            {"id": campaign.id, "current_scene": "The well", "description": None}
        )

        assert updated.current_scene == "The well"
        assert updated.description is None
        assert updated.title == campaign.title
        assert updated.status is CampaignStatus.ACTIVE
        assert updated.updated_at > campaign.updated_at
        assert updated.created_at == campaign.created_at

    def test_replace_campaign_data(self, service: GameService, campaign: Campaign) -> None:
        """Campaign data is replaced and then cleared."""
        updated = service.update_campaign({"id": campaign.id, "campaign_data": NESTED_DATA})
        assert updated.campaign_data == NESTED_DATA

        cleared = service.update_campaign({"id": campaign.id, "campaign_data": None})
        assert cleared.campaign_data is None

    def test_unknown_id(self, service: GameService) -> None:
        """Updating a missing campaign fails."""
        with pytest.raises(NotFoundError):
            service.update_campaign({"id": 4040, "title": "Nowhere"})
