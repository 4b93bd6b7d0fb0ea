"""Integration tests for the game session log."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from mythcrafter.core.exceptions import CampaignNotFoundError, ReferentialError
from mythcrafter.engine.service import GameService
from mythcrafter.models.campaign import Campaign
from mythcrafter.models.session import DiceRollEvent


class TestAppendSession:
    """Test appending sessions."""

    def test_append(self, service: GameService, campaign: Campaign) -> None:
        """A session is stored with its narrative."""
        session = service.create_game_session(
            {"campaign_id": campaign.id, "session_number": 1, "narrative": "We met at the inn."}
        )

        assert session.id > 0
        assert session.campaign_id == campaign.id
        assert session.dice_rolls is None
        assert session.created_at.tzinfo is not None

    def test_dice_rolls_round_trip(self, service: GameService, campaign: Campaign) -> None:
        """Logged roll events come back equal and in order."""
        when = datetime(2024, 3, 2, 19, 30, tzinfo=timezone.utc)
        rolls = [
            service.roll_dice("1d20", 5, "Attack Roll").to_event(when),
            service.roll_dice("2d6", 3, "Damage Roll").to_event(when),
            service.roll_dice("1d4").to_event(when),
        ]

        session = service.create_game_session(
            {
                "campaign_id": campaign.id,
                "session_number": 2,
                "narrative": "Ambush on the road.",
                "dice_rolls": rolls,
            }
        )

        assert session.dice_rolls == rolls
        assert [event.roll_type for event in session.dice_rolls] == [
            "Attack Roll",
            "Damage Roll",
            "custom",
        ]
        stored = service.list_game_sessions(campaign.id)[0]
        assert stored.dice_rolls == rolls

    def test_unknown_campaign(self, service: GameService) -> None:
        """A missing campaign surfaces as a referential error."""
        with pytest.raises(CampaignNotFoundError) as exc_info:
            service.create_game_session(
                {"campaign_id": 999, "session_number": 1, "narrative": "Lost."}
            )

        assert isinstance(exc_info.value, ReferentialError)
        assert isinstance(exc_info.value.__cause__, ReferentialError)

    def test_session_number_must_be_positive(
        self, service: GameService, campaign: Campaign
    ) -> None:
        """Zero is not a session number."""
        from pydantic import ValidationError

        with pytest.raises(ValidationError):
            service.create_game_session(
                {"campaign_id": campaign.id, "session_number": 0, "narrative": "x"}
            )

    def test_append_with_keywords(self, service: GameService, campaign: Campaign) -> None:
        """The session log accepts plain arguments."""
        event = DiceRollEvent(roll_type="Perception", dice="1d20", result=11, modifier=2, total=13)

        session = service.sessions.append(campaign.id, 4, "Quiet night.", [event])

        assert session.session_number == 4
        assert session.dice_rolls == [event]


class TestListSessions:
    """Test listing sessions."""

    def test_descending_by_session_number(self, service: GameService, campaign: Campaign) -> None:
        """Sessions come back highest number first regardless of insert order."""
        for number in (3, 1, 5, 2):
            service.create_game_session(
                {"campaign_id": campaign.id, "session_number": number, "narrative": f"#{number}"}
            )

        numbers = [s.session_number for s in service.list_game_sessions(campaign.id)]

        assert numbers == [5, 3, 2, 1]

    def test_duplicates_allowed(self, service: GameService, campaign: Campaign) -> None:
        """Session numbers are not unique."""
        for narrative in ("first take", "second take"):
            service.create_game_session(
                {"campaign_id": campaign.id, "session_number": 1, "narrative": narrative}
            )

        assert len(service.list_game_sessions(campaign.id)) == 2

    def test_empty_and_unknown(self, service: GameService, campaign: Campaign) -> None:
        """No sessions and no campaign both give an empty list."""
        assert service.list_game_sessions(campaign.id) == []
        assert service.list_game_sessions(9999) == []

    def test_next_session_number(self, service: GameService, campaign: Campaign) -> None:
        """The suggestion is the logged count plus one."""
        assert service.next_session_number(campaign.id) == 1

        for _ in range(2):
            service.create_game_session(
                {
                    "campaign_id": campaign.id,
                    "session_number": service.next_session_number(campaign.id),
                    "narrative": "On we go.",
                }
            )

        assert service.next_session_number(campaign.id) == 3
        numbers = [s.session_number for s in service.list_game_sessions(campaign.id)]
        assert numbers == [2, 1]
