"""Append-only session log per campaign."""

from __future__ import annotations

from collections.abc import Sequence

from mythcrafter.core.exceptions import CampaignNotFoundError, ReferentialError
from mythcrafter.core.logging import get_logger
from mythcrafter.models.session import DiceRollEvent, GameSession, GameSessionCreate
from mythcrafter.storage.database import Database


logger = get_logger(__name__)


class SessionLog:
    """Records game sessions under a campaign.

    Sessions are write-once. ``session_number`` is whatever the caller
    supplies; it is neither unique nor sequenced here.
    """

    def __init__(self, database: Database) -> None:
        self.database = database

    def append(
        self,
        campaign_id: int,
        session_number: int,
        narrative: str,
        dice_rolls: Sequence[DiceRollEvent] | None = None,
    ) -> GameSession:
        """Log one session.

        Args:
            campaign_id: Campaign the session belongs to.
            session_number: Caller-supplied ordinal, must be positive.
            narrative: What happened.
            dice_rolls: Ordered roll events, if any were recorded.

        Returns:
            The stored session.

        Raises:
            CampaignNotFoundError: If the campaign does not exist.
        """
        data = GameSessionCreate(
            campaign_id=campaign_id,
            session_number=session_number,
            narrative=narrative,
            dice_rolls=list(dice_rolls) if dice_rolls is not None else None,
        )
        return self.append_session(data)

    def append_session(self, data: GameSessionCreate) -> GameSession:
        """Log one session from validated input.

        Raises:
            CampaignNotFoundError: If the campaign does not exist.
        """
        try:
            session = self.database.insert_game_session(data)
        except ReferentialError as exc:
            raise CampaignNotFoundError(
                "Campaign not found",
                table="game_sessions",
                details={"campaign_id": data.campaign_id},
            ) from exc

        logger.info(
            "Logged game session",
            session_id=session.id,
            campaign_id=session.campaign_id,
            session_number=session.session_number,
            dice_rolls=len(session.dice_rolls or []),
        )
        return session

    def list(self, campaign_id: int) -> list[GameSession]:
        """Sessions for a campaign, highest session_number first.

        An unknown campaign yields an empty list.
        """
        return self.database.list_game_sessions(campaign_id)

    def next_session_number(self, campaign_id: int) -> int:
        """Suggest the next session number: logged sessions plus one."""
        return self.database.count_game_sessions(campaign_id) + 1


__all__ = ["SessionLog"]
