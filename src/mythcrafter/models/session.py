"""Pydantic V2 schemas for game sessions.

A game session is an immutable log entry under a campaign: the narrative of
one sitting plus the dice rolled during it. Each logged roll keeps only the
aggregate ``result`` (sum of the dice), not the individual die faces.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class DiceRollEvent(BaseModel):
    """One dice roll recorded in a session log.

    Attributes:
        roll_type: What the roll was for (e.g. 'Attack Roll').
        dice: Dice notation that was rolled (e.g. '1d20').
        result: Sum of the dice before the modifier.
        modifier: Flat modifier applied.
        total: result + modifier as reported by the roller.
        timestamp: When the roll happened.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    roll_type: str
    dice: str
    result: int
    modifier: int
    total: int
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class GameSession(BaseModel):
    """A stored, write-once game session.

    Attributes:
        id: Store-assigned identifier.
        campaign_id: The campaign this session belongs to.
        session_number: Caller-supplied ordinal; not unique, not sequenced.
        narrative: What happened this session.
        dice_rolls: Ordered dice roll log, or None when nothing was logged.
        created_at: When the session was recorded.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    campaign_id: int
    session_number: int
    narrative: str
    dice_rolls: list[DiceRollEvent] | None = None
    created_at: datetime


class GameSessionCreate(BaseModel):
    """Caller input for appending a session to a campaign's log."""

    model_config = ConfigDict(extra="forbid")

    campaign_id: int
    session_number: Annotated[int, Field(gt=0)]
    narrative: str
    dice_rolls: list[DiceRollEvent] | None = None


__all__ = [
    "DiceRollEvent",
    "GameSession",
    "GameSessionCreate",
]
