"""GameService: the operations exposed to the presentation layer.

Wires the character, campaign and session services and the dice roller to
one store, and accepts either validated models or plain dicts.

Example:
    >>> service = GameService(Database("play.db"))
    >>> user = service.create_user({"username": "mira", "email": "m@x.io", "password_hash": "..."})
    >>> hero = service.create_character({"user_id": user.id, "name": "Vex", "constitution": 14})
    >>> result = service.roll_dice("1d20", 3, "Attack Roll")
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, TypeVar

from pydantic import BaseModel

from mythcrafter.core.config import get_settings
from mythcrafter.core.logging import get_logger
from mythcrafter.engine.campaigns import CampaignStateMachine
from mythcrafter.engine.characters import CharacterModel
from mythcrafter.engine.dice import DiceRoller, RollResult
from mythcrafter.engine.ownership import OwnershipGuard
from mythcrafter.engine.sessions import SessionLog
from mythcrafter.models.campaign import Campaign, CampaignCreate, CampaignUpdate
from mythcrafter.models.character import Character, CharacterCreate, CharacterUpdate
from mythcrafter.models.session import GameSession, GameSessionCreate
from mythcrafter.models.user import User, UserCreate
from mythcrafter.storage.database import Database, get_database


logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _coerce(model: type[ModelT], data: ModelT | Mapping[str, Any]) -> ModelT:
    """Validate a mapping into ``model``; pass model instances through."""
    if isinstance(data, model):
        return data
    return model.model_validate(data)


class GameService:
    """Facade over the play-state engine.

    Attributes:
        database: The backing store.
        characters: Character service.
        campaigns: Campaign service.
        sessions: Session log.
        dice: Dice roller.
    """

    def __init__(
        self,
        database: Database | None = None,
        *,
        dice_roller: DiceRoller | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            database: Store to use. Defaults to the configured global store.
            dice_roller: Roller to use. Defaults to an unseeded roller.
        """
        self.database = database or get_database()
        guard = OwnershipGuard()
        self.characters = CharacterModel(self.database, guard)
        self.campaigns = CampaignStateMachine(self.database, guard)
        self.sessions = SessionLog(self.database)
        self.dice = dice_roller or DiceRoller()

    # =========================================================================
    # Users
    # =========================================================================

    def create_user(self, data: UserCreate | Mapping[str, Any]) -> User:
        """Register a user with an already-hashed credential.

        Raises:
            ReferentialError: If the username or email is taken.
        """
        return self.database.insert_user(_coerce(UserCreate, data))

    # =========================================================================
    # Characters
    # =========================================================================

    def create_character(self, data: CharacterCreate | Mapping[str, Any]) -> Character:
        return self.characters.create(_coerce(CharacterCreate, data))

    def get_character(self, character_id: int, owner_id: int) -> Character | None:
        return self.characters.get(character_id, owner_id)

    def list_characters(self, owner_id: int) -> list[Character]:
        return self.characters.list(owner_id)

    def update_character(self, patch: CharacterUpdate | Mapping[str, Any]) -> Character:
        """Partially update a character.

        In a mapping, a missing key leaves the field alone and a ``None``
        value clears it.
        """
        return self.characters.update(_coerce(CharacterUpdate, patch))

    def adjust_hit_points(self, character_id: int, owner_id: int, delta: int) -> Character:
        return self.characters.adjust_hit_points(character_id, owner_id, delta)

    # =========================================================================
    # Campaigns
    # =========================================================================

    def create_campaign(self, data: CampaignCreate | Mapping[str, Any]) -> Campaign:
        return self.campaigns.create(_coerce(CampaignCreate, data))

    def get_campaign(self, campaign_id: int, owner_id: int) -> Campaign | None:
        return self.campaigns.get(campaign_id, owner_id)

    def list_campaigns(self, owner_id: int) -> list[Campaign]:
        return self.campaigns.list(owner_id)

    def update_campaign(self, patch: CampaignUpdate | Mapping[str, Any]) -> Campaign:
        return self.campaigns.update(_coerce(CampaignUpdate, patch))

    # =========================================================================
    # Sessions
    # =========================================================================

    def create_game_session(self, data: GameSessionCreate | Mapping[str, Any]) -> GameSession:
        return self.sessions.append_session(_coerce(GameSessionCreate, data))

    def list_game_sessions(self, campaign_id: int) -> list[GameSession]:
        return self.sessions.list(campaign_id)

    def next_session_number(self, campaign_id: int) -> int:
        return self.sessions.next_session_number(campaign_id)

    # =========================================================================
    # Dice
    # =========================================================================

    def roll_dice(self, notation: str, modifier: int = 0, roll_type: str | None = None) -> RollResult:
        return self.dice.roll(notation, modifier, roll_type)

    # =========================================================================
    # Health
    # =========================================================================

    def healthcheck(self) -> dict[str, Any]:
        """Report service and store health.

        Returns:
            Dict with ``status`` ('ok' or 'degraded'), an ISO ``timestamp``
            and the ``database`` state ('connected' or 'unavailable').
        """
        database_ok = self.database.ping()
        status = {
            "status": "ok" if database_ok else "degraded",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "database": "connected" if database_ok else "unavailable",
            "version": get_settings().app_version,
        }
        if not database_ok:
            logger.warning("Healthcheck degraded", **status)
        return status


__all__ = ["GameService"]
