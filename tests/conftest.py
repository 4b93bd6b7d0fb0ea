"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the MythCrafter test suite.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from mythcrafter.core.config import clear_settings_cache
from mythcrafter.engine.dice import DiceRoller
from mythcrafter.engine.service import GameService
from mythcrafter.models.campaign import Campaign
from mythcrafter.models.character import Character
from mythcrafter.models.user import User
from mythcrafter.storage.database import Database, reset_database


if TYPE_CHECKING:
    from collections.abc import Generator
    from pathlib import Path


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache and global store before and after each test."""
    clear_settings_cache()
    reset_database()
    yield
    clear_settings_cache()
    reset_database()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "MYTHCRAFTER_DATABASE_PATH": str(tmp_path / "env.db"),
        "MYTHCRAFTER_DEBUG": "true",
        "MYTHCRAFTER_LOG_LEVEL": "DEBUG",
        "MYTHCRAFTER_DICE_MAX_DICE_COUNT": "10",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


# =============================================================================
# Storage Fixtures
# =============================================================================


@pytest.fixture
def database(tmp_path: Path) -> Database:
    """Create a fresh SQLite database in a temporary directory."""
    return Database(tmp_path / "mythcrafter.db")


@pytest.fixture
def service(database: Database) -> GameService:
    """Create a GameService over the temporary database with a seeded roller."""
    return GameService(database, dice_roller=DiceRoller(seed=42))


# =============================================================================
# Entity Fixtures
# =============================================================================


@pytest.fixture
def user(service: GameService) -> User:
    """A registered user."""
    return service.create_user(
        {"username": "mira", "email": "mira@example.com", "password_hash": "hash-mira"}
    )


@pytest.fixture
def other_user(service: GameService) -> User:
    """A second, unrelated user."""
    return service.create_user(
        {"username": "tobin", "email": "tobin@example.com", "password_hash": "hash-tobin"}
    )


@pytest.fixture
def sample_character_data(user: User) -> dict[str, Any]:
    """Creation input for a level 3 ranger with no HP fields."""
    return {
        "user_id": user.id,
        "name": "Vex",
        "race": "Half-Elf",
        "character_class": "Ranger",
        "level": 3,
        "strength": 12,
        "dexterity": 16,
        "constitution": 14,
        "intelligence": 10,
        "wisdom": 13,
        "charisma": 8,
        "inventory": {"gold": 25, "items": ["rope", "torch"]},
    }


@pytest.fixture
def character(service: GameService, sample_character_data: dict[str, Any]) -> Character:
    """A stored character owned by ``user``."""
    return service.create_character(sample_character_data)


@pytest.fixture
def foreign_character(service: GameService, other_user: User) -> Character:
    """A stored character owned by ``other_user``."""
    return service.create_character({"user_id": other_user.id, "name": "Orrin"})


@pytest.fixture
def campaign(service: GameService, user: User, character: Character) -> Campaign:
    """An active campaign for ``user`` and ``character``."""
    return service.create_campaign(
        {
            "user_id": user.id,
            "character_id": character.id,
            "title": "Ashfall",
            "genre": "fantasy",
            "description": "The caravan crosses the ash plains.",
        }
    )
