"""Integration tests for the SQLite store."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from mythcrafter.core.exceptions import ReferentialError, ValidationError
from mythcrafter.engine.service import GameService
from mythcrafter.models.campaign import Campaign
from mythcrafter.models.character import Character
from mythcrafter.models.documents import FieldUpdate
from mythcrafter.models.user import User
from mythcrafter.storage.database import Database, get_database


class TestSchema:
    """Test schema creation."""

    def test_tables_created(self, database: Database) -> None:
        """All tables exist and the version is recorded."""
        with sqlite3.connect(database.db_path) as conn:
            tables = {
                row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
            }
            version = conn.execute("SELECT version FROM schema_version").fetchone()[0]

        assert {"users", "characters", "campaigns", "game_sessions"} <= tables
        assert version == Database.SCHEMA_VERSION

    def test_reopen_keeps_data(self, database: Database, user: User) -> None:
        """Opening the same file again sees existing rows."""
        reopened = Database(database.db_path)

        assert reopened.get_user(user.id) == user

    def test_genre_constraint(self, database: Database, campaign: Campaign) -> None:
        """The store itself rejects unknown genres."""
        with pytest.raises(sqlite3.IntegrityError), sqlite3.connect(database.db_path) as conn:
            conn.execute("UPDATE campaigns SET genre = 'noir' WHERE id = ?", (campaign.id,))

    def test_ping(self, database: Database) -> None:
        """A healthy database answers."""
        assert database.ping() is True


class TestUsers:
    """Test user rows."""

    def test_duplicate_username(self, service: GameService, user: User) -> None:
        """Usernames are unique."""
        with pytest.raises(ReferentialError):
            service.create_user(
                {"username": user.username, "email": "new@example.com", "password_hash": "h"}
            )

    def test_duplicate_email(self, service: GameService, user: User) -> None:
        """Emails are unique."""
        with pytest.raises(ReferentialError):
            service.create_user({"username": "newname", "email": user.email, "password_hash": "h"})

    def test_hash_not_in_repr(self, user: User) -> None:
        """The credential hash is kept out of repr."""
        assert "hash-mira" not in repr(user)


class TestCascade:
    """Test cascading deletes from parent to child."""

    def test_delete_user_removes_everything(
        self, service: GameService, database: Database, user: User, campaign: Campaign
    ) -> None:
        """Deleting a user removes characters, campaigns and sessions."""
        service.create_game_session(
            {"campaign_id": campaign.id, "session_number": 1, "narrative": "Gone soon."}
        )

        assert database.delete_user(user.id) is True

        assert database.get_user(user.id) is None
        assert database.get_character(campaign.character_id) is None
        assert database.get_campaign(campaign.id) is None
        assert database.list_game_sessions(campaign.id) == []

    def test_delete_missing_user(self, database: Database) -> None:
        """Deleting an unknown user reports False."""
        assert database.delete_user(31337) is False


class TestUpdates:
    """Test the store's partial update primitive."""

    def test_missing_row_writes_nothing(self, database: Database) -> None:
        """An unknown id returns None."""
        assert database.update_character(77, {"name": FieldUpdate.set_value("X")}) is None

    def test_unknown_column_rejected(self, database: Database, character: Character) -> None:
        """Only known columns can be written."""
        with pytest.raises(ValidationError):
            database.update_character(character.id, {"user_id": FieldUpdate.set_value(2)})

    def test_empty_update_refreshes_timestamp(
        self, database: Database, character: Character
    ) -> None:
        """An update with nothing to change still touches updated_at."""
        updated = database.update_character(character.id, {"name": FieldUpdate.absent()})

        assert updated is not None
        assert updated.name == character.name
        assert updated.updated_at > character.updated_at


class TestHealthcheck:
    """Test the service healthcheck."""

    def test_healthy(self, service: GameService) -> None:
        """A reachable store reports ok."""
        status = service.healthcheck()

        assert status["status"] == "ok"
        assert status["database"] == "connected"
        assert "timestamp" in status


class TestGetDatabase:
    """Test the global store."""

    def test_configured_path(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """The global store opens at the configured path once."""
        path = tmp_path / "global.db"
        monkeypatch.setenv("MYTHCRAFTER_DATABASE_PATH", str(path))

        database = get_database()

        assert database.db_path == path
        assert path.exists()
        assert get_database() is database
