"""SQLite persistence layer for MythCrafter.

Four tables, each child referencing its parent with ON DELETE CASCADE:

    users ─┬─< characters ─┐
           └─< campaigns  <┘ ─< game_sessions

Documents (inventory, equipment, campaign_data, dice_rolls) are stored as
JSON text and decoded on read. Timestamps are ISO-8601 UTC text.

Every public method opens its own connection. A row update reads, writes
and re-reads inside one ``BEGIN IMMEDIATE`` transaction; two concurrent
updates of the same row resolve last-write-wins.

Storage location: ``MYTHCRAFTER_DATABASE_PATH`` (default data/mythcrafter.db)
"""

from __future__ import annotations

import json
import sqlite3
from collections.abc import Mapping
from contextlib import contextmanager
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Generator

from mythcrafter.core.config import get_settings
from mythcrafter.core.exceptions import ReferentialError, StorageError, ValidationError
from mythcrafter.core.logging import get_logger
from mythcrafter.models.campaign import Campaign, CampaignCreate
from mythcrafter.models.character import Character, CharacterDraft
from mythcrafter.models.documents import FieldUpdate, changed_fields
from mythcrafter.models.enums import CampaignGenre, CampaignStatus
from mythcrafter.models.session import GameSession, GameSessionCreate
from mythcrafter.models.user import User, UserCreate

logger = get_logger(__name__)


# =============================================================================
# Column Sets
# =============================================================================

CHARACTER_COLUMNS = frozenset(
    {
        "name",
        "race",
        "character_class",
        "level",
        "experience_points",
        "strength",
        "dexterity",
        "constitution",
        "intelligence",
        "wisdom",
        "charisma",
        "hit_points",
        "max_hit_points",
        "armor_class",
        "inventory",
        "equipment",
        "backstory",
        "notes",
    }
)
CHARACTER_JSON_COLUMNS = frozenset({"inventory", "equipment"})

CAMPAIGN_COLUMNS = frozenset({"title", "status", "description", "current_scene", "campaign_data"})
CAMPAIGN_JSON_COLUMNS = frozenset({"campaign_data"})


def _sql_list(values: Any) -> str:
    """Render enum values as a quoted SQL list for CHECK constraints."""
    return ", ".join(f"'{member.value}'" for member in values)


# =============================================================================
# Value Conversion
# =============================================================================


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _next_timestamp(previous: str) -> datetime:
    """Current time, nudged forward so it is strictly after ``previous``."""
    now = _utcnow()
    last = datetime.fromisoformat(previous)
    if last.tzinfo is None:
        last = last.replace(tzinfo=timezone.utc)
    if now <= last:
        now = last + timedelta(microseconds=1)
    return now


def _dump_json(value: Any) -> str | None:
    if value is None:
        return None
    return json.dumps(value, ensure_ascii=False)


def _load_json(text: str | None) -> Any:
    if text is None:
        return None
    return json.loads(text)


def _to_column(value: Any) -> Any:
    """Convert a model value into something sqlite3 binds natively."""
    if isinstance(value, (CampaignGenre, CampaignStatus)):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _decode_row(row: sqlite3.Row, json_columns: frozenset[str]) -> dict[str, Any]:
    data = dict(row)
    for column in json_columns:
        if column in data:
            data[column] = _load_json(data[column])
    return data


def _integrity_error(exc: sqlite3.IntegrityError, table: str) -> ReferentialError:
    return ReferentialError(
        f"Store rejected write: {exc}",
        table=table,
        details={"constraint": str(exc)},
    )


# =============================================================================
# Database Class
# =============================================================================


class Database:
    """SQLite store for users, characters, campaigns and game sessions.

    The store provides single-row atomic reads and writes and cascading
    deletes from parent to child. It does not enforce ownership; that is the
    engine's job.
    """

    SCHEMA_VERSION = 1

    def __init__(self, db_path: str | Path | None = None, *, busy_timeout: float | None = None) -> None:
        """Initialize database.

        Args:
            db_path: Path to database file. If None, uses the configured path.
            busy_timeout: Seconds to wait on a locked database. If None, uses
                the configured timeout.
        """
        storage_settings = get_settings().storage
        self.db_path = Path(db_path) if db_path is not None else storage_settings.database_path
        self.busy_timeout = (
            busy_timeout if busy_timeout is not None else storage_settings.busy_timeout_seconds
        )

        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

        logger.info("Database initialized", path=str(self.db_path))

    @contextmanager
    def _get_connection(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a database connection with foreign keys enforced."""
        conn = sqlite3.connect(str(self.db_path), timeout=self.busy_timeout)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _init_schema(self) -> None:
        """Create tables and indexes if they do not exist yet."""
        with self._get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    username TEXT NOT NULL UNIQUE,
                    email TEXT NOT NULL UNIQUE,
                    password_hash TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS characters (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                    name TEXT NOT NULL,
                    race TEXT,
                    character_class TEXT,
                    level INTEGER NOT NULL DEFAULT 1,
                    experience_points INTEGER NOT NULL DEFAULT 0,
                    strength INTEGER NOT NULL DEFAULT 10,
                    dexterity INTEGER NOT NULL DEFAULT 10,
                    constitution INTEGER NOT NULL DEFAULT 10,
                    intelligence INTEGER NOT NULL DEFAULT 10,
                    wisdom INTEGER NOT NULL DEFAULT 10,
                    charisma INTEGER NOT NULL DEFAULT 10,
                    hit_points INTEGER NOT NULL DEFAULT 10,
                    max_hit_points INTEGER NOT NULL DEFAULT 10,
                    armor_class INTEGER NOT NULL DEFAULT 10,
                    inventory TEXT,
                    equipment TEXT,
                    backstory TEXT,
                    notes TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            cursor.execute(f"""
                CREATE TABLE IF NOT EXISTS campaigns (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
                    character_id INTEGER NOT NULL REFERENCES characters(id) ON DELETE CASCADE,
                    title TEXT NOT NULL,
                    genre TEXT NOT NULL CHECK (genre IN ({_sql_list(CampaignGenre)})),
                    status TEXT NOT NULL DEFAULT 'active'
                        CHECK (status IN ({_sql_list(CampaignStatus)})),
                    description TEXT,
                    current_scene TEXT,
                    campaign_data TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS game_sessions (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    campaign_id INTEGER NOT NULL REFERENCES campaigns(id) ON DELETE CASCADE,
                    session_number INTEGER NOT NULL,
                    narrative TEXT NOT NULL,
                    dice_rolls TEXT,
                    created_at TEXT NOT NULL
                )
            """)

            cursor.execute("CREATE INDEX IF NOT EXISTS idx_characters_user ON characters(user_id)")
            cursor.execute("CREATE INDEX IF NOT EXISTS idx_campaigns_user ON campaigns(user_id)")
            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_game_sessions_campaign
                ON game_sessions(campaign_id, session_number DESC)
            """)

            cursor.execute(
                "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
                (self.SCHEMA_VERSION,),
            )

    def ping(self) -> bool:
        """Check that the database answers a trivial query."""
        try:
            with self._get_connection() as conn:
                conn.execute("SELECT 1").fetchone()
        except sqlite3.Error as exc:
            logger.error("Database ping failed", error=str(exc))
            return False
        return True

    def _update_row(
        self,
        table: str,
        row_id: int,
        updates: Mapping[str, FieldUpdate[Any]],
        *,
        columns: frozenset[str],
        json_columns: frozenset[str],
    ) -> sqlite3.Row | None:
        """Apply field updates to one row and refresh ``updated_at``.

        Returns:
            The row after the update, or None if ``row_id`` does not exist
            (in which case nothing is written).
        """
        writes = changed_fields(updates)
        unknown = set(writes) - columns
        if unknown:
            raise ValidationError(
                f"Cannot update unknown {table} fields",
                field_name=", ".join(sorted(unknown)),
            )

        assignments: list[str] = []
        args: list[Any] = []
        for column, update in writes.items():
            value = update.resolve(None)
            if column in json_columns:
                value = _dump_json(value)
            assignments.append(f"{column} = ?")
            args.append(_to_column(value))

        with self._get_connection() as conn:
            conn.execute("BEGIN IMMEDIATE")
            current = conn.execute(
                f"SELECT updated_at FROM {table} WHERE id = ?", (row_id,)
            ).fetchone()
            if current is None:
                return None

            assignments.append("updated_at = ?")
            args.append(_next_timestamp(current["updated_at"]).isoformat())
            try:
                conn.execute(
                    f"UPDATE {table} SET {', '.join(assignments)} WHERE id = ?",
                    (*args, row_id),
                )
            except sqlite3.IntegrityError as exc:
                raise _integrity_error(exc, table) from exc
            return conn.execute(f"SELECT * FROM {table} WHERE id = ?", (row_id,)).fetchone()

    # =========================================================================
    # User Operations
    # =========================================================================

    def insert_user(self, data: UserCreate) -> User:
        """Insert a user.

        Raises:
            ReferentialError: If the username or email is already taken.
        """
        now = _utcnow().isoformat()
        with self._get_connection() as conn:
            try:
                cursor = conn.execute(
                    """
                    INSERT INTO users (username, email, password_hash, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (data.username, data.email, data.password_hash, now, now),
                )
            except sqlite3.IntegrityError as exc:
                raise _integrity_error(exc, "users") from exc
            row = conn.execute("SELECT * FROM users WHERE id = ?", (cursor.lastrowid,)).fetchone()

        logger.info("Added user", user_id=row["id"])
        return User.model_validate(dict(row))

    def get_user(self, user_id: int) -> User | None:
        with self._get_connection() as conn:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return User.model_validate(dict(row)) if row else None

    def delete_user(self, user_id: int) -> bool:
        """Delete a user and, by cascade, everything the user owns.

        Returns:
            True if deleted, False if not found.
        """
        with self._get_connection() as conn:
            cursor = conn.execute("DELETE FROM users WHERE id = ?", (user_id,))
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info("Deleted user", user_id=user_id)
        return deleted

    # =========================================================================
    # Character Operations
    # =========================================================================

    def _to_character(self, row: sqlite3.Row) -> Character:
        return Character.model_validate(_decode_row(row, CHARACTER_JSON_COLUMNS))

    def insert_character(self, draft: CharacterDraft) -> Character:
        """Insert a fully resolved character.

        Raises:
            ReferentialError: If the owning user does not exist.
        """
        now = _utcnow().isoformat()
        values = draft.model_dump()
        for column in CHARACTER_JSON_COLUMNS:
            values[column] = _dump_json(values[column])
        values["created_at"] = now
        values["updated_at"] = now

        columns = sorted(values)
        placeholders = ", ".join("?" for _ in columns)
        with self._get_connection() as conn:
            try:
                cursor = conn.execute(
                    f"INSERT INTO characters ({', '.join(columns)}) VALUES ({placeholders})",
                    [values[column] for column in columns],
                )
            except sqlite3.IntegrityError as exc:
                raise _integrity_error(exc, "characters") from exc
            row = conn.execute(
                "SELECT * FROM characters WHERE id = ?", (cursor.lastrowid,)
            ).fetchone()

        return self._to_character(row)

    def get_character(self, character_id: int) -> Character | None:
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM characters WHERE id = ?", (character_id,)
            ).fetchone()
        return self._to_character(row) if row else None

    def list_characters(self, user_id: int) -> list[Character]:
        with self._get_connection() as conn:
            rows = conn.execute(
                "SELECT * FROM characters WHERE user_id = ?", (user_id,)
            ).fetchall()
        return [self._to_character(row) for row in rows]

    def update_character(
        self,
        character_id: int,
        updates: Mapping[str, FieldUpdate[Any]],
    ) -> Character | None:
        """Apply a partial update to a character.

        Returns:
            The updated character, or None if it does not exist.
        """
        row = self._update_row(
            "characters",
            character_id,
            updates,
            columns=CHARACTER_COLUMNS,
            json_columns=CHARACTER_JSON_COLUMNS,
        )
        return self._to_character(row) if row else None

    # =========================================================================
    # Campaign Operations
    # =========================================================================

    def _to_campaign(self, row: sqlite3.Row) -> Campaign:
        return Campaign.model_validate(_decode_row(row, CAMPAIGN_JSON_COLUMNS))

    def insert_campaign(self, data: CampaignCreate) -> Campaign:
        """Insert a campaign with status 'active'.

        Raises:
            ReferentialError: If the user or character does not exist.
        """
        now = _utcnow().isoformat()
        with self._get_connection() as conn:
            try:
                cursor = conn.execute(
                    """
                    INSERT INTO campaigns
                    (user_id, character_id, title, genre, status, description,
                     current_scene, campaign_data, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        data.user_id,
                        data.character_id,
                        data.title,
                        data.genre.value,
                        CampaignStatus.ACTIVE.value,
                        data.description,
                        data.current_scene,
                        _dump_json(data.campaign_data),
                        now,
                        now,
                    ),
                )
            except sqlite3.IntegrityError as exc:
                raise _integrity_error(exc, "campaigns") from exc
            row = conn.execute(
                "SELECT * FROM campaigns WHERE id = ?", (cursor.lastrowid,)
            ).fetchone()

        return self._to_campaign(row)

    def get_campaign(self, campaign_id: int) -> Campaign | None:
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT * FROM campaigns WHERE id = ?", (campaign_id,)
            ).fetchone()
        return self._to_campaign(row) if row else None

    def list_campaigns(self, user_id: int) -> list[Campaign]:
        with self._get_connection() as conn:
            rows = conn.execute(
                "SELECT * FROM campaigns WHERE user_id = ?", (user_id,)
            ).fetchall()
        return [self._to_campaign(row) for row in rows]

    def update_campaign(
        self,
        campaign_id: int,
        updates: Mapping[str, FieldUpdate[Any]],
    ) -> Campaign | None:
        """Apply a partial update to a campaign.

        Returns:
            The updated campaign, or None if it does not exist.
        """
        row = self._update_row(
            "campaigns",
            campaign_id,
            updates,
            columns=CAMPAIGN_COLUMNS,
            json_columns=CAMPAIGN_JSON_COLUMNS,
        )
        return self._to_campaign(row) if row else None

    # =========================================================================
    # Game Session Operations
    # =========================================================================

    def _to_game_session(self, row: sqlite3.Row) -> GameSession:
        return GameSession.model_validate(_decode_row(row, frozenset({"dice_rolls"})))

    def insert_game_session(self, data: GameSessionCreate) -> GameSession:
        """Append a game session.

        Raises:
            ReferentialError: If the campaign does not exist.
        """
        dice_rolls = (
            [event.model_dump(mode="json") for event in data.dice_rolls]
            if data.dice_rolls is not None
            else None
        )
        now = _utcnow().isoformat()
        with self._get_connection() as conn:
            try:
                cursor = conn.execute(
                    """
                    INSERT INTO game_sessions
                    (campaign_id, session_number, narrative, dice_rolls, created_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        data.campaign_id,
                        data.session_number,
                        data.narrative,
                        _dump_json(dice_rolls),
                        now,
                    ),
                )
            except sqlite3.IntegrityError as exc:
                raise _integrity_error(exc, "game_sessions") from exc
            row = conn.execute(
                "SELECT * FROM game_sessions WHERE id = ?", (cursor.lastrowid,)
            ).fetchone()

        return self._to_game_session(row)

    def list_game_sessions(self, campaign_id: int) -> list[GameSession]:
        """Get a campaign's sessions, highest session_number first."""
        with self._get_connection() as conn:
            rows = conn.execute(
                """
                SELECT * FROM game_sessions WHERE campaign_id = ?
                ORDER BY session_number DESC, id DESC
                """,
                (campaign_id,),
            ).fetchall()
        return [self._to_game_session(row) for row in rows]

    def count_game_sessions(self, campaign_id: int) -> int:
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT COUNT(*) FROM game_sessions WHERE campaign_id = ?", (campaign_id,)
            ).fetchone()
        return row[0]


# =============================================================================
# Singleton Instance
# =============================================================================


_database_instance: Database | None = None


def get_database() -> Database:
    """Get the global database instance at the configured path."""
    global _database_instance  # noqa: PLW0603

    if _database_instance is None:
        try:
            _database_instance = Database()
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to open database: {exc}") from exc

    return _database_instance


def reset_database() -> None:
    """Drop the global instance so the next call reopens from settings."""
    global _database_instance  # noqa: PLW0603
    _database_instance = None


__all__ = [
    "Database",
    "get_database",
    "reset_database",
]
