"""Storage module for MythCrafter persistence.

Provides SQLite-based storage for:
- Users (credential hashes only)
- Characters and campaigns (partially updatable rows)
- Game sessions (append-only log)
"""

from mythcrafter.storage.database import (
    Database,
    get_database,
    reset_database,
)

__all__ = [
    "Database",
    "get_database",
    "reset_database",
]
