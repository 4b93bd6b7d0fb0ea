"""Pydantic V2 schemas for users.

Users own characters and campaigns. The core only stores an already-hashed
credential; hashing and login belong to the credential service.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from mythcrafter.core.constants import MAX_USERNAME_LENGTH, MIN_USERNAME_LENGTH


EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class User(BaseModel):
    """A stored user account."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int
    username: str
    email: str
    password_hash: str = Field(repr=False)
    created_at: datetime
    updated_at: datetime


class UserCreate(BaseModel):
    """Input for registering a user whose credential is already hashed."""

    model_config = ConfigDict(extra="forbid")

    username: Annotated[
        str, Field(min_length=MIN_USERNAME_LENGTH, max_length=MAX_USERNAME_LENGTH)
    ]
    email: Annotated[str, Field(pattern=EMAIL_PATTERN)]
    password_hash: Annotated[str, Field(min_length=1, repr=False)]


__all__ = [
    "EMAIL_PATTERN",
    "User",
    "UserCreate",
]
