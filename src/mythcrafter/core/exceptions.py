"""Custom exception hierarchy for the MythCrafter play-state core.

All exceptions inherit from MythCrafterError so callers can handle every
failure at one boundary, while the subclasses let them tell apart the three
outcomes that matter to a caller: bad input (ValidationError), a missing
record (NotFoundError) and a forbidden cross-owner link (OwnershipError).
Constraint violations raised by the store are wrapped in ReferentialError
with the original error chained.

Example:
    >>> from mythcrafter.core.exceptions import OutOfRangeError
    >>> raise OutOfRangeError("Too many dice", notation="101d6", field_name="count")
"""

from __future__ import annotations

from typing import Any


class MythCrafterError(Exception):
    """Base exception for all MythCrafter errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationError(MythCrafterError):
    """Raised when application configuration is invalid or cannot be loaded."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


# =============================================================================
# Input Validation Exceptions
# =============================================================================


class ValidationError(MythCrafterError):
    """Raised when caller input is malformed or out of range.

    Always raised before any mutation takes place.
    """

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


class InvalidNotationError(ValidationError):
    """Raised when a dice notation string is not of the form ``NdS``."""

    def __init__(
        self,
        message: str,
        *,
        notation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize notation error with the rejected notation.

        Args:
            message: Human-readable error description.
            notation: The dice notation that failed to parse.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if notation is not None:
            combined_details["notation"] = notation
        super().__init__(message, details=combined_details)


class OutOfRangeError(ValidationError):
    """Raised when a well-formed dice notation exceeds the allowed bounds."""

    def __init__(
        self,
        message: str,
        *,
        notation: str | None = None,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize range error with the offending component.

        Args:
            message: Human-readable error description.
            notation: The dice notation being rolled.
            field_name: Which component was out of range ("count" or "size").
            invalid_value: The out-of-range value.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if notation is not None:
            combined_details["notation"] = notation
        super().__init__(
            message,
            field_name=field_name,
            invalid_value=invalid_value,
            details=combined_details,
        )


# =============================================================================
# Lookup Exceptions
# =============================================================================


class NotFoundError(MythCrafterError):
    """Raised when an id does not resolve to a stored record."""

    def __init__(
        self,
        message: str,
        *,
        entity: str | None = None,
        entity_id: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize not-found error with entity context.

        Args:
            message: Human-readable error description.
            entity: Kind of record that was looked up (e.g. 'character').
            entity_id: The id that did not resolve.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if entity:
            combined_details["entity"] = entity
        if entity_id is not None:
            combined_details["entity_id"] = entity_id
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(message, details=combined_details)


class OwnerNotFoundError(NotFoundError):
    """Raised when a character is created for a user that does not exist."""


class UserNotFoundError(NotFoundError):
    """Raised when a campaign is created for a user that does not exist."""


class CharacterNotFoundError(NotFoundError):
    """Raised when a campaign references a character that does not exist."""


# =============================================================================
# Ownership Exceptions
# =============================================================================


class OwnershipError(MythCrafterError):
    """Raised when a caller attempts to link resources across owners."""

    def __init__(
        self,
        message: str,
        *,
        user_id: int | None = None,
        resource_id: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize ownership error with the acting user and resource.

        Args:
            message: Human-readable error description.
            user_id: The acting user's id.
            resource_id: Id of the resource owned by someone else.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if user_id is not None:
            combined_details["user_id"] = user_id
        if resource_id is not None:
            combined_details["resource_id"] = resource_id
        super().__init__(message, details=combined_details)


class OwnershipMismatchError(OwnershipError):
    """Raised when a campaign is created with a character owned by another user."""


# =============================================================================
# Storage Exceptions
# =============================================================================


class StorageError(MythCrafterError):
    """Base exception for failures reported by the persistence layer."""

    def __init__(
        self,
        message: str,
        *,
        table: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize storage error with table context.

        Args:
            message: Human-readable error description.
            table: The table the failed statement targeted.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if table:
            combined_details["table"] = table
        super().__init__(message, details=combined_details)


class ReferentialError(StorageError):
    """Raised when the store rejects a write on an integrity constraint.

    Covers dangling foreign keys and duplicate unique values.
    """


class CampaignNotFoundError(ReferentialError):
    """Raised when a game session references a campaign that does not exist."""


__all__ = [
    "MythCrafterError",
    "ConfigurationError",
    "ValidationError",
    "InvalidNotationError",
    "OutOfRangeError",
    "NotFoundError",
    "OwnerNotFoundError",
    "UserNotFoundError",
    "CharacterNotFoundError",
    "OwnershipError",
    "OwnershipMismatchError",
    "StorageError",
    "ReferentialError",
    "CampaignNotFoundError",
]
