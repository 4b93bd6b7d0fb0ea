"""Schemaless documents and three-state partial updates.

Inventory, equipment, campaign data and dice-roll logs are opaque JSON
documents: arbitrarily nested maps and lists of null, bool, number and
string. They are typed with pydantic's ``JsonValue`` and stored verbatim so
that what goes in compares equal to what comes out.

Partial updates carry one ``FieldUpdate`` per field. A field is either
ABSENT (keep the stored value), SET_NULL (clear an optional field) or
SET_VALUE (replace the stored value).

Example:
    >>> patch = {"name": FieldUpdate.set_value("Mira"), "notes": FieldUpdate.set_null()}
    >>> [(name, update.resolve("old")) for name, update in patch.items()]
    [('name', 'Mira'), ('notes', None)]
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, JsonValue


Document = dict[str, JsonValue]
"""A JSON object with arbitrary nested content."""

T = TypeVar("T")


class UpdateKind(StrEnum):
    """What a partial update does to one field."""

    ABSENT = "absent"
    SET_NULL = "set_null"
    SET_VALUE = "set_value"


@dataclass(frozen=True)
class FieldUpdate(Generic[T]):
    """A single field's change in a partial update.

    Attributes:
        kind: Whether the field is left alone, cleared, or replaced.
        value: The replacement value; only meaningful for SET_VALUE.
    """

    kind: UpdateKind
    value: T | None = None

    @classmethod
    def absent(cls) -> FieldUpdate[Any]:
        return cls(UpdateKind.ABSENT)

    @classmethod
    def set_null(cls) -> FieldUpdate[Any]:
        return cls(UpdateKind.SET_NULL)

    @classmethod
    def set_value(cls, value: T) -> FieldUpdate[T]:
        if value is None:
            msg = "Use FieldUpdate.set_null() to clear a field"
            raise ValueError(msg)
        return cls(UpdateKind.SET_VALUE, value)

    @property
    def is_absent(self) -> bool:
        return self.kind is UpdateKind.ABSENT

    def resolve(self, current: Any) -> Any:
        """Return the field value after applying this update to ``current``."""
        if self.kind is UpdateKind.ABSENT:
            return current
        if self.kind is UpdateKind.SET_NULL:
            return None
        return self.value


def updates_from_model(
    model: BaseModel,
    *,
    exclude: Iterable[str] = ("id",),
) -> dict[str, FieldUpdate[Any]]:
    """Translate a validated patch model into explicit field updates.

    Fields the caller never set become ABSENT, fields explicitly set to
    ``None`` become SET_NULL and everything else becomes SET_VALUE.

    Args:
        model: A pydantic patch model whose fields all default to None.
        exclude: Field names that identify the target rather than change it.

    Returns:
        Mapping of field name to FieldUpdate for every non-excluded field.
    """
    skipped = set(exclude)
    updates: dict[str, FieldUpdate[Any]] = {}
    for name in type(model).model_fields:
        if name in skipped:
            continue
        if name not in model.model_fields_set:
            updates[name] = FieldUpdate.absent()
            continue
        value = getattr(model, name)
        updates[name] = FieldUpdate.set_null() if value is None else FieldUpdate.set_value(value)
    return updates


def changed_fields(updates: Mapping[str, FieldUpdate[Any]]) -> dict[str, FieldUpdate[Any]]:
    """Drop ABSENT entries, keeping only fields that will be written."""
    return {name: update for name, update in updates.items() if not update.is_absent}


__all__ = [
    "Document",
    "UpdateKind",
    "FieldUpdate",
    "updates_from_model",
    "changed_fields",
]
