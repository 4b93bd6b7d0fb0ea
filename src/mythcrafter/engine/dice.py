"""Dice notation parsing and rolling.

Notation is strictly ``NdS``: a count, the letter ``d`` and a die size, with
no modifiers or keep/drop operators. The modifier is passed separately so
that the per-die values, their sum and the final total stay distinguishable.
The dice themselves are rolled by the d20 library.

Example:
    >>> result = roll("1d1", 5)
    >>> result.rolls, result.subtotal, result.total
    ([1], 1, 6)
"""

from __future__ import annotations

import random
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import d20

from mythcrafter.core.config import get_settings
from mythcrafter.core.constants import (
    DEFAULT_ROLL_TYPE,
    DICE_NOTATION_PATTERN,
    MIN_DICE_COUNT,
    MIN_DIE_SIZE,
)
from mythcrafter.core.exceptions import InvalidNotationError, OutOfRangeError, ValidationError
from mythcrafter.core.logging import get_logger
from mythcrafter.models.session import DiceRollEvent


logger = get_logger(__name__)

_NOTATION_RE = re.compile(DICE_NOTATION_PATTERN)


@dataclass(frozen=True)
class RollResult:
    """The outcome of one ``NdS`` roll.

    Attributes:
        notation: The notation that was rolled.
        rolls: Individual die values, in roll order.
        subtotal: Sum of the dice.
        modifier: Flat modifier added after summing.
        total: subtotal + modifier.
        roll_type: Optional label such as 'Attack Roll'.
    """

    notation: str
    rolls: list[int]
    subtotal: int
    modifier: int
    total: int
    roll_type: str | None = None

    def to_event(self, timestamp: datetime | None = None) -> DiceRollEvent:
        """Reduce this roll to the aggregate record kept in a session log.

        Args:
            timestamp: When the roll happened. Defaults to now.

        Returns:
            A DiceRollEvent with ``result`` set to the dice subtotal.
        """
        fields: dict[str, Any] = {
            "roll_type": self.roll_type or DEFAULT_ROLL_TYPE,
            "dice": self.notation,
            "result": self.subtotal,
            "modifier": self.modifier,
            "total": self.total,
        }
        if timestamp is not None:
            fields["timestamp"] = timestamp
        return DiceRollEvent(**fields)


def _bounded(notation: str, digits: str, field_name: str, lower: int, upper: int) -> int:
    """Convert one digit group, raising OutOfRangeError outside [lower, upper].

    Overlong digit strings are rejected before conversion.
    """
    significant = digits.lstrip("0") or "0"
    value = int(significant) if len(significant) <= len(str(upper)) else None
    if value is None or not lower <= value <= upper:
        raise OutOfRangeError(
            f"Dice {field_name} must be between {lower} and {upper}",
            notation=notation,
            field_name=field_name,
            invalid_value=value if value is not None else f"{significant[:12]}...",
        )
    return value


def parse_notation(notation: str) -> tuple[int, int]:
    """Parse and bound-check ``NdS`` notation.

    Args:
        notation: Dice notation, e.g. '3d6'.

    Returns:
        Tuple of (count, size).

    Raises:
        InvalidNotationError: If the string is not ``NdS`` in ASCII digits.
        OutOfRangeError: If count or size is outside the configured bounds.
    """
    match = _NOTATION_RE.fullmatch(notation) if isinstance(notation, str) else None
    if match is None:
        raise InvalidNotationError(
            "Dice notation must look like NdS (e.g. 2d6)",
            notation=notation,
        )

    bounds = get_settings().dice
    count = _bounded(notation, match.group(1), "count", MIN_DICE_COUNT, bounds.max_dice_count)
    size = _bounded(notation, match.group(2), "size", MIN_DIE_SIZE, bounds.max_die_size)
    return count, size


class DiceRoller:
    """Rolls ``NdS`` dice through the d20 library.

    Rolls hold no state between calls, so one roller may be shared freely.
    All rollers draw from the process-wide ``random`` generator.

    Example:
        >>> roller = DiceRoller()
        >>> result = roller.roll("2d6", 3, roll_type="Damage Roll")
        >>> result.total == result.subtotal + 3
        True
    """

    def __init__(self, *, seed: int | None = None) -> None:
        """Initialize the dice roller.

        Args:
            seed: Optional random seed for reproducible rolls.

        Note:
            Seeding reseeds the process-wide ``random`` generator that d20
            draws from, so it also fixes the sequence seen by every other
            roller, including the one behind the module-level ``roll``.
        """
        self._seed = seed
        if seed is not None:
            random.seed(seed)

    def roll(self, notation: str, modifier: int = 0, roll_type: str | None = None) -> RollResult:
        """Roll dice according to the given notation.

        Args:
            notation: Dice notation (e.g., '1d20', '4d6').
            modifier: Flat modifier added to the dice sum.
            roll_type: Optional label carried through to the result.

        Returns:
            RollResult containing the individual dice and totals.

        Raises:
            InvalidNotationError: If the notation is malformed.
            OutOfRangeError: If count or size is out of bounds.
        """
        count, size = parse_notation(notation)

        try:
            result: d20.RollResult = d20.roll(f"{count}d{size}")
        except d20.RollError as exc:
            raise ValidationError(
                f"Dice could not be rolled: {exc}",
                field_name="notation",
                invalid_value=notation,
            ) from exc

        rolls = self._extract_dice_values(result.expr)
        subtotal = sum(rolls)

        logger.debug(
            "Dice rolled",
            notation=notation,
            subtotal=subtotal,
            modifier=modifier,
            roll_type=roll_type,
        )

        return RollResult(
            notation=notation,
            rolls=rolls,
            subtotal=subtotal,
            modifier=modifier,
            total=subtotal + modifier,
            roll_type=roll_type,
        )

    def _extract_dice_values(self, expr: Any) -> list[int]:
        """Extract individual dice values from a d20 expression tree."""
        values: list[int] = []

        def traverse(node: Any) -> None:
            if isinstance(node, d20.Dice):
                for die in node.values:
                    if die.kept:
                        values.append(die.number)
            elif hasattr(node, "children"):
                for child in node.children:
                    traverse(child)

        traverse(expr)
        return values


_default_roller = DiceRoller()


def roll(notation: str, modifier: int = 0, roll_type: str | None = None) -> RollResult:
    """Roll dice with the shared module-level roller.

    Args:
        notation: Dice notation (e.g., '1d20').
        modifier: Flat modifier added to the dice sum.
        roll_type: Optional label carried through to the result.

    Returns:
        RollResult containing the individual dice and totals.
    """
    return _default_roller.roll(notation, modifier, roll_type)


__all__ = [
    "RollResult",
    "DiceRoller",
    "parse_notation",
    "roll",
]
