"""Rules constants shared by the MythCrafter models and engine."""

from __future__ import annotations

# =============================================================================
# Ability Scores
# =============================================================================

MIN_ABILITY_SCORE = 1
"""Lowest accepted ability score."""

MAX_ABILITY_SCORE = 20
"""Highest accepted ability score."""

DEFAULT_ABILITY_SCORE = 10
"""Ability score used when creation input omits one (modifier +0)."""

# =============================================================================
# Progression
# =============================================================================

MIN_CHARACTER_LEVEL = 1
"""Minimum character level."""

MAX_CHARACTER_LEVEL = 20
"""Maximum character level."""

HIT_POINTS_PER_LEVEL = 6
"""Flat hit points per level used when deriving maximum HP at creation."""

MIN_HIT_POINTS = 1
"""Derived maximum HP never falls below this."""

DEFAULT_ARMOR_CLASS = 10
"""Armor class used when creation input omits one."""

# =============================================================================
# Dice
# =============================================================================

DICE_NOTATION_PATTERN = r"^([0-9]+)d([0-9]+)$"
"""Accepted dice notation: ASCII count, the letter d, then ASCII die size."""

MIN_DICE_COUNT = 1
MAX_DICE_COUNT = 100

MIN_DIE_SIZE = 1
MAX_DIE_SIZE = 1000

DEFAULT_ROLL_TYPE = "custom"
"""Roll type recorded in the session log when the roll carried none."""

# =============================================================================
# Text Limits
# =============================================================================

MAX_USERNAME_LENGTH = 50
MIN_USERNAME_LENGTH = 3
MAX_CHARACTER_NAME_LENGTH = 100
MAX_CAMPAIGN_TITLE_LENGTH = 200


__all__ = [
    "MIN_ABILITY_SCORE",
    "MAX_ABILITY_SCORE",
    "DEFAULT_ABILITY_SCORE",
    "MIN_CHARACTER_LEVEL",
    "MAX_CHARACTER_LEVEL",
    "HIT_POINTS_PER_LEVEL",
    "MIN_HIT_POINTS",
    "DEFAULT_ARMOR_CLASS",
    "DICE_NOTATION_PATTERN",
    "MIN_DICE_COUNT",
    "MAX_DICE_COUNT",
    "MIN_DIE_SIZE",
    "MAX_DIE_SIZE",
    "DEFAULT_ROLL_TYPE",
    "MAX_USERNAME_LENGTH",
    "MIN_USERNAME_LENGTH",
    "MAX_CHARACTER_NAME_LENGTH",
    "MAX_CAMPAIGN_TITLE_LENGTH",
]
