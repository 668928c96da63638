"""Engine-wide constants for the SW5E derived-stats engine.

Rule numbers that never vary between tables live here; anything a module
or house rule might swap out (XP tables, power tables, encumbrance
multipliers) lives in RuleTables instead.
"""

from __future__ import annotations

# =============================================================================
# Ability Scores
# =============================================================================

MIN_ABILITY_SCORE = 1
"""Minimum ability score."""

MAX_ABILITY_SCORE = 30
"""Maximum ability score for any creature."""

DEFAULT_ABILITY_SCORE = 10
"""Score used for an ability missing from the actor data."""

BASE_DC = 8
"""Base of every save DC: 8 + modifier + proficiency + bonuses."""

# =============================================================================
# Skills
# =============================================================================

MIN_SKILL_MULTIPLIER = 0.0
"""Skill proficiency multiplier for untrained skills."""

MAX_SKILL_MULTIPLIER = 2.0
"""Skill proficiency multiplier for expertise."""

HALF_PROFICIENCY = 0.5
"""Multiplier granted by Jack of All Trades and Remarkable Athlete."""

PASSIVE_BASE = 10
"""Base of every passive check."""

OBSERVANT_PASSIVE_BONUS = 5
"""Passive bonus from the Observant feat."""

OBSERVANT_SKILLS = frozenset({"prc", "inv"})
"""Skills whose passive score the Observant feat improves."""

REMARKABLE_ATHLETE_ABILITIES = frozenset({"str", "dex", "con"})
"""Abilities covered by Remarkable Athlete."""

# =============================================================================
# Initiative
# =============================================================================

ALERT_INITIATIVE_BONUS = 5
"""Initiative bonus from the Alert feat."""

# =============================================================================
# Encumbrance
# =============================================================================

PHYSICAL_ITEM_TYPES = frozenset(
    {"weapon", "equipment", "consumable", "tool", "backpack", "loot"}
)
"""Item types that have weight and count toward encumbrance."""

WEIGHT_INCREMENT = 0.1
"""Weights snap to the nearest multiple of this value."""

ENCUMBRANCE_THRESHOLD_PCT = 200 / 3
"""Carried weight percentage above which an actor is encumbered."""

MAX_SIZE_CARRY_MULTIPLIER = 8
"""Upper bound on the size multiplier after Powerful Build."""

# =============================================================================
# Powercasting
# =============================================================================

MAX_POWER_LEVEL = 9
"""Highest power level."""

MAX_CLASS_LEVEL = 20
"""Maximum class level, and length of every per-level table."""

FORCE_SCHOOLS = frozenset({"lgt", "uni", "drk"})
"""Power schools tallied as known force powers."""

TECH_SCHOOLS = frozenset({"tec"})
"""Power schools tallied as known tech powers."""

FORCE_POINT_ABILITIES = ("wis", "cha")
"""Abilities whose best modifier adds to the force point pool."""

TECH_POINT_ABILITIES = ("int",)
"""Abilities whose best modifier adds to the tech point pool."""

# =============================================================================
# Feat Flags
# =============================================================================

DEFAULT_CRITICAL_THRESHOLD = 20
"""Natural roll needed for a critical hit without feats."""

MIN_CRITICAL_THRESHOLD = 15
"""Lowest critical threshold a feat can grant."""


__all__ = [
    "MIN_ABILITY_SCORE",
    "MAX_ABILITY_SCORE",
    "DEFAULT_ABILITY_SCORE",
    "BASE_DC",
    "MIN_SKILL_MULTIPLIER",
    "MAX_SKILL_MULTIPLIER",
    "HALF_PROFICIENCY",
    "PASSIVE_BASE",
    "OBSERVANT_PASSIVE_BONUS",
    "OBSERVANT_SKILLS",
    "REMARKABLE_ATHLETE_ABILITIES",
    "ALERT_INITIATIVE_BONUS",
    "PHYSICAL_ITEM_TYPES",
    "WEIGHT_INCREMENT",
    "ENCUMBRANCE_THRESHOLD_PCT",
    "MAX_SIZE_CARRY_MULTIPLIER",
    "MAX_POWER_LEVEL",
    "MAX_CLASS_LEVEL",
    "FORCE_SCHOOLS",
    "TECH_SCHOOLS",
    "FORCE_POINT_ABILITIES",
    "TECH_POINT_ABILITIES",
    "DEFAULT_CRITICAL_THRESHOLD",
    "MIN_CRITICAL_THRESHOLD",
]
