"""SW5E level and power progression data.

This module holds the static rule tables the derived-stats engine reads:
- XP thresholds for each character level
- XP awarded per challenge rating
- Per-archetype powers known, power points and maximum power level by level
- Per-archetype slot limits by power level
- Maneuvers known, superiority dice and die size by superiority level
- Encumbrance constants and size carry multipliers

Tables are plain data wrapped in a frozen RuleTables model. All lookups are
fail-soft: an index outside a table yields 0 instead of raising, because the
engine runs on every sheet render and must never block it.
"""

from __future__ import annotations

import math
from types import MappingProxyType
from typing import Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field, model_validator

from sw5e_engine.core.constants import MAX_CLASS_LEVEL, MAX_POWER_LEVEL
from sw5e_engine.core.exceptions import RuleTableError
from sw5e_engine.models.enums import Powercasting, Size


MULTICLASS_KEY = "multi"
"""Table key used for true multiclass casters."""

NONE_KEY = Powercasting.NONE.value
"""Table key for actors without powercasting."""


# =============================================================================
# XP Thresholds
# =============================================================================

CHARACTER_EXP_LEVELS: tuple[int, ...] = (
    0, 300, 900, 2700, 6500, 14000, 23000, 34000, 48000, 64000,
    85000, 100000, 120000, 140000, 165000, 195000, 225000, 265000, 305000, 355000,
)

CR_EXP_LEVELS: tuple[int, ...] = (
    10, 200, 450, 700, 1100, 1800, 2300, 2900, 3900, 5000, 5900, 7200, 8400, 10000,
    11500, 13000, 15000, 18000, 20000, 22000, 25000, 33000, 41000, 50000, 62000,
    75000, 90000, 105000, 120000, 135000, 155000,
)


# =============================================================================
# Power Progression (index = class level - 1)
# =============================================================================

_FULL_MAX_LEVEL = (1, 1, 2, 2, 3, 3, 4, 4, 5, 5, 6, 6, 7, 7, 8, 8, 9, 9, 9, 9)

POWER_MAX_LEVEL: dict[str, tuple[int, ...]] = {
    "consular": _FULL_MAX_LEVEL,
    "engineer": _FULL_MAX_LEVEL,
    "guardian": (1, 1, 1, 1, 2, 2, 2, 2, 3, 3, 3, 3, 4, 4, 4, 4, 5, 5, 5, 5),
    "scout": (0, 1, 1, 1, 1, 2, 2, 2, 2, 3, 3, 3, 3, 4, 4, 4, 4, 5, 5, 5),
    "sentinel": (1, 1, 1, 2, 2, 2, 3, 3, 3, 4, 4, 4, 5, 5, 5, 6, 6, 6, 7, 7),
    MULTICLASS_KEY: _FULL_MAX_LEVEL,
    NONE_KEY: (0,) * MAX_CLASS_LEVEL,
}

POWERS_KNOWN: dict[str, tuple[int, ...]] = {
    "consular": (9, 11, 13, 15, 17, 19, 21, 23, 25, 26, 28, 29, 31, 32, 34, 35, 37, 38, 39, 40),
    "engineer": (6, 7, 9, 10, 12, 13, 15, 16, 18, 19, 21, 22, 23, 24, 25, 26, 27, 28, 29, 30),
    "guardian": (5, 7, 9, 10, 12, 13, 14, 15, 17, 18, 19, 20, 22, 23, 24, 25, 27, 28, 29, 30),
    "scout": (0, 2, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15, 16, 17, 18, 19, 20, 21),
    "sentinel": (7, 9, 11, 13, 15, 17, 18, 19, 21, 22, 24, 25, 26, 28, 29, 30, 32, 33, 34, 35),
    NONE_KEY: (0,) * MAX_CLASS_LEVEL,
}

POWER_POINTS: dict[str, tuple[int, ...]] = {
    "consular": tuple(4 * level for level in range(1, MAX_CLASS_LEVEL + 1)),
    "engineer": tuple(2 * level for level in range(1, MAX_CLASS_LEVEL + 1)),
    "guardian": tuple(2 * level for level in range(1, MAX_CLASS_LEVEL + 1)),
    "scout": (0,) + tuple(range(2, MAX_CLASS_LEVEL + 1)),
    "sentinel": tuple(3 * level for level in range(1, MAX_CLASS_LEVEL + 1)),
    NONE_KEY: (0,) * MAX_CLASS_LEVEL,
}

# Slots per power level (index = power level - 1). UNLIMITED_SLOTS marks levels
# cast freely from the point pool; 1 marks once-per-rest high level casting.
UNLIMITED_SLOTS = 1000
_U = UNLIMITED_SLOTS

POWER_LIMIT: dict[str, tuple[int, ...]] = {
    "consular": (_U, _U, _U, _U, _U, 1, 1, 1, 1),
    "engineer": (_U, _U, _U, _U, _U, 1, 1, 1, 1),
    "guardian": (_U, _U, _U, _U, 1, 0, 0, 0, 0),
    "scout": (_U, _U, _U, _U, 1, 0, 0, 0, 0),
    "sentinel": (_U, _U, _U, _U, _U, 1, 1, 0, 0),
    MULTICLASS_KEY: (_U, _U, _U, _U, _U, 1, 1, 1, 1),
    NONE_KEY: (0,) * MAX_POWER_LEVEL,
}


# =============================================================================
# Superiority Progression (index = superiority level, 0-20)
# =============================================================================

MANEUVERS_KNOWN: tuple[int, ...] = (
    0, 0, 2, 3, 3, 4, 4, 5, 5, 6, 6, 7, 7, 8, 8, 9, 9, 10, 10, 11, 11,
)

SUPERIORITY_DICE: tuple[int, ...] = (
    0, 0, 2, 2, 2, 3, 3, 3, 3, 4, 4, 4, 4, 5, 5, 5, 5, 6, 6, 6, 6,
)

SUPERIORITY_DIE_SIZE: tuple[str, ...] = (
    "", "", "d4", "d4", "d4", "d4", "d6", "d6", "d6", "d6", "d8",
    "d8", "d8", "d8", "d10", "d10", "d10", "d10", "d12", "d12", "d12",
)


# =============================================================================
# Encumbrance
# =============================================================================

SIZE_CARRY_MULTIPLIERS: dict[str, float] = {
    Size.TINY.value: 0.5,
    Size.SMALL.value: 1,
    Size.MEDIUM.value: 1,
    Size.LARGE.value: 2,
    Size.HUGE.value: 4,
    Size.GARGANTUAN.value: 8,
}

CURRENCY_PER_WEIGHT: dict[str, float] = {"imperial": 50, "metric": 110}

STR_MULTIPLIER: dict[str, float] = {"imperial": 15, "metric": 6.8}


def _lookup(table: Sequence[int | float], index: int) -> int | float:
    """Read a table entry, returning 0 for any index outside the table."""
    if 0 <= index < len(table):
        return table[index]
    return 0


class RuleTables(BaseModel):
    """Static rule tables consumed by the derived-stats engine.

    The defaults reproduce the published SW5E tables. A house-ruled table
    set can be passed instead; shapes are checked once here so that lookups
    never need to.

    Example:
        >>> tables = RuleTables()
        >>> tables.max_power_level("guardian", 5)
        2
        >>> tables.xp_for_level(3)
        2700
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    character_exp_levels: tuple[int, ...] = Field(default=CHARACTER_EXP_LEVELS)
    cr_exp_levels: tuple[int, ...] = Field(default=CR_EXP_LEVELS)
    power_max_level: Mapping[str, tuple[int, ...]] = Field(
        default_factory=lambda: MappingProxyType(dict(POWER_MAX_LEVEL))
    )
    powers_known: Mapping[str, tuple[int, ...]] = Field(
        default_factory=lambda: MappingProxyType(dict(POWERS_KNOWN))
    )
    power_points: Mapping[str, tuple[int, ...]] = Field(
        default_factory=lambda: MappingProxyType(dict(POWER_POINTS))
    )
    power_limit: Mapping[str, tuple[int, ...]] = Field(
        default_factory=lambda: MappingProxyType(dict(POWER_LIMIT))
    )
    maneuvers_known: tuple[int, ...] = Field(default=MANEUVERS_KNOWN)
    superiority_dice: tuple[int, ...] = Field(default=SUPERIORITY_DICE)
    superiority_die_size: tuple[str, ...] = Field(default=SUPERIORITY_DIE_SIZE)
    size_carry_multipliers: Mapping[str, float] = Field(
        default_factory=lambda: MappingProxyType(dict(SIZE_CARRY_MULTIPLIERS))
    )
    currency_per_weight: Mapping[str, float] = Field(
        default_factory=lambda: MappingProxyType(dict(CURRENCY_PER_WEIGHT))
    )
    str_multiplier: Mapping[str, float] = Field(
        default_factory=lambda: MappingProxyType(dict(STR_MULTIPLIER))
    )

    @model_validator(mode="after")
    def validate_table_shapes(self) -> "RuleTables":
        """Ensure every archetype table has one entry per level.

        Returns:
            Self if validation passes.

        Raises:
            RuleTableError: If a table is missing a required key or has the
                wrong number of entries.
        """
        if len(self.character_exp_levels) != MAX_CLASS_LEVEL:
            raise RuleTableError(
                f"character_exp_levels must have {MAX_CLASS_LEVEL} entries, "
                f"got {len(self.character_exp_levels)}",
                table="character_exp_levels",
            )

        per_level = {
            "power_max_level": self.power_max_level,
            "powers_known": self.powers_known,
            "power_points": self.power_points,
        }
        for name, table in per_level.items():
            for key, row in table.items():
                if len(row) != MAX_CLASS_LEVEL:
                    raise RuleTableError(
                        f"{name}[{key}] must have {MAX_CLASS_LEVEL} entries, got {len(row)}",
                        table=name,
                        key=key,
                    )

        for key, row in self.power_limit.items():
            if len(row) != MAX_POWER_LEVEL:
                raise RuleTableError(
                    f"power_limit[{key}] must have {MAX_POWER_LEVEL} entries, got {len(row)}",
                    table="power_limit",
                    key=key,
                )

        superiority = {
            "maneuvers_known": self.maneuvers_known,
            "superiority_dice": self.superiority_dice,
            "superiority_die_size": self.superiority_die_size,
        }
        for name, row in superiority.items():
            if len(row) != MAX_CLASS_LEVEL + 1:
                raise RuleTableError(
                    f"{name} must have {MAX_CLASS_LEVEL + 1} entries, got {len(row)}",
                    table=name,
                )

        required = {MULTICLASS_KEY, NONE_KEY}
        for name, table in {"power_max_level": self.power_max_level, "power_limit": self.power_limit}.items():
            missing = required - set(table)
            if missing:
                raise RuleTableError(
                    f"{name} is missing required rows: {sorted(missing)}",
                    table=name,
                )

        for system in ("imperial", "metric"):
            if system not in self.currency_per_weight or system not in self.str_multiplier:
                raise RuleTableError(
                    f"Encumbrance constants are missing the {system} unit system",
                    table="encumbrance",
                    key=system,
                )
        return self

    # -------------------------------------------------------------------------
    # Experience
    # -------------------------------------------------------------------------

    def xp_for_level(self, level: int) -> int:
        """Get the XP at which a character of the given level advances.

        Level 0 reads 0 and level 1 reads the threshold for level 2. Levels
        beyond the table read the last entry; negative levels read 0.
        """
        if level < 0:
            return 0
        levels = self.character_exp_levels
        return levels[min(level, len(levels) - 1)]

    def cr_xp(self, cr: float) -> int:
        """Get the XP granted for defeating a creature of a challenge rating."""
        if cr < 1.0:
            return int(max(200 * cr, 10))
        return int(_lookup(self.cr_exp_levels, int(cr)))

    # -------------------------------------------------------------------------
    # Powercasting
    # -------------------------------------------------------------------------

    def max_power_level(self, key: str, level: int) -> int:
        """Get the highest castable power level for an archetype at a level.

        Args:
            key: Archetype value, 'multi' or 'none'.
            level: Class (or multiclass caster) level, 1-based.

        Returns:
            Maximum power level, or 0 when the row or level is unknown.
        """
        return int(_lookup(self.power_max_level.get(key, ()), level - 1))

    def max_power_level_at_cap(self, key: str) -> int:
        """Get an archetype's maximum power level at the final class level."""
        return self.max_power_level(key, MAX_CLASS_LEVEL)

    def powers_known_at(self, key: str, index: int) -> int:
        """Get powers known for an archetype at a zero-based table index."""
        return int(_lookup(self.powers_known.get(key, ()), index))

    def power_points_at(self, key: str, index: int) -> int:
        """Get power points for an archetype at a zero-based table index."""
        return int(_lookup(self.power_points.get(key, ()), index))

    def slot_limit(self, key: str, power_level: int) -> int:
        """Get the slot count for a power level from a limit table row."""
        row = self.power_limit.get(key) or self.power_limit.get(NONE_KEY, ())
        return int(_lookup(row, power_level - 1))

    # -------------------------------------------------------------------------
    # Superiority
    # -------------------------------------------------------------------------

    def maneuvers_known_at(self, level: int) -> int:
        """Get maneuvers known at a superiority level."""
        return int(_lookup(self.maneuvers_known, level))

    def superiority_dice_at(self, level: int) -> int:
        """Get superiority dice at a number of contributing class levels."""
        return int(_lookup(self.superiority_dice, level))

    def superiority_die_at(self, level: int) -> str:
        """Get the superiority die size, or an empty string outside the table."""
        if 0 <= level < len(self.superiority_die_size):
            return self.superiority_die_size[level]
        return ""

    # -------------------------------------------------------------------------
    # Encumbrance
    # -------------------------------------------------------------------------

    def size_multiplier(self, size: str) -> float:
        """Get the carrying-capacity multiplier for a size, defaulting to 1."""
        return self.size_carry_multipliers.get(size, 1)

    def coins_per_weight_unit(self, *, metric: bool) -> float:
        """Get how many coins weigh one unit in the chosen unit system."""
        return self.currency_per_weight["metric" if metric else "imperial"]

    def strength_multiplier(self, *, metric: bool) -> float:
        """Get carrying capacity per point of Strength."""
        return self.str_multiplier["metric" if metric else "imperial"]


def default_rule_tables() -> RuleTables:
    """Get the published SW5E rule tables."""
    return _DEFAULT_TABLES


def proficiency_for_level(level: float) -> int:
    """Get the proficiency bonus for a character level or challenge rating."""
    return math.floor((level + 7) / 4)


_DEFAULT_TABLES = RuleTables()


__all__ = [
    "CHARACTER_EXP_LEVELS",
    "CR_EXP_LEVELS",
    "POWER_MAX_LEVEL",
    "POWERS_KNOWN",
    "POWER_POINTS",
    "POWER_LIMIT",
    "UNLIMITED_SLOTS",
    "MANEUVERS_KNOWN",
    "SUPERIORITY_DICE",
    "SUPERIORITY_DIE_SIZE",
    "SIZE_CARRY_MULTIPLIERS",
    "CURRENCY_PER_WEIGHT",
    "STR_MULTIPLIER",
    "MULTICLASS_KEY",
    "NONE_KEY",
    "RuleTables",
    "default_rule_tables",
    "proficiency_for_level",
]
