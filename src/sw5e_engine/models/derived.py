"""Derived statistics produced by the engine.

DerivedStats is rebuilt from scratch on every recompute and never edited in
place, so a stale value from a previous pass cannot survive. The host merges
it back into its own actor data for display.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from sw5e_engine.models.enums import Ability, CastType, Powercasting, Skill


_FROZEN = ConfigDict(frozen=True, extra="forbid")


class DetailsDerived(BaseModel):
    """Level, proficiency and experience."""

    model_config = _FROZEN

    level: int = 0
    prof: int = 0
    hit_dice: int = 0
    xp_value: int = 0
    xp_max: int = 0
    xp_pct: int = 0


class AbilityDerived(BaseModel):
    """Modifier, save and DC for one ability."""

    model_config = _FROZEN

    value: int
    proficient: int
    mod: int
    prof: int
    save_bonus: int
    save: int
    check_bonus: int
    dc: int


class SkillDerived(BaseModel):
    """Resolved skill check numbers."""

    model_config = _FROZEN

    value: float
    ability: Ability
    mod: int
    prof: int
    bonus: int
    total: int
    passive: int


class InitiativeDerived(BaseModel):
    """Initiative modifier breakdown."""

    model_config = _FROZEN

    mod: int
    prof: int
    bonus: int
    total: int


class EncumbranceDerived(BaseModel):
    """Carried weight against carrying capacity."""

    model_config = _FROZEN

    value: float
    max: float
    pct: float
    encumbered: bool


class PowerProgression(BaseModel):
    """Intermediate progression record for one cast type.

    Attributes:
        cast_type: Force or tech.
        classes: Number of classes contributing to this track.
        levels: Caster level; floor(multi) for true multiclassers.
        multi: Fractional multiclass accumulator.
        max_class: Archetype controlling the maximum power level.
        max_class_name: Name of the class item controlling the maximum
            power level, or None when no class contributes.
        max_class_index: Position of that class among the class items.
        max_class_priority: Priority of the controlling archetype.
        max_class_levels: Class levels of the controlling archetype.
        max_class_power_level: Highest castable power level.
        powers_known: Powers known from the tables.
        points: Power points from the tables, before ability modifiers.
        multiclassed: Whether the multiclass exception applied.
        limits: Slot limit per power level 1..9.
    """

    model_config = _FROZEN

    cast_type: CastType
    classes: int = 0
    levels: int = 0
    multi: float = 0.0
    max_class: Powercasting = Powercasting.NONE
    max_class_name: str | None = None
    max_class_index: int | None = None
    max_class_priority: int = 0
    max_class_levels: int = 0
    max_class_power_level: int = 0
    powers_known: int = 0
    points: int = 0
    multiclassed: bool = False
    limits: tuple[int, ...] = ()


class PowerSlotDerived(BaseModel):
    """Resolved power level bucket for both cast types."""

    model_config = _FROZEN

    fvalue: int = 0
    fmax: int = 0
    foverride: int | None = None
    tvalue: int = 0
    tmax: int = 0
    toverride: int | None = None

    def max(self, cast_type: CastType) -> int:
        """Get the resolved maximum for a cast type."""
        return getattr(self, f"{cast_type.prefix}max")

    def value(self, cast_type: CastType) -> int:
        """Get the resolved current value for a cast type."""
        return getattr(self, f"{cast_type.prefix}value")


class CastingDerived(BaseModel):
    """Force or tech casting block after write-back.

    known_value is None when the actor has no known-power tracking.
    """

    model_config = _FROZEN

    level: int = 0
    known_value: int | None = None
    known_max: int | None = None
    points_value: int = 0
    points_max: int = 0


class SuperiorityDerived(BaseModel):
    """Superiority progression from class and archetype items.

    Attributes:
        level: Superiority level, scaled by each class progression.
        levels: Class levels contributing to superiority.
        known_value: Owned maneuver items.
        known_max: Maneuvers known from the tables.
        dice_value: Stored remaining superiority dice.
        dice_max: Superiority dice from the tables.
        die: Superiority die size, empty below the first die.
    """

    model_config = _FROZEN

    level: int = 0
    levels: int = 0
    known_value: int = 0
    known_max: int = 0
    dice_value: int = 0
    dice_max: int = 0
    die: str = ""


class PowerDCs(BaseModel):
    """Save DCs for powers by school."""

    model_config = _FROZEN

    force_light: int
    force_dark: int
    force_univ: int
    tech: int


class SuperiorityDCs(BaseModel):
    """Save DCs for superiority maneuvers."""

    model_config = _FROZEN

    physical: int
    mental: int
    general: int


class DerivedStats(BaseModel):
    """Complete derived data for one actor.

    Attributes:
        details: Level, proficiency and experience.
        abilities: Per-ability modifiers, saves and DCs.
        skills: Per-skill totals and passives.
        initiative: Initiative breakdown.
        encumbrance: Carried weight.
        power_progression: Progression record per cast type.
        power_slots: Resolved power level buckets.
        casting: Force and tech blocks after write-back.
        power_dcs: Power save DCs.
        superiority: Superiority level, maneuvers and dice.
        superiority_dcs: Maneuver save DCs.
        warnings: Data integrity warnings found while deriving.
    """

    model_config = _FROZEN

    details: DetailsDerived
    abilities: dict[Ability, AbilityDerived]
    skills: dict[Skill, SkillDerived] = Field(default_factory=dict)
    initiative: InitiativeDerived
    encumbrance: EncumbranceDerived
    power_progression: dict[CastType, PowerProgression] = Field(default_factory=dict)
    power_slots: dict[str, PowerSlotDerived] = Field(default_factory=dict)
    casting: dict[CastType, CastingDerived] = Field(default_factory=dict)
    superiority: SuperiorityDerived = Field(default_factory=SuperiorityDerived)
    power_dcs: PowerDCs
    superiority_dcs: SuperiorityDCs
    warnings: tuple[str, ...] = ()


__all__ = [
    "DetailsDerived",
    "AbilityDerived",
    "SkillDerived",
    "InitiativeDerived",
    "EncumbranceDerived",
    "PowerProgression",
    "PowerSlotDerived",
    "CastingDerived",
    "SuperiorityDerived",
    "PowerDCs",
    "SuperiorityDCs",
    "DerivedStats",
]
