"""Read-only actor snapshot consumed by the derived-stats engine.

An ActorSnapshot is the normalized, validated form of the raw actor data the
host document layer hands over on every change. Every model here is frozen:
the engine never writes to its input, it builds a fresh DerivedStats instead.

Build snapshots through sw5e_engine.models.parsing when starting from host
data; construct them directly in code and tests.

Example:
    >>> snapshot = ActorSnapshot(
    ...     name="Kira",
    ...     abilities={Ability.DEX: AbilityInput(value=16)},
    ...     items=(ItemSnapshot(name="Consular", type="class", levels=3,
    ...                         powercasting=Powercasting.CONSULAR),),
    ... )
    >>> snapshot.ability(Ability.DEX).value
    16
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sw5e_engine.core.constants import (
    DEFAULT_ABILITY_SCORE,
    DEFAULT_CRITICAL_THRESHOLD,
    MAX_ABILITY_SCORE,
    MAX_POWER_LEVEL,
    MIN_ABILITY_SCORE,
    MIN_CRITICAL_THRESHOLD,
)
from sw5e_engine.models.enums import (
    Ability,
    ActorKind,
    CastType,
    ItemType,
    Powercasting,
    Size,
    Skill,
)


# =============================================================================
# Type Definitions
# =============================================================================

AbilityScore = Annotated[
    int,
    Field(ge=MIN_ABILITY_SCORE, le=MAX_ABILITY_SCORE, description="Ability score (1-30)"),
]
CriticalThreshold = Annotated[
    int,
    Field(ge=MIN_CRITICAL_THRESHOLD, le=DEFAULT_CRITICAL_THRESHOLD),
]

_FROZEN = ConfigDict(frozen=True, extra="forbid")


def power_slot_keys() -> tuple[str, ...]:
    """Get the power slot bucket keys, power1 through power9."""
    return tuple(f"power{level}" for level in range(1, MAX_POWER_LEVEL + 1))


# =============================================================================
# Abilities and Skills
# =============================================================================


class AbilityInput(BaseModel):
    """Raw ability score with save proficiency and per-ability bonuses."""

    model_config = _FROZEN

    value: AbilityScore = DEFAULT_ABILITY_SCORE
    proficient: Annotated[int, Field(ge=0, le=1)] = 0
    check_bonus: int = 0
    save_bonus: int = 0


class SkillInput(BaseModel):
    """Raw skill proficiency.

    Attributes:
        value: Proficiency multiplier; 0 untrained, 0.5 half, 1 proficient,
            2 expertise. Snapped to half steps by the engine.
        ability: Governing ability for this skill.
        bonus: Flat bonus specific to this skill.
        passive_bonus: Extra bonus applied only to the passive score.
    """

    model_config = _FROZEN

    value: float = 0.0
    ability: Ability
    bonus: int = 0
    passive_bonus: int = 0


class FeatFlags(BaseModel):
    """Feat and trait toggles that alter derived stats.

    Every flag defaults to off; critical thresholds default to a natural 20.

    Attributes:
        jack_of_all_trades: Half proficiency (rounded down) to untrained
            checks and initiative.
        remarkable_athlete: Half proficiency (rounded up) to untrained
            Strength, Dexterity and Constitution checks, and initiative.
        observant_feat: +5 to passive Perception and Investigation.
        initiative_alert: +5 to initiative.
        initiative_adv: Advantage on initiative rolls.
        powerful_build: Count as one size larger for carrying capacity.
        halfling_lucky: Reroll natural 1s.
        reliable_talent: Treat d20 rolls below 10 as 10 on proficient checks.
        weapon_critical_threshold: Lowest natural roll that crits with weapons.
        power_critical_threshold: Lowest natural roll that crits with powers.
    """

    model_config = _FROZEN

    jack_of_all_trades: bool = False
    remarkable_athlete: bool = False
    observant_feat: bool = False
    initiative_alert: bool = False
    initiative_adv: bool = False
    powerful_build: bool = False
    halfling_lucky: bool = False
    reliable_talent: bool = False
    weapon_critical_threshold: CriticalThreshold = DEFAULT_CRITICAL_THRESHOLD
    power_critical_threshold: CriticalThreshold = DEFAULT_CRITICAL_THRESHOLD


class GlobalBonuses(BaseModel):
    """Actor-wide flat bonuses, already simplified to integers."""

    model_config = _FROZEN

    ability_check: int = 0
    ability_save: int = 0
    skill_check: int = 0
    power_dc: int = 0
    force_light_dc: int = 0
    force_dark_dc: int = 0
    force_univ_dc: int = 0
    tech_dc: int = 0
    superiority_dc: int = 0
    superiority_general_dc: int = 0
    superiority_physical_dc: int = 0
    superiority_mental_dc: int = 0


# =============================================================================
# Attributes and Details
# =============================================================================


class ResourcePool(BaseModel):
    """Current and maximum value of a tracked resource."""

    model_config = _FROZEN

    value: int = 0
    max: int = 0


class CastingPoolInput(BaseModel):
    """Stored force or tech casting block.

    Attributes:
        level: Stored caster level.
        points: Stored power point pool.
        known: Stored known-powers counter, or None for actors whose data
            predates known-power tracking.
    """

    model_config = _FROZEN

    level: int = 0
    points: ResourcePool = Field(default_factory=ResourcePool)
    known: ResourcePool | None = None


class SuperiorityInput(BaseModel):
    """Stored superiority block.

    Attributes:
        level: Stored superiority level.
        known: Stored maneuvers known counter.
        dice: Stored superiority dice pool.
        die: Stored superiority die size.
    """

    model_config = _FROZEN

    level: int = 0
    known: ResourcePool = Field(default_factory=ResourcePool)
    dice: ResourcePool = Field(default_factory=ResourcePool)
    die: str = ""


class AttributesInput(BaseModel):
    """Actor attributes that feed derived stats.

    Attributes:
        prof: Stored proficiency bonus; only vehicles use it directly.
        size: Creature size code.
        init_value: Flat initiative bonus entered on the sheet.
        powercasting: Actor-level archetype used by NPC caster overrides.
        force: Stored force casting block.
        tech: Stored tech casting block.
        superiority: Stored superiority block.
    """

    model_config = _FROZEN

    prof: int = 0
    size: Size = Size.MEDIUM
    init_value: int = 0
    powercasting: Powercasting = Powercasting.NONE
    force: CastingPoolInput = Field(default_factory=CastingPoolInput)
    tech: CastingPoolInput = Field(default_factory=CastingPoolInput)
    superiority: SuperiorityInput = Field(default_factory=SuperiorityInput)

    def casting(self, cast_type: CastType) -> CastingPoolInput:
        """Get the stored casting block for a cast type."""
        return self.force if cast_type is CastType.FORCE else self.tech


class DetailsInput(BaseModel):
    """Character or NPC details.

    Attributes:
        xp: Current experience points (characters).
        cr: Challenge rating (NPCs), may be fractional.
        power_force_level: Explicit NPC force caster level.
        power_tech_level: Explicit NPC tech caster level.
    """

    model_config = _FROZEN

    xp: int = 0
    cr: Annotated[float, Field(ge=0)] = 0.0
    power_force_level: int | None = None
    power_tech_level: int | None = None

    def caster_level_override(self, cast_type: CastType) -> int | None:
        """Get the explicit NPC caster level for a cast type, if any."""
        if cast_type is CastType.FORCE:
            return self.power_force_level
        return self.power_tech_level


# =============================================================================
# Items and Power Slots
# =============================================================================


class ItemSnapshot(BaseModel):
    """An owned item, reduced to the fields the engine reads.

    Attributes:
        name: Display name.
        type: Host item type; unknown types are kept and ignored.
        quantity: Stack size for physical items.
        weight: Weight of one unit for physical items.
        levels: Class levels for class items.
        hit_dice_used: Spent hit dice for class items.
        identifier: Slug of a class or archetype item.
        class_identifier: Slug of the class an archetype belongs to.
        powercasting: Powercasting archetype for class items.
        school: Power school for power items.
        superiority_progression: Superiority progression multiplier of a
            class or archetype; 0 none, 0.5 half, 1 full.
    """

    model_config = _FROZEN

    name: str = ""
    type: str
    quantity: Annotated[float, Field(ge=0)] = 0
    weight: Annotated[float, Field(ge=0)] = 0.0
    levels: Annotated[int, Field(ge=0)] = 1
    hit_dice_used: Annotated[int, Field(ge=0)] = 0
    identifier: str = ""
    class_identifier: str = ""
    powercasting: Powercasting = Powercasting.NONE
    school: str | None = None
    superiority_progression: Annotated[float, Field(ge=0)] = 0.0

    @property
    def is_class(self) -> bool:
        """Check whether this item is a class."""
        return self.type == ItemType.CLASS

    @property
    def is_archetype(self) -> bool:
        """Check whether this item is an archetype."""
        return self.type == ItemType.ARCHETYPE


class PowerSlotInput(BaseModel):
    """Stored state of one power level bucket for both cast types.

    Attributes:
        legacy_value: Current value stored before slots were split by cast
            type; read only when the per-type value is missing.
    """

    model_config = _FROZEN

    legacy_value: int | None = None
    fvalue: int | None = None
    fmax: int | None = None
    foverride: int | None = None
    tvalue: int | None = None
    tmax: int | None = None
    toverride: int | None = None

    def value(self, cast_type: CastType) -> int | None:
        """Get the stored current value for a cast type."""
        return getattr(self, f"{cast_type.prefix}value")

    def override(self, cast_type: CastType) -> int | None:
        """Get the stored max override for a cast type."""
        return getattr(self, f"{cast_type.prefix}override")


# =============================================================================
# Actor Snapshot
# =============================================================================


class ActorSnapshot(BaseModel):
    """Immutable view of one actor's raw data.

    Attributes:
        name: Actor name, used only for logging.
        kind: Character, NPC or vehicle.
        abilities: Ability inputs; missing abilities read as a score of 10.
        skills: Skill inputs.
        flags: Typed feat flags.
        bonuses: Actor-wide bonuses.
        attributes: Size, initiative and casting blocks.
        details: XP, CR and NPC caster levels.
        items: Owned items in sheet order.
        power_slots: Power level buckets keyed 'power1'..'power9'.
        currency: Coin counts per denomination.
        merged_saves: Donor save totals while polymorphed with merged saves.
        merged_skills: Donor skill multipliers while polymorphed with
            merged skills.
    """

    model_config = _FROZEN

    name: str = ""
    kind: ActorKind = ActorKind.CHARACTER
    abilities: dict[Ability, AbilityInput] = Field(default_factory=dict, validate_default=True)
    skills: dict[Skill, SkillInput] = Field(default_factory=dict)
    flags: FeatFlags = Field(default_factory=FeatFlags)
    bonuses: GlobalBonuses = Field(default_factory=GlobalBonuses)
    attributes: AttributesInput = Field(default_factory=AttributesInput)
    details: DetailsInput = Field(default_factory=DetailsInput)
    items: tuple[ItemSnapshot, ...] = ()
    power_slots: dict[str, PowerSlotInput] = Field(default_factory=dict)
    currency: dict[str, int] = Field(default_factory=dict)
    merged_saves: dict[Ability, int] | None = None
    merged_skills: dict[Skill, float] | None = None

    @field_validator("abilities", mode="after")
    @classmethod
    def fill_missing_abilities(cls, value: dict[Ability, AbilityInput]) -> dict[Ability, AbilityInput]:
        """Ensure all six abilities are present."""
        return {ability: value.get(ability, AbilityInput()) for ability in Ability}

    @property
    def is_npc(self) -> bool:
        """Check whether this actor is an NPC."""
        return self.kind is ActorKind.NPC

    @property
    def class_items(self) -> tuple[ItemSnapshot, ...]:
        """Get owned class items in sheet order."""
        return tuple(item for item in self.items if item.is_class)

    def ability(self, ability: Ability) -> AbilityInput:
        """Get the input for one ability."""
        return self.abilities[ability]


__all__ = [
    "AbilityScore",
    "AbilityInput",
    "SkillInput",
    "FeatFlags",
    "GlobalBonuses",
    "ResourcePool",
    "CastingPoolInput",
    "SuperiorityInput",
    "AttributesInput",
    "DetailsInput",
    "ItemSnapshot",
    "PowerSlotInput",
    "ActorSnapshot",
    "power_slot_keys",
]
