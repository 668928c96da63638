"""Enumeration types for the SW5E derived-stats engine.

Ability, skill, size and item codes use the short keys the host application
stores on actors, so raw data maps onto these enums without translation.
Powercasting archetypes are a closed enum carrying their cast type and
priority, which keeps the progression algorithm free of string switches.
"""

from __future__ import annotations

from enum import StrEnum


class Ability(StrEnum):
    """The six ability scores."""

    STR = "str"
    DEX = "dex"
    CON = "con"
    INT = "int"
    WIS = "wis"
    CHA = "cha"

    @property
    def full_name(self) -> str:
        """Get the full name of the ability.

        Returns:
            Full ability name (e.g., 'Strength' for STR).
        """
        names = {
            Ability.STR: "Strength",
            Ability.DEX: "Dexterity",
            Ability.CON: "Constitution",
            Ability.INT: "Intelligence",
            Ability.WIS: "Wisdom",
            Ability.CHA: "Charisma",
        }
        return names[self]


class Skill(StrEnum):
    """SW5E skills and their governing abilities."""

    ACROBATICS = "acr"
    ANIMAL_HANDLING = "ani"
    ATHLETICS = "ath"
    DECEPTION = "dec"
    INSIGHT = "ins"
    INTIMIDATION = "itm"
    INVESTIGATION = "inv"
    LORE = "lor"
    MEDICINE = "med"
    NATURE = "nat"
    PERCEPTION = "prc"
    PERFORMANCE = "prf"
    PERSUASION = "per"
    PILOTING = "pil"
    SLEIGHT_OF_HAND = "slt"
    STEALTH = "ste"
    SURVIVAL = "sur"
    TECHNOLOGY = "tec"

    @property
    def ability(self) -> Ability:
        """Get the default governing ability for this skill.

        Returns:
            The Ability enum value associated with this skill.
        """
        return _SKILL_ABILITIES[self]


_SKILL_ABILITIES: dict[Skill, Ability] = {
    Skill.ACROBATICS: Ability.DEX,
    Skill.ANIMAL_HANDLING: Ability.WIS,
    Skill.ATHLETICS: Ability.STR,
    Skill.DECEPTION: Ability.CHA,
    Skill.INSIGHT: Ability.WIS,
    Skill.INTIMIDATION: Ability.CHA,
    Skill.INVESTIGATION: Ability.INT,
    Skill.LORE: Ability.INT,
    Skill.MEDICINE: Ability.WIS,
    Skill.NATURE: Ability.INT,
    Skill.PERCEPTION: Ability.WIS,
    Skill.PERFORMANCE: Ability.CHA,
    Skill.PERSUASION: Ability.CHA,
    Skill.PILOTING: Ability.INT,
    Skill.SLEIGHT_OF_HAND: Ability.DEX,
    Skill.STEALTH: Ability.DEX,
    Skill.SURVIVAL: Ability.WIS,
    Skill.TECHNOLOGY: Ability.INT,
}


class Size(StrEnum):
    """Creature sizes."""

    TINY = "tiny"
    SMALL = "sm"
    MEDIUM = "med"
    LARGE = "lg"
    HUGE = "huge"
    GARGANTUAN = "grg"


class ActorKind(StrEnum):
    """Discriminator for the kinds of actor the engine derives stats for."""

    CHARACTER = "character"
    NPC = "npc"
    VEHICLE = "vehicle"


class CastType(StrEnum):
    """The two independent power resource tracks."""

    FORCE = "force"
    TECH = "tech"

    @property
    def prefix(self) -> str:
        """Get the slot field prefix ('f' or 't').

        Returns:
            Single-letter prefix used on power slot fields (e.g. 'fmax').
        """
        return self.value[0]


class Powercasting(StrEnum):
    """Powercasting archetypes a class can grant.

    Each archetype feeds exactly one cast type. The priority decides which
    of several same-track classes controls the maximum power level.
    """

    NONE = "none"
    CONSULAR = "consular"
    ENGINEER = "engineer"
    GUARDIAN = "guardian"
    SCOUT = "scout"
    SENTINEL = "sentinel"

    @property
    def cast_type(self) -> CastType | None:
        """Get the resource track this archetype contributes to.

        Returns:
            CastType.FORCE or CastType.TECH, or None for NONE.
        """
        return _POWERCASTING_CAST_TYPE[self]

    @property
    def priority(self) -> int:
        """Get the tie-break priority for the controlling class.

        Returns:
            Priority value; higher wins. NONE is 0.
        """
        return _POWERCASTING_PRIORITY[self]


_POWERCASTING_CAST_TYPE: dict[Powercasting, CastType | None] = {
    Powercasting.NONE: None,
    Powercasting.CONSULAR: CastType.FORCE,
    Powercasting.ENGINEER: CastType.TECH,
    Powercasting.GUARDIAN: CastType.FORCE,
    Powercasting.SCOUT: CastType.TECH,
    Powercasting.SENTINEL: CastType.FORCE,
}

_POWERCASTING_PRIORITY: dict[Powercasting, int] = {
    Powercasting.NONE: 0,
    Powercasting.SCOUT: 1,
    Powercasting.GUARDIAN: 2,
    Powercasting.SENTINEL: 3,
    Powercasting.ENGINEER: 4,
    Powercasting.CONSULAR: 5,
}


class PowerSchool(StrEnum):
    """Schools a power item can belong to."""

    LIGHT = "lgt"
    UNIVERSAL = "uni"
    DARK = "drk"
    TECH = "tec"
    ENHANCED = "enh"


class ItemType(StrEnum):
    """Item types owned by actors."""

    WEAPON = "weapon"
    EQUIPMENT = "equipment"
    CONSUMABLE = "consumable"
    TOOL = "tool"
    BACKPACK = "backpack"
    LOOT = "loot"
    CLASS = "class"
    ARCHETYPE = "archetype"
    POWER = "power"
    MANEUVER = "maneuver"
    FEAT = "feat"
    SPECIES = "species"
    BACKGROUND = "background"


__all__ = [
    "Ability",
    "Skill",
    "Size",
    "ActorKind",
    "CastType",
    "Powercasting",
    "PowerSchool",
    "ItemType",
]
