"""Pydantic V2 schemas for the SW5E derived-stats engine.

Submodules:
    enums: Enumeration types (Ability, Skill, Size, Powercasting, etc.)
    progression: Static rule tables (XP, power progression, encumbrance)
    snapshot: Read-only actor input (ActorSnapshot and its parts)
    derived: Engine output (DerivedStats and its parts)
    parsing: Boundary normalization from host actor data

Example:
    >>> from sw5e_engine.models import ActorSnapshot, AbilityInput, Ability
    >>> snapshot = ActorSnapshot(abilities={Ability.STR: AbilityInput(value=14)})
    >>> snapshot.ability(Ability.STR).value
    14
"""

from __future__ import annotations

# =============================================================================
# Enumerations
# =============================================================================
from sw5e_engine.models.enums import (
    Ability,
    ActorKind,
    CastType,
    ItemType,
    Powercasting,
    PowerSchool,
    Size,
    Skill,
)

# =============================================================================
# Rule Tables
# =============================================================================
from sw5e_engine.models.progression import (
    MULTICLASS_KEY,
    NONE_KEY,
    RuleTables,
    default_rule_tables,
    proficiency_for_level,
)

# =============================================================================
# Snapshot
# =============================================================================
from sw5e_engine.models.snapshot import (
    AbilityInput,
    ActorSnapshot,
    AttributesInput,
    CastingPoolInput,
    DetailsInput,
    FeatFlags,
    GlobalBonuses,
    ItemSnapshot,
    PowerSlotInput,
    ResourcePool,
    SkillInput,
    SuperiorityInput,
    power_slot_keys,
)

# =============================================================================
# Derived Stats
# =============================================================================
from sw5e_engine.models.derived import (
    AbilityDerived,
    CastingDerived,
    DerivedStats,
    DetailsDerived,
    EncumbranceDerived,
    InitiativeDerived,
    PowerDCs,
    PowerProgression,
    PowerSlotDerived,
    SkillDerived,
    SuperiorityDCs,
    SuperiorityDerived,
)

# =============================================================================
# Parsing
# =============================================================================
from sw5e_engine.models.parsing import (
    SnapshotResult,
    build_snapshot,
    parse_actor_data,
)


__all__ = [
    # Enums
    "Ability",
    "ActorKind",
    "CastType",
    "ItemType",
    "Powercasting",
    "PowerSchool",
    "Size",
    "Skill",
    # Rule tables
    "MULTICLASS_KEY",
    "NONE_KEY",
    "RuleTables",
    "default_rule_tables",
    "proficiency_for_level",
    # Snapshot
    "AbilityInput",
    "ActorSnapshot",
    "AttributesInput",
    "CastingPoolInput",
    "DetailsInput",
    "FeatFlags",
    "GlobalBonuses",
    "ItemSnapshot",
    "PowerSlotInput",
    "ResourcePool",
    "SkillInput",
    "SuperiorityInput",
    "power_slot_keys",
    # Derived
    "AbilityDerived",
    "CastingDerived",
    "DerivedStats",
    "DetailsDerived",
    "EncumbranceDerived",
    "InitiativeDerived",
    "PowerDCs",
    "PowerProgression",
    "PowerSlotDerived",
    "SkillDerived",
    "SuperiorityDCs",
    "SuperiorityDerived",
    # Parsing
    "SnapshotResult",
    "build_snapshot",
    "parse_actor_data",
]
