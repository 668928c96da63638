"""Force and tech power progression.

Each class item with a powercasting archetype feeds one of two independent
tracks. Per track the resolver accumulates caster levels, a fractional
multiclass level, powers known and power points, and picks the controlling
class whose table decides the highest castable power level.

Resolution order per track:
1. Accumulate contributing classes.
2. True multiclassers (characters with more than one class on the track)
   switch to the fractional multiclass level and the 'multi' tables.
3. NPCs with an explicit caster level ignore their classes entirely.
4. Slot limits for power levels 1..9 come from the controlling table.

Power slots, the known-powers tally and the points pool are then resolved
against the progression. Nothing here raises for missing table entries; an
unknown archetype or level simply contributes zero.

Example:
    >>> progression = resolve_progression(CastType.FORCE, snapshot, default_rule_tables())
    >>> progression.max_class_power_level
    2
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping

from pydantic import BaseModel, ConfigDict, Field

from sw5e_engine.core.constants import (
    FORCE_POINT_ABILITIES,
    FORCE_SCHOOLS,
    MAX_CLASS_LEVEL,
    TECH_POINT_ABILITIES,
    TECH_SCHOOLS,
)
from sw5e_engine.core.logging import get_logger
from sw5e_engine.engine.numeric import clamp
from sw5e_engine.models.derived import (
    AbilityDerived,
    CastingDerived,
    PowerProgression,
    PowerSlotDerived,
)
from sw5e_engine.models.enums import Ability, ActorKind, CastType, ItemType, Powercasting
from sw5e_engine.models.progression import MULTICLASS_KEY, RuleTables
from sw5e_engine.models.snapshot import (
    ActorSnapshot,
    ItemSnapshot,
    PowerSlotInput,
    power_slot_keys,
)


logger = get_logger(__name__)

# Archetype assumed for an NPC caster level when the actor-level archetype
# does not cast on that track
_DEFAULT_NPC_ARCHETYPE: dict[CastType, Powercasting] = {
    CastType.FORCE: Powercasting.CONSULAR,
    CastType.TECH: Powercasting.ENGINEER,
}

_SCHOOLS: dict[CastType, frozenset[str]] = {
    CastType.FORCE: FORCE_SCHOOLS,
    CastType.TECH: TECH_SCHOOLS,
}

_POINT_ABILITIES: dict[CastType, tuple[str, ...]] = {
    CastType.FORCE: FORCE_POINT_ABILITIES,
    CastType.TECH: TECH_POINT_ABILITIES,
}


class PowercastingResult(BaseModel):
    """Everything the power stage writes back."""

    model_config = ConfigDict(frozen=True)

    progression: dict[CastType, PowerProgression] = Field(default_factory=dict)
    slots: dict[str, PowerSlotDerived] = Field(default_factory=dict)
    casting: dict[CastType, CastingDerived] = Field(default_factory=dict)
    warnings: tuple[str, ...] = ()


def _table_index(levels: int) -> int:
    return int(clamp(levels - 1, 0, MAX_CLASS_LEVEL))


def _slot_limits(tables: RuleTables, key: str, max_power_level: int) -> tuple[int, ...]:
    """Build slot limits for power levels 1..9 from one limit table row."""
    return tuple(
        tables.slot_limit(key, power_level) if power_level <= max_power_level else 0
        for power_level in range(1, len(power_slot_keys()) + 1)
    )


def _npc_archetype(snapshot: ActorSnapshot, cast_type: CastType) -> Powercasting:
    archetype = snapshot.attributes.powercasting
    if archetype.cast_type is cast_type:
        return archetype
    return _DEFAULT_NPC_ARCHETYPE[cast_type]


def resolve_progression(cast_type: CastType, snapshot: ActorSnapshot, tables: RuleTables) -> PowerProgression:
    """Resolve the power progression for one track.

    Args:
        cast_type: Track to resolve.
        snapshot: The actor being derived.
        tables: Rule tables providing per-archetype progression.

    Returns:
        The PowerProgression for the track, including slot limits.
    """
    classes = 0
    levels = 0
    multi = 0.0
    max_class = Powercasting.NONE
    max_class_name: str | None = None
    max_class_index: int | None = None
    max_class_levels = 0
    powers_known = 0
    points = 0

    for position, item in enumerate(snapshot.class_items):
        archetype = item.powercasting
        if archetype.cast_type is not cast_type or item.levels < 1:
            continue

        classes += 1
        levels += item.levels
        multi += tables.max_power_level_at_cap(archetype) / 9 * item.levels

        # Equal levels only hand over control to a strictly higher priority
        if item.levels >= max_class_levels and archetype.priority > max_class.priority:
            max_class = archetype
            max_class_name = item.name
            max_class_index = position
            max_class_levels = item.levels

        index = _table_index(item.levels)
        powers_known += tables.powers_known_at(archetype, index)
        points += tables.power_points_at(archetype, index)

    max_class_power_level = tables.max_power_level(max_class, max_class_levels)
    limit_key: str = max_class.value
    multiclassed = False

    if snapshot.kind is ActorKind.CHARACTER and classes > 1:
        levels = math.floor(multi)
        max_class_power_level = tables.max_power_level(MULTICLASS_KEY, levels)
        limit_key = MULTICLASS_KEY
        multiclassed = True

    caster_level = snapshot.details.caster_level_override(cast_type)
    if snapshot.is_npc and caster_level:
        max_class = _npc_archetype(snapshot, cast_type)
        max_class_name = None
        max_class_index = None
        classes = 1
        levels = caster_level
        max_class_levels = caster_level
        index = _table_index(caster_level)
        powers_known = tables.powers_known_at(max_class, index)
        points = tables.power_points_at(max_class, index)
        max_class_power_level = tables.max_power_level(max_class, caster_level)
        limit_key = max_class.value
        multiclassed = False

    return PowerProgression(
        cast_type=cast_type,
        classes=classes,
        levels=levels,
        multi=multi,
        max_class=max_class,
        max_class_name=max_class_name,
        max_class_index=max_class_index,
        max_class_priority=max_class.priority,
        max_class_levels=max_class_levels,
        max_class_power_level=max_class_power_level,
        powers_known=powers_known,
        points=points,
        multiclassed=multiclassed,
        limits=_slot_limits(tables, limit_key, max_class_power_level),
    )


def _resolve_slot(
    slot: PowerSlotInput,
    cast_type: CastType,
    limit: int,
    *,
    full: bool,
) -> tuple[int, int]:
    """Resolve (value, max) for one bucket on one track.

    A missing stored value falls back to the legacy untyped value, then to
    the maximum.
    """
    override = slot.override(cast_type)
    maximum = max(override, 0) if override is not None else limit
    if full:
        return maximum, maximum

    stored = slot.value(cast_type)
    if stored is None:
        stored = slot.legacy_value if slot.legacy_value is not None else maximum
    return min(stored, maximum), maximum


def resolve_power_slots(
    snapshot: ActorSnapshot,
    progression: Mapping[CastType, PowerProgression],
) -> dict[str, PowerSlotDerived]:
    """Resolve current and maximum slots for power levels 1..9.

    An explicit override replaces the computed maximum. NPCs always have
    full slots; characters keep their stored value, capped at the maximum.
    Tracks missing from the progression (vehicles) pass stored values
    through.
    """
    result: dict[str, PowerSlotDerived] = {}
    for power_level, key in enumerate(power_slot_keys(), start=1):
        slot = snapshot.power_slots.get(key, PowerSlotInput())
        fields: dict[str, int | None] = {}
        for cast_type in CastType:
            prefix = cast_type.prefix
            track = progression.get(cast_type)
            if track is None:
                fields[f"{prefix}value"] = slot.value(cast_type) or 0
                fields[f"{prefix}max"] = getattr(slot, f"{prefix}max") or 0
            else:
                value, maximum = _resolve_slot(
                    slot, cast_type, track.limits[power_level - 1], full=snapshot.is_npc
                )
                fields[f"{prefix}value"] = value
                fields[f"{prefix}max"] = maximum
            fields[f"{prefix}override"] = slot.override(cast_type)
        result[key] = PowerSlotDerived(**fields)
    return result


def count_known_powers(items: Iterable[ItemSnapshot], cast_type: CastType) -> int:
    """Count owned power items belonging to a track's schools."""
    schools = _SCHOOLS[cast_type]
    return sum(1 for item in items if item.type == ItemType.POWER and item.school in schools)


def compute_casting(
    snapshot: ActorSnapshot,
    cast_type: CastType,
    progression: PowerProgression | None,
    abilities: Mapping[Ability, AbilityDerived],
) -> CastingDerived:
    """Resolve the force or tech casting block written back to the actor.

    Computed maxima replace stored ones only for characters whose track has
    caster levels; NPC blocks and empty tracks pass through unchanged. The
    known counter is re-tallied from owned powers whenever the actor tracks
    it.

    Args:
        snapshot: The actor being derived.
        cast_type: Track to resolve.
        progression: Resolved progression, or None for actors without one.
        abilities: Derived abilities, for the points pool modifier.

    Returns:
        The CastingDerived block.
    """
    pool = snapshot.attributes.casting(cast_type)
    known_value = pool.known.value if pool.known is not None else None
    known_max = pool.known.max if pool.known is not None else None
    if progression is None:
        return CastingDerived(
            level=pool.level,
            known_value=known_value,
            known_max=known_max,
            points_value=pool.points.value,
            points_max=pool.points.max,
        )

    if pool.known is not None:
        known_value = count_known_powers(snapshot.items, cast_type)

    if snapshot.kind is not ActorKind.CHARACTER or progression.levels <= 0:
        return CastingDerived(
            level=pool.level,
            known_value=known_value,
            known_max=known_max,
            points_value=pool.points.value,
            points_max=pool.points.max,
        )

    best_mod = max(abilities[Ability(key)].mod for key in _POINT_ABILITIES[cast_type])
    return CastingDerived(
        level=progression.levels,
        known_value=known_value,
        known_max=progression.powers_known,
        points_value=pool.points.value,
        points_max=progression.points + best_mod,
    )


def _known_power_warnings(casting: Mapping[CastType, CastingDerived]) -> list[str]:
    warnings = []
    for cast_type, block in casting.items():
        if block.known_value is None or block.known_max is None:
            continue
        if block.known_value > block.known_max:
            logger.warning(
                "Known powers exceed maximum",
                cast_type=cast_type.value,
                known=block.known_value,
                maximum=block.known_max,
            )
            warnings.append(
                f"{cast_type.value} powers known ({block.known_value}) "
                f"exceeds the maximum ({block.known_max})"
            )
    return warnings


def compute_powercasting(
    snapshot: ActorSnapshot,
    abilities: Mapping[Ability, AbilityDerived],
    tables: RuleTables,
) -> PowercastingResult:
    """Run the complete power stage for an actor.

    Vehicles have no power progression: their slots and casting blocks
    pass through as stored.

    Args:
        snapshot: The actor being derived.
        abilities: Derived abilities.
        tables: Rule tables.

    Returns:
        Progression, slots, casting blocks and any integrity warnings.
    """
    if snapshot.kind is ActorKind.VEHICLE:
        return PowercastingResult(
            slots=resolve_power_slots(snapshot, {}),
            casting={
                cast_type: compute_casting(snapshot, cast_type, None, abilities)
                for cast_type in CastType
            },
        )

    progression = {cast_type: resolve_progression(cast_type, snapshot, tables) for cast_type in CastType}
    for track in progression.values():
        logger.debug(
            "Resolved power progression",
            cast_type=track.cast_type.value,
            levels=track.levels,
            max_class=track.max_class.value,
            max_power_level=track.max_class_power_level,
        )

    casting = {
        cast_type: compute_casting(snapshot, cast_type, track, abilities)
        for cast_type, track in progression.items()
    }
    return PowercastingResult(
        progression=progression,
        slots=resolve_power_slots(snapshot, progression),
        casting=casting,
        warnings=tuple(_known_power_warnings(casting)),
    )


__all__ = [
    "PowercastingResult",
    "resolve_progression",
    "resolve_power_slots",
    "count_known_powers",
    "compute_casting",
    "compute_powercasting",
]
