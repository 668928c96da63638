"""Superiority progression from class and archetype items.

Classes and archetypes carry a superiority progression multiplier: 0 for
none, 0.5 for half and 1 for full progression. A class uses the higher of
its own multiplier and that of its archetype. Each contributing class adds
its scaled levels to the superiority level and its own maneuvers known and
superiority dice from the tables.

Example:
    >>> superiority = compute_superiority(snapshot, default_rule_tables())
    >>> superiority.die
    'd4'
"""

from __future__ import annotations

from sw5e_engine.core.constants import MAX_CLASS_LEVEL
from sw5e_engine.core.logging import get_logger
from sw5e_engine.engine.numeric import clamp, round_half_up
from sw5e_engine.models.derived import SuperiorityDerived
from sw5e_engine.models.enums import ActorKind, ItemType
from sw5e_engine.models.progression import RuleTables
from sw5e_engine.models.snapshot import ActorSnapshot, ItemSnapshot


logger = get_logger(__name__)


def class_progression(item: ItemSnapshot, archetype: ItemSnapshot | None) -> float:
    """Get the superiority multiplier of a class, honoring its archetype."""
    if archetype is None:
        return item.superiority_progression
    return max(item.superiority_progression, archetype.superiority_progression)


def _archetypes(snapshot: ActorSnapshot) -> dict[str, ItemSnapshot]:
    """Index owned archetypes by the identifier of their class."""
    archetypes: dict[str, ItemSnapshot] = {}
    for item in snapshot.items:
        if item.is_archetype and item.class_identifier:
            archetypes.setdefault(item.class_identifier, item)
    return archetypes


def compute_superiority(snapshot: ActorSnapshot, tables: RuleTables) -> SuperiorityDerived:
    """Derive superiority level, maneuvers known and superiority dice.

    Vehicles pass their stored block through. The remaining dice are never
    recomputed; the known value counts owned maneuvers.

    Args:
        snapshot: The actor being derived.
        tables: Rule tables providing the superiority rows.

    Returns:
        The SuperiorityDerived block.
    """
    stored = snapshot.attributes.superiority
    if snapshot.kind is ActorKind.VEHICLE:
        return SuperiorityDerived(
            level=stored.level,
            known_value=stored.known.value,
            known_max=stored.known.max,
            dice_value=stored.dice.value,
            dice_max=stored.dice.max,
            die=stored.die,
        )

    archetypes = _archetypes(snapshot)
    level = 0.0
    levels = 0
    known = 0
    dice = 0
    for item in snapshot.class_items:
        progression = class_progression(item, archetypes.get(item.identifier))
        if progression <= 0:
            continue
        level += item.levels * progression
        levels += item.levels
        known += tables.maneuvers_known_at(round_half_up(item.levels * progression))
        dice += round_half_up(tables.superiority_dice_at(item.levels) * progression)

    level = round_half_up(clamp(level, 0, MAX_CLASS_LEVEL))
    levels = round_half_up(clamp(levels, 0, MAX_CLASS_LEVEL))
    maneuvers = sum(1 for item in snapshot.items if item.type == ItemType.MANEUVER)

    logger.debug("Resolved superiority", level=level, levels=levels, maneuvers=maneuvers)
    return SuperiorityDerived(
        level=level,
        levels=levels,
        known_value=maneuvers,
        known_max=known,
        dice_value=stored.dice.value,
        dice_max=dice,
        die=tables.superiority_die_at(levels),
    )


__all__ = ["class_progression", "compute_superiority"]
