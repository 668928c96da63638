"""Level, proficiency and experience derivation.

Runs first: every later stage reads the proficiency bonus resolved here.
"""

from __future__ import annotations

import math

from sw5e_engine.core.logging import get_logger
from sw5e_engine.engine.numeric import clamp
from sw5e_engine.models.derived import DetailsDerived
from sw5e_engine.models.enums import ActorKind
from sw5e_engine.models.progression import RuleTables, proficiency_for_level
from sw5e_engine.models.snapshot import ActorSnapshot


logger = get_logger(__name__)


def _character_details(snapshot: ActorSnapshot, tables: RuleTables) -> DetailsDerived:
    classes = snapshot.class_items
    level = sum(item.levels for item in classes)
    hit_dice = sum(item.levels - item.hit_dice_used for item in classes)

    xp = snapshot.details.xp
    xp_max = tables.xp_for_level(max(level, 1))
    prior = tables.xp_for_level(level - 1) if level > 1 else 0
    span = xp_max - prior
    pct = math.floor((xp - prior) * 100 / span + 0.5) if span > 0 else 100

    return DetailsDerived(
        level=level,
        prof=proficiency_for_level(level),
        hit_dice=hit_dice,
        xp_value=xp,
        xp_max=xp_max,
        xp_pct=int(clamp(pct, 0, 100)),
    )


def compute_details(snapshot: ActorSnapshot, tables: RuleTables) -> DetailsDerived:
    """Resolve level, proficiency bonus and experience for an actor.

    Args:
        snapshot: The actor being derived.
        tables: Rule tables providing XP thresholds.

    Returns:
        DetailsDerived for the actor's kind:
        - characters level from class items, proficiency from level
        - NPCs proficiency and XP value from challenge rating
        - vehicles the stored proficiency bonus
    """
    if snapshot.kind is ActorKind.CHARACTER:
        details = _character_details(snapshot, tables)
    elif snapshot.kind is ActorKind.NPC:
        cr = snapshot.details.cr
        details = DetailsDerived(
            prof=proficiency_for_level(max(cr, 1)),
            xp_value=tables.cr_xp(cr),
        )
    else:
        details = DetailsDerived(prof=snapshot.attributes.prof)

    logger.debug("Resolved details", level=details.level, prof=details.prof)
    return details


__all__ = ["compute_details"]
