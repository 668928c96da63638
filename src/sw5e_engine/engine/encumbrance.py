"""Carried weight and carrying capacity.

Only physical item types have weight. Coins add weight when the
currency_weight rule is on; both coin weight and carrying capacity switch
between imperial and metric constants with metric_weight_units.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from sw5e_engine.core.config import RulesSettings
from sw5e_engine.core.constants import (
    ENCUMBRANCE_THRESHOLD_PCT,
    MAX_SIZE_CARRY_MULTIPLIER,
    PHYSICAL_ITEM_TYPES,
    WEIGHT_INCREMENT,
)
from sw5e_engine.core.logging import get_logger
from sw5e_engine.engine.numeric import clamp, to_nearest
from sw5e_engine.models.derived import EncumbranceDerived
from sw5e_engine.models.enums import Size
from sw5e_engine.models.progression import RuleTables
from sw5e_engine.models.snapshot import ItemSnapshot


logger = get_logger(__name__)


def carried_weight(
    items: Iterable[ItemSnapshot],
    currency: Mapping[str, int],
    tables: RuleTables,
    rules: RulesSettings,
) -> float:
    """Total the weight of physical items and, optionally, coins.

    Args:
        items: Owned items; non-physical types are skipped.
        currency: Coin counts per denomination.
        tables: Rule tables providing coins per weight unit.
        rules: Rule toggles.

    Returns:
        Total weight snapped to 0.1.
    """
    weight = sum(
        to_nearest(item.quantity * item.weight, WEIGHT_INCREMENT)
        for item in items
        if item.type in PHYSICAL_ITEM_TYPES
    )

    if rules.currency_weight and currency:
        coins = sum(max(count, 0) for count in currency.values())
        weight += coins / tables.coins_per_weight_unit(metric=rules.metric_weight_units)

    return to_nearest(weight, WEIGHT_INCREMENT)


def carrying_capacity(
    strength: int,
    size: Size,
    tables: RuleTables,
    rules: RulesSettings,
    *,
    powerful_build: bool = False,
) -> float:
    """Compute maximum carried weight.

    Args:
        strength: Strength score.
        size: Creature size.
        tables: Rule tables providing size and strength multipliers.
        rules: Rule toggles.
        powerful_build: Whether the actor counts as one size larger.

    Returns:
        Capacity snapped to 0.1.

    Example:
        >>> carrying_capacity(10, Size.MEDIUM, default_rule_tables(), RulesSettings())
        150.0
    """
    size_multiplier = tables.size_multiplier(size)
    if powerful_build:
        size_multiplier = min(size_multiplier * 2, MAX_SIZE_CARRY_MULTIPLIER)

    capacity = strength * tables.strength_multiplier(metric=rules.metric_weight_units) * size_multiplier
    return to_nearest(capacity, WEIGHT_INCREMENT)


def compute_encumbrance(
    items: Iterable[ItemSnapshot],
    currency: Mapping[str, int],
    strength: int,
    size: Size,
    tables: RuleTables,
    rules: RulesSettings,
    *,
    powerful_build: bool = False,
) -> EncumbranceDerived:
    """Derive carried weight against carrying capacity.

    An actor is encumbered once carried weight exceeds two thirds of
    capacity. A capacity of zero reads as fully loaded.

    Returns:
        EncumbranceDerived with pct clamped to [0, 100].
    """
    weight = carried_weight(items, currency, tables, rules)
    capacity = carrying_capacity(strength, size, tables, rules, powerful_build=powerful_build)

    if capacity > 0:
        pct = clamp(weight * 100 / capacity, 0, 100)
    else:
        pct = 100.0 if weight > 0 else 0.0

    encumbrance = EncumbranceDerived(
        value=weight,
        max=capacity,
        pct=pct,
        encumbered=pct > ENCUMBRANCE_THRESHOLD_PCT,
    )
    logger.debug("Resolved encumbrance", weight=weight, capacity=capacity, encumbered=encumbrance.encumbered)
    return encumbrance


__all__ = ["carried_weight", "carrying_capacity", "compute_encumbrance"]
