"""Derivation engine for the SW5E derived-stats engine.

Submodules:
    numeric: Rounding and clamping helpers
    details: Level, proficiency and experience
    abilities: Ability modifiers, saves, DCs and skills
    initiative: Initiative modifier
    encumbrance: Carried weight and carrying capacity
    powercasting: Force and tech power progression and slots
    superiority: Superiority level, maneuvers and dice
    dcs: Power and superiority save DCs
    pipeline: DerivedStatsEngine orchestrating the stages

Example:
    >>> from sw5e_engine.engine import DerivedStatsEngine
    >>> stats = DerivedStatsEngine().recompute(snapshot)
    >>> stats.details.prof
    2
"""

from __future__ import annotations

# =============================================================================
# Stages
# =============================================================================
from sw5e_engine.engine.abilities import compute_abilities, compute_skills
from sw5e_engine.engine.dcs import compute_power_dcs, compute_superiority_dcs
from sw5e_engine.engine.details import compute_details
from sw5e_engine.engine.encumbrance import (
    carried_weight,
    carrying_capacity,
    compute_encumbrance,
)
from sw5e_engine.engine.initiative import compute_initiative
from sw5e_engine.engine.numeric import ability_modifier, clamp, round_half_up, to_nearest
from sw5e_engine.engine.powercasting import (
    PowercastingResult,
    compute_casting,
    compute_powercasting,
    count_known_powers,
    resolve_power_slots,
    resolve_progression,
)
from sw5e_engine.engine.superiority import class_progression, compute_superiority

# =============================================================================
# Orchestration
# =============================================================================
from sw5e_engine.engine.pipeline import DerivedStatsEngine, recompute


__all__ = [
    # Numeric
    "ability_modifier",
    "clamp",
    "round_half_up",
    "to_nearest",
    # Stages
    "compute_details",
    "compute_abilities",
    "compute_skills",
    "compute_initiative",
    "carried_weight",
    "carrying_capacity",
    "compute_encumbrance",
    "PowercastingResult",
    "resolve_progression",
    "resolve_power_slots",
    "count_known_powers",
    "compute_casting",
    "compute_powercasting",
    "class_progression",
    "compute_superiority",
    "compute_power_dcs",
    "compute_superiority_dcs",
    # Orchestration
    "DerivedStatsEngine",
    "recompute",
]
