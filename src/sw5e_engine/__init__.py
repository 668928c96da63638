"""SW5E Derived-Stats Engine.

Computes the statistics a Star Wars 5e character sheet shows but never
stores directly: ability modifiers and saves, skill totals, initiative,
encumbrance, and the force and tech power progression with its slots and
point pools.

The engine is a pure function of an actor snapshot plus static rule tables:
the host hands over actor data on every change and merges the returned
DerivedStats back for display.

Example:
    >>> from sw5e_engine import DerivedStatsEngine
    >>> engine = DerivedStatsEngine()
    >>> stats = engine.recompute_raw(actor_data)
    >>> stats.power_progression[CastType.FORCE].max_class_power_level
    3

Modules:
    core: Configuration, logging, and base exceptions.
    models: Pydantic V2 schemas, rule tables and boundary parsing.
    engine: Derivation stages and the DerivedStatsEngine.
"""

from __future__ import annotations

# Core
from sw5e_engine.core.config import Settings, get_settings
from sw5e_engine.core.exceptions import Sw5eEngineError

# Engine
from sw5e_engine.engine.pipeline import DerivedStatsEngine, recompute

# Models
from sw5e_engine.models.derived import DerivedStats
from sw5e_engine.models.enums import (
    Ability,
    ActorKind,
    CastType,
    Powercasting,
    Size,
    Skill,
)
from sw5e_engine.models.parsing import SnapshotResult, build_snapshot, parse_actor_data
from sw5e_engine.models.progression import RuleTables, default_rule_tables
from sw5e_engine.models.snapshot import ActorSnapshot


__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Core
    "Settings",
    "get_settings",
    "Sw5eEngineError",
    # Engine
    "DerivedStatsEngine",
    "recompute",
    # Models
    "ActorSnapshot",
    "DerivedStats",
    "RuleTables",
    "default_rule_tables",
    "SnapshotResult",
    "parse_actor_data",
    "build_snapshot",
    "Ability",
    "ActorKind",
    "CastType",
    "Powercasting",
    "Size",
    "Skill",
]
