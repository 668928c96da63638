"""Derived-stats orchestration.

The DerivedStatsEngine runs the derivation stages in dependency order:

    details -> abilities -> skills -> initiative -> encumbrance
            -> powercasting -> superiority -> power and superiority DCs

Proficiency from the details stage feeds every later stage; ability
modifiers feed skills, initiative, encumbrance, the point pools and the
DCs. Vehicles have no skills. Each stage is a pure function, so recomputing an unchanged snapshot
yields an identical DerivedStats.

Example:
    >>> engine = DerivedStatsEngine()
    >>> stats = engine.recompute_raw({"name": "Kira", "type": "character"})
    >>> stats.abilities[Ability.STR].mod
    0
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from sw5e_engine.core.config import Settings, get_settings
from sw5e_engine.core.exceptions import ComputationError, SnapshotValidationError, Sw5eEngineError
from sw5e_engine.core.logging import bind_context, clear_context, get_logger
from sw5e_engine.engine.abilities import compute_abilities, compute_skills
from sw5e_engine.engine.dcs import compute_power_dcs, compute_superiority_dcs
from sw5e_engine.engine.details import compute_details
from sw5e_engine.engine.encumbrance import compute_encumbrance
from sw5e_engine.engine.initiative import compute_initiative
from sw5e_engine.engine.powercasting import compute_powercasting
from sw5e_engine.engine.superiority import compute_superiority
from sw5e_engine.models.derived import DerivedStats, SkillDerived
from sw5e_engine.models.enums import Ability, ActorKind, Skill
from sw5e_engine.models.parsing import parse_actor_data
from sw5e_engine.models.progression import RuleTables, default_rule_tables
from sw5e_engine.models.snapshot import ActorSnapshot


logger = get_logger(__name__)

T = TypeVar("T")


def _run_stage(stage: str, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run one stage, wrapping unexpected failures with the stage name."""
    try:
        return func(*args, **kwargs)
    except Sw5eEngineError:
        raise
    except Exception as exc:
        raise ComputationError(
            f"Stage '{stage}' failed: {exc}",
            stage=stage,
            details={"original_error": str(exc)},
        ) from exc


class DerivedStatsEngine:
    """Computes derived statistics for SW5E actors.

    Attributes:
        tables: Rule tables used for every lookup.
        settings: Engine settings; the rule toggles affect encumbrance and
            force DCs.
    """

    def __init__(
        self,
        tables: RuleTables | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            tables: Rule tables; the published SW5E tables when omitted.
            settings: Engine settings; loaded from the environment when
                omitted.
        """
        self._tables = tables or default_rule_tables()
        self._settings = settings or get_settings()

    @property
    def tables(self) -> RuleTables:
        """Get the rule tables."""
        return self._tables

    @property
    def settings(self) -> Settings:
        """Get the engine settings."""
        return self._settings

    def recompute(self, snapshot: ActorSnapshot) -> DerivedStats:
        """Derive every statistic for an actor snapshot.

        Args:
            snapshot: Validated actor snapshot.

        Returns:
            A fresh DerivedStats.

        Raises:
            ComputationError: If a stage fails unexpectedly.
        """
        bind_context(actor=snapshot.name, kind=snapshot.kind.value)
        try:
            return self._derive(snapshot)
        finally:
            clear_context()

    def recompute_raw(self, raw: Any) -> DerivedStats:
        """Parse host actor data, then derive every statistic.

        Coercion warnings from parsing are reported ahead of any
        integrity warnings in DerivedStats.warnings.

        Args:
            raw: Actor data as stored by the host.

        Returns:
            A fresh DerivedStats.

        Raises:
            SnapshotValidationError: If the data cannot be parsed.
            ComputationError: If a stage fails unexpectedly.
        """
        result = parse_actor_data(raw)
        if not result.success or result.snapshot is None:
            raise SnapshotValidationError(
                "Actor data could not be parsed",
                actor_name=raw.get("name") if isinstance(raw, dict) else None,
                errors=result.errors,
            )

        stats = self.recompute(result.snapshot)
        if not result.warnings:
            return stats
        return stats.model_copy(update={"warnings": (*result.warnings, *stats.warnings)})

    def _derive(self, snapshot: ActorSnapshot) -> DerivedStats:
        rules = self._settings.rules
        bonuses = snapshot.bonuses

        details = _run_stage("details", compute_details, snapshot, self._tables)
        prof = details.prof

        abilities = _run_stage(
            "abilities",
            compute_abilities,
            snapshot.abilities,
            prof,
            save_bonus=bonuses.ability_save,
            check_bonus=bonuses.ability_check,
            dc_bonus=bonuses.power_dc,
            merged_saves=snapshot.merged_saves,
        )
        skills: dict[Skill, SkillDerived] = {}
        if snapshot.kind is not ActorKind.VEHICLE:
            skills = _run_stage(
                "skills",
                compute_skills,
                snapshot.skills,
                abilities,
                prof,
                skill_bonus=bonuses.skill_check,
                flags=snapshot.flags,
                merged_skills=snapshot.merged_skills,
            )
        initiative = _run_stage(
            "initiative",
            lambda: compute_initiative(
                abilities[Ability.DEX].mod,
                prof,
                snapshot.attributes.init_value,
                snapshot.flags,
            ),
        )
        encumbrance = _run_stage(
            "encumbrance",
            lambda: compute_encumbrance(
                snapshot.items,
                snapshot.currency,
                snapshot.ability(Ability.STR).value,
                snapshot.attributes.size,
                self._tables,
                rules,
                powerful_build=snapshot.flags.powerful_build,
            ),
        )
        powers = _run_stage("powercasting", compute_powercasting, snapshot, abilities, self._tables)
        superiority = _run_stage("superiority", compute_superiority, snapshot, self._tables)
        power_dcs = _run_stage(
            "power_dcs",
            compute_power_dcs,
            abilities,
            prof,
            bonuses,
            simplified_forcecasting=rules.simplified_forcecasting,
        )
        superiority_dcs = _run_stage("superiority_dcs", compute_superiority_dcs, abilities, prof, bonuses)

        logger.debug(
            "Recomputed actor",
            level=details.level,
            prof=prof,
            warnings=len(powers.warnings),
        )
        return DerivedStats(
            details=details,
            abilities=abilities,
            skills=skills,
            initiative=initiative,
            encumbrance=encumbrance,
            power_progression=powers.progression,
            power_slots=powers.slots,
            casting=powers.casting,
            superiority=superiority,
            power_dcs=power_dcs,
            superiority_dcs=superiority_dcs,
            warnings=powers.warnings,
        )


def recompute(snapshot: ActorSnapshot) -> DerivedStats:
    """Derive every statistic for a snapshot with the default tables and settings."""
    return DerivedStatsEngine().recompute(snapshot)


__all__ = ["DerivedStatsEngine", "recompute"]
