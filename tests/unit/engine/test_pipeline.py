"""Tests for the derived-stats pipeline."""

from __future__ import annotations

from typing import Any, Callable

import pytest
import structlog

from sw5e_engine.core.config import RulesSettings, Settings
from sw5e_engine.core.exceptions import ComputationError, SnapshotValidationError
from sw5e_engine.engine import pipeline
from sw5e_engine.engine.pipeline import DerivedStatsEngine, recompute
from sw5e_engine.models.enums import Ability, ActorKind, CastType, Powercasting, Skill
from sw5e_engine.models.progression import RuleTables
from sw5e_engine.models.snapshot import ActorSnapshot, ItemSnapshot, SkillInput


class TestDerivedStatsEngine:
    """Tests for DerivedStatsEngine construction."""

    def test_defaults(self) -> None:
        """Test the engine falls back to published tables and env settings."""
        engine = DerivedStatsEngine()

        assert engine.tables.xp_for_level(1) == 300
        assert isinstance(engine.settings, Settings)

    def test_injected(self, tables: RuleTables, settings: Settings) -> None:
        """Test injected tables and settings are kept."""
        engine = DerivedStatsEngine(tables=tables, settings=settings)

        assert engine.tables is tables
        assert engine.settings is settings


class TestRecompute:
    """Tests for recompute."""

    def test_idempotent(
        self,
        engine: DerivedStatsEngine,
        make_snapshot: Callable[..., Any],
        make_class: Callable[..., Any],
    ) -> None:
        """Test recomputing an unchanged snapshot gives identical results."""
        snapshot = make_snapshot(wis_=16, items=(make_class(Powercasting.CONSULAR, 5),))

        assert engine.recompute(snapshot) == engine.recompute(snapshot)

    def test_stages_chain(
        self,
        engine: DerivedStatsEngine,
        make_snapshot: Callable[..., Any],
        make_class: Callable[..., Any],
    ) -> None:
        """Test proficiency from details flows into later stages."""
        snapshot = make_snapshot(wis_=16, items=(make_class(Powercasting.CONSULAR, 9),))

        stats = engine.recompute(snapshot)

        assert stats.details.prof == 4
        assert stats.abilities[Ability.WIS].dc == 15
        assert stats.power_dcs.force_light == 15
        assert stats.casting[CastType.FORCE].points_max == 39

    def test_module_level(
        self,
        make_snapshot: Callable[..., Any],
        make_class: Callable[..., Any],
    ) -> None:
        """Test the module-level shortcut uses default tables."""
        stats = recompute(make_snapshot(items=(make_class(Powercasting.GUARDIAN, 2),)))

        assert stats.details.level == 2
        assert stats.power_progression[CastType.FORCE].max_class is Powercasting.GUARDIAN

    def test_context_cleared(self, engine: DerivedStatsEngine, make_snapshot: Callable[..., Any]) -> None:
        """Test actor context is unbound after a recompute."""
        engine.recompute(make_snapshot(name="Kira"))

        assert structlog.contextvars.get_contextvars() == {}

    def test_stage_failure(
        self,
        engine: DerivedStatsEngine,
        make_snapshot: Callable[..., Any],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test unexpected stage failures name the stage."""

        def broken(*args: Any, **kwargs: Any) -> None:
            raise ZeroDivisionError("division by zero")

        monkeypatch.setattr(pipeline, "compute_encumbrance", broken)

        with pytest.raises(ComputationError) as exc_info:
            engine.recompute(make_snapshot())

        assert exc_info.value.details["stage"] == "encumbrance"
        assert "division by zero" in exc_info.value.details["original_error"]
        assert isinstance(exc_info.value.__cause__, ZeroDivisionError)
        assert structlog.contextvars.get_contextvars() == {}

    def test_default_snapshot(self, engine: DerivedStatsEngine) -> None:
        """Test a snapshot built with no arguments derives cleanly."""
        stats = engine.recompute(ActorSnapshot())

        assert stats.abilities[Ability.DEX].mod == 0
        assert stats.initiative.total == 0
        assert stats.details.level == 0

    def test_vehicle_has_no_skills(self, engine: DerivedStatsEngine, make_snapshot: Callable[..., Any]) -> None:
        """Test vehicles skip the skills stage."""
        snapshot = make_snapshot(
            kind=ActorKind.VEHICLE,
            skills={Skill.PILOTING: SkillInput(value=1, ability=Ability.DEX)},
        )

        stats = engine.recompute(snapshot)

        assert stats.skills == {}

    def test_superiority_stage(self, engine: DerivedStatsEngine, make_snapshot: Callable[..., Any]) -> None:
        """Test superiority is derived from class items."""
        fighter = ItemSnapshot(name="Fighter", type="class", levels=3, superiority_progression=1.0)

        stats = engine.recompute(make_snapshot(items=(fighter,)))

        assert stats.superiority.level == 3
        assert stats.superiority.die == "d4"

    def test_initiative_failure_names_stage(
        self,
        engine: DerivedStatsEngine,
        make_snapshot: Callable[..., Any],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test inputs read for a stage fail inside that stage."""
        monkeypatch.setattr(pipeline, "compute_abilities", lambda *args, **kwargs: {})

        with pytest.raises(ComputationError) as exc_info:
            engine.recompute(make_snapshot())

        assert exc_info.value.details["stage"] == "initiative"

    def test_simplified_forcecasting(self, tables: RuleTables, make_snapshot: Callable[..., Any]) -> None:
        """Test the rule toggle reaches the DC stage."""
        settings = Settings(rules=RulesSettings(simplified_forcecasting=True))
        engine = DerivedStatsEngine(tables=tables, settings=settings)

        stats = engine.recompute(make_snapshot(wis_=16, cha_=10))

        assert stats.power_dcs.force_dark == stats.power_dcs.force_light

    def test_currency_toggle(self, tables: RuleTables, make_snapshot: Callable[..., Any]) -> None:
        """Test coin weight follows the currency rule."""
        snapshot = make_snapshot(currency={"cr": 500})
        with_coins = DerivedStatsEngine(tables, Settings(rules=RulesSettings(currency_weight=True)))
        without = DerivedStatsEngine(tables, Settings(rules=RulesSettings(currency_weight=False)))

        assert with_coins.recompute(snapshot).encumbrance.value == 10.0
        assert without.recompute(snapshot).encumbrance.value == 0.0


class TestRecomputeRaw:
    """Tests for recompute_raw."""

    def test_parses_and_derives(self, engine: DerivedStatsEngine, raw_character: dict[str, Any]) -> None:
        """Test host data is parsed before deriving."""
        stats = engine.recompute_raw(raw_character)

        assert stats.details.level == 5
        assert stats.warnings == ()

    def test_parse_warnings_first(self, engine: DerivedStatsEngine, raw_character: dict[str, Any]) -> None:
        """Test parse warnings are reported with the result."""
        raw_character["data"]["traits"]["size"] = "colossal"

        stats = engine.recompute_raw(raw_character)

        assert stats.warnings
        assert "traits.size" in stats.warnings[0]

    def test_invalid_data(self, engine: DerivedStatsEngine, raw_character: dict[str, Any]) -> None:
        """Test unparseable data raises SnapshotValidationError."""
        raw_character["data"]["abilities"]["str"]["value"] = 99

        with pytest.raises(SnapshotValidationError) as exc_info:
            engine.recompute_raw(raw_character)

        assert exc_info.value.details["actor_name"] == "Kira Vel"
        assert any(error.startswith("abilities.str") for error in exc_info.value.errors)

    def test_not_a_mapping(self, engine: DerivedStatsEngine) -> None:
        """Test non-mapping input raises instead of deriving."""
        with pytest.raises(SnapshotValidationError):
            engine.recompute_raw(None)
