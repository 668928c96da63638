"""Integration tests for recomputing host actors.

Tests the complete flow: host data in, parsed snapshot, every derived
statistic out.
"""

from __future__ import annotations

from typing import Any

import pytest

from sw5e_engine import DerivedStatsEngine, build_snapshot
from sw5e_engine.models.enums import Ability, CastType, Powercasting, Skill


class TestCharacterFlow:
    """Test a level 5 consular end to end."""

    @pytest.fixture
    def stats(self, engine: DerivedStatsEngine, raw_character: dict[str, Any]) -> Any:
        """Derived stats for the sample character."""
        return engine.recompute_raw(raw_character)

    def test_details(self, stats: Any) -> None:
        """Level, hit dice and experience."""
        assert stats.details.level == 5
        assert stats.details.hit_dice == 4
        assert stats.details.prof == 3
        assert stats.details.xp_max == 14000
        assert stats.details.xp_pct == 50

    def test_abilities_and_skills(self, stats: Any) -> None:
        """Saves, skill totals and passives."""
        assert stats.abilities[Ability.WIS].save == 6
        assert stats.abilities[Ability.CHA].save == 5
        assert stats.skills[Skill.PERCEPTION].total == 6
        assert stats.skills[Skill.PERCEPTION].passive == 21
        assert stats.skills[Skill.INSIGHT].total == 9
        assert stats.skills[Skill.INSIGHT].passive == 19
        assert stats.skills[Skill.ATHLETICS].passive == 10
        assert stats.initiative.total == 2

    def test_encumbrance(self, stats: Any) -> None:
        """Gear and coins against capacity."""
        assert stats.encumbrance.value == 13.0
        assert stats.encumbrance.max == 150.0
        assert stats.encumbrance.encumbered is False

    def test_powercasting(self, stats: Any) -> None:
        """Force casting block and slots."""
        force = stats.casting[CastType.FORCE]
        assert force.level == 5
        assert force.known_value == 2
        assert force.known_max == 17
        assert force.points_value == 12
        assert force.points_max == 23
        assert (stats.power_slots["power1"].fvalue, stats.power_slots["power1"].fmax) == (1000, 1000)
        assert (stats.power_slots["power3"].fvalue, stats.power_slots["power3"].fmax) == (0, 1000)
        assert (stats.power_slots["power4"].fvalue, stats.power_slots["power4"].fmax) == (0, 0)
        assert stats.casting[CastType.TECH].known_value == 0

    def test_dcs(self, stats: Any) -> None:
        """Power and superiority DCs."""
        assert (stats.power_dcs.force_light, stats.power_dcs.force_dark) == (14, 12)
        assert stats.power_dcs.force_univ == 14
        assert stats.power_dcs.tech == 11
        assert (stats.superiority_dcs.physical, stats.superiority_dcs.mental) == (13, 14)
        assert stats.superiority_dcs.general == 14
        assert stats.warnings == ()

    def test_multiclass_level_up(self, engine: DerivedStatsEngine, raw_character: dict[str, Any]) -> None:
        """Adding a second force class switches to multiclass progression."""
        raw_character["items"].append(
            {"name": "Guardian", "type": "class", "data": {"levels": 2, "powercasting": "guardian"}}
        )

        stats = engine.recompute_raw(raw_character)

        progression = stats.power_progression[CastType.FORCE]
        assert stats.details.level == 7
        assert progression.multiclassed is True
        assert progression.levels == 6
        assert progression.max_class is Powercasting.CONSULAR
        assert progression.max_class_power_level == 3
        assert stats.casting[CastType.FORCE].known_max == 24
        assert stats.casting[CastType.FORCE].points_max == 27

    def test_superiority_from_archetype(self, engine: DerivedStatsEngine, raw_character: dict[str, Any]) -> None:
        """A fighter archetype grants superiority and its DC bonuses apply."""
        raw_character["items"].extend(
            [
                {"name": "Fighter", "type": "class", "system": {"levels": 2, "identifier": "fighter"}},
                {
                    "name": "Tactical Specialist",
                    "type": "archetype",
                    "system": {"classIdentifier": "fighter", "superiority": {"progression": 1}},
                },
                {"name": "Commander's Strike", "type": "maneuver", "system": {}},
            ]
        )
        raw_character["data"]["bonuses"]["super"]["physicalDC"] = "1"

        stats = engine.recompute_raw(raw_character)

        assert stats.superiority.level == 2
        assert (stats.superiority.known_value, stats.superiority.known_max) == (1, 2)
        assert (stats.superiority.dice_max, stats.superiority.die) == (2, "d4")
        assert stats.superiority_dcs.physical == 14
        assert stats.warnings == ()

    def test_recompute_is_stable(self, engine: DerivedStatsEngine, raw_character: dict[str, Any]) -> None:
        """Recomputing the same data twice gives the same result."""
        snapshot = build_snapshot(raw_character)

        assert engine.recompute(snapshot) == engine.recompute(snapshot)


class TestNpcFlow:
    """Test a force-using NPC with an explicit caster level."""

    @pytest.fixture
    def stats(self, engine: DerivedStatsEngine, raw_npc: dict[str, Any]) -> Any:
        """Derived stats for the sample NPC."""
        return engine.recompute_raw(raw_npc)

    def test_details(self, stats: Any) -> None:
        """Proficiency and XP come from challenge rating."""
        assert stats.details.prof == 2
        assert stats.details.xp_value == 1100

    def test_caster_level(self, stats: Any) -> None:
        """The explicit caster level drives force progression."""
        progression = stats.power_progression[CastType.FORCE]
        assert progression.levels == 5
        assert progression.max_class is Powercasting.CONSULAR
        assert progression.points == 20

    def test_stored_casting_block(self, stats: Any) -> None:
        """NPC casting blocks are never overwritten by the progression."""
        force = stats.casting[CastType.FORCE]
        assert (force.level, force.points_max) == (0, 0)
        assert force.known_value is None

    def test_full_slots(self, stats: Any) -> None:
        """NPC slots are always full and overrides win."""
        slots = stats.power_slots
        assert (slots["power1"].fvalue, slots["power1"].fmax) == (1000, 1000)
        assert (slots["power2"].fvalue, slots["power2"].fmax) == (4, 4)
        assert (slots["power4"].fvalue, slots["power4"].fmax) == (0, 0)
        assert slots["power1"].tmax == 0
