"""Pytest configuration and shared fixtures.

This module provides common fixtures and configuration for all tests
in the SW5E derived-stats engine test suite.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest


if TYPE_CHECKING:
    from collections.abc import Callable, Generator


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from sw5e_engine.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "SW5E_ENGINE_DEBUG": "true",
        "SW5E_ENGINE_LOG_LEVEL": "DEBUG",
        "SW5E_ENGINE_RULES_CURRENCY_WEIGHT": "false",
        "SW5E_ENGINE_RULES_SIMPLIFIED_FORCECASTING": "true",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


@pytest.fixture
def settings() -> Any:
    """Create default settings independent of the environment.

    Returns:
        Settings instance with default rule toggles.
    """
    from sw5e_engine.core.config import RulesSettings, Settings

    return Settings(rules=RulesSettings(currency_weight=True, metric_weight_units=False, simplified_forcecasting=False))


@pytest.fixture
def tables() -> Any:
    """Provide the published rule tables.

    Returns:
        RuleTables instance.
    """
    from sw5e_engine.models.progression import default_rule_tables

    return default_rule_tables()


@pytest.fixture
def engine(tables: Any, settings: Any) -> Any:
    """Create a DerivedStatsEngine with default tables and settings.

    Returns:
        DerivedStatsEngine instance.
    """
    from sw5e_engine.engine.pipeline import DerivedStatsEngine

    return DerivedStatsEngine(tables=tables, settings=settings)


# =============================================================================
# Snapshot Fixtures
# =============================================================================


@pytest.fixture
def make_snapshot() -> Callable[..., Any]:
    """Provide a factory for ActorSnapshot instances.

    The factory accepts ability scores as keyword arguments (str_=, dex_=, ...)
    alongside any ActorSnapshot field.

    Returns:
        Factory function building an ActorSnapshot.
    """
    from sw5e_engine.models.enums import Ability
    from sw5e_engine.models.snapshot import AbilityInput, ActorSnapshot

    def factory(**kwargs: Any) -> ActorSnapshot:
        scores = {ability: kwargs.pop(f"{ability.value}_", None) for ability in Ability}
        abilities = dict(kwargs.pop("abilities", {}))
        for ability, score in scores.items():
            if score is not None:
                abilities[ability] = AbilityInput(value=score)
        return ActorSnapshot(abilities=abilities, **kwargs)

    return factory


@pytest.fixture
def make_class() -> Callable[..., Any]:
    """Provide a factory for class items.

    Returns:
        Factory function building a class ItemSnapshot.
    """
    from sw5e_engine.models.enums import Powercasting
    from sw5e_engine.models.snapshot import ItemSnapshot

    def factory(
        archetype: Powercasting | str = Powercasting.NONE,
        levels: int = 1,
        *,
        name: str | None = None,
        hit_dice_used: int = 0,
    ) -> ItemSnapshot:
        archetype = Powercasting(archetype)
        return ItemSnapshot(
            name=name or archetype.value.title(),
            type="class",
            levels=levels,
            hit_dice_used=hit_dice_used,
            powercasting=archetype,
        )

    return factory


# =============================================================================
# Raw Actor Fixtures
# =============================================================================


@pytest.fixture
def raw_character() -> dict[str, Any]:
    """Provide host-shaped data for a level 5 consular.

    Returns:
        Dictionary shaped like the host's stored actor data.
    """
    return {
        "name": "Kira Vel",
        "type": "character",
        "data": {
            "abilities": {
                "str": {"value": 10, "proficient": 0},
                "dex": {"value": "14", "proficient": 0},
                "con": {"value": 12, "proficient": 0},
                "int": {"value": 10, "proficient": 0},
                "wis": {"value": 16, "proficient": 1},
                "cha": {"value": 13, "proficient": 1, "bonuses": {"check": "", "save": "1"}},
            },
            "skills": {
                "prc": {"value": 1, "ability": "wis"},
                "ins": {"value": "2", "ability": "wis"},
                "ath": {"value": 0, "ability": "str"},
            },
            "attributes": {
                "prof": 3,
                "init": {"value": 0},
                "powercasting": "none",
                "force": {"level": 0, "points": {"value": 12, "max": 0}, "known": {"value": 0, "max": 0}},
                "tech": {"level": 0, "points": {"value": 0, "max": 0}, "known": {"value": 0, "max": 0}},
            },
            "traits": {"size": "med"},
            "details": {"xp": {"value": 10250}},
            "bonuses": {
                "abilities": {"check": "", "save": "", "skill": ""},
                "power": {"dc": "", "forceLightDC": "", "forceDarkDC": "", "forceUnivDC": "", "techDC": ""},
                "super": {"dc": ""},
            },
            "powers": {
                "power1": {"fvalue": "", "foverride": ""},
                "power3": {"fvalue": 0, "foverride": ""},
            },
            "currency": {"cr": 250},
        },
        "flags": {"sw5e": {"observantFeat": True}},
        "items": [
            {"name": "Consular", "type": "class", "data": {"levels": 5, "hitDiceUsed": 1, "powercasting": "consular"}},
            {"name": "Vibroblade", "type": "weapon", "data": {"quantity": 1, "weight": 3}},
            {"name": "Ration", "type": "consumable", "data": {"quantity": "10", "weight": 0.5}},
            {"name": "Battle Meditation", "type": "power", "data": {"school": "lgt"}},
            {"name": "Force Push", "type": "power", "data": {"school": "uni"}},
            {"name": "Kolto Infusion", "type": "power", "data": {"school": "enh"}},
        ],
    }


@pytest.fixture
def raw_npc() -> dict[str, Any]:
    """Provide host-shaped data for a CR 4 force-using NPC.

    Returns:
        Dictionary shaped like the host's stored actor data.
    """
    return {
        "name": "Dark Acolyte",
        "type": "npc",
        "data": {
            "abilities": {
                "str": {"value": 10},
                "dex": {"value": 12},
                "con": {"value": 12},
                "int": {"value": 10},
                "wis": {"value": 12},
                "cha": {"value": 16},
            },
            "attributes": {
                "prof": 2,
                "powercasting": "consular",
                "force": {"level": 0, "points": {"value": 0, "max": 0}},
            },
            "details": {"cr": 4, "powerForceLevel": "5", "powerTechLevel": ""},
            "powers": {
                "power1": {"fvalue": 0},
                "power2": {"fvalue": 0, "foverride": "4"},
            },
        },
        "items": [],
    }
