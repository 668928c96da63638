"""Tests for superiority progression."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from sw5e_engine.engine.superiority import class_progression, compute_superiority
from sw5e_engine.models.enums import ActorKind
from sw5e_engine.models.progression import RuleTables
from sw5e_engine.models.snapshot import (
    AttributesInput,
    ItemSnapshot,
    ResourcePool,
    SuperiorityInput,
)


def _class(name: str, levels: int, progression: float = 0.0) -> ItemSnapshot:
    return ItemSnapshot(
        name=name,
        type="class",
        levels=levels,
        identifier=name.lower(),
        superiority_progression=progression,
    )


def _archetype(class_identifier: str, progression: float) -> ItemSnapshot:
    return ItemSnapshot(
        name="Archetype",
        type="archetype",
        class_identifier=class_identifier,
        superiority_progression=progression,
    )


def _maneuver() -> ItemSnapshot:
    return ItemSnapshot(name="Disarming Attack", type="maneuver")


class TestClassProgression:
    """Tests for class_progression."""

    @pytest.mark.parametrize(
        ("own", "archetype", "expected"),
        [(0.5, None, 0.5), (0.0, 1.0, 1.0), (1.0, 0.5, 1.0), (0.0, 0.0, 0.0)],
    )
    def test_higher_multiplier_wins(self, own: float, archetype: float | None, expected: float) -> None:
        """Test a class uses the higher of its own and its archetype's multiplier."""
        item = _class("Fighter", 3, own)
        linked = None if archetype is None else _archetype("fighter", archetype)

        assert class_progression(item, linked) == expected


class TestComputeSuperiority:
    """Tests for compute_superiority."""

    def test_full_progression(self, make_snapshot: Callable[..., Any], tables: RuleTables) -> None:
        """Test a full progression class reads its own level from the tables."""
        snapshot = make_snapshot(items=(_class("Fighter", 3, 1.0), _maneuver(), _maneuver()))

        superiority = compute_superiority(snapshot, tables)

        assert superiority.level == 3
        assert superiority.levels == 3
        assert superiority.known_value == 2
        assert superiority.known_max == 3
        assert superiority.dice_max == 2
        assert superiority.die == "d4"

    def test_half_progression_rounds_up(self, make_snapshot: Callable[..., Any], tables: RuleTables) -> None:
        """Test half progression scales the level and rounds halves up."""
        snapshot = make_snapshot(items=(_class("Scout", 5, 0.5),))

        superiority = compute_superiority(snapshot, tables)

        assert superiority.level == 3
        assert superiority.levels == 5
        assert superiority.known_max == 3
        assert superiority.dice_max == 2
        assert superiority.die == "d4"

    def test_archetype_grants_progression(self, make_snapshot: Callable[..., Any], tables: RuleTables) -> None:
        """Test an archetype linked by class identifier raises the multiplier."""
        snapshot = make_snapshot(items=(_class("Fighter", 3), _archetype("fighter", 1.0)))

        superiority = compute_superiority(snapshot, tables)

        assert superiority.level == 3
        assert superiority.known_max == 3

    def test_unlinked_archetype_ignored(self, make_snapshot: Callable[..., Any], tables: RuleTables) -> None:
        """Test an archetype of a class the actor lacks contributes nothing."""
        snapshot = make_snapshot(items=(_class("Fighter", 3), _archetype("scholar", 1.0)))

        superiority = compute_superiority(snapshot, tables)

        assert (superiority.level, superiority.known_max, superiority.die) == (0, 0, "")

    def test_classes_accumulate(self, make_snapshot: Callable[..., Any], tables: RuleTables) -> None:
        """Test each class adds its own maneuvers and dice."""
        snapshot = make_snapshot(items=(_class("Fighter", 3, 1.0), _class("Scout", 5, 0.5), _class("Consular", 2)))

        superiority = compute_superiority(snapshot, tables)

        assert superiority.level == 6
        assert superiority.levels == 8
        assert superiority.known_max == 6
        assert superiority.dice_max == 4
        assert superiority.die == "d6"

    def test_level_clamped(self, make_snapshot: Callable[..., Any], tables: RuleTables) -> None:
        """Test the superiority level and die stop at the final class level."""
        snapshot = make_snapshot(items=(_class("Fighter", 20, 1.0), _class("Scout", 4, 1.0)))

        superiority = compute_superiority(snapshot, tables)

        assert superiority.level == 20
        assert superiority.levels == 20
        assert superiority.known_max == 14
        assert superiority.dice_max == 8
        assert superiority.die == "d12"

    def test_out_of_range_class_level(self, make_snapshot: Callable[..., Any], tables: RuleTables) -> None:
        """Test class levels beyond the tables contribute no maneuvers or dice."""
        snapshot = make_snapshot(items=(_class("Fighter", 25, 1.0),))

        superiority = compute_superiority(snapshot, tables)

        assert (superiority.known_max, superiority.dice_max) == (0, 0)
        assert superiority.level == 20

    def test_remaining_dice_kept(self, make_snapshot: Callable[..., Any], tables: RuleTables) -> None:
        """Test the stored remaining dice pass through."""
        snapshot = make_snapshot(
            items=(_class("Fighter", 3, 1.0),),
            attributes=AttributesInput(superiority=SuperiorityInput(dice=ResourcePool(value=1, max=9))),
        )

        superiority = compute_superiority(snapshot, tables)

        assert (superiority.dice_value, superiority.dice_max) == (1, 2)

    def test_vehicle_passes_through(self, make_snapshot: Callable[..., Any], tables: RuleTables) -> None:
        """Test vehicles keep their stored superiority block."""
        stored = SuperiorityInput(
            level=4,
            known=ResourcePool(value=1, max=3),
            dice=ResourcePool(value=2, max=2),
            die="d6",
        )
        snapshot = make_snapshot(
            kind=ActorKind.VEHICLE,
            items=(_class("Fighter", 3, 1.0),),
            attributes=AttributesInput(superiority=stored),
        )

        superiority = compute_superiority(snapshot, tables)

        assert superiority.level == 4
        assert (superiority.known_value, superiority.known_max) == (1, 3)
        assert (superiority.dice_value, superiority.dice_max) == (2, 2)
        assert superiority.die == "d6"
