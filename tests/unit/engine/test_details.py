"""Tests for level, proficiency and experience derivation."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from sw5e_engine.engine.details import compute_details
from sw5e_engine.models.enums import ActorKind, Powercasting
from sw5e_engine.models.progression import RuleTables
from sw5e_engine.models.snapshot import AttributesInput, DetailsInput


class TestCharacterDetails:
    """Tests for character level and experience."""

    def test_level_and_hit_dice(
        self,
        make_snapshot: Callable[..., Any],
        make_class: Callable[..., Any],
        tables: RuleTables,
    ) -> None:
        """Test level sums class levels and hit dice subtract spent dice."""
        snapshot = make_snapshot(
            items=(
                make_class(Powercasting.CONSULAR, 5, hit_dice_used=1),
                make_class(Powercasting.SCOUT, 3),
            ),
        )

        details = compute_details(snapshot, tables)

        assert details.level == 8
        assert details.hit_dice == 7
        assert details.prof == 3

    def test_xp_progress(
        self,
        make_snapshot: Callable[..., Any],
        make_class: Callable[..., Any],
        tables: RuleTables,
    ) -> None:
        """Test XP percentage between the current and next threshold."""
        snapshot = make_snapshot(
            items=(make_class(Powercasting.CONSULAR, 8),),
            details=DetailsInput(xp=41000),
        )

        details = compute_details(snapshot, tables)

        assert details.xp_max == 48000
        assert details.xp_pct == 50

    def test_xp_pct_clamped(
        self,
        make_snapshot: Callable[..., Any],
        make_class: Callable[..., Any],
        tables: RuleTables,
    ) -> None:
        """Test XP below the current threshold reads 0 percent."""
        snapshot = make_snapshot(items=(make_class(Powercasting.CONSULAR, 8),), details=DetailsInput(xp=100))

        assert compute_details(snapshot, tables).xp_pct == 0

    def test_no_classes(self, make_snapshot: Callable[..., Any], tables: RuleTables) -> None:
        """Test a classless character is level 0 working toward level 1."""
        details = compute_details(make_snapshot(details=DetailsInput(xp=150)), tables)

        assert details.level == 0
        assert details.prof == 1
        assert details.xp_max == 300
        assert details.xp_pct == 50

    def test_max_level(
        self,
        make_snapshot: Callable[..., Any],
        make_class: Callable[..., Any],
        tables: RuleTables,
    ) -> None:
        """Test level 20 shows full progress."""
        snapshot = make_snapshot(items=(make_class(Powercasting.NONE, 20),), details=DetailsInput(xp=400000))

        details = compute_details(snapshot, tables)

        assert details.prof == 6
        assert details.xp_pct == 100


class TestNpcDetails:
    """Tests for NPC proficiency and XP value."""

    @pytest.mark.parametrize(
        ("cr", "prof", "xp"),
        [(0, 2, 10), (0.5, 2, 100), (4, 2, 1100), (5, 3, 1800), (17, 6, 18000)],
    )
    def test_from_challenge_rating(
        self,
        make_snapshot: Callable[..., Any],
        tables: RuleTables,
        cr: float,
        prof: int,
        xp: int,
    ) -> None:
        """Test proficiency floor((max(cr, 1) + 7) / 4) and XP value."""
        snapshot = make_snapshot(kind=ActorKind.NPC, details=DetailsInput(cr=cr))

        details = compute_details(snapshot, tables)

        assert details.prof == prof
        assert details.xp_value == xp
        assert details.level == 0


class TestVehicleDetails:
    """Tests for vehicle details."""

    def test_stored_proficiency(self, make_snapshot: Callable[..., Any], tables: RuleTables) -> None:
        """Test vehicles use their stored proficiency bonus."""
        snapshot = make_snapshot(kind=ActorKind.VEHICLE, attributes=AttributesInput(prof=4))

        details = compute_details(snapshot, tables)

        assert details.prof == 4
        assert details.level == 0
