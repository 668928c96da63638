"""Numeric helpers shared by the derivation stages."""

from __future__ import annotations

import math


def to_nearest(value: float, increment: float) -> float:
    """Snap a value to the nearest multiple of an increment.

    Halves round up, as the host's sheet does, rather than to even.

    Args:
        value: Value to snap.
        increment: Step size, e.g. 0.5 for skill multipliers or 0.1 for
            weights. Must divide 1 evenly.

    Returns:
        The snapped value.

    Example:
        >>> to_nearest(0.75, 0.5)
        1.0
        >>> to_nearest(12.34, 0.1)
        12.3
    """
    steps = 1 / increment
    return math.floor(value * steps + 0.5) / steps


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounding up."""
    return math.floor(value + 0.5)


def clamp(value: float, lower: float, upper: float) -> float:
    """Constrain a value to the closed range [lower, upper]."""
    return max(lower, min(value, upper))


def ability_modifier(score: int) -> int:
    """Calculate the modifier for an ability score.

    Args:
        score: Ability score.

    Returns:
        floor((score - 10) / 2).

    Example:
        >>> ability_modifier(15)
        2
        >>> ability_modifier(9)
        -1
    """
    return (score - 10) // 2


__all__ = ["to_nearest", "round_half_up", "clamp", "ability_modifier"]
