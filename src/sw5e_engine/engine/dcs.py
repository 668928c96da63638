"""Power and superiority save DCs."""

from __future__ import annotations

from collections.abc import Mapping

from sw5e_engine.core.constants import BASE_DC
from sw5e_engine.models.derived import AbilityDerived, PowerDCs, SuperiorityDCs
from sw5e_engine.models.enums import Ability
from sw5e_engine.models.snapshot import GlobalBonuses


_PHYSICAL = (Ability.STR, Ability.DEX, Ability.CON)
_MENTAL = (Ability.INT, Ability.WIS, Ability.CHA)


def compute_power_dcs(
    abilities: Mapping[Ability, AbilityDerived],
    prof_bonus: int,
    bonuses: GlobalBonuses,
    *,
    simplified_forcecasting: bool = False,
) -> PowerDCs:
    """Derive save DCs for light, dark and universal force powers and tech powers.

    Light side powers key off Wisdom, dark side off Charisma and universal
    powers off the better of the two. With simplified forcecasting all
    three force schools share the universal DC before bonuses.

    Args:
        abilities: Derived abilities.
        prof_bonus: Actor proficiency bonus.
        bonuses: Actor-wide bonuses; power_dc applies to every school.
        simplified_forcecasting: Whether light and dark use the universal DC.

    Returns:
        PowerDCs with bonuses applied.
    """
    light = BASE_DC + abilities[Ability.WIS].mod + prof_bonus
    dark = BASE_DC + abilities[Ability.CHA].mod + prof_bonus
    univ = max(light, dark)
    tech = BASE_DC + abilities[Ability.INT].mod + prof_bonus

    if simplified_forcecasting:
        light = dark = univ

    return PowerDCs(
        force_light=light + bonuses.power_dc + bonuses.force_light_dc,
        force_dark=dark + bonuses.power_dc + bonuses.force_dark_dc,
        force_univ=univ + bonuses.power_dc + bonuses.force_univ_dc,
        tech=tech + bonuses.power_dc + bonuses.tech_dc,
    )


def compute_superiority_dcs(
    abilities: Mapping[Ability, AbilityDerived],
    prof_bonus: int,
    bonuses: GlobalBonuses,
) -> SuperiorityDCs:
    """Derive maneuver save DCs from the best physical and mental modifiers.

    The shared superiority bonus applies to all three DCs; each DC also
    takes its own per-type bonus.
    """
    physical = BASE_DC + max(abilities[ability].mod for ability in _PHYSICAL) + prof_bonus
    mental = BASE_DC + max(abilities[ability].mod for ability in _MENTAL) + prof_bonus
    general = max(physical, mental)
    return SuperiorityDCs(
        physical=physical + bonuses.superiority_dc + bonuses.superiority_physical_dc,
        mental=mental + bonuses.superiority_dc + bonuses.superiority_mental_dc,
        general=general + bonuses.superiority_dc + bonuses.superiority_general_dc,
    )


__all__ = ["compute_power_dcs", "compute_superiority_dcs"]
