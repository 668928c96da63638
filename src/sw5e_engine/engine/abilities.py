"""Ability and skill derivation.

Ability modifiers, saves and DCs come first; skills read the resolved
ability modifiers and check bonuses. Both functions are pure and take plain
values rather than the whole snapshot so they can be reused by tools that
preview a single ability or skill.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping

from sw5e_engine.core.constants import (
    BASE_DC,
    HALF_PROFICIENCY,
    MAX_SKILL_MULTIPLIER,
    MIN_SKILL_MULTIPLIER,
    OBSERVANT_PASSIVE_BONUS,
    OBSERVANT_SKILLS,
    PASSIVE_BASE,
    REMARKABLE_ATHLETE_ABILITIES,
)
from sw5e_engine.core.logging import get_logger
from sw5e_engine.engine.numeric import ability_modifier, clamp, to_nearest
from sw5e_engine.models.derived import AbilityDerived, SkillDerived
from sw5e_engine.models.enums import Ability, Skill
from sw5e_engine.models.snapshot import AbilityInput, FeatFlags, SkillInput


logger = get_logger(__name__)


def compute_abilities(
    abilities: Mapping[Ability, AbilityInput],
    prof_bonus: int,
    save_bonus: int = 0,
    check_bonus: int = 0,
    dc_bonus: int = 0,
    merged_saves: Mapping[Ability, int] | None = None,
) -> dict[Ability, AbilityDerived]:
    """Derive modifier, save and DC for every ability.

    Args:
        abilities: Ability inputs keyed by ability.
        prof_bonus: Actor proficiency bonus.
        save_bonus: Actor-wide saving throw bonus.
        check_bonus: Actor-wide ability check bonus.
        dc_bonus: Actor-wide DC bonus.
        merged_saves: Donor save totals while polymorphed with merged saves;
            a proficient save keeps the better of its own and the donor's.

    Returns:
        AbilityDerived for each ability present in the input.

    Example:
        >>> derived = compute_abilities({Ability.DEX: AbilityInput(value=15, proficient=1)}, 2)
        >>> derived[Ability.DEX].save
        4
    """
    result: dict[Ability, AbilityDerived] = {}
    for ability, data in abilities.items():
        mod = ability_modifier(data.value)
        prof = data.proficient * prof_bonus
        total_save_bonus = save_bonus + data.save_bonus
        save = mod + prof + total_save_bonus

        if merged_saves and data.proficient and ability in merged_saves:
            save = max(save, merged_saves[ability])

        result[ability] = AbilityDerived(
            value=data.value,
            proficient=data.proficient,
            mod=mod,
            prof=prof,
            save_bonus=total_save_bonus,
            save=save,
            check_bonus=check_bonus + data.check_bonus,
            dc=BASE_DC + mod + prof_bonus + dc_bonus,
        )
    return result


def _skill_multiplier(
    skill: Skill,
    data: SkillInput,
    flags: FeatFlags,
    merged_skills: Mapping[Skill, float] | None,
) -> tuple[float, Callable[[float], int]]:
    """Resolve a skill's proficiency multiplier and its rounding function."""
    value = clamp(to_nearest(data.value, HALF_PROFICIENCY), MIN_SKILL_MULTIPLIER, MAX_SKILL_MULTIPLIER)
    rounding: Callable[[float], int] = math.floor

    if flags.remarkable_athlete and value < HALF_PROFICIENCY and data.ability in REMARKABLE_ATHLETE_ABILITIES:
        value = HALF_PROFICIENCY
        rounding = math.ceil
    if flags.jack_of_all_trades and value < HALF_PROFICIENCY:
        value = HALF_PROFICIENCY

    if merged_skills and skill in merged_skills:
        value = max(value, merged_skills[skill])
    return value, rounding


def compute_skills(
    skills: Mapping[Skill, SkillInput],
    abilities: Mapping[Ability, AbilityDerived],
    prof_bonus: int,
    check_bonus: int = 0,
    skill_bonus: int = 0,
    flags: FeatFlags | None = None,
    merged_skills: Mapping[Skill, float] | None = None,
) -> dict[Skill, SkillDerived]:
    """Derive check totals and passive scores for every skill.

    The multiplier snaps to the nearest half step in [0, 2]. Remarkable
    Athlete lifts untrained Strength, Dexterity and Constitution skills to
    half proficiency rounded up; Jack of All Trades lifts any other
    untrained skill to half proficiency rounded down.

    Args:
        skills: Skill inputs keyed by skill.
        abilities: Derived abilities; each contributes its modifier and its
            own check bonus.
        prof_bonus: Actor proficiency bonus.
        check_bonus: Actor-wide ability check bonus not already included in
            the derived abilities.
        skill_bonus: Actor-wide skill check bonus.
        flags: Feat flags.
        merged_skills: Donor multipliers while polymorphed with merged
            skills; the higher multiplier wins.

    Returns:
        SkillDerived for each skill present in the input.
    """
    flags = flags or FeatFlags()
    result: dict[Skill, SkillDerived] = {}
    for skill, data in skills.items():
        value, rounding = _skill_multiplier(skill, data, flags, merged_skills)
        ability = abilities.get(data.ability)
        mod = ability.mod if ability else 0
        ability_check = ability.check_bonus if ability else 0

        prof = int(rounding(value * prof_bonus))
        bonus = data.bonus + check_bonus + skill_bonus + ability_check
        total = mod + prof + bonus

        passive = PASSIVE_BASE + total + data.passive_bonus
        if flags.observant_feat and skill in OBSERVANT_SKILLS:
            passive += OBSERVANT_PASSIVE_BONUS

        result[skill] = SkillDerived(
            value=value,
            ability=data.ability,
            mod=mod,
            prof=prof,
            bonus=bonus,
            total=total,
            passive=passive,
        )
    return result


__all__ = ["compute_abilities", "compute_skills"]
