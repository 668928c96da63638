"""Initiative modifier derivation."""

from __future__ import annotations

import math

from sw5e_engine.core.constants import ALERT_INITIATIVE_BONUS, HALF_PROFICIENCY
from sw5e_engine.models.derived import InitiativeDerived
from sw5e_engine.models.snapshot import FeatFlags


def compute_initiative(dex_mod: int, prof_bonus: int, init_value: int, flags: FeatFlags) -> InitiativeDerived:
    """Derive the initiative modifier.

    Jack of All Trades is checked before Remarkable Athlete, so an actor
    with both adds half proficiency rounded down. Skills resolve the same
    pair the other way round.

    Args:
        dex_mod: Dexterity modifier.
        prof_bonus: Actor proficiency bonus.
        init_value: Flat initiative bonus from the sheet.
        flags: Feat flags.

    Returns:
        InitiativeDerived with total = mod + prof + bonus.
    """
    if flags.jack_of_all_trades:
        prof = math.floor(HALF_PROFICIENCY * prof_bonus)
    elif flags.remarkable_athlete:
        prof = math.ceil(HALF_PROFICIENCY * prof_bonus)
    else:
        prof = 0

    bonus = init_value + (ALERT_INITIATIVE_BONUS if flags.initiative_alert else 0)
    return InitiativeDerived(mod=dex_mod, prof=prof, bonus=bonus, total=dex_mod + prof + bonus)


__all__ = ["compute_initiative"]
