"""
worldcal.engines.moons
----------------------
Moon phase lookup with exact rational cycle lengths.
"""

from __future__ import annotations

import math
from fractions import Fraction

from ..core.definition import Moon
from ..core.types import MoonPhaseInfo


def moon_phase(moon: Moon, days_since_new_moon: int) -> MoonPhaseInfo:
    """
    Phase of `moon` a whole number of days after (or before, if negative)
    its reference new moon.
    """
    cycle = Fraction(moon.cycle_length)
    position = Fraction(days_since_new_moon) % cycle

    # Past the last boundary (phase lengths summing short of the cycle) stays in the last phase.
    starts = []
    acc = Fraction(0)
    for phase in moon.phases:
        starts.append(acc)
        acc += Fraction(phase.length)

    index = len(moon.phases) - 1
    for i, phase in enumerate(moon.phases):
        if position < starts[i] + Fraction(phase.length):
            index = i
            break

    phase = moon.phases[index]
    phase_start = starts[index]
    length = Fraction(phase.length)
    in_phase = min(max(position - phase_start, Fraction(0)), length)
    until_next = length - in_phase

    return MoonPhaseInfo(
        moon=moon,
        phase=phase,
        phase_index=index,
        day_in_phase=math.floor(in_phase),
        day_in_phase_exact=in_phase,
        days_until_next=math.ceil(until_next),
        days_until_next_exact=until_next,
        phase_progress=(in_phase / length) if length > 0 else Fraction(0),
    )
