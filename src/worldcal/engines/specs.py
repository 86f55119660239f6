from __future__ import annotations

from fractions import Fraction
from typing import Dict, Sequence, Tuple

from ..core.definition import (
    CalendarDefinition,
    Intercalary,
    LeapYearRule,
    Month,
    Moon,
    MoonPhase,
    Season,
    WeekConfig,
    Weekday,
    YearConfig,
)
from ..core.types import EventDefinition, FixedRecurrence, IntervalRecurrence, OrdinalRecurrence


# ============================================================
# SHARED CONSTANTS
# ============================================================

PHASE_NAMES = (
    "New Moon",
    "Waxing Crescent",
    "First Quarter",
    "Waxing Gibbous",
    "Full Moon",
    "Waning Gibbous",
    "Last Quarter",
    "Waning Crescent",
)

# Mean synodic month in days.
SYNODIC_MONTH = Fraction(2953059, 100000)


# ============================================================
# HELPER FUNCTIONS
# ============================================================

def months(spec: Sequence[Tuple[str, int]]) -> Tuple[Month, ...]:
    return tuple(Month(name=name, days=days, abbreviation=name[:3]) for name, days in spec)


def weekdays(names: Sequence[str]) -> Tuple[Weekday, ...]:
    return tuple(Weekday(name=n, abbreviation=n[:2]) for n in names)


def eight_phases(cycle: Fraction, new_full_days: int = 1) -> Tuple[MoonPhase, ...]:
    """
    Eight phases over `cycle` days; new and full moon last `new_full_days`
    each and the remaining six share the rest evenly.
    """
    rest = (Fraction(cycle) - 2 * new_full_days) / 6
    out = []
    for i, name in enumerate(PHASE_NAMES):
        single = i in (0, 4)
        out.append(MoonPhase(name=name, length=Fraction(new_full_days) if single else rest, single_day=single))
    return tuple(out)


# ============================================================
# GREGORIAN
# ============================================================

# Meteorological seasons; sun times come from the named defaults.
GREGORIAN_SEASONS = (
    Season(name="Winter", start_month=12, end_month=2),
    Season(name="Spring", start_month=3, end_month=5),
    Season(name="Summer", start_month=6, end_month=8),
    Season(name="Autumn", start_month=9, end_month=11),
)

GREGORIAN = CalendarDefinition(
    id="gregorian",
    name="Gregorian Calendar",
    months=months([
        ("January", 31), ("February", 28), ("March", 31), ("April", 30),
        ("May", 31), ("June", 30), ("July", 31), ("August", 31),
        ("September", 30), ("October", 31), ("November", 30), ("December", 31),
    ]),
    weekdays=weekdays(["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]),
    leap_year=LeapYearRule(rule="gregorian", month="February", extra_days=1),
    # 1970-01-01 was a Thursday.
    year=YearConfig(epoch=1970, start_day=4, current_year=2024, suffix=" CE"),
    weeks=WeekConfig(naming_pattern="ordinal"),
    seasons=GREGORIAN_SEASONS,
    moons=(
        Moon(
            name="Luna",
            cycle_length=SYNODIC_MONTH,
            first_new_moon=(2000, 1, 6),
            phases=eight_phases(SYNODIC_MONTH),
        ),
    ),
    events=(
        EventDefinition(id="new-year", name="New Year's Day", recurrence=FixedRecurrence(month=1, day=1)),
        EventDefinition(
            id="leap-day",
            name="Leap Day",
            recurrence=FixedRecurrence(month=2, day=29, if_day_not_exists="skip"),
        ),
        EventDefinition(
            id="thanksgiving",
            name="Thanksgiving (US)",
            recurrence=OrdinalRecurrence(month=11, occurrence=4, weekday=4),
        ),
    ),
)


# ============================================================
# HARPTOS (Forgotten Realms)
# ============================================================

HARPTOS_MONTHS = (
    "Hammer", "Alturiak", "Ches", "Tarsakh", "Mirtul", "Kythorn",
    "Flamerule", "Eleasis", "Eleint", "Marpenoth", "Uktar", "Nightal",
)

SELUNE_CYCLE = Fraction("30.4375")

# Solstices and equinoxes fall on Nightal 20, Ches 19, Kythorn 20 and Eleint 21.
HARPTOS_SEASONS = (
    Season(name="Winter", start_month=12, start_day=20, end_month=3, end_day=18, sunrise="07:30", sunset="16:30"),
    Season(name="Spring", start_month=3, start_day=19, end_month=6, end_day=19, sunrise="06:00", sunset="18:15"),
    Season(name="Summer", start_month=6, start_day=20, end_month=9, end_day=20, sunrise="04:45", sunset="21:00"),
    Season(name="Autumn", start_month=9, start_day=21, end_month=12, end_day=19, sunrise="06:15", sunset="18:00"),
)

HARPTOS = CalendarDefinition(
    id="harptos",
    name="Calendar of Harptos",
    months=months([(n, 30) for n in HARPTOS_MONTHS]),
    weekdays=weekdays([
        "First-day", "Second-day", "Third-day", "Fourth-day", "Fifth-day",
        "Sixth-day", "Seventh-day", "Eighth-day", "Ninth-day", "Tenth-day",
    ]),
    leap_year=LeapYearRule(rule="custom", interval=4, offset=0),
    intercalary=(
        Intercalary(name="Midwinter", after="Hammer", counts_for_weekdays=False),
        Intercalary(name="Greengrass", after="Tarsakh", counts_for_weekdays=False),
        Intercalary(name="Midsummer", after="Flamerule", counts_for_weekdays=False),
        Intercalary(name="Shieldmeet", after="Flamerule", leap_year_only=True, counts_for_weekdays=False),
        Intercalary(name="Highharvestide", after="Eleint", counts_for_weekdays=False),
        Intercalary(name="Feast of the Moon", after="Uktar", counts_for_weekdays=False),
    ),
    year=YearConfig(epoch=0, start_day=0, current_year=1492, suffix=" DR"),
    weeks=WeekConfig(per_month=3, days_per_week=10, naming_pattern="ordinal"),
    seasons=HARPTOS_SEASONS,
    moons=(
        Moon(
            name="Selune",
            cycle_length=SELUNE_CYCLE,
            first_new_moon=(1372, 1, 1),
            phases=tuple(MoonPhase(name=n, length=SELUNE_CYCLE / 8) for n in PHASE_NAMES),
        ),
    ),
    events=(
        EventDefinition(
            id="founding-day",
            name="Founding of Waterdeep",
            recurrence=FixedRecurrence(month=3, day=15),
            start_year=1032,
        ),
        EventDefinition(
            id="council-of-lords",
            name="Council of Lords",
            recurrence=OrdinalRecurrence(month=6, occurrence=-1, weekday=9),
            duration="3d",
            visibility="gm-only",
        ),
        EventDefinition(
            id="great-fair",
            name="Great Fair",
            recurrence=IntervalRecurrence(interval_years=4, anchor_year=1372, month=8, day=25),
            duration="1w",
        ),
    ),
)


# ============================================================
# NOVENA (a nine-month demonstration calendar)
# ============================================================

NOVENA = CalendarDefinition(
    id="novena",
    name="Novena Reckoning",
    months=months([
        ("Frostwane", 37), ("Thawing", 37), ("Seedfall", 37), ("Bloomtide", 37), ("Highsun", 37),
        ("Goldreap", 37), ("Emberfall", 37), ("Dusking", 37), ("Deepnight", 37),
    ]),
    weekdays=weekdays(["Ash", "Birch", "Cedar", "Daur", "Elm", "Fir", "Gorse", "Hazel"]),
    leap_year=LeapYearRule(rule="custom", interval=5, offset=2, month="Deepnight", extra_days=1),
    intercalary=(
        Intercalary(name="Lantern Night", after="Highsun", counts_for_weekdays=False),
        Intercalary(name="Year's Turn", after="Deepnight", days=2),
    ),
    year=YearConfig(epoch=1, start_day=0, current_year=812, prefix="AN "),
    weeks=WeekConfig(per_month=4, days_per_week=9, remainder_handling="extend-last", naming_pattern="numeric"),
    events=(
        EventDefinition(
            id="deepnight-vigil",
            name="Deepnight Vigil",
            recurrence=FixedRecurrence(month=9, day=38, if_day_not_exists="afterDay"),
            start_time="18:00",
            duration="12h",
        ),
    ),
)


ALL_SPECS: Dict[str, CalendarDefinition] = {
    GREGORIAN.id: GREGORIAN,
    HARPTOS.id: HARPTOS,
    NOVENA.id: NOVENA,
}
