# tests/conftest.py

from typing import Sequence, Tuple

import pytest

from worldcal.core.definition import (
    CalendarDefinition,
    Intercalary,
    LeapYearRule,
    Month,
    WeekConfig,
    Weekday,
    YearConfig,
)
from worldcal.engines.calendar import CalendarEngine
from worldcal.engines.specs import ALL_SPECS

GREGORIAN_LENGTHS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


def build(
    months: Sequence[Tuple[str, int]],
    n_weekdays: int = 7,
    **kw,
) -> CalendarDefinition:
    return CalendarDefinition(
        id=kw.pop("id", "test"),
        months=tuple(Month(name, days) for name, days in months),
        weekdays=tuple(Weekday(f"D{i}") for i in range(n_weekdays)),
        **kw,
    )


def plain_months():
    return [(f"M{i}", d) for i, d in enumerate(GREGORIAN_LENGTHS, start=1)]


@pytest.fixture
def plain():
    """12 months, 365 days, 7-day week, epoch year 0 starting on weekday 0, no leap years."""
    return CalendarEngine(build(plain_months()))


@pytest.fixture
def eight_day():
    """8-day week; a one-day block outside the week follows the 33-day second month."""
    return CalendarEngine(build(
        [("A", 30), ("B", 33), ("C", 30)],
        n_weekdays=8,
        intercalary=(Intercalary(name="Gap", after="B", counts_for_weekdays=False),),
    ))


@pytest.fixture
def long_weeks():
    """Single 37-day month cut into four 9-day weeks, remainder folded into the last."""
    return CalendarEngine(build(
        [("Long", 37), ("Short", 20)],
        n_weekdays=9,
        weeks=WeekConfig(per_month=4, days_per_week=9, remainder_handling="extend-last"),
    ))


@pytest.fixture
def leapish():
    """Custom leap every 3rd year adding 2 days to month 2, with a leap-only block."""
    return CalendarEngine(build(
        [("One", 20), ("Two", 20), ("Three", 20)],
        n_weekdays=5,
        leap_year=LeapYearRule(rule="custom", interval=3, offset=1, month="Two", extra_days=2),
        intercalary=(
            Intercalary(name="Turn", after="Three", days=2),
            Intercalary(name="Bonus", after="One", leap_year_only=True, counts_for_weekdays=False),
        ),
        year=YearConfig(epoch=10, start_day=3),
    ))


@pytest.fixture
def gregorian():
    return CalendarEngine(ALL_SPECS["gregorian"])


@pytest.fixture
def harptos():
    return CalendarEngine(ALL_SPECS["harptos"])


@pytest.fixture
def novena():
    return CalendarEngine(ALL_SPECS["novena"])
