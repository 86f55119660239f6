# tests/test_recurrence.py

import pytest

from worldcal.core.types import FixedRecurrence, IntervalRecurrence, OrdinalRecurrence
from worldcal.engines.recurrence import EventRecurrenceCalculator, Occurrence


@pytest.fixture
def calc(gregorian):
    return EventRecurrenceCalculator(gregorian)


def test_fixed_existing_day(calc):
    assert calc.calculate_occurrence(FixedRecurrence(7, 4), 2024) == Occurrence(7, 4)


@pytest.mark.parametrize("policy,expected", [
    ("clamp", Occurrence(2, 28)),
    ("lastDay", Occurrence(2, 28)),
    ("beforeDay", Occurrence(2, 28)),
    ("afterDay", Occurrence(3, 1)),
    ("skip", None),
    (None, None),
])
def test_fixed_missing_day_policies(calc, policy, expected):
    assert calc.calculate_occurrence(FixedRecurrence(2, 30, policy), 2023) == expected


def test_leap_day_only_in_leap_years(calc):
    rule = FixedRecurrence(2, 29)
    assert calc.calculate_occurrence(rule, 2024) == Occurrence(2, 29)
    assert calc.calculate_occurrence(rule, 2023) is None


def test_after_day_on_last_month_rolls_into_next_year(calc):
    occ = calc.calculate_occurrence(FixedRecurrence(12, 32, "afterDay"), 2024)
    assert occ == Occurrence(1, 1, year_offset=1)


def test_fixed_out_of_range_month(calc):
    assert calc.calculate_occurrence(FixedRecurrence(13, 1, "clamp"), 2024) is None
    assert calc.calculate_occurrence(FixedRecurrence(1, 0, "clamp"), 2024) is None


@pytest.mark.parametrize("year,day", [(2023, 23), (2024, 28), (2025, 27)])
def test_fourth_thursday_of_november(calc, year, day):
    assert calc.calculate_occurrence(OrdinalRecurrence(11, 4, 4), year) == Occurrence(11, day)


def test_last_weekday_of_month(calc):
    # last Monday of May 2024
    assert calc.calculate_occurrence(OrdinalRecurrence(5, -1, 1), 2024) == Occurrence(5, 27)


def test_ordinal_missing_fifth(calc):
    assert calc.calculate_occurrence(OrdinalRecurrence(11, 5, 4), 2024) is None
    # Friday, November 2024 has five (1, 8, 15, 22, 29)
    assert calc.calculate_occurrence(OrdinalRecurrence(11, 5, 5), 2024) == Occurrence(11, 29)


def test_ordinal_matches_engine_weekday(calc, gregorian):
    for weekday in range(7):
        occ = calc.calculate_occurrence(OrdinalRecurrence(3, 2, weekday), 2031)
        assert gregorian.calculate_weekday(2031, occ.month, occ.day) == weekday
        assert 8 <= occ.day <= 14


def test_interval_rule(calc):
    rule = IntervalRecurrence(interval_years=4, anchor_year=2000, month=7, day=1)
    assert calc.calculate_occurrence(rule, 2024) == Occurrence(7, 1)
    assert calc.calculate_occurrence(rule, 1996) == Occurrence(7, 1)
    assert calc.calculate_occurrence(rule, 2025) is None


def test_interval_rule_uses_day_policy(calc):
    rule = IntervalRecurrence(interval_years=2, anchor_year=2021, month=2, day=29, if_day_not_exists="clamp")
    assert calc.calculate_occurrence(rule, 2023) == Occurrence(2, 28)
    assert calc.calculate_occurrence(rule, 2024) is None
