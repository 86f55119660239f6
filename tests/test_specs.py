# tests/test_specs.py

import random
from datetime import datetime, timedelta

import pytest

from worldcal.core.loader import validate_definition
from worldcal.core.types import CalendarDate
from worldcal.engines.specs import ALL_SPECS

EPOCH = datetime(1970, 1, 1)


def test_gregorian_agrees_with_datetime(gregorian):
    rng = random.Random(2024)
    for _ in range(3000):
        t = rng.randint(-60_000_000_000, 250_000_000_000)
        ref = EPOCH + timedelta(seconds=t)
        d = gregorian.world_time_to_date(t)
        assert (d.year, d.month, d.day) == (ref.year, ref.month, ref.day)
        assert (d.time.hour, d.time.minute, d.time.second) == (ref.hour, ref.minute, ref.second)
        # datetime counts Monday=0; the built-in starts the week on Sunday
        assert d.weekday == (ref.weekday() + 1) % 7


@pytest.mark.parametrize("y,m,d", [(1970, 1, 1), (1969, 12, 31), (2000, 2, 29), (1900, 3, 1), (1, 1, 1), (9999, 12, 31)])
def test_gregorian_known_dates(gregorian, y, m, d):
    wt = gregorian.date_to_world_time(CalendarDate(y, m, d))
    assert wt == int((datetime(y, m, d) - EPOCH).total_seconds())


@pytest.mark.parametrize("year,length", [(1900, 365), (2000, 366), (2023, 365), (2024, 366)])
def test_gregorian_year_lengths(gregorian, year, length):
    assert gregorian.get_year_length(year) == length


def test_harptos_structure(harptos):
    assert harptos.get_year_length(1372) == 366
    assert harptos.get_year_length(1373) == 365
    assert [b.name for b in harptos.get_intercalary_days_after_month(1372, 7)] == ["Midsummer", "Shieldmeet"]
    assert [b.name for b in harptos.get_intercalary_days_after_month(1373, 7)] == ["Midsummer"]


def test_harptos_months_start_on_first_day(harptos):
    rng = random.Random(5)
    for _ in range(50):
        year = rng.randint(-500, 2000)
        for month in range(1, 13):
            assert harptos.calculate_weekday(year, month, 1) == 0


def test_harptos_festival_carries_next_weekday(harptos):
    wt = harptos.date_to_world_time(CalendarDate(1372, 1, 1, intercalary="Midwinter"))
    d = harptos.world_time_to_date(wt)
    assert d.intercalary == "Midwinter"
    assert d.weekday == harptos.calculate_weekday(1372, 2, 1)


def test_novena_structure(novena):
    assert novena.is_leap_year(812)
    assert novena.get_year_length(812) == 337
    assert novena.get_year_length(813) == 336
    assert novena.get_week_of_month(CalendarDate(812, 1, 37)) == 4


def test_novena_vigil_rolls_over(novena):
    from worldcal.engines.events import EventsManager

    mgr = EventsManager(novena)
    # Deepnight has a 38th day only in leap years
    assert [r.day for r in mgr.get_events_for_date(812, 9, 38)] == [38]
    found = mgr.get_events_for_date(814, 1, 1)
    assert [(r.year, r.month, r.day) for r in found] == [(814, 1, 1)]


@pytest.mark.parametrize("name", sorted(ALL_SPECS))
def test_builtins_are_consistent(name):
    assert validate_definition(ALL_SPECS[name]) == []
