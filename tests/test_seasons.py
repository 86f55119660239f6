# tests/test_seasons.py

from fractions import Fraction

import pytest

from conftest import build
from worldcal.core.definition import Season, TimeConfig
from worldcal.core.errors import DefinitionError
from worldcal.core.loader import definition_from_dict, validate_definition
from worldcal.core.types import CalendarDate
from worldcal.engines.calendar import CalendarEngine
from worldcal.engines.seasons import hours_to_time, time_to_hours


def season_name(eng, y, m, d, **kw):
    s = eng.get_season(CalendarDate(y, m, d, **kw))
    return s.name if s is not None else None


# --- Lookup ---

def test_winter_wraps_across_new_year(gregorian):
    assert season_name(gregorian, 2023, 12, 1) == "Winter"
    assert season_name(gregorian, 2023, 12, 31) == "Winter"
    assert season_name(gregorian, 2024, 1, 1) == "Winter"
    assert season_name(gregorian, 2024, 2, 29) == "Winter"
    assert season_name(gregorian, 2024, 3, 1) == "Spring"
    assert season_name(gregorian, 2024, 11, 30) == "Autumn"
    assert season_name(gregorian, 2024, 6, 1) == "Summer"


def test_every_harptos_day_has_a_season(harptos):
    start = harptos.days_before_year(1372)
    for k in range(start, start + harptos.get_year_length(1372)):
        assert harptos.get_season(harptos.day_to_date(k)) is not None


def test_intercalary_days_take_the_surrounding_season(harptos):
    assert season_name(harptos, 1372, 1, 1, intercalary="Midwinter") == "Winter"
    assert season_name(harptos, 1372, 7, 1, intercalary="Shieldmeet") == "Summer"
    assert season_name(harptos, 1372, 3, 18) == "Winter"
    assert season_name(harptos, 1372, 3, 19) == "Spring"


def test_end_day_past_month_end_runs_on(caplog):
    with caplog.at_level("WARNING"):
        eng = CalendarEngine(build(
            [("A", 10), ("B", 10), ("C", 10), ("D", 10)],
            seasons=(
                Season(name="Long", start_month=1, end_month=2, end_day=15),
                Season(name="Rest", start_month=3, start_day=6, end_month=4),
            ),
        ))
    assert "runs into" in caplog.text
    assert season_name(eng, 0, 3, 5) == "Long"
    assert season_name(eng, 0, 3, 6) == "Rest"


def test_season_outside_the_months_is_ignored(caplog):
    with caplog.at_level("WARNING"):
        eng = CalendarEngine(build([("A", 10)], seasons=(Season(name="Nowhen", start_month=5),)))
    assert "Nowhen" in caplog.text
    assert eng.get_season(CalendarDate(0, 1, 1)) is None


# --- Sun times ---

def test_first_day_of_season_uses_its_times(gregorian):
    sun = gregorian.get_sun_times(CalendarDate(2023, 3, 1))
    assert sun.season.name == "Spring"
    assert sun.progress == 0
    assert (sun.sunrise, sun.sunset) == (Fraction(13, 2), Fraction(71, 4))


def test_interpolates_halfway_through_winter(gregorian):
    # Dec 1 to Mar 1 is 90 days in 2023; Jan 15 is day 45 of them
    sun = gregorian.get_sun_times(CalendarDate(2023, 1, 15))
    assert sun.progress == Fraction(1, 2)
    assert sun.sunrise == Fraction(27, 4)
    assert sun.sunset == Fraction(69, 4)


def test_progress_uses_the_year_length(gregorian):
    assert gregorian.get_sun_times(CalendarDate(2024, 2, 29)).progress == Fraction(90, 91)
    assert gregorian.get_sun_times(CalendarDate(2023, 5, 31)).progress == Fraction(91, 92)


def test_explicit_times(harptos):
    sun = harptos.get_sun_times(CalendarDate(1372, 6, 20))
    assert sun.season.name == "Summer"
    assert (sun.sunrise, sun.sunset) == (Fraction(19, 4), Fraction(21))


def test_defaults_without_seasons(plain):
    sun = plain.get_sun_times(CalendarDate(5, 6, 1))
    assert sun.season is None
    assert (sun.sunrise, sun.sunset) == (6, 18)

    short_days = CalendarEngine(build([("A", 10)], time=TimeConfig(hours_in_day=20)))
    sun = short_days.get_sun_times(CalendarDate(0, 1, 1))
    assert (sun.sunrise, sun.sunset) == (5, 15)


def test_unknown_season_name_without_times_splits_the_day():
    eng = CalendarEngine(build(
        [("A", 10), ("B", 10)],
        seasons=(
            Season(name="Wet", start_month=1),
            Season(name="Dry", start_month=2, sunrise="05:00", sunset="19:00"),
        ),
    ))
    sun = eng.get_sun_times(CalendarDate(0, 1, 1))
    assert (sun.sunrise, sun.sunset) == (6, 18)
    # halfway to Dry
    sun = eng.get_sun_times(CalendarDate(0, 1, 6))
    assert (sun.sunrise, sun.sunset) == (Fraction(11, 2), Fraction(37, 2))


def test_time_strings():
    assert time_to_hours("06:30") == Fraction(13, 2)
    assert time_to_hours("01:50", 100) == Fraction(3, 2)
    assert hours_to_time(Fraction(13, 2)) == "06:30"
    assert hours_to_time(6 + Fraction(119, 120)) == "07:00"
    assert hours_to_time(Fraction(3, 2), 100) == "01:50"


# --- Definitions ---

def test_bad_sun_time_rejected():
    with pytest.raises(DefinitionError, match="HH:MM"):
        Season(name="Odd", start_month=1, sunrise="7am", sunset="19:00")


def test_seasons_from_dict():
    defn = definition_from_dict({
        "id": "isle",
        "months": [{"name": "A", "days": 10}, {"name": "B", "days": 10}],
        "weekdays": [{"name": "W"}],
        "seasons": [
            {"name": "Wet", "startMonth": 1, "endMonth": 1, "endDay": 12, "sunrise": "06:10", "sunset": "18:20"},
            {"name": "Dry", "startMonth": 2, "startDay": 3, "endMonth": 3},
            {"name": "Half", "startMonth": 1, "sunrise": "06:00"},
        ],
    })
    wet = defn.seasons[0]
    assert (wet.start_month, wet.start_day, wet.end_month, wet.end_day) == (1, None, 1, 12)
    problems = "\n".join(validate_definition(defn))
    assert "endMonth 3" in problems
    assert "together" in problems
