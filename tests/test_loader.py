# tests/test_loader.py

import json
from fractions import Fraction

import pytest

from worldcal.core.errors import DefinitionError
from worldcal.core.loader import definition_from_dict, load_definition, validate_definition
from worldcal.core.types import FixedRecurrence, IntervalRecurrence, OrdinalRecurrence
from worldcal.engines.calendar import CalendarEngine

MINIMAL = {
    "id": "tiny",
    "months": [{"name": "Only", "days": 10}],
    "weekdays": [{"name": "Wd1"}, {"name": "Wd2"}],
}

FULL = {
    "id": "moonfall",
    "name": "Moonfall Reckoning",
    "months": [
        {"name": "Rime", "days": 30, "abbreviation": "Ri"},
        {"name": "Mud", "days": 28},
        {"name": "Sun", "days": 31, "description": "Long days"},
    ],
    "weekdays": [{"name": n} for n in ("One", "Two", "Three", "Four", "Five", "Six")],
    "leapYear": {"rule": "custom", "interval": 3, "offset": 1, "month": "Mud", "extraDays": 2},
    "intercalary": [
        {"name": "Thaw", "after": "Rime", "days": 2, "countsForWeekdays": False},
        {"name": "Gift", "after": "Sun", "leapYearOnly": True},
    ],
    "year": {"epoch": 100, "startDay": 2, "currentYear": 450, "prefix": "", "suffix": " MR"},
    "time": {"hoursInDay": 20, "minutesInHour": 100, "secondsInMinute": 100},
    "weeks": {"type": "month-based", "perMonth": 5, "daysPerWeek": 6, "remainderHandling": "extend-last",
              "namingPattern": "ordinal", "names": [{"name": "Firstweek"}]},
    "moons": [{
        "name": "Pale",
        "cycleLength": 29.5,
        "firstNewMoon": {"year": 100, "month": 1, "day": 3},
        "phases": [{"name": "Dark", "length": "59/4", "singleDay": False}, {"name": "Lit", "length": 14.75}],
    }],
    "events": [
        {"id": "thaw-feast", "name": "Thaw Feast", "recurrence": {"type": "fixed", "month": 2, "day": 30,
                                                                   "ifDayNotExists": "clamp"},
         "startTime": "08:00", "duration": "2d", "visibility": "gm-only", "startYear": 120,
         "exceptions": [{"year": 130, "type": "skip"}, {"year": 131, "type": "move", "moveToMonth": 3, "moveToDay": 1}]},
        {"id": "market", "recurrence": {"type": "ordinal", "month": 3, "occurrence": -1, "weekday": 5}},
        {"id": "jubilee", "recurrence": {"type": "interval", "intervalYears": 7, "anchorYear": 100, "month": 1, "day": 1}},
    ],
}


def test_minimal_definition_uses_defaults(caplog):
    with caplog.at_level("WARNING"):
        defn = definition_from_dict(MINIMAL)
    for section in ("year", "time", "leapYear", "intercalary"):
        assert f"'{section}'" in caplog.text
    assert defn.name == "tiny"
    assert defn.year.epoch == 0 and defn.year.start_day == 0
    assert defn.time.seconds_per_day == 86400
    assert defn.leap_year.rule == "none"
    assert defn.intercalary == ()
    assert defn.weeks is None


def test_full_definition():
    defn = definition_from_dict(FULL)
    assert [m.name for m in defn.months] == ["Rime", "Mud", "Sun"]
    assert defn.months[0].abbreviation == "Ri"
    assert defn.leap_year.day_adjustment == 2
    assert defn.intercalary[0].counts_for_weekdays is False
    assert defn.intercalary[1].leap_year_only is True
    assert defn.intercalary[1].days == 1
    assert defn.year.suffix == " MR"
    assert defn.time.seconds_per_day == 200000
    assert defn.weeks.per_month == 5 and defn.weeks.remainder_handling == "extend-last"
    assert defn.moons[0].cycle_length == Fraction(59, 2)
    assert defn.moons[0].phases[0].length == Fraction(59, 4)
    assert defn.moons[0].phases[1].length == Fraction(59, 4)
    assert validate_definition(defn) == []


def test_events_parsed():
    defn = definition_from_dict(FULL)
    feast, market, jubilee = defn.events
    assert feast.recurrence == FixedRecurrence(2, 30, "clamp")
    assert feast.visibility == "gm-only"
    assert feast.start_time == "08:00" and feast.duration == "2d"
    assert [x.type for x in feast.exceptions] == ["skip", "move"]
    assert feast.exceptions[1].move_to_month == 3
    assert market.recurrence == OrdinalRecurrence(3, -1, 5)
    assert market.name == "market"
    assert jubilee.recurrence == IntervalRecurrence(7, 100, 1, 1)


def test_loaded_calendar_runs():
    eng = CalendarEngine(definition_from_dict(FULL))
    assert eng.get_year_length(100) == 30 + 2 + 28 + 2 + 31 + 1
    assert eng.get_year_length(101) == 30 + 2 + 28 + 31
    d = eng.world_time_to_date(0)
    assert (d.year, d.month, d.day, d.weekday) == (100, 1, 1, 2)


@pytest.mark.parametrize("patch,msg", [
    ({"id": None}, "id"),
    ({"months": [{"name": "X", "days": 0}]}, "at least one day"),
    ({"months": [{"days": 3}]}, "name"),
    ({"months": [{"name": "X", "days": "3"}]}, "integer"),
    ({"weekdays": []}, "no weekdays"),
    ({"months": "Rime"}, "list"),
    ({"leapYear": {"rule": "lunar"}}, "lunar"),
    ({"weeks": {"remainderHandling": "spill"}}, "spill"),
    ({"events": [{"id": "e", "recurrence": {"type": "weekly", "month": 1, "day": 1}}]}, "weekly"),
    ({"events": [{"id": "e", "recurrence": {"month": 1, "day": 1, "ifDayNotExists": "later"}}]}, "later"),
    ({"events": [{"id": "e", "recurrence": {"type": "ordinal", "month": 1, "occurrence": 0, "weekday": 1}}]}, "occurrence"),
    ({"events": [{"id": "e", "recurrence": {"month": 1, "day": 1}, "exceptions": [{"year": 1, "type": "drop"}]}]}, "drop"),
    ({"intercalary": [{"name": "Both", "after": "Rime", "before": "Mud"}]}, "exactly one"),
    ({"intercalary": [{"name": "Neither"}]}, "exactly one"),
    ({"intercalary": [{"name": "Empty", "after": "Rime", "days": 0}]}, "at least one day"),
    ({"moons": [{"name": "M", "cycleLength": "abc", "firstNewMoon": {"year": 0, "month": 1, "day": 1},
                 "phases": [{"name": "p", "length": 1}]}]}, "abc"),
])
def test_structural_errors(patch, msg):
    data = {**FULL, **patch}
    with pytest.raises(DefinitionError, match=msg):
        definition_from_dict(data)


def test_not_a_mapping():
    with pytest.raises(DefinitionError):
        definition_from_dict(["not", "a", "calendar"])


def test_validation_reports_cross_reference_problems():
    data = {
        **MINIMAL,
        "weekdays": [{"name": "Same"}, {"name": "Same"}],
        "leapYear": {"rule": "custom", "interval": 2, "month": "Nope"},
        "intercalary": [{"name": "Lost", "after": "Elsewhere"}],
        "events": [
            {"id": "a", "recurrence": {"month": 4, "day": 1}},
            {"id": "a", "recurrence": {"month": 1, "day": 1}, "startYear": 10, "endYear": 5},
            {"id": "b", "recurrence": {"type": "ordinal", "month": 1, "occurrence": 1, "weekday": 7}},
        ],
    }
    problems = validate_definition(definition_from_dict(data))
    text = "\n".join(problems)
    assert "Weekday names must be unique" in text
    assert "'Nope'" in text
    assert "'Elsewhere'" in text
    assert "month 4" in text
    assert "startYear 10" in text
    assert "weekday 7" in text
    assert "defined 2 times" in text


def test_validation_flags_clamped_leap_month():
    data = {**MINIMAL, "leapYear": {"rule": "custom", "interval": 2, "month": "Only", "extraDays": -12}}
    assert any("clamped" in p for p in validate_definition(definition_from_dict(data)))


def test_load_definition_from_file(tmp_path, caplog):
    path = tmp_path / "cal.json"
    data = {**FULL, "intercalary": [{"name": "Lost", "after": "Elsewhere"}]}
    path.write_text(json.dumps(data), encoding="utf-8")
    with caplog.at_level("WARNING"):
        defn = load_definition(path)
    assert defn.id == "moonfall"
    assert "Elsewhere" in caplog.text


def test_load_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(DefinitionError, match="invalid JSON"):
        load_definition(path)


def test_intercalary_before_a_month():
    data = {**MINIMAL, "months": [{"name": "A", "days": 10}, {"name": "B", "days": 10}],
            "intercalary": [{"name": "Eve", "before": "A", "days": 2, "countsForWeekdays": False}]}
    defn = definition_from_dict(data)
    block = defn.intercalary[0]
    assert (block.before, block.after, block.anchor, block.days) == ("A", None, "A", 2)
    assert validate_definition(defn) == []

    eng = CalendarEngine(defn)
    d = eng.world_time_to_date(0)
    assert (d.month, d.day, d.intercalary) == (1, 1, "Eve")
    assert eng.get_year_length(0) == 22


def test_intercalary_before_unknown_month_is_reported():
    data = {**MINIMAL, "intercalary": [{"name": "Lost", "before": "Elsewhere"}]}
    assert any("'Elsewhere'" in p for p in validate_definition(definition_from_dict(data)))
