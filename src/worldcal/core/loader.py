"""
worldcal.core.loader
--------------------
Builds a CalendarDefinition from a JSON document (camelCase field names) and
reports cross-reference problems the dataclasses cannot see on their own.
"""

from __future__ import annotations

import json
import logging
from fractions import Fraction
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from .definition import (
    CalendarDefinition,
    Intercalary,
    LeapYearRule,
    Month,
    Moon,
    MoonPhase,
    Season,
    TimeConfig,
    WeekConfig,
    Weekday,
    WeekName,
    YearConfig,
)
from .errors import DefinitionError
from .types import (
    EventDefinition,
    EventException,
    FixedRecurrence,
    IntervalRecurrence,
    OrdinalRecurrence,
    RecurrenceRule,
)

logger = logging.getLogger(__name__)

_DAY_POLICIES = ("afterDay", "clamp", "lastDay", "beforeDay", "skip")


# ---------------------------------------------------------
# Field helpers
# ---------------------------------------------------------

def _req(d: Mapping[str, Any], key: str, where: str) -> Any:
    if key not in d or d[key] is None:
        raise DefinitionError(f"{where}: missing required field '{key}'")
    return d[key]


def _int(value: Any, where: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise DefinitionError(f"{where}: expected an integer, got {value!r}")
    return value


def _opt_int(d: Mapping[str, Any], key: str, where: str) -> Optional[int]:
    v = d.get(key)
    return None if v is None else _int(v, f"{where}.{key}")


def _list(d: Mapping[str, Any], key: str, where: str) -> Sequence[Any]:
    v = d.get(key)
    if v is None:
        return []
    if not isinstance(v, list):
        raise DefinitionError(f"{where}.{key}: expected a list")
    return v


def _fraction(value: Any, where: str) -> Fraction:
    """Exact value of a JSON number or "p/q" string; floats go through their shortest repr."""
    if isinstance(value, bool):
        raise DefinitionError(f"{where}: expected a number, got {value!r}")
    try:
        return Fraction(str(value))
    except (ValueError, ZeroDivisionError) as e:
        raise DefinitionError(f"{where}: not a number: {value!r}") from e


# ---------------------------------------------------------
# Sections
# ---------------------------------------------------------

def _months(data: Mapping[str, Any]) -> tuple:
    out = []
    for i, m in enumerate(_list(data, "months", "calendar")):
        where = f"months[{i}]"
        out.append(Month(
            name=_req(m, "name", where),
            days=_int(_req(m, "days", where), f"{where}.days"),
            abbreviation=m.get("abbreviation"),
            description=m.get("description"),
        ))
    return tuple(out)


def _weekdays(data: Mapping[str, Any]) -> tuple:
    return tuple(
        Weekday(name=_req(w, "name", f"weekdays[{i}]"), abbreviation=w.get("abbreviation"))
        for i, w in enumerate(_list(data, "weekdays", "calendar"))
    )


def _leap_year(d: Mapping[str, Any]) -> LeapYearRule:
    return LeapYearRule(
        rule=d.get("rule", "none"),
        interval=_opt_int(d, "interval", "leapYear"),
        offset=_opt_int(d, "offset", "leapYear") or 0,
        month=d.get("month"),
        extra_days=_opt_int(d, "extraDays", "leapYear"),
    )


def _intercalary(items: Sequence[Mapping[str, Any]]) -> tuple:
    out = []
    for i, b in enumerate(items):
        where = f"intercalary[{i}]"
        after, before = b.get("after"), b.get("before")
        if (after is None) == (before is None):
            raise DefinitionError(f"{where}: exactly one of 'after' or 'before' is required")
        days = _opt_int(b, "days", where)
        out.append(Intercalary(
            name=_req(b, "name", where),
            after=after,
            before=before,
            days=1 if days is None else days,
            leap_year_only=bool(b.get("leapYearOnly", False)),
            counts_for_weekdays=bool(b.get("countsForWeekdays", True)),
            description=b.get("description"),
        ))
    return tuple(out)


def _year(d: Mapping[str, Any]) -> YearConfig:
    return YearConfig(
        epoch=_opt_int(d, "epoch", "year") or 0,
        start_day=_opt_int(d, "startDay", "year") or 0,
        current_year=_opt_int(d, "currentYear", "year"),
        prefix=d.get("prefix", ""),
        suffix=d.get("suffix", ""),
    )


def _time(d: Mapping[str, Any]) -> TimeConfig:
    return TimeConfig(
        hours_in_day=_opt_int(d, "hoursInDay", "time") or 24,
        minutes_in_hour=_opt_int(d, "minutesInHour", "time") or 60,
        seconds_in_minute=_opt_int(d, "secondsInMinute", "time") or 60,
    )


def _weeks(d: Mapping[str, Any]) -> WeekConfig:
    names = tuple(
        WeekName(name=_req(w, "name", f"weeks.names[{i}]"), abbreviation=w.get("abbreviation"),
                 description=w.get("description"))
        for i, w in enumerate(_list(d, "names", "weeks"))
    )
    return WeekConfig(
        type=d.get("type", "month-based"),
        per_month=_opt_int(d, "perMonth", "weeks"),
        days_per_week=_opt_int(d, "daysPerWeek", "weeks"),
        remainder_handling=d.get("remainderHandling", "partial-last"),
        names=names,
        naming_pattern=d.get("namingPattern", "numeric"),
    )


def _moon(m: Mapping[str, Any], where: str) -> Moon:
    first = _req(m, "firstNewMoon", where)
    phases = tuple(
        MoonPhase(
            name=_req(p, "name", f"{where}.phases[{i}]"),
            length=_fraction(_req(p, "length", f"{where}.phases[{i}]"), f"{where}.phases[{i}].length"),
            single_day=bool(p.get("singleDay", False)),
            icon=p.get("icon", ""),
        )
        for i, p in enumerate(_list(m, "phases", where))
    )
    return Moon(
        name=_req(m, "name", where),
        cycle_length=_fraction(_req(m, "cycleLength", where), f"{where}.cycleLength"),
        first_new_moon=(
            _int(_req(first, "year", f"{where}.firstNewMoon"), f"{where}.firstNewMoon.year"),
            _int(_req(first, "month", f"{where}.firstNewMoon"), f"{where}.firstNewMoon.month"),
            _int(_req(first, "day", f"{where}.firstNewMoon"), f"{where}.firstNewMoon.day"),
        ),
        phases=phases,
    )


def _season(s: Mapping[str, Any], where: str) -> Season:
    return Season(
        name=_req(s, "name", where),
        start_month=_int(_req(s, "startMonth", where), f"{where}.startMonth"),
        start_day=_opt_int(s, "startDay", where),
        end_month=_opt_int(s, "endMonth", where),
        end_day=_opt_int(s, "endDay", where),
        sunrise=s.get("sunrise"),
        sunset=s.get("sunset"),
        description=s.get("description"),
        icon=s.get("icon"),
        color=s.get("color"),
    )


def recurrence_from_dict(r: Mapping[str, Any], where: str = "recurrence") -> RecurrenceRule:
    kind = r.get("type", "fixed")
    policy = r.get("ifDayNotExists")
    if policy is not None and policy not in _DAY_POLICIES:
        raise DefinitionError(f"{where}.ifDayNotExists: unknown policy {policy!r}")

    if kind == "fixed":
        return FixedRecurrence(
            month=_int(_req(r, "month", where), f"{where}.month"),
            day=_int(_req(r, "day", where), f"{where}.day"),
            if_day_not_exists=policy,
        )
    if kind == "ordinal":
        occurrence = _int(_req(r, "occurrence", where), f"{where}.occurrence")
        if occurrence == 0 or occurrence < -1:
            raise DefinitionError(f"{where}.occurrence: expected 1, 2, ... or -1 (last), got {occurrence}")
        return OrdinalRecurrence(
            month=_int(_req(r, "month", where), f"{where}.month"),
            occurrence=occurrence,
            weekday=_int(_req(r, "weekday", where), f"{where}.weekday"),
        )
    if kind == "interval":
        interval = _int(_req(r, "intervalYears", where), f"{where}.intervalYears")
        if interval <= 0:
            raise DefinitionError(f"{where}.intervalYears must be positive")
        return IntervalRecurrence(
            interval_years=interval,
            anchor_year=_int(_req(r, "anchorYear", where), f"{where}.anchorYear"),
            month=_int(_req(r, "month", where), f"{where}.month"),
            day=_int(_req(r, "day", where), f"{where}.day"),
            if_day_not_exists=policy,
        )
    raise DefinitionError(f"{where}.type: unknown recurrence type {kind!r}")


def event_from_dict(e: Mapping[str, Any], where: str = "event") -> EventDefinition:
    visibility = e.get("visibility", "player-visible")
    if visibility not in ("gm-only", "player-visible"):
        raise DefinitionError(f"{where}.visibility: unknown value {visibility!r}")

    exceptions = []
    for i, x in enumerate(_list(e, "exceptions", where)):
        xw = f"{where}.exceptions[{i}]"
        kind = _req(x, "type", xw)
        if kind not in ("skip", "move"):
            raise DefinitionError(f"{xw}.type: expected 'skip' or 'move', got {kind!r}")
        exceptions.append(EventException(
            year=_int(_req(x, "year", xw), f"{xw}.year"),
            type=kind,
            move_to_month=_opt_int(x, "moveToMonth", xw),
            move_to_day=_opt_int(x, "moveToDay", xw),
        ))

    event_id = _req(e, "id", where)
    return EventDefinition(
        id=event_id,
        name=e.get("name", event_id),
        description=e.get("description"),
        recurrence=recurrence_from_dict(_req(e, "recurrence", where), f"{where}.recurrence"),
        start_time=e.get("startTime"),
        duration=e.get("duration"),
        visibility=visibility,
        start_year=_opt_int(e, "startYear", where),
        end_year=_opt_int(e, "endYear", where),
        exceptions=tuple(exceptions),
    )


# ---------------------------------------------------------
# Public entry points
# ---------------------------------------------------------

def definition_from_dict(data: Mapping[str, Any]) -> CalendarDefinition:
    """Build a definition from a parsed JSON mapping, applying documented defaults."""
    if not isinstance(data, Mapping):
        raise DefinitionError("Calendar must be a JSON object")
    cal_id = _req(data, "id", "calendar")

    def section(key: str, default_note: str) -> Optional[Mapping[str, Any]]:
        if key not in data or data[key] is None:
            logger.warning("Calendar %s: no '%s' section, using %s", cal_id, key, default_note)
            return None
        return data[key]

    year = section("year", "epoch 0 starting on weekday 0")
    time = section("time", "24 hours of 60 minutes of 60 seconds")
    leap = section("leapYear", "no leap years")
    if "intercalary" not in data:
        logger.warning("Calendar %s: no 'intercalary' section, using no intercalary days", cal_id)

    return CalendarDefinition(
        id=cal_id,
        name=data.get("name", cal_id),
        months=_months(data),
        weekdays=_weekdays(data),
        leap_year=_leap_year(leap) if leap is not None else LeapYearRule(),
        intercalary=_intercalary(_list(data, "intercalary", "calendar")),
        year=_year(year) if year is not None else YearConfig(),
        time=_time(time) if time is not None else TimeConfig(),
        weeks=_weeks(data["weeks"]) if data.get("weeks") is not None else None,
        moons=tuple(_moon(m, f"moons[{i}]") for i, m in enumerate(_list(data, "moons", "calendar"))),
        seasons=tuple(_season(s, f"seasons[{i}]") for i, s in enumerate(_list(data, "seasons", "calendar"))),
        events=tuple(event_from_dict(e, f"events[{i}]") for i, e in enumerate(_list(data, "events", "calendar"))),
    )


def load_definition(path: Union[str, Path]) -> CalendarDefinition:
    """Read a calendar JSON file from disk."""
    p = Path(path)
    try:
        with p.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except json.JSONDecodeError as e:
        raise DefinitionError(f"{p}: invalid JSON ({e})") from e
    defn = definition_from_dict(data)
    for problem in validate_definition(defn):
        logger.warning("Calendar %s: %s", defn.id, problem)
    return defn


def validate_definition(defn: CalendarDefinition) -> List[str]:
    """
    Cross-reference problems in a structurally valid definition.
    An empty list means the definition is consistent. None of these stop an
    engine from being built; they describe data the engine will ignore or clamp.
    """
    problems: List[str] = []
    n_months = len(defn.months)

    weekday_names = [w.name for w in defn.weekdays]
    if len(weekday_names) != len(set(weekday_names)):
        problems.append("Weekday names must be unique")

    if not 0 <= defn.year.start_day < defn.week_length:
        problems.append(f"year.startDay {defn.year.start_day} is outside 0..{defn.week_length - 1}")

    rule = defn.leap_year
    if rule.rule == "custom" and not rule.interval:
        problems.append("Custom leap year rule has no interval; no year will be a leap year")
    if rule.month is not None:
        idx = defn.month_index(rule.month)
        if idx is None:
            problems.append(f"Leap year month '{rule.month}' does not exist in months list")
        elif defn.months[idx - 1].days + rule.day_adjustment < 1:
            problems.append(
                f"Leap year adjustment of {rule.day_adjustment} days would reduce '{rule.month}' "
                f"below 1 day (clamped to 1)"
            )

    for i, block in enumerate(defn.intercalary):
        if defn.month_index(block.anchor) is None:
            problems.append(f"Intercalary day {i + 1} references non-existent month '{block.anchor}'")

    if defn.weeks is not None:
        week_names = [w.name for w in defn.weeks.names]
        if len(week_names) != len(set(week_names)):
            problems.append("Week names must be unique")

    for moon in defn.moons:
        total = sum((p.length for p in moon.phases), Fraction(0))
        if total != moon.cycle_length:
            problems.append(f"Moon '{moon.name}': phase lengths sum to {total}, cycle is {moon.cycle_length}")
        if not 1 <= moon.first_new_moon[1] <= n_months:
            problems.append(f"Moon '{moon.name}': firstNewMoon month {moon.first_new_moon[1]} does not exist")

    for season in defn.seasons:
        for label, month in (("startMonth", season.start_month), ("endMonth", season.last_month)):
            if not 1 <= month <= n_months:
                problems.append(f"Season '{season.name}': {label} {month} is outside 1..{n_months}")
        if (season.sunrise is None) != (season.sunset is None):
            problems.append(f"Season '{season.name}': sunrise and sunset must be given together")

    seen: Dict[str, int] = {}
    for ev in defn.events:
        seen[ev.id] = seen.get(ev.id, 0) + 1
        month = ev.recurrence.month
        if not 1 <= month <= n_months:
            problems.append(f"Event '{ev.id}': month {month} is outside 1..{n_months}")
        if isinstance(ev.recurrence, OrdinalRecurrence) and not 0 <= ev.recurrence.weekday < defn.week_length:
            problems.append(f"Event '{ev.id}': weekday {ev.recurrence.weekday} does not exist")
        if ev.start_year is not None and ev.end_year is not None and ev.start_year > ev.end_year:
            problems.append(f"Event '{ev.id}': startYear {ev.start_year} is after endYear {ev.end_year}")
    for event_id, count in seen.items():
        if count > 1:
            problems.append(f"Event id '{event_id}' is defined {count} times")

    return problems
