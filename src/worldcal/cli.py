from __future__ import annotations

import argparse
import importlib
import inspect
import json
import logging
import re
import sys
from typing import Optional, Tuple

from .core.errors import InvalidDateError
from .core.types import CalendarDate, OccurrenceResult, TimeOfDay
from .engines.seasons import hours_to_time


_YMD_RE = re.compile(r"^(-?\d+)-(\d+)-(\d+)$")
_HMS_RE = re.compile(r"^(\d+)(?::(\d+)(?::(\d+))?)?$")


def _parse_ymd(s: str) -> Tuple[int, int, int]:
    m = _YMD_RE.match(s)
    if not m:
        raise SystemExit(f"Expected Y-M-D, got {s!r}")
    return int(m.group(1)), int(m.group(2)), int(m.group(3))


def _parse_hms(s: str) -> TimeOfDay:
    m = _HMS_RE.match(s)
    if not m:
        raise SystemExit(f"Expected HH[:MM[:SS]], got {s!r}")
    return TimeOfDay(int(m.group(1)), int(m.group(2) or 0), int(m.group(3) or 0))


def _run_module_main(modpath: str, argv: list[str]) -> int:
    """
    Import module and run its main().

    Supports:
      - main(argv: list[str] | None = None) -> int|None
      - main() -> int|None
    """
    mod = importlib.import_module(modpath)
    if not hasattr(mod, "main"):
        raise SystemExit(f"Module {modpath} has no main()")
    fn = getattr(mod, "main")

    sig = inspect.signature(fn)
    if len(sig.parameters) == 0:
        rv = fn()
    else:
        rv = fn(argv)
    return int(rv or 0)


def _add_calendar_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--calendar", default="gregorian", help="registered calendar name")
    p.add_argument("--file", default=None, help="calendar JSON file (overrides --calendar)")
    p.add_argument("--epoch-override", type=int, default=None, help="seconds added to world time before conversion")


def _engine(args: argparse.Namespace):
    import worldcal

    if args.file:
        return worldcal.load_calendar(args.file)
    return worldcal.get_engine(args.calendar)


def format_date(eng, date: CalendarDate) -> str:
    d = eng.definition
    wd = d.weekdays[date.weekday].name
    year = f"{d.year.prefix}{date.year}{d.year.suffix}"
    if date.intercalary is not None:
        seg = eng.layout(date.year).intercalary_segment(date.month, date.intercalary)
        side = "before" if seg is not None and seg.intercalary.before is not None else "after"
        label = f"{date.intercalary} (day {date.day}), {side} {d.months[date.month - 1].name}"
    else:
        label = f"{date.day} {d.months[date.month - 1].name}"
    out = f"{wd}, {label}, {year}"
    if date.time is not None:
        t = date.time
        out += f" {t.hour:02d}:{t.minute:02d}:{t.second:02d}"
    return out


def _format_occurrence(eng, occ: OccurrenceResult) -> str:
    ev = occ.event
    month = eng.definition.months[occ.month - 1].name
    extra = f" [{ev.duration}]" if ev.duration else ""
    return f"{occ.year}-{occ.month}-{occ.day} ({month})  {ev.id}: {ev.name or ev.id}{extra}"


def cmd_date(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="worldcal date", description="World time -> calendar date")
    p.add_argument("world_time", type=int)
    _add_calendar_args(p)
    p.add_argument("--debug", action="store_true", help="print the conversion trace")
    p.add_argument("--json", action="store_true")
    args = p.parse_args(argv)

    eng = _engine(args)
    if args.debug:
        print(json.dumps(eng.explain(args.world_time, args.epoch_override), indent=2))
        return 0

    date = eng.world_time_to_date(args.world_time, args.epoch_override)
    if args.json:
        print(json.dumps(date.to_dict()))
        return 0

    print(format_date(eng, date))
    week = eng.get_week_info(date)
    if week is not None:
        print(f"  week: {week.name}")
    sun = eng.get_sun_times(date)
    mih = eng.definition.time.minutes_in_hour
    rise, set_ = hours_to_time(sun.sunrise, mih), hours_to_time(sun.sunset, mih)
    if sun.season is not None:
        print(f"  season: {sun.season.name} (sunrise {rise}, sunset {set_})")
    else:
        print(f"  sunrise {rise}, sunset {set_}")
    for info in eng.get_moon_phases(date):
        print(f"  {info.moon.name}: {info.phase.name} (day {info.day_in_phase + 1})")
    return 0


def cmd_worldtime(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="worldcal worldtime", description="Calendar date -> world time")
    p.add_argument("date", help="Y-M-D (year may be negative)")
    p.add_argument("--time", default=None, help="HH[:MM[:SS]]")
    p.add_argument("--intercalary", default=None, help="intercalary block name (day counts inside the block)")
    _add_calendar_args(p)
    args = p.parse_args(argv)

    eng = _engine(args)
    y, m, d = _parse_ymd(args.date)
    t = _parse_hms(args.time) if args.time else None
    try:
        wt = eng.date_to_world_time(CalendarDate(y, m, d, intercalary=args.intercalary, time=t), args.epoch_override)
    except InvalidDateError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    print(wt)
    return 0


def _format_block(block: dict) -> str:
    flag = "" if block["counts_for_weekdays"] else "  (outside the week)"
    return f"      + {block['name']:<14} {block['days']:>3}{flag}"


def cmd_year(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="worldcal year", description="Year structure")
    p.add_argument("year", type=int)
    _add_calendar_args(p)
    args = p.parse_args(argv)

    info = _engine(args).year_summary(args.year)

    print(f"Year {info['year']}: {info['length']} days{' (leap)' if info['leap'] else ''}")
    for m in info["months"]:
        for block in m["before"]:
            print(_format_block(block))
        print(f"  {m['month']:>2}  {m['name']:<16} {m['days']:>3}")
        for block in m["intercalary"]:
            print(_format_block(block))
    return 0


def cmd_events(argv: list[str]) -> int:
    from .engines.events import EventsManager

    p = argparse.ArgumentParser(prog="worldcal events", description="Events on a date or in a range")
    p.add_argument("date", help="Y-M-D")
    p.add_argument("--to", default=None, help="inclusive end date Y-M-D")
    _add_calendar_args(p)
    args = p.parse_args(argv)

    eng = _engine(args)
    mgr = EventsManager(eng)
    y, m, d = _parse_ymd(args.date)
    try:
        if args.to:
            y2, m2, d2 = _parse_ymd(args.to)
            found = mgr.get_events_in_range(y, m, d, y2, m2, d2)
        else:
            found = mgr.get_events_for_date(y, m, d)
    except InvalidDateError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    if not found:
        print("(no events)")
    for occ in found:
        print(_format_occurrence(eng, occ))
    return 0


def cmd_next(argv: list[str]) -> int:
    from .engines.events import EventsManager

    p = argparse.ArgumentParser(prog="worldcal next", description="Next occurrence of an event")
    p.add_argument("event_id")
    p.add_argument("date", help="Y-M-D")
    _add_calendar_args(p)
    args = p.parse_args(argv)

    eng = _engine(args)
    try:
        occ = EventsManager(eng).get_next_occurrence(args.event_id, *_parse_ymd(args.date))
    except InvalidDateError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    if occ is None:
        print(f"No occurrence of '{args.event_id}' found")
        return 1
    print(_format_occurrence(eng, occ))
    return 0


def cmd_list(argv: list[str]) -> int:
    import worldcal

    p = argparse.ArgumentParser(prog="worldcal list", description="Registered calendars")
    p.parse_args(argv)
    for name in worldcal.list_calendars():
        info = worldcal.calendar_info(name)
        print(f"{name:<12} {info['name']:<24} {info['months']:>2} months, {info['week_length']}-day week, "
              f"{info['common_year_length']}/{info['leap_year_length']} days")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    p = argparse.ArgumentParser(prog="worldcal", description="Fictional calendar toolkit CLI.")
    p.add_argument("-v", "--verbose", action="store_true", help="log warnings and debug output to stderr")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("date", help="World time -> calendar date")
    sub.add_parser("worldtime", help="Calendar date -> world time")
    sub.add_parser("year", help="Year length and month layout")
    sub.add_parser("events", help="Events on a date or in a date range")
    sub.add_parser("next", help="Next occurrence of an event")
    sub.add_parser("list", help="Registered calendars")

    p_diag = sub.add_parser("diag", help="Diagnostics tools")
    p_diag.add_argument(
        "tool",
        choices=["round-trip", "year-table", "month-grid", "weekday-drift"],
        help="Which diagnostic to run",
    )

    args, rest = p.parse_known_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    commands = {
        "date": cmd_date,
        "worldtime": cmd_worldtime,
        "year": cmd_year,
        "events": cmd_events,
        "next": cmd_next,
        "list": cmd_list,
    }
    if args.cmd in commands:
        return commands[args.cmd](rest)

    if args.cmd == "diag":
        tool_map = {
            "round-trip": "worldcal.diagnostics.round_trip",
            "year-table": "worldcal.diagnostics.year_table",
            "month-grid": "worldcal.diagnostics.month_grid",
            "weekday-drift": "worldcal.diagnostics.weekday_drift",
        }
        return _run_module_main(tool_map[args.tool], rest)

    raise RuntimeError("unreachable")


if __name__ == "__main__":
    raise SystemExit(main())
