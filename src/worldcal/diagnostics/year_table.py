from __future__ import annotations

import argparse

import worldcal


def year_row(eng, year: int) -> str:
    wd = eng.definition.weekdays[eng.calculate_weekday(year, 1, 1)].name
    leap = "L" if eng.is_leap_year(year) else " "
    return f"{year:>7} {leap} {eng.get_year_length(year):>5}  {eng.days_before_year(year):>10}  {wd}"


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Year lengths, leap flags and first weekdays over a span of years.")
    p.add_argument("--calendar", default="gregorian")
    p.add_argument("--start", type=int, default=None, help="first year (default: current year of the calendar)")
    p.add_argument("--count", type=int, default=20)
    args = p.parse_args(argv)

    eng = worldcal.get_engine(args.calendar)
    y = eng.definition.year
    start = args.start if args.start is not None else (y.current_year if y.current_year is not None else y.epoch)

    print(f"{'year':>7}   {'days':>5}  {'day number':>10}  first weekday")
    for year in range(start, start + args.count):
        print(year_row(eng, year))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
