from __future__ import annotations

import argparse

import worldcal
from worldcal.core.types import CalendarDate


def cell(top: str, w: int = 4) -> str:
    return top[:w].rjust(w)


def print_grid(eng, title: str, rows: list[list[str]]) -> None:
    n = eng.definition.week_length
    header = " ".join(cell((wd.abbreviation or wd.name)[:3]) for wd in eng.definition.weekdays)
    print(title)
    print(header)
    print("-" * len(header))
    for row in rows:
        print(" ".join(row + [cell("")] * (n - len(row))))
    print()


def month_rows(eng, year: int, month: int) -> list[list[str]]:
    n = eng.definition.week_length
    length = eng.get_month_length(month, year)
    first = eng.calculate_weekday(year, month, 1)

    rows: list[list[str]] = []
    row = [cell("")] * first
    for day in range(1, length + 1):
        row.append(cell(str(day)))
        if len(row) == n:
            rows.append(row)
            row = []
    if row:
        rows.append(row)
    return rows


def print_blocks(eng, year: int, month: int, blocks) -> None:
    for block in blocks:
        for day in range(1, block.days + 1):
            wd = eng.definition.weekdays[eng.day_to_date(
                eng.days_since_epoch(CalendarDate(year, month, day, intercalary=block.name))
            ).weekday].name
            note = "" if block.counts_for_weekdays else " (outside the week)"
            print(f"  {block.name} day {day}: {wd}{note}")


def print_month(eng, year: int, month: int) -> None:
    name = eng.definition.months[month - 1].name
    print_blocks(eng, year, month, eng.get_intercalary_days_before_month(year, month))
    print_grid(eng, f"{name} {year}", month_rows(eng, year, month))
    print_blocks(eng, year, month, eng.get_intercalary_days_after_month(year, month))
    print()


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Print month grids laid out on the calendar's own week.")
    p.add_argument("--calendar", default="gregorian")
    p.add_argument("--year", type=int, required=True)
    p.add_argument("--month", type=int, default=None, help="1-based month (default: the whole year)")
    args = p.parse_args(argv)

    eng = worldcal.get_engine(args.calendar)
    months = [args.month] if args.month is not None else range(1, len(eng.definition.months) + 1)
    for m in months:
        print_month(eng, args.year, m)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
