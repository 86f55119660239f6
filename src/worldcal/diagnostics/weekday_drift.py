#!/usr/bin/env python3
from __future__ import annotations

import argparse
from typing import List, Optional

import worldcal


def _need_numpy():
    try:
        import numpy as np
        return np
    except ImportError as e:
        raise RuntimeError('Need numpy. Install: pip install "worldcal[diagnostics]"') from e


def _need_matplotlib():
    try:
        import matplotlib.pyplot as plt
        return plt
    except ImportError as e:
        raise RuntimeError('Need matplotlib. Install: pip install "worldcal[diagnostics]"') from e


def first_weekdays(np, eng, start_year: int, end_year: int):
    """Weekday index of day 1 of month 1 for each year in [start_year, end_year]."""
    years = np.arange(start_year, end_year + 1, dtype=int)
    wds = np.array([eng.calculate_weekday(int(y), 1, 1) for y in years], dtype=int)
    return years, wds


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(
        description="Scatter of the New Year weekday across years (shows the leap cycle in the week)."
    )
    p.add_argument("--calendars", default="gregorian,harptos,novena")
    p.add_argument("--start-year", type=int, default=None)
    p.add_argument("--years", type=int, default=60)
    p.add_argument("--out", default="weekday_drift.png")
    p.add_argument("--show", action="store_true")
    args = p.parse_args(argv)

    np = _need_numpy()
    plt = _need_matplotlib()

    names = [x.strip() for x in args.calendars.split(",") if x.strip()]
    fig, axes = plt.subplots(len(names), 1, figsize=(10, 2.4 * len(names)), squeeze=False)

    for ax, name in zip(axes[:, 0], names):
        eng = worldcal.get_engine(name)
        y = eng.definition.year
        start = args.start_year
        if start is None:
            start = y.current_year if y.current_year is not None else y.epoch
        years, wds = first_weekdays(np, eng, start, start + args.years - 1)

        ax.scatter(years, wds, s=14, color="0.15")
        ax.set_yticks(range(eng.definition.week_length))
        ax.set_yticklabels([w.abbreviation or w.name for w in eng.definition.weekdays], fontsize=7)
        ax.set_title(f"{eng.definition.name or name}: weekday of the first day of the year", fontsize=9)
        ax.grid(True, alpha=0.3)

    fig.tight_layout()
    fig.savefig(args.out, dpi=150)
    print(f"Wrote {args.out}")
    if args.show:
        plt.show()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
