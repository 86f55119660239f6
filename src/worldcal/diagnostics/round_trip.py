from __future__ import annotations

import argparse
import random
from typing import List

import worldcal


def parse_calendars(s: str) -> List[str]:
    # "gregorian,harptos" -> ["gregorian", "harptos"]
    return [x.strip() for x in s.split(",") if x.strip()]


def roundtrip_test(
    calendar: str,
    N: int,
    lo: int,
    hi: int,
    seed: int,
    *,
    max_failures: int,
) -> int:
    """world time -> date -> world time must be the identity; dates must not go backwards."""
    random.seed(seed)
    eng = worldcal.get_engine(calendar)
    failures = 0

    for _ in range(N):
        t0 = random.randint(lo, hi)
        d0 = eng.world_time_to_date(t0)
        back = eng.date_to_world_time(d0)
        if back != t0:
            failures += 1
            print("\nFAIL (round-trip)")
            print("calendar:", calendar)
            print("t0:", t0)
            print("date:", d0)
            print("back:", back)
            print("explain:", eng.explain(t0))
            if failures >= max_failures:
                return failures

        t1 = t0 + random.randint(0, 10 * eng.seconds_per_day)
        if eng.compare(d0, eng.world_time_to_date(t1)) > 0:
            failures += 1
            print("\nFAIL (monotonic)")
            print("calendar:", calendar)
            print("t0, t1:", t0, t1)
            if failures >= max_failures:
                return failures

    return failures


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Random round-trip tests: world time -> date -> world time.")
    p.add_argument("--calendars", type=str, default=",".join(worldcal.list_calendars()),
                   help="Comma-separated calendar list.")
    p.add_argument("--N", type=int, default=2000, help="Trials per calendar.")
    p.add_argument("--years", type=int, default=5000, help="Sample within +/- this many mean years of the epoch.")
    p.add_argument("--seed", type=int, default=123, help="RNG seed.")
    p.add_argument("--max-failures", type=int, default=5, help="Stop after this many failures per calendar.")
    args = p.parse_args(argv)

    total_fail = 0
    for cal in parse_calendars(args.calendars):
        eng = worldcal.get_engine(cal)
        span = args.years * eng.get_year_length(eng.definition.year.epoch) * eng.seconds_per_day
        print(f"Testing {cal} ...")
        total_fail += roundtrip_test(cal, N=args.N, lo=-span, hi=span, seed=args.seed,
                                     max_failures=args.max_failures)

    if total_fail == 0:
        print("All round-trip tests passed.")
        return 0

    print(f"Round-trip failures: {total_fail}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
