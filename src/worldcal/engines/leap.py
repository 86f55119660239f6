"""
worldcal.engines.leap
---------------------
Leap year rules in closed form. Counting leap years over a span of years is
O(1), which keeps year lookup independent of the distance from the epoch.
"""

from __future__ import annotations

from typing import Tuple

from ..core.definition import LeapYearRule


def _multiples_upto(n: int, k: int, offset: int = 0) -> int:
    """Floor count of y <= n with (y - offset) % k == 0, measured from an arbitrary origin. Only differences are meaningful."""
    return (n - offset) // k


class LeapEngine:
    def __init__(self, rule: LeapYearRule):
        self.rule = rule

    def is_leap(self, year: int) -> bool:
        r = self.rule
        if r.rule == "gregorian":
            return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0
        if r.rule == "custom":
            if not r.interval:
                return False
            return (year - r.offset) % r.interval == 0
        return False

    def _cumulative(self, n: int) -> int:
        r = self.rule
        if r.rule == "gregorian":
            return _multiples_upto(n, 4) - _multiples_upto(n, 100) + _multiples_upto(n, 400)
        if r.rule == "custom" and r.interval:
            return _multiples_upto(n, r.interval, r.offset)
        return 0

    def count(self, start: int, end: int) -> int:
        """
        Number of leap years in [start, end). Negative when end < start,
        so that count(a, b) + count(b, c) == count(a, c).
        """
        return self._cumulative(end - 1) - self._cumulative(start - 1)

    @property
    def cycle(self) -> Tuple[int, int]:
        """(years per cycle, leap years per cycle)."""
        r = self.rule
        if r.rule == "gregorian":
            return 400, 97
        if r.rule == "custom" and r.interval:
            return r.interval, 1
        return 1, 0
