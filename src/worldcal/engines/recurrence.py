"""
worldcal.engines.recurrence
---------------------------
Evaluates a recurrence rule for one source year.

The result may land in the following year (a fixed date past the end of the
last month rolled forward with `afterDay`); `year_offset` records that so the
events manager can resolve the occurrence's origin year.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.types import FixedRecurrence, IntervalRecurrence, OrdinalRecurrence, RecurrenceRule
from .calendar import CalendarEngine

_CLAMP_POLICIES = ("clamp", "lastDay", "beforeDay")


@dataclass(frozen=True)
class Occurrence:
    month: int
    day: int
    year_offset: int = 0


class EventRecurrenceCalculator:
    def __init__(self, engine: CalendarEngine):
        self.engine = engine

    @property
    def _month_count(self) -> int:
        return len(self.engine.definition.months)

    def calculate_occurrence(self, rule: RecurrenceRule, year: int) -> Optional[Occurrence]:
        if isinstance(rule, FixedRecurrence):
            return self._fixed(rule.month, rule.day, rule.if_day_not_exists, year)
        if isinstance(rule, OrdinalRecurrence):
            return self._ordinal(rule, year)
        if isinstance(rule, IntervalRecurrence):
            if (year - rule.anchor_year) % rule.interval_years != 0:
                return None
            return self._fixed(rule.month, rule.day, rule.if_day_not_exists, year)
        return None

    def _fixed(self, month: int, day: int, policy: Optional[str], year: int) -> Optional[Occurrence]:
        if not 1 <= month <= self._month_count or day < 1:
            return None

        length = self.engine.get_month_length(month, year)
        if day <= length:
            return Occurrence(month, day)

        if policy == "afterDay":
            if month == self._month_count:
                return Occurrence(1, 1, year_offset=1)
            return Occurrence(month + 1, 1)
        if policy in _CLAMP_POLICIES:
            return Occurrence(month, length)
        return None

    def _ordinal(self, rule: OrdinalRecurrence, year: int) -> Optional[Occurrence]:
        n = self.engine.definition.week_length
        if not 1 <= rule.month <= self._month_count or not 0 <= rule.weekday < n:
            return None

        length = self.engine.get_month_length(rule.month, year)
        # Weekdays advance by one per day inside a month.
        first = self.engine.calculate_weekday(year, rule.month, 1)
        first_match = 1 + (rule.weekday - first) % n
        matches = list(range(first_match, length + 1, n))
        if not matches:
            return None

        if rule.occurrence == -1:
            return Occurrence(rule.month, matches[-1])
        if 1 <= rule.occurrence <= len(matches):
            return Occurrence(rule.month, matches[rule.occurrence - 1])
        return None
