"""
worldcal.engines.layout
-----------------------
The ordered sequence of months and intercalary blocks inside one year.

A year's structure only depends on whether it is a leap year, so the
engine builds exactly two layouts (common and leap) up front and reuses them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..core.definition import CalendarDefinition, Intercalary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Segment:
    month: int                 # 1-based; for a block, the month it is attached to
    length: int
    start: int                 # day offset from the start of the year
    weekday_start: int         # weekday-counting days before this segment
    intercalary: Optional[Intercalary] = None

    @property
    def counts_for_weekdays(self) -> bool:
        return self.intercalary is None or self.intercalary.counts_for_weekdays

    @property
    def end(self) -> int:
        return self.start + self.length


@dataclass(frozen=True)
class YearLayout:
    leap: bool
    segments: Tuple[Segment, ...]
    month_lengths: Tuple[int, ...]

    @property
    def length(self) -> int:
        return self.segments[-1].end

    @property
    def weekday_length(self) -> int:
        last = self.segments[-1]
        return last.weekday_start + (last.length if last.counts_for_weekdays else 0)

    def month_segment(self, month: int) -> Segment:
        for seg in self.segments:
            if seg.intercalary is None and seg.month == month:
                return seg
        raise KeyError(month)

    def intercalary_segment(self, month: int, name: str) -> Optional[Segment]:
        for seg in self.segments:
            if seg.intercalary is not None and seg.month == month and seg.intercalary.name == name:
                return seg
        return None

    def intercalary_after(self, month: int) -> Tuple[Intercalary, ...]:
        return tuple(
            seg.intercalary for seg in self.segments
            if seg.intercalary is not None and seg.month == month and seg.intercalary.after is not None
        )

    def intercalary_before(self, month: int) -> Tuple[Intercalary, ...]:
        return tuple(
            seg.intercalary for seg in self.segments
            if seg.intercalary is not None and seg.month == month and seg.intercalary.before is not None
        )

    def locate(self, day_of_year: int) -> Segment:
        """Segment containing the 0-based day offset."""
        for seg in self.segments:
            if day_of_year < seg.end:
                return seg
        raise ValueError(f"day {day_of_year} is outside a {self.length}-day year")


def month_lengths_for(defn: CalendarDefinition, leap: bool) -> Tuple[int, ...]:
    lengths = [m.days for m in defn.months]
    rule = defn.leap_year
    if leap and rule.month is not None:
        idx = defn.month_index(rule.month)
        if idx is not None:
            adjusted = lengths[idx - 1] + rule.day_adjustment
            if adjusted < 1:
                logger.warning(
                    "Calendar %s: leap month %r clamped to 1 day (was %d)", defn.id, rule.month, adjusted
                )
                adjusted = 1
            lengths[idx - 1] = adjusted
    return tuple(lengths)


def build_layout(defn: CalendarDefinition, leap: bool) -> YearLayout:
    lengths = month_lengths_for(defn, leap)

    after: Dict[str, List[Intercalary]] = {}
    before: Dict[str, List[Intercalary]] = {}
    for block in defn.intercalary:
        if block.leap_year_only and not leap:
            continue
        side = before if block.before is not None else after
        side.setdefault(block.anchor, []).append(block)

    segments: List[Segment] = []
    start = 0
    wd = 0

    def place(month: int, length: int, block: Optional[Intercalary] = None) -> None:
        nonlocal start, wd
        segments.append(Segment(month=month, length=length, start=start, weekday_start=wd, intercalary=block))
        start += length
        if block is None or block.counts_for_weekdays:
            wd += length

    for i, month in enumerate(defn.months, start=1):
        for block in before.get(month.name, ()):
            place(i, block.days, block)
        place(i, lengths[i - 1])
        for block in after.get(month.name, ()):
            place(i, block.days, block)

    return YearLayout(leap=leap, segments=tuple(segments), month_lengths=lengths)
