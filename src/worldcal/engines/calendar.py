"""
worldcal.engines.calendar
-------------------------
The Orchestrator. Binds the leap rule and the per-year layouts together and
translates between linear world time (integer seconds since the epoch) and
structured calendar dates.

Day numbering: day 0 is the first day of the epoch year. Years before the
epoch have negative day numbers; every conversion uses floor division so
pre-epoch time follows exactly the same arithmetic as post-epoch time.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional, Tuple

from ..core.definition import CalendarDefinition, Intercalary, Season
from ..core.errors import InvalidDateError
from ..core.time import seconds_of_time, split_seconds, time_of_day
from ..core.types import CalendarDate, MoonPhaseInfo, SunTimes, TimeOfDay, WeekInfo
from .layout import Segment, YearLayout, build_layout
from .leap import LeapEngine
from .moons import moon_phase
from .seasons import SeasonEngine
from .weeks import week_info, week_of_month

logger = logging.getLogger(__name__)


def _block_summary(b: Intercalary) -> Dict[str, Any]:
    return {"name": b.name, "days": b.days, "counts_for_weekdays": b.counts_for_weekdays}


class CalendarEngine:
    """
    Pure date arithmetic over one immutable CalendarDefinition.
    Holds no mutable state after construction.
    """
    def __init__(self, definition: CalendarDefinition):
        self.definition = definition
        self.leap = LeapEngine(definition.leap_year)
        self.common_layout = build_layout(definition, leap=False)
        self.leap_layout = build_layout(definition, leap=True)

        # Mean year length as an exact ratio, used to jump straight to the right year.
        cycle_years, cycle_leaps = self.leap.cycle
        self._cycle_years = cycle_years
        self._cycle_days = cycle_years * self.common_layout.length + cycle_leaps * self._leap_delta

        self._report_orphans()
        self.seasons = SeasonEngine(self)

    def _report_orphans(self) -> None:
        d = self.definition
        for block in d.intercalary:
            if d.month_index(block.anchor) is None:
                logger.warning(
                    "Calendar %s: intercalary %r is attached to unknown month %r and is ignored",
                    d.id, block.name, block.anchor,
                )
        if d.leap_year.month is not None and d.month_index(d.leap_year.month) is None:
            logger.warning("Calendar %s: leap month %r does not exist", d.id, d.leap_year.month)

    # ---------------------------------------------------------
    # Year structure
    # ---------------------------------------------------------

    @property
    def seconds_per_day(self) -> int:
        return self.definition.time.seconds_per_day

    @property
    def _leap_delta(self) -> int:
        return self.leap_layout.length - self.common_layout.length

    @property
    def _leap_weekday_delta(self) -> int:
        return self.leap_layout.weekday_length - self.common_layout.weekday_length

    def is_leap_year(self, year: int) -> bool:
        return self.leap.is_leap(year)

    def layout(self, year: int) -> YearLayout:
        return self.leap_layout if self.leap.is_leap(year) else self.common_layout

    def get_year_length(self, year: int) -> int:
        return self.layout(year).length

    def get_month_lengths(self, year: int) -> Tuple[int, ...]:
        return self.layout(year).month_lengths

    def get_month_length(self, month: int, year: int) -> int:
        self._check_month(month)
        return self.layout(year).month_lengths[month - 1]

    def get_intercalary_days_after_month(self, year: int, month: int) -> Tuple[Intercalary, ...]:
        if not 1 <= month <= len(self.definition.months):
            return ()
        return self.layout(year).intercalary_after(month)

    def get_intercalary_days_before_month(self, year: int, month: int) -> Tuple[Intercalary, ...]:
        if not 1 <= month <= len(self.definition.months):
            return ()
        return self.layout(year).intercalary_before(month)

    def days_before_year(self, year: int) -> int:
        """Day number of the first day of `year` (0 for the epoch year)."""
        epoch = self.definition.year.epoch
        return (year - epoch) * self.common_layout.length + self.leap.count(epoch, year) * self._leap_delta

    def weekday_days_before_year(self, year: int) -> int:
        """Like days_before_year, counting only days that advance the weekday cycle."""
        epoch = self.definition.year.epoch
        return (
            (year - epoch) * self.common_layout.weekday_length
            + self.leap.count(epoch, year) * self._leap_weekday_delta
        )

    def _year_of_day(self, day_number: int) -> Tuple[int, int]:
        """(year, 0-based day of year) for an absolute day number."""
        year = self.definition.year.epoch + (day_number * self._cycle_years) // self._cycle_days
        start = self.days_before_year(year)
        while day_number < start:
            year -= 1
            start -= self.get_year_length(year)
        while day_number >= start + self.get_year_length(year):
            start += self.get_year_length(year)
            year += 1
        return year, day_number - start

    # ---------------------------------------------------------
    # Validation
    # ---------------------------------------------------------

    def _check_month(self, month: int) -> None:
        if not 1 <= month <= len(self.definition.months):
            raise InvalidDateError(f"Month {month} is outside 1..{len(self.definition.months)}")

    def _segment_for(self, date: CalendarDate) -> Segment:
        self._check_month(date.month)
        lay = self.layout(date.year)
        if date.intercalary is not None:
            seg = lay.intercalary_segment(date.month, date.intercalary)
            if seg is None:
                raise InvalidDateError(
                    f"No intercalary period {date.intercalary!r} after month {date.month} in year {date.year}"
                )
        else:
            seg = lay.month_segment(date.month)
        if not 1 <= date.day <= seg.length:
            raise InvalidDateError(
                f"Day {date.day} is outside 1..{seg.length} for {self._segment_label(seg)} of year {date.year}"
            )
        return seg

    def _segment_label(self, seg: Segment) -> str:
        if seg.intercalary is not None:
            return f"intercalary {seg.intercalary.name!r}"
        return f"month {seg.month} ({self.definition.months[seg.month - 1].name})"

    def _check_time(self, t: TimeOfDay) -> None:
        tc = self.definition.time
        if not (0 <= t.hour < tc.hours_in_day and 0 <= t.minute < tc.minutes_in_hour
                and 0 <= t.second < tc.seconds_in_minute):
            raise InvalidDateError(f"Time {t.hour}:{t.minute}:{t.second} is outside the calendar day")

    def is_valid_date(self, year: int, month: int, day: int, intercalary: Optional[str] = None) -> bool:
        try:
            self._segment_for(CalendarDate(year, month, day, intercalary=intercalary))
        except InvalidDateError:
            return False
        return True

    # ---------------------------------------------------------
    # Day numbers
    # ---------------------------------------------------------

    def days_since_epoch(self, date: CalendarDate) -> int:
        seg = self._segment_for(date)
        return self.days_before_year(date.year) + seg.start + date.day - 1

    def _weekday_of(self, year: int, seg: Segment, day: int) -> int:
        counted = self.weekday_days_before_year(year) + seg.weekday_start
        if seg.counts_for_weekdays:
            counted += day - 1
        return (self.definition.year.start_day + counted) % self.definition.week_length

    def day_to_date(self, day_number: int) -> CalendarDate:
        year, doy = self._year_of_day(day_number)
        seg = self.layout(year).locate(doy)
        day = doy - seg.start + 1
        return CalendarDate(
            year=year,
            month=seg.month,
            day=day,
            weekday=self._weekday_of(year, seg, day),
            intercalary=seg.intercalary.name if seg.intercalary is not None else None,
        )

    # ---------------------------------------------------------
    # World time
    # ---------------------------------------------------------

    def world_time_to_date(self, world_time: int, epoch_override_seconds: Optional[int] = None) -> CalendarDate:
        seconds = int(world_time) + (epoch_override_seconds or 0)
        days, seconds_in_day = split_seconds(seconds, self.seconds_per_day)
        date = self.day_to_date(days)
        return replace(date, time=time_of_day(seconds_in_day, self.definition.time))

    def date_to_world_time(self, date: CalendarDate, epoch_override_seconds: Optional[int] = None) -> int:
        seconds = self.days_since_epoch(date) * self.seconds_per_day
        if date.time is not None:
            self._check_time(date.time)
            seconds += seconds_of_time(date.time, self.definition.time)
        return seconds - (epoch_override_seconds or 0)

    def epoch_offset_seconds(self, from_year: int, to_year: int) -> int:
        """
        Seconds from the start of `from_year` to the start of `to_year`.
        Host adapters use this to build an epoch override, e.g. so that world
        time 0 falls on the first day of a campaign's current year.
        """
        return (self.days_before_year(to_year) - self.days_before_year(from_year)) * self.seconds_per_day

    # ---------------------------------------------------------
    # Weekdays and weeks
    # ---------------------------------------------------------

    def calculate_weekday(self, year: int, month: int, day: int) -> int:
        seg = self._segment_for(CalendarDate(year, month, day))
        return self._weekday_of(year, seg, day)

    def get_week_of_month(self, date: CalendarDate) -> Optional[int]:
        weeks = self.definition.weeks
        if weeks is None or date.is_intercalary:
            return None
        seg = self._segment_for(date)
        return week_of_month(weeks, self.definition.week_length, date.day, seg.length)

    def get_week_info(self, date: CalendarDate) -> Optional[WeekInfo]:
        return week_info(self.definition.weeks, self.get_week_of_month(date))

    # ---------------------------------------------------------
    # Arithmetic
    # ---------------------------------------------------------

    def add_seconds(self, date: CalendarDate, seconds: int) -> CalendarDate:
        return self.world_time_to_date(self.date_to_world_time(date) + seconds)

    def add_minutes(self, date: CalendarDate, minutes: int) -> CalendarDate:
        return self.add_seconds(date, minutes * self.definition.time.seconds_in_minute)

    def add_hours(self, date: CalendarDate, hours: int) -> CalendarDate:
        return self.add_seconds(date, hours * self.definition.time.seconds_per_hour)

    def add_days(self, date: CalendarDate, days: int) -> CalendarDate:
        out = self.add_seconds(date, days * self.seconds_per_day)
        return out if date.time is not None else replace(out, time=None)

    def add_months(self, date: CalendarDate, months: int) -> CalendarDate:
        n = len(self.definition.months)
        self._check_month(date.month)
        total = (date.month - 1) + months
        return self._resolve_clamped(date.year + total // n, total % n + 1, date.day, date.time)

    def add_years(self, date: CalendarDate, years: int) -> CalendarDate:
        self._check_month(date.month)
        return self._resolve_clamped(date.year + years, date.month, date.day, date.time)

    def _resolve_clamped(self, year: int, month: int, day: int, t: Optional[TimeOfDay]) -> CalendarDate:
        length = self.get_month_length(month, year)
        if day > length:
            day = length
        if day < 1:
            raise InvalidDateError(f"Day {day} is not a valid day")
        return CalendarDate(year, month, day, self.calculate_weekday(year, month, day), time=t)

    def compare(self, a: CalendarDate, b: CalendarDate) -> int:
        """-1, 0 or 1 by position in time."""
        wa, wb = self.date_to_world_time(a), self.date_to_world_time(b)
        return (wa > wb) - (wa < wb)

    # ---------------------------------------------------------
    # Moons
    # ---------------------------------------------------------

    def get_moon_phases(self, date: CalendarDate, moon_name: Optional[str] = None) -> List[MoonPhaseInfo]:
        day = self.days_since_epoch(date)
        out = []
        for moon in self.definition.moons:
            if moon_name is not None and moon.name != moon_name:
                continue
            ref = self.days_since_epoch(CalendarDate(*moon.first_new_moon))
            out.append(moon_phase(moon, day - ref))
        return out

    # ---------------------------------------------------------
    # Seasons
    # ---------------------------------------------------------

    def get_season(self, date: CalendarDate) -> Optional[Season]:
        return self.seasons.get_season(date)

    def get_sun_times(self, date: CalendarDate) -> SunTimes:
        """Sunrise and sunset interpolated between the surrounding seasons."""
        return self.seasons.sun_times(date)

    # ---------------------------------------------------------
    # High-Level API Methods (Required by CLI / api.py)
    # ---------------------------------------------------------

    def info(self) -> Dict[str, Any]:
        d = self.definition
        return {
            "id": d.id,
            "name": d.name,
            "months": len(d.months),
            "week_length": d.week_length,
            "leap_rule": d.leap_year.rule,
            "common_year_length": self.common_layout.length,
            "leap_year_length": self.leap_layout.length,
            "seconds_per_day": self.seconds_per_day,
            "epoch": d.year.epoch,
        }

    def year_summary(self, year: int) -> Dict[str, Any]:
        """Length, leap flag and the month/intercalary layout of one year."""
        months = self.definition.months
        lengths = self.get_month_lengths(year)
        return {
            "year": year,
            "leap": self.is_leap_year(year),
            "length": self.get_year_length(year),
            "months": [
                {
                    "month": i,
                    "name": months[i - 1].name,
                    "days": lengths[i - 1],
                    "before": [_block_summary(b) for b in self.get_intercalary_days_before_month(year, i)],
                    "intercalary": [_block_summary(b) for b in self.get_intercalary_days_after_month(year, i)],
                }
                for i in range(1, len(months) + 1)
            ],
        }

    def explain(self, world_time: int, epoch_override_seconds: Optional[int] = None) -> Dict[str, Any]:
        """Step-by-step record of a world time conversion."""
        seconds = int(world_time) + (epoch_override_seconds or 0)
        days, seconds_in_day = split_seconds(seconds, self.seconds_per_day)
        year, doy = self._year_of_day(days)
        lay = self.layout(year)
        seg = lay.locate(doy)
        date = self.world_time_to_date(world_time, epoch_override_seconds)
        return {
            "world_time": world_time,
            "epoch_override_seconds": epoch_override_seconds,
            "seconds": seconds,
            "day_number": days,
            "seconds_in_day": seconds_in_day,
            "year": year,
            "leap_year": lay.leap,
            "year_start_day": self.days_before_year(year),
            "year_length": lay.length,
            "day_of_year": doy,
            "segment": self._segment_label(seg),
            "segment_start": seg.start,
            "weekday_days": self.weekday_days_before_year(year) + seg.weekday_start,
            "date": date.to_dict(),
        }
