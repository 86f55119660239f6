"""
worldcal.engines.events
-----------------------
Resolves declared recurring events into concrete occurrences.

An occurrence is identified by its origin date (the day it begins). Whether
it is "on" a given day is decided in world time: the span
[start, start + duration) must overlap the day's window, so multi-day events
crossing month or year boundaries need no special casing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Set, Tuple

from ..core.errors import InvalidDateError
from ..core.time import parse_duration, parse_start_time
from ..core.types import (
    CalendarDate,
    EventDefinition,
    OccurrenceResult,
    TimeOfDay,
    WorldEventSettings,
)
from .calendar import CalendarEngine
from .recurrence import EventRecurrenceCalculator

logger = logging.getLogger(__name__)

# How far ahead get_next_occurrence looks before giving up.
MAX_SEARCH_YEARS = 100

_Key = Tuple[int, int, int]


@dataclass(frozen=True)
class _Timed:
    order: int
    event: EventDefinition
    start_time: TimeOfDay
    duration: int  # seconds


class EventsManager:
    """
    Event occurrences for one calendar engine.

    Calendar-defined events can be overridden per world: a world event with
    the same id replaces the calendar one, other world events are appended,
    and disabled ids are dropped. The manager is immutable; use
    `with_world_settings` to get a manager with different overrides.
    """
    def __init__(
        self,
        engine: CalendarEngine,
        events: Optional[Sequence[EventDefinition]] = None,
        world_settings: Optional[WorldEventSettings] = None,
    ):
        self.engine = engine
        self.calculator = EventRecurrenceCalculator(engine)
        self._calendar_events = tuple(engine.definition.events if events is None else events)
        self.world_settings = world_settings or WorldEventSettings()

        t = engine.definition.time
        week = engine.definition.week_length
        self._timed = tuple(
            _Timed(i, ev, parse_start_time(ev.start_time, t), parse_duration(ev.duration, t, week))
            for i, ev in enumerate(self._merge())
        )
        self._lookback = self._lookback_years()

    def with_world_settings(self, settings: WorldEventSettings) -> "EventsManager":
        return EventsManager(self.engine, self._calendar_events, settings)

    def _merge(self) -> List[EventDefinition]:
        disabled = set(self.world_settings.disabled_event_ids)
        out = [ev for ev in self._calendar_events if ev.id not in disabled]
        for world_event in self.world_settings.events:
            for i, ev in enumerate(out):
                if ev.id == world_event.id:
                    out[i] = world_event
                    break
            else:
                out.append(world_event)
        return out

    def _lookback_years(self) -> int:
        """Source years before a query year that can still reach it (rollover plus long durations)."""
        longest = max((t.duration for t in self._timed), default=0)
        shortest_year = min(self.engine.common_layout.length, self.engine.leap_layout.length)
        return 2 + longest // (shortest_year * self.engine.seconds_per_day)

    # ---------------------------------------------------------
    # Lookup
    # ---------------------------------------------------------

    def get_all_events(self) -> List[EventDefinition]:
        return [t.event for t in self._timed]

    def get_event(self, event_id: str) -> Optional[EventDefinition]:
        timed = self._find(event_id)
        return timed.event if timed is not None else None

    def _find(self, event_id: str) -> Optional[_Timed]:
        for t in self._timed:
            if t.event.id == event_id:
                return t
        return None

    # ---------------------------------------------------------
    # Occurrence resolution
    # ---------------------------------------------------------

    def _resolve(self, timed: _Timed, source_year: int) -> Optional[_Key]:
        """Origin (year, month, day) of the occurrence generated by `source_year`, if any."""
        ev = timed.event
        occ = self.calculator.calculate_occurrence(ev.recurrence, source_year)
        if occ is None:
            return None

        origin = source_year + occ.year_offset
        if ev.start_year is not None and origin < ev.start_year:
            return None
        if ev.end_year is not None and origin > ev.end_year:
            return None

        month, day = occ.month, occ.day
        for exc in ev.exceptions:
            if exc.year != origin:
                continue
            if exc.type == "skip":
                return None
            if exc.type == "move":
                month = exc.move_to_month if exc.move_to_month is not None else month
                day = exc.move_to_day if exc.move_to_day is not None else day
            break

        if not self.engine.is_valid_date(origin, month, day):
            logger.debug("Event %s: resolved date %d-%d-%d does not exist, dropped", ev.id, origin, month, day)
            return None
        return origin, month, day

    def _span(self, timed: _Timed, key: _Key) -> Tuple[int, int]:
        year, month, day = key
        start = self.engine.date_to_world_time(CalendarDate(year, month, day, time=timed.start_time))
        return start, start + timed.duration

    @staticmethod
    def _overlaps(start: int, end: int, lo: int, hi: int) -> bool:
        if end == start:
            return lo <= start < hi
        return start < hi and end > lo

    def _day_window(self, year: int, month: int, day: int) -> Tuple[int, int]:
        start = self.engine.date_to_world_time(CalendarDate(year, month, day))
        return start, start + self.engine.seconds_per_day

    def _collect(self, first_source: int, last_source: int, lo: int, hi: int) -> List[Tuple[int, int, OccurrenceResult]]:
        found: List[Tuple[int, int, OccurrenceResult]] = []
        seen: Set[Tuple[str, int, int, int]] = set()
        for timed in self._timed:
            for source in range(first_source, last_source + 1):
                key = self._resolve(timed, source)
                if key is None or (timed.event.id, *key) in seen:
                    continue
                start, end = self._span(timed, key)
                if self._overlaps(start, end, lo, hi):
                    seen.add((timed.event.id, *key))
                    found.append((start, timed.order, OccurrenceResult(timed.event, *key)))
        return found

    # ---------------------------------------------------------
    # Public queries
    # ---------------------------------------------------------

    def get_events_for_date(self, year: int, month: int, day: int) -> List[OccurrenceResult]:
        """Occurrences active on the given day, including multi-day events that began earlier."""
        lo, hi = self._day_window(year, month, day)
        found = self._collect(year - self._lookback, year, lo, hi)
        return [occ for _, _, occ in sorted(found, key=lambda f: (f[1], f[0]))]

    def has_events_on_date(self, year: int, month: int, day: int) -> bool:
        return bool(self.get_events_for_date(year, month, day))

    def get_events_in_range(
        self,
        start_year: int,
        start_month: int,
        start_day: int,
        end_year: int,
        end_month: int,
        end_day: int,
    ) -> List[OccurrenceResult]:
        """Occurrences overlapping the inclusive day range, in chronological order."""
        lo, _ = self._day_window(start_year, start_month, start_day)
        _, hi = self._day_window(end_year, end_month, end_day)
        if hi <= lo:
            return []
        found = self._collect(start_year - self._lookback, end_year, lo, hi)
        return [occ for _, _, occ in sorted(found, key=lambda f: (f[0], f[1]))]

    def get_next_occurrence(self, event_id: str, year: int, month: int, day: int) -> Optional[OccurrenceResult]:
        """First occurrence whose origin date is strictly after (year, month, day)."""
        if not self.engine.is_valid_date(year, month, day):
            raise InvalidDateError(f"{year}-{month}-{day} is not a date in calendar {self.engine.definition.id}")
        timed = self._find(event_id)
        if timed is None:
            return None

        after = (year, month, day)
        best: Optional[_Key] = None
        for source in range(year - 1, year + MAX_SEARCH_YEARS + 1):
            # A source year never yields an origin earlier than itself.
            if best is not None and source > best[0]:
                break
            if timed.event.end_year is not None and source > timed.event.end_year:
                break
            key = self._resolve(timed, source)
            if key is not None and key > after and (best is None or key < best):
                best = key

        return OccurrenceResult(timed.event, *best) if best is not None else None

