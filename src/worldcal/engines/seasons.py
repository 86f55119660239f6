"""
worldcal.engines.seasons
------------------------
Season lookup and sunrise/sunset by season.

Seasons are placed on the calendar by day of year, so intercalary days fall
inside whichever season surrounds them. Sun times are given for each
season's first day and interpolated linearly toward the next season's.
"""

from __future__ import annotations

import logging
import math
from fractions import Fraction
from typing import TYPE_CHECKING, Dict, Optional, Tuple

from ..core.definition import Season
from ..core.types import CalendarDate, SunTimes

if TYPE_CHECKING:
    from .calendar import CalendarEngine

logger = logging.getLogger(__name__)

# Used by name when a season gives no times of its own.
GREGORIAN_SUN_TIMES: Dict[str, Tuple[str, str]] = {
    "Winter": ("07:00", "16:45"),
    "Spring": ("06:30", "17:45"),
    "Summer": ("05:45", "20:15"),
    "Autumn": ("06:30", "19:30"),
    "Fall": ("06:30", "19:30"),
}


def time_to_hours(hhmm: str, minutes_in_hour: int = 60) -> Fraction:
    h, m = hhmm.split(":")
    return int(h) + Fraction(int(m), minutes_in_hour)


def hours_to_time(hours: Fraction, minutes_in_hour: int = 60) -> str:
    """'HH:MM', minutes rounded half up."""
    h = math.floor(hours)
    m = math.floor((hours - h) * minutes_in_hour + Fraction(1, 2))
    if m == minutes_in_hour:
        h, m = h + 1, 0
    return f"{h:02d}:{m:02d}"


class SeasonEngine:
    def __init__(self, engine: "CalendarEngine"):
        self.engine = engine
        defn = engine.definition
        n = len(defn.months)
        usable = []
        for season in defn.seasons:
            if season.start_month > n or season.last_month > n:
                logger.warning(
                    "Calendar %s: season %r names a month outside 1..%d and is ignored", defn.id, season.name, n
                )
                continue
            length = engine.common_layout.month_lengths[season.last_month - 1]
            if season.end_day is not None and season.end_day > length:
                logger.warning(
                    "Calendar %s: season %r ends on day %d of a %d-day month and runs into the following months",
                    defn.id, season.name, season.end_day, length,
                )
            usable.append(season)
        self.seasons = tuple(usable)

    # ---------------------------------------------------------
    # Day-of-year bounds
    # ---------------------------------------------------------

    def day_of_year(self, date: CalendarDate) -> int:
        """0-based position of the date in its year, intercalary days included."""
        return self.engine.days_since_epoch(date) - self.engine.days_before_year(date.year)

    def _last_day(self, year: int) -> int:
        return self.engine.get_year_length(year) - 1

    def start_offset(self, season: Season, year: int) -> int:
        lay = self.engine.layout(year)
        if season.start_day is None:
            # blocks placed before the start month belong to the season
            return min(seg.start for seg in lay.segments if seg.month == season.start_month)
        return min(lay.month_segment(season.start_month).start + season.start_day - 1, self._last_day(year))

    def end_offset(self, season: Season, year: int) -> int:
        lay = self.engine.layout(year)
        month = season.last_month
        if season.end_day is None:
            # blocks following the last month belong to the season
            return max(seg.end for seg in lay.segments if seg.month == month) - 1
        seg = lay.month_segment(month)
        return min(seg.start + season.end_day - 1, self._last_day(year))

    # ---------------------------------------------------------
    # Lookup
    # ---------------------------------------------------------

    def contains(self, season: Season, date: CalendarDate) -> bool:
        doy = self.day_of_year(date)
        start = self.start_offset(season, date.year)
        end = self.end_offset(season, date.year)
        if season.wraps_year:
            return doy >= start or doy <= end
        return start <= doy <= end

    def season_index(self, date: CalendarDate) -> Optional[int]:
        for i, season in enumerate(self.seasons):
            if self.contains(season, date):
                return i
        return None

    def get_season(self, date: CalendarDate) -> Optional[Season]:
        i = self.season_index(date)
        return self.seasons[i] if i is not None else None

    # ---------------------------------------------------------
    # Sun times
    # ---------------------------------------------------------

    def default_times(self) -> Tuple[Fraction, Fraction]:
        hours = self.engine.definition.time.hours_in_day
        return Fraction(hours, 4), Fraction(3 * hours, 4)

    def season_times(self, season: Season) -> Tuple[Fraction, Fraction]:
        mih = self.engine.definition.time.minutes_in_hour
        if season.sunrise is not None and season.sunset is not None:
            return time_to_hours(season.sunrise, mih), time_to_hours(season.sunset, mih)
        if season.name in GREGORIAN_SUN_TIMES:
            rise, set_ = GREGORIAN_SUN_TIMES[season.name]
            return time_to_hours(rise, mih), time_to_hours(set_, mih)
        return self.default_times()

    def progress(self, date: CalendarDate, current: Season, following: Season) -> Fraction:
        """Fraction of the way from `current`'s first day to `following`'s."""
        year_length = self.engine.get_year_length(date.year)
        start = self.start_offset(current, date.year)
        end = self.start_offset(following, date.year)
        doy = self.day_of_year(date)

        total = end - start if end > start else year_length - start + end
        into = doy - start if doy >= start else year_length - start + doy
        return Fraction(into, total) if total > 0 else Fraction(0)

    def sun_times(self, date: CalendarDate) -> SunTimes:
        i = self.season_index(date)
        if i is None:
            rise, set_ = self.default_times()
            return SunTimes(rise, set_)

        current = self.seasons[i]
        following = self.seasons[(i + 1) % len(self.seasons)]
        rise0, set0 = self.season_times(current)
        rise1, set1 = self.season_times(following)
        p = self.progress(date, current, following)
        return SunTimes(
            sunrise=rise0 + (rise1 - rise0) * p,
            sunset=set0 + (set1 - set0) * p,
            season=current,
            progress=p,
        )
