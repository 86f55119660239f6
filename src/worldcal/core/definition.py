"""
worldcal.core.definition
------------------------
Immutable description of a calendar's structure. Pure data: every rule that
interprets these fields lives in `worldcal.engines`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Literal, Optional, Tuple

from .errors import DefinitionError
from .types import EventDefinition

_HHMM_RE = re.compile(r"^\d{1,2}:\d{2}$")


@dataclass(frozen=True)
class Month:
    name: str
    days: int
    abbreviation: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        if self.days <= 0:
            raise DefinitionError(f"Month '{self.name}' must have at least one day (got {self.days})")


@dataclass(frozen=True)
class Weekday:
    name: str
    abbreviation: Optional[str] = None


@dataclass(frozen=True)
class LeapYearRule:
    """
    rule='gregorian': divisible by 4, except centuries unless divisible by 400.
    rule='custom': (year - offset) divisible by interval.
    extra_days are added to `month` in leap years (default +1, may be negative).
    """
    rule: Literal["none", "gregorian", "custom"] = "none"
    interval: Optional[int] = None
    offset: int = 0
    month: Optional[str] = None
    extra_days: Optional[int] = None

    def __post_init__(self) -> None:
        if self.rule not in ("none", "gregorian", "custom"):
            raise DefinitionError(f"Unknown leap year rule '{self.rule}'")
        if self.rule == "custom" and self.interval is not None and self.interval <= 0:
            raise DefinitionError("Custom leap year interval must be positive")

    @property
    def day_adjustment(self) -> int:
        if self.month is None:
            return 0
        return 1 if self.extra_days is None else self.extra_days


@dataclass(frozen=True)
class Intercalary:
    """
    A block of extra days inserted right after the month named `after`, or
    right before the month named `before`. Exactly one of the two is set.
    """
    name: str
    after: Optional[str] = None
    days: int = 1
    leap_year_only: bool = False
    counts_for_weekdays: bool = True
    description: Optional[str] = None
    before: Optional[str] = None

    def __post_init__(self) -> None:
        if (self.after is None) == (self.before is None):
            raise DefinitionError(f"Intercalary '{self.name}' needs exactly one of 'after' or 'before'")
        if self.days < 1:
            raise DefinitionError(f"Intercalary '{self.name}' must have at least one day (got {self.days})")

    @property
    def anchor(self) -> str:
        """Name of the month the block is attached to."""
        return self.after if self.after is not None else self.before


@dataclass(frozen=True)
class YearConfig:
    epoch: int = 0
    start_day: int = 0  # weekday index of the first day of the epoch year
    current_year: Optional[int] = None
    prefix: str = ""
    suffix: str = ""


@dataclass(frozen=True)
class TimeConfig:
    hours_in_day: int = 24
    minutes_in_hour: int = 60
    seconds_in_minute: int = 60

    def __post_init__(self) -> None:
        if min(self.hours_in_day, self.minutes_in_hour, self.seconds_in_minute) <= 0:
            raise DefinitionError("Time units must be positive")

    @property
    def seconds_per_hour(self) -> int:
        return self.minutes_in_hour * self.seconds_in_minute

    @property
    def seconds_per_day(self) -> int:
        return self.hours_in_day * self.seconds_per_hour


@dataclass(frozen=True)
class WeekName:
    name: str
    abbreviation: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class WeekConfig:
    """Week-of-month partitioning, independent of the weekday cycle."""
    type: Literal["month-based", "year-based"] = "month-based"
    per_month: Optional[int] = None
    days_per_week: Optional[int] = None
    remainder_handling: Literal["partial-last", "extend-last", "none"] = "partial-last"
    names: Tuple[WeekName, ...] = ()
    naming_pattern: Literal["ordinal", "numeric", "none"] = "numeric"

    def __post_init__(self) -> None:
        if self.type not in ("month-based", "year-based"):
            raise DefinitionError(f"Unknown weeks type '{self.type}'")
        if self.remainder_handling not in ("partial-last", "extend-last", "none"):
            raise DefinitionError(f"Unknown remainderHandling '{self.remainder_handling}'")
        if self.naming_pattern not in ("ordinal", "numeric", "none"):
            raise DefinitionError(f"Unknown namingPattern '{self.naming_pattern}'")
        if self.days_per_week is not None and self.days_per_week <= 0:
            raise DefinitionError("weeks.daysPerWeek must be positive")
        if self.per_month is not None and self.per_month <= 0:
            raise DefinitionError("weeks.perMonth must be positive")


@dataclass(frozen=True)
class MoonPhase:
    name: str
    length: Fraction
    single_day: bool = False
    icon: str = ""


@dataclass(frozen=True)
class Moon:
    name: str
    cycle_length: Fraction
    first_new_moon: Tuple[int, int, int]  # (year, month, day)
    phases: Tuple[MoonPhase, ...]

    def __post_init__(self) -> None:
        if self.cycle_length <= 0:
            raise DefinitionError(f"Moon '{self.name}' needs a positive cycle length")
        if not self.phases:
            raise DefinitionError(f"Moon '{self.name}' needs at least one phase")


@dataclass(frozen=True)
class Season:
    """
    A named stretch of the year from (start_month, start_day) to (end_month, end_day).

    end_month defaults to start_month and a missing end_day means the end of
    that month. An end_day past the month end runs on into the following
    months. A season whose end_month is before its start_month wraps across
    the new year. sunrise/sunset ("HH:MM") apply to the first day.
    """
    name: str
    start_month: int
    start_day: Optional[int] = None
    end_month: Optional[int] = None
    end_day: Optional[int] = None
    sunrise: Optional[str] = None
    sunset: Optional[str] = None
    description: Optional[str] = None
    icon: Optional[str] = None
    color: Optional[str] = None

    def __post_init__(self) -> None:
        if self.start_month < 1 or (self.end_month is not None and self.end_month < 1):
            raise DefinitionError(f"Season '{self.name}': months are 1-based")
        for value in (self.start_day, self.end_day):
            if value is not None and value < 1:
                raise DefinitionError(f"Season '{self.name}': days are 1-based (got {value})")
        for value in (self.sunrise, self.sunset):
            if value is not None and not _HHMM_RE.match(value):
                raise DefinitionError(f"Season '{self.name}': expected HH:MM, got {value!r}")

    @property
    def last_month(self) -> int:
        return self.end_month if self.end_month is not None else self.start_month

    @property
    def wraps_year(self) -> bool:
        return self.last_month < self.start_month


@dataclass(frozen=True)
class CalendarDefinition:
    id: str
    months: Tuple[Month, ...]
    weekdays: Tuple[Weekday, ...]
    name: str = ""
    leap_year: LeapYearRule = field(default_factory=LeapYearRule)
    intercalary: Tuple[Intercalary, ...] = ()
    year: YearConfig = field(default_factory=YearConfig)
    time: TimeConfig = field(default_factory=TimeConfig)
    weeks: Optional[WeekConfig] = None
    moons: Tuple[Moon, ...] = ()
    seasons: Tuple[Season, ...] = ()
    events: Tuple[EventDefinition, ...] = ()

    def __post_init__(self) -> None:
        if not self.months:
            raise DefinitionError(f"Calendar '{self.id}' has no months")
        if not self.weekdays:
            raise DefinitionError(f"Calendar '{self.id}' has no weekdays")
        names = [m.name for m in self.months]
        if len(names) != len(set(names)):
            dupes = sorted({n for n in names if names.count(n) > 1})
            raise DefinitionError(f"Calendar '{self.id}' has duplicate month names: {dupes}")

    @property
    def seconds_per_day(self) -> int:
        return self.time.seconds_per_day

    @property
    def week_length(self) -> int:
        return len(self.weekdays)

    def month_index(self, name: str) -> Optional[int]:
        """1-based index of the month called `name`, or None."""
        for i, m in enumerate(self.months, start=1):
            if m.name == name:
                return i
        return None
