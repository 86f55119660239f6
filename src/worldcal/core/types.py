from __future__ import annotations
from dataclasses import dataclass, replace
from fractions import Fraction
from typing import TYPE_CHECKING, Any, Dict, Literal, Optional, Tuple, Union

if TYPE_CHECKING:
    from .definition import Moon, MoonPhase, Season

@dataclass(frozen=True)
class TimeOfDay:
    hour: int = 0
    minute: int = 0
    second: int = 0

@dataclass(frozen=True)
class CalendarDate:
    """
    A resolved point in calendar time.

    For an intercalary date, `intercalary` holds the block name, `month` is the
    month the block is attached to and `day` is the position inside the block.
    """
    year: int
    month: int
    day: int
    weekday: int = 0
    intercalary: Optional[str] = None
    time: Optional[TimeOfDay] = None

    @property
    def is_intercalary(self) -> bool:
        return self.intercalary is not None

    def with_time(self, hour: int = 0, minute: int = 0, second: int = 0) -> "CalendarDate":
        return replace(self, time=TimeOfDay(hour, minute, second))

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "year": self.year,
            "month": self.month,
            "day": self.day,
            "weekday": self.weekday,
        }
        if self.intercalary is not None:
            out["intercalary"] = self.intercalary
        if self.time is not None:
            out["time"] = {"hour": self.time.hour, "minute": self.time.minute, "second": self.time.second}
        return out

@dataclass(frozen=True)
class WeekInfo:
    name: str
    abbreviation: Optional[str] = None
    description: Optional[str] = None

# ------------------------------------------------------------
# Events
# ------------------------------------------------------------

@dataclass(frozen=True)
class FixedRecurrence:
    month: int
    day: int
    if_day_not_exists: Optional[str] = None  # afterDay | clamp | skip (lastDay/beforeDay mean clamp)
    type: Literal["fixed"] = "fixed"

@dataclass(frozen=True)
class OrdinalRecurrence:
    """Nth weekday of a month; occurrence=-1 means the last one."""
    month: int
    occurrence: int
    weekday: int
    type: Literal["ordinal"] = "ordinal"

@dataclass(frozen=True)
class IntervalRecurrence:
    """A fixed date that only happens every `interval_years` years, counted from `anchor_year`."""
    interval_years: int
    anchor_year: int
    month: int
    day: int
    if_day_not_exists: Optional[str] = None
    type: Literal["interval"] = "interval"

RecurrenceRule = Union[FixedRecurrence, OrdinalRecurrence, IntervalRecurrence]

@dataclass(frozen=True)
class EventException:
    year: int
    type: Literal["skip", "move"]
    move_to_month: Optional[int] = None
    move_to_day: Optional[int] = None

@dataclass(frozen=True)
class EventDefinition:
    id: str
    recurrence: RecurrenceRule
    name: str = ""
    description: Optional[str] = None
    start_time: Optional[str] = None
    duration: Optional[str] = None
    visibility: Literal["gm-only", "player-visible"] = "player-visible"
    start_year: Optional[int] = None
    end_year: Optional[int] = None
    exceptions: Tuple[EventException, ...] = ()

@dataclass(frozen=True)
class OccurrenceResult:
    """An event occurrence, keyed by the date on which it begins."""
    event: EventDefinition
    year: int
    month: int
    day: int

@dataclass(frozen=True)
class WorldEventSettings:
    events: Tuple[EventDefinition, ...] = ()
    disabled_event_ids: Tuple[str, ...] = ()

# ------------------------------------------------------------
# Moons
# ------------------------------------------------------------

@dataclass(frozen=True)
class MoonPhaseInfo:
    moon: "Moon"
    phase: "MoonPhase"
    phase_index: int
    day_in_phase: int
    day_in_phase_exact: Fraction
    days_until_next: int
    days_until_next_exact: Fraction
    phase_progress: Fraction

# ------------------------------------------------------------
# Seasons
# ------------------------------------------------------------

@dataclass(frozen=True)
class SunTimes:
    """Sunrise and sunset in hours after midnight, exact."""
    sunrise: Fraction
    sunset: Fraction
    season: Optional["Season"] = None
    progress: Fraction = Fraction(0)  # 0 on the season's first day
