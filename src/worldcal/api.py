from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .core.definition import CalendarDefinition, Season
from .core.engine import CalendarRegistry
from .core.loader import load_definition
from .core.types import CalendarDate, MoonPhaseInfo, OccurrenceResult, SunTimes, TimeOfDay, WorldEventSettings
from .engines.calendar import CalendarEngine
from .engines.events import EventsManager
from .engines.factory import make_engine as _make_engine

DEFAULT_CALENDAR = "gregorian"
_registry: Optional[CalendarRegistry] = None

def set_registry(reg: CalendarRegistry) -> None:
    global _registry
    _registry = reg

def _reg() -> CalendarRegistry:
    if _registry is None:
        raise RuntimeError("Calendar registry not initialized")
    return _registry

def list_calendars() -> List[str]:
    return _reg().list()

def calendar_info(calendar: str = DEFAULT_CALENDAR) -> Dict[str, Any]:
    return _reg().get(calendar).info()

def get_engine(calendar: str = DEFAULT_CALENDAR) -> CalendarEngine:
    return _reg().get(calendar)

def get_calendar(name: str) -> CalendarEngine:
    """A fresh engine for a built-in calendar, independent of the registry."""
    from .engines.specs import ALL_SPECS
    if name not in ALL_SPECS:
        raise KeyError(f"Unknown calendar definition '{name}'")
    return _make_engine(ALL_SPECS[name])

def make_engine(definition: CalendarDefinition) -> CalendarEngine:
    return _make_engine(definition)

def register_calendar(engine: CalendarEngine, name: Optional[str] = None, *, overwrite: bool = False) -> str:
    """Register `engine` under `name`, or its definition id; returns the name used."""
    return _reg().register(engine, name, overwrite=overwrite)

def load_calendar(path: Union[str, Path], *, register: bool = False, overwrite: bool = False) -> CalendarEngine:
    """Load a calendar JSON file; optionally register it under its id."""
    eng = _make_engine(load_definition(path))
    if register:
        register_calendar(eng, overwrite=overwrite)
    return eng

# ============================================================
# Conversions
# ============================================================

def to_date(
    world_time: int,
    *,
    calendar: str = DEFAULT_CALENDAR,
    epoch_override_seconds: Optional[int] = None,
) -> CalendarDate:
    return _reg().get(calendar).world_time_to_date(world_time, epoch_override_seconds)

def to_world_time(
    year: int,
    month: int,
    day: int,
    *,
    hour: int = 0,
    minute: int = 0,
    second: int = 0,
    intercalary: Optional[str] = None,
    calendar: str = DEFAULT_CALENDAR,
    epoch_override_seconds: Optional[int] = None,
) -> int:
    date = CalendarDate(year, month, day, intercalary=intercalary, time=TimeOfDay(hour, minute, second))
    return _reg().get(calendar).date_to_world_time(date, epoch_override_seconds)

def explain(
    world_time: int,
    *,
    calendar: str = DEFAULT_CALENDAR,
    epoch_override_seconds: Optional[int] = None,
) -> Dict[str, Any]:
    return _reg().get(calendar).explain(world_time, epoch_override_seconds)

def year_info(year: int, *, calendar: str = DEFAULT_CALENDAR) -> Dict[str, Any]:
    return _reg().get(calendar).year_summary(year)

def moon_phases(
    year: int,
    month: int,
    day: int,
    *,
    moon: Optional[str] = None,
    calendar: str = DEFAULT_CALENDAR,
) -> List[MoonPhaseInfo]:
    return _reg().get(calendar).get_moon_phases(CalendarDate(year, month, day), moon)

def season(year: int, month: int, day: int, *, calendar: str = DEFAULT_CALENDAR) -> Optional[Season]:
    return _reg().get(calendar).get_season(CalendarDate(year, month, day))

def sun_times(year: int, month: int, day: int, *, calendar: str = DEFAULT_CALENDAR) -> SunTimes:
    return _reg().get(calendar).get_sun_times(CalendarDate(year, month, day))

# ============================================================
# Events
# ============================================================

def events_manager(
    *,
    calendar: str = DEFAULT_CALENDAR,
    world_settings: Optional[WorldEventSettings] = None,
) -> EventsManager:
    return EventsManager(_reg().get(calendar), world_settings=world_settings)

def events_for_date(
    year: int,
    month: int,
    day: int,
    *,
    calendar: str = DEFAULT_CALENDAR,
    world_settings: Optional[WorldEventSettings] = None,
) -> List[OccurrenceResult]:
    return events_manager(calendar=calendar, world_settings=world_settings).get_events_for_date(year, month, day)

def events_in_range(
    start: CalendarDate,
    end: CalendarDate,
    *,
    calendar: str = DEFAULT_CALENDAR,
    world_settings: Optional[WorldEventSettings] = None,
) -> List[OccurrenceResult]:
    mgr = events_manager(calendar=calendar, world_settings=world_settings)
    return mgr.get_events_in_range(start.year, start.month, start.day, end.year, end.month, end.day)

def next_occurrence(
    event_id: str,
    year: int,
    month: int,
    day: int,
    *,
    calendar: str = DEFAULT_CALENDAR,
    world_settings: Optional[WorldEventSettings] = None,
) -> Optional[OccurrenceResult]:
    mgr = events_manager(calendar=calendar, world_settings=world_settings)
    return mgr.get_next_occurrence(event_id, year, month, day)
