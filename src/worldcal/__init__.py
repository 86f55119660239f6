"""worldcal public API.

Keep this surface small: users should mostly interact with functions re-exported here.
"""

# Initialize registry on import
from . import api_init as _api_init  # noqa: F401

from .api import (
    to_date,
    to_world_time,
    explain,
    year_info,
    moon_phases,
    season,
    sun_times,
    list_calendars,
    calendar_info,
    get_engine,
    get_calendar,
    make_engine,
    register_calendar,
    load_calendar,
    events_manager,
    events_for_date,
    events_in_range,
    next_occurrence,
)
from .core.definition import CalendarDefinition, Season
from .core.errors import DefinitionError, InvalidDate, InvalidDateError, WorldcalError
from .core.loader import definition_from_dict, load_definition, validate_definition
from .core.types import CalendarDate, OccurrenceResult, SunTimes, TimeOfDay, WorldEventSettings
from .engines.calendar import CalendarEngine
from .engines.events import EventsManager

__all__ = [
    "to_date",
    "to_world_time",
    "explain",
    "year_info",
    "moon_phases",
    "season",
    "sun_times",
    "list_calendars",
    "calendar_info",
    "get_engine",
    "get_calendar",
    "make_engine",
    "register_calendar",
    "load_calendar",
    "events_manager",
    "events_for_date",
    "events_in_range",
    "next_occurrence",
    "CalendarDefinition",
    "Season",
    "SunTimes",
    "CalendarDate",
    "CalendarEngine",
    "EventsManager",
    "OccurrenceResult",
    "TimeOfDay",
    "WorldEventSettings",
    "WorldcalError",
    "DefinitionError",
    "InvalidDateError",
    "InvalidDate",
    "definition_from_dict",
    "load_definition",
    "validate_definition",
]
