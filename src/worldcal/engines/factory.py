"""
worldcal.engines.factory
------------------------
Transforms pure data definitions into live, executable engine objects.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from ..core.definition import CalendarDefinition
from ..core.loader import definition_from_dict
from ..core.types import WorldEventSettings
from .calendar import CalendarEngine
from .events import EventsManager


def build_calendar_engine(definition: CalendarDefinition) -> CalendarEngine:
    """Transforms a pure data CalendarDefinition into a live CalendarEngine."""
    if not isinstance(definition, CalendarDefinition):
        raise TypeError(f"Expected a CalendarDefinition, got {type(definition)}")
    return CalendarEngine(definition)


def make_engine(definition: Union[CalendarDefinition, Mapping[str, Any]]) -> CalendarEngine:
    """The universal entry point. Accepts a definition or its JSON mapping."""
    if isinstance(definition, Mapping):
        definition = definition_from_dict(definition)
    return build_calendar_engine(definition)


def make_events_manager(
    engine: CalendarEngine,
    world_settings: Optional[WorldEventSettings] = None,
) -> EventsManager:
    return EventsManager(engine, world_settings=world_settings)
