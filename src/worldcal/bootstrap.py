from __future__ import annotations
from worldcal.core.engine import CalendarRegistry
from worldcal.engines.specs import ALL_SPECS
from worldcal.engines.factory import make_engine

def build_registry() -> CalendarRegistry:
    # Built-in specs are keyed by their own definition id.
    return CalendarRegistry.from_engines(make_engine(definition) for definition in ALL_SPECS.values())
