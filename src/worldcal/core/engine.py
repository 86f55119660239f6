from __future__ import annotations
import difflib
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Protocol

from .definition import CalendarDefinition
from .types import CalendarDate

class CalendarEngine(Protocol):
    definition: CalendarDefinition

    def info(self) -> Dict[str, Any]: ...
    def world_time_to_date(self, world_time: int, epoch_override_seconds: Optional[int] = None) -> CalendarDate: ...
    def date_to_world_time(self, date: CalendarDate, epoch_override_seconds: Optional[int] = None) -> int: ...
    def explain(self, world_time: int, epoch_override_seconds: Optional[int] = None) -> Dict[str, Any]: ...

@dataclass
class CalendarRegistry:
    """
    Engines by calendar name. A name defaults to the engine's definition id;
    registering under another name keeps an alias of the same engine.
    """
    _engines: Dict[str, CalendarEngine] = field(default_factory=dict)

    @classmethod
    def from_engines(cls, engines: Iterable[CalendarEngine]) -> "CalendarRegistry":
        reg = cls()
        for eng in engines:
            reg.register(eng)
        return reg

    def get(self, name: str) -> CalendarEngine:
        if name not in self._engines:
            close = difflib.get_close_matches(name, self._engines, n=1)
            hint = f" Did you mean '{close[0]}'?" if close else ""
            raise KeyError(f"Unknown calendar '{name}'.{hint} Available: {sorted(self._engines)}")
        return self._engines[name]

    def list(self) -> List[str]:
        return sorted(self._engines.keys())

    def __contains__(self, name: object) -> bool:
        return name in self._engines

    def register(self, engine: CalendarEngine, name: Optional[str] = None, *, overwrite: bool = False) -> str:
        """Add `engine` under `name` (default: its definition id) and return the name used."""
        key = name if name is not None else engine.definition.id
        if not key:
            raise ValueError("Calendar engine has no definition id; pass a name")
        if (not overwrite) and (key in self._engines):
            raise KeyError(f"Calendar '{key}' already exists. Use overwrite=True to replace.")
        self._engines[key] = engine
        return key
