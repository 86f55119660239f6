# tests/test_registry.py

import pytest

from worldcal.core.engine import CalendarRegistry
from worldcal.engines.calendar import CalendarEngine
from worldcal.engines.specs import ALL_SPECS


def test_registers_under_definition_id():
    reg = CalendarRegistry()
    assert reg.register(CalendarEngine(ALL_SPECS["harptos"])) == "harptos"
    assert "harptos" in reg
    assert reg.list() == ["harptos"]


def test_alias_shares_the_engine():
    eng = CalendarEngine(ALL_SPECS["novena"])
    reg = CalendarRegistry.from_engines([eng])
    reg.register(eng, "nine-months")
    assert reg.get("nine-months") is reg.get("novena")


def test_duplicate_needs_overwrite():
    reg = CalendarRegistry.from_engines([CalendarEngine(ALL_SPECS["gregorian"])])
    replacement = CalendarEngine(ALL_SPECS["gregorian"])
    with pytest.raises(KeyError, match="already exists"):
        reg.register(replacement)
    reg.register(replacement, overwrite=True)
    assert reg.get("gregorian") is replacement


def test_unknown_name_suggests_close_match():
    reg = CalendarRegistry.from_engines(CalendarEngine(d) for d in ALL_SPECS.values())
    with pytest.raises(KeyError, match="Did you mean 'harptos'"):
        reg.get("harptoss")
    with pytest.raises(KeyError, match="Available"):
        reg.get("zzz")
