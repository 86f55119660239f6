class WorldcalError(Exception):
    """Base error."""

class DefinitionError(WorldcalError, ValueError):
    """Raised when a calendar definition is structurally invalid."""

class InvalidDateError(WorldcalError, ValueError):
    """Raised when a date does not exist in the calendar (day 0, day past the month, unknown month)."""

# Short alias used by host integrations.
InvalidDate = InvalidDateError
