from __future__ import annotations

import logging
import re
from typing import Tuple

from .definition import TimeConfig
from .types import TimeOfDay

logger = logging.getLogger(__name__)

_START_TIME_RE = re.compile(r"^(\d+)(?::(\d+)(?::(\d+))?)?$")
_DURATION_RE = re.compile(r"^(\d+)([smhdw])$")


def split_seconds(seconds: int, spd: int) -> Tuple[int, int]:
    """Floor-split world seconds into (whole days, seconds into the day); works for negatives."""
    return seconds // spd, seconds % spd


def time_of_day(seconds_in_day: int, t: TimeConfig) -> TimeOfDay:
    hour, rest = divmod(seconds_in_day, t.seconds_per_hour)
    minute, second = divmod(rest, t.seconds_in_minute)
    return TimeOfDay(hour, minute, second)


def seconds_of_time(tod: TimeOfDay, t: TimeConfig) -> int:
    return tod.hour * t.seconds_per_hour + tod.minute * t.seconds_in_minute + tod.second


def parse_start_time(s: str | None, t: TimeConfig) -> TimeOfDay:
    """
    Parse an event start time "hh", "hh:mm" or "hh:mm:ss".
    Missing or malformed values fall back to midnight.
    """
    if not s:
        return TimeOfDay()
    m = _START_TIME_RE.match(s.strip())
    if not m:
        logger.warning("Invalid event start time format %r, using 00:00:00", s)
        return TimeOfDay()

    hour = int(m.group(1))
    minute = int(m.group(2) or 0)
    second = int(m.group(3) or 0)

    if hour >= t.hours_in_day or minute >= t.minutes_in_hour or second >= t.seconds_in_minute:
        logger.warning(
            "Event start time %r out of range for a %d:%d:%d day, using 00:00:00",
            s, t.hours_in_day, t.minutes_in_hour, t.seconds_in_minute,
        )
        return TimeOfDay()
    return TimeOfDay(hour, minute, second)


def parse_duration(s: str | None, t: TimeConfig, days_per_week: int = 7) -> int:
    """
    Parse an event duration "<int><unit>" into seconds.
    Units: s, m, h, d, w (calendar weeks). Absent or malformed -> one day.
    """
    one_day = t.seconds_per_day
    if not s:
        return one_day
    m = _DURATION_RE.match(s.strip())
    if not m:
        logger.warning("Invalid event duration format %r, using 1d", s)
        return one_day

    amount = int(m.group(1))
    unit = m.group(2)
    scale = {
        "s": 1,
        "m": t.seconds_in_minute,
        "h": t.seconds_per_hour,
        "d": one_day,
        "w": one_day * days_per_week,
    }[unit]
    return amount * scale
