"""
worldcal.engines.weeks
----------------------
Week-of-month partitioning. A month is cut into blocks of `days_per_week`
days; the days past `per_month` full blocks follow the remainder policy.
"""

from __future__ import annotations

from typing import Optional

from ..core.definition import WeekConfig
from ..core.types import WeekInfo


def ordinal(n: int) -> str:
    """1 -> '1st', 2 -> '2nd', 11 -> '11th', 23 -> '23rd'."""
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def week_of_month(weeks: Optional[WeekConfig], weekday_count: int, day: int, month_length: int) -> Optional[int]:
    if weeks is None or weeks.type == "year-based":
        return None

    dpw = weeks.days_per_week or weekday_count
    per_month = weeks.per_month if weeks.per_month is not None else max(1, month_length // dpw)

    if day > per_month * dpw:
        if weeks.remainder_handling == "extend-last":
            return per_month
        if weeks.remainder_handling == "none":
            return None
        return per_month + 1
    return (day - 1) // dpw + 1


def week_info(weeks: Optional[WeekConfig], week: Optional[int]) -> Optional[WeekInfo]:
    if weeks is None or week is None:
        return None

    if 0 < week <= len(weeks.names):
        w = weeks.names[week - 1]
        return WeekInfo(name=w.name, abbreviation=w.abbreviation, description=w.description)

    if weeks.naming_pattern == "ordinal":
        return WeekInfo(name=f"{ordinal(week)} Week", abbreviation=str(week))
    if weeks.naming_pattern == "numeric":
        return WeekInfo(name=f"Week {week}", abbreviation=str(week))
    return None
