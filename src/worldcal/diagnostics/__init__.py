"""Diagnostics package.

- round_trip, year_table, month_grid: always available, plain-text output
- weekday_drift: optional (requires the diagnostics extras: numpy, matplotlib)
"""

__all__ = ["round_trip", "year_table", "month_grid", "weekday_drift"]
