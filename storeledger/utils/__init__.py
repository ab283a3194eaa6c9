"""
==============================================================================
Utilities Package
==============================================================================

Modules:
--------
- clock: store wall-clock helpers
- work_time: work time parsing into shift windows

==============================================================================
"""

from .clock import now_local, seconds_until_next_run, start_of_day
from .work_time import ShiftWindow, parse_shift_window, shift_date

__all__ = [
    "now_local",
    "seconds_until_next_run",
    "start_of_day",
    "ShiftWindow",
    "parse_shift_window",
    "shift_date",
]
