"""
==============================================================================
Work Time Parsing Module
==============================================================================

Turns a time card's date parts and "HH:MM~HH:MM" work time into concrete
start and end datetimes.

Midnight Rule:
-------------
Clients write midnight as hour 24.

- start hour 24 → 00:MM on the card's own date
- end hour 24   → 00:MM on the day after the (normalized) start date

    "22:00~24:00" on 2023-03-01 → 2023-03-01 22:00 .. 2023-03-02 00:00
    "24:00~08:00" on 2023-03-01 → 2023-03-01 00:00 .. 2023-03-01 08:00

After normalization the start must be strictly before the end.

==============================================================================
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple

from storeledger.core.exceptions import ParseError


SPAN_SEPARATOR = "~"
MIDNIGHT_HOUR = 24

_CLOCK_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")


@dataclass(frozen=True)
class ShiftWindow:
    """Concrete start/end of one shift."""

    start: datetime
    end: datetime

    def is_active_at(self, reference: datetime) -> bool:
        """
        Whether the shift counts as current for ``reference``.

        True when the shift starts exactly at ``reference`` or later within
        the following 24 hours. Shifts already under way are not active.
        """
        if reference == self.start:
            return True
        return reference < self.start and reference + timedelta(days=1) > self.start


def _parse_clock(token: str, work_time: str) -> Tuple[int, int]:
    match = _CLOCK_PATTERN.match(token.strip())
    if not match:
        raise ParseError(f"Invalid time '{token}' in work time", work_time)

    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > MIDNIGHT_HOUR or minute > 59:
        raise ParseError(f"Time out of range '{token}' in work time", work_time)
    return hour, minute


def shift_date(year: str, month: str, day: str) -> Optional[date]:
    """The time card's calendar date, or None if the parts are not a date."""
    try:
        return date(int(year), int(month), int(day))
    except (TypeError, ValueError):
        return None


def _parse_date(year: str, month: str, day: str, work_time: str) -> date:
    card_date = shift_date(year, month, day)
    if card_date is None:
        raise ParseError(
            f"Invalid shift date {year}-{month}-{day}",
            work_time,
            {"year": year, "month": month, "day": day}
        )
    return card_date


def parse_shift_window(year: str, month: str, day: str, work_time: str) -> ShiftWindow:
    """
    Build the ShiftWindow for a time card.

    Args:
        year: Four digit year string
        month: Month string, with or without zero padding
        day: Day string, with or without zero padding
        work_time: "H:MM~H:MM" / "HH:MM~HH:MM"; hour 24 means midnight

    Returns:
        ShiftWindow with naive datetimes on the store clock

    Raises:
        ParseError: Missing separator, bad tokens, impossible date, or an
            end that is not after the start
    """
    if not work_time or work_time.count(SPAN_SEPARATOR) != 1:
        raise ParseError("Work time must look like 'HH:MM~HH:MM'", work_time)

    start_token, end_token = work_time.split(SPAN_SEPARATOR)
    start_hour, start_minute = _parse_clock(start_token, work_time)
    end_hour, end_minute = _parse_clock(end_token, work_time)

    start_date = _parse_date(year, month, day, work_time)

    if start_hour == MIDNIGHT_HOUR:
        start_hour = 0

    end_date = start_date
    if end_hour == MIDNIGHT_HOUR:
        end_hour = 0
        end_date = start_date + timedelta(days=1)

    start = datetime.combine(start_date, time(start_hour, start_minute))
    end = datetime.combine(end_date, time(end_hour, end_minute))

    if start >= end:
        raise ParseError(
            "Shift must end after it starts",
            work_time,
            {"start": start.isoformat(), "end": end.isoformat()}
        )

    return ShiftWindow(start=start, end=end)
