"""
Store wall-clock helpers.

All timestamps are stored as naive datetimes in the configured store
timezone, the same clock the shift windows are written in. These helpers are
the single place that reads the current time, so tests can patch them.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from storeledger.config import get_settings


def now_local(tz: Optional[ZoneInfo] = None) -> datetime:
    """Current wall-clock time in the store timezone, without tzinfo."""
    tz = tz or get_settings().tzinfo
    return datetime.now(tz).replace(tzinfo=None)


def start_of_day(moment: datetime) -> datetime:
    """Midnight at the beginning of ``moment``'s calendar day."""
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def seconds_until_next_run(now: datetime, hour: int, minute: int) -> float:
    """
    Seconds from ``now`` until the next ``hour:minute`` on the same clock.

    A slot exactly at ``now`` counts as already passed, so the result is
    always positive.
    """
    target = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if target <= now:
        target += timedelta(days=1)
    return (target - now).total_seconds()
