from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import List, Tuple

from dateutil.relativedelta import relativedelta


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def month_start(value: datetime) -> datetime:
    return _as_utc(value).replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def week_start(value: datetime) -> datetime:
    """Monday 00:00 UTC of the ISO week containing ``value``."""
    day = _as_utc(value).replace(hour=0, minute=0, second=0, microsecond=0)
    return day - timedelta(days=day.weekday())


def add_months(value: datetime, months: int) -> datetime:
    # relativedelta clamps the day to the end of shorter months.
    return value + relativedelta(months=months)


def trailing_months(periods: int, now: datetime | None = None) -> List[Tuple[datetime, datetime]]:
    """Half-open ``[start, end)`` windows for the last ``periods`` months, oldest first."""
    current = month_start(now or utc_now())
    windows: List[Tuple[datetime, datetime]] = []
    for offset in range(max(0, int(periods)) - 1, -1, -1):
        start = add_months(current, -offset)
        windows.append((start, add_months(start, 1)))
    return windows


def month_label(value: datetime) -> str:
    return value.strftime("%b %Y")
