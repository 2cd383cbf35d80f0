from __future__ import annotations

import re
from typing import Any


_INTERVAL_PATTERN = re.compile(r"(?:(\d+)\s+days?\s+)?(\d{2}):(\d{2}):(\d{2})")


def interval_to_hours(value: Any) -> float:
    """Convert a database interval such as ``"1 day 02:30:00"`` to hours.

    Absent or unrecognized values count as zero hours.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)

    match = _INTERVAL_PATTERN.search(str(value))
    if not match:
        return 0.0

    days, hours, minutes, seconds = match.groups()
    return int(days or 0) * 24 + int(hours) + int(minutes) / 60.0 + int(seconds) / 3600.0
