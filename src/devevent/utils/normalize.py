from __future__ import annotations

import re

import pandas as pd

from devevent.errors import InvalidDateFormat, InvalidTimeFormat

# "9:00", "14:30", "2:30 PM", "12:00am"
_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})\s*(AM|PM)?$")


def normalize_date(raw: str) -> str:
    """
    Parse a free-form date and return it as YYYY-MM-DD.

    Timezone-aware inputs are converted to UTC before the date part is taken;
    naive inputs are taken as written.
    """
    if raw is None or not str(raw).strip():
        raise InvalidDateFormat(raw)
    try:
        ts = pd.to_datetime(str(raw).strip())
    except (ValueError, TypeError, OverflowError) as e:
        raise InvalidDateFormat(raw) from e
    if pd.isna(ts):
        raise InvalidDateFormat(raw)
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC")
    return ts.date().isoformat()


def normalize_time(raw: str) -> str:
    """
    Normalize "H:MM", "HH:MM" or either with an AM/PM suffix to 24-hour HH:MM.
    Hours must be 1-12 with a suffix and 0-23 without one.
    """
    if raw is None:
        raise InvalidTimeFormat(raw)
    match = _TIME_RE.match(str(raw).strip().upper())
    if not match:
        raise InvalidTimeFormat(raw)

    hours = int(match.group(1))
    minutes = int(match.group(2))
    period = match.group(3)

    if minutes > 59:
        raise InvalidTimeFormat(raw)
    if period:
        if not 1 <= hours <= 12:
            raise InvalidTimeFormat(raw)
        if period == "PM" and hours < 12:
            hours += 12
        elif period == "AM" and hours == 12:
            hours = 0
    elif hours > 23:
        raise InvalidTimeFormat(raw)

    return f"{hours:02d}:{minutes:02d}"
