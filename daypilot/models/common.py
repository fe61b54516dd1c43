# File: daypilot/models/common.py

from datetime import datetime, date, time, timedelta
from typing import Optional, Union

import pytz


def parse_iso_datetime(date_str: Optional[str]) -> Optional[datetime]:
    """Robustly parse ISO date strings with 'Z' or offsets."""
    if not date_str:
        return None
    if isinstance(date_str, datetime):
        return date_str
    try:
        # fromisoformat on Python < 3.11 does not accept a trailing 'Z'
        clean_str = date_str.replace('Z', '+00:00')
        return datetime.fromisoformat(clean_str)
    except ValueError:
        # Fallback for simple date strings without time
        try:
            return datetime.strptime(date_str, "%Y-%m-%d")
        except ValueError:
            return None


def parse_iso_date(value: Union[str, date, datetime, None]) -> Optional[date]:
    """Parse a calendar date from 'YYYY-MM-DD' or a full ISO timestamp."""
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value.split('T')[0])
    except ValueError:
        return None


def parse_hhmm(value: str) -> int:
    """
    Convert an 'HH:MM' (or 'HH:MM:SS') time string to a minute of day.

    '24:00' is accepted and maps to 1440 so that a window can end at midnight.
    """
    parts = value.strip().split(':')
    if len(parts) < 2:
        raise ValueError(f"Invalid time string: {value!r}")
    hours, minutes = int(parts[0]), int(parts[1])
    if not (0 <= hours <= 24 and 0 <= minutes < 60) or (hours == 24 and minutes):
        raise ValueError(f"Invalid time string: {value!r}")
    return hours * 60 + minutes


def format_hhmm(value: Union[int, datetime, time]) -> str:
    """Format a minute of day or a (local) datetime as 24-hour 'HH:MM'."""
    if isinstance(value, (datetime, time)):
        return f"{value.hour:02d}:{value.minute:02d}"
    return f"{value // 60:02d}:{value % 60:02d}"


def minute_of_day(moment: datetime) -> int:
    """Minutes elapsed since local midnight for an already-localised datetime."""
    return moment.hour * 60 + moment.minute


def get_timezone(tz):
    """Accept a zone name or a tzinfo and return a tzinfo."""
    if isinstance(tz, str):
        return pytz.timezone(tz)
    return tz


def localize(naive: datetime, tz) -> datetime:
    """Attach a zone to a wall-clock datetime, resolving DST the pytz way."""
    tz = get_timezone(tz)
    if hasattr(tz, 'localize'):
        return tz.localize(naive)
    return naive.replace(tzinfo=tz)


def local_time(day: date, minute: int, tz) -> datetime:
    """
    Aware datetime for a minute of day on `day` in `tz`.

    Minute 1440 is next midnight. The wall clock is localised after the
    arithmetic so DST transition days keep their local times.
    """
    naive = datetime.combine(day, time.min) + timedelta(minutes=minute)
    return localize(naive, tz)
