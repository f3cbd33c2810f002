"""
Helpers for the fixed UTC+5:30 offset (IST) used to schedule and display tests.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional

IST_OFFSET = timedelta(hours=5, minutes=30)
IST = timezone(IST_OFFSET, "IST")


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Return an aware UTC datetime. Naive values coming back from
    MongoDB are already UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_ist_iso(value: Optional[datetime]) -> Optional[str]:
    value = as_utc(value)
    if value is None:
        return None
    return value.astimezone(IST).isoformat(timespec="seconds")


def to_utc_iso(value: Optional[datetime]) -> Optional[str]:
    value = as_utc(value)
    if value is None:
        return None
    return value.isoformat(timespec="seconds").replace("+00:00", "Z")


def ist_day_bounds(day: date):
    """UTC instants for 00:00:00 and 23:59:59 IST on the given calendar day."""
    start = datetime.combine(day, time(0, 0, 0), tzinfo=IST)
    end = datetime.combine(day, time(23, 59, 59), tzinfo=IST)
    return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


def parse_ist_wall_clock(value: str) -> datetime:
    """
    Parse an ISO-8601 string into a UTC instant.

    Naive and UTC-designated values are read as IST wall-clock time and
    shifted back by 5:30. Values with any other explicit offset are
    already true instants. Raises ValueError when unparseable.
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None or parsed.utcoffset() == timedelta(0):
        wall_clock = parsed.replace(tzinfo=None)
        return (wall_clock - IST_OFFSET).replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
