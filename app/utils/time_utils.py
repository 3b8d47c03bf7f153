# app/utils/time_utils.py
"""UTC helpers shared by the scheduling and booking services"""
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Union


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(value: datetime) -> datetime:
    """Convert to an aware UTC datetime. Naive values are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def utc_date(value: Union[date, datetime]) -> date:
    """Calendar date of a value in UTC. Plain dates are returned unchanged."""
    if isinstance(value, datetime):
        return to_utc(value).date()
    return value


def start_of_day(day: date) -> datetime:
    """Midnight UTC of the given calendar date"""
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def time_to_offset(value: time) -> timedelta:
    """Offset of a time-of-day from midnight"""
    return timedelta(hours=value.hour, minutes=value.minute, seconds=value.second,
                     microseconds=value.microsecond)


def format_utc(value: Optional[datetime]) -> Optional[str]:
    return to_utc(value).isoformat() if value else None
