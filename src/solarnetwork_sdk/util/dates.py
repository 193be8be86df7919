"""
Date helpers used by the SNWS2 authorization scheme

All values are rendered in UTC. Naive datetimes are interpreted as UTC.
"""

from datetime import datetime, timezone
from email.utils import format_datetime


def utc_now() -> datetime:
    """Get the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """
    Convert a datetime to an aware UTC datetime.
    
    Args:
        value: Datetime to convert; naive values are assumed to already be UTC
        
    Returns:
        datetime: Aware datetime in the UTC timezone
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def iso8601_date(value: datetime, include_time: bool = False) -> str:
    """
    Format a date in the ISO 8601 basic format.
    
    Args:
        value: Date to format
        include_time: If True, render as ``yyyyMMdd'T'HHmmss'Z'``, otherwise
            as ``yyyyMMdd``
        
    Returns:
        str: Formatted date string, e.g. ``20170425`` or ``20170425T143000Z``
    """
    value = ensure_utc(value)
    if include_time:
        return value.strftime('%Y%m%dT%H%M%SZ')
    return value.strftime('%Y%m%d')


def http_date(value: datetime) -> str:
    """
    Format a date as a HTTP date header value, e.g. ``Tue, 25 Apr 2017 14:30:00 GMT``.
    """
    return format_datetime(ensure_utc(value), usegmt=True)


def floor_utc_day(value: datetime) -> datetime:
    """Truncate a date to midnight of its UTC day."""
    return ensure_utc(value).replace(hour=0, minute=0, second=0, microsecond=0)
