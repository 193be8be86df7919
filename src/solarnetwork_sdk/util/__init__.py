"""
General utilities for the SolarNetwork Python SDK
"""

from .multimap import MultiMap
from .dates import (
    utc_now,
    ensure_utc,
    iso8601_date,
    http_date,
    floor_utc_day,
)

__all__ = [
    'MultiMap',
    'utc_now',
    'ensure_utc',
    'iso8601_date',
    'http_date',
    'floor_utc_day',
]
