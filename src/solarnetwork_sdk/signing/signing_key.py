"""
SNWS2 signing key derivation

A signing key is derived from the token secret and a signing date:

    HMAC-SHA256(HMAC-SHA256("SNWS2" + secret, yyyyMMdd), "snws2_request")

and may be reused until midnight UTC of the seventh day after the signing
date, so the token secret itself need not be kept around.
"""

from datetime import datetime, timedelta
from typing import Optional

from ..util.dates import ensure_utc, floor_utc_day, iso8601_date, utc_now
from .types import (
    SIGNING_KEY_VALIDITY_DAYS,
    SNWS2_AUTH_SCHEME,
    SNWS2_REQUEST_MESSAGE,
    SigningKey,
)
from .utils import hmac_sha256


def derive_signing_key(token_secret: str, signing_date: datetime) -> SigningKey:
    """
    Derive a signing key from a token secret.

    Args:
        token_secret: The token secret
        signing_date: The date to derive the key for; only the UTC day is used

    Returns:
        bytes: The signing key
    """
    date_key = hmac_sha256(SNWS2_AUTH_SCHEME + token_secret, iso8601_date(signing_date))
    return hmac_sha256(date_key, SNWS2_REQUEST_MESSAGE)


def signing_key_expiration(signing_date: datetime) -> datetime:
    """
    Get the expiration date of a signing key.

    Args:
        signing_date: The date the key was derived for

    Returns:
        datetime: Midnight UTC of the day seven days after ``signing_date``
    """
    return floor_utc_day(ensure_utc(signing_date) + timedelta(days=SIGNING_KEY_VALIDITY_DAYS))


def is_signing_key_valid(
    key: Optional[SigningKey],
    expiration: Optional[datetime],
    now: Optional[datetime] = None
) -> bool:
    """
    Test if a signing key is present and not expired.

    Args:
        key: The signing key
        expiration: The key expiration date
        now: The date to test at; defaults to the current time

    Returns:
        bool: True if ``key`` is set and ``now`` is before ``expiration``
    """
    if not key or expiration is None:
        return False
    return ensure_utc(now or utc_now()) < expiration
