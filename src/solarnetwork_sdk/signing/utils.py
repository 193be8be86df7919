"""
Utility functions for request signing

This module provides the hashing, HMAC and encoding primitives used by the
SNWS2 authorization scheme.
"""

import base64
from typing import Any, Union
from urllib.parse import quote

from cryptography.hazmat.primitives import hashes, hmac

from .types import SigningError, SigningErrorCodes


def _to_bytes(data: Union[str, bytes]) -> bytes:
    return data.encode('utf-8') if isinstance(data, str) else data


def sha256(data: Union[str, bytes]) -> bytes:
    """
    Compute a SHA-256 digest.

    Args:
        data: Data to digest; strings are UTF-8 encoded

    Returns:
        bytes: The raw digest
    """
    digest = hashes.Hash(hashes.SHA256())
    digest.update(_to_bytes(data))
    return digest.finalize()


def hmac_sha256(key: Union[str, bytes], data: Union[str, bytes]) -> bytes:
    """
    Compute a HMAC-SHA256 message authentication code.

    Args:
        key: The HMAC key; strings are UTF-8 encoded
        data: The message; strings are UTF-8 encoded

    Returns:
        bytes: The raw MAC
    """
    mac = hmac.HMAC(_to_bytes(key), hashes.SHA256())
    mac.update(_to_bytes(data))
    return mac.finalize()


def to_hex(data: bytes) -> str:
    """
    Convert bytes to lowercase hex string.

    Args:
        data: Bytes to convert

    Returns:
        str: Lowercase hex string
    """
    return data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hex string to bytes.

    Args:
        hex_string: Hex string to convert

    Returns:
        bytes: Converted bytes

    Raises:
        SigningError: If hex string is invalid
    """
    try:
        return bytes.fromhex(hex_string)
    except ValueError as e:
        raise SigningError(
            f"Invalid hex string: {e}",
            SigningErrorCodes.INVALID_DIGEST,
            {"hex_string": hex_string}
        )


def to_base64(data: bytes) -> str:
    return base64.b64encode(data).decode('ascii')


def percent_encode(value: Any) -> str:
    """
    Percent-encode a query parameter key or value.

    Every character other than ``A-Z a-z 0-9 - _ . ~`` is escaped as UTF-8
    with upper-case hex digits, which includes ``! ' ( ) *``.

    Args:
        value: Value to encode; booleans render as ``true`` or ``false`` and
            other non-string values via ``str()``

    Returns:
        str: The encoded value
    """
    if isinstance(value, bool):
        value = 'true' if value else 'false'
    elif not isinstance(value, str):
        value = str(value)
    return quote(value, safe='')


def normalize_header_name(name: str) -> str:
    """
    Normalize header name to lowercase for consistent processing.

    Args:
        name: Header name to normalize

    Returns:
        str: Lowercase header name
    """
    return name.lower().strip()
