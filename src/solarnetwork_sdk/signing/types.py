"""
Type definitions for request signing functionality

This module provides type definitions and data classes for the SolarNetwork
SNWS2 HTTP authorization scheme.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..net.http_headers import HttpHeaders, HttpMethod
from ..util.dates import utc_now
from ..util.multimap import MultiMap

# The SolarNetwork V2 authorization scheme name
SNWS2_AUTH_SCHEME = "SNWS2"

# The algorithm identifier that starts the data to sign
SNWS2_SIGNATURE_ALGORITHM = "SNWS2-HMAC-SHA256"

# The fixed message used in the final step of signing key derivation
SNWS2_REQUEST_MESSAGE = "snws2_request"

# Hex-encoded SHA-256 digest of the empty string
EMPTY_STRING_SHA256_HEX = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

# Number of days a signing key remains valid, rounded down to whole UTC days
SIGNING_KEY_VALIDITY_DAYS = 7


@dataclass
class RequestDescriptor:
    """
    The request attributes that are covered by a SNWS2 signature

    Attributes:
        method: HTTP method (verb)
        path: Request path, exactly as it will appear on the wire
        request_date: Date of the request, also used to derive signing keys
        parameters: Query (or form) parameters
        headers: HTTP headers
        content_digest: Optional raw SHA-256 digest of the request body
        signed_header_names: Optional additional header names to sign
    """
    method: str = HttpMethod.GET.value
    path: str = "/"
    request_date: datetime = field(default_factory=utc_now)
    parameters: MultiMap = field(default_factory=MultiMap)
    headers: HttpHeaders = field(default_factory=HttpHeaders)
    content_digest: Optional[bytes] = None
    signed_header_names: Optional[List[str]] = None


@dataclass
class SigningCredential:
    """
    A saved signing key

    Attributes:
        key: The derived signing key
        expiration: Date after which the key is no longer valid
    """
    key: bytes
    expiration: datetime


class SigningError(Exception):
    """
    Error class for signing operations

    Attributes:
        message: Error message
        code: Error code for programmatic handling
        details: Optional additional error details
    """

    def __init__(
        self,
        message: str,
        code: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (code: {self.code}, details: {self.details})"
        return f"{self.message} (code: {self.code})"

    def __repr__(self) -> str:
        return f"SigningError(message='{self.message}', code='{self.code}', details={self.details})"


class SigningErrorCodes:
    """Standard error codes for signing operations"""

    # Key errors
    MISSING_SIGNING_KEY = "MISSING_SIGNING_KEY"
    INVALID_KEY = "INVALID_KEY"

    # Request errors
    INVALID_URL = "INVALID_URL"
    INVALID_DIGEST = "INVALID_DIGEST"

    # Signing errors
    SIGNING_FAILED = "SIGNING_FAILED"


# Type alias for derived signing keys
SigningKey = bytes
