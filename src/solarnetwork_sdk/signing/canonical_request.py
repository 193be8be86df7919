"""
Canonical request construction for the SNWS2 authorization scheme

The canonical request is a deterministic rendering of the signed parts of an
HTTP request. It must match, byte for byte, what the server computes from
the request it receives:

    <method>
    <path>
    <canonical query string>
    <header name>:<header value>     (one line per signed header)
    <signed header names>
    <hex SHA-256 of the body>
"""

from datetime import datetime
from typing import Iterable, List, Optional

from ..net.http_headers import HttpHeaders
from ..util.dates import http_date, iso8601_date
from ..util.multimap import MultiMap
from .types import (
    EMPTY_STRING_SHA256_HEX,
    SNWS2_SIGNATURE_ALGORITHM,
    RequestDescriptor,
)
from .utils import normalize_header_name, percent_encode, sha256, to_hex

# Header names whose values are always rendered from the request date
DATE_HEADER_NAMES = frozenset(('date', 'x-sn-date'))


def uses_sn_date(headers: HttpHeaders, signed_header_names: Optional[Iterable[str]]) -> bool:
    """
    Test if the ``X-SN-Date`` header is used instead of ``Date``.

    Args:
        headers: The request headers
        signed_header_names: Optional additional signed header names

    Returns:
        bool: True if ``X-SN-Date`` is in the signed header names or headers
    """
    x_sn_date = HttpHeaders.X_SN_DATE.lower()
    if signed_header_names and any(n.lower() == x_sn_date for n in signed_header_names):
        return True
    return headers.contains_key(HttpHeaders.X_SN_DATE)


def canonical_header_names(
    headers: HttpHeaders,
    signed_header_names: Optional[Iterable[str]] = None,
    use_sn_date: Optional[bool] = None
) -> List[str]:
    """
    Compute the header names to include in the signature.

    ``Host`` and one of ``Date`` or ``X-SN-Date`` are always included;
    ``Content-MD5``, ``Content-Type`` and ``Digest`` are included when present
    in ``headers``.

    Args:
        headers: The request headers
        signed_header_names: Optional additional header names to sign
        use_sn_date: Whether to sign ``X-SN-Date`` rather than ``Date``; if
            None this is determined by ``uses_sn_date()``

    Returns:
        list: The sorted, lower-cased header names
    """
    if use_sn_date is None:
        use_sn_date = uses_sn_date(headers, signed_header_names)

    # the map drops duplicate names case-insensitively
    names = MultiMap()
    names.put(HttpHeaders.HOST, True)
    names.put(HttpHeaders.X_SN_DATE if use_sn_date else HttpHeaders.DATE, True)
    for name in (HttpHeaders.CONTENT_MD5, HttpHeaders.CONTENT_TYPE, HttpHeaders.DIGEST):
        if headers.contains_key(name):
            names.put(name, True)
    if signed_header_names:
        for name in signed_header_names:
            names.put(name, True)
    return sorted(normalize_header_name(n) for n in names.key_set())


def canonical_query_parameters(parameters: MultiMap) -> str:
    """
    Compute the canonical query string.

    Keys are sorted, and each key's values are kept in insertion order.

    Args:
        parameters: The query parameters

    Returns:
        str: The canonical query string, empty if there are no parameters
    """
    pairs = []
    for key in sorted(parameters.key_set()):
        for value in parameters.values(key) or []:
            pairs.append(f"{percent_encode(key)}={percent_encode(value)}")
    return '&'.join(pairs)


def canonical_headers(
    sorted_lowercase_header_names: List[str],
    headers: HttpHeaders,
    request_date: datetime
) -> str:
    """
    Compute the canonical headers block.

    Each header renders as ``name:value`` followed by a newline. Values are
    trimmed but internal whitespace is preserved. The ``date`` and
    ``x-sn-date`` headers always render ``request_date``, ignoring any value
    in ``headers``.

    Args:
        sorted_lowercase_header_names: The header names to render
        headers: The request headers
        request_date: The request date

    Returns:
        str: The canonical headers, including the trailing newline
    """
    lines = []
    for name in sorted_lowercase_header_names:
        if name in DATE_HEADER_NAMES:
            value = http_date(request_date)
        else:
            value = headers.first_value(name)
        lines.append(f"{name}:{str(value).strip() if value is not None else ''}\n")
    return ''.join(lines)


def canonical_signed_header_names(sorted_lowercase_header_names: List[str]) -> str:
    return ';'.join(sorted_lowercase_header_names)


def canonical_content_sha256(content_digest: Optional[bytes]) -> str:
    """Get the hex-encoded body digest, or the empty string digest when not set."""
    return to_hex(content_digest) if content_digest is not None else EMPTY_STRING_SHA256_HEX


def build_canonical_request(
    request: RequestDescriptor,
    sorted_lowercase_header_names: Optional[List[str]] = None
) -> str:
    """
    Build the canonical request data for a request.

    Args:
        request: The request to render
        sorted_lowercase_header_names: The header names to sign; computed via
            ``canonical_header_names()`` if not provided

    Returns:
        str: The canonical request data
    """
    if sorted_lowercase_header_names is None:
        sorted_lowercase_header_names = canonical_header_names(
            request.headers, request.signed_header_names
        )
    return (
        f"{request.method}\n"
        f"{request.path}\n"
        f"{canonical_query_parameters(request.parameters)}\n"
        f"{canonical_headers(sorted_lowercase_header_names, request.headers, request.request_date)}"
        f"{canonical_signed_header_names(sorted_lowercase_header_names)}\n"
        f"{canonical_content_sha256(request.content_digest)}"
    )


def compute_signature_data(canonical_request: str, request_date: datetime) -> str:
    """
    Compute the data to be signed by the signing key.

    The data takes this form:

        SNWS2-HMAC-SHA256
        20170301T120000Z
        Hex(SHA256(canonical_request))

    Args:
        canonical_request: The canonical request data
        request_date: The request date

    Returns:
        str: The data to sign
    """
    return (
        f"{SNWS2_SIGNATURE_ALGORITHM}\n"
        f"{iso8601_date(request_date, include_time=True)}\n"
        f"{to_hex(sha256(canonical_request))}"
    )


class CanonicalRequestBuilder:
    """
    Canonical request builder for a single request descriptor
    """

    def __init__(self, request: RequestDescriptor):
        self.request = request

    def header_names(self) -> List[str]:
        return canonical_header_names(self.request.headers, self.request.signed_header_names)

    def build(self, sorted_lowercase_header_names: Optional[List[str]] = None) -> str:
        return build_canonical_request(self.request, sorted_lowercase_header_names)

    def signature_data(self, canonical_request: Optional[str] = None) -> str:
        if canonical_request is None:
            canonical_request = self.build()
        return compute_signature_data(canonical_request, self.request.request_date)
