"""
SolarNetwork Python SDK - Request Signing Module

SNWS2 HTTP authorization implementation. This module computes the
``Authorization`` header values required by SolarNetwork's token-protected
API endpoints.
"""

from .types import (
    RequestDescriptor,
    SigningCredential,
    SigningError,
    SigningErrorCodes,
    SigningKey,
    EMPTY_STRING_SHA256_HEX,
    SNWS2_AUTH_SCHEME,
    SNWS2_SIGNATURE_ALGORITHM,
    SIGNING_KEY_VALIDITY_DAYS,
)

from .auth_v2 import AuthorizationV2Builder

from .canonical_request import (
    CanonicalRequestBuilder,
    build_canonical_request,
    canonical_content_sha256,
    canonical_header_names,
    canonical_headers,
    canonical_query_parameters,
    canonical_signed_header_names,
    compute_signature_data,
)

from .signing_key import (
    derive_signing_key,
    signing_key_expiration,
    is_signing_key_valid,
)

from .utils import (
    percent_encode,
    sha256,
    hmac_sha256,
    to_hex,
    from_hex,
)

from .integration import (
    SNWS2Auth,
    SigningSession,
    create_signing_session,
    form_parameters,
)

# Public API exports
__all__ = [
    # Core signing functionality
    'AuthorizationV2Builder',
    'CanonicalRequestBuilder',
    'build_canonical_request',
    'canonical_content_sha256',
    'canonical_header_names',
    'canonical_headers',
    'canonical_query_parameters',
    'canonical_signed_header_names',
    'compute_signature_data',
    # Signing keys
    'derive_signing_key',
    'signing_key_expiration',
    'is_signing_key_valid',
    # Types
    'RequestDescriptor',
    'SigningCredential',
    'SigningError',
    'SigningErrorCodes',
    'SigningKey',
    'EMPTY_STRING_SHA256_HEX',
    'SNWS2_AUTH_SCHEME',
    'SNWS2_SIGNATURE_ALGORITHM',
    'SIGNING_KEY_VALIDITY_DAYS',
    # Utilities
    'percent_encode',
    'sha256',
    'hmac_sha256',
    'to_hex',
    'from_hex',
    # HTTP Integration
    'SNWS2Auth',
    'SigningSession',
    'create_signing_session',
    'form_parameters',
]
