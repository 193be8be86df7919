"""
SolarNetwork Python SDK
SNWS2 request authentication for the SolarNetwork API
"""

from .version import __version__
from .exceptions import (
    SolarNetworkSDKError,
    ValidationError,
    ConfigurationError,
)
from .config import (
    Environment,
    load_environment_from_json,
    load_environment_from_file,
)
from .net import (
    HttpHeaders,
    HttpMethod,
    HttpContentType,
    url_query_parse,
    url_query_encode,
)
from .util import MultiMap
from .signing import (
    AuthorizationV2Builder,
    SigningError,
    SigningErrorCodes,
    SNWS2Auth,
    SigningSession,
    create_signing_session,
)

__all__ = [
    '__version__',
    # Exceptions
    'SolarNetworkSDKError',
    'ValidationError',
    'ConfigurationError',
    'SigningError',
    'SigningErrorCodes',
    # Configuration
    'Environment',
    'load_environment_from_json',
    'load_environment_from_file',
    # HTTP
    'HttpHeaders',
    'HttpMethod',
    'HttpContentType',
    'url_query_parse',
    'url_query_encode',
    'MultiMap',
    # Signing
    'AuthorizationV2Builder',
    'SNWS2Auth',
    'SigningSession',
    'create_signing_session',
]
