"""
SNWS2 HTTP authorization builder

This module provides the builder that computes SolarNetwork ``Authorization``
header values. A one-off header value can be computed like this:

    auth = (AuthorizationV2Builder("my-token")
            .path("/solarquery/api/v1/pub/...")
            .build("my-token-secret"))

A builder can also be re-used for a given token, deriving the signing key
once and re-using it for up to 7 days:

    builder = AuthorizationV2Builder("my-token").save_signing_key("my-token-secret")

    auth = (builder.reset()
            .path("/solarquery/api/v1/pub/...")
            .build_with_saved_key())

For ``POST`` or ``PUT`` requests configure the method and content type to
match the actual request. Form-encoded parameters are passed via
``query_params()``; any other body content is passed to
``compute_content_digest()``, and the resulting ``Digest`` header must then
be sent with the request.

A builder is not thread-safe: configure and sign each request from a single
thread, or use one builder per thread.
"""

import logging
from datetime import datetime
from typing import Any, List, Mapping, Optional, Union
from urllib.parse import urlsplit

from ..config.environment import Environment, default_port
from ..net.http_headers import HttpContentType, HttpHeaders, HttpMethod
from ..net.urls import url_query_parse
from ..util.dates import ensure_utc, http_date, utc_now
from ..util.multimap import MultiMap
from . import canonical_request
from .signing_key import derive_signing_key, is_signing_key_valid, signing_key_expiration
from .types import (
    EMPTY_STRING_SHA256_HEX,
    SNWS2_AUTH_SCHEME,
    RequestDescriptor,
    SigningCredential,
    SigningError,
    SigningErrorCodes,
    SigningKey,
)
from .utils import from_hex, hmac_sha256, sha256, to_base64, to_hex

logger = logging.getLogger(__name__)


class AuthorizationV2Builder:
    """
    A builder for the SNWS2 HTTP authorization scheme.

    The builder keeps two independent pieces of state: the request being
    signed, which ``reset()`` restores to defaults, and a saved signing key,
    which survives ``reset()``.
    """

    EMPTY_STRING_SHA256_HEX = EMPTY_STRING_SHA256_HEX
    SNWS2_AUTH_SCHEME = SNWS2_AUTH_SCHEME

    def __init__(self, token_id: Optional[str] = None, environment: Optional[Environment] = None):
        """
        Initialize the builder.

        ``reset()`` is invoked to set up default request values.

        Args:
            token_id: The auth token ID to use
            environment: The environment to use; a default environment is
                created if not provided
        """
        self.token_id = token_id
        self.environment = environment or Environment()
        self.force_host_port = False
        self._request = RequestDescriptor()
        self._credential: Optional[SigningCredential] = None
        self.reset()

    def reset(self) -> 'AuthorizationV2Builder':
        """
        Reset to default property values.

        Any previously saved signing key is preserved. The method is set to
        ``GET``, the host to the environment host, the path to ``/`` and the
        date to now; the content digest, signed header names, headers and
        query parameters are cleared.

        Returns:
            AuthorizationV2Builder: Self for method chaining
        """
        request = self._request
        request.method = HttpMethod.GET.value
        request.path = "/"
        request.request_date = utc_now()
        request.content_digest = None
        request.signed_header_names = None
        request.headers.clear()
        request.parameters.clear()
        return self.host(self.environment.host)

    # --- request configuration ---

    @property
    def http_method(self) -> str:
        return self._request.method

    @property
    def request_path(self) -> str:
        return self._request.path

    @property
    def request_date(self) -> datetime:
        return self._request.request_date

    @property
    def request_date_header_value(self) -> str:
        """The request date as a HTTP header value."""
        return http_date(self._request.request_date)

    @property
    def http_headers(self) -> HttpHeaders:
        return self._request.headers

    @property
    def parameters(self) -> MultiMap:
        return self._request.parameters

    @property
    def signed_header_names(self) -> Optional[List[str]]:
        """A copy of the additional signed header names, or None."""
        names = self._request.signed_header_names
        return list(names) if names is not None else None

    @property
    def request(self) -> RequestDescriptor:
        return self._request

    def method(self, val: Union[str, HttpMethod]) -> 'AuthorizationV2Builder':
        """
        Set the HTTP method (verb) to use.

        Args:
            val: The method, e.g. ``HttpMethod.POST`` or ``"POST"``

        Returns:
            AuthorizationV2Builder: Self for method chaining
        """
        self._request.method = val.value if isinstance(val, HttpMethod) else str(val)
        return self

    def host(self, val: str) -> 'AuthorizationV2Builder':
        """
        Set the HTTP host.

        When ``force_host_port`` is enabled and ``val`` has no port, the
        environment port is appended unless it is 80. This suits proxies that
        always forward the port, even the implied HTTPS port 443.

        Args:
            val: The host value

        Returns:
            AuthorizationV2Builder: Self for method chaining
        """
        if self.force_host_port and ':' not in val and self.environment.port != 80:
            val = f"{val}:{self.environment.port}"
        self._request.headers.put(HttpHeaders.HOST, val)
        return self

    def path(self, val: str) -> 'AuthorizationV2Builder':
        """
        Set the HTTP request path. The value is signed exactly as given.
        """
        self._request.path = val
        return self

    def url(self, url: str, ignore_host: bool = False) -> 'AuthorizationV2Builder':
        """
        Set the host, path, and query parameters via a URL string.

        The port is added to the host only when it is not the implied port of
        the URL scheme. Query parameters are decoded and merged into the
        configured parameters.

        Args:
            url: The URL to use
            ignore_host: If True, do not set the host from the URL; useful to
                keep the configured environment host

        Returns:
            AuthorizationV2Builder: Self for method chaining

        Raises:
            SigningError: If the URL cannot be parsed; the builder is not
                modified in that case
        """
        try:
            parts = urlsplit(url)
            port = parts.port
        except ValueError as e:
            raise SigningError(
                f"Failed to parse URL: {e}",
                SigningErrorCodes.INVALID_URL,
                {"url": url}
            )
        if not parts.scheme or not parts.netloc:
            raise SigningError(
                f"Invalid URL format: {url}",
                SigningErrorCodes.INVALID_URL,
                {"url": url}
            )

        host = parts.hostname
        if host and ':' in host:
            host = f"[{host}]"
        scheme = parts.scheme.lower()
        if host and port is not None and scheme in ('http', 'https', 'ws', 'wss') and port != default_port(scheme):
            host = f"{host}:{port}"
        params = url_query_parse(parts.query)

        if params:
            self.query_params(params)
        if host and not ignore_host:
            self.host(host)
        return self.path(parts.path or "/")

    def content_type(self, val: Optional[str]) -> 'AuthorizationV2Builder':
        """
        Set the HTTP content type; None removes the ``Content-Type`` header.
        """
        if isinstance(val, HttpContentType):
            val = val.value
        self._request.headers.put(HttpHeaders.CONTENT_TYPE, val)
        return self

    def date(self, val: Any) -> 'AuthorizationV2Builder':
        """
        Set the authorization request date.

        Args:
            val: The date to use; naive values are treated as UTC, and any
                value that is not a ``datetime`` sets the current time

        Returns:
            AuthorizationV2Builder: Self for method chaining
        """
        self._request.request_date = ensure_utc(val) if isinstance(val, datetime) else utc_now()
        return self

    @property
    def use_sn_date(self) -> bool:
        """
        Whether the ``X-SN-Date`` header is signed rather than ``Date``.

        True if ``X-SN-Date`` is among the signed header names or present in
        the HTTP headers. Setting this adds or removes ``X-SN-Date`` from the
        signed header names, and always removes it from the HTTP headers.
        """
        return canonical_request.uses_sn_date(self._request.headers, self._request.signed_header_names)

    @use_sn_date.setter
    def use_sn_date(self, enabled: bool) -> None:
        x_sn_date = HttpHeaders.X_SN_DATE.lower()
        names = self._request.signed_header_names
        existing = [n for n in names or [] if n.lower() == x_sn_date]
        if enabled and not existing:
            self._request.signed_header_names = (names or []) + [HttpHeaders.X_SN_DATE]
        elif not enabled and existing:
            self._request.signed_header_names = [n for n in names if n.lower() != x_sn_date]
        self._request.headers.remove(HttpHeaders.X_SN_DATE)

    def sn_date(self, enabled: bool) -> 'AuthorizationV2Builder':
        """
        Set the ``use_sn_date`` property.

        Args:
            enabled: True to use the ``X-SN-Date`` header, False to use ``Date``

        Returns:
            AuthorizationV2Builder: Self for method chaining
        """
        self.use_sn_date = enabled
        return self

    def header(self, header_name: str, header_value: Optional[str]) -> 'AuthorizationV2Builder':
        """
        Set a HTTP header value; None removes the header.
        """
        self._request.headers.put(header_name, header_value)
        return self

    def headers(self, headers: HttpHeaders) -> 'AuthorizationV2Builder':
        """
        Replace the HTTP headers to use with the request.

        The headers must include all headers required by the authorization
        scheme, and any additional headers configured via
        ``signed_http_headers()``.
        """
        self._request.headers = headers
        return self

    def query_params(self, params: Union[MultiMap, Mapping[str, Any]]) -> 'AuthorizationV2Builder':
        """
        Set the HTTP ``GET`` query parameters, or ``POST`` form-encoded parameters.

        Args:
            params: A ``MultiMap`` replaces the configured parameters; any
                other mapping is merged into them, replacing existing keys

        Returns:
            AuthorizationV2Builder: Self for method chaining
        """
        if isinstance(params, MultiMap):
            self._request.parameters = params
        else:
            self._request.parameters.put_all(params)
        return self

    def signed_http_headers(self, signed_header_names: List[str]) -> 'AuthorizationV2Builder':
        """
        Set additional HTTP header names to sign with the authorization.
        """
        self._request.signed_header_names = list(signed_header_names)
        return self

    def content_sha256(self, digest: Union[str, bytes]) -> 'AuthorizationV2Builder':
        """
        Set the request body SHA-256 digest.

        Args:
            digest: The raw digest, or a hex-encoded string

        Returns:
            AuthorizationV2Builder: Self for method chaining
        """
        self._request.content_digest = from_hex(digest) if isinstance(digest, str) else bytes(digest)
        return self

    def compute_content_digest(self, content: Union[str, bytes]) -> 'AuthorizationV2Builder':
        """
        Compute the SHA-256 digest of the request body and configure it.

        This also sets the ``Digest`` HTTP header, which *must* be sent with
        the actual request; it is available afterwards via
        ``http_headers.first_value(HttpHeaders.DIGEST)``.

        Args:
            content: The request body; strings are UTF-8 encoded

        Returns:
            AuthorizationV2Builder: Self for method chaining
        """
        digest = sha256(content)
        self.content_sha256(digest)
        return self.header(HttpHeaders.DIGEST, f"sha-256={to_base64(digest)}")

    # --- signing keys ---

    def compute_signing_key(self, token_secret: str) -> SigningKey:
        """
        Compute a signing key from a token secret, based on the configured date.

        The key is not saved on this builder; see ``save_signing_key()``.
        Signing keys are valid for at most 7 days, in whole days; configure a
        date in the past to derive a key that expires sooner.

        Args:
            token_secret: The token secret

        Returns:
            bytes: The signing key
        """
        return derive_signing_key(token_secret, self._request.request_date)

    def save_signing_key(self, token_secret: str) -> 'AuthorizationV2Builder':
        """
        Compute and save the signing key, based on the configured date.

        Args:
            token_secret: The token secret

        Returns:
            AuthorizationV2Builder: Self for method chaining
        """
        return self.key(self.compute_signing_key(token_secret), self._request.request_date)

    def key(self, key: SigningKey, date: Optional[datetime] = None) -> 'AuthorizationV2Builder':
        """
        Save an existing signing key, for example one returned by a token refresh.

        Args:
            key: The signing key
            date: The date the key was derived for, used to compute its
                expiration; defaults to the configured date

        Returns:
            AuthorizationV2Builder: Self for method chaining
        """
        if not key:
            raise SigningError("Signing key cannot be empty", SigningErrorCodes.INVALID_KEY)
        signing_date = date if isinstance(date, datetime) else self._request.request_date
        self._credential = SigningCredential(
            key=bytes(key),
            expiration=signing_key_expiration(signing_date)
        )
        return self

    @property
    def signing_key(self) -> Optional[SigningKey]:
        """The saved signing key, or None."""
        return self._credential.key if self._credential else None

    @property
    def signing_key_expiration(self) -> Optional[datetime]:
        """The saved signing key expiration date, or None."""
        return self._credential.expiration if self._credential else None

    @property
    def signing_key_valid(self) -> bool:
        """True if a signing key is saved and not expired as of now."""
        return is_signing_key_valid(self.signing_key, self.signing_key_expiration)

    # --- canonical request ---

    def canonical_query_parameters(self) -> str:
        return canonical_request.canonical_query_parameters(self._request.parameters)

    def canonical_headers(self, sorted_lowercase_header_names: List[str]) -> str:
        return canonical_request.canonical_headers(
            sorted_lowercase_header_names, self._request.headers, self._request.request_date
        )

    def canonical_content_sha256(self) -> str:
        return canonical_request.canonical_content_sha256(self._request.content_digest)

    def canonical_header_names(self) -> List[str]:
        """
        Compute the sorted, lower-cased HTTP header names to sign.
        """
        return canonical_request.canonical_header_names(
            self._request.headers, self._request.signed_header_names, self.use_sn_date
        )

    def build_canonical_request_data(self) -> str:
        """
        Compute the canonical request data that is signed.

        Returns:
            str: The canonical request data
        """
        return canonical_request.build_canonical_request(self._request, self.canonical_header_names())

    def compute_signature_data(self, canonical_request_data: str) -> str:
        """
        Compute the data to be signed by the signing key.
        """
        return canonical_request.compute_signature_data(canonical_request_data, self._request.request_date)

    # --- authorization ---

    def build_with_key(self, signing_key: SigningKey) -> str:
        """
        Compute a HTTP ``Authorization`` header value using a signing key.

        The key is not saved on this builder; see ``key()``.

        Args:
            signing_key: The key to sign with

        Returns:
            str: The SNWS2 HTTP Authorization header value
        """
        sorted_header_names = self.canonical_header_names()
        canonical_request_data = canonical_request.build_canonical_request(self._request, sorted_header_names)
        signature_data = self.compute_signature_data(canonical_request_data)
        logger.debug(f"SNWS2 canonical request:\n{canonical_request_data}")
        logger.debug(f"SNWS2 signature data:\n{signature_data}")
        signature = to_hex(hmac_sha256(signing_key, signature_data))
        return (
            f"{SNWS2_AUTH_SCHEME} Credential={self.token_id}"
            f",SignedHeaders={canonical_request.canonical_signed_header_names(sorted_header_names)}"
            f",Signature={signature}"
        )

    def build(self, token_secret: str) -> str:
        """
        Compute a HTTP ``Authorization`` header value, deriving a new signing
        key from ``token_secret`` and the configured date.

        Args:
            token_secret: The token secret

        Returns:
            str: The SNWS2 HTTP Authorization header value
        """
        return self.build_with_key(self.compute_signing_key(token_secret))

    def build_with_saved_key(self) -> str:
        """
        Compute a HTTP ``Authorization`` header value using the saved signing key.

        An expired saved key is still used, after logging a warning, and the
        server will reject the result. Check ``signing_key_valid`` first and
        save a fresh key with ``save_signing_key()`` or ``key()`` when it is
        False.

        Returns:
            str: The SNWS2 HTTP Authorization header value

        Raises:
            SigningError: If no signing key has been saved
        """
        if self._credential is None:
            raise SigningError("no saved signing key available", SigningErrorCodes.MISSING_SIGNING_KEY)
        if not self.signing_key_valid:
            logger.warning(
                f"Signing with saved key for token {self.token_id} that expired at "
                f"{self._credential.expiration.isoformat()}"
            )
        return self.build_with_key(self._credential.key)
