"""
HTTP client integration for request signing

This module provides integration between SNWS2 request signing and the
``requests`` library, so outbound requests carry a valid ``Authorization``
header. Signing failures are raised; requests are never sent unsigned.
"""

import logging
import threading
from datetime import datetime
from typing import Callable, Optional
from urllib.parse import parse_qsl, urlsplit

import requests
from requests.auth import AuthBase
from requests.models import PreparedRequest
from requests.sessions import Session

from ..config.environment import Environment
from ..net.http_headers import HttpContentType, HttpHeaders
from ..util.multimap import MultiMap
from .auth_v2 import AuthorizationV2Builder
from .types import SigningError, SigningErrorCodes, SigningKey

logger = logging.getLogger(__name__)

# Request headers copied onto the builder, when present, so they are signed
SIGNED_REQUEST_HEADERS = (
    HttpHeaders.CONTENT_MD5,
    HttpHeaders.CONTENT_TYPE,
)


def form_parameters(text: str, parameters: Optional[MultiMap] = None) -> MultiMap:
    """
    Parse ``application/x-www-form-urlencoded`` data into a ``MultiMap``.

    Keys are case-sensitive, so ``a`` and ``A`` are signed as distinct
    parameters, as the server reads them.

    Args:
        text: The encoded data, e.g. a URL query or form body
        parameters: Optional map to add the parsed values to

    Returns:
        MultiMap: The parameters
    """
    if parameters is None:
        parameters = MultiMap(case_insensitive=False)
    for key, value in parse_qsl(text, keep_blank_values=True):
        parameters.add(key, value)
    return parameters


class SNWS2Auth(AuthBase):
    """
    ``requests`` authentication handler for the SNWS2 scheme.

    The handler owns an ``AuthorizationV2Builder`` with a saved signing key.
    The token secret is only used to derive that key and is not kept.
    Signing is serialized with a lock, so one handler can be shared by a
    session used from several threads.
    """

    def __init__(
        self,
        token_id: Optional[str] = None,
        token_secret: Optional[str] = None,
        signing_key: Optional[SigningKey] = None,
        signing_date: Optional[datetime] = None,
        environment: Optional[Environment] = None,
        builder: Optional[AuthorizationV2Builder] = None,
        sign_url: Optional[Callable[[str], str]] = None,
        ignore_host: bool = False
    ):
        """
        Initialize the handler.

        Args:
            token_id: The auth token ID; ignored when ``builder`` is provided
            token_secret: Token secret to derive the signing key from
            signing_key: An existing signing key, e.g. from a token refresh
            signing_date: The date ``signing_key`` was derived for; defaults
                to now
            environment: The environment for a new builder
            builder: An existing builder to use
            sign_url: Optional function mapping the request URL to the URL to
                sign, for requests sent through a proxy
            ignore_host: If True, sign the environment host rather than the
                host of the request URL

        Raises:
            SigningError: If no signing key is available
        """
        self.builder = builder or AuthorizationV2Builder(token_id, environment)
        self.sign_url = sign_url
        self.ignore_host = ignore_host
        self._lock = threading.Lock()

        if signing_key is not None:
            self.builder.key(signing_key, signing_date)
        elif token_secret is not None:
            if signing_date is not None:
                self.builder.date(signing_date)
            self.builder.save_signing_key(token_secret)
            self.builder.reset()

        if self.builder.signing_key is None:
            raise SigningError(
                "no saved signing key available",
                SigningErrorCodes.MISSING_SIGNING_KEY,
                {"token_id": self.builder.token_id}
            )

    @property
    def signing_key_valid(self) -> bool:
        return self.builder.signing_key_valid

    def __call__(self, r: PreparedRequest) -> PreparedRequest:
        """
        Sign a prepared request, adding the ``Authorization`` and
        ``X-SN-Date`` headers, and a ``Digest`` header when it has a body.
        """
        url = self.sign_url(r.url) if self.sign_url else r.url
        with self._lock:
            builder = (self.builder.reset()
                       .method(r.method)
                       .sn_date(True)
                       .url(url, self.ignore_host))

            for name in SIGNED_REQUEST_HEADERS:
                value = r.headers.get(name)
                if value is not None:
                    builder.header(name, value)

            # requests encodes spaces as '+', which the server decodes as spaces
            parameters = form_parameters(urlsplit(url).query)
            digest = self._apply_body(builder, r, parameters)
            builder.query_params(parameters)
            authorization = builder.build_with_saved_key()
            date_header = builder.request_date_header_value

        if digest is not None:
            r.headers[HttpHeaders.DIGEST] = digest
        r.headers[HttpHeaders.X_SN_DATE] = date_header
        r.headers[HttpHeaders.AUTHORIZATION] = authorization
        logger.debug(f"Signed {r.method} request to {r.url}")
        return r

    def _apply_body(
        self,
        builder: AuthorizationV2Builder,
        r: PreparedRequest,
        parameters: MultiMap
    ) -> Optional[str]:
        """
        Configure the request body on the builder.

        Form-encoded bodies are added to ``parameters``; other bodies are
        signed via a content digest. A ``str`` body is replaced by its UTF-8
        encoding so the digest covers the bytes sent.

        Returns:
            str: The ``Digest`` header value to send, or None
        """
        body = r.body
        if not body:
            return None

        if not isinstance(body, (str, bytes)):
            raise SigningError(
                "Streaming request bodies cannot be signed",
                SigningErrorCodes.SIGNING_FAILED,
                {"body_type": str(type(body))}
            )

        content_type = r.headers.get(HttpHeaders.CONTENT_TYPE, '')
        if content_type.lower().startswith(HttpContentType.FORM_URLENCODED.value):
            text = body.decode('utf-8') if isinstance(body, bytes) else body
            form_parameters(text, parameters)
            return None

        if isinstance(body, str):
            # http.client would send str as ISO-8859-1; send the digested bytes instead
            body = body.encode('utf-8')
            r.body = body
            r.headers['Content-Length'] = str(len(body))

        builder.compute_content_digest(body)
        return builder.http_headers.first_value(HttpHeaders.DIGEST)


class SigningSession:
    """
    HTTP session wrapper with automatic request signing capability.

    This class wraps a ``requests.Session`` and attaches an ``SNWS2Auth``
    handler to outgoing requests.
    """

    def __init__(
        self,
        auth: Optional[SNWS2Auth] = None,
        session: Optional[Session] = None,
        auto_sign: bool = True
    ):
        """
        Initialize signing session.

        Args:
            auth: Optional authentication handler
            session: Optional existing requests session to wrap
            auto_sign: Whether to automatically sign requests
        """
        self.session = session or requests.Session()
        self.auth = auth
        self.auto_sign = auto_sign

    def configure_signing(self, auth: SNWS2Auth, auto_sign: bool = True) -> None:
        """
        Configure request signing for this session.

        Args:
            auth: Authentication handler
            auto_sign: Whether to automatically sign requests
        """
        self.auth = auth
        self.auto_sign = auto_sign
        logger.info(f"Configured request signing for token ID: {auth.builder.token_id}")

    def disable_signing(self) -> None:
        """Disable automatic request signing."""
        self.auto_sign = False
        logger.info("Disabled automatic request signing")

    def enable_signing(self) -> None:
        """Enable automatic request signing (if configured)."""
        if self.auth:
            self.auto_sign = True
            logger.info("Enabled automatic request signing")
        else:
            logger.warning("Cannot enable signing - no signing configuration available")

    def request(self, method: str, url: str, **kwargs) -> requests.Response:
        """
        Make HTTP request, signed when signing is enabled.

        An explicit ``auth`` keyword argument takes precedence.
        """
        if self.auto_sign and self.auth and 'auth' not in kwargs:
            kwargs['auth'] = self.auth
        return self.session.request(method, url, **kwargs)

    def get(self, url: str, **kwargs) -> requests.Response:
        """Make GET request."""
        return self.request('GET', url, **kwargs)

    def post(self, url: str, **kwargs) -> requests.Response:
        """Make POST request."""
        return self.request('POST', url, **kwargs)

    def put(self, url: str, **kwargs) -> requests.Response:
        """Make PUT request."""
        return self.request('PUT', url, **kwargs)

    def delete(self, url: str, **kwargs) -> requests.Response:
        """Make DELETE request."""
        return self.request('DELETE', url, **kwargs)

    def patch(self, url: str, **kwargs) -> requests.Response:
        """Make PATCH request."""
        return self.request('PATCH', url, **kwargs)

    def close(self) -> None:
        """Close the underlying session."""
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


def create_signing_session(
    token_id: str,
    token_secret: Optional[str] = None,
    signing_key: Optional[SigningKey] = None,
    environment: Optional[Environment] = None,
    auto_sign: bool = True,
    **session_kwargs
) -> SigningSession:
    """
    Create a new signing session.

    Args:
        token_id: The auth token ID
        token_secret: Token secret to derive the signing key from
        signing_key: An existing signing key, used instead of ``token_secret``
        environment: Optional environment configuration
        auto_sign: Whether to automatically sign requests
        **session_kwargs: Attributes to set on the new ``requests.Session``

    Returns:
        SigningSession: Configured signing session
    """
    session = requests.Session()
    for key, value in session_kwargs.items():
        if hasattr(session, key):
            setattr(session, key, value)

    auth = SNWS2Auth(
        token_id=token_id,
        token_secret=token_secret,
        signing_key=signing_key,
        environment=environment
    )
    return SigningSession(auth=auth, session=session, auto_sign=auto_sign)
