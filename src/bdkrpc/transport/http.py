"""HTTP transport backed by :mod:`requests`.

:class:`Builder` assembles the configuration (URL, timeout, basic auth,
extra headers) and produces an :class:`HttpTransport`.  Building never opens
a connection; the first socket is created by the first :meth:`call`.
"""

import itertools
import logging
import math
import re
import urllib.parse
from typing import Any

import requests
from requests.auth import HTTPBasicAuth

from bdkrpc.auth.interfaces import Credentials
from bdkrpc.core.exceptions import (
    AuthenticationRejectedError,
    InvalidResponseError,
    InvalidUrlError,
    RpcError,
    TransportConfigError,
    TransportError,
)
from bdkrpc.transport.interfaces import Transport, TransportFactory

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0
"""Per-request timeout in seconds used when none is configured."""

USER_AGENT = "bdkrpc/0.1"

_SCHEMES = ("http", "https")
_WHITESPACE = re.compile(r"\s")
_USERINFO = re.compile(r"^([^:/?#]*://)?[^/?#]*@")


def redact_url(url) -> str:
    """Return *url* with any ``user:password@`` userinfo replaced by ``***@``."""
    if not isinstance(url, str):
        return repr(url)
    return _USERINFO.sub(r"\1***@", url, count=1)


def validate_url(url: str) -> str:
    """Check that *url* can be used as a node endpoint.

    A URL without a scheme (``"localhost:18443"``) is treated as ``http``.

    Args:
        url: The endpoint as supplied by the caller.

    Returns:
        The URL with its scheme made explicit.

    Raises:
        InvalidUrlError: If the URL is empty, contains whitespace, uses a
            scheme other than ``http``/``https``, has no host, or has an
            invalid port.
    """
    if not isinstance(url, str) or not url:
        raise InvalidUrlError("URL must be a non-empty string.", url)
    if _WHITESPACE.search(url):
        raise InvalidUrlError(f"URL {redact_url(url)!r} contains whitespace.", url)

    candidate = url if "://" in url else f"http://{url}"
    try:
        parts = urllib.parse.urlsplit(candidate)
        port = parts.port
    except ValueError as e:
        raise InvalidUrlError(f"Invalid URL {redact_url(url)!r}: {e}", url) from e

    if parts.scheme.lower() not in _SCHEMES:
        raise InvalidUrlError(
            f"Unsupported URL scheme {parts.scheme!r} in {redact_url(url)!r}; "
            "expected http or https.",
            url,
        )
    if not parts.hostname:
        raise InvalidUrlError(f"URL {redact_url(url)!r} has no host.", url)
    if port == 0:
        raise InvalidUrlError(f"URL {redact_url(url)!r} has port 0.", url)

    try:
        requests.Request("POST", candidate).prepare()
    except requests.RequestException as e:
        raise InvalidUrlError(f"Invalid URL {redact_url(url)!r}", url) from e
    return candidate


class HttpTransport(Transport):
    """A JSON-RPC transport bound to one node URL.

    Instances are produced by :class:`Builder`.  The configuration is fixed
    at build time; the only state that changes afterwards is the request id
    counter and the session's connection pool.
    """

    def __init__(self, url: str, timeout: float, session: requests.Session):
        """Initialise the transport.

        Args:
            url: A URL already checked by :func:`validate_url`.
            timeout: Per-request timeout in seconds.
            session: A configured :class:`requests.Session`.
        """
        self._url = url
        self._timeout = timeout
        self.session = session
        self._ids = itertools.count(1)

    @property
    def url(self) -> str:
        return self._url

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def auth_user(self) -> str | None:
        """The basic-auth user attached to every request, if any."""
        auth = self.session.auth
        if isinstance(auth, HTTPBasicAuth):
            return auth.username
        if isinstance(auth, tuple):
            return auth[0]
        return None

    def call(self, method: str, params: list | None = None) -> Any:
        """Post a single JSON-RPC request and return its ``result``.

        Raises:
            AuthenticationRejectedError: If the node answers 401 or 403.
            RpcError: If the node returns a JSON-RPC error object.
            InvalidResponseError: If a successful response is not a
                JSON-RPC response object.
            TransportError: On connection failures, timeouts, and other
                HTTP errors.
        """
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": list(params) if params is not None else [],
        }
        logger.debug("RPC request: %s id=%s", method, payload["id"])

        try:
            r = self.session.post(self._url, json=payload, timeout=self._timeout)
        except requests.RequestException as e:
            raise TransportError(
                f"Request to {redact_url(self._url)} failed: {e}"
            ) from e

        if r.status_code in (401, 403):
            raise AuthenticationRejectedError(
                f"The node at {redact_url(self._url)} rejected the RPC "
                f"credentials (HTTP {r.status_code})."
            )

        # Bitcoin Core reports RPC errors with HTTP 500 (or 404 for unknown
        # methods) and a JSON body, so the body is inspected before the status.
        try:
            data = r.json()
        except ValueError as e:
            if not r.ok:
                raise TransportError(
                    f"HTTP {r.status_code} from {redact_url(self._url)}: {r.reason}"
                ) from e
            raise InvalidResponseError(
                f"Response to {method!r} is not valid JSON."
            ) from e

        if not isinstance(data, dict):
            raise InvalidResponseError(
                f"Response to {method!r} is not a JSON-RPC object."
            )

        error = data.get("error")
        if error:
            if isinstance(error, dict):
                code = error.get("code")
                message = error.get("message", "Unknown error")
            else:
                code, message = None, str(error)
            logger.debug("RPC error: %s -> %s %s", method, code, message)
            raise RpcError(code, message)

        if not r.ok:
            raise TransportError(
                f"HTTP {r.status_code} from {redact_url(self._url)}: {r.reason}"
            )
        if "result" not in data:
            raise InvalidResponseError(f"Response to {method!r} has no result.")
        return data["result"]

    def close(self) -> None:
        """Close the underlying session and its pooled connections."""
        self.session.close()

    def __enter__(self) -> "HttpTransport":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"HttpTransport(url={redact_url(self._url)!r}, "
            f"timeout={self._timeout!r}, "
            f"auth_user={self.auth_user!r})"
        )


class Builder:
    """Fluent builder for :class:`HttpTransport`.

    Usage::

        transport = (
            Builder()
            .url("http://localhost:18443")
            .timeout(30)
            .basic_auth("bitcoin", "bitcoin")
            .build()
        )
    """

    def __init__(self):
        self._url: str | None = None
        self._timeout = DEFAULT_TIMEOUT
        self._auth: tuple[str, str] | None = None
        self._headers: dict[str, str] = {}

    def url(self, url: str) -> "Builder":
        """Set the endpoint.

        Raises:
            InvalidUrlError: If *url* fails :func:`validate_url`.
        """
        self._url = validate_url(url)
        return self

    def timeout(self, seconds: float) -> "Builder":
        """Set the per-request timeout.

        Raises:
            TransportConfigError: If *seconds* is not a positive finite number.
        """
        if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
            raise TransportConfigError(f"Timeout must be a number, got {seconds!r}.")
        if not math.isfinite(seconds) or seconds <= 0:
            raise TransportConfigError(f"Timeout must be a positive finite number, got {seconds!r}.")
        self._timeout = float(seconds)
        return self

    def basic_auth(self, user: str, password: str | None = None) -> "Builder":
        """Attach HTTP basic authentication to every request."""
        self._auth = (user, password or "")
        return self

    def header(self, name: str, value: str) -> "Builder":
        """Add an extra HTTP header to every request."""
        self._headers[name] = value
        return self

    def build(self) -> HttpTransport:
        """Return the configured transport.

        Raises:
            TransportConfigError: If no URL was set.
        """
        if self._url is None:
            raise TransportConfigError("No URL configured for the transport.")
        session = requests.Session()
        session.headers.update({
            "User-Agent": USER_AGENT,
            "Content-Type": "application/json",
            "Accept": "application/json",
        })
        session.headers.update(self._headers)
        if self._auth is not None:
            session.auth = HTTPBasicAuth(*self._auth)
        return HttpTransport(self._url, self._timeout, session)


class HttpTransportFactory(TransportFactory):
    """Default factory: basic auth over :class:`HttpTransport`."""

    def build(
        self, url: str, timeout: float, credentials: Credentials | None
    ) -> HttpTransport:
        builder = Builder().url(url).timeout(timeout)
        if credentials is not None:
            builder.basic_auth(credentials.user, credentials.password)
        return builder.build()
