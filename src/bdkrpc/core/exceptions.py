"""Domain exceptions for the bdkrpc library."""


class BdkRpcError(Exception):
    """Base class for all bdkrpc library exceptions."""


class MissingAuthenticationError(BdkRpcError):
    """Raised when a client is built with the ``NoAuth`` strategy.

    The node RPC interface always requires authentication, so the client
    refuses to build an unauthenticated transport instead of guessing.
    """


class CookieFileError(BdkRpcError):
    """Base class for failures while resolving a cookie file."""

    def __init__(self, message: str, path):
        super().__init__(message)
        self.path = path


class InvalidCookieFileError(CookieFileError):
    """Raised when a cookie file was read but does not hold ``user:password``."""


class CookieFileIOError(CookieFileError):
    """Raised when a cookie file cannot be opened or read.

    The original :class:`OSError` is always available as ``__cause__``.
    """


class TransportConfigError(BdkRpcError):
    """Raised when a transport cannot be built from its configuration."""


class InvalidUrlError(TransportConfigError):
    """Raised when the node URL is not usable by the HTTP transport."""

    def __init__(self, message: str, url: str):
        super().__init__(message)
        self.url = url


class TransportError(BdkRpcError):
    """Raised when an RPC request fails at the network or HTTP level."""


class AuthenticationRejectedError(TransportError):
    """Raised when the node answers HTTP 401 or 403.

    The transport was built, but the node did not accept its credentials.
    """


class RpcError(TransportError):
    """Raised when the node returns a JSON-RPC error object."""

    def __init__(self, code: int | None, message: str):
        super().__init__(f"RPC error {code}: {message}")
        self.code = code
        self.message = message


class InvalidResponseError(TransportError):
    """Raised when an RPC result cannot be decoded into the expected type."""
