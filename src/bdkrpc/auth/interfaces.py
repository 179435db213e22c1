"""Abstract interfaces for the authentication layer.

This module defines the contract every credential strategy implements and
the value they produce.  The client and transport layers depend only on
these types, never on how a strategy finds its user and password.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Credentials:
    """A resolved user/password pair for HTTP basic authentication.

    Instances are transient: the client hands them to a transport factory
    and drops them once the transport is built.

    Attributes:
        user: The RPC user name.
        password: The RPC password.  Hidden from ``repr``.
    """

    user: str
    password: str = field(repr=False)


class Auth(ABC):
    """Abstract base class for credential strategies.

    The set of strategies is closed (:class:`~bdkrpc.auth.strategies.NoAuth`,
    :class:`~bdkrpc.auth.strategies.UserPass` and
    :class:`~bdkrpc.auth.strategies.CookieFile`).  Creating a strategy never
    validates anything; all checks happen in :meth:`get_credentials`.

    Example usage::

        auth = CookieFile("~/.bitcoin/regtest/.cookie")
        client = Client.with_auth("http://localhost:18443", auth)
    """

    @abstractmethod
    def get_credentials(self) -> Credentials:
        """Resolve the strategy into a user/password pair.

        Returns:
            A :class:`Credentials` instance ready to be used as basic auth.

        Raises:
            MissingAuthenticationError: If the strategy carries no
                credentials at all.
            CookieFileError: If a cookie file cannot be read or parsed.
        """

    @abstractmethod
    def is_authenticated(self) -> bool:
        """Return ``True`` if :meth:`get_credentials` would currently succeed.

        This method must not raise.
        """

    @abstractmethod
    def describe(self) -> str:
        """Return a short description of the strategy without any secret."""
