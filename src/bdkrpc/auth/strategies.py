"""The three credential strategies a client can be built with.

* :class:`NoAuth` — no credentials.  Always rejected by
  :meth:`~bdkrpc.client.Client.with_auth`.
* :class:`UserPass` — static ``rpcuser`` / ``rpcpassword`` values.
* :class:`CookieFile` — the node's ``.cookie`` file, read when the client
  is built.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from bdkrpc.auth.cookie import read_cookie_file
from bdkrpc.auth.interfaces import Auth, Credentials
from bdkrpc.core.exceptions import BdkRpcError, MissingAuthenticationError


@dataclass(frozen=True)
class NoAuth(Auth):
    """No authentication requested."""

    def get_credentials(self) -> Credentials:
        """Always fail.

        Raises:
            MissingAuthenticationError: Unconditionally.
        """
        raise MissingAuthenticationError(
            "No RPC authentication configured. "
            "Provide a user/password pair or a cookie file."
        )

    def is_authenticated(self) -> bool:
        return False

    def describe(self) -> str:
        return "no authentication"


@dataclass(frozen=True)
class UserPass(Auth):
    """Explicit RPC user and password.

    Attributes:
        user: The ``rpcuser`` value.
        password: The ``rpcpassword`` value.  Hidden from ``repr``.
    """

    user: str
    password: str = field(repr=False)

    def get_credentials(self) -> Credentials:
        return Credentials(user=self.user, password=self.password)

    def is_authenticated(self) -> bool:
        return True

    def describe(self) -> str:
        return f"user/password (user {self.user!r})"


@dataclass(frozen=True)
class CookieFile(Auth):
    """Credentials read from a node cookie file.

    The path is stored as given; ``~`` is expanded when the file is read.

    Attributes:
        path: Path to the ``.cookie`` file.
    """

    path: str | os.PathLike

    def get_credentials(self) -> Credentials:
        """Read the cookie file.

        Raises:
            CookieFileIOError: If the file cannot be read.
            InvalidCookieFileError: If the file content is malformed.
        """
        return read_cookie_file(self.expanded_path())

    def is_authenticated(self) -> bool:
        try:
            self.get_credentials()
        except BdkRpcError:
            return False
        return True

    def describe(self) -> str:
        return f"cookie file {self.expanded_path()}"

    def expanded_path(self) -> Path:
        """Return :attr:`path` as a :class:`pathlib.Path` with ``~`` expanded."""
        return Path(self.path).expanduser()
