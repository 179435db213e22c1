"""Bitcoin Core RPC client.

A :class:`Client` owns exactly one :class:`~bdkrpc.transport.Transport` for
its whole lifetime.  There are two ways to get one:

* :meth:`Client.with_auth` resolves a credential strategy and builds an
  authenticated HTTP transport.
* :meth:`Client.with_transport` wraps a transport the caller built, for
  configurations ``with_auth`` cannot express (proxies, other auth
  schemes, custom timeouts per call site).
"""

import logging
from dataclasses import dataclass
from typing import Any

from bdkrpc.auth.interfaces import Auth
from bdkrpc.auth.strategies import NoAuth
from bdkrpc.core.exceptions import InvalidResponseError, MissingAuthenticationError
from bdkrpc.core.models import BlockchainInfo, BlockHash
from bdkrpc.transport.http import DEFAULT_TIMEOUT, HttpTransportFactory, redact_url
from bdkrpc.transport.interfaces import Transport, TransportFactory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Client:
    """Entry point for RPC calls against one node.

    The client is immutable and keeps no credentials; the transport owns
    whatever authentication it applies.  One instance may be shared between
    threads.

    Attributes:
        transport: The transport every call is dispatched through.
    """

    transport: Transport

    # -------------------------
    # Construction
    # -------------------------

    @classmethod
    def with_auth(
        cls,
        url: str,
        auth: Auth,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        factory: TransportFactory | None = None,
    ) -> "Client":
        """Build a client with an authenticated HTTP transport.

        Construction is all-or-nothing: on any error no client exists and
        nothing is left open.

        Args:
            url: The node's RPC endpoint, e.g. ``"http://localhost:18443"``.
            auth: The credential strategy to resolve.
            timeout: Per-request timeout in seconds.
            factory: Builds the transport.  Defaults to
                :class:`~bdkrpc.transport.http.HttpTransportFactory`.

        Returns:
            A ready :class:`Client`.  No request has been sent yet.

        Raises:
            MissingAuthenticationError: If *auth* is
                :class:`~bdkrpc.auth.strategies.NoAuth`.
            CookieFileIOError: If the cookie file cannot be read.
            InvalidCookieFileError: If the cookie file is malformed.
            TransportConfigError: If the transport rejects its configuration
                (including :class:`~bdkrpc.core.exceptions.InvalidUrlError`).
        """
        if isinstance(auth, NoAuth):
            raise MissingAuthenticationError(
                "Refusing to build an unauthenticated RPC client. "
                "Use UserPass or CookieFile."
            )
        logger.debug(
            "Building RPC client for %s with %s", redact_url(url), auth.describe()
        )
        credentials = auth.get_credentials()
        transport = (factory or HttpTransportFactory()).build(
            url, timeout, credentials
        )
        return cls(transport=transport)

    @classmethod
    def with_transport(cls, transport: Transport) -> "Client":
        """Wrap a transport built by the caller.

        No credential resolution or URL validation happens, and this never
        fails.  The returned client holds *transport* itself, not a copy.
        """
        return cls(transport=transport)

    # -------------------------
    # Call surface
    # -------------------------

    def call(self, method: str, *params: Any) -> Any:
        """Invoke an arbitrary RPC method and return its raw result.

        Args:
            method: The RPC method name.
            *params: Positional parameters.

        Raises:
            TransportError: If the request fails or the node returns an
                error.
        """
        return self.transport.call(method, list(params))

    def get_best_block_hash(self) -> BlockHash:
        """Return the hash of the tip of the most-work chain."""
        return self._block_hash(self.call("getbestblockhash"))

    def get_block_count(self) -> int:
        """Return the height of the most-work chain."""
        result = self.call("getblockcount")
        if isinstance(result, bool) or not isinstance(result, int):
            raise InvalidResponseError(f"getblockcount returned {result!r}.")
        return result

    def get_block_hash(self, height: int) -> BlockHash:
        """Return the hash of the block at *height* in the active chain."""
        return self._block_hash(self.call("getblockhash", height))

    def get_blockchain_info(self) -> BlockchainInfo:
        """Return a summary of the node's chain state."""
        result = self.call("getblockchaininfo")
        if not isinstance(result, dict):
            raise InvalidResponseError(f"getblockchaininfo returned {result!r}.")
        try:
            return BlockchainInfo.from_rpc(result)
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidResponseError(
                f"Cannot decode getblockchaininfo result: {e}"
            ) from e

    @staticmethod
    def _block_hash(result: Any) -> BlockHash:
        try:
            return BlockHash.from_hex(result)
        except ValueError as e:
            raise InvalidResponseError(str(e)) from e
