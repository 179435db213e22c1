"""Abstract interfaces for the transport layer.

The client depends on these two contracts only, so the HTTP library behind
them can be replaced without touching credential resolution or client
construction.
"""

from abc import ABC, abstractmethod
from typing import Any

from bdkrpc.auth.interfaces import Credentials


class Transport(ABC):
    """Sends one JSON-RPC request to a node and returns its result."""

    @abstractmethod
    def call(self, method: str, params: list | None = None) -> Any:
        """Invoke *method* on the node.

        Args:
            method: The RPC method name (e.g. ``"getbestblockhash"``).
            params: Positional parameters, or ``None`` for none.

        Returns:
            The decoded ``result`` member of the response.

        Raises:
            TransportError: If the request fails or the node returns an
                error.
        """


class TransportFactory(ABC):
    """Builds a configured :class:`Transport` without opening a connection."""

    @abstractmethod
    def build(
        self, url: str, timeout: float, credentials: Credentials | None
    ) -> Transport:
        """Return a transport for *url*.

        Args:
            url: The node's RPC endpoint.
            timeout: Per-request timeout in seconds.
            credentials: Basic-auth credentials attached to every request,
                or ``None`` for none.

        Raises:
            TransportConfigError: If the configuration is rejected, e.g.
                :class:`~bdkrpc.core.exceptions.InvalidUrlError`.
        """
