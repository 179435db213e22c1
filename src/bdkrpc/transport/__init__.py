"""Transport layer — the contract and its requests-based implementation."""

from bdkrpc.transport.http import (
    DEFAULT_TIMEOUT,
    Builder,
    HttpTransport,
    HttpTransportFactory,
)
from bdkrpc.transport.interfaces import Transport, TransportFactory

__all__ = [
    "DEFAULT_TIMEOUT",
    "Builder",
    "HttpTransport",
    "HttpTransportFactory",
    "Transport",
    "TransportFactory",
]
