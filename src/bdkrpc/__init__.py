"""Authenticated client for the Bitcoin Core JSON-RPC interface."""

from bdkrpc.auth import Auth, CookieFile, Credentials, NoAuth, UserPass
from bdkrpc.client import Client
from bdkrpc.core.exceptions import (
    AuthenticationRejectedError,
    BdkRpcError,
    CookieFileError,
    CookieFileIOError,
    InvalidCookieFileError,
    InvalidResponseError,
    InvalidUrlError,
    MissingAuthenticationError,
    RpcError,
    TransportConfigError,
    TransportError,
)
from bdkrpc.core.models import BlockchainInfo, BlockHash

__all__ = [
    "Auth",
    "AuthenticationRejectedError",
    "BdkRpcError",
    "BlockHash",
    "BlockchainInfo",
    "Client",
    "CookieFile",
    "CookieFileError",
    "CookieFileIOError",
    "Credentials",
    "InvalidCookieFileError",
    "InvalidResponseError",
    "InvalidUrlError",
    "MissingAuthenticationError",
    "NoAuth",
    "RpcError",
    "TransportConfigError",
    "TransportError",
    "UserPass",
]
