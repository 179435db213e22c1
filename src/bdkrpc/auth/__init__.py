"""Authentication layer — credential strategies and cookie resolution."""

from bdkrpc.auth.cookie import default_cookie_path, read_cookie_file
from bdkrpc.auth.interfaces import Auth, Credentials
from bdkrpc.auth.strategies import CookieFile, NoAuth, UserPass

__all__ = [
    "Auth",
    "CookieFile",
    "Credentials",
    "NoAuth",
    "UserPass",
    "default_cookie_path",
    "read_cookie_file",
]
