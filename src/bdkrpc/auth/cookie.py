"""Bitcoin Core cookie file resolution.

At startup a node without ``rpcpassword`` writes a random ``user:password``
pair to ``<datadir>/<network>/.cookie`` and deletes it on shutdown.  This
module reads that file and locates it for the well-known networks.
"""

import logging
import os
import stat
import sys
from pathlib import Path

from bdkrpc.auth.interfaces import Credentials
from bdkrpc.core.exceptions import CookieFileIOError, InvalidCookieFileError

logger = logging.getLogger(__name__)

COOKIE_FILENAME = ".cookie"

# Sub-directory of the data directory used by each network.  Mainnet keeps
# its cookie at the top level.
_NETWORK_DIRS: dict[str, str] = {
    "main": "",
    "mainnet": "",
    "bitcoin": "",
    "test": "testnet3",
    "testnet": "testnet3",
    "testnet3": "testnet3",
    "testnet4": "testnet4",
    "signet": "signet",
    "regtest": "regtest",
}


def read_cookie_file(path: str | os.PathLike) -> Credentials:
    """Read and parse a cookie file.

    Only the first line is used and only its line terminator is removed.
    The line is split at the first colon, so the password keeps any further
    colons verbatim.

    Args:
        path: Path to the cookie file.

    Returns:
        The :class:`~bdkrpc.auth.interfaces.Credentials` stored in the file.

    Raises:
        CookieFileIOError: If the file does not exist, is not a regular
            file, or cannot be read.
        InvalidCookieFileError: If the file was read but its first line is
            not of the form ``user:password``.
    """
    cookie_path = Path(path)
    # Only regular files are opened; FIFOs and devices are never read.
    try:
        is_regular = stat.S_ISREG(cookie_path.stat().st_mode)
        raw = cookie_path.read_bytes() if is_regular else None
    except (OSError, ValueError) as e:
        logger.debug("Cannot read cookie file %r: %s", cookie_path, e)
        raise CookieFileIOError(
            f"Cannot read cookie file {cookie_path}: "
            f"{getattr(e, 'strerror', None) or e}",
            cookie_path,
        ) from e
    if raw is None:
        raise CookieFileIOError(
            f"Cannot read cookie file {cookie_path}: not a regular file",
            cookie_path,
        )

    try:
        content = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidCookieFileError(
            f"Cookie file {cookie_path} is not valid UTF-8 text.", cookie_path
        ) from e

    line = content.split("\n", 1)[0].removesuffix("\r")
    user, sep, password = line.partition(":")
    if not sep:
        raise InvalidCookieFileError(
            f"Cookie file {cookie_path} does not contain a 'user:password' pair.",
            cookie_path,
        )
    logger.debug("Resolved RPC credentials for user %r from %s", user, cookie_path)
    return Credentials(user=user, password=password)


def default_datadir() -> Path:
    """Return Bitcoin Core's default data directory for this platform.

    Returns:
        ``%APPDATA%\\Bitcoin`` on Windows,
        ``~/Library/Application Support/Bitcoin`` on macOS and
        ``~/.bitcoin`` everywhere else.
    """
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        base = Path(appdata) if appdata else Path.home() / "AppData" / "Roaming"
        return base / "Bitcoin"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "Bitcoin"
    return Path.home() / ".bitcoin"


def default_cookie_path(
    network: str = "main", datadir: str | os.PathLike | None = None
) -> Path:
    """Return where the node writes its cookie file for *network*.

    The filesystem is not accessed; the returned path may not exist.

    Args:
        network: One of ``main``, ``test`` (``testnet3``), ``testnet4``,
            ``signet`` or ``regtest``.
        datadir: The node's ``-datadir``.  Defaults to
            :func:`default_datadir`.

    Returns:
        A :class:`pathlib.Path` to the ``.cookie`` file.

    Raises:
        ValueError: If *network* is not known.
    """
    try:
        subdir = _NETWORK_DIRS[network.lower()]
    except KeyError:
        raise ValueError(f"Unknown network: {network!r}") from None
    base = Path(datadir).expanduser() if datadir is not None else default_datadir()
    return base / subdir / COOKIE_FILENAME if subdir else base / COOKIE_FILENAME
