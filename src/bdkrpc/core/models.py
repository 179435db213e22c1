"""Data model dataclasses for decoded RPC results."""

import re
from dataclasses import dataclass

_HEX_64 = re.compile(r"[0-9a-fA-F]{64}")


# ----------------------
# BlockHash
# ----------------------


@dataclass(frozen=True)
class BlockHash:
    """A block hash in the byte order the node displays it."""

    hex: str
    """64 lowercase hex characters."""

    @classmethod
    def from_hex(cls, value: str) -> "BlockHash":
        """Parse a block hash returned by the node.

        Args:
            value: A 64-character hex string.

        Returns:
            A :class:`BlockHash` with the hex normalised to lowercase.

        Raises:
            ValueError: If *value* is not a 64-character hex string.
        """
        if not isinstance(value, str) or not _HEX_64.fullmatch(value):
            raise ValueError(f"not a block hash: {value!r}")
        return cls(hex=value.lower())

    def __str__(self) -> str:
        return self.hex


# ----------------------
# BlockchainInfo
# ----------------------


@dataclass(frozen=True)
class BlockchainInfo:
    """Subset of the ``getblockchaininfo`` result."""

    chain: str
    """Network name as reported by the node (``main``, ``test``, ``regtest`` …)."""

    blocks: int
    headers: int
    best_block_hash: BlockHash
    difficulty: float
    verification_progress: float
    initial_block_download: bool
    pruned: bool

    @classmethod
    def from_rpc(cls, data: dict) -> "BlockchainInfo":
        """Map a raw ``getblockchaininfo`` dictionary to a model.

        Raises:
            KeyError: If a required field is missing.
            ValueError: If ``bestblockhash`` is malformed.
        """
        return cls(
            chain=data["chain"],
            blocks=int(data["blocks"]),
            headers=int(data["headers"]),
            best_block_hash=BlockHash.from_hex(data["bestblockhash"]),
            difficulty=float(data.get("difficulty", 0.0)),
            verification_progress=float(data.get("verificationprogress", 0.0)),
            initial_block_download=bool(data.get("initialblockdownload", False)),
            pruned=bool(data.get("pruned", False)),
        )
