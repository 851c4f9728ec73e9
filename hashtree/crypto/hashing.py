"""
Digest Engine
Pluggable hashing primitive used by every tree and proof operation.

This module provides:
- DigestEngine: stateless wrapper around a hashlib algorithm
- get_engine: engine lookup by algorithm name
- sha256 helper and as_bytes input check
- Hex encoding/decoding with 0x prefix

Security/Determinism Notes:
- Every call to DigestEngine.hash() starts from a fresh hashlib object,
  so one engine instance can be shared freely between trees and threads
- Multiple parts passed to hash() are streamed in order, which is
  identical to hashing their concatenation
- Digest length is constant for a given engine (digest_size)
"""
from __future__ import annotations

import hashlib
from typing import Any

from hashtree.schemas.errors import UnsupportedAlgorithmException


DEFAULT_ALGORITHM = "sha256"

# Variable-length digests (shake_*) cannot serve as fixed-size tree digests
_UNSUPPORTED_ALGORITHMS = frozenset({"shake_128", "shake_256"})

_BYTES_LIKE = (bytes, bytearray, memoryview)


def _canonical_name(algorithm: str) -> str:
    """
    Map an algorithm spelling onto the name hashlib uses.

    Case, hyphens and underscores are ignored, so "SHA-256", "sha_256"
    and "sha256" all resolve to "sha256", and "SHA3-256" to "sha3_256".
    Unknown spellings are returned lowercased for hashlib to reject.
    """
    key = algorithm.lower().replace("-", "").replace("_", "")
    known = {}
    for name in sorted(hashlib.algorithms_available) + sorted(hashlib.algorithms_guaranteed):
        name = name.lower()
        known[name.replace("-", "").replace("_", "")] = name
    return known.get(key, algorithm.lower())


class DigestEngine:
    """
    Deterministic hashing capability backed by hashlib.

    Example:
        >>> engine = DigestEngine("sha256")
        >>> engine.hash(b"a", b"b") == engine.hash(b"ab")
        True
    """

    def __init__(self, algorithm: str = DEFAULT_ALGORITHM) -> None:
        name = _canonical_name(algorithm)
        if name in _UNSUPPORTED_ALGORITHMS:
            raise UnsupportedAlgorithmException(
                f"Algorithm {algorithm!r} has no fixed digest size",
                algorithm=algorithm,
            )
        try:
            probe = hashlib.new(name)
        except (ValueError, TypeError) as e:
            raise UnsupportedAlgorithmException(
                f"Hash algorithm not available: {algorithm!r}",
                algorithm=algorithm,
            ) from e
        self._name = name
        self._digest_size = probe.digest_size

    @property
    def name(self) -> str:
        """hashlib name of the algorithm."""
        return self._name

    @property
    def digest_size(self) -> int:
        """Length in bytes of every digest this engine produces."""
        return self._digest_size

    def new(self) -> Any:
        """
        Return a fresh streaming hash object (update/digest interface).

        Useful for callers that need to feed data incrementally; the
        object is never shared with the engine.
        """
        return hashlib.new(self._name)

    def hash(self, *parts: bytes) -> bytes:
        """
        Hash the concatenation of ``parts``.

        Args:
            *parts: Byte sequences, written in order

        Returns:
            Digest of exactly ``digest_size`` bytes
        """
        h = hashlib.new(self._name)
        for part in parts:
            h.update(part)
        return h.digest()

    def __call__(self, data: bytes) -> bytes:
        return self.hash(data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DigestEngine):
            return NotImplemented
        return self._name == other._name

    def __hash__(self) -> int:
        return hash(self._name)

    def __repr__(self) -> str:
        return f"DigestEngine({self._name!r})"


def get_engine(algorithm: str | None = None) -> DigestEngine:
    """
    Build an engine for ``algorithm`` (default: sha256).

    Raises:
        UnsupportedAlgorithmException: If hashlib does not provide it
    """
    return DigestEngine(algorithm or DEFAULT_ALGORITHM)


def available_algorithms() -> list[str]:
    """Sorted names of the algorithms usable as tree digests."""
    names = {n.lower() for n in hashlib.algorithms_available}
    return sorted(names - _UNSUPPORTED_ALGORITHMS)


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def as_bytes(data: Any, what: str = "value") -> bytes:
    """
    Return ``data`` as immutable bytes.

    Raises:
        TypeError: If ``data`` is not bytes, bytearray or memoryview
    """
    if not isinstance(data, _BYTES_LIKE):
        raise TypeError(
            f"{what} must be bytes-like, got {type(data).__name__}"
        )
    return bytes(data)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


__all__ = [
    "DEFAULT_ALGORITHM",
    "DigestEngine",
    "get_engine",
    "available_algorithms",
    "sha256",
    "as_bytes",
    "to_hex",
    "from_hex",
]
