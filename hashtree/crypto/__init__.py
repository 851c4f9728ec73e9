"""
Hashing primitives for hashtree.
"""
from .hashing import (
    DEFAULT_ALGORITHM,
    DigestEngine,
    get_engine,
    available_algorithms,
    sha256,
    as_bytes,
    to_hex,
    from_hex,
)

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
