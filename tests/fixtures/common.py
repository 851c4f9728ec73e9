"""
Common test fixtures shared by all test modules.

Provides factory functions for:
- leaf value lists
- digest engines
- constructed trees
"""

from typing import Optional

from hashtree.crypto.hashing import DigestEngine, get_engine
from hashtree.merkle import Tree


LETTERS = [c.encode() for c in "abcdefgh"]


def make_values(count: int, prefix: str = "leaf") -> list[bytes]:
    """Distinct values: b"leaf0", b"leaf1", ..."""
    return [f"{prefix}{i}".encode() for i in range(count)]


def make_engine(algorithm: str = "sha256") -> DigestEngine:
    return get_engine(algorithm)


def make_tree(
    values: Optional[list[bytes]] = None,
    algorithm: str = "sha256",
) -> Tree:
    """Construct a tree over ``values`` (default: b"a".."h")."""
    tree = Tree(make_engine(algorithm))
    tree.construct(LETTERS if values is None else values)
    return tree
