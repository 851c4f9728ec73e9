"""
hashtree - static Merkle hash trees with inclusion proofs.

    from hashtree import Tree, get_engine

    tree = Tree(get_engine("sha256"))
    root = tree.construct([b"a", b"b", b"c", b"d"])
    assert tree.verify_proof(tree.compute_proof(b"c"))
"""

__version__ = "0.1.0"

from hashtree.crypto.hashing import DigestEngine, get_engine
from hashtree.merkle import Proof, Tree, verify_proof
from hashtree.schemas.errors import HashTreeException

__all__ = [
    "__version__",
    "DigestEngine",
    "get_engine",
    "Proof",
    "Tree",
    "verify_proof",
    "HashTreeException",
]
