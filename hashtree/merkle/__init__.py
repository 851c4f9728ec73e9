"""
Merkle Tree and Inclusion Proofs

This package provides:
- Tree: build-once binary hash tree over ordered byte values
- Proof / Branch / BranchEntry / Direction: inclusion proof types
- verify_proof / compute_root: verification without the tree
- encode_proof / decode_proof / dumps_proof / loads_proof: serialization

Hashing Rules:
1. Leaf: hash(value)
2. Parent of two: hash(left + right)
3. Parent of one (odd tail): hash(left)

Usage:
    from hashtree.crypto import get_engine
    from hashtree.merkle import Tree, verify_proof

    engine = get_engine("sha256")
    tree = Tree(engine)
    root = tree.construct([b"a", b"b", b"c"])

    proof = tree.compute_proof(b"b")
    assert verify_proof(proof, root, engine)
"""
from .proofs import (
    Direction,
    BranchEntry,
    Branch,
    Proof,
    compute_root,
    verify_proof,
)

from .tree import (
    Node,
    Level,
    Tree,
    calc_tree_height,
    parent_count,
)

from .codec import (
    MAX_BRANCH_ENTRIES,
    encode_proof,
    decode_proof,
    to_document,
    from_document,
    dumps_proof,
    loads_document,
    loads_proof,
)


__all__ = [
    # Proof types
    "Direction",
    "BranchEntry",
    "Branch",
    "Proof",
    "compute_root",
    "verify_proof",
    # Tree
    "Node",
    "Level",
    "Tree",
    "calc_tree_height",
    "parent_count",
    # Serialization
    "MAX_BRANCH_ENTRIES",
    "encode_proof",
    "decode_proof",
    "to_document",
    "from_document",
    "dumps_proof",
    "loads_document",
    "loads_proof",
]
