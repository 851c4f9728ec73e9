"""
Inclusion Proofs
Branch/Proof types and tree-independent proof verification.

A Branch is the ordered list of (direction, sibling digest) steps from a
leaf up to, but excluding, the root. Replaying the steps from the leaf
digest yields the root:

- LEFT:  digest = hash(sibling + digest)   (sibling sits on the left)
- RIGHT: digest = hash(digest + sibling)   (sibling sits on the right)
- LONE:  digest = hash(digest)             (odd tail, no sibling)

Proofs are immutable. verify_proof() folds over the branch in a local
variable, so the same Proof can be verified any number of times.
"""
from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Optional

from hashtree.crypto.hashing import DigestEngine, as_bytes


logger = logging.getLogger(__name__)


class Direction(IntEnum):
    """Side of the running digest the sibling is combined on.

    The integer values double as the binary encoding tags.
    """

    LEFT = 0
    RIGHT = 1
    LONE = 2

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def from_label(cls, label: str) -> "Direction":
        return cls[label.upper()]


@dataclass(frozen=True)
class BranchEntry:
    """
    One step of a branch.

    Attributes:
        direction: Where the sibling goes when recombining
        sibling: Sibling digest, None only for LONE entries
    """
    direction: Direction
    sibling: Optional[bytes] = None

    def __post_init__(self) -> None:
        if not isinstance(self.direction, Direction):
            object.__setattr__(self, "direction", Direction(self.direction))
        if self.sibling is not None:
            object.__setattr__(self, "sibling", as_bytes(self.sibling, "sibling"))

    @property
    def well_formed(self) -> bool:
        """True when the sibling's presence matches the direction."""
        if self.direction is Direction.LONE:
            return self.sibling is None
        return self.sibling is not None

    def __str__(self) -> str:
        if self.sibling is None:
            return f"{self.direction.name}"
        return f"{self.direction.name} HASH({self.sibling[:3].hex()}..)"


class Branch(tuple):
    """Immutable sequence of BranchEntry, leaf level first."""

    def __new__(cls, entries: Iterable[BranchEntry] = ()) -> "Branch":
        return super().__new__(cls, tuple(entries))

    def __str__(self) -> str:
        lines = ["[BRANCH]"]
        lines.extend(str(entry) for entry in self)
        return "\n".join(lines) + "\n"

    def __repr__(self) -> str:
        return f"Branch({list(self)!r})"


@dataclass(frozen=True)
class Proof:
    """
    An inclusion proof for a single leaf value.

    Carries no reference into the tree that produced it and stays valid
    after the tree is discarded.

    Attributes:
        branch: Sibling steps from the leaf level to just below the root
        leaf: Digest of the proven value, the starting point of verification
    """
    branch: Branch
    leaf: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.branch, Branch):
            object.__setattr__(self, "branch", Branch(self.branch))
        object.__setattr__(self, "leaf", as_bytes(self.leaf, "leaf"))

    def __len__(self) -> int:
        return len(self.branch)

    def __str__(self) -> str:
        return f"---PROOF---\n[{self.leaf[:3].hex()}..]\n\n{self.branch}"


def compute_root(proof: Proof, engine: DigestEngine) -> Optional[bytes]:
    """
    Replay a proof's branch and return the root digest it implies.

    Args:
        proof: Proof to replay
        engine: Digest engine the tree was built with

    Returns:
        The implied root digest, or None if the branch is malformed
        (a LEFT/RIGHT step without a sibling, or a LONE step with one)
    """
    digest = proof.leaf
    for entry in proof.branch:
        if not entry.well_formed:
            return None
        if entry.direction is Direction.LEFT:
            digest = engine.hash(entry.sibling, digest)
        elif entry.direction is Direction.RIGHT:
            digest = engine.hash(digest, entry.sibling)
        else:
            digest = engine.hash(digest)
    return digest


def verify_proof(proof: Proof, root: Optional[bytes], engine: DigestEngine) -> bool:
    """
    Verify a proof against a trusted root digest.

    Never raises for a bad proof; any mismatch is simply False.

    Args:
        proof: Proof to check
        root: Expected root digest (None is treated as "no root", i.e. False)
        engine: Digest engine the tree was built with

    Returns:
        True only if the replayed digest equals ``root`` byte-for-byte
    """
    if root is None:
        return False
    computed = compute_root(proof, engine)
    if computed is None:
        logger.debug("Proof rejected: malformed branch")
        return False
    ok = hmac.compare_digest(computed, root)
    if not ok:
        logger.debug("Proof rejected: root mismatch (%s.. != %s..)", computed[:4].hex(), root[:4].hex())
    return ok


__all__ = [
    "Direction",
    "BranchEntry",
    "Branch",
    "Proof",
    "compute_root",
    "verify_proof",
]
