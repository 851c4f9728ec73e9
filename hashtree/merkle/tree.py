"""
Merkle Tree Implementation
Static binary hash tree: construction, proof generation, verification.

Shape Rules (Hard Contracts):
1. Levels are indexed root-first: level 1 is the root, level height()
   holds the leaves in input order
2. A parent at position i owns children 2i and 2i + 1 of the level
   below; each level has ceil(child_count / 2) nodes
3. Height is 0 when empty, 2 for a single value (the root wraps the
   lone leaf), otherwise ceil(log2(count)) + 1

Hashing Rules:
1. Leaf: hash(value)
2. Two children: hash(left + right)
3. Left child only (odd tail): hash(left)

Nodes live in per-level arrays addressed by (level, position); parent
and child links are index arithmetic, never stored references.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from hashtree.crypto.hashing import DigestEngine, as_bytes, get_engine, to_hex
from hashtree.merkle.proofs import Branch, BranchEntry, Direction, Proof, verify_proof
from hashtree.schemas.errors import (
    EmptyInputException,
    HeightOutOfRangeException,
    InvalidStateException,
    InvariantViolationException,
    NotFoundException,
)


logger = logging.getLogger(__name__)


def calc_tree_height(count: int) -> int:
    """
    Number of levels in a tree over ``count`` leaves.

    Examples:
        >>> [calc_tree_height(n) for n in (0, 1, 2, 5, 8, 9)]
        [0, 2, 2, 4, 4, 5]
    """
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    if count == 0:
        return 0
    if count == 1:
        return 2
    # (count - 1).bit_length() == ceil(log2(count)) for count >= 1
    return (count - 1).bit_length() + 1


def parent_count(child_count: int) -> int:
    """Size of the level above one holding ``child_count`` nodes."""
    return (child_count + 1) // 2


@dataclass
class Node:
    """A tree vertex. The digest is written once and never changed."""

    digest: Optional[bytes] = None

    def set_digest(self, digest: bytes) -> None:
        if self.digest is not None:
            raise InvariantViolationException("Node digest is already set")
        self.digest = digest

    def __str__(self) -> str:
        if self.digest is None:
            return "NODE(--) "
        return f"NODE({self.digest[:3].hex()}..) "


class Level(list):
    """Ordered nodes at one depth, left to right."""

    def index_of(self, digest: bytes) -> int:
        """Position of the first node holding ``digest``, or -1."""
        for i, node in enumerate(self):
            if node.digest == digest:
                return i
        return -1

    def __str__(self) -> str:
        return "------LEVEL------\n" + "".join(str(nd) for nd in self) + "\n"


class Tree:
    """
    A build-once Merkle tree bound to one digest engine.

    Example:
        >>> tree = Tree(get_engine("sha256"))
        >>> root = tree.construct([b"a", b"b", b"c"])
        >>> tree.verify_proof(tree.compute_proof(b"b"))
        True
    """

    def __init__(self, engine: DigestEngine | None = None) -> None:
        self._engine = engine or get_engine()
        self._levels: list[Level] = []

    @classmethod
    def from_values(
        cls,
        values: Iterable[bytes],
        engine: DigestEngine | None = None,
    ) -> "Tree":
        """Create and construct a tree in one step."""
        tree = cls(engine)
        tree.construct(values)
        return tree

    # -------------------------------------------------------------------------
    # Read-only queries
    # -------------------------------------------------------------------------

    @property
    def engine(self) -> DigestEngine:
        return self._engine

    @property
    def height(self) -> int:
        return len(self._levels)

    @property
    def empty(self) -> bool:
        return self.height == 0

    @property
    def root(self) -> Optional[bytes]:
        """Root digest, or None for an empty tree."""
        if self.empty:
            return None
        return self._levels[0][0].digest

    @property
    def leaf_count(self) -> int:
        if self.empty:
            return 0
        return len(self._levels[-1])

    def level(self, height: int) -> Level:
        """
        Return the level at ``height`` (1 = root, height() = leaves).

        Raises:
            HeightOutOfRangeException: If height is outside [1, height()]
        """
        if height < 1 or height > self.height:
            raise HeightOutOfRangeException(
                f"Height {height} out of range [1, {self.height}]",
                height=height,
                tree_height=self.height,
            )
        return self._levels[height - 1]

    def __str__(self) -> str:
        return "".join(str(level) for level in self._levels)

    def __repr__(self) -> str:
        return f"Tree(engine={self._engine!r}, height={self.height}, leaves={self.leaf_count})"

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    def construct(self, values: Iterable[bytes]) -> bytes:
        """
        Build the tree over ``values`` and return the root digest.

        Algorithm:
        1. Hash every value into a leaf node, preserving order
        2. Allocate parent levels of ceil(n / 2) nodes up to the root
        3. Hash each level strictly bottom-up, so every node is hashed
           exactly once and only after both its children

        Raises:
            InvalidStateException: If the tree was already constructed
            EmptyInputException: If ``values`` is empty
            TypeError: If a value is not bytes-like
        """
        if not self.empty:
            raise InvalidStateException(
                details={"height": self.height, "leaf_count": self.leaf_count},
            )
        values = list(values)
        if not values:
            raise EmptyInputException()

        count = len(values)
        height = calc_tree_height(count)

        levels: list[Level] = [Level() for _ in range(height)]
        levels[-1] = Level(Node(self._engine.hash(as_bytes(v))) for v in values)
        for depth in range(height - 2, -1, -1):
            size = parent_count(len(levels[depth + 1]))
            levels[depth] = Level(Node() for _ in range(size))

        if len(levels[0]) != 1:
            raise InvariantViolationException(
                f"Root level has {len(levels[0])} nodes",
                height=1,
            )

        self._levels = levels
        for depth in range(height - 2, -1, -1):
            for position, node in enumerate(levels[depth]):
                node.set_digest(self._combine_children(depth, position))

        root = self.root
        logger.debug(
            "Constructed tree: %d leaves, height %d, root %s",
            count, height, to_hex(root),
        )
        return root

    def _child_positions(self, depth: int, position: int) -> list[int]:
        below = self._levels[depth + 1]
        left = 2 * position
        return [p for p in (left, left + 1) if p < len(below)]

    def _combine_children(self, depth: int, position: int) -> bytes:
        below = self._levels[depth + 1]
        parts = []
        for child in self._child_positions(depth, position):
            digest = below[child].digest
            if digest is None:
                raise InvariantViolationException(
                    "Child node has no digest",
                    height=depth + 2,
                    position=child,
                )
            parts.append(digest)
        if not parts:
            raise InvariantViolationException(
                "Internal node has no children",
                height=depth + 1,
                position=position,
            )
        return self._engine.hash(*parts)

    # -------------------------------------------------------------------------
    # Hash propagation (post-order recompute)
    # -------------------------------------------------------------------------

    def subtree_digest(self, height: int, position: int) -> bytes:
        """
        Recompute the digest of the subtree rooted at (height, position).

        Walks the subtree post-order with an explicit stack, starting
        from the leaf digests and ignoring stored internal digests, so
        the result can be compared with the stored value.

        Raises:
            HeightOutOfRangeException: If height is outside [1, height()]
            IndexError: If position is outside the level
            InvariantViolationException: If a leaf has no digest
        """
        level = self.level(height)
        if position < 0 or position >= len(level):
            raise IndexError(
                f"Position {position} out of range for level of {len(level)} nodes"
            )

        leaf_depth = self.height - 1
        start = (height - 1, position)
        computed: dict[tuple[int, int], bytes] = {}
        stack: list[tuple[int, int, bool]] = [(start[0], start[1], False)]

        while stack:
            depth, pos, expanded = stack.pop()
            if depth == leaf_depth:
                digest = self._levels[depth][pos].digest
                if digest is None:
                    raise InvariantViolationException(
                        "Leaf node does not have a digest",
                        height=depth + 1,
                        position=pos,
                    )
                computed[(depth, pos)] = digest
                continue
            children = self._child_positions(depth, pos)
            if not expanded:
                stack.append((depth, pos, True))
                for child in reversed(children):
                    stack.append((depth + 1, child, False))
                continue
            parts = [computed.pop((depth + 1, child)) for child in children]
            computed[(depth, pos)] = self._engine.hash(*parts)

        return computed[start]

    def check_integrity(self) -> bool:
        """True if recomputing from the leaves reproduces every stored digest."""
        if self.empty:
            return True
        for height in range(1, self.height):
            for position, node in enumerate(self.level(height)):
                if node.digest != self.subtree_digest(height, position):
                    logger.warning(
                        "Stored digest mismatch at level %d position %d", height, position
                    )
                    return False
        return True

    # -------------------------------------------------------------------------
    # Proofs
    # -------------------------------------------------------------------------

    def compute_proof(self, value: bytes) -> Proof:
        """
        Build an inclusion proof for ``value``.

        The first leaf whose digest equals hash(value) is proven.

        Raises:
            HeightOutOfRangeException: If the tree is empty
            NotFoundException: If no leaf holds hash(value)
            TypeError: If ``value`` is not bytes-like
        """
        digest = self._engine.hash(as_bytes(value))
        leaves = self.level(self.height)
        position = leaves.index_of(digest)
        if position < 0:
            logger.debug("Value not found among %d leaves: %s", len(leaves), to_hex(digest))
            raise NotFoundException(digest=to_hex(digest))
        return self.compute_proof_at(position)

    def compute_proof_at(self, position: int) -> Proof:
        """
        Build an inclusion proof for the leaf at ``position``.

        At each level below the root the sibling sits at position ^ 1:
        an odd position records LEFT, an even one RIGHT, and a node
        with no sibling (odd tail) records LONE.

        Raises:
            HeightOutOfRangeException: If the tree is empty
            IndexError: If position is outside the leaf level
        """
        leaves = self.level(self.height)
        if position < 0 or position >= len(leaves):
            raise IndexError(
                f"Leaf index {position} out of range for {len(leaves)} leaves"
            )

        entries: list[BranchEntry] = []
        i = position
        for height in range(self.height, 1, -1):
            level = self.level(height)
            sibling = i ^ 1
            if sibling >= len(level):
                entries.append(BranchEntry(Direction.LONE))
            elif i & 1:
                entries.append(BranchEntry(Direction.LEFT, level[sibling].digest))
            else:
                entries.append(BranchEntry(Direction.RIGHT, level[sibling].digest))
            i //= 2

        return Proof(branch=Branch(entries), leaf=leaves[position].digest)

    def verify_proof(self, proof: Proof) -> bool:
        """Verify ``proof`` against this tree's root. False on an empty tree."""
        return verify_proof(proof, self.root, self._engine)


__all__ = [
    "Node",
    "Level",
    "Tree",
    "calc_tree_height",
    "parent_count",
]
