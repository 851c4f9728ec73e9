"""
Merkle Tree Unit Tests
Tests for hashtree/merkle/tree.py

Covers:
1. Height formula and level sizes
2. Hashing rules (pair, odd tail, single value)
3. Root determinism and order sensitivity
4. Build-once lifecycle (InvalidState / EmptyInput)
5. Level lookup bounds
6. Post-order subtree recompute and integrity check
"""
import math

import pytest

from hashtree.crypto.hashing import get_engine, sha256
from hashtree.merkle.tree import Level, Node, Tree, calc_tree_height, parent_count
from hashtree.schemas.errors import (
    EmptyInputException,
    ErrorCodes,
    HeightOutOfRangeException,
    InvalidStateException,
    InvariantViolationException,
)

from fixtures import LETTERS, make_tree, make_values


def h(*parts: bytes) -> bytes:
    return sha256(b"".join(parts))


class TestTreeHeight:
    """Tests for calc_tree_height() and level sizes."""

    def test_height_small_counts(self):
        assert calc_tree_height(0) == 0
        assert calc_tree_height(1) == 2
        assert calc_tree_height(2) == 2
        assert calc_tree_height(3) == 3
        assert calc_tree_height(4) == 3

    def test_height_matches_log_formula(self):
        for count in range(2, 130):
            assert calc_tree_height(count) == math.ceil(math.log2(count)) + 1, count

    def test_height_eight_and_five(self):
        assert make_tree(make_values(8)).height == 4
        assert make_tree(make_values(5)).height == 4

    def test_negative_count_rejected(self):
        with pytest.raises(ValueError):
            calc_tree_height(-1)

    def test_parent_count(self):
        assert [parent_count(n) for n in (1, 2, 3, 4, 5)] == [1, 1, 2, 2, 3]

    def test_level_sizes_halve_upward(self):
        tree = make_tree(make_values(11))

        sizes = [len(tree.level(i)) for i in range(1, tree.height + 1)]

        assert sizes == [1, 2, 3, 6, 11]

    @pytest.mark.parametrize("count", [1, 2, 3, 7, 8, 9, 33])
    def test_tree_height_property(self, count):
        tree = make_tree(make_values(count))

        assert tree.height == calc_tree_height(count)
        assert len(tree.level(1)) == 1
        assert tree.leaf_count == count


class TestHashingRules:
    """Tests for how node digests are derived."""

    def test_leaves_are_value_hashes_in_order(self):
        values = make_values(5)
        tree = make_tree(values)

        leaves = tree.level(tree.height)

        assert [nd.digest for nd in leaves] == [sha256(v) for v in values]

    def test_four_values(self):
        a, b, c, d = (sha256(v) for v in (b"a", b"b", b"c", b"d"))

        root = Tree(get_engine()).construct([b"a", b"b", b"c", b"d"])

        assert root == h(h(a, b), h(c, d))

    def test_three_values_odd_tail_hashes_alone(self):
        """The lone third leaf's parent is hash(leaf), not a duplicate pair."""
        a, b, c = (sha256(v) for v in (b"a", b"b", b"c"))

        root = Tree(get_engine()).construct([b"a", b"b", b"c"])

        assert root == h(h(a, b), h(c))
        assert root != h(h(a, b), h(c, c))

    def test_five_values(self):
        a, b, c, d, e = (sha256(v) for v in make_values(5))

        root = make_tree(make_values(5)).root

        # [a b c d e] -> [ab cd (e)] -> [abcd ((e))] -> root
        assert root == h(h(h(a, b), h(c, d)), h(h(e)))

    def test_single_value_root_wraps_leaf(self):
        tree = make_tree([b"only"])

        assert tree.height == 2
        assert tree.level(2)[0].digest == sha256(b"only")
        assert tree.root == h(sha256(b"only"))

    def test_construct_returns_root(self):
        tree = Tree(get_engine())
        root = tree.construct(LETTERS)

        assert root == tree.root
        assert root == tree.level(1)[0].digest

    def test_other_algorithm(self):
        tree = make_tree([b"a", b"b"], algorithm="sha512")
        engine = get_engine("sha512")

        assert len(tree.root) == 64
        assert tree.root == engine.hash(engine.hash(b"a"), engine.hash(b"b"))

    def test_accepts_any_iterable(self):
        tree = Tree(get_engine())
        root = tree.construct(v for v in LETTERS)

        assert root == make_tree().root

    def test_empty_byte_value_is_a_leaf(self):
        tree = make_tree([b"", b"x"])

        assert tree.level(2)[0].digest == sha256(b"")


class TestRootDeterminism:
    """Same input gives the same root; order matters."""

    def test_same_values_same_root(self):
        roots = {make_tree(make_values(9)).root for _ in range(5)}

        assert len(roots) == 1

    def test_order_matters(self):
        values = make_values(6)

        assert make_tree(values).root != make_tree(list(reversed(values))).root

    def test_algorithm_matters(self):
        assert make_tree(algorithm="sha256").root != make_tree(algorithm="sha3_256").root

    def test_from_values(self):
        tree = Tree.from_values(LETTERS, get_engine())

        assert tree.root == make_tree().root


class TestLifecycle:
    """Build-once semantics."""

    def test_new_tree_is_empty(self):
        tree = Tree(get_engine())

        assert tree.empty
        assert tree.height == 0
        assert tree.leaf_count == 0
        assert tree.root is None

    def test_default_engine(self):
        assert Tree().engine.name == "sha256"

    def test_empty_input_rejected(self):
        tree = Tree(get_engine())

        with pytest.raises(EmptyInputException) as exc_info:
            tree.construct([])

        assert exc_info.value.code == ErrorCodes.EMPTY_INPUT
        assert tree.empty

    def test_second_construct_rejected(self):
        tree = make_tree()
        root = tree.root

        with pytest.raises(InvalidStateException) as exc_info:
            tree.construct([b"x", b"y"])

        assert exc_info.value.code == ErrorCodes.INVALID_STATE
        assert tree.root == root

    def test_non_bytes_value_rejected(self):
        tree = Tree(get_engine())

        with pytest.raises(TypeError):
            tree.construct([3, b"x"])

        assert tree.empty

    def test_non_bytes_proof_value_rejected(self):
        with pytest.raises(TypeError):
            make_tree().compute_proof(3)

    def test_bytearray_value_accepted(self):
        tree = Tree.from_values([bytearray(b"a"), b"b"], get_engine())

        assert tree.root == make_tree([b"a", b"b"]).root

    def test_node_digest_written_once(self):
        node = Node()
        node.set_digest(b"\x01")

        with pytest.raises(InvariantViolationException):
            node.set_digest(b"\x02")
        assert node.digest == b"\x01"


class TestLevelLookup:
    """Tests for Tree.level() bounds."""

    def test_root_and_leaf_levels(self, letter_tree):
        assert len(letter_tree.level(1)) == 1
        assert len(letter_tree.level(letter_tree.height)) == 8

    @pytest.mark.parametrize("height", [0, -1, 5, 100])
    def test_out_of_range(self, letter_tree, height):
        with pytest.raises(HeightOutOfRangeException) as exc_info:
            letter_tree.level(height)

        assert exc_info.value.code == ErrorCodes.HEIGHT_OUT_OF_RANGE
        assert exc_info.value.details["tree_height"] == 4

    def test_empty_tree_has_no_levels(self):
        with pytest.raises(HeightOutOfRangeException):
            Tree(get_engine()).level(1)

    def test_index_of(self, letter_tree):
        leaves = letter_tree.level(letter_tree.height)

        assert leaves.index_of(sha256(b"c")) == 2
        assert leaves.index_of(sha256(b"z")) == -1

    def test_string_forms(self, letter_tree):
        text = str(letter_tree)

        assert text.count("------LEVEL------") == 4
        assert str(Node()) == "NODE(--) "
        assert str(Level()) == "------LEVEL------\n\n"


class TestSubtreeDigest:
    """Post-order recompute over the index arena."""

    @pytest.mark.parametrize("count", [1, 2, 5, 8, 13])
    def test_recomputed_root_matches(self, count):
        tree = make_tree(make_values(count))

        assert tree.subtree_digest(1, 0) == tree.root

    def test_every_internal_node_matches(self, odd_tree):
        for height in range(1, odd_tree.height + 1):
            for position, node in enumerate(odd_tree.level(height)):
                assert odd_tree.subtree_digest(height, position) == node.digest

    def test_leaf_subtree_is_leaf_digest(self, letter_tree):
        assert letter_tree.subtree_digest(4, 3) == sha256(b"d")

    def test_position_out_of_range(self, letter_tree):
        with pytest.raises(IndexError):
            letter_tree.subtree_digest(2, 2)

    def test_height_out_of_range(self, letter_tree):
        with pytest.raises(HeightOutOfRangeException):
            letter_tree.subtree_digest(9, 0)

    def test_leaf_without_digest_is_invariant_violation(self, letter_tree):
        letter_tree.level(4)[5].digest = None

        with pytest.raises(InvariantViolationException) as exc_info:
            letter_tree.subtree_digest(1, 0)

        assert exc_info.value.code == ErrorCodes.INVARIANT_VIOLATION
        assert exc_info.value.details == {"height": 4, "position": 5}

    def test_check_integrity(self, letter_tree):
        assert letter_tree.check_integrity()
        assert Tree(get_engine()).check_integrity()

    def test_check_integrity_detects_corruption(self, letter_tree):
        letter_tree.level(2)[1].digest = sha256(b"forged")

        assert not letter_tree.check_integrity()
