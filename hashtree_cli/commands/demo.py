"""
CLI Demo Command

Builds a tree over the values "a".."h", prints it, then proves and
verifies "a". Exits with EXIT_VERIFICATION_FAILED if the proof does not
verify.

Usage:
    hashtree demo
"""

from __future__ import annotations

import logging
from argparse import Namespace

from hashtree.crypto.hashing import to_hex
from hashtree.merkle import Tree
from hashtree_cli.commands.common import EXIT_SUCCESS, EXIT_VERIFICATION_FAILED


logger = logging.getLogger(__name__)

DEMO_VALUES = [c.encode() for c in "abcdefgh"]


def demo_cmd(args: Namespace) -> int:
    engine = args.runtime_config.engine()
    tree = Tree(engine)
    root = tree.construct(DEMO_VALUES)

    print(tree)
    print(f"root: {to_hex(root)}")

    proof = tree.compute_proof(b"a")
    print(proof)

    if not tree.verify_proof(proof):
        logger.error("Failed to verify merkle proof")
        print("verified: false")
        return EXIT_VERIFICATION_FAILED

    print("verified: true")
    return EXIT_SUCCESS
