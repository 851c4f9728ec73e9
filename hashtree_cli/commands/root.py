"""
CLI Root Command

Compute the root digest of a list of values.

Usage:
    hashtree root a b c [--from-file values.txt] [--show-tree] [--json]
"""

from __future__ import annotations

import json
import logging
from argparse import Namespace

from hashtree.crypto.hashing import to_hex
from hashtree.merkle import Tree
from hashtree_cli.commands.common import EXIT_SUCCESS, read_values


logger = logging.getLogger(__name__)


def root_cmd(args: Namespace) -> int:
    config = args.runtime_config
    values = read_values(args)
    logger.info(f"Building tree over {len(values)} values ({config.hash_algorithm})")

    tree = Tree(config.engine())
    root = tree.construct(values)

    if args.json:
        print(json.dumps({
            "algorithm": tree.engine.name,
            "root": to_hex(root),
            "height": tree.height,
            "leaves": tree.leaf_count,
        }, indent=2))
        return EXIT_SUCCESS

    if args.show_tree:
        print(tree)
    print(f"root: {to_hex(root)}")
    print(f"height: {tree.height}")
    print(f"leaves: {tree.leaf_count}")
    return EXIT_SUCCESS
