"""
CLI Prove Command

Build a tree over the given values and write an inclusion proof for one
of them.

JSON proofs embed the algorithm and root. Binary proofs carry only the
leaf and branch, so the root is reported on stderr and must be passed
to `verify --root`.

Usage:
    hashtree prove --value b a b c d [--out proof.json] [--format json|binary]
"""

from __future__ import annotations

import logging
import sys
from argparse import Namespace
from pathlib import Path

from hashtree.crypto.hashing import to_hex
from hashtree.merkle import Tree, dumps_proof, encode_proof
from hashtree_cli.commands.common import EXIT_SUCCESS, read_values


logger = logging.getLogger(__name__)


def prove_cmd(args: Namespace) -> int:
    config = args.runtime_config
    proof_format = args.format or config.proof_format

    tree = Tree(config.engine())
    root = tree.construct(read_values(args))
    proof = tree.compute_proof(args.value.encode("utf-8"))
    logger.info(f"Proof for {args.value!r}: {len(proof)} branch entries")

    if proof_format == "binary":
        payload = encode_proof(proof)
        print(f"root: {to_hex(root)}", file=sys.stderr)
        if args.out:
            Path(args.out).write_bytes(payload)
        else:
            sys.stdout.buffer.write(payload)
            sys.stdout.flush()
        return EXIT_SUCCESS

    text = dumps_proof(proof, tree.engine.name, root=root, indent=2)
    if args.out:
        Path(args.out).write_text(text + "\n", encoding="utf-8")
    else:
        print(text)
    return EXIT_SUCCESS
