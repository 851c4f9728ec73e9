"""
CLI Verify Command

Verify a serialized proof offline, with no access to the original tree:
- Decode the proof (JSON document or binary, detected from content)
- Optionally check that it proves a given value
- Replay the branch and compare with the trusted root

Usage:
    hashtree verify proof.json [--root 0x...] [--value b] [--json]
"""

from __future__ import annotations

import json
import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass
from pathlib import Path

from hashtree.crypto.hashing import from_hex, get_engine, to_hex
from hashtree.merkle import Proof, decode_proof, from_document, loads_document, verify_proof
from hashtree_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
)


logger = logging.getLogger(__name__)


@dataclass
class VerifySummary:
    """Summary of proof verification for CLI output."""
    proof_path: str = ""
    algorithm: str = ""
    root: str = ""
    leaf: str = ""
    branch_length: int = 0
    value_ok: bool | None = None
    verified: bool = False

    def to_dict(self) -> dict:
        d = asdict(self)
        if self.value_ok is None:
            del d["value_ok"]
        return d


def load_proof_file(path: Path) -> tuple[Proof, str | None, bytes | None]:
    """
    Load a proof file.

    Returns:
        (proof, algorithm, root); algorithm and root are None for
        binary proofs, which do not embed them
    """
    data = path.read_bytes()
    if data.lstrip()[:1] == b"{":
        document = loads_document(data)
        root = from_hex(document.root) if document.root else None
        return from_document(document), document.algorithm, root
    return decode_proof(data), None, None


def verify_cmd(args: Namespace) -> int:
    config = args.runtime_config
    proof_path = Path(args.proof_path)

    if not proof_path.exists():
        print(f"Error: Proof not found: {proof_path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    proof, algorithm, embedded_root = load_proof_file(proof_path)

    # A flag on the command line beats what the document claims
    if args.algorithm:
        algorithm = args.algorithm
    engine = get_engine(algorithm or config.hash_algorithm)

    if args.root:
        try:
            root = from_hex(args.root)
        except ValueError as e:
            print(f"Error: invalid --root: {e}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR
    else:
        root = embedded_root
    if root is None:
        print("Error: no root digest; pass --root for binary proofs", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    summary = VerifySummary(
        proof_path=str(proof_path),
        algorithm=engine.name,
        root=to_hex(root),
        leaf=to_hex(proof.leaf),
        branch_length=len(proof),
    )

    verified = verify_proof(proof, root, engine)
    if args.value is not None:
        summary.value_ok = engine.hash(args.value.encode("utf-8")) == proof.leaf
        verified = verified and summary.value_ok
    summary.verified = verified

    if args.json:
        print(json.dumps(summary.to_dict(), indent=2))
    else:
        print(f"proof: {summary.proof_path}")
        print(f"algorithm: {summary.algorithm}")
        print(f"root: {summary.root}")
        print(f"leaf: {summary.leaf}")
        print(f"branch_length: {summary.branch_length}")
        if summary.value_ok is not None:
            print(f"value_ok: {str(summary.value_ok).lower()}")
        print(f"verified: {str(summary.verified).lower()}")

    if verified:
        logger.info("Verification passed")
        return EXIT_SUCCESS
    logger.warning("Verification failed")
    return EXIT_VERIFICATION_FAILED
