"""
Proof Serialization
Binary and JSON encodings of inclusion proofs.

Binary layout (all integers big-endian):

    version      u8   (PROOF_FORMAT_VERSION)
    digest_size  u8
    entry_count  u16
    leaf         digest_size bytes
    entries      entry_count x (tag u8 [+ sibling digest_size bytes])

Tags are Direction values: LEFT=0, RIGHT=1, LONE=2. LONE entries carry
no sibling bytes.

JSON documents are hashtree.schemas.proof.ProofDocument instances.
"""
from __future__ import annotations

import json
import struct
from typing import Optional

from pydantic import ValidationError

from hashtree.crypto.hashing import from_hex, to_hex
from hashtree.merkle.proofs import Branch, BranchEntry, Direction, Proof
from hashtree.schemas.errors import ProofDecodeException
from hashtree.schemas.proof import BranchEntryDocument, ProofDocument
from hashtree.schemas.versioning import PROOF_FORMAT_VERSION, SUPPORTED_PROOF_FORMAT_VERSIONS


_HEADER = struct.Struct(">BBH")
MAX_BRANCH_ENTRIES = 0xFFFF


# =============================================================================
# Binary
# =============================================================================

def encode_proof(proof: Proof) -> bytes:
    """
    Encode a proof into the compact binary layout.

    Raises:
        ValueError: If the proof is malformed (mixed digest sizes, a
            LEFT/RIGHT entry without sibling, too many entries)
    """
    size = len(proof.leaf)
    if not 0 < size <= 0xFF:
        raise ValueError(f"Digest size {size} cannot be encoded")
    if len(proof.branch) > MAX_BRANCH_ENTRIES:
        raise ValueError(f"Branch has {len(proof.branch)} entries, max {MAX_BRANCH_ENTRIES}")

    out = bytearray(_HEADER.pack(PROOF_FORMAT_VERSION, size, len(proof.branch)))
    out += proof.leaf
    for i, entry in enumerate(proof.branch):
        if not entry.well_formed:
            raise ValueError(f"branch[{i}] is malformed: {entry}")
        out.append(int(entry.direction))
        if entry.sibling is not None:
            if len(entry.sibling) != size:
                raise ValueError(f"branch[{i}] sibling is {len(entry.sibling)} bytes, expected {size}")
            out += entry.sibling
    return bytes(out)


def decode_proof(data: bytes) -> Proof:
    """
    Decode a proof produced by encode_proof().

    Raises:
        ProofDecodeException: On truncated or trailing data, unknown
            version or unknown direction tag
    """
    data = bytes(data)
    if len(data) < _HEADER.size:
        raise ProofDecodeException(
            "Proof is shorter than its header",
            details={"length": len(data)},
        )
    version, size, count = _HEADER.unpack_from(data, 0)
    if version not in SUPPORTED_PROOF_FORMAT_VERSIONS:
        raise ProofDecodeException(
            f"Unsupported proof format version: {version}",
            details={"version": version},
        )
    if size == 0:
        raise ProofDecodeException("Digest size must be non-zero")

    offset = _HEADER.size

    def take(n: int) -> bytes:
        nonlocal offset
        if offset + n > len(data):
            raise ProofDecodeException(
                "Proof data is truncated",
                details={"offset": offset, "needed": n, "length": len(data)},
            )
        chunk = data[offset:offset + n]
        offset += n
        return chunk

    leaf = take(size)
    entries: list[BranchEntry] = []
    for i in range(count):
        tag = take(1)[0]
        try:
            direction = Direction(tag)
        except ValueError:
            raise ProofDecodeException(
                f"Unknown direction tag {tag} in branch[{i}]",
                details={"index": i, "tag": tag},
            ) from None
        sibling = None if direction is Direction.LONE else take(size)
        entries.append(BranchEntry(direction, sibling))

    if offset != len(data):
        raise ProofDecodeException(
            "Trailing bytes after proof",
            details={"trailing": len(data) - offset},
        )
    return Proof(branch=Branch(entries), leaf=leaf)


# =============================================================================
# JSON documents
# =============================================================================

def to_document(
    proof: Proof,
    algorithm: str,
    root: Optional[bytes] = None,
) -> ProofDocument:
    """Wrap a proof (and optionally its root) in a ProofDocument."""
    return ProofDocument(
        algorithm=algorithm,
        root=to_hex(root) if root is not None else None,
        leaf=to_hex(proof.leaf),
        branch=[
            BranchEntryDocument(
                direction=entry.direction.label,
                sibling=to_hex(entry.sibling) if entry.sibling is not None else None,
            )
            for entry in proof.branch
        ],
    )


def from_document(document: ProofDocument) -> Proof:
    """Rebuild a Proof from a validated ProofDocument."""
    entries = [
        BranchEntry(
            Direction.from_label(entry.direction),
            from_hex(entry.sibling) if entry.sibling is not None else None,
        )
        for entry in document.branch
    ]
    return Proof(branch=Branch(entries), leaf=from_hex(document.leaf))


def dumps_proof(
    proof: Proof,
    algorithm: str,
    root: Optional[bytes] = None,
    indent: Optional[int] = None,
) -> str:
    """Serialize a proof to a JSON string."""
    document = to_document(proof, algorithm, root)
    return json.dumps(document.model_dump(mode="json"), indent=indent, sort_keys=True)


def loads_document(text: str | bytes) -> ProofDocument:
    """
    Parse and validate a JSON proof document.

    Raises:
        ProofDecodeException: If the JSON is invalid or fails validation
    """
    try:
        return ProofDocument.model_validate_json(text)
    except ValidationError as e:
        raise ProofDecodeException(
            "Invalid proof document",
            details={"errors": [err["msg"] for err in e.errors()]},
        ) from e


def loads_proof(text: str | bytes) -> Proof:
    """Parse a JSON proof document straight into a Proof."""
    return from_document(loads_document(text))


__all__ = [
    "MAX_BRANCH_ENTRIES",
    "encode_proof",
    "decode_proof",
    "to_document",
    "from_document",
    "dumps_proof",
    "loads_document",
    "loads_proof",
]
