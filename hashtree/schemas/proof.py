"""
File: proof.py

Purpose: JSON document schema for transporting an inclusion proof
independently of the tree that produced it.

Digests are 0x-prefixed lowercase hex strings. Conversion between
ProofDocument and hashtree.merkle.proofs.Proof lives in
hashtree.merkle.codec.
"""

from __future__ import annotations

import re
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .versioning import SCHEMA_VERSION, assert_supported_schema_version


# 0x followed by one or more whole bytes
HEX_DIGEST_PATTERN = re.compile(r"^0x(?:[0-9a-fA-F]{2})+$")

DirectionName = Literal["left", "right", "lone"]


def validate_hex_digest(value: str, field_name: str) -> str:
    """Validate a 0x-prefixed hex digest and normalize it to lowercase."""
    if not HEX_DIGEST_PATTERN.match(value):
        shown = f"{value[:20]}..." if len(value) > 20 else value
        raise ValueError(
            f"{field_name} must be a 0x-prefixed hex string of whole bytes, got: {shown}"
        )
    return value.lower()


class BranchEntryDocument(BaseModel):
    """One (direction, sibling) step of a branch."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    direction: DirectionName = Field(
        ...,
        description="Side the sibling is combined on; 'lone' when the node has no sibling",
    )
    sibling: Optional[str] = Field(
        default=None,
        description="Sibling digest (0x hex); absent for 'lone' entries",
    )

    @field_validator("sibling")
    @classmethod
    def validate_sibling(cls, v: Optional[str]) -> Optional[str]:
        if v is not None:
            return validate_hex_digest(v, "sibling")
        return v

    @model_validator(mode="after")
    def validate_sibling_presence(self) -> "BranchEntryDocument":
        if self.direction == "lone" and self.sibling is not None:
            raise ValueError("'lone' branch entries must not carry a sibling")
        if self.direction != "lone" and self.sibling is None:
            raise ValueError(f"'{self.direction}' branch entries require a sibling")
        return self


class ProofDocument(BaseModel):
    """
    Serialized inclusion proof.

    A verifier needs only this document, the digest algorithm it names,
    and a trusted root (either the embedded one or one obtained out of band).
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(default=SCHEMA_VERSION)
    algorithm: str = Field(
        ...,
        description="hashlib name of the digest algorithm",
        min_length=1,
    )
    root: Optional[str] = Field(
        default=None,
        description="Root digest the proof was generated against (0x hex)",
    )
    leaf: str = Field(
        ...,
        description="Digest of the proven value (0x hex)",
    )
    branch: list[BranchEntryDocument] = Field(
        default_factory=list,
        description="Sibling steps, leaf level first",
    )

    @field_validator("schema_version")
    @classmethod
    def validate_schema_version(cls, v: str) -> str:
        assert_supported_schema_version(v)
        return v

    @field_validator("leaf")
    @classmethod
    def validate_leaf(cls, v: str) -> str:
        return validate_hex_digest(v, "leaf")

    @field_validator("root")
    @classmethod
    def validate_root(cls, v: Optional[str]) -> Optional[str]:
        if v is not None:
            return validate_hex_digest(v, "root")
        return v

    @model_validator(mode="after")
    def validate_digest_lengths(self) -> "ProofDocument":
        """All digests in one proof come from one engine, so share one length."""
        size = len(self.leaf)
        if self.root is not None and len(self.root) != size:
            raise ValueError("root digest length differs from leaf digest length")
        for i, entry in enumerate(self.branch):
            if entry.sibling is not None and len(entry.sibling) != size:
                raise ValueError(
                    f"branch[{i}] sibling length differs from leaf digest length"
                )
        return self
