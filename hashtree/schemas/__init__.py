"""
File: __init__.py

Purpose: Export the public API for the schemas module: error taxonomy,
version constants and the serialized proof document.
"""

from .versioning import (
    PROOF_FORMAT_VERSION,
    SCHEMA_VERSION,
    SUPPORTED_PROOF_FORMAT_VERSIONS,
    SUPPORTED_SCHEMA_VERSIONS,
    UnsupportedSchemaVersionError,
    assert_supported_schema_version,
)

from .errors import (
    EmptyInputException,
    ErrorCodes,
    HashTreeError,
    HashTreeException,
    HeightOutOfRangeException,
    InvalidStateException,
    InvariantViolationException,
    NotFoundException,
    ProofDecodeException,
    UnsupportedAlgorithmException,
)

from .proof import (
    BranchEntryDocument,
    DirectionName,
    ProofDocument,
)

__all__ = [
    # Versioning
    "PROOF_FORMAT_VERSION",
    "SCHEMA_VERSION",
    "SUPPORTED_PROOF_FORMAT_VERSIONS",
    "SUPPORTED_SCHEMA_VERSIONS",
    "UnsupportedSchemaVersionError",
    "assert_supported_schema_version",
    # Errors
    "EmptyInputException",
    "ErrorCodes",
    "HashTreeError",
    "HashTreeException",
    "HeightOutOfRangeException",
    "InvalidStateException",
    "InvariantViolationException",
    "NotFoundException",
    "ProofDecodeException",
    "UnsupportedAlgorithmException",
    # Proof document
    "BranchEntryDocument",
    "DirectionName",
    "ProofDocument",
]
