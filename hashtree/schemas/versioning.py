"""
File: versioning.py

Purpose: Centralize serialized proof format version constants.
Kept free of imports from other schema files to avoid circular dependencies.
"""

# JSON proof document schema version
SCHEMA_VERSION: str = "v1"

# Binary proof encoding version (first byte of every encoded proof)
PROOF_FORMAT_VERSION: int = 1

SUPPORTED_SCHEMA_VERSIONS: frozenset[str] = frozenset({"v1"})
SUPPORTED_PROOF_FORMAT_VERSIONS: frozenset[int] = frozenset({1})


class UnsupportedSchemaVersionError(ValueError):
    """Raised when an unsupported schema version is encountered."""

    def __init__(self, version: str, supported: frozenset[str] | None = None) -> None:
        self.version = version
        self.supported = supported or SUPPORTED_SCHEMA_VERSIONS
        super().__init__(
            f"Unsupported schema version: '{version}'. "
            f"Supported versions: {sorted(self.supported)}"
        )


def assert_supported_schema_version(version: str) -> None:
    """
    Validate that the given schema version is supported.

    Raises:
        UnsupportedSchemaVersionError: If the version is not supported.
    """
    if version not in SUPPORTED_SCHEMA_VERSIONS:
        raise UnsupportedSchemaVersionError(version)
