"""
File: errors.py

Purpose: Error taxonomy for tree construction, proof generation and
proof decoding. Defines both Pydantic models for structured error
communication and Python exceptions for control flow.

Proof verification never raises: a proof that does not match is a
normal False result, not an error.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes."""

    # Tree lifecycle
    INVALID_STATE = "INVALID_STATE"
    EMPTY_INPUT = "EMPTY_INPUT"
    HEIGHT_OUT_OF_RANGE = "HEIGHT_OUT_OF_RANGE"
    INVARIANT_VIOLATION = "INVARIANT_VIOLATION"

    # Proofs
    VALUE_NOT_FOUND = "VALUE_NOT_FOUND"
    PROOF_MALFORMED = "PROOF_MALFORMED"

    # Hashing
    UNSUPPORTED_ALGORITHM = "UNSUPPORTED_ALGORITHM"


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class HashTreeError(BaseModel):
    """
    Base error model for structured error communication.

    Lets callers (e.g. the CLI's JSON output) report failures without
    passing exception objects around.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.VALUE_NOT_FOUND],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )

    def to_exception(self) -> "HashTreeException":
        """Convert this error model to a raisable exception."""
        exc_type = _EXCEPTIONS_BY_CODE.get(self.code)
        if exc_type is None:
            return HashTreeException(
                message=self.message,
                code=self.code,
                details=dict(self.details),
            )
        return exc_type(message=self.message, details=dict(self.details))


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class HashTreeException(Exception):
    """
    Base exception for all hashtree errors.

    Carries structured error information and can be converted to/from
    HashTreeError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "HASHTREE_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_error_model(self) -> HashTreeError:
        """Convert this exception to a HashTreeError model."""
        return HashTreeError(
            code=self.code,
            message=self.message,
            details=self.details,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class InvalidStateException(HashTreeException):
    """Raised when construct() is called on a tree that is already built."""

    def __init__(
        self,
        message: str = "Tree is not empty",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_STATE,
            details=details,
        )


class EmptyInputException(HashTreeException):
    """Raised when construct() is given no values."""

    def __init__(
        self,
        message: str = "No values to build a tree from",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.EMPTY_INPUT,
            details=details,
        )


class HeightOutOfRangeException(HashTreeException):
    """Raised when a level lookup is outside [1, height]."""

    def __init__(
        self,
        message: str,
        height: int | None = None,
        tree_height: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if height is not None:
            full_details["height"] = height
        if tree_height is not None:
            full_details["tree_height"] = tree_height
        super().__init__(
            message=message,
            code=ErrorCodes.HEIGHT_OUT_OF_RANGE,
            details=full_details,
        )


class NotFoundException(HashTreeException):
    """Raised when a value's digest is not among the leaves."""

    def __init__(
        self,
        message: str = "Value not found",
        digest: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if digest:
            full_details["digest"] = digest
        super().__init__(
            message=message,
            code=ErrorCodes.VALUE_NOT_FOUND,
            details=full_details,
        )


class InvariantViolationException(HashTreeException):
    """Raised when hashing finds a node whose inputs were never hashed."""

    def __init__(
        self,
        message: str,
        height: int | None = None,
        position: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if height is not None:
            full_details["height"] = height
        if position is not None:
            full_details["position"] = position
        super().__init__(
            message=message,
            code=ErrorCodes.INVARIANT_VIOLATION,
            details=full_details,
        )


class ProofDecodeException(HashTreeException):
    """Raised when a serialized proof cannot be decoded."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.PROOF_MALFORMED,
            details=details,
        )


class UnsupportedAlgorithmException(HashTreeException):
    """Raised when a digest engine is requested for an unknown algorithm."""

    def __init__(
        self,
        message: str,
        algorithm: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if algorithm:
            full_details["algorithm"] = algorithm
        super().__init__(
            message=message,
            code=ErrorCodes.UNSUPPORTED_ALGORITHM,
            details=full_details,
        )


_EXCEPTIONS_BY_CODE: dict[str, type[HashTreeException]] = {
    ErrorCodes.INVALID_STATE: InvalidStateException,
    ErrorCodes.EMPTY_INPUT: EmptyInputException,
    ErrorCodes.HEIGHT_OUT_OF_RANGE: HeightOutOfRangeException,
    ErrorCodes.VALUE_NOT_FOUND: NotFoundException,
    ErrorCodes.INVARIANT_VIOLATION: InvariantViolationException,
    ErrorCodes.PROOF_MALFORMED: ProofDecodeException,
    ErrorCodes.UNSUPPORTED_ALGORITHM: UnsupportedAlgorithmException,
}
