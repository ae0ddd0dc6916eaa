"""
Schemas & Canonicalization
File: errors.py

Purpose: Standard error taxonomy for ledger proof verification.
Defines both Pydantic models for structured error communication
and Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the verifier."""

    # Hash & Proof Errors
    INVALID_HASH_LENGTH = "INVALID_HASH_LENGTH"
    EMPTY_INPUT = "EMPTY_INPUT"
    PROOF_FORMAT_INVALID = "PROOF_FORMAT_INVALID"

    # Canonicalization Errors
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"

    # Verification Errors
    METADATA_MISMATCH = "METADATA_MISMATCH"
    TAMPER_CHECK_FAILED = "TAMPER_CHECK_FAILED"

    # Ledger Collaborator Errors
    LEDGER_UNAVAILABLE = "LEDGER_UNAVAILABLE"
    DOCUMENT_NOT_FOUND = "DOCUMENT_NOT_FOUND"


# Fields that MetadataVerifier reconciles against the ledger
MISMATCH_FIELDS: frozenset[str] = frozenset({"revisionHash", "documentId", "blockAddress"})


# =============================================================================
# Pydantic Error Models (Structured Communication)
# =============================================================================

class LedgerProofError(BaseModel):
    """
    Base error model for structured error communication.

    Used by the API and CLI to serialize failures without tracebacks.
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=False,
        validate_assignment=True,
    )

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.METADATA_MISMATCH],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )
    retryable: bool = Field(
        default=False,
        description="Whether the operation can be retried",
    )

    def to_exception(self) -> "LedgerProofException":
        """Convert this error model to a raised exception."""
        return LedgerProofException(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class LedgerProofException(Exception):
    """
    Base exception for all verifier errors.

    This exception carries structured error information and can be
    converted to/from LedgerProofError models.
    """

    def __init__(
        self,
        message: str,
        code: str = "LEDGERPROOF_ERROR",
        details: dict[str, Any] | None = None,
        retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}
        self.retryable = retryable

    def to_error_model(self) -> LedgerProofError:
        """Convert this exception to a LedgerProofError model."""
        return LedgerProofError(
            code=self.code,
            message=self.message,
            details=self.details,
            retryable=self.retryable,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class InvalidHashLengthException(LedgerProofException):
    """Raised when a compare/combine operand is not a 32-byte hash."""

    def __init__(
        self,
        message: str,
        lengths: tuple[int, ...] | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if lengths is not None:
            details["lengths"] = list(lengths)
        super().__init__(
            message=message,
            code=ErrorCodes.INVALID_HASH_LENGTH,
            details=details,
            retryable=False,
        )


class EmptyInputException(LedgerProofException):
    """Raised when an operation needs at least one byte and got none."""

    def __init__(self, message: str) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.EMPTY_INPUT,
            retryable=False,
        )


class ProofFormatException(LedgerProofException):
    """Raised when an external proof, hash or address cannot be decoded."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.PROOF_FORMAT_INVALID,
            details=details,
            retryable=False,
        )


class CanonicalizationException(LedgerProofException):
    """Exception raised when a value has no Ion representation to hash."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
            retryable=False,
        )


class MetadataMismatchException(LedgerProofException):
    """
    Raised when ledger state disagrees with caller-asserted metadata.

    Always fatal to the verification call. ``field`` names the first
    field that failed to reconcile.
    """

    def __init__(
        self,
        field: str,
        expected: str | None = None,
        actual: str | None = None,
    ) -> None:
        if field not in MISMATCH_FIELDS:
            raise ValueError(f"Unknown metadata field: {field!r}")
        details: dict[str, Any] = {"field": field}
        if expected is not None:
            details["expected"] = expected
        if actual is not None:
            details["actual"] = actual
        super().__init__(
            message=f"{field} does not match the ledger "
                    f"(received: {expected}; ledger: {actual})",
            code=ErrorCodes.METADATA_MISMATCH,
            details=details,
            retryable=False,
        )
        self.field = field


class TamperCheckException(LedgerProofException):
    """Raised when the bit-flip self-check does not behave as expected."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.TAMPER_CHECK_FAILED,
            details=details,
            retryable=False,
        )


class LedgerClientException(LedgerProofException):
    """Raised when the ledger service cannot be reached or answers badly."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        retryable: bool = True,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.LEDGER_UNAVAILABLE,
            details=details,
            retryable=retryable,
        )


class DocumentNotFoundException(LedgerProofException):
    """Raised when no committed revision exists for the requested key."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.DOCUMENT_NOT_FOUND,
            details=details,
            retryable=False,
        )
