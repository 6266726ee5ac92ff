"""
Exception hierarchy for feeprobe.

All feeprobe exceptions inherit from FeeProbeError, which carries
structured error information: a machine-readable code, the related
transaction hash when one is known, and additional context details.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

__all__ = [
    "FeeProbeError",
    "ValidationError",
    "EncodingError",
    "NetworkQueryError",
    "SubmissionError",
    "ConfirmationError",
]


class FeeProbeError(Exception):
    """
    Base exception for all feeprobe errors.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable error code (e.g., "SUBMISSION_REJECTED").
        tx_hash: Optional transaction hash related to the error.
        details: Optional dictionary with additional error context.

    Example:
        >>> raise FeeProbeError(
        ...     "Transaction failed",
        ...     code="TX_FAILED",
        ...     tx_hash="0x123...",
        ...     details={"gas_used": 21000}
        ... )
    """

    default_code = "FEEPROBE_ERROR"

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        tx_hash: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.tx_hash = tx_hash
        self.details = details or {}

    def __str__(self) -> str:
        parts = [f"[{self.code}] {self.message}"]
        if self.tx_hash:
            parts.append(f"(tx: {self.tx_hash[:10]}...)")
        return " ".join(parts)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r}, "
            f"tx_hash={self.tx_hash!r}, "
            f"details={self.details!r})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to a dictionary for JSON serialization.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "error": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "tx_hash": self.tx_hash,
            "details": self.details,
        }


class ValidationError(FeeProbeError):
    """Raised when caller input is rejected before any network call."""

    default_code = "VALIDATION_ERROR"


class EncodingError(FeeProbeError):
    """Raised when a call payload cannot be encoded against the target interface.

    Not retryable: the same label and interface will fail the same way.
    """

    default_code = "ENCODING_ERROR"


class NetworkQueryError(FeeProbeError):
    """Raised when a read-only query against the endpoint fails.

    Transient by nature; the caller may retry the whole scenario.
    """

    default_code = "NETWORK_QUERY_ERROR"


class SubmissionError(FeeProbeError):
    """Raised when the endpoint rejects a signed envelope outright.

    Attributes:
        reason: Reason string reported by the endpoint (revert reason,
            under-priced fee field, nonce collision, ...).
    """

    default_code = "SUBMISSION_REJECTED"

    def __init__(
        self,
        message: str,
        *,
        reason: Optional[str] = None,
        code: Optional[str] = None,
        tx_hash: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, code=code, tx_hash=tx_hash, details=details)
        self.reason = reason or message


class ConfirmationError(FeeProbeError):
    """Raised when a submitted transaction is included but reverted,
    or the receipt wait fails for a reason other than the deadline."""

    default_code = "CONFIRMATION_FAILED"
