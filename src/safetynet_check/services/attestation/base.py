"""
Error taxonomy and result types for SafetyNet attestation verification.
"""

import hashlib
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .statement import AttestationStatement

logger = logging.getLogger(__name__)


class FailureReason(Enum):
    """Tagged reason for a failed verification."""
    NETWORK_ERROR = "network_error"
    SERVICE_ERROR = "service_error"
    INVALID_SIGNATURE = "invalid_signature"
    FORMAT_ERROR = "format_error"
    PARSE_ERROR = "parse_error"
    NONCE_MISMATCH = "nonce_mismatch"


class VerificationStatus(Enum):
    """Verification outcome status."""
    VALID = "valid"
    INVALID = "invalid"
    ERROR = "error"


class VerificationError(Exception):
    """
    Base class for every verification failure.

    Each subclass carries a ``reason`` tag and a human-readable ``detail``.
    All of them are terminal for the request being verified.
    """

    reason: FailureReason
    status: VerificationStatus = VerificationStatus.ERROR

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NetworkError(VerificationError):
    """The verification endpoint was unreachable or answered with garbage."""

    reason = FailureReason.NETWORK_ERROR

    def __init__(self, detail: str, url: Optional[str] = None,
                 status_code: Optional[int] = None):
        super().__init__(detail)
        self.url = url
        self.status_code = status_code


class ServiceError(VerificationError):
    """The verification endpoint reported an error processing the request."""

    reason = FailureReason.SERVICE_ERROR


class InvalidSignature(VerificationError):
    """The verification endpoint reported the signature as not valid."""

    reason = FailureReason.INVALID_SIGNATURE
    status = VerificationStatus.INVALID


class FormatError(VerificationError):
    """The token is not a well-formed three-part JWS."""

    reason = FailureReason.FORMAT_ERROR


class ParseError(VerificationError):
    """The payload is not a valid attestation statement."""

    reason = FailureReason.PARSE_ERROR

    def __init__(self, detail: str, field: Optional[str] = None):
        super().__init__(detail)
        self.field = field


class NonceMismatch(VerificationError):
    """The statement nonce differs from the nonce the caller issued."""

    reason = FailureReason.NONCE_MISMATCH
    status = VerificationStatus.INVALID


@dataclass
class VerificationOutcome:
    """Result of verifying one signed attestation statement."""

    status: VerificationStatus
    reason: Optional[FailureReason] = None
    detail: Optional[str] = None
    statement: Optional["AttestationStatement"] = None
    token_hash: Optional[str] = None
    verified_at: Optional[datetime] = None

    def __post_init__(self):
        if self.verified_at is None:
            self.verified_at = datetime.now(timezone.utc)

    @property
    def is_valid(self) -> bool:
        """Check if the statement was verified and parsed."""
        return self.status == VerificationStatus.VALID

    @property
    def is_invalid(self) -> bool:
        """Check if the statement was rejected."""
        return self.status == VerificationStatus.INVALID

    @property
    def is_error(self) -> bool:
        """Check if verification could not be completed."""
        return self.status == VerificationStatus.ERROR

    @classmethod
    def success(cls, statement: "AttestationStatement",
                token_hash: Optional[str] = None) -> "VerificationOutcome":
        return cls(
            status=VerificationStatus.VALID,
            statement=statement,
            token_hash=token_hash,
        )

    @classmethod
    def failure(cls, error: VerificationError,
                token_hash: Optional[str] = None) -> "VerificationOutcome":
        return cls(
            status=error.status,
            reason=error.reason,
            detail=error.detail,
            token_hash=token_hash,
        )


def calculate_token_hash(token: str) -> str:
    """Calculate SHA-256 hash of token for logging."""
    return hashlib.sha256(token.encode('utf-8')).hexdigest()
