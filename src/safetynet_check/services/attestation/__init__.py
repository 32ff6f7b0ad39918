"""
SafetyNet Attestation Verification Package

Verifies SafetyNet attestation statements produced on Android devices:
the statement is checked by Google's online verification service, then its
payload is decoded into typed claims.

Features:
- Online signature verification, sync and asyncio
- Compact JWS splitting and header inspection
- Typed claims with lazy base64 decoding
- Request nonce generation
- Tagged failure reasons for every stage
"""

from .base import (
    FailureReason,
    FormatError,
    InvalidSignature,
    NetworkError,
    NonceMismatch,
    ParseError,
    ServiceError,
    VerificationError,
    VerificationOutcome,
    VerificationStatus,
)
from .config import AttestationConfig, get_config
from .nonce import generate_nonce
from .online_verify import AsyncOnlineVerifier, OnlineVerifier
from .report import format_statement
from .statement import AttestationStatement
from .verifier import AsyncSafetyNetVerifier, SafetyNetVerifier

__all__ = [
    # Pipeline
    "SafetyNetVerifier",
    "AsyncSafetyNetVerifier",
    "OnlineVerifier",
    "AsyncOnlineVerifier",
    "AttestationStatement",
    "AttestationConfig",
    "get_config",
    "generate_nonce",
    "format_statement",

    # Outcomes and errors
    "VerificationOutcome",
    "VerificationStatus",
    "FailureReason",
    "VerificationError",
    "NetworkError",
    "ServiceError",
    "InvalidSignature",
    "FormatError",
    "ParseError",
    "NonceMismatch",
]
