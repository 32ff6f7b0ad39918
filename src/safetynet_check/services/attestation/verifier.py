"""
SafetyNet attestation statement verification pipeline.

A statement is first sent to the verification service. Only when the service
confirms the signature is the payload split out of the token and parsed into
claims; an unverified payload is never parsed.
"""

import hmac
import logging
from typing import Optional, Union

from .base import (
    InvalidSignature,
    NonceMismatch,
    VerificationError,
    VerificationOutcome,
    calculate_token_hash,
)
from .online_verify import AsyncOnlineVerifier, OnlineVerifier
from .statement import AttestationStatement, parse
from .token import extract_payload

logger = logging.getLogger(__name__)


def extract_statement(token: str, verdict: bool,
                      expected_nonce: Optional[bytes] = None) -> AttestationStatement:
    """
    Extract the claims of a token once the service has returned its verdict.

    Raises:
        InvalidSignature: If the verdict is negative
        FormatError: If the token is not a three-part JWS
        ParseError: If the payload is not a valid statement
        NonceMismatch: If expected_nonce is given and differs
    """
    if not verdict:
        raise InvalidSignature(
            "The cryptographic signature of the attestation statement couldn't be verified."
        )

    statement = parse(extract_payload(token))

    if expected_nonce is not None and not hmac.compare_digest(statement.nonce_bytes,
                                                              expected_nonce):
        raise NonceMismatch("Attestation statement nonce does not match the request nonce")

    return statement


class BaseSafetyNetVerifier:
    """Shared logging and outcome handling for the sync and async pipelines."""

    def __init__(self, online_verifier: Union[OnlineVerifier, AsyncOnlineVerifier]):
        self.online_verifier = online_verifier
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def _log_verification_attempt(self, token_hash: str):
        self.logger.info(f"Verification attempt - Token hash: {token_hash[:8]}...")

    def _log_verification_result(self, outcome: VerificationOutcome):
        self.logger.info(
            f"Verification result - Status: {outcome.status.value}, "
            f"Reason: {outcome.reason.value if outcome.reason else 'none'}, "
            f"Token hash: {outcome.token_hash[:8]}..., "
            f"Detail: {outcome.detail or 'none'}"
        )

    def _complete(self, token_hash: str, statement: Optional[AttestationStatement] = None,
                  error: Optional[VerificationError] = None) -> VerificationOutcome:
        if error is not None:
            outcome = VerificationOutcome.failure(error, token_hash)
        else:
            outcome = VerificationOutcome.success(statement, token_hash)
        self._log_verification_result(outcome)
        return outcome


class SafetyNetVerifier(BaseSafetyNetVerifier):
    """
    Verifies a signed attestation statement and returns its claims.

    Failures of any stage are terminal and reported in the outcome, tagged
    with the reason. Nothing is retried.
    """

    def __init__(self, online_verifier: OnlineVerifier):
        super().__init__(online_verifier)

    def verify(self, token: str, expected_nonce: Optional[bytes] = None) -> VerificationOutcome:
        """
        Verify a signed attestation statement.

        Args:
            token: The signed attestation statement
            expected_nonce: Nonce issued for this request, checked when given

        Returns:
            VerificationOutcome with the claims on success
        """
        token_hash = calculate_token_hash(token)
        self._log_verification_attempt(token_hash)

        try:
            verdict = self.online_verifier.verify(token)
            statement = extract_statement(token, verdict, expected_nonce)
        except VerificationError as e:
            return self._complete(token_hash, error=e)

        return self._complete(token_hash, statement=statement)


class AsyncSafetyNetVerifier(BaseSafetyNetVerifier):
    """SafetyNetVerifier for asyncio hosts."""

    def __init__(self, online_verifier: AsyncOnlineVerifier):
        super().__init__(online_verifier)

    async def verify(self, token: str,
                     expected_nonce: Optional[bytes] = None) -> VerificationOutcome:
        token_hash = calculate_token_hash(token)
        self._log_verification_attempt(token_hash)

        try:
            verdict = await self.online_verifier.verify(token)
            statement = extract_statement(token, verdict, expected_nonce)
        except VerificationError as e:
            return self._complete(token_hash, error=e)

        return self._complete(token_hash, statement=statement)
