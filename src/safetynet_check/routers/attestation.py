"""
Attestation router: online verification of SafetyNet attestation statements
"""

import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request, status

from ..schemas.attestation import AttestationStatementSchema, VerifyAttestationRequest
from ..services.attestation import (
    AsyncOnlineVerifier,
    AsyncSafetyNetVerifier,
    AttestationConfig,
    ParseError,
    get_config,
)
from ..services.attestation.statement import decode_base64_field
from ..utils.errors import VerificationHTTPException

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/attestation", tags=["Attestation"])


def get_http_client(request: Request) -> httpx.AsyncClient:
    """HTTP client owned by the application lifespan."""
    return request.app.state.http_client


def get_verifier(
    config: AttestationConfig = Depends(get_config),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> AsyncSafetyNetVerifier:
    if not config.api_key:
        raise HTTPException(status_code=503, detail="Verification service is not configured")

    online_verifier = AsyncOnlineVerifier(
        config.api_key,
        client=client,
        url=config.verify_url,
        timeout=config.api_timeout,
    )
    return AsyncSafetyNetVerifier(online_verifier)


@router.post("/verify", response_model=AttestationStatementSchema, status_code=status.HTTP_200_OK,
             summary="Verify Attestation Statement",
             description="Verify a SafetyNet attestation statement with Google's verification service and return its claims.")
async def verify_attestation(
    body: VerifyAttestationRequest,
    verifier: AsyncSafetyNetVerifier = Depends(get_verifier),
):
    """
    Verify a signed attestation statement.

    The claims are only returned once the signature has been confirmed.
    When expectedNonce is given it must match the statement nonce.
    """
    expected_nonce = None
    if body.expected_nonce is not None:
        try:
            expected_nonce = decode_base64_field(body.expected_nonce, "expectedNonce")
        except ParseError as e:
            raise HTTPException(status_code=400, detail=e.detail)

    outcome = await verifier.verify(body.signed_attestation, expected_nonce)
    if not outcome.is_valid:
        raise VerificationHTTPException(outcome.reason, outcome.detail)

    return AttestationStatementSchema.from_statement(outcome.statement)
