"""
Standardized error handling for the attestation verification API
"""

import uuid
from typing import Optional

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from ..services.attestation.base import FailureReason

ERROR_REGISTRY = {
    400: ("SNV-400", "Bad Request: Malformed attestation statement", False),
    422: ("SNV-422", "Unprocessable Entity: Attestation statement rejected", False),
    500: ("SNV-500", "Internal Server Error: Generic server failure", True),
    502: ("SNV-502", "Bad Gateway: Verification service reported an error", True),
    503: ("SNV-503", "Service Unavailable: Verification service unreachable", True),
}

REASON_STATUS_CODES = {
    FailureReason.NETWORK_ERROR: 503,
    FailureReason.SERVICE_ERROR: 502,
    FailureReason.INVALID_SIGNATURE: 422,
    FailureReason.FORMAT_ERROR: 400,
    FailureReason.PARSE_ERROR: 422,
    FailureReason.NONCE_MISMATCH: 422,
}


class VerificationHTTPException(HTTPException):
    """HTTPException carrying the verification failure reason."""

    def __init__(self, reason: FailureReason, detail: Optional[str] = None):
        super().__init__(status_code=REASON_STATUS_CODES[reason], detail=detail)
        self.reason = reason


async def error_handler(request: Request, exc: HTTPException):
    """Standardized error handler for all HTTP exceptions"""
    error_code, message, retryable = ERROR_REGISTRY.get(
        exc.status_code,
        ("SNV-500", "Internal Server Error", True)
    )
    reason = getattr(exc, "reason", None)

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "transaction_id": str(uuid.uuid4()),
            "error_code": error_code,
            "message": exc.detail or message,
            "retryable": retryable,
            "reason": reason.value if reason else None,
        }
    )
