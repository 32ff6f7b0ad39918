"""
Pydantic schemas for the attestation verification API.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..services.attestation.statement import AttestationStatement


class VerifyAttestationRequest(BaseModel):
    """Schema for a verification request."""

    model_config = ConfigDict(populate_by_name=True)

    signed_attestation: str = Field(..., alias="signedAttestation",
                                    description="Signed attestation statement (JWS)")
    expected_nonce: Optional[str] = Field(None, alias="expectedNonce",
                                          description="Base64 nonce issued for this request")


class AttestationStatementSchema(BaseModel):
    """Schema for the claims of a verified attestation statement."""

    model_config = ConfigDict(populate_by_name=True)

    nonce: str = Field(..., description="Base64 nonce submitted with the request")
    timestamp_ms: int = Field(..., alias="timestampMs", description="Milliseconds since epoch")
    timestamp: datetime = Field(..., description="Attestation time (UTC)")
    apk_package_name: Optional[str] = Field(None, alias="apkPackageName")
    apk_digest_sha256: Optional[str] = Field(None, alias="apkDigestSha256")
    apk_certificate_digest_sha256: List[str] = Field(default_factory=list,
                                                     alias="apkCertificateDigestSha256")
    cts_profile_match: bool = Field(..., alias="ctsProfileMatch")
    basic_integrity: bool = Field(..., alias="basicIntegrity")
    evaluation_type: Optional[str] = Field(None, alias="evaluationType")

    @classmethod
    def from_statement(cls, statement: AttestationStatement) -> "AttestationStatementSchema":
        return cls(
            nonce=statement.nonce,
            timestamp_ms=statement.timestamp_ms,
            timestamp=statement.timestamp,
            apk_package_name=statement.apk_package_name,
            apk_digest_sha256=statement.apk_digest_sha256,
            apk_certificate_digest_sha256=statement.apk_certificate_digest_sha256 or [],
            cts_profile_match=statement.cts_profile_match,
            basic_integrity=statement.basic_integrity,
            evaluation_type=statement.evaluation_type,
        )
