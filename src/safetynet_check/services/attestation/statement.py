"""
SafetyNet attestation statement (JWS payload) parsing.

The payload is only trusted once the verification endpoint has accepted the
signature, so ``parse`` must be called after verification, never before.
"""

import base64
import binascii
import json
import logging
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .base import ParseError

logger = logging.getLogger(__name__)


def decode_base64_field(value: str, field: str) -> bytes:
    """
    Decode a base64 claim value, standard or URL-safe alphabet, padding optional.

    Raises:
        ParseError: If the value is not valid base64
    """
    normalized = value.strip().replace("-", "+").replace("_", "/").rstrip("=")
    normalized += "=" * (-len(normalized) % 4)
    try:
        return base64.b64decode(normalized, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ParseError(f"Attestation statement field '{field}' is not valid base64: {e}",
                         field=field)


class AttestationStatement(BaseModel):
    """
    Claims of a verified SafetyNet attestation statement.

    Base64 claims are kept encoded and decoded when read, so a malformed
    optional digest only fails the caller that actually reads it.
    """

    model_config = ConfigDict(frozen=True, strict=True, extra="ignore", populate_by_name=True)

    nonce: str
    timestamp_ms: int = Field(alias="timestampMs")
    cts_profile_match: bool = Field(alias="ctsProfileMatch")
    basic_integrity: bool = Field(alias="basicIntegrity")
    apk_package_name: Optional[str] = Field(default=None, alias="apkPackageName")
    apk_digest_sha256: Optional[str] = Field(default=None, alias="apkDigestSha256")
    apk_certificate_digest_sha256: Optional[List[str]] = Field(
        default=None, alias="apkCertificateDigestSha256"
    )
    evaluation_type: Optional[str] = Field(default=None, alias="evaluationType")

    @field_validator("timestamp_ms")
    @classmethod
    def check_timestamp_range(cls, v: int) -> int:
        try:
            datetime.fromtimestamp(v / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            raise ValueError(f"timestampMs {v} is outside the representable date range")
        return v

    @property
    def nonce_bytes(self) -> bytes:
        """Nonce submitted with the attestation request."""
        return decode_base64_field(self.nonce, "nonce")

    @property
    def nonce_text(self) -> str:
        """Nonce as text; undecodable bytes are replaced."""
        return self.nonce_bytes.decode("utf-8", errors="replace")

    @property
    def timestamp(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp_ms / 1000, tz=timezone.utc)

    @property
    def apk_digest_bytes(self) -> Optional[bytes]:
        if self.apk_digest_sha256 is None:
            return None
        return decode_base64_field(self.apk_digest_sha256, "apkDigestSha256")

    @property
    def apk_certificate_digests(self) -> List[bytes]:
        """Every signing certificate digest the device reported."""
        return [
            decode_base64_field(digest, "apkCertificateDigestSha256")
            for digest in self.apk_certificate_digest_sha256 or []
        ]

    @property
    def first_certificate_digest(self) -> Optional[bytes]:
        """
        Digest of the first signing certificate only.

        Devices may report several signing certificates. Reports show just the
        first one; use ``apk_certificate_digests`` when all of them matter.
        """
        if not self.apk_certificate_digest_sha256:
            return None
        return decode_base64_field(self.apk_certificate_digest_sha256[0],
                                   "apkCertificateDigestSha256")

    @property
    def has_apk_details(self) -> bool:
        """Package details may be omitted when the API cannot determine them."""
        return bool(
            self.apk_package_name
            and self.apk_digest_sha256
            and self.apk_certificate_digest_sha256
        )


def parse(payload: bytes) -> AttestationStatement:
    """
    Parse a decoded JWS payload into an AttestationStatement.

    Args:
        payload: Payload bytes from a verified token

    Returns:
        Parsed AttestationStatement

    Raises:
        ParseError: If the payload is not a JSON object or a required field
            is missing, has the wrong type or is out of range
    """
    try:
        data = json.loads(payload)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ParseError(f"Failed to parse the data portion of the JWS as valid JSON: {e}")

    if not isinstance(data, dict):
        raise ParseError("Attestation statement is not a JSON object")

    try:
        return AttestationStatement.model_validate(data)
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"])
        if error["type"] == "missing":
            raise ParseError(f"Attestation statement missing required field: {field}",
                             field=field)
        raise ParseError(f"Attestation statement field '{field}' is invalid: {error['msg']}",
                         field=field)
