"""
Compact JWS handling for SafetyNet attestation statements.

A statement is ``<header>.<payload>.<signature>``, each part URL-safe base64
without padding. Nothing here checks the signature; callers must only split a
token after the verification endpoint has accepted it.
"""

import binascii
import json
import logging
import re
from dataclasses import dataclass, field
from typing import List, Tuple, Union

from jwt.utils import base64url_decode, base64url_encode

from .base import FormatError

logger = logging.getLogger(__name__)

SEGMENT_NAMES = ("header", "payload", "signature")

_URLSAFE_SEGMENT = re.compile(r"^[A-Za-z0-9_-]*={0,2}$")


@dataclass(frozen=True)
class JwsHeader:
    """Decoded JWS header. Informational only, never proof of authenticity."""

    alg: str
    x5c: List[str] = field(default_factory=list)


def decode_segment(segment: Union[str, bytes], name: str = "segment") -> bytes:
    """
    Decode one URL-safe base64 segment.

    Raises:
        FormatError: If the segment is empty or not valid base64url
    """
    if isinstance(segment, bytes):
        try:
            segment = segment.decode("ascii")
        except UnicodeDecodeError:
            raise FormatError(f"JWS {name} is not valid base64url")

    if not segment.rstrip("="):
        raise FormatError(f"JWS {name} is empty")

    if not _URLSAFE_SEGMENT.match(segment):
        raise FormatError(f"JWS {name} is not valid base64url")

    try:
        return base64url_decode(segment.rstrip("="))
    except (binascii.Error, ValueError) as e:
        raise FormatError(f"JWS {name} is not valid base64url: {e}")


def encode_segment(data: bytes) -> str:
    """Encode bytes as an unpadded URL-safe base64 segment."""
    return base64url_encode(data).decode("ascii")


def split(token: str) -> Tuple[bytes, bytes, bytes]:
    """
    Split a compact JWS into its decoded header, payload and signature.

    Args:
        token: The signed attestation statement

    Returns:
        Tuple of (header, payload, signature) bytes

    Raises:
        FormatError: If the token does not have exactly 3 non-empty
            segments or a segment is not valid base64url
    """
    parts = token.split(".")
    if len(parts) != 3:
        raise FormatError(
            f"Illegal JWS signature format. The JWS consists of "
            f"{len(parts)} parts instead of 3."
        )

    header, payload, signature = (
        decode_segment(part, name) for part, name in zip(parts, SEGMENT_NAMES)
    )
    return header, payload, signature


def extract_payload(token: str) -> bytes:
    """Return the decoded payload segment of a verified token."""
    _, payload, _ = split(token)
    return payload


def parse_header(header: bytes) -> JwsHeader:
    """
    Parse a decoded JWS header.

    Raises:
        FormatError: If the header is not a JSON object with an 'alg' string
    """
    try:
        data = json.loads(header)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise FormatError(f"JWS header is not valid JSON: {e}")

    if not isinstance(data, dict):
        raise FormatError("JWS header is not a JSON object")

    alg = data.get("alg")
    if not isinstance(alg, str):
        raise FormatError("JWS header has no 'alg'")

    x5c = data.get("x5c", [])
    if not isinstance(x5c, list) or not all(isinstance(c, str) for c in x5c):
        raise FormatError("JWS header 'x5c' is not a list of certificates")

    return JwsHeader(alg=alg, x5c=list(x5c))
