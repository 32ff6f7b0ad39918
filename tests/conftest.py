"""
Pytest configuration and fixtures for the SafetyNet verifier tests.

Verification service traffic goes through httpx.MockTransport; no test
reaches the network.
"""

import json
import os

import httpx
import pytest

from safetynet_check.services.attestation.token import encode_segment

# Keep the developer's environment out of the settings under test
for _name in list(os.environ):
    if _name.startswith("SAFETYNET_"):
        del os.environ[_name]

TEST_API_KEY = "test_api_key_123"
TEST_VERIFY_URL = "https://verify.test/androidcheck/v1/attestations/verify"

SAMPLE_TOKEN = (
    "aGVhZGVy."
    "eyJub25jZSI6ImFXOVFXUT09IiwidGltZXN0YW1wTXMiOjE2MDAwMDAwMDAwMDAsImN0c1Byb2ZpbGVNYXRjaCI6"
    "dHJ1ZSwiYmFzaWNJbnRlZ3JpdHkiOnRydWV9."
    "c2lnbmF0dXJl"
)

FULL_PAYLOAD = {
    "nonce": "U2FmZXR5IE5ldCBTYW1wbGU6IDE2MTE2NDQ0MzY0NDM=",
    "timestampMs": 1611644438128,
    "apkPackageName": "com.example.android.safetynetsample",
    "apkDigestSha256": "3q2+7w==",
    "apkCertificateDigestSha256": ["AAECAw==", "BAUGBw=="],
    "ctsProfileMatch": True,
    "basicIntegrity": True,
    "evaluationType": "BASIC",
}


def make_token(payload, header=None, signature=b"signature"):
    """Build a compact JWS from a payload dict (or raw bytes)."""
    if header is None:
        header = {"alg": "RS256", "x5c": ["MIIFkjCCBHqgAwIBAgIR"]}
    if isinstance(payload, dict):
        payload = json.dumps(payload).encode("utf-8")
    header_bytes = json.dumps(header).encode("utf-8")
    return ".".join([encode_segment(header_bytes), encode_segment(payload), encode_segment(signature)])


class RecordingHandler:
    """MockTransport handler returning a canned response and recording requests."""

    def __init__(self, body=None, status_code=200, content=None, exc=None):
        self.body = body
        self.status_code = status_code
        self.content = content
        self.exc = exc
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last_body(self):
        return json.loads(self.requests[-1].content)


@pytest.fixture
def sample_token():
    return SAMPLE_TOKEN


@pytest.fixture
def full_token():
    return make_token(FULL_PAYLOAD)


@pytest.fixture
def handler_factory():
    """Create a recording handler for the verification endpoint."""
    return RecordingHandler


@pytest.fixture
def client_factory():
    """Create an httpx.Client wired to a handler."""
    clients = []

    def _create(handler):
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield _create

    for client in clients:
        client.close()


@pytest.fixture
def token_factory():
    """Build signed-looking tokens from payload dicts."""
    return make_token


@pytest.fixture
def full_payload():
    return dict(FULL_PAYLOAD)
