"""
Unit tests for attestation statement parsing.
"""

import json
from datetime import datetime, timezone

import pytest

from safetynet_check.services.attestation.base import FailureReason, ParseError
from safetynet_check.services.attestation.statement import (
    AttestationStatement,
    decode_base64_field,
    parse,
)


def _payload(data):
    return json.dumps(data).encode("utf-8")


class TestParse:
    """Test cases for parse()."""

    def test_parse_minimal_payload(self):
        """Test a payload with only the required fields."""
        statement = parse(_payload({
            "nonce": "aW9QWQ==",
            "timestampMs": 1600000000000,
            "ctsProfileMatch": True,
            "basicIntegrity": False,
        }))

        assert statement.nonce_bytes == b"ioPY"
        assert statement.timestamp_ms == 1600000000000
        assert statement.cts_profile_match is True
        assert statement.basic_integrity is False
        assert statement.apk_package_name is None
        assert statement.apk_digest_bytes is None
        assert statement.apk_certificate_digests == []
        assert statement.first_certificate_digest is None
        assert statement.has_apk_details is False

    def test_parse_full_payload(self, full_payload):
        """Test every optional field is kept."""
        statement = parse(_payload(full_payload))

        assert statement.apk_package_name == "com.example.android.safetynetsample"
        assert statement.apk_digest_bytes == bytes.fromhex("deadbeef")
        assert statement.evaluation_type == "BASIC"
        assert statement.has_apk_details is True

    def test_parse_keeps_every_certificate_digest(self, full_payload):
        """Test all certificate digests survive parsing; first is a view."""
        statement = parse(_payload(full_payload))

        assert statement.apk_certificate_digests == [
            bytes.fromhex("00010203"),
            bytes.fromhex("04050607"),
        ]
        assert statement.first_certificate_digest == bytes.fromhex("00010203")

    def test_parse_ignores_unknown_fields(self, full_payload):
        """Test fields outside the statement schema are ignored."""
        full_payload["advice"] = "RESTORE_TO_FACTORY_ROM"
        statement = parse(_payload(full_payload))

        assert statement.basic_integrity is True

    def test_nonce_text(self, full_payload):
        """Test the nonce can be read back as text."""
        statement = parse(_payload(full_payload))

        assert statement.nonce_text == "Safety Net Sample: 1611644436443"

    def test_timestamp(self):
        """Test timestampMs converts to an aware UTC datetime."""
        statement = parse(_payload({
            "nonce": "aW9QWQ==",
            "timestampMs": 1600000000000,
            "ctsProfileMatch": True,
            "basicIntegrity": True,
        }))

        assert statement.timestamp == datetime(2020, 9, 13, 12, 26, 40, tzinfo=timezone.utc)

    @pytest.mark.parametrize("field", ["nonce", "timestampMs", "ctsProfileMatch", "basicIntegrity"])
    def test_parse_missing_required_field(self, full_payload, field):
        """Test a missing required field is a parse error naming it."""
        del full_payload[field]

        with pytest.raises(ParseError) as exc_info:
            parse(_payload(full_payload))

        assert exc_info.value.reason == FailureReason.PARSE_ERROR
        assert exc_info.value.field == field
        assert "missing required field" in exc_info.value.detail
        assert field in exc_info.value.detail

    def test_parse_missing_timestamp_never_defaults(self):
        """Test a missing timestamp is never read as 0."""
        with pytest.raises(ParseError) as exc_info:
            parse(_payload({"nonce": "aW9QWQ==", "ctsProfileMatch": True, "basicIntegrity": True}))

        assert "timestampMs" in exc_info.value.detail

    @pytest.mark.parametrize("value", [10**18, -10**18])
    def test_parse_timestamp_out_of_range(self, full_payload, value):
        """Test a timestamp no datetime can hold is a parse error."""
        full_payload["timestampMs"] = value

        with pytest.raises(ParseError) as exc_info:
            parse(_payload(full_payload))

        assert exc_info.value.field == "timestampMs"
        assert "timestampMs" in exc_info.value.detail

    def test_parse_latest_representable_timestamp(self, full_payload):
        full_payload["timestampMs"] = 253402300799000

        statement = parse(_payload(full_payload))

        assert statement.timestamp.year == 9999

    @pytest.mark.parametrize("field,value", [
        ("nonce", 12),
        ("timestampMs", "1600000000000"),
        ("timestampMs", True),
        ("timestampMs", 1.5),
        ("ctsProfileMatch", "true"),
        ("basicIntegrity", 1),
        ("basicIntegrity", None),
        ("apkPackageName", 7),
        ("apkCertificateDigestSha256", "AAECAw=="),
    ])
    def test_parse_type_mismatch(self, full_payload, field, value):
        """Test fields of the wrong type are parse errors naming the field."""
        full_payload[field] = value

        with pytest.raises(ParseError) as exc_info:
            parse(_payload(full_payload))

        assert exc_info.value.field == field
        assert field in exc_info.value.detail

    @pytest.mark.parametrize("raw", [b"not json", b"\xff\xfe", b"[]", b'"statement"', b"null"])
    def test_parse_not_an_object(self, raw):
        """Test payloads that are not JSON objects are parse errors."""
        with pytest.raises(ParseError):
            parse(raw)


class TestLazyDecoding:
    """Test cases for access-time base64 decoding."""

    def test_malformed_digest_only_fails_on_read(self, full_payload):
        """Test a malformed optional digest parses and fails when read."""
        full_payload["apkDigestSha256"] = "not*base64"
        statement = parse(_payload(full_payload))

        assert statement.nonce_bytes
        with pytest.raises(ParseError) as exc_info:
            statement.apk_digest_bytes

        assert exc_info.value.field == "apkDigestSha256"

    def test_malformed_nonce_fails_on_read(self, full_payload):
        """Test a malformed nonce surfaces as a typed error on access."""
        full_payload["nonce"] = "a"
        statement = parse(_payload(full_payload))

        with pytest.raises(ParseError) as exc_info:
            statement.nonce_bytes

        assert exc_info.value.field == "nonce"

    def test_malformed_second_certificate(self, full_payload):
        """Test the first-certificate view ignores later entries."""
        full_payload["apkCertificateDigestSha256"] = ["AAECAw==", "%%%"]
        statement = parse(_payload(full_payload))

        assert statement.first_certificate_digest == bytes.fromhex("00010203")
        with pytest.raises(ParseError):
            statement.apk_certificate_digests


class TestDecodeBase64Field:
    """Test cases for decode_base64_field()."""

    @pytest.mark.parametrize("value", ["+/8=", "+/8", "-_8=", "-_8"])
    def test_both_alphabets_with_or_without_padding(self, value):
        assert decode_base64_field(value, "nonce") == b"\xfb\xff"

    def test_empty_value(self):
        assert decode_base64_field("", "nonce") == b""

    def test_construct_by_field_name(self):
        """Test statements can be built directly in Python."""
        statement = AttestationStatement(
            nonce="aW9QWQ==",
            timestamp_ms=1,
            cts_profile_match=False,
            basic_integrity=True,
        )

        assert statement.nonce_bytes == b"ioPY"
