"""
Human-readable rendering of verified attestation statements.
"""

from .statement import AttestationStatement

CLOSING_NOTE = (
    "** This sample only shows how to verify the authenticity of an attestation "
    "response. Next, you must check that the server response matches the request "
    "by comparing the nonce, package name, timestamp and digest."
)


def _flag(value: bool) -> str:
    return "TRUE" if value else "FALSE"


def format_statement(statement: AttestationStatement) -> str:
    """Render the claims of a verified statement for inspection."""
    lines = [
        "The content of the attestation statement is:",
        f"Nonce: {statement.nonce_bytes.hex()}",
        f"Timestamp: {statement.timestamp_ms} ms",
    ]

    # Package details may be omitted if the API cannot reliably determine them
    if statement.has_apk_details:
        lines.append(f"APK package name: {statement.apk_package_name}")
        lines.append(f"APK digest SHA256: {statement.apk_digest_bytes.hex()}")
        lines.append(f"APK certificate digest SHA256: {statement.first_certificate_digest.hex()}")

    lines.append(f"CTS profile match: {_flag(statement.cts_profile_match)}")
    lines.append(f"Basic integrity match: {_flag(statement.basic_integrity)}")

    if statement.evaluation_type:
        lines.append(f"Evaluation type: {statement.evaluation_type}")

    lines.append("")
    lines.append(CLOSING_NOTE)
    return "\n".join(lines)
