#!/usr/bin/env python3
"""
Verify a SafetyNet attestation statement from the command line.

Usage:
    safetynet-verify <signed attestation statement>

The API key is read from SAFETYNET_API_KEY.
"""

import argparse
import logging
import sys
from typing import Optional

import httpx

from .services.attestation import (
    AttestationConfig,
    OnlineVerifier,
    ParseError,
    SafetyNetVerifier,
    format_statement,
    get_config,
)

logger = logging.getLogger(__name__)


def print_failure(detail: Optional[str]):
    """Print failure message."""
    print("Failure: Failed to parse and verify the attestation statement.")
    if detail:
        print(f"Failure detail: {detail}")


def run(statement: str, config: AttestationConfig, client: httpx.Client) -> int:
    """
    Verify one statement and print the result.

    Returns:
        Process exit status
    """
    if not config.api_key:
        print_failure("SAFETYNET_API_KEY is not set. Add the API key of a project with the "
                      "Android Device Verification API enabled.")
        return 1

    online_verifier = OnlineVerifier(
        config.api_key,
        client=client,
        url=config.verify_url,
        timeout=config.api_timeout,
    )
    outcome = SafetyNetVerifier(online_verifier).verify(statement)

    if not outcome.is_valid:
        print_failure(outcome.detail)
        return 1

    try:
        report = format_statement(outcome.statement)
    except ParseError as e:
        print_failure(e.detail)
        return 1

    print("Successfully verified the signature of the attestation statement.")
    print(report)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="safetynet-verify",
        description="Verify a SafetyNet attestation statement online and print its content",
    )
    parser.add_argument("statement", help="signed attestation statement (JWS)")
    args = parser.parse_args(argv)

    config = get_config()
    logging.basicConfig(level=config.log_level)

    with httpx.Client(timeout=config.api_timeout) as client:
        return run(args.statement, config, client)


if __name__ == "__main__":
    sys.exit(main())
