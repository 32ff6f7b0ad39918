"""
Request nonce generation.

A nonce must only be used once. It is a block of random bytes followed by
data the caller wants bound to the attestation, such as a user id, which is
checked again when the statement comes back.
"""

import secrets
from typing import Union

MIN_NONCE_SIZE = 16
DEFAULT_RANDOM_SIZE = 24


def generate_nonce(data: Union[str, bytes] = b"", size: int = DEFAULT_RANDOM_SIZE) -> bytes:
    """
    Generate a nonce of ``size`` random bytes followed by ``data``.

    Args:
        data: Binding data appended after the random bytes
        size: Number of random bytes, at least 16

    Returns:
        Nonce bytes
    """
    if size < MIN_NONCE_SIZE:
        raise ValueError(f"Nonce needs at least {MIN_NONCE_SIZE} random bytes, got {size}")

    if isinstance(data, str):
        data = data.encode("utf-8")

    return secrets.token_bytes(size) + data
