# Copyright (c) 2026 Signer — MIT License

"""4-byte double-SHA256 checksums and Base58Check text encoding.

    append_checksum(payload)     → payload + 4 checksum bytes
    verify_checksum(data)        → payload, or ChecksumMismatch
    b58check_encode(payload)     → "xprv9s21..."
    b58check_decode(text)        → payload
"""

import base58

from .errors import ChecksumMismatch, InvalidParameter
from .hashing import double_sha256

CHECKSUM_BYTES = 4


def checksum(payload):
    return double_sha256(bytes(payload))[:CHECKSUM_BYTES]


def append_checksum(payload):
    payload = bytes(payload)
    return payload + checksum(payload)


def verify_checksum(data):
    """Split data into payload and checksum and verify them.

    Raises:
        InvalidParameter: Fewer than 5 bytes (no room for a payload).
        ChecksumMismatch: The trailing 4 bytes don't match.
    """
    data = bytes(data)
    if len(data) <= CHECKSUM_BYTES:
        raise InvalidParameter(f"checksummed data needs at least {CHECKSUM_BYTES + 1} bytes")
    payload, check = data[:-CHECKSUM_BYTES], data[-CHECKSUM_BYTES:]
    if checksum(payload) != check:
        raise ChecksumMismatch("double-SHA256 checksum does not match")
    return payload


def b58check_encode(payload):
    return base58.b58encode(append_checksum(payload)).decode("ascii")


def b58check_decode(text):
    """Decode Base58Check text; bad characters raise InvalidParameter."""
    try:
        raw = base58.b58decode(text.strip())
    except ValueError as exc:
        raise InvalidParameter(f"invalid base58 text: {exc}") from None
    return verify_checksum(raw)
