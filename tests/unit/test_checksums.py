"""Double-SHA256 checksums and Base58Check."""

import pytest

from seedkit.checksums import (
    append_checksum,
    b58check_decode,
    b58check_encode,
    checksum,
    verify_checksum,
)
from seedkit.errors import ChecksumMismatch, InvalidParameter


class TestChecksum:
    """4-byte double-SHA256 suffix."""

    def test_empty_payload(self):
        # SHA256(SHA256("")) = 5df6e0e2...
        assert checksum(b"").hex() == "5df6e0e2"

    def test_append_and_verify(self):
        data = append_checksum(b"payload")
        assert len(data) == 11
        assert verify_checksum(data) == b"payload"

    def test_mismatch(self):
        data = bytearray(append_checksum(b"payload"))
        data[0] ^= 1
        with pytest.raises(ChecksumMismatch):
            verify_checksum(data)

    @pytest.mark.parametrize("size", [0, 3, 4])
    def test_too_short(self, size):
        with pytest.raises(InvalidParameter):
            verify_checksum(bytes(size))


class TestBase58Check:
    """Text encoding used by extended keys."""

    def test_leading_zero_bytes_become_ones(self):
        assert b58check_encode(b"\x00\x00\x01").startswith("11")

    def test_known_address(self):
        # version 0x00 + hash160 of the generator point's compressed key
        payload = bytes.fromhex("00751e76e8199196d454941c45d1b3a323f1433bd6")
        assert b58check_encode(payload) == "1BgGZ9tcN4rm9KBzDn7KprQz87SZ26SAMH"
        assert b58check_decode("1BgGZ9tcN4rm9KBzDn7KprQz87SZ26SAMH") == payload

    def test_invalid_character(self):
        with pytest.raises(InvalidParameter):
            b58check_decode("0OIl")

    def test_surrounding_whitespace_ignored(self):
        text = b58check_encode(b"\x05hello")
        assert b58check_decode(f"  {text}\n") == b"\x05hello"
