# Copyright (c) 2026 Signer — MIT License

"""Keyed constructions over the digest engine: HMAC (RFC 2104) and PBKDF2 (RFC 8018).

    hmac(HashAlgorithm.SHA512, b"Bitcoin seed", seed)          # Digest
    pbkdf2(HashAlgorithm.SHA512, phrase, salt, 2048, 64)       # bytes

PBKDF2 runs every iteration; the cost is the point.
"""

import logging
import time

from .errors import InvalidParameter
from .hashing import Digest, HashAlgorithm
from .memory import wipe

log = logging.getLogger(__name__)

_IPAD = 0x36
_OPAD = 0x5C


def _as_bytes(value):
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


class Hmac:
    """Incremental HMAC with the hmac.HMAC interface (update / digest / copy)."""

    def __init__(self, algorithm, key, message=b""):
        self.algorithm = HashAlgorithm(algorithm)
        block_size = self.algorithm.block_size

        key = bytearray(_as_bytes(key))
        if len(key) > block_size:
            hashed = bytearray(self.algorithm.new(key).digest())
            wipe(key)
            key = hashed
        key.extend(bytes(block_size - len(key)))

        self._inner = self.algorithm.new(bytes(b ^ _IPAD for b in key))
        self._outer = self.algorithm.new(bytes(b ^ _OPAD for b in key))
        wipe(key)

        if message:
            self.update(message)

    @property
    def digest_size(self):
        return self.algorithm.digest_size

    def update(self, message):
        self._inner.update(_as_bytes(message))

    def copy(self):
        clone = self.__class__.__new__(self.__class__)
        clone.algorithm = self.algorithm
        clone._inner = self._inner.copy()
        clone._outer = self._outer.copy()
        return clone

    def digest(self):
        outer = self._outer.copy()
        outer.update(self._inner.digest())
        return outer.digest()

    def hexdigest(self):
        return self.digest().hex()


def hmac(algorithm, key, message):
    """Compute HMAC of message under key and return a Digest."""
    mac = Hmac(algorithm, key, message)
    return Digest(mac.algorithm, mac.digest())


def pbkdf2(algorithm, password, salt, iteration_count, output_length):
    """Derive output_length bytes from password and salt with PBKDF2-HMAC.

    Args:
        algorithm: HashAlgorithm used inside HMAC.
        password: bytes or str (UTF-8 encoded).
        salt: bytes or str (UTF-8 encoded).
        iteration_count: Number of HMAC iterations per block, >= 1.
        output_length: Number of bytes to return, >= 1.

    Raises:
        InvalidParameter: If iteration_count or output_length is below 1.
    """
    if iteration_count < 1:
        raise InvalidParameter("PBKDF2 iteration count must be at least 1")
    if output_length < 1:
        raise InvalidParameter("PBKDF2 output length must be at least 1")

    t0 = time.perf_counter()
    salt = _as_bytes(salt)
    # The keyed state is computed once and cloned for every iteration
    prf = Hmac(algorithm, password)
    size = prf.digest_size
    blocks = -(-output_length // size)

    out = bytearray()
    for index in range(1, blocks + 1):
        mac = prf.copy()
        mac.update(salt + index.to_bytes(4, "big"))
        u = mac.digest()
        block = bytearray(u)
        for _ in range(iteration_count - 1):
            mac = prf.copy()
            mac.update(u)
            u = mac.digest()
            for i in range(size):
                block[i] ^= u[i]
        out.extend(block)
        wipe(block)

    log.debug("pbkdf2-%s: %d block(s) x %d iterations (%.1fms)",
              prf.algorithm.value, blocks, iteration_count, (time.perf_counter() - t0) * 1000)
    result = bytes(out[:output_length])
    wipe(out)
    return result
