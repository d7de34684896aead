# Copyright (c) 2026 Signer — MIT License

"""Digest engine: SHA-256, SHA-512 and RIPEMD-160 in pure Python.

The hashers mirror the hashlib interface so they can be swapped in
anywhere a hashlib object is expected:

    h = Sha256()
    h.update(b"abc")
    h.digest()          # 32 bytes; h can keep accepting data
    hash(HashAlgorithm.SHA512, b"abc")   # Digest(SHA512, ...)

All three are Merkle–Damgård constructions over fixed blocks. Input is
buffered until a full block is available, so arbitrarily long messages
can be fed piecewise. The round functions use only fixed-count loops and
bitwise arithmetic; no branch depends on message content.
"""

import builtins
import enum
import struct
from dataclasses import dataclass

from .memory import wipe

_M32 = 0xFFFFFFFF
_M64 = 0xFFFFFFFFFFFFFFFF


def _rotr32(x, n):
    return ((x >> n) | (x << (32 - n))) & _M32


def _rotl32(x, n):
    return ((x << n) | (x >> (32 - n))) & _M32


def _rotr64(x, n):
    return ((x >> n) | (x << (64 - n))) & _M64


class _MerkleDamgard:
    """Shared buffering and length padding for block hash functions.

    Subclasses define the initial state, word format and _compress().
    """

    name = None
    digest_size = None
    block_size = None
    _IV = ()
    _WORD_FORMAT = None        # struct format for one output word
    _LENGTH_BYTES = 8          # width of the trailing message-length field
    _BYTEORDER = "big"

    def __init__(self, data=b""):
        self._state = list(self._IV)
        self._buffer = bytearray()
        self._length = 0
        if data:
            self.update(data)

    def update(self, data):
        """Feed more message bytes."""
        data = bytes(data)
        self._length += len(data)
        self._buffer.extend(data)
        bs = self.block_size
        full = len(self._buffer) - len(self._buffer) % bs
        for off in range(0, full, bs):
            self._compress(bytes(self._buffer[off:off + bs]))
        if full:
            del self._buffer[:full]

    def copy(self):
        clone = self.__class__.__new__(self.__class__)
        clone._state = list(self._state)
        clone._buffer = bytearray(self._buffer)
        clone._length = self._length
        return clone

    def digest(self):
        """Return the digest of everything fed so far.

        Works on a copy; the hasher can continue collecting after this.
        """
        tail = self.copy()
        bs = self.block_size
        bit_length = (tail._length * 8) & ((1 << (8 * self._LENGTH_BYTES)) - 1)
        pad_len = (bs - self._LENGTH_BYTES - 1 - len(tail._buffer)) % bs
        tail._buffer.extend(b"\x80" + bytes(pad_len))
        tail._buffer.extend(bit_length.to_bytes(self._LENGTH_BYTES, self._BYTEORDER))
        for off in range(0, len(tail._buffer), bs):
            tail._compress(bytes(tail._buffer[off:off + bs]))
        out = b"".join(struct.pack(self._WORD_FORMAT, w) for w in tail._state)
        tail.clear()
        return out

    def hexdigest(self):
        return self.digest().hex()

    def clear(self):
        """Wipe pending input and return to the initial state, ready for reuse."""
        self._state = list(self._IV)
        wipe(self._buffer)
        self._buffer = bytearray()
        self._length = 0

    def _compress(self, block):
        raise NotImplementedError


# ── SHA-256 (FIPS 180-4) ──────────────────────────────────────────

_SHA256_K = (
    0x428A2F98, 0x71374491, 0xB5C0FBCF, 0xE9B5DBA5,
    0x3956C25B, 0x59F111F1, 0x923F82A4, 0xAB1C5ED5,
    0xD807AA98, 0x12835B01, 0x243185BE, 0x550C7DC3,
    0x72BE5D74, 0x80DEB1FE, 0x9BDC06A7, 0xC19BF174,
    0xE49B69C1, 0xEFBE4786, 0x0FC19DC6, 0x240CA1CC,
    0x2DE92C6F, 0x4A7484AA, 0x5CB0A9DC, 0x76F988DA,
    0x983E5152, 0xA831C66D, 0xB00327C8, 0xBF597FC7,
    0xC6E00BF3, 0xD5A79147, 0x06CA6351, 0x14292967,
    0x27B70A85, 0x2E1B2138, 0x4D2C6DFC, 0x53380D13,
    0x650A7354, 0x766A0ABB, 0x81C2C92E, 0x92722C85,
    0xA2BFE8A1, 0xA81A664B, 0xC24B8B70, 0xC76C51A3,
    0xD192E819, 0xD6990624, 0xF40E3585, 0x106AA070,
    0x19A4C116, 0x1E376C08, 0x2748774C, 0x34B0BCB5,
    0x391C0CB3, 0x4ED8AA4A, 0x5B9CCA4F, 0x682E6FF3,
    0x748F82EE, 0x78A5636F, 0x84C87814, 0x8CC70208,
    0x90BEFFFA, 0xA4506CEB, 0xBEF9A3F7, 0xC67178F2,
)


class Sha256(_MerkleDamgard):
    name = "sha256"
    digest_size = 32
    block_size = 64
    _IV = (
        0x6A09E667, 0xBB67AE85, 0x3C6EF372, 0xA54FF53A,
        0x510E527F, 0x9B05688C, 0x1F83D9AB, 0x5BE0CD19,
    )
    _WORD_FORMAT = ">I"
    _LENGTH_BYTES = 8

    def _compress(self, block):
        w = list(struct.unpack(">16I", block))
        for i in range(16, 64):
            x, y = w[i - 15], w[i - 2]
            s0 = _rotr32(x, 7) ^ _rotr32(x, 18) ^ (x >> 3)
            s1 = _rotr32(y, 17) ^ _rotr32(y, 19) ^ (y >> 10)
            w.append((w[i - 16] + s0 + w[i - 7] + s1) & _M32)

        a, b, c, d, e, f, g, h = self._state
        for i in range(64):
            s1 = _rotr32(e, 6) ^ _rotr32(e, 11) ^ _rotr32(e, 25)
            ch = (e & f) ^ ((e ^ _M32) & g)
            t1 = (h + s1 + ch + _SHA256_K[i] + w[i]) & _M32
            s0 = _rotr32(a, 2) ^ _rotr32(a, 13) ^ _rotr32(a, 22)
            maj = (a & b) ^ (a & c) ^ (b & c)
            t2 = (s0 + maj) & _M32
            h, g, f, e = g, f, e, (d + t1) & _M32
            d, c, b, a = c, b, a, (t1 + t2) & _M32

        self._state = [
            (s + v) & _M32 for s, v in zip(self._state, (a, b, c, d, e, f, g, h))
        ]


# ── SHA-512 (FIPS 180-4) ──────────────────────────────────────────

_SHA512_K = (
    0x428A2F98D728AE22, 0x7137449123EF65CD,
    0xB5C0FBCFEC4D3B2F, 0xE9B5DBA58189DBBC,
    0x3956C25BF348B538, 0x59F111F1B605D019,
    0x923F82A4AF194F9B, 0xAB1C5ED5DA6D8118,
    0xD807AA98A3030242, 0x12835B0145706FBE,
    0x243185BE4EE4B28C, 0x550C7DC3D5FFB4E2,
    0x72BE5D74F27B896F, 0x80DEB1FE3B1696B1,
    0x9BDC06A725C71235, 0xC19BF174CF692694,
    0xE49B69C19EF14AD2, 0xEFBE4786384F25E3,
    0x0FC19DC68B8CD5B5, 0x240CA1CC77AC9C65,
    0x2DE92C6F592B0275, 0x4A7484AA6EA6E483,
    0x5CB0A9DCBD41FBD4, 0x76F988DA831153B5,
    0x983E5152EE66DFAB, 0xA831C66D2DB43210,
    0xB00327C898FB213F, 0xBF597FC7BEEF0EE4,
    0xC6E00BF33DA88FC2, 0xD5A79147930AA725,
    0x06CA6351E003826F, 0x142929670A0E6E70,
    0x27B70A8546D22FFC, 0x2E1B21385C26C926,
    0x4D2C6DFC5AC42AED, 0x53380D139D95B3DF,
    0x650A73548BAF63DE, 0x766A0ABB3C77B2A8,
    0x81C2C92E47EDAEE6, 0x92722C851482353B,
    0xA2BFE8A14CF10364, 0xA81A664BBC423001,
    0xC24B8B70D0F89791, 0xC76C51A30654BE30,
    0xD192E819D6EF5218, 0xD69906245565A910,
    0xF40E35855771202A, 0x106AA07032BBD1B8,
    0x19A4C116B8D2D0C8, 0x1E376C085141AB53,
    0x2748774CDF8EEB99, 0x34B0BCB5E19B48A8,
    0x391C0CB3C5C95A63, 0x4ED8AA4AE3418ACB,
    0x5B9CCA4F7763E373, 0x682E6FF3D6B2B8A3,
    0x748F82EE5DEFB2FC, 0x78A5636F43172F60,
    0x84C87814A1F0AB72, 0x8CC702081A6439EC,
    0x90BEFFFA23631E28, 0xA4506CEBDE82BDE9,
    0xBEF9A3F7B2C67915, 0xC67178F2E372532B,
    0xCA273ECEEA26619C, 0xD186B8C721C0C207,
    0xEADA7DD6CDE0EB1E, 0xF57D4F7FEE6ED178,
    0x06F067AA72176FBA, 0x0A637DC5A2C898A6,
    0x113F9804BEF90DAE, 0x1B710B35131C471B,
    0x28DB77F523047D84, 0x32CAAB7B40C72493,
    0x3C9EBE0A15C9BEBC, 0x431D67C49C100D4C,
    0x4CC5D4BECB3E42B6, 0x597F299CFC657E2A,
    0x5FCB6FAB3AD6FAEC, 0x6C44198C4A475817,
)


class Sha512(_MerkleDamgard):
    name = "sha512"
    digest_size = 64
    block_size = 128
    _IV = (
        0x6A09E667F3BCC908, 0xBB67AE8584CAA73B,
        0x3C6EF372FE94F82B, 0xA54FF53A5F1D36F1,
        0x510E527FADE682D1, 0x9B05688C2B3E6C1F,
        0x1F83D9ABFB41BD6B, 0x5BE0CD19137E2179,
    )
    _WORD_FORMAT = ">Q"
    _LENGTH_BYTES = 16

    def _compress(self, block):
        w = list(struct.unpack(">16Q", block))
        for i in range(16, 80):
            x, y = w[i - 15], w[i - 2]
            s0 = _rotr64(x, 1) ^ _rotr64(x, 8) ^ (x >> 7)
            s1 = _rotr64(y, 19) ^ _rotr64(y, 61) ^ (y >> 6)
            w.append((w[i - 16] + s0 + w[i - 7] + s1) & _M64)

        a, b, c, d, e, f, g, h = self._state
        for i in range(80):
            s1 = _rotr64(e, 14) ^ _rotr64(e, 18) ^ _rotr64(e, 41)
            ch = (e & f) ^ ((e ^ _M64) & g)
            t1 = (h + s1 + ch + _SHA512_K[i] + w[i]) & _M64
            s0 = _rotr64(a, 28) ^ _rotr64(a, 34) ^ _rotr64(a, 39)
            maj = (a & b) ^ (a & c) ^ (b & c)
            t2 = (s0 + maj) & _M64
            h, g, f, e = g, f, e, (d + t1) & _M64
            d, c, b, a = c, b, a, (t1 + t2) & _M64

        self._state = [
            (s + v) & _M64 for s, v in zip(self._state, (a, b, c, d, e, f, g, h))
        ]


# ── RIPEMD-160 ────────────────────────────────────────────────────

# Message word selection, left and right lines (5 rounds × 16 steps)
_RMD_ML = (
    0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15,
    7, 4, 13, 1, 10, 6, 15, 3, 12, 0, 9, 5, 2, 14, 11, 8,
    3, 10, 14, 4, 9, 15, 8, 1, 2, 7, 0, 6, 13, 11, 5, 12,
    1, 9, 11, 10, 0, 8, 12, 4, 13, 3, 7, 15, 14, 5, 6, 2,
    4, 0, 5, 9, 7, 12, 2, 10, 14, 1, 3, 8, 11, 6, 15, 13,
)
_RMD_MR = (
    5, 14, 7, 0, 9, 2, 11, 4, 13, 6, 15, 8, 1, 10, 3, 12,
    6, 11, 3, 7, 0, 13, 5, 10, 14, 15, 8, 12, 4, 9, 1, 2,
    15, 5, 1, 3, 7, 14, 6, 9, 11, 8, 12, 2, 10, 0, 4, 13,
    8, 6, 4, 1, 3, 11, 15, 0, 5, 12, 2, 13, 9, 7, 10, 14,
    12, 15, 10, 4, 1, 5, 8, 7, 6, 2, 13, 14, 0, 3, 9, 11,
)

# Left rotation amounts
_RMD_RL = (
    11, 14, 15, 12, 5, 8, 7, 9, 11, 13, 14, 15, 6, 7, 9, 8,
    7, 6, 8, 13, 11, 9, 7, 15, 7, 12, 15, 9, 11, 7, 13, 12,
    11, 13, 6, 7, 14, 9, 13, 15, 14, 8, 13, 6, 5, 12, 7, 5,
    11, 12, 14, 15, 14, 15, 9, 8, 9, 14, 5, 6, 8, 6, 5, 12,
    9, 15, 5, 11, 6, 8, 13, 12, 5, 12, 13, 14, 11, 8, 5, 6,
)
_RMD_RR = (
    8, 9, 9, 11, 13, 15, 15, 5, 7, 7, 8, 11, 14, 14, 12, 6,
    9, 13, 15, 7, 12, 8, 9, 11, 7, 7, 12, 7, 6, 15, 13, 11,
    9, 7, 15, 11, 8, 6, 6, 14, 12, 13, 5, 14, 13, 13, 7, 5,
    15, 5, 8, 11, 14, 14, 6, 14, 6, 9, 12, 9, 12, 5, 15, 8,
    8, 5, 12, 9, 12, 5, 14, 6, 8, 13, 6, 5, 15, 13, 11, 11,
)

_RMD_KL = (0x00000000, 0x5A827999, 0x6ED9EBA1, 0x8F1BBCDC, 0xA953FD4E)
_RMD_KR = (0x50A28BE6, 0x5C4DD124, 0x6D703EF3, 0x7A6D76E9, 0x00000000)

# Boolean functions f0..f4; the right line applies them in reverse order
_RMD_F = (
    lambda x, y, z: x ^ y ^ z,
    lambda x, y, z: (x & y) | ((x ^ _M32) & z),
    lambda x, y, z: (x | (y ^ _M32)) ^ z,
    lambda x, y, z: (x & z) | (y & (z ^ _M32)),
    lambda x, y, z: x ^ (y | (z ^ _M32)),
)


class Ripemd160(_MerkleDamgard):
    name = "ripemd160"
    digest_size = 20
    block_size = 64
    _IV = (0x67452301, 0xEFCDAB89, 0x98BADCFE, 0x10325476, 0xC3D2E1F0)
    _WORD_FORMAT = "<I"
    _LENGTH_BYTES = 8
    _BYTEORDER = "little"

    def _compress(self, block):
        x = struct.unpack("<16I", block)
        h0, h1, h2, h3, h4 = self._state
        al, bl, cl, dl, el = h0, h1, h2, h3, h4
        ar, br, cr, dr, er = h0, h1, h2, h3, h4

        for j in range(80):
            r = j >> 4
            t = (al + _RMD_F[r](bl, cl, dl) + x[_RMD_ML[j]] + _RMD_KL[r]) & _M32
            t = (_rotl32(t, _RMD_RL[j]) + el) & _M32
            al, el, dl, cl, bl = el, dl, _rotl32(cl, 10), bl, t

            t = (ar + _RMD_F[4 - r](br, cr, dr) + x[_RMD_MR[j]] + _RMD_KR[r]) & _M32
            t = (_rotl32(t, _RMD_RR[j]) + er) & _M32
            ar, er, dr, cr, br = er, dr, _rotl32(cr, 10), br, t

        self._state = [
            (h1 + cl + dr) & _M32,
            (h2 + dl + er) & _M32,
            (h3 + el + ar) & _M32,
            (h4 + al + br) & _M32,
            (h0 + bl + cr) & _M32,
        ]


# ── Public interface ──────────────────────────────────────────────

class HashAlgorithm(enum.Enum):
    SHA256 = "sha256"
    SHA512 = "sha512"
    RIPEMD160 = "ripemd160"

    def new(self, data=b""):
        """Return a fresh incremental hasher for this algorithm."""
        return _HASHERS[self](data)

    @property
    def digest_size(self):
        return _HASHERS[self].digest_size

    @property
    def block_size(self):
        return _HASHERS[self].block_size


_HASHERS = {
    HashAlgorithm.SHA256: Sha256,
    HashAlgorithm.SHA512: Sha512,
    HashAlgorithm.RIPEMD160: Ripemd160,
}


@dataclass(frozen=True)
class Digest:
    """Immutable digest bytes tagged with the algorithm that produced them."""

    algorithm: HashAlgorithm
    value: bytes

    def __post_init__(self):
        if len(self.value) != self.algorithm.digest_size:
            raise ValueError(
                f"{self.algorithm.value} digest must be {self.algorithm.digest_size} bytes"
            )

    def __hash__(self):
        # module-level hash() below shadows the builtin
        return builtins.hash((self.algorithm, self.value))

    def __bytes__(self):
        return self.value

    def __len__(self):
        return len(self.value)

    def hex(self):
        return self.value.hex()


def hash(algorithm, data):
    """Hash a complete message in one call and return a Digest."""
    algorithm = HashAlgorithm(algorithm)
    return Digest(algorithm, algorithm.new(data).digest())


def sha256(data):
    return Sha256(data).digest()


def sha512(data):
    return Sha512(data).digest()


def ripemd160(data):
    return Ripemd160(data).digest()


def double_sha256(data):
    return sha256(sha256(data))


def hash160(data):
    """RIPEMD-160 of SHA-256, used for key fingerprints."""
    return ripemd160(sha256(data))
