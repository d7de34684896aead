# Copyright (c) 2026 Signer — MIT License

"""secp256k1 arithmetic for key derivation.

Points are affine (x, y) tuples at the public interface; None is the
point at infinity. Internally everything runs in Jacobian coordinates so
a scalar multiplication needs a single modular inversion.

Scalar multiplication is a Montgomery ladder over a fixed 256 bits: the
same sequence of one addition and one doubling runs for every bit, and
the operands are selected by index rather than by branching on the key.
Python integers are not constant-time, so this narrows timing leaks
rather than eliminating them.
"""

from .config import FIT_PRIVATE_KEY_LABEL
from .errors import InvalidParameter
from .hashing import HashAlgorithm
from .keyed import hmac

P = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F
N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
GX = 0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798
GY = 0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8
G = (GX, GY)
B = 7

SCALAR_BITS = 256
KEY_BYTES = 32

_INFINITY = (1, 1, 0)


# ── Jacobian arithmetic ───────────────────────────────────────────

def _to_jacobian(point):
    if point is None:
        return _INFINITY
    return (point[0], point[1], 1)


def _from_jacobian(jp):
    x, y, z = jp
    if z == 0:
        return None
    zinv = pow(z, P - 2, P)
    zinv2 = zinv * zinv % P
    return (x * zinv2 % P, y * zinv2 * zinv % P)


def _double(jp):
    x, y, z = jp
    if z == 0 or y == 0:
        return _INFINITY
    ysq = y * y % P
    s = 4 * x * ysq % P
    m = 3 * x * x % P
    nx = (m * m - 2 * s) % P
    ny = (m * (s - nx) - 8 * ysq * ysq) % P
    nz = 2 * y * z % P
    return (nx, ny, nz)


def _add(jp, jq):
    x1, y1, z1 = jp
    x2, y2, z2 = jq
    if z1 == 0:
        return jq
    if z2 == 0:
        return jp
    z1sq = z1 * z1 % P
    z2sq = z2 * z2 % P
    u1 = x1 * z2sq % P
    u2 = x2 * z1sq % P
    s1 = y1 * z2sq * z2 % P
    s2 = y2 * z1sq * z1 % P
    if u1 == u2:
        if s1 != s2:
            return _INFINITY
        return _double(jp)
    h = (u2 - u1) % P
    r = (s2 - s1) % P
    h2 = h * h % P
    h3 = h * h2 % P
    u1h2 = u1 * h2 % P
    nx = (r * r - h3 - 2 * u1h2) % P
    ny = (r * (u1h2 - nx) - s1 * h3) % P
    nz = h * z1 * z2 % P
    return (nx, ny, nz)


# ── Public interface ──────────────────────────────────────────────

def is_on_curve(point):
    if point is None:
        return True
    x, y = point
    if not (0 <= x < P and 0 <= y < P):
        return False
    return (y * y - x * x * x - B) % P == 0


def point_add(p, q):
    """Add two affine points."""
    return _from_jacobian(_add(_to_jacobian(p), _to_jacobian(q)))


def scalar_multiply(k, point=G):
    """Return k·point with a fixed-length Montgomery ladder."""
    if not 0 <= k < (1 << SCALAR_BITS):
        raise InvalidParameter("scalar must fit in 256 bits")
    r = [_INFINITY, _to_jacobian(point)]
    for i in range(SCALAR_BITS - 1, -1, -1):
        bit = (k >> i) & 1
        # r[1 - bit] += r[bit]; r[bit] doubled
        r[1 - bit] = _add(r[0], r[1])
        r[bit] = _double(r[bit])
    return _from_jacobian(r[0])


def compress(point):
    """SEC1 compressed encoding: 0x02/0x03 parity byte followed by x."""
    if point is None:
        raise InvalidParameter("the point at infinity has no encoding")
    x, y = point
    return bytes([2 + (y & 1)]) + x.to_bytes(KEY_BYTES, "big")


def decompress(data):
    """Parse a 33-byte compressed (or 65-byte uncompressed) SEC1 point."""
    data = bytes(data)
    if len(data) == 65 and data[0] == 4:
        point = (int.from_bytes(data[1:33], "big"), int.from_bytes(data[33:], "big"))
    elif len(data) == 33 and data[0] in (2, 3):
        x = int.from_bytes(data[1:], "big")
        if x >= P:
            raise InvalidParameter("point x coordinate out of range")
        y = pow((x * x * x + B) % P, (P + 1) // 4, P)
        if y & 1 != data[0] & 1:
            y = P - y
        point = (x, y)
    else:
        raise InvalidParameter("public key must be 33 (compressed) or 65 (uncompressed) bytes")
    if not is_on_curve(point):
        raise InvalidParameter("public key is not on secp256k1")
    return point


def is_valid_private_key(k):
    return 0 < k < N


def public_key(private_key):
    """Compressed public key for a private scalar (int or 32 bytes)."""
    if not isinstance(private_key, int):
        private_key = int.from_bytes(private_key, "big")
    if not is_valid_private_key(private_key):
        raise InvalidParameter("private key must be in [1, n-1]")
    return compress(scalar_multiply(private_key))


def fit_private_key(value):
    """Map a number >= n into the valid private key range.

    Values already in [1, n-1] are returned unchanged. Larger values are
    hashed with HMAC-SHA512 (minimal big-endian bytes of the value as
    message); the first 32 bytes of the MAC are used when they form a
    valid key, otherwise the value is incremented and hashed again.
    The result depends only on the input, so it can be reproduced, but
    other wallets will not recognize it as the same key.

    Returns the 32-byte private key.
    """
    if isinstance(value, (bytes, bytearray)):
        value = int.from_bytes(value, "big")
    if value <= 0:
        raise InvalidParameter("zero is not a valid private key")
    while not is_valid_private_key(value):
        message = value.to_bytes((value.bit_length() + 7) // 8, "big")
        candidate = int.from_bytes(
            hmac(HashAlgorithm.SHA512, FIT_PRIVATE_KEY_LABEL, message).value[:KEY_BYTES], "big"
        )
        if is_valid_private_key(candidate):
            value = candidate
            break
        value += 1
    return value.to_bytes(KEY_BYTES, "big")
