# Copyright (c) 2026 Signer — MIT License

"""BIP32 hierarchical deterministic keys on secp256k1.

    root = master_key(seed)
    acct = derive_path(root, DerivationPath.parse("m/44'/0'/0'"))
    xpub = neuter(acct).to_base58()

Extended key serialization (78 bytes, then Base58Check):

    4   version     xprv/xpub/tprv/tpub
    1   depth
    4   parent fingerprint (first 4 bytes of hash160 of parent pubkey)
    4   child number (big endian, hardened bit = 0x80000000)
    32  chain code
    33  key data (0x00 + private scalar, or compressed public point)

Derived values are independent and immutable: derivation returns new
ExtendedKey objects and never changes its input.
"""

import enum
import functools
import logging
from dataclasses import dataclass, field

from . import ecc
from .checksums import b58check_decode, b58check_encode
from .config import BIP32_SEED_KEY, HARDENED_OFFSET, MAX_SEED_BYTES, MIN_SEED_BYTES, Network
from .errors import (
    HardenedDerivationRequiresPrivateKey,
    InvalidChildIndex,
    InvalidParameter,
    InvalidSeed,
)
from .hashing import HashAlgorithm, hash160
from .keyed import hmac
from .memory import secure_buffer

log = logging.getLogger(__name__)

SERIALIZED_BYTES = 78
MAX_DEPTH = 255
_ZERO_FINGERPRINT = b"\x00\x00\x00\x00"
_HARDENED_MARKS = ("'", "h", "H")


# ── Derivation paths ──────────────────────────────────────────────

@dataclass(frozen=True)
class ChildNumber:
    """One step of a derivation path: an index below 2^31 and a hardened flag."""

    index: int
    hardened: bool = False

    def __post_init__(self):
        if not 0 <= self.index < HARDENED_OFFSET:
            raise InvalidParameter(f"child index must be in [0, 2^31), got {self.index}")

    @classmethod
    def from_raw(cls, number):
        """Split a 32-bit child number into index and hardened flag."""
        if not 0 <= number <= 0xFFFFFFFF:
            raise InvalidParameter("child number must fit in 32 bits")
        return cls(number & (HARDENED_OFFSET - 1), bool(number & HARDENED_OFFSET))

    @property
    def raw(self):
        return self.index + HARDENED_OFFSET if self.hardened else self.index

    def __str__(self):
        return f"{self.index}'" if self.hardened else str(self.index)


@dataclass(frozen=True)
class DerivationPath:
    """An ordered sequence of ChildNumbers, written m/44'/0'/0'/1."""

    steps: tuple = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "steps", tuple(self.steps))

    @classmethod
    def parse(cls, text):
        """Parse "m/44'/0'/0'/1". Hardened steps use ', h or H.

        The leading "m" is optional; "m" or "" alone is the empty path.
        """
        parts = [p.strip() for p in text.strip().split("/")]
        if parts and parts[0] in ("m", "M"):
            parts = parts[1:]
        if parts == [""]:
            parts = []
        steps = []
        for part in parts:
            hardened = part.endswith(_HARDENED_MARKS)
            digits = part[:-1] if hardened else part
            if not digits.isdigit() or not digits.isascii():
                raise InvalidParameter(f"invalid path component {part!r} in {text!r}")
            steps.append(ChildNumber(int(digits), hardened))
        return cls(tuple(steps))

    def child(self, index, hardened=False):
        return DerivationPath(self.steps + (ChildNumber(index, hardened),))

    def __iter__(self):
        return iter(self.steps)

    def __len__(self):
        return len(self.steps)

    def __str__(self):
        return "/".join(["m"] + [str(s) for s in self.steps])


# ── Extended keys ─────────────────────────────────────────────────

class KeyKind(enum.Enum):
    PRIVATE = "private"
    PUBLIC = "public"


@dataclass(frozen=True, repr=False)
class ExtendedKey:
    """A private or public BIP32 node.

    key holds 32 scalar bytes for PRIVATE and a 33-byte compressed point for
    PUBLIC. repr() never includes key or chain code.
    """

    kind: KeyKind
    key: bytes
    chain_code: bytes
    depth: int = 0
    parent_fingerprint: bytes = _ZERO_FINGERPRINT
    child_number: int = 0
    network: Network = Network.MAINNET

    def __post_init__(self):
        if len(self.chain_code) != 32:
            raise InvalidParameter("chain code must be 32 bytes")
        if not 0 <= self.depth <= MAX_DEPTH:
            raise InvalidParameter(f"depth must be in [0, {MAX_DEPTH}]")
        if len(self.parent_fingerprint) != 4:
            raise InvalidParameter("parent fingerprint must be 4 bytes")
        if self.kind is KeyKind.PRIVATE:
            if len(self.key) != ecc.KEY_BYTES or not ecc.is_valid_private_key(int.from_bytes(self.key, "big")):
                raise InvalidParameter("private key must be 32 bytes in [1, n-1]")
        else:
            if len(self.key) != ecc.KEY_BYTES + 1 or self.key[0] not in (2, 3):
                raise InvalidParameter("public key must be a 33-byte compressed point")
            ecc.decompress(self.key)

    @property
    def is_private(self):
        return self.kind is KeyKind.PRIVATE

    @functools.cached_property
    def public_key(self):
        """Compressed SEC1 public key (33 bytes)."""
        if self.is_private:
            return ecc.public_key(self.key)
        return self.key

    @property
    def private_key(self):
        if not self.is_private:
            raise InvalidParameter("public extended key has no private key")
        return self.key

    @property
    def identifier(self):
        return hash160(self.public_key)

    @property
    def fingerprint(self):
        return self.identifier[:4]

    @property
    def index(self):
        return ChildNumber.from_raw(self.child_number)

    @property
    def version(self):
        return self.network.private_version if self.is_private else self.network.public_version

    def serialize(self):
        """The 78-byte BIP32 serialization (without checksum)."""
        key_data = b"\x00" + self.key if self.is_private else self.key
        return (
            self.version.to_bytes(4, "big")
            + bytes([self.depth])
            + self.parent_fingerprint
            + self.child_number.to_bytes(4, "big")
            + self.chain_code
            + key_data
        )

    def to_base58(self):
        return b58check_encode(self.serialize())

    @classmethod
    def deserialize(cls, data):
        """Parse 78 serialized bytes, validating version, key range and depth-0 rules."""
        data = bytes(data)
        if len(data) != SERIALIZED_BYTES:
            raise InvalidParameter(f"extended key must be {SERIALIZED_BYTES} bytes, got {len(data)}")
        network, is_private = Network.from_version(int.from_bytes(data[:4], "big"))
        depth = data[4]
        parent_fp = data[5:9]
        child_number = int.from_bytes(data[9:13], "big")
        chain_code = data[13:45]
        key_data = data[45:]

        if depth == 0 and (parent_fp != _ZERO_FINGERPRINT or child_number != 0):
            raise InvalidParameter("master key must have zero parent fingerprint and index")
        if is_private:
            if key_data[0] != 0:
                raise InvalidParameter("private key data must start with 0x00")
            kind, key = KeyKind.PRIVATE, key_data[1:]
        else:
            if key_data[0] not in (2, 3):
                raise InvalidParameter("public key data must be a compressed point")
            kind, key = KeyKind.PUBLIC, key_data
        return cls(kind, key, chain_code, depth, parent_fp, child_number, network)

    @classmethod
    def parse(cls, text):
        """Parse an xprv/xpub/tprv/tpub string."""
        return cls.deserialize(b58check_decode(text))

    def neuter(self):
        return neuter(self)

    def derive_child(self, index, hardened=False):
        return derive_child(self, index, hardened)

    def derive_path(self, path):
        return derive_path(self, path)

    def __eq__(self, other):
        if not isinstance(other, ExtendedKey):
            return NotImplemented
        return self.serialize() == other.serialize()

    def __hash__(self):
        return hash(self.serialize())

    def __repr__(self):
        return (
            f"ExtendedKey({self.kind.name}, depth={self.depth}, child={self.index}, "
            f"fingerprint={self.fingerprint.hex()}, network={self.network.name})"
        )


# ── Derivation ────────────────────────────────────────────────────

def master_key(seed, network=Network.MAINNET):
    """Derive the master private key from a 16-64 byte seed.

    Raises:
        InvalidParameter: Seed length outside 16-64 bytes.
        InvalidSeed: The derived scalar is zero or not below n.
    """
    seed = bytes(seed)
    if not MIN_SEED_BYTES <= len(seed) <= MAX_SEED_BYTES:
        raise InvalidParameter(
            f"seed must be {MIN_SEED_BYTES}-{MAX_SEED_BYTES} bytes, got {len(seed)}"
        )
    with secure_buffer(hmac(HashAlgorithm.SHA512, BIP32_SEED_KEY, seed).value) as i:
        if not ecc.is_valid_private_key(int.from_bytes(i[:32], "big")):
            raise InvalidSeed("seed produces an invalid master key; use a different seed")
        return ExtendedKey(KeyKind.PRIVATE, bytes(i[:32]), bytes(i[32:]), network=network)


def derive_child(parent, index, hardened=False):
    """Derive the child at index (hardened or not) one level below parent.

    index may also be a raw 32-bit child number with the hardened bit set.

    Raises:
        HardenedDerivationRequiresPrivateKey: Hardened step on a public key.
        InvalidChildIndex: IL >= n or the child key is zero/infinity. The
            caller decides whether to move on to index + 1.
    """
    if isinstance(index, ChildNumber):
        step = index
    elif index >= HARDENED_OFFSET:
        step = ChildNumber.from_raw(index)
    else:
        step = ChildNumber(index, hardened)

    if step.hardened and not parent.is_private:
        raise HardenedDerivationRequiresPrivateKey(step.index)
    if parent.depth >= MAX_DEPTH:
        raise InvalidParameter("maximum derivation depth reached")

    ser32 = step.raw.to_bytes(4, "big")
    if step.hardened:
        data = b"\x00" + parent.key + ser32
    else:
        data = parent.public_key + ser32

    with secure_buffer(hmac(HashAlgorithm.SHA512, parent.chain_code, data).value) as i:
        il = int.from_bytes(i[:32], "big")
        chain_code = bytes(i[32:])
    if il >= ecc.N:
        raise InvalidChildIndex(step.index, step.hardened)

    if parent.is_private:
        k = (il + int.from_bytes(parent.key, "big")) % ecc.N
        if k == 0:
            raise InvalidChildIndex(step.index, step.hardened)
        key = k.to_bytes(ecc.KEY_BYTES, "big")
    else:
        point = ecc.point_add(ecc.scalar_multiply(il), ecc.decompress(parent.key))
        if point is None:
            raise InvalidChildIndex(step.index, step.hardened)
        key = ecc.compress(point)

    return ExtendedKey(
        parent.kind, key, chain_code, parent.depth + 1, parent.fingerprint, step.raw, parent.network
    )


def neuter(key):
    """Return the public counterpart of an extended key (public keys pass through)."""
    if not key.is_private:
        return key
    return ExtendedKey(
        KeyKind.PUBLIC, key.public_key, key.chain_code, key.depth,
        key.parent_fingerprint, key.child_number, key.network,
    )


def derive_path(root, path):
    """Walk path from root, one derive_child per step. An empty path returns root."""
    if isinstance(path, str):
        path = DerivationPath.parse(path)
    key = root
    for step in path:
        key = derive_child(key, step)
    log.debug("derived %s key at depth %d", key.kind.value, key.depth)
    return key
