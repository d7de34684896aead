# Copyright (c) 2026 Signer — MIT License

"""seedkit: airgapped key derivation from dice to extended keys.

Pipeline:
    EntropyCollector → entropy bytes → Mnemonic (BIP39 or Electrum)
    → seed (PBKDF2-HMAC-SHA512) → master ExtendedKey → child keys

Every hash, HMAC and PBKDF2 runs on the pure-Python digest engine in
seedkit.hashing, so results can be checked against hashlib on any other
machine.

Usage:
    from seedkit import Bip39Codec, master_key, derive_path
    codec = Bip39Codec()
    words = codec.encode(entropy)
    seed = codec.to_seed(words, "passphrase")
    account = derive_path(master_key(seed), "m/84'/0'/0'")
    print(account.neuter().to_base58())
"""

import logging

from .config import Network, Settings
from .entropy import EntropyCollector, EntropyPool, EntropySource, RawEntropyEvent, von_neumann
from .errors import (
    ChecksumMismatch,
    HardenedDerivationRequiresPrivateKey,
    InputError,
    InvalidChildIndex,
    InvalidParameter,
    InvalidSeed,
    InvalidState,
    InvariantError,
    SeedkitError,
    UnknownWord,
    UnrecognizedSeedVersion,
)
from .hashing import Digest, HashAlgorithm
from .hd import ChildNumber, DerivationPath, ExtendedKey, KeyKind, derive_child, derive_path, master_key, neuter
from .keyed import hmac, pbkdf2
from .memory import secure_buffer, wipe
from .mnemonics import Bip39Codec, ElectrumCodec, ElectrumVersion, Mnemonic, Scheme, codec_for
from .randomness import HealthReport, verify_randomness

__version__ = "1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Bip39Codec",
    "ChecksumMismatch",
    "ChildNumber",
    "DerivationPath",
    "Digest",
    "ElectrumCodec",
    "ElectrumVersion",
    "EntropyCollector",
    "EntropyPool",
    "EntropySource",
    "ExtendedKey",
    "HardenedDerivationRequiresPrivateKey",
    "HashAlgorithm",
    "HealthReport",
    "InputError",
    "InvalidChildIndex",
    "InvalidParameter",
    "InvalidSeed",
    "InvalidState",
    "InvariantError",
    "KeyKind",
    "Mnemonic",
    "Network",
    "RawEntropyEvent",
    "Scheme",
    "SeedkitError",
    "Settings",
    "UnknownWord",
    "UnrecognizedSeedVersion",
    "codec_for",
    "derive_child",
    "derive_path",
    "hmac",
    "master_key",
    "neuter",
    "pbkdf2",
    "secure_buffer",
    "verify_randomness",
    "von_neumann",
    "wipe",
]
