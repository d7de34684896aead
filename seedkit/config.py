# Copyright (c) 2026 Signer — MIT License

"""Fixed cryptographic parameters and runtime settings.

The constants below are defined by BIP32, BIP39 and Electrum and must not
change. Settings covers the few choices an operator can make without
touching key material: the network the extended keys are serialized for,
the default mnemonic scheme, and the log level.

Environment variables read by Settings.from_env():
    SEEDKIT_NETWORK         mainnet | testnet        (default mainnet)
    SEEDKIT_DEFAULT_SCHEME  bip39 | electrum         (default bip39)
    SEEDKIT_LOG_LEVEL       DEBUG | INFO | WARNING…  (default WARNING)
"""

import enum
import logging
import os
from dataclasses import dataclass

from .errors import InvalidParameter

# ── BIP39 ─────────────────────────────────────────────────────────
BIP39_SALT_PREFIX = "mnemonic"
BIP39_ITERATIONS = 2048
BIP39_ENTROPY_BITS = (128, 160, 192, 224, 256)

# ── Electrum ──────────────────────────────────────────────────────
ELECTRUM_VERSION_KEY = b"Seed version"
ELECTRUM_SALT_PREFIX = "electrum"
ELECTRUM_ITERATIONS = 2048

SEED_BYTES = 64

# ── BIP32 ─────────────────────────────────────────────────────────
BIP32_SEED_KEY = b"Bitcoin seed"
MIN_SEED_BYTES = 16
MAX_SEED_BYTES = 64
HARDENED_OFFSET = 0x80000000

# Key used to map over-range numbers into the curve order
FIT_PRIVATE_KEY_LABEL = b"Extremely Large Numer Private Key"


class Network(enum.Enum):
    """Extended key version bytes per network: (private, public)."""

    MAINNET = (0x0488ADE4, 0x0488B21E)
    TESTNET = (0x04358394, 0x043587CF)

    @property
    def private_version(self):
        return self.value[0]

    @property
    def public_version(self):
        return self.value[1]

    @classmethod
    def from_version(cls, version):
        """Return (network, is_private) for 4 version bytes given as an int."""
        for net in cls:
            if version == net.private_version:
                return net, True
            if version == net.public_version:
                return net, False
        raise InvalidParameter(f"unknown extended key version 0x{version:08X}")


_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    network: Network = Network.MAINNET
    default_scheme: str = "bip39"
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, environ=None):
        """Build settings from SEEDKIT_* environment variables."""
        env = os.environ if environ is None else environ

        net_name = env.get("SEEDKIT_NETWORK", "mainnet").strip().upper()
        try:
            network = Network[net_name]
        except KeyError:
            raise InvalidParameter(f"SEEDKIT_NETWORK must be mainnet or testnet, got {net_name.lower()!r}") from None

        scheme = env.get("SEEDKIT_DEFAULT_SCHEME", "bip39").strip().lower()
        if scheme not in ("bip39", "electrum"):
            raise InvalidParameter(f"SEEDKIT_DEFAULT_SCHEME must be bip39 or electrum, got {scheme!r}")

        level = env.get("SEEDKIT_LOG_LEVEL", "WARNING").strip().upper()
        if level not in _LOG_LEVELS:
            raise InvalidParameter(f"SEEDKIT_LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}")

        return cls(network=network, default_scheme=scheme, log_level=level)

    def apply_logging(self):
        """Set the package logger to the configured level."""
        logging.getLogger("seedkit").setLevel(self.log_level)
