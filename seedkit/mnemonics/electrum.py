# Copyright (c) 2026 Signer — MIT License

"""Electrum seed-version mnemonics.

Electrum phrases carry no checksum suffix. Instead the phrase is valid
when HMAC-SHA512(key="Seed version", phrase) starts with a known hex
prefix, which doubles as the wallet type:

    STANDARD        "01"   legacy P2PKH wallet
    SEGWIT          "100"  native segwit wallet
    TWO_FA          "101"  2-of-3 TrustedCoin wallet
    TWO_FA_SEGWIT   "102"  2-of-3 TrustedCoin segwit wallet

Generating a phrase for a given version is a search: the entropy is
read as a big integer (first word most significant, 11 bits per word),
and incremented until the phrase hits the wanted prefix without also
being a valid BIP39 mnemonic. About 1 in 256 (STANDARD) or 1 in 4096
(SEGWIT) candidates match.

The seed is PBKDF2-HMAC-SHA512(phrase, "electrum" + passphrase, 2048
rounds, 64 bytes) after Electrum's normalization of both strings.
"""

import enum
import logging
import time

from ..config import ELECTRUM_ITERATIONS, ELECTRUM_SALT_PREFIX, ELECTRUM_VERSION_KEY, SEED_BYTES
from ..errors import InvalidParameter, UnrecognizedSeedVersion
from ..hashing import HashAlgorithm
from ..keyed import hmac, pbkdf2
from ..normalization import electrum_normalize
from ..wordlists import BITS_PER_WORD
from .base import Mnemonic, MnemonicCodec, Scheme
from .bip39 import Bip39Codec

log = logging.getLogger(__name__)

VALID_WORD_COUNTS = (12, 15, 18, 21, 24)


class ElectrumVersion(enum.Enum):
    STANDARD = "01"
    SEGWIT = "100"
    TWO_FA = "101"
    TWO_FA_SEGWIT = "102"

    @property
    def prefix(self):
        return self.value

    @property
    def can_generate(self):
        """2FA seeds need a TrustedCoin cosigner and are never generated here."""
        return self in (ElectrumVersion.STANDARD, ElectrumVersion.SEGWIT)


def entropy_bytes_for(word_count):
    """Bytes of entropy a phrase of word_count words consumes."""
    return (word_count * BITS_PER_WORD + 7) // 8


def version_hash(phrase):
    """HMAC-SHA512 hex digest Electrum uses to tag a phrase's version."""
    return hmac(HashAlgorithm.SHA512, ELECTRUM_VERSION_KEY, electrum_normalize(phrase).encode("utf-8")).hex()


class ElectrumCodec(MnemonicCodec):
    scheme = Scheme.ELECTRUM

    def __init__(self, wordlist=None, version=ElectrumVersion.SEGWIT):
        super().__init__(wordlist)
        self.version = ElectrumVersion(version)
        self._bip39 = Bip39Codec(self.wordlist)

    def seed_version(self, mnemonic):
        """Return the ElectrumVersion a phrase carries, or None.

        Raises UnknownWord if a word is not in the wordlist.
        """
        m = self._coerce(mnemonic)
        self._words_to_int(m.words)
        digest = version_hash(m.phrase)
        for version in ElectrumVersion:
            if digest.startswith(version.prefix):
                return version
        return None

    def encode(self, entropy, version=None, word_count=None):
        """Search from entropy for a phrase of the requested version."""
        mnemonic, _ = self.generate(entropy, version, word_count)
        return mnemonic

    def generate(self, entropy, version=None, word_count=None):
        """Find the first phrase at or after entropy that carries the version prefix.

        Args:
            entropy: Starting entropy. Without word_count its length must be
                17, 21, 25, 29 or 33 bytes (12-24 words). With word_count the
                trailing bytes needed are used. Leading spare bits are zeroed.
            version: ElectrumVersion to search for (STANDARD or SEGWIT).
            word_count: 12, 15, 18, 21 or 24.

        Returns:
            (Mnemonic, iterations) where iterations is the number of
            increments the search needed.

        Raises:
            InvalidParameter: Bad length, a 2FA version, or the search ran
                past the largest value the word count can hold.
        """
        version = self.version if version is None else ElectrumVersion(version)
        if not version.can_generate:
            raise InvalidParameter(f"{version.name} seeds cannot be generated")

        entropy = bytes(entropy)
        if word_count is None:
            sizes = {entropy_bytes_for(n): n for n in VALID_WORD_COUNTS}
            if len(entropy) not in sizes:
                raise InvalidParameter(
                    f"Electrum entropy must be one of {sorted(sizes)} bytes, got {len(entropy)}"
                )
            word_count = sizes[len(entropy)]
        elif word_count not in VALID_WORD_COUNTS:
            raise InvalidParameter(f"Electrum word count must be one of {VALID_WORD_COUNTS}")
        else:
            needed = entropy_bytes_for(word_count)
            if len(entropy) < needed:
                raise InvalidParameter(f"{word_count} words need {needed} bytes of entropy")
            entropy = entropy[-needed:]

        bits = word_count * BITS_PER_WORD
        limit = 1 << bits
        value = int.from_bytes(entropy, "big") & (limit - 1)

        t0 = time.perf_counter()
        iterations = 0
        while True:
            words = self._int_to_words(value, word_count)
            phrase = " ".join(words)
            if not self._bip39.validate(phrase) and version_hash(phrase).startswith(version.prefix):
                break
            value += 1
            iterations += 1
            if value >= limit:
                raise InvalidParameter(
                    "entropy ran out before a valid phrase was found; use different entropy"
                )

        log.debug("electrum %s phrase found after %d iterations (%.1fms)",
                  version.name, iterations, (time.perf_counter() - t0) * 1000)
        return Mnemonic(words, self.scheme), iterations

    def decode(self, mnemonic):
        """Return the phrase's entropy as big-endian bytes.

        Raises:
            InvalidParameter: Word count is not 12, 15, 18, 21 or 24.
            UnknownWord: A word is not in the wordlist.
            UnrecognizedSeedVersion: No known version prefix.
        """
        m = self._coerce(mnemonic)
        count = len(m.words)
        if count not in VALID_WORD_COUNTS:
            raise InvalidParameter(
                f"Electrum phrases have {', '.join(map(str, VALID_WORD_COUNTS))} words, got {count}"
            )
        value = self._words_to_int(m.words)
        if self.seed_version(m) is None:
            raise UnrecognizedSeedVersion("phrase does not carry a known Electrum seed version")
        return value.to_bytes(entropy_bytes_for(count), "big")

    def to_seed(self, mnemonic, passphrase="", validate=True):
        """Stretch a phrase and optional passphrase into a 64-byte seed."""
        m = self._coerce(mnemonic)
        if validate:
            self.decode(m)
        salt = ELECTRUM_SALT_PREFIX + electrum_normalize(passphrase or "")
        return pbkdf2(
            HashAlgorithm.SHA512, electrum_normalize(m.phrase), salt, ELECTRUM_ITERATIONS, SEED_BYTES
        )
