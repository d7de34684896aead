# Copyright (c) 2026 Signer — MIT License

"""BIP39 mnemonics.

    ENT bits   checksum   words
      128         4         12
      160         5         15
      192         6         18
      224         7         21
      256         8         24

The checksum is the first ENT/32 bits of SHA-256(entropy), appended to
the entropy; the result is split into 11-bit word indexes. The seed is
PBKDF2-HMAC-SHA512(mnemonic, "mnemonic" + passphrase, 2048 rounds, 64
bytes), both strings NFKD-normalized.
"""

import logging
import secrets

from ..config import BIP39_ENTROPY_BITS, BIP39_ITERATIONS, BIP39_SALT_PREFIX, SEED_BYTES
from ..errors import ChecksumMismatch, InvalidParameter
from ..hashing import HashAlgorithm, sha256
from ..keyed import pbkdf2
from ..normalization import nfkd
from ..wordlists import BITS_PER_WORD
from .base import Mnemonic, MnemonicCodec, Scheme

log = logging.getLogger(__name__)

VALID_WORD_COUNTS = tuple((bits + bits // 32) // BITS_PER_WORD for bits in BIP39_ENTROPY_BITS)


def _checksum(entropy, width):
    return sha256(entropy)[0] >> (8 - width)


class Bip39Codec(MnemonicCodec):
    scheme = Scheme.BIP39

    def encode(self, entropy):
        """Encode 16-32 bytes of entropy (in 4-byte steps) as a mnemonic."""
        entropy = bytes(entropy)
        bits = len(entropy) * 8
        if bits not in BIP39_ENTROPY_BITS:
            raise InvalidParameter(
                f"BIP39 entropy must be one of {BIP39_ENTROPY_BITS} bits, got {bits}"
            )
        cs = bits // 32
        value = (int.from_bytes(entropy, "big") << cs) | _checksum(entropy, cs)
        return Mnemonic(self._int_to_words(value, (bits + cs) // BITS_PER_WORD), self.scheme)

    def decode(self, mnemonic):
        """Return the entropy a mnemonic encodes.

        Raises:
            InvalidParameter: Word count is not 12, 15, 18, 21 or 24.
            UnknownWord: A word is not in the wordlist.
            ChecksumMismatch: The checksum bits do not match the entropy.
        """
        m = self._coerce(mnemonic)
        count = len(m.words)
        if count not in VALID_WORD_COUNTS:
            raise InvalidParameter(
                f"BIP39 mnemonics have {', '.join(map(str, VALID_WORD_COUNTS))} words, got {count}"
            )
        value = self._words_to_int(m.words)
        total = count * BITS_PER_WORD
        cs = total // 33
        entropy = (value >> cs).to_bytes((total - cs) // 8, "big")
        if value & ((1 << cs) - 1) != _checksum(entropy, cs):
            raise ChecksumMismatch("BIP39 checksum does not match; check the words and their order")
        return entropy

    def to_seed(self, mnemonic, passphrase="", validate=True):
        """Stretch a mnemonic and optional passphrase into a 64-byte seed.

        With validate=False the checksum is not checked (BIP39 allows this),
        but every word must still be in the wordlist.
        """
        m = self._coerce(mnemonic)
        if validate:
            self.decode(m)
        else:
            self._words_to_int(m.words)
        salt = BIP39_SALT_PREFIX + nfkd(passphrase or "")
        return pbkdf2(HashAlgorithm.SHA512, nfkd(m.phrase), salt, BIP39_ITERATIONS, SEED_BYTES)

    def generate(self, bits=256):
        """Create a fresh mnemonic from the OS CSPRNG."""
        if bits not in BIP39_ENTROPY_BITS:
            raise InvalidParameter(f"BIP39 entropy must be one of {BIP39_ENTROPY_BITS} bits")
        return self.encode(secrets.token_bytes(bits // 8))
