# Copyright (c) 2026 Signer — MIT License

"""Shared mnemonic types and the codec contract."""

import enum
from dataclasses import dataclass

from ..errors import InputError, InvalidParameter
from ..normalization import normalize_word, split_words
from ..wordlists import BITS_PER_WORD, english


class Scheme(enum.Enum):
    BIP39 = "bip39"
    ELECTRUM = "electrum"


@dataclass(frozen=True)
class Mnemonic:
    """Words from a fixed wordlist, tagged with the scheme that produced them.

    Words are stored normalized (NFKD, case-folded, trimmed), so equal words
    always stretch to the same seed. repr() shows only the scheme and word
    count so a mnemonic never ends up in a log line or traceback by
    accident. Use .phrase to display it.
    """

    words: tuple
    scheme: Scheme

    def __post_init__(self):
        object.__setattr__(self, "words", tuple(normalize_word(w) for w in self.words))
        object.__setattr__(self, "scheme", Scheme(self.scheme))

    @classmethod
    def from_phrase(cls, text, scheme):
        """Build from typed text or a word list, normalizing case and whitespace."""
        return cls(tuple(split_words(text)), scheme)

    @property
    def phrase(self):
        return " ".join(self.words)

    def __len__(self):
        return len(self.words)

    def __iter__(self):
        return iter(self.words)

    def __repr__(self):
        return f"Mnemonic({self.scheme.name}, {len(self.words)} words)"


class MnemonicCodec:
    """Capability set every scheme provides: encode, decode, validate, to_seed."""

    scheme = None

    def __init__(self, wordlist=None):
        self.wordlist = wordlist or english()

    def encode(self, entropy):
        raise NotImplementedError

    def decode(self, mnemonic):
        raise NotImplementedError

    def to_seed(self, mnemonic, passphrase=""):
        raise NotImplementedError

    def validate(self, mnemonic):
        """True if the mnemonic decodes cleanly under this scheme."""
        try:
            self.decode(mnemonic)
        except InputError:
            return False
        else:
            return True

    # ── helpers ───────────────────────────────────────────────────

    def _coerce(self, mnemonic):
        if isinstance(mnemonic, Mnemonic):
            if mnemonic.scheme is not self.scheme:
                raise InvalidParameter(
                    f"{mnemonic.scheme.name} mnemonic passed to the {self.scheme.name} codec"
                )
            return mnemonic
        return Mnemonic.from_phrase(mnemonic, self.scheme)

    def _words_to_int(self, words):
        value = 0
        for pos, word in enumerate(words):
            value = (value << BITS_PER_WORD) | self.wordlist.index(word, pos)
        return value

    def _int_to_words(self, value, count):
        mask = (1 << BITS_PER_WORD) - 1
        return tuple(
            self.wordlist[(value >> (BITS_PER_WORD * (count - 1 - i))) & mask]
            for i in range(count)
        )
