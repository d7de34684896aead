# Copyright (c) 2026 Signer — MIT License

"""The 2048-word English list shared by BIP39 and Electrum.

The list itself ships with the `mnemonic` package (the BIP39 reference
implementation); this module adds index lookup, batch resolution with
per-position errors, and prefix search for autocompletion.

Usage:
    wl = english()
    wl.index("zoo")                          # 2047
    wl.resolve(["abandon", "???", "zoo"])    # ([0, 2047], [(1, "???")])
    wl.search("ab")                          # [("abandon", 0), ("ability", 1), ...]
"""

import bisect
import functools
import logging

from mnemonic import Mnemonic

from .errors import UnknownWord
from .normalization import normalize_word

log = logging.getLogger(__name__)

WORD_COUNT = 2048
BITS_PER_WORD = 11


class Wordlist:
    """An ordered, sorted list of unique words with fast reverse lookup."""

    def __init__(self, language, words):
        words = tuple(words)
        if len(words) != WORD_COUNT:
            raise ValueError(f"{language} wordlist has {len(words)} words, expected {WORD_COUNT}")
        self.language = language
        self.words = words
        self._lookup = {w: i for i, w in enumerate(words)}
        if len(self._lookup) != WORD_COUNT:
            raise ValueError(f"{language} wordlist contains duplicate words")
        self._sorted = sorted(words)

    def __len__(self):
        return len(self.words)

    def __getitem__(self, index):
        return self.words[index]

    def __contains__(self, word):
        return normalize_word(word) in self._lookup

    def index(self, word, position=None):
        """Return the index of word, raising UnknownWord if it is not listed."""
        idx = self._lookup.get(normalize_word(word))
        if idx is None:
            raise UnknownWord(word, position)
        return idx

    def resolve(self, words):
        """Resolve a list of words to indexes.

        Returns (indexes, errors) where errors is [(position, word), ...],
        so a UI can highlight every bad word at once.
        """
        indexes = []
        errors = []
        for i, word in enumerate(words):
            idx = self._lookup.get(normalize_word(word))
            if idx is not None:
                indexes.append(idx)
            else:
                errors.append((i, word))
        return indexes, errors

    def search(self, prefix, limit=10):
        """Suggest words starting with prefix, as (word, index) tuples sorted alphabetically."""
        key = normalize_word(prefix)
        if not key:
            return []
        lo = bisect.bisect_left(self._sorted, key)
        results = []
        for word in self._sorted[lo:]:
            if len(results) >= limit or not word.startswith(key):
                break
            results.append((word, self._lookup[word]))
        return results

    def complete(self, prefix):
        """Return the single word a prefix identifies, or None if ambiguous or unknown.

        Every English word is unique in its first four letters.
        """
        matches = self.search(prefix, limit=2)
        if len(matches) == 1:
            return matches[0][0]
        key = normalize_word(prefix)
        return key if key in self._lookup else None


@functools.lru_cache(maxsize=None)
def english():
    """Load the English wordlist once."""
    wl = Wordlist("english", Mnemonic("english").wordlist)
    log.debug("loaded %s wordlist (%d words)", wl.language, len(wl))
    return wl
