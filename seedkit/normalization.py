# Copyright (c) 2026 Signer — MIT License

"""Text normalization for mnemonic input.

Operators type words by hand; the same phrase must always produce the
same seed. Words and phrases are cleaned before lookup:

    - zero-width / invisible characters removed
    - Unicode NFKD (full-width → regular, ligatures → letters)
    - case-folded (Electrum lowercases, as Electrum itself does)
    - whitespace trimmed and collapsed to single spaces

Electrum additionally strips combining marks (accents) and removes
whitespace between CJK characters before hashing a phrase.
"""

import re
import unicodedata

# Zero-width and invisible characters to strip
_INVISIBLE_CHARS = re.compile(
    "[\u200b\u200c\u200d\u200e\u200f\u00ad\u034f\u061c"
    "\ufeff\u2060\u2061\u2062\u2063\u2064\u180e]"
)

# Ideographic and syllabic blocks where Electrum drops inter-character spaces
_CJK_RANGES = (
    (0x1100, 0x11FF),    # Hangul Jamo
    (0x2E80, 0x2FDF),    # CJK radicals, Kangxi radicals
    (0x3000, 0x303F),    # CJK symbols and punctuation
    (0x3040, 0x30FF),    # Hiragana, Katakana
    (0x3100, 0x31FF),    # Bopomofo, Hangul compatibility, Kanbun
    (0x3200, 0x4DBF),    # enclosed CJK, CJK extension A
    (0x4E00, 0x9FFF),    # CJK unified ideographs
    (0xA960, 0xA97F),    # Hangul Jamo extended A
    (0xAC00, 0xD7FF),    # Hangul syllables, Jamo extended B
    (0xF900, 0xFAFF),    # CJK compatibility ideographs
    (0xFF00, 0xFFEF),    # half-width and full-width forms
    (0x20000, 0x2FA1F),  # CJK extensions B-F, compatibility supplement
)


def normalize_word(word):
    """Normalize a single word for wordlist lookup."""
    w = _INVISIBLE_CHARS.sub("", word)
    w = unicodedata.normalize("NFKD", w)
    return w.strip().casefold()


def normalize_phrase(text):
    """Normalize a whole phrase: NFKD, case-folded, single spaces, trimmed."""
    t = _INVISIBLE_CHARS.sub("", text)
    t = unicodedata.normalize("NFKD", t).casefold()
    return " ".join(t.split())


def split_words(text_or_words):
    """Accept a phrase or a sequence of words and return normalized words."""
    if isinstance(text_or_words, str):
        return normalize_phrase(text_or_words).split(" ") if text_or_words.strip() else []
    return [normalize_word(w) for w in text_or_words]


def strip_diacritics(text):
    """Remove combining marks after NFKD decomposition."""
    nfkd = unicodedata.normalize("NFKD", text)
    return "".join(c for c in nfkd if not unicodedata.combining(c))


def is_cjk(char):
    cp = ord(char)
    return any(lo <= cp <= hi for lo, hi in _CJK_RANGES)


def electrum_normalize(text):
    """Normalize a phrase or passphrase the way Electrum does before hashing."""
    t = _INVISIBLE_CHARS.sub("", text)
    t = unicodedata.normalize("NFKD", t).lower()
    t = " ".join(strip_diacritics(t).split())
    # drop spaces sandwiched between CJK characters
    return "".join(
        c for i, c in enumerate(t)
        if not (c.isspace() and 0 < i < len(t) - 1 and is_cjk(t[i - 1]) and is_cjk(t[i + 1]))
    )


def nfkd(text):
    return unicodedata.normalize("NFKD", text)
