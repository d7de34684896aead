# Copyright (c) 2026 Signer — MIT License

"""Error taxonomy for seedkit.

Every failure raised by the toolkit derives from SeedkitError and is
recoverable by the caller. The two branches tell an operator whose data
was at fault:

    InputError      — the supplied words, parameters or call order were wrong
    InvariantError  — a derived value fell outside its valid range

    SeedkitError
    ├── InputError
    │   ├── InvalidParameter (also ValueError)
    │   ├── InvalidState
    │   ├── UnknownWord
    │   ├── ChecksumMismatch
    │   ├── UnrecognizedSeedVersion
    │   └── HardenedDerivationRequiresPrivateKey
    └── InvariantError
        ├── InvalidSeed
        └── InvalidChildIndex
"""


class SeedkitError(Exception):
    """Base class for all seedkit errors."""


class InputError(SeedkitError):
    """The caller's input was malformed."""


class InvariantError(SeedkitError):
    """An internal cryptographic invariant was violated."""


class InvalidParameter(InputError, ValueError):
    """A parameter is outside the range the operation accepts."""


class InvalidState(InputError):
    """The operation is not allowed in the object's current state."""


class UnknownWord(InputError):
    """A mnemonic word is not present in the wordlist."""

    def __init__(self, word, position=None):
        self.word = word
        self.position = position
        where = f" at position {position}" if position is not None else ""
        super().__init__(f"unknown word '{word}'{where}")


class ChecksumMismatch(InputError):
    """A checksum embedded in the input does not match its payload."""


class UnrecognizedSeedVersion(InputError):
    """An Electrum phrase does not carry a known seed version prefix."""


class HardenedDerivationRequiresPrivateKey(InputError):
    """Hardened child derivation was requested from a public key."""

    def __init__(self, index):
        self.index = index
        super().__init__(
            f"hardened child {index}' cannot be derived from a public key"
        )


class InvalidSeed(InvariantError):
    """The master key derived from a seed is zero or not below the curve order."""


class InvalidChildIndex(InvariantError):
    """The key derived at this index is invalid; the caller may try the next index."""

    def __init__(self, index, hardened=False):
        self.index = index
        self.hardened = hardened
        mark = "'" if hardened else ""
        super().__init__(f"child {index}{mark} yields an invalid key, use the next index")
