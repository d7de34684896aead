# Copyright (c) 2026 Signer — MIT License

"""Mnemonic codecs, selectable by Scheme.

    codec = codec_for(Scheme.BIP39)
    m = codec.encode(entropy)
    seed = codec.to_seed(m, "passphrase")
"""

from .base import Mnemonic, MnemonicCodec, Scheme
from .bip39 import Bip39Codec
from .electrum import ElectrumCodec, ElectrumVersion

_CODECS = {
    Scheme.BIP39: Bip39Codec,
    Scheme.ELECTRUM: ElectrumCodec,
}


def codec_for(scheme, **kwargs):
    """Return a codec instance for a Scheme (or its name)."""
    return _CODECS[Scheme(scheme)](**kwargs)


__all__ = [
    "Bip39Codec",
    "ElectrumCodec",
    "ElectrumVersion",
    "Mnemonic",
    "MnemonicCodec",
    "Scheme",
    "codec_for",
]
