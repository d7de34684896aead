"""Shared fixtures: well-known mnemonics, seeds and master keys."""

import pytest

from seedkit import Bip39Codec, ElectrumCodec, ElectrumVersion, master_key

ABANDON_ABOUT = " ".join(["abandon"] * 11 + ["about"])
ABANDON_ABOUT_SEED = bytes.fromhex(
    "5eb00bbddcf069084889a8ab9155568165f5c453ccb85e70811aaed6f6da5fc1"
    "9a5ac40b389cd370d086206dec8aa6c43daea6690f20ad3d8d48b2d2ce9e38e4"
)
ABANDON_ABOUT_XPRV = (
    "xprv9s21ZrQH143K3GJpoapnV8SFfukcVBSfeCficPSGfubmSFDxo1kuHnLisriDvSnR"
    "RuL2Qrg5ggqHKNVpxR86QEC8w35uxmGoggxtQTPvfUu"
)


@pytest.fixture(scope="session")
def bip39():
    return Bip39Codec()


@pytest.fixture(scope="session")
def electrum_segwit():
    return ElectrumCodec(version=ElectrumVersion.SEGWIT)


@pytest.fixture(scope="session")
def electrum_standard():
    return ElectrumCodec(version=ElectrumVersion.STANDARD)


@pytest.fixture(scope="session")
def abandon_master():
    """Master key of "abandon x11 about" with an empty passphrase."""
    return master_key(ABANDON_ABOUT_SEED)
