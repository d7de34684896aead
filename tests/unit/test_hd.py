"""BIP32 derivation, serialization and secp256k1 point arithmetic."""

import pytest

from seedkit import ecc
from seedkit.config import FIT_PRIVATE_KEY_LABEL, Network
from seedkit.errors import (
    ChecksumMismatch,
    HardenedDerivationRequiresPrivateKey,
    InvalidParameter,
)
from seedkit.hashing import HashAlgorithm
from seedkit.hd import (
    ChildNumber,
    DerivationPath,
    ExtendedKey,
    KeyKind,
    derive_child,
    derive_path,
    master_key,
    neuter,
)
from seedkit.keyed import hmac
from tests.conftest import ABANDON_ABOUT_XPRV

ABANDON_MASTER_RAW = bytes.fromhex(
    "0488ADE40000000000000000007923408DADD3C7B56EED15567707AE5E5DCA08"
    "9DE972E07F3B860450E2A3B70E001837C1BE8E2995EC11CDA2B066151BE2CFB4"
    "8ADF9E47B151D46ADAB3A21CDF67"
)
ABANDON_MASTER_PUB_RAW = bytes.fromhex(
    "0488B21E0000000000000000007923408DADD3C7B56EED15567707AE5E5DCA08"
    "9DE972E07F3B860450E2A3B70E03D902F35F560E0470C63313C7369168D9D7DF"
    "2D49BF295FD9FB7CB109CCEE0494"
)

VECTOR1_SEED = bytes.fromhex("000102030405060708090a0b0c0d0e0f")


# ============================================================================
# DERIVATION
# ============================================================================

class TestMasterKey:
    """Seed → master extended private key."""

    def test_abandon_master(self, abandon_master):
        assert abandon_master.serialize() == ABANDON_MASTER_RAW
        assert abandon_master.to_base58() == ABANDON_ABOUT_XPRV

    def test_bip32_vector1(self):
        m = master_key(VECTOR1_SEED)
        assert m.to_base58() == (
            "xprv9s21ZrQH143K3QTDL4LXw2F7HEK3wJUD2nW2nRk4stbPy6cq3jPPqjiChkVvvNKm"
            "PGJxWUtg6LnF5kejMRNNU3TGtRBeJgk33yuGBxrMPHi"
        )
        assert m.neuter().to_base58() == (
            "xpub661MyMwAqRbcFtXgS5sYJABqqG9YLmC4Q1Rdap9gSE8NqtwybGhePY2gZ29ESFjq"
            "JoCu1Rupje8YtGqsefD265TMg7usUDFdp6W1EGMcet8"
        )
        assert m.depth == 0
        assert m.parent_fingerprint == bytes(4)

    @pytest.mark.parametrize("size", [0, 15, 65, 128])
    def test_seed_length(self, size):
        with pytest.raises(InvalidParameter):
            master_key(bytes(size))

    def test_testnet_versions(self):
        m = master_key(VECTOR1_SEED, Network.TESTNET)
        assert m.to_base58().startswith("tprv")
        assert neuter(m).to_base58().startswith("tpub")


class TestChildDerivation:
    """Private and public CKD against known keys."""

    def test_private_hardened_path(self, abandon_master):
        child = derive_path(abandon_master, "m/44'/0'/0'/1")
        assert child.serialize() == bytes.fromhex(
            "0488ADE4046CC9F25200000001505A8425594B8BA73AB572F6C77B5802C29A4F"
            "FBEBF89C020899FB9AB2EAB8C600AD2F3FE15F9E93726ABF77AEFDE4933E6B42"
            "34210B6FD08C7D4D728C76AB7603"
        )

    def test_first_hardened_child(self, abandon_master):
        child = derive_child(abandon_master, 0, hardened=True)
        assert abandon_master.fingerprint.hex() == "73c5da0a"
        assert child.serialize() == bytes.fromhex(
            "0488ADE40173C5DA0A80000000F1C03F5FF97108912FD56761D3FADA8879E417"
            "3ABA45F10DA4BBD94B1C49716000C08CF331996482C06DB3D259FF99BE4BF708"
            "3824D53185E33191EE7CEB2BF96F"
        )
        assert child.to_base58() == (
            "xprv9ukW2Usuz4v7Yd2EC4vNXaMckdsEdgBA9n7MQbqMJbW9FuHDWWjDwzEM2h6XmFnr"
            "zX7JVmfcNWMEVoRauU6hQpbokqPPNTbdycW9fHSPYyF"
        )
        assert derive_path(abandon_master, "m/0'") == child

    def test_public_path(self, abandon_master):
        xpub = neuter(abandon_master)
        assert xpub.serialize() == ABANDON_MASTER_PUB_RAW
        child = derive_path(xpub, "m/1/2")
        assert child.kind is KeyKind.PUBLIC
        assert child.serialize() == bytes.fromhex(
            "0488B21E02C8424CFD0000000245BA2A780031C76AAF6DC3F6D641B9D0944DBC"
            "E192A908A38C8A0793E4328B8903EFAFD4F36463D657F500AC7C1D4F2A90BB5B"
            "69E767602882B418B2F2D9FB10B4"
        )

    def test_bip32_vector1_chain(self):
        m = master_key(VECTOR1_SEED)
        m0h = derive_child(m, 0, hardened=True)
        assert m0h.to_base58() == (
            "xprv9uHRZZhk6KAJC1avXpDAp4MDc3sQKNxDiPvvkX8Br5ngLNv1TxvUxt4cV1rGL5hj"
            "6KCesnDYUhd7oWgT11eZG7XnxHrnYeSvkzY7d2bhkJ7"
        )
        assert neuter(m0h).to_base58() == (
            "xpub68Gmy5EdvgibQVfPdqkBBCHxA5htiqg55crXYuXoQRKfDBFA1WEjWgP6LHhwBZeN"
            "K1VTsfTFUHCdrfp1bgwQ9xv5ski8PX9rL2dZXvgGDnw"
        )
        assert neuter(derive_child(m0h, 1)).to_base58() == (
            "xpub6ASuArnXKPbfEwhqN6e3mwBcDTgzisQN1wXN9BJcM47sSikHjJf3UFHKkNAWbWMi"
            "Gj7Wf5uMash7SyYq527Hqck2AxYysAA7xmALppuCkwQ"
        )

    @pytest.mark.parametrize("index", [0, 1, 44, 2**31 - 1])
    def test_hardened_from_public_refused(self, abandon_master, index):
        with pytest.raises(HardenedDerivationRequiresPrivateKey) as exc:
            derive_child(neuter(abandon_master), index, hardened=True)
        assert exc.value.index == index

    def test_raw_hardened_number(self, abandon_master):
        assert derive_child(abandon_master, 2**31 + 5) == derive_child(abandon_master, 5, True)

    def test_index_out_of_range(self, abandon_master):
        with pytest.raises(InvalidParameter):
            derive_child(abandon_master, -1)
        with pytest.raises(InvalidParameter):
            derive_child(abandon_master, 2**32)

    def test_metadata(self, abandon_master):
        child = derive_child(abandon_master, 7, hardened=True)
        assert child.depth == 1
        assert child.parent_fingerprint == abandon_master.fingerprint
        assert child.child_number == 2**31 + 7
        assert child.index == ChildNumber(7, True)


class TestDerivationProperties:
    """Relationships that hold for any key."""

    @pytest.mark.parametrize("index", [0, 1, 1000, 2**31 - 1])
    def test_neuter_commutes_with_normal_derivation(self, abandon_master, index):
        assert neuter(derive_child(abandon_master, index)) == derive_child(neuter(abandon_master), index)

    def test_empty_path_returns_root(self, abandon_master):
        assert derive_path(abandon_master, DerivationPath()) is abandon_master
        assert derive_path(abandon_master, "m") is abandon_master

    def test_path_equals_sequential_steps(self, abandon_master):
        stepped = derive_child(derive_child(abandon_master, 0, True), 0)
        assert derive_path(abandon_master, "m/0'/0") == stepped

    def test_neuter_is_idempotent(self, abandon_master):
        pub = neuter(abandon_master)
        assert neuter(pub) is pub
        assert pub.public_key == abandon_master.public_key

    def test_derivation_leaves_parent_unchanged(self, abandon_master):
        before = abandon_master.serialize()
        derive_path(abandon_master, "m/1/2'/3")
        assert abandon_master.serialize() == before


# ============================================================================
# PATHS AND SERIALIZATION
# ============================================================================

class TestDerivationPath:
    """Parsing and formatting m/... strings."""

    @pytest.mark.parametrize("text, expected", [
        ("m/44'/0'/0'/1", "m/44'/0'/0'/1"),
        ("m/84h/0H/0h", "m/84'/0'/0'"),
        ("44'/0", "m/44'/0"),
        ("m", "m"),
        ("", "m"),
    ])
    def test_parse_and_format(self, text, expected):
        assert str(DerivationPath.parse(text)) == expected

    @pytest.mark.parametrize("text", ["m/x", "m/1//2", "m/-1", "m/2147483648", "m/1''"])
    def test_invalid(self, text):
        with pytest.raises(InvalidParameter):
            DerivationPath.parse(text)

    def test_child(self):
        path = DerivationPath.parse("m/44'").child(0, hardened=True).child(3)
        assert str(path) == "m/44'/0'/3"
        assert len(path) == 3

    def test_child_number_raw(self):
        assert ChildNumber.from_raw(0x80000002) == ChildNumber(2, True)
        assert ChildNumber(2, True).raw == 0x80000002
        assert str(ChildNumber(2)) == "2"


class TestSerialization:
    """78-byte layout and Base58Check text."""

    def test_round_trip(self, abandon_master):
        for key in (abandon_master, neuter(derive_path(abandon_master, "m/0/1"))):
            assert ExtendedKey.parse(key.to_base58()) == key
            assert ExtendedKey.deserialize(key.serialize()) == key

    def test_bad_checksum(self):
        corrupted = ABANDON_ABOUT_XPRV[:-1] + ("v" if ABANDON_ABOUT_XPRV[-1] != "v" else "w")
        with pytest.raises(ChecksumMismatch):
            ExtendedKey.parse(corrupted)

    def test_bad_version(self):
        data = b"\x01\x02\x03\x04" + ABANDON_MASTER_RAW[4:]
        with pytest.raises(InvalidParameter):
            ExtendedKey.deserialize(data)

    def test_bad_length(self):
        with pytest.raises(InvalidParameter):
            ExtendedKey.deserialize(ABANDON_MASTER_RAW[:-1])

    def test_master_with_parent_fingerprint_rejected(self):
        data = ABANDON_MASTER_RAW[:5] + b"\x01\x02\x03\x04" + ABANDON_MASTER_RAW[9:]
        with pytest.raises(InvalidParameter):
            ExtendedKey.deserialize(data)

    def test_private_key_out_of_range(self):
        data = ABANDON_MASTER_RAW[:46] + b"\xff" * 32
        with pytest.raises(InvalidParameter):
            ExtendedKey.deserialize(data)

    def test_uncompressed_public_key_rejected(self, abandon_master):
        x, y = ecc.decompress(abandon_master.public_key)
        uncompressed = b"\x04" + x.to_bytes(32, "big") + y.to_bytes(32, "big")
        with pytest.raises(InvalidParameter):
            ExtendedKey(KeyKind.PUBLIC, uncompressed, abandon_master.chain_code)

    def test_public_serialization_is_fixed_width(self, abandon_master):
        assert len(neuter(abandon_master).serialize()) == 78

    def test_public_key_has_no_private_key(self, abandon_master):
        with pytest.raises(InvalidParameter):
            neuter(abandon_master).private_key

    def test_repr_hides_key_material(self, abandon_master):
        text = repr(abandon_master)
        assert abandon_master.key.hex() not in text
        assert abandon_master.chain_code.hex() not in text
        assert text.startswith("ExtendedKey(PRIVATE, depth=0")


# ============================================================================
# CURVE
# ============================================================================

class TestCurve:
    """secp256k1 point arithmetic."""

    def test_generator_on_curve(self):
        assert ecc.is_on_curve(ecc.G)

    def test_order_times_generator_is_infinity(self):
        assert ecc.scalar_multiply(ecc.N) is None
        assert ecc.scalar_multiply(ecc.N - 1) == (ecc.GX, ecc.P - ecc.GY)

    def test_small_multiples_match_addition(self):
        two = ecc.point_add(ecc.G, ecc.G)
        three = ecc.point_add(two, ecc.G)
        assert ecc.scalar_multiply(2) == two
        assert ecc.scalar_multiply(3) == three
        assert ecc.point_add(ecc.G, None) == ecc.G

    def test_compress_round_trip(self):
        point = ecc.scalar_multiply(0xDEADBEEF)
        assert ecc.decompress(ecc.compress(point)) == point
        x, y = point
        assert ecc.decompress(b"\x04" + x.to_bytes(32, "big") + y.to_bytes(32, "big")) == point

    def test_public_key_of_one(self):
        assert ecc.public_key(1).hex() == (
            "0279be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
        )

    def test_decompress_rejects_bad_prefix(self):
        with pytest.raises(InvalidParameter):
            ecc.decompress(b"\x05" + bytes(32))

    def test_invalid_private_key(self):
        for k in (0, ecc.N):
            with pytest.raises(InvalidParameter):
                ecc.public_key(k)


class TestFitPrivateKey:
    """Mapping over-range numbers into [1, n-1]."""

    def test_valid_value_unchanged(self):
        assert ecc.fit_private_key(5) == (5).to_bytes(32, "big")

    def test_zero_rejected(self):
        with pytest.raises(InvalidParameter):
            ecc.fit_private_key(0)

    def test_over_range_is_hashed(self):
        value = ecc.N + 1
        message = value.to_bytes(32, "big")
        expected = hmac(HashAlgorithm.SHA512, FIT_PRIVATE_KEY_LABEL, message).value[:32]
        fitted = ecc.fit_private_key(value)
        assert fitted == expected
        assert ecc.is_valid_private_key(int.from_bytes(fitted, "big"))

    def test_accepts_bytes(self):
        assert ecc.fit_private_key(b"\xff" * 32) == ecc.fit_private_key(2**256 - 1)
