"""Entropy collector tests: bias correction, source mapping, state machine."""

import hashlib

import pytest

from seedkit.entropy import (
    CollectorState,
    EntropyCollector,
    EntropyPool,
    EntropySource,
    RawEntropyEvent,
    compress,
    von_neumann,
)
from seedkit.errors import InvalidParameter, InvalidState
from seedkit.randomness import verify_randomness


# ============================================================================
# VON NEUMANN CORRECTION
# ============================================================================

class TestVonNeumann:
    """Binary Von Neumann corrector."""

    def test_alternating_yields_zero_per_pair(self):
        assert von_neumann([0, 1] * 8) == [0] * 8

    def test_equal_pairs_yield_nothing(self):
        assert von_neumann([0, 0, 1, 1]) == []

    def test_one_zero_yields_one(self):
        assert von_neumann([1, 0, 1, 1, 0, 1]) == [1, 0]

    def test_trailing_odd_outcome_ignored(self):
        assert von_neumann([1, 0, 1]) == [1]

    def test_rejects_non_binary(self):
        with pytest.raises(InvalidParameter):
            von_neumann([0, 2])


# ============================================================================
# SOURCES
# ============================================================================

class TestEntropySource:
    """Arity, retained outcomes and value mapping per source."""

    @pytest.mark.parametrize("source, bits, corrected", [
        (EntropySource.COIN, 1, True),
        (EntropySource.D4, 2, True),
        (EntropySource.D6, 2, False),
        (EntropySource.D8, 3, True),
        (EntropySource.D10, 3, False),
        (EntropySource.D12, 3, False),
        (EntropySource.D16, 4, True),
        (EntropySource.D20, 4, False),
        (EntropySource.D100, 6, False),
        (EntropySource.BYTE, 8, True),
    ])
    def test_bits_and_correction_support(self, source, bits, corrected):
        assert source.bits == bits
        assert source.supports_von_neumann is corrected
        assert source.retained == 1 << bits <= source.arity

    def test_dice_are_one_based(self):
        assert EntropySource.D6.normalize(1) == 0
        assert EntropySource.D6.normalize(6) == 5
        with pytest.raises(InvalidParameter):
            EntropySource.D6.normalize(0)
        with pytest.raises(InvalidParameter):
            EntropySource.D6.normalize(7)

    def test_coins_and_bytes_are_zero_based(self):
        assert EntropySource.COIN.normalize(0) == 0
        assert EntropySource.BYTE.normalize(255) == 255
        with pytest.raises(InvalidParameter):
            EntropySource.BYTE.normalize(256)

    def test_non_integer_outcome_rejected(self):
        with pytest.raises(InvalidParameter):
            EntropySource.D6.normalize("3")
        with pytest.raises(InvalidParameter):
            EntropySource.COIN.normalize(True)

    def test_event_carries_arity(self):
        event = RawEntropyEvent(EntropySource.D20, 20)
        assert event.arity == 20
        assert event.value == 19


# ============================================================================
# COLLECTOR
# ============================================================================

class TestRawCollection:
    """Sources used without Von Neumann correction."""

    def test_d6_keeps_lowest_four_faces(self):
        c = EntropyCollector(EntropySource.D6, 8)
        assert c.add(5) == 0
        assert c.add(6) == 0
        for roll in (1, 2, 3, 4):
            assert c.add(roll) == 2
        assert c.is_finalized
        assert c.entropy == bytes([0b00011011])
        assert c.discarded_count == 2
        assert c.event_count == 6

    def test_d6_rejects_von_neumann(self):
        with pytest.raises(InvalidParameter):
            EntropyCollector(EntropySource.D6, 128, bias_correction=True)

    def test_d100_six_bits(self):
        c = EntropyCollector(EntropySource.D100, 6)
        assert c.add(65) == 0
        assert c.add(64) == 6
        assert c.entropy == bytes([0b11111100])

    def test_bytes_raw(self):
        c = EntropyCollector(EntropySource.BYTE, 16, bias_correction=False)
        c.extend([0xAB, 0xCD, 0xEF])
        assert c.entropy == b"\xab\xcd"
        assert c.event_count == 2

    def test_overshoot_is_truncated(self):
        c = EntropyCollector(EntropySource.D8, 8, bias_correction=False)
        assert c.add(8) == 3
        assert c.add(8) == 3
        assert c.add(8) == 2
        assert c.bits_collected == 8
        assert c.entropy == b"\xff"


class TestVonNeumannCollection:
    """Sources collected with per-bit Von Neumann correction."""

    def test_coin_pairs(self):
        c = EntropyCollector(EntropySource.COIN, 4)
        assert c.bias_correction
        c.extend([0, 0, 1, 1])
        assert c.bits_collected == 0
        assert c.discarded_count == 2
        c.extend([1, 0, 1, 0, 0, 1, 1, 0])
        assert c.is_finalized
        assert c.entropy == bytes([0b11010000])

    def test_first_of_pair_waits(self):
        c = EntropyCollector(EntropySource.COIN, 8)
        assert c.add(1) == 0
        assert c.add(0) == 1

    def test_d4_compares_each_bit(self):
        c = EntropyCollector(EntropySource.D4, 4)
        c.extend([1, 4])     # 00 vs 11 → 0, 0
        c.extend([2, 2])     # equal → nothing
        c.extend([2, 3])     # 01 vs 10 → 0, 1
        assert c.entropy == bytes([0b00010000])

    def test_bytes_corrected(self):
        c = EntropyCollector(EntropySource.BYTE, 8)
        c.extend([0x0F, 0xF0])   # every bit differs → first byte's bits
        assert c.entropy == b"\x0f"


class TestCollectorStateMachine:
    """Collecting → Finalized transitions and wiping."""

    def test_starts_collecting(self):
        c = EntropyCollector(EntropySource.BYTE, 16)
        assert c.state is CollectorState.COLLECTING
        assert c.bits_remaining == 16

    def test_no_events_after_finalize(self):
        c = EntropyCollector(EntropySource.BYTE, 8, bias_correction=False)
        c.add(1)
        assert c.state is CollectorState.FINALIZED
        with pytest.raises(InvalidState):
            c.add(2)

    def test_entropy_before_finalize(self):
        c = EntropyCollector(EntropySource.BYTE, 16, bias_correction=False)
        c.add(1)
        with pytest.raises(InvalidState):
            c.entropy

    def test_event_from_other_source(self):
        c = EntropyCollector(EntropySource.D6, 16)
        with pytest.raises(InvalidParameter):
            c.add(RawEntropyEvent(EntropySource.D8, 3))

    def test_close_wipes(self):
        with EntropyCollector(EntropySource.BYTE, 8, bias_correction=False) as c:
            c.add(0x42)
            assert c.entropy == b"\x42"
        with pytest.raises(InvalidState):
            c.entropy
        with pytest.raises(InvalidState):
            c.add(1)

    def test_reset_starts_over(self):
        c = EntropyCollector(EntropySource.BYTE, 8, bias_correction=False)
        c.add(0x42)
        c.reset()
        assert c.state is CollectorState.COLLECTING
        assert c.bits_collected == 0
        c.add(0x24)
        assert c.entropy == b"\x24"

    def test_alignment(self):
        c = EntropyCollector(EntropySource.BYTE, 12, bias_correction=False)
        c.extend([0xAB, 0xCD])
        assert c.entropy_bytes(align="left") == b"\xab\xc0"
        assert c.entropy_bytes(align="right") == b"\x0a\xbc"

    def test_invalid_target(self):
        with pytest.raises(InvalidParameter):
            EntropyCollector(EntropySource.COIN, 0)


# ============================================================================
# POOL AND COMPRESSION
# ============================================================================

class TestEntropyPool:
    """Bit-level append-only pool."""

    def test_append_and_read_bits(self):
        pool = EntropyPool()
        pool.append_bits(0b101, 3)
        pool.append_bit(1)
        assert len(pool) == 4
        assert [pool.bit(i) for i in range(4)] == [1, 0, 1, 1]
        assert pool.to_bytes() == bytes([0b10110000])

    def test_truncate_clears_tail(self):
        pool = EntropyPool()
        pool.append_bits(0xFFFF, 16)
        pool.truncate(5)
        assert pool.to_bytes() == bytes([0b11111000])

    def test_clear(self):
        pool = EntropyPool()
        pool.append_bits(0xFF, 8)
        pool.clear()
        assert pool.bit_length == 0


class TestCompress:
    """PBKDF2-SHA512 folding of over-collected entropy."""

    def test_matches_pbkdf2(self):
        raw = bytes(range(100))
        assert compress(raw, 256, iterations=5, salt=b"dice") == hashlib.pbkdf2_hmac(
            "sha512", raw, b"dice", 5, 32
        )

    def test_partial_byte_zeroed(self):
        out = compress(b"rolls", 132)
        assert len(out) == 17
        assert out[-1] & 0x0F == 0
        assert out[:16] == hashlib.pbkdf2_hmac("sha512", b"rolls", b"", 1, 17)[:16]

    def test_zero_iterations_rejected(self):
        with pytest.raises(InvalidParameter):
            compress(b"rolls", 128, iterations=0)


# ============================================================================
# HEALTH CHECK
# ============================================================================

class TestHealthCheck:
    """Statistical checks on the finalized pool."""

    def test_stuck_die_fails(self):
        c = EntropyCollector(EntropySource.D4, 128, bias_correction=False)
        c.extend([1] * 64)
        report = c.health_check()
        assert not report.passed
        assert "monobit" in report.failed
        assert report.sample_bits == 128

    def test_short_pool_skips_chi_squared(self):
        c = EntropyCollector(EntropySource.D4, 128, bias_correction=False)
        c.extend([1] * 64)
        report = c.health_check()
        assert report.skipped == ("chi_squared",)
        assert "skipped" in report.summary()

    def test_padding_bits_not_tested(self):
        c = EntropyCollector(EntropySource.BYTE, 124, bias_correction=False)
        c.extend([0] * 16)
        report = c.health_check()
        assert report.sample_bits == 124
        assert report.samples[0]["monobit"].detail.startswith("0/124 ones")

    def test_before_finalize(self):
        c = EntropyCollector(EntropySource.D4, 128)
        c.add(1)
        with pytest.raises(InvalidState):
            c.health_check()

    def test_after_close(self):
        with EntropyCollector(EntropySource.D4, 128, bias_correction=False) as c:
            c.extend([1] * 64)
        with pytest.raises(InvalidState):
            c.health_check()

    def test_too_short_pool(self):
        c = EntropyCollector(EntropySource.BYTE, 64, bias_correction=False)
        c.extend([0xA5] * 8)
        with pytest.raises(InvalidParameter):
            c.health_check()

    def test_snapshot_wiped_and_pool_kept(self, monkeypatch):
        seen = []

        def capture(sample, bit_count):
            seen.append(sample)
            return verify_randomness(sample, bit_count=bit_count)

        monkeypatch.setattr("seedkit.entropy.verify_randomness", capture)
        c = EntropyCollector(EntropySource.BYTE, 128, bias_correction=False)
        c.extend(range(1, 17))
        c.health_check()
        assert seen[0] == bytearray(16)
        assert c.entropy == bytes(range(1, 17))
