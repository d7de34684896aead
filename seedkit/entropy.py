# Copyright (c) 2026 Signer — MIT License

"""Manual entropy collection with bias correction.

An operator rolls dice, flips coins or types bytes from an external
source. Each observation is a RawEntropyEvent; the collector turns it into
zero or more unbiased bits and appends them to an EntropyPool until the
requested number of bits is reached, then finalizes.

Sources:
    COIN, D4, D8, D16, BYTE        raw or Von Neumann corrected
    D6, D10, D12, D20, D100        raw only, reduced to a power of two

Dice are entered as printed (1..N), coins as 0/1 and bytes as 0..255.

Non power-of-two dice keep only the lowest 2^k faces so every retained
outcome stays equiprobable; the rest are discarded:
    D6 → 1-4 (2 bits)   D10 → 1-8 (3 bits)   D12 → 1-8 (3 bits)
    D20 → 1-16 (4 bits) D100 → 1-64 (6 bits)

Von Neumann correction pairs two consecutive outcomes and compares them
bit by bit. Where the bits differ, the first outcome's bit is kept
((0,1) → 0, (1,0) → 1); equal bits are dropped.

Usage:
    with EntropyCollector(EntropySource.D6, 128) as c:
        while not c.is_finalized:
            c.add(read_roll())
        entropy = c.entropy
"""

import enum
import logging
from dataclasses import dataclass

from .errors import InvalidParameter, InvalidState
from .hashing import HashAlgorithm
from .keyed import pbkdf2
from .memory import wipe, wiping
from .randomness import verify_randomness

log = logging.getLogger(__name__)


class EntropySource(enum.Enum):
    """Physical or external randomness sources: (arity, supports Von Neumann, first value)."""

    COIN = (2, True, 0)
    D4 = (4, True, 1)
    D6 = (6, False, 1)
    D8 = (8, True, 1)
    D10 = (10, False, 1)
    D12 = (12, False, 1)
    D16 = (16, True, 1)
    D20 = (20, False, 1)
    D100 = (100, False, 1)
    BYTE = (256, True, 0)

    def __init__(self, arity, supports_von_neumann, first_value):
        self.arity = arity
        self.supports_von_neumann = supports_von_neumann
        self.first_value = first_value

    @property
    def bits(self):
        """Unbiased bits carried by one retained outcome."""
        return self.arity.bit_length() - 1

    @property
    def retained(self):
        """Number of outcomes kept; the rest are discarded."""
        return 1 << self.bits

    def normalize(self, outcome):
        """Map an entered value to 0..arity-1.

        Raises InvalidParameter when the value cannot come from this source.
        """
        if isinstance(outcome, bool) or not isinstance(outcome, int):
            raise InvalidParameter(f"{self.name} outcome must be an integer")
        value = outcome - self.first_value
        if not 0 <= value < self.arity:
            last = self.first_value + self.arity - 1
            raise InvalidParameter(
                f"{self.name} outcome must be between {self.first_value} and {last}, got {outcome}"
            )
        return value


@dataclass(frozen=True)
class RawEntropyEvent:
    """One observation from a source, as entered by the operator."""

    source: EntropySource
    outcome: int

    @property
    def arity(self):
        return self.source.arity

    @property
    def value(self):
        return self.source.normalize(self.outcome)


def von_neumann(bits):
    """Von Neumann-correct a sequence of binary outcomes.

    Consecutive pairs are consumed: (0,1) → 0, (1,0) → 1, equal pairs
    yield nothing. A trailing unpaired outcome is ignored.

        von_neumann([0, 1, 0, 1])  → [0, 0]
        von_neumann([0, 0, 1, 1])  → []
    """
    bits = list(bits)
    out = []
    for i in range(0, len(bits) - 1, 2):
        a, b = bits[i], bits[i + 1]
        if a not in (0, 1) or b not in (0, 1):
            raise InvalidParameter("von_neumann expects 0/1 outcomes")
        if a != b:
            out.append(a)
    return out


def _von_neumann_pair(first, second, width):
    """Per-bit Von Neumann over two width-bit outcomes, MSB first."""
    out = []
    for pos in range(width - 1, -1, -1):
        a = (first >> pos) & 1
        b = (second >> pos) & 1
        if a != b:
            out.append(a)
    return out


class EntropyPool:
    """Append-only bit sequence, MSB-first within each byte."""

    def __init__(self):
        self._buf = bytearray()
        self._bits = 0

    @property
    def bit_length(self):
        return self._bits

    def __len__(self):
        return self._bits

    def append_bit(self, bit):
        if self._bits % 8 == 0:
            self._buf.append(0)
        if bit:
            self._buf[-1] |= 0x80 >> (self._bits % 8)
        self._bits += 1

    def append_bits(self, value, width):
        """Append the low `width` bits of value, most significant first."""
        for pos in range(width - 1, -1, -1):
            self.append_bit((value >> pos) & 1)

    def bit(self, i):
        if not 0 <= i < self._bits:
            raise IndexError("pool bit index out of range")
        return (self._buf[i // 8] >> (7 - i % 8)) & 1

    def to_bytes(self, bit_count=None, align="left"):
        """Return the first bit_count bits as bytes.

        align="left" keeps the bits at the top of the buffer and zero-pads
        the last byte; align="right" places them at the bottom and zeroes
        the leading spare bits (the big-integer view Electrum uses).
        """
        n = self._bits if bit_count is None else bit_count
        if n > self._bits:
            raise InvalidParameter(f"pool holds {self._bits} bits, {n} requested")
        size = (n + 7) // 8
        value = int.from_bytes(self._buf[:size], "big") >> (size * 8 - n) if n else 0
        if align == "left":
            return (value << (size * 8 - n)).to_bytes(size, "big")
        if align == "right":
            return value.to_bytes(size, "big")
        raise InvalidParameter("align must be 'left' or 'right'")

    def truncate(self, bit_count):
        """Drop bits past bit_count."""
        if bit_count >= self._bits:
            return
        size = (bit_count + 7) // 8
        for i in range(size, len(self._buf)):
            self._buf[i] = 0
        del self._buf[size:]
        if bit_count % 8:
            self._buf[-1] &= (0xFF00 >> (bit_count % 8)) & 0xFF
        self._bits = bit_count

    def clear(self):
        """Zero and empty the pool."""
        wipe(self._buf)
        self._buf = bytearray()
        self._bits = 0


class CollectorState(enum.Enum):
    COLLECTING = "collecting"
    FINALIZED = "finalized"


class EntropyCollector:
    """A single collection session: Collecting → Finalized.

    Args:
        source: The EntropySource every event must come from.
        target_bits: Pool size at which the session finalizes.
        bias_correction: Apply Von Neumann correction. Defaults to True for
            sources that support it. Requesting it for a raw-only source
            raises InvalidParameter.
    """

    def __init__(self, source, target_bits, bias_correction=None):
        if target_bits < 1:
            raise InvalidParameter("target_bits must be at least 1")
        if bias_correction is None:
            bias_correction = source.supports_von_neumann
        if bias_correction and not source.supports_von_neumann:
            raise InvalidParameter(f"{source.name} does not support Von Neumann correction")

        self.source = source
        self.target_bits = target_bits
        self.bias_correction = bias_correction
        self._pool = EntropyPool()
        self._pending = None
        self._state = CollectorState.COLLECTING
        self._events = 0
        self._discarded = 0
        self._closed = False

    # ── state ─────────────────────────────────────────────────────

    @property
    def state(self):
        return self._state

    @property
    def is_finalized(self):
        return self._state is CollectorState.FINALIZED

    @property
    def bits_collected(self):
        return self._pool.bit_length

    @property
    def bits_remaining(self):
        return max(0, self.target_bits - self._pool.bit_length)

    @property
    def event_count(self):
        return self._events

    @property
    def discarded_count(self):
        """Events or event pairs that yielded no bits."""
        return self._discarded

    # ── collection ────────────────────────────────────────────────

    def add(self, event):
        """Feed one event (a RawEntropyEvent or a bare outcome).

        Returns the number of bits appended to the pool. Zero means the
        outcome was discarded or is waiting for its Von Neumann partner.

        Raises:
            InvalidState: If the session is already finalized.
            InvalidParameter: If the event comes from another source or is
                out of range for this one.
        """
        if self._state is not CollectorState.COLLECTING:
            raise InvalidState("entropy collection is finalized; no more events accepted")
        if not isinstance(event, RawEntropyEvent):
            event = RawEntropyEvent(self.source, event)
        if event.source is not self.source:
            raise InvalidParameter(
                f"collector expects {self.source.name} events, got {event.source.name}"
            )

        value = event.value
        self._events += 1
        before = self._pool.bit_length

        if self.bias_correction:
            if self._pending is None:
                self._pending = value
                return 0
            first, self._pending = self._pending, None
            bits = _von_neumann_pair(first, value, self.source.bits)
            if not bits:
                self._discarded += 1
            for b in bits:
                self._pool.append_bit(b)
        elif value < self.source.retained:
            self._pool.append_bits(value, self.source.bits)
        else:
            self._discarded += 1

        if self._pool.bit_length >= self.target_bits:
            self._finalize()
        return min(self._pool.bit_length, self.target_bits) - before

    def extend(self, events):
        """Feed events until the session finalizes. Returns events consumed."""
        used = 0
        for event in events:
            if self.is_finalized:
                break
            self.add(event)
            used += 1
        return used

    def _finalize(self):
        self._pool.truncate(self.target_bits)
        self._pending = None
        self._state = CollectorState.FINALIZED
        log.debug("entropy collection finalized: %d bits from %d %s events (%d discarded)",
                  self.target_bits, self._events, self.source.name, self._discarded)

    # ── output ────────────────────────────────────────────────────

    @property
    def entropy(self):
        """The finalized pool as bytes, left aligned."""
        return self.entropy_bytes()

    def entropy_bytes(self, align="left"):
        """The finalized pool as bytes; see EntropyPool.to_bytes for align."""
        if self._closed:
            raise InvalidState("entropy collection was closed and wiped")
        if not self.is_finalized:
            raise InvalidState(
                f"entropy not ready: {self.bits_collected}/{self.target_bits} bits collected"
            )
        return self._pool.to_bytes(align=align)

    def health_check(self):
        """Run the statistical health tests on the finalized pool.

        Only the collected bits are tested, never the zero padding of the
        last byte. Pools too short for a test skip it (chi-squared needs
        1280 bytes, so a dice pool is judged on monobit, runs and
        autocorrelation alone).

        Returns:
            randomness.HealthReport

        Raises:
            InvalidState: Not finalized yet, or already closed.
            InvalidParameter: Pool shorter than randomness.MIN_SAMPLE_BITS.
        """
        with wiping(bytearray(self.entropy_bytes())) as snapshot:
            report = verify_randomness(snapshot, bit_count=self._pool.bit_length)
        log.info("entropy health check over %d bits: %s",
                 self._pool.bit_length, "pass" if report.passed else "FAIL")
        return report

    def close(self):
        """Wipe the pool and any pending outcome. The session can't be reused."""
        self._pool.clear()
        self._pending = None
        self._state = CollectorState.FINALIZED
        self._closed = True

    def reset(self):
        """Wipe collected bits and start a fresh session with the same settings."""
        self._pool.clear()
        self._pending = None
        self._events = 0
        self._closed = False
        self._discarded = 0
        self._state = CollectorState.COLLECTING

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


def compress(entropy, target_bits, iterations=1, salt=b""):
    """Stretch or shrink collected entropy to exactly target_bits with PBKDF2-HMAC-SHA512.

    Used when more raw material was collected than the mnemonic needs, e.g.
    400 coarse D6 rolls folded down to 256 bits. Spare trailing bits of the
    last byte are zeroed.
    """
    if target_bits < 1:
        raise InvalidParameter("target_bits must be at least 1")
    if iterations < 1:
        raise InvalidParameter("iterations must be at least 1")
    size = (target_bits + 7) // 8
    with wiping(bytearray(pbkdf2(HashAlgorithm.SHA512, bytes(entropy), salt, iterations, size))) as out:
        if target_bits % 8:
            out[-1] &= (0xFF00 >> (target_bits % 8)) & 0xFF
        return bytes(out)
