# Copyright (c) 2026 Signer — MIT License

"""Statistical health checks for collected entropy.

Four tests based on NIST SP 800-22 methodology:
    1. Monobit — proportion of 1-bits should be ~50%
    2. Chi-squared byte frequency — all 256 values roughly uniform
    3. Runs — transitions between 0/1 bits (detects stuck patterns)
    4. Autocorrelation — bit-level correlations at offsets 1-16

These catch a broken source (a stuck key, a die that always lands on the
same face, a byte stream of zeros). Passing them proves nothing about
unpredictability.

Each test needs a minimum sample to say anything. A 128-bit dice pool is
enough for monobit, runs and autocorrelation but far too short for
chi-squared, which wants about five hits per byte value (1280 bytes).
Tests a sample is too short for are reported as skipped, not passed or
failed.

    report = verify_randomness(pool_bytes, bit_count=128)
    if not report.passed:
        print(report.summary())
"""

import logging
import math
import secrets
from dataclasses import dataclass

from .errors import InvalidParameter

log = logging.getLogger(__name__)

_Z_THRESHOLD = 2.576            # two-sided alpha = 0.01
_CHI2_THRESHOLD = 310.5         # 255 degrees of freedom, alpha = 0.01
# Bonferroni correction: 16 offsets at family-wise alpha=0.01
_AUTOCORR_Z = 3.42
_AUTOCORR_OFFSETS = 16

MIN_SAMPLE_BITS = 100

TEST_NAMES = ("monobit", "chi_squared", "runs", "autocorrelation")


@dataclass(frozen=True)
class TestResult:
    """Outcome of one test on one sample."""

    __test__ = False            # not a pytest class

    name: str
    passed: bool
    statistic: float
    threshold: float
    detail: str
    skipped: bool = False


def _skipped(name, needed_bits, have_bits):
    return TestResult(
        name, True, 0.0, 0.0,
        f"skipped: needs {needed_bits} bits, sample has {have_bits}", skipped=True,
    )


def _monobit(bits, data):
    n = len(bits)
    ones = sum(bits)
    s = abs(2 * ones - n) / math.sqrt(n)
    return TestResult(
        "monobit", s < _Z_THRESHOLD, s, _Z_THRESHOLD,
        f"{ones}/{n} ones ({ones / n:.4f}), z={s:.4f}",
    )


def _chi_squared(bits, data):
    observed = [0] * 256
    for byte in data:
        observed[byte] += 1
    expected = len(data) / 256.0
    chi2 = sum((o - expected) ** 2 / expected for o in observed)
    return TestResult(
        "chi_squared", chi2 < _CHI2_THRESHOLD, chi2, _CHI2_THRESHOLD,
        f"chi2={chi2:.2f}, expected/bin={expected:.2f}",
    )


def _runs(bits, data):
    n = len(bits)
    pi = sum(bits) / n
    # the runs statistic is undefined when the ones ratio is already off
    if abs(pi - 0.5) >= 2.0 / math.sqrt(n):
        return TestResult("runs", False, math.inf, _Z_THRESHOLD, f"z=inf (ones ratio {pi:.4f})")
    runs = 1 + sum(1 for i in range(1, n) if bits[i] != bits[i - 1])
    expected = 2.0 * n * pi * (1 - pi) + 1
    z = abs(runs - expected) / (2.0 * math.sqrt(2.0 * n) * pi * (1 - pi))
    return TestResult("runs", z < _Z_THRESHOLD, z, _Z_THRESHOLD, f"{runs} runs, z={z:.4f}")


def _autocorrelation(bits, data):
    n = len(bits)
    worst_z, worst_offset = 0.0, 0
    for d in range(1, _AUTOCORR_OFFSETS + 1):
        total = n - d
        matches = sum(1 for i in range(total) if bits[i] == bits[i + d])
        z = abs(2 * matches - total) / math.sqrt(total)
        if z > worst_z:
            worst_z, worst_offset = z, d
    return TestResult(
        "autocorrelation", worst_z < _AUTOCORR_Z, worst_z, _AUTOCORR_Z,
        f"worst z={worst_z:.4f} at offset {worst_offset}",
    )


# name → (test, minimum sample in bits)
_TESTS = {
    "monobit": (_monobit, MIN_SAMPLE_BITS),
    "chi_squared": (_chi_squared, 1280 * 8),
    "runs": (_runs, MIN_SAMPLE_BITS),
    "autocorrelation": (_autocorrelation, MIN_SAMPLE_BITS + _AUTOCORR_OFFSETS),
}


def _bits_of(data, bit_count):
    return [(data[i // 8] >> (7 - i % 8)) & 1 for i in range(bit_count)]


def statistical_tests(data, bit_count=None):
    """Run every test the sample is long enough for.

    Args:
        data: Sample bytes, bits read MSB first.
        bit_count: Test only the first bit_count bits (for pools that do not
            end on a byte boundary). Chi-squared always uses whole bytes.

    Returns:
        {test_name: TestResult}

    Raises:
        InvalidParameter: Fewer than MIN_SAMPLE_BITS bits.
    """
    n = len(data) * 8 if bit_count is None else bit_count
    if n > len(data) * 8:
        raise InvalidParameter(f"sample has {len(data) * 8} bits, {n} requested")
    if n < MIN_SAMPLE_BITS:
        raise InvalidParameter(f"sample of {n} bits is too short; need at least {MIN_SAMPLE_BITS}")

    bits = _bits_of(data, n)
    whole = memoryview(data)[:n // 8]
    results = {}
    for name, (test, needed) in _TESTS.items():
        results[name] = test(bits, whole) if n >= needed else _skipped(name, needed, n)
    return results


@dataclass(frozen=True)
class HealthReport:
    """Majority-vote verdict over one or more samples."""

    passed: bool
    samples: tuple
    failed: tuple
    skipped: tuple
    sample_bits: int

    def summary(self):
        lines = [
            f"Randomness verification: {'PASS' if self.passed else 'FAIL'}",
            f"Samples: {len(self.samples)}, {self.sample_bits} bits each",
            "",
        ]
        for name in TEST_NAMES:
            if name in self.skipped:
                lines.append(f"  [-] {name:<20s} skipped (sample too short)")
            elif name in self.failed:
                failures = sum(1 for s in self.samples if not s[name].passed)
                lines.append(f"  [!] {name:<20s} FAIL ({failures}/{len(self.samples)} samples)")
            else:
                lines.append(f"  [+] {name:<20s} PASS")
        if not self.passed:
            lines.append("")
            lines.append("WARNING: Weak randomness detected. Do NOT use for seed generation.")
        return "\n".join(lines)


def verify_randomness(samples=None, sample_size=2048, num_samples=5, bit_count=None):
    """Test one or more byte samples and aggregate by majority vote.

    A test is marked failed only if more than half the samples fail it.
    With 5 samples at ~4% per-sample false-positive rate,
    P(3+ fail by chance) ≈ 0.003%. A single short sample (one finalized
    entropy pool) gets no such protection: expect a false alarm on
    roughly 1 in 30 healthy pools, and collect again when it happens.

    Args:
        samples: bytes, or a list of bytes samples. If None, num_samples
                 samples of sample_size bytes are drawn from the OS CSPRNG
                 (a self-check of the host, not of operator entropy).
        bit_count: Test only the leading bit_count bits of each sample.

    Returns:
        HealthReport
    """
    if samples is None:
        samples = [secrets.token_bytes(sample_size) for _ in range(num_samples)]
    elif isinstance(samples, (bytes, bytearray)):
        samples = [samples]
    if not samples:
        raise InvalidParameter("no samples to test")

    results = tuple(statistical_tests(s, bit_count) for s in samples)
    failed = tuple(
        name for name in TEST_NAMES
        if sum(1 for r in results if not r[name].passed) > len(results) / 2
    )
    skipped = tuple(name for name in TEST_NAMES if all(r[name].skipped for r in results))
    report = HealthReport(
        passed=not failed,
        samples=results,
        failed=failed,
        skipped=skipped,
        sample_bits=len(samples[0]) * 8 if bit_count is None else bit_count,
    )
    if failed:
        log.warning("randomness verification failed: %s", ", ".join(failed))
    return report
