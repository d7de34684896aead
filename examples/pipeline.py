# Copyright (c) 2026 Signer — MIT License

"""Walk the whole pipeline from dice rolls to an account xpub.

Roll a six-sided die and type each result (1-6). Rolls of 5 and 6 are
discarded, so expect roughly 96 rolls for 128 bits.

Usage:
    python examples/pipeline.py                       # interactive
    python examples/pipeline.py --demo                # fixed rolls, no input
    python examples/pipeline.py --scheme electrum --demo
"""

import argparse
import itertools
import logging
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from seedkit import (  # noqa: E402
    EntropyCollector,
    EntropySource,
    InputError,
    Scheme,
    Settings,
    codec_for,
    derive_path,
    master_key,
)
from seedkit.mnemonics.electrum import entropy_bytes_for  # noqa: E402

ACCOUNT_PATHS = {
    Scheme.BIP39: "m/84'/0'/0'",
    Scheme.ELECTRUM: "m/0'",
}


def _read_rolls():
    while True:
        raw = input("roll> ").strip()
        if raw:
            yield int(raw) if raw.isdigit() else raw


def collect(target_bits, demo):
    rolls = itertools.cycle([3, 1, 4, 1, 5, 2, 6, 2, 6, 5, 3, 5]) if demo else _read_rolls()
    with EntropyCollector(EntropySource.D6, target_bits) as collector:
        for roll in rolls:
            try:
                collector.add(roll)
            except InputError as exc:
                print(f"  {exc}")
                continue
            if collector.is_finalized:
                break
            if not demo:
                print(f"  {collector.bits_collected}/{target_bits} bits")
        print(f"Collected {target_bits} bits from {collector.event_count} rolls "
              f"({collector.discarded_count} discarded)")
        report = collector.health_check()
        print(report.summary())
        return collector.entropy_bytes(align="right"), report


def main(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--scheme", choices=[s.value for s in Scheme])
    parser.add_argument("--demo", action="store_true")
    parser.add_argument("--passphrase", default="")
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s")
    settings.apply_logging()

    scheme = Scheme(args.scheme or settings.default_scheme)
    codec = codec_for(scheme)
    target_bits = 128 if scheme is Scheme.BIP39 else entropy_bytes_for(12) * 8 - 4

    entropy, report = collect(target_bits, args.demo)
    # the demo rolls repeat, so they are expected to fail
    if not report.passed and not args.demo:
        print("\nRolls look non-random; check the die and roll again.")
        return 1
    if scheme is Scheme.BIP39:
        mnemonic = codec.encode(entropy)
    else:
        mnemonic, iterations = codec.generate(entropy)
        print(f"Electrum search took {iterations} iterations")

    print("\nMnemonic:")
    for i, word in enumerate(mnemonic, 1):
        print(f"  {i:2d}. {word}")

    seed = codec.to_seed(mnemonic, args.passphrase)
    root = master_key(seed, settings.network)
    path = ACCOUNT_PATHS[scheme]
    account = derive_path(root, path)

    print(f"\nMaster fingerprint: {root.fingerprint.hex()}")
    print(f"Account {path} xpub:\n  {account.neuter().to_base58()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
