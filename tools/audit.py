# Copyright (c) 2026 Signer — MIT License

"""Audit the mnemonic wordlist before trusting it on a device.

Checks that the list is exactly 2048 unique lowercase a-z words, sorted,
and that every word is identified by its first four letters (so a
four-letter stamped backup is unambiguous). Prints word length stats.

Usage: python tools/audit.py
"""
import io
import os
import sys

if sys.platform == "win32":
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding="utf-8", errors="replace")

SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_DIR = os.path.dirname(SCRIPT_DIR)
sys.path.insert(0, PROJECT_DIR)

PREFIX_LEN = 4


def audit_wordlist(words):
    """Return a dict of findings; "pass" is True when every check holds."""
    words = list(words)
    dupes = sorted({w for w in words if words.count(w) > 1}) if len(set(words)) != len(words) else []
    bad_chars = [w for w in words if not (w.isascii() and w.isalpha() and w.islower())]

    by_prefix = {}
    for w in words:
        by_prefix.setdefault(w[:PREFIX_LEN], []).append(w)
    prefix_collisions = {p: ws for p, ws in by_prefix.items() if len(ws) > 1}

    lengths = [len(w) for w in words]
    checks = {
        "count": len(words) == 2048,
        "unique": not dupes,
        "sorted": words == sorted(words),
        "charset": not bad_chars,
        "prefix_unique": not prefix_collisions,
    }
    return {
        "pass": all(checks.values()),
        "checks": checks,
        "duplicates": dupes,
        "bad_chars": bad_chars,
        "prefix_collisions": prefix_collisions,
        "min_len": min(lengths) if lengths else 0,
        "max_len": max(lengths) if lengths else 0,
        "avg_len": sum(lengths) / len(lengths) if lengths else 0.0,
    }


def main():
    from seedkit.wordlists import english

    wl = english()
    report = audit_wordlist(wl.words)

    print("=" * 70)
    print(f"WORDLIST AUDIT ({wl.language}, {len(wl)} words)")
    print("=" * 70)

    for name, ok in report["checks"].items():
        mark = "+" if ok else "!"
        print(f"  [{mark}] {name}")

    print(f"\n  Word length: min {report['min_len']}, max {report['max_len']}, "
          f"avg {report['avg_len']:.2f}")

    if report["duplicates"]:
        print(f"\n  Duplicates: {', '.join(report['duplicates'])}")
    if report["bad_chars"]:
        print(f"\n  Non a-z words: {', '.join(report['bad_chars'][:20])}")
    if report["prefix_collisions"]:
        print(f"\n  Words sharing a {PREFIX_LEN}-letter prefix:")
        for prefix, ws in sorted(report["prefix_collisions"].items())[:20]:
            print(f"    {prefix}: {' | '.join(ws)}")

    print("\n" + "=" * 70)
    print("PASS" if report["pass"] else "FAIL")
    print("=" * 70)
    return 0 if report["pass"] else 1


if __name__ == "__main__":
    sys.exit(main())
