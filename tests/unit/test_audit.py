"""Wordlist audit tool."""

import importlib.util
from pathlib import Path

import pytest

from seedkit.wordlists import english

AUDIT_PATH = Path(__file__).resolve().parents[2] / "tools" / "audit.py"


@pytest.fixture(scope="module")
def audit():
    spec = importlib.util.spec_from_file_location("seedkit_audit", AUDIT_PATH)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestAuditWordlist:
    """Findings reported by audit_wordlist()."""

    def test_english_passes(self, audit):
        report = audit.audit_wordlist(english().words)
        assert report["pass"], report["checks"]
        assert report["min_len"] == 3
        assert report["max_len"] == 8

    def test_duplicate_detected(self, audit):
        words = list(english().words)
        words[1] = words[0]
        report = audit.audit_wordlist(words)
        assert not report["pass"]
        assert report["duplicates"] == ["abandon"]
        assert not report["checks"]["unique"]

    def test_bad_characters(self, audit):
        words = list(english().words)
        words[5] = "Absent"
        report = audit.audit_wordlist(words)
        assert report["bad_chars"] == ["Absent"]
        assert not report["checks"]["sorted"]
