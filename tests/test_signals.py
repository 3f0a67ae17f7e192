"""
Signal wire format and nullifier registry tests.
"""

import threading

import pytest

from errors import DuplicateSignalError, ParseError
from hash_utils import Digest
from nullifier_registry import NullifierRegistry
from signals import Signal


class TestSignal:
    def test_wire_roundtrip(self, honest_signal):
        data = honest_signal.to_bytes()
        assert data[:32] == honest_signal.nullifier.to_bytes()
        assert Signal.from_bytes(data) == honest_signal

    def test_truncated(self, honest_signal):
        with pytest.raises(ParseError):
            Signal.from_bytes(honest_signal.to_bytes()[:-1])
        with pytest.raises(ParseError):
            Signal.from_bytes(bytes(10))

    def test_trailing_bytes(self, honest_signal):
        with pytest.raises(ParseError):
            Signal.from_bytes(honest_signal.to_bytes() + b"\x00")

    def test_str(self, honest_signal):
        text = str(honest_signal)
        assert honest_signal.nullifier.hex() in text
        assert "KB" in text


class TestNullifierRegistry:
    def test_insert_if_absent(self):
        registry = NullifierRegistry()
        n = Digest.new([1, 2, 3, 4])
        registry.record("t", n)
        assert registry.seen("t", n)
        with pytest.raises(DuplicateSignalError):
            registry.record("t", n)

    def test_topics_are_separate(self):
        registry = NullifierRegistry()
        n = Digest.new([1, 2, 3, 4])
        registry.record("a", n)
        registry.record("b", n)
        assert registry.count("a") == 1
        assert registry.count("b") == 1
        assert not registry.seen("c", n)

    def test_concurrent_record_accepts_once(self):
        registry = NullifierRegistry()
        n = Digest.new([5, 6, 7, 8])
        accepted = []
        rejected = []

        def worker():
            try:
                registry.record("t", n)
                accepted.append(1)
            except DuplicateSignalError:
                rejected.append(1)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(accepted) == 1
        assert len(rejected) == 7
