"""
Sponge hash and Digest tests.
"""

import pytest

from errors import ParseError
from goldilocks import FIELD_MODULUS
from hash_utils import DIGEST_BYTES, Digest, hash_bytes, hash_elements, merge
from rescue import permute


class TestDigest:
    def test_bytes_roundtrip(self):
        d = Digest.new([1, 2, 3, FIELD_MODULUS - 1])
        data = d.to_bytes()
        assert len(data) == DIGEST_BYTES
        assert Digest.from_bytes(data) == d

    def test_wrong_size(self):
        with pytest.raises(ValueError):
            Digest.new([1, 2, 3])
        with pytest.raises(ParseError):
            Digest.from_bytes(bytes(31))

    def test_reduces_elements(self):
        assert Digest.new([FIELD_MODULUS, 0, 0, 0]) == Digest.zero()

    def test_hashable(self):
        assert len({Digest.zero(), Digest.new([0, 0, 0, 0])}) == 1


class TestHash:
    def test_merge_is_one_permutation(self):
        a = Digest.new([1, 2, 3, 4])
        b = Digest.new([5, 6, 7, 8])
        state = permute([8, 0, 0, 0, 1, 2, 3, 4, 5, 6, 7, 8])
        assert merge(a, b) == Digest.new(state[4:8])

    def test_merge_is_ordered(self):
        a = Digest.new([1, 2, 3, 4])
        b = Digest.new([5, 6, 7, 8])
        assert merge(a, b) != merge(b, a)

    def test_length_is_bound(self):
        assert hash_elements([0]) != hash_elements([0, 0])
        assert hash_elements([]) != hash_elements([0])

    def test_multi_block(self):
        elements = list(range(1, 20))
        assert hash_elements(elements) == hash_elements(list(elements))
        assert hash_elements(elements) != hash_elements(elements[:-1])

    def test_bytes_padding(self):
        assert hash_bytes(b"a") != hash_bytes(b"a\x01")
        assert hash_bytes(b"") != hash_bytes(b"\x00")

    def test_terminator_is_always_appended(self):
        # a literal 0x01 after a 6-byte tail must not read as padding
        assert hash_bytes(b"abcdef") != hash_bytes(b"abcdef\x01")
        assert hash_bytes(b"abcdefg") != hash_bytes(b"abcdefg\x01")

    def test_full_chunk_gains_terminator_chunk(self):
        chunk = int.from_bytes(b"abcdefg", byteorder="little")
        assert hash_bytes(b"abcdefg") == hash_elements([chunk, 1])
        assert hash_bytes(b"") == hash_elements([1])

    def test_known_answers(self):
        assert hash_bytes(b"abcdef").hex() == (
            "eb84aeaa56f0aa80ea25dadfb85e7d4c42a022b37bc0b78981958b375ecb4e5f"
        )
        assert hash_bytes("The Winter is Coming...".encode()).hex() == (
            "ef90018739f9eb3443c633f91a494dd2d46374982f6edef1bfe5f4309d4a6cda"
        )

    def test_topic_digest_is_stable(self):
        topic = "The Winter is Coming...".encode()
        assert hash_bytes(topic) == hash_bytes(topic)
        assert hash_bytes(topic) != hash_bytes(b"The Winter is Coming..!")
