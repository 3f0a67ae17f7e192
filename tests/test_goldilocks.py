"""
Field arithmetic tests.
"""

import pytest

from errors import ParseError
from goldilocks import (
    FIELD_MODULUS,
    add,
    bytes_to_elements,
    elements_to_bytes,
    exp,
    field,
    inv,
    mul,
    sub,
)


class TestArithmetic:
    def test_modulus(self):
        assert FIELD_MODULUS == 18446744069414584321

    def test_reduction(self):
        assert field(-1) == FIELD_MODULUS - 1
        assert field(FIELD_MODULUS) == 0

    def test_add_sub_wrap(self):
        assert add(FIELD_MODULUS - 1, 2) == 1
        assert sub(1, 2) == FIELD_MODULUS - 1

    def test_inverse(self):
        for a in (1, 2, 3, 12345678901234567, FIELD_MODULUS - 1):
            assert mul(a, inv(a)) == 1

    def test_zero_has_no_inverse(self):
        with pytest.raises(ZeroDivisionError):
            inv(0)

    def test_fermat(self):
        assert exp(5, FIELD_MODULUS - 1) == 1


class TestEncoding:
    def test_little_endian(self):
        assert elements_to_bytes([1, 256]) == bytes([1] + [0] * 7 + [0, 1] + [0] * 6)

    def test_decode(self):
        data = elements_to_bytes([7, FIELD_MODULUS - 1])
        assert bytes_to_elements(data) == [7, FIELD_MODULUS - 1]

    def test_ragged_length(self):
        with pytest.raises(ParseError):
            bytes_to_elements(bytes(9))

    def test_non_canonical(self):
        with pytest.raises(ParseError):
            bytes_to_elements(b"\xff" * 8)
