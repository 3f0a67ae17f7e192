# goldilocks.py
"""
Arithmetic in the 64-bit "Goldilocks" prime field.

Every value the protocol touches (keys, digests, trace cells) is an element of
this field, represented as a plain Python int in [0, FIELD_MODULUS).

Encoding:
- Each element is written as 8 bytes, little-endian.
- Decoding rejects values >= FIELD_MODULUS so that every element has exactly
  one byte representation.
"""

from typing import List, Sequence

from errors import ParseError

# p = 2^64 - 2^32 + 1
FIELD_MODULUS = 2**64 - 2**32 + 1

ELEMENT_BYTES = 8


def field(val: int) -> int:
    """
    Convert a Python int to a field element by reducing modulo FIELD_MODULUS.
    """
    return val % FIELD_MODULUS


def add(a: int, b: int) -> int:
    return (a + b) % FIELD_MODULUS


def sub(a: int, b: int) -> int:
    return (a - b) % FIELD_MODULUS


def mul(a: int, b: int) -> int:
    return (a * b) % FIELD_MODULUS


def exp(base: int, power: int) -> int:
    return pow(base, power, FIELD_MODULUS)


def inv(a: int) -> int:
    """
    Multiplicative inverse via Fermat's little theorem.

    Raises:
        ZeroDivisionError: if a is zero
    """
    if a % FIELD_MODULUS == 0:
        raise ZeroDivisionError("zero has no inverse in the field")
    return pow(a, FIELD_MODULUS - 2, FIELD_MODULUS)


def elements_to_bytes(elements: Sequence[int]) -> bytes:
    """
    Canonical byte encoding of a vector of field elements.
    """
    return b"".join(
        field(e).to_bytes(ELEMENT_BYTES, byteorder="little") for e in elements
    )


def bytes_to_elements(data: bytes) -> List[int]:
    """
    Decode a canonical byte encoding back into field elements.

    Args:
        data: bytes whose length is a multiple of ELEMENT_BYTES

    Returns:
        list of field elements

    Raises:
        ParseError: on a ragged length or a non-canonical element
    """
    if len(data) % ELEMENT_BYTES != 0:
        raise ParseError(
            f"expected a multiple of {ELEMENT_BYTES} bytes, got {len(data)}"
        )
    elements = []
    for i in range(0, len(data), ELEMENT_BYTES):
        value = int.from_bytes(data[i : i + ELEMENT_BYTES], byteorder="little")
        if value >= FIELD_MODULUS:
            raise ParseError(f"non-canonical field element at byte offset {i}")
        elements.append(value)
    return elements
