# hash_utils.py
"""
Utilities for hashing.

All hashing goes through the 12-element permutation in rescue.py used as a
sponge:

    state = [capacity (4) | rate (8)]
    capacity[0] <- number of input elements
    absorb 8 elements at a time into the rate, permute after each block
    digest = state[4..8]

Three entry points:
1. hash_elements: a vector of field elements (sponge)
2. hash_bytes:    raw bytes, e.g. a topic string (sponge over 7-byte chunks
                  after a 0x01 terminator)
3. merge:         two digests -> one digest, a single permutation call.
                  Used for Merkle parents, public keys and nullifiers.

The same merge computation is laid out row by row in the execution trace
(see air.py), which is why its state layout is fixed: [8, 0, 0, 0, a, b].
"""

from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple

from errors import ParseError
from goldilocks import bytes_to_elements, elements_to_bytes, field
from rescue import (
    CAPACITY_RANGE,
    DIGEST_RANGE,
    DIGEST_SIZE,
    RATE_WIDTH,
    STATE_WIDTH,
    permute,
)

DIGEST_BYTES = 32

# Bytes packed into one field element; 2^56 < p so every chunk is canonical
BYTES_PER_ELEMENT = 7


@dataclass(frozen=True)
class Digest:
    """Four field elements produced by one squeeze of the sponge."""

    elements: Tuple[int, int, int, int]

    def __post_init__(self) -> None:
        if len(self.elements) != DIGEST_SIZE:
            raise ValueError(
                f"digest must have {DIGEST_SIZE} elements, got {len(self.elements)}"
            )
        object.__setattr__(
            self, "elements", tuple(field(e) for e in self.elements)
        )

    @classmethod
    def new(cls, elements: Sequence[int]) -> "Digest":
        return cls(tuple(elements))

    @classmethod
    def zero(cls) -> "Digest":
        return cls((0, 0, 0, 0))

    @classmethod
    def from_bytes(cls, data: bytes) -> "Digest":
        if len(data) != DIGEST_BYTES:
            raise ParseError(f"digest must be {DIGEST_BYTES} bytes, got {len(data)}")
        return cls(tuple(bytes_to_elements(data)))

    def to_bytes(self) -> bytes:
        return elements_to_bytes(self.elements)

    def hex(self) -> str:
        return self.to_bytes().hex()

    def __iter__(self) -> Iterator[int]:
        return iter(self.elements)

    def __str__(self) -> str:
        return self.hex()


def _absorb(state: list, elements: Sequence[int]) -> list:
    """
    Absorb elements into the rate in blocks of RATE_WIDTH.

    Each block overwrites the rate (the permutation is applied after every
    block, including a final partial one).
    """
    i = 0
    for e in elements:
        state[CAPACITY_RANGE.stop + i] = field(e)
        i += 1
        if i == RATE_WIDTH:
            state = permute(state)
            i = 0
    if i > 0:
        # zero the unused tail of the rate before the last permutation
        for j in range(i, RATE_WIDTH):
            state[CAPACITY_RANGE.stop + j] = 0
        state = permute(state)
    return state


def hash_elements(elements: Sequence[int]) -> Digest:
    """
    Sponge hash of a vector of field elements.

    Args:
        elements: field elements (any length, may be empty)

    Returns:
        Digest of the squeezed state
    """
    state = [0] * STATE_WIDTH
    state[CAPACITY_RANGE.start] = field(len(elements))
    if not elements:
        state = permute(state)
    else:
        state = _absorb(state, elements)
    return Digest.new(state[DIGEST_RANGE])


def hash_bytes(data: bytes) -> Digest:
    """
    Sponge hash of raw bytes.

    A 0x01 terminator is always appended, then zeros up to a multiple of 7
    bytes, so an input that already fills its last chunk gains one more.
    The padded bytes are cut into 7-byte little-endian chunks and
    capacity[0] holds the chunk count.
    """
    padded = data + b"\x01"
    padded += bytes(-len(padded) % BYTES_PER_ELEMENT)
    elements = [
        int.from_bytes(padded[i : i + BYTES_PER_ELEMENT], byteorder="little")
        for i in range(0, len(padded), BYTES_PER_ELEMENT)
    ]
    return hash_elements(elements)


def merge_state(left: Digest, right: Digest) -> list:
    """
    Initial permutation state for merge(left, right): [8, 0, 0, 0, left, right].
    """
    return [RATE_WIDTH, 0, 0, 0] + list(left.elements) + list(right.elements)


def merge(left: Digest, right: Digest) -> Digest:
    """
    Two-to-one compression used for Merkle parents and key/nullifier
    derivation.

    Args:
        left: digest placed in state[4..8]
        right: digest placed in state[8..12]

    Returns:
        permute([8, 0, 0, 0, left, right])[4..8]
    """
    state = permute(merge_state(left, right))
    return Digest.new(state[DIGEST_RANGE])
