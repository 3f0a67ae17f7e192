# identity.py
"""
Private and public keys of access-set members.

    PubKey = merge(PrivKey, ZERO_DIGEST)

Both keys are four field elements. Their textual form is 64 hex characters:
the canonical 32-byte encoding (8 bytes little-endian per element).
"""

import secrets
from typing import Sequence, Tuple

from errors import ParseError
from goldilocks import FIELD_MODULUS
from hash_utils import DIGEST_BYTES, Digest, hash_bytes, merge

KEY_HEX_LENGTH = 2 * DIGEST_BYTES


def _parse_hex(encoded: str) -> Tuple[int, ...]:
    if len(encoded) != KEY_HEX_LENGTH:
        raise ParseError(
            f"key must be {KEY_HEX_LENGTH} hex characters, got {len(encoded)}"
        )
    try:
        data = bytes.fromhex(encoded)
    except ValueError as exc:
        raise ParseError(f"key is not valid hex: {exc}") from exc
    return Digest.from_bytes(data).elements


class PubKey:
    """Public identity of an access-set member."""

    def __init__(self, elements: Sequence[int]) -> None:
        self._digest = Digest.new(elements)

    @classmethod
    def parse(cls, encoded: str) -> "PubKey":
        return cls(_parse_hex(encoded))

    @property
    def elements(self) -> Tuple[int, ...]:
        return self._digest.elements

    def to_digest(self) -> Digest:
        """Merkle leaf for this key."""
        return self._digest

    def to_hex(self) -> str:
        return self._digest.hex()

    def __eq__(self, other: object) -> bool:
        return isinstance(other, PubKey) and self._digest == other._digest

    def __hash__(self) -> int:
        return hash(self._digest)

    def __repr__(self) -> str:
        return f"PubKey({self.to_hex()})"


class PrivKey:
    """
    Secret preimage of a PubKey. Never serialized out of the process; only
    parsed in.
    """

    def __init__(self, elements: Sequence[int]) -> None:
        self._digest = Digest.new(elements)

    @classmethod
    def parse(cls, encoded: str) -> "PrivKey":
        return cls(_parse_hex(encoded))

    @classmethod
    def from_seed(cls, seed: bytes) -> "PrivKey":
        """Deterministic key derived from arbitrary seed bytes."""
        return cls(hash_bytes(seed).elements)

    @classmethod
    def random(cls) -> "PrivKey":
        return cls([secrets.randbelow(FIELD_MODULUS) for _ in range(4)])

    @property
    def elements(self) -> Tuple[int, ...]:
        return self._digest.elements

    def to_digest(self) -> Digest:
        return self._digest

    def pub_key(self) -> PubKey:
        return PubKey(merge(self._digest, Digest.zero()).elements)

    def __repr__(self) -> str:
        return "PrivKey(<redacted>)"
