# signals.py
"""
The published artifact of a signing operation: {nullifier, proof}.

Wire format:
    nullifier     32 bytes (canonical digest encoding)
    proof length   4 bytes little-endian
    proof          opaque bytes from the proof backend
"""

from dataclasses import dataclass

from errors import ParseError
from hash_utils import DIGEST_BYTES, Digest

LENGTH_BYTES = 4


@dataclass(frozen=True)
class Signal:
    nullifier: Digest
    proof: bytes

    def to_bytes(self) -> bytes:
        return (
            self.nullifier.to_bytes()
            + len(self.proof).to_bytes(LENGTH_BYTES, "little")
            + self.proof
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "Signal":
        """
        Raises:
            ParseError: on truncated input or trailing bytes
        """
        header = DIGEST_BYTES + LENGTH_BYTES
        if len(data) < header:
            raise ParseError("signal is truncated")
        nullifier = Digest.from_bytes(data[:DIGEST_BYTES])
        proof_len = int.from_bytes(data[DIGEST_BYTES:header], "little")
        if len(data) != header + proof_len:
            raise ParseError(
                f"signal declares a {proof_len}-byte proof but carries {len(data) - header}"
            )
        return cls(nullifier=nullifier, proof=bytes(data[header:]))

    def __str__(self) -> str:
        return (
            f"nullifier: {self.nullifier.hex()}\n"
            f"proof size: {len(self.proof) / 1024:.1f} KB"
        )
