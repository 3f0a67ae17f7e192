# errors.py
"""
Exception types shared by the semaphore modules.

Misuse by the caller (out-of-range Merkle index, empty access set, a private
key that is not a member) is reported with the built-in IndexError and
ValueError. Everything below is specific to the protocol.
"""


class SemaphoreError(Exception):
    """Base class for all protocol errors."""


class ParseError(SemaphoreError, ValueError):
    """A key, digest or signal could not be decoded."""


class ProvingError(SemaphoreError):
    """The proof backend rejected the execution trace handed to it."""


class DuplicateSignalError(SemaphoreError):
    """A nullifier was already recorded for this topic."""


class VerificationError(SemaphoreError):
    """A signal was rejected."""


class InvalidProofError(VerificationError):
    """The proof is malformed or its trace violates a constraint."""


class AssertionViolation(InvalidProofError):
    """
    A boundary assertion of the AIR did not hold.

    `label` names the public input the assertion binds to
    ("root", "topic", "nullifier", "capacity", or "depth" when the trace
    length does not match the access set).
    """

    def __init__(self, label: str, step: int, column: int) -> None:
        super().__init__(
            f"assertion '{label}' failed at step {step}, column {column}"
        )
        self.label = label
        self.step = step
        self.column = column


class MembershipError(VerificationError):
    """The proof opens to a different access-set root."""


class NullifierMismatchError(VerificationError):
    """The proof does not produce the nullifier carried by the signal."""


class TopicMismatchError(VerificationError):
    """The proof was generated for a different topic."""
