# proof_backend.py
"""
Transparent proof backend for AIR execution traces.

The protocol consumes a proof system only through two calls:

    Prover.prove(trace) -> bytes
    verify(air_class, proof, pub_inputs) -> None   (raises on rejection)

This backend keeps that seam but is neither succinct nor zero-knowledge: the
proof carries the whole trace, and the verifier re-evaluates every
constraint of the AIR on it. The acceptance decision is therefore exactly
"the trace satisfies the AIR for these public inputs", which is what a
STARK verifier decides with high probability.

Proof layout:
    magic      4 bytes   b"SMPR"
    version    1 byte
    width      2 bytes   little-endian
    length     4 bytes   little-endian
    salt      16 bytes   random per proof
    commitment 32 bytes  BLAKE2b(salt || rows)
    rows       width * length * 8 bytes

The salt plays the role of prover randomness: proving the same trace twice
gives different bytes.
"""

import hashlib
import logging
import secrets
from typing import Any, List, NamedTuple, Sequence

from errors import AssertionViolation, InvalidProofError, ParseError, ProvingError
from goldilocks import ELEMENT_BYTES, FIELD_MODULUS, bytes_to_elements, elements_to_bytes

logger = logging.getLogger(__name__)

PROOF_MAGIC = b"SMPR"
PROOF_VERSION = 1
SALT_BYTES = 16
COMMITMENT_BYTES = 32
HEADER_BYTES = len(PROOF_MAGIC) + 1 + 2 + 4 + SALT_BYTES + COMMITMENT_BYTES


class TraceTable:
    """
    Execution trace: `length` rows of `width` field elements, zero-initialized.
    """

    def __init__(self, width: int, length: int) -> None:
        if width <= 0 or length <= 0:
            raise ValueError("trace dimensions must be positive")
        self.width = width
        self.length = length
        self._rows = [[0] * width for _ in range(length)]

    def update_row(self, step: int, state: Sequence[int]) -> None:
        if len(state) != self.width:
            raise ValueError(f"row must have {self.width} elements, got {len(state)}")
        self._rows[step] = [v % FIELD_MODULUS for v in state]

    def set(self, column: int, step: int, value: int) -> None:
        self._rows[step][column] = value % FIELD_MODULUS

    def get(self, column: int, step: int) -> int:
        return self._rows[step][column]

    def row(self, step: int) -> List[int]:
        return list(self._rows[step])

    def rows(self) -> List[List[int]]:
        return [list(r) for r in self._rows]


class Assertion(NamedTuple):
    """A single boundary assertion: trace[step][column] == value."""

    label: str
    column: int
    step: int
    value: int


class Air:
    """
    Algebraic intermediate representation of a computation.

    Subclasses fix `trace_width` and implement the three evaluation hooks.
    Every value returned by evaluate_initial / evaluate_transition must be
    zero for a valid trace.
    """

    trace_width: int = 0

    def __init__(self, trace_length: int, pub_inputs: Any) -> None:
        self.trace_length = trace_length
        self.pub_inputs = pub_inputs

    def validate_shape(self) -> None:
        """
        Raise ValueError if trace_length is not supported, or
        AssertionViolation if it contradicts the public inputs.
        """

    def get_assertions(self) -> List[Assertion]:
        raise NotImplementedError

    def evaluate_initial(self, first: Sequence[int]) -> List[int]:
        return []

    def evaluate_transition(
        self, step: int, current: Sequence[int], nxt: Sequence[int]
    ) -> List[int]:
        raise NotImplementedError


def check_trace(air: Air, rows: Sequence[Sequence[int]]) -> None:
    """
    Evaluate every constraint and assertion of `air` over `rows`.

    Raises:
        InvalidProofError: on a nonzero constraint evaluation
        AssertionViolation: on a failed boundary assertion
    """
    try:
        air.validate_shape()
    except ValueError as exc:
        raise InvalidProofError(f"unsupported trace shape: {exc}") from exc

    for i, value in enumerate(air.evaluate_initial(rows[0])):
        if value % FIELD_MODULUS != 0:
            raise InvalidProofError(f"initial constraint {i} does not hold")

    for step in range(len(rows) - 1):
        evaluations = air.evaluate_transition(step, rows[step], rows[step + 1])
        for i, value in enumerate(evaluations):
            if value % FIELD_MODULUS != 0:
                raise InvalidProofError(
                    f"transition constraint {i} does not hold at step {step}"
                )

    for assertion in air.get_assertions():
        if rows[assertion.step][assertion.column] != assertion.value % FIELD_MODULUS:
            raise AssertionViolation(assertion.label, assertion.step, assertion.column)


def _commit(salt: bytes, row_bytes: bytes) -> bytes:
    return hashlib.blake2b(salt + row_bytes, digest_size=COMMITMENT_BYTES).digest()


class Prover:
    """
    Base prover. Subclasses set `air_class` and derive the public inputs from
    the finished trace.
    """

    air_class = Air

    def get_pub_inputs(self, trace: TraceTable) -> Any:
        raise NotImplementedError

    def prove(self, trace: TraceTable) -> bytes:
        """
        Check the trace against the AIR and serialize the proof.

        Raises:
            ProvingError: if the trace does not satisfy the AIR, or one of its
                columns is identically zero (a zero-degree column polynomial)
        """
        if trace.width != self.air_class.trace_width:
            raise ProvingError(
                f"expected trace width {self.air_class.trace_width}, got {trace.width}"
            )
        rows = trace.rows()

        for column in range(trace.width):
            if all(row[column] == 0 for row in rows):
                raise ProvingError(f"trace column {column} is identically zero")

        pub_inputs = self.get_pub_inputs(trace)
        air = self.air_class(trace.length, pub_inputs)
        try:
            check_trace(air, rows)
        except InvalidProofError as exc:
            raise ProvingError(f"trace does not satisfy the AIR: {exc}") from exc

        row_bytes = b"".join(elements_to_bytes(row) for row in rows)
        salt = secrets.token_bytes(SALT_BYTES)
        proof = b"".join(
            [
                PROOF_MAGIC,
                bytes([PROOF_VERSION]),
                trace.width.to_bytes(2, "little"),
                trace.length.to_bytes(4, "little"),
                salt,
                _commit(salt, row_bytes),
                row_bytes,
            ]
        )
        logger.debug(
            "proved %dx%d trace, proof size %d bytes", trace.length, trace.width, len(proof)
        )
        return proof


def decode_proof(proof: bytes) -> List[List[int]]:
    """
    Parse proof bytes back into trace rows.

    Raises:
        InvalidProofError: on any structural problem
    """
    if len(proof) < HEADER_BYTES:
        raise InvalidProofError("proof is truncated")
    if proof[:4] != PROOF_MAGIC:
        raise InvalidProofError("bad proof magic")
    if proof[4] != PROOF_VERSION:
        raise InvalidProofError(f"unsupported proof version {proof[4]}")

    width = int.from_bytes(proof[5:7], "little")
    length = int.from_bytes(proof[7:11], "little")
    salt = proof[11 : 11 + SALT_BYTES]
    commitment = proof[11 + SALT_BYTES : HEADER_BYTES]
    row_bytes = proof[HEADER_BYTES:]

    if width == 0 or length == 0:
        raise InvalidProofError("empty trace")
    if len(row_bytes) != width * length * ELEMENT_BYTES:
        raise InvalidProofError("trace data does not match declared dimensions")
    if _commit(salt, row_bytes) != commitment:
        raise InvalidProofError("trace commitment mismatch")

    try:
        cells = bytes_to_elements(row_bytes)
    except ParseError as exc:
        raise InvalidProofError(str(exc)) from exc
    return [cells[i : i + width] for i in range(0, len(cells), width)]


def verify(air_class: type, proof: bytes, pub_inputs: Any) -> None:
    """
    Accept or reject a proof for the given public inputs.

    Returns None on acceptance.

    Raises:
        InvalidProofError: malformed proof or violated constraint
        AssertionViolation: a boundary assertion against pub_inputs failed
    """
    rows = decode_proof(proof)
    if len(rows[0]) != air_class.trace_width:
        raise InvalidProofError(
            f"expected trace width {air_class.trace_width}, got {len(rows[0])}"
        )
    check_trace(air_class(len(rows), pub_inputs), rows)
