"""
Proof backend tests: trace validation on the prover side and proof
rejection on the verifier side.
"""

import pytest

import proof_backend
from air import (
    HASH_CYCLE_LENGTH,
    SELECTOR_COLUMN,
    SELECTOR_STEP,
    TRACE_WIDTH,
    SemaphoreAir,
)
from conftest import TOPIC
from errors import AssertionViolation, InvalidProofError, ProvingError
from goldilocks import elements_to_bytes
from proof_backend import HEADER_BYTES, SALT_BYTES, TraceTable, decode_proof
from signal_trace import SemaphoreProver, build_trace


def recommit(proof: bytes, rows) -> bytes:
    """Re-serialize edited rows with a valid commitment."""
    row_bytes = b"".join(elements_to_bytes(row) for row in rows)
    salt = proof[11 : 11 + SALT_BYTES]
    return proof[:11] + salt + proof_backend._commit(salt, row_bytes) + row_bytes


@pytest.fixture
def honest_trace(access_set, priv_keys):
    return build_trace(access_set, priv_keys[2], TOPIC)


class TestTraceTable:
    def test_zero_initialized(self):
        trace = TraceTable(3, 2)
        assert trace.rows() == [[0, 0, 0], [0, 0, 0]]

    def test_update_and_set(self):
        trace = TraceTable(3, 2)
        trace.update_row(1, [1, 2, 3])
        trace.set(0, 1, 9)
        assert trace.row(1) == [9, 2, 3]
        assert trace.get(2, 1) == 3

    def test_row_width_checked(self):
        with pytest.raises(ValueError):
            TraceTable(3, 2).update_row(0, [1, 2])


class TestProver:
    def test_proof_layout(self, honest_trace):
        proof = SemaphoreProver().prove(honest_trace)
        assert proof[:4] == proof_backend.PROOF_MAGIC
        assert len(proof) == HEADER_BYTES + TRACE_WIDTH * honest_trace.length * 8

    def test_trace_roundtrips_through_proof(self, honest_trace):
        proof = SemaphoreProver().prove(honest_trace)
        assert decode_proof(proof) == honest_trace.rows()

    def test_malformed_trace(self, honest_trace):
        honest_trace.set(0, 3, honest_trace.get(0, 3) + 1)
        with pytest.raises(ProvingError):
            SemaphoreProver().prove(honest_trace)

    def test_broken_merkle_seed(self, honest_trace):
        honest_trace.set(0, HASH_CYCLE_LENGTH, 7)
        with pytest.raises(ProvingError):
            SemaphoreProver().prove(honest_trace)

    def test_zero_selector_column(self, honest_trace):
        honest_trace.set(SELECTOR_COLUMN, SELECTOR_STEP, 0)
        with pytest.raises(ProvingError):
            SemaphoreProver().prove(honest_trace)

    def test_selector_value_is_free(self, honest_trace):
        honest_trace.set(SELECTOR_COLUMN, 5, 12345)
        SemaphoreProver().prove(honest_trace)

    def test_wrong_width(self):
        with pytest.raises(ProvingError):
            SemaphoreProver().prove(TraceTable(TRACE_WIDTH - 1, HASH_CYCLE_LENGTH))


class TestVerifier:
    def test_accepts(self, honest_trace):
        prover = SemaphoreProver()
        proof = prover.prove(honest_trace)
        proof_backend.verify(SemaphoreAir, proof, prover.get_pub_inputs(honest_trace))

    def test_recommitted_edit_is_caught(self, honest_trace):
        prover = SemaphoreProver()
        proof = prover.prove(honest_trace)
        rows = decode_proof(proof)
        rows[12][5] = (rows[12][5] + 1) % proof_backend.FIELD_MODULUS
        with pytest.raises(InvalidProofError):
            proof_backend.verify(
                SemaphoreAir, recommit(proof, rows), prover.get_pub_inputs(honest_trace)
            )

    def test_truncated_trace(self, honest_trace):
        prover = SemaphoreProver()
        proof = prover.prove(honest_trace)
        with pytest.raises(InvalidProofError):
            proof_backend.verify(SemaphoreAir, proof[:-8], prover.get_pub_inputs(honest_trace))

    def test_bad_version(self, honest_trace):
        prover = SemaphoreProver()
        proof = bytearray(prover.prove(honest_trace))
        proof[4] = 99
        with pytest.raises(InvalidProofError):
            proof_backend.verify(SemaphoreAir, bytes(proof), prover.get_pub_inputs(honest_trace))

    def test_assertion_label(self, honest_trace, access_set):
        prover = SemaphoreProver()
        proof = prover.prove(honest_trace)
        pub_inputs = prover.get_pub_inputs(honest_trace)._replace(
            root=access_set.prove_membership(0)[0]
        )
        with pytest.raises(AssertionViolation) as info:
            proof_backend.verify(SemaphoreAir, proof, pub_inputs)
        assert info.value.label == "root"

    def test_depth_must_match(self, honest_trace):
        prover = SemaphoreProver()
        proof = prover.prove(honest_trace)
        pub_inputs = prover.get_pub_inputs(honest_trace)
        assert pub_inputs.depth == 3
        with pytest.raises(AssertionViolation) as info:
            proof_backend.verify(SemaphoreAir, proof, pub_inputs._replace(depth=2))
        assert info.value.label == "depth"
