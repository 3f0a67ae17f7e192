# signal_trace.py
"""
Builds the execution trace for one (private key, topic) signal.

The trace is the only witness handed to the proof backend. Layout and
constraints are described in air.py; this module only writes rows:

    row 8c       seed row of cycle c
    row 8c + k   state after round k - 1 of cycle c   (k = 1..7)

fill_trace() is shared by the honest path (build_trace) and by forge.py, so
both produce traces of exactly the same shape.
"""

import logging
from typing import List, Sequence

from air import (
    DIGEST_OFFSET,
    HASH_CYCLE_LENGTH,
    INPUT2_OFFSET,
    KEY_LANE,
    NULLIFIER_COLUMNS,
    NULLIFIER_LANE,
    NULLIFIER_STEP,
    ROOT_COLUMNS,
    SEED_CAPACITY,
    SELECTOR_COLUMN,
    SELECTOR_STEP,
    TOPIC_COLUMNS,
    TRACE_WIDTH,
    PublicInputs,
    SemaphoreAir,
    trace_length,
)
from hash_utils import Digest, hash_bytes
from proof_backend import Prover, TraceTable
from rescue import NUM_ROUNDS, STATE_WIDTH, permute_round

logger = logging.getLogger(__name__)


def _apply_round(state: List[int], round_index: int) -> None:
    """Advance both lanes of a trace row by one permutation round, in place."""
    for lane in (KEY_LANE, NULLIFIER_LANE):
        state[lane : lane + STATE_WIDTH] = permute_round(
            state[lane : lane + STATE_WIDTH], round_index
        )


def _run_cycle(trace: TraceTable, cycle: int, state: List[int]) -> None:
    start = HASH_CYCLE_LENGTH * cycle
    trace.update_row(start, state)
    for round_index in range(NUM_ROUNDS):
        _apply_round(state, round_index)
        trace.update_row(start + round_index + 1, state)


def fill_trace(
    key_state: Sequence[int],
    nullifier_key: Digest,
    path: Sequence[Digest],
    index: int,
    topic: Digest,
) -> TraceTable:
    """
    Write a complete signal trace.

    Args:
        key_state: 12-element seed of the key lane for cycle 0
        nullifier_key: key absorbed by the nullifier lane in cycle 0
        path: Merkle path [leaf, sibling_0, ..., sibling_{depth-1}]
        index: leaf index; bit c-1 places the node of cycle c left (0) or right (1)
        topic: Digest(topic)

    Returns:
        TraceTable of TRACE_WIDTH columns and 8 * len(path) rows
    """
    depth = len(path) - 1
    trace = TraceTable(TRACE_WIDTH, trace_length(depth))

    # cycle 0: public key in the key lane, nullifier in the nullifier lane
    state = [0] * TRACE_WIDTH
    state[KEY_LANE : KEY_LANE + STATE_WIDTH] = list(key_state)
    state[NULLIFIER_LANE : NULLIFIER_LANE + 4] = list(SEED_CAPACITY)
    state[NULLIFIER_COLUMNS.start : NULLIFIER_COLUMNS.stop] = list(nullifier_key)
    state[TOPIC_COLUMNS.start : TOPIC_COLUMNS.stop] = list(topic)
    _run_cycle(trace, 0, state)

    # cycles 1..depth: one Merkle level each
    for cycle in range(1, depth + 1):
        node = state[ROOT_COLUMNS.start : ROOT_COLUMNS.stop]
        sibling = list(path[cycle])

        state[KEY_LANE : KEY_LANE + 4] = list(SEED_CAPACITY)
        if (index >> (cycle - 1)) & 1 == 0:
            left, right = node, sibling
        else:
            left, right = sibling, node
        state[KEY_LANE + DIGEST_OFFSET : KEY_LANE + DIGEST_OFFSET + 4] = left
        state[KEY_LANE + INPUT2_OFFSET : KEY_LANE + INPUT2_OFFSET + 4] = right

        for column in range(NULLIFIER_LANE, TRACE_WIDTH):
            state[column] = 0
        state[NULLIFIER_COLUMNS.start : NULLIFIER_COLUMNS.stop] = node

        _run_cycle(trace, cycle, state)

    trace.set(SELECTOR_COLUMN, SELECTOR_STEP, 1)
    return trace


def topic_digest(topic: str) -> Digest:
    """Digest(topic): the sponge hash of the UTF-8 encoded topic."""
    return hash_bytes(topic.encode("utf-8"))


def build_trace(access_set, priv_key, topic: str) -> TraceTable:
    """
    Honest trace for a member holding `priv_key`.

    Raises:
        ValueError: if the private key's public key is not in the access set
    """
    pub_key = priv_key.pub_key()
    index = access_set.index_of(pub_key)
    path = access_set.prove_membership(index)

    key_state = list(SEED_CAPACITY) + list(priv_key.elements) + [0, 0, 0, 0]
    trace = fill_trace(key_state, priv_key.to_digest(), path, index, topic_digest(topic))
    logger.debug("built %d-row signal trace for leaf %d", trace.length, index)
    return trace


def read_nullifier(trace: TraceTable) -> Digest:
    return Digest.new([trace.get(c, NULLIFIER_STEP) for c in NULLIFIER_COLUMNS])


class SemaphoreProver(Prover):
    air_class = SemaphoreAir

    def get_pub_inputs(self, trace: TraceTable) -> PublicInputs:
        last_step = trace.length - 1
        return PublicInputs(
            root=Digest.new([trace.get(c, last_step) for c in ROOT_COLUMNS]),
            topic=Digest.new([trace.get(c, 0) for c in TOPIC_COLUMNS]),
            nullifier=read_nullifier(trace),
            depth=trace.length // HASH_CYCLE_LENGTH - 1,
        )
