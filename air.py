# air.py
"""
Execution-trace layout and constraint system for one semaphore signal.

Columns (TRACE_WIDTH = 25):

    0..11   key lane        priv key -> pub key (cycle 0), then one Merkle
                            level per cycle; ends with the root in 4..7
    12..23  nullifier lane  merge(priv key, Digest(topic)) in cycle 0;
                            idle afterwards
    24      selector        no protocol meaning; see SELECTOR_COLUMN

Rows are grouped in cycles of HASH_CYCLE_LENGTH = 8: one seed row followed
by seven round rows. A set of depth d uses d + 1 cycles (32 rows for 8
members):

    cycle 0      key lane  [8, 0, 0, 0, priv, 0, 0, 0, 0]
                 nullifier [8, 0, 0, 0, priv, Digest(topic)]
    cycle 1..d   key lane  [8, 0, 0, 0, node, sibling] or
                           [8, 0, 0, 0, sibling, node]

Transition constraints:
- inside a cycle, row s+1 is permute_round(row s, s % 8) on both lanes
- at a cycle boundary the key lane is re-seeded with capacity [8, 0, 0, 0]
  and carries the previous digest on the left or on the right

First-row constraint: the nullifier lane consumes the same key as the key
lane (columns 16..19 == columns 4..7).

Boundary assertions: nullifier-lane capacity and topic on row 0, nullifier on
row 7, root on the last row. The trace must have exactly trace_length(depth)
rows for the depth carried in the public inputs; otherwise a single cycle
inverted from [0, 0, 0, 0, root, 0, 0, 0, 0] would "reach" the root with no
member key at all.

The key lane's capacity (0..3) and padding (8..11) on row 0 are NOT
constrained, so the key lane's cycle-0 input is only pinned down through its
output. forge.py builds a valid trace for any member from that alone.
"""

from typing import List, NamedTuple, Sequence

from goldilocks import FIELD_MODULUS
from hash_utils import Digest
from errors import AssertionViolation
from proof_backend import Air, Assertion
from rescue import NUM_ROUNDS, RATE_WIDTH, STATE_WIDTH, permute_round

TRACE_WIDTH = 25
HASH_CYCLE_LENGTH = 8

# Lane offsets
KEY_LANE = 0
NULLIFIER_LANE = STATE_WIDTH

# Offsets inside a lane
CAPACITY_OFFSET = 0
DIGEST_OFFSET = 4
INPUT2_OFFSET = 8

# Columns holding the key in each lane on row 0
KEY_COLUMNS = range(KEY_LANE + DIGEST_OFFSET, KEY_LANE + DIGEST_OFFSET + 4)
NULLIFIER_KEY_COLUMNS = range(
    NULLIFIER_LANE + DIGEST_OFFSET, NULLIFIER_LANE + DIGEST_OFFSET + 4
)
TOPIC_COLUMNS = range(NULLIFIER_LANE + INPUT2_OFFSET, NULLIFIER_LANE + INPUT2_OFFSET + 4)
ROOT_COLUMNS = KEY_COLUMNS
NULLIFIER_COLUMNS = NULLIFIER_KEY_COLUMNS

# Row of the nullifier: last round row of cycle 0
NULLIFIER_STEP = NUM_ROUNDS

# Technical column: has to be nonzero somewhere, otherwise the backend sees a
# zero-degree column. Its value carries no security meaning.
SELECTOR_COLUMN = 24
SELECTOR_STEP = 1

SEED_CAPACITY = (RATE_WIDTH, 0, 0, 0)


class PublicInputs(NamedTuple):
    root: Digest
    topic: Digest
    nullifier: Digest
    # Merkle depth of the access set; fixes the trace length
    depth: int


def trace_length(depth: int) -> int:
    """Rows needed for an access set whose Merkle tree has the given depth."""
    return HASH_CYCLE_LENGTH * (depth + 1)


class SemaphoreAir(Air):
    trace_width = TRACE_WIDTH

    def validate_shape(self) -> None:
        if self.trace_length < HASH_CYCLE_LENGTH:
            raise ValueError(f"trace must have at least {HASH_CYCLE_LENGTH} rows")
        if self.trace_length % HASH_CYCLE_LENGTH != 0:
            raise ValueError(
                f"trace length {self.trace_length} is not a multiple of {HASH_CYCLE_LENGTH}"
            )
        expected = trace_length(self.pub_inputs.depth)
        if self.trace_length != expected:
            # the Merkle walk must stop exactly at the root level
            raise AssertionViolation("depth", self.trace_length - 1, ROOT_COLUMNS.start)

    def get_assertions(self) -> List[Assertion]:
        last_step = self.trace_length - 1
        assertions = []
        for i, value in enumerate(SEED_CAPACITY):
            assertions.append(
                Assertion("capacity", NULLIFIER_LANE + CAPACITY_OFFSET + i, 0, value)
            )
        for column, value in zip(TOPIC_COLUMNS, self.pub_inputs.topic):
            assertions.append(Assertion("topic", column, 0, value))
        for column, value in zip(NULLIFIER_COLUMNS, self.pub_inputs.nullifier):
            assertions.append(Assertion("nullifier", column, NULLIFIER_STEP, value))
        for column, value in zip(ROOT_COLUMNS, self.pub_inputs.root):
            assertions.append(Assertion("root", column, last_step, value))
        return assertions

    def evaluate_initial(self, first: Sequence[int]) -> List[int]:
        return [
            first[n] - first[k] for n, k in zip(NULLIFIER_KEY_COLUMNS, KEY_COLUMNS)
        ]

    def evaluate_transition(
        self, step: int, current: Sequence[int], nxt: Sequence[int]
    ) -> List[int]:
        round_index = step % HASH_CYCLE_LENGTH
        if round_index < NUM_ROUNDS:
            return self._round_constraints(round_index, current, nxt)
        return self._boundary_constraints(current, nxt)

    @staticmethod
    def _round_constraints(
        round_index: int, current: Sequence[int], nxt: Sequence[int]
    ) -> List[int]:
        result = []
        for lane in (KEY_LANE, NULLIFIER_LANE):
            expected = permute_round(current[lane : lane + STATE_WIDTH], round_index)
            result.extend(
                (n - e) % FIELD_MODULUS
                for n, e in zip(nxt[lane : lane + STATE_WIDTH], expected)
            )
        return result

    @staticmethod
    def _boundary_constraints(current: Sequence[int], nxt: Sequence[int]) -> List[int]:
        result = [
            (nxt[KEY_LANE + CAPACITY_OFFSET + i] - value) % FIELD_MODULUS
            for i, value in enumerate(SEED_CAPACITY)
        ]

        # previous digest must sit either left (4..7) or right (8..11) as a
        # whole: every left difference times every right difference is zero
        node = current[KEY_LANE + DIGEST_OFFSET : KEY_LANE + DIGEST_OFFSET + 4]
        left = [
            nxt[KEY_LANE + DIGEST_OFFSET + i] - node[i] for i in range(4)
        ]
        right = [
            nxt[KEY_LANE + INPUT2_OFFSET + i] - node[i] for i in range(4)
        ]
        result.extend((a * b) % FIELD_MODULUS for a in left for b in right)
        return result
