# access_set.py
"""
The committed, ordered group of identities allowed to signal.

An AccessSet is built once from a list of public keys and never changes.
Key order fixes the leaf indices and therefore the root: the same keys in a
different order are a different commitment.

Signing and verification:

    signal = access_set.make_signal(priv_key, topic)
    access_set.verify_signal(topic, signal)   # None, or raises

verify_signal() checks the proof against {root, Digest(topic), nullifier}.
It does not remember nullifiers; pair it with a NullifierRegistry to catch
double signals.
"""

import logging
from typing import List, Sequence, Tuple

import proof_backend
from air import PublicInputs, SemaphoreAir
from errors import (
    AssertionViolation,
    MembershipError,
    NullifierMismatchError,
    TopicMismatchError,
)
from hash_utils import Digest
from identity import PrivKey, PubKey
from merkle_tree import MerkleTree
from signal_trace import SemaphoreProver, build_trace, read_nullifier, topic_digest
from signals import Signal

logger = logging.getLogger(__name__)

_ASSERTION_ERRORS = {
    "root": MembershipError,
    "depth": MembershipError,
    "topic": TopicMismatchError,
    "nullifier": NullifierMismatchError,
}


class AccessSet:
    def __init__(self, pub_keys: Sequence[PubKey]) -> None:
        if len(pub_keys) == 0:
            raise ValueError("access set must contain at least one public key")
        self._pub_keys: Tuple[PubKey, ...] = tuple(pub_keys)
        self._tree = MerkleTree([key.to_digest() for key in self._pub_keys])
        logger.debug(
            "built access set of %d keys, depth %d, root %s",
            len(self._pub_keys),
            self._tree.depth,
            self.root().hex(),
        )

    def __len__(self) -> int:
        return len(self._pub_keys)

    @property
    def pub_keys(self) -> Tuple[PubKey, ...]:
        return self._pub_keys

    @property
    def depth(self) -> int:
        return self._tree.depth

    def root(self) -> Digest:
        return self._tree.root()

    def index_of(self, pub_key: PubKey) -> int:
        """
        Raises:
            ValueError: if pub_key is not a member
        """
        try:
            return self._pub_keys.index(pub_key)
        except ValueError:
            raise ValueError(f"{pub_key!r} is not in the access set") from None

    def prove_membership(self, index: int) -> List[Digest]:
        """
        Merkle path for leaf `index`: depth + 1 digests.

        Raises:
            IndexError: if index >= len(self)
        """
        return self._tree.prove(index)

    def make_signal(self, priv_key: PrivKey, topic: str) -> Signal:
        """
        Sign `topic` as the member holding `priv_key`.

        The proof backend is transparent: the proof carries the whole trace,
        and row 0 holds the private key in columns 4..7. Publishing the
        returned signal discloses the signer's key and leaf position. Only
        hand it to parties who may learn both.

        Raises:
            ValueError: if the key's public key is not in the set
            ProvingError: if the backend rejects the trace
        """
        trace = build_trace(self, priv_key, topic)
        proof = SemaphoreProver().prove(trace)
        signal = Signal(nullifier=read_nullifier(trace), proof=proof)
        logger.debug("signal created on topic %r\n%s", topic, signal)
        return signal

    def verify_signal(self, topic: str, signal: Signal) -> None:
        """
        Accept (return None) or reject a signal for `topic`.

        Raises:
            MembershipError: the proof opens to another root, or walks a tree
                of another depth
            TopicMismatchError: the proof was made for another topic
            NullifierMismatchError: the proof yields another nullifier
            InvalidProofError: anything else wrong with the proof
        """
        pub_inputs = PublicInputs(
            root=self.root(),
            topic=topic_digest(topic),
            nullifier=signal.nullifier,
            depth=self.depth,
        )
        try:
            proof_backend.verify(SemaphoreAir, signal.proof, pub_inputs)
        except AssertionViolation as exc:
            error = _ASSERTION_ERRORS.get(exc.label)
            if error is None:
                raise
            raise error(str(exc)) from exc
        logger.debug("signal verified on topic %r", topic)
