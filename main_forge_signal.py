# main_forge_signal.py
"""
Example driver that ties everything together:

- Derive 8 member keys and build an access set from their public keys.
- Have member 0 sign a topic honestly.
- Forge a second signal for member 0 on the same topic, using only the
  access set (no private key).
- Verify both, and record both nullifiers in a registry.

Both signals verify and carry different nullifiers, so the registry accepts
two signals from the same member on one topic.
"""

import logging
import time
from typing import List

from access_set import AccessSet
from errors import VerificationError
from forge import forge_signal
from identity import PrivKey
from nullifier_registry import NullifierRegistry

logger = logging.getLogger(__name__)

NUM_MEMBERS = 8
TOPIC = "The Winter is Coming..."
TARGET_INDEX = 0


def member_keys(count: int) -> List[PrivKey]:
    """Deterministic private keys, one per member."""
    return [PrivKey.from_seed(f"member-{i}".encode()) for i in range(count)]


def main() -> None:
    logging.basicConfig(format="%(message)s", level=logging.DEBUG)

    priv_keys = member_keys(NUM_MEMBERS)
    access_set = AccessSet([k.pub_key() for k in priv_keys])
    registry = NullifierRegistry()

    logger.debug("=" * 60)

    now = time.perf_counter()
    honest = access_set.make_signal(priv_keys[TARGET_INDEX], TOPIC)
    logger.debug("honest signal created in %.1f ms", (time.perf_counter() - now) * 1000)

    now = time.perf_counter()
    forged = forge_signal(access_set, TARGET_INDEX, TOPIC)
    logger.debug("forged signal created in %.1f ms", (time.perf_counter() - now) * 1000)
    logger.debug("-" * 20)

    for name, signal in (("honest", honest), ("forged", forged)):
        now = time.perf_counter()
        try:
            access_set.verify_signal(TOPIC, signal)
        except VerificationError as exc:
            logger.debug("%s signal rejected: %s", name, exc)
            continue
        logger.debug(
            "%s signal verified in %.1f ms", name, (time.perf_counter() - now) * 1000
        )
        registry.record(TOPIC, signal.nullifier)

    logger.debug("=" * 60)
    logger.debug("honest nullifier: %s", honest.nullifier.hex())
    logger.debug("forged nullifier: %s", forged.nullifier.hex())
    logger.debug(
        "signals accepted on %r from %d members: %d",
        TOPIC,
        NUM_MEMBERS,
        registry.count(TOPIC),
    )


if __name__ == "__main__":
    main()
