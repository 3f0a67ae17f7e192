# nullifier_registry.py
"""
Per-topic record of nullifiers already seen.

verify_signal() only checks a proof; detecting a second signal on the same
topic is up to the caller. This registry keeps the seen set in memory and
makes "check, then record" a single atomic step, so two verifiers sharing it
cannot both accept the same nullifier. Nothing is persisted.
"""

import threading
from typing import Dict, Set

from errors import DuplicateSignalError
from hash_utils import Digest


class NullifierRegistry:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._seen: Dict[str, Set[bytes]] = {}

    def record(self, topic: str, nullifier: Digest) -> None:
        """
        Insert (topic, nullifier) if absent.

        Raises:
            DuplicateSignalError: if the nullifier was already recorded for topic
        """
        key = nullifier.to_bytes()
        with self._lock:
            seen = self._seen.setdefault(topic, set())
            if key in seen:
                raise DuplicateSignalError(
                    f"nullifier {nullifier.hex()} already used on topic {topic!r}"
                )
            seen.add(key)

    def seen(self, topic: str, nullifier: Digest) -> bool:
        with self._lock:
            return nullifier.to_bytes() in self._seen.get(topic, ())

    def count(self, topic: str) -> int:
        with self._lock:
            return len(self._seen.get(topic, ()))
