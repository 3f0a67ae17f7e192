"""
Shared fixtures: a deterministic 8-member access set and signals on it.
"""

from typing import List

import pytest

from access_set import AccessSet
from forge import forge_signal
from identity import PrivKey
from signals import Signal

TOPIC = "The Winter is Coming..."


def make_keys(prefix: str, count: int) -> List[PrivKey]:
    return [PrivKey.from_seed(f"{prefix}-{i}".encode()) for i in range(count)]


@pytest.fixture(scope="session")
def topic() -> str:
    return TOPIC


@pytest.fixture(scope="session")
def priv_keys() -> List[PrivKey]:
    """Private keys of the eight members, in leaf order."""
    return make_keys("member", 8)


@pytest.fixture(scope="session")
def access_set(priv_keys) -> AccessSet:
    return AccessSet([k.pub_key() for k in priv_keys])


@pytest.fixture(scope="session")
def honest_signal(access_set, priv_keys) -> Signal:
    """Member 0 signing TOPIC with its real private key."""
    return access_set.make_signal(priv_keys[0], TOPIC)


@pytest.fixture(scope="session")
def forged_signal(access_set) -> Signal:
    """A signal for member 0 on TOPIC built without its private key."""
    return forge_signal(access_set, 0, TOPIC)
