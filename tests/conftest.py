"""Pytest configuration and shared fixtures."""

import pytest

from sender_pool.adapters.store.memory_store import InMemoryPoolStore
from sender_pool.application.coordinator import Coordinator
from sender_pool.domain.value_objects.pool_keys import PoolKeys


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def keys():
    return PoolKeys("test_gateway")


@pytest.fixture
def store(clock):
    return InMemoryPoolStore(clock=clock)


@pytest.fixture
def coordinator(store, keys):
    return Coordinator(store, keys=keys, lock_retry_delay=0, lock_max_attempts=10_000)
