"""
Pytest fixtures for pronounbot tests.
"""

import pytest

from pronounbot.shared.cache import MemoryCacheStore
from tests.fakes import FakeClock, FakeNotifier


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> MemoryCacheStore:
    return MemoryCacheStore(timer=clock)


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()
