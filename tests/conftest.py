"""
Shared test configuration and fixtures.

The ``channel`` fixture is parametrized over every channel factory so the
conformance scenarios in test_channel_conformance.py run unchanged against
each backend. Add new backends to CHANNEL_FACTORIES.
"""

import logging
from collections.abc import Awaitable, Callable

import pytest

from data_channels import DataChannel, MemoryChannelConfig, MemoryDataChannel

logger = logging.getLogger(__name__)


class FakeClock:
    """Controllable time source (seconds) for version stamp tests."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


async def _memory_channel() -> DataChannel:
    return await MemoryDataChannel.open(MemoryChannelConfig(name="test-memory"))


CHANNEL_FACTORIES: dict[str, Callable[[], Awaitable[DataChannel]]] = {
    "memory": _memory_channel,
}


@pytest.fixture(params=sorted(CHANNEL_FACTORIES))
async def channel(request):
    """Fixture providing an initialized, empty channel of each backend."""
    instance = await CHANNEL_FACTORIES[request.param]()
    yield instance
    await instance.close()


@pytest.fixture
async def memory_channel():
    """Fixture providing an initialized in-memory channel."""
    async with MemoryDataChannel(MemoryChannelConfig(name="test-memory")) as instance:
        yield instance


@pytest.fixture
def fake_clock():
    """Fixture providing a controllable clock."""
    return FakeClock()
