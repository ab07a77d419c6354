"""Shared fixtures: an in-memory store and a network simulator that never waits."""

import pytest

from flowguide.api import FlowGuideAPI
from flowguide.services.network import NetworkSimulator
from flowguide.services.storage import MemorySlot, TableStore


class ScriptedRandom:
    """Stand-in for ``random.Random`` with fixed draws."""

    def __init__(self, draws=None, default=0.99):
        self.draws = list(draws or [])
        self.default = default
        self.randint_calls = []

    def random(self):
        if self.draws:
            return self.draws.pop(0)
        return self.default

    def randint(self, low, high):
        self.randint_calls.append((low, high))
        return low

    def choice(self, options):
        return options[0]


class RecordingSleep:
    def __init__(self):
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def slot():
    return MemorySlot()


@pytest.fixture
def store(slot):
    table_store = TableStore(slot)
    table_store.initialize()
    return table_store


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def network(sleep):
    """A simulator that never injects failures."""
    return NetworkSimulator(rng=ScriptedRandom(), sleep=sleep, allow_failure=False)


@pytest.fixture
def api(store, network):
    return FlowGuideAPI(store, network)
