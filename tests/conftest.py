"""Shared fixtures: a controllable clock and an in-memory store."""

from datetime import datetime

import pytest

from lockin.store.memory import MemoryStore

# Local noon, so day keys never straddle midnight within a test.
START = datetime(2026, 10, 18, 12, 0, 0).timestamp()


class FakeClock:
    def __init__(self, now: float = START):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return MemoryStore()
