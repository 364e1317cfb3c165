"""Shared fixtures for APICache tests.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

import asyncio
from typing import List, Optional

import pytest

from apicache_core.store.memory import MemorySlotStore


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FailingSlotStore(MemorySlotStore):
    """Slot store whose I/O always fails."""

    def __init__(self, fail_reads: bool = True, fail_writes: bool = True):
        super().__init__()
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes

    async def read(self, key: str) -> Optional[bytes]:
        if self.fail_reads:
            raise OSError("disk unavailable")
        return await super().read(key)

    async def write(self, key: str, payload: bytes) -> None:
        if self.fail_writes:
            raise OSError("disk full")
        await super().write(key, payload)

    async def remove(self, key: str) -> bool:
        if self.fail_writes:
            raise OSError("disk full")
        return await super().remove(key)


class GatedSlotStore(MemorySlotStore):
    """Slot store whose writes block until released one by one."""

    def __init__(self):
        super().__init__()
        self.gates: List[asyncio.Event] = []

    async def write(self, key: str, payload: bytes) -> None:
        gate = asyncio.Event()
        self.gates.append(gate)
        await gate.wait()
        await super().write(key, payload)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return MemorySlotStore()


@pytest.fixture
def failing_store():
    return FailingSlotStore()


@pytest.fixture
def gated_store():
    return GatedSlotStore()
