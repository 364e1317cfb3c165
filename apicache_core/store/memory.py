"""APICache Memory Store - In-Memory Slot Storage.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from typing import Dict, Optional

from apicache_core.store.backend import SlotStore


class MemorySlotStore(SlotStore):
    """In-memory slot store.

    Survives cache instances but not the process. Useful as the default
    backend and for sharing a "disk" between cache instances in tests.

    Example:
        store = MemorySlotStore()
        cache = await ApiCache.open(store=store)
    """

    def __init__(self):
        super().__init__()
        self._slots: Dict[str, bytes] = {}

    async def read(self, key: str) -> Optional[bytes]:
        self._stats.reads += 1
        return self._slots.get(key)

    async def write(self, key: str, payload: bytes) -> None:
        self._slots[key] = payload
        self._stats.writes += 1

    async def remove(self, key: str) -> bool:
        if key in self._slots:
            del self._slots[key]
            self._stats.deletes += 1
            return True
        return False

    def __contains__(self, key: str) -> bool:
        return key in self._slots

    def __repr__(self) -> str:
        return f"MemorySlotStore(slots={len(self._slots)})"


__all__ = ["MemorySlotStore"]
