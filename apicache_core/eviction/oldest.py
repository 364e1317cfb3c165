"""APICache Oldest-Entry Policy - Evict the Oldest Write.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from typing import Mapping, Optional

from apicache_core.cache.entry import CacheEntry
from apicache_core.eviction.policy import EvictionPolicy


class OldestEntryPolicy(EvictionPolicy):
    """Evicts the entry with the smallest write timestamp.

    Reads do not refresh an entry, so this is write-age (FIFO-like) eviction,
    not LRU. The scan is O(n) over the live map. Ties go to the first key in
    iteration order, which is the earliest write because the cache reinserts
    keys on overwrite.

    Example:
        policy = OldestEntryPolicy()
        evict_key = policy.choose_eviction(entries)
    """

    def choose_eviction(self, entries: Mapping[str, CacheEntry]) -> Optional[str]:
        self._stats.scans += 1

        oldest_key: Optional[str] = None
        oldest_time = 0.0
        for key, entry in entries.items():
            if oldest_key is None or entry.timestamp < oldest_time:
                oldest_key = key
                oldest_time = entry.timestamp

        if oldest_key is not None:
            self._stats.evictions += 1
        return oldest_key

    def __repr__(self) -> str:
        return f"OldestEntryPolicy(evictions={self._stats.evictions})"


__all__ = ["OldestEntryPolicy"]
