"""APICache Eviction Policy - Abstract Eviction Interface.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Mapping, Optional

from apicache_core.cache.entry import CacheEntry


@dataclass
class EvictionStats:
    """Eviction policy statistics.

    Attributes:
        evictions: Number of keys chosen for eviction
        scans: Number of times the policy was consulted
    """

    evictions: int = 0
    scans: int = 0


class EvictionPolicy(ABC):
    """Abstract base for eviction policies.

    A policy inspects the live entry map and names the one key to remove
    when the store has grown past its bound. It never mutates the map
    itself; the cache removes the chosen key.
    """

    def __init__(self):
        self._stats = EvictionStats()

    @abstractmethod
    def choose_eviction(self, entries: Mapping[str, CacheEntry]) -> Optional[str]:
        """Choose key to evict.

        Args:
            entries: Live entry map, in write order

        Returns:
            Key to evict or None if the map is empty
        """
        pass

    def get_stats(self) -> EvictionStats:
        """Get eviction statistics."""
        return self._stats


__all__ = ["EvictionPolicy", "EvictionStats"]
