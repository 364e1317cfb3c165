"""Eviction module - Size-bound eviction policies."""

from apicache_core.eviction.policy import (
    EvictionPolicy,
    EvictionStats,
)
from apicache_core.eviction.oldest import OldestEntryPolicy

__all__ = [
    "EvictionPolicy",
    "EvictionStats",
    "OldestEntryPolicy",
]
