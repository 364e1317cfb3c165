"""Cache module - Core caching functionality.

This module provides the main cache interface, entries, key construction
and expiry checks.
"""

from apicache_core.cache.entry import CacheEntry
from apicache_core.cache.expiry import is_expired, remaining_ttl
from apicache_core.cache.keys import generate_key, hash_string
from apicache_core.cache.cache import (
    ApiCache,
    CacheConfig,
    CacheStats,
)
from apicache_core.cache.namespace import Namespace
from apicache_core.cache.decorator import cached, load_offline_first

__all__ = [
    "CacheEntry",
    "is_expired",
    "remaining_ttl",
    "generate_key",
    "hash_string",
    "ApiCache",
    "CacheConfig",
    "CacheStats",
    "Namespace",
    "cached",
    "load_offline_first",
]
