"""Metrics module - Cache hit/miss telemetry."""

from apicache_core.metrics.collector import (
    StatsCollector,
    CacheStats,
)

__all__ = [
    "StatsCollector",
    "CacheStats",
]
