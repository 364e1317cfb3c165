"""APICache Entry - Immutable Cached Response.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, TypeVar

from apicache_core.cache.expiry import is_expired, remaining_ttl

T = TypeVar("T")


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """A cached API response.

    Entries are never mutated; a later ``set`` on the same key builds a new
    entry and replaces the old one.

    Attributes:
        key: Cache key, always equal to the map key it is stored under
        data: Cached payload
        timestamp: Time of the write (seconds since epoch)
        ttl: Time to live in seconds
        etag: Optional ETag header from the response
        last_modified: Optional Last-Modified header from the response
    """

    key: str
    data: T
    timestamp: float
    ttl: float
    etag: Optional[str] = None
    last_modified: Optional[str] = None

    def is_expired(self, now: float) -> bool:
        """Check if entry is stale at ``now``."""
        return is_expired(self, now)

    def remaining_ttl(self, now: float) -> float:
        """Get remaining TTL in seconds."""
        return remaining_ttl(self, now)

    def age(self, now: float) -> float:
        """Get entry age in seconds."""
        return now - self.timestamp

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary.

        Returns:
            Dictionary representation used for persistence
        """
        return {
            "key": self.key,
            "data": self.data,
            "timestamp": self.timestamp,
            "ttl": self.ttl,
            "etag": self.etag,
            "last_modified": self.last_modified,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CacheEntry":
        """Create from dictionary.

        Args:
            data: Dictionary data

        Returns:
            CacheEntry instance

        Raises:
            KeyError: If a required field is missing
            TypeError: If a field has the wrong type
        """
        if not isinstance(data, dict):
            raise TypeError(f"Entry must be a mapping, got {type(data).__name__}")

        key = data["key"]
        timestamp = data["timestamp"]
        ttl = data["ttl"]
        etag = data.get("etag")
        last_modified = data.get("last_modified")

        if not isinstance(key, str):
            raise TypeError("Entry key must be a string")
        for name, value in (("timestamp", timestamp), ("ttl", ttl)):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise TypeError(f"Entry {name} must be a number")
        for name, value in (("etag", etag), ("last_modified", last_modified)):
            if value is not None and not isinstance(value, str):
                raise TypeError(f"Entry {name} must be a string")

        return cls(
            key=key,
            data=data["data"],
            timestamp=float(timestamp),
            ttl=float(ttl),
            etag=etag,
            last_modified=last_modified,
        )

    def __repr__(self) -> str:
        return f"CacheEntry(key={self.key!r}, timestamp={self.timestamp:.3f}, ttl={self.ttl}s)"


__all__ = ["CacheEntry"]
