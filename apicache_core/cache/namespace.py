"""APICache Namespace - Key-Prefixed Cache Views.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import re
from typing import Any, Mapping, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from apicache_core.cache.cache import ApiCache


class Namespace:
    """View of a cache restricted to keys starting with ``<name>:``.

    A namespace groups related resources (``user``, ``search``...) so they
    can be keyed and invalidated together. It holds no state of its own.

    Example:
        users = cache.namespace("user")
        await users.set("42", profile)
        key = users.key("profile", {"userId": 42})
        await users.clear()  # Only drops "user:*" keys
    """

    def __init__(self, cache: "ApiCache", name: str):
        """Initialize namespace.

        Args:
            cache: Parent cache
            name: Namespace name
        """
        if not name:
            raise ValueError("Namespace name must not be empty")
        self._cache = cache
        self.name = name

    def _make_key(self, key: str) -> str:
        return f"{self.name}:{key}"

    def key(self, operation: str, params: Optional[Mapping[str, Any]] = None) -> str:
        """Build a full cache key for an operation in this namespace."""
        return self._cache.generate_key(self.name, operation, params)

    async def get(self, key: str) -> Optional[Any]:
        return await self._cache.get(self._make_key(key))

    async def set(
        self,
        key: str,
        data: Any,
        ttl: Optional[float] = None,
        etag: Optional[str] = None,
        last_modified: Optional[str] = None,
    ) -> None:
        await self._cache.set(self._make_key(key), data, ttl, etag, last_modified)

    async def delete(self, key: str) -> bool:
        return await self._cache.delete(self._make_key(key))

    async def clear(self) -> int:
        """Delete every key in this namespace.

        Returns:
            Number of entries deleted
        """
        return await self._cache.invalidate_pattern(f"^{re.escape(self.name)}:")

    def keys(self) -> list:
        """Get stored keys in this namespace, unprefixed."""
        prefix = f"{self.name}:"
        return [k[len(prefix):] for k in self._cache.keys() if k.startswith(prefix)]

    def __repr__(self) -> str:
        return f"Namespace(name={self.name!r})"


__all__ = ["Namespace"]
