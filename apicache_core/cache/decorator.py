"""APICache Decorators - Offline-First Loading Helpers.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import functools
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar, TYPE_CHECKING

from apicache_core.exceptions import OfflineError

if TYPE_CHECKING:
    from apicache_core.cache.cache import ApiCache

logger = logging.getLogger(__name__)

T = TypeVar("T")
F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


async def load_offline_first(
    cache: "ApiCache",
    key: str,
    fetch: Callable[[], Awaitable[T]],
    ttl: Optional[float] = None,
) -> T:
    """Serve from cache first, fetching only when online.

    1. A cached value is returned as is.
    2. When online, ``fetch`` is awaited and its result cached.
    3. When offline with nothing cached, :class:`OfflineError` is raised.
    4. If ``fetch`` fails, the cache is tried once more before re-raising.

    Args:
        cache: Cache instance
        key: Cache key
        fetch: Coroutine function performing the network call
        ttl: TTL for the fetched value

    Returns:
        Cached or freshly fetched value

    Raises:
        OfflineError: If offline and nothing is cached
    """
    cached_value = await cache.get(key)
    if cached_value is not None:
        return cached_value

    if not cache.is_online_mode():
        raise OfflineError(key)

    try:
        fresh = await fetch()
    except Exception:
        fallback = await cache.get(key)
        if fallback is not None:
            logger.warning(f"Fetch failed, using cached data for {key}")
            return fallback
        raise

    await cache.set(key, fresh, ttl=ttl)
    return fresh


def cached(
    cache: "ApiCache",
    namespace: str,
    ttl: Optional[float] = None,
    operation: Optional[str] = None,
) -> Callable[[F], F]:
    """Decorator caching an async function's result offline-first.

    The key is ``generate_key(namespace, operation, arguments)`` where
    ``arguments`` are the call's bound arguments by parameter name, so
    ``f(1, b=2)`` and ``f(a=1, b=2)`` share an entry.

    Args:
        cache: Cache instance
        namespace: Key namespace
        ttl: TTL for cached results
        operation: Operation name, defaults to the function name

    Returns:
        Decorator function

    Example:
        @cached(cache, "user", ttl=600)
        async def get_profile(user_id: int) -> dict:
            return await client.get_json(f"/users/{user_id}")
    """
    def decorator(func: F) -> F:
        signature = inspect.signature(func)
        op_name = operation or func.__name__

        def make_key(*args: Any, **kwargs: Any) -> str:
            bound = signature.bind(*args, **kwargs)
            bound.apply_defaults()
            params = dict(bound.arguments)
            return cache.generate_key(namespace, op_name, params or None)

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            key = make_key(*args, **kwargs)
            return await load_offline_first(
                cache, key, lambda: func(*args, **kwargs), ttl=ttl
            )

        async def invalidate(*args: Any, **kwargs: Any) -> bool:
            """Drop the cached result for these arguments."""
            return await cache.delete(make_key(*args, **kwargs))

        wrapper.cache_key = make_key
        wrapper.invalidate = invalidate
        wrapper.cache = cache
        return wrapper  # type: ignore[return-value]

    return decorator


__all__ = ["load_offline_first", "cached"]
