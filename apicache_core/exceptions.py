"""APICache Exceptions - Cache Error Hierarchy.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class CacheError(Exception):
    """Base exception for cache errors.

    Attributes:
        message: Human readable message
        error_code: Stable machine readable code
        details: Extra context
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class CacheIOError(CacheError):
    """Raised when a value cannot be serialized for persistence."""

    def __init__(
        self,
        message: str = "Cache serialization failed",
        key: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        details: Dict[str, Any] = {}
        if key is not None:
            details["key"] = key
        if original_error is not None:
            details["original_error"] = str(original_error)
            details["original_error_type"] = type(original_error).__name__

        super().__init__(message=message, error_code="CACHE_IO_ERROR", details=details)
        if original_error is not None:
            self.__cause__ = original_error


class InvalidPatternError(CacheError):
    """Raised when an invalidation pattern is not a valid regular expression."""

    def __init__(self, pattern: str, original_error: Optional[Exception] = None):
        self.pattern = pattern
        details: Dict[str, Any] = {"pattern": pattern}
        if original_error is not None:
            details["original_error"] = str(original_error)

        super().__init__(
            message=f"Invalid invalidation pattern: {pattern!r}",
            error_code="CACHE_INVALID_PATTERN",
            details=details,
        )
        if original_error is not None:
            self.__cause__ = original_error


class OfflineError(CacheError):
    """Raised when nothing is cached and the device is offline."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(
            message=f"No cached data for {key!r} and device is offline",
            error_code="CACHE_OFFLINE",
            details={"key": key},
        )


class CacheNotStartedError(CacheError):
    """Raised when cache contents are read before the persisted slot is loaded."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(
            message=(
                f"Cache not started: {operation}() needs the persisted entries; "
                "use ApiCache.open(), 'async with' or await start() first"
            ),
            error_code="CACHE_NOT_STARTED",
            details={"operation": operation},
        )


__all__ = [
    "CacheError",
    "CacheIOError",
    "CacheNotStartedError",
    "InvalidPatternError",
    "OfflineError",
]
