"""APICache Keys - Deterministic Cache Key Construction.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

Keys have the form ``<namespace>:<operation>`` or, when request parameters
are given, ``<namespace>:<operation>:<hash>``. The hash is a compact 32-bit
rolling hash in base 36; collisions are possible and accepted.
"""

from __future__ import annotations

import json
from typing import Any, Mapping, Optional

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(value: int) -> str:
    """Encode a non-negative integer in lowercase base 36."""
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def hash_string(text: str) -> str:
    """Hash a string with the ``h * 31 + c`` rolling hash.

    Characters are consumed as UTF-16 code units and the accumulator wraps
    as a signed 32-bit integer, so keys stay stable across client platforms.

    Args:
        text: String to hash

    Returns:
        Absolute hash value in base 36
    """
    h = 0
    raw = text.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(raw), 2):
        unit = raw[i] | (raw[i + 1] << 8)
        h = ((h << 5) - h + unit) & 0xFFFFFFFF

    if h & 0x80000000:
        h -= 0x100000000
    return _to_base36(abs(h))


def canonical_params(params: Mapping[str, Any]) -> str:
    """Serialize parameters with their keys sorted.

    Args:
        params: Request parameters

    Returns:
        Compact JSON string
    """
    ordered = {k: params[k] for k in sorted(params)}
    return json.dumps(ordered, separators=(",", ":"), ensure_ascii=False, default=str)


def generate_key(
    namespace: str,
    operation: str,
    params: Optional[Mapping[str, Any]] = None,
) -> str:
    """Build a cache key.

    Args:
        namespace: Logical resource group (e.g. ``"user"``)
        operation: Endpoint or operation name
        params: Optional request parameters

    Returns:
        Cache key string

    Example:
        generate_key("user", "profile")                 # "user:profile"
        generate_key("search", "profiles", {"q": "ab"})  # "search:profiles:<hash>"
    """
    base_key = f"{namespace}:{operation}"
    if params is None:
        return base_key
    return f"{base_key}:{hash_string(canonical_params(params))}"


__all__ = ["generate_key", "hash_string", "canonical_params"]
