"""Network module - Push-based connectivity awareness."""

from apicache_core.network.monitor import (
    ConnectivityState,
    ConnectivitySource,
    ManualConnectivitySource,
    NetworkMonitor,
)

__all__ = [
    "ConnectivityState",
    "ConnectivitySource",
    "ManualConnectivitySource",
    "NetworkMonitor",
]
