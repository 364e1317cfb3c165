"""APICache Network Monitor - Connectivity Awareness.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.

Connectivity is push-only: a source delivers state changes to subscribed
listeners and nothing here ever polls. The cache reads the latest value but
never changes its own behavior because of it.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

Listener = Callable[["ConnectivityState"], None]
Unsubscribe = Callable[[], None]


@dataclass(frozen=True)
class ConnectivityState:
    """A connectivity event.

    Attributes:
        is_connected: True/False when known, None when the platform could
            not tell
        connection_type: Optional transport hint ("wifi", "cellular", ...)
    """

    is_connected: Optional[bool] = None
    connection_type: Optional[str] = None


class ConnectivitySource(ABC):
    """Push-based connectivity event source."""

    @abstractmethod
    def subscribe(self, listener: Listener) -> Unsubscribe:
        """Register a listener.

        Args:
            listener: Called with every new state

        Returns:
            Function that removes the listener
        """
        pass


class ManualConnectivitySource(ConnectivitySource):
    """Connectivity source fed by the application.

    Platform bridges (OS reachability callbacks, a websocket heartbeat,
    test code) call :meth:`publish` whenever connectivity changes.

    Example:
        source = ManualConnectivitySource()
        cache = ApiCache(connectivity=source)
        source.publish(ConnectivityState(is_connected=False))
        cache.is_online_mode()  # False
    """

    def __init__(self):
        self._listeners: List[Listener] = []
        self._last: Optional[ConnectivityState] = None

    @property
    def last_state(self) -> Optional[ConnectivityState]:
        return self._last

    def subscribe(self, listener: Listener) -> Unsubscribe:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def publish(self, state: ConnectivityState) -> None:
        """Deliver a state to every listener."""
        self._last = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                logger.error(f"Connectivity listener error: {e}")

    def set_connected(self, connected: Optional[bool], connection_type: Optional[str] = None) -> None:
        """Shortcut for :meth:`publish`."""
        self.publish(ConnectivityState(is_connected=connected, connection_type=connection_type))

    def __len__(self) -> int:
        return len(self._listeners)


class NetworkMonitor:
    """Tracks the latest connectivity state from a source.

    Starts out online. Each event sets ``is_online`` to whether the event
    explicitly reported a connection; an unknown state counts as offline.
    """

    def __init__(self, source: ConnectivitySource):
        self._source = source
        self._is_online = True
        self._connection_type: Optional[str] = None
        self._listeners: List[Callable[[bool], None]] = []
        self._unsubscribe: Optional[Unsubscribe] = source.subscribe(self._on_state)

    @property
    def is_online(self) -> bool:
        return self._is_online

    @property
    def connection_type(self) -> Optional[str]:
        return self._connection_type

    def add_listener(self, listener: Callable[[bool], None]) -> None:
        """Register a callback for online/offline transitions."""
        self._listeners.append(listener)

    def close(self) -> None:
        """Unsubscribe from the source."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_state(self, state: ConnectivityState) -> None:
        was_online = self._is_online
        self._is_online = state.is_connected is True
        self._connection_type = state.connection_type

        if was_online == self._is_online:
            return

        logger.info(f"Network status: {'ONLINE' if self._is_online else 'OFFLINE'}")
        for listener in list(self._listeners):
            try:
                listener(self._is_online)
            except Exception as e:
                logger.error(f"Network listener error: {e}")

    def __repr__(self) -> str:
        return f"NetworkMonitor(online={self._is_online})"


__all__ = [
    "ConnectivityState",
    "ConnectivitySource",
    "ManualConnectivitySource",
    "NetworkMonitor",
]
