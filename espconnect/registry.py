"""
Per-device connection state.

A ConnectionRegistry owns everything the client keeps per device: the
receive buffer of a partially received frame, the pending command queue,
the session state, the reconnect backoff and the device record that
outlives connections. Clients receive a registry when they are built, so
several clients (or threads) can share one and tests can inspect it.

Example:
    >>> registry = ConnectionRegistry()
    >>> state = registry.state_for("kitchen")
    >>> state.receive_buffer
    bytearray(b'')
    >>> registry.device_ids()
    ['kitchen']
"""

from __future__ import annotations

import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import datetime

from espconnect.models.records import ApiVersion
from espconnect.parsers.entities.services import ServiceInfo
from espconnect.session.reconnect import ReconnectState
from espconnect.session.state import SessionState
from espconnect.session.supervisor import PendingCommand


@dataclass
class DeviceRecord:
    """
    Device metadata that outlives individual connections.

    Attributes:
        name: Device name, as reported in HelloResponse.
        network_id: MAC address without colons, upper case.
        api_version: Negotiated API version.
        data: Device info values keyed by display label.
        services: User-defined services announced by the device.
        require_refresh: Re-run entity discovery on the next handshake.
        noise_detected: The device answered with the encrypted transport.
        disabled: Connections are suspended.
        last_connected: When the last handshake completed.
        last_disconnected: When and why the last connection closed.
        device_id_mismatches: Listings that carried a sub-device id the
            negotiated API version should not send.
    """

    name: str = ""
    network_id: str = ""
    api_version: ApiVersion | None = None
    data: dict[str, str] = field(default_factory=dict)
    services: list[ServiceInfo] = field(default_factory=list)
    require_refresh: bool = False
    noise_detected: bool = False
    disabled: bool = False
    last_connected: datetime | None = None
    last_disconnected: tuple[datetime, str] | None = None
    device_id_mismatches: int = 0

    def find_service(self, object_id: str) -> ServiceInfo | None:
        """Look up a discovered service by name."""
        for service in self.services:
            if service.object_id == object_id:
                return service
        return None

    def add_service(self, service: ServiceInfo) -> None:
        """Record a service, replacing an earlier one with the same key."""
        self.services = [s for s in self.services if s.key != service.key]
        self.services.append(service)


@dataclass
class DeviceState:
    """Everything the registry keeps for one device."""

    device_id: str
    receive_buffer: bytearray = field(default_factory=bytearray)
    pending: OrderedDict[int, PendingCommand] = field(default_factory=OrderedDict)
    session_state: SessionState = SessionState.DISCONNECTED
    reconnect: ReconnectState = field(default_factory=ReconnectState)
    record: DeviceRecord = field(default_factory=DeviceRecord)


class ConnectionRegistry:
    """
    Lock-guarded map of device id to DeviceState.

    Only lookups, inserts and removes are serialized. A DeviceState is
    mutated by its own client on the event loop thread.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._states: dict[str, DeviceState] = {}

    def state_for(self, device_id: str) -> DeviceState:
        """
        Get the state of a device, creating it on first use.

        Args:
            device_id: Device identifier.

        Returns:
            The device's DeviceState.
        """
        with self._lock:
            state = self._states.get(device_id)
            if state is None:
                state = DeviceState(device_id)
                self._states[device_id] = state
            return state

    def receive_buffer(self, device_id: str) -> bytearray:
        return self.state_for(device_id).receive_buffer

    def pending(self, device_id: str) -> OrderedDict[int, PendingCommand]:
        return self.state_for(device_id).pending

    def record(self, device_id: str) -> DeviceRecord:
        return self.state_for(device_id).record

    def remove(self, device_id: str) -> bool:
        """
        Forget a device.

        Returns:
            True if the device was known.
        """
        with self._lock:
            return self._states.pop(device_id, None) is not None

    def device_ids(self) -> list[str]:
        with self._lock:
            return list(self._states)

    def __contains__(self, device_id: object) -> bool:
        with self._lock:
            return device_id in self._states

    def __len__(self) -> int:
        with self._lock:
            return len(self._states)

    def __repr__(self) -> str:
        return f"ConnectionRegistry(devices={self.device_ids()})"
