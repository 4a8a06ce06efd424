"""
Abstract transport interface for native API communication.

A transport moves raw bytes between the client and one device. It is
event driven: open() starts connecting and returns at once, and the
transport reports progress to its attached receiver. None of the
methods block, so the client can call them from timer and transport
callbacks alike.

The transport layer is responsible for:
- Opening and closing the stream connection
- Writing raw frame bytes
- Delivering received bytes in whatever chunks the network produced
- Reporting socket failures as TransportError subclasses

Implementations:
- TcpTransport: asyncio streams
- MockTransport: for testing without a device
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Protocol


class TransportReceiver(Protocol):
    """Callbacks a transport delivers to its owner."""

    def on_connected(self) -> None:
        """The stream is connected and writable."""
        ...

    def on_bytes(self, data: bytes) -> None:
        """Bytes arrived from the device."""
        ...

    def on_error(self, error: Exception) -> None:
        """
        The stream failed.

        TransientSocketError means the stream is still usable;
        FatalSocketError means it is gone.
        """
        ...

    def on_status(self, message: str) -> None:
        """Informational status from the socket layer."""
        ...


class AbstractTransport(ABC):
    """
    Abstract base class for native API transports.

    All transport implementations must inherit from this class and
    implement all abstract methods.

    Attributes:
        is_open: Whether the stream is currently connected.
        address: "host:port" of the current or last connection.
    """

    def __init__(self) -> None:
        self._receiver: TransportReceiver | None = None

    @property
    def receiver(self) -> TransportReceiver | None:
        """The attached receiver."""
        return self._receiver

    def attach(self, receiver: TransportReceiver) -> None:
        """
        Attach the receiver for connection events.

        Args:
            receiver: Object implementing TransportReceiver.
        """
        self._receiver = receiver

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """
        Check if the stream is connected.

        Returns:
            True if connected and writable, False otherwise.
        """
        ...

    @property
    @abstractmethod
    def address(self) -> str:
        """
        Get the transport address.

        Returns:
            "host:port" string, empty before the first open().
        """
        ...

    @abstractmethod
    def open(self, host: str, port: int) -> None:
        """
        Start connecting to a device.

        Returns immediately. The receiver gets on_connected() once the
        stream is up, or on_error() with a FatalSocketError.

        Args:
            host: Device host name or IP address.
            port: TCP port.
        """
        ...

    @abstractmethod
    def write(self, data: bytes) -> None:
        """
        Queue bytes for sending.

        Args:
            data: Complete frame bytes.

        Raises:
            TransportError: If the transport is not open.
        """
        ...

    @abstractmethod
    def close(self) -> None:
        """
        Close the stream.

        Safe to call multiple times (idempotent). After close() the
        receiver gets no further callbacks for this connection.
        """
        ...
