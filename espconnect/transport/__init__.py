"""
Transport layer for native API communication.

This package provides transport implementations for reaching devices.

Available transports:
- TcpTransport: asyncio stream connection
- MockTransport: Mock transport for testing without a device

Example:
    >>> from espconnect.transport import TcpTransport
    >>> transport = TcpTransport()
    >>> transport.attach(receiver)
    >>> transport.open("192.168.1.50", 6053)

Testing Example:
    >>> from espconnect.transport import MockTransport
    >>> mock = MockTransport()
    >>> mock.feed(b"\\x00\\x00\\x07")  # PingRequest
"""

from espconnect.transport.abc import AbstractTransport, TransportReceiver
from espconnect.transport.mock import MockTransport
from espconnect.transport.tcp_async import TcpTransport

__all__ = [
    "AbstractTransport",
    "TransportReceiver",
    "MockTransport",
    "TcpTransport",
]
