"""
espconnect - Python client engine for the ESPHome native device API.

This library keeps a persistent plaintext API connection to a device,
discovers its entities, receives their state updates and sends commands,
reconnecting with backoff whenever the link drops.

Example:
    >>> from espconnect import ConnectionOptions, DeviceClient
    >>> from espconnect.commands import light_command
    >>>
    >>> async def main():
    ...     options = ConnectionOptions(host="esp-kitchen.local")
    ...     async with DeviceClient(options, listener=print) as client:
    ...         await client.wait_online(timeout=30)
    ...         client.send_command(light_command(0x5E2C7A10, state=True, brightness=0.6))
"""

from espconnect.client import DeviceClient
from espconnect.commands import Command
from espconnect.config import ConnectionOptions
from espconnect.exceptions import (
    CommandRetryExhaustedError,
    DisabledDeviceError,
    EspConnectError,
    FatalSocketError,
    IllegalTransitionError,
    InvalidCredentialError,
    ProtocolError,
    TransientSocketError,
    TransportError,
    TruncatedMessageError,
    UnexpectedEndOfStreamError,
    UnknownWireTypeError,
    UnsupportedProtocolVersionError,
    UnsupportedTransportError,
)
from espconnect.models.records import ApiVersion, DeviceInfo, NetworkState, NetworkStatus
from espconnect.registry import ConnectionRegistry, DeviceRecord
from espconnect.session.state import SessionState
from espconnect.transport import AbstractTransport, MockTransport, TcpTransport

__version__ = "0.1.0"
__all__ = [
    # Client
    "DeviceClient",
    "SessionState",
    "ConnectionOptions",
    "Command",
    # Registry
    "ConnectionRegistry",
    "DeviceRecord",
    # Models
    "ApiVersion",
    "DeviceInfo",
    "NetworkState",
    "NetworkStatus",
    # Exceptions
    "EspConnectError",
    "ProtocolError",
    "UnexpectedEndOfStreamError",
    "TruncatedMessageError",
    "UnknownWireTypeError",
    "UnsupportedTransportError",
    "UnsupportedProtocolVersionError",
    "InvalidCredentialError",
    "IllegalTransitionError",
    "TransportError",
    "TransientSocketError",
    "FatalSocketError",
    "CommandRetryExhaustedError",
    "DisabledDeviceError",
    # Transport
    "AbstractTransport",
    "TcpTransport",
    "MockTransport",
    # Version
    "__version__",
]
