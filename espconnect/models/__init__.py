"""
Data models for native API session records.

This module contains Pydantic models for the records the client produces
itself during the connection lifecycle:

- ApiVersion negotiated in the Hello exchange
- DeviceInfo describing the remote node
- NetworkStatus changes, ListingComplete and forwarded LogMessage lines
"""

from espconnect.models.records import (
    ApiVersion,
    DeviceInfo,
    ListingComplete,
    LogMessage,
    NetworkState,
    NetworkStatus,
)

__all__ = [
    # Handshake
    "ApiVersion",
    "DeviceInfo",
    # Events
    "NetworkState",
    "NetworkStatus",
    "ListingComplete",
    "LogMessage",
]
