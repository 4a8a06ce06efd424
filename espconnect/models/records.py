"""
Pydantic models for session-level records.

These are the records the client itself produces during the handshake and
hands to the listener, as opposed to the entity records built by the
decoders in espconnect.parsers.

Design principles:
- All models are frozen (immutable)
- Fields mirror the API message fields, with defaults for omitted values
- Conversion from a tag map lives on the model as a classmethod
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from espconnect.protocol.constants import LogLevel, ProtocolConstants

if TYPE_CHECKING:
    from espconnect.parsers.tag_reader import TagReader


class ApiVersion(BaseModel):
    """
    Native API version negotiated in the Hello exchange.

    Example:
        >>> version = ApiVersion(major=1, minor=11)
        >>> str(version)
        '1.11'
        >>> version.is_legacy_auth
        True
    """

    model_config = ConfigDict(frozen=True)

    major: int = Field(ge=0)
    minor: int = Field(ge=0)

    @property
    def is_legacy_auth(self) -> bool:
        """
        Check whether the peer answers the authentication request.

        Peers up to 1.11 send an AuthenticationResponse; newer peers stay
        silent and expect the client to carry on.
        """
        return self.as_tuple() <= ProtocolConstants.LEGACY_AUTH_MAX_VERSION

    def as_tuple(self) -> tuple[int, int]:
        return (self.major, self.minor)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"

    @classmethod
    def from_tags(cls, reader: TagReader) -> ApiVersion:
        """Build from a HelloResponse (uint32 major field 1, minor field 2)."""
        return cls(major=reader.get_long(1), minor=reader.get_long(2))


class DeviceInfo(BaseModel):
    """
    Device description from DeviceInfoResponse.

    Attributes:
        uses_password: Device requires a password.
        name: Node name.
        mac_address: MAC address, colon separated.
        esphome_version: Firmware version string.
        compilation_time: Firmware build timestamp.
        model: Board model.
        has_deep_sleep: Device sleeps between updates.
        project_name: Project name, if the firmware declares one.
        project_version: Project version.
        webserver_port: Port of the built-in web server, 0 when disabled.
        bluetooth_proxy_version: Bluetooth proxy feature level.
        manufacturer: Board manufacturer.
    """

    model_config = ConfigDict(frozen=True)

    platform: ClassVar[str] = "device"

    uses_password: bool = False
    name: str = ""
    mac_address: str = ""
    esphome_version: str = ""
    compilation_time: str = ""
    model: str = ""
    has_deep_sleep: bool = False
    project_name: str = ""
    project_version: str = ""
    webserver_port: int = 0
    bluetooth_proxy_version: int = 0
    manufacturer: str = ""

    @property
    def network_id(self) -> str:
        """MAC address without colons, upper case."""
        return self.mac_address.replace(":", "").upper()

    def web_server(self, host: str) -> str:
        """URL of the device's web server on the given host."""
        return f"http://{host}:{self.webserver_port}"

    @classmethod
    def from_tags(cls, reader: TagReader) -> DeviceInfo:
        return cls(
            uses_password=reader.get_bool(1),
            name=reader.get_str(2),
            mac_address=reader.get_str(3),
            esphome_version=reader.get_str(4),
            compilation_time=reader.get_str(5),
            model=reader.get_str(6),
            has_deep_sleep=reader.get_bool(7),
            project_name=reader.get_str(8),
            project_version=reader.get_str(9),
            webserver_port=reader.get_int(10),
            bluetooth_proxy_version=reader.get_int(11),
            manufacturer=reader.get_str(12),
        )


class NetworkState(str, Enum):
    """Connection status reported to the listener."""

    CONNECTING = "connecting"
    ONLINE = "online"
    OFFLINE = "offline"


class NetworkStatus(BaseModel):
    """
    A change of connection status.

    Attributes:
        state: Connecting, online or offline.
        reason: Short human readable cause ("connection completed",
            "ping response", "connection closed").
    """

    model_config = ConfigDict(frozen=True)

    platform: ClassVar[str] = "network"

    state: NetworkState
    reason: str = ""

    @property
    def is_online(self) -> bool:
        return self.state == NetworkState.ONLINE


class ListingComplete(BaseModel):
    """Marks the end of entity discovery."""

    model_config = ConfigDict(frozen=True)

    platform: ClassVar[str] = "complete"


class LogMessage(BaseModel):
    """A log line forwarded by the device."""

    model_config = ConfigDict(frozen=True)

    platform: ClassVar[str] = "log"

    level: LogLevel | int = LogLevel.NONE
    message: str = ""
