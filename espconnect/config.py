"""
Connection configuration.

ConnectionOptions gathers everything the client needs to reach and talk to
one device. Defaults come from ProtocolConstants; the model is frozen, so a
client's configuration cannot drift while it runs.

Example:
    >>> options = ConnectionOptions(host="192.168.1.50", password="secret")
    >>> options.port
    6053
    >>> options.log_level
    <LogLevel.INFO: 3>
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from espconnect.protocol.constants import LogLevel, ProtocolConstants


class ConnectionOptions(BaseModel):
    """
    Options for one device connection.

    Attributes:
        host: Device host name or IP address.
        port: Native API port.
        password: API password, None when the device has none.
        client_info: Client description sent in HelloRequest.
        debug_logs: Subscribe to device logs at DEBUG instead of INFO.
        ping_interval: Keepalive interval in seconds, 0 disables it.
        send_retry_count: Retransmissions of a supervised command.
        send_retry_seconds: Seconds between retransmissions.
        max_reconnect_seconds: Upper bound of the reconnect backoff.
        max_api_major: Highest API major version accepted.
        dump_config: Ask the device to log its configuration on subscribe.
        device_id_min_version: First API version expected to send a
            sub-device id in entity listings.
    """

    model_config = ConfigDict(frozen=True)

    host: str = Field(min_length=1)
    port: int = Field(default=ProtocolConstants.API_PORT, ge=1, le=65535)
    password: str | None = None
    client_info: str = Field(default="espconnect", min_length=1)
    debug_logs: bool = False
    ping_interval: int = Field(default=ProtocolConstants.PING_INTERVAL_SECONDS, ge=0)
    send_retry_count: int = Field(default=ProtocolConstants.SEND_RETRY_COUNT, ge=0)
    send_retry_seconds: float = Field(default=ProtocolConstants.SEND_RETRY_SECONDS, gt=0)
    max_reconnect_seconds: int = Field(
        default=ProtocolConstants.MAX_RECONNECT_SECONDS,
        ge=ProtocolConstants.MIN_RECONNECT_SECONDS,
    )
    max_api_major: int = Field(default=ProtocolConstants.SUPPORTED_API_MAJOR, ge=1)
    dump_config: bool = True
    device_id_min_version: tuple[int, int] = ProtocolConstants.ENTITY_DEVICE_ID_MIN_VERSION

    @field_validator("host")
    @classmethod
    def strip_host(cls, value: str) -> str:
        """Trim surrounding whitespace and reject blank hosts."""
        value = value.strip()
        if not value:
            raise ValueError("host must not be blank")
        return value

    @property
    def has_password(self) -> bool:
        return bool(self.password)

    @property
    def log_level(self) -> LogLevel:
        """Log level requested in SubscribeLogsRequest."""
        return LogLevel.DEBUG if self.debug_logs else LogLevel.INFO
