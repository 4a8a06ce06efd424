"""
Native API message types, wire types and protocol constants.

Message numbers follow the device firmware's api.proto catalogue. The
numbers are assigned by the device side and are stable across releases.
"""

from __future__ import annotations

from enum import IntEnum, IntFlag
from typing import Final


class WireType(IntEnum):
    """Tag wire types recognised by the codec."""

    VARINT = 0
    """Base-128 variable length integer."""

    FIXED64 = 1
    """Eight little-endian bytes."""

    LENGTH_DELIMITED = 2
    """Varint byte count followed by raw bytes (strings, blobs, nested messages)."""

    FIXED32 = 5
    """Four little-endian bytes."""


class MessageType(IntEnum):
    """
    Native API message type numbers.

    Requests are sent by the client, responses by the device. Several
    "response" messages (entity listings, state updates, log lines) are
    unsolicited pushes from the device.
    """

    # ===== Connection Handshake =====

    HELLO_REQUEST = 1
    """Client identifies itself; device answers with its API version."""

    HELLO_RESPONSE = 2
    """API major/minor, server info and device name."""

    AUTHENTICATION_REQUEST = 3
    """Carries the optional password."""

    AUTHENTICATION_RESPONSE = 4
    """Sent only by devices at API 1.11 or older."""

    DISCONNECT_REQUEST = 5
    """Either side announces it is closing the connection."""

    DISCONNECT_RESPONSE = 6
    """Acknowledges a disconnect request."""

    PING_REQUEST = 7
    """Liveness probe, sent by either side."""

    PING_RESPONSE = 8
    """Answer to a liveness probe."""

    DEVICE_INFO_REQUEST = 9
    """Asks for device metadata."""

    DEVICE_INFO_RESPONSE = 10
    """Name, MAC address, firmware version and build time."""

    # ===== Entity Discovery =====

    LIST_ENTITIES_REQUEST = 11
    LIST_ENTITIES_BINARY_SENSOR_RESPONSE = 12
    LIST_ENTITIES_COVER_RESPONSE = 13
    LIST_ENTITIES_FAN_RESPONSE = 14
    LIST_ENTITIES_LIGHT_RESPONSE = 15
    LIST_ENTITIES_SENSOR_RESPONSE = 16
    LIST_ENTITIES_SWITCH_RESPONSE = 17
    LIST_ENTITIES_TEXT_SENSOR_RESPONSE = 18

    LIST_ENTITIES_DONE_RESPONSE = 19
    """Sentinel closing an entity listing."""

    # ===== State Updates =====

    SUBSCRIBE_STATES_REQUEST = 20
    BINARY_SENSOR_STATE_RESPONSE = 21
    COVER_STATE_RESPONSE = 22
    FAN_STATE_RESPONSE = 23
    LIGHT_STATE_RESPONSE = 24
    SENSOR_STATE_RESPONSE = 25
    SWITCH_STATE_RESPONSE = 26
    TEXT_SENSOR_STATE_RESPONSE = 27

    # ===== Logs =====

    SUBSCRIBE_LOGS_REQUEST = 28
    SUBSCRIBE_LOGS_RESPONSE = 29

    # ===== Commands =====

    COVER_COMMAND_REQUEST = 30
    FAN_COMMAND_REQUEST = 31
    LIGHT_COMMAND_REQUEST = 32
    SWITCH_COMMAND_REQUEST = 33

    # ===== Home Assistant Services, States and Time =====

    SUBSCRIBE_HOMEASSISTANT_SERVICES_REQUEST = 34
    HOMEASSISTANT_SERVICE_RESPONSE = 35
    GET_TIME_REQUEST = 36
    GET_TIME_RESPONSE = 37
    SUBSCRIBE_HOMEASSISTANT_STATES_REQUEST = 38
    SUBSCRIBE_HOMEASSISTANT_STATE_RESPONSE = 39
    HOMEASSISTANT_STATE_RESPONSE = 40

    # ===== User-defined Services =====

    LIST_ENTITIES_SERVICES_RESPONSE = 41
    EXECUTE_SERVICE_REQUEST = 42

    # ===== Camera =====

    LIST_ENTITIES_CAMERA_RESPONSE = 43
    CAMERA_IMAGE_RESPONSE = 44
    CAMERA_IMAGE_REQUEST = 45

    # ===== Climate =====

    LIST_ENTITIES_CLIMATE_RESPONSE = 46
    CLIMATE_STATE_RESPONSE = 47
    CLIMATE_COMMAND_REQUEST = 48

    # ===== Number / Select / Siren / Lock / Button / Media Player =====

    LIST_ENTITIES_NUMBER_RESPONSE = 49
    NUMBER_STATE_RESPONSE = 50
    NUMBER_COMMAND_REQUEST = 51
    LIST_ENTITIES_SELECT_RESPONSE = 52
    SELECT_STATE_RESPONSE = 53
    SELECT_COMMAND_REQUEST = 54
    LIST_ENTITIES_SIREN_RESPONSE = 55
    SIREN_STATE_RESPONSE = 56
    SIREN_COMMAND_REQUEST = 57
    LIST_ENTITIES_LOCK_RESPONSE = 58
    LOCK_STATE_RESPONSE = 59
    LOCK_COMMAND_REQUEST = 60
    LIST_ENTITIES_BUTTON_RESPONSE = 61
    BUTTON_COMMAND_REQUEST = 62
    LIST_ENTITIES_MEDIA_PLAYER_RESPONSE = 63
    MEDIA_PLAYER_STATE_RESPONSE = 64
    MEDIA_PLAYER_COMMAND_REQUEST = 65

    # ===== Bluetooth =====

    SUBSCRIBE_BLUETOOTH_LE_ADVERTISEMENTS_REQUEST = 66
    BLUETOOTH_LE_ADVERTISEMENT_RESPONSE = 67

    # Legacy names for 3/4 used by older firmware documentation
    CONNECT_REQUEST = 3
    CONNECT_RESPONSE = 4


class LogLevel(IntEnum):
    """Device-side log levels used by the log subscription."""

    NONE = 0
    ERROR = 1
    WARN = 2
    INFO = 3
    CONFIG = 4
    DEBUG = 5
    VERBOSE = 6
    VERY_VERBOSE = 7


class EntityCategory(IntEnum):
    """Entity category reported in listings."""

    NONE = 0
    CONFIG = 1
    DIAGNOSTIC = 2


class ColorCapability(IntFlag):
    """Light colour mode capability bits."""

    ON_OFF = 1
    BRIGHTNESS = 2
    WHITE = 4
    COLOR_TEMPERATURE = 8
    COLD_WARM_WHITE = 16
    RGB = 32


class CoverOperation(IntEnum):
    IDLE = 0
    IS_OPENING = 1
    IS_CLOSING = 2


class FanDirection(IntEnum):
    FORWARD = 0
    REVERSE = 1


class SensorStateClass(IntEnum):
    NONE = 0
    MEASUREMENT = 1
    TOTAL_INCREASING = 2
    TOTAL = 3


class ClimateMode(IntEnum):
    OFF = 0
    HEAT_COOL = 1
    COOL = 2
    HEAT = 3
    FAN_ONLY = 4
    DRY = 5
    AUTO = 6


class ClimateFanMode(IntEnum):
    ON = 0
    OFF = 1
    AUTO = 2
    LOW = 3
    MEDIUM = 4
    HIGH = 5
    MIDDLE = 6
    FOCUS = 7
    DIFFUSE = 8
    QUIET = 9


class ClimateSwingMode(IntEnum):
    OFF = 0
    BOTH = 1
    VERTICAL = 2
    HORIZONTAL = 3


class ClimateAction(IntEnum):
    OFF = 0
    COOLING = 2
    HEATING = 3
    IDLE = 4
    DRYING = 5
    FAN = 6


class ClimatePreset(IntEnum):
    NONE = 0
    HOME = 1
    AWAY = 2
    BOOST = 3
    COMFORT = 4
    ECO = 5
    SLEEP = 6
    ACTIVITY = 7


class LockState(IntEnum):
    NONE = 0
    LOCKED = 1
    UNLOCKED = 2
    JAMMED = 3
    LOCKING = 4
    UNLOCKING = 5


class LockCommand(IntEnum):
    UNLOCK = 0
    LOCK = 1
    OPEN = 2


class MediaPlayerState(IntEnum):
    NONE = 0
    IDLE = 1
    PLAYING = 2
    PAUSED = 3


class MediaPlayerCommand(IntEnum):
    PLAY = 0
    PAUSE = 1
    STOP = 2
    MUTE = 3
    UNMUTE = 4


class ProtocolConstants:
    """
    Native API protocol constants.

    Contains frame delimiters, default timing values and codec limits.
    Runtime-tunable values are mirrored as defaults on ConnectionOptions.
    """

    # ===== Frame Delimiters =====

    PLAINTEXT_DELIMITER: Final[int] = 0x00
    """First byte of every plaintext frame."""

    NOISE_INDICATOR: Final[int] = 0x01
    """First byte sent by devices that require the encrypted transport."""

    # ===== Codec Limits =====

    VARINT_MAX_BYTES: Final[int] = 10
    """Longest varint encoding (a 64-bit value)."""

    # ===== Network =====

    API_PORT: Final[int] = 6053
    """Default TCP port of the native API."""

    # ===== Timing (seconds) =====

    PING_INTERVAL_SECONDS: Final[int] = 60
    """Base keepalive interval; stays under common ~120s idle drops."""

    SEND_RETRY_COUNT: Final[int] = 5
    """Retransmissions before a supervised command is declared lost."""

    SEND_RETRY_SECONDS: Final[int] = 5
    """Interval between retransmissions."""

    MIN_RECONNECT_SECONDS: Final[int] = 1
    """Reconnect delay after a successful session."""

    MAX_RECONNECT_SECONDS: Final[int] = 60
    """Reconnect delay ceiling."""

    RECONNECT_JITTER_FACTOR: Final[float] = 0.25
    """Upper bound of the random reconnect jitter as a fraction of the delay."""

    PING_JITTER_FACTOR: Final[float] = 0.5
    """Upper bound of the random keepalive shortening as a fraction of the interval."""

    # ===== Handshake =====

    LEGACY_AUTH_MAX_VERSION: Final[tuple[int, int]] = (1, 11)
    """Newest API version that still answers AuthenticationRequest."""

    SUPPORTED_API_MAJOR: Final[int] = 2
    """Highest API major version accepted by default."""

    # ===== Entities =====

    ENTITY_DEVICE_ID_FIELD: Final[int] = 26
    """Field number of the sub-device id in entity listings."""

    ENTITY_DEVICE_ID_MIN_VERSION: Final[tuple[int, int]] = (1, 11)
    """Oldest API version whose listings may carry the sub-device id."""


# Entity listing messages grouped for dispatch

LIST_ENTITIES_RESPONSES: Final[frozenset[int]] = frozenset({
    MessageType.LIST_ENTITIES_BINARY_SENSOR_RESPONSE,
    MessageType.LIST_ENTITIES_COVER_RESPONSE,
    MessageType.LIST_ENTITIES_FAN_RESPONSE,
    MessageType.LIST_ENTITIES_LIGHT_RESPONSE,
    MessageType.LIST_ENTITIES_SENSOR_RESPONSE,
    MessageType.LIST_ENTITIES_SWITCH_RESPONSE,
    MessageType.LIST_ENTITIES_TEXT_SENSOR_RESPONSE,
    MessageType.LIST_ENTITIES_CAMERA_RESPONSE,
    MessageType.LIST_ENTITIES_CLIMATE_RESPONSE,
    MessageType.LIST_ENTITIES_NUMBER_RESPONSE,
    MessageType.LIST_ENTITIES_SELECT_RESPONSE,
    MessageType.LIST_ENTITIES_SIREN_RESPONSE,
    MessageType.LIST_ENTITIES_LOCK_RESPONSE,
    MessageType.LIST_ENTITIES_BUTTON_RESPONSE,
    MessageType.LIST_ENTITIES_MEDIA_PLAYER_RESPONSE,
})
"""Entity discovery records that carry the common entity fields."""

DIGITAL_STATE_RESPONSES: Final[frozenset[int]] = frozenset({
    MessageType.BINARY_SENSOR_STATE_RESPONSE,
    MessageType.COVER_STATE_RESPONSE,
    MessageType.FAN_STATE_RESPONSE,
    MessageType.LIGHT_STATE_RESPONSE,
    MessageType.SWITCH_STATE_RESPONSE,
})
"""State updates whose decoders receive the is-digital hint."""
