"""
Entity command builders.

Each builder returns a Command: the request message type, its field map
ready for encode_tags(), and the state response the device sends once it
has applied the command. The client enqueues commands through the
outbound supervisor, so a command whose state update never arrives is
retransmitted.

Optional command arguments use the has_X / X field pairs of the API: the
flag is set only when the argument is given, and the device ignores the
value otherwise.

Example:
    >>> cmd = switch_command(0x1234ABCD, True)
    >>> cmd.message_type, cmd.expected_response
    (<MessageType.SWITCH_COMMAND_REQUEST: 33>, <MessageType.SWITCH_STATE_RESPONSE: 26>)
"""

from __future__ import annotations

from dataclasses import dataclass, field

from espconnect.protocol.constants import MessageType, WireType
from espconnect.protocol.tags import FieldSpec, encode_tags

VARINT = WireType.VARINT
FIXED32 = WireType.FIXED32
STRING = WireType.LENGTH_DELIMITED


@dataclass(frozen=True)
class Command:
    """
    An encoded-ready request for the device.

    Attributes:
        message_type: Request message type.
        fields: Field number to (value, wire type).
        expected_response: Message type that acknowledges the request, or
            None for fire-and-forget requests.
    """

    message_type: MessageType
    fields: dict[int, FieldSpec] = field(default_factory=dict, hash=False)
    expected_response: MessageType | None = None

    def encode(self) -> bytes:
        """Encode the field map into payload bytes."""
        return encode_tags(self.fields)


def _has(value: object) -> tuple[int, WireType]:
    return (1 if value is not None else 0, VARINT)


def _float(value: float | None) -> tuple[float | None, WireType]:
    return (float(value) if value is not None else None, FIXED32)


def button_command(key: int) -> Command:
    """Press a button."""
    return Command(MessageType.BUTTON_COMMAND_REQUEST, {1: (key, FIXED32)})


def camera_image_request(single: bool = True, stream: bool = False) -> Command:
    """
    Request a camera image.

    Args:
        single: Send one image.
        stream: Start streaming images.
    """
    return Command(
        MessageType.CAMERA_IMAGE_REQUEST,
        {1: (single, VARINT), 2: (stream, VARINT)},
    )


def cover_command(
    key: int,
    *,
    position: float | None = None,
    tilt: float | None = None,
    stop: bool = False,
) -> Command:
    """
    Move, tilt or stop a cover.

    Args:
        key: Entity key.
        position: Target position, 0.0 closed to 1.0 open.
        tilt: Target tilt, 0.0 to 1.0.
        stop: Stop the current movement.
    """
    return Command(
        MessageType.COVER_COMMAND_REQUEST,
        {
            1: (key, FIXED32),
            4: _has(position),
            5: _float(position),
            6: _has(tilt),
            7: _float(tilt),
            8: (stop, VARINT),
        },
        MessageType.COVER_STATE_RESPONSE,
    )


def fan_command(
    key: int,
    *,
    state: bool | None = None,
    oscillating: bool | None = None,
    direction: int | None = None,
    speed_level: int | None = None,
) -> Command:
    """Change a fan's power, oscillation, direction or speed level."""
    return Command(
        MessageType.FAN_COMMAND_REQUEST,
        {
            1: (key, FIXED32),
            2: _has(state),
            3: (state, VARINT),
            6: _has(oscillating),
            7: (oscillating, VARINT),
            8: _has(direction),
            9: (direction, VARINT),
            10: _has(speed_level),
            11: (speed_level, VARINT),
        },
        MessageType.FAN_STATE_RESPONSE,
    )


def light_command(
    key: int,
    *,
    state: bool | None = None,
    brightness: float | None = None,
    rgb: tuple[float, float, float] | None = None,
    white: float | None = None,
    color_temperature: float | None = None,
    transition_length: int | None = None,
    flash_length: int | None = None,
    effect: str | None = None,
    color_brightness: float | None = None,
    color_mode: int | None = None,
) -> Command:
    """
    Change a light.

    Args:
        key: Entity key.
        state: Turn on or off.
        brightness: Master brightness, 0.0 to 1.0.
        rgb: Red, green and blue channels, each 0.0 to 1.0.
        white: White channel, 0.0 to 1.0.
        color_temperature: Colour temperature in mireds.
        transition_length: Transition time in milliseconds.
        flash_length: Flash duration in milliseconds.
        effect: Effect name from the light's listing.
        color_brightness: Brightness of the colour channels.
        color_mode: Colour mode to switch to.

    Returns:
        Command expecting LIGHT_STATE_RESPONSE.
    """
    red, green, blue = rgb if rgb is not None else (None, None, None)
    return Command(
        MessageType.LIGHT_COMMAND_REQUEST,
        {
            1: (key, FIXED32),
            2: _has(state),
            3: (state, VARINT),
            4: _has(brightness),
            5: _float(brightness),
            6: _has(rgb),
            7: _float(red),
            8: _float(green),
            9: _float(blue),
            10: _has(white),
            11: _float(white),
            12: _has(color_temperature),
            13: _float(color_temperature),
            14: _has(transition_length),
            15: (transition_length, VARINT),
            16: _has(flash_length),
            17: (flash_length, VARINT),
            18: _has(effect),
            19: (effect, STRING),
            20: _has(color_brightness),
            21: _float(color_brightness),
            22: _has(color_mode),
            23: (color_mode, VARINT),
        },
        MessageType.LIGHT_STATE_RESPONSE,
    )


def lock_command(key: int, command: int, code: str | None = None) -> Command:
    """
    Lock, unlock or open a lock.

    Args:
        key: Entity key.
        command: A LockCommand value.
        code: Code for locks that require one.
    """
    return Command(
        MessageType.LOCK_COMMAND_REQUEST,
        {
            1: (key, FIXED32),
            2: (int(command), VARINT),
            3: _has(code),
            4: (code, STRING),
        },
        MessageType.LOCK_STATE_RESPONSE,
    )


def media_player_command(
    key: int,
    *,
    command: int | None = None,
    volume: float | None = None,
    media_url: str | None = None,
) -> Command:
    """Send a playback command, set the volume or play a URL."""
    return Command(
        MessageType.MEDIA_PLAYER_COMMAND_REQUEST,
        {
            1: (key, FIXED32),
            2: _has(command),
            3: (command, VARINT),
            4: _has(volume),
            5: _float(volume),
            6: _has(media_url),
            7: (media_url, STRING),
        },
        MessageType.MEDIA_PLAYER_STATE_RESPONSE,
    )


def number_command(key: int, state: float) -> Command:
    """Set a number entity."""
    return Command(
        MessageType.NUMBER_COMMAND_REQUEST,
        {1: (key, FIXED32), 2: _float(state)},
    )


def select_command(key: int, state: str) -> Command:
    """Choose a select option."""
    return Command(
        MessageType.SELECT_COMMAND_REQUEST,
        {1: (key, FIXED32), 2: (state, STRING)},
        MessageType.SELECT_STATE_RESPONSE,
    )


def siren_command(
    key: int,
    *,
    state: bool | None = None,
    tone: str | None = None,
    duration: int | None = None,
    volume: float | None = None,
) -> Command:
    """Turn a siren on or off, optionally with tone, duration and volume."""
    return Command(
        MessageType.SIREN_COMMAND_REQUEST,
        {
            1: (key, FIXED32),
            2: _has(state),
            3: (state, VARINT),
            4: _has(tone),
            5: (tone, STRING),
            6: _has(duration),
            7: (duration, VARINT),
            8: _has(volume),
            9: _float(volume),
        },
        MessageType.SIREN_STATE_RESPONSE,
    )


def switch_command(key: int, state: bool) -> Command:
    """Turn a switch on or off."""
    return Command(
        MessageType.SWITCH_COMMAND_REQUEST,
        {1: (key, FIXED32), 2: (state, VARINT)},
        MessageType.SWITCH_STATE_RESPONSE,
    )


def climate_command(
    key: int,
    *,
    mode: int | None = None,
    target_temperature: float | None = None,
    target_temperature_low: float | None = None,
    target_temperature_high: float | None = None,
    fan_mode: int | None = None,
    swing_mode: int | None = None,
    custom_fan_mode: str | None = None,
    preset: int | None = None,
    custom_preset: str | None = None,
    target_humidity: float | None = None,
) -> Command:
    """
    Change a climate entity.

    Only the given arguments are applied; everything else keeps its
    current value on the device.
    """
    return Command(
        MessageType.CLIMATE_COMMAND_REQUEST,
        {
            1: (key, FIXED32),
            2: _has(mode),
            3: (mode, VARINT),
            4: _has(target_temperature),
            5: _float(target_temperature),
            6: _has(target_temperature_low),
            7: _float(target_temperature_low),
            8: _has(target_temperature_high),
            9: _float(target_temperature_high),
            12: _has(fan_mode),
            13: (fan_mode, VARINT),
            14: _has(swing_mode),
            15: (swing_mode, VARINT),
            16: _has(custom_fan_mode),
            17: (custom_fan_mode, STRING),
            18: _has(preset),
            19: (preset, VARINT),
            20: _has(custom_preset),
            21: (custom_preset, STRING),
            22: _has(target_humidity),
            23: _float(target_humidity),
        },
        MessageType.CLIMATE_STATE_RESPONSE,
    )


def execute_service(key: int) -> Command:
    """Invoke a user-defined service by key."""
    return Command(MessageType.EXECUTE_SERVICE_REQUEST, {1: (key, FIXED32)})
