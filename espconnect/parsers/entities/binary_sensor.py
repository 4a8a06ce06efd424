"""
Binary sensor decoding strategies.

Binary sensors report a two-state value such as motion, door contact or
connectivity. The firmware marks sensors without a known state with a
"missing_state" flag, exposed here inverted as has_state.

Messages: LIST_ENTITIES_BINARY_SENSOR_RESPONSE (12), BINARY_SENSOR_STATE_RESPONSE (21)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from espconnect.parsers.decoder_registry import (
    EntityDecoder,
    EntityInfo,
    parse_entity_info,
    to_entity_category,
)
from espconnect.protocol.constants import EntityCategory, MessageType

if TYPE_CHECKING:
    from espconnect.parsers.tag_reader import TagReader


@dataclass(frozen=True)
class BinarySensorEntity:
    """
    Binary sensor listing.

    Attributes:
        info: Common entity fields.
        device_class: Home Assistant device class ("motion", "door", ...).
        is_status_binary_sensor: True for the built-in connectivity sensor.
        disabled_by_default: Entity starts disabled in the UI.
        icon: Material design icon name.
        entity_category: Entity category.
    """

    platform: ClassVar[str] = "binary"

    info: EntityInfo
    device_class: str
    is_status_binary_sensor: bool
    disabled_by_default: bool
    icon: str
    entity_category: EntityCategory | int

    @property
    def key(self) -> int:
        """Get the entity key."""
        return self.info.key


@dataclass(frozen=True)
class BinarySensorState:
    """
    Binary sensor state update.

    Attributes:
        key: Entity key.
        state: Current value.
        has_state: False while the sensor has not produced a value yet.
        is_digital: True when caused by a command from this client.
    """

    platform: ClassVar[str] = "binary"

    key: int
    state: bool
    has_state: bool
    is_digital: bool = False


class BinarySensorEntityDecoder(EntityDecoder):
    """Decoder for binary sensor listings."""

    @property
    def message_type(self) -> MessageType:
        return MessageType.LIST_ENTITIES_BINARY_SENSOR_RESPONSE

    def decode(self, reader: TagReader, is_digital: bool = False) -> BinarySensorEntity:
        return BinarySensorEntity(
            info=parse_entity_info(reader),
            device_class=reader.get_str(5),
            is_status_binary_sensor=reader.get_bool(6),
            disabled_by_default=reader.get_bool(7),
            icon=reader.get_str(8),
            entity_category=to_entity_category(reader.get_int(9)),
        )


class BinarySensorStateDecoder(EntityDecoder):
    """Decoder for binary sensor state updates."""

    @property
    def message_type(self) -> MessageType:
        return MessageType.BINARY_SENSOR_STATE_RESPONSE

    def decode(self, reader: TagReader, is_digital: bool = False) -> BinarySensorState:
        return BinarySensorState(
            key=reader.get_long(1),
            state=reader.get_bool(2),
            has_state=reader.get_bool(3, invert=True),
            is_digital=is_digital,
        )
