"""
Sensor and text sensor decoding strategies.

Numeric sensors report a float with a unit and a display precision.
Text sensors report a free-form string.

Messages:
    LIST_ENTITIES_SENSOR_RESPONSE (16), SENSOR_STATE_RESPONSE (25),
    LIST_ENTITIES_TEXT_SENSOR_RESPONSE (18), TEXT_SENSOR_STATE_RESPONSE (27)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from espconnect.parsers.decoder_registry import (
    EntityDecoder,
    EntityInfo,
    parse_entity_info,
    to_entity_category,
    to_enum,
)
from espconnect.protocol.constants import EntityCategory, MessageType, SensorStateClass

if TYPE_CHECKING:
    from espconnect.parsers.tag_reader import TagReader


@dataclass(frozen=True)
class SensorEntity:
    """
    Numeric sensor listing.

    Attributes:
        info: Common entity fields.
        icon: Material design icon name.
        unit_of_measurement: Unit string ("°C", "%", ...).
        accuracy_decimals: Number of decimals to display.
        force_update: Publish every reading even when unchanged.
        device_class: Home Assistant device class.
        state_class: Measurement, total or total increasing.
        last_reset_type: Legacy reset behaviour.
        disabled_by_default: Entity starts disabled in the UI.
        entity_category: Entity category.
    """

    platform: ClassVar[str] = "sensor"

    info: EntityInfo
    icon: str
    unit_of_measurement: str
    accuracy_decimals: int
    force_update: bool
    device_class: str
    state_class: SensorStateClass | int
    last_reset_type: int
    disabled_by_default: bool
    entity_category: EntityCategory | int

    @property
    def key(self) -> int:
        """Get the entity key."""
        return self.info.key


@dataclass(frozen=True)
class SensorState:
    platform: ClassVar[str] = "sensor"

    key: int
    state: float
    has_state: bool


@dataclass(frozen=True)
class TextSensorEntity:
    platform: ClassVar[str] = "text"

    info: EntityInfo
    icon: str
    disabled_by_default: bool
    entity_category: EntityCategory | int

    @property
    def key(self) -> int:
        """Get the entity key."""
        return self.info.key


@dataclass(frozen=True)
class TextSensorState:
    platform: ClassVar[str] = "text"

    key: int
    state: str
    has_state: bool


class SensorEntityDecoder(EntityDecoder):
    """Decoder for numeric sensor listings."""

    @property
    def message_type(self) -> MessageType:
        return MessageType.LIST_ENTITIES_SENSOR_RESPONSE

    def decode(self, reader: TagReader, is_digital: bool = False) -> SensorEntity:
        return SensorEntity(
            info=parse_entity_info(reader),
            icon=reader.get_str(5),
            unit_of_measurement=reader.get_str(6),
            accuracy_decimals=reader.get_int(7),
            force_update=reader.get_bool(8),
            device_class=reader.get_str(9),
            state_class=to_enum(SensorStateClass, reader.get_int(10)),
            last_reset_type=reader.get_int(11),
            disabled_by_default=reader.get_bool(12),
            entity_category=to_entity_category(reader.get_int(13)),
        )


class SensorStateDecoder(EntityDecoder):
    """Decoder for numeric sensor state updates."""

    @property
    def message_type(self) -> MessageType:
        return MessageType.SENSOR_STATE_RESPONSE

    def decode(self, reader: TagReader, is_digital: bool = False) -> SensorState:
        return SensorState(
            key=reader.get_long(1),
            state=reader.get_float(2),
            has_state=reader.get_bool(3, invert=True),
        )


class TextSensorEntityDecoder(EntityDecoder):
    """Decoder for text sensor listings."""

    @property
    def message_type(self) -> MessageType:
        return MessageType.LIST_ENTITIES_TEXT_SENSOR_RESPONSE

    def decode(self, reader: TagReader, is_digital: bool = False) -> TextSensorEntity:
        return TextSensorEntity(
            info=parse_entity_info(reader),
            icon=reader.get_str(5),
            disabled_by_default=reader.get_bool(6),
            entity_category=to_entity_category(reader.get_int(7)),
        )


class TextSensorStateDecoder(EntityDecoder):
    """Decoder for text sensor state updates."""

    @property
    def message_type(self) -> MessageType:
        return MessageType.TEXT_SENSOR_STATE_RESPONSE

    def decode(self, reader: TagReader, is_digital: bool = False) -> TextSensorState:
        return TextSensorState(
            key=reader.get_long(1),
            state=reader.get_str(2),
            has_state=reader.get_bool(3, invert=True),
        )
