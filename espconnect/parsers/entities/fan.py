"""
Fan decoding strategies.

Speed is reported as a level between 1 and supported_speed_levels. The
three-step legacy speed field is still decoded for old firmware.

Messages: LIST_ENTITIES_FAN_RESPONSE (14), FAN_STATE_RESPONSE (23)
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
class FanEntity:
    """Fan listing."""

    platform: ClassVar[str] = "fan"

    info: EntityInfo
    supports_oscillation: bool
    supports_speed: bool
    supports_direction: bool
    supported_speed_levels: int
    disabled_by_default: bool
    icon: str
    entity_category: EntityCategory | int

    @property
    def key(self) -> int:
        """Get the entity key."""
        return self.info.key


@dataclass(frozen=True)
class FanState:
    """
    Fan state update.

    Attributes:
        key: Entity key.
        state: Fan is on.
        oscillating: Oscillation is active.
        speed: Legacy low/medium/high speed.
        direction: 0 forward, 1 reverse.
        speed_level: Current speed level.
        is_digital: True when caused by a command from this client.
    """

    platform: ClassVar[str] = "fan"

    key: int
    state: bool
    oscillating: bool
    speed: int
    direction: int
    speed_level: int
    is_digital: bool = False


class FanEntityDecoder(EntityDecoder):
    """Decoder for fan listings."""

    @property
    def message_type(self) -> MessageType:
        return MessageType.LIST_ENTITIES_FAN_RESPONSE

    def decode(self, reader: TagReader, is_digital: bool = False) -> FanEntity:
        return FanEntity(
            info=parse_entity_info(reader),
            supports_oscillation=reader.get_bool(5),
            supports_speed=reader.get_bool(6),
            supports_direction=reader.get_bool(7),
            supported_speed_levels=reader.get_int(8),
            disabled_by_default=reader.get_bool(9),
            icon=reader.get_str(10),
            entity_category=to_entity_category(reader.get_int(11)),
        )


class FanStateDecoder(EntityDecoder):
    """Decoder for fan state updates."""

    @property
    def message_type(self) -> MessageType:
        return MessageType.FAN_STATE_RESPONSE

    def decode(self, reader: TagReader, is_digital: bool = False) -> FanState:
        return FanState(
            key=reader.get_long(1),
            state=reader.get_bool(2),
            oscillating=reader.get_bool(3),
            speed=reader.get_int(4),
            direction=reader.get_int(5),
            speed_level=reader.get_int(6),
            is_digital=is_digital,
        )
