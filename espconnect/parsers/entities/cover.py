"""
Cover decoding strategies.

Covers are positional actuators: blinds, garage doors, valves. Position
and tilt are reported as floats between 0.0 (closed) and 1.0 (open).

Messages: LIST_ENTITIES_COVER_RESPONSE (13), COVER_STATE_RESPONSE (22)
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
from espconnect.protocol.constants import CoverOperation, EntityCategory, MessageType

if TYPE_CHECKING:
    from espconnect.parsers.tag_reader import TagReader


@dataclass(frozen=True)
class CoverEntity:
    """
    Cover listing.

    Attributes:
        info: Common entity fields.
        assumed_state: The firmware cannot read back the real position.
        supports_position: Accepts position commands.
        supports_tilt: Accepts tilt commands.
        device_class: Home Assistant device class.
        disabled_by_default: Entity starts disabled in the UI.
        icon: Material design icon name.
        entity_category: Entity category.
    """

    platform: ClassVar[str] = "cover"

    info: EntityInfo
    assumed_state: bool
    supports_position: bool
    supports_tilt: bool
    device_class: str
    disabled_by_default: bool
    icon: str
    entity_category: EntityCategory | int

    @property
    def key(self) -> int:
        """Get the entity key."""
        return self.info.key


@dataclass(frozen=True)
class CoverState:
    """
    Cover state update.

    Attributes:
        key: Entity key.
        legacy_state: Open/closed state sent by old firmware.
        position: Position from 0.0 to 1.0.
        tilt: Tilt from 0.0 to 1.0.
        current_operation: Idle, opening or closing.
        is_digital: True when caused by a command from this client.
    """

    platform: ClassVar[str] = "cover"

    key: int
    legacy_state: int
    position: float
    tilt: float
    current_operation: CoverOperation | int
    is_digital: bool = False

    @property
    def is_moving(self) -> bool:
        """Check if the cover is opening or closing."""
        return self.current_operation != CoverOperation.IDLE


class CoverEntityDecoder(EntityDecoder):
    """Decoder for cover listings."""

    @property
    def message_type(self) -> MessageType:
        return MessageType.LIST_ENTITIES_COVER_RESPONSE

    def decode(self, reader: TagReader, is_digital: bool = False) -> CoverEntity:
        return CoverEntity(
            info=parse_entity_info(reader),
            assumed_state=reader.get_bool(5),
            supports_position=reader.get_bool(6),
            supports_tilt=reader.get_bool(7),
            device_class=reader.get_str(8),
            disabled_by_default=reader.get_bool(9),
            icon=reader.get_str(10),
            entity_category=to_entity_category(reader.get_int(11)),
        )


class CoverStateDecoder(EntityDecoder):
    """Decoder for cover state updates."""

    @property
    def message_type(self) -> MessageType:
        return MessageType.COVER_STATE_RESPONSE

    def decode(self, reader: TagReader, is_digital: bool = False) -> CoverState:
        return CoverState(
            key=reader.get_long(1),
            legacy_state=reader.get_int(2),
            position=reader.get_float(3),
            tilt=reader.get_float(4),
            current_operation=to_enum(CoverOperation, reader.get_int(5)),
            is_digital=is_digital,
        )
