"""
Switch and button decoding strategies.

Switches are on/off outputs such as relays. Buttons are stateless: they
only have a listing, and pressing one produces no state update.

Messages:
    LIST_ENTITIES_SWITCH_RESPONSE (17), SWITCH_STATE_RESPONSE (26),
    LIST_ENTITIES_BUTTON_RESPONSE (61)
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
class SwitchEntity:
    """
    Switch listing.

    Attributes:
        info: Common entity fields.
        icon: Material design icon name.
        assumed_state: The firmware cannot read back the real state.
        disabled_by_default: Entity starts disabled in the UI.
        entity_category: Entity category.
        device_class: Home Assistant device class ("outlet", "switch").
    """

    platform: ClassVar[str] = "switch"

    info: EntityInfo
    icon: str
    assumed_state: bool
    disabled_by_default: bool
    entity_category: EntityCategory | int
    device_class: str

    @property
    def key(self) -> int:
        """Get the entity key."""
        return self.info.key


@dataclass(frozen=True)
class SwitchState:
    """
    Switch state update.

    Attributes:
        key: Entity key.
        state: Switch is on.
        is_digital: True when caused by a command from this client.
    """

    platform: ClassVar[str] = "switch"

    key: int
    state: bool
    is_digital: bool = False


@dataclass(frozen=True)
class ButtonEntity:
    """Button listing."""

    platform: ClassVar[str] = "button"

    info: EntityInfo
    icon: str
    disabled_by_default: bool
    entity_category: EntityCategory | int
    device_class: str

    @property
    def key(self) -> int:
        """Get the entity key."""
        return self.info.key


class SwitchEntityDecoder(EntityDecoder):
    """Decoder for switch listings."""

    @property
    def message_type(self) -> MessageType:
        return MessageType.LIST_ENTITIES_SWITCH_RESPONSE

    def decode(self, reader: TagReader, is_digital: bool = False) -> SwitchEntity:
        return SwitchEntity(
            info=parse_entity_info(reader),
            icon=reader.get_str(5),
            assumed_state=reader.get_bool(6),
            disabled_by_default=reader.get_bool(7),
            entity_category=to_entity_category(reader.get_int(8)),
            device_class=reader.get_str(9),
        )


class SwitchStateDecoder(EntityDecoder):
    """Decoder for switch state updates."""

    @property
    def message_type(self) -> MessageType:
        return MessageType.SWITCH_STATE_RESPONSE

    def decode(self, reader: TagReader, is_digital: bool = False) -> SwitchState:
        return SwitchState(
            key=reader.get_long(1),
            state=reader.get_bool(2),
            is_digital=is_digital,
        )


class ButtonEntityDecoder(EntityDecoder):
    """Decoder for button listings."""

    @property
    def message_type(self) -> MessageType:
        return MessageType.LIST_ENTITIES_BUTTON_RESPONSE

    def decode(self, reader: TagReader, is_digital: bool = False) -> ButtonEntity:
        return ButtonEntity(
            info=parse_entity_info(reader),
            icon=reader.get_str(5),
            disabled_by_default=reader.get_bool(6),
            entity_category=to_entity_category(reader.get_int(7)),
            device_class=reader.get_str(8),
        )
