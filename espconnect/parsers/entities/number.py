"""
Number and select decoding strategies.

Numbers are bounded float inputs with a step. Selects pick one option
from a fixed list of strings.

Messages:
    LIST_ENTITIES_NUMBER_RESPONSE (49), NUMBER_STATE_RESPONSE (50),
    LIST_ENTITIES_SELECT_RESPONSE (52), SELECT_STATE_RESPONSE (53)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
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


class NumberMode(IntEnum):
    """How the UI should render a number input."""

    AUTO = 0
    BOX = 1
    SLIDER = 2


@dataclass(frozen=True)
class NumberEntity:
    """
    Number listing.

    Attributes:
        info: Common entity fields.
        icon: Material design icon name.
        min_value: Lowest accepted value.
        max_value: Highest accepted value.
        step: Increment between accepted values.
        disabled_by_default: Entity starts disabled in the UI.
        entity_category: Entity category.
        unit_of_measurement: Unit string.
        mode: Preferred input widget.
    """

    platform: ClassVar[str] = "number"

    info: EntityInfo
    icon: str
    min_value: float
    max_value: float
    step: float
    disabled_by_default: bool
    entity_category: EntityCategory | int
    unit_of_measurement: str
    mode: int

    @property
    def key(self) -> int:
        """Get the entity key."""
        return self.info.key


@dataclass(frozen=True)
class NumberState:
    platform: ClassVar[str] = "number"

    key: int
    state: float
    has_state: bool


@dataclass(frozen=True)
class SelectEntity:
    """Select listing with its option list."""

    platform: ClassVar[str] = "select"

    info: EntityInfo
    icon: str
    options: tuple[str, ...]
    disabled_by_default: bool
    entity_category: EntityCategory | int

    @property
    def key(self) -> int:
        """Get the entity key."""
        return self.info.key


@dataclass(frozen=True)
class SelectState:
    platform: ClassVar[str] = "select"

    key: int
    state: str
    has_state: bool


class NumberEntityDecoder(EntityDecoder):
    """Decoder for number listings."""

    @property
    def message_type(self) -> MessageType:
        return MessageType.LIST_ENTITIES_NUMBER_RESPONSE

    def decode(self, reader: TagReader, is_digital: bool = False) -> NumberEntity:
        return NumberEntity(
            info=parse_entity_info(reader),
            icon=reader.get_str(5),
            min_value=reader.get_float(6),
            max_value=reader.get_float(7),
            step=reader.get_float(8),
            disabled_by_default=reader.get_bool(9),
            entity_category=to_entity_category(reader.get_int(10)),
            unit_of_measurement=reader.get_str(11),
            mode=reader.get_int(12),
        )


class NumberStateDecoder(EntityDecoder):
    """Decoder for number state updates."""

    @property
    def message_type(self) -> MessageType:
        return MessageType.NUMBER_STATE_RESPONSE

    def decode(self, reader: TagReader, is_digital: bool = False) -> NumberState:
        return NumberState(
            key=reader.get_long(1),
            state=reader.get_float(2),
            has_state=reader.get_bool(3, invert=True),
        )


class SelectEntityDecoder(EntityDecoder):
    """Decoder for select listings."""

    @property
    def message_type(self) -> MessageType:
        return MessageType.LIST_ENTITIES_SELECT_RESPONSE

    def decode(self, reader: TagReader, is_digital: bool = False) -> SelectEntity:
        return SelectEntity(
            info=parse_entity_info(reader),
            icon=reader.get_str(5),
            options=tuple(reader.get_str_list(6)),
            disabled_by_default=reader.get_bool(7),
            entity_category=to_entity_category(reader.get_int(8)),
        )


class SelectStateDecoder(EntityDecoder):
    """Decoder for select state updates."""

    @property
    def message_type(self) -> MessageType:
        return MessageType.SELECT_STATE_RESPONSE

    def decode(self, reader: TagReader, is_digital: bool = False) -> SelectState:
        return SelectState(
            key=reader.get_long(1),
            state=reader.get_str(2),
            has_state=reader.get_bool(3, invert=True),
        )
