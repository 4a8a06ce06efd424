"""
Entity decoder registry and strategy interfaces.

This module implements the Strategy pattern for message-specific decoding.
Each entity listing and state message has a decoder registered with the
DecoderRegistry under its message type.

Decoders are pure: they take a TagReader (and the is-digital hint for
state updates) and return an immutable record. They hold no connection
state.

Architecture:
    DecoderRegistry
        └── EntityDecoder (interface)
            ├── SwitchEntityDecoder / SwitchStateDecoder
            ├── LightEntityDecoder / LightStateDecoder
            └── ... (one pair per entity platform)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING, Any, TypeVar

from espconnect.parsers.tag_reader import TagReader
from espconnect.protocol.constants import EntityCategory, ProtocolConstants

if TYPE_CHECKING:
    from espconnect.protocol.tags import TagMap

TEnum = TypeVar("TEnum", bound=IntEnum)


@dataclass(frozen=True)
class EntityInfo:
    """
    Fields shared by every entity listing.

    Attributes:
        object_id: Entity object id (slug).
        key: Numeric entity key used by state updates and commands.
        name: Display name.
        unique_id: Unique id assigned by the firmware.
        device_id: Sub-device the entity belongs to, "" when absent.
    """

    object_id: str
    key: int
    name: str
    unique_id: str
    device_id: str = ""


def parse_entity_info(
    reader: TagReader,
    device_id_field: int = ProtocolConstants.ENTITY_DEVICE_ID_FIELD,
) -> EntityInfo:
    """
    Parse the common entity listing fields.

    Layout: object_id(1), key(2), name(3), unique_id(4), and device_id at
    ``device_id_field``.

    Args:
        reader: Reader over the listing payload.
        device_id_field: Field number of the sub-device id.

    Returns:
        Parsed EntityInfo.
    """
    return EntityInfo(
        object_id=reader.get_str(1),
        key=reader.get_long(2),
        name=reader.get_str(3),
        unique_id=reader.get_str(4),
        device_id=reader.get_str(device_id_field),
    )


def to_enum(enum_type: type[TEnum], value: int) -> TEnum | int:
    """
    Convert a raw enum value, keeping values the enum does not know as int.

    Firmware releases add enum members over time; an unknown value is
    passed through rather than rejected.
    """
    try:
        return enum_type(value)
    except ValueError:
        return value


def to_entity_category(value: int) -> EntityCategory | int:
    """Convert a raw entity category, keeping unknown values as int."""
    return to_enum(EntityCategory, value)


class EntityDecoder(ABC):
    """
    Abstract base class for message decoding strategies.

    Implementations should:
    1. Define the message_type property
    2. Implement decode() to build a record from the reader
    3. Return an immutable dataclass
    """

    @property
    @abstractmethod
    def message_type(self) -> int:
        """
        The message type this strategy handles.

        Returns:
            MessageType enum value.
        """
        ...

    @abstractmethod
    def decode(self, reader: TagReader, is_digital: bool = False) -> Any:
        """
        Decode a message payload.

        Args:
            reader: Reader over the decoded payload.
            is_digital: True when the frame answered a supervised command
                sent by this client. Only meaningful for state updates.

        Returns:
            Message-specific record.
        """
        ...


class DecoderRegistry:
    """
    Registry of decoding strategies keyed by message type.

    If no strategy is registered for a message type, lookups return None
    and the caller reports the message as unhandled.

    Example:
        >>> registry = DecoderRegistry()
        >>> registry.register(SwitchStateDecoder())
        >>> record = registry.decode(MessageType.SWITCH_STATE_RESPONSE, tags)
    """

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._decoders: dict[int, EntityDecoder] = {}

    def register(self, decoder: EntityDecoder) -> None:
        """
        Register a decoding strategy.

        Args:
            decoder: Strategy instance to register.

        Note:
            Replaces any existing strategy for the same message type.
        """
        self._decoders[int(decoder.message_type)] = decoder

    def get(self, message_type: int) -> EntityDecoder | None:
        """
        Get the strategy for a message type.

        Returns:
            Strategy if registered, None otherwise.
        """
        return self._decoders.get(int(message_type))

    def has(self, message_type: int) -> bool:
        """Check if a strategy is registered."""
        return int(message_type) in self._decoders

    def decode(self, message_type: int, tags: TagMap, is_digital: bool = False) -> Any | None:
        """
        Decode a tag map with the registered strategy.

        Args:
            message_type: Message type of the frame.
            tags: Decoded payload.
            is_digital: Hint forwarded to the strategy.

        Returns:
            Decoded record, or None if no strategy is registered.
        """
        decoder = self.get(message_type)
        if decoder is None:
            return None
        return decoder.decode(TagReader(tags), is_digital)

    def unregister(self, message_type: int) -> bool:
        """
        Remove a strategy registration.

        Returns:
            True if a strategy was removed, False if none was registered.
        """
        return self._decoders.pop(int(message_type), None) is not None

    @property
    def registered_types(self) -> frozenset[int]:
        """Get all message types with registered strategies."""
        return frozenset(self._decoders)

    def clear(self) -> None:
        """Remove all registered strategies."""
        self._decoders.clear()

    def __repr__(self) -> str:
        return f"DecoderRegistry(decoders={len(self._decoders)})"


def create_default_registry() -> DecoderRegistry:
    """
    Create a new registry with every built-in decoder registered.

    Covers entity listings and state updates for binary sensor, cover,
    fan, light, sensor, switch, text sensor, camera, climate, number,
    select, siren, lock, button and media player, plus Bluetooth LE
    advertisements and Home Assistant service calls.

    Returns:
        DecoderRegistry with all built-in strategies.
    """
    from espconnect.parsers.entities import register_all_decoders

    registry = DecoderRegistry()
    register_all_decoders(registry)
    return registry
