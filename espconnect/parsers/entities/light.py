"""
Light decoding strategies.

Lights advertise the colour modes they support as capability bitmasks.
Each state update reports the active colour mode together with the
channel values that mode uses; channels outside the mode read as 0.0.

Messages: LIST_ENTITIES_LIGHT_RESPONSE (15), LIGHT_STATE_RESPONSE (24)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, ClassVar, Final

from espconnect.parsers.decoder_registry import (
    EntityDecoder,
    EntityInfo,
    parse_entity_info,
    to_entity_category,
)
from espconnect.protocol.constants import ColorCapability, EntityCategory, MessageType

if TYPE_CHECKING:
    from espconnect.parsers.tag_reader import TagReader

# Display order of capability names
_CAPABILITY_NAMES: Final[tuple[tuple[ColorCapability, str], ...]] = (
    (ColorCapability.ON_OFF, "ON/OFF"),
    (ColorCapability.BRIGHTNESS, "BRIGHTNESS"),
    (ColorCapability.RGB, "RGB"),
    (ColorCapability.WHITE, "WHITE"),
    (ColorCapability.COLD_WARM_WHITE, "COLD WARM WHITE"),
    (ColorCapability.COLOR_TEMPERATURE, "COLOR TEMPERATURE"),
)


def color_capabilities(color_mode: int) -> tuple[str, ...]:
    """
    Names of the capabilities set in a colour mode bitmask.

    Example:
        >>> color_capabilities(35)
        ('ON/OFF', 'BRIGHTNESS', 'RGB')
    """
    return tuple(name for capability, name in _CAPABILITY_NAMES if color_mode & capability)


@dataclass(frozen=True)
class LightEntity:
    """
    Light listing.

    Attributes:
        info: Common entity fields.
        min_mireds: Coldest supported colour temperature.
        max_mireds: Warmest supported colour temperature.
        effects: Effect names accepted by light commands.
        supported_color_modes: Colour mode to its capability names.
        disabled_by_default: Entity starts disabled in the UI.
        icon: Material design icon name.
        entity_category: Entity category.
    """

    platform: ClassVar[str] = "light"

    info: EntityInfo
    min_mireds: float
    max_mireds: float
    effects: tuple[str, ...]
    supported_color_modes: dict[int, tuple[str, ...]] = field(hash=False)
    disabled_by_default: bool = False
    icon: str = ""
    entity_category: EntityCategory | int = EntityCategory.NONE

    @property
    def key(self) -> int:
        """Get the entity key."""
        return self.info.key


@dataclass(frozen=True)
class LightState:
    """Light state update."""

    platform: ClassVar[str] = "light"

    key: int
    state: bool
    brightness: float
    color_mode: int
    color_mode_capabilities: tuple[str, ...]
    color_brightness: float
    red: float
    green: float
    blue: float
    white: float
    color_temperature: float
    cold_white: float
    warm_white: float
    effect: str
    is_digital: bool = False


class LightEntityDecoder(EntityDecoder):
    """Decoder for light listings."""

    @property
    def message_type(self) -> MessageType:
        return MessageType.LIST_ENTITIES_LIGHT_RESPONSE

    def decode(self, reader: TagReader, is_digital: bool = False) -> LightEntity:
        return LightEntity(
            info=parse_entity_info(reader),
            min_mireds=reader.get_float(9),
            max_mireds=reader.get_float(10),
            effects=tuple(reader.get_str_list(11)),
            supported_color_modes={
                mode: color_capabilities(mode) for mode in reader.get_int_list(12)
            },
            disabled_by_default=reader.get_bool(13),
            icon=reader.get_str(14),
            entity_category=to_entity_category(reader.get_int(15)),
        )


class LightStateDecoder(EntityDecoder):
    """Decoder for light state updates."""

    @property
    def message_type(self) -> MessageType:
        return MessageType.LIGHT_STATE_RESPONSE

    def decode(self, reader: TagReader, is_digital: bool = False) -> LightState:
        color_mode = reader.get_int(11)
        return LightState(
            key=reader.get_long(1),
            state=reader.get_bool(2),
            brightness=reader.get_float(3),
            color_mode=color_mode,
            color_mode_capabilities=color_capabilities(color_mode),
            color_brightness=reader.get_float(10),
            red=reader.get_float(4),
            green=reader.get_float(5),
            blue=reader.get_float(6),
            white=reader.get_float(7),
            color_temperature=reader.get_float(8),
            cold_white=reader.get_float(12),
            warm_white=reader.get_float(13),
            effect=reader.get_str(9),
            is_digital=is_digital,
        )
