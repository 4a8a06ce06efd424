"""
Climate decoding strategies.

Climate entities model thermostats and HVAC units. A listing describes the
supported modes, fan modes, swing modes and presets plus the visual
temperature and humidity ranges. A state update reports the active mode,
targets and current readings.

Single-point devices use target_temperature. Two-point devices use the
low/high pair instead.

Messages: LIST_ENTITIES_CLIMATE_RESPONSE (46), CLIMATE_STATE_RESPONSE (47)
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
from espconnect.protocol.constants import (
    ClimateAction,
    ClimateFanMode,
    ClimateMode,
    ClimatePreset,
    ClimateSwingMode,
    EntityCategory,
    MessageType,
)

if TYPE_CHECKING:
    from espconnect.parsers.tag_reader import TagReader


@dataclass(frozen=True)
class ClimateEntity:
    """
    Climate listing.

    Attributes:
        info: Common entity fields.
        supports_current_temperature: Reports a current temperature.
        supports_two_point_target_temperature: Uses a low/high target pair.
        supported_modes: Accepted climate modes.
        visual_min_temperature: Lowest target shown in the UI.
        visual_max_temperature: Highest target shown in the UI.
        visual_target_temperature_step: Target increment.
        supports_action: Reports what the unit is currently doing.
        supported_fan_modes: Accepted fan modes.
        supported_swing_modes: Accepted swing modes.
        supported_custom_fan_modes: Firmware-defined fan mode names.
        supported_presets: Accepted presets.
        supported_custom_presets: Firmware-defined preset names.
        disabled_by_default: Entity starts disabled in the UI.
        icon: Material design icon name.
        entity_category: Entity category.
        visual_current_temperature_step: Display precision of readings.
        supports_current_humidity: Reports a current humidity.
        supports_target_humidity: Accepts a target humidity.
        visual_min_humidity: Lowest humidity target shown in the UI.
        visual_max_humidity: Highest humidity target shown in the UI.
    """

    platform: ClassVar[str] = "climate"

    info: EntityInfo
    supports_current_temperature: bool
    supports_two_point_target_temperature: bool
    supported_modes: tuple[ClimateMode | int, ...]
    visual_min_temperature: float
    visual_max_temperature: float
    visual_target_temperature_step: float
    supports_action: bool
    supported_fan_modes: tuple[ClimateFanMode | int, ...]
    supported_swing_modes: tuple[ClimateSwingMode | int, ...]
    supported_custom_fan_modes: tuple[str, ...]
    supported_presets: tuple[ClimatePreset | int, ...]
    supported_custom_presets: tuple[str, ...]
    disabled_by_default: bool
    icon: str
    entity_category: EntityCategory | int
    visual_current_temperature_step: float
    supports_current_humidity: bool
    supports_target_humidity: bool
    visual_min_humidity: float
    visual_max_humidity: float

    @property
    def key(self) -> int:
        """Get the entity key."""
        return self.info.key


@dataclass(frozen=True)
class ClimateState:
    """
    Climate state update.

    Attributes:
        key: Entity key.
        mode: Active climate mode.
        current_temperature: Measured temperature.
        target_temperature: Single-point target.
        target_temperature_low: Two-point lower target.
        target_temperature_high: Two-point upper target.
        action: What the unit is currently doing.
        fan_mode: Active fan mode.
        swing_mode: Active swing mode.
        custom_fan_mode: Active firmware-defined fan mode.
        preset: Active preset.
        custom_preset: Active firmware-defined preset.
        current_humidity: Measured humidity.
        target_humidity: Humidity target.
    """

    platform: ClassVar[str] = "climate"

    key: int
    mode: ClimateMode | int
    current_temperature: float
    target_temperature: float
    target_temperature_low: float
    target_temperature_high: float
    action: ClimateAction | int
    fan_mode: ClimateFanMode | int
    swing_mode: ClimateSwingMode | int
    custom_fan_mode: str
    preset: ClimatePreset | int
    custom_preset: str
    current_humidity: float
    target_humidity: float


class ClimateEntityDecoder(EntityDecoder):
    """Decoder for climate listings."""

    @property
    def message_type(self) -> MessageType:
        return MessageType.LIST_ENTITIES_CLIMATE_RESPONSE

    def decode(self, reader: TagReader, is_digital: bool = False) -> ClimateEntity:
        return ClimateEntity(
            info=parse_entity_info(reader),
            supports_current_temperature=reader.get_bool(5),
            supports_two_point_target_temperature=reader.get_bool(6),
            supported_modes=tuple(to_enum(ClimateMode, v) for v in reader.get_int_list(7)),
            visual_min_temperature=reader.get_float(8),
            visual_max_temperature=reader.get_float(9),
            visual_target_temperature_step=reader.get_float(10),
            # 11 is the removed legacy away flag
            supports_action=reader.get_bool(12),
            supported_fan_modes=tuple(to_enum(ClimateFanMode, v) for v in reader.get_int_list(13)),
            supported_swing_modes=tuple(
                to_enum(ClimateSwingMode, v) for v in reader.get_int_list(14)
            ),
            supported_custom_fan_modes=tuple(reader.get_str_list(15)),
            supported_presets=tuple(to_enum(ClimatePreset, v) for v in reader.get_int_list(16)),
            supported_custom_presets=tuple(reader.get_str_list(17)),
            disabled_by_default=reader.get_bool(18),
            icon=reader.get_str(19),
            entity_category=to_entity_category(reader.get_int(20)),
            visual_current_temperature_step=reader.get_float(21),
            supports_current_humidity=reader.get_bool(22),
            supports_target_humidity=reader.get_bool(23),
            visual_min_humidity=reader.get_float(24),
            visual_max_humidity=reader.get_float(25),
        )


class ClimateStateDecoder(EntityDecoder):
    """Decoder for climate state updates."""

    @property
    def message_type(self) -> MessageType:
        return MessageType.CLIMATE_STATE_RESPONSE

    def decode(self, reader: TagReader, is_digital: bool = False) -> ClimateState:
        return ClimateState(
            key=reader.get_long(1),
            mode=to_enum(ClimateMode, reader.get_int(2)),
            current_temperature=reader.get_float(3),
            target_temperature=reader.get_float(4),
            target_temperature_low=reader.get_float(5),
            target_temperature_high=reader.get_float(6),
            action=to_enum(ClimateAction, reader.get_int(8)),
            fan_mode=to_enum(ClimateFanMode, reader.get_int(9)),
            swing_mode=to_enum(ClimateSwingMode, reader.get_int(10)),
            custom_fan_mode=reader.get_str(11),
            preset=to_enum(ClimatePreset, reader.get_int(12)),
            custom_preset=reader.get_str(13),
            current_humidity=reader.get_float(14),
            target_humidity=reader.get_float(15),
        )
