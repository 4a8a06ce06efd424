"""
Entity-specific decoding strategies.

This package contains strategy implementations for every entity platform
the native API exposes. Each module holds the listing and state records of
one or a few related platforms and the decoders that build them.

Supported platforms:
- binary_sensor: BinarySensor (12, 21)
- cover: Cover (13, 22)
- fan: Fan (14, 23)
- light: Light (15, 24)
- sensor: Sensor (16, 25), TextSensor (18, 27)
- switch: Switch (17, 26), Button (61)
- camera: Camera (43, 44)
- climate: Climate (46, 47)
- number: Number (49, 50), Select (52, 53)
- controls: Siren (55, 56), Lock (58, 59), MediaPlayer (63, 64)
- bluetooth: BluetoothLEAdvertisement (67)
- services: ServiceInfo (41), HomeAssistantServiceCall (35)

Usage:
    >>> from espconnect.parsers.entities import register_all_decoders
    >>> from espconnect.parsers import DecoderRegistry
    >>> registry = DecoderRegistry()
    >>> register_all_decoders(registry)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from espconnect.parsers.entities.binary_sensor import (
    BinarySensorEntity,
    BinarySensorEntityDecoder,
    BinarySensorState,
    BinarySensorStateDecoder,
)
from espconnect.parsers.entities.bluetooth import (
    BluetoothLEAdvertisement,
    BluetoothLEAdvertisementDecoder,
    format_mac_address,
)
from espconnect.parsers.entities.camera import (
    CameraEntity,
    CameraEntityDecoder,
    CameraImage,
    CameraImageDecoder,
)
from espconnect.parsers.entities.climate import (
    ClimateEntity,
    ClimateEntityDecoder,
    ClimateState,
    ClimateStateDecoder,
)
from espconnect.parsers.entities.controls import (
    LockEntity,
    LockEntityDecoder,
    LockStateDecoder,
    LockStateRecord,
    MediaPlayerEntity,
    MediaPlayerEntityDecoder,
    MediaPlayerStateDecoder,
    MediaPlayerStateRecord,
    SirenEntity,
    SirenEntityDecoder,
    SirenState,
    SirenStateDecoder,
)
from espconnect.parsers.entities.cover import (
    CoverEntity,
    CoverEntityDecoder,
    CoverState,
    CoverStateDecoder,
)
from espconnect.parsers.entities.fan import (
    FanEntity,
    FanEntityDecoder,
    FanState,
    FanStateDecoder,
)
from espconnect.parsers.entities.light import (
    LightEntity,
    LightEntityDecoder,
    LightState,
    LightStateDecoder,
    color_capabilities,
)
from espconnect.parsers.entities.number import (
    NumberEntity,
    NumberEntityDecoder,
    NumberMode,
    NumberState,
    NumberStateDecoder,
    SelectEntity,
    SelectEntityDecoder,
    SelectState,
    SelectStateDecoder,
)
from espconnect.parsers.entities.sensor import (
    SensorEntity,
    SensorEntityDecoder,
    SensorState,
    SensorStateDecoder,
    TextSensorEntity,
    TextSensorEntityDecoder,
    TextSensorState,
    TextSensorStateDecoder,
)
from espconnect.parsers.entities.services import (
    HomeAssistantServiceCall,
    HomeAssistantServiceDecoder,
    ServiceArgType,
    ServiceArgument,
    ServiceInfo,
    ServiceInfoDecoder,
)
from espconnect.parsers.entities.switch import (
    ButtonEntity,
    ButtonEntityDecoder,
    SwitchEntity,
    SwitchEntityDecoder,
    SwitchState,
    SwitchStateDecoder,
)

if TYPE_CHECKING:
    from espconnect.parsers.decoder_registry import DecoderRegistry


def register_all_decoders(registry: DecoderRegistry) -> None:
    """
    Register every built-in decoder with a registry.

    Args:
        registry: DecoderRegistry to populate.
    """
    decoders = [
        # Listings
        BinarySensorEntityDecoder(),
        CoverEntityDecoder(),
        FanEntityDecoder(),
        LightEntityDecoder(),
        SensorEntityDecoder(),
        SwitchEntityDecoder(),
        TextSensorEntityDecoder(),
        CameraEntityDecoder(),
        ClimateEntityDecoder(),
        NumberEntityDecoder(),
        SelectEntityDecoder(),
        SirenEntityDecoder(),
        LockEntityDecoder(),
        ButtonEntityDecoder(),
        MediaPlayerEntityDecoder(),
        # States
        BinarySensorStateDecoder(),
        CoverStateDecoder(),
        FanStateDecoder(),
        LightStateDecoder(),
        SensorStateDecoder(),
        SwitchStateDecoder(),
        TextSensorStateDecoder(),
        CameraImageDecoder(),
        ClimateStateDecoder(),
        NumberStateDecoder(),
        SelectStateDecoder(),
        SirenStateDecoder(),
        LockStateDecoder(),
        MediaPlayerStateDecoder(),
        # Other pushes
        BluetoothLEAdvertisementDecoder(),
        HomeAssistantServiceDecoder(),
        ServiceInfoDecoder(),
    ]
    for decoder in decoders:
        registry.register(decoder)


__all__ = [
    "register_all_decoders",
    # Binary sensor
    "BinarySensorEntity",
    "BinarySensorState",
    "BinarySensorEntityDecoder",
    "BinarySensorStateDecoder",
    # Cover
    "CoverEntity",
    "CoverState",
    "CoverEntityDecoder",
    "CoverStateDecoder",
    # Fan
    "FanEntity",
    "FanState",
    "FanEntityDecoder",
    "FanStateDecoder",
    # Light
    "LightEntity",
    "LightState",
    "LightEntityDecoder",
    "LightStateDecoder",
    "color_capabilities",
    # Sensors
    "SensorEntity",
    "SensorState",
    "SensorEntityDecoder",
    "SensorStateDecoder",
    "TextSensorEntity",
    "TextSensorState",
    "TextSensorEntityDecoder",
    "TextSensorStateDecoder",
    # Switch / button
    "SwitchEntity",
    "SwitchState",
    "SwitchEntityDecoder",
    "SwitchStateDecoder",
    "ButtonEntity",
    "ButtonEntityDecoder",
    # Camera
    "CameraEntity",
    "CameraImage",
    "CameraEntityDecoder",
    "CameraImageDecoder",
    # Climate
    "ClimateEntity",
    "ClimateState",
    "ClimateEntityDecoder",
    "ClimateStateDecoder",
    # Number / select
    "NumberEntity",
    "NumberMode",
    "NumberState",
    "NumberEntityDecoder",
    "NumberStateDecoder",
    "SelectEntity",
    "SelectState",
    "SelectEntityDecoder",
    "SelectStateDecoder",
    # Siren / lock / media player
    "SirenEntity",
    "SirenState",
    "SirenEntityDecoder",
    "SirenStateDecoder",
    "LockEntity",
    "LockStateRecord",
    "LockEntityDecoder",
    "LockStateDecoder",
    "MediaPlayerEntity",
    "MediaPlayerStateRecord",
    "MediaPlayerEntityDecoder",
    "MediaPlayerStateDecoder",
    # Bluetooth
    "BluetoothLEAdvertisement",
    "BluetoothLEAdvertisementDecoder",
    "format_mac_address",
    # Services
    "ServiceArgType",
    "ServiceArgument",
    "ServiceInfo",
    "ServiceInfoDecoder",
    "HomeAssistantServiceCall",
    "HomeAssistantServiceDecoder",
]
