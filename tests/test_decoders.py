"""Tests for the decoder registry and entity decoders."""

import pytest

from espconnect.parsers import DecoderRegistry, TagReader, create_default_registry, parse_entity_info
from espconnect.parsers.entities import (
    BluetoothLEAdvertisement,
    HomeAssistantServiceCall,
    LightState,
    SensorState,
    ServiceArgType,
    ServiceInfo,
    SwitchEntity,
    SwitchState,
    SwitchStateDecoder,
    color_capabilities,
    format_mac_address,
)
from espconnect.protocol.constants import (
    LIST_ENTITIES_RESPONSES,
    ClimateMode,
    CoverOperation,
    EntityCategory,
    LockState,
    MessageType,
    WireType,
)
from espconnect.protocol.tags import decode_tags, encode_tags

LD = WireType.LENGTH_DELIMITED
VI = WireType.VARINT
F32 = WireType.FIXED32


@pytest.fixture
def registry() -> DecoderRegistry:
    """Registry with every built-in decoder."""
    return create_default_registry()


def listing_fields(object_id: str, key: int, name: str) -> dict:
    return {
        1: (object_id, LD),
        2: (key, F32),
        3: (name, LD),
        4: (f"esp32-test{object_id}", LD),
    }


class TestDecoderRegistry:
    """Tests for DecoderRegistry bookkeeping."""

    def test_register_and_get(self):
        """Test a registered decoder is found by message type."""
        registry = DecoderRegistry()
        decoder = SwitchStateDecoder()
        registry.register(decoder)

        assert registry.get(MessageType.SWITCH_STATE_RESPONSE) is decoder
        assert registry.has(26)

    def test_unknown_type_decodes_to_none(self):
        """Test an unregistered type returns None."""
        assert DecoderRegistry().decode(99, {}) is None

    def test_unregister(self):
        """Test unregister reports whether a decoder was removed."""
        registry = DecoderRegistry()
        registry.register(SwitchStateDecoder())

        assert registry.unregister(MessageType.SWITCH_STATE_RESPONSE) is True
        assert registry.unregister(MessageType.SWITCH_STATE_RESPONSE) is False

    def test_clear(self, registry):
        """Test clear removes every decoder."""
        registry.clear()
        assert registry.registered_types == frozenset()

    def test_default_registry_covers_listings(self, registry):
        """Test every listing response except the done marker has a decoder."""
        listings = LIST_ENTITIES_RESPONSES - {MessageType.LIST_ENTITIES_DONE_RESPONSE}
        assert listings <= registry.registered_types

    def test_default_registry_size(self, registry):
        """Test the number of built-in decoders."""
        assert len(registry.registered_types) == 32
        assert repr(registry) == "DecoderRegistry(decoders=32)"


class TestEntityInfo:
    """Tests for the common listing fields."""

    def test_common_fields(self):
        """Test object id, key, name and unique id."""
        reader = TagReader(decode_tags(encode_tags(listing_fields("relay", 0x1234ABCD, "Relay"))))
        info = parse_entity_info(reader)

        assert info.object_id == "relay"
        assert info.key == 0x1234ABCD
        assert info.name == "Relay"
        assert info.unique_id == "esp32-testrelay"
        assert info.device_id == ""

    def test_device_id(self):
        """Test the sub-device id is read from field 26."""
        fields = listing_fields("relay", 1, "Relay")
        fields[26] = (7, VI)
        info = parse_entity_info(TagReader(decode_tags(encode_tags(fields))))
        assert info.device_id == "7"


class TestEntityDecoders:
    """Tests for individual platform decoders."""

    def test_switch_listing(self, registry):
        """Test a switch listing decodes every field."""
        fields = listing_fields("relay", 0x1234ABCD, "Relay")
        fields.update({
            5: ("mdi:power", LD),
            6: (True, VI),
            8: (EntityCategory.CONFIG, VI),
            9: ("outlet", LD),
        })
        entity = registry.decode(MessageType.LIST_ENTITIES_SWITCH_RESPONSE, decode_tags(encode_tags(fields)))

        assert isinstance(entity, SwitchEntity)
        assert entity.key == 0x1234ABCD
        assert entity.icon == "mdi:power"
        assert entity.assumed_state is True
        assert entity.disabled_by_default is False
        assert entity.entity_category == EntityCategory.CONFIG
        assert entity.device_class == "outlet"
        assert entity.platform == "switch"

    def test_unknown_entity_category_kept_as_int(self, registry):
        """Test an enum value newer than this library passes through."""
        fields = listing_fields("relay", 1, "Relay")
        fields[8] = (9, VI)
        entity = registry.decode(MessageType.LIST_ENTITIES_SWITCH_RESPONSE, decode_tags(encode_tags(fields)))
        assert entity.entity_category == 9

    def test_switch_state_digital_hint(self, registry):
        """Test the is_digital hint is carried on state updates."""
        tags = decode_tags(encode_tags({1: (5, F32), 2: (True, VI)}))

        assert registry.decode(MessageType.SWITCH_STATE_RESPONSE, tags) == SwitchState(5, True, False)
        assert registry.decode(MessageType.SWITCH_STATE_RESPONSE, tags, is_digital=True) == SwitchState(5, True, True)

    def test_sensor_state_missing(self, registry):
        """Test missing_state is exposed as has_state False."""
        tags = decode_tags(encode_tags({1: (3, F32), 2: (23.25, F32), 3: (True, VI)}))
        state = registry.decode(MessageType.SENSOR_STATE_RESPONSE, tags)

        assert isinstance(state, SensorState)
        assert state.state == pytest.approx(23.25)
        assert state.has_state is False

    def test_light_state(self, registry):
        """Test colour mode capabilities are expanded."""
        tags = decode_tags(encode_tags({
            1: (9, F32),
            2: (True, VI),
            3: (0.5, F32),
            4: (1.0, F32),
            11: (35, VI),
            9: ("Rainbow", LD),
        }))
        state = registry.decode(MessageType.LIGHT_STATE_RESPONSE, tags)

        assert isinstance(state, LightState)
        assert state.brightness == pytest.approx(0.5)
        assert state.red == pytest.approx(1.0)
        assert state.green == 0.0
        assert state.color_mode_capabilities == ("ON/OFF", "BRIGHTNESS", "RGB")
        assert state.effect == "Rainbow"

    def test_light_listing_color_modes(self, registry):
        """Test supported colour modes map to their capabilities."""
        fields = listing_fields("strip", 2, "Strip")
        fields[12] = ([1, 11], VI)
        fields[11] = (["Rainbow"], LD)
        entity = registry.decode(MessageType.LIST_ENTITIES_LIGHT_RESPONSE, decode_tags(encode_tags(fields)))

        assert entity.effects == ("Rainbow",)
        assert entity.supported_color_modes == {
            1: ("ON/OFF",),
            11: ("ON/OFF", "BRIGHTNESS", "COLOR TEMPERATURE"),
        }

    def test_cover_state(self, registry):
        """Test cover position and operation."""
        tags = decode_tags(encode_tags({1: (4, F32), 3: (0.25, F32), 5: (CoverOperation.IS_CLOSING, VI)}))
        state = registry.decode(MessageType.COVER_STATE_RESPONSE, tags)

        assert state.position == pytest.approx(0.25)
        assert state.current_operation == CoverOperation.IS_CLOSING

    def test_climate_state(self, registry):
        """Test climate mode and temperatures."""
        tags = decode_tags(encode_tags({
            1: (6, F32),
            2: (ClimateMode.HEAT, VI),
            3: (19.5, F32),
            4: (21.0, F32),
            11: ("quiet", LD),
        }))
        state = registry.decode(MessageType.CLIMATE_STATE_RESPONSE, tags)

        assert state.mode == ClimateMode.HEAT
        assert state.current_temperature == pytest.approx(19.5)
        assert state.target_temperature == pytest.approx(21.0)
        assert state.custom_fan_mode == "quiet"

    def test_lock_state(self, registry):
        """Test lock state enum."""
        tags = decode_tags(encode_tags({1: (8, F32), 2: (LockState.JAMMED, VI)}))
        assert registry.decode(MessageType.LOCK_STATE_RESPONSE, tags).state == LockState.JAMMED


class TestServiceDecoders:
    """Tests for service announcements and Home Assistant calls."""

    def test_service_listing_args(self, registry):
        """Test declared arguments are decoded from nested messages."""
        args = [
            encode_tags({1: ("level", LD), 2: (ServiceArgType.INT, VI)}),
            encode_tags({1: ("enabled", LD)}),
        ]
        tags = decode_tags(encode_tags({1: ("set_level", LD), 2: (0xABCD, F32), 3: (args, LD)}))
        service = registry.decode(MessageType.LIST_ENTITIES_SERVICES_RESPONSE, tags)

        assert isinstance(service, ServiceInfo)
        assert service.object_id == "set_level"
        assert service.key == 0xABCD
        assert [(a.name, a.type) for a in service.args] == [
            ("level", ServiceArgType.INT),
            ("enabled", ServiceArgType.BOOL),
        ]

    def test_homeassistant_service_call(self, registry):
        """Test data maps and the event flag."""
        data = [encode_tags({1: ("entity_id", LD), 2: ("light.hall", LD)})]
        tags = decode_tags(encode_tags({
            1: ("light.turn_on", LD),
            2: (data, LD),
            5: (True, VI),
        }))
        call = registry.decode(MessageType.HOMEASSISTANT_SERVICE_RESPONSE, tags)

        assert isinstance(call, HomeAssistantServiceCall)
        assert call.service == "light.turn_on"
        assert call.data == {"entity_id": "light.hall"}
        assert call.data_template == {}
        assert call.is_event is True


class TestBluetoothDecoder:
    """Tests for Bluetooth LE advertisements."""

    def test_format_mac_address(self):
        """Test leading zeros are kept."""
        assert format_mac_address(0x00000B2F1100) == "00:00:0b:2f:11:00"

    def test_advertisement(self, registry):
        """Test address, RSSI and service data."""
        service_data = [encode_tags({1: ("0000FE95-0000-1000-8000-00805F9B34FB", LD), 3: (b"\x01\x02", LD)})]
        tags = decode_tags(encode_tags({
            1: (0xA4C1380B2F11, VI),
            2: ("LYWSD03MMC", LD),
            3: (143, VI),
            4: (["0000FE95-0000-1000-8000-00805F9B34FB"], LD),
            5: (service_data, LD),
        }))
        adv = registry.decode(MessageType.BLUETOOTH_LE_ADVERTISEMENT_RESPONSE, tags)

        assert isinstance(adv, BluetoothLEAdvertisement)
        assert adv.address == "a4:c1:38:0b:2f:11"
        assert adv.name == "LYWSD03MMC"
        assert adv.rssi == -72
        assert adv.service_uuids == ("0000fe95-0000-1000-8000-00805f9b34fb",)
        assert adv.service_data == {"0000fe95-0000-1000-8000-00805f9b34fb": b"\x01\x02"}

    def test_legacy_service_data(self, registry):
        """Test service data sent as repeated ints."""
        entry = encode_tags({1: ("abcd", LD), 2: ([0x10, 0x20], VI)})
        tags = decode_tags(encode_tags({1: (1, VI), 6: ([entry], LD)}))
        adv = registry.decode(MessageType.BLUETOOTH_LE_ADVERTISEMENT_RESPONSE, tags)
        assert adv.manufacturer_data == {"abcd": b"\x10\x20"}


def test_color_capabilities_empty():
    """Test a zero colour mode has no capabilities."""
    assert color_capabilities(0) == ()
