"""Tests for entity command builders."""

import pytest

from espconnect.commands import (
    Command,
    button_command,
    camera_image_request,
    climate_command,
    cover_command,
    execute_service,
    fan_command,
    light_command,
    lock_command,
    media_player_command,
    number_command,
    select_command,
    siren_command,
    switch_command,
)
from espconnect.parsers.tag_reader import TagReader
from espconnect.protocol.constants import ClimateMode, LockCommand, MessageType


def read(command: Command) -> TagReader:
    """Decode a command's payload."""
    return TagReader.from_payload(command.encode())


class TestSwitchCommand:
    """Tests for switch_command."""

    def test_on(self):
        """Test turning a switch on."""
        cmd = switch_command(0x1234ABCD, True)

        assert cmd.message_type == MessageType.SWITCH_COMMAND_REQUEST
        assert cmd.expected_response == MessageType.SWITCH_STATE_RESPONSE
        assert cmd.encode() == b"\x0d\xcd\xab\x34\x12\x10\x01"

    def test_off_omits_state(self):
        """Test the false state is left at its default."""
        reader = read(switch_command(7, False))
        assert reader.get_long(1) == 7
        assert not reader.has(2)


class TestLightCommand:
    """Tests for light_command."""

    def test_only_given_fields_flagged(self):
        """Test has flags are set only for supplied arguments."""
        reader = read(light_command(1, state=True, brightness=0.6))

        assert reader.get_bool(2) is True
        assert reader.get_bool(3) is True
        assert reader.get_bool(4) is True
        assert reader.get_float(5) == pytest.approx(0.6)
        assert not reader.has(6)
        assert not reader.has(18)

    def test_turn_off_sets_has_state(self):
        """Test state=False still sets has_state."""
        reader = read(light_command(1, state=False))
        assert reader.get_bool(2) is True
        assert not reader.has(3)

    def test_rgb_and_effect(self):
        """Test colour channels and effect name."""
        reader = read(light_command(1, rgb=(1.0, 0.5, 0.25), effect="Rainbow"))

        assert reader.get_bool(6) is True
        assert reader.get_float(7) == pytest.approx(1.0)
        assert reader.get_float(8) == pytest.approx(0.5)
        assert reader.get_float(9) == pytest.approx(0.25)
        assert reader.get_bool(18) is True
        assert reader.get_str(19) == "Rainbow"

    def test_transition_length(self):
        """Test the transition is sent in milliseconds."""
        reader = read(light_command(1, transition_length=1500))
        assert reader.get_int(15) == 1500

    def test_expected_response(self):
        """Test light commands are acknowledged by a light state."""
        assert light_command(1).expected_response == MessageType.LIGHT_STATE_RESPONSE


class TestOtherCommands:
    """Tests for the remaining builders."""

    def test_cover_position_and_stop(self):
        """Test cover position and stop flags."""
        reader = read(cover_command(3, position=0.0, stop=True))

        assert reader.get_bool(4) is True
        assert not reader.has(5)
        assert not reader.has(6)
        assert reader.get_bool(8) is True

    def test_fan_speed(self):
        """Test fan speed level."""
        cmd = fan_command(4, speed_level=3)
        reader = read(cmd)

        assert cmd.expected_response == MessageType.FAN_STATE_RESPONSE
        assert reader.get_bool(10) is True
        assert reader.get_int(11) == 3

    def test_lock_with_code(self):
        """Test lock command and code."""
        cmd = lock_command(5, LockCommand.UNLOCK, code="1234")
        reader = read(cmd)

        assert cmd.expected_response == MessageType.LOCK_STATE_RESPONSE
        assert reader.get_int(2) == LockCommand.UNLOCK
        assert reader.get_bool(3) is True
        assert reader.get_str(4) == "1234"

    def test_climate(self):
        """Test climate mode and target temperature."""
        cmd = climate_command(6, mode=ClimateMode.HEAT, target_temperature=21.5, preset=2)
        reader = read(cmd)

        assert cmd.expected_response == MessageType.CLIMATE_STATE_RESPONSE
        assert reader.get_int(3) == ClimateMode.HEAT
        assert reader.get_float(5) == pytest.approx(21.5)
        assert reader.get_int(19) == 2
        assert not reader.has(6)

    def test_media_player_volume(self):
        """Test media player volume."""
        reader = read(media_player_command(7, volume=0.3))
        assert reader.get_bool(4) is True
        assert reader.get_float(5) == pytest.approx(0.3)

    def test_siren(self):
        """Test siren tone and duration."""
        reader = read(siren_command(8, state=True, tone="alarm", duration=10))
        assert reader.get_str(5) == "alarm"
        assert reader.get_int(7) == 10

    def test_select(self):
        """Test select option."""
        cmd = select_command(9, "Eco")
        assert cmd.expected_response == MessageType.SELECT_STATE_RESPONSE
        assert read(cmd).get_str(2) == "Eco"

    @pytest.mark.parametrize(
        "cmd",
        [button_command(1), number_command(1, 2.5), execute_service(1), camera_image_request()],
    )
    def test_fire_and_forget(self, cmd):
        """Test commands without an acknowledging state update."""
        assert cmd.expected_response is None

    def test_number_state(self):
        """Test the number value is a float."""
        assert read(number_command(10, 2.5)).get_float(2) == pytest.approx(2.5)

    def test_camera_image_request(self):
        """Test the single-image flag."""
        reader = read(camera_image_request())
        assert reader.get_bool(1) is True
        assert reader.get_bool(2) is False
