"""Tests for ConnectionRegistry and DeviceRecord."""

import threading

import pytest

from espconnect.parsers.entities import ServiceInfo
from espconnect.registry import ConnectionRegistry, DeviceRecord
from espconnect.session import SessionState


class TestConnectionRegistry:
    """Tests for ConnectionRegistry."""

    @pytest.fixture
    def registry(self):
        """Create an empty registry."""
        return ConnectionRegistry()

    def test_state_created_on_first_use(self, registry):
        """Test a new device starts disconnected with empty buffers."""
        state = registry.state_for("kitchen")

        assert state.device_id == "kitchen"
        assert state.session_state is SessionState.DISCONNECTED
        assert state.receive_buffer == bytearray()
        assert len(state.pending) == 0
        assert state.reconnect.next_delay_seconds == 0
        assert "kitchen" in registry

    def test_same_state_returned(self, registry):
        """Test lookups return the same object."""
        assert registry.state_for("kitchen") is registry.state_for("kitchen")
        assert registry.receive_buffer("kitchen") is registry.state_for("kitchen").receive_buffer
        assert registry.pending("kitchen") is registry.state_for("kitchen").pending
        assert registry.record("kitchen") is registry.state_for("kitchen").record

    def test_devices_isolated(self, registry):
        """Test each device has its own buffer."""
        registry.receive_buffer("a").extend(b"\x00\x05")
        assert registry.receive_buffer("b") == bytearray()

    def test_remove(self, registry):
        """Test removing a device."""
        registry.state_for("kitchen")

        assert registry.remove("kitchen") is True
        assert registry.remove("kitchen") is False
        assert "kitchen" not in registry
        assert len(registry) == 0

    def test_device_ids(self, registry):
        """Test listing known devices."""
        registry.state_for("a")
        registry.state_for("b")

        assert registry.device_ids() == ["a", "b"]
        assert repr(registry) == "ConnectionRegistry(devices=['a', 'b'])"

    def test_concurrent_state_for(self, registry):
        """Test concurrent first lookups create one state."""
        results = []

        def lookup():
            results.append(registry.state_for("shared"))

        threads = [threading.Thread(target=lookup) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(registry) == 1
        assert all(state is results[0] for state in results)


class TestDeviceRecord:
    """Tests for DeviceRecord services."""

    def test_add_and_find_service(self):
        """Test services are found by object id."""
        record = DeviceRecord()
        record.add_service(ServiceInfo("reboot", 1))
        record.add_service(ServiceInfo("set_level", 2))

        assert record.find_service("set_level").key == 2
        assert record.find_service("missing") is None

    def test_add_service_replaces_same_key(self):
        """Test a re-announced service replaces the old one."""
        record = DeviceRecord()
        record.add_service(ServiceInfo("reboot", 1))
        record.add_service(ServiceInfo("restart", 1))

        assert [s.object_id for s in record.services] == ["restart"]
