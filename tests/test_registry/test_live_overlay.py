"""Tests for the live value overlay."""

from tag_registry.api.registry.models.signals import SignalKey, SignalValue
from tag_registry.api.registry.services.live_overlay import overlay, overlay_values, parse_signals


class TestOverlay:
    """Test overlay of signal feed values."""

    def test_scoped_update(self, modbus_device):
        """Test only the addressed tag changes."""
        updated = overlay({"0#T1": {"value": 42}}, {"0": modbus_device}, separator="#")
        assert updated == 1
        assert modbus_device.tags["T1"].value == 42
        assert modbus_device.tags["T2"].value is None

    def test_unknown_device_ignored(self, modbus_device):
        """Test signal of an unloaded device."""
        before = modbus_device.model_dump()
        assert overlay({"7#T1": {"value": 1}}, {"0": modbus_device}, separator="#") == 0
        assert modbus_device.tags["T1"].value is None
        assert modbus_device.model_dump() == before

    def test_unknown_tag_ignored(self, modbus_device):
        """Test signal of an unknown tag on a known device."""
        assert overlay({"0#T9": {"value": 1}}, {"0": modbus_device}, separator="#") == 0
        assert "T9" not in modbus_device.tags

    def test_malformed_key_ignored(self, modbus_device):
        """Test signal id without delimiter."""
        assert overlay({"T1": {"value": 1}}, {"0": modbus_device}, separator="#") == 0

    def test_identity_untouched(self, modbus_device):
        """Test overlay only writes values."""
        before = modbus_device.model_dump()
        overlay({"0#T1": {"value": 3}, "0#T2": {"value": True}}, {"0": modbus_device}, separator="#")
        assert modbus_device.model_dump() == before
        assert modbus_device.tags["T2"].value is True

    def test_default_separator(self, modbus_device):
        """Test wire ids with the default delimiter."""
        assert overlay({"plc1^~^T1": {"value": 7}}, {"plc1": modbus_device}) == 1
        assert modbus_device.tags["T1"].value == 7

    def test_typed_overlay(self, modbus_device):
        """Test overlay with typed keys."""
        values = {SignalKey("plc1", "T2"): SignalValue(value=0.5)}
        assert overlay_values(values, {"plc1": modbus_device}) == 1
        assert modbus_device.tags["T2"].value == 0.5


class TestParseSignals:
    """Test wire signal parsing."""

    def test_value_shapes(self):
        """Test mapping, model and bare values."""
        parsed = parse_signals({
            "a#1": {"value": 1, "timestamp": "t"},
            "a#2": SignalValue(value=2),
            "a#3": 3,
            "bad": {"value": 4},
        }, "#")
        assert parsed[SignalKey("a", "1")].value == 1
        assert parsed[SignalKey("a", "2")].value == 2
        assert parsed[SignalKey("a", "3")].value == 3
        assert len(parsed) == 3
