"""Tests for the registry HTTP API."""

import httpx
import pytest
import yaml
from fastapi import status
from fastapi.testclient import TestClient
from httpx import ASGITransport

from tag_registry.api.base.base_exceptions import ConfigurationError
from tag_registry.api.registry.registry_app import create_registry_app, load_config


class TestDeviceEndpoints:
    """Test device and tag endpoints."""

    def test_list_devices(self, test_client):
        """Test device listing."""
        response = test_client.get("/registry/devices")
        assert response.status_code == status.HTTP_200_OK
        devices = {d["name"]: d for d in response.json()}
        assert devices["plc1"]["type"] == "ModbusTCP"
        assert devices["plc1"]["tag_count"] == 2
        assert devices["weather"]["add_mode"] == "browse"

    def test_get_device(self, test_client):
        """Test device configuration."""
        response = test_client.get("/registry/devices/plc1")
        assert response.status_code == status.HTTP_200_OK
        assert set(response.json()["tags"]) == {"T1", "T2"}

    def test_get_unknown_device(self, test_client):
        """Test unknown device."""
        response = test_client.get("/registry/devices/nope")
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"]["context"]["device"] == "nope"

    def test_tag_rows(self, test_client):
        """Test tag rows with resolved addresses."""
        response = test_client.get("/registry/devices/plc1/tags")
        rows = {row["id"]: row for row in response.json()}
        assert rows["T1"]["address"] == "104"

    def test_add_tag(self, test_client, memory_store):
        """Test adding a tag."""
        response = test_client.post("/registry/devices/plc1/tags", json={"name": "T3", "address": "10"})
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["applied"] is True
        assert "T3" in memory_store.get_saved("plc1")["tags"]

    def test_add_tag_empty_name(self, test_client):
        """Test empty identity is rejected at the boundary."""
        response = test_client.post("/registry/devices/plc1/tags", json={"name": ""})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_rename_tag(self, test_client):
        """Test rename through the API."""
        response = test_client.put("/registry/devices/plc1/tags/T1", json={"draft": {"name": "B"}})
        assert response.json()["tag_ids"] == ["B"]
        tags = test_client.get("/registry/devices/plc1").json()["tags"]
        assert "B" in tags
        assert "T1" not in tags

    def test_edit_requires_payload(self, test_client):
        """Test edit request without draft or nodes."""
        response = test_client.put("/registry/devices/plc1/tags/T1", json={})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_import_discovered(self, test_client):
        """Test discovery import with reference node."""
        response = test_client.post("/registry/devices/weather/discovered", json={"nodes": [
            {"id": "/temp", "text": "Temperature", "class": "Reference",
             "property": "data.t", "todefine": {"selval": "c"}}
        ]})
        assert response.json()["tag_ids"] == ["/temp"]
        rows = test_client.get("/registry/devices/weather/tags").json()
        assert rows == [{
            "id": "/temp", "label": "Temperature", "address": "/temp / c", "device": "weather",
            "type": None, "min": None, "max": None, "value": None
        }]

    def test_remove_tag_with_slash(self, test_client):
        """Test tag ids containing slashes."""
        response = test_client.delete("/registry/devices/weather/tags//old")
        assert response.json()["applied"] is True

    def test_remove_missing_tag(self, test_client):
        """Test removal of an absent tag."""
        response = test_client.delete("/registry/devices/plc1/tags/nope")
        assert response.status_code == status.HTTP_200_OK
        assert response.json()["applied"] is False

    def test_clear_tags(self, test_client):
        """Test clearing all tags."""
        response = test_client.delete("/registry/devices/plc1/tags")
        assert response.json()["tag_count"] == 0


class TestSignalEndpoints:
    """Test live signal endpoints."""

    def test_push_signals(self, test_client):
        """Test pushed signals show up in tag rows."""
        response = test_client.put("/registry/signals", json={"plc1#T1": {"value": 42}, "x#y": {"value": 0}})
        assert response.json()["updated"] == 1
        rows = {row["id"]: row for row in test_client.get("/registry/devices/plc1/tags").json()}
        assert rows["T1"]["value"] == 42
        assert test_client.get("/registry/signals/values").json()["plc1#T1"] == 42

    def test_refresh(self, test_client, signal_source):
        """Test refresh from the signal source."""
        signal_source.update({"opc#n": {"value": 1}})
        response = test_client.post("/registry/signals/refresh")
        assert response.json()["updated"] == 0

    def test_websocket_tag_updates(self, test_client):
        """Test websocket sends tag values on request."""
        test_client.put("/registry/signals", json={"plc1#T2": {"value": True}})
        with test_client.websocket_connect("/ws/registry/tags") as websocket:
            message = websocket.receive_json()
            assert message["type"] == "tag_update"
            assert message["data"]["plc1#T2"] is True
            websocket.send_text("next")
            assert websocket.receive_json()["type"] == "tag_update"


class TestHealthAndConfig:
    """Test health endpoint and configuration loading."""

    def test_health(self, test_client):
        """Test health endpoint."""
        response = test_client.get("/registry/health")
        body = response.json()
        assert body["is_healthy"] is True
        assert body["services"][0]["service"] == "registry"

    @pytest.mark.asyncio
    async def test_not_started(self, app):
        """Test requests before the service started."""
        async with httpx.AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            response = await client.get("/registry/devices")
        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE

    def test_load_config(self, tmp_path):
        """Test config file loading."""
        path = tmp_path / "registry.yaml"
        path.write_text(yaml.safe_dump({
            "version": "2.0.0",
            "service": {"port": 9000},
            "registry": {"devices_file": str(tmp_path / "devices.yaml"), "signal_separator": "#"}
        }))
        config = load_config(path)
        assert config.version == "2.0.0"
        assert config.service.port == 9000
        assert config.service.log_level == "INFO"
        assert config.registry.signal_separator == "#"

    def test_load_config_missing(self, tmp_path):
        """Test missing config file."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "none.yaml")

    def test_load_config_invalid(self, tmp_path):
        """Test invalid config values."""
        path = tmp_path / "registry.yaml"
        path.write_text("registry:\n  refresh_interval: -1\n")
        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_yaml_store_app(self, tmp_path):
        """Test app persisting to the configured devices file."""
        devices_file = tmp_path / "devices.yaml"
        devices_file.write_text(yaml.safe_dump({"devices": [{"name": "s7", "type": "SiemensS7"}]}))
        path = tmp_path / "registry.yaml"
        path.write_text(yaml.safe_dump({"registry": {"devices_file": str(devices_file)}}))

        app = create_registry_app(load_config(path))
        with TestClient(app) as client:
            client.post("/registry/devices/s7/tags", json={"name": "Speed", "address": "DB1.DBD4"})

        saved = yaml.safe_load(devices_file.read_text())
        assert saved["devices"][0]["tags"]["Speed"]["address"] == "DB1.DBD4"
