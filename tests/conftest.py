"""Root test configuration and shared fixtures."""

import pytest
from fastapi.testclient import TestClient

from tag_registry.api.registry.models.config import RegistryConfig, RegistrySettings
from tag_registry.api.registry.models.devices import Device, DeviceType, Tag, TagOptions
from tag_registry.api.registry.registry_app import create_registry_app
from tag_registry.api.registry.registry_service import RegistryService
from tag_registry.api.registry.services.device_store import MemoryDeviceStore
from tag_registry.api.registry.services.signal_source import MemorySignalSource


@pytest.fixture
def modbus_device() -> Device:
    """Create Modbus TCP device with two tags."""
    return Device(
        name="plc1",
        type=DeviceType.MODBUS_TCP,
        tags={
            "T1": Tag(id="T1", name="T1", type="Int16", address="100", memaddress="4"),
            "T2": Tag(id="T2", name="T2", type="Bool", address="200", memaddress="0"),
        }
    )


@pytest.fixture
def webapi_device() -> Device:
    """Create Web API device with one previously discovered tag."""
    return Device(
        name="weather",
        type=DeviceType.WEBAPI,
        tags={
            "/old": Tag(id="/old", name="/old", label="old", address="/old"),
        }
    )


@pytest.fixture
def mqtt_device() -> Device:
    """Create MQTT client device with one subscribed topic."""
    return Device(
        name="broker",
        type=DeviceType.MQTT_CLIENT,
        tags={
            "t-1": Tag(id="t-1", name="plant/temp", address="plant/temp"),
        }
    )


@pytest.fixture
def opcua_device() -> Device:
    """Create OPC UA device without tags."""
    return Device(name="opc", type=DeviceType.OPCUA)


@pytest.fixture
def selector_tag() -> Tag:
    """Create Web API tag with a selected value."""
    return Tag(id="/temp", name="/temp", address="/temp", options=TagOptions(selval="c"))


@pytest.fixture
def memory_store(modbus_device, webapi_device, mqtt_device, opcua_device) -> MemoryDeviceStore:
    """Create in-memory device store."""
    return MemoryDeviceStore([modbus_device, webapi_device, mqtt_device, opcua_device])


@pytest.fixture
def signal_source() -> MemorySignalSource:
    """Create empty signal source."""
    return MemorySignalSource()


@pytest.fixture
async def registry_service(memory_store, signal_source):
    """Create started registry service."""
    service = RegistryService(
        store=memory_store,
        signal_source=signal_source,
        settings=RegistrySettings(signal_separator="#", refresh_interval=60.0)
    )
    await service.start()
    yield service
    if service.is_running:
        await service.stop()


@pytest.fixture
def app(memory_store, signal_source):
    """Create registry application backed by the memory store."""
    config = RegistryConfig(registry=RegistrySettings(signal_separator="#", refresh_interval=60.0))
    return create_registry_app(config, store=memory_store, signal_source=signal_source)


@pytest.fixture
def test_client(app):
    """Create test client with the service lifespan running."""
    with TestClient(app) as client:
        yield client
