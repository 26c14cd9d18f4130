"""Device sources.

The registry loads its devices from a store and hands every device back to
the store after its tag collection changed.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Union

import aiofiles
import yaml
from loguru import logger
from pydantic import ValidationError as ModelValidationError

from tag_registry.api.base.base_exceptions import StorageError
from tag_registry.api.registry.models.devices import Device


class DeviceStore(Protocol):
    """Persistence collaborator of the registry."""

    async def load_devices(self) -> List[Device]:
        """Load all configured devices."""
        ...

    async def set_device_tags(self, device: Device) -> None:
        """Persist the current tag collection of a device."""
        ...


def dump_device(device: Device) -> Dict[str, Any]:
    """Serialize a device without runtime values."""
    return device.model_dump(mode="json", exclude_none=True)


class MemoryDeviceStore:
    """Device store kept in memory."""

    def __init__(self, devices: Optional[List[Device]] = None):
        """Initialize store.

        Args:
            devices: Initial devices
        """
        self._data: Dict[str, Dict[str, Any]] = {
            device.name: dump_device(device) for device in devices or []
        }

    async def load_devices(self) -> List[Device]:
        """Load copies of the stored devices."""
        return [Device.model_validate(data) for data in self._data.values()]

    async def set_device_tags(self, device: Device) -> None:
        """Store the device tags."""
        self._data[device.name] = dump_device(device)

    def get_saved(self, name: str) -> Dict[str, Any]:
        """Get the last stored state of a device."""
        return self._data[name]


class YamlDeviceStore:
    """Device store backed by a YAML file.

    File layout::

        devices:
          - name: plc1
            type: ModbusTCP
            tags:
              T1: {name: T1, address: "100", memaddress: "4"}
    """

    def __init__(self, path: Union[str, Path]):
        """Initialize store.

        Args:
            path: Devices file
        """
        self._path = Path(path)
        self._data: Dict[str, Dict[str, Any]] = {}

    @property
    def path(self) -> Path:
        """Get devices file path."""
        return self._path

    async def load_devices(self) -> List[Device]:
        """Load devices from the file.

        A missing file is an empty registry.

        Raises:
            StorageError: If the file cannot be parsed
        """
        if not self._path.exists():
            logger.warning(f"Devices file not found: {self._path}, starting empty")
            self._data = {}
            return []

        try:
            async with aiofiles.open(self._path, "r") as f:
                content = yaml.safe_load(await f.read()) or {}
            devices = [Device.model_validate(entry) for entry in content.get("devices") or []]
        except (yaml.YAMLError, ModelValidationError, AttributeError) as e:
            raise StorageError(
                f"Invalid devices file {self._path}: {str(e)}",
                {"path": str(self._path)}
            )

        self._data = {device.name: dump_device(device) for device in devices}
        logger.info(f"Loaded {len(devices)} devices from {self._path}")
        return devices

    async def set_device_tags(self, device: Device) -> None:
        """Write the device tags to the file.

        Raises:
            StorageError: If the file cannot be written
        """
        self._data[device.name] = dump_device(device)
        temp_file = self._path.with_suffix(self._path.suffix + ".tmp")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(temp_file, "w") as f:
                await f.write(yaml.safe_dump(
                    {"devices": list(self._data.values())},
                    default_flow_style=False,
                    sort_keys=False
                ))
            os.replace(temp_file, self._path)
        except OSError as e:
            if temp_file.exists():
                temp_file.unlink()
            raise StorageError(
                f"Failed to save devices file {self._path}: {str(e)}",
                {"path": str(self._path), "device": device.name}
            )
        logger.debug(f"Saved {len(device.tags)} tags of {device.name}")
