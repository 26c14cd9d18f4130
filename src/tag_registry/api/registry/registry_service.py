"""Registry service.

Facade over the tag registry engine. Structural mutations and live value
overlays of one device are serialized by a per-device lock; reads do not
lock.
"""

import asyncio
from typing import Any, Dict, List, Mapping, Optional, Sequence

from loguru import logger

from tag_registry.api.base.base_errors import (
    create_error,
    NOT_FOUND,
    SERVICE_ERROR,
    VALIDATION_ERROR
)
from tag_registry.api.base.base_exceptions import StorageError, ValidationError
from tag_registry.api.base.base_service import BaseService
from tag_registry.api.registry.models.config import RegistrySettings
from tag_registry.api.registry.models.devices import AddMode, Device, TagDraft
from tag_registry.api.registry.models.discovery import DiscoveredNode
from tag_registry.api.registry.models.responses import DeviceSummary, MutationResponse, TagRow
from tag_registry.api.registry.models.signals import SignalKey, SignalValue
from tag_registry.api.registry.services.address_resolver import resolve_address, tag_label
from tag_registry.api.registry.services.device_store import DeviceStore
from tag_registry.api.registry.services.discovery_import import import_discovered
from tag_registry.api.registry.services.live_overlay import overlay_values, parse_signals
from tag_registry.api.registry.services.protocols import EditMode, get_policy
from tag_registry.api.registry.services.signal_source import MemorySignalSource, SignalSource
from tag_registry.api.registry.services.tag_reconciler import apply_edit, clear_all, remove_tag


class RegistryService(BaseService):
    """Service owning the configured devices and their tags."""

    def __init__(
        self,
        store: DeviceStore,
        signal_source: Optional[SignalSource] = None,
        settings: Optional[RegistrySettings] = None,
        version: str = "1.0.0"
    ):
        """Initialize registry service.

        Args:
            store: Device source
            signal_source: Live signal source, defaults to an empty in-memory source
            settings: Registry settings
            version: Service version
        """
        super().__init__(name="registry", version=version)
        self._store = store
        self._signal_source = signal_source if signal_source is not None else MemorySignalSource()
        self._settings = settings or RegistrySettings()
        self._devices: Dict[str, Device] = {}
        self._locks: Dict[str, asyncio.Lock] = {}
        self._refresh_task: Optional[asyncio.Task] = None

    @property
    def settings(self) -> RegistrySettings:
        """Get registry settings."""
        return self._settings

    @property
    def signal_source(self) -> SignalSource:
        """Get live signal source."""
        return self._signal_source

    async def _start(self) -> None:
        """Load devices and start the live value refresh."""
        try:
            devices = await self._store.load_devices()
        except StorageError as e:
            logger.error(f"Failed to load devices: {e.message}")
            raise

        self._devices = {device.name: device for device in devices}
        self._locks = {name: asyncio.Lock() for name in self._devices}
        self._refresh_task = asyncio.create_task(self._refresh_loop())
        logger.info(f"Registry loaded {len(self._devices)} devices")

    async def _stop(self) -> None:
        """Stop the refresh and drop loaded devices."""
        if self._refresh_task:
            self._refresh_task.cancel()
            try:
                await self._refresh_task
            except asyncio.CancelledError:
                pass
            self._refresh_task = None

        self._devices.clear()
        self._locks.clear()

    def _check_running(self) -> None:
        if not self.is_running:
            raise create_error(
                message=f"{self.name} service not running",
                status_code=SERVICE_ERROR,
                context={"service": self.name}
            )

    def _get_device(self, name: str) -> Device:
        self._check_running()
        device = self._devices.get(name)
        if device is None:
            raise create_error(
                message=f"Device not found: {name}",
                status_code=NOT_FOUND,
                context={"device": name}
            )
        return device

    def _lock(self, name: str) -> asyncio.Lock:
        return self._locks.setdefault(name, asyncio.Lock())

    async def _commit(self, device: Device) -> None:
        """Persist the device tags after a structural change."""
        try:
            await self._store.set_device_tags(device)
        except StorageError as e:
            logger.error(f"Failed to persist tags of {device.name}: {e.message}")
            raise create_error(
                message=f"Failed to persist tags of {device.name}",
                status_code=SERVICE_ERROR,
                context={"device": device.name},
                cause=e
            )

    def _result(self, device: Device, applied: bool, tag_ids: Sequence[str]) -> MutationResponse:
        return MutationResponse(
            device=device.name,
            applied=applied,
            tag_ids=list(tag_ids),
            tag_count=len(device.tags)
        )

    def list_devices(self) -> List[DeviceSummary]:
        """List loaded devices."""
        self._check_running()
        summaries = []
        for device in self._devices.values():
            policy = get_policy(device.type)
            summaries.append(DeviceSummary(
                name=device.name,
                type=device.type,
                tag_count=len(device.tags),
                add_mode=policy.add_mode,
                editable=policy.editable
            ))
        return summaries

    def get_device(self, name: str) -> Device:
        """Get a device by name.

        Raises:
            HTTPException: If the device is unknown (404)
        """
        return self._get_device(name)

    def tag_rows(self, name: str) -> List[TagRow]:
        """Get the display rows of a device's tags."""
        device = self._get_device(name)
        return [
            TagRow(
                id=tag.id,
                label=tag_label(tag, device.type),
                address=resolve_address(tag, device.type),
                device=device.name,
                type=tag.type,
                min=tag.min,
                max=tag.max,
                value=tag.value
            )
            for tag in list(device.tags.values())
        ]

    def get_tag_values(self) -> Dict[str, Any]:
        """Get live values of all tags keyed by wire signal id."""
        self._check_running()
        separator = self._settings.signal_separator
        return {
            SignalKey(device.name, tag_id).format(separator): tag.value
            for device in list(self._devices.values())
            for tag_id, tag in list(device.tags.items())
        }

    async def add_tag(self, name: str, draft: TagDraft) -> MutationResponse:
        """Add a hand-entered tag to a device.

        Raises:
            HTTPException: If the device is unknown (404) or its tags come from discovery (422)
        """
        device = self._get_device(name)
        policy = get_policy(device.type)
        if policy.add_mode != AddMode.MANUAL:
            raise create_error(
                message=f"Tags of {device.type.value} devices are added by {policy.add_mode.value}",
                status_code=VALIDATION_ERROR,
                context={"device": name, "add_mode": policy.add_mode.value}
            )

        async with self._lock(name):
            applied = apply_edit(None, draft, device)
            if applied:
                await self._commit(device)

        logger.info(f"Add tag {draft.name} to {name}: {'applied' if applied else 'duplicate'}")
        return self._result(device, applied, [draft.name] if applied else [])

    async def edit_tag(
        self,
        name: str,
        tag_id: str,
        draft: Optional[TagDraft] = None,
        nodes: Optional[Sequence[DiscoveredNode]] = None
    ) -> MutationResponse:
        """Apply the result of the tag edit surface.

        Topic based devices treat an edit as a re-browse and import the
        returned nodes; all other devices commit the edited fields.

        Raises:
            HTTPException: If the device or tag is unknown (404) or the payload
                does not fit the protocol (422)
        """
        device = self._get_device(name)
        policy = get_policy(device.type)

        if policy.edit == EditMode.REBROWSE:
            if nodes is None:
                raise create_error(
                    message=f"Edit of {device.type.value} tags requires browsed nodes",
                    status_code=VALIDATION_ERROR,
                    context={"device": name, "tag": tag_id}
                )
            return await self.import_discovered(name, nodes)

        if not policy.editable:
            raise create_error(
                message=f"Tags of {device.type.value} devices are edited by {policy.add_mode.value}",
                status_code=VALIDATION_ERROR,
                context={"device": name, "tag": tag_id, "add_mode": policy.add_mode.value}
            )

        if draft is None:
            raise create_error(
                message=f"Edit of {device.type.value} tags requires a tag draft",
                status_code=VALIDATION_ERROR,
                context={"device": name, "tag": tag_id}
            )

        async with self._lock(name):
            existing = device.tags.get(tag_id)
            if existing is None:
                raise create_error(
                    message=f"Tag not found: {tag_id}",
                    status_code=NOT_FOUND,
                    context={"device": name, "tag": tag_id}
                )
            applied = apply_edit(existing, draft, device)
            if applied:
                await self._commit(device)

        committed_id = draft.name if policy.id_from_name else existing.id
        return self._result(device, applied, [committed_id] if applied else [])

    async def import_discovered(self, name: str, nodes: Sequence[DiscoveredNode]) -> MutationResponse:
        """Import nodes selected on the discovery surface.

        Raises:
            HTTPException: If the device is unknown (404) or has no discovery (422)
        """
        device = self._get_device(name)
        async with self._lock(name):
            previous_ids = set(device.tags)
            try:
                inserted = import_discovered(nodes, device, device.type)
            except ValidationError as e:
                raise create_error(
                    message=e.message,
                    status_code=VALIDATION_ERROR,
                    context={"device": name},
                    cause=e
                )
            await self._commit(device)
            changed = bool(inserted) or set(device.tags) != previous_ids

        return self._result(device, changed, inserted)

    async def remove_tag(self, name: str, tag_id: str) -> MutationResponse:
        """Remove a tag; removing a missing tag is a no-op."""
        device = self._get_device(name)
        async with self._lock(name):
            removed = remove_tag(device, tag_id)
            if removed:
                await self._commit(device)

        logger.info(f"Remove tag {tag_id} from {name}: {'removed' if removed else 'absent'}")
        return self._result(device, removed, [tag_id] if removed else [])

    async def clear_tags(self, name: str) -> MutationResponse:
        """Remove all tags of a device. Confirmation is the caller's job."""
        device = self._get_device(name)
        async with self._lock(name):
            removed = clear_all(device)
            await self._commit(device)

        logger.info(f"Cleared {removed} tags from {name}")
        return self._result(device, removed > 0, [])

    async def apply_signals(self, signals: Mapping[str, Any]) -> int:
        """Overlay a wire signal snapshot onto the loaded tags.

        Returns:
            Number of tags updated
        """
        self._check_running()
        return await self._overlay(signals)

    async def refresh_values(self) -> int:
        """Pull the signal source and overlay its values.

        Returns:
            Number of tags updated
        """
        self._check_running()
        return await self._overlay(await self._signal_source.get_all_signals())

    async def _overlay(self, signals: Mapping[str, Any]) -> int:
        by_device: Dict[str, Dict[SignalKey, SignalValue]] = {}
        for key, value in parse_signals(signals, self._settings.signal_separator).items():
            if key.device in self._devices:
                by_device.setdefault(key.device, {})[key] = value

        updated = 0
        for name, values in by_device.items():
            device = self._devices.get(name)
            if device is None:
                continue
            async with self._lock(name):
                updated += overlay_values(values, {name: device})
        return updated

    async def _refresh_loop(self) -> None:
        """Refresh live values at the configured interval."""
        interval = self._settings.refresh_interval
        while True:
            try:
                updated = await self._overlay(await self._signal_source.get_all_signals())
                if updated:
                    logger.trace(f"Refreshed {updated} live values")
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"Error refreshing live values: {str(e)}")
            await asyncio.sleep(interval)

    async def health(self) -> Dict[str, Any]:
        """Get service health status."""
        health = await super().health()
        refresh_ok = self._refresh_task is not None and not self._refresh_task.done()
        health["components"] = {
            "devices": {"status": "ok", "count": len(self._devices)},
            "tags": {"status": "ok", "count": sum(len(d.tags) for d in self._devices.values())},
            "refresh": {
                "status": "ok" if refresh_ok else "error",
                "error": None if refresh_ok else "Live value refresh not running"
            }
        }
        health["is_healthy"] = self.is_running and refresh_ok
        return health
