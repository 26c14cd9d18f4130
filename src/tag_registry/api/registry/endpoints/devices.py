"""Device and tag endpoints."""

from typing import List

from fastapi import APIRouter, Depends

from tag_registry.api.registry.dependencies import get_registry_service
from tag_registry.api.registry.models.devices import Device, TagDraft
from tag_registry.api.registry.models.responses import (
    DeviceSummary,
    DiscoveryRequest,
    MutationResponse,
    TagEditRequest,
    TagRow
)
from tag_registry.api.registry.registry_service import RegistryService

router = APIRouter(prefix="/registry/devices", tags=["devices"])


@router.get("", response_model=List[DeviceSummary])
async def list_devices(service: RegistryService = Depends(get_registry_service)):
    """List configured devices."""
    return service.list_devices()


@router.get("/{name}", response_model=Device)
async def get_device(name: str, service: RegistryService = Depends(get_registry_service)):
    """Get device configuration."""
    return service.get_device(name)


@router.get("/{name}/tags", response_model=List[TagRow])
async def get_tags(name: str, service: RegistryService = Depends(get_registry_service)):
    """Get tag rows with resolved addresses and live values."""
    return service.tag_rows(name)


@router.post("/{name}/tags", response_model=MutationResponse)
async def add_tag(
    name: str,
    draft: TagDraft,
    service: RegistryService = Depends(get_registry_service)
):
    """Add a hand-entered tag."""
    return await service.add_tag(name, draft)


@router.put("/{name}/tags/{tag_id:path}", response_model=MutationResponse)
async def edit_tag(
    name: str,
    tag_id: str,
    request: TagEditRequest,
    service: RegistryService = Depends(get_registry_service)
):
    """Apply an edited tag or re-browsed topics."""
    return await service.edit_tag(name, tag_id, draft=request.draft, nodes=request.nodes)


@router.delete("/{name}/tags/{tag_id:path}", response_model=MutationResponse)
async def remove_tag(name: str, tag_id: str, service: RegistryService = Depends(get_registry_service)):
    """Remove one tag."""
    return await service.remove_tag(name, tag_id)


@router.delete("/{name}/tags", response_model=MutationResponse)
async def clear_tags(name: str, service: RegistryService = Depends(get_registry_service)):
    """Remove all tags of a device."""
    return await service.clear_tags(name)


@router.post("/{name}/discovered", response_model=MutationResponse)
async def import_discovered(
    name: str,
    request: DiscoveryRequest,
    service: RegistryService = Depends(get_registry_service)
):
    """Import nodes selected on the discovery surface."""
    return await service.import_discovered(name, request.nodes)
