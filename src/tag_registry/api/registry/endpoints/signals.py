"""Live signal endpoints."""

from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from tag_registry.api.registry.dependencies import get_registry_service, get_signal_source
from tag_registry.api.registry.models.signals import SignalValue
from tag_registry.api.registry.registry_service import RegistryService
from tag_registry.api.registry.services.signal_source import MemorySignalSource

router = APIRouter(prefix="/registry/signals", tags=["signals"])


class RefreshResponse(BaseModel):
    """Live value refresh result."""
    updated: int
    timestamp: datetime


@router.put("", response_model=RefreshResponse)
async def push_signals(
    signals: Dict[str, SignalValue],
    service: RegistryService = Depends(get_registry_service),
    source: MemorySignalSource = Depends(get_signal_source)
):
    """Push a signal snapshot and overlay it at once."""
    source.update({key: value.model_dump() for key, value in signals.items()})
    updated = await service.refresh_values()
    return RefreshResponse(updated=updated, timestamp=datetime.now())


@router.post("/refresh", response_model=RefreshResponse)
async def refresh_signals(service: RegistryService = Depends(get_registry_service)):
    """Overlay the current signal source values."""
    updated = await service.refresh_values()
    return RefreshResponse(updated=updated, timestamp=datetime.now())


@router.get("/values", response_model=Dict[str, Any])
async def get_values(service: RegistryService = Depends(get_registry_service)):
    """Get live values keyed by signal id."""
    return service.get_tag_values()
