"""Registry API endpoints."""

from tag_registry.api.registry.endpoints.devices import router as devices_router
from tag_registry.api.registry.endpoints.signals import router as signals_router
from tag_registry.api.registry.endpoints.tags import router as tags_router

__all__ = [
    "devices_router",
    "signals_router",
    "tags_router"
]
