"""Registry API package."""

from tag_registry.api.registry.registry_service import RegistryService
from tag_registry.api.registry.registry_app import create_registry_app, load_config, setup_logging
from tag_registry.api.registry.endpoints import devices_router, signals_router, tags_router
from tag_registry.api.registry.dependencies import get_registry_service, get_signal_source

__all__ = [
    # Core service
    "RegistryService",

    # Application
    "create_registry_app",
    "load_config",
    "setup_logging",

    # Routers
    "devices_router",
    "signals_router",
    "tags_router",

    # Dependencies
    "get_registry_service",
    "get_signal_source"
]
