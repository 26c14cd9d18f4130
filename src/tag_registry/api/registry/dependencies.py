"""Dependencies for the registry API."""

from fastapi import Request

from tag_registry.api.base.base_errors import create_error, SERVICE_ERROR
from tag_registry.api.registry.registry_service import RegistryService
from tag_registry.api.registry.services.signal_source import MemorySignalSource


def get_registry_service(request: Request) -> RegistryService:
    """Get registry service from app state.

    Raises:
        HTTPException: If service is not initialized (503)
    """
    service = getattr(request.app.state, "service", None)
    if service is None:
        raise create_error(
            message="Registry service not initialized",
            status_code=SERVICE_ERROR
        )
    return service


def get_signal_source(request: Request) -> MemorySignalSource:
    """Get the pushed signal snapshot from app state.

    Raises:
        HTTPException: If the app was built without a push source (503)
    """
    source = getattr(request.app.state, "signal_source", None)
    if not isinstance(source, MemorySignalSource):
        raise create_error(
            message="Signal push not available",
            status_code=SERVICE_ERROR
        )
    return source

