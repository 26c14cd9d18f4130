"""Base API components.

This module provides the building blocks shared by the registry API:

- BaseService: Base class for services with lifecycle management
- BaseRouter: Router with health check endpoint
- create_error: Utility for creating consistent HTTP errors
- ServiceError/ValidationError: Domain exceptions carrying error context
"""

from tag_registry.api.base.base_service import BaseService
from tag_registry.api.base.base_router import BaseRouter
from tag_registry.api.base.base_errors import create_error
from tag_registry.api.base.base_exceptions import ServiceError, ValidationError

__all__ = [
    "BaseService",
    "BaseRouter",
    "create_error",
    "ServiceError",
    "ValidationError",
]
