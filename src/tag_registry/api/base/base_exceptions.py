"""Base exceptions for the registry."""

from typing import Optional, Dict, Any


class ServiceError(Exception):
    """Base exception for service errors.

    The error context is copied into the HTTP error detail when the
    exception is translated at the service boundary.
    """

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        """Initialize service error.

        Args:
            message: Error message
            context: Additional error context
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}


class ValidationError(ServiceError):
    """Raised when an operation is not valid for the target device."""
    pass


class ConfigurationError(ServiceError):
    """Raised when the registry configuration cannot be loaded."""
    pass


class StorageError(ServiceError):
    """Raised when the device source fails to load or persist devices."""
    pass
