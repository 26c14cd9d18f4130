"""Base service module."""

from datetime import datetime
from typing import Dict, Any, Optional

from fastapi import HTTPException
from loguru import logger

from tag_registry.api.base.base_errors import (
    create_error,
    SERVICE_ERROR,
    NOT_IMPLEMENTED,
    CONFLICT
)


class BaseService:
    """Base service with lifecycle management."""

    def __init__(self, name: Optional[str] = None, version: str = "1.0.0"):
        """Initialize service.

        Args:
            name: Service name (defaults to lowercase class name)
            version: Service version reported by health checks
        """
        self._is_running = False
        self._start_time: Optional[datetime] = None
        self._name = name or self.__class__.__name__.lower()
        self._version = version

    @property
    def name(self) -> str:
        """Get service name."""
        return self._name

    @property
    def version(self) -> str:
        """Get service version."""
        return self._version

    @property
    def is_running(self) -> bool:
        """Get service running state."""
        return self._is_running

    @property
    def uptime(self) -> float:
        """Get service uptime in seconds."""
        if self._start_time is None:
            return 0.0
        return (datetime.now() - self._start_time).total_seconds()

    async def start(self) -> None:
        """Start service.

        Raises:
            HTTPException: If service is already running (409) or fails to start (503)
        """
        if self.is_running:
            raise create_error(
                message=f"{self.name} service is already running",
                status_code=CONFLICT,
                context={"service": self.name}
            )

        try:
            await self._start()
            self._is_running = True
            self._start_time = datetime.now()
            logger.info(f"{self.name} service started")
        except NotImplementedError as e:
            raise create_error(
                message=f"{self.name} service start not implemented",
                status_code=NOT_IMPLEMENTED,
                context={"service": self.name},
                cause=e
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Failed to start {self.name} service: {e}")
            raise create_error(
                message=f"Failed to start {self.name} service",
                status_code=SERVICE_ERROR,
                context={"service": self.name},
                cause=e
            )

    async def stop(self) -> None:
        """Stop service.

        Raises:
            HTTPException: If service is not running (409) or fails to stop (503)
        """
        if not self.is_running:
            raise create_error(
                message=f"{self.name} service is not running",
                status_code=CONFLICT,
                context={"service": self.name}
            )

        try:
            await self._stop()
            self._is_running = False
            self._start_time = None
            logger.info(f"{self.name} service stopped")
        except NotImplementedError as e:
            raise create_error(
                message=f"{self.name} service stop not implemented",
                status_code=NOT_IMPLEMENTED,
                context={"service": self.name},
                cause=e
            )
        except Exception as e:
            logger.error(f"Failed to stop {self.name} service: {e}")
            raise create_error(
                message=f"Failed to stop {self.name} service",
                status_code=SERVICE_ERROR,
                context={"service": self.name},
                cause=e
            )

    async def _start(self) -> None:
        """Start implementation."""
        raise NotImplementedError()

    async def _stop(self) -> None:
        """Stop implementation."""
        raise NotImplementedError()

    async def health(self) -> Dict[str, Any]:
        """Get service health status.

        Returns:
            Dict with health status
        """
        return {
            "is_healthy": self.is_running,
            "status": "running" if self.is_running else "stopped",
            "service": self.name,
            "version": self.version,
            "uptime": self.uptime,
            "context": {
                "service": self.name
            }
        }
