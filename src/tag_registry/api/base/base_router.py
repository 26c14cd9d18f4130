"""Base router module."""

from typing import List, Dict, Any
from fastapi import APIRouter
from loguru import logger
from pydantic import BaseModel

from tag_registry.api.base.base_service import BaseService


class HealthResponse(BaseModel):
    """Health check response model."""

    is_healthy: bool
    services: List[Dict[str, Any]]


class BaseRouter(APIRouter):
    """Router exposing a health endpoint over a set of services."""

    def __init__(self, **kwargs: Any):
        """Initialize router with health check endpoint."""
        super().__init__(**kwargs)
        self.services: List[BaseService] = []

        @self.get("/health", response_model=HealthResponse)
        async def check_health() -> HealthResponse:
            """Check health of all registered services."""
            services_health = []
            for service in self.services:
                try:
                    services_health.append(await service.health())
                except Exception as e:
                    logger.error(f"Health check failed for {service.name} service: {e}")
                    services_health.append({
                        "is_healthy": False,
                        "status": "error",
                        "service": service.name,
                        "error": str(e)
                    })

            return HealthResponse(
                services=services_health,
                is_healthy=bool(services_health) and all(h["is_healthy"] for h in services_health)
            )
