"""Registry API application."""

import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional, Union

import yaml
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import ValidationError as ModelValidationError

from tag_registry.api.base.base_exceptions import ConfigurationError
from tag_registry.api.base.base_router import BaseRouter
from tag_registry.api.registry.endpoints import devices_router, signals_router, tags_router
from tag_registry.api.registry.models.config import RegistryConfig
from tag_registry.api.registry.registry_service import RegistryService
from tag_registry.api.registry.services.device_store import DeviceStore, YamlDeviceStore
from tag_registry.api.registry.services.signal_source import MemorySignalSource, SignalSource

DEFAULT_CONFIG_PATH = Path("config/registry.yaml")


def setup_logging(log_level: str = "INFO", log_dir: Optional[Union[str, Path]] = "logs") -> None:
    """Setup logging configuration.

    Args:
        log_level: Console log level
        log_dir: Directory of the rotating log file, None to disable it
    """
    logger.remove()

    log_format = (
        "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
        "<level>{message}</level>"
    )
    logger.add(sys.stderr, format=log_format, level=log_level)

    if log_dir is None:
        return

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    file_format = (
        "{time:YYYY-MM-DD HH:mm:ss} | "
        "{level: <8} | "
        "{name}:{function}:{line} - "
        "{message}"
    )
    logger.add(
        str(log_path / "registry.log"),
        rotation="1 day",
        retention="30 days",
        format=file_format,
        level="DEBUG"
    )


def load_config(path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> RegistryConfig:
    """Load service configuration.

    Args:
        path: Configuration file

    Returns:
        RegistryConfig: Validated configuration

    Raises:
        FileNotFoundError: If config file not found
        ConfigurationError: If config file is invalid
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        return RegistryConfig.model_validate(data)
    except (yaml.YAMLError, ModelValidationError) as e:
        raise ConfigurationError(
            f"Invalid config file {config_path}: {str(e)}",
            {"path": str(config_path)}
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the registry service for the lifetime of the app."""
    service: RegistryService = app.state.service
    logger.info("Starting registry service...")
    await service.start()
    try:
        yield
    finally:
        logger.info("Stopping registry service...")
        if service.is_running:
            try:
                await service.stop()
            except Exception as e:
                logger.error(f"Failed to stop registry service: {e}")


def create_registry_app(
    config: Optional[RegistryConfig] = None,
    store: Optional[DeviceStore] = None,
    signal_source: Optional[SignalSource] = None
) -> FastAPI:
    """Create registry service application.

    Args:
        config: Service configuration, loaded from file when omitted
        store: Device source, defaults to the configured YAML file
        signal_source: Live signal source, defaults to a pushed snapshot

    Returns:
        FastAPI: Application instance
    """
    if config is None:
        config = load_config()

    app = FastAPI(
        title="Tag Registry Service",
        description="Device tag registry and live value overlay",
        version=config.version,
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle validation errors."""
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": jsonable_encoder(exc.errors())},
        )

    if store is None:
        store = YamlDeviceStore(config.registry.devices_file)
    if signal_source is None:
        signal_source = MemorySignalSource()

    service = RegistryService(
        store=store,
        signal_source=signal_source,
        settings=config.registry,
        version=config.version
    )
    app.state.service = service
    app.state.signal_source = signal_source
    app.state.config = config

    health_router = BaseRouter(prefix="/registry")
    health_router.services.append(service)

    app.include_router(health_router)
    app.include_router(devices_router)
    app.include_router(signals_router)
    app.include_router(tags_router)

    return app
