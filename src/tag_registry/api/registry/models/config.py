"""Registry configuration models."""

from pydantic import BaseModel, Field

from tag_registry.api.registry.models.signals import SIGNAL_SEPARATOR


class ServiceSettings(BaseModel):
    """HTTP service settings."""

    host: str = Field("0.0.0.0", description="Bind host")
    port: int = Field(8010, description="Bind port")
    log_level: str = Field("INFO", description="Console log level")


class RegistrySettings(BaseModel):
    """Registry engine settings."""

    devices_file: str = Field("config/devices.yaml", description="Device source file")
    signal_separator: str = Field(SIGNAL_SEPARATOR, min_length=1, description="Signal id delimiter")
    refresh_interval: float = Field(1.0, gt=0, description="Live value refresh period in seconds")


class RegistryConfig(BaseModel):
    """Registry service configuration."""

    version: str = Field("1.0.0", description="Service version")
    service: ServiceSettings = Field(default_factory=ServiceSettings)
    registry: RegistrySettings = Field(default_factory=RegistrySettings)
