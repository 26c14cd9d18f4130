"""Registry data models."""

from tag_registry.api.registry.models.devices import (
    AddMode,
    Device,
    DeviceType,
    Tag,
    TagDraft,
    TagOptions
)
from tag_registry.api.registry.models.discovery import DiscoveredNode, NodeClass
from tag_registry.api.registry.models.signals import SIGNAL_SEPARATOR, SignalKey, SignalValue
from tag_registry.api.registry.models.config import RegistryConfig, RegistrySettings, ServiceSettings
from tag_registry.api.registry.models.responses import (
    DeviceSummary,
    DiscoveryRequest,
    MutationResponse,
    TagEditRequest,
    TagRow
)

__all__ = [
    # Device models
    "AddMode",
    "Device",
    "DeviceType",
    "Tag",
    "TagDraft",
    "TagOptions",

    # Discovery and signals
    "DiscoveredNode",
    "NodeClass",
    "SIGNAL_SEPARATOR",
    "SignalKey",
    "SignalValue",

    # Configuration
    "RegistryConfig",
    "RegistrySettings",
    "ServiceSettings",

    # API models
    "DeviceSummary",
    "DiscoveryRequest",
    "MutationResponse",
    "TagEditRequest",
    "TagRow"
]
