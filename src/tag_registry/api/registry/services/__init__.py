"""Registry engine components."""

from tag_registry.api.registry.services.address_resolver import resolve_address, tag_label
from tag_registry.api.registry.services.device_store import DeviceStore, MemoryDeviceStore, YamlDeviceStore
from tag_registry.api.registry.services.discovery_import import import_discovered, node_to_tag
from tag_registry.api.registry.services.live_overlay import overlay, overlay_values, parse_signals
from tag_registry.api.registry.services.protocols import (
    PROTOCOL_POLICIES,
    ProtocolPolicy,
    add_mode,
    get_policy,
    is_manually_editable
)
from tag_registry.api.registry.services.signal_source import MemorySignalSource, SignalSource
from tag_registry.api.registry.services.tag_reconciler import apply_edit, clear_all, reconcile, remove_tag

__all__ = [
    # Address resolution
    "resolve_address",
    "tag_label",

    # Protocol policies
    "PROTOCOL_POLICIES",
    "ProtocolPolicy",
    "add_mode",
    "get_policy",
    "is_manually_editable",

    # Reconciliation
    "apply_edit",
    "clear_all",
    "reconcile",
    "remove_tag",

    # Discovery and live values
    "import_discovered",
    "node_to_tag",
    "overlay",
    "overlay_values",
    "parse_signals",

    # Collaborators
    "DeviceStore",
    "MemoryDeviceStore",
    "YamlDeviceStore",
    "MemorySignalSource",
    "SignalSource"
]
