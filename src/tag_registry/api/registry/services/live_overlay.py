"""Live value overlay.

Copies values of the flat signal feed onto device tags. Only the runtime
value field is written; signals of unknown devices or tags are ignored.
"""

from typing import Any, Dict, Mapping

from tag_registry.api.registry.models.devices import Device
from tag_registry.api.registry.models.signals import SIGNAL_SEPARATOR, SignalKey, SignalValue


def parse_signals(
    signals: Mapping[str, Any],
    separator: str = SIGNAL_SEPARATOR
) -> Dict[SignalKey, SignalValue]:
    """Convert a wire signal mapping into typed keys and values.

    Ids without a device and tag part are dropped.
    """
    parsed: Dict[SignalKey, SignalValue] = {}
    for raw_key, raw_value in signals.items():
        key = SignalKey.parse(raw_key, separator)
        if key is None:
            continue
        if isinstance(raw_value, SignalValue):
            parsed[key] = raw_value
        elif isinstance(raw_value, Mapping):
            parsed[key] = SignalValue.model_validate(dict(raw_value))
        else:
            parsed[key] = SignalValue(value=getattr(raw_value, "value", raw_value))
    return parsed


def overlay_values(values: Mapping[SignalKey, SignalValue], devices: Mapping[str, Device]) -> int:
    """Write signal values onto matching tags.

    Returns:
        Number of tags updated
    """
    updated = 0
    for key, signal in values.items():
        device = devices.get(key.device)
        if device is None:
            continue
        tag = device.tags.get(key.tag)
        if tag is None:
            continue
        tag.value = signal.value
        updated += 1
    return updated


def overlay(
    signals: Mapping[str, Any],
    devices: Mapping[str, Device],
    separator: str = SIGNAL_SEPARATOR
) -> int:
    """Overlay a wire signal feed keyed by "<device><separator><tag>".

    Args:
        signals: Signal values by wire id
        devices: Devices by index
        separator: Delimiter between device and tag

    Returns:
        Number of tags updated
    """
    return overlay_values(parse_signals(signals, separator), devices)
