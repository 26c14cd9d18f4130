"""Protocol address resolution.

Display addresses are derived from the raw tag fields according to the
device protocol. Resolution never raises: when the composite form cannot be
built the raw address is shown instead.
"""

from typing import Union

from tag_registry.api.registry.models.devices import DeviceType, Tag
from tag_registry.api.registry.services.protocols import AddressPolicy, get_policy

# Between base address and selected value of a composite address
SELECTOR_SEPARATOR = " / "


def _offset_address(tag: Tag) -> str:
    try:
        return str(int(tag.address) + int(tag.memaddress))
    except (TypeError, ValueError):
        return tag.address or ""


def _selector_address(tag: Tag) -> str:
    address = tag.address or ""
    if tag.options is not None and tag.options.selval is not None:
        return f"{address}{SELECTOR_SEPARATOR}{tag.options.selval}"
    return address


def resolve_address(tag: Tag, device_type: Union[DeviceType, str]) -> str:
    """Get the effective address of a tag.

    Args:
        tag: Tag to resolve
        device_type: Protocol of the owning device

    Returns:
        Display address, the raw address for unrecognized combinations
    """
    try:
        policy = get_policy(device_type)
    except (KeyError, ValueError):
        return tag.address or ""

    if policy.address == AddressPolicy.OFFSET:
        return _offset_address(tag)
    if policy.address == AddressPolicy.SELECTOR:
        return _selector_address(tag)
    return tag.address or ""


def tag_label(tag: Tag, device_type: Union[DeviceType, str]) -> str:
    """Get the text shown for a tag: discovery label or tag name."""
    if get_policy(device_type).shows_label and tag.label:
        return tag.label
    return tag.name
