"""Per-protocol behavior table.

Every protocol-specific decision of the registry reads this table, so a new
DeviceType member needs exactly one new entry here.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Union

from tag_registry.api.registry.models.devices import AddMode, DeviceType


class AddressPolicy(str, Enum):
    """How the effective address is built from raw tag fields."""

    RAW = "raw"            # address as is
    OFFSET = "offset"      # address + memaddress as integers
    SELECTOR = "selector"  # address / selected option value


class DiscoveryMode(str, Enum):
    """How discovered nodes are imported."""

    NONE = "none"          # tags are entered by hand
    MERGE = "merge"        # incremental merge of browsed nodes
    REPLACE = "replace"    # clear device then import browsed nodes
    TOPIC = "topic"        # nodes are subscribed topics, merged


class EditMode(str, Enum):
    """What an edit of an existing tag means."""

    FIELDS = "fields"
    REBROWSE = "rebrowse"


@dataclass(frozen=True)
class ProtocolPolicy:
    """Protocol-specific behavior of one device type."""
    address: AddressPolicy
    discovery: DiscoveryMode
    add_mode: AddMode
    edit: EditMode
    id_from_name: bool
    shows_label: bool
    editable: bool


PROTOCOL_POLICIES: Dict[DeviceType, ProtocolPolicy] = {
    DeviceType.MODBUS_TCP: ProtocolPolicy(
        address=AddressPolicy.OFFSET,
        discovery=DiscoveryMode.NONE,
        add_mode=AddMode.MANUAL,
        edit=EditMode.FIELDS,
        id_from_name=True,
        shows_label=False,
        editable=True
    ),
    DeviceType.MODBUS_RTU: ProtocolPolicy(
        address=AddressPolicy.OFFSET,
        discovery=DiscoveryMode.NONE,
        add_mode=AddMode.MANUAL,
        edit=EditMode.FIELDS,
        id_from_name=True,
        shows_label=False,
        editable=True
    ),
    DeviceType.SIEMENS_S7: ProtocolPolicy(
        address=AddressPolicy.RAW,
        discovery=DiscoveryMode.NONE,
        add_mode=AddMode.MANUAL,
        edit=EditMode.FIELDS,
        id_from_name=True,
        shows_label=False,
        editable=True
    ),
    DeviceType.OPCUA: ProtocolPolicy(
        address=AddressPolicy.RAW,
        discovery=DiscoveryMode.MERGE,
        add_mode=AddMode.BROWSE,
        edit=EditMode.FIELDS,
        id_from_name=False,
        shows_label=False,
        editable=False
    ),
    DeviceType.BACNET: ProtocolPolicy(
        address=AddressPolicy.RAW,
        discovery=DiscoveryMode.MERGE,
        add_mode=AddMode.BROWSE,
        edit=EditMode.FIELDS,
        id_from_name=False,
        shows_label=True,
        editable=False
    ),
    DeviceType.WEBAPI: ProtocolPolicy(
        address=AddressPolicy.SELECTOR,
        discovery=DiscoveryMode.REPLACE,
        add_mode=AddMode.BROWSE,
        edit=EditMode.FIELDS,
        id_from_name=False,
        shows_label=True,
        editable=False
    ),
    DeviceType.MQTT_CLIENT: ProtocolPolicy(
        address=AddressPolicy.RAW,
        discovery=DiscoveryMode.TOPIC,
        add_mode=AddMode.TOPIC,
        edit=EditMode.REBROWSE,
        id_from_name=False,
        shows_label=False,
        editable=False
    ),
}


def get_policy(device_type: Union[DeviceType, str]) -> ProtocolPolicy:
    """Get the policy of a device type.

    Raises:
        ValueError: If the device type is unknown
    """
    return PROTOCOL_POLICIES[DeviceType(device_type)]


def is_manually_editable(device_type: Union[DeviceType, str]) -> bool:
    """Whether tags of this protocol are entered through the field editor."""
    return get_policy(device_type).editable


def add_mode(device_type: Union[DeviceType, str]) -> AddMode:
    """Dialog the add-tag action opens for this protocol."""
    return get_policy(device_type).add_mode
