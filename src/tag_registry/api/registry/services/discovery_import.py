"""Import of discovered nodes into a device."""

from typing import List, Sequence, Union

from loguru import logger

from tag_registry.api.base.base_exceptions import ValidationError
from tag_registry.api.registry.models.devices import Device, DeviceType, Tag, TagOptions
from tag_registry.api.registry.models.discovery import DiscoveredNode, NodeClass
from tag_registry.api.registry.services.protocols import DiscoveryMode, get_policy
from tag_registry.api.registry.services.tag_reconciler import clear_all, reconcile


def node_to_tag(node: DiscoveredNode, protocol: Union[DeviceType, str]) -> Tag:
    """Translate a browsed node into a candidate tag.

    Raises:
        ValidationError: If the protocol has no discovery
    """
    policy = get_policy(protocol)
    if policy.discovery == DiscoveryMode.NONE:
        raise ValidationError(
            f"{DeviceType(protocol).value} devices do not support discovery",
            {"protocol": DeviceType(protocol).value}
        )

    if policy.discovery == DiscoveryMode.TOPIC:
        return Tag(
            id=node.id,
            name=node.text or node.id,
            type=node.type,
            address=node.property or node.id
        )

    tag = Tag(id=node.id, name=node.id, type=node.type, address=node.id)
    if policy.shows_label:
        tag.label = node.text
    if policy.discovery == DiscoveryMode.REPLACE and node.node_class == NodeClass.REFERENCE:
        # Reference values live under a property path and need a selected field
        tag.memaddress = node.property
        tag.options = TagOptions.model_validate(node.todefine or {})
    return tag


def import_discovered(
    nodes: Sequence[DiscoveredNode],
    device: Device,
    protocol: Union[DeviceType, str, None] = None
) -> List[str]:
    """Merge discovered nodes into a device.

    Web API devices are rediscovered wholesale, so their tags are cleared
    first. All other browsable protocols merge incrementally.

    Args:
        nodes: Selected nodes
        device: Target device
        protocol: Protocol to import as, defaults to the device type

    Returns:
        Ids of the inserted tags

    Raises:
        ValidationError: If the protocol has no discovery
    """
    protocol = DeviceType(protocol or device.type)
    candidates = [node_to_tag(node, protocol) for node in nodes]

    if get_policy(protocol).discovery == DiscoveryMode.REPLACE:
        removed = clear_all(device)
        logger.debug(f"Cleared {removed} tags on {device.name} before import")

    inserted = [tag.id for tag in candidates if reconcile(tag, device)]
    logger.info(
        f"Imported {len(inserted)} of {len(candidates)} discovered tags into {device.name}"
    )
    return inserted
