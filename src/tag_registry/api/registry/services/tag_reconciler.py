"""Tag reconciliation.

Merges candidate tags into a device while keeping tag identity unique.
Duplicate inserts and removal of missing tags are silent no-ops so that
imports can be re-run safely.
"""

from typing import Optional

from loguru import logger

from tag_registry.api.registry.models.devices import Device, Tag, TagDraft
from tag_registry.api.registry.services.protocols import get_policy

# Fields copied from an edit draft onto the committed tag
DRAFT_FIELDS = ("name", "type", "address", "memaddress", "min", "max")


def is_identity_taken(tag_id: str, device: Device, ignore: Optional[str] = None) -> bool:
    """Check whether a tag id is already used in a device.

    A tag without id (legacy record) claims its name as identity.

    Args:
        tag_id: Candidate identity
        device: Device to search
        ignore: Key of an entry excluded from the check

    Returns:
        True if another entry holds this identity
    """
    for key, tag in device.tags.items():
        if key == ignore:
            continue
        if key == tag_id:
            return True
        if tag.id:
            if tag.id == tag_id:
                return True
        elif tag.name == tag_id:
            return True
    return False


def reconcile(candidate: Tag, device: Device) -> bool:
    """Insert a candidate tag unless its identity is already present.

    The candidate must carry a non-empty id and name.

    Returns:
        True if the tag was inserted
    """
    if is_identity_taken(candidate.id, device):
        logger.debug(f"Skipping duplicate tag {candidate.id} on {device.name}")
        return False
    device.tags[candidate.id] = candidate
    return True


def apply_edit(existing: Optional[Tag], edited: TagDraft, device: Device) -> bool:
    """Commit an edited tag, renaming it safely when its id changes.

    Args:
        existing: Tag being edited, None when adding a new tag
        edited: Edited fields
        device: Owning device

    Returns:
        True if the device now holds the edited tag. A rename onto an id
        held by another tag is rejected and the original tag is kept.
    """
    base = existing if existing is not None else Tag()
    committed = base.model_copy(update={field: getattr(edited, field) for field in DRAFT_FIELDS})
    if get_policy(device.type).id_from_name or not base.id:
        committed.id = edited.name

    if existing is None:
        return reconcile(committed, device)

    previous_id = existing.id
    if committed.id == previous_id:
        device.tags[previous_id] = committed
        return True

    if is_identity_taken(committed.id, device, ignore=previous_id):
        logger.warning(
            f"Rename of {previous_id} to {committed.id} on {device.name} rejected: id in use"
        )
        return False

    device.tags.pop(previous_id, None)
    logger.info(f"Renamed tag {previous_id} to {committed.id} on {device.name}")
    return reconcile(committed, device)


def remove_tag(device: Device, tag_id: str) -> bool:
    """Delete a tag if present.

    Returns:
        True if a tag was removed
    """
    return device.tags.pop(tag_id, None) is not None


def clear_all(device: Device) -> int:
    """Empty the tag collection of a device.

    Returns:
        Number of removed tags
    """
    count = len(device.tags)
    device.tags = {}
    return count
