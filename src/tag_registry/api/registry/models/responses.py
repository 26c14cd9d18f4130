"""Request and response models of the registry API."""

from typing import Any, List, Optional

from pydantic import BaseModel, Field, model_validator

from tag_registry.api.registry.models.devices import AddMode, DeviceType, TagDraft
from tag_registry.api.registry.models.discovery import DiscoveredNode


class DeviceSummary(BaseModel):
    """Device listing entry."""

    name: str
    type: DeviceType
    tag_count: int
    add_mode: AddMode
    editable: bool


class TagRow(BaseModel):
    """Display row of one tag."""

    id: str
    label: str
    address: str
    device: str
    type: Optional[str] = None
    min: Optional[float] = None
    max: Optional[float] = None
    value: Optional[Any] = None


class DiscoveryRequest(BaseModel):
    """Nodes selected on the discovery surface."""

    nodes: List[DiscoveredNode] = Field(default_factory=list)


class TagEditRequest(BaseModel):
    """Result of the tag edit surface: field draft or re-browsed topics."""

    draft: Optional[TagDraft] = None
    nodes: Optional[List[DiscoveredNode]] = None

    @model_validator(mode="after")
    def require_payload(self) -> "TagEditRequest":
        if self.draft is None and self.nodes is None:
            raise ValueError("Either draft or nodes is required")
        return self


class MutationResponse(BaseModel):
    """Outcome of a structural mutation."""

    device: str
    applied: bool
    tag_ids: List[str] = Field(default_factory=list)
    tag_count: int
