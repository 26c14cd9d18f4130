"""Discovery node models."""

from enum import Enum
from typing import Dict, Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class NodeClass(str, Enum):
    """Kind of node returned by a protocol browse."""

    OBJECT = "Object"
    VARIABLE = "Variable"
    ARRAY = "Array"
    ITEM = "Item"
    REFERENCE = "Reference"


class DiscoveredNode(BaseModel):
    """Candidate tag definition produced by browsing a device."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1, description="Node id")
    text: Optional[str] = Field(None, description="Node display text")
    type: Optional[str] = Field(None, description="Node data type")
    node_class: NodeClass = Field(NodeClass.VARIABLE, alias="class", description="Node kind")
    property: Optional[str] = Field(None, description="Property path of a reference value")
    todefine: Optional[Dict[str, Any]] = Field(None, description="Value descriptor to select")
