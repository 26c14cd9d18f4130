"""Device and tag data models."""

from enum import Enum
from typing import Dict, Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class DeviceType(str, Enum):
    """Field protocol of a configured device."""

    MODBUS_TCP = "ModbusTCP"
    MODBUS_RTU = "ModbusRTU"
    SIEMENS_S7 = "SiemensS7"
    OPCUA = "OPCUA"
    BACNET = "BACnet"
    WEBAPI = "WebAPI"
    MQTT_CLIENT = "MQTTclient"


class AddMode(str, Enum):
    """Dialog the add-tag action opens for a protocol."""

    BROWSE = "browse"
    TOPIC = "topic"
    MANUAL = "manual"


class TagOptions(BaseModel):
    """Secondary selectable value of a composite tag."""

    model_config = ConfigDict(extra="allow")

    selval: Optional[Any] = Field(None, description="Selected value token")


class Tag(BaseModel):
    """Addressable data point of a device."""

    id: Optional[str] = Field(None, description="Identity key within the device")
    name: str = Field("", description="Tag name")
    label: Optional[str] = Field(None, description="Display text supplied by discovery")
    type: Optional[str] = Field(None, description="Data type")
    address: Optional[str] = Field(None, description="Raw protocol address")
    memaddress: Optional[str] = Field(None, description="Secondary address component")
    options: Optional[TagOptions] = Field(None, description="Selectable value descriptor")
    min: Optional[float] = Field(None, description="Engineering range minimum")
    max: Optional[float] = Field(None, description="Engineering range maximum")
    value: Optional[Any] = Field(None, exclude=True, description="Live runtime value")

    @field_validator("address", "memaddress", mode="before")
    @classmethod
    def coerce_address(cls, value: Any) -> Any:
        """Accept register numbers given as integers."""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class TagDraft(BaseModel):
    """Edited tag fields returned by the tag edit surface."""

    name: str = Field(..., min_length=1, description="Tag name")
    type: Optional[str] = Field(None, description="Data type")
    address: Optional[str] = Field(None, description="Raw protocol address")
    memaddress: Optional[str] = Field(None, description="Secondary address component")
    min: Optional[float] = Field(None, description="Engineering range minimum")
    max: Optional[float] = Field(None, description="Engineering range maximum")

    @field_validator("address", "memaddress", mode="before")
    @classmethod
    def coerce_address(cls, value: Any) -> Any:
        """Accept register numbers given as integers."""
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class Device(BaseModel):
    """Configured field device owning its tags."""

    name: str = Field(..., min_length=1, description="Device name")
    type: DeviceType = Field(..., description="Device protocol")
    tags: Dict[str, Tag] = Field(default_factory=dict, description="Tags by id")

    @model_validator(mode="after")
    def normalize_tag_ids(self) -> "Device":
        """Give legacy tags without id their name as identity.

        Tags are re-keyed by id; of two records claiming the same id the
        first is kept.
        """
        tags: Dict[str, Tag] = {}
        for key, tag in self.tags.items():
            if not tag.id:
                tag.id = tag.name or key
            if not tag.name:
                tag.name = tag.id
            tags.setdefault(tag.id, tag)
        self.tags = tags
        return self
