"""Live signal models."""

from typing import Any, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field

# Wire delimiter between device and tag in signal ids
SIGNAL_SEPARATOR = "^~^"


class SignalKey(NamedTuple):
    """Composite key addressing one tag of one device."""

    device: str
    tag: str

    @classmethod
    def parse(cls, raw: str, separator: str = SIGNAL_SEPARATOR) -> Optional["SignalKey"]:
        """Split a wire signal id, returning None when it has no tag part."""
        device, sep, tag = raw.partition(separator)
        if not sep or not device or not tag:
            return None
        return cls(device, tag)

    def format(self, separator: str = SIGNAL_SEPARATOR) -> str:
        """Build the wire signal id."""
        return f"{self.device}{separator}{self.tag}"


class SignalValue(BaseModel):
    """Current value of a signal."""

    model_config = ConfigDict(extra="allow")

    value: Optional[Any] = Field(None, description="Current value")
