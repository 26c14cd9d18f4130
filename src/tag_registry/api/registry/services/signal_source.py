"""Live signal sources."""

from typing import Any, Dict, Mapping, Protocol


class SignalSource(Protocol):
    """Telemetry collaborator supplying the flat signal feed."""

    async def get_all_signals(self) -> Dict[str, Dict[str, Any]]:
        """Get current values keyed by "<device><separator><tag>"."""
        ...


class MemorySignalSource:
    """Signal source holding the last pushed snapshot."""

    def __init__(self):
        """Initialize empty source."""
        self._signals: Dict[str, Dict[str, Any]] = {}

    async def get_all_signals(self) -> Dict[str, Dict[str, Any]]:
        """Get a copy of the current snapshot."""
        return dict(self._signals)

    def update(self, signals: Mapping[str, Dict[str, Any]]) -> None:
        """Merge pushed signal values into the snapshot."""
        self._signals.update(signals)

    def clear(self) -> None:
        """Drop all signals."""
        self._signals.clear()
