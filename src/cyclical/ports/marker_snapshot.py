"""Marker snapshot storage interface."""

from datetime import date
from typing import Protocol


class MarkerSnapshotStore(Protocol):
    """Interface for saving and loading marker state between sessions."""

    def load(self) -> dict[date, list[str]]:
        """Load previously saved markers. Returns {} if none."""
        ...

    def save(self, markers: dict[date, list[str]]) -> None:
        """Save markers."""
        ...
