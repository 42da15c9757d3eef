"""Ports - interfaces/protocols for external dependencies."""

from .calendar_system import CalendarSystem
from .marker_snapshot import MarkerSnapshotStore

__all__ = [
    "CalendarSystem",
    "MarkerSnapshotStore",
]
