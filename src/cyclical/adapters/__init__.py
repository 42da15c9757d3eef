"""Adapters - implementations of ports."""

from .gregorian import GregorianCalendar
from .session_snapshot import SessionSnapshotStore

__all__ = [
    "GregorianCalendar",
    "SessionSnapshotStore",
]
