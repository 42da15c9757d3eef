"""In-memory marker snapshot adapter."""

from datetime import date


class SessionSnapshotStore:
    """
    Keeps the last saved snapshot for the life of the process.

    Implements MarkerSnapshotStore protocol. Nothing is written to disk, so
    markers are gone after a restart.
    """

    def __init__(self):
        self._saved: dict[date, list[str]] = {}

    def load(self) -> dict[date, list[str]]:
        return {day: list(tags) for day, tags in self._saved.items()}

    def save(self, markers: dict[date, list[str]]) -> None:
        self._saved = {day: list(tags) for day, tags in markers.items()}
