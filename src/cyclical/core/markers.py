"""In-memory per-day marker store."""

import logging
from datetime import date, datetime

from cyclical.ports.calendar_system import CalendarSystem

from .errors import InvalidCalendarState

logger = logging.getLogger(__name__)

DEFAULT_TAG = "✓"
# Offsets 0..5 inclusive: six consecutive days
DEFAULT_DAY_COUNT = 5


def _check_key(day: date) -> None:
    if isinstance(day, datetime) or not isinstance(day, date):
        raise TypeError(f"Marker keys must be normalized dates, got {day!r}")


class MarkerStore:
    """
    Mapping of calendar day -> marker tags for the current session.

    Entries are only created or appended by propagate(). Nothing is removed,
    and repeated propagation over the same days accumulates duplicate tags.
    """

    def __init__(self, calendar: CalendarSystem, markers: dict[date, list[str]] | None = None):
        self.calendar = calendar
        self._markers: dict[date, list[str]] = {}
        for day, tags in (markers or {}).items():
            _check_key(day)
            self._markers[day] = list(tags)

    def __len__(self) -> int:
        return len(self._markers)

    def __contains__(self, day: object) -> bool:
        return day in self._markers

    def span(self, start: date, day_count: int = DEFAULT_DAY_COUNT) -> list[date]:
        """Days start+0 .. start+day_count (inclusive) by calendar day addition."""
        _check_key(start)
        if day_count < 0:
            raise ValueError(f"day_count must be >= 0, got {day_count}")

        days = []
        for offset in range(day_count + 1):
            day = self.calendar.add_days(start, offset)
            if day is None:
                raise InvalidCalendarState(
                    f"Can't add {offset} day(s) to {start.isoformat()}"
                )
            days.append(day)
        return days

    def propagate(
        self,
        start: date,
        day_count: int = DEFAULT_DAY_COUNT,
        tag: str = DEFAULT_TAG,
    ) -> list[date]:
        """
        Append tag to start and the following day_count days.

        All days are resolved before the store is touched, so a failure
        leaves it unchanged.

        Returns:
            The days that received the tag, in order
        """
        days = self.span(start, day_count)
        for day in days:
            self._markers.setdefault(day, []).append(tag)
        logger.debug(f"Marked {len(days)} day(s) from {start.isoformat()} with {tag!r}")
        return days

    def has_marker(self, day: date, tag: str = DEFAULT_TAG) -> bool:
        """Check if tag appears in the day's marker list."""
        return tag in self._markers.get(day, ())

    def markers_for(self, day: date) -> list[str]:
        """Copy of the tags on a day (empty if none)."""
        return list(self._markers.get(day, ()))

    def marked_days(self, start: date, end: date) -> list[date]:
        """Sorted days in [start, end) carrying any marker."""
        return sorted(d for d, tags in self._markers.items() if tags and start <= d < end)

    def snapshot(self) -> dict[date, list[str]]:
        """Copy of all markers, for saving."""
        return {day: list(tags) for day, tags in self._markers.items()}

    @classmethod
    def restore(cls, calendar: CalendarSystem, snapshot: dict[date, list[str]]) -> "MarkerStore":
        """Rebuild a store from a snapshot."""
        return cls(calendar, snapshot)
