"""Calendar system interface."""

from datetime import date, datetime
from typing import Protocol


class CalendarSystem(Protocol):
    """Interface for month boundaries, weekday numbering and day arithmetic.

    Weekdays are numbered 1=Sunday .. 7=Saturday.
    """

    def today(self) -> date:
        """Current calendar day."""
        ...

    def normalize(self, value: date | datetime) -> date:
        """Reduce a date or datetime to its calendar day."""
        ...

    def month_interval(self, day: date) -> tuple[date, date] | None:
        """Half-open [start, end) of the month containing day, or None."""
        ...

    def weekday(self, day: date) -> int:
        """Weekday number of day (1=Sunday .. 7=Saturday)."""
        ...

    def add_days(self, day: date, days: int) -> date | None:
        """Calendar day `days` after day, or None if it can't be represented."""
        ...
