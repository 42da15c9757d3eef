"""Pure month grid logic - no I/O dependencies."""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import IntEnum

from cyclical.ports.calendar_system import CalendarSystem

from .errors import InvalidCalendarState

logger = logging.getLogger(__name__)


class Weekday(IntEnum):
    """Weekday numbers, 1=Sunday .. 7=Saturday."""

    SUNDAY = 1
    MONDAY = 2
    TUESDAY = 3
    WEDNESDAY = 4
    THURSDAY = 5
    FRIDAY = 6
    SATURDAY = 7


@dataclass(frozen=True)
class Blank:
    """Placeholder cell before the first day of the month."""

    @property
    def date(self) -> None:
        return None


@dataclass(frozen=True)
class Day:
    """A cell holding one calendar day."""

    date: date


GridCell = Blank | Day
MonthGrid = list[GridCell]


def normalize_day(value: date | datetime) -> date:
    """Reduce a date or datetime to its calendar day (wall-clock date)."""
    if isinstance(value, datetime):
        return value.date()
    return value


def weekday_offset(month_start_weekday: int, first_weekday: int) -> int:
    """Number of blank cells before the first day of the month.

    Both arguments use 1=Sunday .. 7=Saturday. Always in [0, 6].
    """
    return (month_start_weekday - first_weekday + 7) % 7


def _check_weekday(first_weekday: int) -> None:
    if not 1 <= first_weekday <= 7:
        raise ValueError(f"first_weekday must be 1..7 (1=Sunday), got {first_weekday}")


def build_month_grid(
    reference: date | datetime,
    calendar: CalendarSystem,
    first_weekday: int = Weekday.SUNDAY,
) -> MonthGrid:
    """
    Build the grid cells for the month containing reference.

    Pure function - no I/O.

    Args:
        reference: Any day (or instant) within the target month
        calendar: Calendar system for month boundaries and day arithmetic
        first_weekday: Weekday shown in the first column (1=Sunday .. 7=Saturday)

    Returns:
        Leading Blank cells for weekday alignment, then one Day per day of
        the month. No trailing blanks.

    Raises:
        InvalidCalendarState: The calendar can't resolve the month or step a day
    """
    _check_weekday(first_weekday)
    day = calendar.normalize(reference)

    interval = calendar.month_interval(day)
    if interval is None:
        raise InvalidCalendarState(f"No month interval for {day.isoformat()}")
    month_start, month_end = interval

    offset = weekday_offset(calendar.weekday(month_start), first_weekday)
    cells: MonthGrid = [Blank() for _ in range(offset)]

    current = month_start
    while current < month_end:
        cells.append(Day(current))
        next_day = calendar.add_days(current, 1)
        if next_day is None:
            raise InvalidCalendarState(f"Can't step past {current.isoformat()}")
        current = next_day

    logger.debug(
        f"Built grid for {month_start:%Y-%m}: {offset} blank(s), {len(cells) - offset} day(s)"
    )
    return cells


def month_days(grid: MonthGrid) -> list[date]:
    """Dates of the Day cells, in order."""
    return [cell.date for cell in grid if isinstance(cell, Day)]


def shift_month(reference: date, months: int, calendar: CalendarSystem) -> date:
    """First day of the month `months` away from the one containing reference."""
    interval = calendar.month_interval(calendar.normalize(reference))
    if interval is None:
        raise InvalidCalendarState(f"No month interval for {reference.isoformat()}")
    start, end = interval

    for _ in range(months):
        interval = calendar.month_interval(end)
        if interval is None:
            raise InvalidCalendarState(f"No month after {start.isoformat()}")
        start, end = interval

    for _ in range(-months):
        previous = calendar.add_days(start, -1)
        interval = calendar.month_interval(previous) if previous else None
        if interval is None:
            raise InvalidCalendarState(f"No month before {start.isoformat()}")
        start, end = interval

    return start


def month_title(reference: date) -> str:
    """Month and year, e.g. "October 2026" (host locale month name)."""
    return reference.strftime("%B %Y")


def day_label(day: date) -> str:
    """Day-of-month number as text."""
    return str(day.day)
