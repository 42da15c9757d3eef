"""Gregorian calendar adapter backed by the standard library."""

import calendar
import logging
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from cyclical.core.grid import normalize_day

logger = logging.getLogger(__name__)


class GregorianCalendar:
    """
    Proleptic Gregorian calendar (years 1-9999).

    Implements CalendarSystem protocol. Days are plain dates, so day
    addition is by calendar day and unaffected by DST transitions.
    """

    def __init__(self, timezone: str = ""):
        self.timezone = timezone
        self._tz = None
        if timezone:
            try:
                self._tz = ZoneInfo(timezone)
            except (ZoneInfoNotFoundError, ValueError):
                logger.warning(f"Unknown timezone {timezone!r}, using host local time")

    def today(self) -> date:
        """Current day in the configured timezone, or the host's local day."""
        if self._tz is not None:
            return datetime.now(self._tz).date()
        return date.today()

    def normalize(self, value: date | datetime) -> date:
        """Calendar day of a date or datetime.

        Aware datetimes are converted to the configured timezone first.
        """
        if isinstance(value, datetime) and value.tzinfo is not None and self._tz is not None:
            value = value.astimezone(self._tz)
        return normalize_day(value)

    def month_interval(self, day: date) -> tuple[date, date] | None:
        """[first of month, first of next month), or None past date.max."""
        start = day.replace(day=1)
        _, days_in_month = calendar.monthrange(day.year, day.month)
        end = self.add_days(start, days_in_month)
        if end is None:
            return None
        return start, end

    def weekday(self, day: date) -> int:
        """1=Sunday .. 7=Saturday."""
        return day.isoweekday() % 7 + 1

    def add_days(self, day: date, days: int) -> date | None:
        try:
            return day + timedelta(days=days)
        except OverflowError:
            return None
