"""Shared fixtures."""

from datetime import date, timedelta

import pytest

from cyclical.adapters.gregorian import GregorianCalendar
from cyclical.core.markers import MarkerStore


class FixedCalendar(GregorianCalendar):
    """Gregorian calendar with a pinned 'today'."""

    def __init__(self, today: date, timezone: str = ""):
        super().__init__(timezone)
        self._today = today

    def today(self) -> date:
        return self._today


class NoMonthCalendar(GregorianCalendar):
    """Calendar that can't resolve any month."""

    def month_interval(self, day):
        return None


class EdgeCalendar(GregorianCalendar):
    """Calendar whose day arithmetic stops at a fixed last day."""

    def __init__(self, last_day: date):
        super().__init__()
        self.last_day = last_day

    def month_interval(self, day):
        start = day.replace(day=1)
        return start, (start + timedelta(days=32)).replace(day=1)

    def add_days(self, day, days):
        result = super().add_days(day, days)
        if result is None or result > self.last_day:
            return None
        return result


@pytest.fixture
def today():
    return date(2026, 3, 10)


@pytest.fixture
def calendar(today):
    return FixedCalendar(today)


@pytest.fixture
def store(calendar):
    return MarkerStore(calendar)
