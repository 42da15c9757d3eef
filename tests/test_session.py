"""Tests for the calendar session state machine."""

from datetime import date

import pytest

from cyclical.core.errors import InvalidTransition
from cyclical.core.grid import Blank, Day, Weekday, month_days
from cyclical.core.session import CalendarSession, SelectionState


@pytest.fixture
def session(calendar, store):
    return CalendarSession(calendar=calendar, store=store)


class TestNavigation:
    def test_starts_on_today(self, session, today):
        assert session.reference == today
        assert month_days(session.grid())[0] == date(2026, 3, 1)

    def test_next_and_previous(self, session):
        assert session.next_month() == date(2026, 4, 1)
        assert session.previous_month() == date(2026, 3, 1)
        assert session.previous_month() == date(2026, 2, 1)

    def test_go_to_and_back_to_today(self, session, today):
        session.go_to(date(2030, 7, 4))
        assert month_days(session.grid())[-1] == date(2030, 7, 31)

        session.go_to_today()
        assert session.reference == today

    def test_first_weekday_changes_grid(self, calendar, store):
        session = CalendarSession(
            calendar=calendar, store=store, first_weekday=Weekday.MONDAY,
            reference=date(2026, 2, 1),
        )
        assert len(session.grid()) == 34

    def test_is_today(self, session, today):
        assert session.is_today(today)
        assert not session.is_today(date(2026, 3, 11))


class TestSelection:
    def test_full_flow_accept(self, session):
        assert session.state is SelectionState.NO_SELECTION

        assert session.select(Day(date(2026, 3, 10))) is True
        assert session.state is SelectionState.DAY_SELECTED

        pending = session.request_confirmation()
        assert session.state is SelectionState.CONFIRMATION_PENDING
        assert pending[0] == date(2026, 3, 10)
        assert pending[-1] == date(2026, 3, 15)
        # Nothing marked until confirmed
        assert not session.has_marker(date(2026, 3, 10))

        marked = session.resolve(True)
        assert marked == pending
        assert session.state is SelectionState.NO_SELECTION
        assert session.selected is None
        assert session.has_marker(date(2026, 3, 15))
        assert not session.has_marker(date(2026, 3, 16))

    def test_decline_marks_nothing(self, session, store):
        session.select(date(2026, 3, 10))
        session.request_confirmation()

        assert session.resolve(False) == []
        assert len(store) == 0
        assert session.state is SelectionState.NO_SELECTION

    def test_blank_is_not_selectable(self, session):
        assert session.select(Blank()) is False
        assert session.state is SelectionState.NO_SELECTION
        assert session.selected is None

    def test_reselect_replaces_day(self, session):
        session.select(date(2026, 3, 10))
        session.select(date(2026, 3, 20))
        assert session.request_confirmation()[0] == date(2026, 3, 20)

    def test_confirm_without_selection(self, session):
        with pytest.raises(InvalidTransition):
            session.request_confirmation()

    def test_resolve_without_pending(self, session):
        session.select(date(2026, 3, 10))
        with pytest.raises(InvalidTransition):
            session.resolve(True)

    def test_cancel(self, session):
        session.select(date(2026, 3, 10))
        session.request_confirmation()
        session.cancel()

        assert session.state is SelectionState.NO_SELECTION
        with pytest.raises(InvalidTransition):
            session.resolve(True)

    def test_custom_run_and_tag(self, calendar, store):
        session = CalendarSession(calendar=calendar, store=store, day_count=1, tag="x")
        session.select(date(2026, 3, 31))
        session.request_confirmation()

        assert session.resolve(True) == [date(2026, 3, 31), date(2026, 4, 1)]
        assert store.has_marker(date(2026, 4, 1), "x")

    def test_sessions_share_store(self, calendar, store):
        first = CalendarSession(calendar=calendar, store=store)
        second = CalendarSession(calendar=calendar, store=store)

        first.select(date(2026, 3, 10))
        first.request_confirmation()
        first.resolve(True)

        assert second.has_marker(date(2026, 3, 12))
