"""Tests for the Telegram calendar keyboard and handlers."""

import asyncio
from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest
from telegram.ext import ConversationHandler

from cyclical.config import Config
from cyclical.core.session import CalendarSession, SelectionState
from cyclical.telegram_bot import AuthFilter, create_application
from cyclical.telegram_handlers import (
    CONFIRM_NO,
    CONFIRM_YES,
    NOOP,
    build_month_keyboard,
    calendar_browse_handler,
    calendar_cancel_handler,
    calendar_confirm_handler,
    get_marker_store,
    parse_callback,
)
from cyclical.telegram_states import CalendarStates


@pytest.fixture
def session(calendar, store):
    return CalendarSession(calendar=calendar, store=store)


@pytest.fixture
def context(session):
    ctx = MagicMock()
    ctx.bot_data = {"config": Config(), "markers": session.store}
    ctx.user_data = {"session": session}
    return ctx


def _callback_update(data: str):
    update = MagicMock()
    update.callback_query.data = data
    update.callback_query.answer = AsyncMock()
    update.callback_query.edit_message_text = AsyncMock()
    update.effective_user.id = 42
    return update


def _buttons(markup):
    return [list(row) for row in markup.inline_keyboard]


class TestParseCallback:
    def test_day(self):
        assert parse_callback("cal:day:2026-03-10") == ("day", date(2026, 3, 10))

    def test_plain_action(self):
        assert parse_callback("cal:today") == ("today", None)

    def test_foreign_or_broken(self):
        assert parse_callback("recap_cancel") == ("", None)
        assert parse_callback("cal:day:not-a-date") == ("", None)


class TestMonthKeyboard:
    def test_february_layout(self, session):
        session.go_to(date(2026, 2, 1))
        rows = _buttons(build_month_keyboard(session))

        # Title, weekday header, four weeks, navigation
        assert len(rows) == 7
        assert rows[0][0].text == "February 2026"
        assert [b.text for b in rows[1]] == ["Su", "Mo", "Tu", "We", "Th", "Fr", "Sa"]
        assert rows[2][0].text == "1"
        assert rows[2][0].callback_data == "cal:day:2026-02-01"
        assert rows[-1][0].callback_data == "cal:nav:2026-01-01"
        assert rows[-1][2].callback_data == "cal:nav:2026-03-01"

    def test_blanks_are_inert(self, session):
        session.go_to(date(2026, 8, 1))
        rows = _buttons(build_month_keyboard(session))

        first_week = rows[2]
        assert all(b.callback_data == NOOP for b in first_week[:6])
        assert first_week[6].callback_data == "cal:day:2026-08-01"
        # Last week padded to seven buttons
        assert len(rows[-2]) == 7
        assert rows[-2][2].callback_data == NOOP

    def test_today_and_marker_labels(self, session, store):
        store.propagate(date(2026, 3, 10), day_count=1)
        rows = _buttons(build_month_keyboard(session))
        labels = [b.text for row in rows[2:-1] for b in row]

        assert "[10✓]" in labels
        assert "11✓" in labels
        assert "12" in labels


class TestHandlers:
    def test_day_tap_asks_for_confirmation(self, session, context):
        update = _callback_update("cal:day:2026-03-10")

        state = asyncio.run(calendar_browse_handler(update, context))

        assert state == CalendarStates.CONFIRM
        assert session.state is SelectionState.CONFIRMATION_PENDING
        text = update.callback_query.edit_message_text.call_args.args[0]
        assert text == "Mark 6 day(s) from Mar 10 to Mar 15, 2026?"

    def test_blank_tap_does_nothing(self, session, context):
        update = _callback_update(NOOP)

        state = asyncio.run(calendar_browse_handler(update, context))

        assert state == CalendarStates.BROWSING
        assert session.state is SelectionState.NO_SELECTION
        update.callback_query.edit_message_text.assert_not_called()

    def test_navigation(self, session, context):
        update = _callback_update("cal:nav:2026-04-01")

        state = asyncio.run(calendar_browse_handler(update, context))

        assert state == CalendarStates.BROWSING
        assert session.reference == date(2026, 4, 1)
        markup = update.callback_query.edit_message_text.call_args.kwargs["reply_markup"]
        assert markup.inline_keyboard[0][0].text == "April 2026"

    def test_confirm_yes_marks_days(self, session, store, context):
        asyncio.run(calendar_browse_handler(_callback_update("cal:day:2026-03-10"), context))
        update = _callback_update(CONFIRM_YES)

        state = asyncio.run(calendar_confirm_handler(update, context))

        assert state == CalendarStates.BROWSING
        assert store.has_marker(date(2026, 3, 15))
        assert not store.has_marker(date(2026, 3, 16))
        assert session.state is SelectionState.NO_SELECTION
        text = update.callback_query.edit_message_text.call_args.args[0]
        assert text.startswith("Marked 6 day(s).")

    def test_confirm_no_marks_nothing(self, session, store, context):
        asyncio.run(calendar_browse_handler(_callback_update("cal:day:2026-03-10"), context))

        asyncio.run(calendar_confirm_handler(_callback_update(CONFIRM_NO), context))

        assert len(store) == 0
        assert session.state is SelectionState.NO_SELECTION

    def test_cancel(self, session, context):
        session.select(date(2026, 3, 10))
        update = MagicMock()
        update.message.reply_text = AsyncMock()

        state = asyncio.run(calendar_cancel_handler(update, context))

        assert state == ConversationHandler.END
        assert session.state is SelectionState.NO_SELECTION


class TestBotSetup:
    def test_store_is_process_wide(self):
        bot_data = {}
        first = get_marker_store(bot_data, Config())
        assert get_marker_store(bot_data, Config()) is first

    def test_requires_token(self):
        with pytest.raises(ValueError):
            create_application(Config())

    def test_auth_filter(self):
        auth = AuthFilter([1])
        allowed = MagicMock()
        allowed.effective_user.id = 1
        denied = MagicMock()
        denied.effective_user.id = 2

        assert auth.check_update(allowed) is True
        assert auth.check_update(denied) is False
        assert AuthFilter([]).check_update(denied) is True
