"""Telegram command handlers."""

import logging
from datetime import date

from telegram import Update, InlineKeyboardButton, InlineKeyboardMarkup
from telegram.error import BadRequest
from telegram.ext import ContextTypes, ConversationHandler

from .config import Config, load_config
from .core.errors import CyclicalError
from .core.grid import Blank, month_title, shift_month
from .core.layout import weekday_headers, weeks
from .core.markers import MarkerStore
from .core.session import CalendarSession
from .telegram_states import CalendarStates
from .workflows import get_calendar, new_session, open_marker_store

logger = logging.getLogger(__name__)

NOOP = "cal:noop"
CONFIRM_YES = "cal:yes"
CONFIRM_NO = "cal:no"


# ============== Keyboards ==============


def _cell_label(session: CalendarSession, day: date) -> str:
    label = str(day.day)
    if session.has_marker(day):
        label = f"{label}{session.tag}"
    if session.is_today(day):
        label = f"[{label}]"
    return label


def _nav_button(session: CalendarSession, text: str, months: int) -> InlineKeyboardButton:
    try:
        target = shift_month(session.reference, months, session.calendar)
    except CyclicalError:
        return InlineKeyboardButton(" ", callback_data=NOOP)
    return InlineKeyboardButton(text, callback_data=f"cal:nav:{target.isoformat()}")


def build_month_keyboard(session: CalendarSession) -> InlineKeyboardMarkup:
    """Inline keyboard for the session's month: title, weekdays, days, navigation.

    Blank cells get no-op callback data so tapping them does nothing.
    """
    keyboard = [[InlineKeyboardButton(month_title(session.reference), callback_data=NOOP)]]
    keyboard.append(
        [InlineKeyboardButton(name, callback_data=NOOP) for name in weekday_headers(session.first_weekday)]
    )

    for row in weeks(session.grid(), pad=True):
        keyboard.append(
            [
                InlineKeyboardButton(" ", callback_data=NOOP)
                if isinstance(cell, Blank)
                else InlineKeyboardButton(
                    _cell_label(session, cell.date),
                    callback_data=f"cal:day:{cell.date.isoformat()}",
                )
                for cell in row
            ]
        )

    keyboard.append(
        [
            _nav_button(session, "◀", -1),
            InlineKeyboardButton("Today", callback_data="cal:today"),
            _nav_button(session, "▶", 1),
        ]
    )
    return InlineKeyboardMarkup(keyboard)


def build_confirm_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        [
            [
                InlineKeyboardButton("Yes", callback_data=CONFIRM_YES),
                InlineKeyboardButton("No", callback_data=CONFIRM_NO),
            ]
        ]
    )


def parse_callback(data: str) -> tuple[str, date | None]:
    """Split "cal:<action>[:<iso date>]" into (action, date)."""
    parts = data.split(":", 2)
    if len(parts) < 2 or parts[0] != "cal":
        return "", None
    action = parts[1]
    if len(parts) == 3:
        try:
            return action, date.fromisoformat(parts[2])
        except ValueError:
            return "", None
    return action, None


# ============== Session State ==============


def _get_config(context: ContextTypes.DEFAULT_TYPE) -> Config:
    config = context.bot_data.get("config")
    if config is None:
        config = context.bot_data["config"] = load_config()
    return config


def get_marker_store(bot_data: dict, config: Config) -> MarkerStore:
    """Process-wide marker store shared by every user of the bot."""
    store = bot_data.get("markers")
    if store is None:
        store = bot_data["markers"] = open_marker_store(get_calendar(config))
    return store


def _get_session(context: ContextTypes.DEFAULT_TYPE) -> CalendarSession:
    session = context.user_data.get("session")
    if session is None:
        config = _get_config(context)
        session = new_session(config, get_marker_store(context.bot_data, config))
        context.user_data["session"] = session
    return session


def _browse_text(session: CalendarSession, notice: str = "") -> str:
    prompt = f"Tap a day to mark it and the next {session.day_count} day(s)."
    return f"{notice}\n\n{prompt}" if notice else prompt


async def _show_month(update: Update, session: CalendarSession, notice: str = "") -> None:
    """Send or edit the month keyboard."""
    text = _browse_text(session, notice)
    markup = build_month_keyboard(session)
    if update.callback_query:
        try:
            await update.callback_query.edit_message_text(text, reply_markup=markup)
        except BadRequest as e:
            if "not modified" not in str(e).lower():
                raise
            logger.debug("Calendar message unchanged")
    else:
        await update.message.reply_text(text, reply_markup=markup)


# ============== Simple Commands ==============


async def start_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /start command."""
    await update.message.reply_text(
        "Hey! I'm Cyclical, a month calendar.\n\n"
        "Commands:\n"
        "/calendar - Show this month\n"
        "/cancel - Close the calendar\n"
        "/help - Show all commands"
    )


async def help_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /help command."""
    await update.message.reply_text(
        "*Cyclical Commands*\n\n"
        "/calendar - Month grid; tap a day, then confirm to mark a run of days\n"
        "/cancel - Drop the current selection and close the calendar\n\n"
        "Markers last until the bot restarts.",
        parse_mode="Markdown",
    )


# ============== Calendar Conversation ==============


async def calendar_start_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle /calendar command - show the current month."""
    session = _get_session(context)
    session.cancel()
    session.go_to_today()

    try:
        await _show_month(update, session)
    except CyclicalError as e:
        logger.error(f"Failed to build calendar: {e}")
        await update.message.reply_text(f"Can't show the calendar: {e}")
        return ConversationHandler.END

    return CalendarStates.BROWSING


async def calendar_browse_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle taps on the month keyboard."""
    query = update.callback_query
    action, target = parse_callback(query.data)
    session = _get_session(context)

    if action == "nav" and target:
        await query.answer()
        session.go_to(target)
    elif action == "today":
        await query.answer()
        session.go_to_today()
    elif action == "day" and target:
        session.select(target)
        try:
            days = session.request_confirmation()
        except CyclicalError as e:
            session.cancel()
            await query.answer(f"Can't mark from {target}: {e}", show_alert=True)
            return CalendarStates.BROWSING
        await query.answer()
        await query.edit_message_text(
            f"Mark {len(days)} day(s) from {days[0]:%b %d} to {days[-1]:%b %d, %Y}?",
            reply_markup=build_confirm_keyboard(),
        )
        return CalendarStates.CONFIRM
    else:
        # Blank cells, header buttons and stale callbacks
        await query.answer()
        return CalendarStates.BROWSING

    try:
        await _show_month(update, session)
    except CyclicalError as e:
        logger.error(f"Failed to build calendar: {e}")
        session.go_to_today()
        await _show_month(update, session, notice=f"Can't show that month: {e}")

    return CalendarStates.BROWSING


async def calendar_confirm_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Handle the Yes/No confirmation."""
    query = update.callback_query
    await query.answer()
    session = _get_session(context)

    if query.data not in (CONFIRM_YES, CONFIRM_NO):
        return CalendarStates.CONFIRM

    try:
        marked = session.resolve(query.data == CONFIRM_YES)
    except CyclicalError as e:
        logger.error(f"Failed to mark days: {e}")
        await _show_month(update, session, notice=f"Nothing marked: {e}")
        return CalendarStates.BROWSING

    if marked:
        user = update.effective_user
        logger.info(f"User {user.id if user else '?'} marked {len(marked)} day(s) from {marked[0]}")
        notice = f"Marked {len(marked)} day(s)."
    else:
        notice = "Cancelled."

    await _show_month(update, session, notice=notice)
    return CalendarStates.BROWSING


async def calendar_cancel_handler(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Close the calendar conversation."""
    session = context.user_data.get("session")
    if session is not None:
        session.cancel()
    await update.message.reply_text("Calendar closed.")
    return ConversationHandler.END
