"""Conversation states for Telegram bot."""

from enum import IntEnum, auto


class CalendarStates(IntEnum):
    """States for the calendar conversation."""

    BROWSING = auto()
    CONFIRM = auto()
