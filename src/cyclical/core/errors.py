"""Errors raised by the calendar core."""


class CyclicalError(Exception):
    """Base class for calendar errors."""


class InvalidCalendarState(CyclicalError):
    """The calendar could not resolve a month interval or a day step."""


class InvalidTransition(CyclicalError):
    """A selection action was attempted from the wrong state."""
