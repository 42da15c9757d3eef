"""Functional core - pure calendar logic with no I/O."""

from .errors import CyclicalError, InvalidCalendarState, InvalidTransition
from .grid import (
    Blank,
    Day,
    GridCell,
    MonthGrid,
    Weekday,
    build_month_grid,
    day_label,
    month_days,
    month_title,
    normalize_day,
    shift_month,
    weekday_offset,
)
from .markers import DEFAULT_DAY_COUNT, DEFAULT_TAG, MarkerStore
from .session import CalendarSession, SelectionState
from .layout import render_month, weekday_headers, weeks

__all__ = [
    # Errors
    "CyclicalError",
    "InvalidCalendarState",
    "InvalidTransition",
    # Grid
    "Blank",
    "Day",
    "GridCell",
    "MonthGrid",
    "Weekday",
    "build_month_grid",
    "day_label",
    "month_days",
    "month_title",
    "normalize_day",
    "shift_month",
    "weekday_offset",
    # Markers
    "DEFAULT_DAY_COUNT",
    "DEFAULT_TAG",
    "MarkerStore",
    # Session
    "CalendarSession",
    "SelectionState",
    # Layout
    "render_month",
    "weekday_headers",
    "weeks",
]
