"""Plain-text month layout - pure functions, no I/O."""

import calendar as _cal
from datetime import date
from typing import Callable

from .grid import Blank, Day, MonthGrid, Weekday, month_title

DAYS_PER_WEEK = 7


def weekday_headers(first_weekday: int = Weekday.SUNDAY, width: int = 2) -> list[str]:
    """Host-locale weekday abbreviations, starting at first_weekday."""
    # stdlib day_abbr is Monday-first (0=Monday)
    names = []
    for i in range(DAYS_PER_WEEK):
        weekday = (first_weekday - 1 + i) % DAYS_PER_WEEK + 1
        names.append(_cal.day_abbr[(weekday - 2) % DAYS_PER_WEEK][:width])
    return names


def weeks(grid: MonthGrid, pad: bool = False) -> list[list[Blank | Day]]:
    """Split a grid into rows of seven; pad=True fills the last row with blanks."""
    rows = [list(grid[i : i + DAYS_PER_WEEK]) for i in range(0, len(grid), DAYS_PER_WEEK)]
    if pad and rows and len(rows[-1]) < DAYS_PER_WEEK:
        rows[-1].extend(Blank() for _ in range(DAYS_PER_WEEK - len(rows[-1])))
    return rows


def _format_cell(cell: Blank | Day, today: date | None, is_marked: Callable[[date], bool]) -> str:
    if isinstance(cell, Blank):
        return "     "
    day = cell.date
    mark = "*" if is_marked(day) else " "
    if day == today:
        return f"[{day.day:>2}]{mark}"
    return f" {day.day:>2}{mark} "


def render_month(
    grid: MonthGrid,
    *,
    reference: date,
    first_weekday: int = Weekday.SUNDAY,
    today: date | None = None,
    is_marked: Callable[[date], bool] = lambda _day: False,
    pad: bool = False,
) -> str:
    """
    Render a month grid as text.

    Today is shown as [dd], marked days get a trailing *.
    """
    lines = [month_title(reference)]
    lines.append("".join(f" {name:<2}  " for name in weekday_headers(first_weekday)).rstrip())
    for row in weeks(grid, pad=pad):
        lines.append("".join(_format_cell(cell, today, is_marked) for cell in row).rstrip())
    return "\n".join(lines)
