"""Calendar session state - the displayed month and the day selection flow."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from cyclical.ports.calendar_system import CalendarSystem

from .errors import InvalidTransition
from .grid import Blank, Day, GridCell, MonthGrid, Weekday, build_month_grid, shift_month
from .markers import DEFAULT_DAY_COUNT, DEFAULT_TAG, MarkerStore


class SelectionState(Enum):
    """Where the user is in the mark-a-day flow."""

    NO_SELECTION = "no_selection"
    DAY_SELECTED = "day_selected"
    CONFIRMATION_PENDING = "confirmation_pending"


@dataclass
class CalendarSession:
    """
    One user's view of the calendar.

    The marker store is injected and may be shared between sessions.
    """

    calendar: CalendarSystem
    store: MarkerStore
    first_weekday: int = Weekday.SUNDAY
    day_count: int = DEFAULT_DAY_COUNT
    tag: str = DEFAULT_TAG
    reference: date | None = None
    selected: date | None = None
    state: SelectionState = field(default=SelectionState.NO_SELECTION)

    def __post_init__(self):
        if self.reference is None:
            self.reference = self.calendar.today()

    # ---- Navigation ----

    def grid(self) -> MonthGrid:
        """Grid cells for the displayed month."""
        return build_month_grid(self.reference, self.calendar, self.first_weekday)

    def previous_month(self) -> date:
        self.reference = shift_month(self.reference, -1, self.calendar)
        return self.reference

    def next_month(self) -> date:
        self.reference = shift_month(self.reference, 1, self.calendar)
        return self.reference

    def go_to(self, day: date) -> date:
        self.reference = self.calendar.normalize(day)
        return self.reference

    def go_to_today(self) -> date:
        return self.go_to(self.calendar.today())

    # ---- Render lookups ----

    def is_today(self, day: date) -> bool:
        return day == self.calendar.today()

    def has_marker(self, day: date) -> bool:
        return self.store.has_marker(day, self.tag)

    # ---- Selection flow ----

    def select(self, target: GridCell | date) -> bool:
        """
        Select a day. Blank cells are not selectable.

        Returns True if a day was selected.
        """
        if isinstance(target, Blank):
            return False
        day = target.date if isinstance(target, Day) else self.calendar.normalize(target)
        self.selected = day
        self.state = SelectionState.DAY_SELECTED
        return True

    def request_confirmation(self) -> list[date]:
        """Move to confirmation; returns the days that would be marked."""
        if self.state is not SelectionState.DAY_SELECTED:
            raise InvalidTransition(f"Can't confirm from {self.state.value}")
        days = self.store.span(self.selected, self.day_count)
        self.state = SelectionState.CONFIRMATION_PENDING
        return days

    def resolve(self, accepted: bool) -> list[date]:
        """
        Answer the confirmation. On accept, mark the run of days.

        Always ends with no selection. Returns the days marked (empty on decline).
        """
        if self.state is not SelectionState.CONFIRMATION_PENDING:
            raise InvalidTransition(f"Nothing to confirm in {self.state.value}")
        try:
            if accepted:
                return self.store.propagate(self.selected, self.day_count, self.tag)
            return []
        finally:
            self.cancel()

    def cancel(self) -> None:
        self.selected = None
        self.state = SelectionState.NO_SELECTION
