"""Shared workflow layer between CLI and Telegram.

Builds the calendar, marker store and sessions from config so both
front ends wire things up the same way.
"""

import logging
from datetime import date

from .adapters.gregorian import GregorianCalendar
from .adapters.session_snapshot import SessionSnapshotStore
from .config import Config
from .core.layout import render_month
from .core.markers import MarkerStore
from .core.session import CalendarSession
from .ports.calendar_system import CalendarSystem
from .ports.marker_snapshot import MarkerSnapshotStore

logger = logging.getLogger(__name__)


def get_calendar(config: Config) -> GregorianCalendar:
    """Calendar system for the configured timezone."""
    return GregorianCalendar(timezone=config.timezone)


def open_marker_store(
    calendar: CalendarSystem,
    snapshots: MarkerSnapshotStore | None = None,
) -> MarkerStore:
    """Create the session's marker store, seeded from a snapshot if one exists."""
    snapshots = snapshots or SessionSnapshotStore()
    markers = snapshots.load()
    if markers:
        logger.info(f"Restored markers for {len(markers)} day(s)")
    return MarkerStore.restore(calendar, markers)


def save_marker_store(store: MarkerStore, snapshots: MarkerSnapshotStore) -> None:
    """Hand the current markers to the snapshot store."""
    snapshots.save(store.snapshot())


def new_session(
    config: Config,
    store: MarkerStore,
    reference: date | None = None,
) -> CalendarSession:
    """Session showing the month of reference (default today)."""
    return CalendarSession(
        calendar=store.calendar,
        store=store,
        first_weekday=config.first_weekday_number,
        day_count=config.marker_days,
        tag=config.marker_tag,
        reference=reference,
    )


def render_session(session: CalendarSession, pad: bool = False) -> str:
    """Text view of the session's displayed month."""
    return render_month(
        session.grid(),
        reference=session.reference,
        first_weekday=session.first_weekday,
        today=session.calendar.today(),
        is_marked=session.has_marker,
        pad=pad,
    )
