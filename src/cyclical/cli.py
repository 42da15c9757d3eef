"""Cyclical CLI - month calendar with per-day markers."""

import json
import logging
import sys
from datetime import date

import click

from .config import load_config, parse_weekday
from .core.errors import CyclicalError
from .core.grid import Blank, Day, month_days
from .workflows import get_calendar, new_session, open_marker_store, render_session

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _parse_date(value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"{value!r} is not a YYYY-MM-DD date")


def _parse_first_weekday(value: str | None) -> int | None:
    if value is None:
        return None
    try:
        return parse_weekday(value)
    except ValueError as e:
        raise click.BadParameter(str(e))


@click.group()
@click.version_option(package_name="cyclical")
def main():
    """Cyclical - month calendar with per-day markers."""
    pass


@main.command()
@click.option("--date", "-d", "target_date", default=None,
              help="Any day in the month to show (YYYY-MM-DD), defaults to today")
@click.option("--first-weekday", "-w", default=None,
              help="First column of the week (name or 1=Sunday..7=Saturday)")
@click.option("--pad/--no-pad", default=None, help="Fill the last week with blanks")
@click.option("--json", "as_json", is_flag=True, help="Output cells as JSON")
def month(target_date: str | None, first_weekday: str | None, pad: bool | None, as_json: bool):
    """Show a month grid."""
    config = load_config()
    store = open_marker_store(get_calendar(config))
    session = new_session(config, store, reference=_parse_date(target_date))
    weekday = _parse_first_weekday(first_weekday)
    if weekday is not None:
        session.first_weekday = weekday

    try:
        grid = session.grid()
    except CyclicalError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(
            json.dumps(
                [
                    None if isinstance(cell, Blank) else cell.date.isoformat()
                    for cell in grid
                ],
                indent=2,
            )
        )
        return

    click.echo(render_session(session, pad=config.pad_weeks if pad is None else pad))


@main.command()
@click.argument("start")
@click.option("--days", "-n", "day_count", type=click.IntRange(min=0), default=None,
              help="Days to mark after START (inclusive run of N+1 days)")
@click.option("--tag", "-t", default=None, help="Marker tag")
@click.option("--yes", "-y", is_flag=True, help="Don't ask for confirmation")
def mark(start: str, day_count: int | None, tag: str | None, yes: bool):
    """Mark a run of days starting at START (YYYY-MM-DD) and show its month."""
    config = load_config()
    start_date = _parse_date(start)
    store = open_marker_store(get_calendar(config))
    session = new_session(config, store, reference=start_date)
    if day_count is not None:
        session.day_count = day_count
    if tag:
        session.tag = tag

    try:
        session.select(start_date)
        days = session.request_confirmation()
        accepted = yes or click.confirm(
            f"Mark {len(days)} day(s) from {days[0]} to {days[-1]} with {session.tag!r}?",
            default=True,
        )
        marked = session.resolve(accepted)
        if not marked:
            click.echo("Nothing marked.")
            return
        click.echo(render_session(session, pad=config.pad_weeks))
    except CyclicalError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _find_day(session, number: int) -> Day | None:
    for day in month_days(session.grid()):
        if day.day == number:
            return Day(day)
    return None


@main.command()
def shell():
    """Interactive calendar: navigate months and mark days."""
    config = load_config()
    store = open_marker_store(get_calendar(config))
    session = new_session(config, store)

    while True:
        try:
            click.echo(render_session(session, pad=config.pad_weeks))
        except CyclicalError as e:
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)

        choice = click.prompt("\nDay number, [n]ext, [p]rev, [t]oday, [q]uit", default="q").strip().lower()
        click.echo()

        try:
            if choice in ("q", "quit"):
                return
            elif choice in ("n", "next"):
                session.next_month()
            elif choice in ("p", "prev"):
                session.previous_month()
            elif choice in ("t", "today"):
                session.go_to_today()
            elif choice.isdigit():
                cell = _find_day(session, int(choice))
                if cell is None:
                    click.echo(f"No day {choice} in this month.\n")
                    continue
                session.select(cell)
                days = session.request_confirmation()
                accepted = click.confirm(
                    f"Mark {len(days)} day(s) from {days[0]} to {days[-1]}?", default=True
                )
                marked = session.resolve(accepted)
                click.echo(f"Marked {len(marked)} day(s).\n" if marked else "Cancelled.\n")
            else:
                click.echo(f"Unknown choice: {choice}\n")
        except CyclicalError as e:
            session.cancel()
            click.echo(f"Error: {e}\n", err=True)


@main.command()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def bot(debug: bool):
    """Run the Telegram bot."""
    if debug:
        logging.basicConfig(format=LOG_FORMAT, level=logging.DEBUG)

    try:
        from .telegram_bot import run_bot
        click.echo("Starting Cyclical Telegram bot...")
        click.echo("Press Ctrl+C to stop")
        run_bot()
    except ImportError as e:
        click.echo("Error: Missing dependencies. Run 'pip install python-telegram-bot apscheduler'", err=True)
        click.echo(f"Details: {e}", err=True)
        sys.exit(1)
    except ValueError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("\nBot stopped.")


if __name__ == "__main__":
    main()
