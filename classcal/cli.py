"""
CLI (Command Line Interface).

Terminal front end for the class calendar, e.g.:

    classcal month [--date 2026-02-01] [--teacher 1]
    classcal week | day [--date ...]
    classcal login <email> [--token ...]
    classcal add --title "Algebra" --date 2026-02-19 --start 10:15 --end 12:00
    classcal edit <event_id> --title "Algebra II"
    classcal delete <event_id>
    classcal sync
    classcal export <file.ics>
    classcal teachers

Students only need the read-only views and export.
Writing commands require a signed-in teacher (see `login`).
"""

from __future__ import annotations

import argparse
import logging
from datetime import date, datetime
from typing import Optional

from rich.console import Console
from rich.table import Table
from rich import box

from classcal.app import App, build_app
from classcal.binning import events_for_teacher, sort_by_start
from classcal.config import Settings
from classcal.export_ics import export_events_to_ics
from classcal.grid import today
from classcal.model import ScheduleEvent
from classcal.schedule import ScheduleForm, save_schedule
from classcal.views import day_table, month_table, week_table


LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

console = Console()


def _parse_date(text: Optional[str]) -> Optional[date]:
    if not text:
        return None
    try:
        return datetime.strptime(text.strip(), "%Y-%m-%d").date()
    except ValueError:
        return None


def _load_events(app: App, teacher_id: Optional[str]) -> list[ScheduleEvent]:
    events = app.store.fetch_all()
    if teacher_id:
        events = events_for_teacher(events, teacher_id)
    return events


def _reference_date(args: argparse.Namespace) -> Optional[date]:
    if not args.date:
        return today()
    return _parse_date(args.date)


def _cmd_view(args: argparse.Namespace, app: App) -> int:
    """
    Render the month, week or day view.
    """
    ref = _reference_date(args)
    if ref is None:
        console.print(f"Invalid date: {args.date!r} (expected YYYY-MM-DD)")
        return 1

    events = _load_events(app, args.teacher)
    if args.command == "month":
        console.print(month_table(ref, events, today=today()))
    elif args.command == "week":
        console.print(week_table(ref, events))
    else:
        table = day_table(ref, events)
        if table.row_count == 0:
            console.print(f"No scheduled events for {ref.strftime('%A, %B %d, %Y')}")
        else:
            console.print(table)
    return 0


def _cmd_login(args: argparse.Namespace, app: App) -> int:
    teacher = app.teachers.sign_in(args.email, token=args.token)
    if teacher is None:
        console.print("Access denied: you are not authorized as a teacher in this system.")
        return 1
    console.print(f"Welcome, {teacher.name}!")
    if not args.token:
        console.print("No Google token given: new sessions will get placeholder meeting links.")
    return 0


def _cmd_logout(args: argparse.Namespace, app: App) -> int:
    app.teachers.sign_out()
    console.print("You have been successfully logged out.")
    return 0


def _cmd_teachers(args: argparse.Namespace, app: App) -> int:
    table = Table(title="Authorized teachers", box=box.SIMPLE)
    table.add_column("ID", justify="right")
    table.add_column("Name")
    table.add_column("E-mail")
    for t in app.teachers.fetch_all():
        table.add_row(t.id, t.name, t.email)
    console.print(table)
    return 0


def _cmd_add(args: argparse.Namespace, app: App) -> int:
    """
    Create a new class session for the signed-in teacher.
    """
    teacher = app.teachers.current_teacher()
    if teacher is None:
        console.print("Please log in as a teacher first.")
        return 1

    start_date = _parse_date(args.date)
    if args.date and start_date is None:
        console.print(f"Invalid date: {args.date!r} (expected YYYY-MM-DD)")
        return 1

    form = ScheduleForm(
        title=args.title or "",
        description=args.description or "",
        start_date=start_date,
        start_time=args.start,
        end_time=args.end,
    )
    try:
        result = save_schedule(app.store, app.meet, form, teacher)
    except ValueError as exc:
        console.print(str(exc))
        return 1
    if result is None:
        console.print("A title and a start date are required.")
        return 1

    for warning in result.warnings:
        console.print(f"[yellow]Warning:[/] {warning}")
    console.print(f"Schedule created: {result.event.title} ({result.event.id})")
    console.print(f"Meeting link: {result.event.meet_link}")
    return 0


def _cmd_edit(args: argparse.Namespace, app: App) -> int:
    """
    Edit one of the signed-in teacher's sessions; unset options keep their value.
    """
    teacher = app.teachers.current_teacher()
    if teacher is None:
        console.print("Please log in as a teacher first.")
        return 1

    own = events_for_teacher(app.store.fetch_all(), teacher.id)
    existing = next((ev for ev in own if ev.id == args.event_id), None)
    if existing is None:
        console.print(f"No event {args.event_id!r} found for {teacher.name}.")
        return 1

    form = ScheduleForm.from_event(existing)
    if args.title is not None:
        form.title = args.title
    if args.description is not None:
        form.description = args.description
    if args.date is not None:
        form.start_date = _parse_date(args.date)
        if form.start_date is None:
            console.print(f"Invalid date: {args.date!r} (expected YYYY-MM-DD)")
            return 1
    if args.start is not None:
        form.start_time = args.start
    if args.end is not None:
        form.end_time = args.end

    try:
        result = save_schedule(app.store, app.meet, form, teacher, edit_event=existing)
    except ValueError as exc:
        console.print(str(exc))
        return 1
    if result is None:
        console.print("A title and a start date are required.")
        return 1

    console.print(f"Schedule updated: {result.event.title} ({result.event.id})")
    return 0


def _cmd_delete(args: argparse.Namespace, app: App) -> int:
    if app.teachers.current_teacher() is None:
        console.print("Please log in as a teacher first.")
        return 1
    if app.store.delete(args.event_id):
        console.print(f"Deleted: {args.event_id}")
    else:
        console.print(f"Deleted locally: {args.event_id} (the server could not be reached)")
    return 0


def _cmd_sync(args: argparse.Namespace, app: App) -> int:
    n = app.store.sync_pending()
    console.print(f"Synced {n} local event(s).")
    return 0


def _cmd_export(args: argparse.Namespace, app: App) -> int:
    """
    Export events into an iCalendar (.ics) file.
    """
    events = sort_by_start(_load_events(app, args.teacher))
    if not events:
        console.print("No events to export.")
        return 0

    out_path = (args.out or "").strip()
    if not out_path:
        console.print("Please provide output .ics path.")
        return 1

    n = export_events_to_ics(events, out_path)
    console.print(f"Exported {n} events to: {out_path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="classcal", description="ClassCal – class schedule calendar")
    sub = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (("month", "Show the month view"), ("week", "Show the week view"), ("day", "Show one day")):
        p_view = sub.add_parser(name, help=help_text)
        p_view.add_argument("--date", "-d", type=str, default=None, help="Reference date YYYY-MM-DD (default: today)")
        p_view.add_argument("--teacher", "-t", type=str, default=None, help="Only show this teacher's events (id)")

    p_login = sub.add_parser("login", help="Sign in as an authorized teacher")
    p_login.add_argument("email", type=str, help="Teacher e-mail address")
    p_login.add_argument("--token", type=str, default=None, help="Google OAuth access token (for Meet links)")

    sub.add_parser("logout", help="Sign out")
    sub.add_parser("teachers", help="List authorized teachers")

    p_add = sub.add_parser("add", help="Create a class session")
    p_add.add_argument("--title", type=str, default="", help="Session title")
    p_add.add_argument("--description", type=str, default="", help="Session description")
    p_add.add_argument("--date", type=str, default=None, help="Date YYYY-MM-DD")
    p_add.add_argument("--start", type=str, default="09:00", help="Start time HH:MM")
    p_add.add_argument("--end", type=str, default="10:00", help="End time HH:MM")

    p_edit = sub.add_parser("edit", help="Edit a class session")
    p_edit.add_argument("event_id", type=str, help="Event ID")
    p_edit.add_argument("--title", type=str, default=None)
    p_edit.add_argument("--description", type=str, default=None)
    p_edit.add_argument("--date", type=str, default=None)
    p_edit.add_argument("--start", type=str, default=None)
    p_edit.add_argument("--end", type=str, default=None)

    p_delete = sub.add_parser("delete", help="Delete a class session")
    p_delete.add_argument("event_id", type=str, help="Event ID")

    sub.add_parser("sync", help="Upload sessions created while offline")

    p_export = sub.add_parser("export", help="Export events to .ics")
    p_export.add_argument("out", type=str, help="Output file path (e.g. classes.ics)")
    p_export.add_argument("--teacher", "-t", type=str, default=None, help="Only export this teacher's events (id)")

    return parser


COMMANDS = {
    "month": _cmd_view,
    "week": _cmd_view,
    "day": _cmd_view,
    "login": _cmd_login,
    "logout": _cmd_logout,
    "teachers": _cmd_teachers,
    "add": _cmd_add,
    "edit": _cmd_edit,
    "delete": _cmd_delete,
    "sync": _cmd_sync,
    "export": _cmd_export,
}


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = Settings.load()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

    app = build_app(settings)
    handler = COMMANDS.get(args.command)
    if handler is None:
        raise SystemExit(2)
    raise SystemExit(handler(args, app))
