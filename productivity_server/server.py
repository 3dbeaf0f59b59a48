# -*- coding: utf-8 -*-
import typing as t
from datetime import date, datetime

from fastmcp import FastMCP

from academics.models import local_naive
from academics.store import store as academic_store
from productivity_server import calendar_sync
from productivity_server.calendar_sync import CalendarService
from productivity_server.models import CalendarEntry, CalendarEvent, EntryKind, TodoItem
from productivity_server.store import todos

mcp = FastMCP("ProductivityServer")

calendar_service = CalendarService()

ENTRY_ICONS = {
    EntryKind.ASSIGNMENT: "📚",
    EntryKind.TODO: "✅",
    EntryKind.CALENDAR_EVENT: "📅",
}


def _parse_optional(iso_string: t.Optional[str]) -> t.Optional[datetime]:
    return local_naive(datetime.fromisoformat(iso_string)) if iso_string else None


@mcp.tool()
def create_todo(title: str, due: t.Optional[str] = None, notes: str = "") -> TodoItem:
    """Creates a to-do item.

    :param title: Title of the task.
    :param due: Due time in ISO format (optional).
    :param notes: Additional notes (optional).
    :return: The stored TodoItem.
    """
    return todos.add(TodoItem(title=title, due_date=_parse_optional(due), notes=notes))


@mcp.tool()
def update_todo(item_id: int, title: str, due: t.Optional[str] = None, notes: str = "") -> TodoItem:
    """Edits the title, due time and notes of a to-do item."""
    return todos.update(item_id, title, _parse_optional(due), notes)


@mcp.tool()
def toggle_todo(item_id: int) -> TodoItem:
    """Flips the completion flag of a to-do item."""
    return todos.toggle(item_id)


@mcp.tool()
def delete_todo(item_id: int) -> str:
    """Deletes a to-do item."""
    todos.delete(item_id)
    return f"Deleted to-do {item_id}"


@mcp.tool()
def list_todos() -> list[TodoItem]:
    """Lists all to-do items by due date, then creation time.

    :return: A list of TodoItem objects.
    """
    return todos.list()


@mcp.tool()
def request_calendar_access() -> bool:
    """Asks for access to the calendar.

    :return: True if access was granted.
    """
    return calendar_service.request_access()


@mcp.tool()
def list_calendar_events(start: t.Optional[str] = None, end: t.Optional[str] = None) -> list[CalendarEvent]:
    """Lists calendar events in a time range, by default the next 30 days.

    :param start: Range start in ISO format (optional).
    :param end: Range end in ISO format (optional).
    :return: A list of CalendarEvent objects; empty without calendar access.
    """
    return calendar_sync.fetch_events(calendar_service, _parse_optional(start), _parse_optional(end))


@mcp.tool()
def add_assignment_to_calendar(assignment_id: int) -> t.Optional[CalendarEvent]:
    """Adds an assignment's due date to the calendar as a one-hour event.

    :return: The created event, or None without calendar access.
    """
    assignment = academic_store.get_assignment(assignment_id)
    course_code = academic_store.course_code_for(assignment)
    return calendar_sync.add_assignment_to_calendar(calendar_service, assignment, course_code)


@mcp.tool()
def add_todo_to_calendar(item_id: int) -> t.Optional[CalendarEvent]:
    """Adds a to-do item's due date to the calendar as a one-hour event.

    :return: The created event, or None for undated items or without access.
    """
    return calendar_sync.add_todo_to_calendar(calendar_service, todos.get(item_id))


def _format_datetime(moment: t.Optional[datetime]) -> str:
    """Formats a datetime into a concise readable format.

    Format: 'Mon 1/15 2:30 PM' (day of week, month/day, time).

    :param moment: The datetime, or None.
    :return: Concise datetime string, or '—' when missing.
    """
    if moment is None:
        return "—"
    return f"{moment:%a} {moment.month}/{moment.day} {moment.strftime('%I:%M %p').lstrip('0')}"


def format_todos(items: list[TodoItem]) -> str:
    """Formats to-do items as a clean table.

    :return: Formatted table string of the items.
    """
    if not items:
        return "✅ No tasks yet. Add your first task!"

    lines = []
    lines.append("✅ TO-DO LIST")
    lines.append("=" * 100)
    lines.append(f"{'#':<4} {'Done':<6} {'Title':<35} {'Due':<18} {'Notes':<33}")
    lines.append("-" * 100)

    for idx, item in enumerate(items, 1):
        title = item.title[:34] if len(item.title) > 34 else item.title
        notes = item.notes[:32] if item.notes and len(item.notes) > 32 else (item.notes or "—")
        done = "[x]" if item.is_completed else "[ ]"
        lines.append(
            f"{idx:<4} {done:<6} {title:<35} {_format_datetime(item.due_date):<18} {notes:<33}"
        )

    lines.append("=" * 100)
    lines.append(f"Total: {len(items)} task(s), {sum(1 for i in items if i.is_completed)} completed")
    return "\n".join(lines)


def format_agenda(day: date, entries: list[CalendarEntry]) -> str:
    """Formats the entries of one calendar day.

    :return: Formatted list string.
    """
    header = f"📅 EVENTS FOR {day:%A, %B %d, %Y}".upper()
    if not entries:
        return f"{header}\nNo events for this day"

    lines = [header, "=" * 80]
    for entry in entries:
        title = f"~{entry.title}~" if entry.is_completed else entry.title
        lines.append(f"{entry.date:%H:%M}  {ENTRY_ICONS[entry.kind]}  {title}")
        if entry.notes:
            lines.append(f"              {entry.notes}")
    lines.append("=" * 80)
    return "\n".join(lines)


@mcp.tool()
def show_todos() -> str:
    """Displays all to-do items in a formatted table.

    :return: Formatted table string, or a message if there are no tasks.
    """
    return format_todos(todos.list())


@mcp.tool()
def show_agenda(day: t.Optional[str] = None) -> str:
    """Displays assignments, to-do items and calendar events of one day.

    :param day: The day in ISO format (YYYY-MM-DD); defaults to today.
    :return: Formatted agenda string.
    """
    target = date.fromisoformat(day) if day else date.today()
    return format_agenda(target, calendar_sync.agenda_for_day(target, academic_store, todos, calendar_service))


def format_week(days: list[tuple[date, list[CalendarEntry]]]) -> str:
    """Formats a week as one line per day followed by its entries.

    :return: Formatted list string.
    """
    lines = [f"🗓️  WEEK OF {days[0][0]:%B %d, %Y}".upper(), "=" * 80]
    for day, entries in days:
        lines.append(f"{day:%a %m/%d}")
        for entry in entries:
            title = f"~{entry.title}~" if entry.is_completed else entry.title
            lines.append(f"    {entry.date:%H:%M}  {ENTRY_ICONS[entry.kind]}  {title}")
    lines.append("=" * 80)
    return "\n".join(lines)


def format_month(year: int, month: int, weeks: list[list[t.Optional[tuple[date, list[CalendarEntry]]]]]) -> str:
    """Formats a month as a Sunday-first grid; days with entries show their count.

    :return: Formatted grid string.
    """
    header = "  ".join(f"{name:<6}" for name in ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")).rstrip()
    lines = [f"📅 {date(year, month, 1):%B %Y}".upper(), header]
    for week in weeks:
        cells = []
        for cell in week:
            if cell is None:
                cells.append(" " * 6)
                continue
            day, entries = cell
            label = f"{day.day}({len(entries)})" if entries else str(day.day)
            cells.append(f"{label:<6}")
        lines.append("  ".join(cells).rstrip())
    return "\n".join(lines)


@mcp.tool()
def show_week(day: t.Optional[str] = None) -> str:
    """Displays the Sunday-first week containing a day with every entry per day.

    :param day: Any day of the week in ISO format (YYYY-MM-DD); defaults to today.
    :return: Formatted week string.
    """
    target = date.fromisoformat(day) if day else date.today()
    return format_week(calendar_sync.agenda_for_week(target, academic_store, todos, calendar_service))


@mcp.tool()
def show_month(year: t.Optional[int] = None, month: t.Optional[int] = None) -> str:
    """Displays a month calendar with the number of entries on each day.

    :param year: The year; defaults to the current year.
    :param month: The month, 1-12; defaults to the current month.
    :return: Formatted month grid.
    """
    today = date.today()
    year, month = year or today.year, month or today.month
    return format_month(year, month, calendar_sync.agenda_for_month(year, month, academic_store, todos, calendar_service))


if __name__ == "__main__":
    mcp.run()
