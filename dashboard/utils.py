"""Utility functions for the dashboard."""
import logging
import os
import typing as t
from datetime import date, datetime

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

console = Console()

LOG_LEVEL = os.getenv("POMONEST_LOG_LEVEL", "WARNING")

MODE_LABELS = {
    "WORK": "Focus Time",
    "SHORT_BREAK": "Short Break",
    "LONG_BREAK": "Long Break",
}

MODE_COLORS = {
    "WORK": "red",
    "SHORT_BREAK": "green",
    "LONG_BREAK": "blue",
}

ENTRY_ICONS = {
    "assignment": "📚",
    "todo": "✅",
    "calendar_event": "📅",
}


def configure_logging(level: t.Optional[str] = None) -> None:
    """Route log records through rich, at ``POMONEST_LOG_LEVEL`` unless overridden."""
    logging.basicConfig(
        level=(level or LOG_LEVEL).upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def format_datetime_human(iso_datetime: t.Optional[str]) -> str:
    """Convert ISO datetime to human-readable format (MM/DD HH:MM)."""
    if not iso_datetime:
        return "—"
    try:
        dt = datetime.fromisoformat(iso_datetime.replace('Z', '+00:00'))
        return dt.strftime("%m/%d %H:%M")
    except (ValueError, AttributeError):
        # Fallback for malformed dates
        return iso_datetime


def truncate_title(title: str, max_length: int = 45) -> str:
    """Truncate title to max_length characters, adding ellipsis if needed."""
    if len(title) <= max_length:
        return title
    return title[:max_length-3] + "..."


def format_gpa(gpa: float) -> str:
    return f"{gpa:.2f}"


def semesters_table(semesters: list[dict]) -> Table:
    table = Table(title="🎓 Semesters", show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim", width=4)
    table.add_column("Name", style="white")
    table.add_column("Dates", style="yellow")
    table.add_column("Courses", justify="right")
    table.add_column("GPA", justify="right", style="cyan")

    for semester in semesters:
        table.add_row(
            str(semester["id"]),
            semester["name"],
            f"{semester['start_date']} → {semester['end_date']}",
            str(semester["course_count"]),
            format_gpa(semester["gpa"]),
        )
    return table


def courses_table(courses: list[dict]) -> Table:
    table = Table(title="📘 Courses", show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim", width=4)
    table.add_column("Code", style="cyan")
    table.add_column("Name", style="white")
    table.add_column("Credits", justify="right")
    table.add_column("Assignments", justify="right")
    table.add_column("GPA", justify="right", style="cyan")

    for course in courses:
        table.add_row(
            str(course["id"]),
            course["code"],
            truncate_title(course["name"]),
            str(course["credit_hours"]),
            str(course["assignment_count"]),
            format_gpa(course["gpa"]),
        )
    return table


def components_table(course: dict, components: list[dict]) -> Table:
    table = Table(
        title=f"🧮 {course['code']}: {course['name']}",
        caption=f"Course GPA: {format_gpa(course['gpa'])}",
        show_header=True,
        header_style="bold magenta",
    )
    table.add_column("ID", style="dim", width=4)
    table.add_column("Component", style="white")
    table.add_column("Weight", justify="right")
    table.add_column("Points", justify="right")
    table.add_column("Percent", justify="right")
    table.add_column("Weighted", justify="right", style="cyan")

    for component in components:
        earned = component["earned_points"]
        points = "—" if earned is None else f"{earned:g} / {component['total_points']:g}"
        table.add_row(
            str(component["id"]),
            component["name"],
            f"{component['weight']:g}%",
            points,
            f"{component['percentage']:.0f}%",
            f"{component['weighted_grade']:.3f}",
        )
    return table


def assignments_table(assignments: list[dict]) -> Table:
    table = Table(title="📚 Assignments", show_header=True, header_style="bold magenta")
    table.add_column("", width=3)
    table.add_column("ID", style="dim", width=4)
    table.add_column("Assignment", style="white")
    table.add_column("Course", style="cyan")
    table.add_column("Due", style="yellow")
    table.add_column("Weight", justify="right")

    for assignment in assignments:
        weight = assignment["weight"]
        table.add_row(
            "✔" if assignment["is_completed"] else "○",
            str(assignment["id"]),
            truncate_title(assignment["name"]),
            assignment["course_code"],
            format_datetime_human(assignment["due_date"]),
            "—" if weight is None else f"{weight:g}%",
        )
    return table


def todos_table(todos: list[dict]) -> Table:
    table = Table(title="✅ To-Do List", show_header=True, header_style="bold magenta")
    table.add_column("", width=3)
    table.add_column("ID", style="dim", width=4)
    table.add_column("Title", style="white")
    table.add_column("Due", style="yellow")
    table.add_column("Notes", style="dim")

    for item in todos:
        title = f"[strike]{item['title']}[/strike]" if item["is_completed"] else item["title"]
        table.add_row(
            "✔" if item["is_completed"] else "○",
            str(item["id"]),
            title,
            format_datetime_human(item["due_date"]),
            truncate_title(item["notes"], 30) if item["notes"] else "",
        )
    return table


def agenda_table(day: str, entries: list[dict]) -> Table:
    table = Table(title=f"📅 Events for {day}", show_header=True, header_style="bold magenta")
    table.add_column("", width=3)
    table.add_column("Time", style="yellow")
    table.add_column("Title", style="white")
    table.add_column("Notes", style="dim")

    for entry in entries:
        title = f"[strike]{entry['title']}[/strike]" if entry["is_completed"] else entry["title"]
        table.add_row(
            ENTRY_ICONS.get(entry["kind"], "•"),
            format_datetime_human(entry["date"])[-5:],
            title,
            truncate_title(entry["notes"], 40) if entry["notes"] else "",
        )
    return table


def _entry_line(entry: dict) -> str:
    return f"{ENTRY_ICONS.get(entry['kind'], '•')} {format_datetime_human(entry['date'])[-5:]} {entry['title']}"


def week_table(days: list[dict]) -> Table:
    table = Table(title=f"🗓️  Week of {days[0]['day']}", show_header=True, header_style="bold magenta",
                  show_lines=True)
    table.add_column("Day", style="yellow", width=10)
    table.add_column("Entries", style="white")

    for day in days:
        label = date.fromisoformat(day["day"]).strftime("%a %m/%d")
        lines = [_entry_line(e) for e in day["entries"]]
        table.add_row(label, "\n".join(lines) if lines else "[dim]—[/dim]")
    return table


def _month_cell(cell: t.Optional[dict]) -> str:
    if cell is None:
        return ""
    number = date.fromisoformat(cell["day"]).day
    count = len(cell["entries"])
    return f"{number}\n[cyan]{count} item(s)[/cyan]" if count else str(number)


def month_table(weeks: list[list[t.Optional[dict]]]) -> Table:
    """Sunday-first month grid with the number of entries on each day."""
    first = next(cell for week in weeks for cell in week if cell)
    title = date.fromisoformat(first["day"]).strftime("%B %Y")
    table = Table(title=f"📅 {title}", show_header=True, header_style="bold magenta", show_lines=True)
    for name in ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"):
        table.add_column(name, justify="center")

    for week in weeks:
        table.add_row(*(_month_cell(cell) for cell in week))
    return table
