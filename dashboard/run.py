# -*- coding: utf-8 -*-
"""Command line dashboard for PomoNest.

Most commands read from and write to the PomoNest REST service
(``POMONEST_SERVICE_URL``). ``focus`` runs a Pomodoro timer locally and
``tools`` lists the MCP tools without any service.

Examples:
    # Start the service in another terminal
    python -m services.pomonest_service.app

    pomonest add-semester "Fall 2025" 2025-09-01 2025-12-20
    pomonest semesters
    pomonest grades 2
    pomonest focus --work 50 --sessions 2
"""
import asyncio
import json
import typing as t
from datetime import date, datetime

import click
from pydantic import ValidationError
from rich.json import JSON
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from dashboard.client import SERVICE_URL, ServiceClient
from dashboard.utils import (
    MODE_COLORS,
    MODE_LABELS,
    agenda_table,
    assignments_table,
    components_table,
    configure_logging,
    console,
    courses_table,
    month_table,
    semesters_table,
    todos_table,
    week_table,
)
from pomodoro.engine import PomodoroTimer, TimerEvent
from pomodoro.settings import TimerSettings
from pomodoro.ticker import AsyncioTicker


def make_client() -> ServiceClient:
    """Client for the configured service URL."""
    return ServiceClient(SERVICE_URL)


def _call(fn: t.Callable[[ServiceClient], t.Any]) -> t.Any:
    """Run ``fn`` with a client and exit with a message if the service fails."""
    try:
        with make_client() as client:
            return fn(client)
    except RuntimeError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise SystemExit(1)


def render_timer(timer: PomodoroTimer) -> Panel:
    """Panel showing the countdown, the session kind and the session count."""
    snapshot = timer.snapshot()
    color = MODE_COLORS[snapshot["mode"]]
    body = Text(justify="center")
    body.append(f"{snapshot['formatted_time']}\n", style=f"bold {color}")
    body.append(f"{MODE_LABELS[snapshot['mode']]}", style=color)
    if snapshot["mode"] == "WORK":
        body.append(f"  ·  Session {snapshot['current_session_number']}", style="dim")
    body.append(f"\nCompleted Sessions: {snapshot['completed_work_sessions']}", style="dim")
    return Panel(body, title="🍅 Pomodoro", subtitle=snapshot["state"].lower(), expand=False)


async def run_focus(settings: TimerSettings, sessions: int, tick_interval: float = 1.0) -> PomodoroTimer:
    """Run a timer until ``sessions`` work sessions are completed.

    Args:
        settings: Durations to apply before starting.
        sessions: Work sessions to complete before stopping.
        tick_interval: Seconds between ticks (1.0 outside of tests).

    Returns:
        The paused timer.
    """
    timer = PomodoroTimer(ticker=AsyncioTicker(tick_interval))
    settings.apply(timer)
    finished = asyncio.Event()

    with Live(render_timer(timer), console=console, refresh_per_second=4, transient=True) as live:
        def on_event(event: TimerEvent, current: PomodoroTimer) -> None:
            live.update(render_timer(current))
            if event is TimerEvent.SESSION_COMPLETED and current.completed_work_sessions >= sessions:
                current.pause()
                finished.set()

        timer.subscribe(on_event)
        timer.start()
        try:
            await finished.wait()
        finally:
            timer.pause()

    return timer


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--log-level", default=None, help="Logging level (default: POMONEST_LOG_LEVEL or WARNING).")
def cli(log_level: t.Optional[str]) -> None:
    """PomoNest: semesters, grades, assignments, to-dos and a Pomodoro timer."""
    configure_logging(log_level)


@cli.command()
def semesters() -> None:
    """List semesters with their GPA, most recent first."""
    items = _call(lambda c: c.list_semesters())
    if not items:
        console.print("[yellow]Welcome to PomoNest! Get started by adding your first semester.[/yellow]")
        return
    console.print(semesters_table(items))


@cli.command("add-semester")
@click.argument("name")
@click.argument("start_date")
@click.argument("end_date")
def add_semester(name: str, start_date: str, end_date: str) -> None:
    """Add a semester. Dates are YYYY-MM-DD."""
    semester = _call(lambda c: c.create_semester(name, start_date, end_date))
    console.print(f"[green]✓[/green] Added semester {semester['name']} (id {semester['id']})")


@cli.command()
@click.argument("semester_id", type=int)
def courses(semester_id: int) -> None:
    """List the courses of a semester."""
    items = _call(lambda c: c.list_courses(semester_id))
    if not items:
        console.print("[yellow]No courses added yet[/yellow]")
        return
    console.print(courses_table(items))


@cli.command("add-course")
@click.argument("semester_id", type=int)
@click.argument("code")
@click.argument("name")
@click.option("--credits", "credit_hours", type=click.IntRange(1, 6), default=3, show_default=True,
              help="Credit hours.")
def add_course(semester_id: int, code: str, name: str, credit_hours: int) -> None:
    """Add a course to a semester."""
    course = _call(lambda c: c.create_course(semester_id, code, name, credit_hours))
    console.print(f"[green]✓[/green] Added course {course['code']} (id {course['id']})")


@cli.command()
@click.argument("course_id", type=int)
def grades(course_id: int) -> None:
    """Show the grade calculator of a course."""
    def fetch(client: ServiceClient) -> tuple[dict, list[dict]]:
        return client.get_course(course_id), client.list_components(course_id)

    course, components = _call(fetch)
    if not components:
        console.print(f"[yellow]No grading components added yet for {course['code']}[/yellow]")
        return
    console.print(components_table(course, components))


@cli.command("add-component")
@click.argument("course_id", type=int)
@click.argument("name")
@click.argument("weight", type=click.FloatRange(1, 100))
@click.option("--earned", type=float, default=None, help="Points earned; omit while ungraded.")
@click.option("--total", type=click.FloatRange(min=0, min_open=True), default=100.0, show_default=True,
              help="Points possible.")
def add_component(course_id: int, name: str, weight: float, earned: t.Optional[float], total: float) -> None:
    """Add a grading component (weight in percent) to a course."""
    component = _call(lambda c: c.create_component(course_id, name, weight, earned, total))
    console.print(f"[green]✓[/green] Added {component['name']} (id {component['id']})")


@cli.command()
@click.argument("component_id", type=int)
@click.argument("earned", type=float, required=False)
def grade(component_id: int, earned: t.Optional[float]) -> None:
    """Record the points earned on a component; omit EARNED to clear it."""
    component = _call(lambda c: c.record_earned_points(component_id, earned))
    console.print(f"[green]✓[/green] {component['name']}: {component['percentage']:.0f}%")


@cli.command()
@click.option("--semester", "semester_id", type=int, default=None, help="Only this semester.")
@click.option("--course", "course_id", type=int, default=None, help="Only this course.")
@click.option("--hide-completed", is_flag=True, help="Leave out completed assignments.")
@click.option("--sort", "sort_by", type=click.Choice(["due_date", "course", "name"]),
              default="due_date", show_default=True)
def assignments(semester_id: t.Optional[int], course_id: t.Optional[int],
                hide_completed: bool, sort_by: str) -> None:
    """Track assignments across courses."""
    items = _call(lambda c: c.track_assignments(semester_id, course_id, not hide_completed, sort_by))
    if not items:
        console.print("[yellow]No assignments. Add your first assignment to get started[/yellow]")
        return
    console.print(assignments_table(items))


@cli.command("add-assignment")
@click.argument("course_id", type=int)
@click.argument("name")
@click.argument("due")
@click.option("--weight", type=click.FloatRange(1, 100), default=None, help="Weight in percent.")
@click.option("--notes", default="", help="Free text notes.")
def add_assignment(course_id: int, name: str, due: str, weight: t.Optional[float], notes: str) -> None:
    """Add an assignment. DUE is an ISO datetime, e.g. 2025-10-01T23:59."""
    assignment = _call(lambda c: c.create_assignment(course_id, name, due, weight, notes))
    console.print(f"[green]✓[/green] Added {assignment['course_code']}: {assignment['name']}")


@cli.command()
def todos() -> None:
    """Show the to-do list."""
    items = _call(lambda c: c.list_todos())
    if not items:
        console.print("[yellow]No tasks yet. Add your first task![/yellow]")
        return
    console.print(todos_table(items))


@cli.command("add-todo")
@click.argument("title")
@click.option("--due", default=None, help="Due time as ISO datetime.")
@click.option("--notes", default="", help="Free text notes.")
def add_todo(title: str, due: t.Optional[str], notes: str) -> None:
    """Add a to-do item."""
    item = _call(lambda c: c.create_todo(title, due, notes))
    console.print(f"[green]✓[/green] Added task {item['title']} (id {item['id']})")


@cli.command()
@click.argument("item_id", type=int)
def done(item_id: int) -> None:
    """Toggle a to-do item between open and completed."""
    item = _call(lambda c: c.toggle_todo(item_id))
    state = "completed" if item["is_completed"] else "open"
    console.print(f"[green]✓[/green] {item['title']} is {state}")


@cli.command()
@click.option("--day", default=None, help="Day as YYYY-MM-DD (default: today).")
def agenda(day: t.Optional[str]) -> None:
    """Show assignments, to-dos and calendar events of one day."""
    entries = _call(lambda c: c.calendar_day(day))
    label = day or date.today().isoformat()
    if not entries:
        console.print(f"[yellow]No events for {label}[/yellow]")
        return
    console.print(agenda_table(label, entries))


@cli.command("calendar")
@click.option("--week", "view", flag_value="week", default=True, help="Show the week containing DAY (default).")
@click.option("--month", "view", flag_value="month", help="Show the month containing DAY.")
@click.option("--day", type=click.DateTime(formats=["%Y-%m-%d"]), default=None,
              help="Day as YYYY-MM-DD (default: today).")
def calendar_view(view: str, day: t.Optional[datetime]) -> None:
    """Show the week or month calendar with assignments, to-dos and events."""
    target = day.date() if day else date.today()
    if view == "month":
        weeks = _call(lambda c: c.calendar_month(target.year, target.month))
        console.print(month_table(weeks))
        return
    days = _call(lambda c: c.calendar_week(target.isoformat()))
    console.print(week_table(days))


@cli.command()
@click.option("--work", "work_minutes", type=int, default=25, show_default=True, help="Work minutes (1-60).")
@click.option("--short-break", "short_break_minutes", type=int, default=5, show_default=True,
              help="Short break minutes (1-30).")
@click.option("--long-break", "long_break_minutes", type=int, default=15, show_default=True,
              help="Long break minutes (5-60).")
@click.option("--long-break-every", "sessions_until_long_break", type=int, default=4, show_default=True,
              help="Work sessions between long breaks (2-8).")
@click.option("--sessions", type=click.IntRange(min=1), default=4, show_default=True,
              help="Stop after this many work sessions.")
@click.option("--tick-interval", type=float, default=1.0, hidden=True)
def focus(work_minutes: int, short_break_minutes: int, long_break_minutes: int,
          sessions_until_long_break: int, sessions: int, tick_interval: float) -> None:
    """Run a Pomodoro timer in the terminal. Ctrl-C stops it."""
    try:
        settings = TimerSettings(
            work_minutes=work_minutes,
            short_break_minutes=short_break_minutes,
            long_break_minutes=long_break_minutes,
            sessions_until_long_break=sessions_until_long_break,
        )
    except ValidationError as e:
        raise click.BadParameter(str(e))

    try:
        timer = asyncio.run(run_focus(settings, sessions, tick_interval))
    except KeyboardInterrupt:
        console.print("\n[yellow]Timer stopped.[/yellow]")
        return

    console.print(f"[green]🍅 Completed {timer.completed_work_sessions} work session(s).[/green]")


@cli.command()
@click.argument("tool_names", nargs=-1, type=str)
def tools(tool_names: tuple[str, ...]) -> None:
    """Display information about available MCP tools.

    TOOL_NAMES: Optional tool names (format: server.tool_name or tool_name).
                If not provided, lists all available tools.
    """
    from registry import list_tool_schemas

    available_tools = asyncio.run(list_tool_schemas())

    if not tool_names:
        console.print("[bold blue]📋 Available MCP Tools[/bold blue]\n")
        tools_by_server: dict[str, list[str]] = {}
        for tool in available_tools:
            tools_by_server.setdefault(tool["server"], []).append(tool["name"])

        for server, names in sorted(tools_by_server.items()):
            console.print(f"[cyan]{server}[/cyan]")
            for name in sorted(names):
                console.print(f"  • {name}")
            console.print()
        return

    for tool_name in tool_names:
        if "." in tool_name:
            server_name, name = tool_name.split(".", 1)
            matching = [x for x in available_tools if x["server"] == server_name and x["name"] == name]
        else:
            matching = [x for x in available_tools if x["name"] == tool_name]

        if not matching:
            console.print(f"[yellow]Warning: Tool '{tool_name}' not found[/yellow]")
            continue
        for tool in matching:
            console.print(f"\n[bold cyan]{tool['server']}.{tool['name']}[/bold cyan]\n")
            console.print(JSON(json.dumps(tool, indent=2)))


if __name__ == "__main__":
    cli()
