"""Tests for the MCP server tools and their text reports."""
import typing as t
from datetime import date, datetime

import pytest

from academics import server as academics_server
from academics.store import RecordNotFound, store
from pomodoro import server as pomodoro_server
from pomodoro.engine import PomodoroTimer
from productivity_server import server as productivity_server
from productivity_server.calendar_sync import CalendarService
from productivity_server.models import CalendarEntry, EntryKind
from productivity_server.store import todos
from registry import list_tool_schemas


class ManualTicker:
    """Ticker that never fires."""

    def start(self, callback: t.Callable[[], None]) -> None:
        pass

    def cancel(self) -> None:
        pass


@pytest.fixture(autouse=True)
def clean_state(monkeypatch: pytest.MonkeyPatch) -> None:
    """Empty the module-level stores and swap in a fresh calendar and timer."""
    store.clear()
    todos.clear()
    monkeypatch.setattr(productivity_server, "calendar_service", CalendarService())
    monkeypatch.setattr(pomodoro_server, "timer", PomodoroTimer(ticker=ManualTicker()))


def test_grade_report_for_latest_semester() -> None:
    academics_server.add_semester.fn("Spring 2025", "2025-01-10", "2025-05-10")
    fall = academics_server.add_semester.fn("Fall 2025", "2025-09-01", "2025-12-20")
    course = academics_server.add_course.fn(fall.id, "CS101", "Intro to Programming", credit_hours=3)
    academics_server.add_grading_component.fn(course.id, "Homework", 50, earned_points=90)
    exam = academics_server.add_grading_component.fn(course.id, "Exam", 50)
    academics_server.record_earned_points.fn(exam.id, 90)

    report = academics_server.show_grade_report.fn()

    assert report.startswith("🎓 FALL 2025")
    assert "CS101" in report
    assert "2/2" in report
    assert report.endswith("Semester GPA: 0.90")
    assert academics_server.get_course_gpa.fn(course.id) == pytest.approx(0.9)
    assert academics_server.get_semester_gpa.fn(fall.id) == pytest.approx(0.9)


def test_grade_report_without_data() -> None:
    assert "No semesters yet" in academics_server.show_grade_report.fn()

    semester = academics_server.add_semester.fn("Fall 2025", "2025-09-01", "2025-12-20")
    assert academics_server.show_grade_report.fn(semester.id).endswith("No courses added yet.")


def test_assignment_tools() -> None:
    semester = academics_server.add_semester.fn("Fall 2025", "2025-09-01", "2025-12-20")
    course = academics_server.add_course.fn(semester.id, "CS101", "Intro")

    assignment = academics_server.add_assignment.fn(course.id, "Lab", "2025-10-05T12:00:00", weight=10)

    assert assignment.due_date == datetime(2025, 10, 5, 12, 0)
    assert academics_server.toggle_assignment.fn(assignment.id).is_completed
    with pytest.raises(RecordNotFound):
        academics_server.toggle_assignment.fn(999)


def test_todo_tools_and_report() -> None:
    assert productivity_server.show_todos.fn() == "✅ No tasks yet. Add your first task!"

    item = productivity_server.create_todo.fn("Read chapter 3", due="2025-10-02T20:00:00", notes="pages 40-80")
    productivity_server.create_todo.fn("Someday")
    productivity_server.toggle_todo.fn(item.id)

    report = productivity_server.show_todos.fn()
    assert "Read chapter 3" in report
    assert "[x]" in report
    assert report.endswith("Total: 2 task(s), 1 completed")

    updated = productivity_server.update_todo.fn(item.id, "Read chapter 4")
    assert updated.due_date is None
    assert productivity_server.delete_todo.fn(item.id) == f"Deleted to-do {item.id}"
    assert [i.title for i in productivity_server.list_todos.fn()] == ["Someday"]


def test_calendar_tools_require_access() -> None:
    item = productivity_server.create_todo.fn("Call home", due="2025-10-03T18:00:00")

    assert productivity_server.add_todo_to_calendar.fn(item.id) is None

    assert productivity_server.request_calendar_access.fn() is True
    event = productivity_server.add_todo_to_calendar.fn(item.id)
    assert event.title == "Todo: Call home"
    assert productivity_server.list_calendar_events.fn("2025-10-03T00:00:00", "2025-10-04T00:00:00") == [event]


def test_assignment_to_calendar_uses_course_code() -> None:
    semester = academics_server.add_semester.fn("Fall 2025", "2025-09-01", "2025-12-20")
    course = academics_server.add_course.fn(semester.id, "MA201", "Linear Algebra")
    assignment = academics_server.add_assignment.fn(course.id, "Problem Set", "2025-10-01T09:00:00")
    productivity_server.request_calendar_access.fn()

    event = productivity_server.add_assignment_to_calendar.fn(assignment.id)

    assert event.title == "MA201: Problem Set"


def test_show_agenda() -> None:
    productivity_server.create_todo.fn("Groceries", due="2025-10-01T18:00:00")

    agenda = productivity_server.show_agenda.fn("2025-10-01")

    assert agenda.startswith("📅 EVENTS FOR WEDNESDAY, OCTOBER 01, 2025")
    assert "18:00  ✅  Groceries" in agenda
    assert productivity_server.show_agenda.fn("2025-10-02").endswith("No events for this day")


def test_format_agenda_marks_completed_entries() -> None:
    entries = [CalendarEntry("Essay", datetime(2025, 10, 1, 23, 59), EntryKind.ASSIGNMENT,
                             notes="1500 words", is_completed=True)]

    agenda = productivity_server.format_agenda(date(2025, 10, 1), entries)

    assert "23:59  📚  ~Essay~" in agenda
    assert "1500 words" in agenda


@pytest.mark.asyncio
async def test_pomodoro_tools() -> None:
    status = await pomodoro_server.start_timer.fn()
    assert status["state"] == "RUNNING"

    status = await pomodoro_server.skip_session.fn()
    assert status["mode"] == "SHORT_BREAK"
    assert status["remaining_seconds"] == 300

    status = await pomodoro_server.pause_timer.fn()
    assert status["state"] == "PAUSED"

    status = await pomodoro_server.configure_timer.fn(work_minutes=45)
    assert status["state"] == "STOPPED"
    assert status["work_duration"] == 2700
    assert status["mode"] == "SHORT_BREAK"

    status = await pomodoro_server.reset_timer.fn()
    assert status["formatted_time"] == "05:00"
    assert (await pomodoro_server.timer_status.fn())["completed_work_sessions"] == 1


@pytest.mark.asyncio
async def test_tool_schemas_cover_every_server() -> None:
    schemas = await list_tool_schemas()
    names = {(s["server"], s["name"]) for s in schemas}

    assert ("academics_server", "show_grade_report") in names
    assert ("productivity_server", "show_agenda") in names
    assert ("pomodoro_server", "configure_timer") in names
    add_course = next(s for s in schemas if s["name"] == "add_course")
    assert "semester_id" in add_course["inputSchema"]["properties"]


def test_todo_tools_accept_utc_and_local_due_dates() -> None:
    productivity_server.create_todo.fn("Local", due="2026-10-21T09:00:00")
    utc = productivity_server.create_todo.fn("UTC", due="2026-10-20T09:00:00Z")

    assert utc.due_date.tzinfo is None
    assert [i.title for i in productivity_server.list_todos.fn()] == ["UTC", "Local"]
    assert "UTC" in productivity_server.show_agenda.fn(utc.due_date.date().isoformat())


def test_show_week_lists_each_day() -> None:
    productivity_server.create_todo.fn("Groceries", due="2025-10-01T18:00:00")

    week = productivity_server.show_week.fn("2025-10-01")

    assert week.startswith("🗓️  WEEK OF SEPTEMBER 28, 2025")
    assert "Sun 09/28" in week
    assert "Sat 10/04" in week
    assert "    18:00  ✅  Groceries" in week


def test_show_month_counts_entries_per_day() -> None:
    productivity_server.create_todo.fn("Groceries", due="2025-10-01T18:00:00")
    productivity_server.create_todo.fn("Laundry", due="2025-10-01T20:00:00")

    month = productivity_server.show_month.fn(2025, 10)
    lines = month.splitlines()

    assert lines[0] == "📅 OCTOBER 2025"
    assert lines[1].startswith("Sun")
    assert "1(2)" in lines[2]
    assert lines[-1].split()[-1] == "31"
