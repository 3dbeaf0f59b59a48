"""
Calendar integration: the calendar collaborator and the projection of
assignments and to-do items onto it.

``CalendarService`` stands in for the device calendar. Reading and writing
require access to have been granted; without it both raise
``CalendarAccessError``. The module-level helpers log and swallow those
failures, so callers get an empty list or ``None`` instead of an exception.
"""
from __future__ import annotations

import calendar
import logging
import typing as t
from datetime import date, datetime, time, timedelta

from academics.models import Assignment, local_naive
from productivity_server.models import CalendarEntry, CalendarEvent, EntryKind, TodoItem

if t.TYPE_CHECKING:
    from academics.store import AcademicStore
    from productivity_server.store import TodoStore

logger = logging.getLogger(__name__)

DEFAULT_CALENDAR = "Calendar"
EVENT_DURATION = timedelta(hours=1)
FETCH_WINDOW = timedelta(days=30)


class CalendarAccessError(PermissionError):
    """Raised when the calendar is used before access was granted."""


class CalendarService:
    """In-memory calendar with permission-gated reads and writes.

    :param grant_access: Whether ``request_access`` succeeds.
    :param default_calendar: Calendar that new events are written to.
    """

    def __init__(self, grant_access: bool = True, default_calendar: str = DEFAULT_CALENDAR) -> None:
        self._grant_access = grant_access
        self.default_calendar = default_calendar
        self.has_access = False
        self._events: list[CalendarEvent] = []

    def request_access(self) -> bool:
        self.has_access = self._grant_access
        if not self.has_access:
            logger.warning("Calendar access denied")
        return self.has_access

    def events_between(self, start: datetime, end: datetime) -> list[CalendarEvent]:
        """Events starting in ``[start, end)``, ordered by start time."""
        self._check_access()
        start, end = local_naive(start), local_naive(end)
        return sorted(
            (e for e in self._events if start <= e.start < end),
            key=lambda e: e.start,
        )

    def save_event(self, event: CalendarEvent) -> CalendarEvent:
        self._check_access()
        if not event.calendar:
            event.calendar = self.default_calendar
        self._events.append(event)
        return event

    def _check_access(self) -> None:
        if not self.has_access:
            raise CalendarAccessError("Calendar access has not been granted")


def start_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.min)


def assignment_event(assignment: Assignment, course_code: str) -> CalendarEvent:
    """Project an assignment onto a one-hour event at its due time."""
    return CalendarEvent(
        title=f"{course_code}: {assignment.name}",
        start=assignment.due_date,
        end=assignment.due_date + EVENT_DURATION,
        notes=assignment.notes,
    )


def todo_event(todo: TodoItem) -> t.Optional[CalendarEvent]:
    """Project a to-do item onto a one-hour event; None if it has no due date."""
    if todo.due_date is None:
        return None
    return CalendarEvent(
        title=f"Todo: {todo.title}",
        start=todo.due_date,
        end=todo.due_date + EVENT_DURATION,
        notes=todo.notes,
    )


def add_assignment_to_calendar(service: CalendarService, assignment: Assignment,
                               course_code: str) -> t.Optional[CalendarEvent]:
    """Write an assignment to the calendar.

    :return: The saved event, or None when access is missing or the save fails.
    """
    if not service.has_access:
        return None
    try:
        return service.save_event(assignment_event(assignment, course_code))
    except CalendarAccessError as e:
        logger.warning("Error saving event: %s", e)
        return None


def add_todo_to_calendar(service: CalendarService, todo: TodoItem) -> t.Optional[CalendarEvent]:
    """Write a dated to-do item to the calendar.

    :return: The saved event, or None when the item has no due date, access is
        missing or the save fails.
    """
    event = todo_event(todo)
    if event is None or not service.has_access:
        return None
    try:
        return service.save_event(event)
    except CalendarAccessError as e:
        logger.warning("Error saving event: %s", e)
        return None


def fetch_events(service: CalendarService, start: t.Optional[datetime] = None,
                 end: t.Optional[datetime] = None) -> list[CalendarEvent]:
    """Read native calendar events, by default from today to 30 days ahead."""
    if not service.has_access:
        return []
    if start is None:
        start = start_of_day(datetime.now())
    if end is None:
        end = datetime.now() + FETCH_WINDOW
    try:
        return service.events_between(start, end)
    except CalendarAccessError as e:
        logger.warning("Error fetching events: %s", e)
        return []


def entries_for_day(
        day: date,
        assignments: t.Iterable[tuple[Assignment, str]],
        todos: t.Iterable[TodoItem],
        events: t.Iterable[CalendarEvent],
) -> list[CalendarEntry]:
    """Merge everything falling on ``day`` into one list ordered by time.

    :param day: The calendar day.
    :param assignments: ``(assignment, course_code)`` pairs.
    :param todos: To-do items; undated items are skipped.
    :param events: Native calendar events, matched on their start time.
    """
    entries: list[CalendarEntry] = []

    for assignment, course_code in assignments:
        if assignment.due_date.date() == day:
            entries.append(CalendarEntry(
                title=f"{course_code}: {assignment.name}",
                date=assignment.due_date,
                kind=EntryKind.ASSIGNMENT,
                notes=assignment.notes,
                is_completed=assignment.is_completed,
            ))

    for todo in todos:
        if todo.due_date is not None and todo.due_date.date() == day:
            entries.append(CalendarEntry(
                title=todo.title,
                date=todo.due_date,
                kind=EntryKind.TODO,
                notes=todo.notes,
                is_completed=todo.is_completed,
            ))

    for event in events:
        if event.start.date() == day:
            entries.append(CalendarEntry(
                title=event.title,
                date=event.start,
                kind=EntryKind.CALENDAR_EVENT,
                notes=event.notes,
            ))

    return sorted(entries, key=lambda e: e.date)


def month_grid(year: int, month: int) -> list[list[t.Optional[date]]]:
    """Weeks of a month, Sunday first, with ``None`` outside the month."""
    weeks = calendar.Calendar(firstweekday=calendar.SUNDAY).monthdatescalendar(year, month)
    return [[d if d.month == month else None for d in week] for week in weeks]


def week_of(day: date) -> list[date]:
    """The seven days of the Sunday-first week containing ``day``."""
    sunday = day - timedelta(days=(day.weekday() + 1) % 7)
    return [sunday + timedelta(days=i) for i in range(7)]


def agenda_for_day(day: date, academic_store: AcademicStore, todo_store: TodoStore,
                   service: CalendarService) -> list[CalendarEntry]:
    """Everything due or scheduled on ``day``, read from the stores and the calendar."""
    start = datetime.combine(day, time.min)
    events = fetch_events(service, start, start + timedelta(days=1))
    assignments = [(a, academic_store.course_code_for(a)) for a in academic_store.all_assignments()]
    return entries_for_day(day, assignments, todo_store.list(), events)


def agenda_for_week(day: date, academic_store: AcademicStore, todo_store: TodoStore,
                    service: CalendarService) -> list[tuple[date, list[CalendarEntry]]]:
    """Entries for each day of the Sunday-first week containing ``day``."""
    return [(d, agenda_for_day(d, academic_store, todo_store, service)) for d in week_of(day)]


def agenda_for_month(year: int, month: int, academic_store: AcademicStore, todo_store: TodoStore,
                     service: CalendarService) -> list[list[t.Optional[tuple[date, list[CalendarEntry]]]]]:
    """The month grid with each day's entries; ``None`` pads days outside the month."""
    return [
        [(d, agenda_for_day(d, academic_store, todo_store, service)) if d else None for d in week]
        for week in month_grid(year, month)
    ]
