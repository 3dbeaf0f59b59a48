"""
FastAPI service for the student dashboard.

This service exposes the academic records, to-do list, calendar and Pomodoro
timer as REST API endpoints. All state is in memory and lives on ``app.state``;
it is created when the app starts, so each app instance starts empty.

Endpoints are ``async`` so that every timer operation and tick runs on the
event loop thread, one after the other.
"""
from __future__ import annotations

import logging
import os
import typing as t
from contextlib import asynccontextmanager
from datetime import date

from fastapi import Depends, FastAPI, Query, Request
from fastapi.responses import JSONResponse

from academics import models as academic_models
from academics.store import AcademicStore, RecordNotFound
from pomodoro.engine import PomodoroTimer, TimerState
from pomodoro.settings import TimerSettings
from productivity_server import calendar_sync
from productivity_server import models as productivity_models
from productivity_server.calendar_sync import CalendarService
from productivity_server.store import TodoStore
from services.shared.models import (
    Assignment as PydanticAssignment,
    CalendarAccessResponse,
    CalendarDay,
    CalendarEntry as PydanticCalendarEntry,
    CalendarEvent as PydanticCalendarEvent,
    CalendarSyncResponse,
    Course as PydanticCourse,
    CreateAssignmentRequest,
    CreateCourseRequest,
    CreateGradingComponentRequest,
    CreateSemesterRequest,
    CreateTodoRequest,
    GradingComponent as PydanticGradingComponent,
    RecordEarnedPointsRequest,
    AssignmentSortKey,
    Semester as PydanticSemester,
    TimerSettingsRequest,
    TimerStatus,
    TodoItem as PydanticTodoItem,
    UpdateAssignmentRequest,
    UpdateTodoRequest,
)

logger = logging.getLogger(__name__)

SERVICE_PORT = int(os.getenv("POMONEST_SERVICE_PORT", "8003"))

# Whether the stand-in calendar grants access when asked
CALENDAR_ACCESS = os.getenv("POMONEST_CALENDAR_ACCESS", "granted") == "granted"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the in-memory stores on startup and stop the timer on shutdown."""
    app.state.academics = AcademicStore()
    app.state.todos = TodoStore()
    app.state.calendar = CalendarService(grant_access=CALENDAR_ACCESS)
    app.state.timer = PomodoroTimer()
    logger.info("PomoNest service ready (calendar will %s access)", "grant" if CALENDAR_ACCESS else "deny")

    yield

    if app.state.timer.state is TimerState.RUNNING:
        app.state.timer.pause()


app = FastAPI(
    title="PomoNest Service",
    description="REST API for semesters, grades, assignments, to-dos, calendar and the Pomodoro timer",
    version="1.0.0",
    lifespan=lifespan,
)


@app.exception_handler(RecordNotFound)
async def record_not_found_handler(request: Request, exc: RecordNotFound) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


def get_academics(request: Request) -> AcademicStore:
    return request.app.state.academics


def get_todos(request: Request) -> TodoStore:
    return request.app.state.todos


def get_calendar(request: Request) -> CalendarService:
    return request.app.state.calendar


def get_timer(request: Request) -> PomodoroTimer:
    return request.app.state.timer


# --- conversions from the dataclass records ---

def _semester_out(store: AcademicStore, semester: academic_models.Semester) -> PydanticSemester:
    return PydanticSemester(
        id=semester.id,
        name=semester.name,
        start_date=semester.start_date,
        end_date=semester.end_date,
        gpa=store.semester_gpa(semester.id),
        course_count=len(store.courses_for(semester.id)),
    )


def _course_out(store: AcademicStore, course: academic_models.Course) -> PydanticCourse:
    return PydanticCourse(
        id=course.id,
        semester_id=course.semester_id,
        code=course.code,
        name=course.name,
        credit_hours=course.credit_hours,
        gpa=store.course_gpa(course.id),
        assignment_count=len(store.assignments_for_course(course.id)),
    )


def _component_out(component: academic_models.GradingComponent) -> PydanticGradingComponent:
    return PydanticGradingComponent(
        id=component.id,
        course_id=component.course_id,
        name=component.name,
        weight=component.weight,
        earned_points=component.earned_points,
        total_points=component.total_points,
        percentage=component.percentage,
        weighted_grade=component.weighted_grade,
    )


def _assignment_out(store: AcademicStore, assignment: academic_models.Assignment) -> PydanticAssignment:
    return PydanticAssignment(
        id=assignment.id,
        course_id=assignment.course_id,
        course_code=store.course_code_for(assignment),
        name=assignment.name,
        due_date=assignment.due_date,
        weight=assignment.weight,
        is_completed=assignment.is_completed,
        notes=assignment.notes,
    )


def _todo_out(item: productivity_models.TodoItem) -> PydanticTodoItem:
    return PydanticTodoItem(
        id=item.id,
        title=item.title,
        due_date=item.due_date,
        is_completed=item.is_completed,
        notes=item.notes,
        created_at=item.created_at,
    )


def _event_out(event: productivity_models.CalendarEvent) -> PydanticCalendarEvent:
    return PydanticCalendarEvent(
        title=event.title,
        start=event.start,
        end=event.end,
        notes=event.notes,
        calendar=event.calendar,
    )


def _entry_out(entry: productivity_models.CalendarEntry) -> PydanticCalendarEntry:
    return PydanticCalendarEntry(
        title=entry.title,
        date=entry.date,
        kind=entry.kind.value,
        notes=entry.notes,
        is_completed=entry.is_completed,
    )


def _day_out(day: date, entries: list[productivity_models.CalendarEntry]) -> CalendarDay:
    return CalendarDay(day=day, entries=[_entry_out(e) for e in entries])


@app.get("/health")
async def health_check():
    """Health check endpoint for container orchestration."""
    return {"status": "healthy", "service": "pomonest-service"}


# --- semesters ---

@app.post("/semesters", response_model=PydanticSemester, status_code=201)
async def create_semester(request: CreateSemesterRequest,
                          store: AcademicStore = Depends(get_academics)) -> PydanticSemester:
    """Create a semester."""
    semester = store.add_semester(academic_models.Semester(
        name=request.name,
        start_date=request.start_date,
        end_date=request.end_date,
    ))
    return _semester_out(store, semester)


@app.get("/semesters", response_model=list[PydanticSemester])
async def list_semesters(store: AcademicStore = Depends(get_academics)) -> list[PydanticSemester]:
    """List semesters, most recent start date first."""
    return [_semester_out(store, s) for s in store.list_semesters()]


@app.get("/semesters/{semester_id}", response_model=PydanticSemester)
async def get_semester(semester_id: int, store: AcademicStore = Depends(get_academics)) -> PydanticSemester:
    return _semester_out(store, store.get_semester(semester_id))


@app.delete("/semesters/{semester_id}", status_code=204)
async def delete_semester(semester_id: int, store: AcademicStore = Depends(get_academics)) -> None:
    """Delete a semester together with its courses, components and assignments."""
    store.delete_semester(semester_id)


# --- courses ---

@app.post("/semesters/{semester_id}/courses", response_model=PydanticCourse, status_code=201)
async def create_course(semester_id: int, request: CreateCourseRequest,
                        store: AcademicStore = Depends(get_academics)) -> PydanticCourse:
    """Add a course to a semester."""
    course = store.add_course(semester_id, academic_models.Course(
        code=request.code,
        name=request.name,
        credit_hours=request.credit_hours,
    ))
    return _course_out(store, course)


@app.get("/semesters/{semester_id}/courses", response_model=list[PydanticCourse])
async def list_courses(semester_id: int, store: AcademicStore = Depends(get_academics)) -> list[PydanticCourse]:
    store.get_semester(semester_id)
    return [_course_out(store, c) for c in store.courses_for(semester_id)]


@app.get("/courses/{course_id}", response_model=PydanticCourse)
async def get_course(course_id: int, store: AcademicStore = Depends(get_academics)) -> PydanticCourse:
    return _course_out(store, store.get_course(course_id))


@app.delete("/courses/{course_id}", status_code=204)
async def delete_course(course_id: int, store: AcademicStore = Depends(get_academics)) -> None:
    """Delete a course together with its components and assignments."""
    store.delete_course(course_id)


# --- grading components ---

@app.post("/courses/{course_id}/components", response_model=PydanticGradingComponent, status_code=201)
async def create_component(course_id: int, request: CreateGradingComponentRequest,
                           store: AcademicStore = Depends(get_academics)) -> PydanticGradingComponent:
    """Add a grading component to a course."""
    component = store.add_grading_component(course_id, academic_models.GradingComponent(
        name=request.name,
        weight=request.weight,
        earned_points=request.earned_points,
        total_points=request.total_points,
    ))
    return _component_out(component)


@app.get("/courses/{course_id}/components", response_model=list[PydanticGradingComponent])
async def list_components(course_id: int,
                          store: AcademicStore = Depends(get_academics)) -> list[PydanticGradingComponent]:
    store.get_course(course_id)
    return [_component_out(c) for c in store.components_for(course_id)]


@app.patch("/components/{component_id}", response_model=PydanticGradingComponent)
async def record_earned_points(component_id: int, request: RecordEarnedPointsRequest,
                               store: AcademicStore = Depends(get_academics)) -> PydanticGradingComponent:
    """Set the earned points of a component, or clear them with null."""
    return _component_out(store.record_earned_points(component_id, request.earned_points))


@app.delete("/components/{component_id}", status_code=204)
async def delete_component(component_id: int, store: AcademicStore = Depends(get_academics)) -> None:
    store.delete_grading_component(component_id)


# --- assignments ---

@app.post("/courses/{course_id}/assignments", response_model=PydanticAssignment, status_code=201)
async def create_assignment(course_id: int, request: CreateAssignmentRequest,
                            store: AcademicStore = Depends(get_academics)) -> PydanticAssignment:
    """Add an assignment to a course."""
    assignment = store.add_assignment(course_id, academic_models.Assignment(
        name=request.name,
        due_date=request.due_date,
        weight=request.weight,
        notes=request.notes,
    ))
    return _assignment_out(store, assignment)


@app.get("/assignments", response_model=list[PydanticAssignment])
async def track_assignments(
        semester_id: t.Optional[int] = None,
        course_id: t.Optional[int] = None,
        show_completed: bool = True,
        sort_by: AssignmentSortKey = "due_date",
        store: AcademicStore = Depends(get_academics),
) -> list[PydanticAssignment]:
    """
    List assignments for the tracker.

    Filter by course or semester, hide completed ones, and sort by due date,
    course code or name.
    """
    assignments = store.track_assignments(
        semester_id=semester_id,
        course_id=course_id,
        show_completed=show_completed,
        sort_by=sort_by,
    )
    return [_assignment_out(store, a) for a in assignments]


@app.put("/assignments/{assignment_id}", response_model=PydanticAssignment)
async def update_assignment(assignment_id: int, request: UpdateAssignmentRequest,
                            store: AcademicStore = Depends(get_academics)) -> PydanticAssignment:
    assignment = store.update_assignment(
        assignment_id, request.name, request.due_date, request.weight, request.notes
    )
    return _assignment_out(store, assignment)


@app.post("/assignments/{assignment_id}/toggle", response_model=PydanticAssignment)
async def toggle_assignment(assignment_id: int,
                            store: AcademicStore = Depends(get_academics)) -> PydanticAssignment:
    return _assignment_out(store, store.toggle_assignment(assignment_id))


@app.delete("/assignments/{assignment_id}", status_code=204)
async def delete_assignment(assignment_id: int, store: AcademicStore = Depends(get_academics)) -> None:
    store.delete_assignment(assignment_id)


# --- to-do items ---

@app.post("/todos", response_model=PydanticTodoItem, status_code=201)
async def create_todo(request: CreateTodoRequest, todos: TodoStore = Depends(get_todos)) -> PydanticTodoItem:
    item = todos.add(productivity_models.TodoItem(
        title=request.title,
        due_date=request.due_date,
        notes=request.notes,
    ))
    return _todo_out(item)


@app.get("/todos", response_model=list[PydanticTodoItem])
async def list_todos(todos: TodoStore = Depends(get_todos)) -> list[PydanticTodoItem]:
    """List to-do items by due date, then creation time."""
    return [_todo_out(i) for i in todos.list()]


@app.put("/todos/{item_id}", response_model=PydanticTodoItem)
async def update_todo(item_id: int, request: UpdateTodoRequest,
                      todos: TodoStore = Depends(get_todos)) -> PydanticTodoItem:
    return _todo_out(todos.update(item_id, request.title, request.due_date, request.notes))


@app.post("/todos/{item_id}/toggle", response_model=PydanticTodoItem)
async def toggle_todo(item_id: int, todos: TodoStore = Depends(get_todos)) -> PydanticTodoItem:
    return _todo_out(todos.toggle(item_id))


@app.delete("/todos/{item_id}", status_code=204)
async def delete_todo(item_id: int, todos: TodoStore = Depends(get_todos)) -> None:
    todos.delete(item_id)


# --- calendar ---

@app.post("/calendar/access", response_model=CalendarAccessResponse)
async def request_calendar_access(service: CalendarService = Depends(get_calendar)) -> CalendarAccessResponse:
    """Ask for calendar access. Reads and writes are skipped until granted."""
    return CalendarAccessResponse(granted=service.request_access())


@app.get("/calendar/day", response_model=list[PydanticCalendarEntry])
async def calendar_day(
        day: t.Optional[date] = None,
        store: AcademicStore = Depends(get_academics),
        todos: TodoStore = Depends(get_todos),
        service: CalendarService = Depends(get_calendar),
) -> list[PydanticCalendarEntry]:
    """
    Show everything on one day: assignments, to-do items and calendar events.

    Defaults to today. Calendar events are left out without calendar access.
    """
    entries = calendar_sync.agenda_for_day(day or date.today(), store, todos, service)
    return [_entry_out(e) for e in entries]


@app.get("/calendar/week", response_model=list[CalendarDay])
async def calendar_week(
        day: t.Optional[date] = None,
        store: AcademicStore = Depends(get_academics),
        todos: TodoStore = Depends(get_todos),
        service: CalendarService = Depends(get_calendar),
) -> list[CalendarDay]:
    """The Sunday-first week containing ``day`` (default today), one entry list per day."""
    week = calendar_sync.agenda_for_week(day or date.today(), store, todos, service)
    return [_day_out(d, entries) for d, entries in week]


@app.get("/calendar/month", response_model=list[list[t.Optional[CalendarDay]]])
async def calendar_month(
        year: t.Optional[int] = Query(default=None, ge=1900, le=2999),
        month: t.Optional[int] = Query(default=None, ge=1, le=12),
        store: AcademicStore = Depends(get_academics),
        todos: TodoStore = Depends(get_todos),
        service: CalendarService = Depends(get_calendar),
) -> list[list[t.Optional[CalendarDay]]]:
    """
    The month grid: Sunday-first weeks, null for days outside the month.

    Defaults to the current month.
    """
    today = date.today()
    grid = calendar_sync.agenda_for_month(year or today.year, month or today.month, store, todos, service)
    return [[_day_out(*cell) if cell else None for cell in week] for week in grid]


@app.post("/assignments/{assignment_id}/calendar", response_model=CalendarSyncResponse)
async def add_assignment_to_calendar(
        assignment_id: int,
        store: AcademicStore = Depends(get_academics),
        service: CalendarService = Depends(get_calendar),
) -> CalendarSyncResponse:
    assignment = store.get_assignment(assignment_id)
    event = calendar_sync.add_assignment_to_calendar(service, assignment, store.course_code_for(assignment))
    return CalendarSyncResponse(added=event is not None, event=_event_out(event) if event else None)


@app.post("/todos/{item_id}/calendar", response_model=CalendarSyncResponse)
async def add_todo_to_calendar(
        item_id: int,
        todos: TodoStore = Depends(get_todos),
        service: CalendarService = Depends(get_calendar),
) -> CalendarSyncResponse:
    event = calendar_sync.add_todo_to_calendar(service, todos.get(item_id))
    return CalendarSyncResponse(added=event is not None, event=_event_out(event) if event else None)


# --- pomodoro ---

@app.get("/pomodoro", response_model=TimerStatus)
async def timer_status(timer: PomodoroTimer = Depends(get_timer)) -> TimerStatus:
    return TimerStatus(**timer.snapshot())


@app.post("/pomodoro/start", response_model=TimerStatus)
async def start_timer(timer: PomodoroTimer = Depends(get_timer)) -> TimerStatus:
    timer.start()
    return TimerStatus(**timer.snapshot())


@app.post("/pomodoro/pause", response_model=TimerStatus)
async def pause_timer(timer: PomodoroTimer = Depends(get_timer)) -> TimerStatus:
    timer.pause()
    return TimerStatus(**timer.snapshot())


@app.post("/pomodoro/reset", response_model=TimerStatus)
async def reset_timer(timer: PomodoroTimer = Depends(get_timer)) -> TimerStatus:
    timer.reset()
    return TimerStatus(**timer.snapshot())


@app.post("/pomodoro/skip", response_model=TimerStatus)
async def skip_session(timer: PomodoroTimer = Depends(get_timer)) -> TimerStatus:
    timer.skip_to_next_session()
    return TimerStatus(**timer.snapshot())


@app.get("/pomodoro/settings", response_model=TimerSettings)
async def get_timer_settings(timer: PomodoroTimer = Depends(get_timer)) -> TimerSettings:
    return TimerSettings.from_timer(timer)


@app.put("/pomodoro/settings", response_model=TimerStatus)
async def update_timer_settings(request: TimerSettingsRequest,
                                timer: PomodoroTimer = Depends(get_timer)) -> TimerStatus:
    """Change the session lengths. The timer is reset to the new duration."""
    request.apply(timer)
    return TimerStatus(**timer.snapshot())


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=SERVICE_PORT)
