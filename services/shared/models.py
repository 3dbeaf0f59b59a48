"""
Shared Pydantic models for REST API serialization.

This module contains Pydantic equivalents of the dataclass models used throughout
the system, plus the request bodies of the REST endpoints. Responses carry the
derived values (percentages, GPAs, formatted time) so clients never recompute them.
"""
from __future__ import annotations

import typing as t
from datetime import date, datetime

from pydantic import BaseModel, Field, field_validator, model_validator

from academics.models import local_naive
from pomodoro.settings import TimerSettings


AssignmentSortKey = t.Literal["due_date", "course", "name"]
TimerStateName = t.Literal["STOPPED", "RUNNING", "PAUSED"]
TimerModeName = t.Literal["WORK", "SHORT_BREAK", "LONG_BREAK"]
EntryKindName = t.Literal["assignment", "todo", "calendar_event"]


# Academic models
class Semester(BaseModel):
    """A semester with its derived GPA."""
    id: int
    name: str
    start_date: date
    end_date: date
    gpa: float = 0.0
    course_count: int = 0


class Course(BaseModel):
    """A course with its derived GPA."""
    id: int
    semester_id: int
    code: str
    name: str
    credit_hours: int
    gpa: float = 0.0
    assignment_count: int = 0


class GradingComponent(BaseModel):
    """A grading component with its derived percentage and weighted grade."""
    id: int
    course_id: int
    name: str
    weight: float
    earned_points: t.Optional[float] = None
    total_points: float
    percentage: float
    weighted_grade: float


class Assignment(BaseModel):
    """An assignment with the code of its course."""
    id: int
    course_id: int
    course_code: str = ""
    name: str
    due_date: datetime
    weight: t.Optional[float] = None
    is_completed: bool = False
    notes: str = ""


# Productivity models
class TodoItem(BaseModel):
    """Represents a to-do item with title, due date, and notes."""
    id: int
    title: str
    due_date: t.Optional[datetime] = None
    is_completed: bool = False
    notes: str = ""
    created_at: datetime


class CalendarEvent(BaseModel):
    """Represents a calendar event with title, times, and notes."""
    title: str
    start: datetime
    end: datetime
    notes: str = ""
    calendar: str = ""


class CalendarEntry(BaseModel):
    """One item shown on a calendar day."""
    title: str
    date: datetime
    kind: EntryKindName
    notes: str = ""
    is_completed: bool = False


class CalendarDay(BaseModel):
    """One day of the week or month view with its entries."""
    day: date
    entries: list[CalendarEntry] = []


class TimerStatus(BaseModel):
    """Snapshot of the Pomodoro timer."""
    state: TimerStateName
    mode: TimerModeName
    remaining_seconds: int
    formatted_time: str
    completed_work_sessions: int
    current_session_number: int
    work_duration: int
    short_break_duration: int
    long_break_duration: int
    sessions_until_long_break: int


# Request models for API endpoints
class CreateSemesterRequest(BaseModel):
    """Request model for creating a semester."""
    name: str = Field(min_length=1)
    start_date: date
    end_date: date

    @model_validator(mode="after")
    def _check_range(self) -> CreateSemesterRequest:
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class CreateCourseRequest(BaseModel):
    """Request model for adding a course to a semester."""
    code: str = Field(min_length=1)
    name: str = Field(min_length=1)
    credit_hours: int = Field(default=3, ge=1, le=6)


class CreateGradingComponentRequest(BaseModel):
    """Request model for adding a grading component to a course."""
    name: str = Field(min_length=1)
    weight: float = Field(ge=1, le=100)
    earned_points: t.Optional[float] = Field(default=None, ge=0)
    total_points: float = Field(default=100.0, gt=0)


class RecordEarnedPointsRequest(BaseModel):
    """Request model for grading a component; null clears the grade."""
    earned_points: t.Optional[float] = Field(default=None, ge=0)


class CreateAssignmentRequest(BaseModel):
    """Request model for adding an assignment to a course."""
    name: str = Field(min_length=1)
    due_date: datetime
    weight: t.Optional[float] = Field(default=None, ge=1, le=100)
    notes: str = ""

    @field_validator("due_date")
    @classmethod
    def due_date_local(cls, value: t.Optional[datetime]) -> t.Optional[datetime]:
        return local_naive(value)


class UpdateAssignmentRequest(CreateAssignmentRequest):
    """Request model for editing an assignment."""


class CreateTodoRequest(BaseModel):
    """Request model for creating a to-do item."""
    title: str = Field(min_length=1)
    due_date: t.Optional[datetime] = None
    notes: str = ""

    @field_validator("due_date")
    @classmethod
    def due_date_local(cls, value: t.Optional[datetime]) -> t.Optional[datetime]:
        return local_naive(value)


class UpdateTodoRequest(CreateTodoRequest):
    """Request model for editing a to-do item."""


class CalendarAccessResponse(BaseModel):
    """Response model for a calendar access request."""
    granted: bool


class CalendarSyncResponse(BaseModel):
    """Response model for writing an item to the calendar."""
    added: bool
    event: t.Optional[CalendarEvent] = None


class TimerSettingsRequest(TimerSettings):
    """Request model for changing the Pomodoro settings."""
