"""
Data models for semesters, courses, grading components and assignments.

Entities reference their parent through an explicit id (``semester_id``,
``course_id``); the store is responsible for cascading deletes along
those edges. Datetimes are kept as naive local time; aware values are
converted on the way in.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
import typing as t

from academics.grading import percentage, weighted_grade


def local_naive(moment: t.Optional[datetime]) -> t.Optional[datetime]:
    """Convert an aware datetime to naive local time. Naive values pass through."""
    if moment is None or moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)


@dataclass
class Semester:
    """A term with a name and a date range."""
    name: str
    start_date: date
    end_date: date
    id: t.Optional[int] = None


@dataclass
class Course:
    """A course taken during one semester."""
    code: str
    name: str
    credit_hours: int = 3
    semester_id: t.Optional[int] = None
    id: t.Optional[int] = None

    def __post_init__(self) -> None:
        if self.credit_hours < 1:
            raise ValueError(f"credit_hours must be a positive integer, got {self.credit_hours}")


@dataclass
class GradingComponent:
    """One weighted part of a course grade, e.g. "Midterm, 30%".

    ``weight`` is in percentage points. ``earned_points`` is None until the
    component has been graded.
    """
    name: str
    weight: float
    earned_points: t.Optional[float] = None
    total_points: float = 100.0
    course_id: t.Optional[int] = None
    id: t.Optional[int] = None

    @property
    def is_graded(self) -> bool:
        return self.earned_points is not None

    @property
    def percentage(self) -> float:
        return percentage(self)

    @property
    def weighted_grade(self) -> float:
        return weighted_grade(self)


@dataclass
class Assignment:
    """A deliverable with a due date, optionally weighted."""
    name: str
    due_date: datetime
    weight: t.Optional[float] = None  # percentage, 1-100
    is_completed: bool = False
    notes: str = ""
    course_id: t.Optional[int] = None
    id: t.Optional[int] = None

    def __post_init__(self) -> None:
        self.due_date = local_naive(self.due_date)
