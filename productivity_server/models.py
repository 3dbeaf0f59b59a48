"""
Data models for to-do items and calendar entries.

This module contains the dataclasses used by the productivity server: standalone
to-do items, events stored in the calendar, and the merged entries shown for a
calendar day.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
import typing as t

from academics.models import local_naive


@dataclass
class TodoItem:
    """A standalone task with an optional due date."""
    title: str
    due_date: t.Optional[datetime] = None
    is_completed: bool = False
    notes: str = ""
    created_at: datetime = field(default_factory=datetime.now)
    id: t.Optional[int] = None

    def __post_init__(self) -> None:
        self.due_date = local_naive(self.due_date)


@dataclass
class CalendarEvent:
    """Represents a calendar event with title, times, notes and target calendar."""
    title: str
    start: datetime
    end: datetime
    notes: str = ""
    calendar: str = ""

    def __post_init__(self) -> None:
        self.start = local_naive(self.start)
        self.end = local_naive(self.end)


class EntryKind(str, Enum):
    """Where a calendar day entry came from."""
    ASSIGNMENT = "assignment"
    TODO = "todo"
    CALENDAR_EVENT = "calendar_event"


@dataclass
class CalendarEntry:
    """One item shown on a calendar day, whatever its source."""
    title: str
    date: datetime
    kind: EntryKind
    notes: str = ""
    is_completed: bool = False
