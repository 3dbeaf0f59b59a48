# -*- coding: utf-8 -*-
"""
In-memory storage for semesters, courses, grading components and assignments.

Records are kept in insertion order and linked by parent id. Deletes cascade
Semester -> Course -> {Assignment, GradingComponent}, enforced here rather than
by the storage layer.
"""
from __future__ import annotations

import itertools
import logging
import typing as t
from datetime import datetime

from academics import grading
from academics.models import Assignment, Course, GradingComponent, Semester, local_naive

logger = logging.getLogger(__name__)

SortKey = t.Literal["due_date", "course", "name"]


class RecordNotFound(KeyError):
    """Raised when a record id does not exist in a store."""

    def __init__(self, kind: str, record_id: int) -> None:
        super().__init__(f"{kind} {record_id} not found")
        self.kind = kind
        self.record_id = record_id

    def __str__(self) -> str:
        return self.args[0]


class AcademicStore:
    """Holds the academic records of one student."""

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self._semesters: dict[int, Semester] = {}
        self._courses: dict[int, Course] = {}
        self._components: dict[int, GradingComponent] = {}
        self._assignments: dict[int, Assignment] = {}

    # --- semesters ---

    def add_semester(self, semester: Semester) -> Semester:
        semester.id = next(self._ids)
        self._semesters[semester.id] = semester
        return semester

    def get_semester(self, semester_id: int) -> Semester:
        return self._lookup(self._semesters, "Semester", semester_id)

    def list_semesters(self) -> list[Semester]:
        """All semesters, most recent start date first."""
        return sorted(self._semesters.values(), key=lambda s: s.start_date, reverse=True)

    def latest_semester(self) -> t.Optional[Semester]:
        """The semester shown by default, i.e. the one that started last."""
        semesters = self.list_semesters()
        return semesters[0] if semesters else None

    def delete_semester(self, semester_id: int) -> None:
        self.get_semester(semester_id)
        for course in self.courses_for(semester_id):
            self.delete_course(course.id)
        del self._semesters[semester_id]
        logger.debug("Deleted semester %s", semester_id)

    # --- courses ---

    def add_course(self, semester_id: int, course: Course) -> Course:
        self.get_semester(semester_id)
        course.semester_id = semester_id
        course.id = next(self._ids)
        self._courses[course.id] = course
        return course

    def get_course(self, course_id: int) -> Course:
        return self._lookup(self._courses, "Course", course_id)

    def courses_for(self, semester_id: int) -> list[Course]:
        return [c for c in self._courses.values() if c.semester_id == semester_id]

    def delete_course(self, course_id: int) -> None:
        self.get_course(course_id)
        for component in self.components_for(course_id):
            del self._components[component.id]
        for assignment in self.assignments_for_course(course_id):
            del self._assignments[assignment.id]
        del self._courses[course_id]
        logger.debug("Deleted course %s", course_id)

    # --- grading components ---

    def add_grading_component(self, course_id: int, component: GradingComponent) -> GradingComponent:
        self.get_course(course_id)
        component.course_id = course_id
        component.id = next(self._ids)
        self._components[component.id] = component
        return component

    def get_grading_component(self, component_id: int) -> GradingComponent:
        return self._lookup(self._components, "GradingComponent", component_id)

    def components_for(self, course_id: int) -> list[GradingComponent]:
        return [c for c in self._components.values() if c.course_id == course_id]

    def record_earned_points(self, component_id: int,
                             earned_points: t.Optional[float]) -> GradingComponent:
        """Set or clear (``None``) the earned points of a component."""
        component = self.get_grading_component(component_id)
        component.earned_points = earned_points
        return component

    def delete_grading_component(self, component_id: int) -> None:
        self.get_grading_component(component_id)
        del self._components[component_id]

    # --- assignments ---

    def add_assignment(self, course_id: int, assignment: Assignment) -> Assignment:
        self.get_course(course_id)
        assignment.course_id = course_id
        assignment.id = next(self._ids)
        self._assignments[assignment.id] = assignment
        return assignment

    def get_assignment(self, assignment_id: int) -> Assignment:
        return self._lookup(self._assignments, "Assignment", assignment_id)

    def assignments_for_course(self, course_id: int) -> list[Assignment]:
        return [a for a in self._assignments.values() if a.course_id == course_id]

    def assignments_for_semester(self, semester_id: int) -> list[Assignment]:
        assignments: list[Assignment] = []
        for course in self.courses_for(semester_id):
            assignments.extend(self.assignments_for_course(course.id))
        return assignments

    def all_assignments(self) -> list[Assignment]:
        return list(self._assignments.values())

    def update_assignment(self, assignment_id: int, name: str, due_date: datetime,
                          weight: t.Optional[float], notes: str) -> Assignment:
        assignment = self.get_assignment(assignment_id)
        assignment.name = name
        assignment.due_date = local_naive(due_date)
        assignment.weight = weight
        assignment.notes = notes
        return assignment

    def toggle_assignment(self, assignment_id: int) -> Assignment:
        assignment = self.get_assignment(assignment_id)
        assignment.is_completed = not assignment.is_completed
        return assignment

    def delete_assignment(self, assignment_id: int) -> None:
        self.get_assignment(assignment_id)
        del self._assignments[assignment_id]

    def track_assignments(
            self,
            semester_id: t.Optional[int] = None,
            course_id: t.Optional[int] = None,
            show_completed: bool = True,
            sort_by: SortKey = "due_date",
    ) -> list[Assignment]:
        """Assignments for the tracker view.

        A ``course_id`` narrows to one course, otherwise ``semester_id`` selects
        every course of the semester. With neither, all assignments are listed.

        :param show_completed: Include assignments already marked completed.
        :param sort_by: ``due_date``, ``course`` (course code) or ``name``.
        """
        if course_id is not None:
            self.get_course(course_id)
            assignments = self.assignments_for_course(course_id)
        elif semester_id is not None:
            self.get_semester(semester_id)
            assignments = self.assignments_for_semester(semester_id)
        else:
            assignments = self.all_assignments()

        if not show_completed:
            assignments = [a for a in assignments if not a.is_completed]

        if sort_by == "course":
            return sorted(assignments, key=self.course_code_for)
        if sort_by == "name":
            return sorted(assignments, key=lambda a: a.name)
        if sort_by == "due_date":
            return sorted(assignments, key=lambda a: a.due_date)
        raise ValueError(f"Unknown sort key: {sort_by}")

    def course_code_for(self, assignment: Assignment) -> str:
        course = self._courses.get(assignment.course_id)
        return course.code if course else ""

    # --- derived grades ---

    def course_gpa(self, course_id: int) -> float:
        self.get_course(course_id)
        return grading.course_gpa(self.components_for(course_id))

    def semester_gpa(self, semester_id: int) -> float:
        self.get_semester(semester_id)
        return grading.semester_gpa(
            (self.course_gpa(c.id), c.credit_hours) for c in self.courses_for(semester_id)
        )

    def clear(self) -> None:
        """Drop every record. Ids keep increasing."""
        self._semesters.clear()
        self._courses.clear()
        self._components.clear()
        self._assignments.clear()

    @staticmethod
    def _lookup(table: dict[int, t.Any], kind: str, record_id: int) -> t.Any:
        try:
            return table[record_id]
        except KeyError:
            raise RecordNotFound(kind, record_id) from None


# Default store used by the MCP tools
store = AcademicStore()
