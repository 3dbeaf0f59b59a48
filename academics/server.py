# -*- coding: utf-8 -*-
import typing as t
from datetime import date, datetime

from fastmcp import FastMCP

from academics.models import Assignment, Course, GradingComponent, Semester, local_naive
from academics.store import AcademicStore, store

mcp = FastMCP("AcademicsServer")


@mcp.tool()
def add_semester(name: str, start_date: str, end_date: str) -> Semester:
    """Creates a semester.

    :param name: Name of the semester, e.g. "Fall 2025".
    :param start_date: First day in ISO format (YYYY-MM-DD).
    :param end_date: Last day in ISO format (YYYY-MM-DD).
    :return: The stored Semester.
    """
    return store.add_semester(Semester(
        name=name,
        start_date=date.fromisoformat(start_date),
        end_date=date.fromisoformat(end_date),
    ))


@mcp.tool()
def list_semesters() -> list[Semester]:
    """Lists all semesters, most recent first.

    :return: A list of Semester objects.
    """
    return store.list_semesters()


@mcp.tool()
def add_course(semester_id: int, code: str, name: str, credit_hours: int = 3) -> Course:
    """Adds a course to a semester.

    :param semester_id: Id of the owning semester.
    :param code: Course code, e.g. "CS101".
    :param name: Course title.
    :param credit_hours: Credit hours, at least 1 (default 3).
    :return: The stored Course.
    """
    return store.add_course(semester_id, Course(code=code, name=name, credit_hours=credit_hours))


@mcp.tool()
def add_grading_component(
        course_id: int,
        name: str,
        weight: float,
        earned_points: t.Optional[float] = None,
        total_points: float = 100.0
) -> GradingComponent:
    """Adds a grading component to a course.

    :param course_id: Id of the owning course.
    :param name: Component name, e.g. "Final Exam".
    :param weight: Weight in percentage points.
    :param earned_points: Points earned, omitted while ungraded.
    :param total_points: Points possible (default 100).
    :return: The stored GradingComponent.
    """
    return store.add_grading_component(course_id, GradingComponent(
        name=name,
        weight=weight,
        earned_points=earned_points,
        total_points=total_points,
    ))


@mcp.tool()
def record_earned_points(component_id: int, earned_points: t.Optional[float] = None) -> GradingComponent:
    """Records the points earned on a grading component; omit to clear the grade."""
    return store.record_earned_points(component_id, earned_points)


@mcp.tool()
def add_assignment(
        course_id: int,
        name: str,
        due: str,
        weight: t.Optional[float] = None,
        notes: str = ""
) -> Assignment:
    """Adds an assignment to a course.

    :param course_id: Id of the owning course.
    :param name: Assignment name.
    :param due: Due time in ISO format.
    :param weight: Optional weight percentage.
    :param notes: Free text notes (optional).
    :return: The stored Assignment.
    """
    return store.add_assignment(course_id, Assignment(
        name=name,
        due_date=local_naive(datetime.fromisoformat(due)),
        weight=weight,
        notes=notes,
    ))


@mcp.tool()
def toggle_assignment(assignment_id: int) -> Assignment:
    """Flips the completion flag of an assignment."""
    return store.toggle_assignment(assignment_id)


@mcp.tool()
def get_course_gpa(course_id: int) -> float:
    """Returns the weighted grade of a course on a 0-1 scale."""
    return store.course_gpa(course_id)


@mcp.tool()
def get_semester_gpa(semester_id: int) -> float:
    """Returns the credit-hour weighted grade of a semester on a 0-1 scale."""
    return store.semester_gpa(semester_id)


def format_grade_report(academic_store: AcademicStore, semester_id: int) -> str:
    """Formats the courses of a semester with their grades as a table.

    :param academic_store: Store holding the semester.
    :param semester_id: Id of the semester to report.
    :return: Formatted table string.
    """
    semester = academic_store.get_semester(semester_id)
    courses = academic_store.courses_for(semester_id)

    lines = []
    lines.append(f"🎓 {semester.name.upper()}  "
                 f"({semester.start_date:%b %d, %Y} - {semester.end_date:%b %d, %Y})")
    if not courses:
        lines.append("No courses added yet.")
        return "\n".join(lines)

    lines.append("=" * 80)
    lines.append(f"{'Code':<10} {'Course':<35} {'Credits':<8} {'Graded':<8} {'GPA':<8}")
    lines.append("-" * 80)

    for course in courses:
        components = academic_store.components_for(course.id)
        graded = sum(1 for c in components if c.is_graded)
        name = course.name[:34] if len(course.name) > 34 else course.name
        lines.append(
            f"{course.code:<10} {name:<35} {course.credit_hours:<8} "
            f"{f'{graded}/{len(components)}':<8} {academic_store.course_gpa(course.id):<8.2f}"
        )

    lines.append("=" * 80)
    lines.append(f"Semester GPA: {academic_store.semester_gpa(semester_id):.2f}")
    return "\n".join(lines)


@mcp.tool()
def show_grade_report(semester_id: t.Optional[int] = None) -> str:
    """Displays the courses of a semester with their grades.

    Defaults to the most recent semester when no id is given.

    :param semester_id: Id of the semester (optional).
    :return: Formatted table string, or a message if no semester exists.
    """
    if semester_id is None:
        latest = store.latest_semester()
        if latest is None:
            return "🎓 No semesters yet. Add your first semester to get started."
        semester_id = latest.id
    return format_grade_report(store, semester_id)


if __name__ == "__main__":
    mcp.run()
