"""
Weighted grade aggregation.

Grades roll up in three levels:

    GradingComponent.percentage  = earned / total * 100        (0 when ungraded)
    GradingComponent.weighted    = percentage/100 * weight/100
    Course GPA                   = sum of weighted grades of all components
    Semester GPA                 = credit-hour weighted mean of course GPAs

Ungraded components stay in the course sum with a contribution of 0, so a
course with missing grades reports a lower GPA than its graded work alone.
Weights are not renormalized and are not required to add up to 100.

All functions are pure and never raise; degenerate input yields 0.0.
"""
from __future__ import annotations

import typing as t

if t.TYPE_CHECKING:
    from academics.models import GradingComponent


def percentage(component: GradingComponent) -> float:
    """Earned points as a percentage of total points.

    :param component: The grading component.
    :return: 0.0 if the component is ungraded or has no positive total.
    """
    if component.earned_points is None or component.total_points <= 0:
        return 0.0
    return (component.earned_points / component.total_points) * 100.0


def weighted_grade(component: GradingComponent) -> float:
    """Contribution of one component to its course GPA, on a 0-1 scale."""
    return (percentage(component) / 100.0) * (component.weight / 100.0)


def course_gpa(components: t.Iterable[GradingComponent]) -> float:
    """Sum of the weighted grades of every component, graded or not."""
    return sum((weighted_grade(c) for c in components), 0.0)


def semester_gpa(course_grades: t.Iterable[tuple[float, int]]) -> float:
    """Credit-hour weighted mean of course GPAs.

    :param course_grades: ``(gpa, credit_hours)`` pairs, one per course.
    :return: 0.0 when there are no courses.
    """
    total_points = 0.0
    total_credits = 0
    for gpa, credit_hours in course_grades:
        total_points += gpa * credit_hours
        total_credits += credit_hours
    if total_credits <= 0:
        return 0.0
    return total_points / total_credits
