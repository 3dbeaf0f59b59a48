"""Tests for grade aggregation: component percentages, course and semester GPA."""
import pytest

from academics import grading
from academics.models import Course, GradingComponent


def test_component_percentage_and_weighted_grade() -> None:
    """80 of 100 points at weight 50 contributes 0.4 to the course grade."""
    component = GradingComponent(name="Midterm", weight=50, earned_points=80, total_points=100)

    assert component.is_graded
    assert component.percentage == pytest.approx(80.0)
    assert component.weighted_grade == pytest.approx(0.4)


def test_ungraded_component_contributes_nothing() -> None:
    component = GradingComponent(name="Final", weight=50)

    assert not component.is_graded
    assert component.percentage == 0
    assert component.weighted_grade == 0


def test_zero_total_points_does_not_divide_by_zero() -> None:
    component = GradingComponent(name="Bonus", weight=10, earned_points=5, total_points=0)

    assert grading.percentage(component) == 0
    assert grading.weighted_grade(component) == 0


def test_course_gpa_sums_weighted_grades() -> None:
    components = [
        GradingComponent(name="Homework", weight=50, earned_points=90, total_points=100),
        GradingComponent(name="Exam", weight=50, earned_points=45, total_points=50),
    ]

    assert grading.course_gpa(components) == pytest.approx(0.9)


def test_course_gpa_counts_ungraded_components_as_zero() -> None:
    components = [
        GradingComponent(name="Homework", weight=50, earned_points=100, total_points=100),
        GradingComponent(name="Exam", weight=50),
    ]

    assert grading.course_gpa(components) == pytest.approx(0.5)


def test_course_gpa_of_no_components_is_zero() -> None:
    assert grading.course_gpa([]) == 0


def test_semester_gpa_weights_by_credit_hours() -> None:
    # (0.9 * 3 + 0.6 * 1) / 4
    assert grading.semester_gpa([(0.9, 3), (0.6, 1)]) == pytest.approx(0.825)


def test_semester_gpa_without_courses_is_zero() -> None:
    assert grading.semester_gpa([]) == 0
    assert grading.semester_gpa(iter([])) == 0


def test_course_rejects_non_positive_credit_hours() -> None:
    with pytest.raises(ValueError):
        Course(code="CS101", name="Intro", credit_hours=0)
