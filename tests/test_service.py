"""Tests for the PomoNest REST service."""
import typing as t
from datetime import date, datetime, timezone

import pytest
from fastapi.testclient import TestClient

from services.pomonest_service.app import app


@pytest.fixture
def client() -> t.Iterator[TestClient]:
    """Client with a fresh set of stores; the lifespan runs on enter."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def course(client: TestClient) -> dict:
    semester = client.post("/semesters", json={
        "name": "Fall 2025", "start_date": "2025-09-01", "end_date": "2025-12-20",
    }).json()
    return client.post(f"/semesters/{semester['id']}/courses", json={
        "code": "CS101", "name": "Intro to Programming", "credit_hours": 3,
    }).json()


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "healthy", "service": "pomonest-service"}


def test_create_and_list_semesters(client: TestClient) -> None:
    response = client.post("/semesters", json={
        "name": "Spring 2025", "start_date": "2025-01-10", "end_date": "2025-05-10",
    })
    assert response.status_code == 201
    client.post("/semesters", json={"name": "Fall 2025", "start_date": "2025-09-01", "end_date": "2025-12-20"})

    semesters = client.get("/semesters").json()

    assert [s["name"] for s in semesters] == ["Fall 2025", "Spring 2025"]
    assert semesters[0]["gpa"] == 0
    assert semesters[0]["course_count"] == 0


def test_semester_end_before_start_is_rejected(client: TestClient) -> None:
    response = client.post("/semesters", json={
        "name": "Backwards", "start_date": "2025-12-20", "end_date": "2025-09-01",
    })

    assert response.status_code == 422


def test_course_credit_hours_are_bounded(client: TestClient, course: dict) -> None:
    response = client.post(f"/semesters/{course['semester_id']}/courses", json={
        "code": "XX999", "name": "Too big", "credit_hours": 7,
    })

    assert response.status_code == 422


def test_grades_roll_up_to_course_and_semester(client: TestClient, course: dict) -> None:
    homework = client.post(f"/courses/{course['id']}/components", json={
        "name": "Homework", "weight": 50, "earned_points": 80,
    }).json()
    exam = client.post(f"/courses/{course['id']}/components", json={"name": "Exam", "weight": 50}).json()

    assert homework["percentage"] == pytest.approx(80)
    assert homework["weighted_grade"] == pytest.approx(0.4)
    assert exam["earned_points"] is None

    graded = client.patch(f"/components/{exam['id']}", json={"earned_points": 100}).json()
    assert graded["weighted_grade"] == pytest.approx(0.5)

    assert client.get(f"/courses/{course['id']}").json()["gpa"] == pytest.approx(0.9)
    assert client.get(f"/semesters/{course['semester_id']}").json()["gpa"] == pytest.approx(0.9)


def test_component_weight_is_bounded(client: TestClient, course: dict) -> None:
    response = client.post(f"/courses/{course['id']}/components", json={"name": "Huge", "weight": 150})

    assert response.status_code == 422


def test_assignment_tracker(client: TestClient, course: dict) -> None:
    client.post(f"/courses/{course['id']}/assignments", json={"name": "Project", "due_date": "2025-10-20T23:59:00"})
    lab = client.post(f"/courses/{course['id']}/assignments", json={
        "name": "Lab", "due_date": "2025-10-05T12:00:00", "weight": 10,
    }).json()
    assert lab["course_code"] == "CS101"

    toggled = client.post(f"/assignments/{lab['id']}/toggle").json()
    assert toggled["is_completed"]

    all_items = client.get("/assignments").json()
    open_items = client.get("/assignments", params={"show_completed": False}).json()
    by_name = client.get("/assignments", params={"sort_by": "name"}).json()

    assert [a["name"] for a in all_items] == ["Lab", "Project"]
    assert [a["name"] for a in open_items] == ["Project"]
    assert [a["name"] for a in by_name] == ["Lab", "Project"]
    assert client.get("/assignments", params={"sort_by": "weight"}).status_code == 422


def test_update_assignment(client: TestClient, course: dict) -> None:
    lab = client.post(f"/courses/{course['id']}/assignments", json={
        "name": "Lab", "due_date": "2025-10-05T12:00:00",
    }).json()

    updated = client.put(f"/assignments/{lab['id']}", json={
        "name": "Lab 1", "due_date": "2025-10-06T12:00:00", "weight": 15, "notes": "room 204",
    }).json()

    assert updated["name"] == "Lab 1"
    assert updated["weight"] == 15
    assert updated["notes"] == "room 204"


def test_delete_semester_cascades(client: TestClient, course: dict) -> None:
    client.post(f"/courses/{course['id']}/assignments", json={"name": "Lab", "due_date": "2025-10-05T12:00:00"})

    response = client.delete(f"/semesters/{course['semester_id']}")

    assert response.status_code == 204
    assert client.get(f"/courses/{course['id']}").status_code == 404
    assert client.get("/assignments").json() == []


def test_unknown_ids_return_404(client: TestClient) -> None:
    response = client.get("/semesters/999")

    assert response.status_code == 404
    assert response.json() == {"detail": "Semester 999 not found"}
    assert client.post("/semesters/999/courses", json={"code": "A", "name": "B"}).status_code == 404
    assert client.patch("/components/5", json={"earned_points": 1}).status_code == 404
    assert client.post("/todos/5/toggle").status_code == 404


def test_todo_crud(client: TestClient) -> None:
    undated = client.post("/todos", json={"title": "Someday"}).json()
    dated = client.post("/todos", json={"title": "Groceries", "due_date": "2025-10-01T18:00:00"}).json()

    assert [i["title"] for i in client.get("/todos").json()] == ["Someday", "Groceries"]

    client.put(f"/todos/{undated['id']}", json={"title": "Someday soon", "notes": "maybe"})
    assert client.post(f"/todos/{dated['id']}/toggle").json()["is_completed"]
    assert client.delete(f"/todos/{dated['id']}").status_code == 204

    remaining = client.get("/todos").json()
    assert [(i["title"], i["notes"]) for i in remaining] == [("Someday soon", "maybe")]


def test_calendar_sync_and_day_view(client: TestClient, course: dict) -> None:
    lab = client.post(f"/courses/{course['id']}/assignments", json={
        "name": "Lab", "due_date": "2025-10-05T12:00:00",
    }).json()
    client.post("/todos", json={"title": "Review", "due_date": "2025-10-05T08:00:00"})

    before = client.post(f"/assignments/{lab['id']}/calendar").json()
    assert before == {"added": False, "event": None}

    assert client.post("/calendar/access").json() == {"granted": True}
    synced = client.post(f"/assignments/{lab['id']}/calendar").json()
    assert synced["added"]
    assert synced["event"]["title"] == "CS101: Lab"

    entries = client.get("/calendar/day", params={"day": "2025-10-05"}).json()
    assert [(e["kind"], e["title"]) for e in entries] == [
        ("todo", "Review"),
        ("assignment", "CS101: Lab"),
        ("calendar_event", "CS101: Lab"),
    ]


def test_calendar_day_defaults_to_today(client: TestClient) -> None:
    client.post("/todos", json={"title": "Today", "due_date": f"{date.today().isoformat()}T12:00:00"})

    assert [e["title"] for e in client.get("/calendar/day").json()] == ["Today"]


def test_pomodoro_lifecycle(client: TestClient) -> None:
    status = client.get("/pomodoro").json()
    assert status["state"] == "STOPPED"
    assert status["formatted_time"] == "25:00"

    assert client.post("/pomodoro/start").json()["state"] == "RUNNING"
    assert client.post("/pomodoro/pause").json()["state"] == "PAUSED"

    skipped = client.post("/pomodoro/skip").json()
    assert skipped["mode"] == "SHORT_BREAK"
    assert skipped["completed_work_sessions"] == 1
    assert skipped["state"] == "RUNNING"

    reset = client.post("/pomodoro/reset").json()
    assert reset["state"] == "STOPPED"
    assert reset["mode"] == "SHORT_BREAK"
    assert reset["remaining_seconds"] == 300


def test_pomodoro_settings(client: TestClient) -> None:
    assert client.get("/pomodoro/settings").json() == {
        "work_minutes": 25,
        "short_break_minutes": 5,
        "long_break_minutes": 15,
        "sessions_until_long_break": 4,
    }

    status = client.put("/pomodoro/settings", json={
        "work_minutes": 50, "short_break_minutes": 10,
        "long_break_minutes": 30, "sessions_until_long_break": 2,
    }).json()

    assert status["remaining_seconds"] == 3000
    assert status["sessions_until_long_break"] == 2
    assert client.put("/pomodoro/settings", json={"work_minutes": 90}).status_code == 422


def test_todos_mix_utc_and_local_due_dates(client: TestClient) -> None:
    assert client.post("/todos", json={"title": "Local", "due_date": "2026-10-21T09:00:00"}).status_code == 201
    assert client.post("/todos", json={"title": "UTC", "due_date": "2026-10-20T09:00:00Z"}).status_code == 201

    response = client.get("/todos")

    assert response.status_code == 200
    assert [i["title"] for i in response.json()] == ["UTC", "Local"]


def test_utc_assignment_shows_on_its_local_day(client: TestClient, course: dict) -> None:
    lab = client.post(f"/courses/{course['id']}/assignments", json={
        "name": "Lab", "due_date": "2026-10-20T12:00:00Z",
    }).json()
    client.post(f"/courses/{course['id']}/assignments", json={"name": "Essay", "due_date": "2026-10-22T12:00:00"})
    client.post("/calendar/access")
    client.post(f"/assignments/{lab['id']}/calendar")
    local_day = datetime(2026, 10, 20, 12, tzinfo=timezone.utc).astimezone().date()

    response = client.get("/calendar/day", params={"day": local_day.isoformat()})

    assert response.status_code == 200
    assert [(e["kind"], e["title"]) for e in response.json()] == [
        ("assignment", "CS101: Lab"),
        ("calendar_event", "CS101: Lab"),
    ]
    assert [a["name"] for a in client.get("/assignments").json()] == ["Lab", "Essay"]


def test_calendar_week(client: TestClient) -> None:
    client.post("/todos", json={"title": "Groceries", "due_date": "2025-10-01T18:00:00"})

    days = client.get("/calendar/week", params={"day": "2025-10-02"}).json()

    assert [d["day"] for d in days] == [f"2025-{m:02d}-{d:02d}" for m, d in
                                        [(9, 28), (9, 29), (9, 30), (10, 1), (10, 2), (10, 3), (10, 4)]]
    assert [e["title"] for e in days[3]["entries"]] == ["Groceries"]
    assert days[0]["entries"] == []


def test_calendar_month(client: TestClient) -> None:
    client.post("/todos", json={"title": "Rent", "due_date": "2025-10-31T09:00:00"})

    weeks = client.get("/calendar/month", params={"year": 2025, "month": 10}).json()

    assert weeks[0][:3] == [None, None, None]
    assert weeks[0][3]["day"] == "2025-10-01"
    assert weeks[-1][5]["day"] == "2025-10-31"
    assert [e["title"] for e in weeks[-1][5]["entries"]] == ["Rent"]
    assert weeks[-1][6] is None
    assert client.get("/calendar/month", params={"year": 2025, "month": 13}).status_code == 422
