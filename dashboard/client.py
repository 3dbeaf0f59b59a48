"""
HTTP client for the PomoNest service.

Each method maps to one REST endpoint and returns the decoded JSON. Transport
and HTTP errors are converted into ``RuntimeError`` with a readable message.
"""
from __future__ import annotations

import os
import typing as t

import httpx

# Service URL - configurable via environment variable
SERVICE_URL = os.getenv("POMONEST_SERVICE_URL", "http://localhost:8003")

# Timeout for the CRUD calls (in seconds)
STANDARD_TIMEOUT = float(os.getenv("POMONEST_TIMEOUT", "30.0"))


class ServiceClient:
    """Talks to the PomoNest REST service.

    Args:
        base_url: Root URL of the service.
        client: Optional preconfigured ``httpx.Client`` (e.g. a test client).
            When given, ``base_url`` is ignored and the caller keeps ownership.
    """

    def __init__(self, base_url: str = SERVICE_URL, client: t.Optional[httpx.Client] = None) -> None:
        self._owns_client = client is None
        self._client = client or httpx.Client(base_url=base_url, timeout=STANDARD_TIMEOUT)

    def close(self) -> None:
        """Close the underlying client unless it was passed in."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> ServiceClient:
        return self

    def __exit__(self, *exc_info: t.Any) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs: t.Any) -> t.Any:
        try:
            response = self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.TimeoutException:
            raise RuntimeError(f"Request to {path} timed out after {STANDARD_TIMEOUT} seconds")
        except httpx.HTTPStatusError as e:
            raise RuntimeError(f"HTTP error from PomoNest service: {e.response.status_code} {e.response.text}")
        except httpx.HTTPError as e:
            raise RuntimeError(f"Error calling PomoNest service: {str(e)}")

        if response.status_code == 204:
            return None
        return response.json()

    # --- academics ---

    def list_semesters(self) -> list[dict]:
        return self._request("GET", "/semesters")

    def create_semester(self, name: str, start_date: str, end_date: str) -> dict:
        return self._request("POST", "/semesters", json={
            "name": name, "start_date": start_date, "end_date": end_date,
        })

    def delete_semester(self, semester_id: int) -> None:
        self._request("DELETE", f"/semesters/{semester_id}")

    def list_courses(self, semester_id: int) -> list[dict]:
        return self._request("GET", f"/semesters/{semester_id}/courses")

    def create_course(self, semester_id: int, code: str, name: str, credit_hours: int = 3) -> dict:
        return self._request("POST", f"/semesters/{semester_id}/courses", json={
            "code": code, "name": name, "credit_hours": credit_hours,
        })

    def get_course(self, course_id: int) -> dict:
        return self._request("GET", f"/courses/{course_id}")

    def list_components(self, course_id: int) -> list[dict]:
        return self._request("GET", f"/courses/{course_id}/components")

    def create_component(self, course_id: int, name: str, weight: float,
                         earned_points: t.Optional[float] = None, total_points: float = 100.0) -> dict:
        return self._request("POST", f"/courses/{course_id}/components", json={
            "name": name, "weight": weight,
            "earned_points": earned_points, "total_points": total_points,
        })

    def record_earned_points(self, component_id: int, earned_points: t.Optional[float]) -> dict:
        return self._request("PATCH", f"/components/{component_id}", json={"earned_points": earned_points})

    def track_assignments(self, semester_id: t.Optional[int] = None, course_id: t.Optional[int] = None,
                          show_completed: bool = True, sort_by: str = "due_date") -> list[dict]:
        params: dict[str, t.Any] = {"show_completed": show_completed, "sort_by": sort_by}
        if semester_id is not None:
            params["semester_id"] = semester_id
        if course_id is not None:
            params["course_id"] = course_id
        return self._request("GET", "/assignments", params=params)

    def create_assignment(self, course_id: int, name: str, due_date: str,
                          weight: t.Optional[float] = None, notes: str = "") -> dict:
        return self._request("POST", f"/courses/{course_id}/assignments", json={
            "name": name, "due_date": due_date, "weight": weight, "notes": notes,
        })

    def toggle_assignment(self, assignment_id: int) -> dict:
        return self._request("POST", f"/assignments/{assignment_id}/toggle")

    # --- productivity ---

    def list_todos(self) -> list[dict]:
        return self._request("GET", "/todos")

    def create_todo(self, title: str, due_date: t.Optional[str] = None, notes: str = "") -> dict:
        return self._request("POST", "/todos", json={"title": title, "due_date": due_date, "notes": notes})

    def toggle_todo(self, item_id: int) -> dict:
        return self._request("POST", f"/todos/{item_id}/toggle")

    def delete_todo(self, item_id: int) -> None:
        self._request("DELETE", f"/todos/{item_id}")

    def calendar_day(self, day: t.Optional[str] = None) -> list[dict]:
        params = {"day": day} if day else {}
        return self._request("GET", "/calendar/day", params=params)

    def calendar_week(self, day: t.Optional[str] = None) -> list[dict]:
        params = {"day": day} if day else {}
        return self._request("GET", "/calendar/week", params=params)

    def calendar_month(self, year: t.Optional[int] = None, month: t.Optional[int] = None) -> list[list[t.Optional[dict]]]:
        params = {k: v for k, v in (("year", year), ("month", month)) if v is not None}
        return self._request("GET", "/calendar/month", params=params)

    def request_calendar_access(self) -> bool:
        return self._request("POST", "/calendar/access")["granted"]
