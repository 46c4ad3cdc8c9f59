"""Integration tests for /trips endpoints with a mocked trip store."""

import json
from collections.abc import AsyncGenerator, Callable, Iterator
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from nestmap.app.api.deps import get_trip_store
from nestmap.app.cache.query_cache import InMemoryQueryCache
from nestmap.app.clients.trip_store import TripStoreClient
from nestmap.app.main import app

TRIP = {
    "id": 1,
    "title": "Lisbon",
    "startDate": "2024-06-01T00:00:00.000Z",
    "endDate": "2024-06-02T00:00:00.000Z",
    "budget": 200,
}
ACTIVITIES = [
    {
        "id": 10,
        "tripId": 1,
        "title": "Tram 28",
        "date": "2024-06-01",
        "time": "09:00",
        "locationName": "Martim Moniz",
        "price": 3,
        "isPaid": True,
        "costCategory": "transport",
    },
    {"id": 11, "tripId": 1, "title": "Castle", "date": "2024-06-01", "time": "09:00"},
    {"id": 12, "tripId": 1, "title": "Fado", "date": "2024-06-02", "time": "21:00", "price": 40, "isPaid": True},
]
TODOS = [{"id": 1, "tripId": 1, "task": "Buy Viva Viagem card", "completed": False}]


class FakeTripStore:
    """In-process stand-in for the trip store REST API."""

    def __init__(self) -> None:
        self.trip: dict[str, Any] = dict(TRIP)
        self.activities: list[dict[str, Any]] = [dict(a) for a in ACTIVITIES]
        self.requests: list[httpx.Request] = []
        self.fail_with: int | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            return httpx.Response(self.fail_with)

        method, path = request.method, request.url.path
        if method == "GET" and path == "/api/trips/1":
            return httpx.Response(200, json=self.trip)
        if method == "PUT" and path == "/api/trips/1":
            self.trip.update(json.loads(request.content))
            return httpx.Response(200, json=self.trip)
        if method == "GET" and path == "/api/trips/1/activities":
            return httpx.Response(200, json=self.activities)
        if method == "GET" and path == "/api/trips/1/todos":
            return httpx.Response(200, json=TODOS)
        if method == "POST" and path == "/api/activities":
            created = {"id": 99, **json.loads(request.content)}
            self.activities.append(created)
            return httpx.Response(201, json=created)
        if path.startswith("/api/activities/"):
            activity_id = int(path.rsplit("/", 1)[1])
            match = next((a for a in self.activities if a["id"] == activity_id), None)
            if match is None:
                return httpx.Response(404)
            if method == "PUT":
                match.update(json.loads(request.content))
                return httpx.Response(200, json=match)
            if method == "DELETE":
                self.activities.remove(match)
                return httpx.Response(204)
        return httpx.Response(404)

    def count(self, method: str, path: str) -> int:
        return sum(1 for r in self.requests if r.method == method and r.url.path == path)


@pytest.fixture
def fake_store() -> FakeTripStore:
    return FakeTripStore()


@pytest.fixture
def client(fake_store: FakeTripStore) -> Iterator[TestClient]:
    """Test client whose trip store dependency talks to the fake store."""
    cache = InMemoryQueryCache()

    async def override() -> AsyncGenerator[TripStoreClient, None]:
        async with httpx.AsyncClient(
            base_url="http://trip-store.test",
            transport=httpx.MockTransport(fake_store),
        ) as http:
            yield TripStoreClient(http, cache=cache)

    app.dependency_overrides[get_trip_store] = override
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_get_schedule(client: TestClient) -> None:
    """Test schedule of a stored trip."""
    response = client.get("/trips/1/schedule")

    assert response.status_code == 200
    data = response.json()
    assert [d["date"] for d in data["days"]] == ["2024-06-01", "2024-06-02"]
    assert [a["id"] for a in data["days"][0]["activities"]] == [10, 11]
    assert data["timeConflictCount"] == 2
    assert data["days"][1]["activities"][0]["displayTime"] == "9:00 PM"


def test_schedule_reads_are_cached(client: TestClient, fake_store: FakeTripStore) -> None:
    """Test that repeated reads hit the store once."""
    client.get("/trips/1/schedule")
    client.get("/trips/1/schedule")

    assert fake_store.count("GET", "/api/trips/1") == 1
    assert fake_store.count("GET", "/api/trips/1/activities") == 1


def test_get_day(client: TestClient) -> None:
    """Test a single day view."""
    response = client.get("/trips/1/days/2024-06-02")

    assert response.status_code == 200
    data = response.json()
    assert data["dayNumber"] == 2
    assert [a["title"] for a in data["activities"]] == ["Fado"]


def test_get_day_outside_trip(client: TestClient) -> None:
    """Test 404 for a date outside the trip."""
    response = client.get("/trips/1/days/2024-07-01")

    assert response.status_code == 404
    assert "not part of trip" in response.json()["detail"]


def test_get_day_invalid_date(client: TestClient) -> None:
    assert client.get("/trips/1/days/tomorrow").status_code == 422


def test_calendar_export(client: TestClient) -> None:
    """Test the .ics download."""
    response = client.get("/trips/1/calendar.ics")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/calendar")
    assert 'filename="trip-1.ics"' in response.headers["content-disposition"]
    body = response.text
    assert body.startswith("BEGIN:VCALENDAR\r\n")
    assert body.count("BEGIN:VEVENT") == 3
    assert "DTSTART:20240601T090000\r\nDTEND:20240601T110000" in body
    assert "LOCATION:Martim Moniz" in body


def test_budget(client: TestClient) -> None:
    """Test budget summary from paid activities."""
    response = client.get("/trips/1/budget")

    assert response.status_code == 200
    data = response.json()
    assert data["totalSpent"] == 43
    assert data["remaining"] == 157
    assert data["spendingByCategory"] == {"transport": 3, "uncategorized": 40}
    assert "groupExpensesCount" not in data


def test_todos(client: TestClient) -> None:
    response = client.get("/trips/1/todos")

    assert response.status_code == 200
    assert response.json()[0]["task"] == "Buy Viva Viagem card"


def test_create_activity_invalidates_schedule(client: TestClient, fake_store: FakeTripStore) -> None:
    """Test that a new activity shows up on the next schedule read."""
    client.get("/trips/1/schedule")

    response = client.post(
        "/trips/1/activities",
        json={"title": "Pasteis", "date": "2024-06-02", "time": "10:00", "locationName": "Belem"},
    )

    assert response.status_code == 201
    assert response.json()["id"] == 99
    created = json.loads(next(r for r in fake_store.requests if r.method == "POST").content)
    assert created["tripId"] == "1"
    assert created["locationName"] == "Belem"
    assert "notes" not in created

    schedule = client.get("/trips/1/schedule").json()
    assert [a["id"] for a in schedule["days"][1]["activities"]] == [99, 12]
    assert fake_store.count("GET", "/api/trips/1/activities") == 2


@pytest.mark.parametrize(
    "body",
    [
        {"title": "Late", "date": "2024-06-01", "time": "24:00", "locationName": "Bar"},
        {"title": "No place", "date": "2024-06-01", "time": "10:00"},
        {"title": "", "date": "2024-06-01", "time": "10:00", "locationName": "Bar"},
    ],
)
def test_create_activity_validation(client: TestClient, body: dict) -> None:
    """Test request validation before anything reaches the store."""
    assert client.post("/trips/1/activities", json=body).status_code == 422


def test_update_activity_sends_only_set_fields(client: TestClient, fake_store: FakeTripStore) -> None:
    """Test partial updates."""
    response = client.put("/trips/1/activities/11", json={"time": "10:30"})

    assert response.status_code == 200
    assert response.json()["time"] == "10:30"
    sent = json.loads(next(r for r in fake_store.requests if r.method == "PUT").content)
    assert sent == {"time": "10:30"}

    day = client.get("/trips/1/days/2024-06-01").json()
    assert not any(a["timeConflict"] for a in day["activities"])


def test_update_missing_activity(client: TestClient) -> None:
    response = client.put("/trips/1/activities/404", json={"time": "10:30"})
    assert response.status_code == 404


def test_delete_activity(client: TestClient) -> None:
    """Test delete and the refreshed schedule."""
    client.get("/trips/1/schedule")

    response = client.delete("/trips/1/activities/11")

    assert response.status_code == 204
    day = client.get("/trips/1/days/2024-06-01").json()
    assert [a["id"] for a in day["activities"]] == [10]
    assert day["activities"][0]["timeConflict"] is False


def test_set_trip_completed(client: TestClient) -> None:
    response = client.put("/trips/1/completed", json={"completed": True})

    assert response.status_code == 200
    assert response.json()["completed"] is True


def test_missing_trip_is_404(client: TestClient) -> None:
    response = client.get("/trips/2/schedule")

    assert response.status_code == 404
    assert response.json()["detail"].startswith("Not found in trip store")


def test_store_failure_is_502(client: TestClient, fake_store: FakeTripStore) -> None:
    """Test that store errors are not retried and map to 502."""
    fake_store.fail_with = 503

    response = client.get("/trips/1/schedule")

    assert response.status_code == 502
    assert response.json()["detail"].startswith("Trip store unavailable")
    assert len(fake_store.requests) == 1
