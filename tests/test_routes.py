"""
HTTP tests for availability_api.routes using FastAPI's TestClient.
"""
import pytest
from fastapi.testclient import TestClient

from availability_api.errors import CalendarFetchError
from availability_api.main import app
from availability_api.routes import get_booking_loader, get_price_table, get_today

from .conftest import TODAY, band, booking

BANDS = [
    band("2026-07-01", "2026-08-01", 1200),
    band("2026-08-01", "2026-09-05", 1500),
]


@pytest.fixture
def intervals():
    return [booking("2026-07-04", "2026-07-11")]


@pytest.fixture
def client(intervals):
    app.dependency_overrides[get_price_table] = lambda: BANDS
    app.dependency_overrides[get_booking_loader] = lambda: (lambda: intervals)
    app.dependency_overrides[get_today] = lambda: TODAY
    yield TestClient(app)
    app.dependency_overrides.clear()


def failing_loader():
    raise CalendarFetchError("feed timed out")


class TestStatusRoutes:
    def test_index(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "running" in response.json()["status"]

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_refresh(self, client):
        response = client.post("/refresh")
        assert response.status_code == 200
        assert response.json()["status"] == "refreshed"


class TestCheckFreeText:
    """POST /check with a free-text query."""

    def test_booked_date_offers_alternative(self, client):
        response = client.post("/check", json={"query": "4 July 2026"})
        assert response.status_code == 200
        body = response.json()
        assert body["mode"] == "single"
        assert body["query"] == "4 July 2026"
        assert body["booked"] is True
        assert body["alternative"]["start"] == "2026-07-11"

    def test_vague_month(self, client):
        body = client.post("/check", json={"query": "anything in July 2026"}).json()
        assert body["mode"] == "vagueRange"
        assert body["label"] == "month"
        assert [w["start"] for w in body["available_weeks"]] == ["2026-07-11", "2026-07-18", "2026-07-25"]

    def test_exact_range(self, client):
        body = client.post("/check", json={"query": "10-17 Aug 2026"}).json()
        assert body["mode"] == "range"
        assert body["exact_match"] is True
        assert body["price"] == 1500
        assert body["alternative"] is None

    @pytest.mark.parametrize("query", ["", "what is the wifi password"])
    def test_unparseable_query_is_a_successful_invalid(self, client, query):
        response = client.post("/check", json={"query": query})
        assert response.status_code == 200
        assert response.json()["mode"] == "invalid"

    def test_offset_past_the_calendar_is_a_successful_invalid(self, client):
        response = client.post("/check", json={"query": "in 99999999 days"})
        assert response.status_code == 200
        assert response.json()["mode"] == "invalid"

    def test_guest_count_does_not_change_the_date(self, client):
        body = client.post("/check", json={"query": "arriving 10 Aug 2026 for 7 nights"}).json()
        assert body["mode"] == "single"
        assert body["date"] == "2026-08-10"

    def test_get_form(self, client):
        response = client.get("/check", params={"q": "next weekend"})
        assert response.status_code == 200
        assert response.json()["date"] == "2026-01-17"

    def test_get_without_query_is_client_error(self, client):
        assert client.get("/check").status_code == 400


class TestCheckStructured:
    """POST /check with the structured payload older callers send."""

    def test_single_date(self, client):
        body = client.post("/check", json={"date": "2026-07-15"}).json()
        assert body["mode"] == "single"
        assert body["exact_match"] is True

    def test_exact_range(self, client):
        body = client.post(
            "/check",
            json={"start_date": "2026-07-05", "end_date": "2026-07-09", "vague": False},
        ).json()
        assert body["mode"] == "range"
        assert body["range_booked"] is True

    def test_vague_flag_as_string(self, client):
        body = client.post(
            "/check",
            json={"start_date": "2026-07-01", "end_date": "2026-08-01", "vague": "true"},
        ).json()
        assert body["mode"] == "vagueRange"
        assert body["label"] == "range"

    def test_empty_strings_count_as_missing(self, client):
        response = client.post("/check", json={"date": "", "start_date": "", "end_date": ""})
        assert response.status_code == 400

    def test_missing_input(self, client):
        assert client.post("/check", json={}).status_code == 400

    def test_bad_date_format(self, client):
        assert client.post("/check", json={"date": "15/07/2026"}).status_code == 400

    def test_reversed_range(self, client):
        response = client.post("/check", json={"start_date": "2026-07-09", "end_date": "2026-07-05"})
        assert response.status_code == 400


class TestCalendarFailure:
    """A broken feed is a server error, never an answer."""

    def test_check_returns_server_error(self, client):
        app.dependency_overrides[get_booking_loader] = lambda: failing_loader
        response = client.post("/check", json={"query": "4 July 2026"})
        assert response.status_code == 500
        assert response.json() == {"detail": "Server error"}

    def test_invalid_query_does_not_need_the_feed(self, client):
        app.dependency_overrides[get_booking_loader] = lambda: failing_loader
        response = client.post("/check", json={"query": "hello"})
        assert response.status_code == 200
        assert response.json()["mode"] == "invalid"


class TestWeeksListing:
    """GET /weeks lists every week, free or not."""

    def test_lists_booked_and_free_weeks(self, client):
        response = client.get("/weeks", params={"start": "2026-07-01", "end": "2026-07-15"})
        assert response.status_code == 200
        weeks = response.json()
        assert [(w["start"], w["booked"]) for w in weeks] == [
            ("2026-06-27", False),
            ("2026-07-04", True),
            ("2026-07-11", False),
        ]
        assert weeks[0]["price"] is None

    def test_rejects_huge_window(self, client):
        response = client.get("/weeks", params={"start": "2026-01-01", "end": "2028-01-01"})
        assert response.status_code == 400

    def test_calendar_failure(self, client):
        app.dependency_overrides[get_booking_loader] = lambda: failing_loader
        response = client.get("/weeks", params={"start": "2026-07-01", "end": "2026-07-15"})
        assert response.status_code == 500
