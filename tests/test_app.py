"""Tests for the HTTP endpoints."""

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from tablebooking.app import create_app
from tablebooking.booking_readers import BookingReader, InMemoryBookingReader
from tablebooking.config import Settings
from tablebooking.errors import BookingStoreError
from tablebooking.models import Booking

BANGKOK = ZoneInfo("Asia/Bangkok")


class FakeSettings:
    def __init__(self, admin_api_key="", debug=False):
        self.admin_api_key = admin_api_key
        self.debug = debug


class FailingReader(BookingReader):
    async def query_bookings(self, flt):
        raise BookingStoreError("store down")


class StaticReader(BookingReader):
    def __init__(self, bookings):
        self.bookings = bookings

    async def query_bookings(self, flt):
        return list(self.bookings)


@pytest.fixture
def client():
    reader = InMemoryBookingReader(
        [
            Booking(table_id=2, booking_time="2024-01-01T13:00:00+07:00",
                    booking_type="online", status="confirmed"),
            Booking(table_id=3, booking_time="2024-01-01T13:00:00+07:00",
                    booking_type="online", status="cancelled"),
        ],
        tz=BANGKOK,
    )
    return TestClient(create_app(reader=reader))


# ── Health ─────────────────────────────────────────────────────────


class TestHealth:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"


# ── Availability ───────────────────────────────────────────────────


class TestAvailabilityEndpoint:
    def test_occupied_tables(self, client):
        resp = client.get("/api/availability", params={"date": "2024-01-01", "time": "14:00"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["ids"] == [2]
        assert body["statuses"] == {"2": {"type": "online"}}
        assert body["error"] is None

    def test_back_to_back_slot_free(self, client):
        resp = client.get("/api/availability", params={"date": "2024-01-01", "time": "15:00"})
        assert resp.json()["ids"] == []

    def test_custom_duration(self, client):
        resp = client.get(
            "/api/availability",
            params={"date": "2024-01-01", "time": "11:00", "duration_hours": 3},
        )
        assert resp.json()["ids"] == [2]

    def test_missing_params_empty(self, client):
        resp = client.get("/api/availability", params={"time": "14:00"})
        assert resp.status_code == 200
        assert resp.json() == {"ids": [], "statuses": {}, "error": None}

    def test_invalid_date(self, client):
        resp = client.get("/api/availability", params={"date": "tomorrow", "time": "14:00"})
        assert resp.status_code == 400

    @pytest.mark.parametrize("bad_time", ["7pm", "25:00", "noon"])
    def test_invalid_time(self, client, bad_time):
        resp = client.get("/api/availability", params={"date": "2024-01-01", "time": bad_time})
        assert resp.status_code == 400
        assert "Invalid time" in resp.json()["detail"]

    def test_non_positive_duration_rejected(self, client):
        resp = client.get(
            "/api/availability",
            params={"date": "2024-01-01", "time": "14:00", "duration_hours": 0},
        )
        assert resp.status_code == 422

    def test_store_failure_is_reported_not_raised(self):
        client = TestClient(create_app(reader=FailingReader()))
        resp = client.get("/api/availability", params={"date": "2024-01-01", "time": "14:00"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["ids"] == []
        assert body["error"] == "store down"

    def test_unconfigured_store(self, monkeypatch):
        monkeypatch.setattr(
            "tablebooking.app.settings",
            Settings(_env_file=None, supabase_url="", supabase_key="", debug=False),
        )
        client = TestClient(create_app())
        resp = client.get("/api/availability", params={"date": "2024-01-01", "time": "14:00"})
        assert resp.status_code == 503


# ── Floor status ───────────────────────────────────────────────────


class TestFloorStatusEndpoint:
    def _seated_now(self) -> Booking:
        start = datetime.now(tz=BANGKOK) - timedelta(minutes=30)
        return Booking(
            table_id="T1",
            booking_time=start.isoformat(),
            booking_type="walk_in",
            status="seated",
        )

    def test_requires_token(self, monkeypatch):
        monkeypatch.setattr("tablebooking.auth.settings", FakeSettings(admin_api_key="secret"))
        client = TestClient(create_app(reader=StaticReader([])))
        assert client.get("/api/tables/status").status_code == 401

    def test_returns_statuses(self, monkeypatch):
        monkeypatch.setattr("tablebooking.auth.settings", FakeSettings(admin_api_key="secret"))
        client = TestClient(create_app(reader=StaticReader([self._seated_now()])))

        resp = client.get("/api/tables/status", headers={"Authorization": "Bearer secret"})

        assert resp.status_code == 200
        body = resp.json()
        assert body["T1"]["status"] == "occupied"
        assert body["T1"]["type"] == "walk_in"

    def test_store_failure_is_502(self, monkeypatch):
        monkeypatch.setattr("tablebooking.auth.settings", FakeSettings(debug=True))
        client = TestClient(create_app(reader=FailingReader()))
        assert client.get("/api/tables/status").status_code == 502
