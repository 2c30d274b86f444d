"""End-to-end checks of the ActionResult envelope through the HTTP API."""

import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from app.db.session import get_db
from app.main import app
from app.models.coach_client import CoachClientRelationship
from app.schemas.booking import AvailabilitySlot
from app.services.booking_service import BookingService
from app.services.cycle_service import CycleService

API = "/api/v1"
MONDAY = datetime.date(2030, 1, 7)


@pytest.fixture
def api(session):
    def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


def _register(api, email, is_coach=False) -> dict:
    response = api.post(f"{API}/auth/register", json={ "email": email, "password": "s3cret-pass",
                                                       "is_coach": is_coach })
    assert response.status_code == 201
    return response.json()["data"]


def _auth(api, email) -> dict:
    response = api.post(f"{API}/auth/token", json={ "email": email, "password": "s3cret-pass" })
    assert response.status_code == 200
    return { "Authorization": f"Bearer {response.json()['data']['access_token']}" }


# ======================================================================
# Authentication
# ======================================================================


class TestAuth:
    def test_register_and_me(self, api):
        _register(api, "trainee@example.com")
        response = api.get(f"{API}/auth/me", headers=_auth(api, "trainee@example.com"))
        body = response.json()
        assert body["success"] is True
        assert body["data"]["email"] == "trainee@example.com"
        assert body["data"]["is_coach"] is False

    def test_duplicate_email(self, api):
        _register(api, "trainee@example.com")
        response = api.post(f"{API}/auth/register", json={ "email": "trainee@example.com",
                                                           "password": "s3cret-pass" })
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "email_taken"

    def test_wrong_password(self, api):
        _register(api, "trainee@example.com")
        response = api.post(f"{API}/auth/token", json={ "email": "trainee@example.com", "password": "nope-nope" })
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert response.json()["success"] is False

    def test_oauth2_form_login(self, api):
        _register(api, "trainee@example.com")
        response = api.post(f"{API}/auth/login", data={ "username": "trainee@example.com",
                                                        "password": "s3cret-pass" })
        assert response.status_code == 200
        assert response.json()["token_type"] == "bearer"


# ======================================================================
# Failed results
# ======================================================================


class TestFailedResults:
    def test_advance_without_split_is_a_normal_result(self, api):
        _register(api, "trainee@example.com")
        response = api.post(f"{API}/cycle/advance", headers=_auth(api, "trainee@example.com"))
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is False
        assert body["data"] is None
        assert body["error"]["code"] == "no_active_split"

    def test_nothing_to_undo(self, api):
        _register(api, "trainee@example.com")
        response = api.post(f"{API}/splits/modifications/undo", headers=_auth(api, "trainee@example.com"))
        assert response.status_code == 200
        assert response.json()["error"]["code"] == "nothing_to_undo"

    def test_coach_only_endpoint(self, api):
        _register(api, "trainee@example.com")
        response = api.put(f"{API}/bookings/availability", json=[], headers=_auth(api, "trainee@example.com"))
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "not_authorized"


class TestErrorEnvelope:
    def test_invalid_body_is_a_failed_result(self, api):
        _register(api, "coach@example.com", is_coach=True)
        response = api.post(f"{API}/bookings/recurring/some-series/cancel", json={ "scope": "single" },
                            headers=_auth(api, "coach@example.com"))
        assert response.status_code == 422
        body = response.json()
        assert body["success"] is False
        assert body["data"] is None
        assert body["error"]["code"] == "invalid_request"
        assert body["error"]["details"]["errors"][0]["loc"][0] == "body"

    def test_reversed_preview_times(self, api):
        coach = _register(api, "coach@example.com", is_coach=True)
        payload = { "coach_id": coach["id"], "dates": [MONDAY.isoformat()], "start_time": "10:00:00",
                    "end_time": "09:00:00" }
        response = api.post(f"{API}/bookings/recurring/availability", json=payload,
                            headers=_auth(api, "coach@example.com"))
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "invalid_request"

    def test_storage_error(self, api, monkeypatch):
        _register(api, "trainee@example.com")
        headers = _auth(api, "trainee@example.com")

        def broken(self, user_id):
            raise OperationalError("SELECT 1", {}, Exception("database is gone"))

        monkeypatch.setattr(CycleService, "get_next_workout_preview", broken)
        response = api.get(f"{API}/cycle/next", headers=headers)
        assert response.status_code == 500
        assert response.json()["success"] is False
        assert response.json()["error"]["code"] == "storage_error"

    def test_unexpected_error(self, session, monkeypatch):
        def override_get_db():
            yield session

        def broken(self, user_id):
            raise RuntimeError("boom")

        app.dependency_overrides[get_db] = override_get_db
        try:
            with TestClient(app, raise_server_exceptions=False) as client:
                _register(client, "trainee@example.com")
                headers = _auth(client, "trainee@example.com")
                monkeypatch.setattr(CycleService, "get_next_workout_preview", broken)
                response = client.get(f"{API}/cycle/next", headers=headers)
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "internal_error"


# ======================================================================
# Bookings
# ======================================================================


class TestRecurringBookings:
    @pytest.fixture
    def parties(self, api, session):
        coach = _register(api, "coach@example.com", is_coach=True)
        client = _register(api, "client@example.com")
        session.add(CoachClientRelationship(coach_id=coach["id"], client_id=client["id"]))
        session.commit()
        BookingService(session).set_availability(coach["id"], [
            AvailabilitySlot(date=MONDAY + datetime.timedelta(days=i), start_time=datetime.time(8, 0),
                             end_time=datetime.time(12, 0)) for i in (0, 2, 7)])
        return coach, client

    def test_series_reports_skipped_dates_as_warnings(self, api, parties):
        coach, client = parties
        payload = {
            "booking": { "coach_id": coach["id"], "client_id": client["id"], "scheduled_date": MONDAY.isoformat(),
                         "start_time": "09:00:00", "end_time": "10:00:00" },
            "pattern": { "frequency": "weekly", "days_of_week": [1, 3], "end_type": "count", "end_value": 4 },
        }
        response = api.post(f"{API}/bookings/recurring", json=payload, headers=_auth(api, "client@example.com"))

        assert response.status_code == 201
        body = response.json()
        assert [b["occurrence_index"] for b in body["data"]["created"]] == [0, 1, 2]
        assert body["warnings"] == ["2030-01-16: Coach not available"]

        series_id = body["data"]["series_id"]
        cancel = api.post(f"{API}/bookings/recurring/{series_id}/cancel", json={ "scope": "all" },
                          headers=_auth(api, "coach@example.com"))
        assert cancel.json()["data"] == { "cancelled": 3 }

    def test_outsider_cannot_book(self, api, parties):
        coach, _ = parties
        outsider = _register(api, "outsider@example.com")
        payload = { "coach_id": coach["id"], "client_id": outsider["id"], "scheduled_date": MONDAY.isoformat(),
                    "start_time": "09:00:00", "end_time": "10:00:00" }
        response = api.post(f"{API}/bookings", json=payload, headers=_auth(api, "outsider@example.com"))
        assert response.status_code == 403

    def test_reschedule_cancel_and_backfill(self, api, parties):
        coach, client = parties
        client_headers = _auth(api, "client@example.com")
        coach_headers = _auth(api, "coach@example.com")
        payload = { "coach_id": coach["id"], "client_id": client["id"], "scheduled_date": MONDAY.isoformat(),
                    "start_time": "09:00:00", "end_time": "10:00:00" }
        booking_id = api.post(f"{API}/bookings", json=payload, headers=client_headers).json()["data"]["id"]

        moved = api.post(f"{API}/bookings/{booking_id}/reschedule", headers=client_headers,
                         json={ "scheduled_date": MONDAY.isoformat(), "start_time": "10:00:00",
                                "end_time": "11:00:00" })
        assert moved.json()["data"]["start_time"] == "10:00:00"
        mine = api.get(f"{API}/bookings/mine", headers=client_headers).json()["data"]
        assert [b["id"] for b in mine] == [booking_id]

        entry = api.post(f"{API}/waitlist", json={ "coach_id": coach["id"] }, headers=client_headers).json()["data"]
        not_cancelled = api.get(f"{API}/waitlist/candidates/booking/{booking_id}", headers=coach_headers)
        assert not_cancelled.status_code == 400
        assert not_cancelled.json()["error"]["code"] == "booking_not_cancelled"

        api.post(f"{API}/bookings/{booking_id}/cancel", json={ }, headers=coach_headers)
        candidates = api.get(f"{API}/waitlist/candidates/booking/{booking_id}", headers=coach_headers)
        assert [c["entry_id"] for c in candidates.json()["data"]] == [entry["id"]]

    def test_clear_availability(self, api, parties):
        response = api.delete(f"{API}/bookings/availability",
                              params={ "start": MONDAY.isoformat(),
                                       "end": (MONDAY + datetime.timedelta(days=2)).isoformat() },
                              headers=_auth(api, "coach@example.com"))
        assert response.json()["data"] == { "removed": 2 }
