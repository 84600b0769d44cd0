"""Tests for the HTTP API.

These tests verify that:
1. Users and sleep logs can be created, read, replaced and deleted
2. Storage and validation failures map onto the documented statuses
3. Statistics are served over the trailing window
"""

from unittest.mock import patch
from uuid import uuid4

import pytest

from sleep_tracker.api.dependencies import ServiceManager
from sleep_tracker.api.gateway import status_code_for
from sleep_tracker.common.exceptions import (
    ConstraintViolationError,
    DuplicateKeyError,
    ReferentialIntegrityError,
    StorageError,
    ValidationError,
)


USERS = "/api/v1/users"


@pytest.fixture
def user(client) -> dict:
    """A UTC user created through the API."""
    response = client.post(USERS, json={"name": "jane_doe", "time_zone": "UTC"})
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def night() -> dict:
    """A valid sleep log request body."""
    return {
        "bed_time": "2024-01-01T23:30:00Z",
        "wake_time": "2024-01-02T07:30:00Z",
        "mood": "GOOD",
    }


def logs_url(user_id) -> str:
    return f"{USERS}/{user_id}/sleep-logs"


class TestStatusMapping:
    """Error taxonomy to HTTP status."""

    @pytest.mark.parametrize(
        "error, status_code",
        [
            (DuplicateKeyError("dup"), 409),
            (ReferentialIntegrityError("missing"), 404),
            (ConstraintViolationError("check"), 400),
            (StorageError("down"), 500),
            (ValidationError("bad"), 400),
        ],
    )
    def test_status_code_for(self, error, status_code):
        assert status_code_for(error) == status_code


class TestServiceEndpoints:
    """Tests for /health, /ready and /api/v1/ping."""

    def test_health_check_returns_healthy(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_ready_before_initialization(self, client):
        with patch.object(ServiceManager, "_initialized", False):
            response = client.get("/ready")

        assert response.status_code == 503

    def test_ready_after_initialization(self, client):
        with patch.object(ServiceManager, "_initialized", True):
            response = client.get("/ready")

        assert response.status_code == 200
        assert response.json()["status"] == "ready"

    def test_ping_returns_today(self, client):
        response = client.get("/api/v1/ping")

        assert response.status_code == 200
        assert response.json() == {"date": "2024-03-15"}

    def test_request_id_header(self, client):
        response = client.get("/health")

        assert response.headers["X-Request-ID"].startswith("req_")


class TestUserEndpoints:
    """Tests for /api/v1/users."""

    def test_create_user(self, client):
        response = client.post(USERS, json={"name": "jane_doe", "time_zone": "Europe/Warsaw"})

        assert response.status_code == 201
        body = response.json()
        assert body["name"] == "jane_doe"
        assert body["time_zone"] == "Europe/Warsaw"
        assert "id" in body

    def test_time_zone_defaults_to_utc(self, client):
        response = client.post(USERS, json={"name": "jane"})

        assert response.json()["time_zone"] == "UTC"

    def test_name_is_lowercased(self, client):
        response = client.post(USERS, json={"name": "Jane_Doe"})

        assert response.json()["name"] == "jane_doe"

    def test_duplicate_name_conflicts(self, client, user):
        response = client.post(USERS, json={"name": "JANE_DOE"})

        assert response.status_code == 409
        assert response.json()["error"] == "duplicate_key"

    @pytest.mark.parametrize(
        "body",
        [
            {"name": "has space"},
            {"name": "x" * 51},
            {"name": ""},
            {"name": "jane", "time_zone": "Nowhere/Special"},
            {},
        ],
    )
    def test_invalid_body_rejected(self, client, body):
        response = client.post(USERS, json=body)

        assert response.status_code == 422

    def test_list_users_with_total_count(self, client):
        for name in ("a", "b", "c"):
            client.post(USERS, json={"name": name})

        response = client.get(USERS, params={"page": 1, "page-size": 2})

        assert response.status_code == 200
        assert len(response.json()) == 2
        assert response.headers["X-Total-Count"] == "3"

    @pytest.mark.parametrize(
        "params",
        [{"page": 0}, {"page-size": 0}, {"page-size": 101}, {"page": 10**18, "page-size": 100}],
    )
    def test_list_users_bad_pagination(self, client, params):
        response = client.get(USERS, params=params)

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    def test_get_user(self, client, user):
        response = client.get(f"{USERS}/{user['id']}")

        assert response.status_code == 200
        assert response.json() == user

    def test_get_unknown_user(self, client):
        response = client.get(f"{USERS}/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_get_user_malformed_id(self, client):
        response = client.get(f"{USERS}/not-a-uuid")

        assert response.status_code == 422

    def test_update_user(self, client, user):
        response = client.put(
            f"{USERS}/{user['id']}", json={"name": "janet", "time_zone": "Asia/Tokyo"}
        )

        assert response.status_code == 200
        assert response.json()["name"] == "janet"
        assert response.json()["time_zone"] == "Asia/Tokyo"

    def test_update_unknown_user(self, client):
        response = client.put(f"{USERS}/{uuid4()}", json={"name": "janet"})

        assert response.status_code == 404


class TestSleepLogEndpoints:
    """Tests for /api/v1/users/{user_id}/sleep-logs."""

    def test_create_sleep_log(self, client, user, night):
        response = client.post(logs_url(user["id"]), json=night)

        assert response.status_code == 201
        body = response.json()
        assert body["user_id"] == user["id"]
        assert body["date"] == "2024-01-02"
        assert body["mood"] == "GOOD"
        assert body["duration"] == "PT8H"

    def test_unknown_user(self, client, night):
        response = client.post(logs_url(uuid4()), json=night)

        assert response.status_code == 404
        assert response.json()["error"] == "referential_integrity"

    def test_same_date_twice_conflicts(self, client, user, night):
        client.post(logs_url(user["id"]), json=night)

        response = client.post(
            logs_url(user["id"]),
            json={
                "bed_time": "2024-01-02T13:00:00Z",
                "wake_time": "2024-01-02T14:00:00Z",
                "mood": "OK",
            },
        )

        assert response.status_code == 409

    @pytest.mark.parametrize(
        "body",
        [
            {"bed_time": "2024-01-02T07:30:00Z", "wake_time": "2024-01-02T07:30:00Z", "mood": "OK"},
            {"bed_time": "2024-01-02T08:00:00Z", "wake_time": "2024-01-02T07:30:00Z", "mood": "OK"},
            {"bed_time": "2024-01-01T23:30:00Z", "wake_time": "2024-01-02T07:30:00Z", "mood": "MEH"},
            {"bed_time": "2024-01-01T23:30:00Z", "mood": "OK"},
        ],
    )
    def test_invalid_body_rejected(self, client, user, body):
        response = client.post(logs_url(user["id"]), json=body)

        assert response.status_code == 422

    def test_wake_after_service_clock_rejected(self, client, user):
        """The pinned clock reads 2024-03-15T12:00Z; one minute later is the future."""
        response = client.post(
            logs_url(user["id"]),
            json={
                "bed_time": "2024-03-15T04:00:00Z",
                "wake_time": "2024-03-15T12:01:00Z",
                "mood": "OK",
            },
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
        assert client.get(logs_url(user["id"])).json() == []

    def test_wake_at_service_clock_accepted(self, client, user):
        response = client.post(
            logs_url(user["id"]),
            json={
                "bed_time": "2024-03-15T04:00:00Z",
                "wake_time": "2024-03-15T12:00:00Z",
                "mood": "OK",
            },
        )

        assert response.status_code == 201

    def test_replace_with_future_wake_rejected(self, client, user, night):
        created = client.post(logs_url(user["id"]), json=night).json()

        response = client.put(
            f"{logs_url(user['id'])}/{created['id']}",
            json={
                "bed_time": "2024-03-15T23:00:00Z",
                "wake_time": "2024-03-16T07:00:00Z",
                "mood": "OK",
            },
        )

        assert response.status_code == 400
        assert client.get(f"{logs_url(user['id'])}/{created['id']}").json() == created

    def test_list_most_recent_first(self, client, user, night):
        first = client.post(logs_url(user["id"]), json=night).json()
        second = client.post(
            logs_url(user["id"]),
            json={
                "bed_time": "2024-01-02T23:00:00Z",
                "wake_time": "2024-01-03T06:00:00Z",
                "mood": "BAD",
            },
        ).json()

        response = client.get(logs_url(user["id"]))

        assert response.status_code == 200
        assert [log["id"] for log in response.json()] == [second["id"], first["id"]]

        paged = client.get(logs_url(user["id"]), params={"page": 2, "page-size": 1})
        assert [log["id"] for log in paged.json()] == [first["id"]]

    def test_latest(self, client, user, night):
        created = client.post(logs_url(user["id"]), json=night).json()

        response = client.get(f"{logs_url(user['id'])}/latest")

        assert response.status_code == 200
        assert response.json()["id"] == created["id"]

    def test_latest_without_logs(self, client, user):
        response = client.get(f"{logs_url(user['id'])}/latest")

        assert response.status_code == 404

    def test_get_replace_delete(self, client, user, night):
        created = client.post(logs_url(user["id"]), json=night).json()
        url = f"{logs_url(user['id'])}/{created['id']}"

        assert client.get(url).json() == created

        replaced = client.put(
            url,
            json={
                "bed_time": "2024-01-05T22:00:00Z",
                "wake_time": "2024-01-06T06:00:00Z",
                "mood": "BAD",
            },
        )
        assert replaced.status_code == 200
        assert replaced.json()["date"] == "2024-01-06"
        assert replaced.json()["mood"] == "BAD"

        deleted = client.delete(url)
        assert deleted.status_code == 200
        assert deleted.json() == replaced.json()
        assert client.get(url).status_code == 404

    def test_other_users_log_is_not_found(self, client, user, night):
        created = client.post(logs_url(user["id"]), json=night).json()
        other = client.post(USERS, json={"name": "john"}).json()

        response = client.get(f"{logs_url(other['id'])}/{created['id']}")

        assert response.status_code == 404

    def test_delete_unknown(self, client, user):
        response = client.delete(f"{logs_url(user['id'])}/{uuid4()}")

        assert response.status_code == 404


class TestStatsEndpoint:
    """Tests for /api/v1/users/{user_id}/sleep-logs/stats."""

    def test_stats(self, client, user):
        for bed, wake, mood in (
            ("2024-03-10T23:30:00Z", "2024-03-11T07:00:00Z", "GOOD"),
            ("2024-03-12T00:30:00Z", "2024-03-12T08:00:00Z", "BAD"),
        ):
            client.post(
                logs_url(user["id"]),
                json={"bed_time": bed, "wake_time": wake, "mood": mood},
            )

        response = client.get(f"{logs_url(user['id'])}/stats", params={"days-back": 7})

        assert response.status_code == 200
        body = response.json()
        assert body["from_date"] == "2024-03-08"
        assert body["to_date"] == "2024-03-15"
        assert body["average_bed_time"] == "00:00:00"
        assert body["average_wake_time"] == "07:30:00"
        assert body["average_duration"] == "PT7H30M"
        assert body["mood_frequencies"] == {"bad": 1, "ok": 0, "good": 1}

    def test_default_window(self, client, user):
        client.post(
            logs_url(user["id"]),
            json={
                "bed_time": "2024-02-20T23:00:00Z",
                "wake_time": "2024-02-21T07:00:00Z",
                "mood": "OK",
            },
        )

        response = client.get(f"{logs_url(user['id'])}/stats")

        assert response.status_code == 200
        assert response.json()["from_date"] == "2024-02-14"

    def test_no_logs_in_window(self, client, user, night):
        client.post(logs_url(user["id"]), json=night)

        response = client.get(f"{logs_url(user['id'])}/stats", params={"days-back": 7})

        assert response.status_code == 404

    def test_unknown_user(self, client):
        response = client.get(f"{logs_url(uuid4())}/stats")

        assert response.status_code == 404

    @pytest.mark.parametrize("days_back", [0, -1])
    def test_non_positive_days_back(self, client, user, days_back):
        response = client.get(f"{logs_url(user['id'])}/stats", params={"days-back": days_back})

        assert response.status_code == 422

    def test_days_back_beyond_calendar(self, client, user, night):
        """A window longer than the calendar covers every log."""
        client.post(logs_url(user["id"]), json=night)

        response = client.get(
            f"{logs_url(user['id'])}/stats", params={"days-back": 1_000_000}
        )

        assert response.status_code == 200
        assert response.json()["from_date"] == "0001-01-01"
        assert response.json()["mood_frequencies"]["good"] == 1
