"""
API tests for the workout and health routes.

Dependencies are overridden with the in-memory store and mock notifier,
so requests run the real service without Snowflake or SMTP.
"""

import pytest
from fastapi.testclient import TestClient

from workout_scheduler.api.dependencies import get_email_notifier, get_workout_store
from workout_scheduler.config.settings import Settings, get_settings
from workout_scheduler.core.workouts.errors import PersistenceError
from workout_scheduler.infrastructure.mail.client import MockEmailNotifier
from workout_scheduler.infrastructure.memory.workouts import InMemoryWorkoutStore
from workout_scheduler.main import create_app


class DownStore(InMemoryWorkoutStore):
    def fetch_workouts(self):
        raise PersistenceError("warehouse suspended")

    def ping(self):
        raise PersistenceError("warehouse suspended")


@pytest.fixture
def store() -> InMemoryWorkoutStore:
    return InMemoryWorkoutStore()


@pytest.fixture
def notifier() -> MockEmailNotifier:
    return MockEmailNotifier()


@pytest.fixture
def settings() -> Settings:
    return Settings(snowflake_mock_mode=True, email_mock_mode=True)


@pytest.fixture
def unconfigured_snowflake() -> Settings:
    return Settings(
        _env_file=None,
        snowflake_mock_mode=False,
        email_mock_mode=True,
        snowflake_account="acct",
        snowflake_user="u",
        snowflake_password="",
        snowflake_private_key_path=None,
    )


@pytest.fixture
def client(store, notifier, settings) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_workout_store] = lambda: store
    app.dependency_overrides[get_email_notifier] = lambda: notifier
    app.dependency_overrides[get_settings] = lambda: settings
    return TestClient(app)


def request_workout(client, athlete="ana@example.com", coach="carl@example.com"):
    return client.post("/api/v1/workouts", json={
        "athlete": athlete,
        "coach": coach,
        "scheduled": "2026-11-02T07:30:00",
    })


class TestWorkoutRoutes:

    def test_request_returns_created_workout(self, client, notifier):
        response = request_workout(client)

        assert response.status_code == 201
        body = response.json()
        assert body["id"] == 1
        assert body["status"] == "requested"
        assert body["scheduled"] == "2026-11-02T07:30:00"
        assert notifier.sent[0].recipients == ("carl@example.com",)

    def test_request_requires_parties(self, client):
        response = client.post("/api/v1/workouts", json={"athlete": "", "coach": "c"})

        assert response.status_code == 422

    def test_list_and_filter(self, client):
        request_workout(client, athlete="ana", coach="carl")
        request_workout(client, athlete="ben", coach="carl")

        assert len(client.get("/api/v1/workouts").json()) == 2
        assert [w["athlete"] for w in client.get("/api/v1/workouts/athletes/ben").json()] == ["ben"]
        assert len(client.get("/api/v1/workouts/coaches/carl").json()) == 2
        assert client.get("/api/v1/workouts/coaches/nobody").json() == []

    def test_update_returns_workout(self, client):
        request_workout(client)

        response = client.put("/api/v1/workouts/1", json={
            "scheduled": "2026-11-03T18:00:00",
            "description": "Tempo",
        })

        assert response.status_code == 200
        assert response.json()["description"] == "Tempo"
        assert response.json()["athlete"] == "ana@example.com"

    def test_approve_then_complete(self, client, notifier):
        request_workout(client)

        assert client.post("/api/v1/workouts/1/approve").status_code == 204
        assert client.post("/api/v1/workouts/1/complete").status_code == 204
        assert client.get("/api/v1/workouts").json()[0]["status"] == "completed"
        assert [e.template_id for e in notifier.sent] == ["workoutRequested", "workoutApproved"]

    def test_unknown_workout_is_404(self, client):
        assert client.post("/api/v1/workouts/9/approve").status_code == 404
        assert client.put("/api/v1/workouts/9", json={}).status_code == 404

    def test_illegal_transition_is_409(self, client):
        request_workout(client)

        assert client.post("/api/v1/workouts/1/complete").status_code == 409

    def test_failed_email_is_502_but_workout_exists(self, client, notifier, store):
        notifier.fail_next()

        response = request_workout(client)

        assert response.status_code == 502
        assert "may already be saved" in response.json()["detail"]
        assert len(store.fetch_workouts()) == 1

    def test_store_failure_is_503(self, notifier, settings):
        app = create_app()
        app.dependency_overrides[get_workout_store] = lambda: DownStore()
        app.dependency_overrides[get_email_notifier] = lambda: notifier
        app.dependency_overrides[get_settings] = lambda: settings

        response = TestClient(app).get("/api/v1/workouts")

        assert response.status_code == 503

    def test_unreachable_snowflake_is_503(self, notifier, unconfigured_snowflake):
        """The connection fails while the store dependency is built."""
        app = create_app()
        app.dependency_overrides[get_email_notifier] = lambda: notifier
        app.dependency_overrides[get_settings] = lambda: unconfigured_snowflake

        response = TestClient(app).get("/api/v1/workouts")

        assert response.status_code == 503
        assert "Workout store error" in response.json()["detail"]


class TestHealthRoutes:

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["details"]["mock_mode"] == {"snowflake": True, "email": True}

    def test_ready_in_mock_mode(self, client):
        response = client.get("/health/ready")

        assert response.status_code == 200
        assert response.json()["status"] == "ready"

    def test_not_ready_when_store_down(self, notifier, settings):
        app = create_app()
        app.dependency_overrides[get_workout_store] = lambda: DownStore()
        app.dependency_overrides[get_settings] = lambda: settings

        response = TestClient(app).get("/health/ready")

        assert response.status_code == 503
        assert response.json()["status"] == "not_ready"

    def test_not_ready_when_snowflake_unreachable(self, unconfigured_snowflake):
        app = create_app()
        app.dependency_overrides[get_settings] = lambda: unconfigured_snowflake

        response = TestClient(app).get("/health/ready")

        assert response.status_code == 503
